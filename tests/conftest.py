"""Shared test fixtures."""

from dataclasses import dataclass

import pytest

from slotecs import EntitiesAndComponents, World


@pytest.fixture
def world():
    """Fresh World instance."""
    return World()


@pytest.fixture
def ec():
    """Fresh EntitiesAndComponents instance."""
    return EntitiesAndComponents()


@dataclass(slots=True)
class FixturePosition:
    x: float
    y: float


@dataclass(slots=True)
class FixtureVelocity:
    x: float
    y: float


@pytest.fixture
def position_cls():
    return FixturePosition


@pytest.fixture
def velocity_cls():
    return FixtureVelocity
