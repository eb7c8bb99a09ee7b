"""Tests for entity identity and allocation.

Critical Invariants:
- Generation increments on recycle
- Stale handles are detected
- Double removal fails
- Overflowing slots are retired, never wrapped
"""

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from slotecs import Entity, EntityNotFoundError
from slotecs.storage.allocator import MAX_GENERATION, EntityAllocator


@pytest.fixture
def allocator():
    return EntityAllocator()


def test_first_entities_use_fresh_slots(allocator):
    first = allocator.allocate()
    second = allocator.allocate()

    assert first == Entity(index=0, generation=0)
    assert second == Entity(index=1, generation=0)
    assert len(allocator) == 2


def test_generation_increments_on_recycle(allocator):
    """CRITICAL: Recycled entity must have generation+1.

    Why: Prevents use-after-free bugs where stale handle references wrong entity.
    """
    entity1 = allocator.allocate()
    allocator.deallocate(entity1)

    entity2 = allocator.allocate()
    assert entity2.index == entity1.index, "Should reuse same index"
    assert entity2.generation == entity1.generation + 1


def test_stale_handle_detection(allocator):
    """CRITICAL: is_alive() returns False for stale handles."""
    entity_old = allocator.allocate()
    assert allocator.is_alive(entity_old)

    allocator.deallocate(entity_old)
    assert not allocator.is_alive(entity_old)

    entity_new = allocator.allocate()
    assert allocator.is_alive(entity_new)
    assert not allocator.is_alive(entity_old), "Old generation must stay stale after reuse"


def test_double_deallocate_raises(allocator):
    entity = allocator.allocate()
    allocator.deallocate(entity)

    with pytest.raises(EntityNotFoundError):
        allocator.deallocate(entity)


def test_unknown_index_is_not_alive(allocator):
    assert not allocator.is_alive(Entity(index=7, generation=0))
    assert not allocator.is_alive(Entity(index=-1, generation=0))


def test_live_entities_in_slot_order(allocator):
    a, b, c = allocator.allocate(), allocator.allocate(), allocator.allocate()
    allocator.deallocate(b)

    assert list(allocator.live_entities()) == [a, c]


def test_entity_at(allocator):
    entity = allocator.allocate()
    assert allocator.entity_at(entity.index) == entity

    allocator.deallocate(entity)
    with pytest.raises(LookupError):
        allocator.entity_at(entity.index)


def test_overflowing_slot_is_retired(caplog):
    """A slot at the generation ceiling is never handed out again."""
    allocator = EntityAllocator(max_generation=1)
    first = allocator.allocate()
    allocator.deallocate(first)
    second = allocator.allocate()
    assert second == Entity(index=0, generation=1)

    with caplog.at_level(logging.WARNING, logger="slotecs.storage.allocator"):
        allocator.deallocate(second)

    assert "retired" in caplog.text
    assert allocator.retired_count == 1

    third = allocator.allocate()
    assert third.index == 1, "Retired slot must not be reused"
    assert not allocator.is_alive(first)
    assert not allocator.is_alive(second)


def test_default_ceiling():
    assert MAX_GENERATION == 2**32 - 1


@given(st.lists(st.booleans(), min_size=1, max_size=60))
def test_live_set_tracks_operations(ops):
    """Property: is_alive holds exactly for allocated, not-yet-removed handles."""
    allocator = EntityAllocator()
    live: list[Entity] = []
    dead: list[Entity] = []

    for allocate in ops:
        if allocate or not live:
            live.append(allocator.allocate())
        else:
            entity = live.pop(0)
            allocator.deallocate(entity)
            dead.append(entity)

    assert all(allocator.is_alive(e) for e in live)
    assert not any(allocator.is_alive(e) for e in dead)
    assert len(allocator) == len(live)
    assert len({e.index for e in live}) == len(live)
