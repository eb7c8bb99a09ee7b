"""Unit tests for LocalStorage per-type tables."""

from dataclasses import dataclass

import pytest

from slotecs import EntityNotFoundError, Query
from slotecs.storage import MISSING
from slotecs.storage.local import LocalStorage


@dataclass(slots=True)
class Task:
    name: str


@dataclass(slots=True)
class Priority:
    level: int


@pytest.fixture
def storage() -> LocalStorage:
    return LocalStorage()


def test_set_and_get_returns_same_instance(storage):
    entity = storage.create_entity()
    task = Task("one")

    storage.set_component(entity, task)

    assert storage.get_component(entity, Task) is task
    assert storage.has_component(entity, Task)
    assert storage.get_component_types(entity) == frozenset({Task})


def test_tables_created_lazily(storage):
    assert storage._tables == {}

    entity = storage.create_entity()
    storage.set_component(entity, Priority(1))

    assert set(storage._tables) == {Priority}
    assert storage._tables[Priority] == {entity.index: Priority(1)}


def test_set_component_last_write_wins(storage):
    entity = storage.create_entity()
    storage.set_component(entity, Priority(1))
    storage.set_component(entity, Priority(2))

    assert storage.get_component(entity, Priority) == Priority(2)
    assert storage.count(Query(Priority)) == 1


def test_set_component_on_dead_entity_raises(storage):
    entity = storage.create_entity()
    storage.destroy_entity(entity)

    with pytest.raises(EntityNotFoundError):
        storage.set_component(entity, Task("late"))


def test_remove_component_returns_value(storage):
    entity = storage.create_entity()
    storage.set_component(entity, Task("x"))

    assert storage.remove_component(entity, Task) == Task("x")
    assert storage.remove_component(entity, Task) is MISSING
    assert not storage.has_component(entity, Task)


def test_destroy_removes_components_from_every_table(storage):
    entity = storage.create_entity()
    other = storage.create_entity()
    storage.set_component(entity, Task("a"))
    storage.set_component(entity, Priority(1))
    storage.set_component(other, Task("b"))

    storage.destroy_entity(entity)

    assert storage._tables[Task] == {other.index: Task("b")}
    assert storage._tables[Priority] == {}
    assert storage.get_component(entity, Task) is MISSING


def test_destroy_dead_entity_raises(storage):
    entity = storage.create_entity()
    storage.destroy_entity(entity)

    with pytest.raises(EntityNotFoundError):
        storage.destroy_entity(entity)


def test_recycled_slot_starts_empty(storage):
    """CRITICAL: a reused index must not inherit components from its previous owner."""
    old = storage.create_entity()
    storage.set_component(old, Task("old"))
    storage.destroy_entity(old)

    new = storage.create_entity()
    assert new.index == old.index

    assert storage.get_component(new, Task) is MISSING
    assert storage.get_component(old, Task) is MISSING
    assert storage.get_component_types(new) == frozenset()


def test_stale_handle_cannot_read_new_owner(storage):
    old = storage.create_entity()
    storage.destroy_entity(old)
    new = storage.create_entity()
    storage.set_component(new, Task("new"))

    assert storage.get_component(old, Task) is MISSING
    assert not storage.has_component(old, Task)
    assert storage.remove_component(old, Task) is MISSING
    assert storage.get_component(new, Task) == Task("new")


def test_query_and_count(storage):
    a = storage.create_entity()
    b = storage.create_entity()
    storage.set_component(a, Task("a"))
    storage.set_component(a, Priority(1))
    storage.set_component(b, Task("b"))

    assert storage.query(Query(Task, Priority)) == [a]
    assert sorted(storage.query(Query(Task))) == [a, b]
    assert storage.count(Query(Task)) == 2
    assert storage.count(Query(Task).excluding(Priority)) == 1
    assert storage.count(Query()) == 2


def test_all_entities_and_count(storage):
    a = storage.create_entity()
    b = storage.create_entity()
    storage.destroy_entity(a)

    assert list(storage.all_entities()) == [b]
    assert storage.entity_count() == 1


def test_none_is_a_storable_component(storage):
    entity = storage.create_entity()
    storage.set_component(entity, None)

    assert storage.has_component(entity, type(None))
    assert storage.get_component(entity, type(None)) is None
    assert storage.remove_component(entity, type(None)) is None
    assert storage.remove_component(entity, type(None)) is MISSING
    assert not storage.has_component(entity, type(None))
