from dataclasses import dataclass

from slotecs import Resource, System, World, system


@dataclass
class Position:
    x: float
    y: float


@dataclass
class Velocity:
    x: float
    y: float


class Clock(Resource):
    """Counts completed runs."""

    def __init__(self) -> None:
        self.ticks = 0

    def update(self) -> None:
        self.ticks += 1


class Movement(System):
    """Advance every moving entity by its velocity."""

    query = (Position, Velocity)

    def single_entity_step(self, entity):
        pos, vel = entity.get_components(Position, Velocity)
        pos.x += vel.x
        pos.y += vel.y


@system()
def report(entities_and_components) -> None:
    clock = entities_and_components.get_resource_required(Clock)
    for entity in entities_and_components.get_entities_with_component(Position):
        pos = entities_and_components.get_component(entity, Position)
        print(f"tick {clock.ticks}: {entity} at ({pos.x:.1f}, {pos.y:.1f})")


def main() -> None:
    world = World()
    ec = world.entities_and_components
    ec.add_resource(Clock())

    ship = ec.add_entity_with(Position(0, 0), Velocity(1, 1))
    turret = ec.add_entity_with(Position(2, 0))
    ec.set_parent(turret, ship)

    world.add_system(Movement())
    world.add_system(report)

    for _ in range(3):
        world.run()

    ec.print_tree()

    # Same system, stepped explicitly over a thread pool
    handle = world.add_system(Movement())
    stepped = world.step_parallel(handle, max_workers=2)
    print(f"Stepped {stepped} entities in parallel")


if __name__ == "__main__":
    main()
