import numpy as np
import pytest

from sphys.constraint_manager import ConstraintManager
from sphys.constraints import DistanceConstraint, NormalConstraint
from sphys.rigid_body import RigidBody, RigidBodyState, dynamic_properties

DT = 0.016


def dynamic_body(position, velocity=(0.0, 0.0, 0.0)):
    state = RigidBodyState(
        position=np.array(position, dtype=float),
        linear_velocity=np.array(velocity, dtype=float),
    )
    return RigidBody(dynamic_properties(1.0, np.eye(3)), state)


def island_of(manager, body):
    matches = [island for island in manager.islands if island.has_rigid_body(body)]
    assert len(matches) <= 1
    return matches[0] if matches else None


def test_invalid_thread_count():
    with pytest.raises(ValueError):
        ConstraintManager(10, num_threads=0)


def test_shared_dynamic_body_shares_island():
    a, b, c = dynamic_body((0, 0, 0)), dynamic_body((1, 0, 0)), dynamic_body((2, 0, 0))
    manager = ConstraintManager(10)
    assert not manager.has_constraints()
    manager.add_constraint(DistanceConstraint((a, b)))
    manager.add_constraint(DistanceConstraint((b, c)))
    assert manager.has_constraints()
    assert island_of(manager, a) is island_of(manager, c)
    assert len(manager.islands) == 1


def test_bridging_constraint_merges_islands():
    a, b, c, d = (dynamic_body((float(i), 0, 0)) for i in range(4))
    manager = ConstraintManager(10)
    manager.add_constraint(DistanceConstraint((a, b)))
    manager.add_constraint(DistanceConstraint((c, d)))
    assert island_of(manager, a) is not island_of(manager, c)

    manager.add_constraint(DistanceConstraint((b, c)))
    assert island_of(manager, a) is island_of(manager, d)
    assert len(manager.islands) == 1


def test_static_body_does_not_join_islands():
    ground = RigidBody()
    a, b = dynamic_body((0, 1, 0)), dynamic_body((3, 1, 0))
    manager = ConstraintManager(10)
    manager.add_constraint(DistanceConstraint((a, ground)))
    manager.add_constraint(DistanceConstraint((ground, b)))
    assert island_of(manager, a) is not island_of(manager, b)


def test_remove_constraint_drops_empty_island():
    a, b = dynamic_body((0, 0, 0)), dynamic_body((1, 0, 0))
    constraint = DistanceConstraint((a, b))
    manager = ConstraintManager(10)
    manager.add_constraint(constraint)
    manager.remove_constraint(constraint)
    assert not manager.has_constraints()
    assert manager.islands == ()


def test_remove_rigid_body_keeps_unrelated_islands():
    a, b, c, d = (dynamic_body((float(i), 0, 0)) for i in range(4))
    manager = ConstraintManager(10)
    manager.add_constraint(DistanceConstraint((a, b)))
    manager.add_constraint(DistanceConstraint((c, d)))
    manager.remove_rigid_body(a)
    assert island_of(manager, a) is None
    assert island_of(manager, b) is None
    assert island_of(manager, c) is not None
    assert island_of(manager, c) is island_of(manager, d)


def test_properties_change_regroups_islands():
    hub = RigidBody()
    b, c = dynamic_body((2, 0, 0)), dynamic_body((-2, 0, 0))
    manager = ConstraintManager(10)
    manager.add_constraint(DistanceConstraint((hub, b)))
    manager.add_constraint(DistanceConstraint((hub, c)))
    assert island_of(manager, b) is not island_of(manager, c)

    hub.properties = dynamic_properties(1.0, np.eye(3))
    manager.update(DT)
    assert island_of(manager, b) is island_of(manager, c)


@pytest.mark.parametrize("threads", [1, 2, 3])
def test_update_solves_every_island(threads):
    pairs = [
        (dynamic_body((10.0 * i, 0, 0), (1, 0, 0)), dynamic_body((10.0 * i + 2, 0, 0), (-1, 0, 0)))
        for i in range(4)
    ]
    manager = ConstraintManager(10, num_threads=threads)
    for a, b in pairs:
        constraint = NormalConstraint((a, b), 0.2, 0.5, 0.05, 0.1, DT)
        constraint.normal = (1, 0, 0)
        manager.add_constraint(constraint)
    manager.update(DT)

    for a, b in pairs:
        assert a.state.linear_velocity[0] == pytest.approx(b.state.linear_velocity[0], abs=1e-9)
        total = a.state.linear_velocity[0] + b.state.linear_velocity[0]
        assert total == pytest.approx(0.0, abs=1e-9)