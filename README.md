# sphys

Building blocks for rigid body physics on top of numpy: bodies and their state,
forces, pairwise constraints, and constraint islands solved with a projected
Gauss-Seidel iteration. It also has a few collision helpers.

## Modules

- `sphys.rigid_body`
  - `RigidBody` holds `properties`, `state`, an optional `collider` and `collider_local_transforms`.
    Forces go in and out through `add_force` and `remove_force`, and are listed in `forces`.
    Status flags are read with `has_status` and written with `set_status`.
    `update_transforms()` rebuilds the world transforms matrix and the world inverse inertia
    tensor, and passes them on to the collider's `transforms`.
    `update_motion(bias, max_motion)` keeps a recency-weighted motion value.
  - The dataclasses `RigidBodyProperties` and `RigidBodyState`. Orientation is a `(w, x, y, z)` quaternion.
  - The enums `RigidBodyType` (`STATIC`, `DYNAMIC`) and `Status` (`SLEEPING`, `PROPERTIES_CHANGED`,
    `STATE_CHANGED`, `COLLIDER_CHANGED`, `FORCES_CHANGED`). Assigning properties, state or a
    collider sets the matching flag.
  - `dynamic_properties(mass, inertia_tensor)` builds the properties of a dynamic body. It stores
    the inverted mass and inertia tensor, and raises `ValueError` unless the mass is positive.
- `sphys.forces`: the abstract `Force` and its subclasses `DirectionalForce(value)`, `Gravity(gravity)`
  and `PunctualForce(value, point)`. `calculate(rigid_body)` returns a `(force, torque)` pair.
  `Gravity` applies `gravity / inverted_mass` along Y, and gives nothing to bodies of infinite mass.
- `sphys.constraints`: `ConstraintBounds`, the abstract `Constraint`, and three concrete constraints.
  - `DistanceConstraint(rigid_bodies, anchor_points=None)`.
  - `NormalConstraint(rigid_bodies, beta, restitution_factor, slop_penetration, slop_restitution, delta_time)`.
    Its lambda is bounded to `[0, inf)`.
  - `FrictionConstraint(rigid_bodies, friction_coefficient, gravity_acceleration)`.
    `calculate_constraint_bounds(contact_mass)` sets symmetric bounds.

  Every constraint has `bias()`, `jacobian()` (12 values), `constraint_bounds`, and an `updated`
  flag that `reset_updated_state()` clears.
- `sphys.constraint_island`: `ConstraintIsland(max_iterations)` groups constraints that share bodies.
  `update(delta_time)` solves the lambdas, keeping them warm-started between updates. It then
  updates the velocities and integrates the position and orientation of every dynamic body with
  non-zero inverted mass.
- `sphys.constraint_manager`: `ConstraintManager(max_iterations, num_threads=1)` keeps islands apart.
  Two constraints share an island when they share a non-static body, and islands merge as
  constraints connect them. `update(delta_time)` regroups the constraints of bodies whose
  properties changed, then solves every island, on a thread pool when `num_threads > 1`.
- `sphys.simplex`: `SupportPoint`, built from world and local positions or through
  `SupportPoint.from_colliders(collider1, collider2, direction)`. The tests
  `is_origin_inside(simplex, epsilon)` and `is_close(simplex, point, epsilon)` work on sequences
  of support points.
- `sphys.triangle_collider`: `TriangleCollider(vertices, transforms=None)`, with `aabb()`,
  `furthest_point_in_direction(direction)` returning `(world, local)`, and an `updated` flag.
- `sphys.graph`: `Graph` and `GraphVertex`, kept sorted by id. `Graph.find(vertex_id)` looks a
  vertex up, and `half_edge_collapse(vertex1, vertex2, graph)` merges one vertex into another.

## Install

```
pip install .
```

## Example

```python
import numpy as np
from sphys.rigid_body import RigidBody, RigidBodyState, dynamic_properties
from sphys.forces import Gravity
from sphys.constraints import DistanceConstraint
from sphys.constraint_manager import ConstraintManager

body = RigidBody(dynamic_properties(2.0, np.eye(3) * 0.8),
                 RigidBodyState(position=np.array([0.0, 1.0, 0.0])))
force, torque = Gravity(-9.8).calculate(body)   # force is (0, -19.6, 0), torque is zero

other = RigidBody(dynamic_properties(1.0, np.eye(3)))
link = DistanceConstraint((body, other), anchor_points=([0.5, 1.0, 0.0], [-1.0, 1.0, 0.0]))

manager = ConstraintManager(max_iterations=10)
manager.add_constraint(link)
manager.update(0.016)
```

## What it does not do

There is no world object or simulation loop. Forces are not summed into a body's
`force_sum`/`torque_sum` for you: fill those in yourself, for example from each force's
`calculate`. Bodies that belong to no constraint island are not integrated. There is no
collision detection pipeline, so nothing generates contacts or normal/friction constraints
automatically. The collision helpers here are building blocks only.

## Tests

```
pip install .[test]
pytest
```