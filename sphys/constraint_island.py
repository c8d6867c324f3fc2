"""Groups of constraints that share rigid bodies and are solved together."""

from __future__ import annotations

import numpy as np

from sphys.constraints import Constraint
from sphys.rigid_body import RigidBody, RigidBodyType, Status


def _clamp(value: float, low: float, high: float) -> float:
    if value < low:
        return low
    if high < value:
        return high
    return value


def _quaternion_product(p: np.ndarray, q: np.ndarray) -> np.ndarray:
    pw, px, py, pz = p
    qw, qx, qy, qz = q
    return np.array(
        [
            pw * qw - px * qx - py * qy - pz * qz,
            pw * qx + px * qw + py * qz - pz * qy,
            pw * qy - px * qz + py * qw + pz * qx,
            pw * qz + px * qy - py * qx + pz * qw,
        ]
    )


def _integrate_linear_velocity(rigid_body: RigidBody, delta_time: float) -> None:
    state = rigid_body.state
    velocity = np.asarray(state.linear_velocity, dtype=float)
    state.position = np.asarray(state.position, dtype=float) + delta_time * velocity


def _integrate_angular_velocity(rigid_body: RigidBody, delta_time: float) -> None:
    state = rigid_body.state
    orientation = np.asarray(state.orientation, dtype=float)
    spin = np.concatenate([[0.0], np.asarray(state.angular_velocity, dtype=float)])
    orientation = orientation + 0.5 * delta_time * _quaternion_product(spin, orientation)
    norm = np.linalg.norm(orientation)
    if norm > 0.0:
        orientation = orientation / norm
    state.orientation = orientation


class ConstraintIsland:
    """A set of constraints connected through their rigid bodies.

    The lambda multipliers found in one update are kept and used as the
    starting point of the next one.
    """

    def __init__(self, max_iterations: int) -> None:
        if max_iterations < 0:
            raise ValueError("the number of iterations can't be negative")
        self.max_iterations = int(max_iterations)
        self._constraints: list[Constraint] = []
        self._lambdas: list[float] = []
        self._rigid_bodies: list[RigidBody] = []
        self._solve_constraints = False

    @property
    def constraints(self) -> tuple[Constraint, ...]:
        return tuple(self._constraints)

    @property
    def rigid_bodies(self) -> tuple[RigidBody, ...]:
        return tuple(self._rigid_bodies)

    def _refresh_rigid_bodies(self) -> None:
        bodies: list[RigidBody] = []
        for constraint in self._constraints:
            for rigid_body in constraint.rigid_bodies:
                if not any(rigid_body is body for body in bodies):
                    bodies.append(rigid_body)
        self._rigid_bodies = bodies

    def add_constraint(self, constraint: Constraint) -> None:
        """Add the constraint and its rigid bodies to the island."""
        self._constraints.append(constraint)
        self._lambdas.append(0.0)
        self._refresh_rigid_bodies()
        self._solve_constraints = True

    def remove_constraint(self, constraint: Constraint) -> bool:
        """Remove the constraint, and the bodies only it used.

        Returns False if the constraint isn't in the island.
        """
        index = next(
            (i for i, current in enumerate(self._constraints) if current is constraint), None
        )
        if index is None:
            return False
        del self._constraints[index]
        del self._lambdas[index]
        self._refresh_rigid_bodies()
        self._solve_constraints = True
        return True

    def has_rigid_body(self, rigid_body: RigidBody) -> bool:
        return any(body is rigid_body for body in self._rigid_bodies)

    def has_constraints(self) -> bool:
        return bool(self._constraints)

    def remove_rigid_body(self, rigid_body: RigidBody) -> bool:
        """Remove the body with every constraint that uses it.

        Bodies left without constraints are removed too. Returns False if the
        body isn't in the island.
        """
        if not self.has_rigid_body(rigid_body):
            return False
        kept = [
            (constraint, value)
            for constraint, value in zip(self._constraints, self._lambdas)
            if not any(body is rigid_body for body in constraint.rigid_bodies)
        ]
        self._constraints = [constraint for constraint, _ in kept]
        self._lambdas = [value for _, value in kept]
        self._refresh_rigid_bodies()
        self._solve_constraints = True
        return True

    def merge(self, source: ConstraintIsland) -> None:
        """Move every constraint of ``source`` into this island, leaving it empty."""
        if source is self:
            return
        for constraint in reversed(source._constraints):
            self.add_constraint(constraint)
        source._constraints.clear()
        source._lambdas.clear()
        source._rigid_bodies.clear()

    def update(self, delta_time: float) -> None:
        """Solve the constraints and move the bodies if anything has changed."""
        solve = self._solve_constraints
        for constraint in self._constraints:
            solve = solve or constraint.updated
            constraint.reset_updated_state()
        if not solve:
            solve = any(not body.has_status(Status.SLEEPING) for body in self._rigid_bodies)
        if not solve:
            return

        self._solve_constraints = False
        if self._constraints:
            with np.errstate(divide="ignore", invalid="ignore"):
                self._solve(delta_time)

    def _solve(self, delta_time: float) -> None:
        bodies = self._rigid_bodies
        constraints = self._constraints
        positions = {id(body): i for i, body in enumerate(bodies)}
        pairs = np.array(
            [[positions[id(body)] for body in c.rigid_bodies] for c in constraints], dtype=int
        )
        count = len(constraints)

        jacobian = np.array(
            [np.asarray(c.jacobian(), dtype=float).reshape(12) for c in constraints]
        )
        bias = np.array([float(c.bias()) for c in constraints])
        lambda_min = [float(c.constraint_bounds.lambda_min) for c in constraints]
        lambda_max = [float(c.constraint_bounds.lambda_max) for c in constraints]

        inverse_mass = np.empty((len(bodies), 2, 3, 3))
        velocity = np.empty((len(bodies), 2, 3))
        force = np.empty((len(bodies), 2, 3))
        for i, body in enumerate(bodies):
            state = body.state
            inverse_mass[i, 0] = np.eye(3) * body.properties.inverted_mass
            inverse_mass[i, 1] = np.asarray(state.inverted_inertia_tensor_world, dtype=float)
            velocity[i] = [state.linear_velocity, state.angular_velocity]
            force[i] = [state.force_sum, state.torque_sum]

        blocks = jacobian.reshape(count, 2, 2, 3)
        inv_mass_jacobian = np.einsum(
            "njkab,njkb->njka", inverse_mass[pairs], blocks
        ).reshape(count, 12)

        ext_acceleration = velocity / delta_time + np.einsum("bkxy,bky->bkx", inverse_mass, force)
        eta = bias / delta_time - np.einsum(
            "ni,ni->n", jacobian, ext_acceleration[pairs].reshape(count, 12)
        )
        diagonal = np.einsum("ni,ni->n", jacobian, inv_mass_jacobian)

        lambdas = np.array(self._lambdas, dtype=float)
        inv_mj_lambda = np.zeros((len(bodies), 6))
        np.add.at(inv_mj_lambda, pairs[:, 0], inv_mass_jacobian[:, :6] * lambdas[:, None])
        np.add.at(inv_mj_lambda, pairs[:, 1], inv_mass_jacobian[:, 6:] * lambdas[:, None])

        for _ in range(self.max_iterations):
            for i, (first, second) in enumerate(pairs):
                current = jacobian[i, :6] @ inv_mj_lambda[first]
                current += jacobian[i, 6:] @ inv_mj_lambda[second]
                delta = (eta[i] - current) / diagonal[i]
                old = lambdas[i]
                lambdas[i] = _clamp(old + delta, lambda_min[i], lambda_max[i])
                delta = lambdas[i] - old
                inv_mj_lambda[first] += delta * inv_mass_jacobian[i, :6]
                inv_mj_lambda[second] += delta * inv_mass_jacobian[i, 6:]

        self._lambdas = lambdas.tolist()

        j_lambda = np.zeros((len(bodies), 6))
        np.add.at(j_lambda, pairs[:, 0], lambdas[:, None] * jacobian[:, :6])
        np.add.at(j_lambda, pairs[:, 1], lambdas[:, None] * jacobian[:, 6:])

        for i, body in enumerate(bodies):
            properties = body.properties
            if properties.type is RigidBodyType.STATIC or properties.inverted_mass == 0:
                continue
            impulses = j_lambda[i].reshape(2, 3)
            linear, angular = (
                velocity[i, k] + inverse_mass[i, k] @ (delta_time * (impulses[k] + force[i, k]))
                for k in range(2)
            )
            body.state.linear_velocity = linear
            _integrate_linear_velocity(body, delta_time)
            body.state.angular_velocity = angular
            _integrate_angular_velocity(body, delta_time)
            body.update_transforms()
            body.set_status(Status.SLEEPING, False)