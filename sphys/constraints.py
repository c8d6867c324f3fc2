"""Constraints between pairs of rigid bodies."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from sphys.rigid_body import RigidBody


def _vec3(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3).copy()


def _pair(values) -> tuple[np.ndarray, np.ndarray]:
    first, second = values
    return _vec3(first), _vec3(second)


def _jacobian(axis: np.ndarray, lever1: np.ndarray, lever2: np.ndarray) -> np.ndarray:
    return np.concatenate([-axis, -np.cross(lever1, axis), axis, np.cross(lever2, axis)])


@dataclass
class ConstraintBounds:
    """The range the constraint's lambda multiplier may take."""

    lambda_min: float = -np.inf
    lambda_max: float = np.inf


class Constraint(abc.ABC):
    """A constraint acting on exactly two rigid bodies."""

    def __init__(self, rigid_bodies: Sequence[RigidBody]) -> None:
        bodies = tuple(rigid_bodies)
        if len(bodies) != 2:
            raise ValueError("a constraint needs exactly two rigid bodies")
        self.rigid_bodies: tuple[RigidBody, RigidBody] = bodies  # type: ignore[assignment]
        self.constraint_bounds = ConstraintBounds()
        self.updated = True

    def bias(self) -> float:
        """The bias term of the constraint equation."""
        return 0.0

    @abc.abstractmethod
    def jacobian(self) -> np.ndarray:
        """The 12 values of the Jacobian row: linear and angular parts per body."""

    def reset_updated_state(self) -> None:
        self.updated = False


class DistanceConstraint(Constraint):
    """Keeps two anchor points, relative to each body, at a fixed distance."""

    def __init__(self, rigid_bodies: Sequence[RigidBody], anchor_points=None) -> None:
        super().__init__(rigid_bodies)
        self._anchor_points = (
            (np.zeros(3), np.zeros(3)) if anchor_points is None else _pair(anchor_points)
        )

    @property
    def anchor_points(self) -> tuple[np.ndarray, np.ndarray]:
        return self._anchor_points[0].copy(), self._anchor_points[1].copy()

    @anchor_points.setter
    def anchor_points(self, anchor_points) -> None:
        self._anchor_points = _pair(anchor_points)
        self.updated = True

    def jacobian(self) -> np.ndarray:
        anchor1, anchor2 = self._anchor_points
        p1 = np.asarray(self.rigid_bodies[0].state.position, dtype=float) + anchor1
        p2 = np.asarray(self.rigid_bodies[1].state.position, dtype=float) + anchor2
        return _jacobian(p2 - p1, anchor1, anchor2)


class NormalConstraint(Constraint):
    """Pushes two bodies apart along a contact normal.

    Small penetrations and closing velocities below the slop values are
    ignored to keep resting contacts stable.
    """

    def __init__(
        self,
        rigid_bodies: Sequence[RigidBody],
        beta: float,
        restitution_factor: float,
        slop_penetration: float,
        slop_restitution: float,
        delta_time: float,
    ) -> None:
        super().__init__(rigid_bodies)
        self.constraint_bounds = ConstraintBounds(0.0, np.inf)
        self.beta = float(beta)
        self.restitution_factor = float(restitution_factor)
        self.slop_penetration = float(slop_penetration)
        self.slop_restitution = float(slop_restitution)
        self._delta_time = float(delta_time)
        self._constraint_vectors = (np.zeros(3), np.zeros(3))
        self._normal = np.zeros(3)

    @property
    def constraint_vectors(self) -> tuple[np.ndarray, np.ndarray]:
        return self._constraint_vectors[0].copy(), self._constraint_vectors[1].copy()

    @constraint_vectors.setter
    def constraint_vectors(self, vectors) -> None:
        self._constraint_vectors = _pair(vectors)
        self.updated = True

    @property
    def normal(self) -> np.ndarray:
        return self._normal.copy()

    @normal.setter
    def normal(self, normal) -> None:
        self._normal = _vec3(normal)
        self.updated = True

    @property
    def delta_time(self) -> float:
        return self._delta_time

    @delta_time.setter
    def delta_time(self, delta_time: float) -> None:
        self._delta_time = float(delta_time)
        self.updated = True

    def bias(self) -> float:
        body1, body2 = (rb.state for rb in self.rigid_bodies)
        r1, r2 = self._constraint_vectors
        p1 = np.asarray(body1.position, dtype=float) + r1
        p2 = np.asarray(body2.position, dtype=float) + r2
        penetration = float((p1 - p2) @ self._normal)
        if penetration <= self.slop_penetration:
            return 0.0

        bias_error = self.beta * (penetration - self.slop_penetration) / self._delta_time
        bias_restitution = 0.0
        v1 = np.asarray(body1.linear_velocity, dtype=float) + np.cross(body1.angular_velocity, r1)
        v2 = np.asarray(body2.linear_velocity, dtype=float) + np.cross(body2.angular_velocity, r2)
        closing_velocity = float((v1 - v2) @ self._normal)
        if closing_velocity > self.slop_restitution:
            bias_restitution = self.restitution_factor * (closing_velocity - self.slop_restitution)
        return bias_error + bias_restitution

    def jacobian(self) -> np.ndarray:
        r1, r2 = self._constraint_vectors
        return _jacobian(self._normal, r1, r2)


class FrictionConstraint(Constraint):
    """Resists sliding along a contact tangent, bounded by Coulomb friction."""

    def __init__(
        self,
        rigid_bodies: Sequence[RigidBody],
        friction_coefficient: float,
        gravity_acceleration: float,
    ) -> None:
        super().__init__(rigid_bodies)
        self.friction_coefficient = float(friction_coefficient)
        self.gravity_acceleration = float(gravity_acceleration)
        self._constraint_vectors = (np.zeros(3), np.zeros(3))
        self._tangent = np.zeros(3)

    @property
    def constraint_vectors(self) -> tuple[np.ndarray, np.ndarray]:
        return self._constraint_vectors[0].copy(), self._constraint_vectors[1].copy()

    @constraint_vectors.setter
    def constraint_vectors(self, vectors) -> None:
        self._constraint_vectors = _pair(vectors)
        self.updated = True

    @property
    def tangent(self) -> np.ndarray:
        return self._tangent.copy()

    @tangent.setter
    def tangent(self, tangent) -> None:
        self._tangent = _vec3(tangent)
        self.updated = True

    def bias(self) -> float:
        return 0.0

    def jacobian(self) -> np.ndarray:
        r1, r2 = self._constraint_vectors
        return _jacobian(self._tangent, r1, r2)

    def calculate_constraint_bounds(self, contact_mass: float) -> None:
        """Bound lambda symmetrically by friction coefficient, mass and gravity."""
        limit = self.friction_coefficient * contact_mass * self.gravity_acceleration
        self.constraint_bounds = ConstraintBounds(-limit, limit)
        self.updated = True