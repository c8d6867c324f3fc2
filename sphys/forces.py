"""Forces that can be applied to rigid bodies."""

from __future__ import annotations

import abc

import numpy as np

from sphys.rigid_body import RigidBody


class Force(abc.ABC):
    """A force acting on a rigid body."""

    @abc.abstractmethod
    def calculate(self, rigid_body: RigidBody) -> tuple[np.ndarray, np.ndarray]:
        """Return the (force, torque) pair this force applies to the body."""


class DirectionalForce(Force):
    """A constant force applied at the center of mass, with no torque."""

    def __init__(self, value) -> None:
        self.value = np.asarray(value, dtype=float)

    def calculate(self, rigid_body: RigidBody) -> tuple[np.ndarray, np.ndarray]:
        return self.value.copy(), np.zeros(3)


class Gravity(Force):
    """A vertical acceleration applied along the Y axis."""

    def __init__(self, gravity: float) -> None:
        self.gravity = float(gravity)

    def calculate(self, rigid_body: RigidBody) -> tuple[np.ndarray, np.ndarray]:
        force = np.zeros(3)
        inverted_mass = rigid_body.properties.inverted_mass
        if inverted_mass > 0.0:
            force[1] = self.gravity / inverted_mass
        return force, np.zeros(3)


class PunctualForce(Force):
    """A force applied at a point in world space, producing torque."""

    def __init__(self, value, point) -> None:
        self.value = np.asarray(value, dtype=float)
        self.point = np.asarray(point, dtype=float)

    def calculate(self, rigid_body: RigidBody) -> tuple[np.ndarray, np.ndarray]:
        lever = self.point - np.asarray(rigid_body.state.position, dtype=float)
        return self.value.copy(), np.cross(lever, self.value)