"""Rigid bodies: their configurable properties, movement state and status flags."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

import numpy as np


class RigidBodyType(enum.Enum):
    """The kinds of rigid body."""

    STATIC = 0
    DYNAMIC = 1


class Status(enum.Enum):
    """The statuses a rigid body can be in."""

    SLEEPING = 0
    PROPERTIES_CHANGED = 1
    STATE_CHANGED = 2
    COLLIDER_CHANGED = 3
    FORCES_CHANGED = 4


def _zeros3() -> np.ndarray:
    return np.zeros(3)


@dataclass
class RigidBodyProperties:
    """The configurable properties of a rigid body.

    Mass and inertia tensor are stored inverted so that infinite mass is 0.
    """

    type: RigidBodyType = RigidBodyType.STATIC
    inverted_mass: float = 0.0
    inverted_inertia_tensor: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))
    linear_drag: float = 0.0
    angular_drag: float = 0.0
    friction_coefficient: float = 0.0
    sleep_motion: float = 0.001
    user_data: Any = None


def dynamic_properties(mass: float, inertia_tensor) -> RigidBodyProperties:
    """Create the properties of a dynamic body of the given mass and inertia tensor."""
    if mass <= 0.0:
        raise ValueError("the mass of a dynamic rigid body must be positive")
    tensor = np.asarray(inertia_tensor, dtype=float)
    return RigidBodyProperties(
        type=RigidBodyType.DYNAMIC,
        inverted_mass=1.0 / mass,
        inverted_inertia_tensor=np.linalg.inv(tensor),
    )


@dataclass
class RigidBodyState:
    """Position, orientation and other movement data of a rigid body.

    The orientation is a quaternion stored as (w, x, y, z).
    """

    position: np.ndarray = field(default_factory=_zeros3)
    orientation: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))
    linear_velocity: np.ndarray = field(default_factory=_zeros3)
    angular_velocity: np.ndarray = field(default_factory=_zeros3)
    linear_acceleration: np.ndarray = field(default_factory=_zeros3)
    angular_acceleration: np.ndarray = field(default_factory=_zeros3)
    force_sum: np.ndarray = field(default_factory=_zeros3)
    torque_sum: np.ndarray = field(default_factory=_zeros3)
    motion: float = 0.0
    transforms_matrix: np.ndarray = field(default_factory=lambda: np.eye(4))
    inverted_inertia_tensor_world: np.ndarray = field(default_factory=lambda: np.eye(3))


def _rotation_matrix(quaternion) -> np.ndarray:
    w, x, y, z = (float(c) for c in quaternion)
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
    )


class RigidBody:
    """A physics entity that can be simulated.

    A collider, if any, receives its world transforms through its
    ``transforms`` attribute and a reference back to the body in ``parent``.
    """

    def __init__(
        self,
        properties: RigidBodyProperties | None = None,
        state: RigidBodyState | None = None,
        collider: Any = None,
        collider_local_transforms=None,
    ) -> None:
        self._statuses: set[Status] = set()
        self._forces: list = []
        self._collider = None
        self._collider_local_transforms = (
            np.eye(4)
            if collider_local_transforms is None
            else np.asarray(collider_local_transforms, dtype=float)
        )
        self.properties = properties if properties is not None else RigidBodyProperties()
        self.state = state if state is not None else RigidBodyState()
        self.collider = collider

    @property
    def properties(self) -> RigidBodyProperties:
        return self._properties

    @properties.setter
    def properties(self, properties: RigidBodyProperties) -> None:
        self._properties = properties
        self.set_status(Status.PROPERTIES_CHANGED, True)

    @property
    def state(self) -> RigidBodyState:
        return self._state

    @state.setter
    def state(self, state: RigidBodyState) -> None:
        self._state = state
        self.set_status(Status.STATE_CHANGED, True)

    @property
    def collider(self) -> Any:
        return self._collider

    @collider.setter
    def collider(self, collider: Any) -> None:
        self._collider = collider
        if collider is not None:
            collider.parent = self
        self.set_status(Status.COLLIDER_CHANGED, True)

    @property
    def collider_local_transforms(self) -> np.ndarray:
        return self._collider_local_transforms

    @collider_local_transforms.setter
    def collider_local_transforms(self, local_transforms) -> None:
        self._collider_local_transforms = np.asarray(local_transforms, dtype=float)
        self.set_status(Status.COLLIDER_CHANGED, True)

    @property
    def forces(self) -> tuple:
        """The forces applied to the body, in the order they were added."""
        return tuple(self._forces)

    def add_force(self, force) -> RigidBody:
        self._forces.append(force)
        self.set_status(Status.FORCES_CHANGED, True)
        return self

    def remove_force(self, force) -> RigidBody:
        self._forces = [f for f in self._forces if f is not force]
        self.set_status(Status.FORCES_CHANGED, True)
        return self

    def has_status(self, status: Status) -> bool:
        return status in self._statuses

    def set_status(self, status: Status, value: bool) -> None:
        if value:
            self._statuses.add(status)
        else:
            self._statuses.discard(status)

    def update_transforms(self) -> None:
        """Recompute the world transforms matrix and world inertia tensor.

        The collider's transforms are updated as well if there is one.
        """
        state = self._state
        rotation = _rotation_matrix(state.orientation)
        matrix = np.eye(4)
        matrix[:3, :3] = rotation
        matrix[:3, 3] = state.position
        state.transforms_matrix = matrix
        state.inverted_inertia_tensor_world = (
            rotation @ np.asarray(self._properties.inverted_inertia_tensor) @ rotation.T
        )
        if self._collider is not None:
            self._collider.transforms = matrix @ self._collider_local_transforms

    def update_motion(self, bias: float, max_motion: float) -> None:
        """Update the motion value as a recency-weighted average.

        ``bias`` is the share of the new value due to the old one; the result
        never exceeds ``max_motion``.
        """
        state = self._state
        linear = np.asarray(state.linear_velocity, dtype=float)
        angular = np.asarray(state.angular_velocity, dtype=float)
        current = float(linear @ linear + angular @ angular)
        motion = bias * state.motion + (1.0 - bias) * current
        state.motion = min(motion, max_motion)