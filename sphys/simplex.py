"""Support points in configuration space and the simplices built from them."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def _vec3(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


class SupportPoint:
    """A point of the Minkowski difference of two colliders.

    It keeps the point in configuration space (CSO) together with the
    world and local positions on each collider that produced it.
    """

    __slots__ = ("_cso_position", "_world_positions", "_local_positions")

    def __init__(
        self,
        world_position1=None,
        local_position1=None,
        world_position2=None,
        local_position2=None,
    ) -> None:
        w1 = np.zeros(3) if world_position1 is None else _vec3(world_position1)
        l1 = np.zeros(3) if local_position1 is None else _vec3(local_position1)
        w2 = np.zeros(3) if world_position2 is None else _vec3(world_position2)
        l2 = np.zeros(3) if local_position2 is None else _vec3(local_position2)
        self._world_positions = (w1, w2)
        self._local_positions = (l1, l2)
        self._cso_position = w1 - w2

    @classmethod
    def from_colliders(cls, collider1, collider2, direction) -> SupportPoint:
        """Return the furthest point of the colliders' CSO in ``direction``."""
        direction = _vec3(direction)
        world1, local1 = collider1.furthest_point_in_direction(direction)
        world2, local2 = collider2.furthest_point_in_direction(-direction)
        return cls(world1, local1, world2, local2)

    @property
    def cso_position(self) -> np.ndarray:
        """The coordinates of the point in configuration space."""
        return self._cso_position.copy()

    def local_position(self, second: bool) -> np.ndarray:
        """Local position relative to the second collider if ``second``, else the first."""
        return self._local_positions[int(bool(second))].copy()

    def world_position(self, second: bool) -> np.ndarray:
        """World position relative to the second collider if ``second``, else the first."""
        return self._world_positions[int(bool(second))].copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SupportPoint):
            return NotImplemented
        return all(
            np.array_equal(mine, theirs)
            for mine, theirs in zip(self._world_positions, other._world_positions)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"SupportPoint(cso={self._cso_position.tolist()}, "
            f"world={[p.tolist() for p in self._world_positions]})"
        )


def _all_close_to(a: np.ndarray, b: np.ndarray, epsilon: float) -> bool:
    return bool(np.all(np.abs(a - b) < epsilon))


def _normalize(vector: np.ndarray) -> np.ndarray:
    return vector / np.linalg.norm(vector)


def _faces_origin(a: np.ndarray, b: np.ndarray, c: np.ndarray, epsilon: float) -> bool:
    normal = _normalize(np.cross(b - a, c - a))
    return not float(normal @ a) > -epsilon


def is_origin_inside(simplex: Sequence[SupportPoint], epsilon: float) -> bool:
    """Check whether the CSO origin lies inside the given simplex."""
    points = [sp.cso_position for sp in simplex]
    with np.errstate(invalid="ignore", divide="ignore"):
        if len(points) == 1:
            return _all_close_to(points[0], np.zeros(3), epsilon)

        if len(points) == 2:
            first, second = points
            direction = _normalize(second - first)
            dot1 = float(direction @ -first)
            dot2 = float(direction @ -second)
            if dot1 < -epsilon or dot2 > -epsilon:
                return False
            projection = first + dot1 * direction
            return _all_close_to(projection, np.zeros(3), epsilon)

        if len(points) == 3:
            return _faces_origin(points[0], points[1], points[2], epsilon)

        if len(points) == 4:
            for offset in range(4):
                a, b, c = (points[(offset + k) % 3] for k in range(3))
                if not _faces_origin(a, b, c, epsilon):
                    return False
            return True

    return False


def is_close(simplex: Sequence[SupportPoint], point, epsilon: float) -> bool:
    """Check whether any point of the simplex has the given CSO coordinates."""
    point = _vec3(point)
    return any(_all_close_to(sp.cso_position, point, epsilon) for sp in simplex)