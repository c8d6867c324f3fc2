"""A convex collider shaped as a single triangle."""

from __future__ import annotations

from typing import Any

import numpy as np


def _vertices(values) -> np.ndarray:
    array = np.asarray(values, dtype=float)
    if array.shape != (3, 3):
        raise ValueError("a triangle needs exactly three 3D vertices")
    return array.copy()


class TriangleCollider:
    """A triangle given by three local vertices and a 4x4 transforms matrix."""

    def __init__(self, vertices, transforms=None) -> None:
        self.parent: Any = None
        self._local_vertices = _vertices(vertices)
        self._world_vertices = self._local_vertices.copy()
        self._transforms = np.eye(4)
        self.updated = True
        self.transforms = np.eye(4) if transforms is None else transforms

    @property
    def local_vertices(self) -> np.ndarray:
        return self._local_vertices.copy()

    @local_vertices.setter
    def local_vertices(self, vertices) -> None:
        self._local_vertices = _vertices(vertices)
        self.transforms = self._transforms

    @property
    def world_vertices(self) -> np.ndarray:
        return self._world_vertices.copy()

    @property
    def transforms(self) -> np.ndarray:
        return self._transforms.copy()

    @transforms.setter
    def transforms(self, transforms) -> None:
        matrix = np.asarray(transforms, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError("the transforms must be a 4x4 matrix")
        self._transforms = matrix.copy()
        homogeneous = np.hstack([self._local_vertices, np.ones((3, 1))])
        self._world_vertices = (homogeneous @ self._transforms.T)[:, :3]
        self.updated = True

    def reset_updated_state(self) -> None:
        self.updated = False

    def aabb(self) -> tuple[np.ndarray, np.ndarray]:
        """Return the (minimum, maximum) corners of the world-space bounding box."""
        return self._world_vertices.min(axis=0), self._world_vertices.max(axis=0)

    def furthest_point_in_direction(self, direction) -> tuple[np.ndarray, np.ndarray]:
        """Return the (world, local) vertex furthest along ``direction``.

        On ties the first such vertex wins.
        """
        dots = self._world_vertices @ np.asarray(direction, dtype=float)
        index = int(np.argmax(dots))
        return self._world_vertices[index].copy(), self._local_vertices[index].copy()