import numpy as np
import pytest

from sphys.triangle_collider import TriangleCollider

VERTICES = [[0.0, 0.0, 0.0], [2.0, 1.0, -1.0], [-1.0, 3.0, 0.5]]


def translation(offset):
    matrix = np.eye(4)
    matrix[:3, 3] = offset
    return matrix


def test_aabb_identity_bounds_vertices():
    minimum, maximum = TriangleCollider(VERTICES).aabb()
    assert np.allclose(minimum, np.min(VERTICES, axis=0))
    assert np.allclose(maximum, np.max(VERTICES, axis=0))


def test_aabb_moves_with_translation():
    collider = TriangleCollider(VERTICES)
    collider.transforms = translation([5.0, -1.0, -10.0])
    minimum, maximum = collider.aabb()
    base_min, base_max = TriangleCollider(VERTICES).aabb()
    assert np.allclose(minimum - base_min, [5.0, -1.0, -10.0])
    assert np.allclose(maximum - base_max, [5.0, -1.0, -10.0])


def test_world_vertices_follow_transforms():
    collider = TriangleCollider(VERTICES, translation([1.0, 2.0, 3.0]))
    assert np.allclose(collider.world_vertices, np.array(VERTICES) + [1.0, 2.0, 3.0])
    assert np.allclose(collider.local_vertices, VERTICES)


def test_furthest_point_returns_world_and_local():
    collider = TriangleCollider(VERTICES, translation([1.0, 0.0, 0.0]))
    world, local = collider.furthest_point_in_direction([0.0, 1.0, 0.0])
    assert np.allclose(local, VERTICES[2])
    assert np.allclose(world, np.array(VERTICES[2]) + [1.0, 0.0, 0.0])


def test_furthest_point_tie_picks_first():
    collider = TriangleCollider([[1.0, 0.0, 0.0], [1.0, 5.0, 0.0], [0.0, 0.0, 0.0]])
    _, local = collider.furthest_point_in_direction([1.0, 0.0, 0.0])
    assert np.allclose(local, [1.0, 0.0, 0.0])


def test_changing_local_vertices_keeps_transforms():
    collider = TriangleCollider(VERTICES, translation([0.0, 0.0, 4.0]))
    collider.local_vertices = [[0, 0, 0], [1, 0, 0], [0, 1, 0]]
    assert np.allclose(collider.world_vertices[:, 2], [4.0, 4.0, 4.0])


def test_updated_flag():
    collider = TriangleCollider(VERTICES)
    assert collider.updated
    collider.reset_updated_state()
    assert not collider.updated
    collider.transforms = np.eye(4)
    assert collider.updated
    collider.reset_updated_state()
    assert not collider.updated


def test_invalid_shapes_raise():
    with pytest.raises(ValueError):
        TriangleCollider([[0, 0, 0], [1, 1, 1]])
    collider = TriangleCollider(VERTICES)
    with pytest.raises(ValueError):
        collider.transforms = np.eye(3)