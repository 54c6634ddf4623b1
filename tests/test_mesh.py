import numpy as np
import pytest

from transfinite.geom import point
from transfinite.mesh import TriMesh


def grid_mesh(size=4):
    """``size`` x ``size`` quads in the XY plane, two triangles each"""
    mesh = TriMesh()
    mesh.resize_points((size + 1) * (size + 1))
    mesh.set_points([point(i, j, 0) for j in range(size + 1) for i in range(size + 1)])
    for j in range(size):
        for i in range(size):
            a = j * (size + 1) + i
            b = a + 1
            c = a + size + 2
            d = a + size + 1
            mesh.add_triangle(a, b, c)
            mesh.add_triangle(a, c, d)
    return mesh


def test_topology_then_points():
    mesh = TriMesh()
    mesh.resize_points(3)
    assert mesh.vertex_count == 3
    mesh.add_triangle(0, 1, 2)
    with pytest.raises(ValueError):
        mesh.add_triangle(0, 1, 3)
    with pytest.raises(ValueError):
        mesh.set_points([point(0, 0, 0)])
    mesh.set_points([point(0, 0, 0), point(1, 0, 0), point(0, 1, 0)])
    assert mesh.points()[1] == [1, 0, 0, 1]
    assert mesh.triangles() == [(0, 1, 2)]


def test_as_arrays():
    mesh = grid_mesh(2)
    vertices, faces = mesh.as_arrays()
    assert vertices.shape == (9, 3)
    assert faces.shape == (8, 3)
    assert faces.dtype == np.int64
    assert np.allclose(vertices[4], [1.0, 1.0, 0.0])


def test_triangle_view_skips_degenerate():
    mesh = TriMesh()
    mesh.set_points([point(0, 0, 0), point(1, 0, 0), point(0, 1, 0), point(2, 0, 0)])
    mesh.add_triangle(0, 1, 2)
    mesh.add_triangle(0, 1, 3)
    tris = list(mesh.triangle_view())
    assert len(tris) == 1
    assert tris[0][0] == (0.0, 0.0, 1.0)


def test_closest_triangle():
    mesh = grid_mesh(4)
    # above the lower right half of the quad at (2, 1)
    tri = mesh.closest_triangle(point(2.8, 1.2, 3.0))
    assert tri == (7, 8, 13)
    # far outside the grid, nearest the corner (4, 4)
    tri = mesh.closest_triangle(point(10, 10, 0))
    assert 24 in tri


def test_closest_triangle_tracks_points():
    mesh = grid_mesh(2)
    assert mesh.closest_triangle(point(0.1, 0.9, 0)) == (0, 4, 3)
    moved = [point(p[0] + 10, p[1], p[2]) for p in mesh.points()]
    mesh.set_points(moved)
    assert mesh.closest_triangle(point(10.1, 0.9, 0)) == (0, 4, 3)


def test_closest_triangle_empty():
    mesh = TriMesh()
    with pytest.raises(ValueError):
        mesh.closest_triangle(point(0, 0, 0))
