"""Triangulated meshes produced by sampling transfinite surfaces."""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from transfinite.geom import point
from transfinite.geometry_utils import to_vec3, triangle_normal
from transfinite.octtree import TriangleOctree

Vec3 = Tuple[float, float, float]
TriTuple = Tuple[Vec3, Vec3, Vec3, Vec3]


class TriMesh:
    """Indexed triangle mesh.

    The topology (triangles as vertex index triples) is usually built
    first, with :meth:`resize_points` declaring the vertex count, and the
    geometry assigned later with :meth:`set_points`.  Closest triangle
    queries go through a :class:`~transfinite.octtree.TriangleOctree`
    that is rebuilt lazily whenever the points or triangles change.
    """

    def __init__(self):
        self._points: List[list] = []
        self._triangles: List[Tuple[int, int, int]] = []
        self._size: Optional[int] = None
        self._octree: Optional[TriangleOctree] = None

    def __repr__(self):
        return 'TriMesh(vertices={}, triangles={})'.format(
            self.vertex_count, len(self._triangles))

    @property
    def vertex_count(self) -> int:
        if self._size is not None:
            return self._size
        return len(self._points)

    def resize_points(self, n: int) -> None:
        """Declare the number of vertices the topology refers to."""
        if n < 0:
            raise ValueError('vertex count must be >= 0')
        self._size = n
        self._points = [point(0, 0, 0) for _ in range(n)]
        self._octree = None

    def set_points(self, points: Sequence[Sequence[float]]) -> None:
        """Assign vertex positions, in topology order."""
        if self._size is not None and len(points) != self._size:
            raise ValueError('expected {} points, got {}'.format(self._size, len(points)))
        self._points = [point(p) for p in points]
        self._size = len(self._points)
        self._octree = None

    def add_triangle(self, a: int, b: int, c: int) -> None:
        count = self.vertex_count
        for idx in (a, b, c):
            if idx < 0 or idx >= count:
                raise ValueError('vertex index {} out of range'.format(idx))
        self._triangles.append((a, b, c))
        self._octree = None

    def points(self) -> List[list]:
        return [point(p) for p in self._points]

    def triangles(self) -> List[Tuple[int, int, int]]:
        return list(self._triangles)

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return ``(vertices, faces)`` as ``(N, 3)`` float and ``(M, 3)`` int arrays."""
        vertices = np.array([p[:3] for p in self._points], dtype=float).reshape(-1, 3)
        faces = np.array(self._triangles, dtype=np.int64).reshape(-1, 3)
        return vertices, faces

    def triangle_view(self) -> Iterator[TriTuple]:
        """Yield triangles as ``(normal, v0, v1, v2)``.

        Faces with degenerate geometry (zero area) are skipped silently.
        """
        for a, b, c in self._triangles:
            v0 = to_vec3(self._points[a])
            v1 = to_vec3(self._points[b])
            v2 = to_vec3(self._points[c])
            normal = triangle_normal(v0, v1, v2)
            if normal is None:
                continue
            yield normal, v0, v1, v2

    def closest_triangle(self, p) -> Tuple[int, int, int]:
        """Return the vertex indices of the triangle closest to ``p``."""
        if self._octree is None:
            self._octree = TriangleOctree(self._points, self._triangles)
        idx, _ = self._octree.closest(point(p))
        return self._triangles[idx]

    def write_obj(self, path) -> bool:
        """Write the mesh as Wavefront OBJ; returns ``False`` on failure."""
        from transfinite.io.obj import write_obj
        return write_obj(self, path)


__all__ = ['TriMesh']
