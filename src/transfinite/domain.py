"""n-sided parameter domains and their tessellation.

A domain owns the boundary sides of a surface (shared with the surface
and its ribbons), turns them into a convex parameter polygon, and samples
that polygon for mesh evaluation.  :class:`RegularDomain` uses the regular
n-gon inscribed in the unit circle.

Tessellation at resolution ``r`` places the polygon center first, then
``r`` concentric layers.  Layer ``j`` (``1 <= j <= r``) is the polygon
scaled by ``j / r`` and holds ``n * j`` vertices, walked side by side
(``j`` per side, starting at the side's first corner); the last layer
lies on the polygon boundary.  Consecutive layers are stitched with
``n * (2j - 1)`` counter-clockwise triangles, for ``n * r**2`` in total.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from math import cos, pi, sin
from typing import List, Sequence

from transfinite.geom import clamp, close, lerp, point
from transfinite.mesh import TriMesh

logger = logging.getLogger(__name__)

__all__ = ['Domain', 'RegularDomain']


class Domain(ABC):
    """Abstract parameter domain over ``n`` boundary sides."""

    def __init__(self):
        self._curves: List = []
        self._vertices: List[list] = []
        self._center = point(0, 0)
        self._invalid = True

    def __repr__(self):
        return '{}(n={})'.format(type(self).__name__, len(self._curves))

    @property
    def n(self) -> int:
        return len(self._curves)

    @property
    def center(self) -> list:
        return point(self._center)

    def set_side(self, i: int, curve) -> None:
        """Assign ``curve`` to side ``i``, growing the side list if needed."""
        if i >= len(self._curves):
            self._curves.extend([None] * (i + 1 - len(self._curves)))
        self._curves[i] = curve
        self._invalid = True

    def set_sides(self, curves: Sequence) -> None:
        self._curves = list(curves)
        self._invalid = True

    def update(self) -> bool:
        """Recompute the polygon if sides were set since the last update.

        Returns ``True`` if the polygon vertices actually changed.
        """
        if not self._invalid:
            return False
        self._invalid = False
        old = self._vertices
        self._vertices = self.compute_vertices()
        self._center = self.compute_center()
        changed = (len(old) != len(self._vertices) or
                   any(not close(a[0], b[0]) or not close(a[1], b[1])
                       for a, b in zip(old, self._vertices)))
        logger.debug("domain update: n=%d changed=%s", self.n, changed)
        return changed

    @abstractmethod
    def compute_vertices(self) -> List[list]:
        """Return the polygon vertices, counter-clockwise, vertex ``i``
        being the start of side ``i``."""

    def compute_center(self) -> list:
        count = len(self._vertices)
        if count == 0:
            return point(0, 0)
        return point(sum(v[0] for v in self._vertices) / count,
                     sum(v[1] for v in self._vertices) / count)

    def vertices(self) -> List[list]:
        return [point(v) for v in self._vertices]

    def edge_point(self, i: int, s: float) -> list:
        """Return the domain point on side ``i`` at fraction ``s``."""
        if not self._vertices:
            raise ValueError('domain has no vertices; call update() first')
        n = len(self._vertices)
        return lerp(self._vertices[i], self._vertices[(i + 1) % n], clamp(s))

    @staticmethod
    def vertex_count(n: int, resolution: int) -> int:
        return 1 + n * resolution * (resolution + 1) // 2

    def _check_resolution(self, resolution: int) -> None:
        if not self._vertices:
            raise ValueError('domain has no vertices; call update() first')
        if not isinstance(resolution, int) or resolution < 1:
            raise ValueError('resolution must be an integer >= 1, got {}'.format(resolution))

    def mesh_topology(self, resolution: int) -> TriMesh:
        """Return a mesh holding only the triangles of the tessellation."""
        self._check_resolution(resolution)
        n = len(self._vertices)
        mesh = TriMesh()
        mesh.resize_points(self.vertex_count(n, resolution))

        def base(j):
            return 0 if j == 0 else 1 + n * (j - 1) * j // 2

        for j in range(1, resolution + 1):
            outer_count = n * j
            inner_count = n * (j - 1)

            def outer(k, t):
                return base(j) + (k * j + t) % outer_count

            def inner(k, t):
                return base(j - 1) + (k * (j - 1) + t) % inner_count

            for k in range(n):
                if j == 1:
                    mesh.add_triangle(0, outer(k, 0), outer(k, 1))
                    continue
                for t in range(j):
                    mesh.add_triangle(inner(k, t), outer(k, t), outer(k, t + 1))
                for t in range(j - 1):
                    mesh.add_triangle(inner(k, t), outer(k, t + 1), inner(k, t + 1))
        return mesh

    def parameters(self, resolution: int) -> List[list]:
        """Return the domain points of the tessellation, in vertex order."""
        self._check_resolution(resolution)
        n = len(self._vertices)
        center = self._center
        uvs = [point(center)]
        for j in range(1, resolution + 1):
            ratio = j / resolution
            layer = [lerp(center, v, ratio) for v in self._vertices]
            for k in range(n):
                start = layer[k]
                end = layer[(k + 1) % n]
                for t in range(j):
                    uvs.append(lerp(start, end, t / j))
        return uvs


class RegularDomain(Domain):
    """Regular n-gon inscribed in the unit circle.

    Vertex ``k`` sits at angle ``2 pi k / n``; the shape depends only on
    the number of sides, so :meth:`update` reports a change only when
    the side count changes.
    """

    def compute_vertices(self) -> List[list]:
        n = len(self._curves)
        return [point(cos(2.0 * pi * k / n), sin(2.0 * pi * k / n))
                for k in range(n)]
