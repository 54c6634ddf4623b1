"""Mapping from domain points to per-side ribbon coordinates.

For every side ``i`` a parameterization maps a domain point ``uv`` to a
pair ``point(s, d)``: ``s`` is the position along side ``i`` (0 at its
first corner, 1 at its last) and ``d`` the distance from side ``i``
into the interior (0 on the side).

:class:`BilinearParameterization` inverts, for side ``i``, the bilinear
map of the quadrilateral ``V[i], V[i+1], V[i+2], V[i-1]``: side ``i``
is its ``d = 0`` edge and the two neighboring sides are its ``s = 0``
and ``s = 1`` edges.  The result satisfies the compatibility conditions
the corner-based composition relies on, on side ``i``::

    d[i] == 0     s[i+1] == 0    d[i+1] == 1 - s[i]
                  s[i-1] == 1    d[i-1] == s[i]

For triangles the quadrilateral collapses (``V[i+2] == V[i-1]``) and
``s`` is undefined at the apex; it is set to 0.5 there.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from math import copysign, sqrt
from typing import List, Tuple

from transfinite.geom import cross2, point, sub

logger = logging.getLogger(__name__)

__all__ = ['Parameterization', 'BilinearParameterization', 'inverse_bilinear']

_TINY = 1.0e-12


class Parameterization(ABC):
    """Abstract domain-to-ribbon mapping over a shared domain."""

    def __init__(self, domain):
        self._domain = domain

    @property
    def domain(self):
        return self._domain

    @abstractmethod
    def update(self) -> None:
        """Recompute internal data after the domain changed."""

    @abstractmethod
    def map_to_ribbon(self, i: int, uv) -> list:
        """Return ``point(s, d)`` of domain point ``uv`` relative to side ``i``."""

    def map_to_ribbons(self, uv) -> List[list]:
        """Return the ``(s, d)`` points of ``uv`` for every side, in side order."""
        return [self.map_to_ribbon(i, uv) for i in range(self._domain.n)]


class BilinearParameterization(Parameterization):

    def __init__(self, domain):
        super().__init__(domain)
        self._quads: List[Tuple[list, list, list, list]] = []

    def update(self) -> None:
        vertices = self._domain.vertices()
        n = len(vertices)
        self._quads = [(vertices[i],
                        vertices[(i + 1) % n],
                        vertices[(i + 2) % n],
                        vertices[(i - 1 + n) % n])
                       for i in range(n)]
        logger.debug("bilinear parameterization rebuilt for %d sides", n)

    def map_to_ribbon(self, i: int, uv) -> list:
        if len(self._quads) != self._domain.n:
            raise ValueError('parameterization is out of date; call update() first')
        s, d = inverse_bilinear(uv, *self._quads[i])
        return point(s, d)


def inverse_bilinear(p, a, b, c, d) -> Tuple[float, float]:
    """Invert ``B(u, v) = (1-u)(1-v) a + u(1-v) b + u v c + (1-u) v d``.

    Returns ``(u, v)`` with ``B(u, v) == p`` (XY components only).  Of the
    two roots of the quadratic, the one closest to the unit square is
    chosen.
    """
    e = sub(b, a)
    f = sub(d, a)
    g = [a[0] - b[0] + c[0] - d[0], a[1] - b[1] + c[1] - d[1]]
    h = sub(p, a)

    k2 = cross2(g, f)
    k1 = cross2(e, f) + cross2(h, g)
    k0 = cross2(h, e)

    scale = max(abs(k1), abs(cross2(e, f)), _TINY)
    if abs(k2) <= _TINY * scale:
        # opposite edges parallel, the equation is linear in v
        if abs(k1) <= _TINY:
            raise ValueError('degenerate quadrilateral in inverse_bilinear')
        return _solve_u(-k0 / k1, e, f, g, h), -k0 / k1

    w = k1 * k1 - 4.0 * k0 * k2
    w = sqrt(max(w, 0.0))
    # numerically stable pair of roots
    q = -0.5 * (k1 + copysign(w, k1))
    roots = [q / k2]
    if abs(q) > _TINY * scale:
        roots.append(k0 / q)

    # a root where e + g v vanishes solves the quadratic for any p, so
    # roots are ranked by residual first, then by distance from the square
    best = None
    for v in roots:
        u = _solve_u(v, e, f, g, h)
        rx = u * e[0] + v * f[0] + u * v * g[0] - h[0]
        ry = u * e[1] + v * f[1] + u * v * g[1] - h[1]
        err = sqrt(rx * rx + ry * ry) + max(0.0, -u, u - 1.0) + max(0.0, -v)
        if best is None or err < best[0]:
            best = (err, u, v)
    return best[1], best[2]


def _solve_u(v, e, f, g, h) -> float:
    # h = u (e + g v) + v f, solved on the better conditioned axis
    dx = e[0] + g[0] * v
    dy = e[1] + g[1] * v
    if abs(dx) >= abs(dy):
        den = dx
        num = h[0] - f[0] * v
    else:
        den = dy
        num = h[1] - f[1] * v
    if abs(den) <= _TINY:
        return 0.5
    return num / den
