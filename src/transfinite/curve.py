"""Boundary curve capability for transfinite surfaces.

:class:`Curve` is the abstract capability the surface core consumes:
position and derivative queries, domain normalization, and orientation
reversal.  :class:`BSplineCurve` is a (optionally rational) B-spline
implementation of it, evaluated with the knot-span and basis-derivative
recurrences of Piegl and Tiller, *The NURBS Book*.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from math import comb
from typing import List, Optional, Sequence, Tuple

from transfinite.errors import DegenerateGeometryError
from transfinite.geom import clamp, point

__all__ = [
    'Curve',
    'BSplineCurve',
    'open_uniform_knots',
    'line_curve',
    'bezier_curve',
]


class Curve(ABC):
    """Abstract boundary curve.

    Parameters of :meth:`eval_at` and :meth:`eval_derivatives` are native
    curve parameters in :meth:`domain`; after :meth:`normalize` the domain
    is ``(0.0, 1.0)``.  Implementations mutate in place, since the same
    curve object is shared by a surface, its ribbons and its domain.
    """

    @abstractmethod
    def domain(self) -> Tuple[float, float]:
        """Return the ``(start, end)`` parameter range."""

    @abstractmethod
    def eval_at(self, u: float) -> list:
        """Return the point at parameter ``u``."""

    @abstractmethod
    def eval_derivatives(self, u: float, order: int) -> List[list]:
        """Return ``[point, d1, ..., d_order]`` at parameter ``u``."""

    @abstractmethod
    def normalize(self) -> None:
        """Reparameterize the curve onto ``[0, 1]``."""

    @abstractmethod
    def reverse(self) -> None:
        """Reverse the orientation of the curve, keeping its domain."""

    def sample(self, count: int = 32) -> List[list]:
        """Return ``count`` points evenly spaced in parameter."""
        if count < 2:
            raise ValueError('count must be >= 2')
        start, end = self.domain()
        return [self.eval_at(start + (end - start) * i / (count - 1))
                for i in range(count)]


def open_uniform_knots(count: int, degree: int) -> List[float]:
    """Return the clamped, uniform knot vector on ``[0, 1]``."""
    spans = count - degree
    if spans < 1:
        raise ValueError('need at least degree + 1 control points')
    inner = [i / spans for i in range(1, spans)]
    return [0.0] * (degree + 1) + inner + [1.0] * (degree + 1)


class BSplineCurve(Curve):
    """B-spline curve with optional weights (a NURBS curve when given)."""

    def __init__(self, control_points: Sequence[Sequence[float]],
                 degree: Optional[int] = None,
                 knots: Optional[Sequence[float]] = None,
                 weights: Optional[Sequence[float]] = None):
        ctrl = [point(p) for p in control_points]
        if len(ctrl) < 2:
            raise ValueError('a curve needs at least 2 control points')
        if degree is None:
            degree = min(3, len(ctrl) - 1)
        degree = int(degree)
        if degree < 1 or degree >= len(ctrl):
            raise ValueError(f'bad degree {degree} for {len(ctrl)} control points')
        if knots is None:
            knots = open_uniform_knots(len(ctrl), degree)
        knots = [float(k) for k in knots]
        if len(knots) != len(ctrl) + degree + 1:
            raise ValueError('knot vector length must be len(control_points) + degree + 1')
        if any(b < a for a, b in zip(knots, knots[1:])):
            raise ValueError('knot vector must be non-decreasing')
        if weights is None:
            weights = [1.0] * len(ctrl)
        weights = [float(w) for w in weights]
        if len(weights) != len(ctrl):
            raise ValueError('need one weight per control point')
        if any(w <= 0.0 for w in weights):
            raise ValueError('weights must be positive')

        self._ctrl = ctrl
        self._degree = degree
        self._knots = knots
        self._weights = weights

    def __repr__(self):
        return 'BSplineCurve(degree={}, control_points={}, knots={})'.format(
            self._degree, [p[:3] for p in self._ctrl], self._knots)

    @property
    def degree(self) -> int:
        return self._degree

    @property
    def knots(self) -> List[float]:
        return list(self._knots)

    @property
    def weights(self) -> List[float]:
        return list(self._weights)

    @property
    def control_points(self) -> List[list]:
        return [point(p) for p in self._ctrl]

    @property
    def rational(self) -> bool:
        return any(w != 1.0 for w in self._weights)

    def domain(self) -> Tuple[float, float]:
        return self._knots[self._degree], self._knots[-self._degree - 1]

    def eval_at(self, u: float) -> list:
        return self.eval_derivatives(u, 0)[0]

    def eval_derivatives(self, u: float, order: int) -> List[list]:
        if order < 0:
            raise ValueError('derivative order must be >= 0')
        start, end = self.domain()
        u = clamp(float(u), start, end)
        p = self._degree
        span = _find_span(len(self._ctrl) - 1, p, u, self._knots)
        du = min(order, p)
        nders = _ders_basis_funs(span, u, p, du, self._knots)

        # derivatives of the weighted (homogeneous) curve
        aders = []
        wders = []
        for k in range(du + 1):
            x = y = z = w = 0.0
            for j in range(p + 1):
                idx = span - p + j
                b = nders[k][j] * self._weights[idx]
                c = self._ctrl[idx]
                x += b * c[0]
                y += b * c[1]
                z += b * c[2]
                w += b
            aders.append([x, y, z])
            wders.append(w)
        for _ in range(du + 1, order + 1):
            aders.append([0.0, 0.0, 0.0])
            wders.append(0.0)

        # quotient rule, NURBS Book A4.2
        ck = []
        for k in range(order + 1):
            v = list(aders[k])
            for i in range(1, k + 1):
                f = comb(k, i) * wders[i]
                if f != 0.0:
                    prev = ck[k - i]
                    v[0] -= f * prev[0]
                    v[1] -= f * prev[1]
                    v[2] -= f * prev[2]
            w0 = wders[0]
            ck.append([v[0] / w0, v[1] / w0, v[2] / w0, 1.0])
        return ck

    def normalize(self) -> None:
        start, end = self.domain()
        length = end - start
        if length <= 0.0:
            raise DegenerateGeometryError('curve has an empty parameter domain',
                                          {'domain': (start, end)})
        self._knots = [(k - start) / length for k in self._knots]

    def reverse(self) -> None:
        start, end = self.domain()
        self._knots = [start + end - k for k in reversed(self._knots)]
        self._ctrl.reverse()
        self._weights.reverse()


def _find_span(n: int, p: int, u: float, knots: Sequence[float]) -> int:
    """Return the knot span index containing ``u`` (NURBS Book A2.1)."""
    if u >= knots[n + 1]:
        return n
    if u <= knots[p]:
        return p
    low = p
    high = n + 1
    mid = (low + high) // 2
    while u < knots[mid] or u >= knots[mid + 1]:
        if u < knots[mid]:
            high = mid
        else:
            low = mid
        mid = (low + high) // 2
    return mid


def _ders_basis_funs(i: int, u: float, p: int, n: int,
                     knots: Sequence[float]) -> List[List[float]]:
    """Nonzero basis functions and their first ``n`` derivatives (A2.3)."""
    ndu = [[0.0] * (p + 1) for _ in range(p + 1)]
    ndu[0][0] = 1.0
    left = [0.0] * (p + 1)
    right = [0.0] * (p + 1)
    for j in range(1, p + 1):
        left[j] = u - knots[i + 1 - j]
        right[j] = knots[i + j] - u
        saved = 0.0
        for r in range(j):
            ndu[j][r] = right[r + 1] + left[j - r]
            temp = ndu[r][j - 1] / ndu[j][r]
            ndu[r][j] = saved + right[r + 1] * temp
            saved = left[j - r] * temp
        ndu[j][j] = saved

    ders = [[0.0] * (p + 1) for _ in range(n + 1)]
    for j in range(p + 1):
        ders[0][j] = ndu[j][p]

    a = [[0.0] * (p + 1) for _ in range(2)]
    for r in range(p + 1):
        s1, s2 = 0, 1
        a[0][0] = 1.0
        for k in range(1, n + 1):
            d = 0.0
            rk = r - k
            pk = p - k
            if r >= k:
                a[s2][0] = a[s1][0] / ndu[pk + 1][rk]
                d = a[s2][0] * ndu[rk][pk]
            j1 = 1 if rk >= -1 else -rk
            j2 = k - 1 if r - 1 <= pk else p - r
            for j in range(j1, j2 + 1):
                a[s2][j] = (a[s1][j] - a[s1][j - 1]) / ndu[pk + 1][rk + j]
                d += a[s2][j] * ndu[rk + j][pk]
            if r <= pk:
                a[s2][k] = -a[s1][k - 1] / ndu[pk + 1][r]
                d += a[s2][k] * ndu[r][pk]
            ders[k][r] = d
            s1, s2 = s2, s1

    factor = p
    for k in range(1, n + 1):
        for j in range(p + 1):
            ders[k][j] *= factor
        factor *= p - k
    return ders


def line_curve(start, end) -> BSplineCurve:
    """Return the straight segment from ``start`` to ``end``."""
    return BSplineCurve([start, end], degree=1)


def bezier_curve(control_points) -> BSplineCurve:
    """Return the Bezier curve of ``control_points`` (degree = count - 1)."""
    ctrl = list(control_points)
    return BSplineCurve(ctrl, degree=len(ctrl) - 1)
