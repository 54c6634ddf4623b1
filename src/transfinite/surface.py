"""n-sided transfinite surface interpolation.

A :class:`Surface` interpolates ``n >= 3`` boundary curves forming a
closed loop.  Each side ``i`` has a ribbon ``R_i(s, d)`` (see
:mod:`transfinite.ribbon`); each corner ``i``, between side ``i`` and
side ``next(i)``, has a :class:`CornerData` record with the corner
point, the two boundary tangents pointing away from it and two twist
vectors.  A domain point is mapped to one ``(s, d)`` pair per side by
the parameterization, and a concrete surface blends ribbon values and
corner corrections into a single 3D point:

- :class:`SideBasedSurface`: ``S = sum_i B_i R_i(s_i, d_i)``, with the
  singular side blends of :meth:`Surface.blend_side_singular`.
- :class:`CornerBasedSurface`: ``S = sum_i C_i (R_i + R_{i+1} - Q_i)``,
  with the corner blends of :meth:`Surface.blend_corner` and the corner
  corrections ``Q_i`` of :meth:`Surface.corner_correction`.

Typical use::

    surf = CornerBasedSurface()
    surf.set_curves(curves)
    surf.setup_loop()
    surf.update()
    mesh = surf.eval_mesh(20)

Derived state is refreshed on demand: changing curves marks sides
stale, and evaluation refreshes stale state before reading it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from transfinite.config import SurfaceSettings, load_settings
from transfinite.domain import RegularDomain
from transfinite.errors import DegenerateGeometryError, IncompleteLoopError
from transfinite.geom import (add, clamp, combine, dist, isfinite3, neg, point,
                              scale3, sub, vstr)
from transfinite.mesh import TriMesh
from transfinite.parameterization import BilinearParameterization
from transfinite.ribbon import LinearRibbon, Ribbon

logger = logging.getLogger(__name__)

__all__ = [
    'CornerData',
    'Surface',
    'SideBasedSurface',
    'CornerBasedSurface',
]


@dataclass
class CornerData:
    """Derived data of the corner between side ``i`` and side ``next(i)``.

    ``tangent1`` points back along side ``i``, ``tangent2`` forward along
    side ``next(i)``.  ``twist1`` is estimated from ribbon ``i`` and
    ``twist2`` from ribbon ``next(i)``.
    """

    point: list
    tangent1: list
    tangent2: list
    twist1: list
    twist2: list


class Surface(ABC):
    """Base class of n-sided transfinite surfaces.

    The domain and the parameterization may be shared with other
    objects; the surface only calls their ``update()`` methods and
    queries them.
    """

    def __init__(self, domain=None, parameterization=None,
                 settings: Optional[SurfaceSettings] = None):
        if settings is None:
            settings = load_settings()
        if domain is None:
            domain = RegularDomain()
        if parameterization is None:
            parameterization = BilinearParameterization(domain)
        self._settings = settings
        self._use_gamma = settings.use_gamma
        self._epsilon = settings.epsilon
        self._n = 0
        self._ribbons: List[Optional[Ribbon]] = []
        self._corner_data: List[CornerData] = []
        self._domain = domain
        self._param = parameterization
        self._param_ready = False
        self._loop_ready = False
        self._stale = set()

    def __repr__(self):
        return '{}(n={}, use_gamma={})'.format(type(self).__name__, self._n, self._use_gamma)

    ## properties and indexing
    ## -----------------------

    @property
    def n(self) -> int:
        return self._n

    @property
    def domain(self):
        return self._domain

    @property
    def parameterization(self):
        return self._param

    @property
    def settings(self) -> SurfaceSettings:
        return self._settings

    @property
    def use_gamma(self) -> bool:
        return self._use_gamma

    @property
    def epsilon(self) -> float:
        return self._epsilon

    def set_gamma(self, use_gamma: bool) -> None:
        self._use_gamma = bool(use_gamma)

    def next(self, i: int) -> int:
        return (i + 1) % self._n

    def prev(self, i: int) -> int:
        return (i - 1 + self._n) % self._n

    def ribbon(self, i: int) -> Ribbon:
        return self._ribbons[i]

    def corner(self, i: int) -> CornerData:
        """Return the data of corner ``i``; refreshes stale state first."""
        self._ensure_updated()
        return self._corner_data[i]

    def new_ribbon(self) -> Ribbon:
        """Create the ribbon used for a new side."""
        return LinearRibbon()

    ## boundary loop
    ## -------------

    def set_curve(self, i: int, curve) -> None:
        """Set the curve of side ``i``, growing the loop if needed.

        Sides skipped over when growing stay unset until assigned;
        :meth:`setup_loop` and evaluation reject the loop until then.
        """
        if self._n <= i:
            self._ribbons.extend([None] * (i + 1 - self._n))
            self._n = i + 1
        ribbon = self.new_ribbon()
        ribbon.set_curve(curve)
        self._ribbons[i] = ribbon
        self._domain.set_side(i, curve)
        self._stale.add(i)
        self._loop_ready = False

    def set_curves(self, curves: Sequence) -> None:
        """Replace the whole loop with ``curves``, in side order."""
        self._ribbons = []
        for curve in curves:
            ribbon = self.new_ribbon()
            ribbon.set_curve(curve)
            self._ribbons.append(ribbon)
        self._domain.set_sides(curves)
        self._n = len(self._ribbons)
        self._corner_data = []
        self._stale = set(range(self._n))
        self._loop_ready = False

    def check_loop(self) -> None:
        """Raise :class:`IncompleteLoopError` unless all ``n >= 3`` sides are set."""
        if self._n < 3:
            raise IncompleteLoopError(
                'incomplete boundary loop: {} sides set, at least 3 needed'.format(self._n),
                {'n': self._n})
        missing = [i for i, r in enumerate(self._ribbons)
                   if r is None or r.curve() is None]
        if missing:
            raise IncompleteLoopError(
                'incomplete boundary loop: sides {} are not set'.format(missing),
                {'n': self._n, 'missing': missing})

    def setup_loop(self) -> int:
        """Normalize and orient the curves, and connect the ribbons.

        Every curve is normalized to ``[0, 1]``.  Side 0 is oriented so
        that its end is the endpoint closer to side 1; every later side
        is reversed when its end, rather than its start, is closer to the
        end of the previous side.  Reversed curves are renormalized.
        Running it again on an oriented loop reverses nothing.

        Returns the number of curves reversed.
        """
        self.check_loop()
        n = self._n
        curves = [r.curve() for r in self._ribbons]
        for c in curves:
            c.normalize()

        reversals = 0
        for i in range(n):
            c = curves[i]
            start = c.eval_at(0.0)
            end = c.eval_at(1.0)
            if i == 0:
                n_start = curves[1].eval_at(0.0)
                n_end = curves[1].eval_at(1.0)
                start_to_start = dist(start, n_start)
                start_to_end = dist(start, n_end)
                end_to_start = dist(end, n_start)
                end_to_end = dist(end, n_end)
                flip = (min(start_to_start, start_to_end) <
                        min(end_to_start, end_to_end))
            else:
                p_end = curves[i - 1].eval_at(1.0)
                flip = dist(end, p_end) < dist(start, p_end)
            if flip:
                c.reverse()
                c.normalize()
                reversals += 1
                logger.debug("setup_loop: reversed side %d", i)

        for i in range(n):
            self._ribbons[i].set_neighbors(self._ribbons[self.prev(i)],
                                           self._ribbons[self.next(i)])
        self._loop_ready = True
        self._stale = set(range(n))
        return reversals

    ## lazy update
    ## -----------

    def update(self, i: Optional[int] = None) -> None:
        """Refresh derived state.

        With ``i``, refresh ribbon ``i`` and the two corners touching it;
        without, refresh every ribbon and corner.  The domain is always
        asked to update, and the parameterization is refreshed only when
        the domain reports a change.  A loop not yet set up since the last
        curve change is set up first, and then fully refreshed.
        """
        self.check_loop()
        if not self._loop_ready:
            self.setup_loop()
            i = None
        if self._domain.update() or not self._param_ready:
            self._param.update()
            self._param_ready = True

        if i is None:
            for r in self._ribbons:
                r.update()
            self.update_corners()
            self._stale.clear()
            logger.debug("surface update: %d sides", self._n)
            return

        self._ribbons[i].update()
        if len(self._corner_data) != self._n:
            self.update_corners()
        else:
            self.update_corner(self.prev(i))
            self.update_corner(i)
        self._stale.discard(i)
        logger.debug("surface update: side %d", i)

    def update_corner(self, i: int) -> None:
        """Recompute corner ``i``, shared by side ``i`` and side ``next(i)``."""
        ip = self.next(i)
        der = self._ribbons[i].curve().eval_derivatives(1.0, 1)
        corner_point = der[0]
        tangent1 = neg(der[1])
        der = self._ribbons[ip].curve().eval_derivatives(0.0, 1)
        tangent2 = der[1]
        step = self._settings.twist_step
        twist1 = self._mixed_difference(self._ribbons[i], 1.0, -step, step)
        twist2 = self._mixed_difference(self._ribbons[ip], 0.0, step, step)
        self._corner_data[i] = CornerData(corner_point, tangent1, tangent2,
                                          twist1, twist2)

    def update_corners(self) -> None:
        self._corner_data = [None] * self._n
        for i in range(self._n):
            self.update_corner(i)

    @staticmethod
    def _mixed_difference(ribbon: Ribbon, s: float, ds: float, h: float) -> list:
        # one-sided estimate of the mixed derivative, moving |ds| away from
        # the corner along the side and h into the interior
        a = ribbon.eval(s + ds, h)
        b = ribbon.eval(s + ds, 0.0)
        c = ribbon.eval(s, h)
        d = ribbon.eval(s, 0.0)
        return scale3(add(sub(a, b), sub(d, c)), 1.0 / (h * h))

    def _ensure_updated(self) -> None:
        self.check_loop()
        if self._stale or not self._loop_ready:
            self.update()

    ## blending
    ## --------

    def gamma(self, d: float) -> float:
        if self._use_gamma:
            return d / (2.0 * d + 1.0)
        return d

    def blend_corner(self, sds: Sequence[Sequence[float]]) -> List[float]:
        """Return one weight per corner for the ``(s, d)`` pairs ``sds``.

        On two or more boundaries the weight goes to the corner between
        two boundary sides; on one boundary it is shared by the two
        corners of that side by inverse squared distances of the
        neighboring sides; inside it is ``(d_i d_{i+1})^-2``, normalized.
        """
        n = self._n
        eps = self._epsilon
        close_to_boundary = sum(1 for sd in sds if sd[1] < eps)

        if close_to_boundary > 0:
            blf = []
            for i in range(n):
                ip = self.next(i)
                if close_to_boundary > 1:
                    blf.append(1.0 if sds[i][1] < eps and sds[ip][1] < eps else 0.0)
                elif sds[i][1] < eps:
                    tmp = sds[ip][1] ** -2
                    blf.append(tmp / (tmp + sds[self.prev(i)][1] ** -2))
                elif sds[ip][1] < eps:
                    tmp = sds[i][1] ** -2
                    blf.append(tmp / (tmp + sds[self.next(ip)][1] ** -2))
                else:
                    blf.append(0.0)
            return blf

        blf = [(sds[i][1] * sds[self.next(i)][1]) ** -2 for i in range(n)]
        denominator = sum(blf)
        return [x / denominator for x in blf]

    def blend_side_singular(self, sds: Sequence[Sequence[float]]) -> List[float]:
        """Return one weight per side for the ``(s, d)`` pairs ``sds``.

        Sides on the boundary share the weight evenly; inside, the weight
        of side ``i`` is ``d_i^-2``, normalized.
        """
        eps = self._epsilon
        close_to_boundary = sum(1 for sd in sds if sd[1] < eps)

        if close_to_boundary > 0:
            blend_val = 1.0 / close_to_boundary
            return [blend_val if sd[1] < eps else 0.0 for sd in sds]

        blf = [sd[1] ** -2 for sd in sds]
        denominator = sum(blf)
        return [x / denominator for x in blf]

    @staticmethod
    def blend_hermite(x: float) -> float:
        x2 = x * x
        return 2.0 * x * x2 - 3.0 * x2 + 1.0

    def rational_twist(self, u: float, v: float, f, g) -> list:
        """Average the twists ``f`` and ``g`` with weights ``u`` and ``v``."""
        if abs(u + v) < self._epsilon:
            return point(0, 0, 0)
        return scale3(add(scale3(f, u), scale3(g, v)), 1.0 / (u + v))

    def corner_correction(self, i: int, si: float, si1: float) -> list:
        """Corner patch of corner ``i``; ``si`` and ``si1`` are 0 at the corner."""
        self._ensure_updated()
        return self._corner_correction(i, si, si1)

    def _corner_correction(self, i, si, si1):
        si = clamp(si)
        si1 = clamp(si1)
        c = self._corner_data[i]
        gi = self.gamma(si)
        gi1 = self.gamma(si1)
        twist = self.rational_twist(si, si1, c.twist1, c.twist2)
        return combine([c.point, c.tangent1, c.tangent2, twist],
                       [1.0, gi, gi1, gi * gi1])

    def side_interpolant(self, i: int, si: float, di: float) -> list:
        self._ensure_updated()
        return self._side_interpolant(i, si, di)

    def _side_interpolant(self, i, si, di):
        si = clamp(si)
        di = max(self.gamma(di), 0.0)
        return self._ribbons[i].eval(si, di)

    ## evaluation
    ## ----------

    @abstractmethod
    def blend(self, sds: Sequence[Sequence[float]]) -> list:
        """Combine ribbons and corner corrections at the ``(s, d)`` pairs ``sds``."""

    def eval(self, uv) -> list:
        """Return the surface point at domain point ``uv``."""
        self._ensure_updated()
        return self._eval(uv)

    def _eval(self, uv) -> list:
        sds = self._param.map_to_ribbons(uv)
        p = self.blend(sds)
        if not isfinite3(p):
            raise DegenerateGeometryError(
                'non-finite surface point {} at domain point {}'.format(vstr(p), vstr(uv)),
                {'uv': uv, 'sds': sds})
        return p

    def eval_mesh(self, resolution: Optional[int] = None) -> TriMesh:
        """Sample the surface over the domain tessellation at ``resolution``.

        The returned mesh has the domain's topology and one evaluated
        point per domain parameter, in the same order.
        """
        if resolution is None:
            resolution = self._settings.resolution
        self._ensure_updated()
        mesh = self._domain.mesh_topology(resolution)
        uvs = self._domain.parameters(resolution)
        points = [self._eval(uv) for uv in uvs]
        mesh.set_points(points)
        logger.debug("eval_mesh: %d points at resolution %d", len(points), resolution)
        return mesh


class SideBasedSurface(Surface):
    """Weighted sum of the side interpolants."""

    def blend(self, sds):
        weights = self.blend_side_singular(sds)
        terms = []
        used = []
        for i, w in enumerate(weights):
            if w == 0.0:
                continue
            terms.append(self._side_interpolant(i, sds[i][0], sds[i][1]))
            used.append(w)
        return combine(terms, used)


class CornerBasedSurface(Surface):
    """Weighted sum of corner interpolants.

    The corner interpolant of corner ``i`` adds the side interpolants of
    its two sides and subtracts the corner correction, which both of them
    contain.  It reproduces both sides exactly.
    """

    def blend(self, sds):
        weights = self.blend_corner(sds)
        terms = []
        used = []
        for i, w in enumerate(weights):
            if w == 0.0:
                continue
            ip = self.next(i)
            si, di = sds[i][0], sds[i][1]
            sn, dn = sds[ip][0], sds[ip][1]
            term = sub(add(self._side_interpolant(i, si, di),
                           self._side_interpolant(ip, sn, dn)),
                       self._corner_correction(i, 1.0 - si, sn))
            terms.append(term)
            used.append(w)
        return combine(terms, used)
