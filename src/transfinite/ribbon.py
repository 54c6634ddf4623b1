"""Ribbons: surface strips along the boundary sides.

A ribbon owns one boundary curve and evaluates a strip of surface next
to it at local coordinates ``(s, d)``: ``s`` runs along the curve and
``d`` moves into the interior, with ``eval(s, 0)`` on the curve.
Ribbons know their neighbors through weak references, so the cyclic
neighbor graph never keeps a surface's ribbons alive on its own.
"""

from __future__ import annotations

import weakref
from abc import ABC, abstractmethod

from transfinite.errors import IncompleteLoopError
from transfinite.geom import add, lerp, neg, scale3

__all__ = ['Ribbon', 'LinearRibbon']


class Ribbon(ABC):
    """Abstract boundary ribbon."""

    def __init__(self):
        self._curve = None
        self._prev = None
        self._next = None

    def __repr__(self):
        return '{}(curve={!r})'.format(type(self).__name__, self._curve)

    def set_curve(self, curve) -> None:
        self._curve = curve

    def curve(self):
        return self._curve

    def set_neighbors(self, prev_ribbon, next_ribbon) -> None:
        """Remember the ribbons of the previous and the next side."""
        self._prev = weakref.ref(prev_ribbon)
        self._next = weakref.ref(next_ribbon)

    def prev(self):
        return self._prev() if self._prev is not None else None

    def next(self):
        return self._next() if self._next is not None else None

    @abstractmethod
    def update(self) -> None:
        """Recompute cached data from the curve and the neighbors."""

    @abstractmethod
    def eval(self, s: float, d: float) -> list:
        """Return the ribbon point at local coordinates ``(s, d)``."""


class LinearRibbon(Ribbon):
    """Ribbon linear in ``d``: ``R(s, d) = C(s) + d * D(s)``.

    The cross-boundary derivative ``D`` blends linearly from the reversed
    end tangent of the previous side (at ``s = 0``) to the start tangent
    of the next side (at ``s = 1``), so at each corner the ribbon runs
    along the adjacent boundary curve to first order.
    """

    def __init__(self):
        super().__init__()
        self._start_derivative = None
        self._end_derivative = None

    def update(self) -> None:
        prev_ribbon = self.prev()
        next_ribbon = self.next()
        if self._curve is None or prev_ribbon is None or next_ribbon is None:
            raise IncompleteLoopError('ribbon needs a curve and both neighbors before update')
        self._start_derivative = neg(prev_ribbon.curve().eval_derivatives(1.0, 1)[1])
        self._end_derivative = next_ribbon.curve().eval_derivatives(0.0, 1)[1]

    def cross_derivative(self, s: float) -> list:
        if self._start_derivative is None:
            raise ValueError('ribbon is out of date; call update() first')
        return lerp(self._start_derivative, self._end_derivative, s)

    def eval(self, s: float, d: float) -> list:
        return add(self._curve.eval_at(s), scale3(self.cross_derivative(s), d))
