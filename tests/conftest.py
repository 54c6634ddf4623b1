from math import cos, pi, sin

import pytest

from transfinite.curve import bezier_curve, line_curve
from transfinite.geom import point


def square_curves():
    """unit square in the XY plane, counter-clockwise from the origin"""
    return [line_curve(point(0, 0, 0), point(1, 0, 0)),
            line_curve(point(1, 0, 0), point(1, 1, 0)),
            line_curve(point(1, 1, 0), point(0, 1, 0)),
            line_curve(point(0, 1, 0), point(0, 0, 0))]


def curved_triangle_curves():
    """three quadratic Bezier sides bulging out of the XY plane"""
    a = point(0, 0, 0)
    b = point(2, 0, 0)
    c = point(1, 1.7, 0)
    return [bezier_curve([a, point(1, -0.4, 0.3), b]),
            bezier_curve([b, point(1.8, 1.0, 0.5), c]),
            bezier_curve([c, point(0.2, 1.0, -0.2), a])]


def curved_pentagon_curves():
    """five cubic sides around a pentagon with alternating corner heights"""
    corners = [point(2 * cos(2 * pi * k / 5), 2 * sin(2 * pi * k / 5),
                     0.3 * (k % 2))
               for k in range(5)]
    curves = []
    for k in range(5):
        p0 = corners[k]
        p3 = corners[(k + 1) % 5]
        mx = (p0[0] + p3[0]) / 2
        my = (p0[1] + p3[1]) / 2
        p1 = point(p0[0] + (mx - p0[0]) * 0.6 + 0.2 * mx,
                   p0[1] + (my - p0[1]) * 0.6 + 0.2 * my, 0.5)
        p2 = point(p3[0] + (mx - p3[0]) * 0.6 + 0.2 * mx,
                   p3[1] + (my - p3[1]) * 0.6 + 0.2 * my, -0.1)
        curves.append(bezier_curve([p0, p1, p2, p3]))
    return curves


@pytest.fixture
def square():
    return square_curves()


@pytest.fixture
def curved_triangle():
    return curved_triangle_curves()


@pytest.fixture
def curved_pentagon():
    return curved_pentagon_curves()
