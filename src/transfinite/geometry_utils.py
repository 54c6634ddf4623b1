"""Triangle helpers shared by the mesh, its octree and the exporters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from transfinite.geom import add, cross, dot, epsilon, mag, scale3, sub

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle representation in XYZ space."""

    normal: Vec3
    v0: Vec3
    v1: Vec3
    v2: Vec3


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point/vector as a tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def triangle_normal(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    n = cross(sub(v1, v0), sub(v2, v0))
    length = mag(n)
    if length <= epsilon * epsilon:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


def triangle_area(v0: Vec3, v1: Vec3, v2: Vec3) -> float:
    """Return the area of a triangle."""

    return 0.5 * mag(cross(sub(v1, v0), sub(v2, v0)))


def closest_point_on_triangle(p, a, b, c) -> list:
    """Return the point of triangle ``abc`` closest to ``p``.

    Voronoi-region walk from Ericson, *Real-Time Collision Detection*,
    section 5.1.5.  Degenerate triangles fall through to the closest
    vertex or edge.
    """

    ab = sub(b, a)
    ac = sub(c, a)
    ap = sub(p, a)
    d1 = dot(ab, ap)
    d2 = dot(ac, ap)
    if d1 <= 0.0 and d2 <= 0.0:
        return add(a, [0.0, 0.0, 0.0])

    bp = sub(p, b)
    d3 = dot(ab, bp)
    d4 = dot(ac, bp)
    if d3 >= 0.0 and d4 <= d3:
        return add(b, [0.0, 0.0, 0.0])

    vc = d1 * d4 - d3 * d2
    if vc <= 0.0 and d1 >= 0.0 and d3 <= 0.0:
        return add(a, scale3(ab, d1 / (d1 - d3)))

    cp = sub(p, c)
    d5 = dot(ab, cp)
    d6 = dot(ac, cp)
    if d6 >= 0.0 and d5 <= d6:
        return add(c, [0.0, 0.0, 0.0])

    vb = d5 * d2 - d1 * d6
    if vb <= 0.0 and d2 >= 0.0 and d6 <= 0.0:
        return add(a, scale3(ac, d2 / (d2 - d6)))

    va = d3 * d6 - d5 * d4
    if va <= 0.0 and (d4 - d3) >= 0.0 and (d5 - d6) >= 0.0:
        return add(b, scale3(sub(c, b), (d4 - d3) / ((d4 - d3) + (d5 - d6))))

    denom = va + vb + vc
    if abs(denom) <= 0.0:
        return add(a, [0.0, 0.0, 0.0])
    v = vb / denom
    w = vc / denom
    return add(a, add(scale3(ab, v), scale3(ac, w)))


def point_triangle_distance(p, a, b, c) -> float:
    """Return the distance from ``p`` to triangle ``abc``."""

    return mag(sub(p, closest_point_on_triangle(p, a, b, c)))


def triangles_from_mesh(mesh: Iterable[Tuple[Vec3, Vec3, Vec3, Vec3]]) -> Iterable[Triangle]:
    """Convert ``(normal, v0, v1, v2)`` tuples into ``Triangle`` instances."""

    for normal, v0, v1, v2 in mesh:
        yield Triangle(normal=normal, v0=v0, v1=v1, v2=v2)


__all__ = [
    "Triangle",
    "Vec3",
    "to_vec3",
    "triangle_normal",
    "triangle_area",
    "closest_point_on_triangle",
    "point_triangle_distance",
    "triangles_from_mesh",
]
