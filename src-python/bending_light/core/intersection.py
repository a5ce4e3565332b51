"""
Copyright 2026 bending-light authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .geometry import Point, geometry


@dataclass(frozen=True)
class Intersection:
    """
    Where a ray crosses a prism boundary.

    Attributes:
        point: The crossing point.
        unit_normal: Boundary normal at the crossing, oriented against the
            incoming ray (so that normal . direction <= 0).
    """
    point: Point
    unit_normal: Point


def _facing(normal: Point, direction: Point) -> Point:
    """Flip the normal so that it faces against the ray direction."""
    if normal.dot(direction) > 0:
        return -normal
    return normal


def shape_intersections(shape, origin: Point, direction: Point) -> List[Tuple[float, Intersection]]:
    """
    Boundary hits of a ray against one shape.

    Each straight edge contributes at most one hit; the curved part contributes
    only its nearest forward hit.

    Args:
        shape: A Polygon, CircleShape or SemiCircle.
        origin: Ray origin.
        direction: Unit ray direction.

    Returns:
        List of (distance, Intersection), in edge order followed by the curve.
    """
    hits = []
    for edge in shape.edges():
        hit = geometry.ray_segment_intersection(origin, direction, edge)
        if hit is None:
            continue
        t, point = hit
        normal = (edge.p2 - edge.p1).rotated(math.pi / 2).normalized()
        hits.append((t, Intersection(point, _facing(normal, direction))))

    curve_hits = shape.curve_intersections(origin, direction)
    if curve_hits:
        t, point, normal = curve_hits[0]
        hits.append((t, Intersection(point, _facing(normal.normalized(), direction))))
    return hits


def count_crossings(shape, origin: Point, direction: Point) -> int:
    """Number of times a ray crosses the shape boundary (every curve hit counts)."""
    count = 0
    for edge in shape.edges():
        if geometry.ray_segment_intersection(origin, direction, edge) is not None:
            count += 1
    count += len(shape.curve_intersections(origin, direction))
    return count


def find_nearest_intersection(shapes: Iterable, origin: Point, direction: Point) -> Optional[Intersection]:
    """
    Nearest boundary hit of a ray across all shapes.

    Ties keep the first hit found, so the choice of distance is exact and
    only the ordering among equally distant hits depends on shape order.

    Returns:
        The nearest Intersection, or None when the ray escapes.
    """
    best_t = math.inf
    best = None
    for shape in shapes:
        for t, intersection in shape_intersections(shape, origin, direction):
            if t < best_t:
                best_t = t
                best = intersection
    return best


def is_inside_any(shapes: Iterable, point: Point, direction: Point) -> bool:
    """
    Whether a point lies inside any shape, by crossing parity.

    A ray is cast from `point` along `direction`; an odd number of boundary
    crossings for some shape means the point is inside that shape.
    """
    for shape in shapes:
        if count_crossings(shape, point, direction) % 2 == 1:
            return True
    return False
