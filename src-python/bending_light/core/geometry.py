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
from typing import List, Optional, Tuple

from shapely.geometry import Point as ShapelyPoint, LineString

from .constants import GEOMETRY_EPSILON


@dataclass(frozen=True)
class Point:
    """
    A point (or free vector) in 2D model space.

    Points are immutable: every operation returns a new instance.
    Can be converted to/from Shapely Point objects.
    """
    x: float
    y: float

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> 'Point':
        return Point(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> 'Point':
        return Point(-self.x, -self.y)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def angle(self) -> float:
        """Angle of the vector measured counterclockwise from +x, in radians."""
        return math.atan2(self.y, self.x)

    def dot(self, other: 'Point') -> float:
        return self.x * other.x + self.y * other.y

    def normalized(self) -> 'Point':
        """
        Unit vector in the same direction.

        The zero vector has no direction and is returned unchanged so that
        callers can detect it with `magnitude` instead of catching errors.
        """
        length = self.magnitude
        if length < GEOMETRY_EPSILON * GEOMETRY_EPSILON:
            return Point(0.0, 0.0)
        return Point(self.x / length, self.y / length)

    def rotated(self, angle: float) -> 'Point':
        c = math.cos(angle)
        s = math.sin(angle)
        return Point(self.x * c - self.y * s, self.x * s + self.y * c)

    def distance(self, other: 'Point') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def distance_squared(self, other: 'Point') -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @classmethod
    def polar(cls, magnitude: float, angle: float) -> 'Point':
        """Create a vector from its length and angle."""
        return cls(magnitude * math.cos(angle), magnitude * math.sin(angle))

    def to_shapely(self) -> ShapelyPoint:
        """Convert to Shapely Point."""
        return ShapelyPoint(self.x, self.y)

    @classmethod
    def from_shapely(cls, sp: ShapelyPoint) -> 'Point':
        """Create Point from Shapely Point."""
        return cls(sp.x, sp.y)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class Line:
    """
    A line in 2D space, defined by two points.
    Can represent a line, ray, or segment depending on context.
    - As a ray: p1 is the starting point and p2 is another point on the ray.
    - As a segment: p1 and p2 are the two endpoints.
    """
    p1: Point
    p2: Point

    def to_shapely(self) -> LineString:
        """Convert to Shapely LineString."""
        return LineString([self.p1.to_tuple(), self.p2.to_tuple()])

    @classmethod
    def from_shapely(cls, sl: LineString) -> 'Line':
        """Create Line from Shapely LineString."""
        coords = list(sl.coords)
        return cls(Point(*coords[0]), Point(*coords[1]))


class Geometry:
    """
    Static geometric helpers shared by shapes, rays and sensors.

    Ray intersection routines work in parametric form: a ray is an origin and a
    unit direction, and hits are returned as the distance `t` along the ray
    together with the hit point. Only forward hits (t > 0) are reported.
    """

    @staticmethod
    def dot(p1: Point, p2: Point) -> float:
        return p1.x * p2.x + p1.y * p2.y

    @staticmethod
    def cross(p1: Point, p2: Point) -> float:
        """Cross product (z-component in 2D)."""
        return p1.x * p2.y - p1.y * p2.x

    @staticmethod
    def midpoint(p1: Point, p2: Point) -> Point:
        return Point((p1.x + p2.x) * 0.5, (p1.y + p2.y) * 0.5)

    @staticmethod
    def ray_segment_intersection(
        origin: Point, direction: Point, segment: Line
    ) -> Optional[Tuple[float, Point]]:
        """
        Intersect a ray with a line segment.

        Args:
            origin: Start of the ray.
            direction: Direction of the ray (need not be normalized, `t` is
                measured in units of its length).
            segment: The segment, endpoints included.

        Returns:
            (t, point) for a forward hit, or None. Parallel and collinear
            configurations return None.
        """
        edge = segment.p2 - segment.p1
        denominator = Geometry.cross(direction, edge)
        if abs(denominator) < GEOMETRY_EPSILON * max(direction.magnitude * edge.magnitude, 1e-300):
            return None

        offset = segment.p1 - origin
        t = Geometry.cross(offset, edge) / denominator
        s = Geometry.cross(offset, direction) / denominator
        if t <= 0 or s < 0 or s > 1:
            return None
        return t, origin + direction * t

    @staticmethod
    def ray_circle_intersections(
        origin: Point, direction: Point, center: Point, radius: float
    ) -> List[Tuple[float, Point]]:
        """
        Intersect a ray with a full circle.

        Args:
            origin: Start of the ray.
            direction: Unit direction of the ray.
            center: Circle center.
            radius: Circle radius. Zero or negative radii never intersect.

        Returns:
            Forward hits sorted by increasing t (0, 1 or 2 entries).
        """
        if radius <= 0:
            return []

        # Project circle center onto the ray line
        to_center = center - origin
        cu = Geometry.dot(to_center, direction)
        closest = origin + direction * cu

        dist_sq = radius * radius - closest.distance_squared(center)
        if dist_sq < 0:
            return []

        d = math.sqrt(dist_sq)
        hits = []
        for t in (cu - d, cu + d):
            if t > 0:
                hits.append((t, origin + direction * t))
        return hits

    @staticmethod
    def closest_point_on_segment(point: Point, segment: Line) -> Point:
        """Closest point to `point` on the segment (clamped to its endpoints)."""
        edge = segment.p2 - segment.p1
        length_sq = edge.dot(edge)
        if length_sq == 0:
            return segment.p1
        t = (point - segment.p1).dot(edge) / length_sq
        t = max(0.0, min(1.0, t))
        return segment.p1 + edge * t

    @staticmethod
    def rotate_about(point: Point, angle: float, pivot: Point) -> Point:
        """Rotate `point` by `angle` radians around `pivot`."""
        return (point - pivot).rotated(angle) + pivot

    @staticmethod
    def signed_area(points: List[Point]) -> float:
        """Shoelace signed area (positive for counterclockwise vertices)."""
        area = 0.0
        n = len(points)
        for i in range(n):
            j = (i + 1) % n
            area += points[i].x * points[j].y - points[j].x * points[i].y
        return area * 0.5

    @staticmethod
    def centroid(points: List[Point]) -> Point:
        """Area centroid of a simple polygon."""
        area = Geometry.signed_area(points)
        if abs(area) < GEOMETRY_EPSILON * GEOMETRY_EPSILON:
            n = len(points)
            return Point(sum(p.x for p in points) / n, sum(p.y for p in points) / n)
        cx = 0.0
        cy = 0.0
        n = len(points)
        for i in range(n):
            j = (i + 1) % n
            f = points[i].x * points[j].y - points[j].x * points[i].y
            cx += (points[i].x + points[j].x) * f
            cy += (points[i].y + points[j].y) * f
        factor = 1.0 / (6.0 * area)
        return Point(cx * factor, cy * factor)


# Create a singleton instance for convenience
geometry = Geometry()
