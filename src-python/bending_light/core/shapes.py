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

Immutable prism shapes.

Three shape families are supported:

- Polygon: straight edges. When built with a non-zero radius it is the
  diverging lens, a rectangle whose edge from the last vertex back to the
  first is replaced by a concave half-circle.
- CircleShape: a full circle.
- SemiCircle: a chord plus a half-circle arc.

Shapes never change after construction. Moving or rotating a prism creates a
new instance through translated_instance() / rotated_instance().

Exact containment is computed analytically (shapely is used for the straight
polygon part). to_shapely() returns a polygonal approximation that is meant
for area reports and SVG export, not for the ray physics.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry.base import BaseGeometry

from .geometry import Point, Line, geometry

# Segments per quarter circle when approximating arcs for shapely
ARC_QUAD_SEGS = 64


@dataclass(frozen=True)
class Arc:
    """
    A half-circle arc.

    Attributes:
        center: Center of the circle.
        radius: Radius of the circle.
        bulge: Unit vector from the center toward the middle of the arc. The
            arc is the half of the circle on that side of the chord.
    """
    center: Point
    radius: float
    bulge: Point

    def contains_circle_point(self, point: Point) -> bool:
        """Whether a point already known to be on the circle lies on this arc."""
        return (point - self.center).dot(self.bulge) >= 0

    def intersections(self, origin: Point, direction: Point) -> List[Tuple[float, Point]]:
        """Forward hits of a ray with the arc, sorted by distance."""
        hits = geometry.ray_circle_intersections(origin, direction, self.center, self.radius)
        return [(t, p) for t, p in hits if self.contains_circle_point(p)]

    def intersections_with_normals(self, origin: Point, direction: Point) -> List[Tuple[float, Point, Point]]:
        """Forward hits as (t, point, outward unit normal)."""
        return [(t, p, (p - self.center) * (1.0 / self.radius)) for t, p in self.intersections(origin, direction)]

    def to_shapely(self) -> BaseGeometry:
        """The half-disk bounded by the arc and its chord."""
        disk = self.center.to_shapely().buffer(self.radius, quad_segs=ARC_QUAD_SEGS)
        side = self.bulge.rotated(math.pi / 2) * self.radius
        reach = self.bulge * (self.radius * 2)
        half_plane = ShapelyPolygon([
            (self.center + side * 2).to_tuple(),
            (self.center - side * 2).to_tuple(),
            (self.center - side * 2 + reach).to_tuple(),
            (self.center + side * 2 + reach).to_tuple(),
        ])
        return disk.intersection(half_plane)


def _arc_from_chord(start: Point, end: Point, radius: float) -> Arc:
    """Half-circle arc over the chord start->end, bulging to the left of end->start."""
    return Arc(geometry.midpoint(start, end), radius, (start - end).rotated(math.pi / 2).normalized())


class Polygon:
    """
    A polygonal prism outline.

    Attributes:
        points (tuple of Point): Vertices in order.
        reference_point_index (int): Vertex used as the rotation handle.
        radius (float): 0 for a plain polygon. Non-zero for the diverging lens,
            in which case exactly four points are required and the closing edge
            (last vertex back to the first) is a concave half-circle of this
            radius centered on that edge's midpoint.
        centroid (Point): Area centroid of the vertices.
    """

    def __init__(self, points: Sequence[Point], reference_point_index: int = 0, radius: float = 0.0):
        points = tuple(points)
        if len(points) < 3:
            raise ValueError(f"Polygon needs at least 3 vertices, got {len(points)}")
        if radius != 0 and len(points) != 4:
            raise ValueError(
                f"A polygon with a curved edge needs exactly 4 vertices, got {len(points)}"
            )
        if radius < 0:
            raise ValueError(f"Polygon radius must be >= 0, got {radius}")
        if not 0 <= reference_point_index < len(points):
            raise ValueError(
                f"reference_point_index {reference_point_index} out of range for "
                f"{len(points)} vertices"
            )
        self.points: Tuple[Point, ...] = points
        self.reference_point_index = reference_point_index
        self.radius = radius
        self.centroid = geometry.centroid(list(points))
        self._vertex_polygon = ShapelyPolygon([p.to_tuple() for p in points])

    @property
    def has_arc(self) -> bool:
        return self.radius != 0

    def edges(self) -> List[Line]:
        """Straight edges. The closing edge is omitted when it is an arc."""
        segments = [Line(self.points[i], self.points[i + 1]) for i in range(len(self.points) - 1)]
        if not self.has_arc:
            segments.append(Line(self.points[-1], self.points[0]))
        return segments

    def arc(self) -> Optional[Arc]:
        if not self.has_arc:
            return None
        return _arc_from_chord(self.points[-1], self.points[0], self.radius)

    def curve_intersections(self, origin: Point, direction: Point) -> List[Tuple[float, Point, Point]]:
        if not self.has_arc:
            return []
        return self.arc().intersections_with_normals(origin, direction)

    def translated_instance(self, dx: float, dy: float) -> 'Polygon':
        delta = Point(dx, dy)
        return Polygon([p + delta for p in self.points], self.reference_point_index, self.radius)

    def rotated_instance(self, angle: float, pivot: Point) -> 'Polygon':
        return Polygon(
            [geometry.rotate_about(p, angle, pivot) for p in self.points],
            self.reference_point_index,
            self.radius,
        )

    def rotation_center(self) -> Point:
        return self.centroid

    def reference_point(self) -> Optional[Point]:
        return self.points[self.reference_point_index]

    def contains_point(self, point: Point) -> bool:
        """Whether the point is inside or on the boundary."""
        if not self._vertex_polygon.covers(point.to_shapely()):
            return False
        if self.has_arc:
            arc = self.arc()
            # The arc bites a half-disk out of the rectangle
            return point.distance(arc.center) >= arc.radius
        return True

    @property
    def area(self) -> float:
        area = abs(geometry.signed_area(list(self.points)))
        if self.has_arc:
            area -= math.pi * self.radius * self.radius / 2
        return area

    def to_shapely(self) -> BaseGeometry:
        if self.has_arc:
            return self._vertex_polygon.difference(self.arc().to_shapely())
        return self._vertex_polygon

    def __repr__(self) -> str:
        return f"Polygon(n_points={len(self.points)}, radius={self.radius})"


class CircleShape:
    """
    A circular prism outline.

    Attributes:
        center (Point): Center of the circle.
        radius (float): Radius; zero is allowed and intersects nothing.
    """

    def __init__(self, center: Point, radius: float):
        if not math.isfinite(radius) or radius < 0:
            raise ValueError(f"Circle radius must be a finite number >= 0, got {radius}")
        self.center = center
        self.radius = radius

    @property
    def centroid(self) -> Point:
        return self.center

    def edges(self) -> List[Line]:
        return []

    def arc(self) -> Optional[Arc]:
        return None

    def translated_instance(self, dx: float, dy: float) -> 'CircleShape':
        return CircleShape(self.center + Point(dx, dy), self.radius)

    def rotated_instance(self, angle: float, pivot: Point) -> 'CircleShape':
        # Rotating a circle about its own center changes nothing
        return self

    def rotation_center(self) -> Point:
        return self.center

    def reference_point(self) -> Optional[Point]:
        return None

    def contains_point(self, point: Point) -> bool:
        return point.distance(self.center) <= self.radius

    def curve_intersections(self, origin: Point, direction: Point) -> List[Tuple[float, Point, Point]]:
        hits = geometry.ray_circle_intersections(origin, direction, self.center, self.radius)
        return [(t, p, (p - self.center) * (1.0 / self.radius)) for t, p in hits]

    @property
    def area(self) -> float:
        return math.pi * self.radius * self.radius

    def to_shapely(self) -> BaseGeometry:
        return self.center.to_shapely().buffer(self.radius, quad_segs=ARC_QUAD_SEGS)

    def __repr__(self) -> str:
        return f"CircleShape(center=({self.center.x:.3g}, {self.center.y:.3g}), radius={self.radius:.3g})"


class SemiCircle:
    """
    A half-disk outline: the chord between two points plus a half-circle arc.

    The arc lies to the left of the direction points[1] -> points[0].

    Attributes:
        points (tuple of Point): The two chord endpoints.
        reference_point_index (int): Point used as the rotation handle.
        radius (float): Radius of the arc.
        center (Point): Midpoint of the chord.
    """

    def __init__(self, points: Sequence[Point], radius: float, reference_point_index: int = 1):
        points = tuple(points)
        if len(points) != 2:
            raise ValueError(f"SemiCircle needs exactly 2 chord points, got {len(points)}")
        if not math.isfinite(radius) or radius < 0:
            raise ValueError(f"SemiCircle radius must be a finite number >= 0, got {radius}")
        self.points: Tuple[Point, ...] = points
        self.radius = radius
        self.reference_point_index = reference_point_index
        self.center = geometry.midpoint(points[0], points[1])

    @property
    def centroid(self) -> Point:
        return self.center

    def edges(self) -> List[Line]:
        return [Line(self.points[0], self.points[1])]

    def arc(self) -> Optional[Arc]:
        return _arc_from_chord(self.points[0], self.points[1], self.radius)

    def curve_intersections(self, origin: Point, direction: Point) -> List[Tuple[float, Point, Point]]:
        return self.arc().intersections_with_normals(origin, direction)

    def translated_instance(self, dx: float, dy: float) -> 'SemiCircle':
        delta = Point(dx, dy)
        return SemiCircle([p + delta for p in self.points], self.radius, self.reference_point_index)

    def rotated_instance(self, angle: float, pivot: Point) -> 'SemiCircle':
        return SemiCircle(
            [geometry.rotate_about(p, angle, pivot) for p in self.points],
            self.radius,
            self.reference_point_index,
        )

    def rotation_center(self) -> Point:
        return self.center

    def reference_point(self) -> Optional[Point]:
        return self.points[self.reference_point_index]

    def contains_point(self, point: Point) -> bool:
        if point.distance(self.center) > self.radius:
            return False
        return self.arc().contains_circle_point(point)

    @property
    def area(self) -> float:
        return math.pi * self.radius * self.radius / 2

    def to_shapely(self) -> BaseGeometry:
        return self.arc().to_shapely()

    def __repr__(self) -> str:
        return f"SemiCircle(center=({self.center.x:.3g}, {self.center.y:.3g}), radius={self.radius:.3g})"


PRISM_SHAPE_TYPES = (Polygon, CircleShape, SemiCircle)
