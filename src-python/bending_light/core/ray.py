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
from enum import Enum
from functools import cached_property
from typing import List, Optional, Tuple

from shapely import make_valid
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry.base import BaseGeometry

from .constants import RAY_CONTAINS_TOLERANCE_SQUARED, SPEED_OF_LIGHT
from .geometry import Point, Line, geometry


class RayRole(Enum):
    """Where a light ray came from."""
    INCIDENT = 'incident'
    REFLECTED = 'reflected'
    TRANSMITTED = 'transmitted'
    PRISM = 'prism'


@dataclass(frozen=True)
class ColoredRay:
    """
    A ray still being traced through the prisms.

    Attributes:
        tail: Start point.
        direction: Unit direction.
        power: Power fraction carried by the ray (1.0 at the laser).
        wavelength: Vacuum wavelength in meters.
        medium_index_of_refraction: Index of the medium the ray travels in.
        frequency: Frequency in Hz, preserved across interfaces.
    """
    tail: Point
    direction: Point
    power: float
    wavelength: float
    medium_index_of_refraction: float
    frequency: float

    @property
    def base_wavelength(self) -> float:
        """Vacuum wavelength recovered from the frequency."""
        return SPEED_OF_LIGHT / self.frequency


def _finite(point: Point) -> Point:
    if point.is_finite():
        return point
    return Point(
        point.x if math.isfinite(point.x) else 0.0,
        point.y if math.isfinite(point.y) else 0.0,
    )


@dataclass(frozen=True)
class LightRay:
    """
    One straight beam segment inside a single medium.

    Attributes:
        tail: Start point. Direction runs tail -> tip.
        tip: End point.
        index_of_refraction: Index of the medium the segment lies in.
        wavelength: Wavelength inside the medium, in meters.
        wavelength_in_vacuum: Vacuum wavelength in nanometers.
        power_fraction: Power relative to the laser output (0..1).
        color: Display color as (r, g, b).
        wave_width: Width of the beam when drawn as a wave.
        trapezium_width: Width of the wave where it meets the interface.
        num_wavelengths_phase_offset: Whole wavelengths already travelled
            before the tail.
        role: Origin of the segment.
        extend: Whether the wave outline is squared off at the tip.
        extend_backwards: Whether the wave outline is squared off at the tail.
        wave_mode: Whether the laser was in wave view when the segment was
            built. Only then does the segment have a wave outline.
    """
    tail: Point
    tip: Point
    index_of_refraction: float
    wavelength: float
    wavelength_in_vacuum: float
    power_fraction: float
    color: Tuple[int, int, int]
    wave_width: float
    trapezium_width: float
    num_wavelengths_phase_offset: float = 0.0
    role: RayRole = RayRole.PRISM
    extend: bool = False
    extend_backwards: bool = False
    wave_mode: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'tail', _finite(self.tail))
        object.__setattr__(self, 'tip', _finite(self.tip))

    # =========================================================================
    # Geometry
    # =========================================================================

    def to_vector(self) -> Point:
        return self.tip - self.tail

    def to_line(self) -> Line:
        return Line(self.tail, self.tip)

    @property
    def length(self) -> float:
        return self.tip.distance(self.tail)

    @property
    def angle(self) -> float:
        return math.atan2(self.tip.y - self.tail.y, self.tip.x - self.tail.x)

    @property
    def unit_vector(self) -> Point:
        return self.to_vector().normalized()

    # =========================================================================
    # Wave physics
    # =========================================================================

    @property
    def speed(self) -> float:
        return SPEED_OF_LIGHT / self.index_of_refraction

    @property
    def velocity_vector(self) -> Point:
        return self.unit_vector * self.speed

    @property
    def frequency(self) -> float:
        return self.speed / self.wavelength

    @property
    def angular_frequency(self) -> float:
        return self.frequency * math.pi * 2

    @property
    def number_of_wavelengths(self) -> float:
        return self.length / self.wavelength

    def cos_arg(self, distance_along_ray: float, time: float = 0.0) -> float:
        """
        Argument of the wave cosine, k*x - w*t + phase.

        Args:
            distance_along_ray: Distance of the sample point from the tail.
            time: Simulation time in seconds.
        """
        k = 2 * math.pi / self.wavelength
        return (k * distance_along_ray - self.angular_frequency * time
                + 2 * math.pi * self.num_wavelengths_phase_offset)

    # =========================================================================
    # Wave outline and containment
    # =========================================================================

    @cached_property
    def wave_outline(self) -> Optional[BaseGeometry]:
        """
        Quadrilateral covered by the beam in wave view, or None in ray view.

        Ends that are extended are cut parallel to the interface (angle pi/2)
        with the trapezium width; other ends are cut square to the beam with
        the wave width.
        """
        if not self.wave_mode:
            return None
        angle = self.angle
        tip_angle = math.pi / 2 if self.extend else angle
        tail_angle = math.pi / 2 if self.extend_backwards else angle
        tip_width = self.trapezium_width if self.extend else self.wave_width
        tail_width = self.trapezium_width if self.extend_backwards else self.wave_width

        tip_half = Point.polar(tip_width / 2, tip_angle + math.pi / 2)
        tail_half = Point.polar(tail_width / 2, tail_angle + math.pi / 2)
        tip_a, tip_b = self.tip - tip_half, self.tip + tip_half
        tail_a, tail_b = self.tail - tail_half, self.tail + tail_half

        tip_right = tip_b if tip_b.x > tip_a.x else tip_a
        tip_left = tip_b if tip_b.x < tip_a.x else tip_a
        tail_left = tail_a if tail_a.x < tail_b.x else tail_b
        tail_right = tail_a if tail_a.x > tail_b.x else tail_b

        # Keep the outline from folding back near the interface after truncation
        if tail_right.x - tip_right.x > 1e-10:
            x = self.to_vector().magnitude / math.cos(angle)
            tail_right = Point(x, tail_right.y)
            tip_right = Point(x, tail_right.y)

        corners = [_finite(p).to_tuple() for p in (tail_left, tail_right, tip_right, tip_left)]
        outline = ShapelyPolygon(corners)
        if not outline.is_valid:
            outline = make_valid(outline)
        return outline

    def contains(self, point: Point, wave_mode: bool = False) -> bool:
        """
        Whether a point lies on the drawn beam.

        In wave view the point must lie in the wave outline. In ray view it
        must lie on the thin segment.
        """
        if wave_mode and self.wave_outline is not None:
            return self.wave_outline.covers(point.to_shapely())
        closest = geometry.closest_point_on_segment(point, self.to_line())
        return closest.distance_squared(point) < RAY_CONTAINS_TOLERANCE_SQUARED

    # =========================================================================
    # Sensor casting
    # =========================================================================

    def _cast_start_and_direction(self) -> Tuple[Point, Point]:
        # Incident rays are cast backwards from the interface
        if self.role == RayRole.INCIDENT:
            return self.tip, Point.polar(1, self.angle + math.pi)
        return self.tail, Point.polar(1, self.angle)

    def create_parallel_ray(self, distance: float) -> Tuple[Point, Point]:
        """Cast origin and direction of a ray offset sideways by `distance`."""
        start, direction = self._cast_start_and_direction()
        return start + Point.polar(distance, self.angle + math.pi / 2), direction

    def sensor_intersections(self, center: Point, radius: float) -> List[Point]:
        """
        Where the beam enters or leaves a circular sensor.

        In wave view the cast ray is the beam line nearest the sensor center,
        clamped to half the wave width.

        Returns:
            Forward crossing points, nearest first.
        """
        if self.wave_outline is not None:
            n = self.to_vector().normalized()
            a_minus_p = self.tail - center
            distance_to_ray = (a_minus_p - n * a_minus_p.dot(n)).magnitude
            perpendicular = Point.polar(1, self.angle + math.pi / 2)
            sign = -1 if perpendicular.dot(center - self.tail) < 0 else 1
            start, direction = self.create_parallel_ray(sign * min(distance_to_ray, self.wave_width / 2))
        else:
            start, direction = self._cast_start_and_direction()
        hits = geometry.ray_circle_intersections(start, direction, center, radius)
        return [p for _, p in hits]

    def __repr__(self) -> str:
        return (f"LightRay(role={self.role.value}, "
                f"tail=({self.tail.x:.3g}, {self.tail.y:.3g}), tip=({self.tip.x:.3g}, {self.tip.y:.3g}), "
                f"n={self.index_of_refraction:.4f}, power={self.power_fraction:.4f})")
