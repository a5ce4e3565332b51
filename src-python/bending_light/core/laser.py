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
from typing import Tuple

from .constants import (
    LASER_MAX_WAVELENGTH,
    LASER_MIN_WAVELENGTH,
    MAX_ANGLE_IN_WAVE_MODE,
    SPEED_OF_LIGHT,
    WAVELENGTH_RED,
)
from .geometry import Point, ORIGIN


def wavelength_to_rgb(wavelength):
    """
    Convert a wavelength (in nm) to an RGB color tuple.

    Based on approximation of CIE color matching functions.
    Returns values in range 0-255.

    Args:
        wavelength (float): Wavelength in nanometers (380-780 nm)

    Returns:
        tuple: (r, g, b) values from 0-255
    """
    wavelength = max(380, min(780, wavelength))

    if wavelength < 440:
        r, g, b = -(wavelength - 440) / (440 - 380), 0.0, 1.0
    elif wavelength < 490:
        r, g, b = 0.0, (wavelength - 440) / (490 - 440), 1.0
    elif wavelength < 510:
        r, g, b = 0.0, 1.0, -(wavelength - 510) / (510 - 490)
    elif wavelength < 580:
        r, g, b = (wavelength - 510) / (580 - 510), 1.0, 0.0
    elif wavelength < 645:
        r, g, b = 1.0, -(wavelength - 645) / (645 - 580), 0.0
    else:
        r, g, b = 1.0, 0.0, 0.0

    # Intensity falls off at the spectrum edges
    if wavelength < 420:
        factor = 0.3 + 0.7 * (wavelength - 380) / (420 - 380)
    elif wavelength > 700:
        factor = 0.3 + 0.7 * (780 - wavelength) / (780 - 700)
    else:
        factor = 1.0

    return (int(255 * r * factor), int(255 * g * factor), int(255 * b * factor))


class Laser:
    """
    The light source.

    The laser is described by a pivot (the point it aims at) and an emission
    point (where light leaves the laser). Its angle is the direction from the
    pivot to the emission point, so a laser at angle 3*pi/4 sits in the top-left
    quadrant and fires down and to the right.

    Attributes:
        pivot (Point): Point the laser rotates around and aims at.
        emission_point (Point): Point where light is emitted.
        wavelength (float): Vacuum wavelength in meters.
        on (bool): Whether the laser emits light.
        view (str): Beam display mode, 'ray' or 'wave'.
        color_mode (str): 'single' for monochromatic light, 'white' for the
            sampled visible spectrum.
        top_left_quadrant (bool): Whether the laser is constrained to the
            top-left quadrant (two-medium screens).
    """

    VALID_VIEWS = ('ray', 'wave')
    VALID_COLOR_MODES = ('single', 'white')

    def __init__(self, distance_from_pivot: float, angle: float,
                 top_left_quadrant: bool = False, wavelength: float = WAVELENGTH_RED):
        if distance_from_pivot <= 0:
            raise ValueError(
                f"Laser distance from pivot must be > 0, got {distance_from_pivot}"
            )
        self.top_left_quadrant = top_left_quadrant
        self._initial = (distance_from_pivot, angle, wavelength)
        self._pivot = ORIGIN
        self._emission_point = Point.polar(distance_from_pivot, angle)
        self.on = False
        self._view = 'ray'
        self._color_mode = 'single'
        self._wavelength = WAVELENGTH_RED
        self.wavelength = wavelength

    def reset(self) -> None:
        """Restore the construction-time state."""
        distance, angle, wavelength = self._initial
        self._pivot = ORIGIN
        self._emission_point = Point.polar(distance, angle)
        self.on = False
        self._view = 'ray'
        self._color_mode = 'single'
        self.wavelength = wavelength

    @staticmethod
    def _check_geometry(pivot: Point, emission_point: Point) -> None:
        if not (pivot.is_finite() and emission_point.is_finite()):
            raise ValueError(
                f"Laser points must be finite, got pivot={pivot} emission_point={emission_point}"
            )
        if pivot == emission_point:
            raise ValueError("Laser emission point coincides with its pivot; direction is undefined")

    @property
    def pivot(self) -> Point:
        return self._pivot

    @pivot.setter
    def pivot(self, value: Point) -> None:
        self._check_geometry(value, self._emission_point)
        self._pivot = value

    @property
    def emission_point(self) -> Point:
        return self._emission_point

    @emission_point.setter
    def emission_point(self, value: Point) -> None:
        self._check_geometry(self._pivot, value)
        self._emission_point = value

    @property
    def wavelength(self) -> float:
        """Vacuum wavelength in meters."""
        return self._wavelength

    @wavelength.setter
    def wavelength(self, value: float) -> None:
        nm = value * 1e9
        # Small tolerance so that values computed from nm round-trip
        if not math.isfinite(nm) or nm < LASER_MIN_WAVELENGTH - 1e-9 or nm > LASER_MAX_WAVELENGTH + 1e-9:
            raise ValueError(
                f"Invalid wavelength {value!r} m. "
                f"Must be within [{LASER_MIN_WAVELENGTH}, {LASER_MAX_WAVELENGTH}] nm."
            )
        self._wavelength = value

    @property
    def view(self) -> str:
        return self._view

    @view.setter
    def view(self, value: str) -> None:
        if value not in self.VALID_VIEWS:
            raise ValueError(
                f"Invalid laser view '{value}'. "
                f"Valid options: {self.VALID_VIEWS}"
            )
        self._view = value
        # Steep beams are not allowed in wave mode
        if value == 'wave' and self.top_left_quadrant and self.angle > MAX_ANGLE_IN_WAVE_MODE:
            self.set_angle(MAX_ANGLE_IN_WAVE_MODE)

    @property
    def color_mode(self) -> str:
        return self._color_mode

    @color_mode.setter
    def color_mode(self, value: str) -> None:
        if value not in self.VALID_COLOR_MODES:
            raise ValueError(
                f"Invalid color_mode '{value}'. "
                f"Valid options: {self.VALID_COLOR_MODES}"
            )
        self._color_mode = value

    @property
    def distance_from_pivot(self) -> float:
        return self.pivot.distance(self.emission_point)

    @property
    def direction_unit_vector(self) -> Point:
        """Unit vector from the emission point toward the pivot."""
        return (self._pivot - self._emission_point).normalized()

    @property
    def angle(self) -> float:
        """Angle of the laser body, from the pivot toward the emission point."""
        return self.direction_unit_vector.angle + math.pi

    def set_angle(self, angle: float) -> None:
        """Rotate the laser around its pivot, keeping its distance."""
        self.emission_point = self.pivot + Point.polar(self.distance_from_pivot, angle)

    def translate(self, dx: float, dy: float) -> None:
        delta = Point(dx, dy)
        pivot = self._pivot + delta
        emission_point = self._emission_point + delta
        self._check_geometry(pivot, emission_point)
        self._pivot = pivot
        self._emission_point = emission_point

    @property
    def frequency(self) -> float:
        return SPEED_OF_LIGHT / self._wavelength

    @property
    def color(self) -> Tuple[int, int, int]:
        """Display color of the beam."""
        return wavelength_to_rgb(self._wavelength * 1e9)

    def __repr__(self) -> str:
        return (f"Laser(angle={self.angle:.4f}, wavelength={self._wavelength * 1e9:.1f}nm, "
                f"on={self.on}, view='{self._view}', color_mode='{self._color_mode}')")
