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
from dataclasses import dataclass, field
from typing import Optional, Tuple

from shapely.geometry import box
from shapely.geometry.base import BaseGeometry

from .constants import WAVELENGTH_RED
from .dispersion import DispersionFunction

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Substance:
    """
    A named optical material.

    The substance is fully described by its index of refraction for red light;
    the index at other wavelengths comes from its dispersion function.

    Attributes:
        name: Display name.
        index_for_reference_wavelength: Index of refraction at WAVELENGTH_RED.
        mystery: True for substances whose index is hidden from the user.
        custom: True for user-adjusted substances.
        dispersion_function: Derived dispersion model.
        index_of_refraction_for_red_light: Cached index at WAVELENGTH_RED.

    Raises:
        ValueError: If the index is not a finite positive number.
    """
    name: str
    index_for_reference_wavelength: float
    mystery: bool = False
    custom: bool = False
    dispersion_function: DispersionFunction = field(init=False, repr=False, compare=False)
    index_of_refraction_for_red_light: float = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        index = self.index_for_reference_wavelength
        if not isinstance(index, (int, float)) or not math.isfinite(index) or index <= 0:
            raise ValueError(
                f"Invalid index of refraction {index!r} for substance '{self.name}'. "
                f"Must be a finite number > 0."
            )
        dispersion = DispersionFunction(float(index), WAVELENGTH_RED)
        # Frozen dataclass: derived fields are set once here
        object.__setattr__(self, 'dispersion_function', dispersion)
        object.__setattr__(self, 'index_of_refraction_for_red_light', dispersion.index_for_red())

    def index_of_refraction(self, wavelength: float) -> float:
        """Index of refraction at `wavelength` (meters)."""
        return self.dispersion_function.index_at(wavelength)

    @classmethod
    def custom_substance(cls, index_for_red: float, name: str = 'Custom') -> 'Substance':
        """Create a user-adjustable substance with the given index for red light."""
        return cls(name, index_for_red, mystery=False, custom=True)


DIAMOND_INDEX_OF_REFRACTION_FOR_RED_LIGHT = 2.419

AIR = Substance('Air', 1.000293)
WATER = Substance('Water', 1.333)
GLASS = Substance('Glass', 1.5)
DIAMOND = Substance('Diamond', DIAMOND_INDEX_OF_REFRACTION_FOR_RED_LIGHT)
MYSTERY_A = Substance('Mystery A', DIAMOND_INDEX_OF_REFRACTION_FOR_RED_LIGHT, mystery=True)
MYSTERY_B = Substance('Mystery B', 1.4, mystery=True)

SUBSTANCES = (AIR, WATER, GLASS, DIAMOND, MYSTERY_A, MYSTERY_B)


def substance_by_name(name: str) -> Substance:
    """
    Look up a catalog substance by name (case-insensitive).

    Raises:
        ValueError: If no catalog substance has that name.
    """
    for substance in SUBSTANCES:
        if substance.name.lower() == name.lower():
            return substance
    raise ValueError(
        f"Unknown substance '{name}'. "
        f"Valid options: {tuple(s.name for s in SUBSTANCES)}"
    )


# =============================================================================
# Medium color factory
# =============================================================================

def _blend(a: Color, b: Color, ratio: float) -> Color:
    reduction = 1.0 - ratio
    return tuple(
        int(round(max(0.0, min(255.0, ca * reduction + cb * ratio))))
        for ca, cb in zip(a, b)
    )


def _linear(x1: float, x2: float, y1: float, y2: float, x: float) -> float:
    return y1 + (y2 - y1) * (x - x1) / (x2 - x1)


class MediumColorFactory:
    """
    Maps an index of refraction for red light to a display color.

    The color is interpolated between reference colors for air, water, glass
    and diamond. Two profiles exist: one for a white background (single
    color laser) and a grayscale one for a black background (white light).

    Attributes:
        light_type: 'single' or 'white', selecting the profile.
    """

    VALID_LIGHT_TYPES = ('single', 'white')

    AGAINST_WHITE = ((255, 255, 255), (198, 226, 246), (171, 169, 212), (78, 79, 164))
    AGAINST_BLACK = ((0, 0, 0), (55, 55, 55), (110, 110, 110), (165, 165, 165))

    def __init__(self, light_type: str = 'single'):
        self._light_type = 'single'
        self.light_type = light_type

    @property
    def light_type(self) -> str:
        return self._light_type

    @light_type.setter
    def light_type(self, value: str) -> None:
        if value not in self.VALID_LIGHT_TYPES:
            raise ValueError(
                f"Invalid light_type '{value}'. "
                f"Valid options: {self.VALID_LIGHT_TYPES}"
            )
        self._light_type = value

    def get_color(self, index_for_red: float) -> Color:
        profile = self.AGAINST_WHITE if self._light_type == 'single' else self.AGAINST_BLACK
        air_color, water_color, glass_color, diamond_color = profile

        water = WATER.index_of_refraction_for_red_light
        glass = GLASS.index_of_refraction_for_red_light
        diamond = DIAMOND.index_of_refraction_for_red_light

        if index_for_red < water:
            return _blend(air_color, water_color, _linear(1.0, water, 0, 1, index_for_red))
        if index_for_red < glass:
            return _blend(water_color, glass_color, _linear(water, glass, 0, 1, index_for_red))
        if index_for_red < diamond:
            return _blend(glass_color, diamond_color, _linear(glass, diamond, 0, 1, index_for_red))
        return diamond_color


_DEFAULT_COLOR_FACTORY = MediumColorFactory()


@dataclass(frozen=True)
class Medium:
    """
    A substance placed in a region of the scene.

    Media are replaced, never mutated: use `with_substance` or
    `dataclasses.replace` to change one.

    Attributes:
        region: Shapely geometry covered by the medium.
        substance: The material.
        color: Display color, derived from the red-light index when omitted.
    """
    region: BaseGeometry
    substance: Substance
    color: Optional[Color] = None

    def __post_init__(self):
        if not isinstance(self.substance, Substance):
            raise ValueError(
                f"Medium substance must be a Substance, got {type(self.substance).__name__}"
            )
        if self.color is None:
            object.__setattr__(
                self, 'color',
                _DEFAULT_COLOR_FACTORY.get_color(self.substance.index_of_refraction_for_red_light)
            )

    def index_of_refraction(self, wavelength: float) -> float:
        return self.substance.index_of_refraction(wavelength)

    @property
    def is_mystery(self) -> bool:
        return self.substance.mystery

    def with_substance(self, substance: Substance,
                       color_factory: Optional[MediumColorFactory] = None) -> 'Medium':
        """Return a new medium in the same region filled with `substance`."""
        factory = color_factory or _DEFAULT_COLOR_FACTORY
        return Medium(self.region, substance, factory.get_color(substance.index_of_refraction_for_red_light))


def top_medium(substance: Substance = AIR) -> Medium:
    """Medium filling the upper half of the two-medium play area."""
    return Medium(box(-0.1, 0.0, 0.1, 0.1), substance)


def bottom_medium(substance: Substance = GLASS) -> Medium:
    """Medium filling the lower half of the two-medium play area."""
    return Medium(box(-0.1, -0.1, 0.1, 0.0), substance)


def environment_medium(substance: Substance = AIR) -> Medium:
    """Medium surrounding the prisms."""
    return Medium(box(-1.0, 0.0, 1.0, 1.0), substance)


def prism_medium(substance: Substance = GLASS) -> Medium:
    """Medium the prisms are made of."""
    return Medium(box(-1.0, -1.0, 1.0, 0.0), substance)
