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
from typing import List, Optional, Union

from .constants import DEFAULT_LASER_DISTANCE_FROM_PIVOT, TIME_STEP_NORMAL, TIME_STEP_SLOW
from .laser import Laser
from .medium import (
    AIR,
    GLASS,
    Medium,
    Substance,
    bottom_medium as make_bottom_medium,
    environment_medium as make_environment_medium,
    prism_medium as make_prism_medium,
    top_medium as make_top_medium,
)
from .sensors import IntensityMeter


def _check_medium(name: str, value) -> None:
    if not isinstance(value, Medium):
        raise ValueError(f"{name} must be a Medium, got {type(value).__name__}")


@dataclass
class TwoMediumInterface:
    """
    Flat interface between two media, with an optional intensity meter.

    Attributes:
        top_medium: Medium above y = 0, where the laser sits.
        bottom_medium: Medium below y = 0.
        intensity_meter: Power sensor (disabled by default).
    """
    top_medium: Medium = field(default_factory=make_top_medium)
    bottom_medium: Medium = field(default_factory=make_bottom_medium)
    intensity_meter: IntensityMeter = field(default_factory=IntensityMeter)

    def __post_init__(self):
        _check_medium('top_medium', self.top_medium)
        _check_medium('bottom_medium', self.bottom_medium)

    @classmethod
    def with_substances(cls, top: Substance = AIR, bottom: Substance = GLASS) -> 'TwoMediumInterface':
        return cls(make_top_medium(top), make_bottom_medium(bottom))

    def set_top_substance(self, substance: Substance) -> None:
        self.top_medium = self.top_medium.with_substance(substance)

    def set_bottom_substance(self, substance: Substance) -> None:
        self.bottom_medium = self.bottom_medium.with_substance(substance)

    def reset(self) -> None:
        self.top_medium = make_top_medium()
        self.bottom_medium = make_bottom_medium()
        self.intensity_meter.reset()


@dataclass
class RecursivePrismTrace:
    """
    Any number of prisms in a uniform environment.

    Attributes:
        prisms: Prisms in the play area.
        environment_medium: Medium around the prisms.
        prism_medium: Medium every prism is made of.
        many_rays: 1 for a single beam, more than 1 for a fan of parallel rays.
        show_reflections: Follow partial reflections as well as refractions.
        show_normals: Report boundary intersections for drawing normals.
    """
    prisms: List = field(default_factory=list)
    environment_medium: Medium = field(default_factory=make_environment_medium)
    prism_medium: Medium = field(default_factory=make_prism_medium)
    many_rays: int = 1
    show_reflections: bool = False
    show_normals: bool = False

    def __post_init__(self):
        _check_medium('environment_medium', self.environment_medium)
        _check_medium('prism_medium', self.prism_medium)
        if self.many_rays < 1:
            raise ValueError(f"many_rays must be >= 1, got {self.many_rays}")

    def add_prism(self, prism) -> None:
        self.prisms.append(prism)

    def remove_prism(self, prism) -> None:
        if prism in self.prisms:
            self.prisms.remove(prism)

    def clear(self) -> None:
        self.prisms.clear()

    def reset(self) -> None:
        self.prisms.clear()
        self.environment_medium = make_environment_medium()
        self.prism_medium = make_prism_medium()
        self.many_rays = 1
        self.show_reflections = False
        self.show_normals = False


PropagationMode = Union[TwoMediumInterface, RecursivePrismTrace]


def default_laser(mode: PropagationMode) -> Laser:
    """The laser each mode starts with (off)."""
    if isinstance(mode, RecursivePrismTrace):
        # Starts at the pivot and fires along +x
        return Laser(1e-16, math.pi, top_left_quadrant=False)
    return Laser(DEFAULT_LASER_DISTANCE_FROM_PIVOT, math.pi * 3 / 4, top_left_quadrant=True)


class Scene:
    """
    Everything a propagation pass needs.

    Attributes:
        mode: TwoMediumInterface or RecursivePrismTrace.
        laser (Laser): The light source.
        laser_view (str): 'ray' or 'wave'; stored on the laser.
        time (float): Simulation time in seconds, advanced by step().
        verbose (int): Verbosity level for propagation diagnostics
            0 = silent (default)
            1 = one line per pass
            2 = per hit details
    """

    VALID_LASER_VIEWS = Laser.VALID_VIEWS
    VALID_SPEEDS = ('normal', 'slow')

    def __init__(self, mode: Optional[PropagationMode] = None, laser: Optional[Laser] = None,
                 laser_view: str = 'ray', verbose: int = 0):
        self._mode = None
        self.mode = mode if mode is not None else TwoMediumInterface()
        self.laser = laser if laser is not None else default_laser(self._mode)
        self.laser_view = laser_view
        self.time = 0.0
        self.verbose = verbose

    @property
    def mode(self) -> PropagationMode:
        return self._mode

    @mode.setter
    def mode(self, value: PropagationMode) -> None:
        if not isinstance(value, (TwoMediumInterface, RecursivePrismTrace)):
            raise ValueError(
                f"Invalid mode {type(value).__name__}. "
                f"Valid options: ('TwoMediumInterface', 'RecursivePrismTrace')"
            )
        self._mode = value

    @property
    def laser_view(self) -> str:
        return self.laser.view

    @laser_view.setter
    def laser_view(self, value: str) -> None:
        if value not in self.VALID_LASER_VIEWS:
            raise ValueError(
                f"Invalid laser_view '{value}'. "
                f"Valid options: {self.VALID_LASER_VIEWS}"
            )
        self.laser.view = value

    @property
    def wave_mode(self) -> bool:
        return self.laser.view == 'wave'

    def step(self, speed: str = 'normal') -> float:
        """Advance the simulation clock and return the new time."""
        if speed not in self.VALID_SPEEDS:
            raise ValueError(
                f"Invalid speed '{speed}'. "
                f"Valid options: {self.VALID_SPEEDS}"
            )
        self.time += TIME_STEP_NORMAL if speed == 'normal' else TIME_STEP_SLOW
        return self.time

    def reset(self) -> None:
        """Restore the laser, the mode state and the clock."""
        self.laser.reset()
        self._mode.reset()
        self.time = 0.0

    def __repr__(self) -> str:
        return f"Scene(mode={type(self._mode).__name__}, laser={self.laser!r}, time={self.time:.3e})"
