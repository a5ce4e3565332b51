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

from dataclasses import dataclass
from typing import Optional, Tuple

from .geometry import Point
from .intersection import Intersection
from .propagation import propagate_prisms, propagate_two_medium
from .ray import LightRay
from .scene import RecursivePrismTrace, Scene, TwoMediumInterface
from .sensors import Reading, WaveValue, intensity_at, velocity_at, wave_value_at


@dataclass(frozen=True)
class PropagationResult:
    """
    Output of one propagation pass.

    Attributes:
        rays: Emitted segments, in emission order.
        intersections: Boundary hits kept for display (prism mode only).
        reading: Combined intensity meter reading.
        ray_readings: One reading per ray that passed the meter (two-medium
            mode only).
    """
    rays: Tuple[LightRay, ...] = ()
    intersections: Tuple[Intersection, ...] = ()
    reading: Reading = Reading.MISS
    ray_readings: Tuple[Reading, ...] = ()


def recompute(scene: Scene, verbose: Optional[int] = None) -> PropagationResult:
    """
    Rebuild all rays for the current scene.

    The scene is not modified, and identical scenes give identical results.

    Args:
        scene: The scene to propagate.
        verbose: Overrides scene.verbose when given.

    Returns:
        A fresh PropagationResult. Empty, with a MISS reading, when the laser
        is off.
    """
    level = scene.verbose if verbose is None else verbose
    laser = scene.laser
    if not laser.on:
        if level >= 1:
            print("[recompute] laser off, no rays")
        return PropagationResult()

    mode = scene.mode
    if isinstance(mode, TwoMediumInterface):
        rays, readings = propagate_two_medium(
            laser, mode.top_medium, mode.bottom_medium, mode.intensity_meter, verbose=level
        )
        result = PropagationResult(tuple(rays), (), intensity_at(readings), tuple(readings))
    elif isinstance(mode, RecursivePrismTrace):
        rays, intersections = propagate_prisms(
            laser, mode.prisms, mode.environment_medium, mode.prism_medium,
            many_rays=mode.many_rays > 1,
            show_reflections=mode.show_reflections,
            show_normals=mode.show_normals,
            verbose=level,
        )
        result = PropagationResult(tuple(rays), tuple(intersections))
    else:
        raise ValueError(f"Unsupported propagation mode {type(mode).__name__}")

    if level >= 1:
        print(f"[recompute] {type(mode).__name__}: {len(result.rays)} rays, reading={result.reading}")
    return result


class Simulator:
    """
    Runs propagation passes for a scene and keeps the latest result.

    The simulator is the stateful side of recompute(): it records the meter
    reading and answers sensor queries against the last pass.
    """

    def __init__(self, scene: Scene, verbose: Optional[int] = None) -> None:
        """
        Args:
            scene (Scene): The scene to simulate.
            verbose (int): Verbosity level; defaults to scene.verbose.
                0 = silent
                1 = one line per pass
                2 = per hit details
        """
        self.scene = scene
        self.verbose = scene.verbose if verbose is None else verbose
        self.result = PropagationResult()

    def run(self) -> PropagationResult:
        """Propagate the scene, store the result and update the meter reading."""
        self.result = recompute(self.scene, self.verbose)
        mode = self.scene.mode
        if isinstance(mode, TwoMediumInterface):
            mode.intensity_meter.record(self.result.ray_readings)
        return self.result

    @property
    def rays(self) -> Tuple[LightRay, ...]:
        return self.result.rays

    def velocity_at(self, point: Point) -> Point:
        return velocity_at(self.result.rays, point, self.scene.wave_mode)

    def wave_value_at(self, point: Point) -> Optional[WaveValue]:
        return wave_value_at(self.result.rays, point, self.scene.time, self.scene.wave_mode)

    def step(self, speed: str = 'normal') -> float:
        """Advance the scene clock; rays do not change with time."""
        return self.scene.step(speed)
