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

===============================================================================
Sensors
===============================================================================
Read-only queries over a finished ray list, plus the small stateful tools
that hold a position and remember what they measured:

- Reading / IntensityMeter: power intercepted by the circular sensor.
- velocity_at / VelocitySensor: light velocity at a point.
- wave_value_at / WaveSensor: instantaneous wave amplitude at two probes,
  sampled over time into Series of DataPoints.

The queries never modify the rays. Stateful tools are updated explicitly by
the caller after each propagation pass.
===============================================================================
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .constants import INTENSITY_SENSOR_RADIUS, MODEL_HEIGHT, MODEL_WIDTH
from .geometry import Point, ORIGIN
from .ray import LightRay


# =============================================================================
# Intensity
# =============================================================================

@dataclass(frozen=True)
class Reading:
    """
    Power measured by the intensity meter.

    Attributes:
        value: Power fraction (0 for a miss).
        hit: False only for the MISS reading.
    """
    value: float
    hit: bool = True

    VALUE_DECIMALS = 2
    NO_VALUE = '-'

    def is_hit(self) -> bool:
        return self.hit

    def to_string(self) -> str:
        """Display text, e.g. '4.26%', or '-' for a miss."""
        if not self.hit:
            return self.NO_VALUE
        return f"{self.value * 100:.{self.VALUE_DECIMALS}f}%"

    def __str__(self) -> str:
        return self.to_string()


Reading.MISS = Reading(0.0, hit=False)


def intensity_at(readings: Iterable[Reading]) -> Reading:
    """Sum of the hit readings, or Reading.MISS when nothing hit."""
    hits = [r for r in readings if r.is_hit()]
    if not hits:
        return Reading.MISS
    return Reading(sum(r.value for r in hits))


class IntensityMeter:
    """
    A circular power sensor with a separate readout body.

    Attributes:
        sensor_position (Point): Center of the sensor circle.
        body_position (Point): Where the readout body sits (display only).
        enabled (bool): Whether the meter is in the play area. A disabled
            meter never intercepts rays.
        reading (Reading): Last reading recorded with `record()`.
    """

    DEFAULT_SENSOR_POSITION = Point(-MODEL_WIDTH * 0.48, -MODEL_HEIGHT * 0.285)
    DEFAULT_BODY_POSITION = Point(-MODEL_WIDTH * 0.421, -MODEL_HEIGHT * 0.312)

    def __init__(self, sensor_position: Point = DEFAULT_SENSOR_POSITION,
                 body_position: Point = DEFAULT_BODY_POSITION, enabled: bool = False):
        self._initial = (sensor_position, body_position, enabled)
        self.sensor_position = sensor_position
        self.body_position = body_position
        self.enabled = enabled
        self.radius = INTENSITY_SENSOR_RADIUS
        self.reading = Reading.MISS

    def reset(self) -> None:
        self.sensor_position, self.body_position, self.enabled = self._initial
        self.reading = Reading.MISS

    def copy(self) -> 'IntensityMeter':
        """A meter at the same positions, with the default enabled state and no reading."""
        return IntensityMeter(self.sensor_position, self.body_position)

    def record(self, ray_readings: Iterable[Reading]) -> Reading:
        """Store and return the combined reading of one propagation pass."""
        self.reading = intensity_at(ray_readings)
        return self.reading

    def __repr__(self) -> str:
        return (f"IntensityMeter(sensor=({self.sensor_position.x:.3g}, {self.sensor_position.y:.3g}), "
                f"enabled={self.enabled}, reading={self.reading})")


# =============================================================================
# Point queries
# =============================================================================

def velocity_at(rays: Sequence[LightRay], point: Point, wave_mode: bool = False) -> Point:
    """Velocity of the first ray covering `point`, or the zero vector."""
    for ray in rays:
        if ray.contains(point, wave_mode):
            return ray.velocity_vector
    return ORIGIN


@dataclass(frozen=True)
class WaveValue:
    """Instantaneous wave amplitude at a point."""
    time: float
    magnitude: float


def wave_value_at(rays: Sequence[LightRay], point: Point, time: float = 0.0,
                  wave_mode: bool = False) -> Optional[WaveValue]:
    """
    Wave amplitude at `point` from the first ray covering it.

    The amplitude is sqrt(power) and the wave is a*cos(phase + pi), where the
    phase depends on the distance of the point along the ray.

    Returns:
        WaveValue, or None when no ray covers the point.
    """
    for ray in rays:
        if ray.contains(point, wave_mode):
            amplitude = math.sqrt(ray.power_fraction)
            distance_along_ray = ray.unit_vector.dot(point - ray.tail)
            phase = ray.cos_arg(distance_along_ray, time)
            return WaveValue(time, amplitude * math.cos(phase + math.pi))
    return None


# =============================================================================
# Stateful tools
# =============================================================================

class VelocitySensor:
    """
    Measures the light velocity at its position.

    Attributes:
        position (Point): Measurement point.
        value (Point): Last measured velocity (m/s); zero when off-beam.
    """

    DEFAULT_POSITION = Point(-0.00002051402284781722, -0.0000025716197470420186)

    def __init__(self, position: Point = DEFAULT_POSITION):
        self._initial_position = position
        self.position = position
        self.value = ORIGIN
        self.enabled = False

    def update(self, rays: Sequence[LightRay], wave_mode: bool = False) -> Point:
        self.value = velocity_at(rays, self.position, wave_mode)
        return self.value

    @property
    def is_arrow_visible(self) -> bool:
        return self.value.magnitude > 0

    def reset(self) -> None:
        self.position = self._initial_position
        self.value = ORIGIN
        self.enabled = False


@dataclass(frozen=True)
class DataPoint:
    time: float
    value: float


class Series:
    """
    Time series recorded by one probe.

    Attributes:
        samples (list of DataPoint): Samples in recording order.
        color (tuple): Display color of the trace.
    """

    def __init__(self, color: Tuple[int, int, int] = (0, 0, 0)):
        self.samples: List[DataPoint] = []
        self.color = color

    def add(self, sample: DataPoint) -> None:
        self.samples.append(sample)

    def keep_last_samples(self, min_time: float) -> None:
        """Drop leading samples recorded before `min_time`."""
        start = 0
        while start < len(self.samples) and self.samples[start].time < min_time:
            start += 1
        self.samples = self.samples[start:]

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """(times, values) as numpy arrays, for plotting or analysis."""
        times = np.array([s.time for s in self.samples], dtype=float)
        values = np.array([s.value for s in self.samples], dtype=float)
        return times, values

    def clear(self) -> None:
        self.samples = []

    def __len__(self) -> int:
        return len(self.samples)


class Probe:
    """A wave sensor probe: a position and the series it records."""

    def __init__(self, position: Point, color: Tuple[int, int, int] = (0, 0, 0)):
        self._initial_position = position
        self.position = position
        self.series = Series(color)

    def add_sample(self, sample: DataPoint) -> None:
        self.series.add(sample)

    def reset(self) -> None:
        self.position = self._initial_position
        self.series.clear()


class WaveSensor:
    """
    Two-probe wave amplitude recorder.

    Each call to `step()` samples both probes at the given time. A probe that
    is not on any beam records nothing for that step.
    """

    PROBE1_POSITION = Point(-0.00001932, -0.0000052)
    PROBE2_POSITION = Point(-0.0000198, -0.0000062)
    BODY_POSITION = Point(-0.0000172, -0.00000605)

    def __init__(self):
        self.probe1 = Probe(self.PROBE1_POSITION, (255, 0, 0))
        self.probe2 = Probe(self.PROBE2_POSITION, (0, 0, 255))
        self.body_position = self.BODY_POSITION
        self.enabled = False

    def copy(self) -> 'WaveSensor':
        """A sensor at the same positions, without recorded samples."""
        sensor = WaveSensor()
        sensor.body_position = self.body_position
        sensor.probe1.position = self.probe1.position
        sensor.probe2.position = self.probe2.position
        return sensor

    def _sample(self, probe: Probe, rays: Sequence[LightRay], time: float, wave_mode: bool) -> None:
        value = wave_value_at(rays, probe.position, time, wave_mode)
        if value is not None:
            probe.add_sample(DataPoint(value.time, value.magnitude))

    def step(self, rays: Sequence[LightRay], time: float, wave_mode: bool = False) -> None:
        self._sample(self.probe1, rays, time, wave_mode)
        self._sample(self.probe2, rays, time, wave_mode)

    def reset(self) -> None:
        self.body_position = self.BODY_POSITION
        self.enabled = False
        self.probe1.reset()
        self.probe2.reset()
