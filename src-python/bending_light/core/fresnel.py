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
Snell's Law and Fresnel Power Splitting
===============================================================================
Free functions shared by both propagation modes. Power ratios use the
perpendicular (s) polarization form of the Fresnel equations.

Out-of-domain angles never raise: an arcsine outside [-1, 1] yields NaN, and
callers branch on math.isnan() or on the explicit total_internal_reflection
flag instead of catching errors.
===============================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .constants import GEOMETRY_EPSILON
from .geometry import Point


def _asin_or_nan(value: float) -> float:
    if value < -1.0 or value > 1.0 or math.isnan(value):
        return math.nan
    return math.asin(value)


def reflected_power(n1: float, n2: float, cos_theta1: float, cos_theta2: float) -> float:
    """
    Fraction of power reflected at an interface.

    At grazing incidence between matched media both cosines vanish. There is
    no interface to reflect from, so the result is 0.

    Args:
        n1: Index of the incident medium.
        n2: Index of the transmitting medium.
        cos_theta1: Cosine of the angle of incidence.
        cos_theta2: Cosine of the angle of refraction.
    """
    denominator = n1 * cos_theta1 + n2 * cos_theta2
    if abs(denominator) < GEOMETRY_EPSILON:
        return 0.0
    return ((n1 * cos_theta1 - n2 * cos_theta2) / denominator) ** 2


def transmitted_power(n1: float, n2: float, cos_theta1: float, cos_theta2: float) -> float:
    """Fraction of power transmitted at an interface (same arguments as reflected_power)."""
    denominator = n1 * cos_theta1 + n2 * cos_theta2
    if abs(denominator) < GEOMETRY_EPSILON:
        return 1.0
    return 4 * n1 * n2 * cos_theta1 * cos_theta2 / denominator ** 2


def refraction_angle(n1: float, n2: float, theta1: float) -> float:
    """
    Angle of refraction from Snell's law, in radians.

    Returns:
        asin(n1/n2 * sin(theta1)), or NaN when no refracted ray exists.
    """
    return _asin_or_nan(n1 / n2 * math.sin(theta1))


def critical_angle(n1: float, n2: float) -> float:
    """
    Critical angle for total internal reflection, in radians.

    Returns:
        asin(n2/n1), or NaN when n2 > n1 (no total internal reflection possible).
    """
    return _asin_or_nan(n2 / n1)


@dataclass(frozen=True)
class InterfaceSplit:
    """
    Outcome of a beam hitting a flat interface.

    Attributes:
        theta2: Refraction angle in radians (NaN under total internal reflection).
        reflected: Reflected power fraction.
        transmitted: Transmitted power fraction (0 when there is no transmitted ray).
        total_internal_reflection: True when the beam is fully reflected.
    """
    theta2: float
    reflected: float
    transmitted: float
    total_internal_reflection: bool

    @property
    def has_transmitted_ray(self) -> bool:
        return not self.total_internal_reflection


def interface_split(n1: float, n2: float, theta1: float) -> InterfaceSplit:
    """
    Split a beam at a flat interface.

    Args:
        n1: Index of the incident medium.
        n2: Index of the transmitting medium.
        theta1: Angle of incidence from the surface normal, in radians.

    Returns:
        InterfaceSplit. Under total internal reflection (theta1 at or beyond the
        critical angle) the reflected fraction is exactly 1 and nothing is
        transmitted. Otherwise reflected + transmitted == 1 within rounding.
    """
    theta2 = refraction_angle(n1, n2, theta1)
    theta_tir = critical_angle(n1, n2)
    tir = not (math.isnan(theta_tir) or theta1 < theta_tir)
    if tir or math.isnan(theta2):
        return InterfaceSplit(theta2, 1.0, 0.0, True)

    cos1 = math.cos(theta1)
    cos2 = math.cos(theta2)
    reflected = reflected_power(n1, n2, cos1, cos2)
    transmitted = transmitted_power(n1, n2, cos1, cos2)
    return InterfaceSplit(theta2, reflected, transmitted, reflected == 1.0)


@dataclass(frozen=True)
class VectorSplit:
    """
    Outcome of a ray hitting a boundary with a known normal.

    Attributes:
        reflect_direction: Unit direction of the reflected ray.
        refract_direction: Unit direction of the refracted ray.
        reflected_power: Reflected power ratio in [0, 1].
        transmitted_power: Transmitted power ratio in [0, 1].
        total_internal_reflection: True when the refracted ray does not exist.
    """
    reflect_direction: Point
    refract_direction: Point
    reflected_power: float
    transmitted_power: float
    total_internal_reflection: bool


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def vector_split(direction: Point, normal: Point, n1: float, n2: float) -> VectorSplit:
    """
    Vector form of Snell's law with Fresnel powers.

    Args:
        direction: Unit direction L of the incoming ray.
        normal: Unit normal N at the hit point, facing against the ray.
        n1: Index on the incoming side.
        n2: Index on the far side.

    Returns:
        VectorSplit with both directions normalized. The refraction direction
        is re-normalized on every call so that rounding does not compound over
        many bounces.
    """
    ratio = n1 / n2
    cos_theta1 = normal.dot(-direction)
    radicand = 1 - ratio * ratio * (1 - cos_theta1 * cos_theta1)
    tir = radicand < 0
    cos_theta2 = math.sqrt(abs(radicand))

    reflect = direction + normal * (2 * cos_theta1)
    if cos_theta1 > 0:
        refract = direction * ratio + normal * (ratio * cos_theta1 - cos_theta2)
    else:
        refract = direction * ratio + normal * (ratio * cos_theta1 + cos_theta2)

    if tir:
        r_power, t_power = 1.0, 0.0
    else:
        r_power = _clamp01(reflected_power(n1, n2, cos_theta1, cos_theta2))
        t_power = _clamp01(transmitted_power(n1, n2, cos_theta1, cos_theta2))

    return VectorSplit(reflect.normalized(), refract.normalized(), r_power, t_power, tir)
