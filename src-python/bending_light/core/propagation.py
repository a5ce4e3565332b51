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
Ray Propagation
===============================================================================
The two propagation passes. Both are plain functions of their inputs: they
build fresh lists of LightRay values and never touch the laser, media,
prisms or meter they are given.

Two-medium interface:
    A laser in the top-left quadrant fires at the origin, where a horizontal
    interface separates a top medium from a bottom medium. The pass emits an
    incident ray, then a reflected and/or a transmitted ray split by the
    Fresnel equations. Each ray may be cut short by the intensity meter.

Recursive prisms:
    Rays are traced through any number of prisms. Every boundary hit splits
    a ray into a reflected and a refracted child. Tracing is depth first,
    with the parent segment emitted before its children, and stops at
    MAX_DEPTH or when the power falls under MIN_POWER.
===============================================================================
"""

import math
from typing import List, Optional, Sequence, Tuple

from .constants import (
    BEAM_LENGTH,
    CHARACTERISTIC_LENGTH,
    INTERSECTION_NUDGE,
    MAX_DEPTH,
    MIN_POWER,
    NO_HIT_EXTENSION,
    PRISM_TRAPEZIUM_WIDTH,
    PRISM_WAVE_WIDTH,
    REFLECTED_VISIBILITY_THRESHOLD,
    SPEED_OF_LIGHT,
    WAVELENGTH_RED,
    WHITE_LIGHT_WAVELENGTHS,
)
from .fresnel import interface_split, vector_split
from .geometry import Point, ORIGIN, geometry
from .intersection import Intersection, find_nearest_intersection, is_inside_any
from .laser import Laser, wavelength_to_rgb
from .medium import Medium
from .ray import ColoredRay, LightRay, RayRole
from .sensors import IntensityMeter, Reading


# =============================================================================
# Intensity meter interception
# =============================================================================

def add_and_absorb(ray: LightRay, meter: Optional[IntensityMeter],
                   rays: List[LightRay], readings: List[Reading], verbose: int = 0) -> bool:
    """
    Append `ray` to `rays`, truncated at the intensity meter if it hits it.

    Exactly one Reading is appended to `readings` per call: the ray power on
    a hit, Reading.MISS otherwise.

    Args:
        ray: The ray to add.
        meter: The intensity meter, or None. A disabled meter never absorbs.
        rays: Output ray list (appended to).
        readings: Output reading list (appended to).
        verbose: Verbosity level.

    Returns:
        True if the meter absorbed the ray.
    """
    hits = []
    if meter is not None and meter.enabled:
        hits = ray.sensor_intersections(meter.sensor_position, meter.radius)

    absorbed = len(hits) > 0
    if absorbed:
        point = hits[0] if len(hits) == 1 else geometry.midpoint(hits[0], hits[1])
        angle_offset = math.pi if ray.role == RayRole.INCIDENT else 0.0
        distance = point.magnitude
        interrupted = LightRay(
            tail=ray.tail,
            tip=Point.polar(distance, ray.angle + angle_offset),
            index_of_refraction=ray.index_of_refraction,
            wavelength=ray.wavelength,
            wavelength_in_vacuum=ray.wavelength_in_vacuum,
            power_fraction=ray.power_fraction,
            color=ray.color,
            wave_width=ray.wave_width,
            trapezium_width=ray.trapezium_width,
            num_wavelengths_phase_offset=ray.num_wavelengths_phase_offset,
            role=ray.role,
            extend=False,
            extend_backwards=ray.extend_backwards,
            wave_mode=ray.wave_mode,
        )
        # The meter cannot absorb light behind the point the ray starts from
        is_forward = ray.to_vector().dot(interrupted.to_vector()) > 0
        if interrupted.length < ray.length and is_forward:
            rays.append(interrupted)
        else:
            rays.append(ray)
            absorbed = False
    else:
        rays.append(ray)

    readings.append(Reading(ray.power_fraction) if absorbed else Reading.MISS)
    if verbose >= 2:
        print(f"  {ray.role.value} ray power={ray.power_fraction:.4f} absorbed={absorbed}")
    return absorbed


# =============================================================================
# Two-medium interface
# =============================================================================

def propagate_two_medium(laser: Laser, top_medium: Medium, bottom_medium: Medium,
                         meter: Optional[IntensityMeter] = None,
                         verbose: int = 0) -> Tuple[List[LightRay], List[Reading]]:
    """
    Propagate the laser beam across the flat interface at y = 0.

    Args:
        laser: The light source. Nothing is emitted when it is off.
        top_medium: Medium above the interface (where the laser sits).
        bottom_medium: Medium below the interface.
        meter: Optional intensity meter that may intercept rays.
        verbose: Verbosity level (0 silent, 1 summary, 2 per ray).

    Returns:
        (rays, readings), with one Reading per emitted ray.
    """
    rays: List[LightRay] = []
    readings: List[Reading] = []
    if not laser.on or laser.direction_unit_vector.magnitude == 0:
        return rays, readings

    wave_mode = laser.view == 'wave'
    wavelength = laser.wavelength
    n1 = top_medium.index_of_refraction(wavelength)
    n2 = bottom_medium.index_of_refraction(wavelength)

    # Angle from the up vertical, and from the down vertical
    theta1 = laser.angle - math.pi / 2
    split = interface_split(n1, n2, theta1)
    theta2 = split.theta2

    source_power = 1.0
    a = CHARACTERISTIC_LENGTH * 4
    source_wave_width = a / 2
    color = laser.color
    wavelength_in_top_medium = wavelength / n1
    trapezium_width = abs(source_wave_width / math.sin(laser.angle))

    if verbose >= 1:
        print(f"[two-medium] n1={n1:.4f} n2={n2:.4f} theta1={math.degrees(theta1):.2f} deg")

    incident = LightRay(
        tail=laser.emission_point,
        tip=ORIGIN,
        index_of_refraction=n1,
        wavelength=wavelength_in_top_medium,
        wavelength_in_vacuum=wavelength * 1e9,
        power_fraction=source_power,
        color=color,
        wave_width=source_wave_width,
        trapezium_width=trapezium_width,
        num_wavelengths_phase_offset=0.0,
        role=RayRole.INCIDENT,
        extend=True,
        extend_backwards=False,
        wave_mode=wave_mode,
    )
    if add_and_absorb(incident, meter, rays, readings, verbose):
        return rays, readings

    # Perpendicular polarization, no transmitted ray under total internal reflection
    reflected_ratio = split.reflected
    has_reflected_ray = reflected_ratio >= REFLECTED_VISIBILITY_THRESHOLD
    if has_reflected_ray:
        reflected = LightRay(
            tail=ORIGIN,
            tip=Point.polar(BEAM_LENGTH, math.pi - laser.angle),
            index_of_refraction=n1,
            wavelength=wavelength_in_top_medium,
            wavelength_in_vacuum=wavelength * 1e9,
            power_fraction=reflected_ratio * source_power,
            color=color,
            wave_width=source_wave_width,
            trapezium_width=trapezium_width,
            num_wavelengths_phase_offset=incident.number_of_wavelengths,
            role=RayRole.REFLECTED,
            extend=True,
            extend_backwards=True,
            wave_mode=wave_mode,
        )
        add_and_absorb(reflected, meter, rays, readings, verbose)
    else:
        reflected_ratio = 0.0

    if split.has_transmitted_ray:
        transmitted_ratio = split.transmitted if has_reflected_ray else 1.0

        # Same beam cross-section as the part of the incident beam intercepted
        beam_half_width = a / 2
        intercepted_half_width = beam_half_width / math.sin(math.pi / 2 - theta1) / 2
        transmitted_wave_width = math.cos(theta2) * intercepted_half_width * 2

        transmitted = LightRay(
            tail=ORIGIN,
            tip=Point.polar(BEAM_LENGTH, theta2 - math.pi / 2),
            index_of_refraction=n2,
            wavelength=incident.wavelength / n2 * n1,
            wavelength_in_vacuum=wavelength * 1e9,
            power_fraction=transmitted_ratio * source_power,
            color=color,
            wave_width=transmitted_wave_width,
            trapezium_width=trapezium_width,
            num_wavelengths_phase_offset=incident.number_of_wavelengths,
            role=RayRole.TRANSMITTED,
            extend=True,
            extend_backwards=True,
            wave_mode=wave_mode,
        )
        add_and_absorb(transmitted, meter, rays, readings, verbose)

    if verbose >= 1:
        print(f"[two-medium] emitted {len(rays)} rays, R={reflected_ratio:.4f}")
    return rays, readings


# =============================================================================
# Recursive prisms
# =============================================================================

def _prism_segment(ray: ColoredRay, tip: Point, wave_mode: bool) -> LightRay:
    n1 = ray.medium_index_of_refraction
    return LightRay(
        tail=ray.tail,
        tip=tip,
        index_of_refraction=n1,
        wavelength=ray.wavelength / n1,
        wavelength_in_vacuum=ray.wavelength * 1e9,
        power_fraction=ray.power,
        color=wavelength_to_rgb(ray.wavelength * 1e9),
        wave_width=PRISM_WAVE_WIDTH,
        trapezium_width=PRISM_TRAPEZIUM_WIDTH,
        num_wavelengths_phase_offset=0.0,
        role=RayRole.PRISM,
        extend=True,
        extend_backwards=False,
        wave_mode=wave_mode,
    )


def trace_colored_ray(initial: ColoredRay, shapes: Sequence, environment_medium: Medium,
                      prism_medium: Medium, show_reflections: bool = False,
                      record_intersections: bool = True, wave_mode: bool = False,
                      verbose: int = 0) -> Tuple[List[LightRay], List[Intersection]]:
    """
    Trace one ray and all of its descendants through the prisms.

    Args:
        initial: The ray leaving the laser.
        shapes: Translated prism shapes.
        environment_medium: Medium outside the prisms.
        prism_medium: Medium inside the prisms.
        show_reflections: Also follow partial reflections. Total internal
            reflections are always followed.
        record_intersections: Whether boundary hits are returned.
        wave_mode: Whether the emitted segments get a wave outline.
        verbose: Verbosity level.

    Returns:
        (rays, intersections). Segments are in depth-first pre-order: each
        parent precedes its children, reflected subtree first.
    """
    rays: List[LightRay] = []
    intersections: List[Intersection] = []

    # (ray, depth) pairs; the last item is traced next
    stack = [(initial, 0)]
    while stack:
        ray, depth = stack.pop()
        if depth > MAX_DEPTH or ray.power < MIN_POWER:
            continue

        L = ray.direction
        hit = find_nearest_intersection(shapes, ray.tail, L)
        if hit is None:
            # Keep going, but not so far that drawing breaks down
            rays.append(_prism_segment(ray, ray.tail + L * NO_HIT_EXTENSION, wave_mode))
            continue

        if record_intersections:
            intersections.append(hit)

        point_on_other_side = hit.point + L * INTERSECTION_NUDGE
        output_inside_prism = is_inside_any(shapes, point_on_other_side, L)
        far_medium = prism_medium if output_inside_prism else environment_medium
        n1 = ray.medium_index_of_refraction
        n2 = far_medium.index_of_refraction(ray.base_wavelength)

        split = vector_split(L, hit.unit_normal, n1, n2)
        if verbose >= 2:
            print(f"  depth={depth} hit=({hit.point.x:.3e}, {hit.point.y:.3e}) "
                  f"n1={n1:.4f} n2={n2:.4f} R={split.reflected_power:.4f} "
                  f"T={split.transmitted_power:.4f} TIR={split.total_internal_reflection}")

        reflected = ColoredRay(
            tail=hit.point - L * INTERSECTION_NUDGE,
            direction=split.reflect_direction,
            power=ray.power * split.reflected_power,
            wavelength=ray.wavelength,
            medium_index_of_refraction=n1,
            frequency=ray.frequency,
        )
        refracted = ColoredRay(
            tail=hit.point + L * INTERSECTION_NUDGE,
            direction=split.refract_direction,
            power=ray.power * split.transmitted_power,
            wavelength=ray.wavelength,
            medium_index_of_refraction=n2,
            frequency=ray.frequency,
        )

        rays.append(_prism_segment(ray, hit.point, wave_mode))
        stack.append((refracted, depth + 1))
        if show_reflections or split.total_internal_reflection:
            stack.append((reflected, depth + 1))

    return rays, intersections


def initial_rays(laser: Laser, many_rays: bool) -> List[Tuple[Point, Point]]:
    """
    (tail, direction) of each ray leaving the laser.

    With many_rays a fan of parallel rays, offset sideways from -1 to +1 red
    wavelength in half-wavelength steps, replaces the single beam.
    """
    tail = laser.emission_point
    direction = laser.direction_unit_vector
    if not many_rays:
        return [(tail, direction)]
    starts = []
    x = -WAVELENGTH_RED
    while x <= WAVELENGTH_RED * 1.1:
        offset = direction.rotated(math.pi / 2) * x
        starts.append((tail + offset, direction))
        x += WAVELENGTH_RED / 2
    return starts


def propagate_prisms(laser: Laser, prisms: Sequence, environment_medium: Medium,
                     prism_medium: Medium, many_rays: bool = False,
                     show_reflections: bool = False, show_normals: bool = False,
                     verbose: int = 0) -> Tuple[List[LightRay], List[Intersection]]:
    """
    Propagate the laser through a set of prisms.

    Args:
        laser: The light source. Nothing is emitted when it is off.
        prisms: Prisms (anything with translated_shape()).
        environment_medium: Medium outside the prisms.
        prism_medium: Medium inside the prisms.
        many_rays: Fire a fan of parallel rays instead of one.
        show_reflections: Follow partial reflections too.
        show_normals: Return boundary intersections for display.
        verbose: Verbosity level (0 silent, 1 summary, 2 per hit).

    Returns:
        (rays, intersections)
    """
    rays: List[LightRay] = []
    intersections: List[Intersection] = []
    if not laser.on:
        return rays, intersections

    wave_mode = laser.view == 'wave'
    shapes = [prism.translated_shape() for prism in prisms]
    laser_in_prism = any(shape.contains_point(laser.emission_point) for shape in shapes)
    start_medium = prism_medium if laser_in_prism else environment_medium

    if laser.color_mode == 'white':
        # Intersections are shown for the extreme wavelengths only
        last = len(WHITE_LIGHT_WAVELENGTHS) - 1
        samples = [(nm / 1e9, i == 0 or i == last) for i, nm in enumerate(WHITE_LIGHT_WAVELENGTHS)]
    else:
        samples = [(laser.wavelength, True)]

    for tail, direction in initial_rays(laser, many_rays):
        if direction.magnitude == 0:
            continue
        for wavelength, show_intersection in samples:
            colored = ColoredRay(
                tail=tail,
                direction=direction,
                power=1.0,
                wavelength=wavelength,
                medium_index_of_refraction=start_medium.index_of_refraction(wavelength),
                frequency=SPEED_OF_LIGHT / wavelength,
            )
            new_rays, new_intersections = trace_colored_ray(
                colored, shapes, environment_medium, prism_medium,
                show_reflections=show_reflections,
                record_intersections=show_intersection and show_normals,
                wave_mode=wave_mode,
                verbose=verbose,
            )
            rays.extend(new_rays)
            intersections.extend(new_intersections)

    if verbose >= 1:
        print(f"[prisms] {len(shapes)} prisms, emitted {len(rays)} rays, "
              f"{len(intersections)} intersections")
    return rays, intersections
