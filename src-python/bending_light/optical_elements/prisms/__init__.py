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
PRISMS SUB-MODULE
===============================================================================
The Prism placement class and the prototype prisms offered in the toolbox.

Factory Functions (all sized from a = CHARACTERISTIC_LENGTH * 10):
- triangle_prism(): equilateral triangle
- trapezoid_prism(): isosceles trapezoid
- square_prism(): square
- circle_prism(): full circle of diameter a
- semicircle_prism(): half circle of radius a/2
- diverging_lens_prism(): rectangle with one concave circular face
- prism_prototypes(): one of each, in toolbox order
===============================================================================
"""

import math
from typing import List

from ...core.constants import CHARACTERISTIC_LENGTH
from ...core.geometry import Point, ORIGIN
from ...core.shapes import CircleShape, Polygon, SemiCircle
from .base_prism import Prism

# Prototype size
PROTOTYPE_SIZE = CHARACTERISTIC_LENGTH * 10


# ============================================================================
# Factory Functions
# ============================================================================

def triangle_prism(a: float = PROTOTYPE_SIZE) -> Prism:
    """Equilateral triangle with side `a`, centered on its centroid."""
    points = [
        Point(-a / 2, -a / (2 * math.sqrt(3))),
        Point(a / 2, -a / (2 * math.sqrt(3))),
        Point(0, a / math.sqrt(3)),
    ]
    return Prism(Polygon(points, reference_point_index=1), 'triangle')


def trapezoid_prism(a: float = PROTOTYPE_SIZE) -> Prism:
    """Isosceles trapezoid with base `a` and top a/2."""
    h = a * math.sqrt(3) / 4
    points = [
        Point(-a / 2, -h),
        Point(a / 2, -h),
        Point(a / 4, h),
        Point(-a / 4, h),
    ]
    return Prism(Polygon(points, reference_point_index=1), 'trapezoid')


def square_prism(a: float = PROTOTYPE_SIZE) -> Prism:
    points = [
        Point(-a / 2, a / 2),
        Point(a / 2, a / 2),
        Point(a / 2, -a / 2),
        Point(-a / 2, -a / 2),
    ]
    return Prism(Polygon(points, reference_point_index=2), 'square')


def circle_prism(a: float = PROTOTYPE_SIZE) -> Prism:
    return Prism(CircleShape(ORIGIN, a / 2), 'circle')


def semicircle_prism(a: float = PROTOTYPE_SIZE) -> Prism:
    """Half disk of radius a/2, bulging toward -x."""
    radius = a / 2
    return Prism(SemiCircle([Point(0, radius), Point(0, -radius)], radius, reference_point_index=1), 'semicircle')


def diverging_lens_prism(a: float = PROTOTYPE_SIZE) -> Prism:
    """
    Rectangle whose left face is a concave half circle of radius a/2.

    The left face runs from the last vertex back to the first; the arc is
    carved into the rectangle from that side.
    """
    radius = a / 2
    points = [
        Point(-0.6 * radius, radius),
        Point(0.6 * radius, radius),
        Point(0.6 * radius, -radius),
        Point(-0.6 * radius, -radius),
    ]
    return Prism(Polygon(points, reference_point_index=2, radius=radius), 'diverging_lens')


def prism_prototypes() -> List[Prism]:
    """Fresh copies of every prototype prism, in toolbox order."""
    return [
        triangle_prism(),
        trapezoid_prism(),
        square_prism(),
        circle_prism(),
        semicircle_prism(),
        diverging_lens_prism(),
    ]


__all__ = [
    'Prism',
    'PROTOTYPE_SIZE',
    'triangle_prism',
    'trapezoid_prism',
    'square_prism',
    'circle_prism',
    'semicircle_prism',
    'diverging_lens_prism',
    'prism_prototypes',
]
