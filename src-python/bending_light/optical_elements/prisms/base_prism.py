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
PRISM
===============================================================================
A prism is an immutable base shape plus a mutable placement:

- base_shape: Polygon, CircleShape or SemiCircle, centered near the origin
- translation: accumulated translation (Point)
- rotation: accumulated rotation in radians, about the base shape's
  rotation center (its centroid)

translated_shape() builds the live geometry: rotate the base shape about
its center, then translate it. The propagation code only ever sees that
derived shape.
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from shapely.geometry.base import BaseGeometry

from ...core.geometry import Point, ORIGIN
from ...core.shapes import PRISM_SHAPE_TYPES


class Prism:
    """
    A movable, rotatable prism.

    Attributes:
        base_shape: The untransformed outline.
        translation (Point): Current offset of the shape.
        rotation (float): Current rotation in radians (counterclockwise).
        type_name (str): Prototype name, e.g. 'triangle' or 'circle'.
    """

    def __init__(self, base_shape, type_name: str = 'custom',
                 translation: Point = ORIGIN, rotation: float = 0.0) -> None:
        if not isinstance(base_shape, PRISM_SHAPE_TYPES):
            raise ValueError(
                f"Invalid prism shape {type(base_shape).__name__}. "
                f"Valid options: {tuple(t.__name__ for t in PRISM_SHAPE_TYPES)}"
            )
        self.base_shape = base_shape
        self.type_name = type_name
        self.translation = translation
        self.rotation = rotation

    def translate(self, dx: float, dy: float) -> None:
        self.translation = self.translation + Point(dx, dy)

    def rotate(self, delta_angle: float) -> None:
        self.rotation += delta_angle

    def translated_shape(self):
        """The base shape rotated about its center, then moved into place."""
        base = self.base_shape
        rotated = base.rotated_instance(self.rotation, base.rotation_center())
        return rotated.translated_instance(self.translation.x, self.translation.y)

    def contains(self, point: Point) -> bool:
        return self.translated_shape().contains_point(point)

    def reference_point(self) -> Optional[Point]:
        """Rotation handle in scene coordinates (None for circles)."""
        return self.translated_shape().reference_point()

    def to_shapely(self) -> BaseGeometry:
        return self.translated_shape().to_shapely()

    def copy(self) -> 'Prism':
        return Prism(self.base_shape, self.type_name, self.translation, self.rotation)

    def __repr__(self) -> str:
        return (f"Prism(type='{self.type_name}', "
                f"translation=({self.translation.x:.3g}, {self.translation.y:.3g}), "
                f"rotation={self.rotation:.4f})")
