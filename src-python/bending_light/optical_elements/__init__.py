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
OPTICAL ELEMENTS MODULE
===============================================================================
Top-level module for convenient optical element constructors.

Sub-modules:
- prisms: the Prism placement class and the toolbox prototypes
===============================================================================
"""

from .prisms import (
    # Placement class
    Prism,
    PROTOTYPE_SIZE,
    # Factory functions
    triangle_prism,
    trapezoid_prism,
    square_prism,
    circle_prism,
    semicircle_prism,
    diverging_lens_prism,
    prism_prototypes,
)

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
