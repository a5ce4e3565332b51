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

Bending Light
=============
Optical ray propagation for refraction, reflection and dispersion
demonstrations: a laser crossing a flat interface between two media, or a
beam traced through any number of prisms.

Main modules:
- core: media, laser, shapes, propagation, sensors, Scene and Simulator
- optical_elements: the Prism class and prototype prisms
- analysis: CSV export and ray statistics

Quick start:
    from bending_light.core.scene import Scene, RecursivePrismTrace
    from bending_light.core.simulator import recompute
    from bending_light.optical_elements import triangle_prism
"""

__version__ = "0.1.0"

# Convenience imports for common usage
from .core.scene import Scene, TwoMediumInterface, RecursivePrismTrace
from .core.simulator import Simulator, PropagationResult, recompute
from .core.ray import LightRay, RayRole
from .optical_elements import Prism, prism_prototypes

__all__ = [
    'Scene',
    'TwoMediumInterface',
    'RecursivePrismTrace',
    'Simulator',
    'PropagationResult',
    'recompute',
    'LightRay',
    'RayRole',
    'Prism',
    'prism_prototypes',
    '__version__',
]
