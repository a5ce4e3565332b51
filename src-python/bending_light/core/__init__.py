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

from .geometry import geometry, Point, Line, Geometry
from . import constants
from .medium import Substance, Medium, MediumColorFactory
from .laser import Laser
from .ray import LightRay, ColoredRay, RayRole
from .sensors import Reading, IntensityMeter, VelocitySensor, WaveSensor
from .scene import Scene, TwoMediumInterface, RecursivePrismTrace
from .simulator import Simulator, PropagationResult, recompute
from .svg_renderer import SVGRenderer

__all__ = [
    'geometry', 'Point', 'Line', 'Geometry',
    'constants',
    'Substance', 'Medium', 'MediumColorFactory',
    'Laser',
    'LightRay', 'ColoredRay', 'RayRole',
    'Reading', 'IntensityMeter', 'VelocitySensor', 'WaveSensor',
    'Scene', 'TwoMediumInterface', 'RecursivePrismTrace',
    'Simulator', 'PropagationResult', 'recompute',
    'SVGRenderer',
]
