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

Constants used throughout the propagation engine.

All lengths are in meters unless the name says otherwise. They are kept in
one module so that shapes, rays, sensors and both propagation modes can share
them without circular imports.
"""

import numpy as np

# Physical constants
SPEED_OF_LIGHT = 2.99792458e8   # m/s
WAVELENGTH_RED = 650e-9         # m, reference wavelength for every substance

# Laser wavelength range (in nanometers)
LASER_MIN_WAVELENGTH = 380
LASER_MAX_WAVELENGTH = 700

# Largest laser angle allowed in wave mode when the laser sits in the top-left
# quadrant; steeper beams make the wave outline degenerate
MAX_ANGLE_IN_WAVE_MODE = 3.0194

# Samples used to approximate white light (nm), the maximum is excluded
WHITE_LIGHT_WAVELENGTHS = tuple(int(w) for w in np.arange(400, 700, 10))

# Every model length scales with the red wavelength
CHARACTERISTIC_LENGTH = WAVELENGTH_RED

MODEL_WIDTH = CHARACTERISTIC_LENGTH * 62
MODEL_HEIGHT = MODEL_WIDTH * 0.7

DEFAULT_LASER_DISTANCE_FROM_PIVOT = 9.225e-6

# Two-medium interface mode
BEAM_LENGTH = 1e-3
REFLECTED_VISIBILITY_THRESHOLD = 0.005

# Recursive prism mode
MAX_DEPTH = 50
MIN_POWER = 0.001
INTERSECTION_NUDGE = 1e-12
NO_HIT_EXTENSION = 2e-4
PRISM_WAVE_WIDTH = CHARACTERISTIC_LENGTH * 5
PRISM_TRAPEZIUM_WIDTH = CHARACTERISTIC_LENGTH / 2

# Below this, a denominator or a direction length is treated as zero
GEOMETRY_EPSILON = 1e-12

# Sensors
RAY_CONTAINS_TOLERANCE_SQUARED = 1e-14
INTENSITY_SENSOR_RADIUS = 1e-6

# Width of a drawn ray in model units
RAY_WIDTH = 1.5992063492063494e-7

# Simulation clock increments (seconds per step)
TIME_STEP_NORMAL = 1e-16
TIME_STEP_SLOW = 0.5e-16
