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

Wavelength-dependent index of refraction.

A substance is described only by its index at a reference wavelength. Its
dispersion is modeled by placing it on a line between two physical models:

- air, a two-term approximation valid across the visible range
- BK7-like glass, the three-term Sellmeier equation

The mixing factor is chosen so that the blend reproduces the reference index
exactly at the reference wavelength. Indices above glass extrapolate beyond
the glass model, which is how diamond and the mystery substances get stronger
dispersion.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from .constants import WAVELENGTH_RED

ArrayLike = Union[float, np.ndarray]

# Sellmeier coefficients (C terms converted from um^2 to m^2)
SELLMEIER_B = (1.03961212, 0.231792344, 1.01046945)
SELLMEIER_C = (6.00069867e-3 * 1e-12, 2.00179144e-2 * 1e-12, 1.03560653e2 * 1e-12)

# Below this, the air and glass reference indices are treated as equal
DEGENERATE_DELTA = 1e-12


def air_index(wavelength: ArrayLike) -> ArrayLike:
    """
    Index of refraction of air.

    Args:
        wavelength: Wavelength in meters (float or numpy array).
    """
    inv_sq = np.power(np.asarray(wavelength, dtype=float) * 1e6, -2.0)
    result = 1.0 + 5792105e-8 / (238.0185 - inv_sq) + 167917e-8 / (57.362 - inv_sq)
    return float(result) if np.ndim(result) == 0 else result


def glass_index(wavelength: ArrayLike) -> ArrayLike:
    """
    Index of refraction of BK7-like glass from the Sellmeier equation.

    Args:
        wavelength: Wavelength in meters (float or numpy array).
    """
    l2 = np.square(np.asarray(wavelength, dtype=float))
    total = 1.0
    for b, c in zip(SELLMEIER_B, SELLMEIER_C):
        total = total + b * l2 / (l2 - c)
    result = np.sqrt(total)
    return float(result) if np.ndim(result) == 0 else result


@dataclass(frozen=True)
class DispersionFunction:
    """
    Index of refraction as a function of wavelength for one substance.

    Attributes:
        reference_index: Index of refraction at the reference wavelength.
        reference_wavelength: Reference wavelength in meters (red light by default).
    """
    reference_index: float
    reference_wavelength: float = WAVELENGTH_RED

    @property
    def mixing_factor(self) -> float:
        """
        Position of the reference index between air (0) and glass (1).

        Clamped below at 0; values above 1 extrapolate past glass.
        Returns 0 when the two reference models coincide.
        """
        n_air_ref = air_index(self.reference_wavelength)
        n_glass_ref = glass_index(self.reference_wavelength)
        delta = n_glass_ref - n_air_ref
        if abs(delta) < DEGENERATE_DELTA:
            return 0.0
        return max(0.0, (self.reference_index - n_air_ref) / delta)

    def index_at(self, wavelength: ArrayLike) -> ArrayLike:
        """
        Index of refraction at the given wavelength.

        Args:
            wavelength: Wavelength in meters (float or numpy array).

        Returns:
            The blended index, with the same shape as `wavelength`.
        """
        x = self.mixing_factor
        if x == 0.0:
            return air_index(wavelength)
        return x * glass_index(wavelength) + (1.0 - x) * air_index(wavelength)

    def index_for_red(self) -> float:
        return self.index_at(WAVELENGTH_RED)


def dispersion_curve(function: DispersionFunction, wavelengths_nm) -> np.ndarray:
    """
    Evaluate a dispersion function over a set of wavelengths.

    Args:
        function: The dispersion function to sample.
        wavelengths_nm: Iterable of wavelengths in nanometers.

    Returns:
        numpy array of indices, one per wavelength.
    """
    wavelengths = np.asarray(list(wavelengths_nm), dtype=float) * 1e-9
    return np.atleast_1d(function.index_at(wavelengths))
