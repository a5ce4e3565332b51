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
Ray Data Export Utilities
===============================================================================
Export and summarize the rays of a propagation pass:

- save_rays_csv: tabular data with one row per ray
- get_ray_statistics: counts and totals for quick inspection
- filter_rays_by_role: select incident / reflected / transmitted / prism rays
===============================================================================
"""

import csv
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import numpy as np

from ..core.ray import LightRay, RayRole


def save_rays_csv(
    rays: Sequence[LightRay],
    output_path: Union[str, Path],
    filename: str = "rays.csv",
    precision_coords: int = 12,
    precision_power: int = 6,
) -> Path:
    """
    Export light rays to a CSV file.

    Coordinates are in meters, so the default coordinate precision is high.

    Args:
        rays: LightRay objects to export.
        output_path: Directory where the CSV file will be saved (created if
            missing).
        filename: Name of the output CSV file (default: "rays.csv").
        precision_coords: Decimal places for coordinates and lengths.
        precision_power: Decimal places for power fractions.

    Returns:
        Path: Full path to the created CSV file.

    Raises:
        OSError: If the directory cannot be created or the file written.

    Example:
        >>> result = recompute(scene)
        >>> output_file = save_rays_csv(result.rays, "./output")
    """
    output_dir = Path(output_path)
    output_dir.mkdir(parents=True, exist_ok=True)

    csv_file = output_dir / filename

    with open(csv_file, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)

        writer.writerow([
            'ray_index',
            'role',
            'tail_x',
            'tail_y',
            'tip_x',
            'tip_y',
            'length',
            'power_fraction',
            'index_of_refraction',
            'wavelength_in_vacuum_nm',
            'wavelength_in_medium',
            'phase_offset',
        ])

        coord_fmt = f"{{:.{precision_coords}f}}"
        power_fmt = f"{{:.{precision_power}f}}"

        for i, ray in enumerate(rays):
            writer.writerow([
                i,
                ray.role.value,
                coord_fmt.format(ray.tail.x),
                coord_fmt.format(ray.tail.y),
                coord_fmt.format(ray.tip.x),
                coord_fmt.format(ray.tip.y),
                coord_fmt.format(ray.length),
                power_fmt.format(ray.power_fraction),
                f"{ray.index_of_refraction:.6f}",
                f"{ray.wavelength_in_vacuum:.1f}",
                f"{ray.wavelength:.6e}",
                f"{ray.num_wavelengths_phase_offset:.6f}",
            ])

    return csv_file


def filter_rays_by_role(rays: Sequence[LightRay], role: Union[RayRole, str]) -> List[LightRay]:
    """
    Select the rays with the given role.

    Args:
        rays: Rays to filter.
        role: A RayRole, or its value ('incident', 'reflected',
            'transmitted', 'prism').

    Raises:
        ValueError: If `role` is not a known role.
    """
    role = RayRole(role)
    return [ray for ray in rays if ray.role == role]


def get_ray_statistics(rays: Sequence[LightRay]) -> Dict[str, Any]:
    """
    Summary statistics for a list of rays.

    Returns:
        dict with keys:
            'total': number of rays
            'by_role': {role value: count}
            'total_power': sum of power fractions
            'max_power': largest power fraction (0.0 when empty)
            'wavelengths_nm': sorted distinct vacuum wavelengths
            'total_length': summed segment length in meters
    """
    by_role = {role.value: 0 for role in RayRole}
    for ray in rays:
        by_role[ray.role.value] += 1

    powers = np.array([ray.power_fraction for ray in rays], dtype=float)
    lengths = np.array([ray.length for ray in rays], dtype=float)
    wavelengths = sorted({round(ray.wavelength_in_vacuum, 6) for ray in rays})

    return {
        'total': len(rays),
        'by_role': by_role,
        'total_power': float(powers.sum()) if len(powers) else 0.0,
        'max_power': float(powers.max()) if len(powers) else 0.0,
        'wavelengths_nm': wavelengths,
        'total_length': float(lengths.sum()) if len(lengths) else 0.0,
    }
