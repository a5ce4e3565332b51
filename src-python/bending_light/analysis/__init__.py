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
Analysis Utilities
===============================================================================
Export and summary helpers for the rays of a propagation pass:

- CSV export of ray geometry, power and wavelength
- Ray statistics (counts per role, power totals, wavelengths)
- Filtering by ray role
===============================================================================
"""

from .saving import (
    save_rays_csv,
    filter_rays_by_role,
    get_ray_statistics,
)

__all__ = [
    'save_rays_csv',
    'filter_rays_by_role',
    'get_ray_statistics',
]
