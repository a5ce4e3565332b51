"""
===============================================================================
DISPERSION, MEDIUM AND LASER TESTS
===============================================================================

Tests for core/dispersion.py, core/medium.py and core/laser.py:

1. DISPERSION
   - reference index reproduced at red light
   - normal dispersion (blue bends more than red)
   - array evaluation

2. SUBSTANCES AND MEDIA
   - catalog lookup and validation
   - color factory profiles

3. LASER
   - geometry (pivot, emission point, direction)
   - validated settings

Run with:
    python developer_tests/test_dispersion_and_medium.py

Or with pytest:
    pytest developer_tests/test_dispersion_and_medium.py -v
===============================================================================
"""

import sys
import math
from pathlib import Path

# Add the src-python directory to the path
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


# =============================================================================
# TEST CONFIGURATION
# =============================================================================

TOLERANCE = 1e-9


def assert_close(actual, expected, tol=TOLERANCE, msg=""):
    """Assert that two values are close within tolerance."""
    if abs(actual - expected) > tol:
        raise AssertionError(
            f"{msg}: expected {expected}, got {actual} (diff: {abs(actual - expected)})"
        )


# =============================================================================
# DISPERSION
# =============================================================================

def test_reference_index_reproduced_at_red():
    """Every catalog substance has its nominal index at 650 nm."""
    from bending_light.core.medium import SUBSTANCES
    from bending_light.core.constants import WAVELENGTH_RED

    print("\n" + "=" * 60)
    print("TEST: Reference index at red light")
    print("=" * 60)

    for substance in SUBSTANCES:
        n_red = substance.index_of_refraction(WAVELENGTH_RED)
        print(f"  {substance.name:10s} n(650nm) = {n_red:.6f}")
        assert_close(n_red, substance.index_for_reference_wavelength, 1e-9, substance.name)
        assert_close(substance.index_of_refraction_for_red_light, n_red, 1e-12, substance.name)

    print("  PASSED")


def test_module_docstrings():
    """The license header and the module description form one docstring."""
    from bending_light.core import constants, dispersion, shapes

    assert "Wavelength-dependent index of refraction" in dispersion.__doc__
    assert "Immutable prism shapes" in shapes.__doc__
    assert "Constants used throughout" in constants.__doc__
    for module in (constants, dispersion, shapes):
        assert "Apache License" in module.__doc__


def test_reference_models():
    from bending_light.core.dispersion import air_index, glass_index

    assert_close(air_index(650e-9), 1.0002763, 1e-6, "air at 650nm")
    assert_close(glass_index(650e-9), 1.5145, 1e-3, "glass at 650nm")
    assert glass_index(400e-9) > glass_index(650e-9)


def test_normal_dispersion():
    """Index decreases with wavelength across the visible range."""
    import numpy as np
    from bending_light.core.medium import GLASS, WATER, DIAMOND
    from bending_light.core.dispersion import dispersion_curve
    from bending_light.core.constants import WHITE_LIGHT_WAVELENGTHS

    for substance in (WATER, GLASS, DIAMOND):
        curve = dispersion_curve(substance.dispersion_function, WHITE_LIGHT_WAVELENGTHS)
        assert curve.shape == (len(WHITE_LIGHT_WAVELENGTHS),)
        assert np.all(np.diff(curve) < 0), f"{substance.name} curve not decreasing"
        assert substance.index_of_refraction(400e-9) > substance.index_of_refraction(650e-9)


def test_array_matches_scalar():
    import numpy as np
    from bending_light.core.medium import WATER

    wavelengths = np.array([420e-9, 550e-9, 680e-9])
    values = WATER.index_of_refraction(wavelengths)
    for wavelength, value in zip(wavelengths, values):
        assert_close(value, WATER.index_of_refraction(float(wavelength)), 1e-12, "array vs scalar")


def test_mixing_factor_clamped():
    """Indices below air fall back to the air model."""
    from bending_light.core.dispersion import DispersionFunction, air_index

    below_air = DispersionFunction(0.9)
    assert below_air.mixing_factor == 0.0
    assert_close(below_air.index_at(500e-9), air_index(500e-9), 1e-12, "clamped to air")

    assert DispersionFunction(2.419).mixing_factor > 1.0


# =============================================================================
# SUBSTANCES AND MEDIA
# =============================================================================

def test_substance_catalog():
    from bending_light.core.medium import substance_by_name, WATER, MYSTERY_A, Substance

    assert substance_by_name('water') is WATER
    assert substance_by_name('Mystery A').mystery
    assert MYSTERY_A.mystery

    try:
        substance_by_name('unobtainium')
        raise AssertionError("Expected ValueError for unknown substance")
    except ValueError as e:
        assert "Unknown substance" in str(e)

    custom = Substance.custom_substance(1.7)
    assert custom.custom
    assert not custom.mystery


def test_substance_rejects_bad_index():
    from bending_light.core.medium import Substance

    for bad in (0.0, -1.2, float('nan'), float('inf')):
        try:
            Substance('Bad', bad)
            raise AssertionError(f"Expected ValueError for index {bad}")
        except ValueError as e:
            assert "Invalid index of refraction" in str(e)


def test_medium_colors():
    from bending_light.core.medium import (
        MediumColorFactory, top_medium, bottom_medium, AIR, GLASS, DIAMOND,
    )

    factory = MediumColorFactory()
    assert factory.get_color(1.0) == (255, 255, 255)
    assert factory.get_color(3.0) == MediumColorFactory.AGAINST_WHITE[3]

    black = MediumColorFactory('white')
    assert black.get_color(1.0) == (0, 0, 0)

    try:
        factory.light_type = 'infrared'
        raise AssertionError("Expected ValueError for light_type")
    except ValueError as e:
        assert "Invalid light_type" in str(e)

    top = top_medium(AIR)
    bottom = bottom_medium(GLASS)
    assert top.color != bottom.color

    swapped = bottom.with_substance(DIAMOND)
    assert swapped.substance is DIAMOND
    assert swapped.region.equals(bottom.region)
    assert bottom.substance is GLASS


def test_medium_rejects_non_substance():
    from shapely.geometry import box
    from bending_light.core.medium import Medium

    try:
        Medium(box(0, 0, 1, 1), 1.5)
        raise AssertionError("Expected ValueError for a non-Substance")
    except ValueError as e:
        assert "must be a Substance" in str(e)


# =============================================================================
# LASER
# =============================================================================

def test_laser_geometry():
    from bending_light.core.laser import Laser

    laser = Laser(1e-5, 3 * math.pi / 4, top_left_quadrant=True)
    assert not laser.on
    assert_close(laser.distance_from_pivot, 1e-5, 1e-18, "distance")
    assert_close(laser.angle, 3 * math.pi / 4, 1e-12, "angle")

    direction = laser.direction_unit_vector
    assert_close(direction.x, math.sqrt(0.5), 1e-12, "direction x")
    assert_close(direction.y, -math.sqrt(0.5), 1e-12, "direction y")

    laser.set_angle(math.radians(120))
    assert_close(laser.angle, math.radians(120), 1e-12, "rotated")
    assert_close(laser.distance_from_pivot, 1e-5, 1e-18, "distance kept")

    laser.translate(1e-6, 2e-6)
    assert_close(laser.pivot.x, 1e-6, 1e-18, "pivot moved")
    assert_close(laser.angle, math.radians(120), 1e-12, "angle kept")

    laser.on = True
    laser.reset()
    assert not laser.on
    assert_close(laser.angle, 3 * math.pi / 4, 1e-12, "angle restored")


def test_laser_validation():
    from bending_light.core.laser import Laser

    laser = Laser(1e-5, math.pi)

    for bad in (300e-9, 750e-9, float('nan')):
        try:
            laser.wavelength = bad
            raise AssertionError(f"Expected ValueError for wavelength {bad}")
        except ValueError as e:
            assert "Invalid wavelength" in str(e)

    laser.wavelength = 380e-9
    laser.wavelength = 700e-9

    try:
        laser.view = 'hologram'
        raise AssertionError("Expected ValueError for view")
    except ValueError as e:
        assert "Invalid laser view" in str(e)

    try:
        laser.color_mode = 'rainbow'
        raise AssertionError("Expected ValueError for color_mode")
    except ValueError as e:
        assert "Invalid color_mode" in str(e)

    try:
        Laser(0.0, math.pi)
        raise AssertionError("Expected ValueError for zero distance")
    except ValueError:
        pass


def test_laser_rejects_coincident_points():
    """The emission point and the pivot must differ, so the direction is defined."""
    from bending_light.core.laser import Laser
    from bending_light.core.geometry import Point

    laser = Laser(1e-5, math.pi)
    emission_before = laser.emission_point

    try:
        laser.emission_point = laser.pivot
        raise AssertionError("Expected ValueError for emission point on the pivot")
    except ValueError as e:
        assert "coincides with its pivot" in str(e)
    assert laser.emission_point == emission_before

    try:
        laser.pivot = laser.emission_point
        raise AssertionError("Expected ValueError for pivot on the emission point")
    except ValueError:
        pass
    assert laser.pivot == Point(0.0, 0.0)

    try:
        laser.emission_point = Point(float('nan'), 0.0)
        raise AssertionError("Expected ValueError for a non-finite emission point")
    except ValueError as e:
        assert "finite" in str(e)

    # Moving the pivot onto the old emission point is fine when both move
    laser.translate(emission_before.x, emission_before.y)
    assert laser.pivot == emission_before
    assert_close(laser.distance_from_pivot, 1e-5, 1e-18, "distance kept")


def test_wave_view_limits_angle():
    """Switching to wave view pulls a steep two-medium laser back."""
    from bending_light.core.laser import Laser
    from bending_light.core.constants import MAX_ANGLE_IN_WAVE_MODE

    laser = Laser(1e-5, math.radians(175), top_left_quadrant=True)
    laser.view = 'wave'
    assert_close(laser.angle, MAX_ANGLE_IN_WAVE_MODE, 1e-9, "clamped angle")


def test_wavelength_to_rgb():
    from bending_light.core.laser import wavelength_to_rgb

    assert wavelength_to_rgb(650) == (255, 0, 0)
    r, g, b = wavelength_to_rgb(450)
    assert b == 255 and r == 0
    assert wavelength_to_rgb(200) == wavelength_to_rgb(380)


# =============================================================================
# MAIN RUNNER
# =============================================================================

def run_all_tests():
    """Run all tests and report results."""
    print("\n" + "=" * 78)
    print("DISPERSION, MEDIUM AND LASER TESTS")
    print("=" * 78)

    tests = [
        ("Reference index at red", test_reference_index_reproduced_at_red),
        ("Module docstrings", test_module_docstrings),
        ("Reference models", test_reference_models),
        ("Normal dispersion", test_normal_dispersion),
        ("Array evaluation", test_array_matches_scalar),
        ("Mixing factor clamp", test_mixing_factor_clamped),
        ("Substance catalog", test_substance_catalog),
        ("Substance validation", test_substance_rejects_bad_index),
        ("Medium colors", test_medium_colors),
        ("Medium validation", test_medium_rejects_non_substance),
        ("Laser geometry", test_laser_geometry),
        ("Laser validation", test_laser_validation),
        ("Laser coincident points", test_laser_rejects_coincident_points),
        ("Wave view angle limit", test_wave_view_limits_angle),
        ("Wavelength to RGB", test_wavelength_to_rgb),
    ]

    passed = 0
    failed = 0
    errors = []

    for name, test_func in tests:
        try:
            test_func()
            passed += 1
        except Exception as e:
            failed += 1
            errors.append((name, str(e)))
            print(f"\n  FAILED: {name}")
            print(f"    Error: {e}")

    print("\n" + "=" * 78)
    print(f"SUMMARY: {passed}/{len(tests)} tests passed")
    print("=" * 78)

    if errors:
        print("\nFailed tests:")
        for name, error in errors:
            print(f"  - {name}: {error}")
        return False

    print("\nAll tests passed!")
    return True


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
