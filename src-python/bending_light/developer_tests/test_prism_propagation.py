"""
===============================================================================
RECURSIVE PRISM PROPAGATION TESTS
===============================================================================

Tests for the prism pass (core/propagation.py) driven through Scene and
recompute:

1. FREE SPACE
   - a single beam, the parallel fan, white light

2. NORMAL INCIDENCE
   - square and circle prisms: powers T and T^2
   - partial reflections and their order
   - intersections reported only with normals shown

3. TOTAL INTERNAL REFLECTION
   - laser starting inside a prism
   - the depth cap on a ray trapped by TIR

Run with:
    python developer_tests/test_prism_propagation.py

Or with pytest:
    pytest developer_tests/test_prism_propagation.py -v
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


def make_prism_scene(prisms=(), **mode_options):
    """Prism scene with the default laser (at the origin, firing along +x), on."""
    from bending_light.core.scene import Scene, RecursivePrismTrace

    mode = RecursivePrismTrace(prisms=list(prisms), **mode_options)
    scene = Scene(mode)
    scene.laser.on = True
    return scene


def normal_incidence_reflectance():
    """Air to glass reflectance at normal incidence, for red light."""
    from bending_light.core.medium import AIR, GLASS
    from bending_light.core.constants import WAVELENGTH_RED

    n1 = AIR.index_of_refraction(WAVELENGTH_RED)
    n2 = GLASS.index_of_refraction(WAVELENGTH_RED)
    return ((n1 - n2) / (n1 + n2)) ** 2


# =============================================================================
# FREE SPACE
# =============================================================================

def test_free_space_single_beam():
    from bending_light.core.simulator import recompute
    from bending_light.core.ray import RayRole
    from bending_light.core.constants import NO_HIT_EXTENSION

    print("\n" + "=" * 60)
    print("TEST: Free space beam")
    print("=" * 60)

    result = recompute(make_prism_scene())
    assert len(result.rays) == 1
    ray = result.rays[0]
    print(f"  {ray}")
    assert ray.role == RayRole.PRISM
    assert_close(ray.tip.x, NO_HIT_EXTENSION, 1e-12, "extension length")
    assert_close(ray.tip.y, 0.0, 1e-12, "straight along +x")
    assert_close(ray.power_fraction, 1.0, msg="full power")
    assert result.intersections == ()
    print("  PASSED")


def test_laser_off():
    from bending_light.core.simulator import recompute
    from bending_light.optical_elements import square_prism

    scene = make_prism_scene([square_prism()])
    scene.laser.on = False
    result = recompute(scene)
    assert result.rays == ()
    assert result.intersections == ()


def test_parallel_fan():
    from bending_light.core.simulator import recompute
    from bending_light.core.constants import WAVELENGTH_RED

    result = recompute(make_prism_scene(many_rays=5))
    assert len(result.rays) == 5
    offsets = sorted(ray.tail.y for ray in result.rays)
    for offset, expected in zip(offsets, (-1.0, -0.5, 0.0, 0.5, 1.0)):
        assert_close(offset, expected * WAVELENGTH_RED, 1e-15, "fan offset")
    assert all(abs(ray.unit_vector.x - 1.0) < 1e-12 for ray in result.rays)


def test_white_light_samples():
    from bending_light.core.simulator import recompute
    from bending_light.core.constants import WHITE_LIGHT_WAVELENGTHS

    scene = make_prism_scene()
    scene.laser.color_mode = 'white'
    rays = recompute(scene).rays
    assert len(rays) == len(WHITE_LIGHT_WAVELENGTHS) == 30
    assert [round(ray.wavelength_in_vacuum) for ray in rays] == list(WHITE_LIGHT_WAVELENGTHS)
    assert len({ray.color for ray in rays}) > 1


# =============================================================================
# NORMAL INCIDENCE
# =============================================================================

def test_square_prism_normal_incidence():
    """Beam through the middle of a square: powers 1, T, T^2."""
    from bending_light.core.simulator import recompute
    from bending_light.core.medium import GLASS
    from bending_light.core.constants import WAVELENGTH_RED
    from bending_light.optical_elements import square_prism, PROTOTYPE_SIZE

    print("\n" + "=" * 60)
    print("TEST: Square prism at normal incidence")
    print("=" * 60)

    prism = square_prism()
    prism.translate(1e-5, 0.0)
    result = recompute(make_prism_scene([prism]))

    R = normal_incidence_reflectance()
    T = 1.0 - R
    powers = [ray.power_fraction for ray in result.rays]
    print(f"  R = {R:.5f}, powers = {[round(p, 5) for p in powers]}")

    assert len(result.rays) == 3
    assert_close(powers[0], 1.0, msg="before the prism")
    assert_close(powers[1], T, 1e-9, "inside the prism")
    assert_close(powers[2], T * T, 1e-9, "after the prism")

    left_face = 1e-5 - PROTOTYPE_SIZE / 2
    right_face = 1e-5 + PROTOTYPE_SIZE / 2
    assert_close(result.rays[0].tip.x, left_face, 1e-12, "enters at the left face")
    assert_close(result.rays[1].tip.x, right_face, 1e-12, "leaves at the right face")

    inside = result.rays[1]
    n_glass = GLASS.index_of_refraction(WAVELENGTH_RED)
    assert_close(inside.index_of_refraction, n_glass, 1e-12, "index inside")
    assert_close(inside.speed, 2.99792458e8 / n_glass, 1e-3, "slower inside")
    print("  PASSED")


def test_circle_prism_through_center():
    from bending_light.core.simulator import recompute
    from bending_light.optical_elements import circle_prism

    prism = circle_prism()
    prism.translate(1e-5, 0.0)
    rays = recompute(make_prism_scene([prism])).rays

    T = 1.0 - normal_incidence_reflectance()
    assert len(rays) == 3
    assert_close(rays[2].power_fraction, T * T, 1e-9, "two crossings")
    assert_close(rays[2].unit_vector.y, 0.0, 1e-9, "undeviated")


def test_partial_reflections_preorder():
    """Parents come before children, reflected subtree first."""
    from bending_light.core.simulator import recompute
    from bending_light.core.constants import MIN_POWER
    from bending_light.optical_elements import square_prism

    prism = square_prism()
    prism.translate(1e-5, 0.0)
    rays = recompute(make_prism_scene([prism], show_reflections=True)).rays

    R = normal_incidence_reflectance()
    T = 1.0 - R

    assert len(rays) > 3
    assert_close(rays[0].power_fraction, 1.0, msg="root segment first")
    assert_close(rays[1].power_fraction, R, 1e-9, "reflected child next")
    assert_close(rays[1].unit_vector.x, -1.0, 1e-9, "reflected back toward the laser")
    assert_close(rays[2].power_fraction, T, 1e-9, "then the refracted child")
    assert all(ray.power_fraction >= MIN_POWER for ray in rays)

    # Every segment after the first starts where an earlier one ended
    for i, ray in enumerate(rays[1:], start=1):
        assert any(ray.tail.distance(parent.tip) < 1e-11 for parent in rays[:i]), \
            f"ray {i} has no parent"


def test_intersections_follow_show_normals():
    from bending_light.core.simulator import recompute
    from bending_light.optical_elements import square_prism, PROTOTYPE_SIZE

    prism = square_prism()
    prism.translate(1e-5, 0.0)

    assert recompute(make_prism_scene([prism])).intersections == ()

    result = recompute(make_prism_scene([prism], show_normals=True))
    assert len(result.intersections) == 2
    first = result.intersections[0]
    assert_close(first.point.x, 1e-5 - PROTOTYPE_SIZE / 2, 1e-12, "left face")
    assert_close(first.unit_normal.x, -1.0, 1e-12, "normal faces the beam")

    # White light reports intersections for the extreme wavelengths only
    scene = make_prism_scene([prism], show_normals=True)
    scene.laser.color_mode = 'white'
    result = recompute(scene)
    assert len(result.rays) == 90
    assert len(result.intersections) == 4


def test_white_light_disperses():
    """Blue bends more than red through a tilted prism."""
    from bending_light.core.simulator import recompute
    from bending_light.optical_elements import triangle_prism

    prism = triangle_prism()
    prism.translate(1e-5, 0.0)
    scene = make_prism_scene([prism])
    scene.laser.color_mode = 'white'
    rays = recompute(scene).rays

    exits = [ray for ray in rays if ray.tip.x > 1e-4]
    assert len(exits) == 30
    blue, red = exits[0], exits[-1]
    assert blue.wavelength_in_vacuum < red.wavelength_in_vacuum
    assert abs(blue.angle - red.angle) > 1e-4


# =============================================================================
# TOTAL INTERNAL REFLECTION
# =============================================================================

def test_tir_inside_prism():
    """Laser inside a square, aiming 40 deg up: TIR at the top face."""
    from bending_light.core.simulator import recompute
    from bending_light.optical_elements import square_prism, PROTOTYPE_SIZE

    prism = square_prism()
    prism.translate(2.5e-6, 0.0)
    scene = make_prism_scene([prism])
    scene.laser.set_angle(math.radians(220))
    rays = recompute(scene).rays

    assert_close(rays[0].tip.y, PROTOTYPE_SIZE / 2, 1e-12, "hits the top face")
    assert_close(rays[1].power_fraction, 1.0, msg="total internal reflection")
    assert rays[1].unit_vector.y < 0, "reflected downward"
    assert_close(rays[1].unit_vector.x, math.cos(math.radians(40)), 1e-9, "mirror image")


def test_depth_cap():
    """A beam trapped by TIR at 45 deg stops after MAX_DEPTH generations."""
    from bending_light.core.simulator import recompute
    from bending_light.core.constants import MAX_DEPTH
    from bending_light.optical_elements import square_prism

    print("\n" + "=" * 60)
    print("TEST: Depth cap")
    print("=" * 60)

    prism = square_prism()
    prism.translate(2.5e-6, 0.3e-6)
    scene = make_prism_scene([prism])
    scene.laser.set_angle(math.radians(225))
    rays = recompute(scene).rays

    print(f"  Emitted {len(rays)} segments")
    assert len(rays) == MAX_DEPTH + 1
    assert all(abs(ray.power_fraction - 1.0) < 1e-12 for ray in rays)
    min_x, min_y, max_x, max_y = prism.to_shapely().bounds
    slack = 1e-12
    for ray in rays:
        assert min_x - slack <= ray.tip.x <= max_x + slack, "trapped inside"
        assert min_y - slack <= ray.tip.y <= max_y + slack, "trapped inside"
    print("  PASSED")


def test_degenerate_geometry():
    """Zero-radius prisms are invisible and rays never carry NaN or Inf."""
    from bending_light.core.simulator import recompute
    from bending_light.core.geometry import Point
    from bending_light.core.ray import LightRay
    from bending_light.core.shapes import CircleShape
    from bending_light.optical_elements import Prism

    dot = Prism(CircleShape(Point(1e-5, 0.0), 0.0), 'circle')
    rays = recompute(make_prism_scene([dot])).rays
    assert len(rays) == 1
    assert all(ray.tail.is_finite() and ray.tip.is_finite() for ray in rays)

    ray = LightRay(
        tail=Point(0.0, 0.0),
        tip=Point(float('inf'), float('nan')),
        index_of_refraction=1.0,
        wavelength=650e-9,
        wavelength_in_vacuum=650.0,
        power_fraction=1.0,
        color=(255, 0, 0),
        wave_width=1e-6,
        trapezium_width=1e-6,
    )
    assert ray.tip == Point(0.0, 0.0)


def test_grazing_hit_in_matched_media():
    """A ray tangent to a circle of air in air passes with all its power."""
    from bending_light.core.simulator import recompute
    from bending_light.core.geometry import Point
    from bending_light.core.medium import prism_medium, AIR
    from bending_light.core.shapes import CircleShape
    from bending_light.optical_elements import Prism

    print("\n" + "=" * 60)
    print("TEST: Tangent hit between matched media")
    print("=" * 60)

    bubble = Prism(CircleShape(Point(1e-5, 1e-6), 1e-6), 'circle')
    scene = make_prism_scene([bubble], prism_medium=prism_medium(AIR), show_reflections=True)
    scene.laser.emission_point = Point(-1e-6, 0.0)

    rays = recompute(scene).rays
    print(f"  {len(rays)} rays traced")
    assert len(rays) >= 1
    assert all(ray.tail.is_finite() and ray.tip.is_finite() for ray in rays)
    assert all(ray.power_fraction == 1.0 for ray in rays)
    assert rays[-1].tip.x > 1e-4, "beam leaves the scene"
    print("  PASSED")


def test_laser_without_direction():
    from bending_light.core.simulator import recompute
    from bending_light.core.geometry import Point
    from bending_light.optical_elements import square_prism

    scene = make_prism_scene([square_prism()], many_rays=5)
    scene.laser.emission_point = Point(-1e-30, 0.0)
    result = recompute(scene)
    assert len(result.rays) == 0
    assert len(result.intersections) == 0


def test_trace_colored_ray_directly():
    from bending_light.core.propagation import trace_colored_ray
    from bending_light.core.ray import ColoredRay
    from bending_light.core.geometry import Point
    from bending_light.core.medium import environment_medium, prism_medium
    from bending_light.core.constants import SPEED_OF_LIGHT, WAVELENGTH_RED
    from bending_light.optical_elements import square_prism

    prism = square_prism()
    prism.translate(1e-5, 0.0)
    environment = environment_medium()
    glass = prism_medium()

    ray = ColoredRay(
        tail=Point(0.0, 0.0),
        direction=Point(1.0, 0.0),
        power=1.0,
        wavelength=WAVELENGTH_RED,
        medium_index_of_refraction=environment.index_of_refraction(WAVELENGTH_RED),
        frequency=SPEED_OF_LIGHT / WAVELENGTH_RED,
    )
    rays, intersections = trace_colored_ray(ray, [prism.translated_shape()], environment, glass)
    assert len(rays) == 3
    assert len(intersections) == 2

    rays, intersections = trace_colored_ray(
        ray, [prism.translated_shape()], environment, glass, record_intersections=False
    )
    assert intersections == []


# =============================================================================
# MAIN RUNNER
# =============================================================================

def run_all_tests():
    """Run all tests and report results."""
    print("\n" + "=" * 78)
    print("RECURSIVE PRISM PROPAGATION TESTS")
    print("=" * 78)

    tests = [
        ("Free space beam", test_free_space_single_beam),
        ("Laser off", test_laser_off),
        ("Parallel fan", test_parallel_fan),
        ("White light samples", test_white_light_samples),
        ("Square prism", test_square_prism_normal_incidence),
        ("Circle prism", test_circle_prism_through_center),
        ("Partial reflections", test_partial_reflections_preorder),
        ("Intersections and normals", test_intersections_follow_show_normals),
        ("White light dispersion", test_white_light_disperses),
        ("TIR inside prism", test_tir_inside_prism),
        ("Depth cap", test_depth_cap),
        ("Degenerate geometry", test_degenerate_geometry),
        ("Tangent hit, matched media", test_grazing_hit_in_matched_media),
        ("Laser without direction", test_laser_without_direction),
        ("Trace one ray", test_trace_colored_ray_directly),
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
