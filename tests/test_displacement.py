"""Tests for normals, refraction and the displacement map."""

import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

# 70x40 pill, the reference scenario
SCENARIO = dict(object_width=70, object_height=40, radius=20, bezel_width=16)

# Same pill on a padded canvas with an odd row count, so row 30 is the
# horizontal centre line
PADDED = dict(SCENARIO, canvas_width=90, canvas_height=61)


def _scenario_config(**kwargs):
    from liquidglass import OpticalConfig
    from liquidglass.profiles import CONVEX
    kwargs.setdefault("bezel_height_fn", CONVEX)
    return OpticalConfig(glass_thickness=80, refractive_index=1.5, **kwargs)


# --- Normals ---------------------------------------------------------------

def test_flat_height_gives_up_normals():
    from liquidglass.normals import estimate_normals
    normals = estimate_normals(np.full((5, 7), 3.0))
    np.testing.assert_array_equal(normals[..., 2], 1.0)
    np.testing.assert_array_equal(normals[..., :2], 0.0)


def test_ramp_normals():
    from liquidglass.normals import estimate_normals
    x = np.arange(10, dtype=np.float64)
    height = np.tile(x * 2.0, (4, 1))
    normals = estimate_normals(height, step=1.0)
    expected = np.array([-2.0, 0.0, 1.0]) / np.sqrt(5.0)
    np.testing.assert_allclose(normals[:, 1:-1], np.broadcast_to(
        expected, (4, 8, 3)))


def test_normals_are_unit_length():
    from liquidglass import Geometry
    from liquidglass.heightfield import build_height_field
    from liquidglass.normals import estimate_normals
    from liquidglass.profiles import CONVEX
    height = build_height_field(Geometry(**PADDED), CONVEX, 40)
    normals = estimate_normals(height, step=1.0)
    np.testing.assert_allclose(np.linalg.norm(normals, axis=-1), 1.0)
    assert np.all(normals[..., 2] > 0)


def test_flat_mask_forces_up_normal():
    from liquidglass.normals import estimate_normals
    height = np.tile(np.arange(6, dtype=np.float64), (3, 1))
    flat = np.zeros(height.shape, dtype=bool)
    flat[:, 3] = True
    normals = estimate_normals(height, flat=flat)
    np.testing.assert_array_equal(normals[:, 3], [[0, 0, 1]] * 3)
    assert np.all(normals[:, 2, 0] < 0)


def test_single_pixel_height_field():
    from liquidglass.normals import estimate_normals
    normals = estimate_normals(np.array([[5.0]]))
    np.testing.assert_array_equal(normals, [[[0.0, 0.0, 1.0]]])


# --- Refraction ------------------------------------------------------------

def test_level_surface_does_not_bend_the_ray():
    from liquidglass.refraction import refract
    t = refract(np.array([[0.0, 0.0, 1.0]]), 1.5)
    np.testing.assert_allclose(t, [[0.0, 0.0, -1.0]])
    assert t[0, 0] == 0 and t[0, 1] == 0


@pytest.mark.parametrize("angle", [10, 30, 60, 85])
def test_refraction_obeys_snell(angle):
    from liquidglass.refraction import refract
    a = np.radians(angle)
    normal = np.array([-np.sin(a), 0.0, np.cos(a)])
    t = refract(normal, 1.5)

    assert np.linalg.norm(t) == pytest.approx(1.0)
    # Angle between T and the inward normal
    cos_t = np.dot(t, -normal)
    sin_t = np.sqrt(1 - cos_t ** 2)
    assert sin_t == pytest.approx(np.sin(a) / 1.5)
    # Bent towards the normal, i.e. towards +x for this tilt
    assert t[0] > 0


@pytest.mark.parametrize("n", [1.0, 0.8, float("nan")])
def test_refraction_rejects_index_at_or_below_one(n):
    from liquidglass import ConfigurationError
    from liquidglass.refraction import refract
    with pytest.raises(ConfigurationError):
        refract(np.array([0.0, 0.0, 1.0]), n)


def test_displacement_field_depth_scaling():
    from liquidglass.refraction import displacement_field
    a = np.radians(40)
    normal = np.array([[-np.sin(a), 0.0, np.cos(a)]])
    dx1, _ = displacement_field(normal, 10.0, 1.5)
    dx2, _ = displacement_field(normal, 20.0, 1.5)
    assert dx1[0] > 0
    assert dx2[0] == pytest.approx(2 * dx1[0])


# --- Encoding ----------------------------------------------------------------

def test_encode_mid_grey_convention():
    from liquidglass.displacement import encode_displacement
    dx = np.array([[0.0, 2.0, -4.0]])
    dy = np.array([[1.0, 0.0, 0.0]])
    buffer, max_disp = encode_displacement(dx, dy)
    assert max_disp == 4.0
    px = buffer.pixels
    assert tuple(px[0, 0]) == (128, 160, 0, 255)
    assert tuple(px[0, 1]) == (192, 128, 0, 255)
    assert tuple(px[0, 2]) == (1, 128, 0, 255)


def test_encode_all_zero_field():
    from liquidglass.displacement import encode_displacement
    buffer, max_disp = encode_displacement(np.zeros((3, 4)), np.zeros((3, 4)))
    assert max_disp == 0
    assert np.all(buffer.pixels[..., 0] == 128)
    assert np.all(buffer.pixels[..., 1] == 128)
    assert np.all(buffer.pixels[..., 3] == 255)


def test_round_trip_within_one_quantisation_step():
    from liquidglass import Geometry, compute_offsets, decode_displacement
    from liquidglass.displacement import encode_displacement
    dx, dy = compute_offsets(Geometry(**PADDED), _scenario_config())
    buffer, max_disp = encode_displacement(dx, dy)
    rx, ry = decode_displacement(buffer, max_disp)
    # Channel steps are max/127 wide (128 +/- 127), so half a step is
    # max/254, slightly more than max/255.
    tol = max_disp / 254 + 1e-9
    assert np.abs(rx - dx).max() <= tol
    assert np.abs(ry - dy).max() <= tol


# --- Pipeline properties -----------------------------------------------------

def test_output_dimensions():
    from liquidglass import Geometry, OpticalConfig, compute_displacement
    result = compute_displacement(
        Geometry(70, 40, 20, canvas_width=90, canvas_height=60,
                 device_pixel_ratio=2), OpticalConfig())
    assert result.displacement_map.size == (180, 120)
    assert len(result.displacement_map.tobytes()) == 180 * 120 * 4


@pytest.mark.parametrize("shape", [
    SCENARIO,
    PADDED,
    dict(object_width=120, object_height=80, radius=12, bezel_width=10),
])
def test_flat_interior_identity(shape):
    from liquidglass import Geometry, compute_displacement, decode_displacement
    from liquidglass.geometry import Zone, resolve
    geometry = Geometry(**shape)
    result = compute_displacement(geometry, _scenario_config())
    dx, dy = decode_displacement(result.displacement_map,
                                 result.maximum_displacement)
    not_bezel = resolve(geometry).zone != Zone.BEZEL
    assert np.all(dx[not_bezel] == 0)
    assert np.all(dy[not_bezel] == 0)
    assert result.maximum_displacement > 0


def test_displacement_decreases_towards_centre():
    from liquidglass import Geometry, compute_offsets
    dx, dy = compute_offsets(Geometry(**PADDED), _scenario_config())
    # Left edge of the pill is between columns 9 and 10
    row_dx = dx[30, 10:45]
    np.testing.assert_array_equal(dy[30], 0)
    assert np.all(row_dx >= 0)
    assert np.all(np.diff(np.abs(row_dx)) <= 1e-12)
    assert row_dx[0] > 0
    assert row_dx[-1] == 0


def test_displacement_is_mirror_symmetric():
    from liquidglass import Geometry, compute_offsets
    g = Geometry(70, 40, 20, bezel_width=16, canvas_width=90,
                 canvas_height=60)
    dx, dy = compute_offsets(g, _scenario_config())
    np.testing.assert_allclose(dx[:, ::-1], -dx, atol=1e-9)
    np.testing.assert_allclose(dx[::-1, :], dx, atol=1e-9)
    np.testing.assert_allclose(dy[::-1, :], -dy, atol=1e-9)
    np.testing.assert_allclose(dy[:, ::-1], dy, atol=1e-9)


def test_reference_scenario():
    from liquidglass import Geometry, compute_displacement, decode_displacement
    result = compute_displacement(Geometry(**SCENARIO), _scenario_config())
    max_disp = result.maximum_displacement
    dx, dy = decode_displacement(result.displacement_map, max_disp)

    # Centre of the shape: no offset
    assert (dx[20, 35], dy[20, 35]) == (0, 0)

    # Two pixels inside the left edge: points right, towards the centre
    magnitude = np.hypot(dx[20, 2], dy[20, 2])
    assert dx[20, 2] > 0
    assert abs(dy[20, 2]) < dx[20, 2]
    assert 0 < magnitude < max_disp


def test_lip_profile_bends_both_ways():
    from liquidglass import LIP, Geometry, compute_offsets
    dx, _ = compute_offsets(Geometry(**PADDED),
                            _scenario_config(bezel_height_fn=LIP))
    row = dx[30, 10:45]
    assert row.max() > 0
    assert row.min() < 0


@pytest.mark.parametrize("shape, thickness", [
    (dict(SCENARIO, bezel_width=0), 80),
    (dict(SCENARIO, radius=0), 80),
    (SCENARIO, 0),
])
def test_degenerate_glass_has_no_displacement(shape, thickness):
    from liquidglass import Geometry, OpticalConfig, compute_displacement
    result = compute_displacement(Geometry(**shape),
                                  OpticalConfig(glass_thickness=thickness))
    assert result.maximum_displacement == 0
    px = result.displacement_map.pixels
    assert np.all(px[..., 0] == 128)
    assert np.all(px[..., 1] == 128)


@pytest.mark.parametrize("shape", [
    dict(object_width=0, object_height=40, radius=10),
    dict(SCENARIO, device_pixel_ratio=0),
    dict(SCENARIO, object_width=float("nan")),
    dict(SCENARIO, device_pixel_ratio=float("inf")),
])
def test_zero_area_canvas(shape):
    from liquidglass import Geometry, OpticalConfig, compute_displacement
    result = compute_displacement(Geometry(**shape), OpticalConfig())
    assert result.maximum_displacement == 0
    assert result.displacement_map.tobytes() == b""


@pytest.mark.parametrize("kwargs", [
    {"refractive_index": 1.0},
    {"refractive_index": 0.7},
    {"glass_thickness": -1},
    {"bezel_height_fn": "convex"},
])
def test_invalid_config_rejected(kwargs):
    from liquidglass import (ConfigurationError, Geometry, OpticalConfig,
                             compute_displacement)
    with pytest.raises(ConfigurationError):
        compute_displacement(Geometry(**SCENARIO), OpticalConfig(**kwargs))


def test_configuration_error_is_value_error():
    from liquidglass import ConfigurationError
    assert issubclass(ConfigurationError, ValueError)


def test_row_bands_match_single_pass():
    from liquidglass import Geometry, OpticalConfig, compute_displacement
    g = Geometry(120, 150, 30, bezel_width=24, canvas_width=130,
                 canvas_height=160)
    config = OpticalConfig()
    single = compute_displacement(g, config)
    with ThreadPoolExecutor(max_workers=4) as pool:
        banded = compute_displacement(g, config, executor=pool)
    assert banded.maximum_displacement == single.maximum_displacement
    assert banded.displacement_map == single.displacement_map


def test_array_profile_callable():
    from liquidglass import Geometry, OpticalConfig, compute_displacement
    config = OpticalConfig(bezel_height_fn=lambda t: np.asarray(t) ** 0.5)
    result = compute_displacement(Geometry(**SCENARIO), config)
    assert result.maximum_displacement > 0


@pytest.mark.parametrize("profile", [
    lambda t: math.sin(t * math.pi / 2),
    lambda t: 2 * t if t < 0.5 else 1.0,
])
def test_scalar_profile_callable(profile):
    from liquidglass import Geometry, compute_offsets
    dx, dy = compute_offsets(Geometry(**PADDED),
                             _scenario_config(bezel_height_fn=profile))
    assert np.all(np.isfinite(dx)) and np.all(np.isfinite(dy))
    # Left bezel bends towards the centre, the interior stays put
    assert dx[30, 10] > 0
    assert dx[30, 45] == 0


def test_scalar_profile_matches_array_profile():
    from liquidglass import Geometry, compute_offsets
    from liquidglass.profiles import CONVEX_CIRCLE
    g = Geometry(**PADDED)
    scalar = compute_offsets(
        g, _scenario_config(bezel_height_fn=lambda t: math.sqrt(1 - (1 - t) ** 2)))
    array = compute_offsets(g, _scenario_config(bezel_height_fn=CONVEX_CIRCLE))
    np.testing.assert_allclose(scalar[0], array[0], atol=1e-9)
    np.testing.assert_allclose(scalar[1], array[1], atol=1e-9)
