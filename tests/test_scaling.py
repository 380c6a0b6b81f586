import math

import numpy as np
import pytest

from orrery.scaling import compute_axis, scale_angular_rate, scale_diameter, scale_orbital_radius
from orrery.vector_utils import align_vertical


def test_scale_diameter_thousand_km_is_zero():
    assert scale_diameter(1000) == 0


def test_scale_diameter_grows_half_per_decade():
    assert scale_diameter(10000) == pytest.approx(0.5)
    assert scale_diameter(100) == pytest.approx(-0.5)


def test_scale_orbital_radius_reference_is_zero():
    assert abs(scale_orbital_radius(10 ** 1.2)) < 1e-6


def test_scale_orbital_radius_earth():
    assert scale_orbital_radius(149.6) == pytest.approx((math.log10(149.6) - 1.2) * 7)


def test_scale_angular_rate():
    assert scale_angular_rate(0) == 0
    assert scale_angular_rate(4) == pytest.approx(20.0)


@pytest.mark.parametrize("func,value", [
    (scale_diameter, 0),
    (scale_diameter, -5),
    (scale_orbital_radius, 0),
    (scale_orbital_radius, -1.0),
    (scale_angular_rate, -0.1),
    (scale_diameter, float("nan")),
])
def test_out_of_domain_arguments_raise(func, value):
    with pytest.raises(ValueError):
        func(value)


def test_zero_inclination_is_exact_vertical():
    assert compute_axis(0) == (0.0, 1.0, 0.0)
    assert compute_axis(0.0) == (0.0, 1.0, 0.0)


def test_ninety_degrees_tilts_onto_z():
    axis = np.array(compute_axis(90))
    assert np.linalg.norm(axis) == pytest.approx(1.0, abs=1e-5)
    assert axis[1] == pytest.approx(0.0, abs=1e-6)
    assert axis[2] == pytest.approx(1.0)


def test_small_inclination_stays_unit_length():
    axis = np.array(compute_axis(5.1))
    assert np.linalg.norm(axis) == pytest.approx(1.0, abs=1e-9)
    assert axis[0] == 0
    assert axis[1] == pytest.approx(math.cos(math.radians(5.1)))


def test_near_zero_inclination_takes_rotation_branch():
    axis = compute_axis(1e-12)
    assert axis[2] != 0.0
    np.testing.assert_allclose(axis, (0.0, 1.0, 0.0), atol=1e-9)


@pytest.mark.parametrize("inclination", [7.0, -3.4, 90.0, 180.0])
def test_align_vertical_maps_up_onto_axis(inclination):
    axis = compute_axis(inclination)
    m = align_vertical(axis)
    np.testing.assert_allclose(m[:3, :3] @ np.array([0.0, 1.0, 0.0]), axis, atol=1e-9)
