import numpy as np
import pytest

from lptics.growth import compute_growth, hubble_parameter


def _params(**overrides):
    params = {
        "H0": 70.0,
        "Omega_r": 0.0,
        "Omega_m": 1.0,
        "Omega_k": 0.0,
        "Omega_DE": 0.0,
        "w_0": -1.0,
        "w_a": 0.0,
    }
    params.update(overrides)
    return params


def test_hubble_today_equals_h0_for_flat_universe():
    params = _params(Omega_m=0.3, Omega_DE=0.7)
    assert hubble_parameter(1.0, params) == pytest.approx(params["H0"])


@pytest.mark.parametrize("a", [0.1, 0.25, 0.5, 2.0])
def test_hubble_matter_only_scaling(a):
    params = _params()
    assert hubble_parameter(a, params) == pytest.approx(params["H0"] * a**-1.5)


@pytest.mark.parametrize("a", [0.01, 0.3])
def test_hubble_radiation_only_scaling(a):
    params = _params(Omega_r=1.0, Omega_m=0.0)
    assert hubble_parameter(a, params) == pytest.approx(params["H0"] / a**2)


def test_hubble_constant_dark_energy():
    params = _params(Omega_m=0.0, Omega_DE=1.0)
    assert hubble_parameter(0.2, params) == pytest.approx(params["H0"])


def test_hubble_accepts_arrays():
    params = _params()
    a = np.array([0.5, 1.0])
    np.testing.assert_allclose(hubble_parameter(a, params), params["H0"] * a**-1.5)


@pytest.fixture(scope="module")
def eds_tables():
    params = _params()
    return compute_growth(lambda a: hubble_parameter(a, params), 1.0, params["H0"])


def test_scale_factor_table_is_increasing_and_ends_at_two(eds_tables):
    a, d, f = eds_tables
    assert len(a) == len(d) == len(f)
    assert np.all(np.diff(a) > 0)
    assert a[-1] == pytest.approx(2.0, rel=1e-8)
    assert a[0] > 1e-10


def test_eds_growth_proportional_to_scale_factor(eds_tables):
    a, d, _ = eds_tables
    d1 = np.interp(1.0, a, d)
    d_half = np.interp(0.5, a, d)
    assert d1 / d_half == pytest.approx(2.0, rel=1e-6)


def test_eds_growth_rate_is_one_at_late_times(eds_tables):
    a, _, f = eds_tables
    late = a > 1e-3
    np.testing.assert_allclose(f[late], 1.0, rtol=1e-6)


def test_lcdm_growth_rate_is_suppressed_today():
    omega_m = 0.3
    params = _params(Omega_m=omega_m, Omega_DE=1.0 - omega_m)
    a, d, f = compute_growth(lambda x: hubble_parameter(x, params), omega_m, params["H0"])
    f_today = np.interp(1.0, a, f)
    assert f_today == pytest.approx(omega_m**0.55, rel=0.02)
    # growth is slower than a in a Lambda-dominated universe
    assert np.interp(1.0, a, d) / np.interp(0.5, a, d) < 2.0