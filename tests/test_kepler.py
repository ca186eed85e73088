import math

import pytest

from Main.kepler import (
    eccentric_to_mean,
    mean_motion,
    mean_to_true,
    orbital_period,
    solve_kepler,
    true_to_mean,
)

MU_EARTH = 3.986004418e14


def propagate(nu, e, n, dt):
    return mean_to_true(true_to_mean(nu, e) + n * dt, e)


@pytest.mark.parametrize("e", [0.0, 0.01, 0.3, 0.7, 0.85, 0.97])
@pytest.mark.parametrize("M", [0.0, 0.4, 2.0, math.pi, 5.5, 13.0, -1.0])
def test_solve_kepler_satisfies_equation(M, e):
    E = solve_kepler(M, e)
    assert eccentric_to_mean(E, e) == pytest.approx(M, abs=1e-9)


@pytest.mark.parametrize("e", [0.0, 0.1, 0.6, 0.95])
@pytest.mark.parametrize("nu", [0.0, 0.5, 2.0, 3.0, -2.5])
def test_true_mean_round_trip(nu, e):
    recovered = mean_to_true(true_to_mean(nu, e), e)
    assert math.cos(recovered) == pytest.approx(math.cos(nu), abs=1e-9)
    assert math.sin(recovered) == pytest.approx(math.sin(nu), abs=1e-9)


def test_circular_orbit_anomalies_coincide():
    assert true_to_mean(1.234, 0.0) == pytest.approx(1.234)
    assert mean_to_true(1.234, 0.0) == pytest.approx(1.234)


def test_period_of_low_earth_orbit():
    period = orbital_period(MU_EARTH, 6.778e6)
    assert period / 60.0 == pytest.approx(92.6, abs=0.5)
    assert mean_motion(MU_EARTH, 6.778e6) * period == pytest.approx(2.0 * math.pi)


def test_full_period_returns_to_start():
    a, e, nu = 1.2e7, 0.4, 0.7
    n = mean_motion(MU_EARTH, a)
    end = propagate(nu, e, n, orbital_period(MU_EARTH, a))
    assert math.cos(end) == pytest.approx(math.cos(nu), abs=1e-9)
    assert math.sin(end) == pytest.approx(math.sin(nu), abs=1e-9)


def test_eccentric_orbit_moves_fastest_at_periapsis():
    a, e = 1.2e7, 0.5
    n = mean_motion(MU_EARTH, a)
    dt = 60.0
    near_periapsis = propagate(0.0, e, n, dt)
    near_apoapsis = (propagate(math.pi, e, n, dt) - math.pi) % (2.0 * math.pi)
    assert near_periapsis > near_apoapsis > 0.0
