import math

import numpy as np
import pytest

from Environment.bodies import CELESTIAL_BODIES, PrimaryBody, elements_from_state
from Environment.config import EnvironmentConfig
from Environment.ephemeris import CircularEphemeris
from Perturbations.oblateness import J2_COEFFICIENTS


def test_primary_body_from_table():
    earth = PrimaryBody.from_name("Earth")
    assert earth.name == "earth"
    assert earth.radius == 6_371_000.0
    assert earth.mu == pytest.approx(3.986e14, rel=1e-3)
    assert earth.j2 == J2_COEFFICIENTS["earth"]


def test_unknown_body_raises():
    with pytest.raises(ValueError, match="Unknown body"):
        PrimaryBody.from_name("vulcan")


def test_fictional_body_gets_default_j2():
    assert "tatooine" in CELESTIAL_BODIES
    assert PrimaryBody.from_name("tatooine").j2 == J2_COEFFICIENTS["earth"]


def test_elements_from_circular_state():
    mu = 3.986e14
    r = np.array([7.0e6, 0.0, 0.0])
    v = np.array([0.0, math.sqrt(mu / 7.0e6), 0.0])
    a, e = elements_from_state(r, v, mu)
    assert a == pytest.approx(7.0e6)
    assert e == pytest.approx(0.0, abs=1e-12)


def test_elements_from_radial_state():
    a, e = elements_from_state(np.array([7.0e6, 0.0, 0.0]), np.array([100.0, 0.0, 0.0]), 3.986e14)
    assert a is not None
    assert e is None


def test_sun_ephemeris_initial_position():
    sun = EnvironmentConfig().create_sun_ephemeris()
    sample = sun.sample(0.0)
    assert sun.angle_deg(0.0) == pytest.approx(281.0)
    assert sample.x == pytest.approx(sun.distance * math.cos(math.radians(281.0)))
    assert sample.y == pytest.approx(sun.distance * math.sin(math.radians(281.0)))
    assert sample.z == 0.0
    assert sample.t == 0.0


def test_ephemeris_angle_wraps_after_one_period():
    moon = EnvironmentConfig().create_moon_ephemeris()
    assert moon.angle_deg(moon.period) == pytest.approx(84.7)
    assert moon.angle_deg(moon.period / 2) == pytest.approx(264.7)
    start, later = moon.sample(0.0), moon.sample(moon.period)
    assert later.x == pytest.approx(start.x, rel=1e-9)
    assert later.y == pytest.approx(start.y, rel=1e-9)


def test_ephemeris_keeps_constant_distance():
    ephem = CircularEphemeris(distance=1.0e9, period=1000.0, initial_angle_deg=0.0)
    for t in (0.0, 123.0, 250.0, 999.0):
        sample = ephem.sample(t)
        assert np.linalg.norm(sample.as_array()) == pytest.approx(1.0e9)
        assert sample.t == t
    assert ephem.sample(250.0).y == pytest.approx(1.0e9)
