import logging
import sys
import threading
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pytest

from Main import engine as engine_module
from Main.engine import SUMMED_DELTA, PerturbationEngine, advance_orbit
from Main.state import EphemerisSample, OrbitalState
from Perturbations.base import OrbitalElementDelta
from Perturbations.third_body import solar_source

EARTH_MASS = 5.972e24


@dataclass(frozen=True)
class ConstantSource:
    """Returns the same increment every call."""
    delta: OrbitalElementDelta
    name: str = "constant"
    body: Optional[str] = None

    def compute_adjustment(self, state, primary_mass, perturber_position, dt):
        return self.delta


@dataclass(frozen=True)
class RaisingSource:
    error: type = FloatingPointError
    name: str = "raising"
    body: Optional[str] = None

    def compute_adjustment(self, state, primary_mass, perturber_position, dt):
        raise self.error("boom")


@pytest.fixture
def state():
    return OrbitalState(
        semi_major_axis=7.0e6,
        eccentricity=0.01,
        inclination=0.9,
        argument_of_periapsis=0.3,
        longitude_of_ascending_node=1.2,
        true_anomaly=0.5,
        primary_mass=EARTH_MASS,
    )


def test_increments_of_all_sources_are_summed(state):
    a = ConstantSource(OrbitalElementDelta(d_node=1e-4, d_semi_major_axis=10.0), name="a")
    b = ConstantSource(OrbitalElementDelta(d_node=2e-4, d_eccentricity=1e-3), name="b")
    engine = PerturbationEngine()

    applied = engine.step(state, 1.0, [(a, None), (b, None)])

    assert state.longitude_of_ascending_node == pytest.approx(1.2 + 3e-4)
    assert state.semi_major_axis == pytest.approx(7.0e6 + 10.0)
    assert state.eccentricity == pytest.approx(0.011)
    assert state.true_anomaly == 0.5
    assert applied.d_node == pytest.approx(3e-4)
    assert applied.d_semi_major_axis == 10.0


def test_source_order_does_not_matter(state):
    a = ConstantSource(OrbitalElementDelta(d_node=1.1e-4, d_periapsis=-3e-5), name="a")
    b = ConstantSource(OrbitalElementDelta(d_node=2.7e-4, d_periapsis=7e-5), name="b")
    first, second = state.copy(), state.copy()

    PerturbationEngine().step(first, 1.0, [(a, None), (b, None)])
    PerturbationEngine().step(second, 1.0, [(b, None), (a, None)])

    assert first == second


def test_zero_increment_leaves_state_bit_for_bit_unchanged():
    # Deliberately un-normalised angles: nothing may re-wrap them.
    state = OrbitalState(
        semi_major_axis=7.123456789e6,
        eccentricity=0.987654321,
        inclination=3.1,
        argument_of_periapsis=-17.25,
        longitude_of_ascending_node=123.456,
        true_anomaly=-0.1,
        primary_mass=EARTH_MASS,
    )
    before = state.copy()
    engine = PerturbationEngine()

    engine.step(state, 1.0, [])
    engine.step(state, 1.0, [(ConstantSource(OrbitalElementDelta.zero()), None)])
    # Solar source with the Sun inside its safety distance yields nothing
    engine.step(state, 1.0, [(solar_source(), EphemerisSample(5.0e7, 0.0))])

    for field_name in ("semi_major_axis", "eccentricity", "inclination", "argument_of_periapsis",
                       "longitude_of_ascending_node", "true_anomaly", "primary_mass"):
        assert getattr(state, field_name).hex() == getattr(before, field_name).hex()


def test_eccentricity_pumping_never_reaches_ceiling(state):
    pump = ConstantSource(OrbitalElementDelta(d_eccentricity=0.3))
    engine = PerturbationEngine(max_eccentricity=0.99)

    for _ in range(100):
        engine.step(state, 1.0, [(pump, None)])
        assert 0.0 <= state.eccentricity < 0.99

    assert state.eccentricity == np.nextafter(0.99, 0.0)


def test_eccentricity_never_negative(state):
    drain = ConstantSource(OrbitalElementDelta(d_eccentricity=-0.5))
    engine = PerturbationEngine()
    for _ in range(10):
        engine.step(state, 1.0, [(drain, None)])
        assert state.eccentricity == 0.0


def test_semi_major_axis_floor(state):
    crush = ConstantSource(OrbitalElementDelta(d_semi_major_axis=-1.0e12))
    engine = PerturbationEngine(min_semi_major_axis=5.0)
    engine.step(state, 1.0, [(crush, None)])
    assert state.semi_major_axis == 5.0


def test_non_finite_source_is_discarded_and_counted(state, caplog):
    bad = ConstantSource(OrbitalElementDelta(d_node=math.nan, d_eccentricity=0.1), name="bad")
    good = ConstantSource(OrbitalElementDelta(d_node=1e-3), name="good")
    engine = PerturbationEngine()

    with caplog.at_level(logging.WARNING, logger="Main.engine"):
        engine.step(state, 1.0, [(bad, None), (good, None)])

    assert state.longitude_of_ascending_node == pytest.approx(1.2 + 1e-3)
    assert state.eccentricity == 0.01
    assert engine.rejections["bad"] == 1
    assert engine.rejected_count == 1
    assert "bad" in caplog.text


def test_infinite_and_raising_sources_are_discarded(state):
    engine = PerturbationEngine()
    before = state.copy()
    engine.step(state, 1.0, [
        (ConstantSource(OrbitalElementDelta(d_semi_major_axis=math.inf), name="inf"), None),
        (RaisingSource(FloatingPointError, name="fpe"), None),
        (RaisingSource(ZeroDivisionError, name="zde"), None),
    ])
    assert state == before
    assert engine.rejected_count == 3

    engine.reset()
    assert engine.rejected_count == 0


def test_unexpected_errors_propagate(state):
    with pytest.raises(KeyError):
        PerturbationEngine().step(state, 1.0, [(RaisingSource(KeyError), None)])


@pytest.mark.parametrize("max_e", [0.0, 1.0, 1.5, -0.1])
def test_invalid_eccentricity_bound(max_e):
    with pytest.raises(ValueError):
        PerturbationEngine(max_eccentricity=max_e)


def test_invalid_semi_major_axis_floor():
    with pytest.raises(ValueError):
        PerturbationEngine(min_semi_major_axis=0.0)


def test_advance_orbit_uses_shared_default_engine(state):
    applied = advance_orbit(state, 1.0, [(ConstantSource(OrbitalElementDelta(d_inclination=1e-3)), None)])
    assert state.inclination == pytest.approx(0.901)
    assert applied.d_inclination == 1e-3
    assert isinstance(engine_module.default_engine, PerturbationEngine)

    bad = ConstantSource(OrbitalElementDelta(d_node=math.nan), name="default-engine-nan")
    advance_orbit(state, 1.0, [(bad, None)])
    assert engine_module.default_engine.rejections["default-engine-nan"] == 1


def test_advance_orbit_with_real_solar_source(state):
    engine = PerturbationEngine()
    before = state.copy()
    advance_orbit(state, 60.0, [(solar_source(), EphemerisSample(1.496e11, 0.0))], engine=engine)
    assert state.longitude_of_ascending_node != before.longitude_of_ascending_node
    assert state.true_anomaly == before.true_anomaly
    assert engine.rejected_count == 0


def test_delta_arithmetic():
    a = OrbitalElementDelta(d_node=1.0, d_semi_major_axis=2.0)
    b = OrbitalElementDelta(d_node=0.5, d_eccentricity=0.25)
    total = a + b
    assert total.values() == (1.5, 0.0, 0.25, 0.0, 2.0)
    assert OrbitalElementDelta.zero().is_zero()
    assert total.require_finite("test") is total


def test_require_finite_raises_model_error():
    from Main.errors import NonFiniteResultError, OrbitModelError

    with pytest.raises(NonFiniteResultError, match="lunar") as excinfo:
        OrbitalElementDelta(d_inclination=math.inf).require_finite("lunar")
    assert isinstance(excinfo.value, OrbitModelError)
    assert isinstance(excinfo.value, ArithmeticError)


def test_step_returns_zero_when_nothing_applies(state):
    applied = PerturbationEngine().step(state, 1.0, [(ConstantSource(OrbitalElementDelta.zero()), None)])
    assert applied.is_zero()


def test_overflowing_sum_is_discarded(state, caplog):
    huge = OrbitalElementDelta(d_semi_major_axis=1e308)
    engine = PerturbationEngine()
    before = state.copy()

    with caplog.at_level(logging.WARNING, logger="Main.engine"):
        applied = engine.step(state, 1.0, [(ConstantSource(huge, name="a"), None), (ConstantSource(huge, name="b"), None)])

    assert applied.is_zero()
    assert state == before
    assert state.validate() is state
    assert engine.rejections[SUMMED_DELTA] == 1
    assert engine.rejections["a"] == 0
    assert "not finite" in caplog.text


def test_negative_step_rejected(state):
    before = state.copy()
    source = ConstantSource(OrbitalElementDelta(d_node=1e-3))
    with pytest.raises(ValueError):
        PerturbationEngine().step(state, -1.0, [(source, None)])
    with pytest.raises(ValueError):
        advance_orbit(state, -0.5, [(solar_source(), EphemerisSample(1.496e11, 0.0))])
    assert state == before


def test_one_engine_shared_by_two_states(state):
    """Each state receives only its own sources' increments."""
    engine = PerturbationEngine()
    other = state.copy()
    up = ConstantSource(OrbitalElementDelta(d_inclination=1e-6), name="up")
    down = ConstantSource(OrbitalElementDelta(d_inclination=-1e-6), name="down")

    for _ in range(5):
        applied_up = engine.step(state, 1.0, [(up, None)])
        applied_down = engine.step(other, 1.0, [(down, None)])
        assert applied_up.d_inclination == 1e-6
        assert applied_down.d_inclination == -1e-6

    assert state.inclination == pytest.approx(0.9 + 5e-6)
    assert other.inclination == pytest.approx(0.9 - 5e-6)


def test_shared_engine_across_threads():
    from Environment.bodies import PrimaryBody
    from Main.satellite import Satellite

    old_interval = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    try:
        earth = PrimaryBody.from_name("earth")
        engine = PerturbationEngine()
        bad = ConstantSource(OrbitalElementDelta(d_node=math.nan), name="bad")
        satellites = [
            Satellite(OrbitalState(7.0e6, 0.01, 0.9, 0.0, 0.0, 0.0, EARTH_MASS), earth, engine=engine,
                      sources=[ConstantSource(OrbitalElementDelta(d_inclination=sign * 1e-9), name=f"s{sign}"), bad])
            for sign in (1.0, -1.0)
        ]
        n_steps = 2000

        def run(sat):
            for _ in range(n_steps):
                sat.update_position(1.0)

        threads = [threading.Thread(target=run, args=(sat,)) for sat in satellites]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
    finally:
        sys.setswitchinterval(old_interval)

    up, down = satellites
    assert up.delta_inclination == pytest.approx(n_steps * 1e-9, rel=1e-9)
    assert down.delta_inclination == pytest.approx(-n_steps * 1e-9, rel=1e-9)
    assert engine.rejections["bad"] == 2 * n_steps
