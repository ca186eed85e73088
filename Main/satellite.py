"""
Satellite entity: owns the OrbitalState and advances it in time.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from Environment.bodies import PrimaryBody
from Environment.ephemeris import CircularEphemeris
from Perturbations.base import PerturbationSource
from .engine import PerturbationEngine
from .kepler import mean_motion, mean_to_true, orbital_period, true_to_mean
from .state import CartesianState, EphemerisSample, OrbitalState
from .transforms import orbital_radius, to_cartesian, vis_viva_speed

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class ChangeLimits:
    """Largest change any element may undergo in one sub-step."""
    max_semi_major_axis_fraction: float = 0.01
    max_eccentricity_change: float = 0.001
    max_inclination_change_deg: float = 0.1
    max_angle_change_deg: float = 1.0
    min_radius_factor: float = 1.01


def wrap_angle_difference(delta: float) -> float:
    """Map an angle difference into [-pi, pi]."""
    return (delta + math.pi) % TWO_PI - math.pi


def max_substep(dt: float) -> float:
    """Sub-step length for a frame of length dt: shorter sub-steps for longer frames."""
    if dt > 3600.0:
        return 5.0
    if dt > 600.0:
        return 10.0
    if dt > 60.0:
        return 15.0
    return dt


class Satellite:
    """
    A single satellite orbiting `primary`.

    Each call to `update_position(dt)` splits dt into sub-steps. Every
    sub-step advances the mean anomaly with the current mean motion, lets
    the engine apply the perturbation increments, converts back to true
    anomaly with the new eccentricity, then limits how far each element
    moved and keeps it within physical bounds.
    """

    def __init__(
        self,
        state: OrbitalState,
        primary: PrimaryBody,
        engine: Optional[PerturbationEngine] = None,
        sources: Sequence[PerturbationSource] = (),
        ephemerides: Optional[Dict[str, CircularEphemeris]] = None,
        limits: Optional[ChangeLimits] = None,
        start_time: float = 0.0,
    ):
        self.state = state.validate()
        self.primary = primary
        self.engine = engine or PerturbationEngine()
        self.sources: List[PerturbationSource] = list(sources)
        self.ephemerides = dict(ephemerides or {})
        self.limits = limits or ChangeLimits()
        self.time = float(start_time)

        missing = {s.body for s in self.sources if s.body is not None} - set(self.ephemerides)
        if missing:
            raise ValueError(f"No ephemeris supplied for bodies: {sorted(missing)}")

        # Accumulated raw perturbations [rad]
        self.delta_periapsis = 0.0
        self.delta_node = 0.0
        self.delta_inclination = 0.0

    @property
    def mu(self) -> float:
        return self.primary.mu

    # ------------------------------------------------------------------
    # Time stepping
    # ------------------------------------------------------------------
    def update_position(self, dt: float):
        if dt < 0.0:
            raise ValueError(f"Time step must be non-negative, got {dt}")
        if dt == 0.0:
            return
        n_sub = max(1, math.ceil(dt / max_substep(dt)))
        h = dt / n_sub
        for _ in range(n_sub):
            self._single_step(h)

    def ephemeris_samples(self, t: float) -> list[tuple[PerturbationSource, Optional[EphemerisSample]]]:
        return [
            (source, self.ephemerides[source.body].sample(t) if source.body is not None else None)
            for source in self.sources
        ]

    def _single_step(self, dt: float):
        before = self.state.copy()

        n = mean_motion(self.mu, before.semi_major_axis)
        M = true_to_mean(before.true_anomaly, before.eccentricity) + n * dt

        if self.sources:
            applied = self.engine.step(self.state, dt, self.ephemeris_samples(self.time))
            self.delta_periapsis += applied.d_periapsis
            self.delta_node += applied.d_node
            self.delta_inclination += applied.d_inclination

        self.state.true_anomaly = mean_to_true(M, self.state.eccentricity)
        self._limit_changes(before)
        self.time += dt

    def _limit_changes(self, before: OrbitalState):
        s = self.state
        lim = self.limits

        max_da = before.semi_major_axis * lim.max_semi_major_axis_fraction
        s.semi_major_axis = before.semi_major_axis + float(np.clip(s.semi_major_axis - before.semi_major_axis, -max_da, max_da))
        de = lim.max_eccentricity_change
        s.eccentricity = before.eccentricity + float(np.clip(s.eccentricity - before.eccentricity, -de, de))
        di = math.radians(lim.max_inclination_change_deg)
        s.inclination = before.inclination + float(np.clip(s.inclination - before.inclination, -di, di))

        max_angle = math.radians(lim.max_angle_change_deg)
        for attr in ("argument_of_periapsis", "longitude_of_ascending_node"):
            diff = wrap_angle_difference(getattr(s, attr) - getattr(before, attr))
            if abs(diff) > max_angle:
                setattr(s, attr, getattr(before, attr) + math.copysign(max_angle, diff))

        self.engine.enforce_bounds(s)
        s.inclination = float(np.clip(s.inclination, 0.0, math.pi))
        floor = self.primary.radius * lim.min_radius_factor
        if s.semi_major_axis < floor:
            logger.debug("Semi-major axis %.1f m below %.1f m floor", s.semi_major_axis, floor)
            s.semi_major_axis = floor

        s.argument_of_periapsis %= TWO_PI
        s.longitude_of_ascending_node %= TWO_PI

    # ------------------------------------------------------------------
    # Derived quantities (recomputed on every call)
    # ------------------------------------------------------------------
    def cartesian(self) -> CartesianState:
        return to_cartesian(self.state, self.mu)

    def position(self) -> np.ndarray:
        return self.cartesian().position

    def velocity(self) -> np.ndarray:
        return self.cartesian().velocity

    def radius(self) -> float:
        s = self.state
        return float(orbital_radius(s.semi_major_axis, s.eccentricity, s.true_anomaly))

    def speed(self) -> float:
        return vis_viva_speed(self.mu, self.radius(), self.state.semi_major_axis)

    def period(self) -> float:
        return orbital_period(self.mu, self.state.semi_major_axis)

    def elements_degrees(self) -> tuple[float, float, float, float, float, float]:
        return self.state.elements_degrees()

    def perturbations_degrees(self) -> tuple[float, float, float]:
        """Accumulated (omega, Omega, i) perturbations in degrees."""
        return (
            math.degrees(self.delta_periapsis),
            math.degrees(self.delta_node),
            math.degrees(self.delta_inclination),
        )
