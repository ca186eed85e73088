"""
Atmospheric drag: orbital decay and circularisation for low orbits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from Environment.atmosphere import AtmosphereModel
from Main.state import OrbitalState
from Main.transforms import to_cartesian, vis_viva_speed
from .base import G, OrbitalElementDelta, PerturberPosition, time_step_scale


@dataclass(frozen=True)
class DragSource:
    primary_radius: float
    atmosphere: AtmosphereModel = field(default_factory=AtmosphereModel)
    drag_coefficient: float = 2.2
    area_m2: float = 10.0
    satellite_mass_kg: float = 1000.0
    name: str = "drag"
    body: Optional[str] = None

    def _radius_and_speed(self, state: OrbitalState, primary_mass: float) -> tuple[float, float]:
        mu = G * primary_mass
        r = float(np.linalg.norm(to_cartesian(state, mu).position))
        return r, vis_viva_speed(mu, r, state.semi_major_axis)

    def drag_acceleration(self, radius: float, speed: float) -> float:
        """Drag deceleration magnitude [m/s^2]; zero outside the drag band."""
        altitude = radius - self.primary_radius
        if not self.atmosphere.in_drag_band(altitude):
            return 0.0
        rho = self.atmosphere.density(altitude)
        if rho <= 0.0 or speed <= 0.0:
            return 0.0
        force = 0.5 * rho * speed * speed * self.drag_coefficient * self.area_m2
        return force / self.satellite_mass_kg

    def acceleration_magnitude(self, state: OrbitalState, primary_mass: float) -> float:
        return self.drag_acceleration(*self._radius_and_speed(state, primary_mass))

    def compute_adjustment(
        self,
        state: OrbitalState,
        primary_mass: float,
        perturber_position: PerturberPosition,
        dt: float,
    ) -> OrbitalElementDelta:
        radius, speed = self._radius_and_speed(state, primary_mass)
        a_drag = self.drag_acceleration(radius, speed)
        if a_drag <= 0.0:
            return OrbitalElementDelta.zero()

        # Strength relative to local gravity, amplified for visible effect.
        g_local = G * primary_mass / (radius * radius)
        strength = a_drag / g_local * 1000.0

        i, e, nu = state.inclination, state.eccentricity, state.true_anomaly
        return OrbitalElementDelta(
            d_semi_major_axis=-a_drag * time_step_scale(dt) * 1e-3 * dt,
            d_eccentricity=float(-strength * 1e-9 * e * abs(np.cos(nu)) * dt),
            d_periapsis=float(strength * 5e-11 * np.sin(2.0 * nu) * dt),
            d_inclination=float(strength * 1e-12 * np.sin(nu) * dt),
            d_node=float(strength * 1e-12 * np.cos(i) * dt),
        )
