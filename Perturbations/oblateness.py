"""
J2 (oblateness) secular precession of the node and the periapsis.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from Main.state import OrbitalState
from Main.transforms import to_cartesian
from .base import G, OrbitalElementDelta, PerturberPosition

SECONDS_PER_DAY = 86400.0
DAYS_PER_YEAR = 365.25
SUN_SYNCHRONOUS_NODE_RATE = 2.0 * math.pi / (365.2422 * SECONDS_PER_DAY)  # [rad/s]

J2_COEFFICIENTS = {
    "earth": 1.08263e-3,
    "mars": 1.956e-3,
    "jupiter": 1.469e-2,
    "saturn": 1.633e-2,
    "moon": 2.033e-4,
    "venus": 4.458e-6,
    "sun": 2.0e-7,
}


def j2_for_body(body_name: str) -> float:
    """J2 of a named body; unknown (e.g. fictional) bodies fall back to Earth's value."""
    return J2_COEFFICIENTS.get(body_name.lower(), J2_COEFFICIENTS["earth"])


@dataclass(frozen=True)
class J2Source:
    """
    Nodal regression and apsidal rotation from the primary's J2 term.

    The averaged J2 model changes only Omega and omega; a, e and i have no
    secular drift. Each per-call angle change is clipped to max_angle_step.
    """
    primary_radius: float
    j2: float = J2_COEFFICIENTS["earth"]
    max_angle_step: float = math.radians(0.01)
    name: str = "j2"
    body: Optional[str] = None

    def rates(self, state: OrbitalState, primary_mass: float) -> tuple[float, float]:
        """Return (dOmega/dt, domega/dt) in rad/s."""
        a = state.semi_major_axis
        e = state.eccentricity
        i = state.inclination
        mu = G * primary_mass

        n = math.sqrt(mu / a**3)
        p_factor = (1.0 - e * e) ** 2
        factor = -1.5 * self.j2 * self.primary_radius**2 * n / (a * a * p_factor)
        node_rate = factor * math.cos(i)
        periapsis_rate = factor * (2.5 * math.sin(i) ** 2 - 2.0)
        return node_rate, periapsis_rate

    def compute_adjustment(
        self,
        state: OrbitalState,
        primary_mass: float,
        perturber_position: PerturberPosition,
        dt: float,
    ) -> OrbitalElementDelta:
        node_rate, periapsis_rate = self.rates(state, primary_mass)
        limit = self.max_angle_step
        return OrbitalElementDelta(
            d_node=float(np.clip(node_rate * dt, -limit, limit)),
            d_periapsis=float(np.clip(periapsis_rate * dt, -limit, limit)),
        )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def rates_deg_per_day(self, state: OrbitalState, primary_mass: float) -> tuple[float, float]:
        node_rate, periapsis_rate = self.rates(state, primary_mass)
        return (
            math.degrees(node_rate) * SECONDS_PER_DAY,
            math.degrees(periapsis_rate) * SECONDS_PER_DAY,
        )

    def acceleration_magnitude(self, state: OrbitalState, primary_mass: float) -> float:
        """Approximate J2 acceleration [m/s^2] at the satellite's current position."""
        mu = G * primary_mass
        position = to_cartesian(state, mu).position
        r = float(np.linalg.norm(position))
        latitude = math.asin(position[2] / r)
        latitude_term = 3.0 * math.sin(latitude) ** 2 - 1.0
        return mu * self.j2 * self.primary_radius**2 / r**4 * abs(latitude_term)

    def is_significant(self, state: OrbitalState, primary_mass: float) -> bool:
        """True when either precession rate exceeds 0.1 deg/year."""
        node, periapsis = self.rates_deg_per_day(state, primary_mass)
        return abs(node) * DAYS_PER_YEAR > 0.1 or abs(periapsis) * DAYS_PER_YEAR > 0.1

    def sun_synchronous_inclination_deg(self, state: OrbitalState, primary_mass: float) -> float | None:
        """
        Inclination at which the node advances once per tropical year, or None
        when J2 alone cannot reach that rate at this semi-major axis.
        """
        if self.j2 <= 0.0:
            return None
        a = state.semi_major_axis
        p = a * (1.0 - state.eccentricity ** 2)
        n = math.sqrt(G * primary_mass / a**3)
        cos_i = -2.0 * SUN_SYNCHRONOUS_NODE_RATE * p * p / (3.0 * n * self.j2 * self.primary_radius**2)
        if abs(cos_i) > 1.0:
            return None
        return math.degrees(math.acos(cos_i))

    def describe(self, state: OrbitalState, primary_mass: float) -> str:
        node, periapsis = self.rates_deg_per_day(state, primary_mass)
        inc = math.degrees(state.inclination)
        lines = [
            "J2 Oblateness Effects:",
            f"  Nodal precession: {node:.3f} deg/day",
            f"  Apsidal precession: {periapsis:.3f} deg/day",
        ]
        if abs(inc - 90.0) < 1.0:
            lines.append("  Polar orbit: maximum nodal precession")
        elif abs(inc) < 1.0:
            lines.append("  Equatorial orbit: no nodal precession")
        elif inc > 90.0:
            lines.append("  Retrograde orbit: eastward nodal drift")
        else:
            lines.append("  Prograde orbit: westward nodal drift")

        sso = self.sun_synchronous_inclination_deg(state, primary_mass)
        if sso is not None and abs(inc - sso) < 0.5:
            lines.append("  Near sun-synchronous inclination")
        return "\n".join(lines)
