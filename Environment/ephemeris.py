"""
Circular analytical ephemerides for the Sun and Moon.

Both bodies move on circles in the primary's equatorial plane; good enough
to drive the closed-form perturbation sources, not for pointing or eclipses
to the minute.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from Main.state import EphemerisSample

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class CircularEphemeris:
    distance: float           # [m]
    period: float             # [s]
    initial_angle_deg: float  # angle at t = 0, from the x axis

    def angle_deg(self, t: float) -> float:
        """Angle of the body at time t, in [0, 360)."""
        return (self.initial_angle_deg + t / self.period * 360.0) % 360.0

    def sample(self, t: float) -> EphemerisSample:
        angle = math.radians(self.angle_deg(t))
        return EphemerisSample(
            x=self.distance * math.cos(angle),
            y=self.distance * math.sin(angle),
            z=0.0,
            t=t,
        )

