"""
Exponential atmosphere used by the drag perturbation.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class AtmosphereModel:
    """
    rho(h) = rho0 * exp(-h / H) between min_altitude and max_altitude, zero above.

    Below min_altitude the density is still returned but drag is not applied
    there (the satellite is considered to have re-entered).
    """
    sea_level_density: float = 1.225     # [kg/m^3]
    scale_height: float = 8500.0         # [m]
    min_altitude: float = 80_000.0       # [m]
    max_altitude: float = 1_000_000.0    # [m]

    def density(self, altitude: float) -> float:
        if altitude < 0.0:
            return self.sea_level_density
        if altitude > self.max_altitude:
            return 0.0
        return float(self.sea_level_density * np.exp(-altitude / self.scale_height))

    def in_drag_band(self, altitude: float) -> bool:
        return self.min_altitude <= altitude <= self.max_altitude
