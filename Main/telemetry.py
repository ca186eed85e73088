"""
Minimal in-memory recorder for orbit telemetry.
"""

from typing import Any

import numpy as np


class Telemetry:
    """
    Minimal in-memory recorder for orbit telemetry.
    """

    def __init__(self):
        self.t = []
        self.r = []
        self.v = []
        self.radius = []
        self.speed = []
        self.semi_major_axis = []
        self.eccentricity = []
        self.inclination_deg = []
        self.argument_of_periapsis_deg = []
        self.longitude_of_ascending_node_deg = []
        self.true_anomaly_deg = []
        self.rejected_sources = []
        self.cutoff_reason = ""

    def __len__(self) -> int:
        return len(self.t)

    def record(self, t: float, satellite: Any):
        cart = satellite.cartesian()
        a_km, e, i_deg, w_deg, raan_deg, nu_deg = satellite.elements_degrees()
        self.t.append(float(t))
        self.r.append(np.asarray(cart.position, dtype=float).copy())
        self.v.append(np.asarray(cart.velocity, dtype=float).copy())
        self.radius.append(cart.radius)
        self.speed.append(cart.speed)
        self.semi_major_axis.append(a_km * 1000.0)
        self.eccentricity.append(float(e))
        self.inclination_deg.append(float(i_deg))
        self.argument_of_periapsis_deg.append(float(w_deg))
        self.longitude_of_ascending_node_deg.append(float(raan_deg))
        self.true_anomaly_deg.append(float(nu_deg))
        self.rejected_sources.append(int(satellite.engine.rejected_count))
