"""
Functions for configuring logging and saving simulation telemetry.
"""
from __future__ import annotations

import logging

from Logging.config import LoggingConfig
from Main.telemetry import Telemetry

logger = logging.getLogger(__name__)

LOG_HEADER = (
    "# t_s,pos_x_m,pos_y_m,pos_z_m,vel_x_mps,vel_y_mps,vel_z_mps,radius_m,speed_mps,"
    "a_m,e,i_deg,argp_deg,raan_deg,nu_deg,rejected\n"
)


def configure_logging(log_config: LoggingConfig):
    level = getattr(logging, str(log_config.log_level).upper(), logging.INFO)
    logging.basicConfig(level=level, format=log_config.log_format)


def save_log_to_txt(log: Telemetry, filename: str):
    """Write recorded telemetry to a text (CSV-style) file for analysis."""
    with open(filename, "w") as f:
        f.write(LOG_HEADER)
        for k in range(len(log.t)):
            r = log.r[k]
            v = log.v[k]
            f.write(
                f"{log.t[k]:.3f},{r[0]:.3f},{r[1]:.3f},{r[2]:.3f},{v[0]:.6f},{v[1]:.6f},{v[2]:.6f},"
                f"{log.radius[k]:.3f},{log.speed[k]:.6f},{log.semi_major_axis[k]:.3f},"
                f"{log.eccentricity[k]:.9f},{log.inclination_deg[k]:.6f},"
                f"{log.argument_of_periapsis_deg[k]:.6f},{log.longitude_of_ascending_node_deg[k]:.6f},"
                f"{log.true_anomaly_deg[k]:.6f},{log.rejected_sources[k]}\n"
            )
    logger.info("Saved orbit log to %s", filename)
