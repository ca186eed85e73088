"""
Simulation glue: fixed-step tick loop over a Satellite with telemetry.
"""

from __future__ import annotations

import logging
import math

from .config import SimulationConfig
from .satellite import Satellite
from .telemetry import Telemetry

logger = logging.getLogger(__name__)


class OrbitSimulation:
    def __init__(self, satellite: Satellite, sim_config: SimulationConfig):
        if sim_config.dt_s <= 0.0:
            raise ValueError(f"dt_s must be positive, got {sim_config.dt_s}")
        self.satellite = satellite
        self.sim_config = sim_config

    def run(self) -> Telemetry:
        """
        Tick the satellite for `duration_s` in steps of `dt_s`.

        Stops early with cutoff_reason "impact" if the orbit radius drops
        below the primary's radius.
        """
        cfg = self.sim_config
        sat = self.satellite
        log = Telemetry()

        n_steps = max(0, math.ceil(cfg.duration_s / cfg.dt_s))
        logger.info(
            "Running %d ticks of %.1f s with %d perturbation source(s)",
            n_steps, cfg.dt_s, len(sat.sources),
        )
        log.record(sat.time, sat)

        for _ in range(n_steps):
            sat.update_position(cfg.dt_s)
            log.record(sat.time, sat)
            if sat.radius() < sat.primary.radius:
                log.cutoff_reason = "impact"
                logger.info("Orbit radius below primary surface at t = %.1f s", sat.time)
                break
        else:
            log.cutoff_reason = "duration_complete"

        if sat.engine.rejected_count:
            logger.warning(
                "%d perturbation contribution(s) discarded: %s",
                sat.engine.rejected_count, dict(sat.engine.rejections),
            )
        logger.info("Simulation finished at t = %.1f s (%s)", sat.time, log.cutoff_reason)
        return log
