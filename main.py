"""
Entry point to run a perturbed-orbit demo.

Builds the primary body, ephemerides and perturbation sources from their
configs, ticks a LEO satellite for one day and prints a short summary of how
the orbital elements drifted.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from Environment.bodies import elements_from_state
from Environment.config import EnvironmentConfig

from Perturbations.config import PerturbationConfig

from Main.config import SimulationConfig
from Main.satellite import Satellite
from Main.simulation import OrbitSimulation
from Main.telemetry import Telemetry

from Logging.config import LoggingConfig
from Logging.generate_logs import configure_logging, save_log_to_txt


def main_orchestrator(
    env_config: Optional[EnvironmentConfig] = None,
    pert_config: Optional[PerturbationConfig] = None,
    sim_config: Optional[SimulationConfig] = None,
    log_config: Optional[LoggingConfig] = None,
):
    # 1. Instantiate all config objects if not provided
    env_config = env_config or EnvironmentConfig()
    pert_config = pert_config or PerturbationConfig()
    sim_config = sim_config or SimulationConfig()
    log_config = log_config or LoggingConfig()

    # 2. Environment
    primary = env_config.create_primary_body()
    ephemerides = env_config.create_ephemerides()

    # 3. Perturbations and the engine that applies them
    sources = pert_config.create_sources(env_config)
    engine = sim_config.create_engine()

    # 4. Satellite
    satellite = Satellite(
        state=sim_config.create_initial_state(env_config),
        primary=primary,
        engine=engine,
        sources=sources,
        ephemerides=ephemerides,
        limits=sim_config.create_change_limits(),
        start_time=sim_config.start_time_s,
    )

    sim = OrbitSimulation(satellite, sim_config)
    return sim, log_config


def print_summary(log: Telemetry, sim: OrbitSimulation):
    sat = sim.satellite
    print("=== Orbit summary ===")
    print(f"Primary body    : {sat.primary.name}")
    print(f"Sources         : {[s.name for s in sat.sources]}")
    print(f"Cutoff reason   : {log.cutoff_reason}")
    print(f"Ticks recorded  : {len(log)}")
    if not log.t:
        return

    print(f"Final sim time  : {log.t[-1]:.1f} s")
    print(f"Final altitude  : {(log.radius[-1] - sat.primary.radius) / 1000:.2f} km")
    print(f"Final speed     : {log.speed[-1]:.1f} m/s")
    print(f"Period          : {sat.period() / 60:.2f} min")
    print(f"Delta a         : {log.semi_major_axis[-1] - log.semi_major_axis[0]:+.3f} m")
    print(f"Delta e         : {log.eccentricity[-1] - log.eccentricity[0]:+.3e}")
    print(f"Delta i         : {log.inclination_deg[-1] - log.inclination_deg[0]:+.6f} deg")
    d_argp, d_raan, d_inc = sat.perturbations_degrees()
    print(f"Accumulated     : omega {d_argp:+.6f} deg, Omega {d_raan:+.6f} deg, i {d_inc:+.6f} deg")
    print(f"Rejected ticks  : {sat.engine.rejected_count}")

    # Cross-check the element state against the Cartesian projection.
    a_rv, e_rv = elements_from_state(log.r[-1], log.v[-1], sat.mu)
    if a_rv is not None and e_rv is not None and np.isfinite(a_rv):
        print(f"a from r,v      : {a_rv / 1000:.3f} km (e = {e_rv:.6f})")


def main():
    sim, log_config = main_orchestrator()
    configure_logging(log_config)
    log = sim.run()
    print_summary(log, sim)
    if log_config.write_log:
        save_log_to_txt(log, log_config.log_filename)


if __name__ == "__main__":
    main()
