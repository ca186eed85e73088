"""
Configuration for the initial orbit, the tick loop and the element guards.
"""

from dataclasses import dataclass

from Environment.config import EnvironmentConfig
from Main.engine import PerturbationEngine
from Main.satellite import ChangeLimits
from Main.state import OrbitalState


@dataclass
class SimulationConfig:
    # --- Initial Orbit (LEO) ---
    semi_major_axis_m: float = 7_000_000.0
    eccentricity: float = 0.01
    inclination_deg: float = 51.6
    argument_of_periapsis_deg: float = 0.0
    longitude_of_ascending_node_deg: float = 0.0
    true_anomaly_deg: float = 0.0

    # --- Tick Loop ---
    dt_s: float = 10.0
    duration_s: float = 86_400.0
    start_time_s: float = 0.0

    # --- Engine Guards ---
    max_eccentricity: float = 0.99
    min_semi_major_axis_m: float = 1.0

    # --- Per-step Change Limits (satellite entity) ---
    max_semi_major_axis_change_fraction: float = 0.01
    max_eccentricity_change: float = 0.001
    max_inclination_change_deg: float = 0.1
    max_angle_change_deg: float = 1.0
    min_radius_factor: float = 1.01

    def create_initial_state(self, env_config: EnvironmentConfig) -> OrbitalState:
        primary = env_config.create_primary_body()
        return OrbitalState.from_degrees(
            semi_major_axis=self.semi_major_axis_m,
            eccentricity=self.eccentricity,
            inclination_deg=self.inclination_deg,
            argument_of_periapsis_deg=self.argument_of_periapsis_deg,
            longitude_of_ascending_node_deg=self.longitude_of_ascending_node_deg,
            true_anomaly_deg=self.true_anomaly_deg,
            primary_mass=primary.mass,
        ).validate()

    def create_engine(self) -> PerturbationEngine:
        return PerturbationEngine(
            max_eccentricity=self.max_eccentricity,
            min_semi_major_axis=self.min_semi_major_axis_m,
        )

    def create_change_limits(self) -> ChangeLimits:
        return ChangeLimits(
            max_semi_major_axis_fraction=self.max_semi_major_axis_change_fraction,
            max_eccentricity_change=self.max_eccentricity_change,
            max_inclination_change_deg=self.max_inclination_change_deg,
            max_angle_change_deg=self.max_angle_change_deg,
            min_radius_factor=self.min_radius_factor,
        )
