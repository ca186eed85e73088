"""
Configuration for which perturbation sources are active.
"""

from dataclasses import dataclass
from typing import List

from Environment.config import EnvironmentConfig
from Perturbations.base import PerturbationSource
from Perturbations.drag import DragSource
from Perturbations.oblateness import J2Source
from Perturbations.radiation import RadiationPressureSource
from Perturbations.third_body import lunar_source, solar_source


@dataclass
class PerturbationConfig:
    lunar_effects: bool = False
    solar_effects: bool = True
    atmospheric_drag: bool = False
    j2_effects: bool = False
    solar_radiation_pressure: bool = False

    # Per-source damping constants
    solar_scale: float = 0.001
    lunar_scale: float = 100.0

    # Satellite properties used by drag and radiation pressure
    drag_coefficient: float = 2.2
    satellite_area_m2: float = 10.0
    satellite_mass_kg: float = 1000.0
    reflectivity: float = 0.6

    def create_sources(self, env_config: EnvironmentConfig) -> List[PerturbationSource]:
        """Build the enabled sources in a fixed order (lunar, solar, drag, J2, SRP)."""
        primary = env_config.create_primary_body()
        sources: List[PerturbationSource] = []
        if self.lunar_effects:
            sources.append(lunar_source(scale=self.lunar_scale))
        if self.solar_effects:
            sources.append(solar_source(scale=self.solar_scale))
        if self.atmospheric_drag:
            sources.append(DragSource(
                primary_radius=primary.radius,
                atmosphere=env_config.create_atmosphere_model(),
                drag_coefficient=self.drag_coefficient,
                area_m2=self.satellite_area_m2,
                satellite_mass_kg=self.satellite_mass_kg,
            ))
        if self.j2_effects:
            sources.append(J2Source(primary_radius=primary.radius, j2=primary.j2 or 0.0))
        if self.solar_radiation_pressure:
            sources.append(RadiationPressureSource(
                primary_radius=primary.radius,
                area_m2=self.satellite_area_m2,
                satellite_mass_kg=self.satellite_mass_kg,
                reflectivity=self.reflectivity,
            ))
        return sources
