"""
Configuration for the environment models (primary body, ephemerides, atmosphere).
"""

from dataclasses import dataclass

from Environment.atmosphere import AtmosphereModel
from Environment.bodies import CELESTIAL_BODIES, PrimaryBody
from Environment.ephemeris import SECONDS_PER_DAY, CircularEphemeris
from Perturbations.base import G
from Perturbations.oblateness import j2_for_body


@dataclass
class EnvironmentConfig:
    # --- Central Body ---
    primary_body: str = "earth"
    # None -> take the value from the body table
    primary_radius_m: float | None = None
    primary_mass_kg: float | None = None
    j2_coeff: float | None = None
    gravitational_constant: float = G

    # --- Sun (circular, equatorial) ---
    sun_distance_m: float = 149_597_870_700.0
    sun_period_s: float = 365.25 * SECONDS_PER_DAY
    sun_initial_angle_deg: float = 281.0

    # --- Moon (circular, equatorial, synodic period) ---
    moon_distance_m: float = 384_400_000.0
    moon_period_s: float = 29.530 * SECONDS_PER_DAY
    moon_initial_angle_deg: float = 84.7

    # --- Atmosphere (exponential) ---
    sea_level_density: float = 1.225
    scale_height_m: float = 8500.0
    drag_min_altitude_m: float = 80_000.0
    drag_max_altitude_m: float = 1_000_000.0

    def create_primary_body(self) -> PrimaryBody:
        key = self.primary_body.lower()
        if key not in CELESTIAL_BODIES and (self.primary_radius_m is None or self.primary_mass_kg is None):
            raise ValueError(
                f"Unknown body '{self.primary_body}' needs explicit primary_radius_m and primary_mass_kg."
            )
        radius, mass = CELESTIAL_BODIES.get(key, (self.primary_radius_m, self.primary_mass_kg))
        return PrimaryBody(
            name=key,
            radius=float(self.primary_radius_m if self.primary_radius_m is not None else radius),
            mass=float(self.primary_mass_kg if self.primary_mass_kg is not None else mass),
            j2=self.j2_coeff if self.j2_coeff is not None else j2_for_body(key),
            gravitational_constant=self.gravitational_constant,
        )

    def create_sun_ephemeris(self) -> CircularEphemeris:
        return CircularEphemeris(
            distance=self.sun_distance_m,
            period=self.sun_period_s,
            initial_angle_deg=self.sun_initial_angle_deg,
        )

    def create_moon_ephemeris(self) -> CircularEphemeris:
        return CircularEphemeris(
            distance=self.moon_distance_m,
            period=self.moon_period_s,
            initial_angle_deg=self.moon_initial_angle_deg,
        )

    def create_ephemerides(self) -> dict[str, CircularEphemeris]:
        return {"sun": self.create_sun_ephemeris(), "moon": self.create_moon_ephemeris()}

    def create_atmosphere_model(self) -> AtmosphereModel:
        return AtmosphereModel(
            sea_level_density=self.sea_level_density,
            scale_height=self.scale_height_m,
            min_altitude=self.drag_min_altitude_m,
            max_altitude=self.drag_max_altitude_m,
        )
