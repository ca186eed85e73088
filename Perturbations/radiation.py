"""
Solar radiation pressure with a conical umbra/penumbra shadow of the primary.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

import numpy as np

from Main.state import OrbitalState
from Main.transforms import to_cartesian
from .base import (
    G,
    OrbitalElementDelta,
    PerturberPosition,
    perturber_vector,
    sample_time,
)
from .third_body import SUN_PRIMARY_DISTANCE

SOLAR_CONSTANT = 1361.0           # [W/m^2] at 1 AU
SPEED_OF_LIGHT = 299_792_458.0    # [m/s]
SUN_RADIUS = 695_700_000.0        # [m]
SOLAR_CYCLE_PERIOD = 11.0 * 365.25 * 86400.0  # [s]
SOLAR_CYCLE_AMPLITUDE = 0.034


class ShadowType(enum.Enum):
    DIRECT_SUNLIGHT = "Direct Sunlight"
    PENUMBRA = "Penumbra (Partial Shadow)"
    UMBRA = "Umbra (Complete Shadow)"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ShadowCondition:
    shadow_type: ShadowType
    lighting_factor: float  # 0 = full shadow, 1 = full sunlight


def shadow_condition(sat_pos: np.ndarray, sun_pos: np.ndarray, primary_radius: float) -> ShadowCondition:
    """
    Classify the satellite as sunlit, in penumbra or in umbra.

    The shadow is modelled as two cones behind the primary built from the
    Sun's finite radius; inside the penumbra the lighting factor rises
    linearly from the umbra edge to the penumbra edge.
    """
    sat_pos = np.asarray(sat_pos, dtype=float)
    sun_pos = np.asarray(sun_pos, dtype=float)
    sun_distance = float(np.linalg.norm(sun_pos))
    sun_dir = sun_pos / sun_distance

    along = float(np.dot(sat_pos, sun_dir))
    if along >= 0.0:
        # Day side
        return ShadowCondition(ShadowType.DIRECT_SUNLIGHT, 1.0)

    cross_track = float(np.linalg.norm(sat_pos - along * sun_dir))
    behind = abs(along)

    umbra_angle = np.arctan((SUN_RADIUS - primary_radius) / sun_distance)
    umbra_radius = primary_radius - behind * np.tan(umbra_angle)
    penumbra_angle = np.arctan((SUN_RADIUS + primary_radius) / sun_distance)
    penumbra_radius = primary_radius + behind * np.tan(penumbra_angle)

    if umbra_radius > 0.0 and cross_track <= umbra_radius:
        return ShadowCondition(ShadowType.UMBRA, 0.0)
    if cross_track <= penumbra_radius:
        inner = max(0.0, umbra_radius)
        factor = (cross_track - inner) / (penumbra_radius - inner)
        return ShadowCondition(ShadowType.PENUMBRA, float(np.clip(factor, 0.0, 1.0)))
    return ShadowCondition(ShadowType.DIRECT_SUNLIGHT, 1.0)


def solar_cycle_factor(t: float) -> float:
    """Flux multiplier for the 11-year solar cycle (1 +/- 3.4 %)."""
    return 1.0 + SOLAR_CYCLE_AMPLITUDE * np.sin(2.0 * np.pi * t / SOLAR_CYCLE_PERIOD)


@dataclass(frozen=True)
class RadiationPressureSource:
    primary_radius: float
    area_m2: float = 10.0
    satellite_mass_kg: float = 1000.0
    reflectivity: float = 0.6
    diffuse_fraction: float = 2.0 / 3.0
    name: str = "radiation_pressure"
    body: Optional[str] = "sun"

    def _satellite_position(self, state: OrbitalState, primary_mass: float) -> np.ndarray:
        return to_cartesian(state, G * primary_mass).position

    def acceleration(self, sat_pos: np.ndarray, sun_pos: np.ndarray, t: float = 0.0) -> np.ndarray:
        """Radiation pressure acceleration vector [m/s^2], pointing away from the Sun."""
        condition = shadow_condition(sat_pos, sun_pos, self.primary_radius)
        if condition.lighting_factor <= 0.0:
            return np.zeros(3)

        to_sun = np.asarray(sun_pos, dtype=float) - np.asarray(sat_pos, dtype=float)
        distance = float(np.linalg.norm(to_sun))
        flux = SOLAR_CONSTANT * (SUN_PRIMARY_DISTANCE / distance) ** 2
        flux *= condition.lighting_factor * solar_cycle_factor(t)

        momentum_factor = 1.0 + self.reflectivity * (1.0 + self.diffuse_fraction)
        accel = flux / SPEED_OF_LIGHT * momentum_factor * self.area_m2 / self.satellite_mass_kg
        return -accel * to_sun / distance

    def shadow_condition(self, state: OrbitalState, primary_mass: float, perturber_position: PerturberPosition) -> ShadowCondition:
        return shadow_condition(
            self._satellite_position(state, primary_mass),
            perturber_vector(perturber_position),
            self.primary_radius,
        )

    def acceleration_magnitude(self, state: OrbitalState, primary_mass: float, perturber_position: PerturberPosition) -> float:
        accel = self.acceleration(
            self._satellite_position(state, primary_mass),
            perturber_vector(perturber_position),
            sample_time(perturber_position),
        )
        return float(np.linalg.norm(accel))

    def compute_adjustment(
        self,
        state: OrbitalState,
        primary_mass: float,
        perturber_position: PerturberPosition,
        dt: float,
    ) -> OrbitalElementDelta:
        if perturber_position is None:
            return OrbitalElementDelta.zero()
        magnitude = self.acceleration_magnitude(state, primary_mass, perturber_position)
        if magnitude <= 0.0:
            return OrbitalElementDelta.zero()

        strength = magnitude * 1e6
        i, e, nu = state.inclination, state.eccentricity, state.true_anomaly
        return OrbitalElementDelta(
            d_semi_major_axis=float(strength * 1e-6 * np.sin(nu) * dt),
            d_eccentricity=float(strength * 1e-12 * np.cos(nu) * dt),
            d_periapsis=float(strength * 1e-11 * (1.0 + e * np.cos(nu)) * dt),
            d_inclination=float(strength * 1e-13 * np.sin(nu) * dt),
            d_node=float(strength * 1e-13 * np.cos(i) * dt),
        )

    def describe(self, state: OrbitalState, primary_mass: float, perturber_position: PerturberPosition) -> str:
        condition = self.shadow_condition(state, primary_mass, perturber_position)
        accel = self.acceleration_magnitude(state, primary_mass, perturber_position)
        lines = [
            "Solar Radiation Pressure:",
            f"  Shadow condition: {condition.shadow_type}",
            f"  Lighting factor: {condition.lighting_factor:.3f}",
            f"  Acceleration: {accel:.3e} m/s^2",
        ]
        if condition.shadow_type is ShadowType.PENUMBRA:
            lines.append(f"  Partial eclipse: {condition.lighting_factor * 100:.1f}% sunlight")
        return "\n".join(lines)
