"""
State containers for the orbital element model.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .errors import InvalidElementError


@dataclass
class OrbitalState:
    """
    Classical orbital elements of the satellite.

    Lengths are in meters, angles in radians. Angles are not normalised here;
    every consumer goes through sin/cos so wrap-around is harmless.
    """
    semi_major_axis: float
    eccentricity: float
    inclination: float
    argument_of_periapsis: float
    longitude_of_ascending_node: float
    true_anomaly: float
    primary_mass: float

    @classmethod
    def from_degrees(
        cls,
        semi_major_axis: float,
        eccentricity: float,
        inclination_deg: float,
        argument_of_periapsis_deg: float,
        longitude_of_ascending_node_deg: float,
        true_anomaly_deg: float,
        primary_mass: float,
    ) -> "OrbitalState":
        return cls(
            semi_major_axis=float(semi_major_axis),
            eccentricity=float(eccentricity),
            inclination=math.radians(inclination_deg),
            argument_of_periapsis=math.radians(argument_of_periapsis_deg),
            longitude_of_ascending_node=math.radians(longitude_of_ascending_node_deg),
            true_anomaly=math.radians(true_anomaly_deg),
            primary_mass=float(primary_mass),
        )

    def copy(self) -> "OrbitalState":
        return OrbitalState(
            semi_major_axis=self.semi_major_axis,
            eccentricity=self.eccentricity,
            inclination=self.inclination,
            argument_of_periapsis=self.argument_of_periapsis,
            longitude_of_ascending_node=self.longitude_of_ascending_node,
            true_anomaly=self.true_anomaly,
            primary_mass=self.primary_mass,
        )

    def validate(self) -> "OrbitalState":
        """
        Check the element invariants and return self.

        Raises
        ------
        InvalidElementError
            If any element is non-finite, a <= 0, e < 0 or e >= 1.
        """
        values = (
            self.semi_major_axis,
            self.eccentricity,
            self.inclination,
            self.argument_of_periapsis,
            self.longitude_of_ascending_node,
            self.true_anomaly,
            self.primary_mass,
        )
        if not all(math.isfinite(v) for v in values):
            raise InvalidElementError(f"Non-finite orbital element in {self!r}")
        if self.semi_major_axis <= 0.0:
            raise InvalidElementError(f"Semi-major axis must be positive, got {self.semi_major_axis}")
        if not 0.0 <= self.eccentricity < 1.0:
            raise InvalidElementError(f"Eccentricity must lie in [0, 1), got {self.eccentricity}")
        if self.primary_mass <= 0.0:
            raise InvalidElementError(f"Primary mass must be positive, got {self.primary_mass}")
        return self

    def elements_degrees(self) -> tuple[float, float, float, float, float, float]:
        """Return (a [km], e, i, omega, Omega, nu) with angles in degrees, for display."""
        return (
            self.semi_major_axis / 1000.0,
            self.eccentricity,
            math.degrees(self.inclination),
            math.degrees(self.argument_of_periapsis),
            math.degrees(self.longitude_of_ascending_node),
            math.degrees(self.true_anomaly),
        )


@dataclass(frozen=True)
class EphemerisSample:
    """Position of a perturbing body relative to the primary at time t [s]."""
    x: float
    y: float
    z: float = 0.0
    t: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


@dataclass(frozen=True)
class CartesianState:
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @property
    def radius(self) -> float:
        return float(np.linalg.norm(self.position))

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.position)) and np.all(np.isfinite(self.velocity)))
