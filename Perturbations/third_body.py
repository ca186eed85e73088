"""
Third-body (Sun, Moon) perturbations of the orbital elements.

This is a closed-form stand-in for the real third-body effect: a strength
factor built from mass and distance ratios drives fixed trigonometric shape
functions for each element. It is deterministic and bounded, not a
perturbation theory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from Main.errors import DegenerateGeometryError
from Main.state import OrbitalState
from Main.transforms import to_cartesian
from .base import G, OrbitalElementDelta, PerturberPosition, perturber_vector, time_step_scale

SUN_MASS = 1.989e30                      # [kg]
SUN_PRIMARY_DISTANCE = 149_597_870_700.0  # 1 AU [m]
MOON_MASS = 7.342e22                     # [kg]
MOON_PRIMARY_DISTANCE = 384_400_000.0    # [m]

ELEMENTS = ("node", "periapsis", "eccentricity", "inclination", "semi_major_axis")


# Shape functions f(i, e, nu)
def cos_inclination(i: float, e: float, nu: float) -> float:
    return np.cos(i)


def one_minus_e_squared(i: float, e: float, nu: float) -> float:
    return 1.0 - e * e


def cos_nu(i: float, e: float, nu: float) -> float:
    return np.cos(nu)


def sin_nu(i: float, e: float, nu: float) -> float:
    return np.sin(nu)


def cos_two_nu(i: float, e: float, nu: float) -> float:
    return np.cos(2.0 * nu)


def sin_two_nu(i: float, e: float, nu: float) -> float:
    return np.sin(2.0 * nu)


ShapeFunction = Callable[[float, float, float], float]


@dataclass(frozen=True)
class ShapeTerm:
    element: str
    coefficient: float
    shape: ShapeFunction

    def __post_init__(self):
        if self.element not in ELEMENTS:
            raise ValueError(f"Unknown orbital element '{self.element}'. Expected one of {ELEMENTS}.")


@dataclass(frozen=True)
class ThirdBodySource:
    """
    Perturbation from a distant massive body.

    strength = (M_body / M_primary) * (r_sat / d_ref)
               * clamp(d_ref / d_sat_body, min_proximity, max_proximity) * scale

    Each element then changes by strength * min(1, dt) * dt * k * f(i, e, nu).
    """
    name: str
    body: Optional[str]
    body_mass: float
    reference_distance: float
    min_proximity: float
    max_proximity: float
    scale: float
    terms: Tuple[ShapeTerm, ...]
    min_satellite_distance: float
    min_primary_distance: float

    def strength(self, satellite_distance: float, satellite_to_body: float, primary_mass: float) -> float:
        mass_ratio = self.body_mass / primary_mass
        distance_ratio = satellite_distance / self.reference_distance
        proximity = float(np.clip(
            self.reference_distance / satellite_to_body,
            self.min_proximity,
            self.max_proximity,
        ))
        return mass_ratio * distance_ratio * proximity * self.scale

    def geometry(self, state: OrbitalState, primary_mass: float, perturber_position: PerturberPosition) -> tuple[float, float]:
        """
        Return (satellite distance from primary, satellite distance from the body).

        Raises
        ------
        DegenerateGeometryError
            If the body is inside either safety distance.
        """
        body_pos = perturber_vector(perturber_position)
        sat_pos = to_cartesian(state, G * primary_mass).position

        body_distance = float(np.linalg.norm(body_pos))
        sat_distance = float(np.linalg.norm(sat_pos))
        sat_body_distance = float(np.linalg.norm(sat_pos - body_pos))

        if sat_body_distance < self.min_satellite_distance:
            raise DegenerateGeometryError(
                f"{self.name}: body {sat_body_distance:.0f} m from satellite "
                f"(minimum {self.min_satellite_distance:.0f} m)"
            )
        if body_distance < self.min_primary_distance:
            raise DegenerateGeometryError(
                f"{self.name}: body {body_distance:.0f} m from primary "
                f"(minimum {self.min_primary_distance:.0f} m)"
            )
        return sat_distance, sat_body_distance

    def compute_adjustment(
        self,
        state: OrbitalState,
        primary_mass: float,
        perturber_position: PerturberPosition,
        dt: float,
    ) -> OrbitalElementDelta:
        try:
            sat_distance, sat_body_distance = self.geometry(state, primary_mass, perturber_position)
        except DegenerateGeometryError:
            return OrbitalElementDelta.zero()

        scaled = self.strength(sat_distance, sat_body_distance, primary_mass) * time_step_scale(dt)
        i, e, nu = state.inclination, state.eccentricity, state.true_anomaly

        increments = dict.fromkeys(ELEMENTS, 0.0)
        for term in self.terms:
            increments[term.element] += scaled * term.coefficient * term.shape(i, e, nu) * dt

        return OrbitalElementDelta(
            d_node=float(increments["node"]),
            d_periapsis=float(increments["periapsis"]),
            d_eccentricity=float(increments["eccentricity"]),
            d_inclination=float(increments["inclination"]),
            d_semi_major_axis=float(increments["semi_major_axis"]),
        )


def solar_source(scale: float = 0.001) -> ThirdBodySource:
    """Sun: weaker, longer-period effect; coefficients ~1000x below the Moon's."""
    return ThirdBodySource(
        name="solar",
        body="sun",
        body_mass=SUN_MASS,
        reference_distance=SUN_PRIMARY_DISTANCE,
        min_proximity=0.5,
        max_proximity=2.0,
        scale=scale,
        terms=(
            ShapeTerm("node", 2e-9, cos_inclination),
            ShapeTerm("periapsis", 1e-9, one_minus_e_squared),
            ShapeTerm("eccentricity", 2e-11, cos_two_nu),
            ShapeTerm("inclination", 5e-11, sin_nu),
            ShapeTerm("semi_major_axis", 1e-5, sin_two_nu),
        ),
        min_satellite_distance=10_000_000.0,   # 10,000 km
        min_primary_distance=100_000_000.0,    # 100,000 km
    )


def lunar_source(scale: float = 100.0) -> ThirdBodySource:
    return ThirdBodySource(
        name="lunar",
        body="moon",
        body_mass=MOON_MASS,
        reference_distance=MOON_PRIMARY_DISTANCE,
        min_proximity=0.1,
        max_proximity=1.0,
        scale=scale,
        terms=(
            ShapeTerm("node", 1e-8, cos_inclination),
            ShapeTerm("periapsis", 5e-9, one_minus_e_squared),
            ShapeTerm("inclination", 1e-10, sin_two_nu),
            ShapeTerm("semi_major_axis", 1e-4, sin_nu),
            ShapeTerm("eccentricity", 1e-11, cos_nu),
        ),
        min_satellite_distance=1000.0,
        min_primary_distance=1000.0,
    )
