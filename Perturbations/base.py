"""
Perturbation source contract and the element increment it produces.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Protocol, Union, runtime_checkable

import numpy as np

from Main.errors import DegenerateGeometryError, NonFiniteResultError
from Main.state import EphemerisSample, OrbitalState

# Newtonian constant of gravitation [m^3 kg^-1 s^-2]
G = 6.67430e-11

PerturberPosition = Union[EphemerisSample, np.ndarray, tuple, list, None]


@dataclass(frozen=True)
class OrbitalElementDelta:
    """Signed increments for the five elements a perturbation may change."""
    d_node: float = 0.0             # longitude of ascending node [rad]
    d_periapsis: float = 0.0        # argument of periapsis [rad]
    d_eccentricity: float = 0.0
    d_inclination: float = 0.0      # [rad]
    d_semi_major_axis: float = 0.0  # [m]

    @classmethod
    def zero(cls) -> "OrbitalElementDelta":
        return cls()

    def __add__(self, other: "OrbitalElementDelta") -> "OrbitalElementDelta":
        if not isinstance(other, OrbitalElementDelta):
            return NotImplemented
        return OrbitalElementDelta(
            d_node=self.d_node + other.d_node,
            d_periapsis=self.d_periapsis + other.d_periapsis,
            d_eccentricity=self.d_eccentricity + other.d_eccentricity,
            d_inclination=self.d_inclination + other.d_inclination,
            d_semi_major_axis=self.d_semi_major_axis + other.d_semi_major_axis,
        )

    def values(self) -> tuple[float, float, float, float, float]:
        return (
            self.d_node,
            self.d_periapsis,
            self.d_eccentricity,
            self.d_inclination,
            self.d_semi_major_axis,
        )

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.values())

    def is_zero(self) -> bool:
        return all(v == 0.0 for v in self.values())

    def require_finite(self, source_name: str = "source") -> "OrbitalElementDelta":
        if not self.is_finite():
            raise NonFiniteResultError(f"{source_name} produced a non-finite delta: {self}")
        return self


@runtime_checkable
class PerturbationSource(Protocol):
    """
    Anything that turns the current orbit into a small element increment.

    Implementations are stateless; `compute_adjustment` must not touch `state`.
    `body` names the ephemeris the source needs ("sun", "moon") or is None.
    """
    name: str
    body: Optional[str]

    def compute_adjustment(
        self,
        state: OrbitalState,
        primary_mass: float,
        perturber_position: PerturberPosition,
        dt: float,
    ) -> OrbitalElementDelta:
        ...


def perturber_vector(perturber_position: PerturberPosition) -> np.ndarray:
    """Normalise an EphemerisSample or array-like into a float 3-vector."""
    if perturber_position is None:
        raise DegenerateGeometryError("Source needs a perturber position but none was supplied")
    if isinstance(perturber_position, EphemerisSample):
        return perturber_position.as_array()
    vec = np.asarray(perturber_position, dtype=float).reshape(-1)
    if vec.size == 2:
        vec = np.append(vec, 0.0)
    if vec.size != 3:
        raise ValueError(f"Perturber position must have 2 or 3 components, got {vec.size}")
    return vec


def sample_time(perturber_position: PerturberPosition) -> float:
    if isinstance(perturber_position, EphemerisSample):
        return float(perturber_position.t)
    return 0.0


def time_step_scale(dt: float) -> float:
    """Linear attenuation so that steps longer than one second do not overshoot."""
    return min(1.0, dt / 1.0)
