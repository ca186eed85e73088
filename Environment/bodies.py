"""
Primary body model: mass, radius, and the table of known bodies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from Perturbations.base import G
from Perturbations.oblateness import j2_for_body

# name -> (mean radius [m], mass [kg])
CELESTIAL_BODIES = {
    "sun": (696_340_000.0, 1.989e30),
    "mercury": (2_439_700.0, 3.301e23),
    "venus": (6_051_800.0, 4.867e24),
    "earth": (6_371_000.0, 5.972e24),
    "moon": (1_737_400.0, 7.342e22),
    "mars": (3_389_500.0, 6.417e23),
    "jupiter": (69_911_000.0, 1.898e27),
    "saturn": (58_232_000.0, 5.683e26),
    "uranus": (25_362_000.0, 8.681e25),
    "neptune": (24_622_000.0, 1.024e26),
    "pluto": (1_188_300.0, 1.309e22),
    "tatooine": (5_232_500.0, 3e24),
}


@dataclass
class PrimaryBody:
    name: str
    radius: float
    mass: float
    j2: float | None = None
    gravitational_constant: float = G

    @classmethod
    def from_name(cls, name: str) -> "PrimaryBody":
        key = name.lower()
        if key not in CELESTIAL_BODIES:
            raise ValueError(f"Unknown body '{name}'. Expected one of {sorted(CELESTIAL_BODIES)}.")
        radius, mass = CELESTIAL_BODIES[key]
        return cls(name=key, radius=radius, mass=mass, j2=j2_for_body(key))

    @property
    def mu(self) -> float:
        """Gravitational parameter G*M [m^3/s^2]."""
        return self.gravitational_constant * self.mass


def elements_from_state(r_vec: np.ndarray, v_vec: np.ndarray, mu: float) -> Tuple[float | None, float | None]:
    """
    Semi-major axis and eccentricity from position and velocity.

    Parameters
    ----------
    r_vec : np.ndarray
        Position vector (m).
    v_vec : np.ndarray
        Velocity vector (m/s).
    mu : float
        Gravitational parameter of the central body (m^3/s^2).

    Returns
    -------
    Tuple[float | None, float | None]
        (semi_major_axis, eccentricity). The semi-major axis is negative for
        hyperbolic trajectories and None for parabolic ones; eccentricity is
        None for a purely radial trajectory.
    """
    r_vec = np.asarray(r_vec, dtype=float)
    v_vec = np.asarray(v_vec, dtype=float)
    r_norm = np.linalg.norm(r_vec)
    v_norm = np.linalg.norm(v_vec)

    # Specific orbital energy
    epsilon = (v_norm**2 / 2.0) - (mu / r_norm)
    a = None if epsilon == 0 else -mu / (2.0 * epsilon)

    h_vec = np.cross(r_vec, v_vec)
    if np.linalg.norm(h_vec) == 0:
        return a, None

    e_vec = (np.cross(v_vec, h_vec) / mu) - (r_vec / r_norm)
    return a, float(np.linalg.norm(e_vec))
