"""
Orbital elements to Cartesian position/velocity in the primary's inertial frame.
"""

from __future__ import annotations

import numpy as np

from .state import CartesianState, OrbitalState


def orbital_radius(a: float, e: float, nu: float) -> float:
    """Polar orbit equation r = a(1 - e^2) / (1 + e cos(nu))."""
    return a * (1.0 - e * e) / (1.0 + e * np.cos(nu))


def vis_viva_speed(mu: float, r: float, a: float) -> float:
    """Orbital speed from the vis-viva equation v^2 = mu (2/r - 1/a)."""
    return float(np.sqrt(mu * (2.0 / r - 1.0 / a)))


def rotate_z(vec: np.ndarray, angle: float) -> np.ndarray:
    """Rotate the (x, y) pair of a 3-vector by `angle` about the z axis."""
    x, y, z = vec
    c, s = np.cos(angle), np.sin(angle)
    return np.array([x * c - y * s, x * s + y * c, z], dtype=float)


def rotate_x(vec: np.ndarray, angle: float) -> np.ndarray:
    """Rotate the (y, z) pair of a 3-vector by `angle` about the x axis."""
    x, y, z = vec
    c, s = np.cos(angle), np.sin(angle)
    return np.array([x, y * c - z * s, y * s + z * c], dtype=float)


def perifocal_to_inertial(vec: np.ndarray, omega: float, inclination: float, raan: float) -> np.ndarray:
    """
    Rotate a perifocal-frame vector into the inertial frame.

    Order is fixed: argument of periapsis about z, then inclination about the
    line of nodes (x), then longitude of ascending node about the polar axis (z).
    """
    v = rotate_z(np.asarray(vec, dtype=float), omega)
    v = rotate_x(v, inclination)
    return rotate_z(v, raan)


def perifocal_state(a: float, e: float, nu: float, mu: float) -> tuple[np.ndarray, np.ndarray]:
    """Return (position, velocity) in the perifocal frame."""
    r = orbital_radius(a, e, nu)
    h = np.sqrt(mu * a * (1.0 - e * e))
    v_r = mu * e * np.sin(nu) / h
    v_t = mu * (1.0 + e * np.cos(nu)) / h

    cos_nu, sin_nu = np.cos(nu), np.sin(nu)
    r_pf = np.array([r * cos_nu, r * sin_nu, 0.0], dtype=float)
    v_pf = np.array([v_r * cos_nu - v_t * sin_nu, v_r * sin_nu + v_t * cos_nu, 0.0], dtype=float)
    return r_pf, v_pf


def to_cartesian(state: OrbitalState, mu: float) -> CartesianState:
    """
    Convert the orbital elements in `state` to inertial position and velocity.

    Parameters
    ----------
    state : OrbitalState
        Current classical elements. Not modified.
    mu : float
        Gravitational parameter of the primary [m^3/s^2].

    Returns
    -------
    CartesianState
        Position [m] and velocity [m/s]. For e close to 1 with small a the
        angular momentum tends to zero and the velocity is not finite; this
        function does not clamp.
    """
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        r_pf, v_pf = perifocal_state(
            state.semi_major_axis,
            state.eccentricity,
            state.true_anomaly,
            mu,
        )
        omega = state.argument_of_periapsis
        inc = state.inclination
        raan = state.longitude_of_ascending_node
        position = perifocal_to_inertial(r_pf, omega, inc, raan)
        velocity = perifocal_to_inertial(v_pf, omega, inc, raan)
    return CartesianState(position=position, velocity=velocity)


# Host-facing name.
project_to_cartesian = to_cartesian
