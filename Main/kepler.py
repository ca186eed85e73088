"""
Two-body anomaly bookkeeping: mean motion and Kepler's equation.
"""

from __future__ import annotations

import math

from scipy.optimize import newton

KEPLER_TOL = 1e-10
KEPLER_MAXITER = 100
TWO_PI = 2.0 * math.pi


def mean_motion(mu: float, a: float) -> float:
    """n = sqrt(mu / a^3) [rad/s]."""
    return math.sqrt(mu / a**3)


def orbital_period(mu: float, a: float) -> float:
    return 2.0 * math.pi / mean_motion(mu, a)


def true_to_eccentric(nu: float, e: float) -> float:
    denom = 1.0 + e * math.cos(nu)
    cos_E = (e + math.cos(nu)) / denom
    sin_E = math.sqrt(1.0 - e * e) * math.sin(nu) / denom
    return math.atan2(sin_E, cos_E)


def eccentric_to_true(E: float, e: float) -> float:
    denom = 1.0 - e * math.cos(E)
    cos_nu = (math.cos(E) - e) / denom
    sin_nu = math.sqrt(1.0 - e * e) * math.sin(E) / denom
    return math.atan2(sin_nu, cos_nu)


def eccentric_to_mean(E: float, e: float) -> float:
    return E - e * math.sin(E)


def solve_kepler(M: float, e: float) -> float:
    """
    Solve M = E - e sin(E) for the eccentric anomaly E.

    Newton-Raphson on M reduced to [0, 2pi), started at E0 = M, or at pi for
    e >= 0.8 where starting at M can overshoot. Whole turns are added back.
    """
    if e == 0.0:
        return M
    turns = math.floor(M / TWO_PI)
    M_reduced = M - turns * TWO_PI
    E0 = M_reduced if e < 0.8 else math.pi
    E = newton(
        lambda E: E - e * math.sin(E) - M_reduced,
        E0,
        fprime=lambda E: 1.0 - e * math.cos(E),
        tol=KEPLER_TOL,
        maxiter=KEPLER_MAXITER,
        disp=False,
    )
    return float(E) + turns * TWO_PI


def true_to_mean(nu: float, e: float) -> float:
    return eccentric_to_mean(true_to_eccentric(nu, e), e)


def mean_to_true(M: float, e: float) -> float:
    return eccentric_to_true(solve_kepler(M, e), e)

