"""
Exception types raised by the orbit model.

None of these ever escapes a simulation tick: the engine and the sources
recover from them locally (clamping, zeroing or discarding a contribution).
"""


class OrbitModelError(Exception):
    """Base class for orbit model errors."""


class InvalidElementError(OrbitModelError, ValueError):
    """Orbital elements outside their legal range (a <= 0 or e outside [0, 1))."""


class DegenerateGeometryError(OrbitModelError, ValueError):
    """A perturbing body is too close to the satellite or to the primary."""


class NonFiniteResultError(OrbitModelError, ArithmeticError):
    """A perturbation or transform produced NaN or infinity."""
