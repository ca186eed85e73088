"""
Per-tick orchestration of the perturbation sources.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from Perturbations.base import OrbitalElementDelta, PerturbationSource, PerturberPosition
from .errors import NonFiniteResultError
from .state import OrbitalState

logger = logging.getLogger(__name__)

SourceSample = Tuple[PerturbationSource, PerturberPosition]

# Rejection key used when the per-source deltas are finite but their sum is not
SUMMED_DELTA = "summed"


class PerturbationEngine:
    """
    Sum the increments of all sources and apply them to an OrbitalState.

    The engine owns only two legality guards: eccentricity is kept in
    [0, max_eccentricity) and the semi-major axis at or above
    min_semi_major_axis. A source whose increment is not finite is dropped
    for the tick, counted in `rejections` and logged.

    `step` keeps no per-tick state on the engine, so one engine may advance
    several states, from several threads; only the rejection counter is
    shared, behind a lock.
    """

    def __init__(self, max_eccentricity: float = 0.99, min_semi_major_axis: float = 1.0):
        if not 0.0 < max_eccentricity < 1.0:
            raise ValueError(f"max_eccentricity must lie in (0, 1), got {max_eccentricity}")
        if min_semi_major_axis <= 0.0:
            raise ValueError(f"min_semi_major_axis must be positive, got {min_semi_major_axis}")
        self.max_eccentricity = float(max_eccentricity)
        self.min_semi_major_axis = float(min_semi_major_axis)
        # Largest float strictly below max_eccentricity
        self._eccentricity_ceiling = float(np.nextafter(self.max_eccentricity, 0.0))
        self.rejections: Counter[str] = Counter()
        self._lock = threading.Lock()

    @property
    def rejected_count(self) -> int:
        with self._lock:
            return sum(self.rejections.values())

    def reset(self):
        with self._lock:
            self.rejections.clear()

    def _reject(self, name: str, reason) -> None:
        with self._lock:
            self.rejections[name] += 1
        logger.warning("Discarding %s contribution for this tick: %s", name, reason)

    def _source_delta(self, source: PerturbationSource, state: OrbitalState, position: PerturberPosition, dt: float) -> Optional[OrbitalElementDelta]:
        name = getattr(source, "name", type(source).__name__)
        try:
            with np.errstate(all="ignore"):
                delta = source.compute_adjustment(state, state.primary_mass, position, dt)
            return delta.require_finite(name)
        except (NonFiniteResultError, FloatingPointError, ZeroDivisionError, OverflowError) as exc:
            self._reject(name, exc)
            return None

    def step(self, state: OrbitalState, dt: float, ephemerides: Iterable[SourceSample]) -> OrbitalElementDelta:
        """
        Advance `state` in place by the summed increments of every source.

        Parameters
        ----------
        state : OrbitalState
            Satellite elements, mutated in place.
        dt : float
            Elapsed simulated time [s], non-negative.
        ephemerides : iterable of (source, perturber_position)
            Each source paired with the position of the body it needs
            (None for sources that need no body).

        Returns
        -------
        OrbitalElementDelta
            The increment actually applied (zero when nothing was applied),
            before clamping.
        """
        if dt < 0.0:
            raise ValueError(f"Time step must be non-negative, got {dt}")

        total = OrbitalElementDelta.zero()
        for source, position in ephemerides:
            delta = self._source_delta(source, state, position, dt)
            if delta is not None:
                total = total + delta

        # Finite parts can still overflow when added
        if not total.is_finite():
            self._reject(SUMMED_DELTA, f"summed delta is not finite: {total}")
            return OrbitalElementDelta.zero()
        if total.is_zero():
            return total

        state.longitude_of_ascending_node += total.d_node
        state.argument_of_periapsis += total.d_periapsis
        state.eccentricity += total.d_eccentricity
        state.inclination += total.d_inclination
        state.semi_major_axis += total.d_semi_major_axis
        self.enforce_bounds(state)
        return total

    def enforce_bounds(self, state: OrbitalState) -> None:
        """Clamp eccentricity into [0, max_eccentricity) and a to its positive floor."""
        if state.eccentricity < 0.0 or state.eccentricity >= self.max_eccentricity:
            clamped = min(max(state.eccentricity, 0.0), self._eccentricity_ceiling)
            logger.debug("Clamping eccentricity %.6g -> %.6g", state.eccentricity, clamped)
            state.eccentricity = clamped
        if state.semi_major_axis < self.min_semi_major_axis:
            logger.debug("Clamping semi-major axis %.6g m -> %.6g m", state.semi_major_axis, self.min_semi_major_axis)
            state.semi_major_axis = self.min_semi_major_axis


# Shared by every advance_orbit call that does not pass its own engine.
default_engine = PerturbationEngine()


def advance_orbit(
    state: OrbitalState,
    dt: float,
    perturber_snapshots: Sequence[SourceSample],
    engine: Optional[PerturbationEngine] = None,
) -> OrbitalElementDelta:
    """Host-facing entry point: one perturbation tick, returning the applied increment."""
    return (engine or default_engine).step(state, dt, perturber_snapshots)
