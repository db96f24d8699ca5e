from __future__ import annotations

from typing import Iterable, Sequence
import numpy as np
from numpy.typing import NDArray

from .gravity import total_energy
from .state import SystemState


def times_from_states(states: Sequence[SystemState]) -> NDArray[np.float64]:
    return np.array([s.time for s in states], dtype=np.float64)


def positions_from_states(states: Sequence[SystemState]) -> NDArray[np.float64]:
    """(T, N, 3)"""
    return np.stack([s.position_array() for s in states], axis=0)


def velocities_from_states(states: Sequence[SystemState]) -> NDArray[np.float64]:
    return np.stack([s.velocity_array() for s in states], axis=0)


def body_distance(R: NDArray[np.float64], i: int, j: int) -> NDArray[np.float64]:
    """R: (T,N,3) -> |r_i - r_j| over time, (T,)"""
    return np.linalg.norm(R[:, i, :] - R[:, j, :], axis=1)


def closest_approach(states: Sequence[SystemState], i: int, j: int) -> dict:
    R = positions_from_states(states)
    d = body_distance(R, i, j)
    k = int(np.argmin(d))
    return {"index": k, "time": float(states[k].time), "distance": float(d[k])}


def energy_series(states: Sequence[SystemState], G: float, passive: Iterable[int] = ()) -> NDArray[np.float64]:
    passive = tuple(passive)
    return np.array([total_energy(s, G, passive) for s in states], dtype=np.float64)


def relative_energy_drift(states: Sequence[SystemState], G: float, passive: Iterable[int] = ()) -> NDArray[np.float64]:
    """(E(t) - E0) / |E0|"""
    E = energy_series(states, G, passive)
    return (E - E[0]) / abs(E[0])
