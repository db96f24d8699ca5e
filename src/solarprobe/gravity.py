from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple
import numpy as np
from numpy.typing import NDArray

from .config import PROBE_INDEX, Units
from .state import Rate, SystemState
from .vector import Vector


def source_masses(masses: Iterable[float], passive: Iterable[int]) -> NDArray[np.float64]:
    m = np.asarray(tuple(masses), dtype=np.float64).copy()
    idx = list(passive)
    if idx:
        m[idx] = 0.0
    return m


def accelerations_newton(r: NDArray[np.float64],
                         m_src: NDArray[np.float64],
                         G: float) -> NDArray[np.float64]:
    """Pairwise Newtonian accelerations. r: (N,3), m_src: (N,) -> (N,3)

    No softening: coincident bodies give non-finite values.
    """
    d = r[None, :, :] - r[:, None, :]          # d[i, j] = r_j - r_i
    r2 = np.einsum("ijk,ijk->ij", d, d)
    np.fill_diagonal(r2, np.inf)
    inv3 = r2 ** (-1.5)
    return G * np.einsum("ij,ijk->ik", inv3 * m_src[None, :], d)


@dataclass(frozen=True)
class GravityField:
    """Newtonian gravity as a force evaluator: ``field(time, state)``.

    Bodies listed in ``passive`` are test particles: they feel gravity but
    exert none.
    """
    G: float = Units().G
    passive: Tuple[int, ...] = ()

    @classmethod
    def solar_system(cls, units: Units) -> "GravityField":
        return cls(G=units.G, passive=(PROBE_INDEX,))

    def acceleration_array(self, state: SystemState) -> NDArray[np.float64]:
        m_src = source_masses(state.masses, self.passive)
        return accelerations_newton(state.position_array(), m_src, self.G)

    def __call__(self, time: float, state: SystemState) -> Tuple[Vector, ...]:
        a = self.acceleration_array(state)
        return tuple(Vector(float(ax), float(ay), float(az)) for ax, ay, az in a)

    def rate(self, time: float, state: SystemState, step: float) -> Rate:
        """Velocity increment over one step: step * a(time, state)."""
        return Rate(tuple(a.mul(step) for a in self(time, state)))


def total_energy(state: SystemState, G: float, passive: Iterable[int] = ()) -> float:
    """Kinetic + potential energy of the non-passive bodies."""
    skip = set(passive)
    keep = [i for i in range(state.n_bodies) if i not in skip]
    r = state.position_array()[keep]
    v = state.velocity_array()[keep]
    m = np.asarray(state.masses, dtype=np.float64)[keep]

    KE = 0.5 * float(np.sum(m * np.einsum("ij,ij->i", v, v)))

    PE = 0.0
    for a in range(len(keep)):
        for b in range(a + 1, len(keep)):
            PE -= G * m[a] * m[b] / float(np.linalg.norm(r[a] - r[b]))
    return float(KE + PE)


def total_momentum(state: SystemState, passive: Iterable[int] = ()) -> Vector:
    skip = set(passive)
    p = Vector.zero()
    for i, (v, m) in enumerate(zip(state.velocities, state.masses)):
        if i in skip:
            continue
        p = p.add_mul(m, v)
    return p
