"""Immutable system snapshots and the three explicit stepping schemes.

A ``SystemState`` holds the positions and velocities of every body at one
instant. Stepping never mutates the receiver; each scheme returns a new
snapshot whose time is ``time + step``.

The three-point (Stormer-Verlet) scheme needs the positions of the previous
snapshot. A fresh trajectory has none, so its first call takes a single
bootstrap step and every later call uses the recurrence. Which branch runs is
decided by ``phase``, carried on the snapshot itself, so independent
trajectories never influence each other.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Protocol, Sequence, Tuple, Union
import numpy as np
from numpy.typing import NDArray

from .config import BODY_MASSES
from .vector import Vector


Vectors = Tuple[Vector, ...]


class VerletPhase(Enum):
    BOOTSTRAP = "bootstrap"
    STEADY = "steady"


@dataclass(frozen=True)
class Rate:
    """Per-body velocity increment over one step (already scaled by the step)."""
    rates: Vectors

    def __post_init__(self):
        object.__setattr__(self, "rates", tuple(self.rates))

    def __len__(self) -> int:
        return len(self.rates)


class ForceEvaluator(Protocol):
    def __call__(self, time: float, state: "SystemState") -> Sequence[Vector]:
        ...


def _per_body(name: str, values: Sequence[Vector], n: int) -> Vectors:
    out = tuple(values)
    if len(out) != n:
        raise ValueError(f"{name} has {len(out)} entries for {n} bodies")
    return out


@dataclass(frozen=True)
class SystemState:
    positions: Vectors
    velocities: Vectors
    time: float
    masses: Tuple[float, ...]
    previous_positions: Optional[Vectors] = None
    # None: derived from previous_positions
    phase: Optional[VerletPhase] = None

    def __post_init__(self):
        object.__setattr__(self, "positions", tuple(self.positions))
        object.__setattr__(self, "velocities", tuple(self.velocities))
        object.__setattr__(self, "masses", tuple(float(m) for m in self.masses))
        object.__setattr__(self, "time", float(self.time))

        n = len(self.positions)
        _per_body("velocities", self.velocities, n)
        _per_body("masses", self.masses, n)
        if any(not m > 0.0 for m in self.masses):
            raise ValueError(f"masses must be positive, got {self.masses}")

        if self.previous_positions is not None:
            prev = _per_body("previous_positions", self.previous_positions, n)
            object.__setattr__(self, "previous_positions", prev)
            if self.phase is VerletPhase.BOOTSTRAP:
                raise ValueError("BOOTSTRAP phase cannot carry previous_positions")
            object.__setattr__(self, "phase", VerletPhase.STEADY)
        elif self.phase is VerletPhase.STEADY:
            raise ValueError("STEADY phase requires previous_positions")
        else:
            object.__setattr__(self, "phase", VerletPhase.BOOTSTRAP)

    @classmethod
    def solar_system(cls,
                     positions: Sequence[Vector],
                     velocities: Sequence[Vector],
                     time: float = 0.0) -> "SystemState":
        """Fresh snapshot of the 12-body system with the fixed mass table."""
        return cls(positions=tuple(positions),
                   velocities=tuple(velocities),
                   time=time,
                   masses=BODY_MASSES)

    @property
    def n_bodies(self) -> int:
        return len(self.positions)

    def position_array(self) -> NDArray[np.float64]:
        return np.array([(p.x, p.y, p.z) for p in self.positions], dtype=np.float64).reshape(-1, 3)

    def velocity_array(self) -> NDArray[np.float64]:
        return np.array([(v.x, v.y, v.z) for v in self.velocities], dtype=np.float64).reshape(-1, 3)

    def with_positions(self, positions: Sequence[Vector], time: Optional[float] = None) -> "SystemState":
        """Same velocities/masses, new positions (and time, if given), no history."""
        return replace(self,
                       positions=_per_body("positions", positions, self.n_bodies),
                       time=self.time if time is None else time,
                       previous_positions=None,
                       phase=VerletPhase.BOOTSTRAP)

    def step_first_order(self, step: float, rate: Union[Rate, Sequence[Vector]]) -> "SystemState":
        """First-order update.

        Velocities receive ``rate`` as is. Positions advance with the
        velocities from *before* this step, not the updated ones.
        """
        rates = rate.rates if isinstance(rate, Rate) else rate
        rates = _per_body("rate", rates, self.n_bodies)

        new_velocities = tuple(v.add(r) for v, r in zip(self.velocities, rates))
        new_positions = tuple(x.add_mul(step, v) for x, v in zip(self.positions, self.velocities))

        return SystemState(positions=new_positions,
                           velocities=new_velocities,
                           time=self.time + step,
                           masses=self.masses)

    def step_velocity_verlet(self,
                             step: float,
                             accelerations: Sequence[Vector],
                             force_evaluator: ForceEvaluator) -> "SystemState":
        new_state, _ = velocity_verlet_step(self, step, accelerations, force_evaluator)
        return new_state

    def step_stormer_verlet(self, step: float, accelerations: Sequence[Vector]) -> "SystemState":
        """Three-point update with a one-time bootstrap.

        BOOTSTRAP: x' = x + h v + h^2/2 a
        STEADY:    x' = 2 x - x_prev + h^2 a

        Velocities are carried through unchanged in both branches.
        """
        acc = _per_body("accelerations", accelerations, self.n_bodies)
        h2 = step * step

        if self.phase is VerletPhase.BOOTSTRAP:
            new_positions = tuple(x.add_mul(step, v).add_mul(0.5 * h2, a)
                                  for x, v, a in zip(self.positions, self.velocities, acc))
        else:
            # __post_init__ guarantees history exists in STEADY
            new_positions = tuple(x.mul(2.0).sub(xp).add_mul(h2, a)
                                  for x, xp, a in zip(self.positions, self.previous_positions, acc))

        return SystemState(positions=new_positions,
                           velocities=self.velocities,
                           time=self.time + step,
                           masses=self.masses,
                           previous_positions=self.positions,
                           phase=VerletPhase.STEADY)


def velocity_verlet_step(state: SystemState,
                         step: float,
                         accelerations: Sequence[Vector],
                         force_evaluator: ForceEvaluator) -> tuple[SystemState, Vectors]:
    """One Velocity-Verlet step.

    Returns the new snapshot together with the accelerations evaluated at its
    positions, so the caller can pass them back in on the next step instead of
    evaluating the force twice.
    """
    n = state.n_bodies
    acc = _per_body("accelerations", accelerations, n)
    h = step

    new_positions = tuple(x.add_mul(h, v).add_mul(0.5 * h * h, a)
                          for x, v, a in zip(state.positions, state.velocities, acc))

    # forces depend on positions only: one evaluation for all bodies
    intermediate = state.with_positions(new_positions, time=state.time + h)
    acc_new = _per_body("force_evaluator result",
                        force_evaluator(state.time + h, intermediate), n)

    new_velocities = tuple(v.add_mul(0.5 * h, a0.add(a1))
                           for v, a0, a1 in zip(state.velocities, acc, acc_new))

    new_state = SystemState(positions=new_positions,
                            velocities=new_velocities,
                            time=state.time + h,
                            masses=state.masses)
    return new_state, acc_new
