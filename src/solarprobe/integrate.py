from __future__ import annotations

import logging
import math
import time
from typing import Sequence
import numpy as np
from numpy.typing import NDArray
from scipy.integrate import solve_ivp
from tqdm import tqdm

from .config import METHODS, SimParams
from .gravity import GravityField, accelerations_newton, source_masses, total_energy
from .state import SystemState, velocity_verlet_step
from .vector import Vector

logger = logging.getLogger(__name__)


def _is_finite(state: SystemState) -> bool:
    return bool(np.all(np.isfinite(state.position_array())) and
                np.all(np.isfinite(state.velocity_array())))


def integrate_trajectory(field: GravityField,
                         sim: SimParams,
                         state0: SystemState) -> dict:
    """Fixed-step integration from ``state0`` to ``sim.t_final``.

    The step size never changes along the trajectory: the three-point scheme
    assumes equal spacing between snapshots.
    """
    if sim.method not in METHODS:
        raise ValueError(f"unknown method {sim.method!r}; expected one of {METHODS}")
    if not sim.step > 0.0:
        raise ValueError(f"step must be positive, got {sim.step}")

    h = float(sim.step)
    n_steps = max(int(math.ceil((sim.t_final - state0.time) / h - 1e-9)), 0)
    store_every = max(1, int(sim.store_every))
    max_wall = float(sim.max_walltime_sec or 0.0)

    logger.info("integrating %d bodies with %s: %d steps of %g s",
                state0.n_bodies, sim.method, n_steps, h)

    E0 = total_energy(state0, field.G, field.passive)
    start = time.time()

    state = state0
    states = [state0]
    stop_reason = "t_final"
    acc = None
    if sim.method == "velocity_verlet":
        acc = field(state.time, state)

    k = 0
    for k in tqdm(range(1, n_steps + 1), disable=not sim.progress, desc=sim.method):
        if sim.method == "euler":
            state = state.step_first_order(h, field.rate(state.time, state, h))
        elif sim.method == "velocity_verlet":
            state, acc = velocity_verlet_step(state, h, acc, field)
        else:
            state = state.step_stormer_verlet(h, field(state.time, state))

        if k % store_every == 0 or k == n_steps:
            states.append(state)

        if not _is_finite(state):
            stop_reason = "nonfinite"
            logger.warning("non-finite state at t=%g (step %d)", state.time, k)
            break

        if max_wall > 0.0 and (time.time() - start) > max_wall:
            stop_reason = "walltime"
            logger.warning("max_walltime_sec=%g exceeded at t=%g", max_wall, state.time)
            break

    if states[-1] is not state:
        states.append(state)

    if sim.method == "stormer_verlet":
        # velocities are never updated, so kinetic energy is stale
        E_end = float("nan")
    else:
        E_end = total_energy(state, field.G, field.passive)
    runtime = time.time() - start
    logger.info("finished at t=%g after %d steps (%s) in %.2fs", state.time, k, stop_reason, runtime)

    return {
        "states": states,
        "T": np.array([s.time for s in states], dtype=float),
        "n_steps": int(k),
        "stop_reason": stop_reason,
        "E0": float(E0),
        "E_end": float(E_end),
        "runtime_sec": float(runtime),
    }


def _pack(state: SystemState) -> NDArray[np.float64]:
    return np.hstack([state.position_array().ravel(), state.velocity_array().ravel()])


def _unpack(y: NDArray[np.float64], n: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    return y[:3*n].reshape(n, 3), y[3*n:].reshape(n, 3)


def integrate_reference(field: GravityField,
                        state0: SystemState,
                        t_eval: Sequence[float],
                        rtol: float = 1e-12,
                        atol: float = 1e-3,
                        method: str = "DOP853") -> list[SystemState]:
    """Tight-tolerance ``solve_ivp`` solution, used to judge the fixed-step schemes."""
    n = state0.n_bodies
    t_eval = np.asarray(t_eval, dtype=float)
    m_src = source_masses(state0.masses, field.passive)

    def fun(t, y):
        r, v = _unpack(y, n)
        return np.hstack([v.ravel(), accelerations_newton(r, m_src, field.G).ravel()])

    t_span = (state0.time, float(t_eval[-1]))
    sol = solve_ivp(fun, t_span, _pack(state0), method=method,
                    rtol=rtol, atol=atol, t_eval=t_eval)
    if not sol.success:
        logger.warning("reference solve_ivp failed: %s", sol.message)

    out = []
    for j, t in enumerate(sol.t):
        r, v = _unpack(sol.y[:, j], n)
        out.append(SystemState(positions=tuple(Vector.from_iterable(p) for p in r),
                               velocities=tuple(Vector.from_iterable(u) for u in v),
                               time=float(t),
                               masses=state0.masses))
    return out
