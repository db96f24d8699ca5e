from __future__ import annotations

from .config import BODY_NAMES, PROBE_INDEX, ICParams
from .ephemeris import EPHEMERIDES
from .state import SystemState
from .vector import Vector


def make_initial_state(ic: ICParams) -> SystemState:
    """Fresh 12-body snapshot at t=0 (no history, BOOTSTRAP phase).

    The probe starts at the earth's position/velocity shifted by
    ``ic.probe_offset`` / ``ic.probe_velocity``.
    """
    try:
        table = EPHEMERIDES[ic.epoch]
    except KeyError:
        raise KeyError(f"unknown epoch {ic.epoch!r}; available: {sorted(EPHEMERIDES)}") from None

    positions = []
    velocities = []
    for name in BODY_NAMES[:PROBE_INDEX]:
        r, v = table[name]
        positions.append(Vector(*r))
        velocities.append(Vector(*v))

    earth = BODY_NAMES.index("earth")
    positions.insert(PROBE_INDEX, positions[earth].add(Vector.from_iterable(ic.probe_offset)))
    velocities.insert(PROBE_INDEX, velocities[earth].add(Vector.from_iterable(ic.probe_velocity)))

    return SystemState.solar_system(positions, velocities, time=0.0)
