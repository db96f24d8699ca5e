from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Tuple
import json


# Index order is fixed for the whole trajectory.
BODY_NAMES: Tuple[str, ...] = (
    "sun", "mercury", "venus", "earth", "moon", "mars",
    "jupiter", "saturn", "titan", "uranus", "neptune", "probe",
)

# kg
BODY_MASSES: Tuple[float, ...] = (
    1.988500e30,   # sun
    3.302e23,      # mercury
    4.8685e24,     # venus
    5.97219e24,    # earth
    7.349e22,      # moon
    6.4171e23,     # mars
    1.89813e27,    # jupiter
    5.6834e26,     # saturn
    1.34553e23,    # titan
    8.6813e25,     # uranus
    1.02413e26,    # neptune
    15e3,          # probe (nominal, exerts no force)
)

PROBE_INDEX: int = BODY_NAMES.index("probe")

METHODS: Tuple[str, ...] = ("euler", "velocity_verlet", "stormer_verlet")


def body_index(name: str) -> int:
    try:
        return BODY_NAMES.index(name.lower())
    except ValueError:
        raise KeyError(f"unknown body {name!r}; expected one of {BODY_NAMES}") from None


@dataclass(frozen=True)
class Units:
    # SI units, m^3 kg^-1 s^-2
    G: float = 6.67430e-11


@dataclass(frozen=True)
class SimParams:
    method: str = "velocity_verlet"

    # seconds
    step: float = 3600.0
    t_final: float = 365.25 * 86400.0

    # keep every N-th state (first and last are always kept)
    store_every: int = 1

    # Hard wall-clock limit for a single trajectory (seconds). <= 0 disables.
    max_walltime_sec: float = 0.0

    progress: bool = False


@dataclass(frozen=True)
class ICParams:
    epoch: str = "2020-04-01"

    # probe relative to earth: position [m], velocity [m/s]
    probe_offset: Tuple[float, float, float] = (6.371e6, 0.0, 0.0)
    probe_velocity: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class RunConfig:
    units: Units = field(default_factory=Units)
    sim: SimParams = field(default_factory=SimParams)
    ic: ICParams = field(default_factory=ICParams)


def _dataclass_from_dict(cls, d: Dict[str, Any]):
    kwargs = {}
    for f in cls.__dataclass_fields__.values():  # type: ignore
        if f.name not in d:
            continue
        val = d[f.name]
        # JSON has no tuples
        if isinstance(val, list):
            val = tuple(float(v) for v in val)
        kwargs[f.name] = val
    return cls(**kwargs)  # type: ignore


def load_run_config(path: str) -> RunConfig:
    with open(path, "r", encoding="utf-8") as f:
        d = json.load(f)
    return RunConfig(
        units=_dataclass_from_dict(Units, d.get("units", {})),
        sim=_dataclass_from_dict(SimParams, d.get("sim", {})),
        ic=_dataclass_from_dict(ICParams, d.get("ic", {})),
    )


def to_json(obj: Any, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(obj), f, indent=2)
