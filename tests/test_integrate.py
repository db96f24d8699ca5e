import numpy as np
import pytest

from solarprobe.config import SimParams, Units, ICParams
from solarprobe.gravity import GravityField
from solarprobe.ic import make_initial_state
from solarprobe.integrate import integrate_trajectory, integrate_reference
from solarprobe.state import SystemState, VerletPhase
from solarprobe.trajectory import (
    positions_from_states,
    body_distance,
    closest_approach,
    relative_energy_drift,
)
from solarprobe.vector import Vector

TWO_PI = 2.0 * np.pi


def make_binary() -> SystemState:
    # G = 1, m1 = m2 = 1, separation 1 -> period 2*pi/sqrt(2)
    v = np.sqrt(0.5)
    return SystemState(positions=(Vector(-0.5, 0.0, 0.0), Vector(0.5, 0.0, 0.0)),
                       velocities=(Vector(0.0, -v, 0.0), Vector(0.0, v, 0.0)),
                       time=0.0,
                       masses=(1.0, 1.0))


def period() -> float:
    return TWO_PI / np.sqrt(2.0)


def test_unknown_method_rejected():
    with pytest.raises(ValueError):
        integrate_trajectory(GravityField(G=1.0), SimParams(method="rk4", step=0.1, t_final=1.0), make_binary())


def test_non_positive_step_rejected():
    with pytest.raises(ValueError):
        integrate_trajectory(GravityField(G=1.0), SimParams(step=0.0, t_final=1.0), make_binary())


def test_fixed_steps_and_thinning():
    sim = SimParams(method="velocity_verlet", step=0.1, t_final=1.0, store_every=3)
    res = integrate_trajectory(GravityField(G=1.0), sim, make_binary())
    assert res["n_steps"] == 10
    assert res["stop_reason"] == "t_final"
    # 0, 3, 6, 9 and the final step 10
    np.testing.assert_allclose(res["T"], [0.0, 0.3, 0.6, 0.9, 1.0], atol=1e-12)
    assert res["states"][0].time == 0.0


def test_velocity_verlet_conserves_energy_over_an_orbit():
    sim = SimParams(method="velocity_verlet", step=period() / 500, t_final=period())
    field = GravityField(G=1.0)
    res = integrate_trajectory(field, sim, make_binary())
    drift = relative_energy_drift(res["states"], field.G)
    assert np.max(np.abs(drift)) < 1e-3
    # back where it started after one period
    end = res["states"][-1]
    np.testing.assert_allclose(end.position_array(), make_binary().position_array(), atol=1e-3)


def test_euler_drifts_more_than_verlet():
    field = GravityField(G=1.0)
    h = period() / 200
    errs = {}
    for method in ("euler", "velocity_verlet"):
        res = integrate_trajectory(field, SimParams(method=method, step=h, t_final=period()), make_binary())
        R = positions_from_states(res["states"])
        errs[method] = abs(body_distance(R, 0, 1)[-1] - 1.0)
    assert errs["velocity_verlet"] < errs["euler"]


def test_stormer_trajectory_bootstraps_once():
    sim = SimParams(method="stormer_verlet", step=period() / 500, t_final=period())
    res = integrate_trajectory(GravityField(G=1.0), sim, make_binary())
    states = res["states"]
    assert states[0].phase is VerletPhase.BOOTSTRAP
    assert all(s.phase is VerletPhase.STEADY for s in states[1:])
    for prev, cur in zip(states[:-1], states[1:]):
        assert cur.previous_positions == prev.positions
    R = positions_from_states(states)
    np.testing.assert_allclose(body_distance(R, 0, 1), 1.0, rtol=1e-3)


def test_stormer_reports_no_final_energy():
    sim = SimParams(method="stormer_verlet", step=0.1, t_final=1.0)
    res = integrate_trajectory(GravityField(G=1.0), sim, make_binary())
    assert np.isfinite(res["E0"])
    assert np.isnan(res["E_end"])


def test_nonfinite_state_stops_the_loop():
    # coincident bodies -> NaN accelerations on the first step
    s0 = SystemState(positions=(Vector(), Vector()), velocities=(Vector(), Vector()),
                     time=0.0, masses=(1.0, 1.0))
    sim = SimParams(method="stormer_verlet", step=0.1, t_final=1.0)
    with np.errstate(all="ignore"):
        res = integrate_trajectory(GravityField(G=1.0), sim, s0)
    assert res["stop_reason"] == "nonfinite"
    assert res["n_steps"] == 1
    assert len(res["states"]) == 2


def test_reference_agrees_with_verlet():
    field = GravityField(G=1.0)
    s0 = make_binary()
    t_end = period() / 4
    ref = integrate_reference(field, s0, [t_end], atol=1e-12)[-1]
    assert ref.time == pytest.approx(t_end)
    res = integrate_trajectory(field, SimParams(method="velocity_verlet", step=t_end / 400, t_final=t_end), s0)
    np.testing.assert_allclose(res["states"][-1].position_array(), ref.position_array(), atol=1e-4)
    # quarter period: bodies have rotated onto the y axis
    np.testing.assert_allclose(ref.position_array()[1], [0.0, 0.5, 0.0], atol=1e-8)


def test_solar_system_short_run():
    state0 = make_initial_state(ICParams())
    field = GravityField.solar_system(Units())
    sim = SimParams(method="velocity_verlet", step=3600.0, t_final=10 * 86400.0, store_every=24)
    res = integrate_trajectory(field, sim, state0)
    assert res["stop_reason"] == "t_final"
    assert res["n_steps"] == 240
    assert abs(res["E_end"] - res["E0"]) / abs(res["E0"]) < 1e-6

    approach = closest_approach(res["states"], 3, 4)  # earth-moon
    assert 3.5e8 < approach["distance"] < 4.1e8
