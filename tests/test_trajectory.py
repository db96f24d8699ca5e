import numpy as np

from solarprobe.state import SystemState
from solarprobe.trajectory import (
    times_from_states,
    positions_from_states,
    velocities_from_states,
    body_distance,
    closest_approach,
    relative_energy_drift,
)
from solarprobe.plotting import FigureConfig, set_paper_style, savefig, plot_orbits, plot_energy_drift
from solarprobe.vector import Vector

import matplotlib.pyplot as plt


def make_flyby() -> list[SystemState]:
    # body 1 passes body 0 along y = 1 at unit speed; nearest at t = 2
    states = []
    for t in range(5):
        states.append(SystemState(positions=(Vector(0.0, 0.0, 0.0), Vector(t - 2.0, 1.0, 0.0)),
                                  velocities=(Vector(), Vector(1.0, 0.0, 0.0)),
                                  time=float(t),
                                  masses=(1.0, 1e-3)))
    return states


def test_array_shapes():
    states = make_flyby()
    np.testing.assert_array_equal(times_from_states(states), [0.0, 1.0, 2.0, 3.0, 4.0])
    assert positions_from_states(states).shape == (5, 2, 3)
    V = velocities_from_states(states)
    assert V.shape == (5, 2, 3)
    np.testing.assert_array_equal(V[:, 1, 0], 1.0)


def test_closest_approach():
    states = make_flyby()
    d = body_distance(positions_from_states(states), 0, 1)
    np.testing.assert_allclose(d, np.sqrt(np.array([4.0, 1.0, 0.0, 1.0, 4.0]) + 1.0))
    ca = closest_approach(states, 0, 1)
    assert ca == {"index": 2, "time": 2.0, "distance": 1.0}


def test_energy_drift_starts_at_zero():
    drift = relative_energy_drift(make_flyby(), G=1.0)
    assert drift[0] == 0.0
    assert drift.shape == (5,)


def test_figures_render(tmp_path):
    states = make_flyby()
    cfg = FigureConfig(fmt="png", dpi=50)
    set_paper_style(cfg)
    fig, (ax1, ax2) = plt.subplots(1, 2)
    plot_orbits(ax1, positions_from_states(states), names=["a", "b"])
    plot_energy_drift(ax2, times_from_states(states), relative_energy_drift(states, G=1.0), label="x")
    out = tmp_path / "fig.png"
    savefig(fig, str(out), cfg)
    plt.close(fig)
    assert out.exists() and out.stat().st_size > 0
