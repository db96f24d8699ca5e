#!/usr/bin/env python
from __future__ import annotations

import os
import json
import logging
import argparse
from dataclasses import replace

from solarprobe.config import load_run_config, body_index, PROBE_INDEX, METHODS, RunConfig
from solarprobe.gravity import GravityField
from solarprobe.ic import make_initial_state
from solarprobe.integrate import integrate_trajectory
from solarprobe.trajectory import positions_from_states, closest_approach
from solarprobe.plotting import FigureConfig, set_paper_style, savefig, ensure_dir, plot_orbits

import matplotlib
matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt

log = logging.getLogger("run_trajectory")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None, help="Path to run JSON config (defaults if omitted)")
    ap.add_argument("--method", choices=METHODS, default=None, help="Override sim.method")
    ap.add_argument("--plot", default=None, help="Write an x-y orbit figure to this path")
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_run_config(args.config) if args.config else RunConfig()
    sim = cfg.sim if args.method is None else replace(cfg.sim, method=args.method)

    state0 = make_initial_state(cfg.ic)
    field = GravityField.solar_system(cfg.units)
    res = integrate_trajectory(field, sim, state0)

    titan = body_index("titan")
    approach = closest_approach(res["states"], PROBE_INDEX, titan)
    summary = {
        "method": sim.method,
        "step": sim.step,
        "t_end": float(res["T"][-1]),
        "n_steps": res["n_steps"],
        "stop_reason": res["stop_reason"],
        "E0": res["E0"],
        "E_end": res["E_end"],
        "rel_energy_drift": (res["E_end"] - res["E0"]) / abs(res["E0"]),
        "probe_titan_min_distance": approach["distance"],
        "probe_titan_min_time": approach["time"],
        "runtime_sec": res["runtime_sec"],
    }
    print(json.dumps(summary, indent=2))

    if args.plot:
        fcfg = FigureConfig()
        set_paper_style(fcfg)
        ensure_dir(os.path.dirname(args.plot))
        R = positions_from_states(res["states"])
        fig, ax = plt.subplots()
        # inner system only; the outer planets flatten the figure
        plot_orbits(ax, R, bodies=[0, 1, 2, 3, 5, PROBE_INDEX])
        ax.set_title(sim.method.replace("_", " "))
        savefig(fig, args.plot, fcfg)
        plt.close(fig)
        log.info("wrote %s", args.plot)


if __name__ == "__main__":
    main()
