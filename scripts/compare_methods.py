#!/usr/bin/env python
from __future__ import annotations

import os
import logging
import argparse
from dataclasses import replace

import numpy as np
import pandas as pd

from solarprobe.config import load_run_config, METHODS, RunConfig, BODY_NAMES
from solarprobe.gravity import GravityField
from solarprobe.ic import make_initial_state
from solarprobe.integrate import integrate_trajectory, integrate_reference
from solarprobe.trajectory import relative_energy_drift, times_from_states
from solarprobe.plotting import FigureConfig, set_paper_style, savefig, ensure_dir, plot_energy_drift

import matplotlib
matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt

log = logging.getLogger("compare_methods")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None)
    ap.add_argument("--step", type=float, default=None, help="Override sim.step [s]")
    ap.add_argument("--t_final", type=float, default=None, help="Override sim.t_final [s]")
    ap.add_argument("--plot", default=None, help="Write an energy-drift figure to this path")
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_run_config(args.config) if args.config else RunConfig()
    sim = cfg.sim
    if args.step is not None:
        sim = replace(sim, step=args.step)
    if args.t_final is not None:
        sim = replace(sim, t_final=args.t_final)

    state0 = make_initial_state(cfg.ic)
    field = GravityField.solar_system(cfg.units)

    rows = []
    drifts = {}
    ref_end = None
    for method in METHODS:
        res = integrate_trajectory(field, replace(sim, method=method), state0)
        end = res["states"][-1]
        if ref_end is None:
            ref_end = integrate_reference(field, state0, [end.time])[-1]

        err = np.linalg.norm(end.position_array() - ref_end.position_array(), axis=1)
        T = times_from_states(res["states"])
        if method == "stormer_verlet":
            # velocities are carried through unchanged: no usable energy
            drift = np.full(len(T), np.nan)
        else:
            drift = relative_energy_drift(res["states"], field.G, field.passive)
        drifts[method] = (T, drift)
        row = {
            "method": method,
            "stop_reason": res["stop_reason"],
            "max_abs_energy_drift": float(np.nanmax(np.abs(drift))) if np.any(np.isfinite(drift)) else float("nan"),
            "final_energy_drift": float(drift[-1]),
            "runtime_sec": res["runtime_sec"],
        }
        for i, name in enumerate(BODY_NAMES):
            row[f"err_{name}_m"] = float(err[i])
        rows.append(row)

    df = pd.DataFrame(rows).set_index("method")
    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(df.T)

    if args.plot:
        fcfg = FigureConfig(figsize=(5.0, 3.0))
        set_paper_style(fcfg)
        ensure_dir(os.path.dirname(args.plot))
        fig, ax = plt.subplots()
        for method in ("euler", "velocity_verlet"):
            T, drift = drifts[method]
            plot_energy_drift(ax, T, drift, label=method.replace("_", " "))
        ax.legend()
        savefig(fig, args.plot, fcfg)
        plt.close(fig)
        log.info("wrote %s", args.plot)


if __name__ == "__main__":
    main()
