from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

# Rendering is not needed by the integrators; scripts import this module.
import matplotlib
matplotlib.use("Agg", force=True)  # headless
import matplotlib.pyplot as plt

from .config import BODY_NAMES

AU = 1.495978707e11  # m


@dataclass(frozen=True)
class FigureConfig:
    fmt: str = "pdf"          # "pdf", "png", "svg"
    dpi: int = 300            # used for raster formats only
    fontsize: float = 10.0
    tight: bool = True
    pad_inches: float = 0.02

    # square panels keep orbits round
    figsize: Tuple[float, float] = (4.0, 4.0)


def set_paper_style(cfg: FigureConfig) -> None:
    plt.rcParams.update({
        "figure.figsize": cfg.figsize,
        "figure.dpi": 120,
        "savefig.dpi": cfg.dpi,
        "font.size": cfg.fontsize,
        "axes.labelsize": cfg.fontsize,
        "axes.titlesize": cfg.fontsize,
        "legend.fontsize": max(6.0, cfg.fontsize - 2.0),
        "xtick.labelsize": max(6.0, cfg.fontsize - 2.0),
        "ytick.labelsize": max(6.0, cfg.fontsize - 2.0),
        "axes.linewidth": 0.8,
        "xtick.direction": "in",
        "ytick.direction": "in",
        "legend.frameon": False,
        "lines.linewidth": 1.0,
        "pdf.fonttype": 42,
    })


def ensure_dir(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)


def plot_orbits(ax: plt.Axes,
                R: NDArray[np.float64],
                names: Sequence[str] = BODY_NAMES,
                bodies: Optional[Sequence[int]] = None) -> None:
    """x-y projection of body tracks, R: (T,N,3) in metres, drawn in AU."""
    idx = range(R.shape[1]) if bodies is None else bodies
    for i in idx:
        ax.plot(R[:, i, 0] / AU, R[:, i, 1] / AU, label=names[i])
        ax.plot(R[-1, i, 0] / AU, R[-1, i, 1] / AU, "o", ms=2.5, color=ax.lines[-1].get_color())
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_xlabel("x [AU]")
    ax.set_ylabel("y [AU]")
    ax.legend(loc="upper right")


def plot_energy_drift(ax: plt.Axes,
                      T: NDArray[np.float64],
                      drift: NDArray[np.float64],
                      label: str = "") -> None:
    days = np.asarray(T, dtype=float) / 86400.0
    ax.plot(days, drift, label=label or None)
    ax.set_xlabel("t [days]")
    ax.set_ylabel(r"$\Delta E / |E_0|$")


def savefig(fig: plt.Figure, path: str, cfg: FigureConfig) -> None:
    kwargs = {}
    if cfg.tight:
        kwargs["bbox_inches"] = "tight"
        kwargs["pad_inches"] = cfg.pad_inches
    # DPI matters for raster formats; for PDF/SVG it is mostly ignored.
    if path.lower().endswith((".png", ".jpg", ".jpeg", ".tif", ".tiff")):
        kwargs["dpi"] = cfg.dpi
    fig.savefig(path, **kwargs)
