# src/lab_planner/plotting.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from .port_expansion import PortExpansionResult


def plot_cooling_scenarios(
    result: PortExpansionResult,
    channels: Sequence[int],
    out_path: Optional[str | Path] = None,
) -> None:
    """
    Stacked bars of VXG / V-UXG / A-UXG cooling tons per TDM/UXG scenario,
    with the lab's ambient cooling requirement as a horizontal line.
    """
    rows = result.rows
    x = np.arange(len(rows))
    vxg = np.array([r.vxg_cooling_tons for r in rows], dtype=float)
    vuxg = np.array([r.vuxg_cooling_tons for r in rows], dtype=float)
    auxg = np.array([r.auxg_cooling_tons for r in rows], dtype=float)

    plt.figure()
    plt.bar(x, vxg, label="VXG")
    plt.bar(x, vuxg, bottom=vxg, label="V-UXG")
    plt.bar(x, auxg, bottom=vxg + vuxg, label="A-UXG")
    plt.axhline(
        result.summary.lab_cooling_req_tons,
        color="k",
        linestyle="--",
        label="lab (ambient)",
    )

    plt.xticks(x, [str(ch) for ch in channels[: len(rows)]])
    plt.xlabel("TDM/UXG channels")
    plt.ylabel("Cooling (tons)")
    plt.title("Hardware Cooling per Channel Scenario")
    plt.legend()
    plt.grid(True, axis="y")
    if out_path:
        out_path = Path(out_path)
        plt.savefig(out_path, dpi=150, bbox_inches="tight")
        plt.close()
    else:
        plt.show()
