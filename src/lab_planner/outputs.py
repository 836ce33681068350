# src/lab_planner/outputs.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

import numpy as np

from .config_models import AnalysisOptions, options_to_dict
from .fdm_bands import FdmAnalysisResult
from .pipeline import PipelineResult
from .port_expansion import PortExpansionResult
from .tdm_uxg import TdmUxgAnalysisResult


COOLING_TABLE_COLUMNS = (
    "channels",
    "num_of_vxg_units",
    "vxg_cooling_tons",
    "num_of_vuxg",
    "vuxg_cooling_tons",
    "num_of_auxg",
    "auxg_cooling_tons",
    "total_hw_cooling_tons",
)


def write_fdm_band_stats(path: str | Path, fdm_result: FdmAnalysisResult) -> None:
    """
    JSONL: one record per FDM band, in band-number order.
    """
    path = Path(path)
    with path.open("w") as f:
        for b in fdm_result.bands:
            rec = {
                "band_number": b.band_number,
                "min_mhz": b.min_mhz,
                "center_mhz": b.center_mhz,
                "max_mhz": b.max_mhz,
                "vc_available": b.vc_available,
                "max_vc_used": b.max_vc_used,
                "pulses_assigned": b.pulses_assigned,
                "pulses_played": b.pulses_played,
                "pulses_dropped": b.pulses_dropped,
                "pulse_drop_percent": b.pulse_drop_percent,
            }
            f.write(json.dumps(rec) + "\n")


def write_cooling_table(
    path: str | Path,
    tdm_uxg_result: TdmUxgAnalysisResult,
    port_result: PortExpansionResult,
) -> None:
    """
    CSV with one row per TDM/UXG scenario (columns: COOLING_TABLE_COLUMNS).
    An empty scenario list gives a header-only file.
    """
    path = Path(path)
    header = ",".join(COOLING_TABLE_COLUMNS)
    if not port_result.rows:
        path.write_text(header + "\n")
        return

    data = np.array(
        [
            [
                ch,
                r.num_of_vxg_units,
                r.vxg_cooling_tons,
                r.num_of_vuxg,
                r.vuxg_cooling_tons,
                r.num_of_auxg,
                r.auxg_cooling_tons,
                r.total_hw_cooling_tons,
            ]
            for ch, r in zip(tdm_uxg_result.channels, port_result.rows)
        ],
        dtype=float,
    )
    fmt = ["%d", "%d", "%.2f", "%d", "%.2f", "%d", "%.2f", "%.2f"]
    np.savetxt(path, data, delimiter=",", fmt=fmt, header=header, comments="")


def write_cooling_summary(path: str | Path, port_result: PortExpansionResult) -> None:
    s = port_result.summary
    blob = {
        "total_hw_cooling_tons": s.total_hw_cooling_tons,
        "lab_size_sqft": s.lab_size_sqft,
        "lab_cooling_req_tons": s.lab_cooling_req_tons,
        "total_overall_cooling_req_tons": s.total_overall_cooling_req_tons,
        "n_scenarios": len(port_result.rows),
    }
    Path(path).write_text(json.dumps(blob, indent=2))


def write_run_metadata(
    path: str | Path,
    options: AnalysisOptions,
    result: PipelineResult,
) -> None:
    """
    Small JSON header for the run: the options used and the size of each
    stage's output.
    """
    path = Path(path)
    metadata = {
        "options": options_to_dict(options),
        "n_fdm_bands": len(result.fdm.bands),
        "pulses_to_tdm_uxg": result.fdm.pulses_to_tdm_uxg,
        "tdm_uxg_scenarios": list(result.tdm_uxg.channels),
        "n_cooling_rows": len(result.ports.rows),
        "modelling_notes": {
            "frequency_bands_placeholder": True,
            "pulse_statistics_placeholder": True,
            "channel_scenarios_placeholder": True,
            "summary_uses_last_scenario": True,
        },
    }
    path.write_text(json.dumps(metadata, indent=2))


def write_distribution_report(path: str | Path, results: Dict[str, bool]) -> None:
    blob = {
        "agents": results,
        "n_delivered": sum(1 for ok in results.values() if ok),
        "n_failed": sum(1 for ok in results.values() if not ok),
    }
    Path(path).write_text(json.dumps(blob, indent=2))
