# tests/test_cli.py
from __future__ import annotations

import json

import pytest

from lab_planner.cli import main as cli_main
from lab_planner.config_models import OptionsValidationError


def test_cli_smoke(tmp_path, options_yaml):
    """
    Run the CLI end-to-end on a small YAML options file and check the
    expected artefacts.
    """
    out_dir = tmp_path / "out"

    cli_main([str(options_yaml), "--out-dir", str(out_dir), "--no-progress"])

    assert (out_dir / "fdm_bands.jsonl").exists()
    assert (out_dir / "cooling_scenarios.csv").exists()
    assert (out_dir / "cooling_scenarios.png").exists()
    assert (out_dir / "run_metadata.json").exists()

    summary = json.loads((out_dir / "cooling_summary.json").read_text())
    assert summary["lab_size_sqft"] == 4000.0
    assert summary["total_overall_cooling_req_tons"] == 14.09
    assert not (out_dir / "distribution.json").exists()


def test_cli_distributes_machine_config(tmp_path, options_yaml):
    machine_path = tmp_path / "machine.yaml"
    machine_path.write_text(
        """
identity: {name: lab-a, location: bldg 7, version: "1.0"}
network:
  agents:
    - {id: local, protocol: file, endpoint: ""}
    - {id: legacy, protocol: serial, endpoint: COM3}
fdm: {present: true, number_of_virtual_channels: 8, max_power_db: -5}
lab: {width_ft: 40, length_ft: 100}
playback: {max_freq_played_ghz: 40, rec_port_count: 6}
bands: []
"""
    )
    out_dir = tmp_path / "out"

    cli_main(
        [
            str(options_yaml),
            "--out-dir",
            str(out_dir),
            "--no-plots",
            "--no-progress",
            "--machine-config",
            str(machine_path),
        ]
    )

    report = json.loads((out_dir / "distribution.json").read_text())
    assert report["agents"] == {"local": True, "legacy": False}
    assert (out_dir / "agents" / "local.json").exists()
    assert not (out_dir / "cooling_scenarios.png").exists()


def test_cli_rejects_invalid_options(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("rec_port_count: -3\n")
    with pytest.raises(OptionsValidationError):
        cli_main([str(p), "--out-dir", str(tmp_path / "out"), "--no-progress"])


def test_cli_missing_file():
    with pytest.raises(FileNotFoundError):
        cli_main(["non_existent_options.yaml"])
