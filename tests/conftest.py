# tests/conftest.py
from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest

from lab_planner.config_models import (
    AgentAddress,
    AnalysisOptions,
    FrequencyBand,
    MachineIdentity,
    build_machine_config,
)


@pytest.fixture
def default_options() -> AnalysisOptions:
    """
    Reference lab: 40 x 100 ft, 40 GHz playback, 6 receiver ports, FDM on.
    """
    return AnalysisOptions()


@pytest.fixture
def single_band() -> tuple[FrequencyBand, ...]:
    return (FrequencyBand(min_mhz=500.0, center_mhz=1750.0, max_mhz=3000.0),)


@pytest.fixture
def options_yaml(tmp_path):
    """Options file overriding a handful of defaults."""
    p = tmp_path / "options.yaml"
    p.write_text(
        "analysis:\n"
        "  rec_port_count: 6\n"
        "  fdm_present: true\n"
        "  lab_width_ft: 40\n"
        "  lab_length_ft: 100\n"
        "  max_freq_played_ghz: 40.0\n"
        "  number_of_virtual_channels: 4\n"
    )
    return p


@pytest.fixture
def machine_config(default_options, single_band):
    """
    Machine config with one HTTP agent (API key), one file-drop agent and
    one agent on a protocol no pusher handles.
    """
    return build_machine_config(
        identity=MachineIdentity(name="lab-a", location="bldg 7", version="1.0"),
        agents=[
            AgentAddress(id="web", protocol="http", endpoint="http://agent.local/config", api_key="k123"),
            AgentAddress(id="drop", protocol="file", endpoint="incoming"),
            AgentAddress(id="rpc", protocol="grpc", endpoint="agent.local:5001"),
        ],
        options=default_options,
        bands=single_band,
    )
