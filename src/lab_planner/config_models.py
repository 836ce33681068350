# src/lab_planner/config_models.py
from __future__ import annotations

import json
import math
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Dict, Iterable, Tuple, Union

import yaml


MHz = float
GHz = float
dB = float


class OptionsValidationError(ValueError):
    """Raised when a configuration value is missing or out of range."""

    def __init__(self, field_name: str, value, reason: str) -> None:
        super().__init__(f"Invalid value for '{field_name}': {value!r} ({reason})")
        self.field_name = field_name
        self.value = value


@dataclass(frozen=True)
class AnalysisOptions:
    """
    Input parameters for one analysis run.

    Defaults mirror the reference lab setup (40 x 100 ft room, 40 GHz
    playback, 6 receiver ports per band).
    """
    section_bandwidth_mhz: MHz = 50.0
    pps_fdm_assign: int = 15000
    fdm_present: bool = True
    # jitter parameters, reserved for pulse assignment
    randomize_shadow_time: bool = True
    buffer_time_ps: int = 20000
    number_of_virtual_channels: int = 8
    max_fdm_power_db: dB = -5.0
    max_chan_avail: int = 1000
    tdm_enabled: bool = False
    uxg_enabled: bool = True
    rec_port_count: int = 6
    lab_width_ft: float = 40.0
    lab_length_ft: float = 100.0
    max_freq_played_ghz: GHz = 40.0


@dataclass(frozen=True)
class FrequencyBand:
    """Closed band [min_mhz, max_mhz] with its center frequency."""
    min_mhz: MHz
    center_mhz: MHz
    max_mhz: MHz

    @property
    def width_mhz(self) -> MHz:
        return self.max_mhz - self.min_mhz


# numeric lower bounds
_POSITIVE_FIELDS = (
    "section_bandwidth_mhz",
    "number_of_virtual_channels",
    "lab_width_ft",
    "lab_length_ft",
    "max_freq_played_ghz",
)
_NON_NEGATIVE_FIELDS = (
    "pps_fdm_assign",
    "buffer_time_ps",
    "max_chan_avail",
    "rec_port_count",
)
_BOOL_FIELDS = (
    "fdm_present",
    "randomize_shadow_time",
    "tdm_enabled",
    "uxg_enabled",
)
_INT_FIELDS = (
    "pps_fdm_assign",
    "buffer_time_ps",
    "number_of_virtual_channels",
    "max_chan_avail",
    "rec_port_count",
)


def validate_options(options: AnalysisOptions) -> AnalysisOptions:
    """
    Check every AnalysisOptions field against its allowed range.

    Returns the options with integral floats in integer fields (8.0 from a
    YAML file) converted to int; raises OptionsValidationError on the first
    offending field.
    """
    for name in _BOOL_FIELDS:
        value = getattr(options, name)
        if not isinstance(value, bool):
            raise OptionsValidationError(name, value, "expected a boolean")

    for f in fields(options):
        value = getattr(options, f.name)
        if f.name in _BOOL_FIELDS:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise OptionsValidationError(f.name, value, "expected a number")
        if isinstance(value, float) and not math.isfinite(value):
            raise OptionsValidationError(f.name, value, "must be finite")
        if f.name in _INT_FIELDS and int(value) != value:
            raise OptionsValidationError(f.name, value, "expected an integer")

    for name in _POSITIVE_FIELDS:
        value = getattr(options, name)
        if value <= 0:
            raise OptionsValidationError(name, value, "must be > 0")

    for name in _NON_NEGATIVE_FIELDS:
        value = getattr(options, name)
        if value < 0:
            raise OptionsValidationError(name, value, "must be >= 0")

    coerced = {
        name: int(getattr(options, name))
        for name in _INT_FIELDS
        if not isinstance(getattr(options, name), int)
    }
    if coerced:
        return replace(options, **coerced)
    return options


# ---------------------------------------------------------------------------
# Machine configuration (payload pushed to lab agents)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AgentAddress:
    id: str
    protocol: str  # "http", "https", "file", ...
    endpoint: str  # URL for http(s), sub-directory for file drops
    api_key: str | None = None


@dataclass(frozen=True)
class MachineIdentity:
    name: str
    location: str
    version: str


@dataclass(frozen=True)
class MachineNetwork:
    agents: Tuple[AgentAddress, ...] = ()


@dataclass(frozen=True)
class FdmConfig:
    present: bool
    number_of_virtual_channels: int
    max_power_db: dB


@dataclass(frozen=True)
class LabConfig:
    width_ft: float
    length_ft: float


@dataclass(frozen=True)
class PlaybackConfig:
    max_freq_played_ghz: GHz
    rec_port_count: int
    randomize_shadow_time: bool
    buffer_time_ps: int


@dataclass(frozen=True)
class MachineFrequencyBand:
    min_mhz: MHz
    center_mhz: MHz
    max_mhz: MHz


@dataclass(frozen=True)
class MachineConfig:
    """
    Finished configuration of one lab machine, as delivered to its agents.
    """
    identity: MachineIdentity
    network: MachineNetwork
    fdm: FdmConfig
    lab: LabConfig
    playback: PlaybackConfig
    bands: Tuple[MachineFrequencyBand, ...] = ()


def build_machine_config(
    identity: MachineIdentity,
    agents: Iterable[AgentAddress],
    options: AnalysisOptions,
    bands: Iterable[FrequencyBand],
) -> MachineConfig:
    """
    Populate a MachineConfig from analysis options and the analysed band list.
    """
    return MachineConfig(
        identity=identity,
        network=MachineNetwork(agents=tuple(agents)),
        fdm=FdmConfig(
            present=options.fdm_present,
            number_of_virtual_channels=options.number_of_virtual_channels,
            max_power_db=options.max_fdm_power_db,
        ),
        lab=LabConfig(width_ft=options.lab_width_ft, length_ft=options.lab_length_ft),
        playback=PlaybackConfig(
            max_freq_played_ghz=options.max_freq_played_ghz,
            rec_port_count=options.rec_port_count,
            randomize_shadow_time=options.randomize_shadow_time,
            buffer_time_ps=options.buffer_time_ps,
        ),
        bands=tuple(
            MachineFrequencyBand(min_mhz=b.min_mhz, center_mhz=b.center_mhz, max_mhz=b.max_mhz)
            for b in bands
        ),
    )


def machine_config_to_dict(config: MachineConfig) -> dict:
    """JSON-ready representation of a MachineConfig (tuples become lists)."""
    return asdict(config)


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def _load_yaml_or_json(path: Path) -> dict:
    text = path.read_text()
    if path.suffix.lower() in {".yaml", ".yml"}:
        return yaml.safe_load(text) or {}
    else:
        return json.loads(text)


def _require(d, key: str, where: str):
    """d[key], or OptionsValidationError naming `where.key` if it is absent."""
    if not isinstance(d, dict):
        raise OptionsValidationError(where, d, "expected a mapping")
    value = d.get(key)
    if value is None:
        raise OptionsValidationError(f"{where}.{key}" if where else key, value, "missing value")
    return value


def load_options(path: Union[str, Path]) -> AnalysisOptions:
    """
    Load and validate AnalysisOptions from a JSON or YAML file.

    The options may sit at the top level or under an ``analysis`` key.
    """
    path = Path(path)
    raw = _load_yaml_or_json(path)
    if not isinstance(raw, dict):
        raise OptionsValidationError("<root>", raw, "expected a mapping")
    if "analysis" in raw:
        raw = raw["analysis"] or {}
        if not isinstance(raw, dict):
            raise OptionsValidationError("analysis", raw, "expected a mapping")

    known = {f.name for f in fields(AnalysisOptions)}
    for key in raw:
        if key not in known:
            raise OptionsValidationError(str(key), raw[key], "unknown option")

    return validate_options(AnalysisOptions(**raw))


def load_machine_config(path: Union[str, Path]) -> MachineConfig:
    """
    Load a MachineConfig from a JSON or YAML file.

    Missing sections or required values raise OptionsValidationError.
    """
    path = Path(path)
    raw = _load_yaml_or_json(path)
    if not isinstance(raw, dict):
        raise OptionsValidationError("<root>", raw, "expected a mapping")

    def r_agent(i: int, d) -> AgentAddress:
        where = f"network.agents[{i}]"
        return AgentAddress(
            id=str(_require(d, "id", where)),
            protocol=d.get("protocol", "http"),
            endpoint=d.get("endpoint", ""),
            api_key=d.get("api_key"),
        )

    def r_band(i: int, d) -> MachineFrequencyBand:
        where = f"bands[{i}]"
        return MachineFrequencyBand(
            min_mhz=_require(d, "min_mhz", where),
            center_mhz=_require(d, "center_mhz", where),
            max_mhz=_require(d, "max_mhz", where),
        )

    ident = _require(raw, "identity", "")
    net = _require(raw, "network", "")
    fdm = _require(raw, "fdm", "")
    lab = _require(raw, "lab", "")
    pb = _require(raw, "playback", "")
    for name, sec in (("network", net), ("fdm", fdm), ("lab", lab), ("playback", pb)):
        if not isinstance(sec, dict):
            raise OptionsValidationError(name, sec, "expected a mapping")

    agents = net.get("agents") or []
    bands = raw.get("bands") or []
    if not isinstance(agents, list):
        raise OptionsValidationError("network.agents", agents, "expected a list")
    if not isinstance(bands, list):
        raise OptionsValidationError("bands", bands, "expected a list")

    return MachineConfig(
        identity=MachineIdentity(
            name=_require(ident, "name", "identity"),
            location=_require(ident, "location", "identity"),
            version=str(_require(ident, "version", "identity")),
        ),
        network=MachineNetwork(agents=tuple(r_agent(i, a) for i, a in enumerate(agents))),
        fdm=FdmConfig(
            present=fdm.get("present", False),
            number_of_virtual_channels=fdm.get("number_of_virtual_channels", 0),
            max_power_db=fdm.get("max_power_db", -1000.0),
        ),
        lab=LabConfig(
            width_ft=lab.get("width_ft", 0.0),
            length_ft=lab.get("length_ft", 0.0),
        ),
        playback=PlaybackConfig(
            max_freq_played_ghz=pb.get("max_freq_played_ghz", 0.0),
            rec_port_count=pb.get("rec_port_count", 0),
            randomize_shadow_time=pb.get("randomize_shadow_time", False),
            buffer_time_ps=pb.get("buffer_time_ps", 0),
        ),
        bands=tuple(r_band(i, b) for i, b in enumerate(bands)),
    )


def options_to_dict(options: AnalysisOptions) -> Dict[str, object]:
    return asdict(options)
