# tests/test_analyzers.py
from __future__ import annotations

from dataclasses import replace

import pytest

from lab_planner.config_models import FrequencyBand, load_options
from lab_planner.fdm_bands import FdmBandAnalyzer, pulse_drop_percent
from lab_planner.frequency import FrequencyAnalyzer
from lab_planner.tdm_uxg import TdmUxgAnalyzer


def test_frequency_analyzer_single_fixed_band(default_options):
    bands = FrequencyAnalyzer().analyze(default_options)

    assert len(bands) == 1
    band = bands[0]
    assert band.min_mhz == pytest.approx(500.0)
    assert band.center_mhz == pytest.approx(1750.0)
    assert band.max_mhz == pytest.approx(3000.0)
    assert band.min_mhz <= band.center_mhz <= band.max_mhz
    assert band.width_mhz == pytest.approx(2500.0)


def test_frequency_analyzer_ignores_options(default_options):
    other = replace(default_options, section_bandwidth_mhz=200.0, max_fdm_power_db=3.0)
    analyzer = FrequencyAnalyzer()
    assert analyzer.analyze(default_options) == analyzer.analyze(other)


def test_fdm_band_stats_per_band(default_options):
    bands = (
        FrequencyBand(500.0, 1750.0, 3000.0),
        FrequencyBand(3000.0, 3500.0, 4000.0),
    )
    result = FdmBandAnalyzer().analyze(bands, default_options)

    assert [b.band_number for b in result.bands] == [1, 2]
    assert [b.center_mhz for b in result.bands] == [1750.0, 3500.0]
    for b in result.bands:
        assert b.vc_available == default_options.number_of_virtual_channels
        assert b.max_vc_used == 6
        assert b.pulses_assigned == 100_000
        assert b.pulses_dropped == 2_500
        assert b.pulses_played == b.pulses_assigned - b.pulses_dropped
        assert b.pulse_drop_percent == pytest.approx(2.5)
    assert result.pulses_to_tdm_uxg == 250_000
    assert result.total_pulses_assigned == 200_000
    assert result.total_pulses_dropped == 5_000


def test_fdm_max_vc_used_capped_by_available(default_options):
    options = replace(default_options, number_of_virtual_channels=4)
    result = FdmBandAnalyzer().analyze((FrequencyBand(1.0, 2.0, 3.0),), options)
    assert result.bands[0].max_vc_used == 4
    assert result.bands[0].max_vc_used <= result.bands[0].vc_available


def test_fdm_empty_band_list(default_options):
    result = FdmBandAnalyzer().analyze((), default_options)
    assert result.bands == ()
    assert result.total_pulses_assigned == 0


def test_pulse_drop_percent_zero_assigned():
    assert pulse_drop_percent(0, 0) == 0.0
    assert pulse_drop_percent(0, 10) == 0.0
    assert pulse_drop_percent(200, 50) == pytest.approx(25.0)


def test_tdm_uxg_scenarios(default_options):
    fdm_result = FdmBandAnalyzer().analyze((), default_options)
    result = TdmUxgAnalyzer().analyze(fdm_result, default_options)
    assert result.channels == (32, 24, 16, 8, 4)


def test_fdm_stats_use_integer_channel_count(tmp_path, single_band):
    p = tmp_path / "options.yaml"
    p.write_text("number_of_virtual_channels: 8.0\n")
    stats = FdmBandAnalyzer().analyze(single_band, load_options(p)).bands[0]

    assert stats.vc_available == 8
    assert type(stats.vc_available) is int
