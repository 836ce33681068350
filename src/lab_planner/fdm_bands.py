# src/lab_planner/fdm_bands.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .config_models import AnalysisOptions, FrequencyBand, MHz


# Placeholder throughput figures per band until pulse scheduling lands
PLACEHOLDER_PULSES_ASSIGNED = 100_000
PLACEHOLDER_PULSES_DROPPED = 2_500
PLACEHOLDER_PULSES_TO_TDM_UXG = 250_000
MAX_VC_USED_CAP = 6


@dataclass(frozen=True)
class FdmBandStats:
    band_number: int  # 1-based, input order
    min_mhz: MHz
    center_mhz: MHz
    max_mhz: MHz
    vc_available: int
    max_vc_used: int
    pulses_assigned: int
    pulses_played: int
    pulses_dropped: int
    pulse_drop_percent: float


@dataclass(frozen=True)
class FdmAnalysisResult:
    bands: Tuple[FdmBandStats, ...]
    pulses_to_tdm_uxg: int

    @property
    def total_pulses_assigned(self) -> int:
        return sum(b.pulses_assigned for b in self.bands)

    @property
    def total_pulses_dropped(self) -> int:
        return sum(b.pulses_dropped for b in self.bands)


def pulse_drop_percent(assigned: int, dropped: int) -> float:
    """100 * dropped / assigned, or 0.0 when nothing was assigned."""
    if assigned == 0:
        return 0.0
    return dropped / assigned * 100.0


class FdmBandAnalyzer:
    """
    Per-band pulse statistics for the FDM path.

    Pulse counts are fixed placeholders; the real figures will come from a
    pulse-assignment simulation driven by pps_fdm_assign, buffer_time_ps and
    the FDM power ceiling. Band numbering, VC capping and the drop-percent
    policy are final.
    """

    def analyze(
        self,
        bands: Sequence[FrequencyBand],
        options: AnalysisOptions,
    ) -> FdmAnalysisResult:
        stats = []
        for band_number, band in enumerate(bands, start=1):
            assigned = PLACEHOLDER_PULSES_ASSIGNED
            dropped = PLACEHOLDER_PULSES_DROPPED
            stats.append(
                FdmBandStats(
                    band_number=band_number,
                    min_mhz=band.min_mhz,
                    center_mhz=band.center_mhz,
                    max_mhz=band.max_mhz,
                    vc_available=options.number_of_virtual_channels,
                    max_vc_used=min(options.number_of_virtual_channels, MAX_VC_USED_CAP),
                    pulses_assigned=assigned,
                    pulses_played=assigned - dropped,
                    pulses_dropped=dropped,
                    pulse_drop_percent=pulse_drop_percent(assigned, dropped),
                )
            )

        return FdmAnalysisResult(
            bands=tuple(stats),
            pulses_to_tdm_uxg=PLACEHOLDER_PULSES_TO_TDM_UXG,
        )
