# src/lab_planner/tdm_uxg.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .config_models import AnalysisOptions
from .fdm_bands import FdmAnalysisResult


# Descending channel-count scenarios evaluated for cooling
PLACEHOLDER_CHANNEL_SCENARIOS: Tuple[int, ...] = (32, 24, 16, 8, 4)


@dataclass(frozen=True)
class TdmUxgAnalysisResult:
    """
    Ordered channel-count scenarios. Index i lines up with cooling row i
    in PortExpansionResult; may be empty.
    """
    channels: Tuple[int, ...] = ()


class TdmUxgAnalyzer:
    def analyze(
        self,
        fdm_result: FdmAnalysisResult,
        options: AnalysisOptions,
    ) -> TdmUxgAnalysisResult:
        # Fixed scenario list until channel packing (pulses_to_tdm_uxg,
        # tdm/uxg gates, max_chan_avail) is defined.
        return TdmUxgAnalysisResult(channels=PLACEHOLDER_CHANNEL_SCENARIOS)
