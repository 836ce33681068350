# src/lab_planner/frequency.py
from __future__ import annotations

from typing import Tuple

from .config_models import AnalysisOptions, FrequencyBand, MHz


DEFAULT_BAND_MIN_MHZ: MHz = 500.0
DEFAULT_BAND_HALF_SPAN_MHZ: MHz = 1250.0


class FrequencyAnalyzer:
    """
    Derive candidate FDM band centers from lab / playback options.

    Currently emits one fixed 500-3000 MHz band. Spectral-occupancy packing
    (section bandwidth, FDM power ceiling) will replace it once the band
    derivation rules are defined; callers rely only on the ordered-tuple
    contract.
    """

    def analyze(self, options: AnalysisOptions) -> Tuple[FrequencyBand, ...]:
        lo = DEFAULT_BAND_MIN_MHZ
        center = lo + DEFAULT_BAND_HALF_SPAN_MHZ
        hi = lo + 2 * DEFAULT_BAND_HALF_SPAN_MHZ
        return (FrequencyBand(min_mhz=lo, center_mhz=center, max_mhz=hi),)
