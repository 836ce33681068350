# src/lab_planner/port_expansion.py
"""
Port expansion and cooling load for a lab installation.

Given the TDM/UXG channel scenarios and the FDM band list, size the VXG,
V-UXG and A-UXG hardware and convert its heat output into tons of cooling:

    VXG units   = ceil(n_fdm_bands * rec_ports / VXG ports per box)
    V-UXG units = channels[i] * rec_ports
    A-UXG units = channels[i]

    tons = (units * W_per_unit * 3.41 BTU/W) * 8.33333e-5

Every tonnage is rounded to 0.01 ton, half away from zero.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Sequence, Tuple

from .config_models import AnalysisOptions, FrequencyBand, GHz
from .tdm_uxg import TdmUxgAnalysisResult

logger = logging.getLogger(__name__)


BTU_PER_WATT = 3.41
VXG_BTU_PER_UNIT = 1500 * BTU_PER_WATT
VUXG_BTU_PER_UNIT = 800 * BTU_PER_WATT
AUXG_BTU_PER_UNIT = 600 * BTU_PER_WATT

TONS_PER_BTU = 8.33333e-5  # 1 ton ~ 12000 BTU/hr
LAB_BTU_PER_SQFT = 20.0

HIGH_BAND_THRESHOLD_GHZ: GHz = 20.0
VXG_PORTS_PER_BOX_HIGH_BAND = 2
VXG_PORTS_PER_BOX_LOW_BAND = 4

_CENT = Decimal("0.01")


class ComputationError(ArithmeticError):
    """Raised when a cooling quantity is not a finite number."""

    def __init__(self, quantity: str, value) -> None:
        super().__init__(f"Cooling computation produced a non-finite {quantity}: {value!r}")
        self.quantity = quantity
        self.value = value


@dataclass(frozen=True)
class PortExpansionCoolingRow:
    num_of_vxg_units: int
    vxg_cooling_tons: float
    num_of_vuxg: int
    vuxg_cooling_tons: float
    num_of_auxg: int
    auxg_cooling_tons: float
    total_hw_cooling_tons: float


@dataclass(frozen=True)
class PortExpansionCoolingSummary:
    total_hw_cooling_tons: float
    lab_size_sqft: float
    lab_cooling_req_tons: float
    total_overall_cooling_req_tons: float


@dataclass(frozen=True)
class PortExpansionResult:
    rows: Tuple[PortExpansionCoolingRow, ...]
    summary: PortExpansionCoolingSummary


def round2(value: float) -> float:
    """
    Round to two decimals, half away from zero.

    Goes through the shortest decimal repr of the float so that literals such
    as 1.005 (stored as 1.00499999...) round the way they read.
    """
    if not math.isfinite(value):
        raise ComputationError("value to round", value)
    with localcontext() as ctx:
        # room for every digit of the largest finite float
        ctx.prec = 400
        return float(Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def btu_to_tons(btu: float) -> float:
    return btu * TONS_PER_BTU


def vxg_ports_per_box(max_freq_played_ghz: GHz) -> int:
    """VXG chassis expose fewer usable ports above the 20 GHz band edge."""
    if max_freq_played_ghz > HIGH_BAND_THRESHOLD_GHZ:
        return VXG_PORTS_PER_BOX_HIGH_BAND
    return VXG_PORTS_PER_BOX_LOW_BAND


def vxg_units_required(num_ports: int, ports_per_box: int) -> int:
    """Integer ceil(num_ports / ports_per_box)."""
    if ports_per_box <= 0:
        raise ValueError(f"ports_per_box must be positive, got {ports_per_box}")
    return -(-num_ports // ports_per_box)


def _btu(quantity: str, units, btu_per_unit: float) -> float:
    """units * btu_per_unit; integers too large for a float raise ComputationError."""
    try:
        return units * btu_per_unit
    except OverflowError as exc:
        raise ComputationError(quantity, units) from exc


def _tons(quantity: str, btu: float) -> float:
    tons = btu_to_tons(btu)
    if not math.isfinite(tons):
        raise ComputationError(quantity, btu)
    return tons


class PortExpansionCalculator:
    """
    Hardware provisioning and cooling requirements per TDM/UXG scenario.

    Rows are index-aligned with ``tdm_uxg_result.channels``. The summary takes
    its hardware load from the *last* scenario row (not a sum or max), and
    adds the lab's ambient load of 20 BTU/hr per square foot.
    """

    def compute(
        self,
        max_freq_played_ghz: GHz,
        tdm_uxg_result: TdmUxgAnalysisResult,
        fdm_bands: Sequence[FrequencyBand],
        options: AnalysisOptions,
    ) -> PortExpansionResult:
        per_box = vxg_ports_per_box(max_freq_played_ghz)
        tot_fdm_bands = len(fdm_bands) if options.fdm_present else 0
        num_ports_req = tot_fdm_bands * options.rec_port_count
        # Same VXG count for every scenario row
        num_vxg_units = vxg_units_required(num_ports_req, per_box)

        logger.info(
            "Port expansion: %d FDM band(s) x %d rec ports -> %d VXG unit(s) "
            "at %d ports/box",
            tot_fdm_bands,
            options.rec_port_count,
            num_vxg_units,
            per_box,
        )

        channels = list(tdm_uxg_result.channels or ())
        if not channels:
            logger.warning("No TDM/UXG scenarios; hardware cooling load is 0 tons.")

        rows = []
        for ch in channels:
            num_vuxg = ch * options.rec_port_count
            num_auxg = ch

            vxg_btu = _btu("VXG cooling", num_vxg_units, VXG_BTU_PER_UNIT)
            vuxg_btu = _btu("V-UXG cooling", num_vuxg, VUXG_BTU_PER_UNIT)
            auxg_btu = _btu("A-UXG cooling", num_auxg, AUXG_BTU_PER_UNIT)
            hardware_btu = vxg_btu + vuxg_btu + auxg_btu

            row = PortExpansionCoolingRow(
                num_of_vxg_units=num_vxg_units,
                vxg_cooling_tons=round2(_tons("VXG cooling", vxg_btu)),
                num_of_vuxg=num_vuxg,
                vuxg_cooling_tons=round2(_tons("V-UXG cooling", vuxg_btu)),
                num_of_auxg=num_auxg,
                auxg_cooling_tons=round2(_tons("A-UXG cooling", auxg_btu)),
                total_hw_cooling_tons=round2(_tons("hardware cooling", hardware_btu)),
            )
            logger.debug("Scenario channels=%d -> %s", ch, row)
            rows.append(row)

        lab_sqft = options.lab_width_ft * options.lab_length_ft
        lab_btu = _btu("lab cooling", lab_sqft, LAB_BTU_PER_SQFT)
        lab_tons = _tons("lab cooling", lab_btu)

        total_hw_tons = rows[-1].total_hw_cooling_tons if rows else 0.0

        summary = PortExpansionCoolingSummary(
            total_hw_cooling_tons=round2(total_hw_tons),
            lab_size_sqft=round2(lab_sqft),
            lab_cooling_req_tons=round2(lab_tons),
            total_overall_cooling_req_tons=round2(total_hw_tons + lab_tons),
        )
        return PortExpansionResult(rows=tuple(rows), summary=summary)
