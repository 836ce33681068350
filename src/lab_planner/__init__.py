# src/lab_planner/__init__.py
"""
RF Test-Lab Analysis & Provisioning Planner.

Turns lab / playback options into FDM band statistics, a TDM/UXG channel
plan, and the hardware and cooling needed to install it:

    options -> FrequencyAnalyzer -> FdmBandAnalyzer -> TdmUxgAnalyzer
            -> PortExpansionCalculator -> (FDM, TDM/UXG, port expansion)
"""

from .config_models import (
    AnalysisOptions,
    FrequencyBand,
    MachineConfig,
    OptionsValidationError,
    load_options,
    load_machine_config,
    validate_options,
)

from .pipeline import (
    AnalysisPipeline,
    PipelineResult,
    PipelineStageError,
)

from .distribution import ConfigDistributor

__all__ = [
    "AnalysisOptions",
    "FrequencyBand",
    "MachineConfig",
    "OptionsValidationError",
    "load_options",
    "load_machine_config",
    "validate_options",
    "AnalysisPipeline",
    "PipelineResult",
    "PipelineStageError",
    "ConfigDistributor",
]
