# src/lab_planner/pipeline.py
from __future__ import annotations

import logging
from typing import Callable, NamedTuple, Optional

from .config_models import AnalysisOptions
from .fdm_bands import FdmAnalysisResult, FdmBandAnalyzer
from .frequency import FrequencyAnalyzer
from .port_expansion import PortExpansionCalculator, PortExpansionResult
from .progress import ProgressReporter, NullProgressReporter
from .tdm_uxg import TdmUxgAnalysisResult, TdmUxgAnalyzer

logger = logging.getLogger(__name__)


STAGE_FREQUENCY = "frequency analysis"
STAGE_FDM = "FDM band analysis"
STAGE_TDM_UXG = "TDM/UXG analysis"
STAGE_PORTS = "port expansion"

STAGES = (STAGE_FREQUENCY, STAGE_FDM, STAGE_TDM_UXG, STAGE_PORTS)


class PipelineStageError(RuntimeError):
    """A stage raised; the run produced no result."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"Analysis stage '{stage}' failed: {cause}")
        self.stage = stage
        self.cause = cause


class PipelineCancelled(RuntimeError):
    """The caller asked to stop before `stage` started."""

    def __init__(self, stage: str) -> None:
        super().__init__(f"Analysis cancelled before stage '{stage}'")
        self.stage = stage


class PipelineResult(NamedTuple):
    fdm: FdmAnalysisResult
    tdm_uxg: TdmUxgAnalysisResult
    ports: PortExpansionResult


class AnalysisPipeline:
    """
    Runs the four analysis stages in order:

    1. FrequencyAnalyzer        options            -> FDM bands
    2. FdmBandAnalyzer          bands, options     -> per-band pulse stats
    3. TdmUxgAnalyzer           FDM result         -> channel scenarios
    4. PortExpansionCalculator  scenarios, bands   -> units + cooling

    Stages are stateless and each run gets its own progress handle, so one
    pipeline (and one ProgressReporter) may serve concurrent callers.
    """

    def __init__(
        self,
        frequency: FrequencyAnalyzer | None = None,
        fdm: FdmBandAnalyzer | None = None,
        tdm_uxg: TdmUxgAnalyzer | None = None,
        ports: PortExpansionCalculator | None = None,
        progress: ProgressReporter | None = None,
    ):
        self.frequency = frequency or FrequencyAnalyzer()
        self.fdm = fdm or FdmBandAnalyzer()
        self.tdm_uxg = tdm_uxg or TdmUxgAnalyzer()
        self.ports = ports or PortExpansionCalculator()
        self.progress = progress or NullProgressReporter()

    def run(
        self,
        options: AnalysisOptions,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> PipelineResult:
        """
        Run all stages for one set of (already validated) options.

        Any stage failure aborts the run with PipelineStageError; a True
        from `should_cancel` at a stage boundary raises PipelineCancelled.
        """
        run_progress = self.progress.begin_run(total_stages=len(STAGES))
        succeeded = False
        try:
            bands = self._stage(
                run_progress, STAGE_FREQUENCY, should_cancel,
                self.frequency.analyze, options,
            )
            logger.info("Frequency analysis produced %d band(s)", len(bands))

            fdm_result = self._stage(
                run_progress, STAGE_FDM, should_cancel, self.fdm.analyze, bands, options
            )
            logger.info(
                "FDM analysis: %d band(s), %d pulse(s) overflow to TDM/UXG",
                len(fdm_result.bands),
                fdm_result.pulses_to_tdm_uxg,
            )

            tdm_result = self._stage(
                run_progress, STAGE_TDM_UXG, should_cancel,
                self.tdm_uxg.analyze, fdm_result, options,
            )
            logger.info("TDM/UXG analysis: scenarios %s", list(tdm_result.channels))

            port_result = self._stage(
                run_progress,
                STAGE_PORTS,
                should_cancel,
                self.ports.compute,
                options.max_freq_played_ghz,
                tdm_result,
                bands,
                options,
            )
            logger.info(
                "Cooling: %.2f tons hardware + %.2f tons lab = %.2f tons",
                port_result.summary.total_hw_cooling_tons,
                port_result.summary.lab_cooling_req_tons,
                port_result.summary.total_overall_cooling_req_tons,
            )
            succeeded = True
        finally:
            run_progress.finish(succeeded=succeeded)

        return PipelineResult(fdm=fdm_result, tdm_uxg=tdm_result, ports=port_result)

    def _stage(self, run_progress, name, should_cancel, func, *args):
        if should_cancel is not None and should_cancel():
            logger.info("Analysis cancelled before %s", name)
            raise PipelineCancelled(name)
        run_progress.stage(name)
        try:
            return func(*args)
        except Exception as exc:
            logger.error("Analysis stage '%s' failed: %s", name, exc)
            raise PipelineStageError(name, exc) from exc
