# src/lab_planner/cli.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config_models import load_machine_config, load_options
from .distribution import ConfigDistributor, FileDropAgentClient, HttpAgentClient
from .outputs import (
    write_fdm_band_stats,
    write_cooling_table,
    write_cooling_summary,
    write_run_metadata,
    write_distribution_report,
)
from .pipeline import AnalysisPipeline
from .plotting import plot_cooling_scenarios
from .progress import ProgressReporter


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(
        description="RF Lab FDM / TDM-UXG Planner & Cooling Estimator"
    )
    parser.add_argument("options", type=str, help="Path to YAML/JSON analysis options")
    parser.add_argument(
        "--out-dir",
        type=str,
        default="lab_planner_out",
        help="Output directory",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Disable cooling plot generation",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable textual progress indicators",
    )
    parser.add_argument(
        "--machine-config",
        type=str,
        default=None,
        help="YAML/JSON machine config to push to its agents after analysis",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    options = load_options(args.options)
    machine_config = (
        load_machine_config(args.machine_config) if args.machine_config else None
    )

    progress = None if args.no_progress else ProgressReporter()
    pipeline = AnalysisPipeline(progress=progress)
    result = pipeline.run(options)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    write_fdm_band_stats(out_dir / "fdm_bands.jsonl", result.fdm)
    write_cooling_table(out_dir / "cooling_scenarios.csv", result.tdm_uxg, result.ports)
    write_cooling_summary(out_dir / "cooling_summary.json", result.ports)

    if not args.no_plots and result.ports.rows:
        plot_cooling_scenarios(
            result.ports,
            result.tdm_uxg.channels,
            out_path=out_dir / "cooling_scenarios.png",
        )

    write_run_metadata(out_dir / "run_metadata.json", options, result)

    if machine_config is not None:
        with HttpAgentClient() as http_client:
            distributor = ConfigDistributor(
                [http_client, FileDropAgentClient(out_dir / "agents")]
            )
            delivered = distributor.distribute(machine_config)
        write_distribution_report(out_dir / "distribution.json", delivered)


if __name__ == "__main__":
    main()
