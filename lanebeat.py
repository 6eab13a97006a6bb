"""
lanebeat.py

Real entrypoint that launches the gameplay window.

Integration
- Parses CLI flags
- Loads config (file, then environment, then CLI overrides)
- Configures logging
- Opens the gameplay harness window, or runs the headless self tests with --run-tests
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

import config as app_config_module
import gameplay_harness
import logging_setup
import paths

logger = logging.getLogger("lanebeat")


def build_argument_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(description="Lanebeat two lane rhythm game")
    argument_parser.add_argument("--chart", type=str, default="", help="Chart JSON file (default: config or bundled chart).")
    argument_parser.add_argument("--rate", type=float, default=None, help="Playback rate, for example 0.5 or 1.5.")
    argument_parser.add_argument("--config", type=str, default="", help="Config JSON file (default: search order).")
    argument_parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING, ERROR or CRITICAL.")
    argument_parser.add_argument("--judgement-log", action="store_true", help="Log every judgement of a session.")
    argument_parser.add_argument("--run-tests", action="store_true", help="Run headless self tests and exit.")
    return argument_parser


def main() -> int:
    parsed_args = build_argument_parser().parse_args()

    if parsed_args.run_tests:
        logging_setup.setup_logging(parsed_args)
        gameplay_harness.run_self_tests()
        print("Self tests passed.")
        return 0

    config_path = Path(parsed_args.config).expanduser() if parsed_args.config else None
    try:
        app_config, resolved_path = app_config_module.load_config(config_path)
    except (OSError, ValueError) as exception:
        print(f"Config error: {exception}", file=sys.stderr)
        return 2

    if parsed_args.judgement_log:
        app_config = app_config.model_copy(
            update={"logging": app_config.logging.model_copy(update={"judgement_log": True})}
        )

    logging_setup.setup_logging(parsed_args, config_level=app_config.logging.level)
    logger.info("Config source: %s", resolved_path if resolved_path is not None else "defaults")

    chart_text = parsed_args.chart or app_config.chart.path
    chart_path = paths.resolve_chart_path(chart_text)
    logger.info("Chart: %s", chart_path)

    return gameplay_harness.run_gui(app_config, chart_path=chart_path, playback_rate=parsed_args.rate)


if __name__ == "__main__":
    raise SystemExit(main())
