"""Command line entry point: check services, update the log, write the report."""

from __future__ import annotations

import argparse
import logging
import re

import jinja2

from ponghub.check import check_services
from ponghub.config import ConfigError, load_config
from ponghub.defaults import CONFIG_PATH, LOG_PATH, REPORT_PATH, TEMPLATE_PATH
from ponghub.report import generate_report
from ponghub.result import output_results

logger = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ponghub", description="Check services and publish a status report."
    )
    parser.add_argument("--config", default=CONFIG_PATH, help="configuration file")
    parser.add_argument("--log", default=LOG_PATH, help="history log file")
    parser.add_argument("--report", default=REPORT_PATH, help="HTML report to write")
    parser.add_argument("--template", default=TEMPLATE_PATH, help="report template")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one round of checks and return the process exit status."""
    args = _parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        cfg = load_config(args.config)
    except (OSError, ConfigError) as exc:
        logger.error("Error loading config at %s: %s", args.config, exc)
        return 1

    try:
        results = check_services(cfg)
    except (ValueError, re.error) as exc:
        logger.error("Error checking services: %s", exc)
        return 1

    try:
        log_data = output_results(results, cfg.max_log_days, args.log)
    except (OSError, ValueError) as exc:
        logger.error("Error outputting results: %s", exc)
        return 1

    try:
        generate_report(log_data, args.report, args.template)
    except (OSError, jinja2.TemplateError) as exc:
        logger.error("Error generating report: %s", exc)
        return 1

    logger.info("Report generated at %s", args.report)
    return 0