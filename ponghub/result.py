"""Merging check results into the stored history log."""

from __future__ import annotations

import json
import logging
import os
from datetime import timedelta
from itertools import chain
from pathlib import Path
from typing import Any, Iterable, Mapping

from ponghub.models import (
    CheckResult,
    HistoryEntry,
    LogEntry,
    TestResult,
    clean_expired_entries,
)

logger = logging.getLogger(__name__)

LogData = dict[str, LogEntry]


def merge_online_status(statuses: Iterable[TestResult]) -> TestResult:
    """Combine several results into one: ALL or NONE only if unanimous."""
    statuses = list(statuses)
    if not statuses:
        return TestResult.NONE
    has_none = TestResult.NONE in statuses
    has_all = TestResult.ALL in statuses
    if has_none and not has_all:
        return TestResult.NONE
    if has_all and not has_none:
        return TestResult.ALL
    return TestResult.PART


def load_existing_log(log_path: str | os.PathLike[str]) -> LogData:
    """Read the log at log_path; a missing file gives an empty log.

    Raises ValueError if the file does not hold a valid log.
    """
    try:
        text = Path(log_path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    raw = json.loads(text)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("log data must be a JSON object")
    return {str(name): LogEntry.from_dict(entry) for name, entry in raw.items()}


def _entry_payload(entry: LogEntry) -> dict[str, Any]:
    payload = entry.to_dict()
    payload["ports"] = dict(sorted(payload["ports"].items()))
    return payload


def save_log_data(data: Mapping[str, LogEntry], log_path: str | os.PathLike[str]) -> None:
    """Write the log as indented JSON with sorted service and endpoint keys."""
    payload = {name: _entry_payload(data[name]) for name in sorted(data)}
    Path(log_path).write_text(
        json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
    )


def _process_check_result(
    svc: CheckResult,
) -> tuple[dict[str, list[TestResult]], dict[str, str], dict[str, timedelta]]:
    statuses: dict[str, list[TestResult]] = {}
    times: dict[str, str] = {}
    response_times: dict[str, timedelta] = {}
    for pr in chain(svc.health, svc.api):
        statuses.setdefault(pr.url, []).append(pr.online)
        times.setdefault(pr.url, pr.start_time)
        previous = response_times.get(pr.url)
        if previous is None or pr.response_time > previous:
            response_times[pr.url] = pr.response_time
    return statuses, times, response_times


def output_results(
    results: Iterable[CheckResult], max_log_days: int, log_path: str | os.PathLike[str]
) -> LogData:
    """Append results to the log at log_path, drop expired entries and save it."""
    try:
        log_data = load_existing_log(log_path)
    except (OSError, ValueError) as exc:
        logger.error("Error loading log data from %s: %s", log_path, exc)
        raise

    for svc in results:
        service_log = log_data.get(svc.name)
        if service_log is None:
            service_log = LogEntry()

        history = service_log.service_history + [
            HistoryEntry(time=svc.start_time, status=str(svc.online))
        ]
        service_log.service_history = clean_expired_entries(history, max_log_days)

        statuses, times, response_times = _process_check_result(svc)
        for url, url_statuses in statuses.items():
            new_entry = HistoryEntry(
                time=times[url],
                status=str(merge_online_status(url_statuses)),
                response_time=response_times[url] // timedelta(milliseconds=1),
            )
            port_history = service_log.ports.get(url, []) + [new_entry]
            service_log.ports[url] = clean_expired_entries(port_history, max_log_days)

        log_data[svc.name] = service_log

    try:
        save_log_data(log_data, log_path)
    except OSError as exc:
        logger.error("Error saving log data to %s: %s", log_path, exc)
        raise

    return log_data