"""Default settings and file locations."""

from __future__ import annotations

DEFAULT_TIMEOUT = 5
"""Default timeout for service checks, in seconds."""

DEFAULT_RETRY = 2
"""Default number of attempts per endpoint."""

DEFAULT_MAX_LOG_DAYS = 30
"""Default number of days of history to keep."""

CONFIG_PATH = "config.yaml"
LOG_PATH = "data/ponghub_log.json"
REPORT_PATH = "data/index.html"
TEMPLATE_PATH = "templates/report.html"


def _or_default(value: int | None, default: int) -> int:
    if value is None or value <= 0:
        return default
    return value


def default_timeout(value: int | None) -> int:
    """Return value, or the default timeout when it is unset or not positive."""
    return _or_default(value, DEFAULT_TIMEOUT)


def default_retry(value: int | None) -> int:
    """Return value, or the default retry count when it is unset or not positive."""
    return _or_default(value, DEFAULT_RETRY)


def default_max_log_days(value: int | None) -> int:
    """Return value, or the default history length when it is unset or not positive."""
    return _or_default(value, DEFAULT_MAX_LOG_DAYS)