"""Rendering the HTML status report."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Mapping

import jinja2

from ponghub.defaults import TEMPLATE_PATH
from ponghub.models import LogEntry, parse_to_report_entries


def get_latest_time(log_data: Mapping[str, LogEntry]) -> str:
    """Return the latest service history time, or an empty string if there is none."""
    times = (
        entry.time for service in log_data.values() for entry in service.service_history
    )
    return max(times, default="")


def _div(a: float, b: float) -> float:
    if b == 0:
        return 0.0
    return a / b


def template_functions() -> dict[str, Callable[..., Any]]:
    """Helper functions made available to the report template."""
    return {
        "add": lambda a, b: a + b,
        "sub": lambda a, b: a - b,
        "mul": lambda a, b: a * b,
        "div": _div,
        "until": lambda n: list(range(n)),
    }


def generate_report(
    log_data: Mapping[str, LogEntry],
    out_path: str | os.PathLike[str],
    template_path: str | os.PathLike[str] = TEMPLATE_PATH,
) -> None:
    """Render the report template with the log data and write it to out_path.

    Raises OSError if a file cannot be read or written and
    jinja2.TemplateError if the template is invalid.
    """
    source = Path(template_path).read_text(encoding="utf-8")
    env = jinja2.Environment(autoescape=True)
    env.globals.update(template_functions())
    template = env.from_string(source)

    html = template.render(
        Results=parse_to_report_entries(log_data),
        UpdateTime=get_latest_time(log_data),
    )
    Path(out_path).write_text(html, encoding="utf-8")