"""Configuration, check result and history data structures."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class TestResult(str, Enum):
    """How many of a set of checks succeeded."""

    __test__ = False

    ALL = "all"
    PART = "part"
    NONE = "none"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    def is_valid(self) -> bool:
        """Return True for ALL, PART and NONE."""
        return self in (TestResult.ALL, TestResult.PART, TestResult.NONE)


def parse_test_result(s: str) -> TestResult:
    """Parse a string into a TestResult, falling back to UNKNOWN."""
    try:
        return TestResult(s)
    except ValueError:
        return TestResult.UNKNOWN


def is_all(result_str: str) -> bool:
    """Return True if the string denotes the ALL result."""
    return parse_test_result(result_str) is TestResult.ALL


def _as_str(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"{name}: expected a string, got {type(value).__name__}")


def _as_int(value: Any, name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name}: expected an integer, got {value!r}")
    return value


def _as_mapping(value: Any, name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{name}: expected a mapping, got {type(value).__name__}")
    return value


def _as_list(value: Any, name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{name}: expected a list, got {type(value).__name__}")
    return value


@dataclass
class PortConfig:
    """One endpoint to check and what counts as success."""

    url: str = ""
    method: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    status_code: int = 0
    response_regex: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> PortConfig:
        data = _as_mapping(data, "port")
        headers = {
            str(key): _as_str(value, f"headers.{key}")
            for key, value in _as_mapping(data.get("headers"), "headers").items()
        }
        return cls(
            url=_as_str(data.get("url"), "url"),
            method=_as_str(data.get("method"), "method"),
            headers=headers,
            body=_as_str(data.get("body"), "body"),
            status_code=_as_int(data.get("status_code"), "status_code"),
            response_regex=_as_str(data.get("response_regex"), "response_regex"),
        )


@dataclass
class ServiceConfig:
    """A named service with its health and API endpoints."""

    name: str = ""
    health: list[PortConfig] = field(default_factory=list)
    api: list[PortConfig] = field(default_factory=list)
    timeout: int = 0
    retry: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ServiceConfig:
        data = _as_mapping(data, "service")
        return cls(
            name=_as_str(data.get("name"), "name"),
            health=[PortConfig.from_dict(p) for p in _as_list(data.get("health"), "health")],
            api=[PortConfig.from_dict(p) for p in _as_list(data.get("api"), "api")],
            timeout=_as_int(data.get("timeout"), "timeout"),
            retry=_as_int(data.get("retry"), "retry"),
        )


@dataclass
class Config:
    """The whole monitoring configuration."""

    services: list[ServiceConfig] = field(default_factory=list)
    timeout: int = 0
    retry: int = 0
    max_log_days: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        data = _as_mapping(data, "config")
        return cls(
            services=[
                ServiceConfig.from_dict(s) for s in _as_list(data.get("services"), "services")
            ],
            timeout=_as_int(data.get("timeout"), "timeout"),
            retry=_as_int(data.get("retry"), "retry"),
            max_log_days=_as_int(data.get("max_log_days"), "max_log_days"),
        )


@dataclass
class PortResult:
    """The outcome of checking one endpoint."""

    url: str
    method: str
    online: TestResult
    start_time: str
    end_time: str
    body: str = ""
    status_code: int = 0
    response_time: timedelta = timedelta(0)
    total_attempts: int = 0
    success_count: int = 0
    failures: list[str] = field(default_factory=list)
    response_body: str = ""


@dataclass
class CheckResult:
    """The outcome of checking one service."""

    name: str
    online: TestResult
    start_time: str
    end_time: str
    health: list[PortResult] = field(default_factory=list)
    api: list[PortResult] = field(default_factory=list)
    total_attempts: int = 0
    success_count: int = 0


@dataclass
class HistoryEntry:
    """A single recorded status at a point in time."""

    time: str
    status: str
    response_time: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"time": self.time, "online": self.status}
        if self.response_time:
            data["response_time"] = self.response_time
        return data

    @classmethod
    def from_dict(cls, data: Any) -> HistoryEntry:
        data = _as_mapping(data, "history entry")
        return cls(
            time=_as_str(data.get("time"), "time"),
            status=_as_str(data.get("online"), "online"),
            response_time=_as_int(data.get("response_time"), "response_time"),
        )


@dataclass
class LogEntry:
    """Stored history of a service and of each of its endpoints."""

    service_history: list[HistoryEntry] = field(default_factory=list)
    ports: dict[str, list[HistoryEntry]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "service_history": [entry.to_dict() for entry in self.service_history],
            "ports": {
                url: [entry.to_dict() for entry in entries]
                for url, entries in self.ports.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Any) -> LogEntry:
        data = _as_mapping(data, "log entry")
        history = [
            HistoryEntry.from_dict(e)
            for e in _as_list(data.get("service_history"), "service_history")
        ]
        ports = {
            str(url): [HistoryEntry.from_dict(e) for e in _as_list(entries, f"ports.{url}")]
            for url, entries in _as_mapping(data.get("ports"), "ports").items()
        }
        return cls(service_history=history, ports=ports)


@dataclass
class ReportEntry:
    """A service's history prepared for the report."""

    name: str
    history: list[HistoryEntry]
    ports: dict[str, list[HistoryEntry]]
    availability: float


def _parse_rfc3339(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError("missing time zone offset")
    return parsed


def clean_expired_entries(
    entries: list[HistoryEntry], max_days: int, now: datetime | None = None
) -> list[HistoryEntry]:
    """Return the entries newer than max_days before now.

    Entries whose time cannot be parsed are dropped. A max_days that is
    not positive leaves the list unchanged.
    """
    if max_days <= 0:
        logger.info("Max days for cleaning history is not set or invalid, skipping cleaning.")
        return list(entries)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.astimezone()
    cutoff = now - timedelta(days=max_days)

    kept: list[HistoryEntry] = []
    for entry in entries:
        try:
            entry_time = _parse_rfc3339(entry.time)
        except ValueError as exc:
            logger.warning("Error parsing time %s: %s", entry.time, exc)
            continue
        if entry_time > cutoff:
            kept.append(entry)
    return kept


def parse_to_report_entries(log_data: Mapping[str, LogEntry]) -> list[ReportEntry]:
    """Build report entries with availability for every service that has history."""
    report: list[ReportEntry] = []
    for name, data in log_data.items():
        if not data.service_history:
            logger.info("No history data for service %s", name)
            continue
        online = sum(1 for entry in data.service_history if is_all(entry.status))
        report.append(
            ReportEntry(
                name=name,
                history=data.service_history,
                ports=data.ports,
                availability=online / len(data.service_history),
            )
        )
    return report