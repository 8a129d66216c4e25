"""Checking services and their endpoints over HTTP."""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timedelta

import requests

from ponghub.models import CheckResult, Config, PortConfig, PortResult, TestResult

logger = logging.getLogger(__name__)

_SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT"})
_UNSUPPORTED_METHODS = frozenset({"DELETE", "HEAD", "PATCH", "OPTIONS", "TRACE", "CONNECT"})


class UnsupportedMethodError(ValueError):
    """The configured HTTP method is known but not supported."""


def _now_rfc3339() -> str:
    now = datetime.now().astimezone().replace(microsecond=0)
    text = now.isoformat()
    if now.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


def get_http_method(method: str) -> str:
    """Normalise a configured method name; unknown names fall back to GET."""
    upper = method.upper()
    if upper in _SUPPORTED_METHODS:
        return upper
    if upper in _UNSUPPORTED_METHODS:
        raise UnsupportedMethodError(f"method not supported: {upper}")
    return "GET"


def get_test_result(success_count: int, actual_attempts: int) -> TestResult:
    """Classify a success count against the number of attempts."""
    if success_count == actual_attempts:
        return TestResult.ALL
    if success_count == 0:
        return TestResult.NONE
    return TestResult.PART


def is_successful_response(cfg: PortConfig, status_code: int, body: bytes | str) -> bool:
    """Decide whether a response satisfies the endpoint's expectations.

    Raises re.error if the configured response regex is invalid.
    """
    if cfg.response_regex:
        text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        if re.search(cfg.response_regex, text) is None:
            return False

    if cfg.status_code == 0:
        return bool(cfg.response_regex) or status_code == 200
    return status_code == cfg.status_code


def check_port(cfg: PortConfig, timeout: int, retry_times: int, svc_name: str) -> PortResult:
    """Check one endpoint, trying up to retry_times until it succeeds."""
    failures: list[str] = []
    success_count = 0
    actual_attempts = 0
    status_code = 0
    response_body = ""
    method = get_http_method(cfg.method)
    response_time = timedelta(0)

    start = _now_rfc3339()

    for attempt in range(1, retry_times + 1):
        actual_attempts += 1
        logger.info("[%s] %s %s (attempt %d/%d)", svc_name, method, cfg.url, attempt, retry_times)

        attempt_start = time.monotonic()
        try:
            response = requests.request(
                method,
                cfg.url,
                headers=dict(cfg.headers) or None,
                data=cfg.body.encode("utf-8") if cfg.body else None,
                timeout=timeout,
                stream=True,
            )
        except requests.RequestException as exc:
            failures.append(f"StatusCode: N/A, Error: {exc}")
            logger.warning("FAILED - Error: %s", exc)
            continue
        duration = timedelta(seconds=time.monotonic() - attempt_start)

        try:
            try:
                body = response.content
            except requests.RequestException as exc:
                failures.append(f"StatusCode: {response.status_code}, Error: {exc}")
                logger.warning("FAILED - StatusCode: %d, Error: %s", response.status_code, exc)
                continue

            response_body = body.decode("utf-8", errors="replace")
            status_code = response.status_code

            if is_successful_response(cfg, response.status_code, body):
                success_count += 1
                response_time = max(response_time, duration)
                response_body = ""
                logger.info(
                    "SUCCESS - %s %s (attempt %d/%d) - Response Time: %d ms, Status Code: %d",
                    method,
                    cfg.url,
                    attempt,
                    retry_times,
                    duration // timedelta(milliseconds=1),
                    response.status_code,
                )
                break

            failures.append(f"StatusCode or ResponseRegex mismatch: {response.status_code}")
            logger.warning("FAILED - StatusCode or ResponseRegex mismatch: %d", response.status_code)
        finally:
            response.close()

    end = _now_rfc3339()

    return PortResult(
        url=cfg.url,
        method=method,
        body=cfg.body,
        online=get_test_result(success_count, actual_attempts),
        status_code=status_code,
        start_time=start,
        end_time=end,
        response_time=response_time,
        total_attempts=actual_attempts,
        success_count=success_count,
        failures=failures,
        response_body=response_body,
    )


def check_services(cfg: Config) -> list[CheckResult]:
    """Check every service in the configuration, in order."""
    results: list[CheckResult] = []
    for svc in cfg.services:
        start = _now_rfc3339()

        health = [check_port(p, svc.timeout, svc.retry, svc.name) for p in svc.health]
        api = [check_port(p, svc.timeout, svc.retry, svc.name) for p in svc.api]
        ports = health + api

        end = _now_rfc3339()

        online_ports = sum(1 for pr in ports if pr.online is TestResult.ALL)
        results.append(
            CheckResult(
                name=svc.name,
                online=get_test_result(online_ports, len(ports)),
                health=health,
                api=api,
                start_time=start,
                end_time=end,
                total_attempts=sum(pr.total_attempts for pr in ports),
                success_count=sum(pr.success_count for pr in ports),
            )
        )
    return results