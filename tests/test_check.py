from datetime import datetime

import pytest
import requests
import responses

from ponghub.check import (
    UnsupportedMethodError,
    check_port,
    check_services,
    get_http_method,
    get_test_result,
    is_successful_response,
)
from ponghub.models import Config, PortConfig, ServiceConfig, TestResult

HEALTH_URL = "http://service.example.com/health"
API_URL = "http://service.example.com/api"


@pytest.fixture
def mock_http():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _parse(text):
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@pytest.mark.parametrize(
    "given, expected",
    [("get", "GET"), ("Post", "POST"), ("PUT", "PUT"), ("", "GET"), ("whatever", "GET")],
)
def test_get_http_method(given, expected):
    assert get_http_method(given) == expected


@pytest.mark.parametrize("method", ["DELETE", "head", "PATCH", "options", "TRACE", "CONNECT"])
def test_get_http_method_unsupported(method):
    with pytest.raises(UnsupportedMethodError):
        get_http_method(method)


@pytest.mark.parametrize(
    "success, attempts, expected",
    [
        (2, 2, TestResult.ALL),
        (0, 0, TestResult.ALL),
        (0, 3, TestResult.NONE),
        (1, 3, TestResult.PART),
    ],
)
def test_get_test_result(success, attempts, expected):
    assert get_test_result(success, attempts) is expected


def test_success_defaults_to_status_ok():
    cfg = PortConfig(url=HEALTH_URL)
    assert is_successful_response(cfg, 200, b"") is True
    assert is_successful_response(cfg, 204, b"") is False


def test_success_with_expected_status():
    cfg = PortConfig(url=HEALTH_URL, status_code=201)
    assert is_successful_response(cfg, 201, b"") is True
    assert is_successful_response(cfg, 200, b"") is False


def test_success_with_regex_ignores_status():
    cfg = PortConfig(url=HEALTH_URL, response_regex=r"status.*up")
    assert is_successful_response(cfg, 500, b'{"status": "up"}') is True
    assert is_successful_response(cfg, 200, b'{"status": "down"}') is False


def test_success_with_regex_and_status():
    cfg = PortConfig(url=HEALTH_URL, status_code=200, response_regex="ok")
    assert is_successful_response(cfg, 200, "ok") is True
    assert is_successful_response(cfg, 503, "ok") is False


def test_invalid_regex_raises():
    cfg = PortConfig(url=HEALTH_URL, response_regex="(")
    with pytest.raises(Exception) as info:
        is_successful_response(cfg, 200, b"x")
    assert "(" in cfg.response_regex and info.type.__name__ in ("error", "PatternError")


def test_check_port_success(mock_http):
    mock_http.add(responses.GET, HEALTH_URL, status=200, body="fine")
    result = check_port(PortConfig(url=HEALTH_URL), 1, 2, "web")
    assert result.online is TestResult.ALL
    assert result.total_attempts == result.success_count == len(mock_http.calls)
    assert result.failures == []
    assert result.response_body == ""
    assert result.method == "GET"
    assert _parse(result.start_time) <= _parse(result.end_time)


def test_check_port_all_failures(mock_http):
    mock_http.add(responses.GET, HEALTH_URL, status=500, body="boom")
    retries = 2
    result = check_port(PortConfig(url=HEALTH_URL), 1, retries, "web")
    assert result.online is TestResult.NONE
    assert result.total_attempts == retries
    assert result.success_count == 0
    assert result.failures == ["StatusCode or ResponseRegex mismatch: 500"] * retries
    assert result.status_code == 500
    assert result.response_body == "boom"


def test_check_port_partial_success(mock_http):
    mock_http.add(responses.GET, HEALTH_URL, status=500)
    mock_http.add(responses.GET, HEALTH_URL, status=200)
    result = check_port(PortConfig(url=HEALTH_URL), 1, 3, "web")
    assert result.online is TestResult.PART
    assert result.total_attempts == len(mock_http.calls)
    assert result.success_count == 1
    assert result.status_code == 200


def test_check_port_connection_error(mock_http):
    mock_http.add(responses.GET, HEALTH_URL, body=requests.ConnectionError("refused"))
    result = check_port(PortConfig(url=HEALTH_URL), 1, 1, "web")
    assert result.online is TestResult.NONE
    assert result.status_code == 0
    assert result.failures[0].startswith("StatusCode: N/A, Error:")
    assert "refused" in result.failures[0]


def test_check_port_sends_headers_and_body(mock_http):
    mock_http.add(responses.POST, API_URL, status=201)
    cfg = PortConfig(
        url=API_URL,
        method="post",
        headers={"X-Trace": "trace-id"},
        body='{"ping": true}',
        status_code=201,
    )
    result = check_port(cfg, 1, 1, "web")
    request = mock_http.calls[0].request
    assert request.method == "POST"
    assert request.headers["X-Trace"] == "trace-id"
    assert request.body == cfg.body.encode()
    assert result.body == cfg.body
    assert result.online is TestResult.ALL


def test_check_port_unsupported_method():
    with pytest.raises(UnsupportedMethodError):
        check_port(PortConfig(url=HEALTH_URL, method="DELETE"), 1, 1, "web")


def test_check_services_aggregates(mock_http):
    mock_http.add(responses.GET, HEALTH_URL, status=200)
    mock_http.add(responses.GET, API_URL, status=500)
    cfg = Config(
        services=[
            ServiceConfig(
                name="web",
                health=[PortConfig(url=HEALTH_URL)],
                api=[PortConfig(url=API_URL)],
                timeout=1,
                retry=2,
            )
        ]
    )
    [result] = check_services(cfg)
    assert result.name == "web"
    assert result.online is TestResult.PART
    assert [p.url for p in result.health] == [HEALTH_URL]
    assert [p.url for p in result.api] == [API_URL]
    ports = result.health + result.api
    assert result.total_attempts == sum(p.total_attempts for p in ports)
    assert result.success_count == sum(p.success_count for p in ports)
    assert result.total_attempts == len(mock_http.calls)