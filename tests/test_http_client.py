"""Tests for the retrying, caching HTTP helpers."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from common import http_client
from constants import Constants


@pytest.fixture(autouse=True)
def _no_backoff(monkeypatch):
    monkeypatch.setattr(Constants, "HTTP_RETRY_BASE_DELAY_SEC", 0)


def response(status, text="", headers=None):
    mock = MagicMock()
    mock.status_code = status
    mock.text = text
    mock.headers = headers or {}
    return mock


def test_get_json_success_and_cache():
    with patch("common.http_client.requests.get", return_value=response(200, '[{"name": "v1"}]', {"X-Page": "1"})) as mock_get:
        first = http_client.get_json("https://api.example.com/tags", headers={"A": "b"})
        second = http_client.get_json("https://api.example.com/tags", headers={"A": "b"})

    assert first == (200, {"X-Page": "1"}, [{"name": "v1"}])
    assert second == first
    assert mock_get.call_count == 1
    assert mock_get.call_args[1]["timeout"] == Constants.REQUEST_TIMEOUT


def test_different_headers_are_not_shared():
    with patch("common.http_client.requests.get", return_value=response(200, "[]")) as mock_get:
        http_client.robust_get("https://api.example.com/x", headers={"Authorization": "Bearer a"})
        http_client.robust_get("https://api.example.com/x", headers={"Authorization": "Bearer b"})
    assert mock_get.call_count == 2


def test_server_error_is_retried():
    replies = [response(502), response(200, '{"ok": true}')]
    with patch("common.http_client.requests.get", side_effect=replies) as mock_get:
        status, _, data = http_client.get_json("https://api.example.com/flaky")
    assert status == 200
    assert data == {"ok": True}
    assert mock_get.call_count == 2


def test_client_error_not_retried_or_cached():
    with patch("common.http_client.requests.get", return_value=response(404, "nope")) as mock_get:
        assert http_client.get_json("https://api.example.com/missing") == (404, {}, None)
        http_client.get_json("https://api.example.com/missing")
    assert mock_get.call_count == 2


def test_transport_failure_after_retries():
    with patch("common.http_client.requests.get", side_effect=requests.ConnectionError("refused")) as mock_get:
        status, headers, text = http_client.get_json("https://api.example.com/down")
    assert status == 0
    assert headers == {}
    assert "refused" in text
    assert mock_get.call_count == Constants.HTTP_RETRY_MAX


def test_timeout_reported():
    with patch("common.http_client.requests.get", side_effect=requests.Timeout()):
        status, _, text = http_client.robust_get("https://api.example.com/slow")
    assert status == 0
    assert "timeout" in text


def test_invalid_json_gives_none_payload():
    with patch("common.http_client.requests.get", return_value=response(200, "<html>")):
        assert http_client.get_json("https://api.example.com/html")[2] is None
