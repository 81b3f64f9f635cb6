"""
Unit tests for mailgate/http.py

The requests session is a MagicMock; no real HTTP request is made.
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
import requests

from mailgate.errors import TransportError
from mailgate.http import HttpClient, create_http_client


def _response(status: int = 200, text: str = "{}") -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.text = text
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return response


class TestHttpClient:
    def test_returns_status_and_body(self):
        session = MagicMock()
        session.get.return_value = _response(200, '{"ok": true}')
        client = HttpClient(session=session, timeout=3.0)

        response = client.get("https://a.example/x", {"X-Key": "k"})

        assert response.status_code == 200
        assert response.body == '{"ok": true}'
        session.get.assert_called_once_with(
            "https://a.example/x", headers={"X-Key": "k"}, timeout=3.0, verify=True
        )

    def test_single_attempt_on_connection_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("refused")
        client = HttpClient(session=session)

        with pytest.raises(TransportError):
            client.get("https://a.example/x")
        assert session.get.call_count == 1

    def test_timeout_is_transport_error(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(TransportError):
            HttpClient(session=session).get("https://a.example/x")

    def test_error_status_is_transport_error(self):
        session = MagicMock()
        session.get.return_value = _response(500, "")

        with pytest.raises(TransportError):
            HttpClient(session=session).get("https://a.example/x")

    def test_uses_given_session(self):
        session = MagicMock()

        assert HttpClient(session=session).session is session

    def test_close(self):
        session = MagicMock()
        HttpClient(session=session).close()

        session.close.assert_called_once()


class TestCreateHttpClient:
    def test_settings_are_applied(self):
        client = create_http_client(timeout=2.0, verify=False)

        assert client.timeout == 2.0
        assert client.verify is False
        assert client.session.hooks["response"] == []

    def test_request_logging_hook(self, caplog):
        logger = logging.getLogger("mailgate.test.http")
        caplog.set_level(logging.DEBUG, logger="mailgate.test.http")
        client = create_http_client(logger=logger, log_requests=True)

        hook = client.session.hooks["response"][0]
        response = MagicMock()
        response.request.method = "GET"
        response.url = "https://a.example/x"
        response.status_code = 200
        response.headers = {"Content-Length": "12"}
        hook(response)

        assert "GET https://a.example/x 200 12" in caplog.text
