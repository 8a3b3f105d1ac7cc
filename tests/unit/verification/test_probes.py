"""Tests for health check client and version extraction."""

from unittest.mock import MagicMock

import httpx
import pytest

from deploykit.verification.models import OutcomeKind
from deploykit.verification.probes import HealthCheckClient, extract_version


class TestExtractVersion:
    """JSON version field extraction."""

    def test_string_version(self):
        assert extract_version(b'{"version": "1.2.3"}') == "1.2.3"

    def test_whitespace_preserved(self):
        assert extract_version(b'{"version": " 1.2.3 "}') == " 1.2.3 "

    def test_numeric_version_rendered_as_json(self):
        assert extract_version(b'{"version": 2}') == "2"
        assert extract_version(b'{"version": 1.5}') == "1.5"

    def test_deeply_nested_body(self):
        """Bodies that exceed the parser recursion limit yield None."""
        assert extract_version(b"[" * 200000) is None

    def test_extra_fields_ignored(self):
        body = b'{"status": "ok", "version": "3.0.0", "uptime": 12}'
        assert extract_version(body) == "3.0.0"

    @pytest.mark.parametrize(
        "body",
        [
            b"",
            b"not json",
            b"<html></html>",
            b'["1.2.3"]',
            b'"1.2.3"',
            b"{}",
            b'{"version": null}',
            b'{"version": {"major": 1}}',
            b'{"Version": "1.2.3"}',
        ],
    )
    def test_malformed_bodies(self, body):
        """Anything without a scalar version field yields None."""
        assert extract_version(body) is None


class TestHealthCheckClient:
    """HTTP behavior of the health check client."""

    def test_get_success(self, health_client_factory):
        client = health_client_factory([httpx.Response(200, json={"version": "1"})])

        response = client.get("http://localhost:8080/health")

        assert response.ok
        assert response.status_code == 200
        assert response.error is None

    def test_get_connection_error_is_reported(self, health_client_factory):
        client = health_client_factory([httpx.ConnectError("Connection refused")])

        response = client.get("http://localhost:8080/health")

        assert not response.ok
        assert response.status_code is None
        assert "ConnectError" in response.error

    def test_get_error_status(self, health_client_factory):
        client = health_client_factory([httpx.Response(404)])

        response = client.get("http://localhost:8080/health")

        assert not response.ok
        assert response.status_code == 404

    def test_check_version_match(self, health_client_factory):
        client = health_client_factory([httpx.Response(200, json={"version": "1.2.3"})])

        outcome = client.check_version("http://localhost:8080/health", "1.2.3")

        assert outcome.kind == OutcomeKind.MATCH
        assert outcome.observed == "1.2.3"

    def test_check_version_mismatch(self, health_client_factory):
        client = health_client_factory([httpx.Response(200, json={"version": "1.2.4"})])

        outcome = client.check_version("http://localhost:8080/health", "1.2.3")

        assert outcome.kind == OutcomeKind.VERSION_MISMATCH
        assert outcome.observed == "1.2.4"

    def test_check_version_malformed(self, health_client_factory):
        client = health_client_factory([httpx.Response(200, content=b"ok")])

        outcome = client.check_version("http://localhost:8080/health", "1.2.3")

        assert outcome.kind == OutcomeKind.MALFORMED_RESPONSE

    def test_check_version_unreachable(self, health_client_factory):
        client = health_client_factory([httpx.ConnectTimeout("timed out")])

        outcome = client.check_version("http://localhost:8080/health", "1.2.3")

        assert outcome.kind == OutcomeKind.UNREACHABLE_ENDPOINT

    def test_injected_client_not_closed(self):
        """Clients passed in are owned by the caller."""
        injected = MagicMock(spec=httpx.Client)

        with HealthCheckClient(client=injected):
            pass

        injected.close.assert_not_called()

    def test_owned_client_closed(self):
        """Clients created internally are closed on exit."""
        with HealthCheckClient(timeout=1.0) as client:
            inner = client._client

        assert inner.is_closed
