"""Collaborators queried by the deployment verifier."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx

from ..config import DEFAULT_HTTP_TIMEOUT
from .models import AttemptOutcome

log = logging.getLogger(__name__)

VERSION_FIELD = "version"


class ContainerProbe(Protocol):
    """Anything that can tell whether a named container is running."""

    def is_running(self, name: str) -> bool: ...


@dataclass
class HealthResponse:
    """Transport-level result of a health check request."""

    ok: bool
    status_code: Optional[int] = None
    body: bytes = b""
    error: Optional[str] = None


def extract_version(body: Any) -> Optional[str]:
    """
    Extract the ``version`` field from a JSON health document.

    Strings are returned untouched. Numbers and booleans are rendered as JSON
    text, the way ``jq -r`` prints them. Returns None for invalid JSON, a
    non-object document, or a missing, null or structured field.
    """
    try:
        document = json.loads(body)
    except (TypeError, ValueError, RecursionError):
        return None

    if not isinstance(document, dict):
        return None

    value = document.get(VERSION_FIELD)
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return None


class HealthCheckClient:
    """Blocking HTTP client for health endpoints.

    Owns its httpx.Client unless one is injected.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def get(self, url: str) -> HealthResponse:
        """Issue a GET request; transport errors are reported, never raised."""
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            log.debug(f"GET {url} failed: {type(e).__name__}: {e}")
            return HealthResponse(ok=False, error=f"{type(e).__name__}: {e}")

        if response.status_code >= 400:
            return HealthResponse(
                ok=False,
                status_code=response.status_code,
                body=response.content,
                error=f"HTTP {response.status_code}",
            )
        return HealthResponse(
            ok=True, status_code=response.status_code, body=response.content
        )

    def check_version(self, url: str, expected_version: str) -> AttemptOutcome:
        """
        Query a health endpoint and compare its version with the expected one.

        The comparison is exact string equality: case and surrounding
        whitespace both count.

        Returns:
            AttemptOutcome of kind UNREACHABLE_ENDPOINT, MALFORMED_RESPONSE,
            VERSION_MISMATCH or MATCH
        """
        response = self.get(url)
        if not response.ok:
            return AttemptOutcome.unreachable(response.error)

        version = extract_version(response.body)
        if version is None:
            return AttemptOutcome.malformed(
                f"no {VERSION_FIELD!r} field in response from {url}"
            )

        if version == expected_version:
            return AttemptOutcome.match(version)
        return AttemptOutcome.mismatch(version)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
