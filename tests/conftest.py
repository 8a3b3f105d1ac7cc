"""
Test configuration and fixtures for deploykit tests.

Provides shared fixtures for:
- Mock Docker runtimes
- Recording sleep functions
- Health endpoint transports
- Environment and configuration isolation
"""

from typing import Callable, List
from unittest.mock import MagicMock

import httpx
import pytest

from deploykit.config import reset_config
from deploykit.docker.runtime import CommandResult, DockerRuntime
from deploykit.verification.probes import HealthCheckClient


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Clear deploykit environment variables and the cached config."""
    for name in (
        "DEPLOYKIT_DOCKER_BIN",
        "DEPLOYKIT_SOURCE_TAG",
        "DEPLOYKIT_VERIFY_MAX_ATTEMPTS",
        "DEPLOYKIT_VERIFY_DELAY_SECONDS",
        "DEPLOYKIT_HTTP_TIMEOUT",
        "DEPLOYKIT_CONTAINER_USER",
        "DEPLOYKIT_RESTART_POLICY",
        "DEPLOYKIT_KEEP_VERSION",
        "DOCKER_USER",
        "DOCKER_PASS",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def mock_runtime():
    """Provide a mock DockerRuntime whose commands all succeed.

    Returns:
        MagicMock constrained to the DockerRuntime interface.
    """
    runtime = MagicMock(spec=DockerRuntime)

    def ok(*args, **kwargs):
        return CommandResult(command=["docker"], returncode=0)

    for method in (
        "run",
        "stop_container",
        "remove_container",
        "remove_image",
        "tag",
        "push",
        "login",
        "logout",
    ):
        getattr(runtime, method).side_effect = ok

    runtime.is_running.return_value = True
    runtime.list_containers.return_value = []
    runtime.list_images.return_value = []
    runtime.list_image_tags.return_value = []
    return runtime


@pytest.fixture
def sleep_calls() -> List[float]:
    """Delays recorded by the recording_sleep fixture."""
    return []


@pytest.fixture
def recording_sleep(sleep_calls) -> Callable[[float], None]:
    """Sleep replacement that records delays instead of blocking."""
    return sleep_calls.append


@pytest.fixture
def health_client_factory():
    """Build HealthCheckClients backed by a scripted sequence of responses.

    Each item is an httpx.Response, or an exception instance to raise.
    The returned client exposes ``requests`` with the URLs that were hit.
    """

    def factory(responses):
        scripted = list(responses)
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(str(request.url))
            item = scripted.pop(0) if len(scripted) > 1 else scripted[0]
            if isinstance(item, Exception):
                raise item
            return item

        client = HealthCheckClient(
            client=httpx.Client(transport=httpx.MockTransport(handler))
        )
        client.requests = requests
        return client

    return factory
