"""Deployment verification by polling a container's health endpoint."""

import logging
import time
from typing import Callable, Optional, Union

from ..config import (
    DEFAULT_DELAY_SECONDS,
    DEFAULT_HOST,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_MAX_ATTEMPTS,
    get_config,
)
from ..docker.runtime import DockerRuntime
from .models import AttemptOutcome, OutcomeKind, VerificationRequest, VerificationResult
from .probes import ContainerProbe, HealthCheckClient

log = logging.getLogger(__name__)


class DeploymentVerifier:
    """Confirm that a freshly deployed container is alive and runs the expected version.

    Every attempt checks that the container is running, fetches the health
    endpoint and compares the reported version. All failure categories are
    retried the same way. Attempts run strictly in sequence and the delay
    blocks the calling thread; there is no sleep after the final attempt.
    """

    def __init__(
        self,
        probe: Optional[ContainerProbe] = None,
        health_client: Optional[HealthCheckClient] = None,
        sleep: Callable[[float], None] = time.sleep,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        """Initialize the verifier.

        Args:
            probe: Container runtime queried for the running state. Defaults
                to a DockerRuntime using the configured docker binary.
            health_client: Client used for health requests. When omitted, a
                client is created and closed for each verify call.
            sleep: Function used to wait between attempts.
            http_timeout: Timeout for health requests made by owned clients.
        """
        self.probe = (
            probe if probe is not None else DockerRuntime(get_config().docker_bin)
        )
        self.health_client = health_client
        self.sleep = sleep
        self.http_timeout = http_timeout

    def verify(self, request: VerificationRequest) -> VerificationResult:
        """Run the polling loop for one request.

        Args:
            request: Validated verification parameters.

        Returns:
            VerificationResult, successful on the first matching attempt,
            failed with the last outcome once the budget is spent.
        """
        log.info(f"Verifying container: {request.container_name}")
        log.info(f"Expected version: {request.expected_version}")
        log.debug(
            f"Polling {request.url} up to {request.max_attempts} times "
            f"({request.time_bound} seconds)"
        )

        if self.health_client is not None:
            return self._poll(request, self.health_client)

        with HealthCheckClient(timeout=self.http_timeout) as client:
            return self._poll(request, client)

    def _poll(
        self, request: VerificationRequest, client: HealthCheckClient
    ) -> VerificationResult:
        outcome = None
        attempt = 0

        for attempt in range(1, request.max_attempts + 1):
            outcome = self._attempt(request, client)

            if outcome.is_match:
                log.info(
                    f"Attempt {attempt}/{request.max_attempts}: "
                    f"Container is running version {outcome.observed}"
                )
                return self._result(request, True, attempt, outcome)

            log.info(
                f"Attempt {attempt}/{request.max_attempts}: "
                f"Container not ready yet, {outcome.describe()}"
            )

            if (
                request.fail_fast_on_mismatch
                and outcome.kind == OutcomeKind.VERSION_MISMATCH
            ):
                log.error(
                    f"Container running wrong version: {outcome.observed} "
                    f"(expected {request.expected_version}), not retrying"
                )
                break

            if attempt < request.max_attempts:
                self.sleep(request.delay_seconds)

        result = self._result(request, False, attempt, outcome)
        log.error(result.message)
        return result

    def _attempt(
        self, request: VerificationRequest, client: HealthCheckClient
    ) -> AttemptOutcome:
        if not self.probe.is_running(request.container_name):
            return AttemptOutcome.process_not_running()
        return client.check_version(request.url, request.expected_version)

    @staticmethod
    def _result(
        request: VerificationRequest,
        success: bool,
        attempts: int,
        outcome: AttemptOutcome,
    ) -> VerificationResult:
        return VerificationResult(
            success=success,
            container_name=request.container_name,
            attempts=attempts,
            max_attempts=request.max_attempts,
            delay_seconds=request.delay_seconds,
            last_outcome=outcome,
        )


def verify(
    container_name: str,
    expected_version: str,
    port: Union[str, int],
    health_endpoint: str,
    host: str = DEFAULT_HOST,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay_seconds: int = DEFAULT_DELAY_SECONDS,
    fail_fast_on_mismatch: bool = False,
    probe: Optional[ContainerProbe] = None,
    health_client: Optional[HealthCheckClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> VerificationResult:
    """Verify a deployed container; see DeploymentVerifier.verify."""
    request = VerificationRequest(
        container_name=container_name,
        expected_version=expected_version,
        port=str(port),
        health_endpoint=health_endpoint,
        host=host,
        max_attempts=max_attempts,
        delay_seconds=delay_seconds,
        fail_fast_on_mismatch=fail_fast_on_mismatch,
    )
    verifier = DeploymentVerifier(probe=probe, health_client=health_client, sleep=sleep)
    return verifier.verify(request)
