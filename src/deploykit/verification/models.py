"""Data models for deployment verification."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from ..config import DEFAULT_DELAY_SECONDS, DEFAULT_HOST, DEFAULT_MAX_ATTEMPTS
from ..exceptions import InvalidRequestError, VerificationFailedError


class OutcomeKind(str, Enum):
    """Outcome category of a single verification attempt."""

    PROCESS_NOT_RUNNING = "PROCESS_NOT_RUNNING"
    UNREACHABLE_ENDPOINT = "UNREACHABLE_ENDPOINT"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    VERSION_MISMATCH = "VERSION_MISMATCH"
    MATCH = "MATCH"


@dataclass(frozen=True)
class VerificationRequest:
    """Parameters of one verification call.

    Validated on construction so that bad parameters fail before any attempt.
    """

    container_name: str
    expected_version: str
    port: str
    health_endpoint: str
    host: str = DEFAULT_HOST
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_seconds: int = DEFAULT_DELAY_SECONDS
    fail_fast_on_mismatch: bool = False

    def __post_init__(self):
        # ports may be given as ints
        object.__setattr__(self, "port", str(self.port))

        for label in (
            "container_name",
            "expected_version",
            "port",
            "health_endpoint",
            "host",
        ):
            value = getattr(self, label)
            if not isinstance(value, str) or not value:
                raise InvalidRequestError(f"{label} must be a non-empty string")

        if not self.port.isdigit():
            raise InvalidRequestError(f"port must be numeric, got {self.port!r}")
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise InvalidRequestError("max_attempts must be an integer")
        if self.max_attempts < 1:
            raise InvalidRequestError(
                f"max_attempts must be at least 1, got {self.max_attempts}"
            )
        if isinstance(self.delay_seconds, bool) or not isinstance(
            self.delay_seconds, (int, float)
        ):
            raise InvalidRequestError("delay_seconds must be a number")
        if self.delay_seconds < 0:
            raise InvalidRequestError(
                f"delay_seconds must not be negative, got {self.delay_seconds}"
            )

        if not self.health_endpoint.startswith("/"):
            object.__setattr__(self, "health_endpoint", f"/{self.health_endpoint}")

        try:
            httpx.URL(self.url)
        except httpx.InvalidURL as e:
            raise InvalidRequestError(
                f"Invalid health check URL {self.url!r}: {e}"
            ) from e

    @property
    def url(self) -> str:
        host = self.host
        # bare IPv6 addresses need brackets in a URL
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        return f"http://{host}:{self.port}{self.health_endpoint}"

    @property
    def time_bound(self):
        """Reported time bound for the attempt budget, not a measured duration."""
        return self.max_attempts * self.delay_seconds


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one verification attempt."""

    kind: OutcomeKind
    observed: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def process_not_running(cls, detail: Optional[str] = None) -> "AttemptOutcome":
        return cls(OutcomeKind.PROCESS_NOT_RUNNING, detail=detail)

    @classmethod
    def unreachable(cls, detail: Optional[str] = None) -> "AttemptOutcome":
        return cls(OutcomeKind.UNREACHABLE_ENDPOINT, detail=detail)

    @classmethod
    def malformed(cls, detail: Optional[str] = None) -> "AttemptOutcome":
        return cls(OutcomeKind.MALFORMED_RESPONSE, detail=detail)

    @classmethod
    def mismatch(cls, observed: str) -> "AttemptOutcome":
        return cls(OutcomeKind.VERSION_MISMATCH, observed=observed)

    @classmethod
    def match(cls, observed: str) -> "AttemptOutcome":
        return cls(OutcomeKind.MATCH, observed=observed)

    @property
    def is_match(self) -> bool:
        return self.kind == OutcomeKind.MATCH

    def describe(self) -> str:
        if self.kind == OutcomeKind.PROCESS_NOT_RUNNING:
            text = "container is not running"
        elif self.kind == OutcomeKind.UNREACHABLE_ENDPOINT:
            text = "health endpoint unreachable"
        elif self.kind == OutcomeKind.MALFORMED_RESPONSE:
            text = "malformed health response"
        elif self.kind == OutcomeKind.VERSION_MISMATCH:
            text = f"running wrong version {self.observed!r}"
        else:
            text = f"running version {self.observed!r}"
        if self.detail:
            text = f"{text} ({self.detail})"
        return text


@dataclass(frozen=True)
class VerificationResult:
    """Final result of a verification call."""

    success: bool
    container_name: str
    attempts: int
    max_attempts: int
    delay_seconds: float
    last_outcome: AttemptOutcome

    @property
    def reason(self) -> Optional[OutcomeKind]:
        """Outcome category that caused the failure, None on success."""
        return None if self.success else self.last_outcome.kind

    @property
    def observed_version(self) -> Optional[str]:
        return self.last_outcome.observed

    @property
    def message(self) -> str:
        if self.success:
            return (
                f"Container {self.container_name} is running version "
                f"{self.last_outcome.observed} (attempt {self.attempts}/{self.max_attempts})"
            )
        return (
            f"Container {self.container_name} did not start successfully within "
            f"{self.max_attempts * self.delay_seconds} seconds "
            f"after {self.attempts} attempt(s): {self.last_outcome.describe()}"
        )

    def raise_for_failure(self) -> "VerificationResult":
        if not self.success:
            raise VerificationFailedError(self)
        return self
