"""Deployment verification: poll a container until it reports the expected version."""

from .models import AttemptOutcome, OutcomeKind, VerificationRequest, VerificationResult
from .probes import ContainerProbe, HealthCheckClient, HealthResponse, extract_version
from .verifier import DeploymentVerifier, verify

__all__ = [
    "AttemptOutcome",
    "ContainerProbe",
    "DeploymentVerifier",
    "HealthCheckClient",
    "HealthResponse",
    "OutcomeKind",
    "VerificationRequest",
    "VerificationResult",
    "extract_version",
    "verify",
]
