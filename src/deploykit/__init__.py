# Load .env vars from file before everything else
from dotenv import load_dotenv

load_dotenv()

from .logger import setup_logging  # noqa: E402

setup_logging()

# TYPE_CHECKING imports provide full IDE support (autocomplete, type hints)
# while __getattr__ enables lazy loading at runtime for fast CLI startup
from typing import TYPE_CHECKING  # noqa: E402

if TYPE_CHECKING:
    from .pipeline import (
        build_image,
        cleanup,
        deploy_container,
        push_to_registry,
        verify_container,
    )
    from .verification import (
        DeploymentVerifier,
        VerificationRequest,
        VerificationResult,
        verify,
    )

_PIPELINE_FUNCTIONS = (
    "build_image",
    "deploy_container",
    "verify_container",
    "push_to_registry",
    "cleanup",
)

_VERIFICATION_NAMES = (
    "DeploymentVerifier",
    "VerificationRequest",
    "VerificationResult",
    "verify",
)


def __getattr__(name):
    """Lazily import public API only when accessed."""
    if name in _PIPELINE_FUNCTIONS:
        from . import pipeline

        return getattr(pipeline, name)
    elif name in _VERIFICATION_NAMES:
        from . import verification

        return getattr(verification, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [*_PIPELINE_FUNCTIONS, *_VERIFICATION_NAMES]
