"""
Docker lifecycle operations.

Components used by the pipeline functions to build, deploy, push and clean
up a project's container.
"""

from .cleanup import CleanupManager, CleanupReport
from .deployer import ContainerDeployer, DeployConfig, DeployResult
from .image_builder import BuildResult, ImageBuildConfig, ImageBuilder
from .registry_manager import PushResult, RegistryCredentials, RegistryManager
from .runtime import CommandResult, DockerRuntime

__all__ = [
    # Docker CLI
    "DockerRuntime",
    "CommandResult",
    # Image operations
    "ImageBuilder",
    "ImageBuildConfig",
    "BuildResult",
    # Container operations
    "ContainerDeployer",
    "DeployConfig",
    "DeployResult",
    # Registry operations
    "RegistryManager",
    "RegistryCredentials",
    "PushResult",
    # Cleanup
    "CleanupManager",
    "CleanupReport",
]
