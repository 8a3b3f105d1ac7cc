"""
Best-effort cleanup of Docker artifacts for a project.

Only containers and images belonging to the given project are touched. Each
removal is independent: a failure is logged and recorded, and the remaining
steps still run.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..config import DEFAULT_SOURCE_TAG, LATEST_TAG
from ..exceptions import DockerError
from .runtime import DockerRuntime

log = logging.getLogger(__name__)

UNTAGGED = "<none>"


@dataclass
class CleanupReport:
    """Outcome of a cleanup run."""

    removed: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def record_failure(self, target: str, error: Exception) -> None:
        log.warning(f"Cleanup of {target} failed: {error}")
        self.failures.append((target, str(error)))


class CleanupManager:
    """Remove stale containers and images without ever failing the caller."""

    def __init__(self, runtime: Optional[DockerRuntime] = None):
        self.runtime = runtime or DockerRuntime()

    def cleanup(
        self,
        image_name: str,
        container_name: str,
        registry: Optional[str] = None,
        keep_version: Optional[str] = None,
        source_tag: str = DEFAULT_SOURCE_TAG,
    ) -> CleanupReport:
        """
        Clean up Docker artifacts for a project.

        Steps:
            1. Remove backup containers (``<container_name>-backup``)
            2. Remove dangling images
            3. Remove local image tags other than the source tag
            4. If a registry is given, remove registry tags other than
               ``latest`` and ``keep_version``

        Args:
            image_name: Name of the image to clean
            container_name: Name of the deployed container
            registry: Optional registry whose local tags are cleaned too
            keep_version: Registry version tag to keep
            source_tag: Local tag to keep

        Returns:
            CleanupReport with removed references and recorded failures
        """
        log.info(f"Cleaning up Docker artifacts for {image_name}")
        report = CleanupReport()

        self._remove_each(
            report,
            "backup containers",
            lambda: self.runtime.list_containers(f"{container_name}-backup"),
            lambda container_id: self.runtime.remove_container(
                container_id, force=True
            ),
        )

        self._remove_each(
            report,
            "dangling images",
            lambda: self.runtime.list_images(filters={"dangling": "true"}),
            lambda image_id: self.runtime.remove_image(image_id, force=True),
        )

        self._remove_tags(report, image_name, keep={source_tag})

        if registry:
            keep = {LATEST_TAG}
            if keep_version:
                keep.add(keep_version)
            else:
                log.warning(
                    "No version to keep given, only the latest registry tag is kept"
                )
            self._remove_tags(report, f"{registry.rstrip('/')}/{image_name}", keep=keep)

        if report.ok:
            log.info("Cleanup completed")
        else:
            log.warning(f"Cleanup completed with {len(report.failures)} failure(s)")
        return report

    def _remove_tags(self, report: CleanupReport, repository: str, keep: set) -> None:
        def stale_refs() -> List[str]:
            tags = self.runtime.list_image_tags(repository)
            return [
                f"{repository}:{tag}"
                for tag in tags
                if tag not in keep and tag != UNTAGGED
            ]

        self._remove_each(
            report,
            f"old {repository} tags",
            stale_refs,
            lambda ref: self.runtime.remove_image(ref, force=True),
        )

    def _remove_each(
        self,
        report: CleanupReport,
        label: str,
        list_targets: Callable[[], List[str]],
        remove: Callable[[str], object],
    ) -> None:
        try:
            targets = list_targets()
        except DockerError as e:
            report.record_failure(label, e)
            return

        if not targets:
            log.debug(f"No {label} to remove")
            return

        for target in targets:
            try:
                remove(target)
            except DockerError as e:
                report.record_failure(target, e)
                continue
            log.debug(f"Removed {target}")
            report.removed.append(target)
