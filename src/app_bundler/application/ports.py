"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol

from app_bundler.application.results import BundleArtifact
from app_bundler.icons.catalog import IconCandidate
from app_bundler.icons.pipeline import IconPlan
from app_bundler.resources import ResourceEntry
from app_bundler.schemas import BundleSettings
from app_bundler.types import IconFormatName


class IconCatalogLoader(Protocol):
    """Locate and decode icon source images."""

    def load(
        self,
        patterns: Iterable[str],
        project_root: Path,
        *,
        strict: bool,
        max_workers: int,
    ) -> tuple[IconCandidate, ...]:
        """Return decoded candidates for ``patterns``."""


class IconRenderer(Protocol):
    """Turn icon candidates into a container for one format."""

    def plan(
        self, catalog: Sequence[IconCandidate], target_format: IconFormatName
    ) -> IconPlan:
        """Assign candidates to every mandatory slot."""

    def render(self, plan: IconPlan) -> bytes:
        """Return the packed container bytes."""


class ResourceCollector(Protocol):
    """Expand resource patterns into copy instructions."""

    def collect(
        self, patterns: Iterable[str], project_root: Path
    ) -> tuple[ResourceEntry, ...]:
        """Return resource entries in pattern order."""


class BundleBuilder(Protocol):
    """Lay out the bundle on disk."""

    def build(
        self,
        settings: BundleSettings,
        icon_bytes: bytes | None,
        resources: Sequence[ResourceEntry],
        *,
        max_workers: int,
    ) -> BundleArtifact:
        """Build and return the artifact."""
