"""Resource and bundle layout adapters implementing application ports."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from app_bundler.application.results import BundleArtifact
from app_bundler.backends.registry import BackendRegistry
from app_bundler.dispatch import build_bundle
from app_bundler.resources import ResourceEntry, collect_resources
from app_bundler.schemas import BundleSettings


class GlobResourceCollector:
    """Collect resources by glob expansion under the project root."""

    def collect(
        self, patterns: Iterable[str], project_root: Path
    ) -> tuple[ResourceEntry, ...]:
        return collect_resources(patterns, project_root)


class BackendBundleBuilder:
    """Build bundles through the platform backend registry."""

    def __init__(self, registry: BackendRegistry | None = None) -> None:
        self.registry = registry

    def build(
        self,
        settings: BundleSettings,
        icon_bytes: bytes | None,
        resources: Sequence[ResourceEntry],
        *,
        max_workers: int = 4,
    ) -> BundleArtifact:
        return build_bundle(
            settings,
            icon_bytes,
            resources,
            max_workers=max_workers,
            registry=self.registry,
        )
