"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from app_bundler.types import IconFormatName, PlatformTag


@dataclass(frozen=True)
class BundleArtifact:
    """Bundle written to disk by a backend."""

    root: Path
    platform: PlatformTag
    entries: tuple[str, ...]


@dataclass(frozen=True)
class IconSummary:
    """Icon container written into the bundle."""

    target_format: IconFormatName
    slot_count: int
    synthesized_count: int


@dataclass(frozen=True)
class BundleResult:
    """Structured bundling outcome."""

    artifact: BundleArtifact
    warnings: tuple[str, ...] = ()
    icon: IconSummary | None = None
