"""Backend protocol for platform bundle layouts."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from app_bundler.schemas import BundleSettings
from app_bundler.types import IconFormatName, PlatformTag


@runtime_checkable
class BundleBackend(Protocol):
    """Protocol implemented by platform bundle backends.

    Dispatch drives a backend through a fixed sequence: skeleton, payload,
    icon, metadata, finalization. Paths returned by the backend are all
    inside the bundle root it reports.
    """

    platform: PlatformTag
    icon_format: IconFormatName | None

    def bundle_root(self, settings: BundleSettings) -> Path:
        """Return the directory that holds the whole bundle."""

    def create_skeleton(self, root: Path, settings: BundleSettings) -> None:
        """Create the backend's internal directory layout."""

    def resource_dir(self, root: Path, settings: BundleSettings) -> Path:
        """Return the directory resources are copied into."""

    def binary_dir(self, root: Path, settings: BundleSettings) -> Path:
        """Return the directory the executable is copied into."""

    def icon_path(self, root: Path, settings: BundleSettings) -> Path:
        """Return where the rendered icon container is written."""

    def write_metadata(
        self,
        root: Path,
        settings: BundleSettings,
        icon_path: Path | None,
    ) -> None:
        """Write the platform descriptor populated from ``settings``.

        Parameters
        ----------
        root : Path
            Bundle root directory.
        settings : BundleSettings
            Resolved bundle settings.
        icon_path : Path | None
            Written icon container, or ``None`` when the bundle has no icon.
        """

    def finalize(self, root: Path, settings: BundleSettings) -> None:
        """Run backend-specific finishing work."""
