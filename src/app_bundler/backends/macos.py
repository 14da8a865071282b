"""macOS ``.app`` bundle backend.

Layout::

    Name.app/
        Contents/
            Info.plist
            PkgInfo
            MacOS/        executable
            Resources/    Name.icns and bundled resources
"""

from __future__ import annotations

import plistlib
from pathlib import Path

from app_bundler.infrastructure.fs import write_bytes_to_file, write_text_to_file
from app_bundler.schemas import BundleSettings

PKG_INFO_CONTENT = "APPL????"


def info_plist(settings: BundleSettings, icon_file: str | None) -> dict[str, object]:
    """Build the Info.plist dictionary for ``settings``."""
    plist: dict[str, object] = {
        "CFBundleDevelopmentRegion": "English",
        "CFBundleDisplayName": settings.name,
        "CFBundleExecutable": settings.binary_name,
        "CFBundleIdentifier": settings.identifier,
        "CFBundleInfoDictionaryVersion": "6.0",
        "CFBundleName": settings.name,
        "CFBundlePackageType": "APPL",
        "CFBundleShortVersionString": settings.version,
        "CFBundleVersion": settings.version,
        "CSResourcesFileMapped": True,
        "LSMinimumSystemVersion": settings.osx_minimum_system_version,
        "LSRequiresCarbon": True,
        "NSHighResolutionCapable": True,
    }
    if icon_file is not None:
        plist["CFBundleIconFile"] = icon_file
    if settings.copyright:
        plist["NSHumanReadableCopyright"] = settings.copyright
    if settings.category:
        plist["LSApplicationCategoryType"] = settings.category
    return plist


class MacAppBackend:
    """Emit a macOS application bundle."""

    platform = "osx"
    icon_format = "icns"

    def bundle_root(self, settings: BundleSettings) -> Path:
        return settings.output_dir / f"{settings.name}.app"

    def _contents(self, root: Path) -> Path:
        return root / "Contents"

    def create_skeleton(self, root: Path, settings: BundleSettings) -> None:
        del settings
        for sub in ("MacOS", "Resources"):
            (self._contents(root) / sub).mkdir(parents=True, exist_ok=True)

    def resource_dir(self, root: Path, settings: BundleSettings) -> Path:
        del settings
        return self._contents(root) / "Resources"

    def binary_dir(self, root: Path, settings: BundleSettings) -> Path:
        del settings
        return self._contents(root) / "MacOS"

    def icon_path(self, root: Path, settings: BundleSettings) -> Path:
        return self.resource_dir(root, settings) / f"{settings.name}.icns"

    def write_metadata(
        self,
        root: Path,
        settings: BundleSettings,
        icon_path: Path | None,
    ) -> None:
        plist = info_plist(settings, icon_path.name if icon_path else None)
        write_bytes_to_file(self._contents(root) / "Info.plist", plistlib.dumps(plist))

    def finalize(self, root: Path, settings: BundleSettings) -> None:
        del settings
        write_text_to_file(self._contents(root) / "PkgInfo", PKG_INFO_CONTENT)
