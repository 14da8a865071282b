"""Debian package tree backend.

Produces the directory handed to ``dpkg-deb --build``::

    name_1.0.0_amd64/
        DEBIAN/control
        DEBIAN/md5sums
        usr/bin/<binary>
        usr/lib/<package>/...
        usr/share/applications/<package>.desktop
        usr/share/icons/hicolor/256x256/apps/<package>.png
"""

from __future__ import annotations

import math
import platform as host_platform
import re
from pathlib import Path

from app_bundler.infrastructure.fs import digest_file, write_text_to_file
from app_bundler.schemas import BundleSettings

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "i386",
    "i686": "i386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armhf",
}
_INVALID_PACKAGE_CHARS = re.compile(r"[^a-z0-9.+-]+")

ICON_THEME_DIR = Path("usr/share/icons/hicolor/256x256/apps")


def debian_arch(machine: str | None = None) -> str:
    """Map a machine name to its Debian architecture."""
    machine = (machine or host_platform.machine()).lower()
    return _ARCH_ALIASES.get(machine, machine)


def debian_package_name(name: str) -> str:
    """Normalise a bundle name into a valid Debian package name."""
    normalized = _INVALID_PACKAGE_CHARS.sub("-", name.lower()).strip("-.+")
    return normalized or "app"


def _format_description(settings: BundleSettings) -> str:
    summary = settings.short_description or settings.name
    lines = [f"Description: {summary}"]
    for line in (settings.long_description or "").strip().splitlines():
        lines.append(f" {line}" if line.strip() else " .")
    return "\n".join(lines)


def _installed_size_kib(root: Path) -> int:
    total = sum(
        path.stat().st_size
        for path in root.rglob("*")
        if path.is_file() and "DEBIAN" not in path.relative_to(root).parts
    )
    return math.ceil(total / 1024)


def control_file(settings: BundleSettings, installed_size_kib: int, arch: str) -> str:
    """Render ``DEBIAN/control`` for ``settings``."""
    fields = [
        f"Package: {debian_package_name(settings.name)}",
        f"Version: {settings.version}",
        f"Architecture: {arch}",
        f"Installed-Size: {installed_size_kib}",
        f"Maintainer: {', '.join(settings.authors) or 'Unknown'}",
        "Priority: optional",
    ]
    if settings.deb_depends:
        fields.append(f"Depends: {', '.join(settings.deb_depends)}")
    fields.append(_format_description(settings))
    return "\n".join(fields) + "\n"


def desktop_entry(settings: BundleSettings, has_icon: bool) -> str:
    """Render the freedesktop ``.desktop`` launcher entry."""
    lines = [
        "[Desktop Entry]",
        "Encoding=UTF-8",
        f"Exec={settings.binary_name}",
        f"Name={settings.name}",
        "Terminal=false",
        "Type=Application",
    ]
    if has_icon:
        lines.append(f"Icon={debian_package_name(settings.name)}")
    if settings.short_description:
        lines.append(f"Comment={settings.short_description}")
    if settings.category:
        lines.append(f"Categories={settings.category};")
    return "\n".join(lines) + "\n"


class DebianBackend:
    """Emit a Debian package staging tree."""

    platform = "deb"
    icon_format = "png"

    def __init__(self, arch: str | None = None) -> None:
        self.arch = arch or debian_arch()

    def bundle_root(self, settings: BundleSettings) -> Path:
        package = debian_package_name(settings.name)
        return settings.output_dir / f"{package}_{settings.version}_{self.arch}"

    def create_skeleton(self, root: Path, settings: BundleSettings) -> None:
        for directory in (
            root / "DEBIAN",
            self.binary_dir(root, settings),
            self.resource_dir(root, settings),
            root / "usr/share/applications",
            root / ICON_THEME_DIR,
        ):
            directory.mkdir(parents=True, exist_ok=True)

    def resource_dir(self, root: Path, settings: BundleSettings) -> Path:
        return root / "usr/lib" / debian_package_name(settings.name)

    def binary_dir(self, root: Path, settings: BundleSettings) -> Path:
        del settings
        return root / "usr/bin"

    def icon_path(self, root: Path, settings: BundleSettings) -> Path:
        return root / ICON_THEME_DIR / f"{debian_package_name(settings.name)}.png"

    def write_metadata(
        self,
        root: Path,
        settings: BundleSettings,
        icon_path: Path | None,
    ) -> None:
        package = debian_package_name(settings.name)
        write_text_to_file(
            root / "usr/share/applications" / f"{package}.desktop",
            desktop_entry(settings, has_icon=icon_path is not None),
        )
        write_text_to_file(
            root / "DEBIAN/control",
            control_file(settings, _installed_size_kib(root), self.arch),
        )

    def finalize(self, root: Path, settings: BundleSettings) -> None:
        del settings
        lines = []
        for path in sorted(root.rglob("*")):
            relative = path.relative_to(root)
            if not path.is_file() or relative.parts[0] == "DEBIAN":
                continue
            lines.append(f"{digest_file(path)}  {relative.as_posix()}\n")
        write_text_to_file(root / "DEBIAN/md5sums", "".join(lines))
