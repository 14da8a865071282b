"""Top-level API for building platform-native application bundles."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from app_bundler.types import IconFormatName, ManifestMap

__version__ = "0.1.0"


def resolve_settings(
    manifest_fields: ManifestMap,
    package_defaults: Mapping[str, object] | None,
    platform: str,
    *,
    project_root: Path | None = None,
):
    """Resolve layered manifest configuration into ``BundleSettings``.

    Parameters
    ----------
    manifest_fields : Mapping[str, object]
        Bundle section of the manifest.
    package_defaults : Mapping[str, object] | None
        Package-level ``name``, ``version``, ``description`` and ``authors``.
    platform : str
        Target platform tag: ``osx``, ``deb`` or ``msi``.
    project_root : Path | None, optional
        Directory relative paths are anchored to.

    Returns
    -------
    BundleSettings
        Immutable resolved settings.
    """
    from .settings import resolve_settings as _impl

    return _impl(
        manifest_fields,
        package_defaults,
        platform,
        project_root=project_root,
    )


def bundle_manifest_file(
    manifest_path: Path,
    platform: str,
    *,
    binary: Path | None = None,
    output_dir: Path | None = None,
    strict_icons: bool = False,
    max_workers: int = 4,
):
    """Build a bundle from a TOML manifest.

    Parameters
    ----------
    manifest_path : Path
        Manifest with a ``[package.metadata.bundle]`` or ``[bundle]`` table.
    platform : str
        Target platform tag.
    binary : Path | None, optional
        Executable to include; overrides the manifest's ``binary``.
    output_dir : Path | None, optional
        Output directory; overrides the manifest's ``output_dir``.
    strict_icons : bool, default=False
        Fail on any undecodable icon instead of skipping it.
    max_workers : int, default=4
        Thread pool size for decoding and copying.

    Returns
    -------
    BundleResult
        Artifact plus any warnings recorded during the build.
    """
    from .api import bundle_manifest_file as _impl

    return _impl(
        manifest_path,
        platform,
        binary=binary,
        output_dir=output_dir,
        strict_icons=strict_icons,
        max_workers=max_workers,
    )


def render_icon_file(
    sources: Sequence[Path],
    output_path: Path,
    target_format: IconFormatName,
    *,
    strict: bool = False,
) -> Path:
    """Render an ``icns``/``ico``/``png`` icon container from image files."""
    from .api import render_icon_file as _impl

    return _impl(sources, output_path, target_format, strict=strict)


__all__ = [
    "bundle_manifest_file",
    "render_icon_file",
    "resolve_settings",
]
