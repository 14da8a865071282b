"""Public file-based bundling API (delegates to application use-cases)."""

from __future__ import annotations

import glob
from collections.abc import Sequence
from pathlib import Path

from app_bundler.application.results import BundleResult
from app_bundler.application.use_cases import build_options, bundle_project
from app_bundler.icons.catalog import load_catalog
from app_bundler.icons.pipeline import plan_icons, render_icons
from app_bundler.infrastructure.fs import write_bytes_to_file
from app_bundler.manifest import load_manifest
from app_bundler.types import IconFormatName


def bundle_manifest_file(
    manifest_path: Path,
    platform: str,
    *,
    binary: Path | None = None,
    output_dir: Path | None = None,
    strict_icons: bool = False,
    max_workers: int = 4,
) -> BundleResult:
    """Bundle the project described by a TOML manifest.

    ``binary`` and ``output_dir`` override the manifest values; relative
    manifest paths are anchored at the manifest's directory.
    """
    manifest = load_manifest(manifest_path)
    fields = dict(manifest.bundle)
    if binary is not None:
        fields["binary"] = binary.resolve()
    if output_dir is not None:
        fields["output_dir"] = output_dir.resolve()
    return bundle_project(
        manifest_fields=fields,
        package_defaults=manifest.package,
        platform=platform,
        options=build_options(max_workers=max_workers, strict_icons=strict_icons),
        project_root=manifest.project_root,
    )


def render_icon_file(
    sources: Sequence[Path],
    output_path: Path,
    target_format: IconFormatName,
    *,
    strict: bool = False,
) -> Path:
    """Render an icon container from image files and write it to disk."""
    patterns = [glob.escape(str(source.resolve())) for source in sources]
    catalog = load_catalog(patterns, Path.cwd(), strict=strict)
    plan = plan_icons(catalog, target_format)
    return write_bytes_to_file(output_path, render_icons(plan))
