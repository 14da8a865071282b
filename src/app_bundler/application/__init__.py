"""Application-layer use-cases and option objects."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from app_bundler.application.options import BuildOptions
from app_bundler.application.ports import (
    BundleBuilder,
    IconCatalogLoader,
    IconRenderer,
    ResourceCollector,
)
from app_bundler.application.results import BundleArtifact, BundleResult, IconSummary
from app_bundler.schemas import BundleSettings, ManifestFields, PackageDefaults
from app_bundler.types import ManifestMap


def build_options(*, max_workers: int = 4, strict_icons: bool = False) -> BuildOptions:
    """Build typed run options via lazy use-case import."""
    from app_bundler.application.use_cases import build_options as _impl

    return _impl(max_workers=max_workers, strict_icons=strict_icons)


def bundle_project(
    *,
    manifest_fields: ManifestMap | ManifestFields,
    package_defaults: Mapping[str, object] | PackageDefaults | None,
    platform: str,
    options: BuildOptions,
    project_root: Path | None = None,
    catalog_loader: IconCatalogLoader | None = None,
    icon_renderer: IconRenderer | None = None,
    resource_collector: ResourceCollector | None = None,
    builder: BundleBuilder | None = None,
) -> BundleResult:
    """Resolve settings and build a bundle via lazy use-case import."""
    from app_bundler.application.use_cases import bundle_project as _impl

    return _impl(
        manifest_fields=manifest_fields,
        package_defaults=package_defaults,
        platform=platform,
        options=options,
        project_root=project_root,
        catalog_loader=catalog_loader,
        icon_renderer=icon_renderer,
        resource_collector=resource_collector,
        builder=builder,
    )


def bundle_settings(
    settings: BundleSettings,
    *,
    options: BuildOptions,
    catalog_loader: IconCatalogLoader | None = None,
    icon_renderer: IconRenderer | None = None,
    resource_collector: ResourceCollector | None = None,
    builder: BundleBuilder | None = None,
) -> BundleResult:
    """Build a bundle from resolved settings via lazy use-case import."""
    from app_bundler.application.use_cases import bundle_settings as _impl

    return _impl(
        settings,
        options=options,
        catalog_loader=catalog_loader,
        icon_renderer=icon_renderer,
        resource_collector=resource_collector,
        builder=builder,
    )


__all__ = [
    "BuildOptions",
    "BundleArtifact",
    "BundleResult",
    "IconSummary",
    "build_options",
    "bundle_project",
    "bundle_settings",
]
