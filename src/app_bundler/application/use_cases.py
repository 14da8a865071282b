"""Application use-cases orchestrating bundle builds."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from app_bundler.adapters.icons import PillowIconCatalogLoader, PillowIconRenderer
from app_bundler.adapters.layout import BackendBundleBuilder, GlobResourceCollector
from app_bundler.application.options import DEFAULT_MAX_WORKERS, BuildOptions
from app_bundler.application.ports import (
    BundleBuilder,
    IconCatalogLoader,
    IconRenderer,
    ResourceCollector,
)
from app_bundler.application.results import BundleResult, IconSummary
from app_bundler.errors import NoIconsProvidedError
from app_bundler.icons.formats import PLATFORM_ICON_FORMATS
from app_bundler.schemas import BundleSettings, ManifestFields, PackageDefaults
from app_bundler.settings import resolve_settings
from app_bundler.types import ManifestMap

logger = logging.getLogger(__name__)


def _render_icon(
    settings: BundleSettings,
    options: BuildOptions,
    loader: IconCatalogLoader,
    renderer: IconRenderer,
    warnings: list[str],
) -> tuple[bytes | None, IconSummary | None]:
    target_format = PLATFORM_ICON_FORMATS.get(settings.platform)
    if target_format is None:
        return None, None

    catalog = loader.load(
        settings.icon,
        settings.project_root,
        strict=options.strict_icons,
        max_workers=options.max_workers,
    )
    try:
        plan = renderer.plan(catalog, target_format)
    except NoIconsProvidedError as exc:
        logger.warning("%s Building without an icon.", exc)
        warnings.append(str(exc))
        return None, None

    for slot in plan.synthesized_slots:
        warnings.append(
            f"Icon slot {slot.size}x{slot.size} ({slot.density}) was upsampled "
            "from a smaller source; provide a larger image for best quality."
        )
    summary = IconSummary(
        target_format=target_format,
        slot_count=len(plan.entries),
        synthesized_count=len(plan.synthesized_slots),
    )
    return renderer.render(plan), summary


def bundle_settings(
    settings: BundleSettings,
    *,
    options: BuildOptions,
    catalog_loader: IconCatalogLoader | None = None,
    icon_renderer: IconRenderer | None = None,
    resource_collector: ResourceCollector | None = None,
    builder: BundleBuilder | None = None,
) -> BundleResult:
    """Use-case: build a bundle from already resolved settings.

    Icons are rendered, resources collected and only then is anything
    written, so catalog and collector errors never leave partial output.
    """
    catalog_loader = catalog_loader or PillowIconCatalogLoader()
    icon_renderer = icon_renderer or PillowIconRenderer()
    resource_collector = resource_collector or GlobResourceCollector()
    builder = builder or BackendBundleBuilder()

    warnings: list[str] = []
    icon_bytes, icon_summary = _render_icon(
        settings, options, catalog_loader, icon_renderer, warnings
    )
    resources = resource_collector.collect(settings.resources, settings.project_root)
    artifact = builder.build(
        settings,
        icon_bytes,
        resources,
        max_workers=options.max_workers,
    )
    return BundleResult(artifact=artifact, warnings=tuple(warnings), icon=icon_summary)


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
    """Use-case: resolve settings, then build the bundle.

    Resolution happens before any filesystem access, so a configuration
    error never creates output.
    """
    settings = resolve_settings(
        manifest_fields,
        package_defaults,
        platform,
        project_root=project_root,
    )
    return bundle_settings(
        settings,
        options=options,
        catalog_loader=catalog_loader,
        icon_renderer=icon_renderer,
        resource_collector=resource_collector,
        builder=builder,
    )


def build_options(
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    strict_icons: bool = False,
) -> BuildOptions:
    """Build typed option object from command/API params."""
    return BuildOptions(max_workers=max(1, max_workers), strict_icons=strict_icons)
