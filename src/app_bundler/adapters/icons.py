"""Icon adapters implementing application ports."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from app_bundler.icons.catalog import IconCandidate, load_catalog
from app_bundler.icons.pipeline import IconPlan, plan_icons, render_icons
from app_bundler.types import IconFormatName


class PillowIconCatalogLoader:
    """Decode icon sources with Pillow."""

    def load(
        self,
        patterns: Iterable[str],
        project_root: Path,
        *,
        strict: bool = False,
        max_workers: int = 4,
    ) -> tuple[IconCandidate, ...]:
        return load_catalog(
            patterns, project_root, strict=strict, max_workers=max_workers
        )


class PillowIconRenderer:
    """Plan and pack icon containers with numpy resampling and Pillow PNG encoding."""

    def plan(
        self, catalog: Sequence[IconCandidate], target_format: IconFormatName
    ) -> IconPlan:
        return plan_icons(catalog, target_format)

    def render(self, plan: IconPlan) -> bytes:
        return render_icons(plan)
