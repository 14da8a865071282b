"""Typed option objects shared across bundling use-cases."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class BuildOptions:
    """Run options that do not belong to the manifest."""

    max_workers: int = DEFAULT_MAX_WORKERS
    strict_icons: bool = False
