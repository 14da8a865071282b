"""Shared type aliases for bundler modules."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Literal

type PlatformTag = Literal["osx", "deb", "msi"]
type IconFormatName = Literal["icns", "ico", "png"]
type Density = Literal["standard", "double"]
type SlotMethod = Literal["exact", "downsample", "upsample"]

PLATFORMS: tuple[PlatformTag, ...] = ("osx", "deb", "msi")

type ManifestScalar = str | int | float | bool | None | Path
type ManifestValue = (
    ManifestScalar
    | list["ManifestValue"]
    | tuple["ManifestValue", ...]
    | dict[str, "ManifestValue"]
)
type ManifestMap = Mapping[str, ManifestValue]
