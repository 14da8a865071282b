"""Pydantic schemas for manifest input and resolved bundle settings."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app_bundler.types import PLATFORMS, PlatformTag

_IDENTIFIER_SEGMENT = re.compile(r"[A-Za-z0-9_]+")
_PATH_SEPARATORS = ("/", "\\", "\0")


def is_valid_identifier(value: str) -> bool:
    """Return ``True`` for reverse-DNS identifiers such as ``com.example.app``.

    Parameters
    ----------
    value : str
        Candidate identifier.

    Returns
    -------
    bool
        ``True`` when ``value`` has at least two dot-separated segments and
        every segment consists of ASCII letters, digits or underscores.
    """
    segments = value.split(".")
    if len(segments) < 2:
        return False
    return all(_IDENTIFIER_SEGMENT.fullmatch(segment) for segment in segments)


def _check_path_component(field: str, value: str) -> str:
    # Bundle roots and icon files are named after these values.
    if value in (".", "..") or any(sep in value for sep in _PATH_SEPARATORS):
        raise ValueError(f"{field} '{value}' must not contain path separators or be '.' or '..'")
    return value


def _as_pattern_tuple(value: object) -> object:
    if isinstance(value, str):
        return (value,)
    return value


class _BundleFields(BaseModel):
    """Bundle fields that may appear at manifest or platform level."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    identifier: str | None = None
    version: str | None = None
    icon: tuple[str, ...] | None = None
    resources: tuple[str, ...] | None = None
    copyright: str | None = None
    short_description: str | None = None
    long_description: str | None = None
    script: str | None = None
    binary: Path | None = None
    category: str | None = None
    osx_minimum_system_version: str | None = None
    deb_depends: tuple[str, ...] | None = None
    output_dir: Path | None = None

    @field_validator("icon", "resources", "deb_depends", mode="before")
    @classmethod
    def _accept_single_pattern(cls, value: object) -> object:
        return _as_pattern_tuple(value)


class PlatformOverrides(_BundleFields):
    """Fields overridden for a single target platform."""


class ManifestFields(_BundleFields):
    """Validated bundle section of a project manifest."""

    platforms: dict[str, PlatformOverrides] = Field(default_factory=dict)

    @field_validator("platforms")
    @classmethod
    def _validate_platform_keys(
        cls, value: dict[str, PlatformOverrides]
    ) -> dict[str, PlatformOverrides]:
        unknown = sorted(set(value) - set(PLATFORMS))
        if unknown:
            raise ValueError(
                f"unknown platform override(s): {', '.join(unknown)}; "
                f"expected one of {', '.join(PLATFORMS)}"
            )
        return value


class PackageDefaults(BaseModel):
    """Package-level metadata used when the manifest omits a field."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str | None = None
    version: str | None = None
    description: str | None = None
    authors: tuple[str, ...] = ()


class BundleSettings(BaseModel):
    """Fully resolved, immutable settings for one bundle build."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    identifier: str
    version: str
    copyright: str | None = None
    short_description: str | None = None
    long_description: str | None = None
    resources: tuple[str, ...] = ()
    icon: tuple[str, ...] = ()
    platform: PlatformTag
    output_dir: Path
    project_root: Path
    binary: Path | None = None
    category: str | None = None
    authors: tuple[str, ...] = ()
    osx_minimum_system_version: str = "10.13"
    deb_depends: tuple[str, ...] = ()

    @field_validator("identifier")
    @classmethod
    def _validate_identifier(cls, value: str) -> str:
        if not is_valid_identifier(value):
            raise ValueError(f"invalid bundle identifier '{value}'")
        return value

    @field_validator("name", "version")
    @classmethod
    def _validate_path_component(cls, value: str, info: ValidationInfo) -> str:
        return _check_path_component(info.field_name or "value", value)

    @property
    def binary_name(self) -> str:
        """File name of the bundled executable."""
        if self.binary is not None:
            return self.binary.name
        return self.name
