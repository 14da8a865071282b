"""Layered resolution of manifest fields into ``BundleSettings``.

Each field is resolved through an explicit precedence chain: platform
override, manifest value, package default, computed default. The first
present value wins. ``identifier`` has no default and its absence is a
configuration error.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TypeVar

from pydantic import ValidationError

from app_bundler.errors import ConfigError, InvalidIdentifierError, MissingFieldError
from app_bundler.schemas import (
    BundleSettings,
    ManifestFields,
    PackageDefaults,
    PlatformOverrides,
    is_valid_identifier,
)
from app_bundler.types import PLATFORMS, ManifestMap, PlatformTag

T = TypeVar("T")

DEFAULT_VERSION = "0.0.0"
DEFAULT_OUTPUT_SUBDIR = Path("target") / "bundle"


def _first_present(*values: T | None) -> T | None:
    for value in values:
        if value is not None:
            return value
    return None


def _parse_manifest(manifest_fields: ManifestMap | ManifestFields) -> ManifestFields:
    if isinstance(manifest_fields, ManifestFields):
        return manifest_fields
    try:
        return ManifestFields.model_validate(dict(manifest_fields))
    except ValidationError as exc:
        raise ConfigError(f"Invalid bundle manifest: {exc}") from exc


def _parse_defaults(
    package_defaults: Mapping[str, object] | PackageDefaults | None,
) -> PackageDefaults:
    if package_defaults is None:
        return PackageDefaults()
    if isinstance(package_defaults, PackageDefaults):
        return package_defaults
    try:
        return PackageDefaults.model_validate(dict(package_defaults))
    except ValidationError as exc:
        raise ConfigError(f"Invalid package defaults: {exc}") from exc


def _anchor(path: Path | None, root: Path) -> Path | None:
    if path is None or path.is_absolute():
        return path
    return root / path


def resolve_settings(
    manifest_fields: ManifestMap | ManifestFields,
    package_defaults: Mapping[str, object] | PackageDefaults | None,
    platform: str,
    *,
    project_root: Path | None = None,
) -> BundleSettings:
    """Resolve layered bundle configuration into one immutable value.

    Parameters
    ----------
    manifest_fields : Mapping[str, object] | ManifestFields
        Bundle section of the project manifest.
    package_defaults : Mapping[str, object] | PackageDefaults | None
        Package-level metadata (name, version, description, authors).
    platform : str
        Target platform tag (``osx``, ``deb`` or ``msi``).
    project_root : Path | None, optional
        Directory that relative manifest paths are anchored to. Defaults to
        the current working directory.

    Returns
    -------
    BundleSettings
        Resolved settings. Identical inputs always produce equal values.

    Raises
    ------
    ConfigError
        If the platform is unknown, a field is malformed, or a required
        field is missing.
    InvalidIdentifierError
        If the identifier is not a reverse-DNS string.
    """
    if platform not in PLATFORMS:
        raise ConfigError(
            f"Unknown platform '{platform}'. Expected one of: {', '.join(PLATFORMS)}"
        )
    target: PlatformTag = platform  # type: ignore[assignment]

    manifest = _parse_manifest(manifest_fields)
    defaults = _parse_defaults(package_defaults)
    override = manifest.platforms.get(target) or PlatformOverrides()
    root = (project_root or Path.cwd()).resolve()

    def pick(field: str) -> object | None:
        return _first_present(getattr(override, field), getattr(manifest, field))

    identifier = pick("identifier")
    if identifier is None or identifier == "":
        raise MissingFieldError("identifier")
    if not isinstance(identifier, str) or not is_valid_identifier(identifier):
        raise InvalidIdentifierError(identifier)

    binary = _anchor(pick("binary"), root)  # type: ignore[arg-type]
    name = _first_present(
        pick("name"),
        defaults.name,
        binary.stem if binary is not None else None,
    )
    if not name:
        raise MissingFieldError("name")

    output_dir = _anchor(pick("output_dir"), root) or (
        root / DEFAULT_OUTPUT_SUBDIR / target
    )

    try:
        return BundleSettings(
            name=name,
            identifier=identifier,
            version=_first_present(pick("version"), defaults.version, DEFAULT_VERSION),
            copyright=pick("copyright"),
            short_description=_first_present(
                pick("short_description"), defaults.description
            ),
            long_description=pick("long_description"),
            resources=_first_present(pick("resources"), ()),
            icon=_first_present(pick("icon"), ()),
            platform=target,
            output_dir=output_dir,
            project_root=root,
            binary=binary,
            category=pick("category"),
            authors=defaults.authors,
            osx_minimum_system_version=_first_present(
                pick("osx_minimum_system_version"), "10.13"
            ),
            deb_depends=_first_present(pick("deb_depends"), ()),
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid bundle settings: {exc}") from exc
