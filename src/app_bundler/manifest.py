"""Project manifest file loading."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from app_bundler.errors import ConfigError


@dataclass(frozen=True)
class LoadedManifest:
    """Raw bundle and package tables read from a manifest file."""

    path: Path
    bundle: dict[str, Any] = field(default_factory=dict)
    package: dict[str, Any] = field(default_factory=dict)

    @property
    def project_root(self) -> Path:
        return self.path.parent


def load_manifest(path: Path) -> LoadedManifest:
    """Read a TOML manifest.

    The bundle table is ``[package.metadata.bundle]`` (Cargo style) or a
    top-level ``[bundle]``; package defaults come from ``[package]``.

    Raises
    ------
    ConfigError
        If the file is missing, is not valid TOML, or has no bundle table.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Manifest not found: {path}") from exc
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Unable to read manifest {path}: {exc}") from exc

    package = dict(data.get("package", {}))
    metadata = package.pop("metadata", {}) or {}
    bundle = metadata.get("bundle", data.get("bundle"))
    if not isinstance(bundle, dict):
        raise ConfigError(
            f"Manifest {path} has no [package.metadata.bundle] or [bundle] table."
        )
    return LoadedManifest(path=path.resolve(), bundle=dict(bundle), package=package)
