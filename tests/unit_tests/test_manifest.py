"""Unit tests for manifest file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from app_bundler.errors import ConfigError
from app_bundler.manifest import load_manifest

CARGO_MANIFEST = """
[package]
name = "foobar"
version = "0.3.1"
description = "A tool that does foo and bar."
authors = ["Jane Doe <jane@example.com>"]

[package.metadata.bundle]
name = "FooBar"
identifier = "com.example.foobar"
icon = ["icon.png", "icon@2x.png"]
resources = ["assets"]

[package.metadata.bundle.platforms.deb]
name = "foobar"
"""


def test_cargo_style_manifest(tmp_path: Path) -> None:
    """Read the bundle table from package metadata and keep package defaults."""
    path = tmp_path / "Cargo.toml"
    path.write_text(CARGO_MANIFEST, encoding="utf-8")

    manifest = load_manifest(path)

    assert manifest.bundle["identifier"] == "com.example.foobar"
    assert manifest.bundle["platforms"] == {"deb": {"name": "foobar"}}
    assert manifest.package["version"] == "0.3.1"
    assert "metadata" not in manifest.package
    assert manifest.project_root == tmp_path.resolve()


def test_top_level_bundle_table(tmp_path: Path) -> None:
    """Accept a standalone [bundle] table."""
    path = tmp_path / "bundle.toml"
    path.write_text('[bundle]\nidentifier = "com.example.app"\n', encoding="utf-8")

    manifest = load_manifest(path)

    assert manifest.bundle == {"identifier": "com.example.app"}
    assert manifest.package == {}


def test_missing_manifest(tmp_path: Path) -> None:
    """Raise ConfigError for a missing file."""
    with pytest.raises(ConfigError, match="Manifest not found"):
        load_manifest(tmp_path / "Cargo.toml")


def test_invalid_toml(tmp_path: Path) -> None:
    """Raise ConfigError for unparsable TOML."""
    path = tmp_path / "Cargo.toml"
    path.write_text("[package\nname = ", encoding="utf-8")

    with pytest.raises(ConfigError, match="Unable to read manifest"):
        load_manifest(path)


def test_manifest_without_bundle_table(tmp_path: Path) -> None:
    """Raise ConfigError when no bundle table exists."""
    path = tmp_path / "Cargo.toml"
    path.write_text('[package]\nname = "foobar"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="has no"):
        load_manifest(path)
