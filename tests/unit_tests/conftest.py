"""Shared helpers for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from app_bundler.schemas import BundleSettings
from app_bundler.settings import resolve_settings

type SettingsFactory = Callable[..., BundleSettings]


@pytest.fixture
def make_settings(tmp_path: Path) -> SettingsFactory:
    """Return a factory resolving settings for a project under ``tmp_path``."""

    def _make(platform: str = "osx", **fields: object) -> BundleSettings:
        manifest = {
            "identifier": "com.example.foobar",
            "name": "FooBar",
            "version": "1.2.3",
            **fields,
        }
        return resolve_settings(
            manifest,
            {"authors": ["Jane Doe <jane@example.com>"]},
            platform,
            project_root=tmp_path,
        )

    return _make
