"""Shared pytest configuration, marker assignment and image fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

type ImageWriter = Callable[..., Path]


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        parts = set(Path(str(item.fspath)).parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


def _write_image(
    path: Path,
    width: int,
    height: int | None = None,
    color: tuple[int, int, int, int] = (220, 40, 40, 255),
    image_format: str = "PNG",
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", (width, height or width), color).save(path, format=image_format)
    return path


@pytest.fixture
def write_image() -> ImageWriter:
    """Return a helper writing a solid-colour RGBA image to disk."""
    return _write_image


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty project root inside the test's temporary directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root
