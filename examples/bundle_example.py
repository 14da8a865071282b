#!/usr/bin/env python3
"""Examples for bundling a small demo project for every platform."""

from __future__ import annotations

import plistlib
from pathlib import Path

import numpy as np
from PIL import Image

from app_bundler.application import build_options, bundle_project
from app_bundler.types import PLATFORMS

PROJECT = Path("outputs/demo-project")


def _radial_icon(edge: int) -> Image.Image:
    grid = np.linspace(-1.0, 1.0, edge, dtype=np.float32)
    radius = np.sqrt(grid[None, :] ** 2 + grid[:, None] ** 2)
    pixels = np.zeros((edge, edge, 4), dtype=np.uint8)
    pixels[..., 0] = np.clip(255 * (1.0 - radius), 0, 255)
    pixels[..., 2] = 200
    pixels[..., 3] = np.where(radius <= 1.0, 255, 0)
    return Image.fromarray(pixels)


def _prepare_project() -> Path:
    (PROJECT / "assets").mkdir(parents=True, exist_ok=True)
    (PROJECT / "assets" / "greeting.txt").write_text("hello\n", encoding="utf-8")
    _radial_icon(512).save(PROJECT / "icon.png")
    _radial_icon(1024).save(PROJECT / "icon@2x.png")
    binary = PROJECT / "target" / "release" / "demo"
    binary.parent.mkdir(parents=True, exist_ok=True)
    binary.write_text("#!/bin/sh\necho demo\n", encoding="utf-8")
    binary.chmod(0o755)
    return PROJECT


def example_all_platforms() -> None:
    """Bundle the demo project for macOS, Debian and Windows."""
    print("\n" + "=" * 60)
    print("Example: bundle for every platform")
    print("=" * 60)

    root = _prepare_project()
    manifest = {
        "name": "Demo",
        "identifier": "org.example.demo",
        "version": "0.1.0",
        "binary": "target/release/demo",
        "resources": ["assets"],
        "icon": ["icon.png", "icon@2x.png"],
        "platforms": {"deb": {"name": "demo"}},
    }
    for platform in PLATFORMS:
        result = bundle_project(
            manifest_fields=manifest,
            package_defaults={"authors": ["Demo Maintainers <demo@example.org>"]},
            platform=platform,
            options=build_options(),
            project_root=root,
        )
        for warning in result.warnings:
            print(f"  ! {warning}")
        print(f"PASS: {platform} -> {result.artifact.root}")

    plist_path = root / "target/bundle/osx/Demo.app/Contents/Info.plist"
    with plist_path.open("rb") as handle:
        if plistlib.load(handle)["CFBundleIdentifier"] != "org.example.demo":
            raise SystemExit("FAIL: Info.plist carries the wrong identifier.")


if __name__ == "__main__":
    example_all_platforms()
