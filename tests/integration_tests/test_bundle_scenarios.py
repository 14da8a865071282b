"""Integration tests running full bundle builds on a sample project."""

from __future__ import annotations

import io
import plistlib
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest
from PIL import Image

from app_bundler.application import build_options, bundle_project
from app_bundler.api import bundle_manifest_file
from app_bundler.backends.windows import WIX_NAMESPACE
from app_bundler.errors import EscapesRootError, MissingFieldError
from app_bundler.identity import identifier_guid


@pytest.fixture
def project(project_dir: Path, write_image) -> Path:
    (project_dir / "assets").mkdir()
    (project_dir / "assets" / "a.txt").write_text("resource a", encoding="utf-8")
    write_image(project_dir / "icon.png", 512)
    write_image(project_dir / "icon@2x.png", 1024)
    binary = project_dir / "target" / "release" / "foobar"
    binary.parent.mkdir(parents=True)
    binary.write_bytes(b"\x7fELF fake executable")
    binary.chmod(0o755)
    return project_dir


def _bundle(project: Path, platform: str, **fields: object):
    manifest = {
        "identifier": "com.example.app",
        "name": "FooBar",
        "version": "1.0.0",
        "binary": "target/release/foobar",
        "resources": ["assets"],
        "icon": ["icon.png", "icon@2x.png"],
        **fields,
    }
    return bundle_project(
        manifest_fields=manifest,
        package_defaults={"authors": ["Jane Doe <jane@example.com>"]},
        platform=platform,
        options=build_options(max_workers=2),
        project_root=project,
    )


def test_osx_bundle_from_standard_and_retina_icons(project: Path) -> None:
    """Build a .app with resources, a two-density ICNS and Info.plist."""
    result = _bundle(project, "osx")

    contents = result.artifact.root / "Contents"
    resources = contents / "Resources"
    assert result.warnings == ()
    assert sorted(
        path.relative_to(resources).as_posix()
        for path in resources.rglob("*")
        if path.is_file()
    ) == ["FooBar.icns", "assets/a.txt"]
    assert (contents / "MacOS" / "foobar").stat().st_mode & 0o111

    with Image.open(io.BytesIO((resources / "FooBar.icns").read_bytes())) as icns:
        scales = {scale for _, _, scale in icns.icns.itersizes()}
    assert scales == {1, 2}

    with (contents / "Info.plist").open("rb") as handle:
        plist = plistlib.load(handle)
    assert plist["CFBundleIdentifier"] == "com.example.app"
    assert plist["CFBundleIconFile"] == "FooBar.icns"
    assert result.icon is not None
    assert result.icon.synthesized_count == 0


def test_missing_identifier_creates_no_output(project: Path) -> None:
    """Fail with MissingFieldError before creating the output directory."""
    with pytest.raises(MissingFieldError):
        bundle_project(
            manifest_fields={"name": "FooBar", "icon": ["icon.png"], "resources": ["assets"]},
            package_defaults=None,
            platform="osx",
            options=build_options(),
            project_root=project,
        )

    assert not (project / "target" / "bundle").exists()


def test_empty_icon_list_builds_without_icon(project: Path) -> None:
    """Complete the build with a warning and no icon when none is configured."""
    result = _bundle(project, "osx", icon=[])

    contents = result.artifact.root / "Contents"
    assert not list(contents.rglob("*.icns"))
    assert any("No icons provided" in warning for warning in result.warnings)
    with (contents / "Info.plist").open("rb") as handle:
        assert "CFBundleIconFile" not in plistlib.load(handle)


def test_escaping_resource_aborts_before_output(project: Path) -> None:
    """Reject resources outside the project root without writing output."""
    (project.parent / "secret.txt").write_text("secret", encoding="utf-8")

    with pytest.raises(EscapesRootError):
        _bundle(project, "deb", resources=["assets", "../secret.txt"])

    assert not (project / "target" / "bundle").exists()


def test_deb_tree_with_upsampled_icon(project: Path, write_image) -> None:
    """Build the Debian tree and warn when the icon must be upsampled."""
    write_image(project / "small.png", 64)

    result = _bundle(project, "deb", icon=["small.png"])

    root = result.artifact.root
    icon = root / "usr/share/icons/hicolor/256x256/apps/foobar.png"
    with Image.open(icon) as image:
        assert image.size == (256, 256)
    assert (root / "usr/bin/foobar").is_file()
    assert (root / "usr/lib/foobar/assets/a.txt").is_file()
    assert "Package: foobar" in (root / "DEBIAN/control").read_text(encoding="utf-8")
    md5sums = (root / "DEBIAN/md5sums").read_text(encoding="utf-8")
    assert "usr/lib/foobar/assets/a.txt" in md5sums
    assert len(result.warnings) == 1


def test_msi_tree_uses_identifier_guid(project: Path) -> None:
    """Build the WiX tree with an ICO icon and identifier-derived codes."""
    result = _bundle(project, "msi")

    root = result.artifact.root
    assert set(result.artifact.entries) == {
        "FooBar.ico",
        "FooBar.wxs",
        "Product.wxi",
        "bin",
        "resources",
    }
    with Image.open(root / "FooBar.ico") as ico:
        assert (256, 256) in ico.ico.sizes()
    include = (root / "Product.wxi").read_text(encoding="utf-8")
    assert identifier_guid("com.example.app") in include

    wix = ET.fromstring((root / "FooBar.wxs").read_bytes())
    sources = {
        element.get("Source") for element in wix.iter(f"{{{WIX_NAMESPACE}}}File")
    }
    assert sources == {"bin\\foobar", "resources\\assets\\a.txt"}


def test_platform_overrides_from_manifest_file(project: Path) -> None:
    """Bundle from a TOML manifest using a platform-specific override."""
    manifest = project / "Cargo.toml"
    manifest.write_text(
        """
[package]
name = "foobar"
version = "0.3.1"

[package.metadata.bundle]
name = "FooBar"
identifier = "com.example.foobar"
resources = ["assets"]

[package.metadata.bundle.platforms.deb]
name = "foobar-cli"
""",
        encoding="utf-8",
    )

    deb = bundle_manifest_file(manifest, "deb", binary=project / "target/release/foobar")
    osx = bundle_manifest_file(manifest, "osx", output_dir=project / "dist")

    assert deb.artifact.root.name.startswith("foobar-cli_0.3.1_")
    assert deb.artifact.root.parent == project.resolve() / "target" / "bundle" / "deb"
    assert osx.artifact.root == project.resolve() / "dist" / "FooBar.app"
