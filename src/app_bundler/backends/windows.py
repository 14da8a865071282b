"""Windows installer (WiX source tree) backend.

Produces the inputs for ``candle``/``light``::

    Name-1.0.0-wix/
        Name.wxs
        Product.wxi     UpgradeCode / ProductCode defines
        Name.ico
        bin/            executable
        resources/      bundled resources
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path, PurePosixPath, PureWindowsPath

from app_bundler.identity import CURRENT_GUID_VERSION, identifier_guid
from app_bundler.infrastructure.fs import write_text_to_file
from app_bundler.schemas import BundleSettings

WIX_NAMESPACE = "http://schemas.microsoft.com/wix/2006/wi"
INCLUDE_FILE = "Product.wxi"
_MSI_VERSION = re.compile(r"\d+(?:\.\d+){0,3}")


def msi_version(version: str) -> str:
    """Return the numeric ``major.minor.build`` prefix MSI accepts."""
    match = _MSI_VERSION.match(version)
    return match.group(0) if match else "0.0.0"


def upgrade_code(settings: BundleSettings) -> str:
    """Stable across releases: derived from the identifier only."""
    return identifier_guid(settings.identifier)


def product_code(settings: BundleSettings) -> str:
    """Unique per release: derived from identifier and version."""
    return identifier_guid(f"{settings.identifier}/{settings.version}")


def _install_layout(root: Path) -> list[tuple[PurePosixPath, PurePosixPath]]:
    layout = []
    for top in ("bin", "resources"):
        base = root / top
        for path in sorted(base.rglob("*")):
            if path.is_file():
                source = PurePosixPath(path.relative_to(root).as_posix())
                install = PurePosixPath(path.relative_to(base).as_posix())
                layout.append((source, install))
    return layout


def wix_source(
    settings: BundleSettings,
    layout: list[tuple[PurePosixPath, PurePosixPath]],
    icon_file: str | None,
) -> str:
    """Render the WiX product description.

    Parameters
    ----------
    settings : BundleSettings
        Resolved bundle settings.
    layout : list[tuple[PurePosixPath, PurePosixPath]]
        ``(source, install)`` pairs relative to the bundle root and the
        install directory respectively.
    icon_file : str | None
        Icon file name relative to the bundle root.

    Returns
    -------
    str
        XML document text.
    """
    wix = ET.Element("Wix", xmlns=WIX_NAMESPACE)
    wix.append(ET.ProcessingInstruction("include", INCLUDE_FILE))
    product = ET.SubElement(
        wix,
        "Product",
        Id="$(var.ProductCode)",
        Name=settings.name,
        Language="1033",
        Version=msi_version(settings.version),
        Manufacturer=settings.authors[0] if settings.authors else settings.name,
        UpgradeCode="$(var.UpgradeCode)",
    )
    package_attrs = {
        "InstallerVersion": "200",
        "Compressed": "yes",
        "InstallScope": "perMachine",
        "Description": settings.short_description or settings.name,
    }
    comments = settings.long_description or settings.copyright
    if comments:
        package_attrs["Comments"] = comments
    ET.SubElement(product, "Package", package_attrs)
    ET.SubElement(
        product,
        "MajorUpgrade",
        DowngradeErrorMessage="A newer version of [ProductName] is already installed.",
    )
    ET.SubElement(product, "MediaTemplate", EmbedCab="yes")
    if icon_file is not None:
        ET.SubElement(product, "Icon", Id="ProductIcon", SourceFile=icon_file)
        ET.SubElement(product, "Property", Id="ARPPRODUCTICON", Value="ProductIcon")

    target = ET.SubElement(product, "Directory", Id="TARGETDIR", Name="SourceDir")
    program_files = ET.SubElement(target, "Directory", Id="ProgramFiles64Folder")
    install_dir = ET.SubElement(
        program_files, "Directory", Id="INSTALLDIR", Name=settings.name
    )
    directories: dict[PurePosixPath, ET.Element] = {PurePosixPath("."): install_dir}

    def directory_for(path: PurePosixPath) -> ET.Element:
        if path not in directories:
            parent = directory_for(path.parent)
            directories[path] = ET.SubElement(
                parent, "Directory", Id=f"dir{len(directories)}", Name=path.name
            )
        return directories[path]

    feature = ET.Element("Feature", Id="MainFeature", Title=settings.name, Level="1")
    for index, (source, install) in enumerate(layout):
        component = ET.SubElement(
            directory_for(install.parent), "Component", Id=f"cmp{index}", Guid="*"
        )
        ET.SubElement(
            component,
            "File",
            Id=f"fil{index}",
            Source=str(PureWindowsPath(source)),
            KeyPath="yes",
        )
        ET.SubElement(feature, "ComponentRef", Id=f"cmp{index}")
    product.append(feature)

    ET.indent(wix)
    return '<?xml version="1.0" encoding="utf-8"?>\n' + ET.tostring(
        wix, encoding="unicode"
    ) + "\n"


def product_include(settings: BundleSettings) -> str:
    """Render ``Product.wxi`` with the identifier-derived GUIDs."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<Include>\n"
        f'  <?define UpgradeCode = "{{{upgrade_code(settings)}}}" ?>\n'
        f'  <?define ProductCode = "{{{product_code(settings)}}}" ?>\n'
        f'  <?define GuidHashVersion = "{CURRENT_GUID_VERSION}" ?>\n'
        "</Include>\n"
    )


class WixInstallerBackend:
    """Emit a WiX installer source tree."""

    platform = "msi"
    icon_format = "ico"

    def bundle_root(self, settings: BundleSettings) -> Path:
        return settings.output_dir / f"{settings.name}-{settings.version}-wix"

    def create_skeleton(self, root: Path, settings: BundleSettings) -> None:
        self.binary_dir(root, settings).mkdir(parents=True, exist_ok=True)
        self.resource_dir(root, settings).mkdir(parents=True, exist_ok=True)

    def resource_dir(self, root: Path, settings: BundleSettings) -> Path:
        del settings
        return root / "resources"

    def binary_dir(self, root: Path, settings: BundleSettings) -> Path:
        del settings
        return root / "bin"

    def icon_path(self, root: Path, settings: BundleSettings) -> Path:
        return root / f"{settings.name}.ico"

    def write_metadata(
        self,
        root: Path,
        settings: BundleSettings,
        icon_path: Path | None,
    ) -> None:
        source = wix_source(
            settings,
            _install_layout(root),
            icon_path.name if icon_path else None,
        )
        write_text_to_file(root / f"{settings.name}.wxs", source)

    def finalize(self, root: Path, settings: BundleSettings) -> None:
        write_text_to_file(root / INCLUDE_FILE, product_include(settings))
