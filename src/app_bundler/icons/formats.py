"""Icon container slot tables and the ICNS packer."""

from __future__ import annotations

import struct
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from app_bundler.types import Density, IconFormatName, PlatformTag


@dataclass(frozen=True)
class IconSlot:
    """One mandatory (size, resolution class) entry of a container format."""

    size: int
    density: Density = "standard"
    code: str = ""

    @property
    def scale(self) -> int:
        return 2 if self.density == "double" else 1

    @property
    def pixel_size(self) -> int:
        """Edge length in pixels the slot bitmap must have."""
        return self.size * self.scale


# OSType codes are the PNG-payload entries understood since macOS 10.7.
ICNS_SLOTS: tuple[IconSlot, ...] = (
    IconSlot(16, "standard", "icp4"),
    IconSlot(32, "standard", "icp5"),
    IconSlot(128, "standard", "ic07"),
    IconSlot(256, "standard", "ic08"),
    IconSlot(512, "standard", "ic09"),
    IconSlot(16, "double", "ic11"),
    IconSlot(32, "double", "ic12"),
    IconSlot(128, "double", "ic13"),
    IconSlot(256, "double", "ic14"),
    IconSlot(512, "double", "ic10"),
)

ICO_SLOTS: tuple[IconSlot, ...] = tuple(
    IconSlot(size) for size in (16, 24, 32, 48, 64, 128, 256)
)

PNG_SLOTS: tuple[IconSlot, ...] = (IconSlot(256),)

SLOT_TABLES: Mapping[IconFormatName, tuple[IconSlot, ...]] = MappingProxyType(
    {
        "icns": ICNS_SLOTS,
        "ico": ICO_SLOTS,
        "png": PNG_SLOTS,
    }
)

PLATFORM_ICON_FORMATS: Mapping[PlatformTag, IconFormatName] = MappingProxyType(
    {
        "osx": "icns",
        "msi": "ico",
        "deb": "png",
    }
)

_ICNS_MAGIC = b"icns"
_ICNS_HEADER = struct.Struct(">4sI")


def pack_icns(entries: Sequence[tuple[str, bytes]]) -> bytes:
    """Pack ``(ostype, png_bytes)`` pairs into an ICNS container.

    Each block is the 4-byte OSType, a big-endian length that includes the
    8-byte block header, then the payload. The file header uses the same
    layout with the ``icns`` magic and the total file length.
    """
    body = bytearray()
    for code, payload in entries:
        body += _ICNS_HEADER.pack(code.encode("ascii"), _ICNS_HEADER.size + len(payload))
        body += payload
    return _ICNS_HEADER.pack(_ICNS_MAGIC, _ICNS_HEADER.size + len(body)) + bytes(body)
