"""Unit tests for icon planning, resampling and container rendering."""

from __future__ import annotations

import io
import logging
import struct
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from app_bundler.errors import NoIconsProvidedError, PipelineError
from app_bundler.icons.catalog import IconCandidate
from app_bundler.icons.formats import ICNS_SLOTS, ICO_SLOTS, PNG_SLOTS, SLOT_TABLES, IconSlot
from app_bundler.icons.pipeline import (
    DOWNSAMPLE_FILTER,
    encode_ico,
    plan_icons,
    render_icons,
    resample,
)


def _candidate(
    width: int,
    height: int | None = None,
    density: str = "standard",
    color: tuple[int, int, int, int] = (200, 50, 25, 255),
    name: str = "icon.png",
) -> IconCandidate:
    pixels = np.empty((height or width, width, 4), dtype=np.uint8)
    pixels[...] = color
    return IconCandidate(Path(name), pixels, density)  # type: ignore[arg-type]


@pytest.mark.parametrize("target_format", ["icns", "ico", "png"])
def test_plan_fills_every_slot_in_table_order(target_format: str) -> None:
    """Assign a candidate to every mandatory slot of the container."""
    plan = plan_icons([_candidate(64)], target_format)  # type: ignore[arg-type]

    assert plan.target_format == target_format
    assert [entry.slot for entry in plan.entries] == list(SLOT_TABLES[target_format])  # type: ignore[index]


def test_exact_match_is_used_without_resampling() -> None:
    """Reuse the source buffer when a candidate has the exact slot size."""
    source = _candidate(256)

    plan = plan_icons([source], "png")
    (entry,) = plan.entries

    assert entry.method == "exact"
    assert entry.candidate is source
    assert entry.bitmap() is source.pixels


def test_exact_match_requires_matching_density() -> None:
    """Do not treat a standard 256 px image as the 128 pt double slot."""
    standard = _candidate(256, density="standard")
    retina = _candidate(256, density="double", name="icon@2x.png")

    plan = plan_icons([standard, retina], "icns")
    by_slot = {entry.slot: entry for entry in plan.entries}

    assert by_slot[IconSlot(256, "standard", "ic08")].candidate is standard
    assert by_slot[IconSlot(128, "double", "ic13")].candidate is retina
    assert by_slot[IconSlot(128, "double", "ic13")].method == "exact"


def test_downsampling_uses_smallest_sufficient_candidate() -> None:
    """Prefer the smallest candidate at least as large as the slot."""
    c64 = _candidate(64)
    c512 = _candidate(512)
    c128 = _candidate(128)

    plan = plan_icons([c64, c512, c128], "ico")
    by_slot = {entry.slot: entry for entry in plan.entries}

    assert by_slot[IconSlot(48)].candidate is c64
    assert by_slot[IconSlot(48)].method == "downsample"
    assert by_slot[IconSlot(128)].method == "exact"
    assert by_slot[IconSlot(256)].candidate is c512
    assert not plan.synthesized


def test_downsampling_prefers_matching_density_on_ties() -> None:
    """Break size ties in favour of the slot's resolution class."""
    retina = _candidate(256, density="double", name="icon@2x.png")
    standard = _candidate(256, density="standard")

    plan = plan_icons([retina, standard], "ico")
    by_slot = {entry.slot: entry for entry in plan.entries}

    assert by_slot[IconSlot(128)].candidate is standard


def test_upsampling_is_flagged_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Mark slots larger than every source as synthesized and warn."""
    small = _candidate(32)

    with caplog.at_level(logging.WARNING, logger="app_bundler.icons.pipeline"):
        plan = plan_icons([small], "png")

    (entry,) = plan.entries
    assert entry.method == "upsample"
    assert entry.synthesized
    assert plan.synthesized_slots == PNG_SLOTS
    assert entry.bitmap().shape == (256, 256, 4)
    assert "upsampling" in caplog.text


def test_non_square_sources_are_resampled_to_square_bitmaps() -> None:
    """Size non-square sources by their shorter edge and emit square bitmaps."""
    wide = _candidate(300, 200)

    plan = plan_icons([wide], "ico")
    by_slot = {entry.slot: entry for entry in plan.entries}

    assert by_slot[IconSlot(128)].method == "downsample"
    assert by_slot[IconSlot(256)].method == "upsample"
    assert by_slot[IconSlot(256)].bitmap().shape == (256, 256, 4)


def test_empty_catalog_raises() -> None:
    """Raise NoIconsProvidedError for an empty catalog."""
    with pytest.raises(NoIconsProvidedError) as exc_info:
        plan_icons([], "icns")

    assert exc_info.value.target_format == "icns"


def test_unknown_format_raises() -> None:
    """Reject container formats without a slot table."""
    with pytest.raises(PipelineError, match="Unknown icon container format"):
        plan_icons([_candidate(32)], "bmp")  # type: ignore[arg-type]


def test_resample_does_not_bleed_transparent_colour() -> None:
    """Average in premultiplied space so transparent pixels add no colour."""
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    pixels[..., 1] = 255
    pixels[0, 0] = (255, 0, 0, 255)

    (out,) = resample(pixels, 1, DOWNSAMPLE_FILTER).reshape(-1, 4)

    assert out[0] >= 254
    assert out[1] == 0
    assert out[2] == 0
    assert 63 <= out[3] <= 64


def test_resample_preserves_uniform_colour_and_transparency() -> None:
    """Keep solid colours and fully transparent pixels unchanged."""
    solid = np.empty((64, 64, 4), dtype=np.uint8)
    solid[...] = (10, 20, 30, 255)
    clear = np.zeros((64, 64, 4), dtype=np.uint8)

    resized = resample(solid, 16, DOWNSAMPLE_FILTER)

    assert resized.shape == (16, 16, 4)
    assert np.all(resized == (10, 20, 30, 255))
    assert not resample(clear, 16, DOWNSAMPLE_FILTER).any()


def test_render_png_is_single_256_image() -> None:
    """Render the PNG container as one 256 px image."""
    data = render_icons(plan_icons([_candidate(512)], "png"))

    with Image.open(io.BytesIO(data)) as image:
        assert image.format == "PNG"
        assert image.size == (256, 256)


def test_render_ico_contains_every_size() -> None:
    """Render one ICO entry per mandatory size."""
    data = render_icons(plan_icons([_candidate(256)], "ico"))

    with Image.open(io.BytesIO(data)) as image:
        assert image.format == "ICO"
        assert set(image.ico.sizes()) == {(slot.size, slot.size) for slot in ICO_SLOTS}


def test_render_ico_keeps_planned_bitmap_per_size() -> None:
    """Store each slot's own bitmap instead of rescaling the largest one."""
    small = _candidate(16, color=(0, 200, 0, 255), name="small.png")
    large = _candidate(256, color=(200, 0, 0, 255), name="large.png")

    data = render_icons(plan_icons([large, small], "ico"))

    with Image.open(io.BytesIO(data)) as image:
        tiny = image.ico.getimage((16, 16)).convert("RGBA")
        full = image.ico.getimage((256, 256)).convert("RGBA")
    assert tiny.size == (16, 16)
    assert tiny.getpixel((8, 8)) == (0, 200, 0, 255)
    assert full.getpixel((128, 128)) == (200, 0, 0, 255)


def test_encode_ico_entries_are_png_with_alpha() -> None:
    """Write one PNG-compressed RGBA entry per bitmap."""
    bitmaps = [np.zeros((edge, edge, 4), dtype=np.uint8) for edge in (32, 64)]

    data = encode_ico(bitmaps)

    assert struct.unpack("<HHH", data[:6]) == (0, 1, 2)
    with Image.open(io.BytesIO(data)) as image:
        assert set(image.ico.sizes()) == {(32, 32), (64, 64)}
        assert image.ico.getimage((32, 32)).mode == "RGBA"
        assert image.ico.getimage((32, 32)).getpixel((0, 0))[3] == 0


def test_render_icns_blocks_follow_slot_table() -> None:
    """Render ICNS blocks in table order with both resolution classes."""
    catalog = [_candidate(512), _candidate(1024, density="double", name="icon@2x.png")]
    data = render_icons(plan_icons(catalog, "icns"))

    assert data[:4] == b"icns"
    assert struct.unpack(">I", data[4:8])[0] == len(data)
    codes = []
    offset = 8
    while offset < len(data):
        code, length = struct.unpack(">4sI", data[offset : offset + 8])
        codes.append(code.decode("ascii"))
        offset += length
    assert codes == [slot.code for slot in ICNS_SLOTS]

    with Image.open(io.BytesIO(data)) as image:
        assert image.format == "ICNS"
        assert set(image.icns.itersizes()) == {
            (slot.size, slot.size, slot.scale) for slot in ICNS_SLOTS
        }
