"""Icon planning, resampling and container rendering."""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from PIL import Image

from app_bundler.errors import IconEncodingError, NoIconsProvidedError, PipelineError
from app_bundler.icons.catalog import IconCandidate
from app_bundler.icons.formats import SLOT_TABLES, IconSlot, pack_icns
from app_bundler.types import IconFormatName, SlotMethod

logger = logging.getLogger(__name__)

DOWNSAMPLE_FILTER = Image.Resampling.BOX
UPSAMPLE_FILTER = Image.Resampling.BICUBIC


@dataclass(frozen=True)
class PlannedSlot:
    """Slot together with the candidate chosen to fill it."""

    slot: IconSlot
    candidate: IconCandidate
    method: SlotMethod

    @property
    def synthesized(self) -> bool:
        """``True`` when the bitmap is upsampled from a smaller source."""
        return self.method == "upsample"

    def bitmap(self) -> np.ndarray:
        """Return the RGBA bitmap sized exactly to the slot."""
        candidate = self.candidate
        edge = self.slot.pixel_size
        if candidate.is_square and candidate.width == edge:
            return candidate.pixels
        resample_filter = UPSAMPLE_FILTER if self.synthesized else DOWNSAMPLE_FILTER
        return resample(candidate.pixels, edge, resample_filter)


@dataclass(frozen=True)
class IconPlan:
    """Ordered slot assignments for one container format."""

    target_format: IconFormatName
    entries: tuple[PlannedSlot, ...]

    @property
    def synthesized(self) -> bool:
        return any(entry.synthesized for entry in self.entries)

    @property
    def synthesized_slots(self) -> tuple[IconSlot, ...]:
        return tuple(entry.slot for entry in self.entries if entry.synthesized)


def _premultiply(pixels: np.ndarray) -> np.ndarray:
    rgba = pixels.astype(np.float32) / 255.0
    rgba[..., :3] *= rgba[..., 3:4]
    return rgba


def _unpremultiply(rgba: np.ndarray) -> np.ndarray:
    rgba = np.clip(rgba, 0.0, 1.0)
    alpha = rgba[..., 3:4]
    color = np.divide(
        rgba[..., :3],
        alpha,
        out=np.zeros_like(rgba[..., :3]),
        where=alpha > 0.0,
    )
    straight = np.concatenate([np.clip(color, 0.0, 1.0), alpha], axis=-1)
    return np.rint(straight * 255.0).astype(np.uint8)


def resample(
    pixels: np.ndarray,
    edge: int,
    resample_filter: Image.Resampling,
) -> np.ndarray:
    """Resize an RGBA buffer to ``edge`` x ``edge`` in premultiplied space.

    Parameters
    ----------
    pixels : numpy.ndarray
        ``uint8`` RGBA buffer with shape ``(height, width, 4)``.
    edge : int
        Output width and height in pixels.
    resample_filter : PIL.Image.Resampling
        ``BOX`` for area-averaging downsampling, ``BICUBIC`` for upsampling.

    Returns
    -------
    numpy.ndarray
        ``uint8`` RGBA buffer with shape ``(edge, edge, 4)``.
    """
    premultiplied = _premultiply(pixels)
    channels = []
    for index in range(4):
        plane = Image.fromarray(np.ascontiguousarray(premultiplied[..., index]))
        resized = plane.resize((edge, edge), resample=resample_filter)
        channels.append(np.asarray(resized, dtype=np.float32))
    return _unpremultiply(np.stack(channels, axis=-1))


def _fill_slot(slot: IconSlot, catalog: Sequence[IconCandidate]) -> PlannedSlot:
    edge = slot.pixel_size
    for candidate in catalog:
        if (
            candidate.is_square
            and candidate.width == edge
            and candidate.density == slot.density
        ):
            return PlannedSlot(slot, candidate, "exact")

    indexed = list(enumerate(catalog))
    larger = [item for item in indexed if item[1].size >= edge]
    if larger:
        _, best = min(
            larger,
            key=lambda item: (item[1].size, item[1].density != slot.density, item[0]),
        )
        return PlannedSlot(slot, best, "downsample")

    _, largest = max(
        indexed,
        key=lambda item: (item[1].size, item[1].density == slot.density, -item[0]),
    )
    return PlannedSlot(slot, largest, "upsample")


def plan_icons(
    catalog: Sequence[IconCandidate],
    target_format: IconFormatName,
) -> IconPlan:
    """Assign a catalog candidate to every mandatory slot of ``target_format``.

    Raises
    ------
    NoIconsProvidedError
        If ``catalog`` is empty.
    PipelineError
        If ``target_format`` has no slot table.
    """
    try:
        slots = SLOT_TABLES[target_format]
    except KeyError as exc:
        raise PipelineError(f"Unknown icon container format '{target_format}'.") from exc
    if not catalog:
        raise NoIconsProvidedError(target_format)

    plan = IconPlan(
        target_format=target_format,
        entries=tuple(_fill_slot(slot, catalog) for slot in slots),
    )
    for slot in plan.synthesized_slots:
        logger.warning(
            "No icon source of at least %dpx for %s slot %dx%d (%s); upsampling.",
            slot.pixel_size,
            target_format,
            slot.size,
            slot.size,
            slot.density,
        )
    return plan


def encode_png(bitmap: np.ndarray) -> bytes:
    """Encode an RGBA bitmap as PNG bytes."""
    buffer = io.BytesIO()
    try:
        Image.fromarray(bitmap).save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise IconEncodingError(f"Failed to encode icon bitmap: {exc}") from exc
    return buffer.getvalue()


def encode_ico(bitmaps: Sequence[np.ndarray]) -> bytes:
    """Encode square RGBA bitmaps as one ICO file with an entry per bitmap.

    The largest bitmap is the base image. Every other size is taken from
    ``append_images`` unchanged, so no entry is resized by Pillow.
    """
    images = sorted(
        (Image.fromarray(bitmap) for bitmap in bitmaps),
        key=lambda image: image.width,
        reverse=True,
    )
    buffer = io.BytesIO()
    try:
        images[0].save(
            buffer,
            format="ICO",
            sizes=[image.size for image in images],
            append_images=images[1:],
        )
    except (OSError, ValueError) as exc:
        raise IconEncodingError(f"Failed to encode ICO container: {exc}") from exc
    return buffer.getvalue()


def render_icons(plan: IconPlan) -> bytes:
    """Pack the planned bitmaps into the target container's binary layout."""
    if plan.target_format == "ico":
        return encode_ico([entry.bitmap() for entry in plan.entries])
    encoded = [(entry.slot, encode_png(entry.bitmap())) for entry in plan.entries]
    if plan.target_format == "icns":
        return pack_icns([(slot.code, payload) for slot, payload in encoded])
    if plan.target_format == "png":
        return encoded[0][1]
    raise PipelineError(f"Unknown icon container format '{plan.target_format}'.")
