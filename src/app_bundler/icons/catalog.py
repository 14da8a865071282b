"""Icon source catalog: locate and decode candidate icon images."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from app_bundler.errors import NoUsableIconsError, SkipFileError
from app_bundler.infrastructure.fs import expand_pattern
from app_bundler.types import Density

logger = logging.getLogger(__name__)

DOUBLE_DENSITY_MARKER = "@2x"

_DECODE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)


@dataclass(frozen=True, eq=False)
class IconCandidate:
    """Decoded source image tagged with its resolution class.

    Parameters
    ----------
    source : Path
        File the image was decoded from.
    pixels : numpy.ndarray
        ``uint8`` RGBA buffer with shape ``(height, width, 4)``.
    density : {"standard", "double"}
        Declared resolution class.
    """

    source: Path
    pixels: np.ndarray
    density: Density = "standard"

    def __post_init__(self) -> None:
        pixels = self.pixels
        if pixels.dtype != np.uint8 or pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(
                f"icon buffer for {self.source} must be uint8 with shape "
                f"(height, width, 4), got {pixels.dtype} {pixels.shape}"
            )
        if pixels.shape[0] <= 0 or pixels.shape[1] <= 0:
            raise ValueError(f"icon {self.source} has an empty pixel buffer")
        pixels.setflags(write=False)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> int:
        """Usable edge length: the shorter of width and height."""
        return min(self.width, self.height)

    @property
    def is_square(self) -> bool:
        return self.width == self.height


def declared_density(path: Path) -> Density:
    """Return ``double`` when the file stem ends with ``@2x``."""
    if path.stem.endswith(DOUBLE_DENSITY_MARKER):
        return "double"
    return "standard"


def _to_rgba(image: Image.Image) -> np.ndarray:
    return np.array(image.convert("RGBA"), dtype=np.uint8)


def decode_icon_file(path: Path) -> tuple[IconCandidate, ...]:
    """Decode one file into icon candidates.

    The format is detected from the file content. ICNS and ICO containers
    yield one candidate per embedded image; ICNS entries stored at scale 2
    are tagged ``double``.

    Raises
    ------
    SkipFileError
        If the file cannot be decoded.
    """
    density = declared_density(path)
    try:
        with Image.open(path) as image:
            if image.format == "ICNS":
                frames = []
                for width, height, scale in sorted(image.icns.itersizes()):
                    frame_density: Density = "double" if scale == 2 else density
                    frame = image.icns.getimage((width, height, scale))
                    frames.append(IconCandidate(path, _to_rgba(frame), frame_density))
                return tuple(frames)
            if image.format == "ICO":
                return tuple(
                    IconCandidate(path, _to_rgba(image.ico.getimage(size)), density)
                    for size in sorted(image.ico.sizes())
                )
            image.load()
            return (IconCandidate(path, _to_rgba(image), density),)
    except _DECODE_ERRORS as exc:
        raise SkipFileError(path, str(exc) or type(exc).__name__) from exc


def _decode_or_skip(path: Path) -> tuple[IconCandidate, ...] | SkipFileError:
    try:
        return decode_icon_file(path)
    except SkipFileError as exc:
        return exc


def expand_icon_patterns(patterns: Iterable[str], project_root: Path) -> list[Path]:
    """Expand icon patterns into unique file paths, keeping pattern order."""
    seen: set[Path] = set()
    paths: list[Path] = []
    for pattern in patterns:
        for match in expand_pattern(pattern, project_root):
            if not match.is_file() or match in seen:
                continue
            seen.add(match)
            paths.append(match)
    return paths


def load_catalog(
    icon_patterns: Iterable[str],
    project_root: Path,
    *,
    strict: bool = False,
    max_workers: int = 4,
) -> tuple[IconCandidate, ...]:
    """Load every decodable icon matched by ``icon_patterns``.

    Parameters
    ----------
    icon_patterns : Iterable[str]
        Paths or glob patterns, relative to ``project_root``.
    project_root : Path
        Directory patterns are anchored to.
    strict : bool, default=False
        Treat any undecodable file as fatal instead of skipping it.
    max_workers : int, default=4
        Thread pool size used for decoding.

    Returns
    -------
    tuple[IconCandidate, ...]
        Candidates in pattern order. Empty when no patterns were given.

    Raises
    ------
    SkipFileError
        In strict mode, for the first file that fails to decode.
    NoUsableIconsError
        If patterns were given but no candidate could be loaded.
    """
    patterns = tuple(icon_patterns)
    if not patterns:
        return ()

    paths = expand_icon_patterns(patterns, project_root)
    if not paths:
        raise NoUsableIconsError(patterns)

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        outcomes = list(pool.map(_decode_or_skip, paths))

    candidates: list[IconCandidate] = []
    for outcome in outcomes:
        if isinstance(outcome, SkipFileError):
            if strict:
                raise outcome
            logger.warning("%s", outcome)
            continue
        candidates.extend(outcome)

    if not candidates:
        raise NoUsableIconsError(patterns)
    logger.debug("Loaded %d icon candidate(s) from %d file(s)", len(candidates), len(paths))
    return tuple(candidates)
