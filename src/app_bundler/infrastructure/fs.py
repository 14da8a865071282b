"""Filesystem helpers shared by the catalog, collector and backends."""

from __future__ import annotations

import glob
import shutil
from hashlib import md5
from pathlib import Path


def expand_pattern(pattern: str, root: Path) -> list[Path]:
    """Expand a glob pattern (or plain path) relative to ``root``.

    Parameters
    ----------
    pattern : str
        Path or glob pattern. ``**`` matches recursively. Absolute patterns
        are expanded as-is.
    root : Path
        Directory relative patterns are anchored to.

    Returns
    -------
    list[Path]
        Matching paths (files and directories), sorted for stable ordering.
    """
    matches = glob.glob(pattern, root_dir=root, recursive=True)
    return [root / match for match in sorted(matches)]


def digest_file(path: Path, *, chunk_size: int = 1 << 20) -> str:
    """Compute MD5 digest for file content."""
    hasher = md5()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()


def write_bytes_to_file(path: Path, data: bytes) -> Path:
    """Write bytes to file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def write_text_to_file(path: Path, text: str) -> Path:
    """Write UTF-8 text to file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def copy_file(source: Path, destination: Path) -> Path:
    """Copy ``source`` to ``destination`` preserving mode bits."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)
    return destination


def reset_directory(path: Path) -> Path:
    """Remove ``path`` if present and recreate it empty."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()
    path.mkdir(parents=True)
    return path
