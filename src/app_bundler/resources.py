"""Resource collection: expand manifest patterns into files to bundle."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from app_bundler.errors import EscapesRootError, ResourceNotFoundError
from app_bundler.infrastructure.fs import expand_pattern


@dataclass(frozen=True)
class ResourceEntry:
    """Source file and its destination relative to the bundle resource root."""

    source: Path
    destination: PurePosixPath


def _relative_destination(path: Path, root: Path) -> PurePosixPath:
    resolved = path.resolve()
    if not resolved.is_relative_to(root):
        raise EscapesRootError(path, root)
    return PurePosixPath(resolved.relative_to(root).as_posix())


def _expand_match(match: Path) -> list[Path]:
    if match.is_dir():
        return sorted(item for item in match.rglob("*") if item.is_file())
    return [match]


def collect_resources(
    resource_patterns: Iterable[str],
    project_root: Path,
) -> tuple[ResourceEntry, ...]:
    """Expand resource patterns into concrete copy instructions.

    Parameters
    ----------
    resource_patterns : Iterable[str]
        Paths, directories or glob patterns relative to ``project_root``.
        Order is significant: the first pattern producing a destination wins.
    project_root : Path
        Directory resources must live under.

    Returns
    -------
    tuple[ResourceEntry, ...]
        De-duplicated entries in pattern order.

    Raises
    ------
    EscapesRootError
        If any matched path resolves outside ``project_root``.
    ResourceNotFoundError
        If a pattern matches nothing.
    """
    root = project_root.resolve()
    seen: set[PurePosixPath] = set()
    entries: list[ResourceEntry] = []
    for pattern in resource_patterns:
        matches = expand_pattern(pattern, root)
        if not matches:
            raise ResourceNotFoundError(pattern)
        for match in matches:
            _relative_destination(match, root)
            for path in _expand_match(match):
                destination = _relative_destination(path, root)
                if destination in seen:
                    continue
                seen.add(destination)
                entries.append(ResourceEntry(source=path.resolve(), destination=destination))
    return tuple(entries)
