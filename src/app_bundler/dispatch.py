"""Bundler dispatch: drive one platform backend through the build steps."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from pathlib import Path

from app_bundler.application.results import BundleArtifact
from app_bundler.backends.base import BundleBackend
from app_bundler.backends.registry import BackendRegistry, create_default_registry
from app_bundler.errors import BuildError, BuildStepError
from app_bundler.infrastructure.fs import copy_file, reset_directory, write_bytes_to_file
from app_bundler.resources import ResourceEntry
from app_bundler.schemas import BundleSettings

logger = logging.getLogger(__name__)

BUILD_STEPS: tuple[str, ...] = (
    "prepare_output",
    "create_skeleton",
    "copy_resources",
    "write_icon",
    "write_metadata",
    "finalize",
)


@contextmanager
def _step(name: str) -> Iterator[None]:
    logger.debug("Bundle step: %s", name)
    try:
        yield
    except BuildStepError:
        raise
    except Exception as exc:
        raise BuildStepError(name, exc) from exc


def _copy_payload(
    backend: BundleBackend,
    root: Path,
    settings: BundleSettings,
    resources: Sequence[ResourceEntry],
    max_workers: int,
) -> None:
    resource_dir = backend.resource_dir(root, settings)
    jobs = [(entry.source, resource_dir / entry.destination) for entry in resources]
    if settings.binary is not None:
        jobs.append(
            (settings.binary, backend.binary_dir(root, settings) / settings.binary_name)
        )
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        list(pool.map(lambda job: copy_file(*job), jobs))


def build_bundle(
    settings: BundleSettings,
    icon_bytes: bytes | None,
    resources: Sequence[ResourceEntry],
    *,
    max_workers: int = 4,
    registry: BackendRegistry | None = None,
) -> BundleArtifact:
    """Build the bundle for ``settings.platform``.

    The bundle root is cleared first; there is no rollback if a later step
    fails, and anything left on disk after an error is partial output.

    Parameters
    ----------
    settings : BundleSettings
        Resolved settings; ``settings.platform`` selects the backend.
    icon_bytes : bytes | None
        Rendered icon container, or ``None`` to build without an icon.
    resources : Sequence[ResourceEntry]
        Files to copy into the backend's resource directory.
    max_workers : int, default=4
        Thread pool size for copying files.
    registry : BackendRegistry | None, optional
        Backend registry; defaults to the built-in backends.

    Returns
    -------
    BundleArtifact
        Bundle root, platform and emitted top-level entries.

    Raises
    ------
    BuildError
        If no backend exists for the platform or the bundle root
        resolves outside ``settings.output_dir``.
    BuildStepError
        If a step fails; ``step`` names it and ``cause`` holds the error.
    """
    backend = (registry or create_default_registry()).get(settings.platform)
    root = backend.bundle_root(settings)
    output_dir = settings.output_dir.resolve()
    resolved = root.resolve()
    if resolved == output_dir or not resolved.is_relative_to(output_dir):
        raise BuildError(f"Bundle root {root} is not inside output directory {output_dir}.")
    logger.info("Bundling %s for %s into %s", settings.name, settings.platform, root)

    with _step("prepare_output"):
        reset_directory(root)
    with _step("create_skeleton"):
        backend.create_skeleton(root, settings)
    with _step("copy_resources"):
        _copy_payload(backend, root, settings, resources, max_workers)

    icon_path: Path | None = None
    if icon_bytes is not None and backend.icon_format is not None:
        with _step("write_icon"):
            icon_path = write_bytes_to_file(backend.icon_path(root, settings), icon_bytes)
    else:
        logger.debug("Skipping write_icon for %s", settings.platform)

    with _step("write_metadata"):
        backend.write_metadata(root, settings, icon_path)
    with _step("finalize"):
        backend.finalize(root, settings)

    entries = tuple(sorted(path.name for path in root.iterdir()))
    return BundleArtifact(root=root, platform=settings.platform, entries=entries)
