"""Error taxonomy for bundle builds."""

from __future__ import annotations

from pathlib import Path


class BundlerError(Exception):
    """Base class for all bundling failures."""

    exit_code = 1


class ConfigError(BundlerError):
    """Missing or invalid manifest configuration."""

    exit_code = 2


class MissingFieldError(ConfigError):
    """Required manifest field could not be resolved."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Required bundle field '{field}' is not set.")
        self.field = field


class InvalidIdentifierError(ConfigError):
    """Bundle identifier is not a reverse-DNS string."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            f"Invalid bundle identifier '{identifier}'. Expected at least two "
            "dot-separated segments of letters, digits or underscores "
            "(e.g. 'com.example.app')."
        )
        self.field = "identifier"
        self.identifier = identifier


class CatalogError(BundlerError):
    """Icon source files could not be loaded."""

    exit_code = 3


class SkipFileError(CatalogError):
    """A single icon file could not be decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Skipping icon {path}: {reason}")
        self.path = path
        self.reason = reason


class NoUsableIconsError(CatalogError):
    """Icon patterns were given but no image could be loaded."""

    def __init__(self, patterns: tuple[str, ...]) -> None:
        super().__init__(
            f"No usable icon files found for patterns: {', '.join(patterns)}"
        )
        self.patterns = patterns


class PipelineError(BundlerError):
    """Icon container could not be planned or rendered."""

    exit_code = 3


class NoIconsProvidedError(PipelineError):
    """Icon catalog is empty."""

    def __init__(self, target_format: str) -> None:
        super().__init__(f"No icons provided for '{target_format}' container.")
        self.target_format = target_format


class IconEncodingError(PipelineError):
    """A planned bitmap failed to encode."""


class CollectorError(BundlerError):
    """Resource patterns could not be expanded safely."""

    exit_code = 4


class EscapesRootError(CollectorError):
    """Resource path resolves outside the project root."""

    def __init__(self, path: Path, project_root: Path) -> None:
        super().__init__(f"Resource {path} is outside project root {project_root}.")
        self.path = path
        self.project_root = project_root


class ResourceNotFoundError(CollectorError):
    """Resource pattern matched no files."""

    def __init__(self, pattern: str) -> None:
        super().__init__(f"Resource pattern '{pattern}' matched no files.")
        self.pattern = pattern


class BuildError(BundlerError):
    """Bundle layout could not be produced."""

    exit_code = 5


class BuildStepError(BuildError):
    """A named dispatch step failed."""

    def __init__(self, step: str, cause: BaseException) -> None:
        super().__init__(f"Bundle step '{step}' failed: {cause}")
        self.step = step
        self.cause = cause
