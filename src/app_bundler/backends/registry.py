"""Registry of the platform backends known to the bundler."""

from __future__ import annotations

from app_bundler.backends.base import BundleBackend
from app_bundler.backends.debian import DebianBackend
from app_bundler.backends.macos import MacAppBackend
from app_bundler.backends.windows import WixInstallerBackend
from app_bundler.errors import BuildError


class BackendRegistry:
    """Registry mapping platform tags to backend instances."""

    def __init__(self) -> None:
        self._backends: dict[str, BundleBackend] = {}

    def register(self, backend: BundleBackend) -> None:
        """Register backend by its platform tag.

        Parameters
        ----------
        backend : BundleBackend
            Backend instance to register.

        Raises
        ------
        BuildError
            If the backend does not provide a platform tag.
        """
        platform = getattr(backend, "platform", "").strip()
        if not platform:
            raise BuildError("Backend must define a non-empty 'platform'.")
        self._backends[platform] = backend

    def names(self) -> list[str]:
        """Return registered platform tags, sorted."""
        return sorted(self._backends.keys())

    def get(self, platform: str) -> BundleBackend:
        """Get backend for ``platform``.

        Raises
        ------
        BuildError
            If no backend is registered for the platform.
        """
        try:
            return self._backends[platform]
        except KeyError as exc:
            raise BuildError(
                f"No bundle backend for platform '{platform}'. "
                f"Available platforms: {', '.join(self.names())}"
            ) from exc


def create_default_registry() -> BackendRegistry:
    """Create the registry holding every built-in backend."""
    registry = BackendRegistry()
    registry.register(MacAppBackend())
    registry.register(DebianBackend())
    registry.register(WixInstallerBackend())
    return registry
