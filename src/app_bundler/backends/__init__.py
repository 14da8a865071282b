"""Platform bundle backends."""

from .base import BundleBackend
from .registry import BackendRegistry, create_default_registry

__all__ = ["BackendRegistry", "BundleBackend", "create_default_registry"]
