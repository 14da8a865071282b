"""Deterministic identifier-to-GUID hashing for installer codes."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from types import MappingProxyType

# Changing a namespace changes every derived GUID; add a new version instead.
GUID_NAMESPACES: Mapping[int, uuid.UUID] = MappingProxyType(
    {
        1: uuid.UUID("b2c9f0d4-6a1e-4f3b-8d57-2e0c9a4b7f61"),
    }
)
CURRENT_GUID_VERSION = 1


def identifier_guid(identifier: str, *, version: int = CURRENT_GUID_VERSION) -> str:
    """Hash ``identifier`` into an upper-case GUID string.

    Parameters
    ----------
    identifier : str
        Bundle identifier (or any stable key derived from it).
    version : int, default=CURRENT_GUID_VERSION
        Hash scheme version. Each version pins a UUIDv5 namespace, so the
        same identifier yields the same GUID across runs and machines.

    Returns
    -------
    str
        GUID in ``XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX`` form.

    Raises
    ------
    ValueError
        If ``version`` is not a known hash scheme.
    """
    try:
        namespace = GUID_NAMESPACES[version]
    except KeyError as exc:
        raise ValueError(f"unknown GUID hash version: {version}") from exc
    return str(uuid.uuid5(namespace, identifier)).upper()
