"""Unit tests for identifier-derived installer GUIDs."""

from __future__ import annotations

import os
import re
import subprocess
import sys
import uuid
from pathlib import Path

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

import app_bundler
from app_bundler.identity import CURRENT_GUID_VERSION, GUID_NAMESPACES, identifier_guid

_GUID = re.compile(r"[0-9A-F]{8}-[0-9A-F]{4}-5[0-9A-F]{3}-[89AB][0-9A-F]{3}-[0-9A-F]{12}")


def test_guid_is_upper_case_name_based_uuid() -> None:
    """Render a version-5 UUID in upper-case GUID form."""
    assert _GUID.fullmatch(identifier_guid("com.example.app"))


def test_guid_uses_pinned_namespace() -> None:
    """Hash with the namespace pinned for the current scheme version."""
    namespace = GUID_NAMESPACES[CURRENT_GUID_VERSION]

    assert namespace == uuid.UUID("b2c9f0d4-6a1e-4f3b-8d57-2e0c9a4b7f61")
    assert identifier_guid("com.example.app") == str(
        uuid.uuid5(namespace, "com.example.app")
    ).upper()


def test_unknown_hash_version_is_rejected() -> None:
    """Refuse to hash with an unknown scheme version."""
    with pytest.raises(ValueError, match="unknown GUID hash version"):
        identifier_guid("com.example.app", version=99)


def test_guid_is_stable_across_processes() -> None:
    """Produce the same GUID in a fresh interpreter."""
    src_dir = Path(app_bundler.__file__).resolve().parent.parent
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(src_dir), env.get("PYTHONPATH")]))
    env["PYTHONHASHSEED"] = "random"

    result = subprocess.run(
        [
            sys.executable,
            "-c",
            "from app_bundler.identity import identifier_guid; "
            "print(identifier_guid('com.example.app'))",
        ],
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )

    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == identifier_guid("com.example.app")


@given(st.text(max_size=64))
def test_guid_is_deterministic(identifier: str) -> None:
    """Return the same GUID for the same identifier."""
    assert identifier_guid(identifier) == identifier_guid(identifier)


@given(st.text(max_size=32), st.text(max_size=32))
def test_distinct_identifiers_get_distinct_guids(first: str, second: str) -> None:
    """Map different identifiers to different GUIDs."""
    assume(first != second)
    assert identifier_guid(first) != identifier_guid(second)
