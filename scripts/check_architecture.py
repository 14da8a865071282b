#!/usr/bin/env python3
"""Layer boundary checks for the bundler package."""

from __future__ import annotations

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/app_bundler"

# Core layers must stay usable without the CLI stack.
CORE_BANNED = ("typer", "click", "app_bundler.cli")
# Icon and backend code never reaches back into orchestration.
LOWER_BANNED = ("app_bundler.application.use_cases", "app_bundler.adapters", "app_bundler.api")


def _imported_modules(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    modules: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            modules.add(node.module)
    return modules


def _assert_no_imports(path: Path, banned: tuple[str, ...]) -> None:
    for module in _imported_modules(path):
        for token in banned:
            if module == token or module.startswith(f"{token}."):
                raise SystemExit(
                    f"Architecture violation in {path.relative_to(ROOT)}: imports '{module}'"
                )


def main() -> None:
    """Run repository architecture boundary checks."""
    for sub in ("application", "adapters", "backends", "icons", "infrastructure"):
        for path in (PACKAGE / sub).glob("*.py"):
            _assert_no_imports(path, CORE_BANNED)

    for sub in ("backends", "icons", "infrastructure"):
        for path in (PACKAGE / sub).glob("*.py"):
            _assert_no_imports(path, LOWER_BANNED)

    for name in ("settings.py", "schemas.py", "resources.py", "dispatch.py", "identity.py"):
        _assert_no_imports(PACKAGE / name, CORE_BANNED + LOWER_BANNED)

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
