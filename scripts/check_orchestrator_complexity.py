#!/usr/bin/env python3
"""Simple complexity guard for bundling orchestrators."""

from __future__ import annotations

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
TARGETS = (
    ROOT / "src/app_bundler/application/use_cases.py",
    ROOT / "src/app_bundler/dispatch.py",
)
MAX_STATEMENTS = 30


def main() -> None:
    """Fail when orchestrator functions exceed the statement threshold."""
    violations: list[str] = []
    for target in TARGETS:
        tree = ast.parse(target.read_text(encoding="utf-8"))
        for node in tree.body:
            if isinstance(node, ast.FunctionDef):
                stmt_count = len(node.body)
                if stmt_count > MAX_STATEMENTS:
                    violations.append(f"{target.name}:{node.name}: {stmt_count} statements")
    if violations:
        raise SystemExit(
            "Orchestrator complexity threshold exceeded:\n"
            + "\n".join(f"- {v}" for v in violations)
        )
    print("Orchestrator complexity check passed.")


if __name__ == "__main__":
    main()
