#!/usr/bin/env python3
"""Check requirements.txt and source imports against pyproject.toml."""

from __future__ import annotations

import ast
import re
import sys
from pathlib import Path

from generate_requirements import collect_requirements

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
FIRST_PARTY = {"app_bundler"}
# Import names that differ from their distribution name.
DISTRIBUTIONS = {"PIL": "pillow"}


def _requirement_name(requirement: str) -> str:
    return re.split(r"[<>=!~\[; ]", requirement, maxsplit=1)[0].lower()


def _checked_in() -> set[str]:
    lines = (ROOT / "requirements.txt").read_text(encoding="utf-8").splitlines()
    return {line.split("#", 1)[0].strip() for line in lines} - {""}


def _third_party_imports() -> dict[str, str]:
    found: dict[str, str] = {}
    for path in sorted(SRC.rglob("*.py")):
        for node in ast.walk(ast.parse(path.read_text(encoding="utf-8"))):
            if isinstance(node, ast.Import):
                modules = [alias.name for alias in node.names]
            elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
                modules = [node.module]
            else:
                continue
            for module in modules:
                top = module.split(".", 1)[0]
                if top in FIRST_PARTY or top in sys.stdlib_module_names:
                    continue
                found.setdefault(top, str(path.relative_to(ROOT)))
    return found


def main() -> None:
    """Fail when requirements drift or an imported library is undeclared."""
    expected = set(collect_requirements())
    actual = _checked_in()
    declared = {_requirement_name(req) for req in expected}

    problems: list[str] = []
    problems.extend(f"- missing from requirements.txt: {r}" for r in sorted(expected - actual))
    problems.extend(f"- unexpected in requirements.txt: {r}" for r in sorted(actual - expected))
    for module, where in sorted(_third_party_imports().items()):
        distribution = DISTRIBUTIONS.get(module, module).lower()
        if distribution not in declared:
            problems.append(f"- {where} imports {module!r} but {distribution} is not declared")

    if problems:
        raise SystemExit(
            "Dependency check failed. Run: python scripts/generate_requirements.py\n"
            + "\n".join(problems)
        )
    print("Dependency sync check passed.")


if __name__ == "__main__":
    main()
