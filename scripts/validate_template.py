#!/usr/bin/env python3
"""Lightweight validator for force structure template JSON files."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from force_planner.config import TEMPLATES_DIR  # noqa: E402
from force_planner.template_loader import TemplateError, load_template  # noqa: E402


def main(argv: List[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    paths = [Path(arg) for arg in args] or sorted(TEMPLATES_DIR.glob("*.json"))
    if not paths:
        print(f"No templates found in {TEMPLATES_DIR}")
        return 1

    issues = []
    for path in paths:
        try:
            template = load_template(path)
        except TemplateError as e:
            issues.append((path.name, str(e)))
            continue
        print(f"  ok - {path.name}: {len(template)} groups")

    if issues:
        print("Template validation failed:")
        for filename, message in issues:
            print(f"  - {filename}: {message}")
        return 1

    print("All templates validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
