#!/usr/bin/env python3
"""Check that CLI-only libraries stay out of the awsmfa library package.

Banned modules:
- click: Should only be used in awsmfa_cli
- InquirerPy: Should only be used in awsmfa_cli

Usage:
    check-banned-imports [ROOT]
"""

import sys
from pathlib import Path


BANNED = {
    "click": ["awsmfa_cli"],
    "InquirerPy": ["awsmfa_cli"],
}

EXCLUDED_PARTS = {"tests", ".venv", "build"}


def determine_package(path: Path) -> str | None:
    """Determine which package this file belongs to."""
    parts = path.parts
    for pkg in ("awsmfa_cli", "awsmfa"):
        if pkg in parts:
            return pkg
    return None


def check_file(path: Path, base: Path | None = None) -> list[tuple[int, str]]:
    """Check a file for banned imports.

    Exclusions and package ownership are decided on the path relative to base.
    """
    if path.suffix != ".py":
        return []

    rel = path.relative_to(base) if base else path
    if EXCLUDED_PARTS.intersection(rel.parts):
        return []

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []

    errors = []
    for line_no, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if line.startswith("#"):
            continue

        for module, allowed_pkgs in BANNED.items():
            if (
                line == f"import {module}"
                or line.startswith(f"import {module}.")
                or line.startswith(f"import {module} ")
                or line.startswith(f"from {module} ")
                or line.startswith(f"from {module}.")
            ):
                pkg = determine_package(rel)
                if pkg and pkg not in allowed_pkgs:
                    errors.append((line_no, f"'{module}' not allowed in {pkg}"))

    return errors


def find_violations(base: Path) -> list[tuple[Path, int, str]]:
    violations = []
    for py_file in sorted(base.rglob("*.py")):
        for line_no, msg in check_file(py_file, base):
            violations.append((py_file, line_no, msg))
    return violations


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    argv = sys.argv[1:] if argv is None else argv
    base = Path(argv[0]) if argv else Path(__file__).parents[3]

    all_errors = find_violations(base)

    if all_errors:
        print("❌ Banned import violations:\n")
        for path, line_no, msg in all_errors:
            print(f"  {msg}")
            print(f"    {path}:{line_no}")
        print(f"\n{len(all_errors)} violation(s)")
        return 1

    print("✅ No banned imports")
    return 0


if __name__ == "__main__":
    sys.exit(main())
