#!/usr/bin/env python3
# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, tests, schema smoke test and build.

Pass step names (case-insensitive) to run a subset, e.g. ``tools/ci.py lint tests``.
"""

import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=shapeql", "--cov-report=term-missing"]),
    ("Schema", ["uv", "run", "shapeql", "check", "tests/data/library.ts"]),
    ("Build", ["uv", "build"]),
]


def main(argv: list[str] | None = None) -> int:
    """Run the selected CI steps (all by default) and report results."""
    selected = {name.lower() for name in (sys.argv[1:] if argv is None else argv)}
    unknown = selected - {name.lower() for name, _ in STEPS}
    if unknown:
        print(chalk.red(f"Unknown step(s): {', '.join(sorted(unknown))}"))
        return 2

    results: list[tuple[str, bool, float]] = []
    for name, cmd in STEPS:
        if selected and name.lower() not in selected:
            continue
        sep = chalk.blue("=" * 60)
        print(f"\n{sep}")
        print(chalk.blue(name))
        print(sep)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_REPO_ROOT)
        results.append((name, proc.returncode == 0, time.monotonic() - start))

    _print_summary(results)
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_REPO_ROOT = Path(__file__).resolve().parent.parent


def _print_summary(results: list[tuple[str, bool, float]]) -> None:
    sep = "=" * 60
    print(f"\n{chalk.blue(sep)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(sep))
    for name, passed, elapsed in results:
        if passed:
            print(chalk.green(f"  PASS  {name} ({elapsed:.1f}s)"))
        else:
            print(chalk.red(f"  FAIL  {name} ({elapsed:.1f}s)"))
    print()


if __name__ == "__main__":
    sys.exit(main())
