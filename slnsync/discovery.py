"""Find the solution files a run should process."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from slnsync.errors import IgnorePatternFileUnavailableError

logger = logging.getLogger(__name__)

SOLUTION_EXTENSION = ".sln"


def find_solutions(root: str) -> list[str]:
    """Every .sln file below ``root``, sorted."""
    solutions = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            if os.path.splitext(filename)[1].lower() == SOLUTION_EXTENSION:
                solutions.append(os.path.join(dirpath, filename))
    return solutions


def load_ignore_patterns(ignore_file: str) -> list[re.Pattern]:
    """Read one regular expression per line; ``#`` lines and blank lines are skipped."""
    path = Path(ignore_file)
    if not path.is_file():
        raise IgnorePatternFileUnavailableError(
            f"The specified ignore pattern file at `{ignore_file}` did not exist or was not accessible."
        )

    patterns = []
    for line in path.read_text(encoding="utf-8-sig").splitlines():
        if not line.strip() or line.startswith("#"):
            continue
        patterns.append(re.compile(line))
    return patterns


def filter_solutions(solutions: list[str], patterns: list[re.Pattern]) -> list[str]:
    """Drop solutions whose path matches any ignore pattern."""
    kept = []
    for solution in solutions:
        if any(pattern.search(solution) for pattern in patterns):
            logger.debug(f"Ignoring {solution}")
            continue
        kept.append(solution)
    return kept


def discover_solutions(target: str, ignore_file: str | None = None) -> list[str]:
    """Solutions to process for a file or directory target.

    The ignore file is loaded before anything else so a misconfigured run
    fails before touching any solution.
    """
    patterns = load_ignore_patterns(ignore_file) if ignore_file else []

    if os.path.isfile(target):
        return [target]

    return filter_solutions(find_solutions(target), patterns)
