"""Lexical path helpers for paths recorded in MSBuild and solution files."""

from __future__ import annotations

import os


def fix_up_path_delimiter(path: str) -> str:
    """MSBuild files always record Windows delimiters; convert to the host's."""
    return path.replace("\\", os.sep)


def resolve_relative(base_dir: str, relative_path: str) -> str:
    """Resolve a path from a build file against the directory it lives in.

    Purely lexical: ``.`` and ``..`` segments are collapsed without asking
    the filesystem whether anything exists.
    """
    joined = os.path.join(os.path.abspath(base_dir), fix_up_path_delimiter(relative_path))
    return os.path.normpath(joined)


def relative_path_between(from_dir: str, to_file: str) -> str:
    """Relative path of ``to_file`` from ``from_dir`` using backslashes."""
    relative = os.path.relpath(os.path.abspath(to_file), os.path.abspath(from_dir))
    return relative.replace(os.sep, "\\")


def path_key(path: str) -> str:
    """Identity key for project paths; comparisons ignore case on every host."""
    return os.path.normpath(path).casefold()
