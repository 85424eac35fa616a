"""Error types raised while synchronising solutions with their references."""

from __future__ import annotations


class SolutionSyncError(Exception):
    """Base class for failures scoped to a single solution update."""


class MalformedProjectError(SolutionSyncError):
    """A project file cannot be parsed or lacks a required element."""


class UnsupportedProjectTypeError(SolutionSyncError):
    """A project file extension has no known project type GUID."""


class AmbiguousDependenciesFolderError(SolutionSyncError):
    """More than one "Dependencies" solution folder exists."""


class MissingFileError(SolutionSyncError):
    """A referenced project or runtime reference does not exist on disk."""


class MalformedSolutionError(SolutionSyncError):
    """A solution file lacks the structural sentinels needed for insertion."""


class IgnorePatternFileUnavailableError(Exception):
    """The ignore pattern file does not exist; aborts the whole run."""
