"""Core data types and configuration for solution synchronisation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum


class ReferenceType(str, Enum):
    PROJECT = "ProjectReference"
    RUNTIME = "RuntimeReference"


@dataclass
class ProjectReferenceEdge:
    source: str
    target: str
    conditional: bool = False


@dataclass
class RuntimeReferenceEdge:
    source: str
    target: str


@dataclass
class SolutionProject:
    """A ``Project(...)`` entry from a .sln file."""
    type_guid: str
    name: str
    path: str
    project_guid: str
    line: int
    is_folder: bool = False
    absolute_path: str | None = None


@dataclass
class InsertionPlan:
    """Everything one update inserts into a solution, in insertion order."""
    project_blocks: list[list[str]] = field(default_factory=list)
    nested_projects: list[tuple[str, str]] = field(default_factory=list)
    configuration_lines: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.project_blocks or self.nested_projects or self.configuration_lines)


def _default_workers() -> int:
    return min(32, os.cpu_count() or 4)


@dataclass
class UpdateConfig:
    target: str = ""
    persist: bool = True
    filter_conditional: bool = False
    ignore_file: str | None = None
    workers: int = field(default_factory=_default_workers)
    output_path: str | None = None
    verbose: bool = False
    quiet: bool = False


@dataclass
class SolutionOutcome:
    """Result of processing a single solution inside a worker."""
    solution: str
    modified: bool = False
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class RunResult:
    solutions: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def changed_count(self) -> int:
        return len(self.changed)

    @property
    def failed_count(self) -> int:
        return len(self.failed)
