"""Line-level insertions into an existing solution.

Each pass takes the full line list and returns a new one; lines that are
not insertion points are copied through verbatim and in order.
"""

from __future__ import annotations

from slnsync.config import InsertionPlan
from slnsync.dotnet.fragments import nested_project_line
from slnsync.errors import MalformedSolutionError

GLOBAL_SENTINEL = "Global"
END_GLOBAL_SENTINEL = "EndGlobal"
NESTED_PROJECTS_SENTINEL = "GlobalSection(NestedProjects) = preSolution"
PROJECT_CONFIGURATIONS_SENTINEL = "GlobalSection(ProjectConfigurationPlatforms) = postSolution"
END_GLOBAL_SECTION_SENTINEL = "EndGlobalSection"


def _index_of(lines: list[str], sentinel: str, trimmed: bool = True) -> int | None:
    for i, line in enumerate(lines):
        if (line.strip() if trimmed else line) == sentinel:
            return i
    return None


def _require(lines: list[str], sentinel: str, trimmed: bool = True) -> int:
    index = _index_of(lines, sentinel, trimmed)
    if index is None:
        raise MalformedSolutionError(f"The solution has no `{sentinel}` line")
    return index


def _new_section(sentinel: str, body: list[str]) -> list[str]:
    return [f"\t{sentinel}", *body, f"\t{END_GLOBAL_SECTION_SENTINEL}"]


def insert_project_blocks(lines: list[str], blocks: list[list[str]]) -> list[str]:
    """Insert project/folder blocks immediately before the first ``Global`` line."""
    if not blocks:
        return list(lines)
    index = _require(lines, GLOBAL_SENTINEL, trimmed=False)
    inserted = [line for block in blocks for line in block]
    return lines[:index] + inserted + lines[index:]


def insert_nested_projects(lines: list[str], nested_projects: list[tuple[str, str]]) -> list[str]:
    """Add ``{child} = {parent}`` mappings to the NestedProjects section.

    When the solution has no such section a new one is created just before
    ``EndGlobal``.
    """
    if not nested_projects:
        return list(lines)
    mappings = [nested_project_line(child, parent) for child, parent in nested_projects]

    index = _index_of(lines, NESTED_PROJECTS_SENTINEL)
    if index is not None:
        return lines[:index + 1] + mappings + lines[index + 1:]

    end = _require(lines, END_GLOBAL_SENTINEL)
    return lines[:end] + _new_section(NESTED_PROJECTS_SENTINEL, mappings) + lines[end:]


def insert_configuration_mappings(lines: list[str], configuration_lines: list[str]) -> list[str]:
    """Add project configuration lines after the ProjectConfigurationPlatforms header.

    A solution made up only of folders has no such section; one is created
    just before ``EndGlobal`` in that case.
    """
    if not configuration_lines:
        return list(lines)

    index = _index_of(lines, PROJECT_CONFIGURATIONS_SENTINEL)
    if index is not None:
        return lines[:index + 1] + configuration_lines + lines[index + 1:]

    end = _require(lines, END_GLOBAL_SENTINEL)
    return lines[:end] + _new_section(PROJECT_CONFIGURATIONS_SENTINEL, configuration_lines) + lines[end:]


def apply_insertion_plan(lines: list[str], plan: InsertionPlan) -> list[str]:
    """Run the three insertion passes in order and return the new lines."""
    result = insert_project_blocks(lines, plan.project_blocks)
    result = insert_nested_projects(result, plan.nested_projects)
    result = insert_configuration_mappings(result, plan.configuration_lines)
    return result
