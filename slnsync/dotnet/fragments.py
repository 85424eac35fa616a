"""Literal solution text fragments for entries that need to be added."""

from __future__ import annotations

import os
from typing import Iterable

from slnsync.dotnet.project import parse_project, project_guid, project_type_guid
from slnsync.dotnet.solution import SOLUTION_FOLDER_TYPE_GUID
from slnsync.paths import relative_path_between


def project_entry_fragment(solution_dir: str, project_path: str) -> tuple[list[str], str]:
    """Project(...)/EndProject block for a project file, and its GUID.

    The display name is the file name without extension and the path is
    relative to the solution directory with backslash delimiters.
    """
    type_guid = project_type_guid(project_path)
    guid = project_guid(parse_project(project_path))
    name = os.path.splitext(os.path.basename(project_path))[0]
    relative_path = relative_path_between(solution_dir, project_path)

    fragment = [
        f'Project("{type_guid}") = "{name}", "{relative_path}", "{guid}"',
        "EndProject",
    ]
    return fragment, guid


def folder_entry_fragment(folder_name: str, folder_guid: str) -> list[str]:
    """Project(...)/EndProject block for a solution folder."""
    return [
        f'Project("{SOLUTION_FOLDER_TYPE_GUID}") = "{folder_name}", "{folder_name}", "{folder_guid}"',
        "EndProject",
    ]


def configuration_fragment(guid: str, configurations: Iterable[str]) -> list[str]:
    """ProjectConfigurationPlatforms lines mapping a project onto each configuration."""
    lines = []
    for config in configurations:
        lines.append(f"\t\t{guid}.{config}.ActiveCfg = {config}")
        lines.append(f"\t\t{guid}.{config}.Build.0 = {config}")
    return lines


def nested_project_line(child_guid: str, parent_guid: str) -> str:
    return f"\t\t{child_guid} = {parent_guid}"
