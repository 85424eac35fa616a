"""Parse and write .sln files (custom line-oriented text format, not XML)."""

from __future__ import annotations

import logging
import os
import re
import uuid
from collections import Counter
from dataclasses import dataclass, field

from slnsync.config import SolutionProject
from slnsync.errors import AmbiguousDependenciesFolderError, MalformedSolutionError, MissingFileError
from slnsync.paths import path_key, resolve_relative

logger = logging.getLogger(__name__)

# Project("{TYPE-GUID}") = "Name", "Path\To\Project.csproj", "{PROJECT-GUID}"
_PROJECT_RE = re.compile(
    r'^\s*Project\(\"(\{[^}]+\})\"\)\s*=\s*\"([^\"]*)\"\s*,\s*\"([^\"]*)\"\s*,\s*\"(\{[^}]+\})\"'
)

_LINE_END_RE = re.compile(r"\r\n|\n|\r")

SOLUTION_FOLDER_TYPE_GUID = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"
DEPENDENCIES_FOLDER_NAME = "Dependencies"

SOLUTION_CONFIGURATIONS_SENTINEL = "GlobalSection(SolutionConfigurationPlatforms) = preSolution"
END_GLOBAL_SECTION_SENTINEL = "EndGlobalSection"


@dataclass
class SolutionDocument:
    """The raw lines of a solution plus the index derived from them.

    ``lines`` is authoritative and ``line_endings`` holds the terminator each
    line was read with ("" for an unterminated last line), so rendering the
    unchanged lines reproduces the file.
    """
    path: str
    lines: list[str]
    projects: list[SolutionProject] = field(default_factory=list)
    configurations: list[str] = field(default_factory=list)
    line_endings: list[str] = field(default_factory=list)

    @property
    def directory(self) -> str:
        return os.path.dirname(os.path.abspath(self.path))

    @property
    def newline(self) -> str:
        """The most common terminator in the file, used for inserted lines."""
        return dominant_newline(self.line_endings)

    def project_paths(self) -> list[str]:
        """Absolute paths of every real (non-folder) project in the solution."""
        return [p.absolute_path for p in self.projects if not p.is_folder and p.absolute_path]

    def folders(self) -> list[SolutionProject]:
        return [p for p in self.projects if p.is_folder]

    def contains_project(self, path: str) -> bool:
        key = path_key(path)
        return any(path_key(p) == key for p in self.project_paths())

    def render(self, lines: list[str] | None = None) -> str:
        """Join ``lines`` back into file content.

        Lines are only ever inserted, so the original lines appear in order
        within ``lines``; each keeps the terminator it was read with and every
        inserted line gets the dominant one.
        """
        if lines is None:
            lines = self.lines
        newline = self.newline
        parts = []
        original = 0
        for line in lines:
            if original < len(self.lines) and line == self.lines[original]:
                parts.append(line + self.line_endings[original])
                original += 1
            else:
                parts.append(line + newline)
        return "".join(parts)


def split_lines(content: str) -> tuple[list[str], list[str]]:
    """Split text into lines and the terminator that ended each one.

    CRLF, LF and a lone CR all end a line, whatever the rest of the file
    uses. An unterminated last line gets an empty terminator.
    """
    lines: list[str] = []
    endings: list[str] = []
    position = 0
    for match in _LINE_END_RE.finditer(content):
        lines.append(content[position:match.start()])
        endings.append(match.group())
        position = match.end()
    if position < len(content):
        lines.append(content[position:])
        endings.append("")
    return lines, endings


def dominant_newline(line_endings: list[str]) -> str:
    counts = Counter(ending for ending in line_endings if ending)
    if not counts:
        return "\r\n"
    return counts.most_common(1)[0][0]


def _parse_configurations(lines: list[str]) -> list[str]:
    configurations = []
    in_section = False
    for line in lines:
        stripped = line.strip()
        if not in_section:
            in_section = stripped == SOLUTION_CONFIGURATIONS_SENTINEL
            continue
        if stripped == END_GLOBAL_SECTION_SENTINEL:
            break
        if not stripped:
            continue
        # Debug|Any CPU = Debug|Any CPU
        configuration = stripped.split("=", 1)[0].strip()
        if configuration and configuration not in configurations:
            configurations.append(configuration)
    return configurations


def parse_solution(
    lines: list[str],
    solution_path: str,
    line_endings: list[str] | None = None,
) -> SolutionDocument:
    """Build a SolutionDocument from the lines of a .sln file.

    Without ``line_endings`` every line is taken to end in CRLF.
    """
    solution_dir = os.path.dirname(os.path.abspath(solution_path))
    document = SolutionDocument(
        path=solution_path,
        lines=list(lines),
        line_endings=list(line_endings) if line_endings is not None else ["\r\n"] * len(lines),
    )

    for number, line in enumerate(lines):
        match = _PROJECT_RE.match(line)
        if not match:
            continue

        type_guid, name, path, project_guid = match.groups()
        is_folder = type_guid.upper() == SOLUTION_FOLDER_TYPE_GUID
        project = SolutionProject(
            type_guid=type_guid,
            name=name,
            path=path,
            project_guid=project_guid,
            line=number,
            is_folder=is_folder,
        )
        if not is_folder:
            project.absolute_path = resolve_relative(solution_dir, path)
        document.projects.append(project)

    document.configurations = _parse_configurations(lines)

    logger.debug(
        f"Parsed {solution_path}: {len(document.project_paths())} projects, "
        f"{len(document.folders())} folders, {len(document.configurations)} configurations"
    )
    return document


def read_solution(solution_path: str) -> SolutionDocument:
    """Read a solution file once and parse it."""
    try:
        # newline="" keeps every terminator as written so the file can be reproduced
        with open(solution_path, "r", encoding="utf-8-sig", newline="") as f:
            content = f.read()
    except FileNotFoundError as e:
        raise MissingFileError(f"The solution `{solution_path}` does not exist") from e
    except UnicodeDecodeError as e:
        raise MalformedSolutionError(f"The solution `{solution_path}` is not valid UTF-8: {e}") from e

    lines, line_endings = split_lines(content)
    return parse_solution(lines, solution_path, line_endings)


def write_solution(document: SolutionDocument, lines: list[str]) -> None:
    """Write the lines back over the solution in one shot, UTF-8 with BOM."""
    content = document.render(lines)
    with open(document.path, "w", encoding="utf-8-sig", newline="") as f:
        f.write(content)


def new_folder_guid() -> str:
    return "{" + str(uuid.uuid4()).upper() + "}"


def try_get_dependencies_folder_guid(document: SolutionDocument) -> tuple[bool, str]:
    """Look up the GUID of the "Dependencies" solution folder.

    Returns ``(True, guid)`` when exactly one exists and ``(False, guid)``
    with a freshly generated GUID when there is none, for the caller to use
    if it creates the folder.
    """
    folders = [f for f in document.folders() if f.name == DEPENDENCIES_FOLDER_NAME]

    if len(folders) > 1:
        raise AmbiguousDependenciesFolderError(
            f"There were {len(folders)} {DEPENDENCIES_FOLDER_NAME} folders found in "
            f"`{document.path}`; this is unexpected"
        )

    if folders:
        return True, folders[0].project_guid

    return False, new_folder_guid()
