"""Parse .csproj/.sqlproj/.synproj files (XML with MSBuild schema)."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from slnsync.config import ProjectReferenceEdge
from slnsync.errors import MalformedProjectError, MissingFileError, UnsupportedProjectTypeError
from slnsync.paths import resolve_relative

logger = logging.getLogger(__name__)

SUPPORTED_PROJECT_TYPES = {
    ".csproj": "{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}",
    ".sqlproj": "{00D1A9C2-B5F0-4AF3-8072-F6C62B433612}",
    ".synproj": "{BBD0F5D1-1CC4-42FD-BA4C-A96779C64378}",
}


@dataclass
class ProjectInfo:
    """Parsed information from an MSBuild project file."""
    path: str
    guid: str | None = None
    name: str | None = None
    # (Include, conditional)
    project_references: list[tuple[str, bool]] = field(default_factory=list)
    runtime_references: list[str] = field(default_factory=list)

    @property
    def directory(self) -> str:
        return os.path.dirname(self.path)


def project_type_guid(project_path: str) -> str:
    """Return the Visual Studio project type GUID for a project file."""
    extension = os.path.splitext(project_path)[1].lower()
    try:
        return SUPPORTED_PROJECT_TYPES[extension]
    except KeyError:
        raise UnsupportedProjectTypeError(
            f"The extension `{extension}` of `{project_path}` was not recognized"
        ) from None


def _is_conditional(element: ET.Element, parents: dict[ET.Element, ET.Element]) -> bool:
    """True when the element or any of its ancestors carries a Condition."""
    node: ET.Element | None = element
    while node is not None:
        if node.get("Condition") is not None:
            return True
        node = parents.get(node)
    return False


def _first_text(root: ET.Element, tag: str) -> str | None:
    for element in root.iter(tag):
        return (element.text or "").strip()
    return None


def parse_project(project_path: str) -> ProjectInfo:
    """Parse a project file and return the parts used for reference resolution.

    Raises MissingFileError when the file does not exist and
    MalformedProjectError when it cannot be read as XML.
    """
    if not os.path.isfile(project_path):
        raise MissingFileError(f"The project `{project_path}` does not exist")

    try:
        tree = ET.parse(project_path)
    except ET.ParseError as e:
        raise MalformedProjectError(f"The project `{project_path}` is not valid XML: {e}") from e
    except OSError as e:
        raise MalformedProjectError(f"The project `{project_path}` could not be read: {e}") from e

    root = tree.getroot()

    # Namespace comes from the root tag; legacy projects use the 2003 schema
    ns = ""
    if root.tag.startswith("{"):
        ns = root.tag.split("}")[0] + "}"

    info = ProjectInfo(path=project_path)
    info.guid = _first_text(root, f"{ns}ProjectGuid")
    # ProjectReference items carry their own <Name>; only PropertyGroups count here
    for group in root.iter(f"{ns}PropertyGroup"):
        info.name = _first_text(group, f"{ns}Name")
        if info.name:
            break

    parents = {child: parent for parent in root.iter() for child in parent}

    for ref in root.iter(f"{ns}ProjectReference"):
        include = ref.get("Include")
        if not include:
            logger.debug(f"ProjectReference without Include in {project_path}")
            continue
        info.project_references.append((include, _is_conditional(ref, parents)))

    for ref in root.iter(f"{ns}RuntimeReference"):
        include = ref.get("Include")
        if not include:
            logger.debug(f"RuntimeReference without Include in {project_path}")
            continue
        info.runtime_references.append(include)

    return info


def project_guid(info: ProjectInfo) -> str:
    """Value of the first ProjectGuid element."""
    if not info.guid:
        raise MalformedProjectError(f"The project `{info.path}` does not declare a ProjectGuid")
    return info.guid


def project_name(info: ProjectInfo) -> str:
    """Value of the first Name element, or the file name without extension."""
    if info.name:
        return info.name
    return os.path.splitext(os.path.basename(info.path))[0]


def direct_project_references(info: ProjectInfo, filter_conditional: bool = False) -> set[str]:
    """Relative Include values of the project's direct ProjectReferences."""
    return {
        include
        for include, conditional in info.project_references
        if not (filter_conditional and conditional)
    }


def project_reference_edges(info: ProjectInfo, filter_conditional: bool = False) -> list[ProjectReferenceEdge]:
    """Direct ProjectReferences as edges to absolute target paths."""
    edges = []
    for include, conditional in info.project_references:
        if filter_conditional and conditional:
            continue
        edges.append(ProjectReferenceEdge(
            source=info.path,
            target=resolve_relative(info.directory, include),
            conditional=conditional,
        ))
    return edges


def project_reference_paths(info: ProjectInfo, filter_conditional: bool = False) -> set[str]:
    """Direct ProjectReferences resolved to absolute paths."""
    return {edge.target for edge in project_reference_edges(info, filter_conditional)}


def direct_runtime_references(info: ProjectInfo) -> set[str]:
    """Direct RuntimeReferences resolved to absolute paths; never filtered."""
    return {resolve_relative(info.directory, include) for include in info.runtime_references}
