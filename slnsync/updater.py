"""Bring a single solution in line with its N-order project references."""

from __future__ import annotations

import logging

from slnsync.config import InsertionPlan
from slnsync.dotnet.closure import closure
from slnsync.dotnet.fragments import (
    configuration_fragment,
    folder_entry_fragment,
    project_entry_fragment,
)
from slnsync.dotnet.mutation import apply_insertion_plan
from slnsync.dotnet.solution import (
    DEPENDENCIES_FOLDER_NAME,
    SolutionDocument,
    read_solution,
    try_get_dependencies_folder_guid,
    write_solution,
)

logger = logging.getLogger(__name__)


def get_new_references(document: SolutionDocument, filter_conditional: bool = False) -> list[str]:
    """Projects reachable from the solution that it does not list yet."""
    resolved = closure(document.project_paths(), filter_conditional)
    return [p for p in resolved if not document.contains_project(p)]


def build_insertion_plan(document: SolutionDocument, new_references: list[str]) -> InsertionPlan:
    """Generate every fragment needed to add ``new_references`` to the solution.

    New projects are nested under the "Dependencies" solution folder, which
    is created when the solution does not have one yet.
    """
    plan = InsertionPlan()
    if not new_references:
        return plan

    folder_exists, folder_guid = try_get_dependencies_folder_guid(document)
    if not folder_exists:
        logger.debug(f"Creating {DEPENDENCIES_FOLDER_NAME} folder {folder_guid} in {document.path}")
        plan.project_blocks.append(folder_entry_fragment(DEPENDENCIES_FOLDER_NAME, folder_guid))

    for reference in new_references:
        fragment, guid = project_entry_fragment(document.directory, reference)
        plan.project_blocks.append(fragment)
        plan.nested_projects.append((guid, folder_guid))
        plan.configuration_lines.extend(configuration_fragment(guid, document.configurations))

    return plan


def insert_new_projects(document: SolutionDocument, new_references: list[str]) -> list[str]:
    """The solution's lines with ``new_references`` inserted."""
    plan = build_insertion_plan(document, new_references)
    if plan.is_empty:
        return list(document.lines)
    return apply_insertion_plan(document.lines, plan)


def update(solution_path: str, filter_conditional: bool = False, persist: bool = True) -> bool:
    """Add any missing N-order project references to a solution.

    Returns True when the solution is (or, with ``persist`` False, would be)
    modified. Nothing is written unless every fragment was generated and
    every insertion applied.
    """
    document = read_solution(solution_path)
    new_references = get_new_references(document, filter_conditional)

    if not new_references:
        logger.debug(f"{solution_path} already lists every reference")
        return False

    for reference in new_references:
        logger.debug(f"{solution_path} is missing {reference}")

    if persist:
        lines = insert_new_projects(document, new_references)
        write_solution(document, lines)
        logger.info(f"Added {len(new_references)} projects to {solution_path}")

    return True
