"""N-order dependency closure over MSBuild project references."""

from __future__ import annotations

import logging
from typing import Iterable

from slnsync.config import RuntimeReferenceEdge
from slnsync.dotnet.project import (
    direct_runtime_references,
    parse_project,
    project_name,
    project_reference_edges,
    project_reference_paths,
    project_type_guid,
)
from slnsync.graph.reference_graph import ReferenceGraph
from slnsync.paths import path_key

logger = logging.getLogger(__name__)


def _distinct(paths: Iterable[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping the first spelling seen."""
    seen: set[str] = set()
    result = []
    for path in paths:
        key = path_key(path)
        if key not in seen:
            seen.add(key)
            result.append(path)
    return result


def resolve_references(seeds: Iterable[str], filter_conditional: bool = False) -> ReferenceGraph:
    """Walk the reference graph from the seed projects.

    Every project reachable through ProjectReference (optionally skipping
    conditional ones) and RuntimeReference edges ends up as a node of the
    returned graph. Projects are visited at most once, so cyclic and diamond
    shaped graphs terminate.
    """
    graph = ReferenceGraph()
    resolved: set[str] = set()

    # Popped in reverse seed order; only the visit order depends on this
    to_resolve = _distinct(seeds)

    while to_resolve:
        current = to_resolve.pop()
        key = path_key(current)
        if key in resolved:
            continue

        # Unsupported project types fail the update instead of being skipped
        project_type_guid(current)
        resolved.add(key)
        graph.add_project(current)

        info = parse_project(current)
        logger.debug(f"Resolving {project_name(info)} ({current})")

        for edge in project_reference_edges(info, filter_conditional):
            graph.add_project_reference(edge)

        for ref in sorted(project_reference_paths(info, filter_conditional), key=path_key):
            if path_key(ref) not in resolved:
                to_resolve.append(ref)

        for ref in sorted(direct_runtime_references(info), key=path_key):
            graph.add_runtime_reference(RuntimeReferenceEdge(source=current, target=ref))
            if path_key(ref) not in resolved:
                to_resolve.append(ref)

    logger.debug(f"Resolved {graph.project_count()} projects")

    cycle = graph.find_cycle()
    if cycle:
        logger.debug(f"Reference cycle: {' -> '.join(cycle)}")

    return graph


def closure(seeds: Iterable[str], filter_conditional: bool = False) -> list[str]:
    """All seed projects plus their N-order references, sorted case-insensitively."""
    return resolve_references(seeds, filter_conditional).projects()
