"""Project reference graph backed by networkx.DiGraph."""

from __future__ import annotations

import networkx as nx

from slnsync.config import ProjectReferenceEdge, ReferenceType, RuntimeReferenceEdge
from slnsync.paths import path_key


class ReferenceGraph:
    """Wrapper around networkx.DiGraph keyed by case-insensitive project path."""

    def __init__(self) -> None:
        self.graph = nx.DiGraph()

    # --- Node addition ---

    def add_project(self, path: str) -> str:
        key = path_key(path)
        if not self.graph.has_node(key):
            self.graph.add_node(key, path=path)
        return key

    def add_project_reference(self, edge: ProjectReferenceEdge) -> None:
        self.graph.add_edge(
            self.add_project(edge.source),
            self.add_project(edge.target),
            edge_type=ReferenceType.PROJECT.value,
            conditional=edge.conditional,
        )

    def add_runtime_reference(self, edge: RuntimeReferenceEdge) -> None:
        source = self.add_project(edge.source)
        target = self.add_project(edge.target)
        # A project reference to the same target wins; both drive membership alike
        if not self.graph.has_edge(source, target):
            self.graph.add_edge(source, target, edge_type=ReferenceType.RUNTIME.value)

    # --- Queries ---

    def project_count(self) -> int:
        return self.graph.number_of_nodes()

    def projects(self) -> list[str]:
        """All project paths, sorted case-insensitively."""
        return [self.graph.nodes[key]["path"] for key in sorted(self.graph.nodes)]

    def find_cycle(self) -> list[str]:
        """One reference cycle as a list of project paths, or [] when acyclic."""
        try:
            edges = nx.find_cycle(self.graph)
        except nx.NetworkXNoCycle:
            return []
        return [self.graph.nodes[u]["path"] for u, _ in edges]
