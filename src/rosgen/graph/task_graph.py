"""Index-addressed task graph backed by :class:`networkx.MultiDiGraph`.

Nodes are the integers ``0 .. n-1``. Any ordered pair of nodes may carry
several parallel edges, each tagged with the chain it belongs to, its
position within that chain and a display color.
"""

from __future__ import annotations

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field


class TaskEdge(BaseModel):
    """A single directed dependency between two task graph nodes."""

    model_config = ConfigDict(frozen=True)

    tag: int = Field(description="Identifier of the chain the edge belongs to")
    num: int = Field(description="Sequence number of the edge within its chain")
    color: str = Field(default="black", description="Display color")


class TaskGraph:
    """Directed multigraph over a fixed number of integer nodes.

    Example::

        g = TaskGraph(3)
        g.add_edge(0, 1, tag=0, num=0, color="red")
        g.add_edge(0, 1, tag=1, num=0, color="blue")
        assert len(g.edges_between(0, 1)) == 2
    """

    def __init__(self, node_count: int) -> None:
        if node_count < 0:
            raise ValueError(f"node_count must be non-negative, got {node_count}")
        self._graph = nx.MultiDiGraph()
        self._graph.add_nodes_from(range(node_count))

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, node: object) -> bool:
        return node in self._graph

    def __repr__(self) -> str:
        return f"TaskGraph(nodes={len(self)}, edges={self.edge_count})"

    @property
    def edge_count(self) -> int:
        """Total number of edges, parallel edges counted individually."""
        return self._graph.number_of_edges()

    def add_edge(
        self,
        source: int,
        target: int,
        *,
        tag: int,
        num: int,
        color: str = "black",
    ) -> TaskEdge:
        """Add a directed edge from *source* to *target*.

        Raises:
            ValueError: If either endpoint is not a node of the graph.
        """
        for node in (source, target):
            if node not in self._graph:
                raise ValueError(
                    f"Node {node} not in graph (valid range 0..{len(self) - 1})"
                )
        edge = TaskEdge(tag=tag, num=num, color=color)
        self._graph.add_edge(source, target, edge=edge)
        return edge

    def edges_between(self, source: int, target: int) -> list[TaskEdge]:
        """Return all edges from *source* to *target* in insertion order."""
        if not self._graph.has_edge(source, target):
            return []
        return [data["edge"] for data in self._graph[source][target].values()]

    def neighbors(self, node: int) -> set[int]:
        """Return nodes adjacent to *node* in either direction, excluding itself."""
        adjacent = set(self._graph.successors(node)) | set(
            self._graph.predecessors(node)
        )
        adjacent.discard(node)
        return adjacent
