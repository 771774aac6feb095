"""Task graph container and chain-aware query operations."""

from rosgen.graph.ops import chain_for_row, disconnected, edges_at, node_count
from rosgen.graph.task_graph import TaskEdge, TaskGraph

__all__ = [
    "TaskEdge",
    "TaskGraph",
    "chain_for_row",
    "disconnected",
    "edges_at",
    "node_count",
]
