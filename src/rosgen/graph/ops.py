"""Query operations over a :class:`TaskGraph` and its chain layout.

The chain layout is a list of chain lengths: chain ``c`` owns the
``chains[c]`` consecutive node ids that follow every earlier chain. Node
ids past the last chain are synthetic synchronization nodes.
"""

from __future__ import annotations

from itertools import accumulate
from typing import Optional, Sequence

from rosgen.graph.task_graph import TaskEdge, TaskGraph


def node_count(chains: Sequence[int]) -> int:
    """Return the number of nodes that belong to a declared chain."""
    return sum(chains)


def chain_for_row(row: int, chains: Sequence[int]) -> Optional[int]:
    """Return the index of the chain containing node *row*.

    Returns:
        The chain index, or ``None`` when *row* lies outside every chain
        (a synchronization node, or a negative id).
    """
    if row < 0:
        return None
    for chain, end in enumerate(accumulate(chains)):
        if row < end:
            return chain
    return None


def edges_at(source: int, target: int, graph: TaskGraph) -> list[TaskEdge]:
    """Return every edge from *source* to *target* (possibly empty)."""
    return graph.edges_between(source, target)


def disconnected(node: int, graph: TaskGraph) -> bool:
    """Return True when *node* has no edge to or from any other node."""
    return not graph.neighbors(node)
