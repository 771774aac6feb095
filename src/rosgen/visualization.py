"""Conversion of the task graph into diagram models for the dot templates.

Two diagrams are produced from the same edge enumeration:

- **graph**: the raw chain graph. Nodes are filtered by connectivity and
  styled as chain nodes (circle) or synchronization nodes (diamond).
- **application**: the application topology. Nodes come from the
  application's executors inside the template; only links are derived here.
"""

from __future__ import annotations

from rosgen.graph.ops import chain_for_row, disconnected, edges_at, node_count
from rosgen.graph.task_graph import TaskGraph
from rosgen.models.application import Application
from rosgen.models.diagram import (
    ApplicationDiagram,
    DiagramLink,
    DiagramNode,
    GraphDiagram,
)
from rosgen.models.metadata import GraphData

CHAIN_NODE_FILL = "#FFFFFF"
SYNC_NODE_FILL = "#FFE74C"
NODE_STYLE = "filled"


def diagram_links(graph: TaskGraph) -> list[DiagramLink]:
    """Return one link per edge, scanning every ordered node pair.

    Parallel edges between the same pair each become their own link,
    labelled ``"<tag>.<num>"``.
    """
    links: list[DiagramLink] = []
    size = len(graph)
    for i in range(size):
        for j in range(size):
            for edge in edges_at(i, j, graph):
                links.append(
                    DiagramLink(
                        source=i,
                        target=j,
                        color=edge.color,
                        label=f"{edge.tag}.{edge.num}",
                    )
                )
    return links


def graph_to_diagram(graph_data: GraphData) -> GraphDiagram:
    """Build the chain graph diagram.

    A node is drawn if it is connected to another node or is the only node
    of its chain. Nodes below the chain node count are chain nodes labelled
    with their WCET and priority; the rest are synchronization nodes.
    """
    chains = graph_data.chains
    chain_nodes = node_count(chains)

    def singleton_chain(row: int) -> bool:
        chain = chain_for_row(row, chains)
        return chain is not None and chains[chain] == 1

    nodes: list[DiagramNode] = []
    for i in range(len(graph_data.graph)):
        if disconnected(i, graph_data.graph) and not singleton_chain(i):
            continue

        if i < chain_nodes:
            wcet = graph_data.node_wcet.get(i, 0)
            prio = graph_data.node_priority.get(i, 0)
            nodes.append(
                DiagramNode(
                    id=i,
                    label=f"N{i} (wcet={wcet} us) prio={prio}",
                    style=NODE_STYLE,
                    fill=CHAIN_NODE_FILL,
                    shape="circle",
                )
            )
        else:
            nodes.append(
                DiagramNode(
                    id=i,
                    label=f"N{i} (SYNC)",
                    style=NODE_STYLE,
                    fill=SYNC_NODE_FILL,
                    shape="diamond",
                )
            )

    return GraphDiagram(nodes=nodes, links=diagram_links(graph_data.graph))


def application_to_diagram(application: Application, graph: TaskGraph) -> ApplicationDiagram:
    """Build the application topology diagram."""
    return ApplicationDiagram(application=application, links=diagram_links(graph))
