"""
Graph view of a canvas using networkx.

Uses networkx for:
- Endpoint resolution (which edges connect two existing nodes)
- Connectivity statistics reported in debug traces
"""

from dataclasses import dataclass, field
from typing import List, Optional

import networkx as nx

from .models import Canvas, CanvasEdge, CanvasNode


@dataclass
class CanvasGraph:
    """
    A canvas as a directed multigraph.

    Nodes carry the CanvasNode under the "node" attribute; edges are keyed by
    edge id and carry the CanvasEdge under "edge". Edges whose source or
    target is not a known node are kept out of the graph and listed in
    dangling_edges instead.
    """

    graph: nx.MultiDiGraph
    dangling_edges: List[CanvasEdge] = field(default_factory=list)

    def node(self, node_id: str) -> Optional[CanvasNode]:
        """Return the CanvasNode for an id, or None if it is unknown."""
        if node_id not in self.graph:
            return None
        return self.graph.nodes[node_id]["node"]

    def has_edge(self, edge: CanvasEdge) -> bool:
        """Whether both endpoints of the edge exist."""
        return self.graph.has_edge(edge.from_node, edge.to_node, key=edge.id)

    def component_count(self) -> int:
        """Number of weakly connected components."""
        if self.graph.number_of_nodes() == 0:
            return 0
        return nx.number_weakly_connected_components(self.graph)

    def isolated_nodes(self) -> List[str]:
        """Ids of nodes with no resolvable edges."""
        return sorted(nx.isolates(self.graph))


def build_graph(canvas: Canvas) -> CanvasGraph:
    """
    Build a CanvasGraph from a canvas.

    Args:
        canvas: The decoded canvas

    Returns:
        CanvasGraph with every node and every edge whose endpoints resolve.
        When ids repeat, the first node with that id wins.
    """
    graph = nx.MultiDiGraph()
    for node in canvas.nodes:
        if node.id in graph:
            continue
        graph.add_node(node.id, node=node)

    dangling: List[CanvasEdge] = []
    for edge in canvas.edges:
        if edge.from_node not in graph or edge.to_node not in graph:
            dangling.append(edge)
            continue
        graph.add_edge(edge.from_node, edge.to_node, key=edge.id, edge=edge)

    return CanvasGraph(graph=graph, dangling_edges=dangling)
