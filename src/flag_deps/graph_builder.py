#!/usr/bin/env python3
"""
Graph Builder for Flag Dependencies
Builds: a plain node/edge description of the dependency graph
Output: networkx graph + PNG rendered with matplotlib
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import networkx as nx
from rich.console import Console

from .exceptions import NothingToReportError, RenderError
from .models import Dependency


class NodeRole(str, Enum):
    DEPENDENT = "dependent"      # only ever references other flags
    DEPENDENCY = "dependency"    # only ever referenced
    BOTH = "both"


ROLE_FILL_COLORS = {
    NodeRole.DEPENDENT: "lightblue",
    NodeRole.DEPENDENCY: "lightgreen",
    NodeRole.BOTH: "lightyellow",
}

# Column each role is placed in, left to right
ROLE_LAYERS = {
    NodeRole.DEPENDENT: 0,
    NodeRole.BOTH: 1,
    NodeRole.DEPENDENCY: 2,
}

EDGE_COLOR = "darkblue"

GRAPH_ATTRIBUTES = {
    "rankdir": "LR",
    "node_shape": "box",
    "edge_color": EDGE_COLOR,
    "fontname": "sans-serif",
}


@dataclass(frozen=True)
class GraphNode:
    name: str
    role: NodeRole

    @property
    def fillcolor(self) -> str:
        return ROLE_FILL_COLORS[self.role]


@dataclass(frozen=True)
class GraphEdge:
    source: str  # dependent
    target: str  # dependency
    color: str = EDGE_COLOR


@dataclass(frozen=True)
class GraphDescription:
    """Everything a rendering backend needs; no backend types leak in here."""
    nodes: List[GraphNode]
    edges: List[GraphEdge]
    attributes: Dict[str, str] = field(default_factory=lambda: dict(GRAPH_ATTRIBUTES))


def build_graph_description(edges: Sequence[Dependency]) -> GraphDescription:
    """Describe every flag in `edges` as a node tagged with its role."""
    if not edges:
        raise NothingToReportError("No dependencies found between flags")

    dependents = set()
    dependencies = set()
    order = {}
    for edge in edges:
        dependents.add(edge.dependent)
        dependencies.add(edge.dependency)
        order.setdefault(edge.dependent, None)
        order.setdefault(edge.dependency, None)

    nodes = []
    for name in order:
        if name in dependents and name in dependencies:
            role = NodeRole.BOTH
        elif name in dependents:
            role = NodeRole.DEPENDENT
        else:
            role = NodeRole.DEPENDENCY
        nodes.append(GraphNode(name, role))

    return GraphDescription(
        nodes=nodes,
        edges=[GraphEdge(edge.dependent, edge.dependency) for edge in edges],
    )


def to_networkx(description: GraphDescription) -> nx.MultiDiGraph:
    """Build a networkx graph; a multigraph so repeated references stay visible."""
    graph = nx.MultiDiGraph(**description.attributes)

    for node in description.nodes:
        graph.add_node(
            node.name,
            role=node.role.value,
            layer=ROLE_LAYERS[node.role],
            shape=description.attributes["node_shape"],
            fillcolor=node.fillcolor,
        )

    for edge in description.edges:
        graph.add_edge(edge.source, edge.target, color=edge.color)

    return graph


def render_graph(description: GraphDescription,
                 output_file: Union[str, Path] = 'output/flag_dependencies.png',
                 dpi: int = 150,
                 console: Optional[Console] = None) -> Path:
    """Render the dependency graph to a PNG, dependents on the left."""
    console = console or Console()
    console.print("\n📈 Generating dependency graph visualization...")

    try:
        import matplotlib.pyplot as plt
        from matplotlib.patches import Patch
    except ImportError as e:
        raise RenderError("matplotlib is required to render the dependency graph", cause=e) from e

    graph = to_networkx(description)
    output_file = Path(output_file)

    try:
        pos = nx.multipartite_layout(graph, subset_key="layer", align="vertical")

        height = max(6, len(description.nodes) * 0.6)
        fig = plt.figure(figsize=(16, height))

        node_names = list(graph.nodes())
        nx.draw_networkx_nodes(
            graph, pos,
            nodelist=node_names,
            node_color=[graph.nodes[n]["fillcolor"] for n in node_names],
            node_shape='s',
            node_size=2500,
            linewidths=1.5,
            edgecolors='#2c3e50'
        )

        nx.draw_networkx_edges(
            graph, pos,
            edge_color=description.attributes["edge_color"],
            arrows=True,
            arrowsize=20,
            arrowstyle='->',
            width=1.5,
            node_size=2500,
            node_shape='s',
            connectionstyle='arc3,rad=0.1'
        )

        nx.draw_networkx_labels(graph, pos, font_size=9,
                                font_family=description.attributes["fontname"])

        legend_elements = [
            Patch(facecolor=ROLE_FILL_COLORS[NodeRole.DEPENDENT], edgecolor='#2c3e50',
                  label='Depends on other flags'),
            Patch(facecolor=ROLE_FILL_COLORS[NodeRole.BOTH], edgecolor='#2c3e50',
                  label='Depends and is depended on'),
            Patch(facecolor=ROLE_FILL_COLORS[NodeRole.DEPENDENCY], edgecolor='#2c3e50',
                  label='Depended on by other flags'),
        ]
        plt.legend(handles=legend_elements, loc='upper right', fontsize=10)

        plt.title("Feature Flag Dependencies", fontsize=16, fontweight='bold')
        plt.axis('off')
        plt.tight_layout()

        output_file.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(output_file, dpi=dpi, bbox_inches='tight', facecolor='white')
        plt.close(fig)
    except (OSError, ValueError, RuntimeError) as e:
        plt.close('all')
        raise RenderError(f"Failed to render dependency graph to {output_file}", cause=e) from e

    console.print(f"  ✓ Graph saved to {output_file}")
    return output_file
