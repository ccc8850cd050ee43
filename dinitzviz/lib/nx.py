"""NetworkX graph conversion utilities.

Convert between NetworkX graphs and ``FlowNetwork`` so graphs built with
NetworkX can be replayed step by step, and computed flows can be written back.

Example:
    >>> import networkx as nx
    >>> from dinitzviz.lib.nx import from_networkx, to_networkx
    >>>
    >>> G = nx.DiGraph()
    >>> G.add_edge("A", "B", capacity=3.0)
    >>> G.add_edge("B", "C", capacity=2.0)
    >>>
    >>> network, edge_map = from_networkx(G, source="A", sink="C")
    >>> # ... run the engine on network.nodes / network.edges ...
    >>> G_out = to_networkx(network)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Hashable, Optional, Tuple, Union

from dinitzviz.model.network import FlowNetwork

if TYPE_CHECKING:
    import networkx as nx

    NxGraph = Union[nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph]
else:
    NxGraph = Any


# Type alias for edge references: (source_node, target_node, edge_key)
EdgeRef = Tuple[Hashable, Hashable, Any]


@dataclass
class EdgeMap:
    """Bidirectional mapping between FlowNetwork edge ids and NetworkX edges.

    Attributes:
        to_ref: Maps FlowNetwork edge id to the original (source, target, key).
        from_ref: Maps original (source, target, key) to the FlowNetwork edge
            ids created for it (two for undirected graphs).
    """

    to_ref: Dict[int, EdgeRef] = field(default_factory=dict)
    from_ref: Dict[EdgeRef, list] = field(default_factory=dict)

    def __len__(self) -> int:
        """Return the number of edge mappings."""
        return len(self.to_ref)


def from_networkx(
    G: NxGraph,
    *,
    capacity_attr: str = "capacity",
    default_capacity: float = 1.0,
    source: Optional[Hashable] = None,
    sink: Optional[Hashable] = None,
) -> Tuple[FlowNetwork, EdgeMap]:
    """Convert a NetworkX graph to a FlowNetwork.

    Node order follows ``G.nodes()``; that order defines the node indices
    used in step events. Parallel edges of multigraphs stay separate.
    Undirected graphs get one edge per direction.

    Args:
        G: NetworkX graph (DiGraph, MultiDiGraph, Graph, or MultiGraph).
        capacity_attr: Edge attribute name for capacity.
        default_capacity: Capacity when the attribute is missing.
        source: Optional source node to assign.
        sink: Optional sink node to assign.

    Returns:
        Tuple of (network, edge_map).

    Raises:
        TypeError: If G is not a NetworkX graph.
        ValueError: If a capacity is negative or not finite.
    """
    import networkx as nx

    if not isinstance(G, (nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph)):
        raise TypeError(
            f"Expected NetworkX graph (DiGraph, MultiDiGraph, Graph, MultiGraph), "
            f"got {type(G).__name__}"
        )

    network = FlowNetwork()
    for node in G.nodes():
        network.add_node(node)

    is_multigraph = isinstance(G, (nx.MultiDiGraph, nx.MultiGraph))
    if is_multigraph:
        edges_iter = G.edges(keys=True, data=True)
    else:
        edges_iter = ((u, v, 0, d) for u, v, d in G.edges(data=True))

    edge_map = EdgeMap()
    for u, v, key, data in edges_iter:
        cap = data.get(capacity_attr, default_capacity)
        ref: EdgeRef = (u, v, key)
        pairs = [(u, v)] if G.is_directed() else [(u, v), (v, u)]
        for a, b in pairs:
            edge = network.add_edge(a, b, cap)
            edge_map.to_ref[edge.id] = ref
            edge_map.from_ref.setdefault(ref, []).append(edge.id)

    if source is not None:
        network.set_source(source)
    if sink is not None:
        network.set_sink(sink)
    return network, edge_map


def to_networkx(
    network: FlowNetwork,
    *,
    capacity_attr: str = "capacity",
    flow_attr: str = "flow",
) -> "nx.MultiDiGraph":
    """Convert a FlowNetwork to a NetworkX MultiDiGraph.

    Edge keys are the FlowNetwork edge ids; each edge carries its capacity
    and current flow.

    Args:
        network: FlowNetwork to convert.
        capacity_attr: Edge attribute name for capacity.
        flow_attr: Edge attribute name for flow.

    Returns:
        nx.MultiDiGraph mirroring the network.
    """
    import networkx as nx

    G = nx.MultiDiGraph()
    G.add_nodes_from(network.nodes)
    for edge in network.edges:
        G.add_edge(
            edge.source,
            edge.target,
            key=edge.id,
            **{capacity_attr: edge.capacity, flow_attr: edge.flow},
        )
    return G


def apply_flows(
    G: NxGraph,
    network: FlowNetwork,
    edge_map: EdgeMap,
    *,
    flow_attr: str = "flow",
) -> None:
    """Write each FlowNetwork edge's flow onto the NetworkX edge it came from.

    For undirected graphs the two directions are netted: the stored value is
    the flow along (source, target) minus the flow in the opposite direction.
    """
    import networkx as nx

    is_multigraph = isinstance(G, (nx.MultiDiGraph, nx.MultiGraph))
    edges_by_id = {edge.id: edge for edge in network.edges}
    for ref, edge_ids in edge_map.from_ref.items():
        u, v, key = ref
        value = 0.0
        for edge_id in edge_ids:
            edge = edges_by_id.get(edge_id)
            if edge is None:
                raise ValueError(f"Edge with id='{edge_id}' not found.")
            value += edge.flow if edge.source == u and edge.target == v else -edge.flow
        data = G.edges[u, v, key] if is_multigraph else G.edges[u, v]
        data[flow_attr] = value
