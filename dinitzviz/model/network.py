"""Flow network model with Edge and FlowNetwork classes.

This is the caller-side graph the engine reads from: an ordered node list
(position = node index), directed edges carrying ``capacity`` and ``flow``,
and optional source/sink roles. The engine writes flows back to the same
``Edge`` objects held here.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, Hashable, List, Optional, Union

from dinitzviz.logging import get_logger

LOGGER = get_logger(__name__)

NodeID = Hashable


def check_capacity(value: Any) -> float:
    """Validate a capacity value and return it unchanged.

    Raises:
        ValueError: If the value is not a finite, non-negative real number.
    """
    if (
        isinstance(value, bool)
        or not isinstance(value, Real)
        or not math.isfinite(value)
        or value < 0
    ):
        raise ValueError(f"Capacity must be a non-negative number, got {value!r}.")
    return value


@dataclass
class Edge:
    """Represents one directed edge between two nodes.

    Parallel edges are kept as independent edges.

    Attributes:
        source (NodeID): Tail node.
        target (NodeID): Head node.
        capacity (float): Non-negative capacity (default 1.0). Need not be integral.
        flow (float): Current flow, written by the max-flow engine.
        id (Optional[int]): Unique identifier assigned by ``FlowNetwork.add_edge``.
        attrs (Dict[str, Any]): Additional metadata (e.g., label position).
    """

    source: NodeID
    target: NodeID
    capacity: float = 1.0
    flow: float = 0.0
    id: Optional[int] = None
    attrs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FlowNetwork:
    """A container for an ordered node list, directed edges and source/sink roles.

    Attributes:
        nodes (List[NodeID]): Node identifiers in index order.
        edges (List[Edge]): Edges in insertion order.
        source (Optional[NodeID]): Node designated as the flow source.
        sink (Optional[NodeID]): Node designated as the flow sink.
        attrs (Dict[str, Any]): Optional metadata about the network.
    """

    nodes: List[NodeID] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    source: Optional[NodeID] = None
    sink: Optional[NodeID] = None
    attrs: Dict[str, Any] = field(default_factory=dict)
    # Monotonically increasing counter; removed edges do not reuse IDs.
    _next_edge_id: int = field(default=0, init=False, repr=False)

    #
    # Node management
    #
    def add_node(self, node: NodeID) -> None:
        """Append a node; its index is the current node count.

        Raises:
            ValueError: If the node already exists.
        """
        if node in self.nodes:
            raise ValueError(f"Node '{node}' already exists in the network.")
        self.nodes.append(node)

    def remove_node(self, node: NodeID) -> None:
        """Remove a node with its incident edges.

        Later nodes shift down by one index. A removed source or sink role
        is cleared.

        Raises:
            ValueError: If the node does not exist.
        """
        if node not in self.nodes:
            raise ValueError(f"Node '{node}' does not exist.")
        kept = [e for e in self.edges if e.source != node and e.target != node]
        LOGGER.debug(
            "Removing node '%s' with %d incident edge(s)",
            node,
            len(self.edges) - len(kept),
        )
        self.edges[:] = kept
        self.nodes.remove(node)
        if self.source == node:
            self.source = None
        if self.sink == node:
            self.sink = None

    def node_index(self, node: NodeID) -> int:
        """Return the index of ``node``.

        Raises:
            ValueError: If the node does not exist.
        """
        try:
            return self.nodes.index(node)
        except ValueError:
            raise ValueError(f"Node '{node}' does not exist.") from None

    #
    # Edge management
    #
    def add_edge(
        self,
        source: NodeID,
        target: NodeID,
        capacity: float = 1.0,
        flow: float = 0.0,
        **attrs: Any,
    ) -> Edge:
        """Add a directed edge between existing nodes.

        Args:
            source: Tail node. Must exist.
            target: Head node. Must exist.
            capacity: Finite, non-negative capacity.
            flow: Initial flow (default 0).
            **attrs: Arbitrary edge attributes.

        Returns:
            The new ``Edge`` with its assigned ``id``.

        Raises:
            ValueError: If a node does not exist or the capacity is invalid.
        """
        if source not in self.nodes:
            raise ValueError(f"Source node '{source}' does not exist.")
        if target not in self.nodes:
            raise ValueError(f"Target node '{target}' does not exist.")
        check_capacity(capacity)

        edge = Edge(
            source=source,
            target=target,
            capacity=capacity,
            flow=flow,
            id=self._next_edge_id,
            attrs=dict(attrs),
        )
        self._next_edge_id += 1
        self.edges.append(edge)
        return edge

    def get_edge(self, edge_id: int) -> Edge:
        """Return the edge with the given id.

        Raises:
            ValueError: If no such edge exists.
        """
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        raise ValueError(f"Edge with id='{edge_id}' not found.")

    def remove_edge(self, edge: Union[Edge, int]) -> None:
        """Remove an edge given the object or its id.

        Raises:
            ValueError: If the edge is not part of this network.
        """
        target = self.get_edge(edge) if isinstance(edge, int) else edge
        for i, candidate in enumerate(self.edges):
            if candidate is target:
                del self.edges[i]
                return
        raise ValueError(f"Edge {target.source}->{target.target} is not in this network.")

    def edges_between(self, source: NodeID, target: NodeID) -> List[Edge]:
        """List all edges from ``source`` to ``target`` (parallel edges included)."""
        return [e for e in self.edges if e.source == source and e.target == target]

    def set_capacity(self, edge: Union[Edge, int], capacity: float) -> bool:
        """Set an edge's capacity.

        Returns:
            True if the capacity changed, False if it already had this value.

        Raises:
            ValueError: If the capacity is invalid or the edge is unknown.
        """
        check_capacity(capacity)
        if isinstance(edge, int):
            edge = self.get_edge(edge)
        if edge.capacity == capacity:
            return False
        edge.capacity = capacity
        return True

    def set_unweighted(self) -> bool:
        """Set every edge capacity to 1.

        Returns:
            True if any capacity changed.
        """
        if all(e.capacity == 1 for e in self.edges):
            return False
        for edge in self.edges:
            edge.capacity = 1
        return True

    def reset_flows(self) -> None:
        """Zero the flow on every edge."""
        for edge in self.edges:
            edge.flow = 0.0

    def clear(self) -> None:
        """Remove all nodes, edges and roles."""
        self.nodes.clear()
        self.edges.clear()
        self.source = None
        self.sink = None

    #
    # Roles
    #
    def set_source(self, node: NodeID) -> None:
        """Mark ``node`` as the source; clears the sink role if it was the sink."""
        self._require_node(node)
        self.source = node
        if self.sink == node:
            self.sink = None

    def set_sink(self, node: NodeID) -> None:
        """Mark ``node`` as the sink; clears the source role if it was the source."""
        self._require_node(node)
        self.sink = node
        if self.source == node:
            self.source = None

    def clear_role(self, node: NodeID) -> bool:
        """Remove any source/sink role held by ``node``.

        Returns:
            True if a role was cleared.
        """
        changed = False
        if self.source == node:
            self.source = None
            changed = True
        if self.sink == node:
            self.sink = None
            changed = True
        return changed

    def auto_assign_roles(self) -> bool:
        """Make the first node the source and the last node the sink.

        Returns:
            True if roles changed; False with fewer than two nodes or when the
            roles were already assigned this way.
        """
        if len(self.nodes) < 2:
            return False
        source, sink = self.nodes[0], self.nodes[-1]
        if self.source == source and self.sink == sink:
            return False
        self.source, self.sink = source, sink
        return True

    #
    # Queries
    #
    def can_reach_sink(
        self, source: Optional[NodeID] = None, sink: Optional[NodeID] = None
    ) -> bool:
        """Check whether a directed path from source to sink exists.

        Capacities are ignored: a zero-capacity edge still connects.
        Defaults to the network's own roles.
        """
        source = self.source if source is None else source
        sink = self.sink if sink is None else sink
        if source is None or sink is None:
            return False

        succ: Dict[NodeID, List[NodeID]] = {}
        for edge in self.edges:
            succ.setdefault(edge.source, []).append(edge.target)

        visited = {source}
        queue = deque([source])
        while queue:
            u = queue.popleft()
            if u == sink:
                return True
            for v in succ.get(u, ()):
                if v not in visited:
                    visited.add(v)
                    queue.append(v)
        return False

    def validate_for_run(
        self, source: Optional[NodeID] = None, sink: Optional[NodeID] = None
    ) -> None:
        """Check that a max-flow run makes sense for the given (or assigned) roles.

        Raises:
            ValueError: If a role is missing, both roles are the same node, or
                no directed path leads from source to sink.
        """
        source = self.source if source is None else source
        sink = self.sink if sink is None else sink
        if source is None or sink is None:
            raise ValueError("Please set both a source and a sink.")
        self._require_node(source)
        self._require_node(sink)
        if source == sink:
            raise ValueError("Source and sink must be different.")
        if not self.can_reach_sink(source, sink):
            raise ValueError("No path exists from source to sink.")

    def net_outflow(self, node: NodeID) -> float:
        """Flow leaving ``node`` minus flow entering it."""
        out_flow = sum(e.flow for e in self.edges if e.source == node)
        in_flow = sum(e.flow for e in self.edges if e.target == node)
        return out_flow - in_flow

    def _require_node(self, node: NodeID) -> None:
        if node not in self.nodes:
            raise ValueError(f"Node '{node}' does not exist.")
