"""Residual network construction.

Each caller-owned edge ``u -> v`` contributes two complementary arcs:

- a forward arc in ``adj[u]`` with residual ``capacity - flow``;
- a reverse arc in ``adj[v]`` with residual ``flow``.

The arcs store each other's position (``rev``) so a push on one can be
mirrored on the other in O(1).

A run keeps its own ``FlowTable``: the network rebuilt for each phase reads
the flow pushed so far from it, whatever the caller's flow writer does with
the values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Dict, Iterable, List, Optional, Sequence, Tuple

from dinitzviz.lib.algorithms.base import ArcSign, EdgeLike, NodeID, NodeIndex
from dinitzviz.logging import get_logger

logger = get_logger(__name__)


@dataclass(eq=False)
class ResidualArc:
    """Directed arc of the residual network.

    Attributes:
        to: Index of the head node.
        rev: Position of the complementary arc inside ``adj[to]``.
        cap: Residual capacity (never negative).
        edge: Owning caller edge, or None for arcs without a visible edge.
        sign: FORWARD if the arc follows the edge direction, REVERSE otherwise.
    """

    to: NodeIndex
    rev: int
    cap: float
    edge: Optional[EdgeLike]
    sign: ArcSign


ResidualGraph = List[List[ResidualArc]]


class FlowTable:
    """Flow values of one run, keyed by edge identity.

    An edge's entry is seeded from ``edge.flow`` the first time it is read
    and afterwards only changes through ``set``. Entries hold the edge
    itself so its ``id()`` stays unique for the life of the table.
    """

    def __init__(self) -> None:
        self._flows: Dict[int, Tuple[EdgeLike, float]] = {}

    def get(self, edge: EdgeLike) -> float:
        entry = self._flows.get(id(edge))
        if entry is None:
            entry = (edge, edge.flow)
            self._flows[id(edge)] = entry
        return entry[1]

    def set(self, edge: EdgeLike, flow: float) -> None:
        self._flows[id(edge)] = (edge, flow)

    def __len__(self) -> int:
        return len(self._flows)


def add_residual_edge(
    adj: ResidualGraph,
    u: NodeIndex,
    v: NodeIndex,
    edge: EdgeLike,
    flow: Optional[float] = None,
) -> None:
    """Append the forward/reverse arc pair of ``edge`` to ``adj``.

    ``flow`` overrides ``edge.flow`` as the edge's current flow.
    """
    if flow is None:
        flow = edge.flow
    fwd = ResidualArc(
        to=v, rev=-1, cap=edge.capacity - flow, edge=edge, sign=ArcSign.FORWARD
    )
    rev = ResidualArc(to=u, rev=-1, cap=flow, edge=edge, sign=ArcSign.REVERSE)

    fwd_pos = len(adj[u])
    adj[u].append(fwd)
    rev_pos = len(adj[v])
    adj[v].append(rev)

    fwd.rev = rev_pos
    rev.rev = fwd_pos


def index_nodes(nodes: Iterable[NodeID]) -> Dict[NodeID, NodeIndex]:
    """Map each node identifier to its position in ``nodes``."""
    return {node: i for i, node in enumerate(nodes)}


def build_residual(
    nodes: Sequence[NodeID],
    edges: Collection[EdgeLike],
    node_index: Optional[Dict[NodeID, NodeIndex]] = None,
    flows: Optional[FlowTable] = None,
) -> ResidualGraph:
    """Build the residual network for the current flows on ``edges``.

    Edges whose endpoints are not in ``nodes`` are skipped; a graph being
    edited may briefly hold such edges.

    Args:
        nodes: Ordered node identifiers. Position defines the node index.
        edges: Caller-owned edges exposing ``source``, ``target``,
            ``capacity`` and ``flow``.
        node_index: Precomputed ``index_nodes(nodes)`` mapping (optional).
        flows: Run flow table to read flows from instead of ``edge.flow``.

    Returns:
        Per-node lists of residual arcs, in edge order.
    """
    if node_index is None:
        node_index = index_nodes(nodes)
    adj: ResidualGraph = [[] for _ in range(len(nodes))]

    skipped = 0
    for edge in edges:
        u = node_index.get(edge.source)
        v = node_index.get(edge.target)
        if u is None or v is None:
            skipped += 1
            continue
        flow = None if flows is None else flows.get(edge)
        add_residual_edge(adj, u, v, edge, flow)

    if skipped:
        logger.debug("Skipped %d edge(s) with endpoints outside the node set", skipped)
    return adj
