"""Blocking-flow search with the current-arc optimization.

``dfs_push`` performs one augmenting attempt inside a level graph. The
per-node ``cursor`` list is shared by all attempts of a phase: an arc that is
saturated or leads to a dead end is skipped for good, so all attempts of a
phase together scan each arc O(1) times plus the length of the paths found.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from dinitzviz.lib.algorithms.base import (
    ArcSign,
    EdgeHighlight,
    FlowWriter,
    NodeIndex,
    set_edge_flow,
)
from dinitzviz.lib.algorithms.residual import FlowTable, ResidualArc, ResidualGraph
from dinitzviz.lib.algorithms.types import EdgeHighlightStep, FlowUpdateStep, Step

Emit = Callable[[Step], None]
PathArcs = List[Tuple[NodeIndex, ResidualArc]]


def dfs_push(
    adj: ResidualGraph,
    level: List[int],
    cursor: List[int],
    src_node: NodeIndex,
    dst_node: NodeIndex,
    emit: Optional[Emit] = None,
    update_flow: Optional[FlowWriter] = None,
    flows: Optional[FlowTable] = None,
) -> float:
    """Find one augmenting path in the level graph and push flow along it.

    An arc ``u -> v`` is admissible when it has positive residual capacity
    and ``level[v] == level[u] + 1``. The search walks admissible arcs from
    each node's cursor; when a node has none left it is abandoned and the
    cursor of its parent moves past the arc that led to it. Cursors only move
    forward.

    When the sink is reached, the bottleneck amount is pushed along the path.
    Every arc on it (deepest first) gives up that residual to its complement
    and the owning edge's flow changes by ``pushed * sign``, so a push on a
    reverse arc cancels flow on the edge.

    If ``emit`` is given it receives a DFS edge highlight for each arc tried,
    then one ``FlowUpdateStep`` per edge on the augmenting path.

    Args:
        adj: Residual network of the current phase.
        level: Levels from ``bfs_levels`` for the same network.
        cursor: Per-node arc cursors for the current phase (mutated).
        src_node: Source node index.
        dst_node: Sink node index.
        emit: Optional step sink.
        update_flow: Writes the new flow value to an edge; defaults to
            assigning ``edge.flow``.
        flows: Run flow table; records each new flow before ``update_flow``.

    Returns:
        The amount pushed; 0 when the level graph holds no more paths.
    """
    if src_node == dst_node:
        return 0.0

    path: PathArcs = []
    u = src_node
    while u != dst_node:
        arcs = adj[u]
        next_level = level[u] + 1
        while cursor[u] < len(arcs):
            arc = arcs[cursor[u]]
            if arc.cap > 0 and level[arc.to] == next_level:
                break
            cursor[u] += 1
        else:
            # Dead end: retreat and skip the arc that led here.
            if not path:
                return 0.0
            u, _ = path.pop()
            cursor[u] += 1
            continue

        if emit and arc.edge is not None:
            emit(EdgeHighlightStep(arc.edge, EdgeHighlight.DFS))
        path.append((u, arc))
        u = arc.to

    return _augment(adj, path, emit, update_flow or set_edge_flow, flows)


def _augment(
    adj: ResidualGraph,
    path: PathArcs,
    emit: Optional[Emit],
    update_flow: FlowWriter,
    flows: Optional[FlowTable],
) -> float:
    pushed = min(arc.cap for _, arc in path)

    for _, arc in reversed(path):
        complement = adj[arc.to][arc.rev]
        arc.cap -= pushed
        complement.cap += pushed

        edge = arc.edge
        if edge is None:
            continue
        # The reverse arc's residual is the edge's flow.
        flow_arc = complement if arc.sign == ArcSign.FORWARD else arc
        flow = min(flow_arc.cap, edge.capacity)
        if flows is not None:
            flows.set(edge, flow)
        update_flow(edge, flow)
        if emit:
            emit(FlowUpdateStep(edge, pushed * arc.sign, flow, edge.capacity))

    return pushed
