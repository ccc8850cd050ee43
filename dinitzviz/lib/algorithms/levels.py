from __future__ import annotations

from collections import deque
from typing import Callable, List, Optional

from dinitzviz.lib.algorithms.base import (
    UNREACHED,
    ArcSign,
    EdgeHighlight,
    NodeHighlight,
    NodeIndex,
)
from dinitzviz.lib.algorithms.residual import ResidualGraph
from dinitzviz.lib.algorithms.types import EdgeHighlightStep, NodeHighlightStep, Step

Emit = Callable[[Step], None]


def bfs_levels(
    adj: ResidualGraph,
    src_node: NodeIndex,
    emit: Optional[Emit] = None,
) -> List[int]:
    """Assign BFS levels from ``src_node`` over arcs with positive residual capacity.

    The sweep does not stop when the sink is reached; every node reachable
    from the source gets a level. Discovery follows FIFO order, so levels and
    emitted steps are deterministic for a fixed arc order.

    If ``emit`` is given, it receives, in order: a START highlight for the
    source, a POP highlight per dequeued node, an edge highlight per
    positive-residual arc examined (forward or reverse by the arc's sign,
    skipped for arcs without an owning edge) and a DISCOVER highlight the
    first time a node gets a level.

    Args:
        adj: Residual network from ``build_residual``.
        src_node: Index of the source node.
        emit: Optional step sink.

    Returns:
        Level per node index; ``UNREACHED`` (-1) for nodes not reached.
    """
    level = [UNREACHED] * len(adj)
    level[src_node] = 0
    queue = deque([src_node])

    if emit:
        emit(NodeHighlightStep(src_node, NodeHighlight.START))

    while queue:
        u = queue.popleft()
        if emit:
            emit(NodeHighlightStep(u, NodeHighlight.POP))

        for arc in adj[u]:
            if arc.cap <= 0:
                continue
            v = arc.to

            if emit and arc.edge is not None:
                kind = (
                    EdgeHighlight.BFS_FORWARD
                    if arc.sign == ArcSign.FORWARD
                    else EdgeHighlight.BFS_REVERSE
                )
                emit(EdgeHighlightStep(arc.edge, kind))

            if level[v] == UNREACHED:
                level[v] = level[u] + 1
                queue.append(v)
                if emit:
                    emit(NodeHighlightStep(v, NodeHighlight.DISCOVER))

    return level
