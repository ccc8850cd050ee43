"""Dinitz (Dinic) maximum flow as a lazy sequence of visualization steps.

Each phase rebuilds the residual network from the caller's edges, layers it
with a BFS from the source and, while the sink is reachable, saturates the
level graph with repeated ``dfs_push`` attempts. Steps are buffered per BFS
sweep and per DFS attempt and then yielded one at a time, so a consumer can
pace the replay. The generator's return value is a ``MaxFlowResult``.

Example:
    >>> from dinitzviz.model.network import FlowNetwork
    >>> net = FlowNetwork()
    >>> for name in "ABCD":
    ...     net.add_node(name)
    >>> _ = net.add_edge("A", "B", 3)
    >>> _ = net.add_edge("A", "C", 2)
    >>> _ = net.add_edge("B", "D", 2)
    >>> _ = net.add_edge("C", "D", 3)
    >>> run = DinitzRun(net.nodes, net.edges, "A", "D")
    >>> for step in run:
    ...     pass  # hand each step to a renderer
    >>> run.result.max_flow
    4.0
"""

from __future__ import annotations

from typing import (
    Collection,
    Dict,
    Generator,
    Iterable,
    List,
    Literal,
    Optional,
    Sequence,
    Union,
    overload,
)

from dinitzviz.lib.algorithms.base import (
    UNREACHED,
    EdgeLike,
    FlowWriter,
    NodeID,
    NodeIndex,
    format_amount,
)
from dinitzviz.lib.algorithms.blocking import dfs_push
from dinitzviz.lib.algorithms.levels import bfs_levels
from dinitzviz.lib.algorithms.residual import FlowTable, build_residual, index_nodes
from dinitzviz.lib.algorithms.types import (
    AnyStep,
    ClearHighlightsStep,
    LevelsStep,
    MaxFlowResult,
    PhaseStep,
    Step,
    TextStep,
)
from dinitzviz.logging import get_logger

logger = get_logger(__name__)

BFS_PHASE = "BFS"
DFS_PHASE = "DFS blocking flow"

StepGenerator = Generator[AnyStep, None, MaxFlowResult]


def dinitz_steps(
    nodes: Sequence[NodeID],
    edges: Collection[EdgeLike],
    src_node: NodeID,
    dst_node: NodeID,
    *,
    update_flow: Optional[FlowWriter] = None,
    flows: Optional[FlowTable] = None,
) -> StepGenerator:
    """Return a generator replaying Dinitz's algorithm step by step.

    The node sequence is captured when this function is called; ``edges`` is
    iterated afresh at the start of every phase, so it must be a collection
    rather than a one-shot iterator. Flows are written back to the caller's
    edge objects (through ``update_flow`` when given) as the generator
    advances; abandoning the generator leaves the flows pushed so far in
    place.

    The run reads flows from its own ``FlowTable``, seeded from each edge's
    ``flow`` attribute, so an ``update_flow`` that stores values elsewhere
    does not change the result.

    A sink that is not among ``nodes`` is simply unreachable (zero flow). A
    source equal to the sink yields a single text step and zero flow.

    Args:
        nodes: Ordered node identifiers; positions are the indices used in steps.
        edges: Caller-owned edges with ``source``, ``target``, ``capacity``, ``flow``.
        src_node: Source node identifier.
        dst_node: Sink node identifier.
        update_flow: Optional writer ``(edge, flow) -> None``.
        flows: Pre-seeded flow table (optional); a fresh one is used otherwise.

    Returns:
        Generator of steps whose return value is the ``MaxFlowResult``.

    Raises:
        ValueError: If ``src_node`` is not in ``nodes``.
        TypeError: If ``edges`` is a one-shot iterator.
    """
    if iter(edges) is edges:
        raise TypeError("Edges must be a re-iterable collection, not an iterator.")
    nodes = list(nodes)
    node_index = index_nodes(nodes)
    if src_node not in node_index:
        raise ValueError(f"Source node '{src_node}' is not in the node set.")
    if flows is None:
        flows = FlowTable()
    return _phase_loop(
        nodes, edges, node_index, src_node, dst_node, update_flow, flows
    )


def _phase_loop(
    nodes: List[NodeID],
    edges: Collection[EdgeLike],
    node_index: Dict[NodeID, NodeIndex],
    src_node: NodeID,
    dst_node: NodeID,
    update_flow: Optional[FlowWriter],
    flows: FlowTable,
) -> StepGenerator:
    s = node_index[src_node]
    t = node_index.get(dst_node)

    if s == t:
        yield TextStep("Source equals sink. maxflow = 0")
        return MaxFlowResult(max_flow=0, phases=0, reachable=frozenset({s}))

    flow: float = 0
    iteration = 0

    while True:
        adj = build_residual(nodes, edges, node_index, flows)

        iteration += 1
        yield PhaseStep(BFS_PHASE, iteration)

        bfs_steps: List[Step] = []
        level = bfs_levels(adj, s, bfs_steps.append)
        yield from bfs_steps  # type: ignore[misc]
        yield LevelsStep(tuple(level))

        if t is None or level[t] == UNREACHED:
            logger.debug(
                "Sink unreachable after %d phase(s); maxflow = %s",
                iteration,
                format_amount(flow),
            )
            yield TextStep(f"Done. maxflow = {format_amount(flow)}")
            return _build_result(flow, iteration, level, edges, node_index)

        yield PhaseStep(DFS_PHASE, iteration)

        cursor = [0] * len(adj)
        phase_flow: float = 0
        while True:
            dfs_steps: List[Step] = []
            pushed = dfs_push(
                adj, level, cursor, s, t, dfs_steps.append, update_flow, flows
            )
            yield from dfs_steps  # type: ignore[misc]

            if pushed <= 0:
                break

            flow += pushed
            phase_flow += pushed
            yield TextStep(
                f"Augment +{format_amount(pushed)}, total={format_amount(flow)}"
            )

        logger.debug(
            "Phase %d: sink level %d, blocking flow %s, total %s",
            iteration,
            level[t],
            format_amount(phase_flow),
            format_amount(flow),
        )
        yield ClearHighlightsStep()


def _build_result(
    flow: float,
    phases: int,
    level: List[int],
    edges: Collection[EdgeLike],
    node_index: Dict[NodeID, NodeIndex],
) -> MaxFlowResult:
    """Derive the source side of the min cut from the final BFS levels."""
    reachable = frozenset(i for i, lvl in enumerate(level) if lvl != UNREACHED)
    min_cut = []
    for edge in edges:
        u = node_index.get(edge.source)
        v = node_index.get(edge.target)
        if u is None or v is None:
            continue
        if u in reachable and v not in reachable:
            min_cut.append(edge)
    return MaxFlowResult(
        max_flow=flow, phases=phases, reachable=reachable, min_cut=tuple(min_cut)
    )


class DinitzRun:
    """Single-pass iterator over the steps of one Dinitz run.

    Wraps ``dinitz_steps`` and keeps its return value: ``result`` is None
    until the sequence is exhausted. A run cannot be rewound; start a new one
    to replay from the beginning.
    """

    def __init__(
        self,
        nodes: Sequence[NodeID],
        edges: Collection[EdgeLike],
        src_node: NodeID,
        dst_node: NodeID,
        *,
        update_flow: Optional[FlowWriter] = None,
        flows: Optional[FlowTable] = None,
    ) -> None:
        self._steps = dinitz_steps(
            nodes, edges, src_node, dst_node, update_flow=update_flow, flows=flows
        )
        self.result: Optional[MaxFlowResult] = None
        self.steps_emitted = 0
        self._finished = False

    def __iter__(self) -> "DinitzRun":
        return self

    def __next__(self) -> AnyStep:
        if self._finished:
            raise StopIteration
        try:
            step = next(self._steps)
        except StopIteration as stop:
            self._finished = True
            self.result = stop.value
            raise StopIteration from None
        self.steps_emitted += 1
        return step

    @property
    def done(self) -> bool:
        """True once the sequence is exhausted or closed."""
        return self._finished

    def close(self) -> None:
        """Abandon the remaining steps. Flows already pushed stay on the edges."""
        if not self._finished:
            self._finished = True
            self._steps.close()

    def drain(self) -> Optional[MaxFlowResult]:
        """Consume all remaining steps and return the result."""
        for _ in self:
            pass
        return self.result


@overload
def calc_max_flow(
    nodes: Sequence[NodeID],
    edges: Iterable[EdgeLike],
    src_node: NodeID,
    dst_node: NodeID,
    *,
    return_summary: Literal[False] = False,
    reset_flow: bool = False,
    update_flow: Optional[FlowWriter] = None,
) -> float: ...


@overload
def calc_max_flow(
    nodes: Sequence[NodeID],
    edges: Iterable[EdgeLike],
    src_node: NodeID,
    dst_node: NodeID,
    *,
    return_summary: Literal[True],
    reset_flow: bool = False,
    update_flow: Optional[FlowWriter] = None,
) -> MaxFlowResult: ...


def calc_max_flow(
    nodes: Sequence[NodeID],
    edges: Iterable[EdgeLike],
    src_node: NodeID,
    dst_node: NodeID,
    *,
    return_summary: bool = False,
    reset_flow: bool = False,
    update_flow: Optional[FlowWriter] = None,
) -> Union[float, MaxFlowResult]:
    """Run Dinitz to completion without pacing and return the flow value.

    Flows are placed on the caller's edges in place. The returned amount is
    the flow added by this run, which is the maximum flow when the edges
    start from zero flow (see ``reset_flow``).

    Args:
        nodes: Ordered node identifiers.
        edges: Caller-owned edges.
        src_node: Source node identifier.
        dst_node: Sink node identifier.
        return_summary: If True, return the full ``MaxFlowResult``.
        reset_flow: If True, zero every edge's flow before running.
        update_flow: Optional writer ``(edge, flow) -> None``.

    Returns:
        The flow value, or the ``MaxFlowResult`` when ``return_summary`` is set.
    """
    edges = list(edges)
    flows = FlowTable()
    if reset_flow:
        for edge in edges:
            flows.set(edge, 0)
            if update_flow is None:
                edge.flow = 0
            else:
                update_flow(edge, 0)

    result = DinitzRun(
        nodes, edges, src_node, dst_node, update_flow=update_flow, flows=flows
    ).drain()
    if result is None:
        raise RuntimeError("Dinitz run ended without a result.")
    if return_summary:
        return result
    return result.max_flow
