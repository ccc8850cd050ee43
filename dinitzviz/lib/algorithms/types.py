"""Step events and result containers produced by the Dinitz engine.

Every step is an immutable snapshot carrying only what a renderer needs.
Edges are referenced by the caller's own objects so a renderer can update
the same items it drew; ``to_dict()`` turns a step into a JSON-friendly
mapping, referring to edges by their ``id`` attribute.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, Tuple, Union

from dinitzviz.lib.algorithms.base import (
    EdgeHighlight,
    EdgeLike,
    NodeHighlight,
    NodeIndex,
    StepType,
)


def edge_ref(edge: EdgeLike) -> Any:
    """Return a serializable reference for an edge.

    Uses the edge's ``id`` attribute when present, otherwise the
    ``[source, target]`` pair.
    """
    edge_id = getattr(edge, "id", None)
    if edge_id is not None:
        return edge_id
    return [edge.source, edge.target]


@dataclass(frozen=True)
class Step:
    """Base class for all step events."""

    type: ClassVar[StepType]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.label}


@dataclass(frozen=True)
class PhaseStep(Step):
    """Start of a BFS or DFS phase."""

    type: ClassVar[StepType] = StepType.PHASE

    name: str
    iteration: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.label, "name": self.name, "iteration": self.iteration}


@dataclass(frozen=True)
class LevelsStep(Step):
    """Snapshot of the level assignment computed by the last BFS."""

    type: ClassVar[StepType] = StepType.LEVELS

    levels: Tuple[int, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.label, "levels": list(self.levels)}


@dataclass(frozen=True)
class NodeHighlightStep(Step):
    type: ClassVar[StepType] = StepType.HIGHLIGHT_NODE

    node: NodeIndex
    kind: NodeHighlight

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.label, "node": self.node, "kind": self.kind.label}


@dataclass(frozen=True)
class EdgeHighlightStep(Step):
    type: ClassVar[StepType] = StepType.HIGHLIGHT_EDGE

    edge: EdgeLike = field(compare=False)
    kind: EdgeHighlight

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.label,
            "edge": edge_ref(self.edge),
            "kind": self.kind.label,
        }


@dataclass(frozen=True)
class FlowUpdateStep(Step):
    """Flow on ``edge`` changed by ``delta`` and is now ``flow``.

    ``delta`` is negative when the push went through the reverse residual
    arc, i.e. flow was cancelled on the edge.
    """

    type: ClassVar[StepType] = StepType.FLOW_UPDATE

    edge: EdgeLike = field(compare=False)
    delta: float
    flow: float
    capacity: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.label,
            "edge": edge_ref(self.edge),
            "delta": self.delta,
            "flow": self.flow,
            "capacity": self.capacity,
        }


@dataclass(frozen=True)
class TextStep(Step):
    type: ClassVar[StepType] = StepType.TEXT

    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.label, "message": self.message}


@dataclass(frozen=True)
class ClearHighlightsStep(Step):
    type: ClassVar[StepType] = StepType.CLEAR_HIGHLIGHTS


AnyStep = Union[
    PhaseStep,
    LevelsStep,
    NodeHighlightStep,
    EdgeHighlightStep,
    FlowUpdateStep,
    TextStep,
    ClearHighlightsStep,
]


@dataclass(frozen=True)
class MaxFlowResult:
    """Final outcome of a Dinitz run.

    Attributes:
        max_flow: Total flow leaving the source.
        phases: Number of BFS sweeps performed, including the last one that
            failed to reach the sink.
        reachable: Indices of nodes reachable from the source in the final
            residual network (the source side of a minimum cut).
        min_cut: Edges leading from the reachable set to the rest of the graph.
            With a maximum flow in place, each of them is saturated.
    """

    max_flow: float
    phases: int
    reachable: FrozenSet[NodeIndex] = frozenset()
    min_cut: Tuple[EdgeLike, ...] = ()

    @property
    def min_cut_capacity(self) -> float:
        """Sum of capacities of the min-cut edges."""
        return sum(edge.capacity for edge in self.min_cut)
