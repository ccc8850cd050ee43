"""Base enums and aliases for the Dinitz step engine."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Hashable, Protocol, Union

#: Node identifier as supplied by the caller; position in the node sequence is its index.
NodeID = Hashable

#: Index of a node within the ordered node sequence.
NodeIndex = int

#: Capacities and flows are real-valued; integral values are not assumed.
Capacity = Union[int, float]

#: Level of a node that the BFS did not reach.
UNREACHED = -1


class _LabeledEnum(IntEnum):
    @property
    def label(self) -> str:
        """Lower-case, dash-separated name used in serialized steps."""
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_string(cls, value: str):
        """Parse a member from its name or label (case-insensitive).

        Raises:
            ValueError: If the string doesn't match any member.
        """
        try:
            return cls[value.upper().replace("-", "_")]
        except KeyError:
            valid = ", ".join(e.label for e in cls)
            raise ValueError(
                f"Invalid {cls.__name__} '{value}'. Valid values are: {valid}"
            ) from None


class StepType(_LabeledEnum):
    """Tags of the visualization events emitted by the engine."""

    PHASE = 1
    LEVELS = 2
    HIGHLIGHT_NODE = 3
    HIGHLIGHT_EDGE = 4
    FLOW_UPDATE = 5
    TEXT = 6
    CLEAR_HIGHLIGHTS = 7


class NodeHighlight(_LabeledEnum):
    """Why a node is highlighted during the BFS sweep."""

    START = 1  # BFS starts at this node (the source)
    POP = 2  # Node dequeued for expansion
    DISCOVER = 3  # Node reached for the first time, level assigned


class EdgeHighlight(_LabeledEnum):
    """Why an edge is highlighted."""

    BFS_FORWARD = 1  # Forward residual arc examined by BFS
    BFS_REVERSE = 2  # Reverse residual arc examined by BFS (flow could be cancelled)
    DFS = 3  # Arc tried by the blocking-flow search


class ArcSign(IntEnum):
    """Orientation of a residual arc relative to its owning edge."""

    FORWARD = 1
    REVERSE = -1


class EdgeLike(Protocol):
    """Shape of a caller-owned directed edge read by the engine."""

    source: NodeID
    target: NodeID
    capacity: Capacity
    flow: Capacity


#: Writes a new flow value back to a caller-owned edge.
FlowWriter = Callable[[EdgeLike, float], None]


def set_edge_flow(edge: EdgeLike, flow: float) -> None:
    """Default flow writer: assign ``edge.flow`` on the caller's object."""
    edge.flow = flow


def format_amount(value: float) -> str:
    """Format a flow amount for status text.

    Integral values print without a fractional part; others keep up to six
    decimals with trailing zeros trimmed.

    Examples:
        5.0 -> "5"; 2.5 -> "2.5"; 0.1 + 0.2 -> "0.3".
    """
    s = f"{float(value):.6f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s == "-0":
        s = "0"
    return s
