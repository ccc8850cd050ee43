import json
from dataclasses import FrozenInstanceError

import pytest

from dinitzviz.lib.algorithms.base import (
    EdgeHighlight,
    NodeHighlight,
    StepType,
    format_amount,
    set_edge_flow,
)
from dinitzviz.lib.algorithms.types import (
    ClearHighlightsStep,
    EdgeHighlightStep,
    FlowUpdateStep,
    LevelsStep,
    MaxFlowResult,
    NodeHighlightStep,
    PhaseStep,
    TextStep,
    edge_ref,
)
from dinitzviz.model.network import Edge


class _PlainEdge:
    def __init__(self, source, target):
        self.source = source
        self.target = target
        self.capacity = 1
        self.flow = 0


class TestEnums:
    def test_labels(self):
        assert StepType.HIGHLIGHT_NODE.label == "highlight-node"
        assert StepType.CLEAR_HIGHLIGHTS.label == "clear-highlights"
        assert EdgeHighlight.BFS_REVERSE.label == "bfs-reverse"
        assert NodeHighlight.DISCOVER.label == "discover"

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("flow-update", StepType.FLOW_UPDATE),
            ("FLOW_UPDATE", StepType.FLOW_UPDATE),
            ("Text", StepType.TEXT),
        ],
    )
    def test_from_string(self, text, expected):
        assert StepType.from_string(text) is expected

    def test_from_string_invalid(self):
        with pytest.raises(ValueError, match="Invalid EdgeHighlight 'sideways'"):
            EdgeHighlight.from_string("sideways")


class TestStepSerialization:
    def test_to_dict_uses_edge_id(self):
        edge = Edge("A", "B", 3, id=7)
        assert EdgeHighlightStep(edge, EdgeHighlight.DFS).to_dict() == {
            "type": "highlight-edge",
            "edge": 7,
            "kind": "dfs",
        }
        assert FlowUpdateStep(edge, -1.5, 0.5, 3).to_dict() == {
            "type": "flow-update",
            "edge": 7,
            "delta": -1.5,
            "flow": 0.5,
            "capacity": 3,
        }

    def test_edge_without_id_uses_endpoints(self):
        assert edge_ref(_PlainEdge("u", "v")) == ["u", "v"]
        assert edge_ref(Edge("u", "v")) == ["u", "v"]

    def test_all_steps_are_json_serializable(self):
        edge = Edge("A", "B", 3, id=0)
        steps = [
            PhaseStep("BFS", 1),
            LevelsStep((0, 1, -1)),
            NodeHighlightStep(2, NodeHighlight.POP),
            EdgeHighlightStep(edge, EdgeHighlight.BFS_FORWARD),
            FlowUpdateStep(edge, 1, 1, 3),
            TextStep("hello"),
            ClearHighlightsStep(),
        ]
        dumped = json.loads(json.dumps([s.to_dict() for s in steps]))
        assert [d["type"] for d in dumped] == [t.label for t in StepType]
        assert dumped[1]["levels"] == [0, 1, -1]
        assert dumped[6] == {"type": "clear-highlights"}

    def test_steps_are_frozen(self):
        step = PhaseStep("BFS", 1)
        with pytest.raises(FrozenInstanceError):
            step.iteration = 2  # type: ignore[misc]

    def test_edge_not_part_of_equality(self):
        a = Edge("A", "B", 1, id=0)
        b = Edge("C", "D", 5, id=1)
        assert EdgeHighlightStep(a, EdgeHighlight.DFS) == EdgeHighlightStep(
            b, EdgeHighlight.DFS
        )
        assert FlowUpdateStep(a, 1, 1, 1) != FlowUpdateStep(a, 1, 1, 2)


class TestFormatAmount:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (5, "5"),
            (5.0, "5"),
            (2.5, "2.5"),
            (0.1 + 0.2, "0.3"),
            (0, "0"),
            (-0.0, "0"),
            (1e-9, "0"),
            (1 / 3, "0.333333"),
        ],
    )
    def test_format(self, value, expected):
        assert format_amount(value) == expected


def test_min_cut_capacity():
    cut = (Edge("A", "B", 2), Edge("A", "C", 1.5))
    assert MaxFlowResult(3.5, 2, frozenset({0}), cut).min_cut_capacity == 3.5
    assert MaxFlowResult(0, 1).min_cut_capacity == 0


def test_set_edge_flow():
    edge = _PlainEdge("A", "B")
    set_edge_flow(edge, 0.75)
    assert edge.flow == 0.75
