"""DinitzViz: step-by-step visualization engine for Dinitz's maximum flow.

DinitzViz computes maximum flows with Dinitz's (Dinic's) algorithm and exposes
the computation as an ordered stream of visualization steps that a renderer
can replay at its own pace.

Primary API:
    dinitz_steps() - Lazy step generator; its return value is the result
    DinitzRun - Single-pass iterator wrapper that keeps the result
    calc_max_flow() - Run to completion and return the flow value
    Simulator - Paced, cancellable playback over a FlowNetwork
    FlowNetwork, Edge - Caller-side graph model

Example:
    from dinitzviz import FlowNetwork, Simulator

    net = FlowNetwork()
    for name in "ABCD":
        net.add_node(name)
    net.add_edge("A", "B", 3)
    net.add_edge("A", "C", 2)
    net.add_edge("B", "D", 2)
    net.add_edge("C", "D", 3)
    net.set_source("A")
    net.set_sink("D")

    result = Simulator(net, renderer=print, sleep=lambda _: None).play()
    assert result.max_flow == 4
"""

from __future__ import annotations

from dinitzviz import cli, logging
from dinitzviz._version import __version__
from dinitzviz.lib.algorithms.base import EdgeHighlight, NodeHighlight, StepType
from dinitzviz.lib.algorithms.dinitz import DinitzRun, calc_max_flow, dinitz_steps
from dinitzviz.lib.algorithms.types import (
    ClearHighlightsStep,
    EdgeHighlightStep,
    FlowUpdateStep,
    LevelsStep,
    MaxFlowResult,
    NodeHighlightStep,
    PhaseStep,
    Step,
    TextStep,
)
from dinitzviz.lib.nx import from_networkx, to_networkx
from dinitzviz.model.network import Edge, FlowNetwork
from dinitzviz.simulator import Playback, Simulator

__all__ = [
    # Version
    "__version__",
    # Model
    "FlowNetwork",
    "Edge",
    # Engine
    "dinitz_steps",
    "DinitzRun",
    "calc_max_flow",
    "MaxFlowResult",
    # Steps
    "StepType",
    "NodeHighlight",
    "EdgeHighlight",
    "Step",
    "PhaseStep",
    "LevelsStep",
    "NodeHighlightStep",
    "EdgeHighlightStep",
    "FlowUpdateStep",
    "TextStep",
    "ClearHighlightsStep",
    # Playback
    "Simulator",
    "Playback",
    # Library integrations (NetworkX)
    "from_networkx",
    "to_networkx",
    # Utilities
    "cli",
    "logging",
]
