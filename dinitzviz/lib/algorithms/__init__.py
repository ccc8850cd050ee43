"""Dinitz max-flow engine: residual network, level graph, blocking flow, steps."""

from dinitzviz.lib.algorithms.base import EdgeHighlight, NodeHighlight, StepType
from dinitzviz.lib.algorithms.blocking import dfs_push
from dinitzviz.lib.algorithms.dinitz import DinitzRun, calc_max_flow, dinitz_steps
from dinitzviz.lib.algorithms.levels import bfs_levels
from dinitzviz.lib.algorithms.residual import FlowTable, ResidualArc, build_residual

__all__ = [
    "StepType",
    "NodeHighlight",
    "EdgeHighlight",
    "ResidualArc",
    "FlowTable",
    "build_residual",
    "bfs_levels",
    "dfs_push",
    "dinitz_steps",
    "DinitzRun",
    "calc_max_flow",
]
