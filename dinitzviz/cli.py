"""Command-line interface for DinitzViz."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Optional

import yaml

from dinitzviz.config import PLAYBACK_CONFIG
from dinitzviz.lib.algorithms.base import format_amount
from dinitzviz.lib.algorithms.types import (
    AnyStep,
    EdgeHighlightStep,
    FlowUpdateStep,
    LevelsStep,
    NodeHighlightStep,
    PhaseStep,
    TextStep,
)
from dinitzviz.lib.io import dump_network_yaml, edgelist_to_network, load_network_yaml
from dinitzviz.logging import get_logger, set_global_log_level
from dinitzviz.model.network import FlowNetwork
from dinitzviz.simulator import Simulator

logger = get_logger(__name__)

_EDGELIST_SUFFIXES = {".txt", ".edges", ".edgelist"}


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 6,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    all_data = [headers] + rows
    col_widths = []
    for col_idx in range(len(headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _load_network(path: Path) -> FlowNetwork:
    """Load a network from YAML, or from an edge list for edge-list suffixes."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in _EDGELIST_SUFFIXES:
        return edgelist_to_network(text.splitlines())
    return load_network_yaml(text)


def _edge_label(edge: Any) -> str:
    return f"{edge.source}->{edge.target}"


def format_step(step: AnyStep, network: FlowNetwork) -> str:
    """Render a step as one human-readable line, naming nodes instead of indices."""
    tag = f"[{step.type.label}]"
    if isinstance(step, PhaseStep):
        return f"{tag} {step.name} (iteration {step.iteration})"
    if isinstance(step, LevelsStep):
        levels = " ".join(
            f"{network.nodes[i]}={lvl}" for i, lvl in enumerate(step.levels)
        )
        return f"{tag} {levels}"
    if isinstance(step, NodeHighlightStep):
        return f"{tag} {step.kind.label} {network.nodes[step.node]}"
    if isinstance(step, EdgeHighlightStep):
        return f"{tag} {step.kind.label} {_edge_label(step.edge)}"
    if isinstance(step, FlowUpdateStep):
        sign = "+" if step.delta >= 0 else "-"
        return (
            f"{tag} {_edge_label(step.edge)} {sign}{format_amount(abs(step.delta))}"
            f" ({format_amount(step.flow)}/{format_amount(step.capacity)})"
        )
    if isinstance(step, TextStep):
        return f"{tag} {step.message}"
    return tag


def _run_network(
    path: Path,
    source: Optional[str],
    sink: Optional[str],
    delay: float,
    as_json: bool,
    max_flow_only: bool,
    output: Optional[Path],
) -> None:
    """Load a network, play the max-flow run and report the result."""
    network = _load_network(path)
    if source is not None:
        network.set_source(_resolve_node(network, source))
    if sink is not None:
        network.set_sink(_resolve_node(network, sink))
    if network.source is None and network.sink is None:
        if network.auto_assign_roles():
            logger.info(
                "No roles given; using %s as source and %s as sink",
                network.source,
                network.sink,
            )

    def render(step: AnyStep) -> None:
        if max_flow_only:
            return
        if as_json:
            print(json.dumps(step.to_dict(), default=str))
        else:
            print(format_step(step, network))

    config = replace(PLAYBACK_CONFIG, step_delay=delay)
    result = Simulator(network, render, config=config).play()
    if result is None:
        raise RuntimeError("Run was cancelled before it finished.")

    if as_json:
        print(
            json.dumps(
                {
                    "max_flow": result.max_flow,
                    "phases": result.phases,
                    "min_cut": [edge.id for edge in result.min_cut],
                },
                default=str,
            )
        )
    else:
        print(f"Maximum flow: {format_amount(result.max_flow)}")
        if not max_flow_only:
            cut = ", ".join(_edge_label(e) for e in result.min_cut) or "(none)"
            print(f"Minimum cut: {cut}")

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(dump_network_yaml(network), encoding="utf-8")
        logger.info("Wrote network with flows to %s", output)


def _resolve_node(network: FlowNetwork, name: str) -> Any:
    """Map a command-line node name to a node id (numeric ids allowed)."""
    if name in network.nodes:
        return name
    for node in network.nodes:
        if str(node) == name:
            return node
    raise ValueError(f"Node '{name}' does not exist.")


def _inspect_network(path: Path) -> None:
    """Print a summary of nodes, edges and roles."""
    network = _load_network(path)
    print(f"Network: {path}")
    print(f"  Nodes: {len(network.nodes)}  Edges: {len(network.edges)}")
    print(f"  Source: {network.source}  Sink: {network.sink}")

    node_rows = [
        [str(i), str(node), _role(network, node)] for i, node in enumerate(network.nodes)
    ]
    if node_rows:
        print("\n  Nodes:")
        print(_format_table(["Index", "Node", "Role"], node_rows))

    edge_rows = [
        [str(e.id), str(e.source), str(e.target), format_amount(e.capacity)]
        for e in network.edges
    ]
    if edge_rows:
        print("\n  Edges:")
        print(_format_table(["Id", "Source", "Target", "Capacity"], edge_rows))

    if network.source is not None and network.sink is not None:
        try:
            network.validate_for_run()
        except ValueError as exc:
            print(f"\n  Not runnable: {exc}")
        else:
            print("\n  Ready to run.")


def _role(network: FlowNetwork, node: Any) -> str:
    if node == network.source:
        return "source"
    if node == network.sink:
        return "sink"
    return ""


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``dinitzviz`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="dinitzviz",
        description="Replay Dinitz's maximum-flow algorithm step by step.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress informational logs"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,inspect}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Run max flow and print each step")
    run_parser.add_argument("graph", type=Path, help="Path to graph YAML or edge list")
    run_parser.add_argument("--source", "-s", default=None, help="Source node")
    run_parser.add_argument("--sink", "-t", default=None, help="Sink node")
    run_parser.add_argument(
        "--delay",
        type=float,
        default=0.0,
        help="Seconds to pause after each step (default: 0)",
    )
    run_parser.add_argument(
        "--json", action="store_true", help="Print steps as JSON lines"
    )
    run_parser.add_argument(
        "--max-flow-only",
        action="store_true",
        help="Print only the final maximum flow",
    )
    run_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the network with computed flows to this YAML file",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Show nodes, edges and roles of a graph"
    )
    inspect_parser.add_argument("graph", type=Path, help="Path to graph YAML or edge list")

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    try:
        if args.command == "run":
            _run_network(
                path=args.graph,
                source=args.source,
                sink=args.sink,
                delay=args.delay,
                as_json=args.json,
                max_flow_only=args.max_flow_only,
                output=args.output,
            )
        elif args.command == "inspect":
            _inspect_network(args.graph)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
