"""Serialization of ``FlowNetwork`` to and from plain data and YAML.

Dictionary layout (also the YAML document layout)::

    nodes: [A, B, C, D]
    edges:
      - {source: A, target: B, capacity: 3}
      - [A, C, 2]            # shorthand: [source, target, capacity]
    source: A
    sink: D

``flow`` and ``attrs`` are optional per edge; ``source`` and ``sink`` are
optional at the top level. Nodes referenced only by edges are not created
implicitly.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import yaml

from dinitzviz.model.network import FlowNetwork

_TOP_LEVEL_KEYS = {"nodes", "edges", "source", "sink", "attrs"}
_EDGE_KEYS = {"source", "target", "capacity", "flow", "attrs"}


def network_to_dict(network: FlowNetwork) -> Dict[str, Any]:
    """
    Converts a FlowNetwork into a dict representation suitable for JSON/YAML.

    Edges keep their ids and current flows so a finished run can be exported.

    Args:
        network: The FlowNetwork to convert.

    Returns:
        A dict with 'nodes', 'edges', 'source', 'sink' and 'attrs'.
    """
    return {
        "nodes": list(network.nodes),
        "edges": [
            {
                "id": edge.id,
                "source": edge.source,
                "target": edge.target,
                "capacity": edge.capacity,
                "flow": edge.flow,
                "attrs": dict(edge.attrs),
            }
            for edge in network.edges
        ],
        "source": network.source,
        "sink": network.sink,
        "attrs": dict(network.attrs),
    }


def network_from_dict(data: Dict[str, Any]) -> FlowNetwork:
    """
    Reconstructs a FlowNetwork from its dict representation.

    Args:
        data: A dict in the layout described in the module docstring.

    Returns:
        The reconstructed FlowNetwork. Edge ids are reassigned in order.

    Raises:
        ValueError: On unknown keys, malformed entries, unknown nodes or
            invalid capacities.
    """
    if not isinstance(data, dict):
        raise ValueError("Network data must be a mapping at top-level.")
    extra = set(data.keys()) - _TOP_LEVEL_KEYS
    if extra:
        raise ValueError(
            f"Unrecognized top-level key(s): {', '.join(sorted(map(str, extra)))}. "
            f"Allowed keys are {sorted(_TOP_LEVEL_KEYS)}"
        )

    nodes = data.get("nodes") or []
    if not isinstance(nodes, list):
        raise ValueError("'nodes' must be a list")
    edges = data.get("edges") or []
    if not isinstance(edges, list):
        raise ValueError("'edges' must be a list")

    network = FlowNetwork(attrs=dict(data.get("attrs") or {}))
    for node in nodes:
        network.add_node(node)

    for entry in edges:
        if isinstance(entry, (list, tuple)):
            if len(entry) not in (2, 3):
                raise ValueError(
                    f"Edge shorthand {entry!r} must be [source, target] or "
                    "[source, target, capacity]"
                )
            network.add_edge(*entry)
            continue
        if not isinstance(entry, dict):
            raise ValueError(
                "Each edge definition must be a mapping with 'source' and 'target'"
            )
        if "source" not in entry or "target" not in entry:
            raise ValueError("Each edge definition must include 'source' and 'target'")
        unknown = set(entry.keys()) - _EDGE_KEYS - {"id"}
        if unknown:
            raise ValueError(
                f"Unrecognized key(s) {sorted(map(str, unknown))} in edge "
                f"{entry['source']}->{entry['target']}"
            )
        network.add_edge(
            entry["source"],
            entry["target"],
            capacity=entry.get("capacity", 1.0),
            flow=entry.get("flow", 0.0),
            **(entry.get("attrs") or {}),
        )

    if data.get("source") is not None:
        network.set_source(data["source"])
    if data.get("sink") is not None:
        network.set_sink(data["sink"])
    return network


def load_network_yaml(yaml_str: str) -> FlowNetwork:
    """Parse a YAML document into a FlowNetwork.

    Raises:
        ValueError: If the YAML does not describe a valid network.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")
    return network_from_dict(data)


def dump_network_yaml(network: FlowNetwork) -> str:
    """Serialize a FlowNetwork to a YAML document."""
    return yaml.safe_dump(network_to_dict(network), sort_keys=False)


def edgelist_to_network(
    lines: Iterable[str],
    separator: Optional[str] = None,
    network: Optional[FlowNetwork] = None,
) -> FlowNetwork:
    """
    Builds or updates a FlowNetwork from ``source target [capacity]`` lines.

    Nodes are created on first appearance, in order. Blank lines and lines
    starting with ``#`` are ignored.

    Args:
        lines: An iterable of strings, each describing one edge.
        separator: Token separator; any whitespace by default.
        network: An existing FlowNetwork to update; if None, a new one is created.

    Returns:
        The updated (or newly created) FlowNetwork.

    Raises:
        ValueError: On a malformed line or an invalid capacity.
    """
    if network is None:
        network = FlowNetwork()

    for line in lines:
        line = line.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        tokens: List[str] = line.split(separator)
        if len(tokens) not in (2, 3):
            raise ValueError(
                f"Line '{line}' must have 2 or 3 tokens: source target [capacity]."
            )
        src, dst = tokens[0], tokens[1]
        try:
            capacity = float(tokens[2]) if len(tokens) == 3 else 1.0
        except ValueError:
            raise ValueError(f"Line '{line}' has a non-numeric capacity.") from None

        for node in (src, dst):
            if node not in network.nodes:
                network.add_node(node)
        network.add_edge(src, dst, capacity)

    return network
