"""Global pytest configuration and shared sample networks.

Fixtures return fresh ``FlowNetwork`` objects with zero flow and source/sink
roles set. ``flow_checker`` returns a helper asserting capacity feasibility
and conservation on a network.
"""

from __future__ import annotations

import pytest
from pytest import approx

from dinitzviz.model.network import FlowNetwork


def _network(nodes, edges, source, sink) -> FlowNetwork:
    net = FlowNetwork()
    for node in nodes:
        net.add_node(node)
    for src, dst, cap in edges:
        net.add_edge(src, dst, cap)
    net.set_source(source)
    net.set_sink(sink)
    return net


@pytest.fixture
def diamond():
    # Capacity:
    #       [3]       [2]
    #   ┌───────►B────────┐
    #   │                 ▼
    #   A                 D
    #   │                 ▲
    #   │   [2]       [3] │
    #   └───────►C────────┘
    #
    # Max flow A->D = 4
    return _network(
        "ABCD",
        [("A", "B", 3), ("A", "C", 2), ("B", "D", 2), ("C", "D", 3)],
        "A",
        "D",
    )


@pytest.fixture
def unreachable_sink():
    # A ──[2]──► B      C ──[1]──► A
    #
    # Nothing enters C, so C is unreachable from A.
    return _network("ABC", [("A", "B", 2), ("C", "A", 1)], "A", "C")


@pytest.fixture
def parallel_pair():
    # A ══[2]══► B
    # A ══[3]══► B   (two distinct edges)
    return _network("AB", [("A", "B", 2), ("A", "B", 3)], "A", "B")


@pytest.fixture
def zero_capacity():
    # A ──[0]──► B
    # A ──[4]──► C ──[1]──► B
    return _network(
        "ABC", [("A", "B", 0), ("A", "C", 4), ("C", "B", 1)], "A", "B"
    )


@pytest.fixture
def cancellation():
    # Capacity 1 everywhere.
    #
    #   s ──► a ──► b ──► t      (shortest path, used in phase 1)
    #   │     │     ▲     ▲
    #   │     ▼     │     │
    #   │     x ──► y ────┘
    #   ▼           │
    #   c ──► z ────┘ (z ──► b)
    #
    # Phase 2 must cancel the flow on a->b: s-c-z-b-a-x-y-t. Max flow 2.
    return _network(
        ["s", "a", "b", "t", "x", "y", "c", "z"],
        [
            ("s", "a", 1),
            ("a", "b", 1),
            ("b", "t", 1),
            ("a", "x", 1),
            ("x", "y", 1),
            ("y", "t", 1),
            ("s", "c", 1),
            ("c", "z", 1),
            ("z", "b", 1),
        ],
        "s",
        "t",
    )


@pytest.fixture
def fractional():
    # A ──[0.5]──► B ──[0.25]──► D
    # A ──[0.1]──► C ──[0.2]───► D
    # B ──[0.3]──► C
    # Max flow A->D = 0.25 + 0.2 = 0.45
    return _network(
        "ABCD",
        [
            ("A", "B", 0.5),
            ("B", "D", 0.25),
            ("A", "C", 0.1),
            ("C", "D", 0.2),
            ("B", "C", 0.3),
        ],
        "A",
        "D",
    )


@pytest.fixture
def flow_checker():
    """Return a function asserting feasibility (and optionally conservation)."""

    def check(net: FlowNetwork, conservation: bool = True) -> None:
        for edge in net.edges:
            assert 0 <= edge.flow <= edge.capacity, edge
        if conservation:
            for node in net.nodes:
                if node in (net.source, net.sink):
                    continue
                assert net.net_outflow(node) == approx(0.0, abs=1e-9), node

    return check
