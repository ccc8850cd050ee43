"""Randomized cross-checks of the engine against brute force and NetworkX."""

import itertools
import random

import networkx as nx
import pytest
from pytest import approx

from dinitzviz.lib.algorithms.dinitz import DinitzRun, calc_max_flow
from dinitzviz.lib.algorithms.types import FlowUpdateStep
from dinitzviz.model.network import FlowNetwork


def _random_network(seed, n_nodes, n_edges, fractional=False):
    rng = random.Random(seed)
    net = FlowNetwork()
    for i in range(n_nodes):
        net.add_node(i)
    for _ in range(n_edges):
        u = rng.randrange(n_nodes)
        v = rng.randrange(n_nodes)
        cap = round(rng.uniform(0, 5), 2) if fractional else rng.randint(0, 6)
        net.add_edge(u, v, cap)
    net.set_source(0)
    net.set_sink(n_nodes - 1)
    return net


def _brute_force_min_cut(net):
    """Minimum capacity over every s-t cut of the node set."""
    others = [n for n in net.nodes if n not in (net.source, net.sink)]
    best = None
    for r in range(len(others) + 1):
        for subset in itertools.combinations(others, r):
            side = {net.source, *subset}
            cut = sum(
                e.capacity
                for e in net.edges
                if e.source in side and e.target not in side
            )
            best = cut if best is None else min(best, cut)
    return best


@pytest.mark.parametrize("seed", range(25))
def test_max_flow_equals_brute_force_min_cut(seed, flow_checker):
    net = _random_network(seed, n_nodes=6, n_edges=12)
    result = calc_max_flow(
        net.nodes, net.edges, net.source, net.sink, return_summary=True
    )

    assert result.max_flow == approx(_brute_force_min_cut(net))
    assert result.min_cut_capacity == approx(result.max_flow)
    assert net.net_outflow(net.source) == approx(result.max_flow)
    flow_checker(net)


@pytest.mark.parametrize("seed", range(15))
def test_matches_networkx(seed, flow_checker):
    net = _random_network(seed + 100, n_nodes=8, n_edges=20, fractional=True)

    G = nx.DiGraph()
    G.add_nodes_from(net.nodes)
    for e in net.edges:
        if e.source == e.target:
            continue
        if G.has_edge(e.source, e.target):
            G[e.source][e.target]["capacity"] += e.capacity
        else:
            G.add_edge(e.source, e.target, capacity=e.capacity)
    expected = nx.maximum_flow_value(G, net.source, net.sink)

    assert calc_max_flow(net.nodes, net.edges, net.source, net.sink) == approx(
        expected, abs=1e-9
    )
    flow_checker(net)


@pytest.mark.parametrize("seed", range(10))
def test_flow_updates_match_edge_flows(seed):
    """Replaying the signed deltas of every FlowUpdateStep rebuilds the edge flows."""
    net = _random_network(seed + 200, n_nodes=7, n_edges=16)
    replayed = {e.id: 0.0 for e in net.edges}

    for step in DinitzRun(net.nodes, net.edges, net.source, net.sink):
        if isinstance(step, FlowUpdateStep):
            replayed[step.edge.id] += step.delta
            assert replayed[step.edge.id] == approx(step.flow)
            assert step.flow == step.edge.flow

    for e in net.edges:
        assert replayed[e.id] == approx(e.flow)
