import pytest

from dinitzviz.lib.algorithms.base import EdgeHighlight
from dinitzviz.lib.algorithms.blocking import dfs_push
from dinitzviz.lib.algorithms.levels import bfs_levels
from dinitzviz.lib.algorithms.residual import build_residual
from dinitzviz.lib.algorithms.types import EdgeHighlightStep, FlowUpdateStep


def _phase(net):
    """Residual network, levels and fresh cursors for one phase."""
    adj = build_residual(net.nodes, net.edges)
    level = bfs_levels(adj, net.node_index(net.source))
    cursor = [0] * len(adj)
    return adj, level, cursor


class TestDfsPush:
    def test_first_push_takes_first_admissible_path(self, diamond):
        adj, level, cursor = _phase(diamond)
        ab, ac, bd, cd = diamond.edges
        steps = []

        pushed = dfs_push(adj, level, cursor, 0, 3, steps.append)

        assert pushed == 2
        assert ab.flow == 2 and bd.flow == 2
        assert ac.flow == 0 and cd.flow == 0

        assert [type(s) for s in steps] == [
            EdgeHighlightStep,
            EdgeHighlightStep,
            FlowUpdateStep,
            FlowUpdateStep,
        ]
        assert [s.edge for s in steps[:2]] == [ab, bd]
        assert all(s.kind == EdgeHighlight.DFS for s in steps[:2])
        # Flow updates are reported deepest edge first.
        assert steps[2].edge is bd and steps[3].edge is ab
        assert steps[2] == FlowUpdateStep(bd, 2, 2, 2)
        assert steps[3] == FlowUpdateStep(ab, 2, 2, 3)

    def test_repeated_push_until_blocked(self, diamond):
        adj, level, cursor = _phase(diamond)

        pushes = []
        while True:
            pushed = dfs_push(adj, level, cursor, 0, 3)
            if pushed == 0:
                break
            pushes.append(pushed)

        assert pushes == [2, 2]
        assert [e.flow for e in diamond.edges] == [2, 2, 2, 2]

    def test_dead_end_retreat_advances_parent_cursor(self, diamond):
        adj, level, cursor = _phase(diamond)
        dfs_push(adj, level, cursor, 0, 3)
        assert cursor[0] == 0  # A->B still has residual 1

        steps = []
        pushed = dfs_push(adj, level, cursor, 0, 3, steps.append)

        assert pushed == 2
        # A->B is tried, B is a dead end, then A->C->D succeeds.
        highlighted = [s.edge for s in steps if isinstance(s, EdgeHighlightStep)]
        ab, ac, _, cd = diamond.edges
        assert highlighted == [ab, ac, cd]
        assert cursor[0] == 1
        assert cursor[1] == len(adj[1])

    def test_cursors_only_move_forward(self, cancellation):
        adj, level, cursor = _phase(cancellation)
        history = [list(cursor)]
        while dfs_push(adj, level, cursor, 0, 3) > 0:
            history.append(list(cursor))
        history.append(list(cursor))

        for before, after in zip(history, history[1:]):
            assert all(b <= a for b, a in zip(before, after))
        for u, pos in enumerate(cursor):
            assert pos <= len(adj[u])

    def test_push_through_reverse_arc_cancels_flow(self, cancellation):
        # Phase 1 routes s-a-b-t.
        adj, level, cursor = _phase(cancellation)
        assert dfs_push(adj, level, cursor, 0, 3) == 1
        assert dfs_push(adj, level, cursor, 0, 3) == 0
        ab = cancellation.edges[1]
        assert ab.flow == 1

        # Phase 2 goes back over a->b.
        adj, level, cursor = _phase(cancellation)
        steps = []
        assert dfs_push(adj, level, cursor, 0, 3, steps.append) == 1

        updates = {s.edge.id: s for s in steps if isinstance(s, FlowUpdateStep)}
        assert updates[ab.id].delta == -1
        assert updates[ab.id].flow == 0
        assert ab.flow == 0
        assert sum(e.flow for e in cancellation.edges) == 8

    def test_source_equals_sink_pushes_nothing(self, diamond):
        adj, level, cursor = _phase(diamond)
        steps = []
        assert dfs_push(adj, level, cursor, 2, 2, steps.append) == 0
        assert steps == []
        assert all(e.flow == 0 for e in diamond.edges)

    def test_custom_flow_writer(self, diamond):
        adj, level, cursor = _phase(diamond)
        written = []

        pushed = dfs_push(
            adj, level, cursor, 0, 3, update_flow=lambda e, f: written.append((e.id, f))
        )

        assert pushed == 2
        assert written == [(2, 2), (0, 2)]
        # The writer owns the update; the edges themselves are untouched.
        assert all(e.flow == 0 for e in diamond.edges)

    def test_fractional_bottleneck(self, fractional):
        adj, level, cursor = _phase(fractional)
        pushed = dfs_push(adj, level, cursor, 0, 3)
        assert pushed == pytest.approx(0.25)
