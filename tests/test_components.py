"""Tests for cyclemean.components — decomposition and dense indexing."""

import numpy as np
import pytest

from cyclemean.components import (
    IndexedComponent,
    KosarajuStrongComponents,
    ScipyStrongComponents,
    StrongConnectivityAlgorithm,
)
from cyclemean.graph import DirectedGraph


PROVIDERS = [ScipyStrongComponents(), KosarajuStrongComponents()]


def _partition(components):
    return {frozenset(c.vertices()) for c in components}


# ── Fixtures ────────────────────────────────────────────────────

@pytest.fixture
def two_cycles_and_tail():
    """{0,1} and {2,3,4} are strong components; 5 hangs off the end."""
    return DirectedGraph.from_edges([
        (0, 1, 1.0), (1, 0, 1.0),
        (1, 2, 9.0),
        (2, 3, 1.0), (3, 4, 1.0), (4, 2, 1.0),
        (4, 5, 1.0),
    ])


# ═══════════════════════════════════════════════════════════════════
# Decomposition providers
# ═══════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("provider", PROVIDERS, ids=repr)
class TestDecomposition:

    def test_partition(self, provider, two_cycles_and_tail):
        comps = provider.decompose(two_cycles_and_tail)
        assert _partition(comps) == {
            frozenset({0, 1}), frozenset({2, 3, 4}), frozenset({5}),
        }

    def test_ordered_by_earliest_vertex(self, provider, two_cycles_and_tail):
        comps = provider.decompose(two_cycles_and_tail)
        assert [c.vertices()[0] for c in comps] == [0, 2, 5]

    def test_no_crossing_arcs(self, provider, two_cycles_and_tail):
        for comp in provider.decompose(two_cycles_and_tail):
            members = set(comp.vertices())
            for arc in comp.arcs():
                assert arc.tail in members and arc.head in members

    def test_chain_gives_singletons(self, provider):
        g = DirectedGraph.from_edges([("A", "B"), ("B", "C")])
        comps = provider.decompose(g)
        assert [c.vertices() for c in comps] == [["A"], ["B"], ["C"]]
        assert all(c.number_of_arcs == 0 for c in comps)

    def test_self_loop_kept(self, provider):
        g = DirectedGraph.from_edges([("A", "A", 2.0), ("A", "B", 1.0)])
        comps = provider.decompose(g)
        assert comps[0].number_of_arcs == 1

    def test_zero_weight_arcs_count(self, provider):
        g = DirectedGraph.from_edges([(0, 1, 0.0), (1, 0, 0.0)])
        assert _partition(provider.decompose(g)) == {frozenset({0, 1})}

    def test_empty_graph(self, provider):
        assert list(provider.decompose(DirectedGraph())) == []

    def test_satisfies_protocol(self, provider):
        assert isinstance(provider, StrongConnectivityAlgorithm)


def test_providers_agree_on_random_graphs():
    rng = np.random.default_rng(7)
    for _ in range(20):
        n = int(rng.integers(2, 12))
        g = DirectedGraph()
        for v in range(n):
            g.add_vertex(v)
        for u in range(n):
            for v in range(n):
                if rng.random() < 0.2:
                    g.add_arc(u, v, float(rng.normal()))
        scipy_parts = ScipyStrongComponents().decompose(g)
        kosaraju_parts = KosarajuStrongComponents().decompose(g)
        assert [c.vertices() for c in scipy_parts] == \
            [c.vertices() for c in kosaraju_parts]


# ═══════════════════════════════════════════════════════════════════
# IndexedComponent
# ═══════════════════════════════════════════════════════════════════

class TestIndexedComponent:

    def test_arcs_grouped_by_head(self):
        g = DirectedGraph.from_edges([
            ("a", "b", 1.0), ("b", "c", 2.0), ("c", "a", 3.0), ("a", "c", 10.0),
        ])
        comp = IndexedComponent.from_graph(g)
        assert comp.vertices == ("a", "b", "c")
        assert comp.n_arcs == 4
        np.testing.assert_array_equal(comp.in_offsets, [0, 1, 2, 4])
        np.testing.assert_array_equal(comp.arc_head, [0, 1, 2, 2])
        np.testing.assert_array_equal(comp.arc_tail, [2, 0, 1, 0])
        np.testing.assert_allclose(comp.arc_weight, [3.0, 1.0, 2.0, 10.0])
        assert list(comp.incoming(2)) == [2, 3]

    def test_arc_objects_preserved(self):
        g = DirectedGraph.from_edges([(0, 1, 1.0), (1, 0, 2.0)])
        comp = IndexedComponent.from_graph(g)
        assert set(comp.arcs) == set(g.arcs())

    @pytest.mark.parametrize("edges,expected", [
        ([], False),
        ([(0, 0, 1.0)], True),
        ([(0, 1, 1.0), (1, 0, 1.0)], True),
    ])
    def test_may_contain_cycle(self, edges, expected):
        g = DirectedGraph.from_edges(edges)
        assert IndexedComponent.from_graph(g).may_contain_cycle() is expected

    def test_lone_vertex_cannot_cycle(self):
        g = DirectedGraph()
        g.add_vertex("solo")
        assert not IndexedComponent.from_graph(g).may_contain_cycle()
