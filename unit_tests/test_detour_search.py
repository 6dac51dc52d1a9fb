import logging
import math
import pytest
from collections import Counter
from salesman.graph import Graph
from salesman.detour_search import DetourSearch, SearchState
from salesman.observers import RecordingObserver
from salesman.errors import DetourSearchExhausted, UnknownVertexReference

@pytest.fixture
def diamond_graph():
    # A(0,0) -- B(1,1) -- C(2,0): short way round, 2*sqrt(2)
    # A(0,0) -- D(1,-3) -- C(2,0): long way round, 2*sqrt(10)
    return Graph.from_points_and_arcs(
        [("A", 0, 0), ("B", 1, 1), ("C", 2, 0), ("D", 1, -3)],
        [("A", "B"), ("B", "C"), ("A", "D"), ("D", "C")],
    )

@pytest.fixture
def revisit_graph():
    # O's nearest neighbour N reaches X the long way (1 + sqrt(10));
    # the second neighbour M reaches X for 1.5 + 1.5. X -- T is 3.
    return Graph.from_points_and_arcs(
        [("O", 0, 0), ("N", 1, 0), ("M", 0, 1.5), ("X", 0, 3), ("T", 0, 6)],
        [("O", "N"), ("O", "M"), ("N", "X"), ("M", "X"), ("X", "T")],
    )

def test_direct_adjacency_returns_single_edge(diamond_graph):
    result = DetourSearch(diamond_graph).search("A", "B", 100.0)
    assert result.path == ["B"]
    assert result.distance == pytest.approx(math.sqrt(2))

def test_direct_adjacency_ignores_longer_alternatives():
    # A-C direct (2.0) competes with A-B-C (2*sqrt(2))
    graph = Graph.from_points_and_arcs(
        [("A", 0, 0), ("B", 1, 1), ("C", 2, 0)],
        [("A", "B"), ("B", "C"), ("A", "C")],
    )
    result = DetourSearch(graph).search("A", "C", 10.0)
    assert result.path == ["C"]
    assert result.distance == pytest.approx(2.0)

def test_finds_cheapest_detour(diamond_graph):
    result = DetourSearch(diamond_graph).search("A", "C", 10.0)
    assert result.path == ["B", "C"]
    assert result.distance == pytest.approx(2 * math.sqrt(2))

def test_ceiling_equal_to_path_cost_is_accepted(diamond_graph):
    ceiling = 0.0 + diamond_graph.get_edge_by_nodes("A", "B").distance + diamond_graph.get_edge_by_nodes("B", "C").distance
    result = DetourSearch(diamond_graph).search("A", "C", ceiling)
    assert result.path == ["B", "C"]
    assert result.distance <= ceiling

def test_ceiling_too_low_raises(diamond_graph):
    with pytest.raises(DetourSearchExhausted) as excinfo:
        DetourSearch(diamond_graph).search("A", "C", 1.0)
    assert excinfo.value.origin_id == "A"
    assert excinfo.value.target_id == "C"
    assert excinfo.value.ceiling == 1.0

def test_long_route_used_when_short_route_missing():
    graph = Graph.from_points_and_arcs(
        [("A", 0, 0), ("C", 2, 0), ("D", 1, -3)],
        [("A", "D"), ("D", "C")],
    )
    result = DetourSearch(graph).search("A", "C", 7.0)
    assert result.path == ["D", "C"]
    assert result.distance == pytest.approx(2 * math.sqrt(10))

def test_search_revises_finalized_vertex_with_shorter_path(revisit_graph):
    result = DetourSearch(revisit_graph).search("O", "T", 100.0)
    assert result.path == ["M", "X", "T"]
    assert result.distance == pytest.approx(6.0)

def test_origin_equals_target(diamond_graph):
    result = DetourSearch(diamond_graph).search("A", "A", 0.0)
    assert result.path == []
    assert result.distance == 0.0

def test_unknown_vertices_rejected(diamond_graph):
    with pytest.raises(UnknownVertexReference):
        DetourSearch(diamond_graph).search("A", "Z", 10.0)

def test_unreachable_target_raises():
    graph = Graph.from_points_and_arcs([("A", 0, 0), ("B", 1, 0), ("Z", 5, 5)], [("A", "B")])
    with pytest.raises(DetourSearchExhausted):
        DetourSearch(graph).search("A", "Z", math.inf)

def test_observer_receives_result_and_ceiling(diamond_graph):
    observer = RecordingObserver()
    DetourSearch(diamond_graph, observer).search("A", "C", 10.0)
    detours = observer.of_kind("detour")
    assert len(detours) == 1
    assert detours[0]["path"] == ["B", "C"]
    assert detours[0]["ceiling"] == 10.0
    assert detours[0]["distance"] <= detours[0]["ceiling"]

def test_search_counter(diamond_graph):
    search = DetourSearch(diamond_graph)
    search.search("A", "C", 10.0)
    search.search("A", "B", 10.0)
    assert search.searches == 2

def test_search_state_transitions():
    state = SearchState(10.0)
    assert state.improves("v", 3.0)
    state.enter("v", 3.0, None)
    assert not state.improves("v", 1.0) # in progress
    state.finish("v")
    assert state.improves("v", 2.0)
    assert not state.improves("v", 3.0) # not strictly shorter
    assert state.tighten(4.0)
    assert not state.tighten(5.0)
    assert state.ceiling == 4.0

class CountingGraph(Graph):
    """Records which vertices get expanded and how many of their edges get scanned."""
    def __init__(self):
        super().__init__()
        self.expanded = []
        self.scanned = Counter()

    def get_neighbor_edges(self, node_id):
        edges = super().get_neighbor_edges(node_id)
        self.expanded.append(node_id)
        return self._count_scanned(node_id, edges)

    def _count_scanned(self, node_id, edges):
        for edge in edges:
            self.scanned[node_id] += 1
            yield edge

def test_scan_stops_at_first_neighbor_over_ceiling():
    # O's edges sorted: A (1), F1 (5), F2 (6). O-A-T costs 2.
    graph = CountingGraph.from_points_and_arcs(
        [("O", 0, 0), ("A", 1, 0), ("T", 1, 1), ("F1", 0, -5), ("F2", 0, 6)],
        [("O", "A"), ("A", "T"), ("O", "F1"), ("O", "F2")],
    )
    result = DetourSearch(graph).search("O", "T", 2.5)
    assert result.path == ["A", "T"]
    assert result.distance == pytest.approx(2.0)
    # A, then F1 overshoots and F2 is never looked at.
    assert graph.scanned["O"] == 2
    assert "F1" not in graph.expanded
    assert "F2" not in graph.expanded

def test_reaching_target_lowers_ceiling(caplog):
    # O-A-T costs 1 + 2 = 3. O-B costs 2 and B-C another 1.5, so C lies at 3.5:
    # inside the starting ceiling of 10 but beyond the tightened one.
    graph = CountingGraph.from_points_and_arcs(
        [("O", 0, 0), ("A", 1, 0), ("T", 1, 2), ("B", 0, -2), ("C", 0, -3.5)],
        [("O", "A"), ("A", "T"), ("O", "B"), ("B", "C")],
    )
    with caplog.at_level(logging.DEBUG, logger="salesman.detour_search"):
        result = DetourSearch(graph).search("O", "T", 10.0)
    assert result.path == ["A", "T"]
    assert result.distance == pytest.approx(3.0)
    assert "Ceiling tightened to 3.0000" in caplog.text
    assert "B" in graph.expanded
    assert "C" not in graph.expanded
