import logging
import math
import pytest
from salesman import compute_tour
from salesman.graph import Graph
from salesman.mst_solver import MSTShortcutSolver
from salesman.observers import RecordingObserver, LoggingObserver
from salesman.spanning_tree import build_minimum_spanning_tree
from salesman.tour_deriver import TourDeriver
from salesman.utils import calculate_tour_metrics, generate_random_graph
from salesman.errors import DisconnectedGraph, UnknownVertexReference

def complete_graph(points):
    graph = Graph.from_points_and_arcs(points, [])
    ids = [p[0] for p in points]
    for i in range(len(ids)):
        for j in range(i + 1, len(ids)):
            graph.add_edge(ids[i], ids[j])
    return graph

def assert_closed_walk(graph, tour, start_id):
    assert tour[0] == start_id
    assert tour[-1] == start_id
    assert set(tour) == set(graph.nodes)
    for u, v in zip(tour, tour[1:]):
        assert graph.has_edge_between(u, v), f"{u}-{v} is not an edge"

@pytest.fixture
def unit_square():
    return complete_graph([("a", 0, 0), ("b", 1, 0), ("c", 1, 1), ("d", 0, 1)])

@pytest.fixture
def star_graph():
    # Centre C, five outer points that only connect through C.
    points = [("C", 0, 0), ("O1", 10, 0), ("O2", 0, 10), ("O3", -10, 0), ("O4", 0, -10), ("O5", 7, 7)]
    arcs = [("C", f"O{i}") for i in range(1, 6)]
    return Graph.from_points_and_arcs(points, arcs)

@pytest.fixture
def grid_graph():
    # 5x5 lattice, edges only between horizontal and vertical neighbours.
    points = [(f"{r},{c}", c, r) for r in range(5) for c in range(5)]
    arcs = []
    for r in range(5):
        for c in range(5):
            if c < 4:
                arcs.append((f"{r},{c}", f"{r},{c+1}"))
            if r < 4:
                arcs.append((f"{r},{c}", f"{r+1},{c}"))
    return Graph.from_points_and_arcs(points, arcs)

def test_unit_square_tour(unit_square):
    observer = RecordingObserver()
    tour = compute_tour(unit_square, "a", observer)
    assert tour[0] == "a" and tour[-1] == "a"
    assert sorted(tour[1:-1]) == ["b", "c", "d"]
    assert len(observer.of_kind("detour")) <= 1
    metrics = calculate_tour_metrics(unit_square, tour, "a")
    assert metrics["total_distance"] <= 4.0 + 1e-9
    assert metrics["is_valid"] is True

def test_star_tour_passes_through_centre(star_graph):
    observer = RecordingObserver()
    tour = compute_tour(star_graph, "O1", observer)
    assert_closed_walk(star_graph, tour, "O1")
    assert tour.count("C") == 5
    assert len(tour) == 11
    for i in range(2, 6):
        assert tour.count(f"O{i}") == 1
    # every outer point is followed by the centre
    assert all(tour[k + 1] == "C" for k in range(len(tour) - 1) if tour[k].startswith("O"))
    # three sibling transitions plus closing the cycle
    assert len(observer.of_kind("detour")) == 4
    metrics = calculate_tour_metrics(star_graph, tour, "O1")
    assert metrics["total_distance"] == pytest.approx(2 * (40 + math.hypot(7, 7)))

def test_line_rooted_in_middle():
    # A(0,0) B(1,0) C(3,0) joined A-B-C only; the tree at B has children A and C.
    graph = Graph.from_points_and_arcs([("A", 0, 0), ("B", 1, 0), ("C", 3, 0)], [("A", "B"), ("B", "C")])
    observer = RecordingObserver()
    tour = compute_tour(graph, "B", observer)
    assert tour == ["B", "A", "B", "C", "B"]
    back_steps = observer.of_kind("back_step")
    assert back_steps[0]["origin_id"] == "A"
    assert back_steps[0]["target_id"] == "C"
    assert back_steps[0]["worst_case_cost"] == pytest.approx(3.0)
    assert back_steps[0]["back_step_path"] == ["B", "C"]

def test_detours_never_exceed_back_step_cost(grid_graph):
    observer = RecordingObserver()
    tour = compute_tour(grid_graph, "0,0", observer)
    assert_closed_walk(grid_graph, tour, "0,0")
    detours = observer.of_kind("detour")
    back_steps = observer.of_kind("back_step")
    assert len(back_steps) >= len(detours)
    for detour in detours:
        assert detour["distance"] <= detour["ceiling"]

def test_each_back_step_resolved_once(grid_graph):
    observer = RecordingObserver()
    compute_tour(grid_graph, "2,2", observer)
    assert len(observer.of_kind("back_step")) == len(observer.of_kind("detour")) + len(observer.of_kind("direct"))

@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_complete_graph_tour_is_permutation(seed):
    graph = generate_random_graph(12, seed=seed)
    tour = compute_tour(graph, "pt_0")
    assert len(tour) == len(graph.nodes) + 1
    assert tour[0] == tour[-1] == "pt_0"
    assert sorted(tour[1:-1]) == sorted(n for n in graph.nodes if n != "pt_0")

@pytest.mark.parametrize("seed", [0, 1, 2])
def test_tour_no_longer_than_twice_tree_on_complete_graph(seed):
    graph = generate_random_graph(15, seed=seed)
    tour = compute_tour(graph, "pt_3")
    tree = build_minimum_spanning_tree(graph, "pt_3")
    metrics = calculate_tour_metrics(graph, tour, "pt_3")
    assert metrics["total_distance"] <= 2 * tree.total_distance() + 1e-9

def test_deterministic(grid_graph):
    assert compute_tour(grid_graph, "1,3") == compute_tour(grid_graph, "1,3")

def test_disconnected_graph_fails():
    graph = Graph.from_points_and_arcs(
        [("a", 0, 0), ("b", 1, 0), ("c", 0, 1), ("x", 10, 10), ("y", 11, 10)],
        [("a", "b"), ("b", "c"), ("a", "c"), ("x", "y")],
    )
    with pytest.raises(DisconnectedGraph):
        compute_tour(graph, "a")

def test_unknown_start_fails(unit_square):
    with pytest.raises(UnknownVertexReference):
        compute_tour(unit_square, "zz")

def test_single_vertex_tour():
    graph = Graph.from_points_and_arcs([("solo", 1, 1)], [])
    assert compute_tour(graph, "solo") == ["solo", "solo"]

def test_two_vertex_tour():
    graph = Graph.from_points_and_arcs([("a", 0, 0), ("b", 2, 0)], [("a", "b")])
    assert compute_tour(graph, "a") == ["a", "b", "a"]

def test_long_path_graph_does_not_recurse():
    n = 3000
    points = [(i, float(i), 0.0) for i in range(n)]
    arcs = [(i, i + 1) for i in range(n - 1)]
    graph = Graph.from_points_and_arcs(points, arcs)
    tour = compute_tour(graph, 0)
    assert tour[:n] == list(range(n))
    assert tour[n:] == list(range(n - 2, -1, -1))

def test_tour_deriver_counts(unit_square):
    tree = build_minimum_spanning_tree(unit_square, "a")
    deriver = TourDeriver(unit_square, tree)
    tour = deriver.derive()
    assert deriver.direct_shortcuts >= 1
    assert deriver.detour_search.searches == 0
    assert len(tour) == 5

def test_observer_enter_exit_balanced(grid_graph):
    observer = RecordingObserver()
    compute_tour(grid_graph, "0,0", observer)
    entered = [e["vertex_id"] for e in observer.of_kind("enter")]
    exited = [e["vertex_id"] for e in observer.of_kind("exit")]
    assert sorted(entered) == sorted(exited) == sorted(grid_graph.nodes)
    assert entered[0] == exited[-1] == "0,0"

def test_solver_returns_metrics(star_graph):
    tour, metrics = MSTShortcutSolver(star_graph, "O1").solve()
    assert metrics["tour_list"] == tour
    assert metrics["revisits"] == 4
    assert metrics["is_valid"] is True

def test_logging_observer(unit_square, caplog):
    caplog.set_level(logging.DEBUG, logger="salesman.observers")
    compute_tour(unit_square, "a", LoggingObserver())
    assert "MST: linked" in caplog.text
    assert "DFS enter" in caplog.text
