"""Approximate salesman tours over 2-D Euclidean point graphs."""

from .ant_solver import AntColonySolver
from .detour_search import DetourResult, DetourSearch, SearchState
from .edge import Edge
from .errors import DetourSearchExhausted, DisconnectedGraph, TourError, UnknownVertexReference
from .graph import Graph
from .mst_solver import MSTShortcutSolver, compute_tour
from .node import Node, compute_euclidean_distance
from .observers import LoggingObserver, RecordingObserver, TourObserver
from .spanning_tree import SpanningTree, build_minimum_spanning_tree
from .tour_deriver import TourDeriver
from .utils import calculate_tour_metrics, generate_random_graph, load_graph_from_csv, load_graph_from_json

__all__ = [
    "AntColonySolver",
    "DetourResult",
    "DetourSearch",
    "DetourSearchExhausted",
    "DisconnectedGraph",
    "Edge",
    "Graph",
    "LoggingObserver",
    "MSTShortcutSolver",
    "Node",
    "RecordingObserver",
    "SearchState",
    "SpanningTree",
    "TourDeriver",
    "TourError",
    "TourObserver",
    "UnknownVertexReference",
    "build_minimum_spanning_tree",
    "calculate_tour_metrics",
    "compute_euclidean_distance",
    "compute_tour",
    "generate_random_graph",
    "load_graph_from_csv",
    "load_graph_from_json",
]
