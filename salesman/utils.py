import re
import csv
import json
import logging

import numpy as np

from .config import DEFAULT_GRAPH_SIZE
from .errors import TourError
from .graph import Graph
from .node import Node

logger = logging.getLogger(__name__)

def parse_float(value: str) -> float:
    """Safely parse a float from a potentially malformed string.

    Hand-edited point files occasionally contain extra whitespace or stray
    characters within numeric fields (e.g. "12.5 m").  This helper
    extracts the first numeric value it can find in the string and
    converts it to ``float``.  If no valid number is found a ``ValueError``
    is raised.
    """
    try:
        return float(value)
    except ValueError:
        match = re.search(r"[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?", value)
        if match:
            return float(match.group(0))
        raise


def calculate_tour_metrics(graph: Graph, tour: list, start_id) -> dict:
    """
    Calculates metrics for a closed tour on the given graph.

    Args:
        graph (Graph): The graph the tour was computed on.
        tour (list): Vertex IDs in visiting order.
        start_id: The vertex the tour must start and end at.

    Returns:
        dict: total distance, stop counts, revisits, coverage and validity flags.
    """
    if not tour:
        return {
            "total_distance": 0.0,
            "num_stops": 0,
            "num_unique_vertices": 0,
            "revisits": 0,
            "missing_vertices": len(graph.nodes),
            "missing_edges": 0,
            "is_closed": False,
            "covers_all": len(graph.nodes) == 0,
            "is_valid": False,
            "tour_list": tour
        }

    total_distance = 0.0
    missing_edges = 0
    for i in range(len(tour) - 1):
        edge = graph.get_edge_by_nodes(tour[i], tour[i+1])
        if edge is None:
            if tour[i] != tour[i+1]:
                missing_edges += 1
            continue
        total_distance += edge.distance

    visited = set(tour)
    unique_vertices = len(visited & set(graph.nodes))
    missing_vertices = len(graph.nodes) - unique_vertices
    # The start vertex legitimately appears twice.
    interior = tour[1:-1] if len(tour) > 1 else []
    revisits = len(interior) - len(set(interior)) + (1 if start_id in interior else 0)

    is_closed = tour[0] == start_id and tour[-1] == start_id and len(tour) >= 2
    covers_all = missing_vertices == 0

    return {
        "total_distance": total_distance,
        "num_stops": len(tour) - 1,
        "num_unique_vertices": unique_vertices,
        "revisits": revisits,
        "missing_vertices": missing_vertices,
        "missing_edges": missing_edges,
        "is_closed": is_closed,
        "covers_all": covers_all,
        "is_valid": is_closed and covers_all and missing_edges == 0,
        "tour_list": tour
    }


def load_graph_from_json(file_path: str) -> tuple[Graph, object]:
    """
    Loads a graph from a JSON document of the form
    ``{"points": [{"id": ..., "x": ..., "y": ...}], "arcs": [[id_a, id_b], ...], "start": id}``.
    ``start`` is optional and defaults to the first point.

    Returns:
        tuple: (Graph, start point ID)
    """
    try:
        with open(file_path, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.error(f"Error: JSON file not found at {file_path}")
        raise
    except json.JSONDecodeError as err:
        logger.error(f"Error: Could not decode JSON from '{file_path}'.")
        raise ValueError(f"Invalid graph JSON in {file_path}: {err}") from err

    points = data.get("points") if isinstance(data, dict) else None
    if not points:
        raise ValueError(f"No points found in {file_path}.")
    arcs = data.get("arcs", [])

    try:
        graph = Graph.from_points_and_arcs(points, arcs)
    except TourError:
        raise
    except (KeyError, TypeError, ValueError) as err:
        raise ValueError(f"Malformed point or arc record in {file_path}: {err}") from err

    start_id = data["start"] if "start" in data else next(iter(graph.nodes))
    logger.info(f"Successfully loaded graph from {file_path}. Nodes: {len(graph.nodes)}, Edges: {len(graph.edges)}, Start ID: {start_id}")
    return graph, start_id


def load_graph_from_csv(file_path: str) -> tuple[Graph, object]:
    """
    Loads points from a CSV file with ``ID,X,Y`` columns and connects every pair of
    points (a complete graph). The first point is the start.

    Returns:
        tuple: (Graph, start point ID)
    """
    graph = Graph()
    start_id = None
    headers = ['ID', 'X', 'Y']

    try:
        with open(file_path, mode='r', newline='') as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            if reader.fieldnames is None:
                raise ValueError("File is empty.")
            fieldnames = [name.strip().upper() for name in reader.fieldnames]
            if not all(h in fieldnames for h in headers):
                raise ValueError(f"Expected columns {headers}, found {reader.fieldnames}")

            for i, row in enumerate(reader):
                cleaned_row = {k.strip().upper(): v.strip() for k, v in row.items() if k is not None and v is not None}
                if not any(cleaned_row.values()):
                    continue # Skip empty rows
                try:
                    node_id = cleaned_row['ID']
                    node = Node(node_id, parse_float(cleaned_row['X']), parse_float(cleaned_row['Y']))
                    graph.add_node(node)
                    if start_id is None:
                        start_id = node_id
                except (ValueError, KeyError) as data_error:
                    raise ValueError(f"Error processing data in row {i+1} of {file_path}. Row content: {cleaned_row}. Details: {data_error}") from data_error

        if start_id is None:
            raise ValueError("No points found in CSV data.")

        node_ids = list(graph.nodes.keys())
        for i in range(len(node_ids)):
            for j in range(i + 1, len(node_ids)):
                graph.add_edge(node_ids[i], node_ids[j])

        logger.info(f"Successfully loaded graph from {file_path}. Nodes: {len(graph.nodes)}, Start ID: {start_id}")
        return graph, start_id

    except FileNotFoundError:
        logger.error(f"Error: CSV file not found at {file_path}")
        raise
    except ValueError as e:
        logger.error(f"Error processing CSV data: {e}")
        raise


def load_graph(file_path: str) -> tuple[Graph, object]:
    """Dispatches on the file extension."""
    if str(file_path).lower().endswith('.json'):
        return load_graph_from_json(file_path)
    return load_graph_from_csv(file_path)


def generate_random_graph(num_points: int, k_nearest: int = None, seed: int = None, size: float = DEFAULT_GRAPH_SIZE) -> Graph:
    """
    Draws num_points uniform random points in a size x size square.

    Args:
        num_points (int): Number of points, IDs are "pt_0" ... "pt_{n-1}".
        k_nearest (int): Connect every point to its k nearest points. None connects all pairs.
        seed (int): Seed for numpy's random generator.
        size (float): Side length of the square.

    Returns:
        Graph: The generated graph. Sparse graphs are not guaranteed to be connected.
    """
    if num_points < 1:
        raise ValueError("num_points must be positive.")
    rng = np.random.default_rng(seed)
    coords = rng.uniform(0.0, size, size=(num_points, 2))

    graph = Graph()
    ids = [f"pt_{i}" for i in range(num_points)]
    for node_id, (x, y) in zip(ids, coords):
        graph.add_node(Node(node_id, x, y))

    if k_nearest is None or k_nearest >= num_points - 1:
        for i in range(num_points):
            for j in range(i + 1, num_points):
                graph.add_edge(ids[i], ids[j])
        return graph

    diffs = coords[:, np.newaxis, :] - coords[np.newaxis, :, :]
    dist_matrix = np.sqrt((diffs ** 2).sum(axis=-1))
    np.fill_diagonal(dist_matrix, np.inf)
    nearest = np.argsort(dist_matrix, axis=1, kind='stable')[:, :k_nearest]
    for i in range(num_points):
        for j in nearest[i]:
            graph.add_edge(ids[i], ids[int(j)])
    return graph
