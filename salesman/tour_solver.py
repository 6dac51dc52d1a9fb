import logging

from .errors import UnknownVertexReference
from .graph import Graph
from .utils import calculate_tour_metrics

logger = logging.getLogger(__name__)


class TourSolver:
    """
    Common contract of tour strategies: produce a closed walk over every vertex of
    the graph that starts and ends at start_id.
    """
    name = "base"

    def __init__(self, graph: Graph, start_id):
        if start_id not in graph.nodes:
            raise UnknownVertexReference(start_id, "tour start")
        self.graph = graph
        self.start_id = start_id

    def compute_tour(self) -> list:
        raise NotImplementedError

    def solve(self) -> tuple[list, dict]:
        """
        Computes the tour and its metrics.

        Returns:
            tuple: A tuple containing:
                - list: Vertex IDs of the closed tour.
                - dict: Metrics from calculate_tour_metrics.
        """
        logger.info(f"--- Starting {self.name} solver on {self.graph} from {self.start_id} ---")
        tour = self.compute_tour()
        metrics = calculate_tour_metrics(self.graph, tour, self.start_id)
        logger.info(f"--- {self.name} solver finished: {metrics['num_stops']} stops, distance {metrics['total_distance']:.2f} ---")
        return tour, metrics
