import logging

from .graph import Graph
from .observers import TourObserver
from .spanning_tree import build_minimum_spanning_tree
from .tour_deriver import TourDeriver
from .tour_solver import TourSolver

logger = logging.getLogger(__name__)


class MSTShortcutSolver(TourSolver):
    """
    Builds a minimum spanning tree, walks it depth first, and shortcuts the
    back-steps of the walk through direct edges or bounded detours.
    """
    name = "mst"

    def __init__(self, graph: Graph, start_id, observer: TourObserver = None):
        super().__init__(graph, start_id)
        self.observer = observer or TourObserver()
        self.tree = None
        self.deriver = None

    def compute_tour(self) -> list:
        self.tree = build_minimum_spanning_tree(self.graph, self.start_id, self.observer)
        logger.info(f"  Spanning tree: {len(self.tree)} vertices, depth {self.tree.depth()}, weight {self.tree.total_distance():.2f}")
        self.deriver = TourDeriver(self.graph, self.tree, self.observer)
        tour = self.deriver.derive()
        logger.info(
            f"  Back-steps resolved: {self.deriver.direct_shortcuts} direct, "
            f"{self.deriver.detour_search.searches} by detour search"
        )
        return tour


def compute_tour(graph: Graph, start_id, observer: TourObserver = None) -> list:
    """
    Computes an approximate closed salesman tour of graph starting at start_id.

    Args:
        graph (Graph): Connected point graph.
        start_id: ID of the start (and end) vertex.
        observer (TourObserver): Optional diagnostic hook.

    Returns:
        list: Vertex IDs; first and last equal start_id, every vertex appears.

    Raises:
        UnknownVertexReference: start_id is not in the graph.
        DisconnectedGraph: not every vertex is reachable from start_id.
        DetourSearchExhausted: internal invariant violated during back-step replacement.
    """
    return MSTShortcutSolver(graph, start_id, observer).compute_tour()
