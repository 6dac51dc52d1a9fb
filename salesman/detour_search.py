import logging

from .errors import DetourSearchExhausted, UnknownVertexReference
from .graph import Graph
from .observers import TourObserver

logger = logging.getLogger(__name__)


class VertexSearchState:
    """Best known way of reaching one vertex during a single search."""
    __slots__ = ("best_distance", "best_edge", "in_progress")

    def __init__(self, best_distance: float, best_edge, in_progress: bool):
        self.best_distance = best_distance
        self.best_edge = best_edge
        self.in_progress = in_progress

    def __repr__(self):
        return f"VertexSearchState(dist={self.best_distance:.2f}, in_progress={self.in_progress})"


class SearchState:
    """
    Mutable state of one bounded detour search.

    A vertex is unvisited (absent), in progress (on the current search path), or
    finalized with its best distance so far. A finalized vertex may still be
    improved by a strictly shorter path found on another branch.
    Attributes:
        ceiling (float): Upper bound on acceptable path cost. Only ever decreases.
        vertices (dict): Maps a vertex ID to its VertexSearchState.
    """
    def __init__(self, ceiling: float):
        self.ceiling = ceiling
        self.vertices = {}

    def improves(self, vertex_id, distance: float) -> bool:
        """True if reaching vertex_id at this distance is worth recording."""
        entry = self.vertices.get(vertex_id)
        if entry is None:
            return True
        if entry.in_progress:
            return False
        return distance < entry.best_distance

    def enter(self, vertex_id, distance: float, edge):
        self.vertices[vertex_id] = VertexSearchState(distance, edge, True)

    def record(self, vertex_id, distance: float, edge):
        self.vertices[vertex_id] = VertexSearchState(distance, edge, False)

    def finish(self, vertex_id):
        self.vertices[vertex_id].in_progress = False

    def distance_to(self, vertex_id) -> float:
        return self.vertices[vertex_id].best_distance

    def tighten(self, distance: float) -> bool:
        if distance < self.ceiling:
            self.ceiling = distance
            return True
        return False

    def reached(self, vertex_id) -> bool:
        return vertex_id in self.vertices


class DetourResult:
    """
    Attributes:
        path (list): Vertex IDs from the origin (excluded) to the target (included).
        distance (float): Total distance of the path.
    """
    __slots__ = ("path", "distance")

    def __init__(self, path: list, distance: float):
        self.path = path
        self.distance = distance

    def __repr__(self):
        return f"DetourResult(path={self.path}, distance={self.distance:.2f})"


class DetourSearch:
    """
    Branch-and-bound search for the cheapest path between two vertices whose cost
    does not exceed a ceiling.

    The search walks the full graph depth first. Neighbor edges are visited in
    ascending distance order, so the first neighbor that would overshoot the ceiling
    ends the scan of that vertex. Every time the target is reached the ceiling drops
    to the cost of that path.
    """
    def __init__(self, graph: Graph, observer: TourObserver = None):
        self.graph = graph
        self.observer = observer or TourObserver()
        self.searches = 0

    def search(self, origin_id, target_id, ceiling: float) -> DetourResult:
        """
        Finds the minimum-cost path from origin_id to target_id with cost <= ceiling.

        Args:
            origin_id: ID of the vertex the path starts at.
            target_id: ID of the vertex the path ends at.
            ceiling (float): Worst acceptable cost.

        Returns:
            DetourResult: Path excluding origin_id and including target_id.

        Raises:
            DetourSearchExhausted: no path within the ceiling exists.
        """
        for vertex_id in (origin_id, target_id):
            if vertex_id not in self.graph.nodes:
                raise UnknownVertexReference(vertex_id, "detour search")

        self.searches += 1
        if origin_id == target_id:
            return DetourResult([], 0.0)

        # A straight edge beats any multi-hop path between the same two points.
        direct = self.graph.get_edge_by_nodes(origin_id, target_id)
        if direct is not None:
            result = DetourResult([target_id], direct.distance)
            self.observer.on_detour(origin_id, target_id, result.path, result.distance, ceiling)
            return result

        state = SearchState(ceiling)
        self._explore(state, origin_id, target_id)

        if not state.reached(target_id):
            logger.error(f"Detour search from {origin_id} to {target_id} found nothing within {ceiling:.4f}.")
            raise DetourSearchExhausted(origin_id, target_id, ceiling)

        result = DetourResult(self._reconstruct(state, origin_id, target_id), state.distance_to(target_id))
        self.observer.on_detour(origin_id, target_id, result.path, result.distance, ceiling)
        return result

    def _explore(self, state: SearchState, origin_id, target_id):
        """Depth-first branch and bound with an explicit frame stack."""
        state.enter(origin_id, 0.0, None)
        stack = [(origin_id, iter(self.graph.get_neighbor_edges(origin_id)))]

        while stack:
            vertex_id, pending_edges = stack[-1]
            base_distance = state.distance_to(vertex_id)
            descended = False

            for edge in pending_edges:
                candidate = base_distance + edge.distance
                if candidate > state.ceiling:
                    # Remaining neighbors are at least as far.
                    break
                if not state.improves(edge.v_id, candidate):
                    continue
                if edge.v_id == target_id:
                    state.record(target_id, candidate, edge)
                    if state.tighten(candidate):
                        logger.debug(f"  Ceiling tightened to {candidate:.4f} via {vertex_id}")
                    continue
                state.enter(edge.v_id, candidate, edge)
                stack.append((edge.v_id, iter(self.graph.get_neighbor_edges(edge.v_id))))
                descended = True
                break

            if not descended:
                stack.pop()
                state.finish(vertex_id)

    def _reconstruct(self, state: SearchState, origin_id, target_id) -> list:
        path = []
        current = target_id
        # Bounded walk back over the recorded best edges.
        for _ in range(len(state.vertices)):
            if current == origin_id:
                path.reverse()
                return path
            path.append(current)
            current = state.vertices[current].best_edge.u_id
        raise DetourSearchExhausted(origin_id, target_id, state.ceiling)
