import math
import random
import logging
from collections import deque

from .config import DEFAULT_BFS_DEPTH, DEFAULT_NUM_ANTS, MIN_PROBABILITY_DISTANCE
from .detour_search import DetourSearch
from .errors import DisconnectedGraph
from .graph import Graph
from .tour_solver import TourSolver

logger = logging.getLogger(__name__)


class AntColonySolver(TourSolver):
    """
    Probabilistic tour construction without pheromones.

    Each ant starts at the start vertex and repeatedly moves to an unvisited vertex
    chosen with probability inversely proportional to the cost of reaching it. Costs
    come from a breadth-first lookahead limited to bfs_depth hops through unvisited
    vertices. When nothing is reachable that way the ant is forced to the first
    unvisited vertex along the shortest path. The cheapest walk of all ants wins.
    """
    name = "ant"

    def __init__(self, graph: Graph, start_id, num_ants: int = DEFAULT_NUM_ANTS,
                 bfs_depth: int = DEFAULT_BFS_DEPTH, seed: int = None):
        super().__init__(graph, start_id)
        if num_ants < 1:
            raise ValueError("num_ants must be at least 1.")
        if bfs_depth < 1:
            raise ValueError("bfs_depth must be at least 1.")
        self.num_ants = num_ants
        self.bfs_depth = bfs_depth
        self.rng = random.Random(seed)
        self.detour_search = DetourSearch(graph)
        self.best_distance = math.inf

    def compute_tour(self) -> list:
        self._check_connected()

        best_tour = None
        self.best_distance = math.inf
        for ant in range(self.num_ants):
            tour, distance = self._run_ant()
            logger.debug(f"  Ant {ant + 1}: {len(tour) - 1} stops, distance {distance:.2f}")
            if distance < self.best_distance:
                self.best_distance = distance
                best_tour = tour
        logger.info(f"  Best of {self.num_ants} ants: distance {self.best_distance:.2f}")
        return best_tour

    def _check_connected(self):
        reached = {self.start_id}
        queue = deque([self.start_id])
        while queue:
            for neighbor_id in self.graph.get_neighbors(queue.popleft()):
                if neighbor_id not in reached:
                    reached.add(neighbor_id)
                    queue.append(neighbor_id)
        if len(reached) < len(self.graph.nodes):
            raise DisconnectedGraph(self.start_id, [n for n in self.graph.nodes if n not in reached])

    def _run_ant(self) -> tuple[list, float]:
        current_id = self.start_id
        visited = {self.start_id}
        tour = [self.start_id]
        distance = 0.0

        while len(visited) < len(self.graph.nodes):
            candidates = self._lookahead(current_id, visited)
            if candidates:
                next_id = self._choose(candidates)
                path, cost = candidates[next_id]
            else:
                # Cannot go forward through unvisited vertices; force the first unvisited one.
                next_id = next(n for n in self.graph.nodes if n not in visited)
                result = self.detour_search.search(current_id, next_id, math.inf)
                path, cost = result.path, result.distance

            distance += cost
            tour.extend(path)
            visited.update(path)
            current_id = next_id

        if current_id == self.start_id:
            tour.append(self.start_id)
        else:
            result = self.detour_search.search(current_id, self.start_id, math.inf)
            tour.extend(result.path)
            distance += result.distance
        return tour, distance

    def _lookahead(self, origin_id, visited: set) -> dict:
        """
        Breadth-first search from origin_id through unvisited vertices, at most
        bfs_depth hops deep.

        Returns:
            dict: Maps each reachable unvisited vertex to (path, cost), path excluding origin_id.
        """
        found = {}
        queue = deque([(origin_id, [], 0.0)])
        while queue:
            vertex_id, path, cost = queue.popleft()
            if len(path) >= self.bfs_depth:
                continue
            for edge in self.graph.get_neighbor_edges(vertex_id):
                if edge.v_id in visited or edge.v_id in found or edge.v_id == origin_id:
                    continue
                next_path = path + [edge.v_id]
                next_cost = cost + edge.distance
                found[edge.v_id] = (next_path, next_cost)
                queue.append((edge.v_id, next_path, next_cost))
        return found

    def _choose(self, candidates: dict):
        """Roulette-wheel selection, probability inversely proportional to cost."""
        weights = [(vertex_id, 1.0 / max(cost, MIN_PROBABILITY_DISTANCE)) for vertex_id, (_, cost) in candidates.items()]
        remaining = self.rng.random() * sum(w for _, w in weights)
        for vertex_id, weight in weights:
            remaining -= weight
            if remaining <= 0:
                return vertex_id
        return weights[-1][0]
