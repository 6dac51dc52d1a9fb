import logging

from .detour_search import DetourSearch
from .graph import Graph
from .observers import TourObserver
from .spanning_tree import SpanningTree

logger = logging.getLogger(__name__)


class TourDeriver:
    """
    Derives a closed tour from a spanning tree by a depth-first pre-order walk.

    Walking back up the tree after a finished subtree is never emitted literally.
    Before every forward step to a later sibling, the retraced tree path is priced
    as a worst case and replaced by a direct edge when one exists, otherwise by the
    cheapest detour within that cost.
    Attributes:
        graph (Graph): The full point graph.
        tree (SpanningTree): Spanning tree over graph.
        detour_search (DetourSearch): Search used for back-step replacement.
    """
    def __init__(self, graph: Graph, tree: SpanningTree, observer: TourObserver = None):
        self.graph = graph
        self.tree = tree
        self.observer = observer or TourObserver()
        self.detour_search = DetourSearch(graph, self.observer)
        self.direct_shortcuts = 0

    def derive(self) -> list:
        """
        Walks the tree and returns the tour.

        Returns:
            list: Vertex IDs starting and ending at the tree root.
        """
        root_id = self.tree.root_id
        tour = [root_id]
        # Vertices the walk would retrace, deepest last. Each vertex is pushed before
        # descending into each of its children, and a leaf pushes itself.
        back_steps = []

        self.observer.on_enter(root_id, 0)
        frames = [[root_id, 0]]
        while frames:
            frame = frames[-1]
            vertex_id, child_index = frame
            children = self.tree.get_children(vertex_id)
            depth = len(frames) - 1

            if not children:
                back_steps.append(vertex_id)
            if child_index >= len(children):
                frames.pop()
                self.observer.on_exit(vertex_id, depth)
                continue

            child_id = children[child_index].v_id
            if child_index == 0:
                # First child: a forward tree edge, nothing to retrace.
                tour.append(child_id)
            else:
                self._replace_back_steps(tour, back_steps, vertex_id, child_id)

            back_steps.append(vertex_id)
            frame[1] = child_index + 1
            frames.append([child_id, 0])
            self.observer.on_enter(child_id, depth + 1)

        # Close the cycle from wherever the walk ended.
        self._replace_back_steps(tour, back_steps, back_steps[0], root_id)

        logger.debug(
            f"Derived tour of {len(tour)} stops from root {root_id} "
            f"({self.direct_shortcuts} direct shortcuts, {self.detour_search.searches} detour searches)"
        )
        return tour

    def _replace_back_steps(self, tour: list, back_steps: list, last_back_step_id, next_id):
        """
        Pops the pending back-step path down to last_back_step_id and appends the
        cheapest way from the deepest unwound vertex to next_id.
        """
        origin_id = back_steps.pop()
        current_id = origin_id
        worst_case_cost = 0.0
        worst_case_path = []

        while current_id != last_back_step_id:
            parent_id = back_steps.pop()
            worst_case_cost += self.tree.get_parent_edge(current_id).distance
            worst_case_path.append(parent_id)
            current_id = parent_id

        # Include the forward step, otherwise the ceiling would understate the cost.
        if next_id != current_id:
            worst_case_cost += self.tree.get_parent_edge(next_id).distance
        worst_case_path.append(next_id)

        if origin_id == next_id:
            # Single-vertex tree: the walk never left the root.
            tour.append(next_id)
            return

        self.observer.on_back_step(origin_id, next_id, worst_case_cost, worst_case_path)

        direct = self.graph.get_edge_by_nodes(origin_id, next_id)
        if direct is not None:
            self.direct_shortcuts += 1
            self.observer.on_direct_shortcut(origin_id, next_id, direct.distance)
            tour.append(next_id)
            return

        logger.debug(f"No direct edge from {origin_id} to {next_id}. Searching for a shortest path.")
        result = self.detour_search.search(origin_id, next_id, worst_case_cost)
        tour.extend(result.path)
