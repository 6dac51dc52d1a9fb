import heapq
import itertools
import logging

from .errors import DisconnectedGraph, UnknownVertexReference
from .graph import Graph
from .observers import TourObserver

logger = logging.getLogger(__name__)


class SpanningTree:
    """
    Rooted tree overlay on a Graph, stored as an arena keyed by vertex id.
    Attributes:
        root_id: ID of the root vertex.
        parent (dict): Maps a linked vertex ID to its parent's ID. The root maps to itself.
        children (dict): Maps a vertex ID to the list of tree edges leading to its children,
            in attachment order.
        parent_edge (dict): Maps a non-root vertex ID to the tree edge (parent -> vertex).
    """
    def __init__(self, root_id):
        self.root_id = root_id
        self.parent = {root_id: root_id}
        self.children = {root_id: []}
        self.parent_edge = {}

    def attach(self, edge):
        """Links edge.v_id under edge.u_id."""
        if edge.u_id not in self.parent:
            raise ValueError(f"Cannot attach {edge.v_id} under unlinked vertex {edge.u_id}.")
        if edge.v_id in self.parent:
            raise ValueError(f"Vertex {edge.v_id} is already part of the tree.")
        self.children[edge.u_id].append(edge)
        self.children[edge.v_id] = []
        self.parent[edge.v_id] = edge.u_id
        self.parent_edge[edge.v_id] = edge

    def is_linked(self, vertex_id) -> bool:
        return vertex_id in self.parent

    def is_root(self, vertex_id) -> bool:
        return self.parent.get(vertex_id) == vertex_id

    def get_children(self, vertex_id) -> list:
        """Returns the tree edges leading from vertex_id to its children."""
        return self.children.get(vertex_id, [])

    def get_child_ids(self, vertex_id) -> list:
        return [edge.v_id for edge in self.get_children(vertex_id)]

    def get_parent_edge(self, vertex_id):
        """Returns the tree edge (parent -> vertex_id), or None for the root."""
        return self.parent_edge.get(vertex_id)

    def total_distance(self) -> float:
        return sum(edge.distance for edge in self.parent_edge.values())

    def depth(self) -> int:
        """Number of edges on the longest root-to-leaf path."""
        deepest = 0
        stack = [(self.root_id, 0)]
        while stack:
            vertex_id, level = stack.pop()
            deepest = max(deepest, level)
            for edge in self.get_children(vertex_id):
                stack.append((edge.v_id, level + 1))
        return deepest

    def __len__(self):
        return len(self.parent)

    def __repr__(self):
        return f"SpanningTree(root={self.root_id}, vertices={len(self.parent)}, distance={self.total_distance():.2f})"


def build_minimum_spanning_tree(graph: Graph, start_id, observer: TourObserver = None) -> SpanningTree:
    """
    Computes a minimum spanning tree rooted at start_id using Prim's algorithm.

    Candidate edges sit in a binary heap keyed by (distance, insertion order), so ties
    resolve deterministically in the order the edges were pushed.

    Args:
        graph (Graph): The point graph.
        start_id: ID of the root vertex.
        observer (TourObserver): Optional hook notified of every attachment.

    Returns:
        SpanningTree: A tree covering every vertex of the graph.

    Raises:
        UnknownVertexReference: start_id is not a node of the graph.
        DisconnectedGraph: some vertex is unreachable from start_id.
    """
    if start_id not in graph.nodes:
        raise UnknownVertexReference(start_id, "spanning tree start")

    observer = observer or TourObserver()
    tree = SpanningTree(start_id)
    candidate_edge_heap = []
    counter = itertools.count()

    def push_candidates(vertex_id):
        for edge in graph.get_neighbor_edges(vertex_id):
            if not tree.is_linked(edge.v_id):
                heapq.heappush(candidate_edge_heap, (edge.distance, next(counter), edge))

    push_candidates(start_id)

    # One attachment per remaining vertex.
    for _ in range(len(graph.nodes) - 1):
        best_new_edge = None
        while candidate_edge_heap:
            _, _, candidate = heapq.heappop(candidate_edge_heap)
            if not tree.is_linked(candidate.v_id):
                best_new_edge = candidate
                break

        if best_new_edge is None:
            unreached = [node_id for node_id in graph.nodes if not tree.is_linked(node_id)]
            logger.error(f"Spanning tree from {start_id} stalled after linking {len(tree)} of {len(graph.nodes)} vertices.")
            raise DisconnectedGraph(start_id, unreached)

        tree.attach(best_new_edge)
        observer.on_tree_edge(best_new_edge, len(tree))
        push_candidates(best_new_edge.v_id)

    logger.debug(f"Spanning tree built: {tree}")
    return tree
