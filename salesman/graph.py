import bisect
import logging

from .edge import Edge
from .errors import UnknownVertexReference
from .node import Node, compute_euclidean_distance

logger = logging.getLogger(__name__)


def _edge_distance(edge: Edge) -> float:
    return edge.distance


class Graph:
    """
    Represents the point graph with nodes and undirected edges.
    Attributes:
        nodes (dict): Dictionary mapping node ID to Node object.
        edges (list): List of Edge objects, one per undirected edge, in insertion order.
        adj (dict): Adjacency list mapping node ID to its outgoing Edge objects,
            sorted ascending by distance (ties keep insertion order).
    """
    def __init__(self):
        self.nodes = {}
        self.edges = []
        self.adj = {} # Adjacency list: {node_id: [Edge, ...]} sorted by distance
        self._edge_index = {} # {(u_id, v_id): Edge} for both directions

    @classmethod
    def from_points_and_arcs(cls, points, arcs) -> "Graph":
        """
        Builds a graph from raw point records and id pairs.

        Args:
            points (iterable): Mappings with "id", "x", "y" keys, or (id, x, y) tuples.
            arcs (iterable): (id_a, id_b) pairs referencing point ids.

        Returns:
            Graph: The constructed graph.
        """
        graph = cls()
        for point in points:
            if isinstance(point, Node):
                graph.add_node(point)
            elif isinstance(point, dict):
                graph.add_node(Node(point["id"], point["x"], point["y"]))
            else:
                point_id, x, y = point
                graph.add_node(Node(point_id, x, y))
        for u_id, v_id in arcs:
            graph.add_edge(u_id, v_id)
        return graph

    def add_node(self, node: Node):
        """Adds a node to the graph."""
        if node.id in self.nodes and self.nodes[node.id] != node:
            raise ValueError(f"Node {node.id!r} already exists with different coordinates.")
        self.nodes[node.id] = node
        if node.id not in self.adj:
            self.adj[node.id] = []

    def add_edge(self, u_id, v_id):
        """
        Adds an undirected edge between two existing nodes and returns its u->v view.
        Duplicates (in either orientation) and self-loops are ignored.
        """
        for node_id in (u_id, v_id):
            if node_id not in self.nodes:
                raise UnknownVertexReference(node_id, f"edge {u_id}-{v_id}")

        if u_id == v_id:
            logger.debug(f"Ignoring self-loop on node {u_id}.")
            return None

        existing = self._edge_index.get((u_id, v_id))
        if existing is not None:
            return existing

        distance = compute_euclidean_distance(self.nodes[u_id], self.nodes[v_id])
        edge = Edge(u_id, v_id, distance)
        back = edge.reversed()
        self.edges.append(edge)
        self._edge_index[(u_id, v_id)] = edge
        self._edge_index[(v_id, u_id)] = back
        bisect.insort(self.adj[u_id], edge, key=_edge_distance)
        bisect.insort(self.adj[v_id], back, key=_edge_distance)
        return edge

    def get_edge_by_nodes(self, u_id, v_id):
        """Returns the u->v view of an edge given its two node IDs, or None if not found."""
        return self._edge_index.get((u_id, v_id))

    def has_edge_between(self, u_id, v_id) -> bool:
        return (u_id, v_id) in self._edge_index

    def get_neighbor_edges(self, node_id) -> list:
        """Returns the outgoing edges of a node, ascending by distance."""
        if node_id not in self.adj:
            raise UnknownVertexReference(node_id)
        return self.adj[node_id]

    def get_neighbors(self, node_id) -> list:
        """Returns neighbor IDs of a node, nearest first."""
        return [edge.v_id for edge in self.get_neighbor_edges(node_id)]

    def __contains__(self, node_id):
        return node_id in self.nodes

    def __len__(self):
        return len(self.nodes)

    def __repr__(self):
        return f"Graph(nodes={len(self.nodes)}, edges={len(self.edges)})"
