# node.py

import math


class Node:
    """
    Represents a point of the salesman graph.
    Attributes:
        id: Unique, stable identifier for the point.
        x (float): X-coordinate.
        y (float): Y-coordinate.
    Nodes are immutable once created.
    """
    __slots__ = ("id", "x", "y")

    def __init__(self, id, x, y):
        object.__setattr__(self, "id", id)
        object.__setattr__(self, "x", float(x))
        object.__setattr__(self, "y", float(y))

    def __setattr__(self, name, value):
        raise AttributeError(f"Node {self.id!r} is immutable")

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return (self.id, self.x, self.y) == (other.id, other.x, other.y)

    def __hash__(self):
        return hash((self.id, self.x, self.y))

    def __repr__(self):
        return f"Node(ID={self.id}, Coords=({self.x:.2f},{self.y:.2f}))"


def compute_euclidean_distance(node1: Node, node2: Node) -> float:
    """
    Computes the Euclidean distance between two nodes.
    """
    return math.sqrt((node1.x - node2.x)**2 + (node1.y - node2.y)**2)
