class Edge:
    """
    Represents one direction of an undirected edge between two nodes.
    Attributes:
        u_id: ID of the node the edge leaves from.
        v_id: ID of the node the edge leads to.
        distance (float): Euclidean distance between u and v. Both directions
            of the same undirected edge share this value.
    """
    __slots__ = ("u_id", "v_id", "distance")

    def __init__(self, u_id, v_id, distance: float):
        if distance < 0:
            raise ValueError(f"Edge {u_id}-{v_id} has negative distance {distance}")
        self.u_id = u_id
        self.v_id = v_id
        self.distance = distance

    def reversed(self) -> "Edge":
        """Returns the opposite direction of this edge."""
        return Edge(self.v_id, self.u_id, self.distance)

    def __eq__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented
        return (self.u_id, self.v_id, self.distance) == (other.u_id, other.v_id, other.distance)

    def __hash__(self):
        return hash((self.u_id, self.v_id, self.distance))

    def __repr__(self):
        return f"Edge({self.u_id}-{self.v_id}, Distance={self.distance:.2f})"
