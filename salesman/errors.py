class TourError(Exception):
    """Base class for every failure raised while computing a tour."""


class UnknownVertexReference(TourError, ValueError):
    """An edge or a start id names a point that is not in the graph."""
    def __init__(self, vertex_id, context: str = ""):
        self.vertex_id = vertex_id
        message = f"Unknown vertex id {vertex_id!r}"
        if context:
            message += f" ({context})"
        super().__init__(message)


class DisconnectedGraph(TourError, ValueError):
    """
    The spanning tree could not reach every vertex from the start vertex.
    Attributes:
        start_id: The requested root of the tree.
        unreached (list): Vertex ids that no edge path connects to start_id.
    """
    def __init__(self, start_id, unreached):
        self.start_id = start_id
        self.unreached = list(unreached)
        preview = ", ".join(str(v) for v in self.unreached[:5])
        if len(self.unreached) > 5:
            preview += ", ..."
        super().__init__(
            f"Graph is disconnected: {len(self.unreached)} vertex(es) unreachable from {start_id!r} ({preview})"
        )


class DetourSearchExhausted(TourError, RuntimeError):
    """No path within the ceiling was found, although the back-step path itself always qualifies."""
    def __init__(self, origin_id, target_id, ceiling: float):
        self.origin_id = origin_id
        self.target_id = target_id
        self.ceiling = ceiling
        super().__init__(
            f"Could not compute path from {origin_id!r} to {target_id!r} within {ceiling:.6f}, "
            f"but should have at least found the literal back-step path"
        )
