import logging

logger = logging.getLogger(__name__)


class TourObserver:
    """
    Diagnostic hook for tour construction. Every method is a no-op; subclass and
    override the events of interest.
    """
    def on_tree_edge(self, edge, linked_count: int):
        """Prim attached ``edge.v_id`` to the tree under ``edge.u_id``."""
        pass

    def on_enter(self, vertex_id, depth: int):
        """The depth-first walk descended into ``vertex_id``."""
        pass

    def on_exit(self, vertex_id, depth: int):
        """The walk finished the subtree rooted at ``vertex_id``."""
        pass

    def on_back_step(self, origin_id, target_id, worst_case_cost: float, back_step_path: list):
        """A back-step segment from ``origin_id`` towards ``target_id`` needs replacing."""
        pass

    def on_direct_shortcut(self, origin_id, target_id, distance: float):
        pass

    def on_detour(self, origin_id, target_id, path: list, distance: float, ceiling: float):
        """A detour search finished. ``ceiling`` is the bound it was started with."""
        pass


class LoggingObserver(TourObserver):
    """Forwards tour construction events to the ``logging`` module."""
    def __init__(self, level=logging.DEBUG, log=None):
        self.level = level
        self.log = log or logger

    def on_tree_edge(self, edge, linked_count):
        self.log.log(self.level, f"MST: linked {edge.v_id} under {edge.u_id} (dist={edge.distance:.2f}, linked={linked_count})")

    def on_enter(self, vertex_id, depth):
        self.log.log(self.level, f"{'  ' * depth}DFS enter {vertex_id}")

    def on_exit(self, vertex_id, depth):
        self.log.log(self.level, f"{'  ' * depth}DFS exit {vertex_id}")

    def on_back_step(self, origin_id, target_id, worst_case_cost, back_step_path):
        self.log.log(
            self.level,
            f"Optimizing back-step from {origin_id} to {target_id} with maximum cost {worst_case_cost:.2f} "
            f"for partial back edge path {back_step_path}"
        )

    def on_direct_shortcut(self, origin_id, target_id, distance):
        self.log.log(self.level, f"Found direct adjacency from {origin_id} to {target_id} ({distance:.2f}). Using it.")

    def on_detour(self, origin_id, target_id, path, distance, ceiling):
        self.log.log(
            self.level,
            f"Shortest path from {origin_id} to {target_id} is through {path} (dist={distance:.2f}, ceiling={ceiling:.2f})"
        )


class RecordingObserver(TourObserver):
    """Keeps every event in memory as ``(kind, payload)`` tuples."""
    def __init__(self):
        self.events = []

    def on_tree_edge(self, edge, linked_count):
        self.events.append(("tree_edge", {"edge": edge, "linked_count": linked_count}))

    def on_enter(self, vertex_id, depth):
        self.events.append(("enter", {"vertex_id": vertex_id, "depth": depth}))

    def on_exit(self, vertex_id, depth):
        self.events.append(("exit", {"vertex_id": vertex_id, "depth": depth}))

    def on_back_step(self, origin_id, target_id, worst_case_cost, back_step_path):
        self.events.append(("back_step", {
            "origin_id": origin_id,
            "target_id": target_id,
            "worst_case_cost": worst_case_cost,
            "back_step_path": list(back_step_path),
        }))

    def on_direct_shortcut(self, origin_id, target_id, distance):
        self.events.append(("direct", {"origin_id": origin_id, "target_id": target_id, "distance": distance}))

    def on_detour(self, origin_id, target_id, path, distance, ceiling):
        self.events.append(("detour", {
            "origin_id": origin_id,
            "target_id": target_id,
            "path": list(path),
            "distance": distance,
            "ceiling": ceiling,
        }))

    def of_kind(self, kind: str) -> list:
        return [payload for event_kind, payload in self.events if event_kind == kind]
