import os

import matplotlib.pyplot as plt
import numpy as np

from .config import DEFAULT_OUTPUT_DIR
from .graph import Graph


def visualize_tour(graph: Graph, tour: list, start_id, title: str = "Salesman Tour", filename: str = None,
                   output_dir: str = DEFAULT_OUTPUT_DIR, show_edges: bool = True) -> str:
    """
    Draws the tour over the graph and saves the figure to disk.

    Args:
        graph (Graph): The graph object containing node coordinates.
        tour (list): Vertex IDs in visiting order.
        start_id: The ID of the start vertex.
        title (str): The title for the plot.
        filename (str): Optional custom filename for the saved figure.
        output_dir (str): Directory the figure is written to.
        show_edges (bool): Also draw every graph edge in the background.

    Returns:
        str: Path of the saved figure.
    """
    plt.style.use('seaborn-v0_8-whitegrid')
    fig, ax = plt.subplots(figsize=(14, 14))

    os.makedirs(output_dir, exist_ok=True)

    node_coords_map = {node_id: (node.x, node.y) for node_id, node in graph.nodes.items()}
    xs = [c[0] for c in node_coords_map.values()]
    ys = [c[1] for c in node_coords_map.values()]
    span = max(max(xs) - min(xs), max(ys) - min(ys)) or 1.0
    head = span / 80.0

    if show_edges:
        for edge in graph.edges:
            u_x, u_y = node_coords_map[edge.u_id]
            v_x, v_y = node_coords_map[edge.v_id]
            ax.plot([u_x, v_x], [u_y, v_y], color='gainsboro', linewidth=0.8, zorder=1)

    other_ids = [node_id for node_id in graph.nodes.keys() if node_id != start_id]
    ax.scatter([node_coords_map[n][0] for n in other_ids], [node_coords_map[n][1] for n in other_ids],
               c='silver', label='Points', s=50, zorder=3)

    start_x, start_y = node_coords_map[start_id]
    ax.scatter(start_x, start_y, c='red', marker='*', s=300, label='Start', zorder=5)

    # Colour runs from the start of the tour to its end.
    colors = plt.cm.viridis(np.linspace(0, 1, max(1, len(tour) - 1)))
    for j in range(len(tour) - 1):
        u_x, u_y = node_coords_map[tour[j]]
        v_x, v_y = node_coords_map[tour[j+1]]
        ax.plot([u_x, v_x], [u_y, v_y], color=colors[j], linewidth=2, alpha=0.8, zorder=2)
        ax.arrow(u_x, u_y, (v_x - u_x)*0.8, (v_y - u_y)*0.8,
                 head_width=head, head_length=head, fc=colors[j], ec=colors[j], alpha=0.7, zorder=4)
    ax.plot([], [], color=colors[0], label=f'Tour ({len(tour) - 1} stops)')

    for node_id, (x, y) in node_coords_map.items():
        ax.text(x, y + head, str(node_id), fontsize=9, ha='center', weight='bold')

    ax.set_title(title, fontsize=18, fontweight='bold')
    ax.set_xlabel("X Coordinate", fontsize=12)
    ax.set_ylabel("Y Coordinate", fontsize=12)
    ax.legend(loc='upper right', fontsize=10)
    ax.grid(True)

    if filename is None:
        sanitized_title = title.lower().replace(" ", "_")
        filename = f"{sanitized_title}.png"

    filepath = os.path.join(output_dir, filename)
    plt.savefig(filepath, bbox_inches='tight')
    plt.close(fig)
    return filepath
