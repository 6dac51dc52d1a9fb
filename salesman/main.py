import os
import json
import logging
import argparse
from pathlib import Path

import pandas as pd

from .ant_solver import AntColonySolver
from .config import (DEFAULT_BFS_DEPTH, DEFAULT_DATA_DIR, DEFAULT_LOG_LEVEL, DEFAULT_NUM_ANTS,
                     DEFAULT_OUTPUT_DIR, LOG_FORMAT, SOLVER_NAMES)
from .errors import TourError
from .graph import Graph
from .mst_solver import MSTShortcutSolver
from .observers import LoggingObserver
from .utils import load_graph
from .visualisation import visualize_tour

logger = logging.getLogger(__name__)

SUMMARY_METRICS = ["total_distance", "num_stops", "revisits", "is_valid"]


def configure_logging(level=DEFAULT_LOG_LEVEL):
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return logger


def find_graph_files(base_dir: str) -> list:
    paths = []
    for root, _, files in os.walk(base_dir):
        for f in files:
            if f.endswith('.csv') or f.endswith('.json'):
                paths.append(os.path.join(root, f))
    return sorted(paths)


def build_solver(name: str, graph: Graph, start_id, args):
    if name == 'mst':
        observer = LoggingObserver() if args.trace else None
        return MSTShortcutSolver(graph, start_id, observer)
    if name == 'ant':
        return AntColonySolver(graph, start_id, num_ants=args.ants, bfs_depth=args.bfs_depth, seed=args.seed)
    raise ValueError(f"Unknown solver {name!r}. Choose from {SOLVER_NAMES}.")


def log_solver_results(prefix: str, tour: list, metrics: dict):
    logger.info(f"  {prefix} Tour: {tour}")
    for k, v in metrics.items():
        if k == "tour_list":
            continue
        if isinstance(v, float):
            logger.info(f"    {k.replace('_',' ').title()}: {v:.2f}")
        else:
            logger.info(f"    {k.replace('_',' ').title()}: {v}")


def process_file(file_path: str, solver_names, args) -> dict:
    logger.info(f"\n\n=== Processing file: {file_path} ===")
    try:
        graph, start_id = load_graph(file_path)
    except (OSError, ValueError) as e:
        logger.error(f"Error loading {file_path}: {e}")
        return {}
    if args.start is not None:
        start_id = args.start
        # JSON graphs may use integer ids.
        if start_id not in graph.nodes and start_id.lstrip('-').isdigit():
            start_id = int(start_id)

    results = {}
    for name in solver_names:
        logger.info(f"\n--- Running {name} solver ---")
        try:
            solver = build_solver(name, graph, start_id, args)
            tour, metrics = solver.solve()
        except TourError as e:
            logger.error(f"{name} solver failed on {file_path}: {e}")
            continue
        results[name] = metrics
        log_solver_results(name, tour, metrics)

        if args.plot:
            stem = Path(file_path).stem
            visualize_tour(graph, tour, start_id, title=f"{stem} {name} Tour",
                           filename=f"{stem}_{name}.png", output_dir=args.plot_dir)
    return results


def final_summary(all_results: dict) -> pd.DataFrame:
    """Tabulates the key metrics of every solver run, one row per (file, solver)."""
    rows = []
    for fname, res in sorted(all_results.items()):
        for solver_name, metrics in res.items():
            row = {"file": fname, "solver": solver_name}
            row.update({m: metrics.get(m) for m in SUMMARY_METRICS})
            rows.append(row)
    summary = pd.DataFrame(rows, columns=["file", "solver"] + SUMMARY_METRICS)

    logger.info("\n\n=== FINAL SUMMARY ACROSS ALL FILES ===")
    if summary.empty:
        logger.info("No successful runs.")
        return summary
    logger.info("\n" + summary.to_string(index=False, float_format=lambda v: f"{v:.2f}"))

    if summary["solver"].nunique() > 1:
        per_solver = summary.groupby("solver")["total_distance"].mean()
        for solver_name, mean_distance in per_solver.items():
            logger.info(f"  Mean Distance ({solver_name}): {mean_distance:.2f}")
    return summary


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compute approximate salesman tours over point graphs.")
    parser.add_argument("--file", type=str, default=None, help="Path to a single graph file (.json or .csv).")
    parser.add_argument("--data", type=str, default=None, help="Directory containing graph files.")
    parser.add_argument("--start", type=str, default=None, help="Start point ID (defaults to the file's start point).")
    parser.add_argument("--solver", choices=SOLVER_NAMES + ('all',), default='mst', help="Tour strategy to run.")
    parser.add_argument("--ants", type=int, default=DEFAULT_NUM_ANTS, help="Number of ants for the ant solver.")
    parser.add_argument("--bfs-depth", type=int, default=DEFAULT_BFS_DEPTH, help="Lookahead depth for the ant solver.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the ant solver.")
    parser.add_argument("--output", type=str, help="Path to a JSON file to save the detailed results.")
    parser.add_argument("--summary-csv", type=str, help="Path to a CSV file to save the summary table.")
    parser.add_argument("--plot", action="store_true", help="Save a figure of every tour.")
    parser.add_argument("--plot-dir", type=str, default=DEFAULT_OUTPUT_DIR, help="Directory for figures.")
    parser.add_argument("--trace", action="store_true", help="Log every spanning tree and detour event.")
    parser.add_argument("--log-level", type=str, default=logging.getLevelName(DEFAULT_LOG_LEVEL), help="Logging level.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level.upper())

    if args.file:
        if not Path(args.file).is_file():
            logger.error(f"File not found: {args.file}")
            return 1
        files_to_process = [args.file]
    else:
        data_dir = Path(args.data) if args.data else Path(DEFAULT_DATA_DIR)
        if not data_dir.exists():
            logger.error(f"Data directory not found: {data_dir}. Use --file or --data.")
            return 1
        files_to_process = find_graph_files(str(data_dir))
        if not files_to_process:
            logger.warning(f"No graph files found in {data_dir}.")
            return 1

    solver_names = SOLVER_NAMES if args.solver == 'all' else (args.solver,)
    all_results = {}
    for path in files_to_process:
        res = process_file(path, solver_names, args)
        if res:
            all_results[os.path.basename(path)] = res

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(all_results, f, indent=4)
        logger.info(f"\nResults for {len(files_to_process)} file(s) saved to {args.output}")

    summary = final_summary(all_results)
    if args.summary_csv:
        summary.to_csv(args.summary_csv, index=False)
        logger.info(f"Summary saved to {args.summary_csv}")
    return 0 if all_results else 1


if __name__ == "__main__":
    raise SystemExit(main())
