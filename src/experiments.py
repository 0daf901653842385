import os
import glob
import csv
import json
import argparse
import logging
from concurrent.futures import ProcessPoolExecutor
from datetime import datetime
from typing import Any, Dict, List, Tuple

from graph_io import load_graph
from utils import calculate_lower_bound, count_colors, validate_coloring
from wfc_coloring import make_solver, policy_name, solver_params
from wfc_engine import DEFAULT_MAX_RESTARTS, WFCError


# --- Configuration ---
GRAPHS_DIR = 'data'
OUTPUT_CSV = 'results/wfc_experiments.csv'
PATTERN = '*.col'

CSV_HEADER = [
    'graph', 'vertices', 'edges', 'budget', 'k_value', 'lower_bound',
    'restarts', 'runtime', 'valid', 'error'
]


def single_run(graph_path: str, options: Dict[str, Any]) -> Tuple:
    """Load, color and validate one graph file; returns one CSV row."""
    graph_name = os.path.basename(graph_path)
    try:
        G, num_nodes, num_edges = load_graph(graph_path)
    except (OSError, ValueError) as e:
        return (graph_name, '', '', '', '', '', '', '', '', str(e))

    solver = make_solver(G, **options)
    lower_bound = calculate_lower_bound(G)
    try:
        coloring = solver.run()
    except WFCError as e:
        return (graph_name, num_nodes, num_edges, solver.colors, '', lower_bound,
                solver.restarts, f"{solver.runtime:.6f}", '', str(e))

    return (
        graph_name,
        num_nodes,
        num_edges,
        solver.colors,
        count_colors(coloring),
        lower_bound,
        solver.restarts,
        f"{solver.runtime:.6f}",
        validate_coloring(G, coloring),
        '',
    )


def print_result(row: Tuple) -> None:
    graph_name, vertices, edges, _, k_value, _, _, runtime, valid, error = row
    if error:
        print(f"Error coloring graph {graph_name}: {error}")
        return
    print(f"Results for {graph_name}")
    print(f"Vertices: {vertices}")
    print(f"Edges: {edges}")
    print(f"k-value: {k_value}")
    print(f"Runtime: {runtime}s")
    print(f"Valid coloring: {valid}")
    print("-------------------")


def save_params_json(csv_path: str, options: Dict[str, Any], num_graphs: int) -> str:
    # Parameters live next to the CSV, same name with .json
    json_path = os.path.splitext(csv_path)[0] + '.json'
    params = solver_params(
        policy_name(options.get('random_seed')),
        options.get('max_restarts', DEFAULT_MAX_RESTARTS),
        options.get('restart_on_propagation_failure', False),
    )
    params['timestamp'] = datetime.now().isoformat()
    params['num_graphs'] = num_graphs
    with open(json_path, 'w') as f:
        json.dump(params, f, indent=2)
    return json_path


def run_directory(directory: str = GRAPHS_DIR, output_path: str = OUTPUT_CSV,
                  pattern: str = PATTERN, workers: int = 1, **options: Any) -> List[Tuple]:
    """
    Color every graph file in `directory` matching `pattern`, sorted by name.
    A file that fails to load or color is reported and the batch goes on.
    """
    graph_files = sorted(glob.glob(os.path.join(directory, pattern)))

    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    rows: List[Tuple] = []
    with open(output_path, 'w', newline='') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(CSV_HEADER)

        def record(graph_path: str, row: Tuple) -> None:
            print(f"Processing file: {os.path.basename(graph_path)}")
            print_result(row)
            writer.writerow(row)
            csvfile.flush()
            rows.append(row)

        if workers > 1:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                # map keeps file order in the output
                results = executor.map(single_run, graph_files, [options] * len(graph_files))
                for graph_path, row in zip(graph_files, results):
                    record(graph_path, row)
        else:
            for graph_path in graph_files:
                record(graph_path, single_run(graph_path, options))

    json_path = save_params_json(output_path, options, len(rows))
    print(f"Experiments complete. Results saved to {output_path}, parameters to {json_path}")
    return rows


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Run WFC coloring over a directory of DIMACS graphs')
    parser.add_argument('--input-dir', '-i', default=GRAPHS_DIR, help='Directory of graph files')
    parser.add_argument('--pattern', default=PATTERN, help='Glob pattern for graph files')
    parser.add_argument('--output', '-o', default=OUTPUT_CSV, help='Path to CSV results file')
    parser.add_argument('--workers', type=int, default=1, help='Parallel worker processes')
    parser.add_argument('--max-restarts', type=int, default=DEFAULT_MAX_RESTARTS,
                        help='Restarts allowed per graph (negative: unbounded)')
    parser.add_argument('--propagation-restart', action='store_true',
                        help='Restart instead of aborting on a propagation contradiction')
    parser.add_argument('--random-seed', type=int, default=None,
                        help='Pick colors at random with this seed')
    parser.add_argument('--verbose', action='store_true', help='Log restarts and aborts')
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    run_directory(
        args.input_dir,
        args.output,
        pattern=args.pattern,
        workers=args.workers,
        max_restarts=args.max_restarts if args.max_restarts >= 0 else None,
        restart_on_propagation_failure=args.propagation_restart,
        random_seed=args.random_seed,
    )
