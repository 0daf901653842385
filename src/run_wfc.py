# src/run_wfc.py

import argparse
import logging
import sys

from graph_io import load_graph, write_coloring
from utils import count_colors, validate_coloring
from wfc_coloring import make_solver
from wfc_engine import DEFAULT_MAX_RESTARTS, WFCError


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Wave Function Collapse graph coloring")
    p.add_argument("input", help="Path to DIMACS graph file")
    p.add_argument("--max-restarts", type=int, default=DEFAULT_MAX_RESTARTS,
                   help="Restarts allowed before giving up (negative: unbounded)")
    p.add_argument("--propagation-restart", action="store_true",
                   help="Restart instead of aborting on a propagation contradiction")
    p.add_argument("--random-seed", type=int, default=None,
                   help="Pick colors at random with this seed instead of lowest-first")
    p.add_argument("--output", default=None, help="Write the coloring to this file")
    p.add_argument("--draw", default=None, help="Save a drawing of the colored graph here")
    p.add_argument("--verbose", action="store_true", help="Log restarts and aborts")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    G, num_nodes, num_edges = load_graph(args.input)

    solver = make_solver(
        G,
        max_restarts=args.max_restarts if args.max_restarts >= 0 else None,
        restart_on_propagation_failure=args.propagation_restart,
        random_seed=args.random_seed,
    )
    try:
        coloring = solver.run()
    except WFCError as e:
        print(f"Error coloring graph {args.input}: {e}", file=sys.stderr)
        return 1

    print(f"Vertices: {num_nodes}")
    print(f"Edges: {num_edges}")
    print(f"Color budget: {solver.colors}")
    print(f"k-value: {count_colors(coloring)}")
    print(f"Restarts: {solver.restarts}")
    print(f"Runtime: {solver.runtime:.6f}s")
    print(f"Valid coloring: {validate_coloring(G, coloring)}")

    if args.output:
        write_coloring(args.output, coloring)
        print(f"Full solution saved to {args.output}")

    if args.draw:
        from exploration import GraphExplorer

        explorer = GraphExplorer(args.input, G)
        explorer.draw_coloring(coloring, path=args.draw)
        print(f"Drawing saved to {args.draw}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
