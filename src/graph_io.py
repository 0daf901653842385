import os
import networkx as nx
from typing import Dict, Hashable, Tuple


# Load graph from DIMACS file
def load_graph(path: str) -> Tuple[nx.Graph, int, int]:
    """
    Read a DIMACS edge file.

    Nodes are numbered 1..n as declared by the `p` line; `e u v` lines add
    undirected edges. Returns the graph with the header's node and edge counts.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file {path} does not exist")

    G = nx.Graph()
    node_count = None
    edge_count = 0

    with open(path, "r") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("c"):
                continue

            parts = line.split()
            try:
                if parts[0] == "p":
                    # p edge <n> <m>, p col <n> <m>, or the short p <n> <m>
                    if len(parts) >= 4:
                        node_count, edge_count = int(parts[2]), int(parts[3])
                    elif len(parts) == 3:
                        node_count, edge_count = int(parts[1]), int(parts[2])
                    else:
                        raise ValueError("incomplete problem line")
                    if node_count < 0 or edge_count < 0:
                        raise ValueError(f"negative count in problem line: {line}")
                    G.add_nodes_from(range(1, node_count + 1))

                elif parts[0] == "e":
                    if node_count is None:
                        raise ValueError("edge declared before problem line")
                    if len(parts) < 3:
                        raise ValueError("incomplete edge line")
                    u, v = int(parts[1]), int(parts[2])
                    if not (1 <= u <= node_count and 1 <= v <= node_count):
                        raise ValueError(f"edge ({u}, {v}) outside 1..{node_count}")
                    G.add_edge(u, v)
            except ValueError as e:
                raise ValueError(f"Error reading file {path}, line {lineno}: {e}") from e

    if node_count is None:
        raise ValueError(f"Error reading file {path}: missing problem line")

    return G, node_count, edge_count


def write_coloring(path: str, coloring: Dict[Hashable, int]) -> None:
    # One "node: color" line per node
    with open(path, "w") as f:
        for node, color in coloring.items():
            f.write(f"{node}: {color}\n")
