import networkx as nx
import numpy as np
from typing import Dict, Hashable


def color_budget(connections: np.ndarray) -> int:
        """Greedy upper bound: max degree + 1 colors always suffice."""
        if connections.shape[0] == 0:
                return 1
        return int(connections.sum(axis=1).max()) + 1


def calculate_lower_bound(G: nx.Graph) -> int:
        """Calculate a lower bound for the chromatic number using clique size."""
        if G.number_of_nodes() == 0:
                return 0
        # Find a maximal clique as a lower bound (not necessarily maximum)
        # Using a greedy algorithm for speed
        max_clique_size = 1
        for start_node in G.nodes():
            clique = {start_node}
            candidates = set(G.neighbors(start_node)) - {start_node}

            while candidates:
                # Add highest degree node, keep only nodes adjacent to the whole clique
                next_node = max(candidates, key=lambda x: G.degree(x))
                clique.add(next_node)
                candidates &= set(G.neighbors(next_node))
                candidates.discard(next_node)

            max_clique_size = max(max_clique_size, len(clique))

        return max_clique_size


def count_colors(coloring: Dict[Hashable, int]) -> int:
        """Number of distinct colors used (0 if empty)."""
        return len(set(coloring.values()))


def validate_coloring(G: nx.Graph, coloring: Dict[Hashable, int]) -> bool:
        """Verify no adjacent nodes share the same color."""
        for node, color in coloring.items():
            for nbr in G.neighbors(node):
                if nbr != node and coloring.get(nbr) == color:
                    return False
        return True
