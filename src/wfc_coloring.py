import time
import networkx as nx
import numpy as np
from typing import Any, Dict, Hashable, List, Optional, Tuple

from utils import color_budget
from wfc_engine import (
    DEFAULT_MAX_RESTARTS,
    ColorPolicy,
    InvalidInput,
    WFCState,
    lowest_color,
    random_color,
)


def build_adjacency(G: nx.Graph) -> Tuple[List[Hashable], np.ndarray]:
    """
    Convert a networkx graph into a node ordering and a dense symmetric
    boolean adjacency matrix indexed by that ordering.
    """
    if G.is_directed():
        raise InvalidInput("Graph must be undirected")

    nodes = list(G.nodes())
    if not nodes:
        return nodes, np.zeros((0, 0), dtype=bool)

    # weight=None: every edge counts, whatever its attributes
    connections = nx.to_numpy_array(G, nodelist=nodes, dtype=bool, weight=None)
    connections |= connections.T
    # Self-loops carry no coloring constraint
    np.fill_diagonal(connections, False)
    return nodes, connections


class WFCColoring:
    """
    Wave Function Collapse coloring of an undirected graph with
    max degree + 1 colors.
    """

    def __init__(
        self,
        G: nx.Graph,
        max_restarts: Optional[int] = DEFAULT_MAX_RESTARTS,
        choose_color: ColorPolicy = lowest_color,
        restart_on_propagation_failure: bool = False,
        policy_name: str = "lowest",
    ):
        # Directed graphs are rejected here, before any engine state exists
        self.G = G
        self.nodes, self.connections = build_adjacency(G)
        self.colors = color_budget(self.connections)

        self.max_restarts = max_restarts
        self.choose_color = choose_color
        self.restart_on_propagation_failure = restart_on_propagation_failure
        self.policy_name = policy_name

        # Statistics of the last run
        self.restarts = 0
        self.runtime = 0.0

    def run(self) -> Dict[Hashable, int]:
        """Color the graph; returns node -> 1-based color."""
        state = WFCState(
            self.connections,
            self.colors,
            choose_color=self.choose_color,
            max_restarts=self.max_restarts,
            restart_on_propagation_failure=self.restart_on_propagation_failure,
        )
        start = time.perf_counter()
        try:
            output = state.run()
        finally:
            self.runtime = time.perf_counter() - start
            self.restarts = state.restarts

        return {node: output[i] + 1 for i, node in enumerate(self.nodes)}

    def get_params(self) -> Dict[str, Any]:
        return solver_params(self.policy_name, self.max_restarts,
                             self.restart_on_propagation_failure)


def policy_name(random_seed: Optional[int] = None) -> str:
    return "lowest" if random_seed is None else f"random(seed={random_seed})"


def solver_params(
    color_policy: str = "lowest",
    max_restarts: Optional[int] = DEFAULT_MAX_RESTARTS,
    restart_on_propagation_failure: bool = False,
) -> Dict[str, Any]:
    return {
        "solver": "WFC",
        "color_policy": color_policy,
        "max_restarts": max_restarts,
        "restart_on_propagation_failure": restart_on_propagation_failure,
    }


def make_solver(
    G: nx.Graph,
    max_restarts: Optional[int] = DEFAULT_MAX_RESTARTS,
    restart_on_propagation_failure: bool = False,
    random_seed: Optional[int] = None,
) -> WFCColoring:
    """Build a solver from plain options; a seed selects the random color policy."""
    policy = lowest_color if random_seed is None else random_color(random_seed)
    return WFCColoring(
        G,
        max_restarts=max_restarts,
        choose_color=policy,
        restart_on_propagation_failure=restart_on_propagation_failure,
        policy_name=policy_name(random_seed),
    )


def wfc_color(G: nx.Graph, **options: Any) -> Dict[Hashable, int]:
    """Color `G` in one call; `options` are passed to WFCColoring."""
    return WFCColoring(G, **options).run()
