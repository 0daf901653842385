import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional

import numpy as np

LOG = logging.getLogger(__name__)

COLLAPSED = -1          # entropy sentinel for a fixed node
UNSET = -1              # output sentinel before collapse
DEFAULT_MAX_RESTARTS = 100


# --- Errors ---

class WFCError(Exception):
    """Base class for every coloring failure."""


class InvalidInput(WFCError):
    pass


class ImpossiblePattern(WFCError):
    pass


class NoAvailableColor(WFCError):
    pass


class PropagationContradiction(WFCError):
    pass


class RestartLimitExceeded(WFCError):
    pass


# --- Run state ---

class Phase(Enum):
    RUNNING = "running"
    RESTARTING = "restarting"
    FINISHED = "finished"
    ABORTED = "aborted"


@dataclass(frozen=True)
class RunState:
    phase: Phase
    reason: Optional[str] = None

    @classmethod
    def running(cls) -> "RunState":
        return cls(Phase.RUNNING)

    @classmethod
    def restarting(cls) -> "RunState":
        return cls(Phase.RESTARTING)

    @classmethod
    def finished(cls) -> "RunState":
        return cls(Phase.FINISHED)

    @classmethod
    def aborted(cls, reason: str) -> "RunState":
        return cls(Phase.ABORTED, reason)


# --- Bitmask domains and color policies ---

def popcount(mask: int) -> int:
    return mask.bit_count()


def lowest_bit(mask: int) -> int:
    """Index of the lowest set bit of `mask`, or -1 when it is empty."""
    return (mask & -mask).bit_length() - 1


ColorPolicy = Callable[[int], int]


def lowest_color(mask: int) -> int:
    # Deterministic choice: lowest-indexed color still in the domain
    color = lowest_bit(mask)
    if color < 0:
        raise NoAvailableColor("No available color")
    return color


def random_color(seed: Optional[int] = None) -> ColorPolicy:
    """
    Build a policy that picks uniformly among the colors left in a domain.
    Seeded so repeated runs can be reproduced.
    """
    rng = random.Random(seed)

    def choose(mask: int) -> int:
        colors = [c for c in range(mask.bit_length()) if mask >> c & 1]
        if not colors:
            raise NoAvailableColor("No available color")
        return rng.choice(colors)

    return choose


class WFCState:
    def __init__(
        self,
        connections: np.ndarray,
        colors: int,
        choose_color: ColorPolicy = lowest_color,
        max_restarts: Optional[int] = DEFAULT_MAX_RESTARTS,
        restart_on_propagation_failure: bool = False,
    ):
        # Store the adjacency and the color budget; neither changes on restart
        self.connections = np.asarray(connections, dtype=bool)
        self.nodes = self.connections.shape[0]
        self.colors = colors
        self.neighbors: List[List[int]] = [
            np.flatnonzero(row).tolist() for row in self.connections
        ]
        self.full_mask = (1 << colors) - 1

        # Configuration
        self.choose_color = choose_color
        self.max_restarts = max_restarts
        self.restart_on_propagation_failure = restart_on_propagation_failure

        # Per-node arrays, reset in place on every restart
        self.available_colors: List[int] = [self.full_mask] * self.nodes
        self.entropy: List[int] = [colors] * self.nodes
        self.output: List[int] = [UNSET] * self.nodes
        self.affected_nodes: Deque[int] = deque()
        self.min_index: Optional[int] = None

        self.state = RunState.running()
        self.restarts = 0

    @property
    def finished(self) -> bool:
        return self.state.phase is Phase.FINISHED

    def restart_wfc(self) -> None:
        """Discard all progress and start a fresh attempt on the same graph."""
        self.restarts += 1
        if self.max_restarts is not None and self.restarts > self.max_restarts:
            raise RestartLimitExceeded(
                f"Gave up after {self.max_restarts} restarts"
            )
        LOG.debug("Contradiction found, restart #%d", self.restarts)

        for i in range(self.nodes):
            self.available_colors[i] = self.full_mask
            self.entropy[i] = self.colors
            self.output[i] = UNSET
        self.affected_nodes.clear()
        self.min_index = None
        self.state = RunState.restarting()

    def find_lowest_entropy(self) -> None:
        min_value = self.colors + 1
        self.min_index = None

        for index, val in enumerate(self.entropy):
            if val == COLLAPSED:
                continue
            if val == 0:
                self.restart_wfc()
                return
            # Strict comparison keeps the first index on ties
            if val < min_value:
                min_value = val
                self.min_index = index

        if self.min_index is None:
            self.state = RunState.finished()

    def collapse(self, index: int) -> None:
        if self.finished:
            return
        if self.entropy[index] == 0:
            raise ImpossiblePattern(f"Impossible pattern at node {index}")

        color = self.choose_color(self.available_colors[index])
        if color < 0 or not self.available_colors[index] >> color & 1:
            raise NoAvailableColor(
                f"Color {color} is not in the domain of node {index}"
            )

        self.entropy[index] = COLLAPSED
        self.available_colors[index] = 1 << color
        self.output[index] = color
        self.affected_nodes.append(index)

    def propagate(self) -> None:
        visited = [False] * self.nodes

        while self.affected_nodes:
            index = self.affected_nodes.popleft()
            # Collapsed and forced nodes both hold a single bit here
            color = lowest_bit(self.available_colors[index])
            if color < 0:
                raise NoAvailableColor(
                    f"No available color during propagation at node {index}"
                )
            bit = 1 << color

            for node in self.neighbors[index]:
                if self.entropy[node] == COLLAPSED or not self.available_colors[node] & bit:
                    continue
                self.available_colors[node] &= ~bit
                self.entropy[node] -= 1

                if self.entropy[node] == 0:
                    raise PropagationContradiction(
                        f"Propagation error: no valid configuration for node {node}"
                    )
                if self.entropy[node] == 1 and not visited[node]:
                    visited[node] = True
                    self.affected_nodes.append(node)

    def step(self) -> None:
        """Select one node, then collapse and propagate it."""
        self.state = RunState.running()
        self.find_lowest_entropy()

        if self.state.phase is not Phase.RUNNING or self.min_index is None:
            return

        self.collapse(self.min_index)
        try:
            self.propagate()
        except PropagationContradiction:
            if not self.restart_on_propagation_failure:
                raise
            self.restart_wfc()

    def run(self) -> List[int]:
        """
        Collapse nodes until every one holds a color.

        Returns:
            The 0-based color of each node, by node index.

        Raises:
            WFCError: on any fatal contradiction; the state is left ABORTED.
        """
        try:
            while not self.finished:
                self.step()
        except WFCError as e:
            self.state = RunState.aborted(str(e))
            LOG.warning("Coloring aborted: %s", e)
            raise

        return list(self.output)
