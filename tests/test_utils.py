import networkx as nx
import numpy as np

from utils import calculate_lower_bound, color_budget, count_colors, validate_coloring


def test_color_budget():
    assert color_budget(np.zeros((0, 0), dtype=bool)) == 1
    assert color_budget(np.zeros((4, 4), dtype=bool)) == 1
    assert color_budget(nx.to_numpy_array(nx.star_graph(5), dtype=bool)) == 6
    assert color_budget(nx.to_numpy_array(nx.cycle_graph(7), dtype=bool)) == 3


def test_validate_coloring():
    G = nx.path_graph(3)
    assert validate_coloring(G, {0: 1, 1: 2, 2: 1})
    assert not validate_coloring(G, {0: 1, 1: 1, 2: 2})


def test_validate_coloring_skips_uncolored_neighbors():
    G = nx.path_graph(3)
    assert validate_coloring(G, {0: 1, 2: 1})


def test_count_colors():
    assert count_colors({}) == 0
    assert count_colors({0: 1, 1: 2, 2: 1}) == 2


def test_lower_bound():
    assert calculate_lower_bound(nx.Graph()) == 0
    assert calculate_lower_bound(nx.empty_graph(3)) == 1
    assert calculate_lower_bound(nx.complete_graph(5)) == 5
    assert calculate_lower_bound(nx.cycle_graph(5)) == 2
