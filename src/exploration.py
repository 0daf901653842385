import networkx as nx
import matplotlib.pyplot as plt
from collections import Counter
from typing import Dict, Hashable, Optional

from graph_io import load_graph


class GraphExplorer:
    def __init__(self, filepath, G: Optional[nx.Graph] = None):

        self.filepath = filepath
        self.G = G if G is not None else nx.Graph()
        self.n = self.G.number_of_nodes()
        self.m = self.G.number_of_edges()

    def parse(self):
        self.G, self.n, self.m = load_graph(self.filepath)

    def compute_basic_stats(self):
        # basic graph statistics.
        stats = {}
        stats['num_nodes'] = self.G.number_of_nodes()
        stats['num_edges'] = self.G.number_of_edges()
        stats['density']   = nx.density(self.G)
        degrees = [d for _, d in self.G.degree()]
        stats['avg_degree'] = sum(degrees) / len(degrees) if degrees else 0.0
        stats['max_degree'] = max(degrees, default=0)
        stats['degree_histogram'] = Counter(degrees)
        stats['num_components']   = nx.number_connected_components(self.G) if degrees else 0
        stats['component_sizes']  = sorted(
            (len(c) for c in nx.connected_components(self.G)),
            reverse=True
        )
        stats['avg_clustering'] = nx.average_clustering(self.G) if degrees else 0.0
        return stats

    def draw_coloring(self, coloring: Dict[Hashable, int], nodes=None, path: Optional[str] = None):
        # nodes filled by color class, optionally restricted to an induced subgraph
        G = self.G.subgraph(nodes) if nodes else self.G
        fig = plt.figure(figsize=(10, 8))
        pos = nx.spring_layout(G, seed=0)
        node_color = [coloring.get(v, 0) for v in G.nodes()]
        nx.draw(G, pos, with_labels=True, node_color=node_color, cmap=plt.cm.tab20,
                node_size=500, font_size=10)
        if path:
            fig.savefig(path)
            plt.close(fig)
        else:
            plt.show()


if __name__ == '__main__':
    import argparse
    from wfc_coloring import wfc_color

    parser = argparse.ArgumentParser(description='Show stats and the WFC coloring of a DIMACS graph')
    parser.add_argument('input', help='Path to DIMACS graph file')
    parser.add_argument('--save', default=None, help='Save the drawing instead of showing it')
    args = parser.parse_args()

    explorer = GraphExplorer(args.input)
    explorer.parse()

    stats = explorer.compute_basic_stats()
    print(f"Basic stats for {args.input}:")
    for k, v in stats.items():
        print(f"  {k}: {v}")

    explorer.draw_coloring(wfc_color(explorer.G), path=args.save)
