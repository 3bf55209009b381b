import logging
from collections import deque
from typing import Dict, List

from influence_seeds.network import Network

logger = logging.getLogger(__name__)


def degree_centrality(network: Network) -> Dict[int, int]:
    """
    Degree of every node, counted as the number of adjacency entries.
    Each undirected edge contributes once to each of its endpoints.
    """
    return {node: network.get_degree(node) for node in network.nodes()}


def betweenness_centrality(network: Network) -> Dict[int, float]:
    """
    Betweenness centrality of every node using Brandes' algorithm on the unweighted graph.
    Edge probabilities are ignored for path lengths.

    The accumulation runs from every source, so on an undirected graph each unordered pair of
    endpoints is counted from both ends. Scores are therefore twice the conventional
    unnormalized undirected betweenness.

    Parameters:
    ----------
    network : Network
        The network to score.

    Returns:
    -------
    Dict[int, float]
        Mapping from node to its betweenness score.
    """
    num_nodes = network.number_of_nodes()
    centrality = [0.0] * num_nodes

    for source in range(num_nodes):
        path_counts = [0] * num_nodes
        distance = [-1] * num_nodes
        predecessors: List[List[int]] = [[] for _ in range(num_nodes)]
        dependency = [0.0] * num_nodes

        path_counts[source] = 1
        distance[source] = 0
        order = []
        queue = deque([source])

        # BFS for shortest path counts
        while queue:
            current = queue.popleft()
            order.append(current)
            for neighbor, _ in network.get_neighbors(current):
                if distance[neighbor] == -1:
                    distance[neighbor] = distance[current] + 1
                    queue.append(neighbor)
                if distance[neighbor] == distance[current] + 1:
                    path_counts[neighbor] += path_counts[current]
                    predecessors[neighbor].append(current)

        # dependencies in reverse BFS order
        for node in reversed(order):
            for pred in predecessors[node]:
                dependency[pred] += (path_counts[pred] / path_counts[node]) * (1 + dependency[node])
            if node != source:
                centrality[node] += dependency[node]

    logger.debug(f"Computed betweenness centrality for {num_nodes} nodes")
    return dict(enumerate(centrality))


def top_k(scores: Dict[int, float], k: int) -> List[int]:
    """Nodes with the k highest scores, ties broken by ascending node id."""
    ranked = sorted(scores, key=lambda node: (-scores[node], node))
    return ranked[:k]
