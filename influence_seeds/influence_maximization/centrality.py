import logging
from typing import List, Optional

from influence_seeds.cancellation import CancellationToken, check
from influence_seeds.centrality import betweenness_centrality, degree_centrality, top_k
from influence_seeds.influence_maximization.base import SeedStrategy
from influence_seeds.network import Network

logger = logging.getLogger(__name__)


class DegreeHeuristic(SeedStrategy):
    """Top-k nodes by degree. Ties go to the lower node id."""

    name = "degree"
    label = "Degree Centrality"

    def _select(self, network: Network, k: int, token: Optional[CancellationToken]) -> List[int]:
        check(token)
        seeds = top_k(degree_centrality(network), k)
        logger.info(f"Top {k} seeds selected by degree centrality: {seeds}")
        return seeds


class BetweennessHeuristic(SeedStrategy):
    """
    Top-k nodes by betweenness centrality (Brandes, unweighted). Ties go to the lower node id.
    Costs O(V·E) regardless of k.
    """

    name = "betweenness"
    label = "Betweenness Centrality"

    def _select(self, network: Network, k: int, token: Optional[CancellationToken]) -> List[int]:
        check(token)
        seeds = top_k(betweenness_centrality(network), k)
        logger.info(f"Top {k} seeds selected by betweenness centrality: {seeds}")
        return seeds
