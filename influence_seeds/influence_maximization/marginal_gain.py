import logging
from typing import List, Optional, Set
from tqdm import tqdm

from influence_seeds.cancellation import CancellationToken, check
from influence_seeds.diffusion import DiffusionModel
from influence_seeds.influence_maximization.base import SeedStrategy
from influence_seeds.network import Network

logger = logging.getLogger(__name__)


class MarginalGain(SeedStrategy):
    """
    Greedy selection on Monte-Carlo marginal gains.

    For every unselected node, run `num_samples` cascades from that node alone with every node
    already influenced immunized, and take the union of the newly reached nodes. The candidate
    counts towards its own gain when it was not influenced before. The node with the strictly
    largest union is selected (ties go to the lowest id) and its union joins the influenced set.

    After `select`, `influenced` holds every node influenced by the chosen seeds during selection.
    """

    name = "marginal_gain"
    label = "Marginal Gain"

    def __init__(self, diffusion_model: DiffusionModel, num_samples: int = 100, progress: bool = True):
        """
        Parameters:
        ----------
        diffusion_model : DiffusionModel
            The contagion model to be used for influence maximization.
        num_samples : int
            Number of cascades whose union forms one marginal gain estimate. Default is 100.
        progress : bool
            Show a tqdm progress bar for every round. Default is True.
        """
        if num_samples < 1:
            raise ValueError("num_samples must be at least 1.")
        self.diffusion_model = diffusion_model
        self.num_samples = num_samples
        self.progress = progress
        self.influenced: Set[int] = set()

    def _newly_influenced(self, network: Network, node: int, influenced: Set[int],
                          token: Optional[CancellationToken] = None) -> Set[int]:
        """Union over the samples of nodes reached from `node` that were not influenced yet."""
        reached = self.diffusion_model.simulate(
            network, {node}, trials=self.num_samples, policy="union",
            immunized_init=influenced - {node}, token=token,
        )
        return reached - influenced

    def _select(self, network: Network, k: int, token: Optional[CancellationToken]) -> List[int]:
        selected_nodes: List[int] = []
        influenced: Set[int] = set()

        for i in range(k):
            check(token)
            logger.info(f"Selecting node {i + 1}/{k}...")

            best_node = None
            best_newly_influenced: Set[int] = set()
            selected_set = set(selected_nodes)
            candidates = [node for node in sorted(network.nodes()) if node not in selected_set]

            for node in tqdm(candidates, desc=f"Scanning for node {i + 1}", disable=not self.progress):
                newly_influenced = self._newly_influenced(network, node, influenced, token)
                if best_node is None or len(newly_influenced) > len(best_newly_influenced):
                    best_node = node
                    best_newly_influenced = newly_influenced

            if best_node is None:
                logger.warning("Could not find a best node to select. Halting.")
                break

            logger.info(f"Selected node {best_node} with marginal gain {len(best_newly_influenced)}")
            selected_nodes.append(best_node)
            influenced |= best_newly_influenced

        self.influenced = influenced
        logger.info(f"Selected nodes: {selected_nodes}")
        logger.info(f"Influenced during selection: {len(influenced)}")

        return selected_nodes
