import logging
from typing import List, Optional
from tqdm import tqdm

from influence_seeds.cancellation import CancellationToken, check
from influence_seeds.diffusion import DiffusionModel
from influence_seeds.influence_maximization.base import SeedStrategy
from influence_seeds.network import Network

logger = logging.getLogger(__name__)


class Greedy(SeedStrategy):
    """
    The general Greedy algorithm maximizes the influence by iteratively selecting the node with the highest potential for
    additional influence until the set is full. First, we calculate R({v}), ∀v ∈ G. From this, we select the node, n1,
    with the highest measured influence. Next, we calculate R({n1, v}), ∀v ∈ G − {n1}, and then pick the set with the
    highest influence, {n1, n2}. We repeat this process till our set is of size k.

    Every round re-simulates every remaining candidate from scratch. Candidates are scanned in
    ascending id order and only a strictly larger influence replaces the current best, so ties go
    to the lowest id.

    The algorithm was proposed by Kempe et al. in "Maximizing the Spread of Influence through a Social Network" (2003).
    """

    name = "greedy"
    label = "Greedy"

    def __init__(self, diffusion_model: DiffusionModel, num_samples: int = 1, policy: str = "mean",
                 progress: bool = True):
        """
        Initialize the Greedy algorithm for influence maximization.

        Parameters:
        ----------
        diffusion_model : DiffusionModel
            The contagion model to be used for influence maximization.
        num_samples : int
            Number of cascades per influence estimate. Default is 1, a single stochastic run.
        policy : str
            How the samples are aggregated, see `DiffusionModel.estimate_influence`. Default is "mean".
        progress : bool
            Show a tqdm progress bar for every round. Default is True.
        """
        if num_samples < 1:
            raise ValueError("num_samples must be at least 1.")
        self.diffusion_model = diffusion_model
        self.num_samples = num_samples
        self.policy = policy
        self.progress = progress

    def _estimate_influence(self, network: Network, node: int, selected_nodes: List[int],
                            token: Optional[CancellationToken] = None) -> float:
        """
        Estimate the influence of the selected nodes plus one candidate.

        Parameters:
        ----------
        network : Network
            The network on which the contagion model is applied.
        node : int
            The candidate node.
        selected_nodes : List[int]
            The nodes already selected for influence maximization.

        Returns:
        -------
        float
            The estimated influence of the selected nodes together with the candidate.
        """
        infected = set(selected_nodes) | {node}
        return self.diffusion_model.estimate_influence(
            network, infected, trials=self.num_samples, policy=self.policy, token=token
        )

    def _select(self, network: Network, k: int, token: Optional[CancellationToken]) -> List[int]:
        selected_nodes: List[int] = []
        remaining_nodes = sorted(network.nodes())
        best_influence = None

        for i in range(k):
            check(token)
            logger.info(f"Selecting node {i + 1}/{k}...")

            best_node = None
            best_influence = None

            # Note: tqdm prints to stderr by default, which is fine.
            for node in tqdm(remaining_nodes, desc=f"Scanning for node {i + 1}", disable=not self.progress):
                influence = self._estimate_influence(network, node, selected_nodes, token)
                if best_influence is None or influence > best_influence:
                    best_influence = influence
                    best_node = node

            if best_node is None:
                logger.warning("Could not find a best node to select. Halting.")
                break

            logger.info(f"Selected node {best_node} with influence {best_influence:.2f}")
            selected_nodes.append(best_node)
            remaining_nodes.remove(best_node)

        logger.info(f"Selected nodes: {selected_nodes}")
        if selected_nodes:
            logger.info(f"Final influence: {best_influence:.2f}")

        return selected_nodes
