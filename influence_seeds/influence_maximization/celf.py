import logging
import heapq
from typing import List, Optional, Set, Tuple
from tqdm import tqdm

from influence_seeds.cancellation import CancellationToken, check
from influence_seeds.diffusion import DiffusionModel
from influence_seeds.influence_maximization.base import SeedStrategy
from influence_seeds.network import Network

logger = logging.getLogger(__name__)


class CELF(SeedStrategy):
    """
    The Cost-Effective Lazy Forward (CELF) algorithm for influence maximization.

    CELF optimizes the greedy algorithm by using the submodularity property of influence functions.
    It maintains a priority queue of nodes sorted by their marginal gain and uses lazy evaluation
    to avoid redundant influence calculations: only the top candidate is re-evaluated, and it is
    selected once its gain is fresh for the current round. Equal gains resolve to the lower node id.

    The algorithm was proposed by Leskovec et al. in "Cost-effective outbreak detection in networks" (2007).
    """

    name = "celf"
    label = "CELF"

    def __init__(self, diffusion_model: DiffusionModel, num_samples: int = 1, policy: str = "mean",
                 progress: bool = True):
        """
        Initialize the CELF algorithm for influence maximization.

        Parameters:
        ----------
        diffusion_model : DiffusionModel
            The contagion model to be used for influence maximization.
        num_samples : int
            Number of cascades per influence estimate. Default is 1.
        policy : str
            How the samples are aggregated, see `DiffusionModel.estimate_influence`. Default is "mean".
        progress : bool
            Show a tqdm progress bar while computing the initial gains. Default is True.
        """
        if num_samples < 1:
            raise ValueError("num_samples must be at least 1.")
        self.diffusion_model = diffusion_model
        self.num_samples = num_samples
        self.policy = policy
        self.progress = progress

    def _estimate_influence(self, network: Network, infected: Set[int],
                            token: Optional[CancellationToken] = None) -> float:
        if not infected:
            return 0.0
        return self.diffusion_model.estimate_influence(
            network, infected, trials=self.num_samples, policy=self.policy, token=token
        )

    def _calculate_marginal_gain(self, network: Network, node: int, selected_nodes: Set[int],
                                 base_influence: float, token: Optional[CancellationToken] = None) -> float:
        """
        Calculate the marginal gain of adding a node to the selected set.

        Parameters:
        ----------
        network : Network
            The network on which the influence maximization is performed.
        node : int
            The node for which marginal gain is calculated.
        selected_nodes : Set[int]
            The set of nodes already selected.
        base_influence : float
            Estimated influence of `selected_nodes` alone.

        Returns:
        -------
        float
            The marginal gain of adding the node.
        """
        return self._estimate_influence(network, selected_nodes | {node}, token) - base_influence

    def _select(self, network: Network, k: int, token: Optional[CancellationToken]) -> List[int]:
        logger.info(f"Starting CELF algorithm with k={k}, num_samples={self.num_samples}")

        selected_nodes: List[int] = []
        if k == 0:
            return selected_nodes

        # Priority queue: (-marginal_gain, node_id, round_last_updated)
        # We use negative marginal gain because heapq is a min-heap
        priority_queue: List[Tuple[float, int, int]] = []

        logger.info("Initializing priority queue...")
        for node in tqdm(sorted(network.nodes()), desc="Calculating initial marginal gains", disable=not self.progress):
            check(token)
            marginal_gain = self._calculate_marginal_gain(network, node, set(), 0.0, token)
            heapq.heappush(priority_queue, (-marginal_gain, node, 0))

        total_influence = 0.0
        evaluations = len(priority_queue)

        for i in range(k):
            check(token)
            logger.info(f"Selecting node {i + 1}/{k}...")

            selected_set = set(selected_nodes)
            base_influence = None
            best_node = None
            best_gain = None

            while priority_queue:
                neg_gain, node, last_updated = heapq.heappop(priority_queue)

                # A gain computed in this round is exact, so by submodularity it is the best
                if last_updated == i:
                    best_node = node
                    best_gain = -neg_gain
                    break

                if base_influence is None:
                    base_influence = self._estimate_influence(network, selected_set, token)
                new_marginal_gain = self._calculate_marginal_gain(network, node, selected_set, base_influence, token)
                evaluations += 1
                heapq.heappush(priority_queue, (-new_marginal_gain, node, i))

            if best_node is None:
                logger.warning("Could not find a best node to select. Halting.")
                break

            logger.info(f"Selected node {best_node} with marginal gain {best_gain:.2f}")
            selected_nodes.append(best_node)
            total_influence += best_gain

        logger.info(f"Selected nodes: {selected_nodes}")
        logger.info(f"Total estimated influence: {total_influence:.2f} ({evaluations} gain evaluations)")

        return selected_nodes
