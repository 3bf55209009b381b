import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Set

from influence_seeds.cancellation import CancellationToken, check
from influence_seeds.diffusion import DiffusionModel
from influence_seeds.influence_maximization import SeedStrategy, validate_seed_count
from influence_seeds.network import Network

logger = logging.getLogger(__name__)


@dataclass
class InfluenceReport:
    """Seeds chosen by one strategy and the population a final cascade from them reached."""
    strategy: str
    seeds: List[int]
    influenced: Set[int] = field(default_factory=set)
    elapsed: float = 0.0

    @property
    def num_influenced(self) -> int:
        return len(self.influenced)

    def format_lines(self) -> List[str]:
        return [
            f"Selected Seed Nodes ({self.strategy}): {' '.join(str(node) for node in self.seeds)}",
            f"Total Nodes Influenced: {self.num_influenced}",
            f"Influenced Nodes: {' '.join(str(node) for node in sorted(self.influenced))}",
        ]


def run_pipeline(network: Network, strategy: SeedStrategy, k: int, diffusion_model: DiffusionModel,
                 token: Optional[CancellationToken] = None) -> InfluenceReport:
    """
    Select k seeds with `strategy`, then run one cascade from them to measure the influenced population.

    Parameters:
    ----------
    network : Network
        The network on which the influence maximization is performed.
    strategy : SeedStrategy
        Seed selection strategy.
    k : int
        The number of seeds to select.
    diffusion_model : DiffusionModel
        Model used for the final cascade.
    token : CancellationToken, optional
        Cancels selection; `Cancelled` propagates and no report is produced.

    Returns:
    -------
    InfluenceReport
        The seeds in selection order and the nodes activated by the final cascade, both given
        by their source ids (see `Network.labels`).
    """
    validate_seed_count(network, k)

    logger.info(f"Selecting {k} seeds with {strategy} on {network}")
    start = time.perf_counter()
    seeds = strategy.select(network, k, token)
    elapsed = time.perf_counter() - start
    logger.info(f"Selection finished in {elapsed:.2f}s")

    check(token)
    influenced, history = diffusion_model.run(network, seeds)
    logger.info(f"Final cascade reached {len(influenced)} nodes in {len(history) - 1} waves")

    # Report nodes by the ids the network was built from.
    return InfluenceReport(strategy=strategy.label or str(strategy), seeds=network.to_labels(seeds),
                           influenced=set(network.to_labels(influenced)), elapsed=elapsed)
