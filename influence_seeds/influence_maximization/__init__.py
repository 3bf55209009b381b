"""Seed selection strategies for influence maximization."""

from typing import Callable, Dict, Optional

from influence_seeds.diffusion import DiffusionModel
from .base import SeedStrategy, validate_seed_count
from .celf import CELF
from .centrality import BetweennessHeuristic, DegreeHeuristic
from .greedy import Greedy
from .marginal_gain import MarginalGain

# Factories take (diffusion_model, num_samples, policy, progress); None means the strategy default.
STRATEGIES: Dict[str, Callable[..., SeedStrategy]] = {
    "greedy": lambda model, num_samples, policy, progress: Greedy(
        model, num_samples=1 if num_samples is None else num_samples, policy=policy, progress=progress),
    "celf": lambda model, num_samples, policy, progress: CELF(
        model, num_samples=1 if num_samples is None else num_samples, policy=policy, progress=progress),
    "marginal_gain": lambda model, num_samples, policy, progress: MarginalGain(
        model, num_samples=100 if num_samples is None else num_samples, progress=progress),
    "degree": lambda model, num_samples, policy, progress: DegreeHeuristic(),
    "betweenness": lambda model, num_samples, policy, progress: BetweennessHeuristic(),
}


def build_strategy(name: str, diffusion_model: DiffusionModel, num_samples: Optional[int] = None,
                   policy: str = "mean", progress: bool = True) -> SeedStrategy:
    """Instantiate a registered strategy by name."""
    if name not in STRATEGIES:
        raise ValueError(f"Unknown strategy '{name}'. Available: {list(STRATEGIES.keys())}")
    return STRATEGIES[name](diffusion_model, num_samples, policy, progress)


__all__ = [
    "SeedStrategy", "validate_seed_count", "Greedy", "CELF", "MarginalGain",
    "DegreeHeuristic", "BetweennessHeuristic", "STRATEGIES", "build_strategy",
]
