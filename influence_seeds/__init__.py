"""Top-level package for influence maximization on probabilistic networks."""

from .network import Network, load_network
from .diffusion import DiffusionModel, IndependentCascade
from .centrality import betweenness_centrality, degree_centrality, top_k
from .cancellation import CancellationToken
from .errors import (
    Cancelled,
    GraphFormatError,
    GraphIOError,
    InfluenceSeedsError,
    InvalidProbabilityError,
    InvalidSeedCountError,
)
from .pipeline import InfluenceReport, run_pipeline

__all__ = [
    "Network", "load_network", "DiffusionModel", "IndependentCascade",
    "betweenness_centrality", "degree_centrality", "top_k", "CancellationToken",
    "Cancelled", "GraphFormatError", "GraphIOError", "InfluenceSeedsError",
    "InvalidProbabilityError", "InvalidSeedCountError", "InfluenceReport", "run_pipeline",
]

__version__ = "0.1"
