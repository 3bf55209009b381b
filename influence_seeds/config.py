from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class RunConfig:
    graph_file: str
    k: int
    strategy: str = 'greedy' # greedy | celf | marginal_gain | degree | betweenness
    file_format: str = 'header' # header | triples
    num_samples: Optional[int] = None # cascades per estimate, None for the strategy default
    policy: str = 'mean' # mean | last | union
    seed: Optional[int] = None # seed of the process-wide random source
    timeout: Optional[float] = None # seconds
    log_level: str = 'WARNING'
    log_file: Optional[str] = None
    progress: bool = True

    def make_rng(self) -> np.random.Generator:
        """The single random source shared by every simulation in a run."""
        return np.random.default_rng(self.seed)
