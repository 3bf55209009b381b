from abc import ABC, abstractmethod
from typing import Iterable, Iterator, Tuple, List, Set, Optional
import numpy as np

from influence_seeds.cancellation import CancellationToken, check
from influence_seeds.network import Network

# How repeated trials from one seed set are folded into a single answer.
# "last": the final trial only, "mean": average activated-set size, "union": every node activated in any trial.
SET_POLICIES = ("last", "union")
SIZE_POLICIES = ("last", "mean", "union")

####### BASE CLASS FOR ALL CONTAGION MODELS #######

class DiffusionModel(ABC):
    """
    Abstract base class for all diffusion models.
    To create a new diffusion model, inherit from this class and implement the abstract methods.

    The model owns its random source. It is created once and never reseeded, so successive
    runs draw from one continuing stream.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None, **kwargs):
        """
        Initialize the diffusion model.

        Parameters:
        ----------
        rng : np.random.Generator, optional
            Random source used for every activation attempt. Takes precedence over `seed`.
        seed : int, optional
            Seed for a new `np.random.default_rng` when no `rng` is given.
        **kwargs : dict
            Additional parameters specific to the diffusion model.
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.params = kwargs
        if seed is not None and rng is None:
            self.params['seed'] = seed

    @abstractmethod
    def _spread(self, network: Network, recently_infected: Set[int], active_nodes: Set[int], immunized_nodes: Set[int]) -> Set[int]:
        """
        Spread the contagion from recently infected nodes to their neighbors.

        Parameters:
        ----------
        network : Network
            The network on which the diffusion model will be applied.
        recently_infected : Set[int]
            Nodes that were infected in the last time step.
        active_nodes : Set[int]
            Currently active (infected) nodes.
        immunized_nodes : Set[int]
            Immunized nodes that cannot be infected.

        Returns:
        -------
        Set[int]
            Newly infected nodes in this time step.
        """
        pass

    def run(self, network: Network, infected_init: Iterable[int], immunized_init: Optional[Iterable[int]] = None) -> Tuple[Set[int], List[Set[int]]]:
        """
        Runs a single simulation of the diffusion model on the given network to completion.

        Parameters:
        ----------
        network : Network
            The network on which the diffusion model will be applied.
        infected_init : Iterable[int]
            Initial infected nodes (the seed set).
        immunized_init : Iterable[int], optional
            Initial immunized nodes. Defaults to None.

        Returns:
        -------
        Tuple[Set[int], List[Set[int]]]
            Final infected nodes and a list of states at each time step.
        """
        active_nodes = set(infected_init)
        immunized_nodes = set(immunized_init) if immunized_init else set()

        num_nodes = network.number_of_nodes()
        invalid = [node for node in active_nodes if not (0 <= node < num_nodes)]
        if invalid:
            raise ValueError(f"Seed nodes {sorted(invalid)} are not in the network.")
        if not active_nodes.isdisjoint(immunized_nodes):
            raise ValueError("Active nodes and immunized nodes must be disjoint.")

        history = [active_nodes.copy()]

        recently_infected = active_nodes.copy()

        while recently_infected:
            newly_infected = self._spread(network, recently_infected, active_nodes, immunized_nodes)
            if not newly_infected:
                break

            active_nodes.update(newly_infected)
            history.append(active_nodes.copy())
            recently_infected = newly_infected

        return active_nodes, history

    def __call__(self, network: Network, infected_init: Iterable[int], immunized_init: Optional[Iterable[int]] = None) -> Tuple[Set[int], List[Set[int]]]:
        return self.run(network, infected_init, immunized_init)

    def _trials(self, network: Network, infected_init: Iterable[int], trials: int,
                immunized_init: Optional[Iterable[int]], token: Optional[CancellationToken]) -> Iterator[Set[int]]:
        if trials < 1:
            raise ValueError("Number of trials must be at least 1.")
        seeds = set(infected_init)
        for _ in range(trials):
            check(token)
            active_nodes, _ = self.run(network, seeds, immunized_init)
            yield active_nodes

    def simulate(self, network: Network, infected_init: Iterable[int], trials: int = 1, policy: str = "last",
                 immunized_init: Optional[Iterable[int]] = None,
                 token: Optional[CancellationToken] = None) -> Set[int]:
        """
        Runs `trials` cascades from the same seed set and returns an activated set.

        Parameters:
        ----------
        network : Network
            The network on which the diffusion model will be applied.
        infected_init : Iterable[int]
            The seed set.
        trials : int
            Number of cascades to run. Defaults to 1.
        policy : str
            "last" returns the activated set of the final trial, "union" returns every node
            activated in at least one trial. Defaults to "last".
        immunized_init : Iterable[int], optional
            Nodes that can never be activated.
        token : CancellationToken, optional
            Checked before every trial.

        Returns:
        -------
        Set[int]
            The activated set under the chosen policy.
        """
        if policy not in SET_POLICIES:
            raise ValueError(f"Unknown policy '{policy}'. Supported: {list(SET_POLICIES)}.")

        result: Set[int] = set()
        for active_nodes in self._trials(network, infected_init, trials, immunized_init, token):
            if policy == "last":
                result = active_nodes
            else:
                result |= active_nodes
        return result

    def estimate_influence(self, network: Network, infected_init: Iterable[int], trials: int = 1, policy: str = "mean",
                           immunized_init: Optional[Iterable[int]] = None,
                           token: Optional[CancellationToken] = None) -> float:
        """
        Estimates the influence of a seed set by running the contagion model `trials` times.

        The policy decides how trials are aggregated: "mean" averages the activated-set sizes,
        "last" reports the size of the final trial, "union" reports the size of the union of all trials.
        """
        if policy not in SIZE_POLICIES:
            raise ValueError(f"Unknown policy '{policy}'. Supported: {list(SIZE_POLICIES)}.")

        if policy == "mean":
            sizes = [len(active_nodes) for active_nodes in self._trials(network, infected_init, trials, immunized_init, token)]
            return sum(sizes) / trials
        return float(len(self.simulate(network, infected_init, trials, policy, immunized_init, token)))

    def __str__(self):
        return f"{self.__class__.__name__}({', '.join(f'{k}={v}' for k, v in self.params.items())})"


######## INDEPENDENT CASCADE #######

class IndependentCascade(DiffusionModel):
    """
    The Independent Cascade (IC) model is a commonly used model for diffusion in a network.
    Every newly activated node gets one chance to activate each inactive neighbor, succeeding
    with the probability stored on the connecting edge. A neighbor adjacent to several newly
    activated nodes is attempted once by each of them within the same wave.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        """
        Initialize the Independent Cascade model. Activation probabilities always come from
        the network's edges.

        Parameters:
        ----------
        rng : np.random.Generator, optional
            Random source for the activation draws.
        seed : int, optional
            Seed for a new generator when no `rng` is given.
        """
        super().__init__(rng=rng, seed=seed)

    def _spread(self, network: Network, recently_infected: Set[int], active_nodes: Set[int], immunized_nodes: Set[int]) -> Set[int]:
        """
        Spread the infection from recently infected nodes to their neighbors.
        One uniform draw in [0, 1) per attempt; the attempt succeeds when the draw is below the edge probability.
        """
        uninfectable = active_nodes.union(immunized_nodes)

        # sorted so a seeded stream yields the same outcome on every run
        attempts = [
            (v, p) for u in sorted(recently_infected)
            for v, p in network.get_neighbors(u)
            if v not in uninfectable
            ]

        if not attempts:
            return set()

        probabilities = np.array([p for _, p in attempts])
        infection_outcomes = self.rng.random(len(attempts)) < probabilities

        new_infected = {attempts[i][0] for i in range(len(attempts)) if infection_outcomes[i]}

        return new_infected
