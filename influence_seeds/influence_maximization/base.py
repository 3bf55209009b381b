from abc import ABC, abstractmethod
from typing import List, Optional

from influence_seeds.cancellation import CancellationToken
from influence_seeds.errors import InvalidSeedCountError
from influence_seeds.network import Network


def validate_seed_count(network: Network, k: int):
    """Raise `InvalidSeedCountError` unless 0 <= k <= number of nodes."""
    if isinstance(k, bool) or not isinstance(k, int):
        raise InvalidSeedCountError(f"Number of seeds must be an integer, got {k!r}.")
    if k < 0:
        raise InvalidSeedCountError(f"Number of seeds must be non-negative, got {k}.")
    if k > network.number_of_nodes():
        raise InvalidSeedCountError(
            f"Cannot select {k} seeds from a network with {network.number_of_nodes()} nodes."
        )


class SeedStrategy(ABC):
    """
    Base class for seed selection strategies.
    Subclasses implement `_select`; `select` validates k first.
    """

    name: str = ""
    label: str = ""

    def select(self, network: Network, k: int, token: Optional[CancellationToken] = None) -> List[int]:
        """
        Select k seed nodes.

        Parameters:
        ----------
        network : Network
            The network on which the influence maximization is performed.
        k : int
            The number of nodes to select.
        token : CancellationToken, optional
            Checked between units of work. A cancelled token raises `Cancelled`.

        Returns:
        -------
        List[int]
            Selected nodes in selection order, without duplicates.
        """
        validate_seed_count(network, k)
        return self._select(network, k, token)

    @abstractmethod
    def _select(self, network: Network, k: int, token: Optional[CancellationToken]) -> List[int]:
        pass

    def __call__(self, network: Network, k: int, token: Optional[CancellationToken] = None) -> List[int]:
        return self.select(network, k, token)

    def __str__(self):
        return self.__class__.__name__
