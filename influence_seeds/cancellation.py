import logging
import time
from typing import Optional

from influence_seeds.errors import Cancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Cooperative cancellation for long-running selections.
    A token is cancelled either explicitly through `cancel()` or once its deadline has passed.
    Selectors and `DiffusionModel.estimate_influence` call `raise_if_cancelled()` between units of work.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Parameters:
        ----------
        timeout : float, optional
            Seconds from now after which the token counts as cancelled. None means no deadline.
        """
        if timeout is not None and timeout < 0:
            raise ValueError("Timeout must be non-negative.")
        self.timeout = timeout
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        if self._cancelled:
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def raise_if_cancelled(self):
        if self._cancelled:
            raise Cancelled("Operation was cancelled.")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            logger.warning(f"Deadline of {self.timeout}s exceeded, cancelling.")
            raise Cancelled(f"Operation exceeded its deadline of {self.timeout}s.")


def check(token: Optional[CancellationToken]):
    """Raise `Cancelled` if a token was given and has been cancelled."""
    if token is not None:
        token.raise_if_cancelled()
