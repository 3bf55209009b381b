class InfluenceSeedsError(Exception):
    """Base class for all errors raised by influence_seeds."""


class GraphIOError(InfluenceSeedsError, IOError):
    """The graph source is missing or unreadable."""


class GraphFormatError(InfluenceSeedsError, ValueError):
    """
    The graph source is readable but malformed: bad header, non-numeric tokens,
    node ids out of range or an edge count that does not match the header.
    """

    def __init__(self, message: str, line_number: int = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class InvalidProbabilityError(GraphFormatError):
    """An edge probability lies outside [0, 1]."""


class InvalidSeedCountError(InfluenceSeedsError, ValueError):
    """The requested number of seeds is negative or exceeds the number of nodes."""


class Cancelled(InfluenceSeedsError):
    """A selection or estimation was cancelled or ran past its deadline."""
