import math
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple, Type

import networkx as nx
import numpy as np

from influence_seeds.errors import GraphFormatError, GraphIOError, InvalidProbabilityError

logger = logging.getLogger(__name__)

Edge = Tuple[int, int, float]

BACKEND_REGISTRY: Dict[str, Type['_NetworkBackend']] = {}

def register_backend(name: str):
    """
    A decorator to register a backend class in the BACKEND_REGISTRY.
    """
    def decorator(cls: Type['_NetworkBackend']) -> Type['_NetworkBackend']:
        BACKEND_REGISTRY[name] = cls
        logger.debug(f"Registered backend: '{name}'")
        return cls
    return decorator


######## PARSING ########

def check_probability(p: float, u: int, v: int, line_number: Optional[int] = None) -> float:
    if not math.isfinite(p) or not (0 <= p <= 1):
        raise InvalidProbabilityError(
            f"Invalid probability {p} for edge ({u}, {v}). Probabilities must be in the range [0, 1].",
            line_number,
        )
    return p


def _parse_record(tokens: List[str], line_number: int) -> Edge:
    """Parse one `<u> <v> <p>` record."""
    if len(tokens) != 3:
        raise GraphFormatError(f"expected '<u> <v> <p>', got {len(tokens)} token(s)", line_number)
    try:
        u, v = int(tokens[0]), int(tokens[1])
        p = float(tokens[2])
    except ValueError as e:
        raise GraphFormatError(f"malformed edge record {' '.join(tokens)!r}", line_number) from e
    if u < 0 or v < 0:
        raise GraphFormatError(f"negative node id in edge ({u}, {v})", line_number)
    check_probability(p, u, v, line_number)
    return u, v, p


def _tokenized_lines(lines: Iterable[str]):
    """Yields (line_number, tokens), skipping blank lines and '#' comments."""
    for line_number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        yield line_number, stripped.split()


def parse_header_format(lines: Iterable[str]) -> Tuple[int, List[Edge]]:
    """
    Parses the `<numNodes> <numEdges>` header followed by exactly numEdges `<u> <v> <p>` records.

    Parameters:
    ----------
    lines : Iterable[str]
        Lines of the graph definition.

    Returns:
    -------
    Tuple[int, List[Edge]]
        The declared number of nodes and the parsed edge records.
    """
    records = _tokenized_lines(lines)
    header = next(records, None)
    if header is None:
        raise GraphFormatError("missing '<numNodes> <numEdges>' header")

    line_number, tokens = header
    if len(tokens) != 2:
        raise GraphFormatError(f"expected '<numNodes> <numEdges>' header, got {len(tokens)} token(s)", line_number)
    try:
        num_nodes, num_edges = int(tokens[0]), int(tokens[1])
    except ValueError as e:
        raise GraphFormatError(f"malformed header {' '.join(tokens)!r}", line_number) from e
    if num_nodes < 0 or num_edges < 0:
        raise GraphFormatError("node and edge counts must be non-negative", line_number)

    edges = []
    for line_number, tokens in records:
        if len(edges) == num_edges:
            raise GraphFormatError(f"more edge records than the {num_edges} declared", line_number)
        u, v, p = _parse_record(tokens, line_number)
        if u >= num_nodes or v >= num_nodes:
            raise GraphFormatError(f"edge ({u}, {v}) references a node outside [0, {num_nodes})", line_number)
        edges.append((u, v, p))

    if len(edges) != num_edges:
        raise GraphFormatError(f"header declares {num_edges} edges but {len(edges)} were found")

    return num_nodes, edges


def parse_triples_format(lines: Iterable[str]) -> Tuple[Optional[int], List[Edge]]:
    """
    Parses a headerless stream of `<u> <v> <p>` records.
    No node count is declared: the node set is the ids that appear in the records, so the
    count is returned as None.
    """
    edges = [_parse_record(tokens, line_number) for line_number, tokens in _tokenized_lines(lines)]
    return None, edges


PARSERS = {
    "header": parse_header_format,
    "triples": parse_triples_format,
}


######## ABSTRACT BASE CLASS ########

class _NetworkBackend(ABC):
    """Abstract base class defining the common interface for all backends."""
    @abstractmethod
    def from_file(self, file_path: str, file_format: str):
        pass

    @abstractmethod
    def from_edges(self, edges: Iterable[Edge], num_nodes: Optional[int]):
        pass

    @abstractmethod
    def from_graph(self, graph):
        pass

    @property
    @abstractmethod
    def graph(self):
        pass

    @abstractmethod
    def nodes(self) -> List[int]:
        pass

    @abstractmethod
    def edges(self) -> List[Tuple[int, int]]:
        pass

    @abstractmethod
    def labels(self) -> List[int]:
        pass

    @abstractmethod
    def to_labels(self, nodes: Iterable[int]) -> List[int]:
        pass

    @abstractmethod
    def get_degree(self, node: int) -> int:
        pass

    @abstractmethod
    def get_neighbors(self, node: int) -> List[Tuple[int, float]]:
        pass

    @abstractmethod
    def number_of_nodes(self) -> int:
        pass

    @abstractmethod
    def number_of_edges(self) -> int:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    @abstractmethod
    def __str__(self) -> str:
        pass


# --- Backend Implementations ---

@register_backend("networkx")
class _NetworkXBackend(_NetworkBackend):
    """
    Stores the probabilistic graph as an undirected networkx MultiGraph with the activation
    probability in the 'p' edge attribute. Every record is mirrored in the neighbor cache,
    so parallel records are kept and counted as read.
    """

    def __init__(self):
        self._neighbors_cache = []
        self._labels = []
        self._num_nodes = 0
        self._num_edges = 0
        self._graph = nx.MultiGraph()

    def from_file(self, file_path: str, file_format: str = "header"):
        """
        Loads a graph from a whitespace-delimited edge file.

        Parameters:
        ----------
        file_path : str
            Path to the graph file.
        file_format : str, optional
            "header" for a `<numNodes> <numEdges>` header followed by edge records,
            "triples" for a headerless stream of `<u> <v> <p>` records. Defaults to "header".
        """
        if file_format not in PARSERS:
            raise ValueError(f"Unknown file format '{file_format}'. Available: {list(PARSERS.keys())}")

        logger.info(f"Loading graph from {file_path} ({file_format} format)...")
        try:
            with open(file_path, "r") as f:
                num_nodes, edges = PARSERS[file_format](f)
        except (OSError, UnicodeDecodeError) as e:
            raise GraphIOError(f"Error loading file {file_path}: {e}") from e

        self.from_edges(edges, num_nodes)

    def from_edges(self, edges: Iterable[Edge], num_nodes: Optional[int] = None):
        """
        Builds the graph from (u, v, p) records.

        Parameters:
        ----------
        edges : Iterable[Edge]
            Edge records, kept in the order given.
        num_nodes : int, optional
            Declared node count; ids must lie in [0, num_nodes). When None the node set is the
            ids that appear in the records, relabeled to the dense range in sorted order with
            the original id kept as the node label.
        """
        edges = list(edges)

        graph = nx.MultiGraph()
        if num_nodes is not None:
            graph.add_nodes_from(range(num_nodes))
        for u, v, p in edges:
            if num_nodes is not None and not (0 <= u < num_nodes and 0 <= v < num_nodes):
                raise GraphFormatError(f"edge ({u}, {v}) references a node outside [0, {num_nodes})")
            check_probability(p, u, v)
            graph.add_edge(u, v, p=float(p))

        graph = nx.relabel.convert_node_labels_to_integers(graph, ordering="sorted", label_attribute="label")
        labels = [graph.nodes[node]["label"] for node in range(graph.number_of_nodes())]
        index = {label: node for node, label in enumerate(labels)}

        self._graph = graph
        self._labels = labels
        self._num_nodes = len(labels)
        self._num_edges = len(edges)
        self._cache_neighbors([(index[u], index[v], p) for u, v, p in edges])

    def from_graph(self, graph):
        """
        Wraps an existing undirected networkx graph whose edges carry a 'p' attribute.
        Node labels are converted to the dense range [0, n) in sorted order; the original
        labels are available through `labels()`.
        """
        if graph.is_directed():
            raise ValueError("Only undirected graphs are supported.")
        graph = nx.relabel.convert_node_labels_to_integers(graph, ordering="sorted", label_attribute="label")
        edges = []
        for u, v, data in graph.edges(data=True):
            if "p" not in data:
                raise GraphFormatError(f"edge ({u}, {v}) has no 'p' attribute")
            edges.append((u, v, data["p"]))
        self.from_edges(edges, graph.number_of_nodes())
        self._labels = [graph.nodes[node]["label"] for node in range(graph.number_of_nodes())]
        for node, label in enumerate(self._labels):
            self._graph.nodes[node]["label"] = label

    def _cache_neighbors(self, edges: List[Edge]):
        """
        Caches the (neighbor, probability) lists of each node for quick access.
        This is useful when we repeatedly need neighbors for contagion spreads.
        """
        logger.debug("Caching neighbors for all nodes...")
        neighbors = np.empty(self._num_nodes, dtype=object)
        for node in range(self._num_nodes):
            neighbors[node] = []
        for u, v, p in edges:
            neighbors[u].append((v, p))
            neighbors[v].append((u, p))
        self._neighbors_cache = neighbors

    @property
    def graph(self):
        return self._graph

    def nodes(self) -> List[int]:
        """ Returns a list of nodes (int) """
        return list(range(self._num_nodes))

    def edges(self) -> List[Tuple[int, int]]:
        """ Returns the distinct undirected edges as tuples (u, v) """
        return list(nx.Graph(self._graph).edges())

    def labels(self) -> List[int]:
        """ Returns the original id of every node, indexed by dense node id """
        return list(self._labels)

    def to_labels(self, nodes: Iterable[int]) -> List[int]:
        """Maps dense node ids back to the ids used in the source, keeping the order given."""
        return [self._labels[node] for node in nodes]

    def get_degree(self, node: int) -> int:
        return len(self._neighbors_cache[node])

    def get_neighbors(self, node: int) -> List[Tuple[int, float]]:
        return self._neighbors_cache[node]

    def number_of_nodes(self) -> int:
        return self._num_nodes

    def number_of_edges(self) -> int:
        return self._num_edges

    def __len__(self) -> int:
        return self._num_nodes

    def __str__(self) -> str:
        return (f"Network(Nodes={self.number_of_nodes()}, Edges={self.number_of_edges()}, "
                f"Format=NetworkX)")


######## UNIFIED WRAPPER ########

class Network:
    """
    A read-only probabilistic network that proxies calls to a selected backend.
    Every edge (u, v, p) is stored in both directions, giving undirected semantics.
    """
    _backend: _NetworkBackend

    def __init__(self, edges: Optional[Iterable[Edge]] = None, num_nodes: Optional[int] = None,
                 graph=None, file_path: str = None, file_format: str = "header",
                 backend: str = "networkx"):
        """
        Initializes the Network object using the selected backend.

        Args:
            edges: (u, v, p) records to build the network from.
            num_nodes: Number of nodes when building from edges. When omitted the nodes are the
                ids that appear in `edges`, relabeled to [0, n) in sorted order (see `labels()`).
            graph: An existing undirected networkx graph with a 'p' attribute on every edge.
            file_path: Path to a graph file to load.
            file_format: "header" or "triples", see `_NetworkXBackend.from_file`.
            backend: The backend to use. Only "networkx" is available.
        """
        if backend not in BACKEND_REGISTRY:
            raise ValueError(f"Unknown backend '{backend}'. Available: {list(BACKEND_REGISTRY.keys())}")

        self._backend = BACKEND_REGISTRY[backend]()
        logger.debug(f"Using '{backend}' backend.")

        if file_path:
            self._backend.from_file(file_path, file_format)
        elif graph is not None:
            self._backend.from_graph(graph)
        else:
            self._backend.from_edges(edges or [], num_nodes)

    def __getattr__(self, name: str):
        """
        Dynamically delegates attribute and method calls to the backend instance.
        """
        if name == "_backend":
            raise AttributeError(name)
        if name.startswith("from_"):
            raise AttributeError(f"'{type(self).__name__}' is read-only after construction.")
        try:
            return getattr(self._backend, name)
        except AttributeError as e:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'. It was also not found "
                f"on the '{type(self._backend).__name__}' backend."
            ) from e

    def __len__(self) -> int:
        """Returns the number of nodes in the graph."""
        return len(self._backend)

    def __str__(self) -> str:
        """Returns a string representation of the graph from its backend."""
        return str(self._backend)


def load_network(file_path: str, file_format: str = "header") -> Network:
    """Load a Network from a graph file. See `_NetworkXBackend.from_file`."""
    network = Network(file_path=file_path, file_format=file_format)
    logger.info(f"Loaded {network}")
    return network
