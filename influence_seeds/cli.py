import argparse
import logging
import sys
from typing import List, Optional

from influence_seeds.cancellation import CancellationToken
from influence_seeds.config import RunConfig
from influence_seeds.diffusion import IndependentCascade, SIZE_POLICIES
from influence_seeds.errors import Cancelled, GraphIOError, InfluenceSeedsError, InvalidSeedCountError
from influence_seeds.influence_maximization import STRATEGIES, build_strategy
from influence_seeds.log import init_logger
from influence_seeds.network import PARSERS, load_network
from influence_seeds.pipeline import run_pipeline

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_INPUT_ERROR = 2
EXIT_CANCELLED = 3


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="influence-seeds",
        description="Select k seed nodes that maximize Independent Cascade spread on a probabilistic graph.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument("graph_file", nargs="?", default=None,
                        help="Graph file. Prompted for when omitted.")
    parser.add_argument("-k", "--seeds", type=int, default=None, dest="k",
                        help="Number of seed nodes to select. Prompted for when omitted.")
    parser.add_argument("-s", "--strategy", choices=list(STRATEGIES.keys()), default="greedy",
                        help="Seed selection strategy.")
    parser.add_argument("--format", choices=list(PARSERS.keys()), default="header", dest="file_format",
                        help="'header': '<numNodes> <numEdges>' then edge lines, 'triples': edge lines only.")
    parser.add_argument("--samples", type=int, default=None, dest="num_samples",
                        help="Cascades per influence estimate (greedy/celf default 1, marginal_gain default 100).")
    parser.add_argument("--policy", choices=list(SIZE_POLICIES), default="mean",
                        help="How greedy and celf fold repeated cascades into one estimate. "
                             "marginal_gain always takes the union, degree and betweenness run no cascades.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random source.")
    parser.add_argument("--timeout", type=float, default=None, help="Give up after this many seconds.")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level.")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file.")
    parser.add_argument("--no-progress", action="store_false", dest="progress",
                        help="Disable progress bars.")
    return parser.parse_args(argv)


def _prompt(message: str) -> str:
    try:
        return input(message).strip()
    except EOFError:
        return ""


def build_config(args: argparse.Namespace) -> RunConfig:
    """Fill in missing filename and k interactively."""
    graph_file = args.graph_file or _prompt("Enter the graph file name: ")
    k = args.k
    if k is None:
        answer = _prompt("Enter the number of seed nodes: ")
        try:
            k = int(answer)
        except ValueError:
            raise InvalidSeedCountError(f"Number of seed nodes must be an integer, got {answer!r}.") from None

    return RunConfig(
        graph_file=graph_file,
        k=k,
        strategy=args.strategy,
        file_format=args.file_format,
        num_samples=args.num_samples,
        policy=args.policy,
        seed=args.seed,
        timeout=args.timeout,
        log_level=args.log_level,
        log_file=args.log_file,
        progress=args.progress,
    )


def run(config: RunConfig) -> int:
    logger.info(f"Running with {config}")
    network = load_network(config.graph_file, config.file_format)
    diffusion_model = IndependentCascade(rng=config.make_rng())
    strategy = build_strategy(config.strategy, diffusion_model, config.num_samples, config.policy, config.progress)
    token = CancellationToken(config.timeout)

    report = run_pipeline(network, strategy, config.k, diffusion_model, token)
    for line in report.format_lines():
        print(line)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    init_logger(args.log_level, args.log_file)

    try:
        config = build_config(args)
        if not config.graph_file:
            raise GraphIOError("No graph file given.")
        return run(config)
    except GraphIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR
    except Cancelled as e:
        print(f"Cancelled: {e}", file=sys.stderr)
        return EXIT_CANCELLED
    except (InfluenceSeedsError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
