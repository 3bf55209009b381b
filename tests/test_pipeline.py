import pytest

from influence_seeds.cancellation import CancellationToken
from influence_seeds.diffusion import IndependentCascade
from influence_seeds.errors import Cancelled, InvalidSeedCountError
from influence_seeds.influence_maximization import BetweennessHeuristic, DegreeHeuristic, Greedy, MarginalGain
from influence_seeds.network import Network
from influence_seeds.pipeline import InfluenceReport, run_pipeline


@pytest.fixture
def path_graph():
    return Network(edges=[(0, 1, 1.0), (1, 2, 1.0), (2, 3, 1.0)], num_nodes=4)


@pytest.fixture
def model():
    return IndependentCascade(seed=0)


def test_degree_end_to_end(path_graph, model):
    report = run_pipeline(path_graph, DegreeHeuristic(), 1, model)
    assert report.seeds == [1]
    assert report.influenced == {0, 1, 2, 3}
    assert report.num_influenced == 4
    assert report.strategy == "Degree Centrality"
    assert report.elapsed >= 0


def test_betweenness_end_to_end(path_graph, model):
    report = run_pipeline(path_graph, BetweennessHeuristic(), 2, model)
    assert report.seeds == [1, 2]
    assert report.influenced == {0, 1, 2, 3}


def test_greedy_end_to_end(path_graph, model):
    report = run_pipeline(path_graph, Greedy(model, progress=False), 1, model)
    assert report.seeds == [0]
    assert report.influenced == {0, 1, 2, 3}


def test_marginal_gain_final_cascade(model):
    network = Network(edges=[(0, 1, 1.0), (2, 3, 0.0)])
    report = run_pipeline(network, MarginalGain(model, num_samples=2, progress=False), 2, model)
    assert report.seeds == [0, 2]
    assert report.influenced == {0, 1, 2}


def test_report_uses_source_ids(model):
    network = Network(edges=[(1, 2, 1.0), (2, 3, 1.0)])
    report = run_pipeline(network, DegreeHeuristic(), 1, model)
    assert report.seeds == [2]
    assert report.influenced == {1, 2, 3}
    assert report.format_lines()[2] == "Influenced Nodes: 1 2 3"


def test_zero_seeds(path_graph, model):
    report = run_pipeline(path_graph, DegreeHeuristic(), 0, model)
    assert report.seeds == []
    assert report.influenced == set()


def test_invalid_seed_count(path_graph, model):
    with pytest.raises(InvalidSeedCountError):
        run_pipeline(path_graph, DegreeHeuristic(), 5, model)


def test_cancelled(path_graph, model):
    token = CancellationToken()
    token.cancel()
    with pytest.raises(Cancelled):
        run_pipeline(path_graph, Greedy(model, progress=False), 1, model, token)


def test_format_lines():
    report = InfluenceReport(strategy="Greedy", seeds=[3, 1], influenced={4, 1, 3})
    assert report.format_lines() == [
        "Selected Seed Nodes (Greedy): 3 1",
        "Total Nodes Influenced: 3",
        "Influenced Nodes: 1 3 4",
    ]
