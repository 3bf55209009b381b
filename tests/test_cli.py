import pytest

from influence_seeds.cli import EXIT_CANCELLED, EXIT_INPUT_ERROR, EXIT_IO_ERROR, EXIT_OK, main, parse_arguments
from influence_seeds.config import RunConfig


@pytest.fixture
def graph_file(tmp_path):
    path = tmp_path / "graph.txt"
    path.write_text("4 3\n0 1 1.0\n1 2 1.0\n2 3 1.0\n")
    return path


@pytest.fixture
def answers(monkeypatch):
    """Feed canned answers to the interactive prompts."""
    def feed(*values):
        replies = iter(values)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))
    return feed


def test_degree(graph_file, capsys):
    code = main([str(graph_file), "-k", "1", "-s", "degree", "--no-progress"])
    out = capsys.readouterr().out.splitlines()
    assert code == EXIT_OK
    assert out == [
        "Selected Seed Nodes (Degree Centrality): 1",
        "Total Nodes Influenced: 4",
        "Influenced Nodes: 0 1 2 3",
    ]


def test_greedy_with_seed(graph_file, capsys):
    code = main([str(graph_file), "-k", "2", "--seed", "1", "--samples", "3", "--no-progress"])
    out = capsys.readouterr().out.splitlines()
    assert code == EXIT_OK
    assert out[0] == "Selected Seed Nodes (Greedy): 0 1"
    assert out[1] == "Total Nodes Influenced: 4"


def test_triples_format(tmp_path, capsys):
    path = tmp_path / "graph.txt"
    path.write_text("0 1 1.0\n1 2 0.0\n")
    code = main([str(path), "-k", "1", "-s", "betweenness", "--format", "triples"])
    out = capsys.readouterr().out.splitlines()
    assert code == EXIT_OK
    assert out == [
        "Selected Seed Nodes (Betweenness Centrality): 1",
        "Total Nodes Influenced: 2",
        "Influenced Nodes: 0 1",
    ]


def test_prompts(graph_file, answers, capsys):
    answers(str(graph_file), "2")
    code = main(["-s", "degree"])
    out = capsys.readouterr().out.splitlines()
    assert code == EXIT_OK
    assert out[0] == "Selected Seed Nodes (Degree Centrality): 1 2"


def test_prompt_for_k_only(graph_file, answers, capsys):
    answers("1")
    assert main([str(graph_file), "-s", "betweenness"]) == EXIT_OK


def test_non_integer_k(graph_file, answers, capsys):
    answers("many")
    assert main([str(graph_file)]) == EXIT_INPUT_ERROR
    assert "integer" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    code = main([str(tmp_path / "missing.txt"), "-k", "1"])
    assert code == EXIT_IO_ERROR
    assert "Error" in capsys.readouterr().err


def test_no_file_given(answers, capsys):
    answers("", "1")
    assert main([]) == EXIT_IO_ERROR


def test_too_many_seeds(graph_file, capsys):
    assert main([str(graph_file), "-k", "5", "-s", "degree"]) == EXIT_INPUT_ERROR
    assert "Cannot select 5 seeds" in capsys.readouterr().err


def test_malformed_file(tmp_path, capsys):
    path = tmp_path / "graph.txt"
    path.write_text("4 3\n0 1 1.0\n")
    assert main([str(path), "-k", "1"]) == EXIT_INPUT_ERROR


def test_invalid_probability(tmp_path, capsys):
    path = tmp_path / "graph.txt"
    path.write_text("2 1\n0 1 2.0\n")
    assert main([str(path), "-k", "1"]) == EXIT_INPUT_ERROR
    assert "Invalid probability" in capsys.readouterr().err


def test_timeout(graph_file, capsys):
    code = main([str(graph_file), "-k", "1", "--timeout", "0", "--no-progress"])
    assert code == EXIT_CANCELLED
    assert "Cancelled" in capsys.readouterr().err


def test_parse_arguments_defaults():
    args = parse_arguments(["graph.txt"])
    assert args.graph_file == "graph.txt"
    assert args.k is None
    assert args.strategy == "greedy"
    assert args.file_format == "header"
    assert args.policy == "mean"
    assert args.progress is True


def test_unknown_strategy():
    with pytest.raises(SystemExit):
        parse_arguments(["graph.txt", "-s", "random"])


def test_config_rng_is_reproducible():
    first = RunConfig(graph_file="graph.txt", k=1, seed=5).make_rng()
    second = RunConfig(graph_file="graph.txt", k=1, seed=5).make_rng()
    assert first.random(4).tolist() == second.random(4).tolist()


def test_config_defaults_match_cli():
    args = parse_arguments(["graph.txt", "-k", "1"])
    config = RunConfig(graph_file="graph.txt", k=1)
    assert config.log_level == args.log_level == "WARNING"
    assert config.policy == args.policy
    assert config.strategy == args.strategy


def test_policy_help_names_affected_strategies(capsys):
    with pytest.raises(SystemExit):
        parse_arguments(["--help"])
    help_text = " ".join(capsys.readouterr().out.split())
    assert "greedy and celf" in help_text
    assert "marginal_gain always takes the union" in help_text


def test_zero_samples(graph_file, capsys):
    assert main([str(graph_file), "-k", "1", "--samples", "0", "--no-progress"]) == EXIT_INPUT_ERROR
    assert "num_samples" in capsys.readouterr().err


def test_one_indexed_triples(tmp_path, capsys):
    path = tmp_path / "graph.txt"
    path.write_text("1 2 1.0\n2 3 1.0\n")
    code = main([str(path), "-k", "1", "-s", "degree", "--format", "triples"])
    out = capsys.readouterr().out.splitlines()
    assert code == EXIT_OK
    assert out == [
        "Selected Seed Nodes (Degree Centrality): 2",
        "Total Nodes Influenced: 3",
        "Influenced Nodes: 1 2 3",
    ]


def test_one_indexed_triples_too_many_seeds(tmp_path, capsys):
    path = tmp_path / "graph.txt"
    path.write_text("1 2 1.0\n2 3 1.0\n")
    assert main([str(path), "-k", "4", "-s", "degree", "--format", "triples"]) == EXIT_INPUT_ERROR
    assert "Cannot select 4 seeds" in capsys.readouterr().err
