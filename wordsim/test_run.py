import numpy as np
import pytest

from wordsim.eval import format_neighbours, print_nearest, run_analogy_eval
from wordsim.index import SimilarityIndex
from wordsim.run import evaluate_expression, main, parse_expression
from wordsim.storage import save_text
from wordsim.visualize import pca2, plot_embeddings, plot_loss

# CLI, evaluation helpers and figures.


@pytest.fixture()
def usa_path(tmp_path):
    index = SimilarityIndex.build(
        ["united", "states", "america"], [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]]
    )
    return save_text(index, str(tmp_path / "usa.txt"))


def test_parse_expression():
    assert parse_expression("united+states") == [("add", "united"), ("add", "states")]
    assert parse_expression("King - man + Woman") == [
        ("add", "king"),
        ("subtract", "man"),
        ("add", "woman"),
    ]
    assert parse_expression("-a") == [("subtract", "a")]
    for bad in ("", "   ", "a+", "a++b"):
        with pytest.raises(ValueError):
            parse_expression(bad)


def test_evaluate_expression():
    index = SimilarityIndex.build(["united", "states"], [[1.0, 0.0], [0.0, 1.0]])
    vec, used = evaluate_expression(index, "united+states")
    np.testing.assert_array_equal(vec, [1.0, 1.0])
    assert used == ["united", "states"]


def test_format_neighbours():
    assert format_neighbours("a", [("b", 0.5), ("c", 0.25)]) == "  'a' -> b(0.500), c(0.250)"


def test_print_nearest_skips_unknown(capsys):
    index = SimilarityIndex.build(["a", "b"], [[1.0, 0.0], [1.0, 1.0]])
    lines = print_nearest(index, ["zzz", "a"], k=1)
    assert lines == ["  'a' -> b(0.707)"]
    assert "zzz" not in capsys.readouterr().out


def test_run_analogy_eval():
    index = SimilarityIndex.build(
        ["man", "king", "woman", "queen"],
        [[1, 0, 0], [1, 1, 0], [0, 0, 1], [0, 1, 1]],
    )
    assert run_analogy_eval(index) == (1, 1)
    assert run_analogy_eval(index, [("a", "b", "c", "d")]) == (0, 0)


def test_main_queries_loaded_table(usa_path, capsys):
    code = main(["--load", usa_path, "--query", "united", "--combine", "united+states", "--k", "1"])
    assert code == 0
    out = capsys.readouterr().out
    assert "'united' -> america(0.707)" in out
    assert "'united+states' -> america(1.000)" in out


def test_main_lowercases_query_words(usa_path, capsys):
    code = main(["--load", usa_path, "--query", "United", "--combine", "UNITED+States", "--k", "1"])
    assert code == 0
    out = capsys.readouterr().out
    assert "'united' -> america(0.707)" in out
    assert "'UNITED+States' -> america(1.000)" in out


def test_main_reports_unknown_label(usa_path, capsys):
    code = main(["--load", usa_path, "--combine", "canada+states"])
    assert code == 1
    assert "error:" in capsys.readouterr().err


def test_main_reports_missing_file(tmp_path, capsys):
    assert main(["--load", str(tmp_path / "missing.txt")]) == 1
    assert "error:" in capsys.readouterr().err


def test_main_trains_and_saves(tmp_path, capsys):
    out_path = tmp_path / "trained.txt"
    code = main(
        [
            "--text",
            "the cat sat on the mat. the dog sat on the log.",
            "--epochs",
            "2",
            "--dim",
            "8",
            "--quiet",
            "--save",
            str(out_path),
            "--query",
            "cat",
            "--k",
            "2",
        ]
    )
    assert code == 0
    assert out_path.read_text(encoding="utf-8").startswith("7 8\n")
    assert "'cat' ->" in capsys.readouterr().out


def test_pca2_shape():
    X = np.random.default_rng(0).standard_normal((10, 6))
    assert pca2(X).shape == (10, 2)
    assert pca2(X[:, :1]).shape == (10, 2)


def test_figures_written(tmp_path):
    index = SimilarityIndex.build(
        ["a", "b", "c"], [[1.0, 0.0, 0.5], [0.0, 1.0, 0.2], [1.0, 1.0, 0.0]]
    )
    history = [{"step": 1, "loss": 2.0, "lr": 0.1}, {"step": 2, "loss": 1.5, "lr": 0.05}]
    loss_path = plot_loss(history, str(tmp_path / "loss.png"))
    emb_path = plot_embeddings(index, str(tmp_path / "emb.png"))
    assert (tmp_path / "loss.png").stat().st_size > 0
    assert (tmp_path / "emb.png").stat().st_size > 0
    assert loss_path.endswith("loss.png") and emb_path.endswith("emb.png")
