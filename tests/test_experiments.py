import csv
import json

import pytest

from experiments import CSV_HEADER, run_directory, save_params_json, single_run

RING_COL = "c five node ring\np edge 5 5\ne 1 2\ne 2 3\ne 3 4\ne 4 5\ne 5 1\n"
K4_COL = "p edge 4 6\ne 1 2\ne 1 3\ne 1 4\ne 2 3\ne 2 4\ne 3 4\n"


def read_rows(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


def test_single_run(write_col):
    row = single_run(write_col("k4.col", K4_COL), {})
    graph, vertices, edges, budget, k_value, lower_bound, restarts, runtime, valid, error = row
    assert (graph, vertices, edges, budget, k_value) == ("k4.col", 4, 6, 4, 4)
    assert lower_bound == 4
    assert restarts == 0
    assert valid is True
    assert error == ""


def test_single_run_reports_load_error(write_col):
    row = single_run(write_col("bad.col", "e 1 2\n"), {})
    assert row[0] == "bad.col"
    assert "problem line" in row[-1]


def test_run_directory(tmp_path, write_col, capsys):
    write_col("b_ring.col", RING_COL)
    write_col("a_k4.col", K4_COL)
    write_col("c_bad.col", "p edge 2 1\ne 1 7\n")
    write_col("ignored.txt", K4_COL)
    out = tmp_path / "results" / "run.csv"

    rows = run_directory(str(tmp_path), str(out))

    assert [r[0] for r in rows] == ["a_k4.col", "b_ring.col", "c_bad.col"]
    csv_rows = read_rows(out)
    assert csv_rows[0] == CSV_HEADER
    assert csv_rows[1][:5] == ["a_k4.col", "4", "6", "4", "4"]
    assert csv_rows[2][4] == "3"
    assert csv_rows[2][8] == "True"
    assert csv_rows[3][-1] != ""

    params = json.loads((tmp_path / "results" / "run.json").read_text())
    assert params["solver"] == "WFC"
    assert params["num_graphs"] == 3

    printed = capsys.readouterr().out
    assert "Results for b_ring.col" in printed
    assert "Error coloring graph c_bad.col" in printed


def test_run_directory_in_parallel(tmp_path, write_col, capsys):
    write_col("ring.col", RING_COL)
    write_col("k4.col", K4_COL)
    rows = run_directory(str(tmp_path), str(tmp_path / "par.csv"), workers=2)
    assert [r[0] for r in rows] == ["k4.col", "ring.col"]
    assert all(r[8] is True for r in rows)
    assert len(read_rows(tmp_path / "par.csv")) == 3
    printed = capsys.readouterr().out
    assert "Processing file: k4.col" in printed
    assert "Processing file: ring.col" in printed


def test_save_params_json(tmp_path):
    path = save_params_json(str(tmp_path / "run.csv"),
                            {"max_restarts": None, "random_seed": 4}, 7)
    with open(path) as f:
        params = json.load(f)
    assert path.endswith("run.json")
    assert params["color_policy"] == "random(seed=4)"
    assert params["max_restarts"] is None
    assert params["restart_on_propagation_failure"] is False
    assert params["num_graphs"] == 7
