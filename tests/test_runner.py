"""Tests for the simulation CLI."""
import sys

import numpy as np
import pandas as pd
import pytest

from gbm_sim.simulation import runner
from tests.conftest import generate_synthetic_prices, write_price_csv


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    monkeypatch.setattr(runner, "setup_logging", lambda *a, **k: None)


def test_run_prints_summary(capsys):
    stats = runner.run(["--n-paths", "50", "--n-steps", "20", "--seed", "1"])
    out = capsys.readouterr().out
    assert "GBM MONTE CARLO SIMULATION" in out
    assert "Mean Final" in out
    assert stats["n_paths"] == 50
    assert stats["n_steps"] == 20
    assert stats["initial_price"] == 140.0


def test_run_writes_csv(tmp_path):
    target = tmp_path / "paths.csv"
    runner.run(["--n-paths", "4", "--n-steps", "6", "--csv", str(target)])
    df = pd.read_csv(target)
    assert df.shape == (6, 5)


def test_run_print_paths(capsys):
    runner.run(["--n-paths", "3", "--n-steps", "4", "--print-paths"])
    out = capsys.readouterr().out.splitlines()
    rows = [line for line in out if line and line[0].isdigit()]
    assert len(rows) == 3
    assert all(len(r.split(" ")) == 4 for r in rows)


def test_run_single(capsys):
    path = runner.run(["--single", "--n-steps", "12", "--initial-price", "140"])
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "GBM prices:"
    assert len(out) == 13
    assert path[0] == 140.0


def test_run_from_prices_csv(tmp_path):
    prices = generate_synthetic_prices(days=90, base_price=250.0, seed=5)
    csv_path = write_price_csv(tmp_path / "hist.csv", prices)
    stats = runner.run([
        "--prices-csv", str(csv_path), "--n-paths", "30", "--n-steps", "10",
    ])
    assert stats["source"] == "empirical"
    assert stats["initial_price"] == pytest.approx(prices[-1])


def test_run_saves_plot(tmp_path):
    target = tmp_path / "fan.png"
    runner.run(["--n-paths", "30", "--n-steps", "15", "--plot", str(target)])
    assert target.exists()


def test_run_uniform_shock_is_reproducible():
    a = runner.run(["--n-paths", "10", "--n-steps", "8", "--shock", "uniform", "--seed", "3"])
    b = runner.run(["--n-paths", "10", "--n-steps", "8", "--shock", "uniform", "--seed", "3"])
    assert a["mean_final"] == b["mean_final"]
    np.testing.assert_array_equal(a["percentile_paths"][50], b["percentile_paths"][50])


@pytest.mark.parametrize("argv", [
    ["--n-steps", "1"],
    ["--n-paths", "0"],
    ["--initial-price", "-5"],
    ["--prices-csv", "does-not-exist.csv"],
])
def test_main_exits_on_bad_input(monkeypatch, argv):
    monkeypatch.setattr(sys, "argv", ["gbm-sim"] + argv)
    with pytest.raises(SystemExit) as exc:
        runner.main()
    assert exc.value.code == 2


def test_run_reports_annualised_calibration(tmp_path, capsys):
    prices = generate_synthetic_prices(days=60, seed=2)
    csv_path = write_price_csv(tmp_path / "hist.csv", prices)
    runner.run([
        "--prices-csv", str(csv_path), "--n-paths", "5", "--n-steps", "5",
        "--trading-days", "365",
    ])
    out = capsys.readouterr().out
    assert "Log Drift (ann)" in out
    assert "365 steps/yr" in out


def test_run_single_from_prices_csv_uses_steps_and_start(tmp_path, capsys):
    prices = generate_synthetic_prices(days=90, base_price=250.0, seed=5)
    csv_path = write_price_csv(tmp_path / "hist.csv", prices)

    path = runner.run([
        "--single", "--prices-csv", str(csv_path),
        "--n-steps", "10", "--initial-price", "999",
    ])
    assert len(path) == 10
    assert path[0] == 999.0

    path = runner.run(["--single", "--prices-csv", str(csv_path), "--n-steps", "7"])
    assert len(path) == 7
    assert path[0] == pytest.approx(prices[-1])


@pytest.mark.parametrize("extra", [
    ["--csv", "out.csv"],
    ["--plot", "fan.png"],
    ["--show"],
])
def test_single_rejects_ensemble_outputs(monkeypatch, tmp_path, extra):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["gbm-sim", "--single", "--n-steps", "5"] + extra)
    with pytest.raises(SystemExit) as exc:
        runner.main()
    assert exc.value.code == 2
    assert not (tmp_path / "out.csv").exists()


@pytest.mark.parametrize("content", ["", "a,b\n1,2\n3,4,5,6\n"])
def test_main_exits_on_unreadable_prices_csv(monkeypatch, tmp_path, content):
    bad = tmp_path / "bad.csv"
    bad.write_text(content)
    monkeypatch.setattr(sys, "argv", ["gbm-sim", "--prices-csv", str(bad)])
    with pytest.raises(SystemExit) as exc:
        runner.main()
    assert exc.value.code == 2


def test_run_plot_and_show(monkeypatch, tmp_path):
    from gbm_sim.simulation import plotting

    shown = []
    monkeypatch.setattr(plotting.plt, "show", lambda *a, **k: shown.append(True))
    target = tmp_path / "fan.png"
    runner.run(["--n-paths", "10", "--n-steps", "6", "--plot", str(target), "--show"])
    assert target.exists()
    assert shown == [True]
