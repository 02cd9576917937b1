import numpy as np
import pandas as pd
import pytest

from gbm_sim.simulation.calibrate import calibrate_gbm
from gbm_sim.simulation.engine import MonteCarloGBM, run_monte_carlo
from gbm_sim.simulation.export import (
    ensemble_frame, format_calibration, format_path, format_paths, format_summary,
    write_csv,
)


@pytest.fixture
def small_result():
    return run_monte_carlo(n_paths=2, n_steps=3, initial_price=100.0, seed=1)


def test_csv_two_by_three(small_result, tmp_path):
    path = write_csv(small_result, str(tmp_path / "paths.csv"))
    with open(path) as f:
        lines = f.read().splitlines()

    assert len(lines) == 4
    assert lines[0] == "Time Step,Simulation 1,Simulation 2"
    for step, line in enumerate(lines[1:]):
        fields = line.split(",")
        assert len(fields) == 3
        assert fields[0] == str(step)


def test_csv_column_and_row_order(tmp_path):
    result = run_monte_carlo(n_paths=5, n_steps=8, initial_price=50.0, seed=3)
    path = write_csv(result, str(tmp_path / "paths.csv"))

    df = pd.read_csv(path)
    assert list(df.columns) == ["Time Step"] + [f"Simulation {i}" for i in range(1, 6)]
    assert df["Time Step"].tolist() == list(range(8))
    for i in range(5):
        np.testing.assert_allclose(df[f"Simulation {i + 1}"].to_numpy(), result.paths[i])


def test_write_csv_creates_parent_dirs(small_result, tmp_path):
    target = tmp_path / "nested" / "out" / "paths.csv"
    write_csv(small_result, str(target))
    assert target.exists()


def test_ensemble_frame_shape(small_result):
    df = ensemble_frame(small_result)
    assert df.shape == (3, 3)


def test_format_path_one_price_per_line():
    lines = format_path(np.array([1.5, 2.25, 3.0]))
    assert lines == ["1.5", "2.25", "3.0"]


def test_format_paths_rows(small_result):
    lines = format_paths(small_result)
    assert len(lines) == 2
    assert all(len(line.split(" ")) == 3 for line in lines)


def test_format_summary(small_result):
    stats = MonteCarloGBM.summary_stats(small_result)
    text = format_summary(stats)
    assert "Mean Final" in text
    assert "Std Dev" in text
    assert "P50" in text


def test_format_calibration_annualises():
    prices = [100.0, 101.0, 100.5, 102.0, 103.0]
    cal = calibrate_gbm(prices)
    drift_ann, vol_ann = cal.annualize(252)

    text = format_calibration(cal)
    assert "Calibration (5 prices)" in text
    assert f"{cal.drift:+.6f}" in text
    assert f"{drift_ann:+.1%}" in text
    assert f"{vol_ann:.1%}" in text
    assert "(252 steps/yr)" in text
    assert "103.0000" in text

    assert "(12 steps/yr)" in format_calibration(cal, trading_days=12)
