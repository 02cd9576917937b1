"""
Geometric Brownian Motion Monte Carlo engine.

Recurrence on a path of n points, dt = 1 / (n - 1):
    S[i] = S[i-1] * exp(drift - 0.5 * sigma^2 * dt + sigma * sqrt(dt) * Z[i])

drift and sigma are per-step estimates from a calibration series. Z is
standard normal by default; shock="uniform" draws Z ~ U[0, 1) instead,
for the uniform-shock variant of the model.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from gbm_sim.exceptions import ConfigError
from gbm_sim.metrics.statistics import summarize
from gbm_sim.simulation.calibrate import calibrate_gbm, estimate_parameters
from gbm_sim.simulation.config import (
    check_initial_price,
    check_n_paths,
    check_n_steps,
    check_seed_volatility,
    check_shock,
)
from gbm_sim.simulation.data import generate_prices

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    paths: np.ndarray           # (n_paths, n_steps), column 0 = initial price
    time_steps: np.ndarray      # (n_steps,)
    drifts: np.ndarray          # (n_paths,) per-trial calibrated drift
    volatilities: np.ndarray    # (n_paths,) per-trial calibrated volatility
    initial_price: float
    n_paths: int
    n_steps: int
    shock: str
    source: str                 # "synthetic" or "empirical"


def _draw_shocks(rng: np.random.Generator, size: int, shock: str) -> np.ndarray:
    if shock == "normal":
        return rng.standard_normal(size)
    if shock == "uniform":
        return rng.random(size)
    raise ConfigError(f"unknown shock distribution {shock!r}")


def simulate_path(
    initial_price: float,
    n_steps: int,
    drift: float,
    volatility: float,
    rng: np.random.Generator | None = None,
    shock: str = "normal",
) -> np.ndarray:
    """One GBM path of length n_steps starting at initial_price."""
    check_initial_price(initial_price)
    check_n_steps(n_steps)
    if volatility < 0:
        raise ConfigError(f"volatility must be non-negative, got {volatility}")
    if rng is None:
        rng = np.random.default_rng()

    dt = 1.0 / (n_steps - 1)
    z = _draw_shocks(rng, n_steps - 1, shock)
    log_increments = drift - 0.5 * volatility ** 2 * dt + z * volatility * np.sqrt(dt)

    log_path = np.concatenate(([0.0], np.cumsum(log_increments)))
    return float(initial_price) * np.exp(log_path)


def simulate_gbm(
    prices,
    rng: np.random.Generator | None = None,
    shock: str = "normal",
) -> np.ndarray:
    """Calibrate on `prices` and simulate a path of the same length from prices[0]."""
    prices = np.asarray(prices, dtype=float)
    params = estimate_parameters(prices)
    return simulate_path(
        float(prices[0]), len(prices), params.drift, params.volatility,
        rng=rng, shock=shock,
    )


class MonteCarloGBM:
    """
    Monte Carlo ensemble of GBM paths.

    Without `prices`, every trial draws its own synthetic seed series, calibrates
    on it and simulates one path from it. With `prices`, drift and volatility are
    calibrated once on that history and every trial simulates forward from
    `initial_price` (default: last observed price).
    """

    def __init__(
        self,
        initial_price: float | None = None,
        n_steps: int = 500,
        seed_volatility: float = 0.02,
        shock: str = "normal",
        prices=None,
    ):
        self.calibration = None
        if prices is not None:
            self.calibration = calibrate_gbm(prices)
            if initial_price is None:
                initial_price = self.calibration.final_price

        check_initial_price(initial_price)
        check_n_steps(n_steps)
        check_seed_volatility(seed_volatility)
        check_shock(shock)

        self.initial_price = float(initial_price)
        self.n_steps = int(n_steps)
        self.seed_volatility = seed_volatility
        self.shock = shock

    def _run_trial(self, seed_seq: np.random.SeedSequence) -> tuple[np.ndarray, float, float]:
        rng = np.random.default_rng(seed_seq)

        if self.calibration is not None:
            drift, vol = self.calibration.drift, self.calibration.volatility
            start = self.initial_price
        else:
            seed_prices = generate_prices(
                self.initial_price, self.n_steps, self.seed_volatility, rng=rng,
            )
            params = estimate_parameters(seed_prices)
            drift, vol = params.drift, params.volatility
            start = float(seed_prices[0])

        path = simulate_path(start, self.n_steps, drift, vol, rng=rng, shock=self.shock)
        return path, drift, vol

    def simulate(
        self,
        n_paths: int = 1000,
        seed: int | None = 42,
        max_workers: int | None = None,
    ) -> SimulationResult:
        check_n_paths(n_paths)

        # One child stream per trial: results do not depend on max_workers
        children = np.random.SeedSequence(seed).spawn(n_paths)

        logger.info(
            "Simulating %d paths x %d steps (%s shocks, %s calibration)",
            n_paths, self.n_steps, self.shock,
            "empirical" if self.calibration is not None else "synthetic",
        )

        if max_workers is not None and max_workers > 1 and n_paths > 1:
            logger.debug("Running trials on %d worker threads", max_workers)
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                trials = list(executor.map(self._run_trial, children))
        else:
            trials = [self._run_trial(child) for child in children]

        paths = np.vstack([t[0] for t in trials])
        drifts = np.array([t[1] for t in trials], dtype=float)
        vols = np.array([t[2] for t in trials], dtype=float)

        return SimulationResult(
            paths=paths,
            time_steps=np.arange(self.n_steps),
            drifts=drifts,
            volatilities=vols,
            initial_price=self.initial_price,
            n_paths=n_paths,
            n_steps=self.n_steps,
            shock=self.shock,
            source="empirical" if self.calibration is not None else "synthetic",
        )

    @staticmethod
    def summary_stats(
        result: SimulationResult,
        percentiles: tuple[int, ...] = (10, 25, 50, 75, 90),
    ) -> dict:
        final_prices = terminal_prices(result)
        summary = summarize(final_prices)

        stats = {
            "initial_price": result.initial_price,
            "n_paths": result.n_paths,
            "n_steps": result.n_steps,
            "shock": result.shock,
            "source": result.source,
            "mean_drift": float(np.mean(result.drifts)),
            "mean_volatility": float(np.mean(result.volatilities)),
            "mean_final": summary.mean,
            "variance_final": summary.variance,
            "std_final": summary.std_dev,
            "median_final": float(np.median(final_prices)),
            "min_final": float(np.min(final_prices)),
            "max_final": float(np.max(final_prices)),
            "prob_above_initial": float(np.mean(final_prices > result.initial_price)),
            "expected_return_pct": float(
                (np.median(final_prices) / result.initial_price - 1) * 100
            ),
        }

        for p in percentiles:
            stats[f"P{p}"] = float(np.percentile(final_prices, p))

        percentile_paths = {}
        for p in percentiles:
            percentile_paths[p] = np.percentile(result.paths, p, axis=0)
        stats["percentile_paths"] = percentile_paths

        return stats


def terminal_prices(result: SimulationResult) -> np.ndarray:
    """Last column of the ensemble: one terminal price per simulation."""
    return result.paths[:, result.n_steps - 1]


def run_monte_carlo(
    n_paths: int,
    n_steps: int,
    initial_price: float,
    seed_volatility: float = 0.02,
    shock: str = "normal",
    seed: int | None = None,
    max_workers: int | None = None,
) -> SimulationResult:
    """Synthetic-calibration ensemble of shape (n_paths, n_steps)."""
    check_n_paths(n_paths)
    mc = MonteCarloGBM(
        initial_price=initial_price,
        n_steps=n_steps,
        seed_volatility=seed_volatility,
        shock=shock,
    )
    return mc.simulate(n_paths=n_paths, seed=seed, max_workers=max_workers)
