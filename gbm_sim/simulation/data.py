"""Seed price series for calibration: synthetic random walk or a local CSV history."""

import logging

import numpy as np
import pandas as pd

from gbm_sim.exceptions import ConfigError, DomainError
from gbm_sim.simulation.config import check_n_steps, check_seed_volatility

logger = logging.getLogger(__name__)


def generate_prices(
    starting_price: float,
    n: int,
    volatility: float = 0.02,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """
    Multiplicative random walk: price[i] = price[i-1] * (1 + f_i),
    f_i ~ U[-volatility/2, +volatility/2].

    Not log-normal; only meant to give the calibrator a plausible history
    when no real prices are supplied.
    """
    if not starting_price > 0:
        raise ConfigError(f"starting_price must be positive, got {starting_price!r}")
    check_n_steps(n)
    check_seed_volatility(volatility)

    if rng is None:
        rng = np.random.default_rng()

    half = volatility / 2
    fluctuations = np.asarray(rng.uniform(-half, half, size=n - 1), dtype=float)

    # cumprod accumulates left to right, so each element is exactly
    # prices[i-1] * (1 + f_i)
    factors = np.concatenate(([float(starting_price)], 1.0 + fluctuations))
    return np.cumprod(factors)


def load_prices(path: str, column: str = "Close") -> np.ndarray:
    """
    Read a price history from a CSV file.

    Returns the non-null values of `column` in file order. A single-column
    file is accepted whatever its header.
    """
    try:
        df = pd.read_csv(path)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise ConfigError(f"cannot read prices from {path}: {e}") from e

    if column not in df.columns:
        if len(df.columns) == 1:
            column = df.columns[0]
        else:
            raise ConfigError(
                f"column {column!r} not found in {path}; available: {list(df.columns)}"
            )

    series = pd.to_numeric(df[column], errors="coerce").dropna()
    prices = series.to_numpy(dtype=float)

    if len(prices) < 2:
        raise DomainError(f"need at least 2 prices in {path}, got {len(prices)}")
    if np.any(prices <= 0):
        raise DomainError(f"price must be positive; {path} contains non-positive values")

    logger.info("Loaded %d prices from %s (column %s)", len(prices), path, column)
    return prices
