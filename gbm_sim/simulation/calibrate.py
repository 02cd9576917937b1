"""
Calibrate GBM parameters (drift, volatility) from a price series.

Both are per-step quantities: drift is the mean log-return and volatility the
population standard deviation of log-returns, on whatever step the input
series is sampled at.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from gbm_sim.exceptions import DomainError
from gbm_sim.metrics.statistics import mean, variance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GBMParameters:
    drift: float
    volatility: float

    def __post_init__(self):
        if self.volatility < 0:
            raise DomainError(f"volatility must be non-negative, got {self.volatility}")


@dataclass(frozen=True)
class CalibrationResult:
    drift: float                     # per-step mean log-return
    volatility: float                # per-step std dev of log-returns
    initial_price: float             # first observed price
    final_price: float               # latest observed price
    n_prices: int

    @property
    def parameters(self) -> GBMParameters:
        return GBMParameters(drift=self.drift, volatility=self.volatility)

    def annualize(self, trading_days: int = 252) -> tuple[float, float]:
        """(drift, volatility) scaled to a year of `trading_days` steps. Display only."""
        return self.drift * trading_days, self.volatility * math.sqrt(trading_days)


def log_returns(prices) -> np.ndarray:
    """r[i] = ln(prices[i+1] / prices[i]); length len(prices) - 1."""
    arr = np.asarray(prices, dtype=float)
    if arr.ndim != 1:
        raise DomainError(f"prices must be one-dimensional, got shape {arr.shape}")
    if arr.size < 2:
        raise DomainError(f"need at least 2 prices to compute returns, got {arr.size}")
    bad = ~np.isfinite(arr) | (arr <= 0)
    if bad.any():
        idx = int(np.argmax(bad))
        raise DomainError(f"price must be positive, got {arr[idx]} at index {idx}")
    return np.log(arr[1:] / arr[:-1])


def estimate_drift(prices) -> float:
    return mean(log_returns(prices))


def estimate_volatility(prices) -> float:
    return math.sqrt(variance(log_returns(prices)))


def estimate_parameters(prices) -> GBMParameters:
    returns = log_returns(prices)
    return GBMParameters(drift=mean(returns), volatility=math.sqrt(variance(returns)))


def calibrate_gbm(prices) -> CalibrationResult:
    arr = np.asarray(prices, dtype=float)
    params = estimate_parameters(arr)

    logger.debug(
        "Calibrated %d prices: drift=%.6g volatility=%.6g",
        arr.size, params.drift, params.volatility,
    )
    return CalibrationResult(
        drift=params.drift,
        volatility=params.volatility,
        initial_price=float(arr[0]),
        final_price=float(arr[-1]),
        n_prices=int(arr.size),
    )
