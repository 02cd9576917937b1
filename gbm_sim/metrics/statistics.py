"""
Descriptive statistics: pure numpy computation layer.
Population moments (divisor = count), shared by calibration and the
Monte Carlo summary.
"""

import math
from dataclasses import dataclass

import numpy as np

from gbm_sim.exceptions import DomainError


@dataclass(frozen=True)
class SummaryStatistics:
    """Mean / variance / std dev of a sample."""
    mean: float
    variance: float
    std_dev: float


def _as_array(data) -> np.ndarray:
    arr = np.asarray(data, dtype=float)
    if arr.ndim != 1:
        arr = arr.ravel()
    if arr.size == 0:
        raise DomainError("statistics require at least one value, got empty input")
    return arr


def mean(data) -> float:
    arr = _as_array(data)
    return float(np.sum(arr) / arr.size)


def variance(data) -> float:
    """Population variance: mean of squared deviations from the mean."""
    arr = _as_array(data)
    deviations = arr - mean(arr)
    return float(np.sum(deviations * deviations) / arr.size)


def std_dev(data) -> float:
    return math.sqrt(variance(data))


def summarize(data) -> SummaryStatistics:
    var = variance(data)
    return SummaryStatistics(mean=mean(data), variance=var, std_dev=math.sqrt(var))
