import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest


def generate_synthetic_prices(days=250, base_price=100.0, seed=42):
    """Generate a synthetic close-price series for testing."""
    rng = np.random.default_rng(seed)
    returns = rng.normal(0.0005, 0.02, days - 1)
    return base_price * np.concatenate(([1.0], np.cumprod(1 + returns)))


def write_price_csv(path, prices, column="Close"):
    dates = pd.bdate_range(start="2023-01-01", periods=len(prices))
    pd.DataFrame({column: prices}, index=dates).to_csv(path, index_label="Date")
    return path


class FixedDraws:
    """Stands in for numpy.random.Generator with a predetermined draw sequence."""

    def __init__(self, values):
        self.values = np.asarray(values, dtype=float)

    def _take(self, size):
        assert size == len(self.values)
        return self.values.copy()

    def uniform(self, low, high, size):
        assert np.all((self.values >= low) & (self.values <= high))
        return self._take(size)

    def standard_normal(self, size):
        return self._take(size)

    def random(self, size):
        return self._take(size)


@pytest.fixture
def synthetic_prices():
    return generate_synthetic_prices()


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
