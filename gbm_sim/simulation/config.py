"""Configuration for Monte Carlo GBM simulation."""

import numbers
from dataclasses import dataclass

from gbm_sim.exceptions import ConfigError

SHOCKS = ("normal", "uniform")


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def check_n_paths(n_paths: int) -> None:
    if not _is_int(n_paths) or n_paths <= 0:
        raise ConfigError(f"n_paths must be a positive integer, got {n_paths!r}")


def check_n_steps(n_steps: int) -> None:
    if not _is_int(n_steps) or n_steps < 2:
        raise ConfigError(f"n_steps must be an integer >= 2, got {n_steps!r}")


def check_initial_price(initial_price: float) -> None:
    if initial_price is None or not initial_price > 0:
        raise ConfigError(f"initial_price must be positive, got {initial_price!r}")


def check_run_params(n_paths: int, n_steps: int, initial_price: float) -> None:
    """Reject invalid run parameters before any simulation work starts."""
    check_n_paths(n_paths)
    check_n_steps(n_steps)
    check_initial_price(initial_price)


def check_seed_volatility(volatility: float) -> None:
    # |fluctuation| <= volatility / 2 must stay below 1 to keep prices positive
    if not 0 <= volatility < 2:
        raise ConfigError(f"seed_volatility must be in [0, 2), got {volatility!r}")


def check_shock(shock: str) -> None:
    if shock not in SHOCKS:
        raise ConfigError(f"shock must be one of {SHOCKS}, got {shock!r}")


@dataclass
class SimulationConfig:
    # Seed series / starting point
    initial_price: float = 140.0
    seed_volatility: float = 0.02    # width of the uniform fluctuation window

    # Simulation
    n_paths: int = 1000
    n_steps: int = 500               # path length, including the initial price
    seed: int | None = 42
    shock: str = "normal"            # "uniform" reproduces the U[0,1) shock variant
    max_workers: int | None = None   # None = run trials serially

    # Empirical calibration (None = synthetic seed series per trial)
    prices_csv: str | None = None
    price_column: str = "Close"
    trading_days: int = 252          # steps per year, for the annualised report only

    # Output
    percentiles: tuple[int, ...] = (10, 25, 50, 75, 90)
    output_csv: str | None = None
    plot_path: str | None = None
    show_plot: bool = False
    single: bool = False             # one path, printed; no ensemble outputs

    def validate(self) -> "SimulationConfig":
        check_run_params(self.n_paths, self.n_steps, self.initial_price)
        check_seed_volatility(self.seed_volatility)
        check_shock(self.shock)
        if self.max_workers is not None and self.max_workers <= 0:
            raise ConfigError(f"max_workers must be positive, got {self.max_workers!r}")
        for p in self.percentiles:
            if not 0 <= p <= 100:
                raise ConfigError(f"percentiles must be within [0, 100], got {p!r}")
        if not _is_int(self.trading_days) or self.trading_days <= 0:
            raise ConfigError(f"trading_days must be a positive integer, got {self.trading_days!r}")
        if self.single and (self.output_csv or self.plot_path or self.show_plot):
            raise ConfigError("--single prints one path; it cannot be combined with --csv, --plot or --show")
        return self
