"""
CLI runner for GBM Monte Carlo simulation.

Usage:
    python -m gbm_sim.simulation --n-paths 1000 --n-steps 500

    # Single path calibrated on a synthetic series, printed one price per line
    python -m gbm_sim.simulation --single --n-steps 500 --initial-price 140

    # Calibrate on a local price history and export the ensemble
    python -m gbm_sim.simulation --prices-csv history.csv --price-column Close \
        --n-paths 5000 --n-steps 90 --csv out/paths.csv --plot out/fan.png
"""

import argparse
import logging
import sys

import numpy as np

from gbm_sim.exceptions import SimulationError
from gbm_sim.logging_config import setup_logging
from gbm_sim.simulation.config import SHOCKS, SimulationConfig

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_PRICE = SimulationConfig.initial_price


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monte Carlo simulation (GBM)"
    )
    parser.add_argument("--n-paths", type=int, default=1000,
                        help="Number of Monte Carlo paths (default: 1000)")
    parser.add_argument("--n-steps", type=int, default=500,
                        help="Points per path, including the start (default: 500)")
    parser.add_argument("--initial-price", type=float, default=None,
                        help="Starting price (default: 140, or last price of --prices-csv)")
    parser.add_argument("--seed-volatility", type=float, default=0.02,
                        help="Fluctuation width of the synthetic seed series (default: 0.02)")
    parser.add_argument("--seed", type=int, default=42,
                        help="Random seed (default: 42, use -1 for random)")
    parser.add_argument("--shock", choices=SHOCKS, default="normal",
                        help="Shock distribution (default: normal)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker threads for trials (default: serial)")

    parser.add_argument("--prices-csv", default=None,
                        help="Calibrate on a CSV price history instead of synthetic prices")
    parser.add_argument("--price-column", default="Close",
                        help="Price column in --prices-csv (default: Close)")
    parser.add_argument("--trading-days", type=int, default=252,
                        help="Steps per year for annualised calibration figures (default: 252)")

    parser.add_argument("--single", action="store_true",
                        help="Simulate and print a single path")
    parser.add_argument("--print-paths", action="store_true",
                        help="Print every simulated path")
    parser.add_argument("--csv", dest="output_csv", default=None,
                        help="Write the ensemble to this CSV file")
    parser.add_argument("--plot", dest="plot_path", default=None,
                        help="Save a fan chart to this image file")
    parser.add_argument("--show", action="store_true",
                        help="Open the fan chart in a window")

    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None,
                        help="Also log to this file (rotating)")
    return parser


def _run_single(config: SimulationConfig, prices) -> np.ndarray:
    from gbm_sim.simulation.calibrate import estimate_parameters
    from gbm_sim.simulation.data import generate_prices
    from gbm_sim.simulation.engine import simulate_gbm, simulate_path

    rng = np.random.default_rng(config.seed)
    if prices is None:
        seed_prices = generate_prices(
            config.initial_price, config.n_steps, config.seed_volatility, rng=rng,
        )
        path = simulate_gbm(seed_prices, rng=rng, shock=config.shock)
    else:
        # Forward from the configured start, like the ensemble
        params = estimate_parameters(prices)
        path = simulate_path(
            config.initial_price, config.n_steps, params.drift, params.volatility,
            rng=rng, shock=config.shock,
        )

    from gbm_sim.simulation.export import format_path
    print("GBM prices:")
    for line in format_path(path):
        print(line)
    return path


def run(args=None):
    parsed = build_parser().parse_args(args)
    setup_logging(parsed.log_level, parsed.log_file)

    prices = None
    if parsed.prices_csv:
        from gbm_sim.simulation.data import load_prices
        prices = load_prices(parsed.prices_csv, column=parsed.price_column)

    initial_price = parsed.initial_price
    if initial_price is None:
        initial_price = float(prices[-1]) if prices is not None else DEFAULT_INITIAL_PRICE

    config = SimulationConfig(
        initial_price=initial_price,
        seed_volatility=parsed.seed_volatility,
        n_paths=parsed.n_paths,
        n_steps=parsed.n_steps,
        seed=parsed.seed if parsed.seed >= 0 else None,
        shock=parsed.shock,
        max_workers=parsed.workers,
        prices_csv=parsed.prices_csv,
        price_column=parsed.price_column,
        trading_days=parsed.trading_days,
        output_csv=parsed.output_csv,
        plot_path=parsed.plot_path,
        show_plot=parsed.show,
        single=parsed.single,
    ).validate()

    if config.single:
        return _run_single(config, prices)

    # ── Run simulation ──
    from gbm_sim.simulation.engine import MonteCarloGBM

    mc = MonteCarloGBM(
        initial_price=config.initial_price,
        n_steps=config.n_steps,
        seed_volatility=config.seed_volatility,
        shock=config.shock,
        prices=prices,
    )
    if mc.calibration is not None:
        from gbm_sim.simulation.export import format_calibration
        print()
        print(format_calibration(mc.calibration, config.trading_days))

    result = mc.simulate(
        n_paths=config.n_paths,
        seed=config.seed,
        max_workers=config.max_workers,
    )
    stats = MonteCarloGBM.summary_stats(result, percentiles=config.percentiles)

    # ── Report ──
    from gbm_sim.simulation.export import format_paths, format_summary, write_csv

    if parsed.print_paths:
        for line in format_paths(result):
            print(line)
    print()
    print(format_summary(stats))

    if config.output_csv:
        write_csv(result, config.output_csv)

    if config.plot_path or config.show_plot:
        from gbm_sim.simulation.plotting import plot_simulation
        plot_simulation(stats=stats, result=result, save_path=config.plot_path,
                        show=config.show_plot)

    return stats


def main():
    try:
        run()
    except (SimulationError, OSError) as e:
        logger.error("%s", e)
        sys.exit(2)


if __name__ == "__main__":
    main()
