"""Text and CSV output for simulated paths and their summary."""

import logging
import os

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

TIME_STEP_COLUMN = "Time Step"


def format_path(path) -> list[str]:
    """One price per line."""
    return [repr(float(p)) for p in np.asarray(path, dtype=float)]


def format_paths(result) -> list[str]:
    """One space-delimited row of prices per simulation."""
    return [" ".join(format_path(row)) for row in result.paths]


def format_summary(stats: dict) -> str:
    lines = [
        "=" * 60,
        "  GBM MONTE CARLO SIMULATION",
        "=" * 60,
        f"  Calibration:    {stats['source']} ({stats['shock']} shocks)",
        f"  Paths:          {stats['n_paths']:,}",
        f"  Steps:          {stats['n_steps']}",
        f"  Drift (mean):   {stats['mean_drift']:+.6f} per step",
        f"  Vol (mean):     {stats['mean_volatility']:.6f} per step",
        f"  Initial Price:  {stats['initial_price']:>14,.4f}",
        "  " + "-" * 56,
        f"  Mean Final:     {stats['mean_final']:>14,.4f}",
        f"  Variance:       {stats['variance_final']:>14,.4f}",
        f"  Std Dev:        {stats['std_final']:>14,.4f}",
        f"  Median Final:   {stats['median_final']:>14,.4f}",
        f"  Min Final:      {stats['min_final']:>14,.4f}",
        f"  Max Final:      {stats['max_final']:>14,.4f}",
    ]

    pct_keys = [k for k in stats if k.startswith("P") and k[1:].isdigit()]
    if pct_keys:
        lines.append("  " + "-" * 56)
        for key in pct_keys:
            lines.append(f"  {key:>14}:  {stats[key]:>14,.4f}")

    lines += [
        "  " + "-" * 56,
        f"  Expected Return:    {stats['expected_return_pct']:>+8.2f}%  (median)",
        f"  Prob Above Start:   {stats['prob_above_initial'] * 100:>8.1f}%",
        "=" * 60,
    ]
    return "\n".join(lines)


def format_calibration(cal, trading_days: int = 252) -> str:
    drift_ann, vol_ann = cal.annualize(trading_days)
    return "\n".join([
        f"  Calibration ({cal.n_prices} prices):",
        f"    Log Drift (step):     {cal.drift:+.6f}",
        f"    Volatility (step):    {cal.volatility:.6f}",
        f"    Log Drift (ann):      {drift_ann:+.1%}  ({trading_days} steps/yr)",
        f"    Volatility (ann):     {vol_ann:.1%}",
        f"    Latest Price:         {cal.final_price:,.4f}",
    ])


def ensemble_frame(result) -> pd.DataFrame:
    """Rows = time steps, columns = simulations in index order."""
    columns = [f"Simulation {i + 1}" for i in range(result.paths.shape[0])]
    df = pd.DataFrame(result.paths.T, columns=columns)
    df.insert(0, TIME_STEP_COLUMN, np.arange(result.paths.shape[1]))
    return df


def write_csv(result, path: str) -> str:
    """
    Write the ensemble as CSV:

        Time Step,Simulation 1,...,Simulation N
        0,<price>,...,<price>
        ...
    """
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    ensemble_frame(result).to_csv(path, index=False, lineterminator="\n")
    logger.info("Wrote %d x %d ensemble to %s", result.paths.shape[0],
                result.paths.shape[1], path)
    return path
