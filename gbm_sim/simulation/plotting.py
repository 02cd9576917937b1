"""Monte Carlo simulation visualization: fan chart + terminal distribution."""

import logging

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

logger = logging.getLogger(__name__)


def plot_simulation(stats: dict, result=None, save_path: str | None = None,
                    show: bool = False, n_sample_paths: int = 20):
    """
    Two-panel plot:
      1. Fan chart: forward percentile bands, median, a few sample paths
      2. Histogram: distribution of terminal prices

    Saves to `save_path` when given. Opens a window when `show` is set or
    there is nowhere to save.
    """
    plt.close("all")

    fig, (ax_fan, ax_hist) = plt.subplots(
        2, 1, figsize=(14, 10), height_ratios=[2, 1],
    )

    percentile_paths = stats["percentile_paths"]
    initial = stats["initial_price"]

    title_parts = [
        "GBM Monte Carlo",
        f"{stats['n_paths']:,} paths x {stats['n_steps']} steps",
        f"drift={stats['mean_drift']:+.5f}  vol={stats['mean_volatility']:.5f}",
        f"{stats['shock']} shocks",
    ]
    fig.suptitle("  |  ".join(title_parts), fontsize=11, fontweight="bold")

    # ── Panel 1: Fan chart ──
    if result is not None:
        time_steps = result.time_steps
    else:
        time_steps = np.arange(stats["n_steps"])

    pairs = [(10, 90), (25, 75)]
    for i, (lo, hi) in enumerate(pairs):
        if lo in percentile_paths and hi in percentile_paths:
            ax_fan.fill_between(
                time_steps,
                percentile_paths[lo],
                percentile_paths[hi],
                alpha=0.3 + i * 0.15,
                color="#3498db",
                label=f"P{lo}-P{hi}",
            )

    if 50 in percentile_paths:
        ax_fan.plot(time_steps, percentile_paths[50],
                    color="#2c3e50", linewidth=2, label="Median (P50)")

    if result is not None:
        n_sample = min(n_sample_paths, result.paths.shape[0])
        rng = np.random.default_rng(0)
        sample_idx = rng.choice(result.paths.shape[0], size=n_sample, replace=False)
        for idx in sample_idx:
            ax_fan.plot(time_steps, result.paths[idx],
                        color="gray", alpha=0.08, linewidth=0.5)

    ax_fan.axhline(y=initial, color="red", linestyle="--",
                   linewidth=0.8, alpha=0.7, label=f"Start {initial:,.2f}")
    ax_fan.set_xlabel("Time Step", fontsize=10)
    ax_fan.set_ylabel("Price", fontsize=10)
    ax_fan.legend(loc="upper left", fontsize=9, framealpha=0.9)
    ax_fan.grid(True, alpha=0.25, linestyle="--")
    ax_fan.yaxis.set_major_formatter(
        mticker.FuncFormatter(lambda x, _: f"{x:,.2f}")
    )
    ax_fan.margins(x=0.02)

    # ── Panel 2: Terminal price distribution ──
    if result is not None:
        final_prices = result.paths[:, -1]

        ax_hist.hist(
            final_prices, bins=min(80, max(10, len(final_prices) // 5)),
            color="#3498db", alpha=0.7, edgecolor="white", linewidth=0.3,
        )

        for p in [10, 50, 90]:
            if f"P{p}" in stats:
                val = stats[f"P{p}"]
                ax_hist.axvline(
                    x=val, color="navy" if p == 50 else "gray",
                    linestyle="--" if p != 50 else "-",
                    linewidth=1.2 if p == 50 else 0.8,
                    label=f"P{p}: {val:,.2f}",
                )

        ax_hist.axvline(
            x=initial, color="red", linestyle="--",
            linewidth=1, alpha=0.8, label=f"Start {initial:,.2f}",
        )

        ax_hist.annotate(
            f"Mean: {stats['mean_final']:,.2f}\n"
            f"Std dev: {stats['std_final']:,.2f}\n"
            f"Prob(above start): {stats['prob_above_initial'] * 100:.1f}%",
            xy=(0.98, 0.92), xycoords="axes fraction",
            ha="right", va="top", fontsize=9,
            bbox=dict(boxstyle="round,pad=0.4", facecolor="wheat", alpha=0.85),
        )

    ax_hist.set_xlabel("Terminal Price", fontsize=10)
    ax_hist.set_ylabel("Frequency", fontsize=10)
    ax_hist.legend(loc="upper left", fontsize=8, framealpha=0.9)
    ax_hist.grid(True, alpha=0.25, linestyle="--")
    ax_hist.margins(x=0.02)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=120)
        logger.info("Saved simulation chart to %s", save_path)
    if show or not save_path:
        plt.show(block=True)
    plt.close(fig)
    return fig
