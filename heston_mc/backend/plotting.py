"""
Percentile path chart for a finished tracking phase.

Drawn on a bare matplotlib Figure; pyplot and its backend are left alone.
"""

from typing import Optional

from matplotlib.figure import Figure

from heston_mc.backend.solvers.simulation import SimulationRun


PERCENTILE_STYLES = [
    (0, 'Minimum', '#dc3545'),
    (25, '25th Percentile', '#ffc107'),
    (50, 'Median', '#0d6efd'),
    (75, '75th Percentile', '#6610f2'),
    (100, 'Maximum', '#198754'),
]


def plot_percentile_paths(run: SimulationRun, filename: Optional[str] = None):
    """
    Draw the five percentile price paths against time.

    Args:
        run: A run whose tracking phase has ended
        filename: Save the figure there when given

    Returns:
        The matplotlib Figure
    """
    paths = run.percentile_paths()
    if not paths:
        raise RuntimeError("Percentile paths not available yet (still tracking or no stored paths)")

    times = run.time_grid()
    fig = Figure(figsize=(10, 6))
    ax = fig.add_subplot(1, 1, 1)

    for pct, label, color in PERCENTILE_STYLES:
        if pct in paths:
            ax.plot(times, paths[pct], label=label, color=color, linewidth=1.5)

    ax.axhline(run.params.K, color='grey', linestyle='--', linewidth=1, label='Strike')
    ax.set_title("Stock Price Evolution (Percentile Paths)", fontfamily='serif')
    ax.set_xlabel("Time (years)")
    ax.set_ylabel("Stock Price")
    ax.legend(loc='upper left')
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    if filename:
        fig.savefig(filename, dpi=150)

    return fig
