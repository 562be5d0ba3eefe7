#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
HESTON MC - Application Entry Point
═══════════════════════════════════════════════════════════════════════════════

This script starts the incremental Heston Monte Carlo pricer.

Usage:
    python -m heston_mc.run              # Start web server
    python -m heston_mc.run --test       # Run validation tests only
    python -m heston_mc.run --demo       # Run a convergence demo in the terminal

Mathematical Model:
    dS = r S dt + √v S dW_S
    dv = κ(θ-v)dt + ξ√v dW_v
    Corr(dW_S, dW_v) = ρ

═══════════════════════════════════════════════════════════════════════════════
"""

import sys
import argparse
import logging

from heston_mc.backend.core import config
from heston_mc.backend.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def run_demo(total_simulations=20000, batch_size=config.DEFAULT_BATCH_SIZE,
             steps=None, seed=None, plot_file=None):
    """Drive one run in batches and print the convergence log."""

    from dataclasses import replace
    from heston_mc.backend.core.parameters import get_default_params
    from heston_mc.backend.solvers.simulation import SimulationRun

    params = get_default_params()
    if steps is not None:
        params = replace(params, N=steps)

    print("=" * 70)
    print("HESTON MC - CONVERGENCE DEMO")
    print("=" * 70)
    print()
    print("Parameters:")
    print(f"  S₀ = {params.S0}    v₀ = {params.v0}    r = {params.r}")
    print(f"  κ  = {params.kappa}    θ  = {params.theta}    ξ = {params.xi}    ρ = {params.rho}")
    print(f"  K  = {params.K}    T  = {params.T}    N = {params.N}")
    print(f"  Feller = {params.feller_ratio:.2f} {'✓' if params.feller_satisfied else '✗'}")
    print()

    run = SimulationRun()
    run.initialize(params, seed=seed)
    print(f"Black-Scholes reference (σ = √v₀): {run.black_scholes_price:.4f}")
    print(f"Seed: {run.seed}")
    print("-" * 70)
    print(f"{'Simulations':>12} {'Heston MC':>12} {'Black-Scholes':>14} {'Difference':>12} {'Std Err':>10}")

    report_every = max(total_simulations // 20, batch_size)
    next_report = report_every
    was_tracking = run.is_tracking_phase

    while run.simulation_count < total_simulations:
        run.run_batch(min(batch_size, total_simulations - run.simulation_count))

        if was_tracking and not run.is_tracking_phase:
            print(f"{'':>12} -- percentile paths fixed after {run.simulation_count} runs "
                  f"({run.paths_stored} stored) --")
            was_tracking = False

        if run.simulation_count >= next_report or run.simulation_count >= total_simulations:
            print(f"{run.simulation_count:>12,} {run.option_price:>12.4f} "
                  f"{run.black_scholes_price:>14.4f} {run.price_difference:>12.4f} "
                  f"{run.standard_error:>10.4f}")
            next_report += report_every

    lower, upper = run.confidence_interval()
    print("-" * 70)
    print(f"Heston MC price: {run.option_price:.4f}  95% CI: [{lower:.4f}, {upper:.4f}]")

    paths = run.percentile_paths()
    if paths:
        print("\nPercentile paths (terminal price):")
        for pct, path in paths.items():
            print(f"   {pct:>3}th: {path[-1]:10.4f}")
        if plot_file:
            from heston_mc.backend.plotting import plot_percentile_paths
            plot_percentile_paths(run, plot_file)
            print(f"\nChart saved to {plot_file}")
    else:
        print("\nPercentile paths not available yet (tracking phase still running).")

    print()
    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)
    return run


def run_tests():
    """Run validation tests."""
    from heston_mc.tests.validation import run_all_tests
    success = run_all_tests()
    return 0 if success else 1


def run_server(host='0.0.0.0', port=5000, debug=True):
    """Start the web server."""
    from heston_mc.backend.app import app
    logger.info("Starting API on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Incremental Heston Monte Carlo Pricer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m heston_mc.run                      Start web server at http://localhost:5000
    python -m heston_mc.run --port 8000          Start on custom port
    python -m heston_mc.run --test               Run validation tests
    python -m heston_mc.run --demo --steps 100   Run a convergence demo
    python -m heston_mc.run --demo --plot p.png  ...and save the percentile chart
        """
    )

    parser.add_argument('--test', action='store_true', help='Run validation tests')
    parser.add_argument('--demo', action='store_true', help='Run a convergence demo')
    parser.add_argument('--simulations', type=int, default=20000, help='Demo: total simulations (default: 20000)')
    parser.add_argument('--batch-size', type=int, default=config.DEFAULT_BATCH_SIZE,
                        help=f'Demo: simulations per batch (default: {config.DEFAULT_BATCH_SIZE})')
    parser.add_argument('--steps', type=int, default=None, help='Demo: time steps per path (default: 1000)')
    parser.add_argument('--seed', type=int, default=None, help='Demo: random seed (default: wall clock)')
    parser.add_argument('--plot', default=None, metavar='FILE', help='Demo: save the percentile chart')
    parser.add_argument('--host', default='0.0.0.0', help='Server host (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=5000, help='Server port (default: 5000)')
    parser.add_argument('--no-debug', action='store_true', help='Disable debug mode')
    parser.add_argument('--log-level', default=config.LOG_LEVEL.upper(), type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help=f'Logging level (default: {config.LOG_LEVEL})')

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.test:
        sys.exit(run_tests())
    elif args.demo:
        run_demo(args.simulations, args.batch_size, args.steps, args.seed, args.plot)
    else:
        run_server(args.host, args.port, not args.no_debug)


if __name__ == '__main__':
    main()
