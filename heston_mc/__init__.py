"""
═══════════════════════════════════════════════════════════════════════════════
HESTON MC - Incremental Monte Carlo Pricing under Stochastic Volatility
═══════════════════════════════════════════════════════════════════════════════

Prices a European call under the Heston (1993) model by Monte Carlo,
batch by batch, so the estimate can be watched converging. The first cohort
of paths is kept in full and five percentile trajectories (min, 25th,
median, 75th, max by terminal price) are exposed for charting. A
Black-Scholes price with σ = √v₀ is reported as a baseline.

Mathematical Model:
    dS = r S dt + √v S dW_S
    dv = κ(θ-v)dt + ξ√v dW_v
    Corr(dW_S, dW_v) = ρ

Modules:
    backend.core      - Parameters, random sources, config, logging
    backend.solvers   - Path simulator, Black-Scholes reference,
                        percentile selection, simulation driver
    backend.app       - Flask REST API
    backend.plotting  - Percentile path chart
    tests             - Validation tests

Usage:
    from heston_mc import SimulationRun, get_default_params

    run = SimulationRun()
    run.initialize(get_default_params(), seed=42)
    run.run_batch(2000)
    print(run.option_price, run.black_scholes_price)
    median_path = run.get_percentile_path(50)

═══════════════════════════════════════════════════════════════════════════════
"""

__version__ = '1.0.0'
__author__ = 'Heston MC'

from heston_mc.backend.core.parameters import ModelParameters, get_default_params
from heston_mc.backend.core.random_source import LCGRandom, FixedNormalSequence
from heston_mc.backend.solvers.black_scholes import black_scholes_call
from heston_mc.backend.solvers.path_simulator import simulate_path, simulate_final_price
from heston_mc.backend.solvers.simulation import SimulationRun
