import math
import numpy as np
from typing import Tuple, Dict, List

from heston_mc.backend.core.parameters import ModelParameters, get_default_params
from heston_mc.backend.core.random_source import LCGRandom, FixedNormalSequence, LCG_MODULUS, LCG_MAX
from heston_mc.backend.solvers.black_scholes import black_scholes_call, norm_cdf, reference_price
from heston_mc.backend.solvers.path_simulator import (
    simulate_path,
    simulate_final_price,
    simulate_path_with_variance,
)
from heston_mc.backend.solvers.percentiles import PERCENTILES, percentile_ranks
from heston_mc.backend.solvers.simulation import SimulationRun

try:
    import QuantLib as ql
    QUANTLIB_AVAILABLE = True
except Exception:
    QUANTLIB_AVAILABLE = False


def fast_params(N: int = 4, **overrides) -> ModelParameters:
    """Default contract with a short time grid so pure-Python runs stay quick."""
    base = dict(S0=100.0, v0=0.04, r=0.05, theta=0.1, kappa=1.0,
                xi=0.2, rho=-0.5, T=1.0, K=100.0, N=N)
    base.update(overrides)
    return ModelParameters(**base)


def seeded_run(params: ModelParameters, seed: int = 12345,
               tracking_limit: int = 1000, path_capacity: int = 1000) -> SimulationRun:
    run = SimulationRun(tracking_limit=tracking_limit, path_capacity=path_capacity)
    run.initialize(params, seed=seed)
    return run


def observable_state(run: SimulationRun) -> Dict:
    return {
        'count': run.simulation_count,
        'price': run.option_price,
        'bs': run.black_scholes_price,
        'tracking': run.is_tracking_phase,
        'stored': run.paths_stored,
        'steps': run.time_steps,
        'p50': run.get_percentile_path(50),
    }


def relative_error(actual: float, expected: float) -> float:
    return abs(actual - expected) / max(abs(expected), 1e-300)


def quantlib_bs_call_price(S0: float, K: float, r: float, T: float, sigma: float) -> float:
    if not QUANTLIB_AVAILABLE:
        raise RuntimeError("QuantLib is not installed")

    import QuantLib as ql

    evaluation_date = ql.Date(1, 1, 2026)
    ql.Settings.instance().evaluationDate = evaluation_date
    day_count = ql.Actual365Fixed()

    spot_handle = ql.QuoteHandle(ql.SimpleQuote(S0))
    risk_free_ts = ql.YieldTermStructureHandle(
        ql.FlatForward(evaluation_date, r, day_count)
    )
    dividend_ts = ql.YieldTermStructureHandle(
        ql.FlatForward(evaluation_date, 0.0, day_count)
    )
    vol_ts = ql.BlackVolTermStructureHandle(
        ql.BlackConstantVol(evaluation_date, ql.NullCalendar(), sigma, day_count)
    )

    process = ql.BlackScholesMertonProcess(spot_handle, dividend_ts, risk_free_ts, vol_ts)
    engine = ql.AnalyticEuropeanEngine(process)

    maturity_date = evaluation_date + int(round(T * 365))
    payoff = ql.PlainVanillaPayoff(ql.Option.Call, K)
    exercise = ql.EuropeanExercise(maturity_date)
    option = ql.VanillaOption(payoff, exercise)
    option.setPricingEngine(engine)

    return float(option.NPV())
