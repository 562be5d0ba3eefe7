"""
Black-Scholes Reference Price

═══════════════════════════════════════════════════════════════════════════════
BLACK-SCHOLES FORMULA (flat-volatility baseline for the Heston estimate)
═══════════════════════════════════════════════════════════════════════════════

C(S₀, K, r, T, σ) = S₀·N(d₁) - K·e^{-rT}·N(d₂)

where:
d₁ = [ln(S₀/K) + (r + σ²/2)T] / (σ√T)
d₂ = d₁ - σ√T

N(x) = ½[1 + erf(x/√2)]  (standard normal CDF)

The run evaluates it once with σ = √v₀, i.e. as if the variance stayed at
its initial level. The gap between this number and the Monte Carlo estimate
is the effect of stochastic volatility (plus Monte Carlo noise).

═══════════════════════════════════════════════════════════════════════════════
"""

import numpy as np
from scipy.special import erf

from heston_mc.backend.core.parameters import ModelParameters


def norm_cdf(x: float) -> float:
    """Standard normal CDF via the error function."""
    return 0.5 * (1.0 + erf(x / np.sqrt(2.0)))


def black_scholes_call(S0: float, K: float, r: float, T: float, sigma: float) -> float:
    """
    Black-Scholes European call option formula.

    Args:
        S0: Current spot price
        K: Strike price
        r: Risk-free rate
        T: Time to maturity
        sigma: Volatility (constant)

    Returns:
        Call option price
    """
    # Handle edge cases
    if T < 1e-10:
        # At expiry, return payoff
        return max(S0 - K, 0.0)

    if sigma < 1e-10:
        # Zero volatility case: deterministic forward
        forward = S0 * np.exp(r * T)
        return float(max(forward - K, 0.0) * np.exp(-r * T))

    sqrt_T = np.sqrt(T)
    d1 = (np.log(S0 / K) + (r + 0.5 * sigma**2) * T) / (sigma * sqrt_T)
    d2 = d1 - sigma * sqrt_T

    return float(S0 * norm_cdf(d1) - K * np.exp(-r * T) * norm_cdf(d2))


def reference_price(params: ModelParameters) -> float:
    """Black-Scholes call for the run's contract with σ = √v₀."""
    return black_scholes_call(params.S0, params.K, params.r, params.T, params.initial_vol)
