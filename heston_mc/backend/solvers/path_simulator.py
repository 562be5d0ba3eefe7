"""
Heston Path Simulation with Milstein Variance and Log-Euler Price Updates

═══════════════════════════════════════════════════════════════════════════════
DISCRETISATION OF THE HESTON SDE SYSTEM
═══════════════════════════════════════════════════════════════════════════════

Time grid: t_i = i·dt, dt = T/N, i = 0..N, with S_0 = S₀ and v_0 = v₀.

1. CORRELATED SHOCKS:
   ═══════════════════════════════════════════════════════════════════════════

   Z_S ~ N(0,1)                             (price shock, drawn first)
   Z_v = ρ·Z_S + √(1-ρ²)·Z_indep            (variance shock)

2. FULL TRUNCATION:
   ═══════════════════════════════════════════════════════════════════════════

   v⁺ = max(v_{i-1}, 0)

   Every consumer of the variance (drift, square roots) sees v⁺. The stored
   v_i itself is never clamped and may go negative between steps.

3. VARIANCE UPDATE (Milstein):
   ═══════════════════════════════════════════════════════════════════════════

   v_i = v_{i-1} + κ(θ - v⁺)Δt + ξ√(v⁺Δt)·Z_v + (ξ²/4)(Z_v² - 1)Δt

   The last term is the Milstein correction for the √v diffusion:
   ½·b·b'·(ΔW² - Δt) with b(v) = ξ√v, b'(v) = ξ/(2√v).

4. PRICE UPDATE (Log-Euler, previous-step variance):
   ═══════════════════════════════════════════════════════════════════════════

   S_i = S_{i-1}·exp[(r - v⁺/2)Δt + √(v⁺Δt)·Z_S]

   The price step uses v⁺ built from v_{i-1}, never the freshly updated
   v_i. Using v_i is a different discretisation.

═══════════════════════════════════════════════════════════════════════════════
"""

import math
from typing import Tuple

import numpy as np

from heston_mc.backend.core.parameters import ModelParameters


def _step_constants(params: ModelParameters) -> Tuple[float, float, float]:
    dt = params.dt
    rho_perp = math.sqrt(1.0 - params.rho * params.rho)
    milstein = params.xi * params.xi / 4.0
    return dt, rho_perp, milstein


def simulate_path_with_variance(params: ModelParameters, source) -> Tuple[np.ndarray, np.ndarray]:
    """
    Simulate one path and keep both trajectories.

    Args:
        params: Model parameters
        source: Anything with a `next_normal()` method

    Returns:
        S: Price path, shape (N+1,)
        V: Variance path (untruncated), shape (N+1,)
    """
    dt, rho_perp, milstein = _step_constants(params)
    r, kappa, theta, xi, rho = params.r, params.kappa, params.theta, params.xi, params.rho

    S = np.empty(params.N + 1)
    V = np.empty(params.N + 1)
    S[0] = params.S0
    V[0] = params.v0

    s, v = params.S0, params.v0
    for i in range(1, params.N + 1):
        z_s = source.next_normal()
        z_v = rho * z_s + rho_perp * source.next_normal()

        v_plus = v if v > 0.0 else 0.0
        root = math.sqrt(v_plus * dt)

        s = s * math.exp((r - 0.5 * v_plus) * dt + z_s * root)
        v = (v + kappa * (theta - v_plus) * dt + z_v * xi * root
             + milstein * (z_v * z_v - 1.0) * dt)

        S[i] = s
        V[i] = v

    return S, V


def simulate_path(params: ModelParameters, source) -> np.ndarray:
    """Full price trajectory S_0..S_N, shape (N+1,)."""
    S, _ = simulate_path_with_variance(params, source)
    return S


def simulate_final_price(params: ModelParameters, source) -> float:
    """
    Terminal price S_N only.

    Same recurrence and same draw order as `simulate_path`, without keeping
    the intermediate samples; used once the tracking phase is over.
    """
    dt, rho_perp, milstein = _step_constants(params)
    r, kappa, theta, xi, rho = params.r, params.kappa, params.theta, params.xi, params.rho

    s, v = params.S0, params.v0
    for _ in range(params.N):
        z_s = source.next_normal()
        z_v = rho * z_s + rho_perp * source.next_normal()

        v_plus = v if v > 0.0 else 0.0
        root = math.sqrt(v_plus * dt)

        s = s * math.exp((r - 0.5 * v_plus) * dt + z_s * root)
        v = (v + kappa * (theta - v_plus) * dt + z_v * xi * root
             + milstein * (z_v * z_v - 1.0) * dt)

    return s


def call_payoff(terminal_price: float, K: float) -> float:
    """European call payoff (S_T - K)⁺."""
    return max(terminal_price - K, 0.0)
