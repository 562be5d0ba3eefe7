"""
Heston Model Parameters for the Incremental Monte Carlo Pricer

═══════════════════════════════════════════════════════════════════════════════
MATHEMATICAL FOUNDATION - HESTON STOCHASTIC VOLATILITY MODEL
═══════════════════════════════════════════════════════════════════════════════

Risk-neutral dynamics of the asset price and its instantaneous variance:

1. ASSET PRICE SDE:
   dS_t = r·S_t dt + √v_t S_t dW_S^t

2. VARIANCE SDE (CIR Process):
   dv_t = κ(θ - v_t)dt + ξ√v_t dW_v^t

   - κ (kappa) ≥ 0: Mean reversion speed
   - θ (theta) ≥ 0: Long-run variance level
   - ξ (xi)    ≥ 0: Volatility of variance (vol-of-vol)

3. CORRELATION STRUCTURE:
   E[dW_S^t · dW_v^t] = ρ dt,   ρ ∈ [-1, 1]

4. CONTRACT:
   European call with strike K > 0 and maturity T > 0, discretised into
   N ≥ 1 equal time steps of length dt = T/N.

5. FELLER CONDITION:
   2κθ > ξ²

   When violated the variance can touch zero. The simulator uses full
   truncation, so the scheme stays defined either way; the condition is
   reported for information only.

═══════════════════════════════════════════════════════════════════════════════
"""

import math
import warnings
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ModelParameters:
    """
    Immutable inputs of one simulation run.

    Validated on construction; every run-time consumer may rely on the
    invariants below without re-checking them.
    """

    # ═══════════════════════════════════════════════════════════════════════
    # Initial Conditions
    # ═══════════════════════════════════════════════════════════════════════

    S0: float     # Initial spot price, > 0
    v0: float     # Initial variance, ≥ 0 (initial volatility = √v0)

    # ═══════════════════════════════════════════════════════════════════════
    # Market / Variance Process
    # ═══════════════════════════════════════════════════════════════════════

    r: float      # Risk-free rate (continuous compounding)
    theta: float  # θ: Long-run variance
    kappa: float  # κ: Mean reversion speed
    xi: float     # ξ: Vol-of-vol
    rho: float    # ρ: Correlation between price and variance shocks

    # ═══════════════════════════════════════════════════════════════════════
    # Contract / Discretisation
    # ═══════════════════════════════════════════════════════════════════════

    T: float      # Maturity in years, > 0
    K: float      # Strike, > 0
    N: int        # Time steps per path, ≥ 1

    def __post_init__(self):
        """
        Validate parameters against the model constraints.

        Requirements:
        ═══════════════════════════════════════════════════════════════════════
        S₀ > 0, K > 0, T > 0, N ≥ 1
        v₀ ≥ 0, θ ≥ 0, κ ≥ 0, ξ ≥ 0
        -1 ≤ ρ ≤ 1   (otherwise √(1-ρ²) is NaN and poisons every path)
        ═══════════════════════════════════════════════════════════════════════
        """
        for name in ('S0', 'v0', 'r', 'theta', 'kappa', 'xi', 'rho', 'T', 'K'):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")

        if self.S0 <= 0:
            raise ValueError(f"S₀ must be positive, got {self.S0}")
        if self.K <= 0:
            raise ValueError(f"K must be positive, got {self.K}")
        if self.T <= 0:
            raise ValueError(f"T must be positive, got {self.T}")
        if isinstance(self.N, bool) or int(self.N) != self.N or self.N < 1:
            raise ValueError(f"N must be an integer ≥ 1, got {self.N}")

        if self.v0 < 0:
            raise ValueError(f"v₀ must be non-negative, got {self.v0}")
        if self.theta < 0:
            raise ValueError(f"θ must be non-negative, got {self.theta}")
        if self.kappa < 0:
            raise ValueError(f"κ must be non-negative, got {self.kappa}")
        if self.xi < 0:
            raise ValueError(f"ξ must be non-negative, got {self.xi}")

        if not -1 <= self.rho <= 1:
            raise ValueError(f"ρ must be in [-1, 1], got {self.rho}")

        object.__setattr__(self, 'N', int(self.N))

        if not self.feller_satisfied:
            warnings.warn(
                f"Feller condition violated: 2κθ = {2 * self.kappa * self.theta:.6f} "
                f"≤ ξ² = {self.xi ** 2:.6f} (ratio {self.feller_ratio:.4f}). "
                f"Variance may reach zero; full truncation keeps the scheme defined."
            )

    # ═══════════════════════════════════════════════════════════════════════
    # Derived quantities
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def dt(self) -> float:
        return self.T / self.N

    @property
    def initial_vol(self) -> float:
        """Volatility proxy √v₀ used by the Black-Scholes reference."""
        return math.sqrt(self.v0)

    @property
    def discount_factor(self) -> float:
        return math.exp(-self.r * self.T)

    @property
    def feller_ratio(self) -> float:
        """F = 2κθ/ξ², infinite for a deterministic variance (ξ = 0)."""
        if self.xi == 0:
            return math.inf
        return 2 * self.kappa * self.theta / self.xi ** 2

    @property
    def feller_satisfied(self) -> bool:
        return self.feller_ratio > 1.0

    def to_dict(self) -> Dict[str, float]:
        """Convert parameters to dictionary for serialization."""
        return {
            'S0': self.S0,
            'v0': self.v0,
            'r': self.r,
            'theta': self.theta,
            'kappa': self.kappa,
            'xi': self.xi,
            'rho': self.rho,
            'T': self.T,
            'K': self.K,
            'N': self.N
        }

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> 'ModelParameters':
        """Create ModelParameters from dictionary, filling gaps with defaults."""
        defaults = get_default_params().to_dict()
        merged = {**defaults, **{k: v for k, v in d.items() if k in defaults}}
        return cls(
            S0=float(merged['S0']),
            v0=float(merged['v0']),
            r=float(merged['r']),
            theta=float(merged['theta']),
            kappa=float(merged['kappa']),
            xi=float(merged['xi']),
            rho=float(merged['rho']),
            T=float(merged['T']),
            K=float(merged['K']),
            N=merged['N']
        )

    def __repr__(self) -> str:
        feller_status = "✓" if self.feller_satisfied else "✗"
        return (
            f"ModelParameters(\n"
            f"  S₀={self.S0:.2f}, v₀={self.v0:.4f}, r={self.r:.4f}\n"
            f"  κ={self.kappa:.4f}, θ={self.theta:.4f}, ξ={self.xi:.4f}, ρ={self.rho:.4f}\n"
            f"  K={self.K:.2f}, T={self.T:.4f}, N={self.N}\n"
            f"  Feller ratio: {self.feller_ratio:.3f} {feller_status}\n"
            f")"
        )


def get_default_params() -> ModelParameters:
    """
    Default run configuration of the pricing front end.

    Satisfies the Feller condition (2·1.0·0.1 = 0.2 > 0.04).
    """
    return ModelParameters(
        S0=100.0,     # Spot price $100
        v0=0.04,      # Initial volatility = 20%
        r=0.05,       # 5% risk-free rate
        theta=0.1,    # ~31.6% long-run volatility
        kappa=1.0,    # Moderate mean reversion
        xi=0.2,       # Moderate vol-of-vol
        rho=-0.5,     # Equity-like leverage effect
        T=1.0,        # One year
        K=100.0,      # At-the-money strike
        N=1000        # Time steps per path
    )
