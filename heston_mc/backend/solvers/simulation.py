"""
Incremental Monte Carlo Driver

═══════════════════════════════════════════════════════════════════════════════
TWO-PHASE SIMULATION RUN
═══════════════════════════════════════════════════════════════════════════════

A run prices a European call under Heston by accumulating discounted payoffs
over successive batches, so the caller can watch the estimate converge.

1. TRACKING PHASE (simulation_count < tracking_limit):
   ═══════════════════════════════════════════════════════════════════════════

   Each simulation produces a full path S_0..S_N. Paths are stored while the
   cohort has capacity; beyond capacity they are still priced, only not kept.
   The phase ends on the simulation that brings the counter to the limit, at
   which point the cohort is sorted by terminal price and the percentile
   ranks are fixed.

2. FAST PHASE (simulation_count ≥ tracking_limit):
   ═══════════════════════════════════════════════════════════════════════════

   Only terminal prices are simulated. Irreversible for the run's lifetime.

3. PRICE ESTIMATE:
   ═══════════════════════════════════════════════════════════════════════════

   Price ≈ e^{-rT}·(1/n)·Σᵢ max(S_T^i - K, 0)

   Recomputed from the two running totals after every batch.

   Standard error (population std, as for the batch pricer):
   SE = e^{-rT}·√(E[X²] - E[X]²)/√n

═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

import numpy as np

from heston_mc.backend.core import config
from heston_mc.backend.core.parameters import ModelParameters
from heston_mc.backend.core.random_source import LCGRandom, time_seed
from heston_mc.backend.solvers.black_scholes import reference_price
from heston_mc.backend.solvers.path_simulator import (
    call_payoff,
    simulate_final_price,
    simulate_path,
)
from heston_mc.backend.solvers.percentiles import (
    PERCENTILES,
    PricePath,
    percentile_ranks,
    select_percentile_path,
    sort_cohort,
)

logger = logging.getLogger(__name__)


class SimulationRun:
    """
    Owned state of one incremental Monte Carlo run.

    `initialize` is the reset point: it can be called any number of times on
    the same object, each call starting a fresh run.
    """

    def __init__(
        self,
        tracking_limit: int = config.TRACKING_LIMIT,
        path_capacity: int = config.PATH_CAPACITY,
        random_source=None
    ):
        """
        Args:
            tracking_limit: Simulations run in full-path mode before FAST
            path_capacity: Maximum number of full paths kept for percentiles
            random_source: Normal source; defaults to a wall-clock seeded LCG.
                An LCGRandom is reseeded on every initialize, any other
                source (e.g. FixedNormalSequence) is used as given.
        """
        if path_capacity < 0:
            raise ValueError(f"path_capacity must be non-negative, got {path_capacity}")

        self.tracking_limit = int(tracking_limit)
        self.path_capacity = int(path_capacity)
        self.random_source = random_source if random_source is not None else LCGRandom()

        self.params: Optional[ModelParameters] = None
        self.seed: Optional[int] = None
        self._reset_state()

    def _reset_state(self):
        self._count = 0
        self._tracking = True
        self._paths: List[PricePath] = []
        self._ranks: Dict[int, int] = {}
        self._payoff_sum = 0.0
        self._payoff_sq_sum = 0.0
        self._option_price = 0.0
        self._bs_price = 0.0

    # ═══════════════════════════════════════════════════════════════════════
    # OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════

    def initialize(self, params: ModelParameters, seed: Optional[int] = None) -> None:
        """
        Configure and reset the run.

        Releases stored paths, zeroes the counters, returns to TRACKING,
        caches the Black-Scholes reference and reseeds the random source
        (from `seed`, or the wall clock when omitted).
        """
        self._reset_state()
        self.params = params
        self._bs_price = reference_price(params)

        if isinstance(self.random_source, LCGRandom):
            self.seed = time_seed() if seed is None else int(seed)
            self.random_source.reseed(self.seed)
        else:
            self.seed = None

        if self.tracking_limit <= 0:
            self._finish_tracking()

        logger.info(
            "Run initialised: S0=%.4f K=%.4f T=%.4f N=%d, BS reference=%.6f, seed=%s",
            params.S0, params.K, params.T, params.N, self._bs_price, self.seed
        )

    def run_batch(self, batch_size: int) -> None:
        """
        Advance the run by `batch_size` simulations.

        A non-positive batch size is a no-op.
        """
        if self.params is None:
            raise RuntimeError("Simulation run not initialised; call initialize() first")
        if batch_size <= 0:
            return

        p = self.params
        for _ in range(batch_size):
            if self._tracking and self._count < self.tracking_limit:
                prices = simulate_path(p, self.random_source)
                if len(self._paths) < self.path_capacity:
                    self._paths.append(PricePath.from_prices(prices))
                terminal = float(prices[-1])
            else:
                terminal = simulate_final_price(p, self.random_source)

            payoff = call_payoff(terminal, p.K)
            if not math.isfinite(payoff):
                logger.warning(
                    "Non-finite payoff %r at simulation %d (terminal price %r)",
                    payoff, self._count + 1, terminal
                )
            self._payoff_sum += payoff
            self._payoff_sq_sum += payoff * payoff
            self._count += 1

            if self._tracking and self._count >= self.tracking_limit:
                self._finish_tracking()

        self._option_price = p.discount_factor * (self._payoff_sum / self._count)

        logger.debug(
            "Batch of %d done: count=%d price=%.6f tracking=%s",
            batch_size, self._count, self._option_price, self._tracking
        )

    def _finish_tracking(self):
        """TRACKING → FAST: sort the cohort and fix the percentile ranks."""
        self._tracking = False
        sort_cohort(self._paths)
        self._ranks = percentile_ranks(len(self._paths))
        logger.info(
            "Tracking phase complete after %d simulations; %d paths stored",
            self._count, len(self._paths)
        )

    # ═══════════════════════════════════════════════════════════════════════
    # ACCESSORS
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def simulation_count(self) -> int:
        return self._count

    @property
    def option_price(self) -> float:
        """Discounted Monte Carlo estimate; 0.0 before the first simulation."""
        return self._option_price

    @property
    def black_scholes_price(self) -> float:
        return self._bs_price

    @property
    def time_steps(self) -> int:
        return self.params.N if self.params is not None else 0

    @property
    def is_tracking_phase(self) -> bool:
        return self._tracking

    @property
    def paths_stored(self) -> int:
        return len(self._paths)

    @property
    def percentile_indices(self) -> Dict[int, int]:
        """Percentile → rank in the sorted cohort (empty until FAST)."""
        return dict(self._ranks)

    @property
    def stored_paths(self) -> List[PricePath]:
        return list(self._paths)

    def get_percentile_path(self, percentile: int) -> Optional[np.ndarray]:
        """
        Stored trajectory for percentile ∈ {0, 25, 50, 75, 100}.

        Returns None while tracking, with an empty cohort, or for any other
        percentile value.
        """
        if self._tracking:
            return None
        return select_percentile_path(self._paths, self._ranks, percentile)

    def percentile_paths(self) -> Dict[int, np.ndarray]:
        """All available percentile paths, keyed by percentile."""
        result = {}
        for pct in PERCENTILES:
            path = self.get_percentile_path(pct)
            if path is not None:
                result[pct] = path
        return result

    # ═══════════════════════════════════════════════════════════════════════
    # DERIVED STATISTICS
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def standard_error(self) -> float:
        """
        Standard error of the price estimate.

        SE = e^{-rT}·σ(payoffs)/√n, 0.0 before the first simulation.
        """
        if self._count == 0:
            return 0.0
        n = self._count
        mean = self._payoff_sum / n
        variance = max(self._payoff_sq_sum / n - mean * mean, 0.0)
        return self.params.discount_factor * math.sqrt(variance) / math.sqrt(n)

    def confidence_interval(self, z: float = 1.96) -> Tuple[float, float]:
        se = self.standard_error
        return self._option_price - z * se, self._option_price + z * se

    @property
    def price_difference(self) -> float:
        """Monte Carlo estimate minus the Black-Scholes reference."""
        return self._option_price - self._bs_price

    @property
    def tracking_progress(self) -> float:
        """Fraction of the tracking quota completed, in [0, 1]."""
        if not self._tracking or self.tracking_limit <= 0:
            return 1.0
        return min(self._count / self.tracking_limit, 1.0)

    def time_grid(self) -> np.ndarray:
        """Sample times t_i = i·T/N, i = 0..N."""
        if self.params is None:
            return np.zeros(0)
        return np.linspace(0.0, self.params.T, self.params.N + 1)

    def snapshot(self) -> dict:
        """JSON-ready view of every accessor."""
        lower, upper = self.confidence_interval()
        return {
            'simulation_count': self._count,
            'option_price': float(self._option_price),
            'black_scholes_price': float(self._bs_price),
            'price_difference': float(self.price_difference),
            'standard_error': float(self.standard_error),
            'confidence_95': [float(lower), float(upper)],
            'time_steps': self.time_steps,
            'tracking_phase': self._tracking,
            'tracking_progress': float(self.tracking_progress),
            'tracking_limit': self.tracking_limit,
            'paths_stored': len(self._paths),
            'params': self.params.to_dict() if self.params is not None else None,
            'seed': self.seed
        }
