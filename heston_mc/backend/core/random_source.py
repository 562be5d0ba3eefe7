"""
Random Number Sources for Path Simulation

═══════════════════════════════════════════════════════════════════════════════
LINEAR CONGRUENTIAL GENERATOR + BOX-MULLER
═══════════════════════════════════════════════════════════════════════════════

1. UNIFORM DRAWS (31-bit LCG):
   seed_{n+1} = (a·seed_n + c) mod 2³¹,   a = 1103515245, c = 12345
   U = seed_{n+1} / (2³¹ - 1)

   Fast and portable, fully determined by the seed. Not cryptographically
   secure and not meant to be.

2. NORMAL DRAWS (Box-Muller):
   For U, V uniform:
   R = √(-2 ln U),   φ = 2πV
   Z₁ = R·sin(φ),    Z₂ = R·cos(φ)

   Z₁ is returned immediately, Z₂ is cached as the "spare" and returned by
   the next call, so normals come in sine/cosine pairs sharing one (U, V).
   Reseeding discards a pending spare.

═══════════════════════════════════════════════════════════════════════════════
"""

import math
import time
from typing import Iterable, Optional


LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2 ** 31
LCG_MAX = LCG_MODULUS - 1

# U = 0 would make ln(U) = -∞; floor to the smallest positive LCG step
_MIN_UNIFORM = 1.0 / LCG_MAX


def time_seed() -> int:
    """Wall-clock derived seed for non-reproducible runs."""
    return int(time.time()) % LCG_MODULUS


class LCGRandom:
    """
    Deterministic LCG uniform source with a Box-Muller normal transform.

    The cached spare normal is an explicit field of the generator and is
    reset whenever the generator is reseeded.
    """

    def __init__(self, seed: Optional[int] = None):
        self._state = 0
        self._spare = 0.0
        self._has_spare = False
        self.reseed(time_seed() if seed is None else seed)

    @property
    def state(self) -> int:
        return self._state

    def reseed(self, seed: int) -> None:
        self._state = int(seed) % LCG_MODULUS
        self._spare = 0.0
        self._has_spare = False

    def next_uniform(self) -> float:
        """Advance the LCG and return U ∈ [0, 1]."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MAX

    def next_normal(self) -> float:
        """Standard normal draw via Box-Muller (sine first, cosine cached)."""
        if self._has_spare:
            self._has_spare = False
            return self._spare

        u = max(self.next_uniform(), _MIN_UNIFORM)
        v = self.next_uniform()
        magnitude = math.sqrt(-2.0 * math.log(u))
        angle = 2.0 * math.pi * v

        self._spare = magnitude * math.cos(angle)
        self._has_spare = True
        return magnitude * math.sin(angle)


class FixedNormalSequence:
    """
    Replays a fixed sequence of standard normal draws.

    Used to drive the path simulator with hand-chosen shocks. Raises
    IndexError once the sequence is exhausted, unless `cycle` is set.
    """

    def __init__(self, values: Iterable[float], cycle: bool = False):
        self.values = [float(z) for z in values]
        self.cycle = cycle
        self.position = 0
        if cycle and not self.values:
            raise ValueError("Cannot cycle over an empty sequence")

    def next_normal(self) -> float:
        if self.position >= len(self.values):
            if not self.cycle:
                raise IndexError(
                    f"Normal sequence exhausted after {len(self.values)} draws"
                )
            self.position = 0
        z = self.values[self.position]
        self.position += 1
        return z

    @property
    def remaining(self) -> int:
        return len(self.values) - self.position
