"""
Percentile path selection over the tracked cohort.

Once the tracking phase ends the stored paths are sorted by terminal price
and five of them are exposed by rank. For a cohort of size M:

    min = 0,  p25 = ⌊M/4⌋,  p50 = ⌊M/2⌋,  p75 = ⌊3M/4⌋,  max = M - 1
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np


PERCENTILES = (0, 25, 50, 75, 100)


@dataclass
class PricePath:
    """A stored price trajectory and its cached terminal price."""
    prices: np.ndarray
    terminal_price: float

    @classmethod
    def from_prices(cls, prices: np.ndarray) -> 'PricePath':
        return cls(prices=prices, terminal_price=float(prices[-1]))


def sort_cohort(paths: List[PricePath]) -> None:
    """Sort in place by terminal price; ties keep insertion order."""
    paths.sort(key=lambda p: p.terminal_price)


def percentile_ranks(count: int) -> Dict[int, int]:
    """Ranks of the five representative paths in a sorted cohort of `count`."""
    if count <= 0:
        return {}
    return {
        0: 0,
        25: count // 4,
        50: count // 2,
        75: (3 * count) // 4,
        100: count - 1,
    }


def select_percentile_path(paths: List[PricePath], ranks: Dict[int, int],
                           percentile: int) -> Optional[np.ndarray]:
    """
    Trajectory at the rank of `percentile`, or None when unavailable.

    `ranks` is empty while the cohort is unsorted or empty, so a request in
    that state falls through to None just like an unrecognised percentile.
    """
    idx = ranks.get(percentile)
    if idx is None:
        return None
    return paths[idx].prices
