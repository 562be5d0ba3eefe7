"""
═══════════════════════════════════════════════════════════════════════════════
HESTON MC VALIDATION SUITE
═══════════════════════════════════════════════════════════════════════════════

Automated checks of the incremental Monte Carlo pricer:
1. Random Source: LCG recurrence, Box-Muller pairing, reseeding
2. Path Recurrence: Golden values with injected draws, full truncation
3. Black-Scholes Reference: Textbook value, parity, σ = √v₀
4. Phase Transition: TRACKING → FAST exactly at the tracking limit
5. Percentiles: Rank formulas and ordering by terminal price
6. Degenerate Batches: Non-positive batch sizes change nothing, overflowing
   payoffs are logged and carried into the estimate
7. Capacity Overflow: Paths beyond capacity are priced, not stored
8. Convergence: SE ~ 1/√n, Black-Scholes limit
9. Feller Condition and the optional QuantLib benchmark

Each check returns (passed, message, details); the same checks back the
pytest suite under tests/cases.

═══════════════════════════════════════════════════════════════════════════════
"""

import sys
from typing import Optional

from heston_mc.tests.cases.test_01_random_source import (
    check_lcg_recurrence,
    check_box_muller_pairs,
    check_reseed_discards_spare,
    check_normal_moments,
)
from heston_mc.tests.cases.test_02_path_recurrence import (
    check_golden_two_steps,
    check_full_truncation,
    check_final_price_matches_path,
)
from heston_mc.tests.cases.test_03_black_scholes import (
    check_reference_value,
    check_put_call_parity,
    check_reference_uses_initial_variance,
)
from heston_mc.tests.cases.test_04_phase_transition import (
    check_transition_at_limit,
    check_chunking_independence,
)
from heston_mc.tests.cases.test_05_percentiles import (
    check_index_formulas,
    check_sorted_cohort_ordering,
)
from heston_mc.tests.cases.test_06_degenerate_batches import (
    check_empty_batches_fresh_run,
    check_empty_batches_mid_run,
    check_non_finite_payoff_surfaces,
)
from heston_mc.tests.cases.test_07_capacity_overflow import (
    check_capacity_overflow,
    check_capacity_larger_than_limit,
)
from heston_mc.tests.cases.test_08_convergence import (
    check_standard_error_decay,
    check_black_scholes_limit,
)
from heston_mc.tests.cases.test_09_quantlib_benchmark import check_quantlib_reference_alignment
from heston_mc.tests.cases.test_11_parameters import check_feller_condition


# ═══════════════════════════════════════════════════════════════════════════════
# TEST UTILITIES
# ═══════════════════════════════════════════════════════════════════════════════

class TestResult:
    """Container for test results."""

    def __init__(self, name: str, passed: bool, message: str, details: Optional[dict] = None):
        self.name = name
        self.passed = passed
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        status = "✓ PASS" if self.passed else "✗ FAIL"
        return f"{status}: {self.name} - {self.message}"


def run_test(name: str, test_func) -> TestResult:
    """Execute a check function and return result."""
    try:
        passed, message, details = test_func()
        return TestResult(name, passed, message, details)
    except Exception as e:
        return TestResult(name, False, f"Exception: {str(e)}")


CHECKS = [
    ("LCG Recurrence", check_lcg_recurrence),
    ("Box-Muller Pairs", check_box_muller_pairs),
    ("Reseed Discards Spare Normal", check_reseed_discards_spare),
    ("Normal Moments", check_normal_moments),
    ("Golden Two-Step Path", check_golden_two_steps),
    ("Full Truncation", check_full_truncation),
    ("Final Price Matches Path", check_final_price_matches_path),
    ("Black-Scholes Reference Value", check_reference_value),
    ("Put-Call Parity", check_put_call_parity),
    ("Reference Uses √v₀", check_reference_uses_initial_variance),
    ("Phase Transition at Limit", check_transition_at_limit),
    ("Batch Chunking Independence", check_chunking_independence),
    ("Percentile Index Formulas", check_index_formulas),
    ("Sorted Cohort Ordering", check_sorted_cohort_ordering),
    ("Empty Batches (fresh run)", check_empty_batches_fresh_run),
    ("Empty Batches (mid run)", check_empty_batches_mid_run),
    ("Non-Finite Payoff Surfaces", check_non_finite_payoff_surfaces),
    ("Capacity Overflow", check_capacity_overflow),
    ("Capacity Above Limit", check_capacity_larger_than_limit),
    ("Standard Error Decay", check_standard_error_decay),
    ("Black-Scholes Limit", check_black_scholes_limit),
    ("Feller Condition", check_feller_condition),
    ("QuantLib Benchmark", check_quantlib_reference_alignment),
]


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN TEST RUNNER
# ═══════════════════════════════════════════════════════════════════════════════

def run_all_tests() -> bool:
    """Run all validation checks and report results."""

    print("=" * 70)
    print("HESTON MC VALIDATION SUITE")
    print("=" * 70)
    print()

    results = []
    for name, test_func in CHECKS:
        result = run_test(name, test_func)
        results.append(result)
        print(result)
        if result.details:
            for key, value in result.details.items():
                if key != 'checks' and not isinstance(value, (list, dict)):
                    print(f"    {key}: {value}")
        print()

    # Summary
    passed = sum(1 for r in results if r.passed)
    total = len(results)

    print("=" * 70)
    print(f"SUMMARY: {passed}/{total} tests passed")
    print("=" * 70)

    if passed == total:
        print("\n✓ All validation tests PASSED!")
        return True
    else:
        print(f"\n✗ {total - passed} test(s) FAILED")
        return False


if __name__ == '__main__':
    success = run_all_tests()
    sys.exit(0 if success else 1)
