from typing import Tuple, Dict
import math

import pytest

try:
    from .common import LCGRandom, FixedNormalSequence, LCG_MODULUS, LCG_MAX
except ImportError:
    from common import LCGRandom, FixedNormalSequence, LCG_MODULUS, LCG_MAX


def check_lcg_recurrence() -> Tuple[bool, str, Dict]:
    rng = LCGRandom(seed=1)

    state = 1
    expected, actual = [], []
    for _ in range(5):
        state = (state * 1103515245 + 12345) % LCG_MODULUS
        expected.append(state / LCG_MAX)
        actual.append(rng.next_uniform())

    in_range = all(0.0 <= u <= 1.0 for u in actual)
    passed = actual == expected and in_range and rng.state == state
    message = f"First draw = {actual[0]:.10f}"
    details = {
        'expected': expected,
        'actual': actual,
        'final_state': rng.state
    }

    return passed, message, details


def check_box_muller_pairs() -> Tuple[bool, str, Dict]:
    seed = 2024
    rng = LCGRandom(seed=seed)
    z1 = rng.next_normal()
    z2 = rng.next_normal()

    # Same (u, v) pair by hand
    shadow = LCGRandom(seed=seed)
    u = shadow.next_uniform()
    v = shadow.next_uniform()
    mag = math.sqrt(-2.0 * math.log(u))
    angle = 2.0 * math.pi * v

    sine_first = math.isclose(z1, mag * math.sin(angle), rel_tol=0, abs_tol=1e-15)
    cosine_second = math.isclose(z2, mag * math.cos(angle), rel_tol=0, abs_tol=1e-15)
    # Two normals consume exactly two uniforms
    same_state = rng.state == shadow.state

    passed = sine_first and cosine_second and same_state
    message = f"z1={z1:.6f}, z2={z2:.6f}"
    details = {
        'sine_first': sine_first,
        'cosine_second': cosine_second,
        'same_state': same_state
    }

    return passed, message, details


def check_reseed_discards_spare() -> Tuple[bool, str, Dict]:
    rng = LCGRandom(seed=7)
    first = rng.next_normal()      # leaves a cached spare
    rng.reseed(7)
    again = rng.next_normal()      # must not return the stale spare

    passed = first == again
    message = f"first={first:.6f}, after reseed={again:.6f}"
    details = {'first': first, 'again': again}

    return passed, message, details


def check_normal_moments() -> Tuple[bool, str, Dict]:
    rng = LCGRandom(seed=99)
    n = 20000
    draws = [rng.next_normal() for _ in range(n)]
    mean = sum(draws) / n
    var = sum((z - mean) ** 2 for z in draws) / n

    passed = abs(mean) < 0.05 and abs(var - 1.0) < 0.05 and all(math.isfinite(z) for z in draws)
    message = f"mean={mean:.4f}, var={var:.4f}"
    details = {'mean': mean, 'variance': var}

    return passed, message, details


def test_lcg_recurrence():
    passed, message, _ = check_lcg_recurrence()
    assert passed, message


def test_box_muller_pairs():
    passed, message, _ = check_box_muller_pairs()
    assert passed, message


def test_reseed_discards_spare():
    passed, message, _ = check_reseed_discards_spare()
    assert passed, message


def test_normal_moments():
    passed, message, _ = check_normal_moments()
    assert passed, message


def test_zero_uniform_stays_finite():
    # State 0 is reached from this seed in one step: (s·a + c) mod 2³¹ = 0
    a_inv = pow(1103515245, -1, LCG_MODULUS)
    seed = ((-12345) * a_inv) % LCG_MODULUS
    rng = LCGRandom(seed=seed)
    z = rng.next_normal()
    assert math.isfinite(z)


def test_fixed_sequence_replays_and_exhausts():
    source = FixedNormalSequence([0.5, -1.0])
    assert source.next_normal() == 0.5
    assert source.next_normal() == -1.0
    assert source.remaining == 0
    with pytest.raises(IndexError):
        source.next_normal()

    cycling = FixedNormalSequence([1.0, 2.0], cycle=True)
    assert [cycling.next_normal() for _ in range(5)] == [1.0, 2.0, 1.0, 2.0, 1.0]

    with pytest.raises(ValueError):
        FixedNormalSequence([], cycle=True)
