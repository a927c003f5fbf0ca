"""Error function and binomial distribution approximations."""

from __future__ import annotations

import math

_A1 = 0.254_829_592
_A2 = -0.284_496_736
_A3 = 1.421_413_741
_A4 = -1.453_152_027
_A5 = 1.061_405_429
_P = 0.327_591_1


def erf(x: float) -> float:
    """Error function, Abramowitz and Stegun approximation 7.1.26."""
    sign = -1.0 if x < 0.0 else 1.0
    x = abs(x)
    t = 1.0 / (_P * x + 1.0)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    return sign * (1.0 - poly * math.exp(-x * x))


def binomial_normal_approximate_cdf(n: int, p: float, k: int) -> float:
    """P(X <= k) for X ~ Binomial(n, p), by normal approximation."""
    if k >= n:
        return 1.0
    if p <= 0.0:
        return 1.0 if k == 0 else 0.0
    if p >= 1.0:
        return 0.0

    mean = n * p
    std_dev = math.sqrt(n * p * (1.0 - p))
    # Continuity correction at k + 0.5
    z = (k + 0.5 - mean) / (math.sqrt(2.0) * std_dev)
    return 0.5 * (1.0 - erf(-z))