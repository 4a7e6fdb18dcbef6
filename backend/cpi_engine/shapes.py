"""
Standardization shapes.

Every indicator maps its measured value to a 0-100 score through exactly one
of the functions below, parameterized by its benchmark constants. All of them
return a value clamped to [0, 100], including when the benchmark span is zero.
"""

import math
from typing import Callable, Dict, Optional

HIGHER = "higher"
LOWER = "lower"


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp a value into [low, high]."""
    return max(low, min(high, value))


def _check_better(better: str) -> None:
    if better not in (HIGHER, LOWER):
        raise ValueError(f"better must be '{HIGHER}' or '{LOWER}', got '{better}'")


def three_zone(value: float, lower: float, upper: float, better: str = HIGHER) -> float:
    """
    Flat below `lower`, flat above `upper`, linear in between.

    With better="higher" the score runs 0 -> 100 across the zone, with
    better="lower" it runs 100 -> 0.
    """
    _check_better(better)
    if value <= lower:
        fraction = 0.0
    elif value >= upper:
        fraction = 1.0
    else:
        # upper > lower is guaranteed here, so the span is non-zero
        fraction = (value - lower) / (upper - lower)

    if better == HIGHER:
        return clamp(100.0 * fraction)
    return clamp(100.0 * (1.0 - fraction))


def linear(value: float, min: float, max: float) -> float:
    """Linear-clamp: higher raw is better."""
    return three_zone(value, min, max, HIGHER)


def inverse_linear(value: float, min: float, max: float) -> float:
    """Inverse-linear-clamp: lower raw is better."""
    return three_zone(value, min, max, LOWER)


def deviation(
    value: float,
    target: float,
    span: Optional[float] = None,
    penalize: str = "both",
) -> float:
    """
    Symmetric deviation from an ideal target.

    score = 100 * (1 - |value - target| / span), span defaulting to |target|.
    penalize="above" scores everything at or below the target as 100,
    penalize="below" does the same for everything at or above it.
    """
    if penalize not in ("both", "above", "below"):
        raise ValueError(f"Unknown penalize mode '{penalize}'")
    if penalize == "above" and value <= target:
        return 100.0
    if penalize == "below" and value >= target:
        return 100.0

    span = abs(target) if span is None else abs(span)
    if span == 0:
        return 100.0 if value == target else 0.0
    return clamp(100.0 * (1.0 - abs(value - target) / span))


def _log(value: float) -> float:
    if value <= 0:
        return float("-inf")
    return math.log(value)


def _root(n: int) -> Callable[[float], float]:
    # sign-preserving, so negative inputs never turn complex
    return lambda x: math.copysign(abs(x) ** (1.0 / n), x)


TRANSFORMS: Dict[str, Callable[[float], float]] = {
    "log": _log,
    "sqrt": _root(2),
    "cbrt": _root(3),
    "root4": _root(4),
    "root5": _root(5),
}


def transformed(
    value: float,
    transform: str,
    min: Optional[float] = None,
    max: Optional[float] = None,
    t_min: Optional[float] = None,
    t_max: Optional[float] = None,
    t_floor: Optional[float] = None,
    t_ceiling: Optional[float] = None,
    better: str = HIGHER,
    scale: float = 100.0,
) -> float:
    """
    Root/log-transformed threshold.

    The value is transformed, then mapped linearly between the transformed
    benchmarks. Benchmarks are given either in raw units (min/max) or already
    transformed (t_min/t_max). The flat outer zones start at t_floor and
    t_ceiling, which default to the transformed benchmarks themselves.
    """
    _check_better(better)
    try:
        fn = TRANSFORMS[transform]
    except KeyError:
        raise ValueError(f"Unknown transform '{transform}'") from None

    lo = t_min if t_min is not None else fn(min)
    hi = t_max if t_max is not None else fn(max)
    floor = lo if t_floor is None else t_floor
    ceiling = hi if t_ceiling is None else t_ceiling

    t = fn(value)
    if t <= floor:
        return 0.0 if better == HIGHER else 100.0
    if t >= ceiling:
        return 100.0 if better == HIGHER else 0.0
    if hi == lo:
        return 100.0 if (t >= hi) == (better == HIGHER) else 0.0

    fraction = (t - lo) / (hi - lo)
    if better == HIGHER:
        return clamp(scale * fraction)
    return clamp(scale * (1.0 - fraction))


SHAPES: Dict[str, Callable[..., float]] = {
    "three_zone": three_zone,
    "linear": linear,
    "inverse_linear": inverse_linear,
    "deviation": deviation,
    "transformed": transformed,
}


def evaluate(shape: str, value: float, **params) -> float:
    """Dispatch a measured value to a named shape."""
    try:
        fn = SHAPES[shape]
    except KeyError:
        raise ValueError(f"Unknown shape '{shape}'") from None
    return fn(value, **params)
