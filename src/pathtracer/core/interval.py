"""Numeric interval used for valid hit distances and color clamping.

An interval is a [min, max] pair. The empty interval [+inf, -inf] contains
nothing and is the natural starting value when no valid range exists yet.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.core.interval import interval_clamp, make_interval
    >>> @ti.kernel
    ... def saturate(x: ti.f64) -> ti.f64:
    ...     return interval_clamp(make_interval(0.0, 0.999), x)
"""

import math

import taichi as ti

from src.pathtracer.core.vec3 import real

INFINITY = math.inf


@ti.dataclass
class Interval:
    """A closed range of real numbers.

    Attributes:
        min: Lower bound.
        max: Upper bound. An interval with max < min is empty.
    """

    min: real
    max: real


@ti.func
def make_interval(min_value: real, max_value: real) -> Interval:
    """Create an interval from explicit bounds."""
    return Interval(min=min_value, max=max_value)


@ti.func
def empty_interval() -> Interval:
    """Return the empty interval [+inf, -inf]."""
    return Interval(min=INFINITY, max=-INFINITY)


@ti.func
def universe_interval() -> Interval:
    """Return the interval covering every real number."""
    return Interval(min=-INFINITY, max=INFINITY)


@ti.func
def interval_size(interval: Interval) -> real:
    """Return max - min (negative for the empty interval)."""
    return interval.max - interval.min


@ti.func
def interval_contains(interval: Interval, x: real) -> ti.i32:
    """Return 1 if min <= x <= max."""
    result = 0
    if interval.min <= x and x <= interval.max:
        result = 1
    return result


@ti.func
def interval_surrounds(interval: Interval, x: real) -> ti.i32:
    """Return 1 if min < x < max.

    Both bounds are excluded. The ray-distance lower bound relies on this to
    keep a scattered ray from re-hitting the surface it starts on.
    """
    result = 0
    if interval.min < x and x < interval.max:
        result = 1
    return result


@ti.func
def interval_clamp(interval: Interval, x: real) -> real:
    """Saturate x into [min, max]."""
    result = x
    if x < interval.min:
        result = interval.min
    elif x > interval.max:
        result = interval.max
    return result
