#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

Vectors are plain (x, y) tuples so that body snapshots stay immutable.
"""
import math
from typing import Tuple

Vec2 = Tuple[float, float]


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(a: Vec2, s: float) -> Vec2:
    return (a[0] * s, a[1] * s)


def vec_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def vec_is_finite(a: Vec2) -> bool:
    return math.isfinite(a[0]) and math.isfinite(a[1])


def as_vec2(value) -> Vec2:
    """Coerce a 2-sequence of numbers into an (x, y) float tuple."""
    x, y = value
    return (float(x), float(y))
