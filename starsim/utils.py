#!/usr/bin/env python3
"""
General utilities for the Three-Star System Simulator.
"""
from typing import Optional


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def try_positive_int(val) -> Optional[int]:
    try:
        n = int(val)
    except (TypeError, ValueError):
        return None
    return n if n > 0 else None
