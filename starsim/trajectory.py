#!/usr/bin/env python3
"""
Bounded per-body position history used for drawing orbit paths.

Two forms are provided:
- record(): a pure function over tuples. The caller threads the returned
  value into the next call; the input is never modified.
- TrajectoryBuffer: one deque(maxlen=capacity) per body, owned by the driver,
  with O(1) append and eviction. snapshot() hands immutable copies to the
  renderer.

In both forms trajectory i belongs to body i of the simulation state.
"""
from collections import deque
from typing import Deque, List, Sequence, Tuple

from .constants import DEFAULT_TRAIL_CAPACITY
from .vector_utils import Vec2

Trajectory = Tuple[Vec2, ...]


def _check_capacity(capacity: int) -> int:
    capacity = int(capacity)
    if capacity < 1:
        raise ValueError(f"capacity must be at least 1, got {capacity}")
    return capacity


def record(buffers: Sequence[Sequence[Vec2]], new_positions: Sequence[Vec2],
           capacity: int = DEFAULT_TRAIL_CAPACITY) -> Tuple[Trajectory, ...]:
    """
    Append one position per body and keep only the most recent `capacity` points.

    Args:
        buffers: Current trajectories, one per body, oldest point first.
        new_positions: Position to append for each body, same order as buffers.
        capacity: Maximum number of points kept per body (>= 1).

    Returns:
        New tuple of trajectories; `buffers` is left untouched.
    """
    capacity = _check_capacity(capacity)
    if len(buffers) != len(new_positions):
        raise ValueError(f"got {len(new_positions)} positions for {len(buffers)} trajectories")
    return tuple(
        (tuple(points) + (tuple(point),))[-capacity:]
        for points, point in zip(buffers, new_positions)
    )


class TrajectoryBuffer:
    """Ring buffer of recent positions for a fixed number of bodies."""

    def __init__(self, body_count: int, capacity: int = DEFAULT_TRAIL_CAPACITY):
        self._capacity = _check_capacity(capacity)
        self._trails: List[Deque[Vec2]] = [deque(maxlen=self._capacity) for _ in range(body_count)]

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._trails)

    def record(self, new_positions: Sequence[Vec2]) -> None:
        """Append one position per body; the oldest point drops once a trail is full."""
        if len(new_positions) != len(self._trails):
            raise ValueError(f"got {len(new_positions)} positions for {len(self._trails)} trajectories")
        for trail, point in zip(self._trails, new_positions):
            trail.append(tuple(point))

    def trail(self, index: int) -> Trajectory:
        return tuple(self._trails[index])

    def latest(self, index: int):
        """Most recently recorded point for body `index`, or None if empty."""
        trail = self._trails[index]
        return trail[-1] if trail else None

    def snapshot(self) -> Tuple[Trajectory, ...]:
        return tuple(tuple(trail) for trail in self._trails)

    def clear(self) -> None:
        for trail in self._trails:
            trail.clear()

    def resize(self, capacity: int) -> None:
        """Change the capacity, keeping the most recent points."""
        self._capacity = _check_capacity(capacity)
        self._trails = [deque(trail, maxlen=self._capacity) for trail in self._trails]
