#!/usr/bin/env python3
"""
Data models for the Three-Star System Simulator.

This module defines the Body record shared between the integrator, the
trajectory buffer, the driver and the renderer.

Units and usage
- position is in meters [m], velocity in meters per second [m/s], mass in kg.
- Body is frozen: every integration step builds new Body values with
  dataclasses.replace, so a snapshot handed to the renderer never changes.
- A simulation state is an ordered tuple of Body; the index of a body in that
  tuple is also the index of its trajectory.
"""
import math
from dataclasses import dataclass, replace
from typing import Iterable, Tuple

from .constants import DEFAULT_MARKER_RADIUS
from .vector_utils import Vec2, as_vec2, vec_is_finite

Color = Tuple[int, int, int]


class ConfigurationError(ValueError):
    """Raised when initial conditions or settings are invalid."""


@dataclass(frozen=True)
class Body:
    """
    A point mass taking part in mutual gravitation.

    Fields:
    - name: Identifier for the body, unique within a scene
    - mass: Mass in kilograms, strictly positive
    - position: 2D position (x, y) in meters
    - velocity: 2D velocity (vx, vy) in meters/second
    - color: RGB tuple used for rendering
    - marker_radius: Marker size in pixels used for rendering
    """
    name: str
    mass: float
    position: Vec2
    velocity: Vec2
    color: Color = (200, 200, 255)
    marker_radius: int = DEFAULT_MARKER_RADIUS

    def __post_init__(self):
        try:
            mass = float(self.mass)
            position = as_vec2(self.position)
            velocity = as_vec2(self.velocity)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Body {self.name!r}: {exc}") from exc
        if not math.isfinite(mass) or mass <= 0:
            raise ConfigurationError(f"Body {self.name!r}: mass must be positive, got {self.mass!r}")
        if not vec_is_finite(position):
            raise ConfigurationError(f"Body {self.name!r}: position must be finite, got {position!r}")
        if not vec_is_finite(velocity):
            raise ConfigurationError(f"Body {self.name!r}: velocity must be finite, got {velocity!r}")
        # Normalize to float tuples on the frozen instance.
        object.__setattr__(self, "mass", mass)
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "velocity", velocity)

    def with_state(self, position: Vec2, velocity: Vec2) -> "Body":
        """Return a copy with position and velocity replaced wholesale."""
        return replace(self, position=position, velocity=velocity)


def validate_bodies(bodies: Iterable[Body]) -> Tuple[Body, ...]:
    """
    Check a full scene and return it as an ordered tuple.

    Names must be unique and no two bodies may share a position, since the
    unsoftened force between coincident bodies is undefined.
    """
    state = tuple(bodies)
    seen_names = set()
    seen_positions = {}
    for body in state:
        if not isinstance(body, Body):
            raise ConfigurationError(f"Expected Body, got {type(body).__name__}")
        if body.name in seen_names:
            raise ConfigurationError(f"Duplicate body name {body.name!r}")
        seen_names.add(body.name)
        other = seen_positions.get(body.position)
        if other is not None:
            raise ConfigurationError(f"Bodies {other!r} and {body.name!r} share position {body.position!r}")
        seen_positions[body.position] = body.name
    return state


def positions_of(bodies: Iterable[Body]) -> Tuple[Vec2, ...]:
    return tuple(body.position for body in bodies)
