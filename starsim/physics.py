#!/usr/bin/env python3
"""
Core Physics Engine for the Three-Star System Simulator

Responsibilities
- Compute pairwise gravitational forces by direct summation, optionally with
  Plummer softening.
- Advance a full body snapshot by one fixed time step.
- Provide diagnostics (momentum, energy, center of mass) and small orbital helpers.

Units and conventions
- World space positions are in meters [m].
- Velocities are in meters per second [m/s].
- Masses are in kilograms [kg].
- Time steps are in seconds [s].
- The gravitational constant G is expressed in SI: m^3 kg^-1 s^-2.

Update rule
- All forces are computed from the previous snapshot before any body is updated.
- v' = v + (F / m) * dt and x' = x + v * dt, where the position update uses the
  velocity from the start of the step. Changing that ordering changes the
  numerical behavior of every preset and of the regression tests.

Numerical notes
- Softening: with eps > 0 the force magnitude is G*m_i*m_j*r / (r^2 + eps^2)^(3/2).
  With eps == 0 (the default) gravity is exact and coincident bodies raise
  CoincidentBodiesError instead of producing infinities.
- Complexity: O(N^2) per step. The scene holds a handful of bodies.
- Momentum: pairwise forces are equal and opposite, so total momentum is kept
  up to rounding error. Energy drifts upward with this scheme; see total_energy.

Threading
- Everything here is pure compute. step() never mutates its input and keeps no
  reference to it after returning.
"""

import math
from typing import List, Sequence, Tuple

from .constants import DEFAULT_DT, DEFAULT_SOFTENING, G
from .data_models import Body
from .vector_utils import Vec2, vec_add, vec_is_finite, vec_len, vec_scale, vec_sub


class SimulationError(RuntimeError):
    """Base class for failures detected while integrating."""


class CoincidentBodiesError(SimulationError):
    """Two bodies sit at zero separation and no softening is configured."""

    def __init__(self, first: str, second: str):
        super().__init__(f"Bodies {first!r} and {second!r} are coincident; force is undefined")
        self.first = first
        self.second = second


class NonFiniteStateError(SimulationError):
    """A step produced NaN or infinite position or velocity."""

    def __init__(self, name: str):
        super().__init__(f"Body {name!r} reached a non-finite state")
        self.name = name


def compute_forces(bodies: Sequence[Body], softening: float = DEFAULT_SOFTENING) -> List[Vec2]:
    """
    Compute the net gravitational force on every body.

    For each body i, sums over every other body j:

        F_ij = G * m_i * m_j * r_ij / (|r_ij|^2 + eps^2)^(3/2)

    where r_ij = x_j - x_i. With eps == 0 this is G * m_i * m_j / r^2 along
    the unit vector from i to j.

    Args:
        bodies: Snapshot to read; never modified.
        softening: Plummer softening length eps in meters (>= 0).

    Returns:
        List of (fx, fy) forces in newtons, same order as the input.

    Raises:
        CoincidentBodiesError: two bodies share a position and eps == 0.
    """
    n = len(bodies)
    eps_squared = softening * softening
    forces: List[Vec2] = []

    for i in range(n):
        bi = bodies[i]
        fx_total, fy_total = 0.0, 0.0
        for j in range(n):
            if i == j:
                continue
            bj = bodies[j]
            dx, dy = vec_sub(bj.position, bi.position)
            r_squared = dx * dx + dy * dy + eps_squared
            if r_squared == 0.0:
                raise CoincidentBodiesError(bi.name, bj.name)
            # G m_i m_j / r^3, multiplied by the separation vector below.
            # Divide twice so r^3 cannot underflow to zero for tiny r.
            scale = G * bi.mass * bj.mass / r_squared / math.sqrt(r_squared)
            fx_total += dx * scale
            fy_total += dy * scale
        forces.append((fx_total, fy_total))

    return forces


def step(bodies: Sequence[Body], dt: float = DEFAULT_DT,
         softening: float = DEFAULT_SOFTENING) -> Tuple[Body, ...]:
    """
    Advance a snapshot by one time step and return the new snapshot.

    Args:
        bodies: Current snapshot, left untouched.
        dt: Time step in seconds (> 0).
        softening: Plummer softening length in meters (>= 0).

    Returns:
        Tuple of new Body values in input order, with the same name, mass and color.
    """
    if not dt > 0:
        raise ValueError(f"dt must be positive, got {dt!r}")
    if softening < 0:
        raise ValueError(f"softening must be non-negative, got {softening!r}")
    if not bodies:
        return ()

    forces = compute_forces(bodies, softening)

    updated = []
    for body, force in zip(bodies, forces):
        acceleration = vec_scale(force, 1.0 / body.mass)
        velocity = vec_add(body.velocity, vec_scale(acceleration, dt))
        position = vec_add(body.position, vec_scale(body.velocity, dt))
        if not (vec_is_finite(position) and vec_is_finite(velocity)):
            raise NonFiniteStateError(body.name)
        updated.append(body.with_state(position, velocity))
    return tuple(updated)


class Integrator:
    """
    Fixed-step integrator configuration.

    Holds dt and the softening length; step() delegates to the module-level
    pure function, so an Integrator keeps nothing between calls.
    """

    def __init__(self, dt: float = DEFAULT_DT, softening: float = DEFAULT_SOFTENING):
        """
        Args:
            dt: Simulated seconds per step (> 0)
            softening: Softening length in meters (>= 0)
        """
        if not dt > 0:
            raise ValueError(f"dt must be positive, got {dt!r}")
        self.dt = float(dt)
        self.softening = max(0.0, float(softening))

    def set_softening(self, softening: float) -> None:
        self.softening = max(0.0, float(softening))

    def step(self, bodies: Sequence[Body]) -> Tuple[Body, ...]:
        return step(bodies, self.dt, self.softening)


# ------------------------------------------------------------
# Diagnostics
# ------------------------------------------------------------

def total_momentum(bodies: Sequence[Body]) -> Vec2:
    """Vector sum of m * v over all bodies, in kg m/s."""
    px, py = 0.0, 0.0
    for body in bodies:
        px += body.mass * body.velocity[0]
        py += body.mass * body.velocity[1]
    return (px, py)


def center_of_mass(bodies: Sequence[Body]) -> Vec2:
    total = sum(body.mass for body in bodies)
    if total <= 0:
        return (0.0, 0.0)
    cx = sum(body.mass * body.position[0] for body in bodies) / total
    cy = sum(body.mass * body.position[1] for body in bodies) / total
    return (cx, cy)


def kinetic_energy(bodies: Sequence[Body]) -> float:
    return sum(0.5 * body.mass * (body.velocity[0] ** 2 + body.velocity[1] ** 2) for body in bodies)


def potential_energy(bodies: Sequence[Body], softening: float = DEFAULT_SOFTENING) -> float:
    """Pairwise gravitational potential energy, each pair counted once."""
    eps_squared = softening * softening
    energy = 0.0
    n = len(bodies)
    for i in range(n):
        for j in range(i + 1, n):
            r = vec_len(vec_sub(bodies[j].position, bodies[i].position))
            r_soft = math.sqrt(r * r + eps_squared)
            if r_soft == 0.0:
                raise CoincidentBodiesError(bodies[i].name, bodies[j].name)
            energy -= G * bodies[i].mass * bodies[j].mass / r_soft
    return energy


def total_energy(bodies: Sequence[Body], softening: float = DEFAULT_SOFTENING) -> float:
    return kinetic_energy(bodies) + potential_energy(bodies, softening)


# ------------------------------------------------------------
# Orbital helpers
# ------------------------------------------------------------

def circular_orbit_velocity(central_mass: float, orbital_radius: float) -> float:
    """
    Calculate the velocity needed for a circular orbit.

    For a circular orbit, gravity provides exactly the centripetal force:
    G * M / r = v^2 / r, therefore v = sqrt(G * M / r).

    For a two-body system pass the combined mass to get the relative velocity.

    Args:
        central_mass: Mass of the central body in kg
        orbital_radius: Orbital radius in meters

    Returns:
        Orbital velocity in m/s for a circular orbit
    """
    if orbital_radius <= 0:
        return 0.0

    return math.sqrt(G * central_mass / orbital_radius)


def orbital_period(total_mass: float, semi_major_axis: float) -> float:
    """Kepler's third law: T = 2 pi sqrt(a^3 / (G M)), in seconds."""
    if total_mass <= 0 or semi_major_axis <= 0:
        return 0.0
    return 2.0 * math.pi * math.sqrt(semi_major_axis ** 3 / (G * total_mass))
