#!/usr/bin/env python3
"""
Fixed-cadence scheduling driver.

SimulationDriver owns the authoritative body snapshot and the trajectory
buffer and threads them through successive ticks:

    bodies = integrator.step(bodies)
    trajectories.record(positions_of(bodies))

One tick runs at a time and only from the caller's loop. advance() converts
wall-clock time into ticks at `tick_interval`; stop() simply stops issuing
them. A SimulationError stops the driver and keeps the last valid snapshot.
"""
import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from .constants import (
    DEFAULT_DT,
    DEFAULT_SOFTENING,
    DEFAULT_TICK_INTERVAL,
    DEFAULT_TRAIL_CAPACITY,
    MAX_CATCHUP_TICKS,
)
from .data_models import Body, ConfigurationError, positions_of, validate_bodies
from .physics import Integrator, SimulationError
from .trajectory import Trajectory, TrajectoryBuffer

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Tunable simulation settings; validated on construction."""
    dt: float = DEFAULT_DT
    softening: float = DEFAULT_SOFTENING
    trail_capacity: int = DEFAULT_TRAIL_CAPACITY
    tick_interval: float = DEFAULT_TICK_INTERVAL
    max_catchup_ticks: int = MAX_CATCHUP_TICKS

    def __post_init__(self):
        if not self.dt > 0:
            raise ConfigurationError(f"dt must be positive, got {self.dt!r}")
        if self.softening < 0:
            raise ConfigurationError(f"softening must be non-negative, got {self.softening!r}")
        if int(self.trail_capacity) < 1:
            raise ConfigurationError(f"trail_capacity must be at least 1, got {self.trail_capacity!r}")
        if not self.tick_interval > 0:
            raise ConfigurationError(f"tick_interval must be positive, got {self.tick_interval!r}")
        if int(self.max_catchup_ticks) < 1:
            raise ConfigurationError(f"max_catchup_ticks must be at least 1, got {self.max_catchup_ticks!r}")


class SimulationDriver:
    """
    Owns the evolving simulation state and issues ticks at a fixed cadence.

    Attributes:
        bodies: current snapshot (tuple of Body), replaced every tick.
        trajectories: TrajectoryBuffer, one trail per body index.
        running: whether advance() issues ticks.
        elapsed: simulated seconds since the last reset.
        tick_count: ticks since the last reset.
        last_error: message of the failure that stopped the driver, if any.
    """

    def __init__(self, bodies: Iterable[Body], config: Optional[SimulationConfig] = None):
        self.config = replace(config) if config is not None else SimulationConfig()
        self.integrator = Integrator(self.config.dt, self.config.softening)
        self.bodies: Tuple[Body, ...] = ()
        self.trajectories = TrajectoryBuffer(0, self.config.trail_capacity)
        self.running = False
        self.elapsed = 0.0
        self.tick_count = 0
        self.last_error: Optional[str] = None
        self._accumulator = 0.0
        self.reset(bodies)

    # -----------------------
    # Running state
    # -----------------------

    def start(self) -> None:
        if not self.running:
            self.running = True
            self.last_error = None
            logger.info("Simulation started")

    def stop(self) -> None:
        if self.running:
            self.running = False
            self._accumulator = 0.0
            logger.info("Simulation stopped after %d ticks", self.tick_count)

    def toggle(self) -> bool:
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    # -----------------------
    # State management
    # -----------------------

    def reset(self, bodies: Iterable[Body]) -> None:
        """Replace the scene; trajectories and counters start over."""
        self.bodies = validate_bodies(bodies)
        self.trajectories = TrajectoryBuffer(len(self.bodies), self.config.trail_capacity)
        self.elapsed = 0.0
        self.tick_count = 0
        self.last_error = None
        self._accumulator = 0.0
        logger.info("Loaded %d bodies: %s", len(self.bodies), ", ".join(b.name for b in self.bodies))

    def set_dt(self, dt: float) -> None:
        if not dt > 0:
            raise ConfigurationError(f"dt must be positive, got {dt!r}")
        self.config.dt = float(dt)
        self.integrator.dt = float(dt)

    def set_trail_capacity(self, capacity: int) -> None:
        if int(capacity) < 1:
            raise ConfigurationError(f"trail_capacity must be at least 1, got {capacity!r}")
        self.config.trail_capacity = int(capacity)
        self.trajectories.resize(capacity)

    def clear_trails(self) -> None:
        self.trajectories.clear()

    def trails(self) -> Tuple[Trajectory, ...]:
        return self.trajectories.snapshot()

    # -----------------------
    # Ticking
    # -----------------------

    def tick(self) -> bool:
        """
        Run one integrator step and record one point per body.

        Returns True on success. On SimulationError the driver stops, keeps the
        previous snapshot and stores the message in last_error.
        """
        try:
            new_bodies = self.integrator.step(self.bodies)
        except SimulationError as exc:
            self.last_error = str(exc)
            logger.error("Integration failed at t=%.0f s: %s", self.elapsed, exc)
            self.stop()
            return False

        self.trajectories.record(positions_of(new_bodies))
        self.bodies = new_bodies
        self.elapsed += self.integrator.dt
        self.tick_count += 1
        logger.debug("Tick %d, t=%.0f s", self.tick_count, self.elapsed)
        return True

    def step_once(self) -> bool:
        """Manual single tick, allowed whether running or not."""
        return self.tick()

    def advance(self, real_elapsed: float) -> int:
        """
        Feed wall-clock time and issue the ticks that became due.

        Args:
            real_elapsed: wall-clock seconds since the previous call.

        Returns:
            Number of ticks performed.
        """
        if not self.running or real_elapsed <= 0:
            return 0

        interval = self.config.tick_interval
        self._accumulator += real_elapsed
        due = int(self._accumulator // interval)
        if due <= 0:
            return 0

        limit = int(self.config.max_catchup_ticks)
        if due > limit:
            logger.warning("Loop fell behind by %d ticks; dropping %d", due, due - limit)
            self._accumulator = 0.0
            due = limit
        else:
            self._accumulator -= due * interval

        done = 0
        for _ in range(due):
            if not self.tick():
                break
            done += 1
        return done
