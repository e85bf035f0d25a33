#!/usr/bin/env python3
"""
Shared constants for the Three-Star System Simulator (SI units unless stated otherwise).

Keeping constants in one place keeps the physics core, the driver and the
renderer agreeing on units. Positions are meters and the renderer scale is
meters-per-pixel, so a 1e11 m separation spans 100 px at the default scale.
"""

# Physical constants
G = 6.6743e-11  # m^3 kg^-1 s^-2
SECONDS_PER_DAY = 86400.0

# Simulation defaults
DEFAULT_DT = SECONDS_PER_DAY  # simulated seconds per tick
DEFAULT_SOFTENING = 0.0  # m; 0 means exact Newtonian gravity
DEFAULT_TRAIL_CAPACITY = 1000  # points kept per body
DEFAULT_TICK_INTERVAL = 0.05  # wall-clock seconds between ticks
MAX_CATCHUP_TICKS = 5  # ticks issued per frame when the loop falls behind

# Rendering (viewport)
VIEW_WIDTH = 800
VIEW_HEIGHT = 600
FRAME_RATE = 60
BACKGROUND_COLOR = (17, 17, 17)
HUD_TEXT_COLOR = (200, 200, 200)
DEFAULT_MARKER_RADIUS = 10  # px

# Camera zoom bounds (meters-per-pixel)
DEFAULT_METERS_PER_PIXEL = 1e9
MIN_METERS_PER_PIXEL = 1e6
MAX_METERS_PER_PIXEL = 1e12

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
