#!/usr/bin/env python3
"""
Three-Star System Simulator application entry point.

What this module does
- Builds a SimulationDriver around the default scene (three stars and a planet).
- Opens a Pygame viewport that draws each body's trajectory as a polyline and
  its current position as a filled circle.
- Opens a Dear PyGui control panel: play/pause, single step, clear trails,
  trail capacity, time step, preset selection and a status line.

Loop model
- One thread. Each pass of the main loop: handle viewport input, feed elapsed
  wall time to the driver (which issues ticks every tick_interval), draw the
  viewport, render one Dear PyGui frame. Ticks, drawing and UI never overlap,
  so no locking is needed.

Units and conventions
- SI units throughout: meters [m], kilograms [kg], seconds [s].
- The camera stores meters-per-pixel; the default 1e9 m/px shows 1e11 m as 100 px.
- Colors are RGB tuples in 0..255.

Running
1) Install the project: `pip install -e .`
2) Run this module: `python three_star_sim.py`
"""

import logging
import time
from typing import Optional

import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from starsim.camera import Camera2D
from starsim.constants import (
    BACKGROUND_COLOR,
    FRAME_RATE,
    HUD_TEXT_COLOR,
    SAFE_COORD_LIMIT,
    SECONDS_PER_DAY,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from starsim.data_models import ConfigurationError
from starsim.driver import SimulationConfig, SimulationDriver
from starsim.physics import SimulationError, total_energy
from starsim.presets_loader import THREE_STAR_SYSTEM, load_preset, preset_names
from starsim.utils import try_float, try_positive_int

logger = logging.getLogger(__name__)

# ============================================================
# Pygame Viewport
# ============================================================


class PygameRenderer:
    """
    Pygame viewport: draws trajectories and bodies, handles pan and zoom.
    Reads the driver's snapshots only; never touches simulation state.
    """

    def __init__(self, driver: SimulationDriver):
        self.driver = driver
        self.camera = Camera2D(center=(0.0, 0.0))
        self.surface = None
        self.font = None
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.closed = False

    def open(self):
        pygame.init()
        pygame.display.set_caption("Three-Star System - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.font = pygame.font.SysFont("consolas", 16)

    def close(self):
        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.closed = True

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
                self.driver.toggle()

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0 / 1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button in (1, 2, 3):
                self.dragging_background = True
                self.drag_start_screen = pygame.mouse.get_pos()

            elif event.type == pygame.MOUSEBUTTONUP and event.button in (1, 2, 3):
                self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION and self.dragging_background:
                mouse = pygame.mouse.get_pos()
                self.camera.pan_pixels(mouse[0] - self.drag_start_screen[0],
                                       mouse[1] - self.drag_start_screen[1])
                self.drag_start_screen = mouse

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        bodies = self.driver.bodies
        trails = self.driver.trails()

        # Trajectories first so markers sit on top
        for body, trail in zip(bodies, trails):
            pts = [p for p in (_safe_point(self.camera.world_to_screen(t)) for t in trail) if p]
            if len(pts) > 1:
                pygame.draw.aalines(surf, body.color, False, pts)

        for body in bodies:
            pos = _safe_point(self.camera.world_to_screen(body.position))
            if pos:
                gfxdraw.filled_circle(surf, pos[0], pos[1], body.marker_radius, body.color)
                gfxdraw.aacircle(surf, pos[0], pos[1], body.marker_radius, body.color)

        days = self.driver.elapsed / SECONDS_PER_DAY
        state = "Playing" if self.driver.running else "Paused"
        self._draw_text(f"Day {days:.0f}  [{state}]", 10, 10)
        self._draw_text("Space: Pause/Play | Drag: pan | Wheel: zoom", 10, 30)
        if self.driver.last_error:
            self._draw_text(self.driver.last_error, 10, 50, (255, 120, 120))

        pygame.display.flip()

    def _draw_text(self, text, x, y, color=HUD_TEXT_COLOR):
        img = self.font.render(text, True, color)
        self.surface.blit(img, (x, y))


def _safe_point(pt):
    x, y = pt
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui Control Panel
# ============================================================


class ControlPanel:
    """
    Dear PyGui interface: presets, simulation controls and a status line.
    """

    def __init__(self, driver: SimulationDriver, renderer: PygameRenderer):
        self.driver = driver
        self.renderer = renderer
        self.status_msg_id = None
        self.readout_id = None
        self._initial_energy: Optional[float] = None
        self._build_ui()

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title="Three-Star System - Controls", width=460, height=320)

        with dpg.window(label="Controls", width=440, height=300, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Preset:")
                names = preset_names()
                dpg.add_combo(names, default_value=THREE_STAR_SYSTEM if THREE_STAR_SYSTEM in names else names[0],
                              width=220, tag="preset_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_preset(dpg.get_value("preset_combo")))

            dpg.add_separator()
            dpg.add_text("Simulation Controls")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Step", callback=self._step_once)
                dpg.add_button(label="Clear trails", callback=self._clear_trails)
                dpg.add_button(label="Reset view", callback=self.renderer.camera.reset)
            dpg.add_input_int(label="Trail capacity", default_value=self.driver.config.trail_capacity,
                              min_value=1, min_clamped=True, width=120,
                              callback=self._on_trail_capacity, tag="trail_capacity_input")
            dpg.add_input_text(label="dt (s)", default_value=f"{self.driver.config.dt:g}", width=120,
                               on_enter=True, callback=self._on_dt, tag="dt_input")

            dpg.add_separator()
            self.readout_id = dpg.add_text("")
            self.status_msg_id = dpg.add_text("Ready.", color=(180, 220, 180))

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def is_open(self) -> bool:
        return dpg.is_dearpygui_running()

    def render_frame(self):
        self._sync_readout()
        dpg.render_dearpygui_frame()

    def close(self):
        dpg.destroy_context()

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _toggle_play(self):
        playing = self.driver.toggle()
        self._set_status(f"Simulation {'Playing' if playing else 'Paused'}.")

    def _step_once(self):
        if self.driver.step_once():
            self._set_status("Stepped one tick.")

    def _clear_trails(self):
        self.driver.clear_trails()
        self._set_status("Trails cleared.")

    def _on_trail_capacity(self, sender, app_data, user_data=None):
        capacity = try_positive_int(app_data)
        if capacity is None:
            self._set_error("Trail capacity must be a positive integer.")
            return
        self.driver.set_trail_capacity(capacity)
        self._set_status(f"Trail capacity set to {capacity}.")

    def _on_dt(self, sender, app_data, user_data=None):
        dt = try_float(app_data)
        if dt is None or dt <= 0:
            self._set_error("dt must be a positive number of seconds.")
            return
        self.driver.set_dt(dt)
        self._set_status(f"Time step set to {dt:g} s.")

    def load_preset(self, name: str):
        try:
            bodies, dt = load_preset(name.strip())
        except (ConfigurationError, OSError) as exc:
            logger.error("Failed to load preset %r: %s", name, exc)
            self._set_error(f"Failed to load preset: {exc}")
            return
        self.driver.reset(bodies)
        if dt is not None:
            self.driver.set_dt(dt)
            dpg.set_value("dt_input", f"{dt:g}")
        self._initial_energy = None
        self.renderer.camera.reset()
        self._set_status(f"Loaded preset: {name}")

    def _sync_readout(self):
        if self.driver.last_error:
            self._set_error(self.driver.last_error)
        text, energy, error = describe_state(self.driver, self._initial_energy)
        if error:
            self._set_error(error)
        if self._initial_energy is None:
            self._initial_energy = energy
        dpg.set_value(self.readout_id, text)


def describe_state(driver: SimulationDriver, initial_energy: Optional[float]):
    """
    Build the panel readout for the current snapshot.

    Returns (text, energy, error); energy is None when it cannot be computed
    and error carries the SimulationError message in that case.
    """
    if not driver.bodies:
        return "No bodies.", None, None
    days = driver.elapsed / SECONDS_PER_DAY
    try:
        energy = total_energy(driver.bodies, driver.config.softening)
    except SimulationError as exc:
        return f"Day {days:.0f} | ticks {driver.tick_count} | energy unavailable", None, str(exc)
    reference = energy if initial_energy is None else initial_energy
    drift = (energy - reference) / abs(reference) if reference else 0.0
    return f"Day {days:.0f} | ticks {driver.tick_count} | energy drift {drift:+.3%}", energy, None


# ============================================================
# Application Entry
# ============================================================


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    bodies, dt = load_preset(THREE_STAR_SYSTEM)
    config = SimulationConfig() if dt is None else SimulationConfig(dt=dt)
    driver = SimulationDriver(bodies, config)

    renderer = PygameRenderer(driver)
    renderer.open()
    panel = ControlPanel(driver, renderer)
    clock = pygame.time.Clock()

    driver.start()
    last_time = time.perf_counter()
    try:
        while not renderer.closed and panel.is_open():
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            renderer.handle_events()
            driver.advance(real_dt)
            renderer.draw()
            panel.render_frame()

            clock.tick(FRAME_RATE)
    finally:
        driver.stop()
        panel.close()
        renderer.close()


if __name__ == "__main__":
    main()
