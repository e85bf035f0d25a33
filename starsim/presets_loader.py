#!/usr/bin/env python3
"""
Scene presets: built-in initial conditions and JSON templates.

Template JSON (templates/*.json):
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "dt": 86400.0,                     # optional, simulated seconds per tick
  "bodies": [
    {
      "name": "Star 1",
      "mass": 1.689e30,
      "position": [0.0, 0.0],
      "velocity": [0.0, 0.0],
      "color": "#FFD700",            # or [255, 215, 0]
      "marker_radius": 10            # optional, pixels
    }
  ]
}

Invalid templates raise ConfigurationError; a scene with a non-positive mass is
rejected here, before the integrator ever sees it.
"""
import json
import logging
import os
from typing import List, Optional, Tuple

from .constants import DEFAULT_MARKER_RADIUS
from .data_models import Body, Color, ConfigurationError, validate_bodies
from .physics import circular_orbit_velocity

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")

THREE_STAR_SYSTEM = "Three-star system"
TWO_BODY_CIRCULAR = "Two-body circular"


def three_star_system() -> Tuple[Body, ...]:
    """Three stars and one Earth-mass planet in a loose, non-hierarchical configuration."""
    return validate_bodies([
        Body("Star 1", 1.689e30, (0.0, 0.0), (0.0, 0.0), coerce_color("#FFD700")),
        Body("Star 2", 1.5e30, (0.0, 1.5e11), (0.0, 2e4), coerce_color("#FFA500")),
        Body("Star 3", 1.9e30, (-1.1e11, 0.0), (0.0, -2e4), coerce_color("#FF4500")),
        Body("Planet", 5.972e24, (1e11, 0.0), (0.0, 3e4), coerce_color("#1E90FF"), marker_radius=5),
    ])


def two_body_circular(primary_mass: float = 1e30, secondary_mass: float = 1e29,
                      separation: float = 1e11) -> Tuple[Body, ...]:
    """
    Two bodies on circular orbits about their common center of mass.

    The relative speed is sqrt(G * (M + m) / r), split so that total momentum is zero.
    """
    v_rel = circular_orbit_velocity(primary_mass + secondary_mass, separation)
    total = primary_mass + secondary_mass
    return validate_bodies([
        Body("Primary", primary_mass, (0.0, 0.0), (0.0, -v_rel * secondary_mass / total),
             coerce_color("#FFD700")),
        Body("Secondary", secondary_mass, (separation, 0.0), (0.0, v_rel * primary_mass / total),
             coerce_color("#1E90FF"), marker_radius=5),
    ])


BUILTIN_PRESETS = {
    THREE_STAR_SYSTEM: three_star_system,
    TWO_BODY_CIRCULAR: two_body_circular,
}


def coerce_color(c) -> Color:
    """Accept "#RRGGBB" or an [r, g, b] sequence and clamp to 0..255."""
    try:
        if isinstance(c, str):
            text = c.lstrip("#")
            if len(text) != 6:
                raise ValueError(c)
            r, g, b = int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)
        else:
            r, g, b = int(c[0]), int(c[1]), int(c[2])
    except (TypeError, ValueError, IndexError) as exc:
        raise ConfigurationError(f"Invalid color {c!r}") from exc
    r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
    return (r, g, b)


def body_from_dict(data: dict) -> Body:
    name = data.get("name", "Body")
    try:
        return Body(
            name=name,
            mass=float(data["mass"]),
            position=(float(data["position"][0]), float(data["position"][1])),
            velocity=(float(data["velocity"][0]), float(data["velocity"][1])),
            color=coerce_color(data.get("color", [200, 200, 255])),
            marker_radius=int(data.get("marker_radius", DEFAULT_MARKER_RADIUS)),
        )
    except ConfigurationError:
        raise
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Body {name!r}: missing or invalid field ({exc})") from exc


def _read_json(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"{os.path.basename(path)}: invalid JSON ({exc})") from exc
    except OSError as exc:
        raise ConfigurationError(f"{os.path.basename(path)}: cannot read template ({exc})") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{os.path.basename(path)}: expected a JSON object")
    return data


def list_templates(directory: str = TEMPLATES_DIR) -> List[Tuple[str, str]]:
    """Return list of (file_name, display_name) for available templates."""
    items: List[Tuple[str, str]] = []
    if not os.path.isdir(directory):
        return items
    for fn in sorted(os.listdir(directory)):
        if not fn.lower().endswith(".json"):
            continue
        try:
            display = _read_json(os.path.join(directory, fn)).get("name") or os.path.splitext(fn)[0]
        except ConfigurationError as exc:
            logger.warning("Skipping template %s: %s", fn, exc)
            continue
        items.append((fn, display))
    return items


def load_template(file_name: str, directory: str = TEMPLATES_DIR) -> Tuple[Tuple[Body, ...], Optional[float], str]:
    """
    Load a template JSON by file name.
    Returns (bodies, dt, display_name); dt is None when the template does not set it.
    """
    path = os.path.join(directory, file_name)
    data = _read_json(path)
    display_name = data.get("name") or os.path.splitext(file_name)[0]
    dt = data.get("dt")
    if dt is not None:
        try:
            dt = float(dt)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{file_name}: invalid dt {dt!r}") from exc
        if not dt > 0:
            raise ConfigurationError(f"{file_name}: dt must be positive, got {dt!r}")
    raw_bodies = data.get("bodies", [])
    if not isinstance(raw_bodies, list):
        raise ConfigurationError(f"{file_name}: 'bodies' must be a list")
    try:
        bodies = validate_bodies(body_from_dict(b) for b in raw_bodies)
    except ConfigurationError as exc:
        raise ConfigurationError(f"{file_name}: {exc}") from exc
    logger.info("Loaded template %r with %d bodies", display_name, len(bodies))
    return bodies, dt, display_name


def load_preset(name: str, directory: str = TEMPLATES_DIR) -> Tuple[Tuple[Body, ...], Optional[float]]:
    """Resolve a preset by display name: JSON templates first, then built-ins."""
    for fn, display in list_templates(directory):
        if display == name:
            bodies, dt, _ = load_template(fn, directory)
            return bodies, dt
    if name in BUILTIN_PRESETS:
        return BUILTIN_PRESETS[name](), None
    raise ConfigurationError(f"Unknown preset {name!r}")


def preset_names(directory: str = TEMPLATES_DIR) -> List[str]:
    names = [display for _, display in list_templates(directory)]
    names.extend(n for n in BUILTIN_PRESETS if n not in names)
    return names
