#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Celestial Body Configuration

Static description of the simulated system: one CelestialBody per object,
satellites nested under their parent. The table is validated once when it
is loaded. Pose computation assumes valid input and does not re-check it.

Body table files are JSON lists using the keys of the original orrery
configuration:

    [
      {"name": "Earth", "radius": 0.013, "rotPeriod": 23.9,
       "elements": {"a": 1.0, "e": 0.016708, "i": 0.00005,
                    "L": 100.46435, "w": 102.94719, "o": 0},
       "satellites": [{"name": "Moon", ..., "distanceFactor": 50.0}]}
    ]
"""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from .orbit import OrbitalElements

logger = logging.getLogger(__name__)

# Orbital distance multiplier for satellites without an explicit distanceFactor
SATELLITE_DISTANCE_FACTOR = 50.0

_ELEMENT_KEYS = ("a", "e", "i", "L", "w", "o")


class BodyConfigError(ValueError):
    """Raised when a body table entry is invalid."""


@dataclass(frozen=True)
class CelestialBody:
    """
    A simulated body and its satellites.

    Attributes
    ----------
    name : str
        Unique identifier
    radius : float
        Base visual size, multiplied by the planet visual scale
    rot_period : float
        Hours per rotation; negative values spin retrograde
    elements : OrbitalElements
        Epoch orbital elements relative to the parent
    distance_factor : float, optional
        Satellite-only orbital distance multiplier
    satellites : tuple
        Child bodies
    is_star : bool
        Marks the central star
    """
    name: str
    radius: float
    rot_period: float
    elements: OrbitalElements
    distance_factor: Optional[float] = None
    satellites: Tuple["CelestialBody", ...] = ()
    is_star: bool = False

    @property
    def effective_distance_factor(self) -> float:
        """Distance factor applied when this body orbits another body."""
        if self.distance_factor is None:
            return SATELLITE_DISTANCE_FACTOR
        return self.distance_factor

    def iter_tree(self) -> Iterator["CelestialBody"]:
        """Yield this body and all descendants, depth-first."""
        yield self
        for satellite in self.satellites:
            yield from satellite.iter_tree()


def iter_bodies(bodies: Sequence[CelestialBody]) -> Iterator[CelestialBody]:
    """Yield every body of a table depth-first, in configuration order."""
    for body in bodies:
        yield from body.iter_tree()


def find_body(bodies: Sequence[CelestialBody], name: str) -> Optional[CelestialBody]:
    """Look up a body anywhere in the table by name."""
    for body in iter_bodies(bodies):
        if body.name == name:
            return body
    return None


def validate_body(body: CelestialBody) -> None:
    """
    Check a single body (not its satellites).

    Raises
    ------
    BodyConfigError
        If a value is NaN or infinite, the rotation period is zero, the
        radius or distance factor is not positive, or the orbital elements
        are out of range.
    """
    if not body.name:
        raise BodyConfigError("Body name must not be empty")
    values = {"radius": body.radius, "rotPeriod": body.rot_period}
    if body.distance_factor is not None:
        values["distanceFactor"] = body.distance_factor
    values.update((key, getattr(body.elements, key)) for key in _ELEMENT_KEYS)
    for key, value in values.items():
        if not math.isfinite(value):
            raise BodyConfigError(f"{body.name}: '{key}' must be finite (got {value!r})")
    if body.rot_period == 0:
        raise BodyConfigError(f"{body.name}: rotation period must not be zero")
    if body.radius <= 0:
        raise BodyConfigError(f"{body.name}: radius must be positive (radius={body.radius})")
    if body.distance_factor is not None and body.distance_factor <= 0:
        raise BodyConfigError(
            f"{body.name}: distance factor must be positive "
            f"(distanceFactor={body.distance_factor})"
        )
    if body.elements.a < 0:
        raise BodyConfigError(f"{body.name}: semi-major axis must not be negative")
    if not 0 <= body.elements.e < 1:
        raise BodyConfigError(f"{body.name}: eccentricity must be in [0, 1)")


def validate_bodies(bodies: Sequence[CelestialBody]) -> None:
    """Validate a full body table, including name uniqueness."""
    seen = set()
    for body in iter_bodies(bodies):
        validate_body(body)
        if body.name in seen:
            raise BodyConfigError(f"Duplicate body name: {body.name}")
        seen.add(body.name)

    # Only satellites are scaled by a distance factor
    for body in bodies:
        if body.distance_factor is not None:
            logger.warning(
                f"{body.name}: distanceFactor {body.distance_factor:g} is ignored "
                f"on a top-level body"
            )


def _number(entry: Mapping[str, Any], key: str, name: str) -> float:
    try:
        value = entry[key]
    except KeyError:
        raise BodyConfigError(f"{name}: missing '{key}'") from None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise BodyConfigError(f"{name}: '{key}' must be a number (got {value!r})")
    if not math.isfinite(value):
        raise BodyConfigError(f"{name}: '{key}' must be finite (got {value!r})")
    return float(value)


def body_from_dict(entry: Mapping[str, Any]) -> CelestialBody:
    """
    Build a validated CelestialBody (and its satellites) from a table entry.

    Presentation-only keys (texture, baseColor, hasRing, ...) are ignored.
    """
    if not isinstance(entry, Mapping):
        raise BodyConfigError(f"Body entry must be an object (got {type(entry).__name__})")

    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise BodyConfigError("Body entry needs a non-empty 'name'")

    raw_elements = entry.get("elements")
    if not isinstance(raw_elements, Mapping):
        raise BodyConfigError(f"{name}: missing 'elements'")

    values = {key: _number(raw_elements, key, name) for key in _ELEMENT_KEYS}
    try:
        elements = OrbitalElements(**values)
    except ValueError as e:
        raise BodyConfigError(f"{name}: {e}") from e

    distance_factor = None
    if entry.get("distanceFactor") is not None:
        distance_factor = _number(entry, "distanceFactor", name)

    satellites = tuple(body_from_dict(sat) for sat in entry.get("satellites") or ())

    body = CelestialBody(
        name=name,
        radius=_number(entry, "radius", name),
        rot_period=_number(entry, "rotPeriod", name),
        elements=elements,
        distance_factor=distance_factor,
        satellites=satellites,
        is_star=bool(entry.get("isStar", False)),
    )
    validate_body(body)
    return body


def body_to_dict(body: CelestialBody) -> Dict[str, Any]:
    """Inverse of body_from_dict."""
    entry: Dict[str, Any] = {
        "name": body.name,
        "radius": body.radius,
        "rotPeriod": body.rot_period,
        "elements": {key: getattr(body.elements, key) for key in _ELEMENT_KEYS},
    }
    if body.distance_factor is not None:
        entry["distanceFactor"] = body.distance_factor
    if body.is_star:
        entry["isStar"] = True
    if body.satellites:
        entry["satellites"] = [body_to_dict(sat) for sat in body.satellites]
    return entry


def bodies_from_list(entries: Sequence[Mapping[str, Any]]) -> Tuple[CelestialBody, ...]:
    """Build and validate a body table from parsed JSON."""
    if not isinstance(entries, list):
        raise BodyConfigError("Body table must be a list of body objects")
    bodies = tuple(body_from_dict(entry) for entry in entries)
    validate_bodies(bodies)
    return bodies


def load_bodies(path: Union[str, Path]) -> Tuple[CelestialBody, ...]:
    """
    Load a body table from a JSON file.

    Raises
    ------
    BodyConfigError
        If the file is not valid JSON or any entry is invalid
    """
    path = Path(path)
    try:
        with open(path) as f:
            entries = json.load(f)
    except json.JSONDecodeError as e:
        raise BodyConfigError(f"{path}: invalid JSON ({e})") from e

    bodies = bodies_from_list(entries)
    count = sum(1 for _ in iter_bodies(bodies))
    logger.info(f"Loaded {count} bodies ({len(bodies)} top-level) from {path}")
    return bodies


def save_bodies(bodies: Sequence[CelestialBody], path: Union[str, Path]) -> None:
    """Write a body table as JSON."""
    with open(path, "w") as f:
        json.dump([body_to_dict(body) for body in bodies], f, indent=2)


# Solar system at J2000. Radii are visual, not to scale. Moon semi-major axes
# are in AU and are stretched on screen by their distance factor.
SOLAR_SYSTEM: List[Dict[str, Any]] = [
    {
        "name": "Sun",
        "radius": 0.05,
        "elements": {"a": 0, "e": 0, "i": 0, "L": 0, "w": 0, "o": 0},
        "rotPeriod": 600,
        "isStar": True,
    },
    {
        "name": "Mercury",
        "radius": 0.005,
        "elements": {"a": 0.387098, "e": 0.20563, "i": 7.00487,
                     "L": 252.25084, "w": 77.45645, "o": 48.33167},
        "rotPeriod": 1407.6,
    },
    {
        "name": "Venus",
        "radius": 0.012,
        "elements": {"a": 0.723332, "e": 0.006773, "i": 3.39471,
                     "L": 181.97973, "w": 131.53298, "o": 76.68069},
        "rotPeriod": -5832.5,
    },
    {
        "name": "Earth",
        "radius": 0.013,
        "elements": {"a": 1.0, "e": 0.016708, "i": 0.00005,
                     "L": 100.46435, "w": 102.94719, "o": 0},
        "rotPeriod": 23.9,
        "satellites": [
            {
                "name": "Moon",
                "radius": 0.0035,
                "elements": {"a": 0.00257, "e": 0.0549, "i": 5.145,
                             "L": 218.31617, "w": 318.15, "o": 125.08},
                "distanceFactor": 50.0,
                "rotPeriod": 655.7,
            },
        ],
    },
    {
        "name": "Mars",
        "radius": 0.007,
        "elements": {"a": 1.523679, "e": 0.0934, "i": 1.85,
                     "L": -4.55, "w": 336.04, "o": 49.57854},
        "rotPeriod": 24.6,
    },
    {
        "name": "Jupiter",
        "radius": 0.04,
        "elements": {"a": 5.204267, "e": 0.048498, "i": 1.3053,
                     "L": 34.40438, "w": 14.75385, "o": 100.55615},
        "rotPeriod": 9.9,
        "satellites": [
            {
                "name": "Europa",
                "radius": 0.0035,
                "elements": {"a": 0.00449, "e": 0.009, "i": 0.47,
                             "L": 200.39, "w": 44.0, "o": 219.106},
                "distanceFactor": 100.0,
                "rotPeriod": 85.2,
            },
        ],
    },
    {
        "name": "Saturn",
        "radius": 0.035,
        "elements": {"a": 9.582017, "e": 0.055546, "i": 2.485,
                     "L": 49.94432, "w": 92.43194, "o": 113.71504},
        "rotPeriod": 10.7,
    },
    {
        "name": "Uranus",
        "radius": 0.02,
        "elements": {"a": 19.2184, "e": 0.047318, "i": 0.773,
                     "L": 313.23218, "w": 170.96424, "o": 74.22988},
        "rotPeriod": -17.2,
    },
    {
        "name": "Neptune",
        "radius": 0.02,
        "elements": {"a": 30.0709, "e": 0.008606, "i": 1.77,
                     "L": -55.12, "w": 44.97135, "o": 131.7806},
        "rotPeriod": 16.1,
    },
]


def default_bodies() -> Tuple[CelestialBody, ...]:
    """The built-in solar system table."""
    return bodies_from_list(SOLAR_SYSTEM)
