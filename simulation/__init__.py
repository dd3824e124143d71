#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery Simulation Package

This package provides the numerical core of the orrery: time conversion,
Keplerian orbit propagation, the body table and the per-tick resolution of
body poses through the satellite hierarchy.

The simulation can be run independently of any visualization.
"""

from .timebase import (
    SimulationClock,
    to_julian_date,
    to_elapsed_hours,
    speed_label,
    J2000_JD,
)

from .orbit import (
    OrbitalElements,
    mean_motion,
    mean_anomaly,
    solve_kepler,
    perifocal_to_ecliptic_matrix,
    orbit_position,
    position_at_mean_anomaly,
    orbit_line,
)

from .bodies import (
    CelestialBody,
    BodyConfigError,
    SATELLITE_DISTANCE_FACTOR,
    SOLAR_SYSTEM,
    default_bodies,
    load_bodies,
    save_bodies,
    bodies_from_list,
    validate_bodies,
    iter_bodies,
)

from .pose import (
    VisualScaleSettings,
    ParentFrame,
    BodyPose,
    update_body_pose,
    walk_hierarchy,
)

from .simulation import (
    Simulation,
    SimulationConfig,
    SimulationState,
    create_simulation,
)


__all__ = [
    # Time
    "SimulationClock",
    "to_julian_date",
    "to_elapsed_hours",
    "speed_label",
    "J2000_JD",

    # Orbit
    "OrbitalElements",
    "mean_motion",
    "mean_anomaly",
    "solve_kepler",
    "perifocal_to_ecliptic_matrix",
    "orbit_position",
    "position_at_mean_anomaly",
    "orbit_line",

    # Bodies
    "CelestialBody",
    "BodyConfigError",
    "SATELLITE_DISTANCE_FACTOR",
    "SOLAR_SYSTEM",
    "default_bodies",
    "load_bodies",
    "save_bodies",
    "bodies_from_list",
    "validate_bodies",
    "iter_bodies",

    # Poses
    "VisualScaleSettings",
    "ParentFrame",
    "BodyPose",
    "update_body_pose",
    "walk_hierarchy",

    # Simulation
    "Simulation",
    "SimulationConfig",
    "SimulationState",
    "create_simulation",
]

__version__ = "1.0.0"
