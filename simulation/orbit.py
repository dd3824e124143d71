#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Keplerian Orbit Propagation

Epoch orbital elements, mean motion, Kepler's equation and the rotation from
the perifocal plane into the shared ecliptic frame.

Distances are in scale-free orbit units (AU for the default table), element
angles in degrees, anomalies passed to the solver in radians and time in days.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from .timebase import days_since_j2000

logger = logging.getLogger(__name__)

# Gaussian gravitational constant expressed in degrees per day: the mean
# motion of a body with a = 1 around one solar mass.
MEAN_MOTION_AT_UNIT_DISTANCE = 0.9856076686

KEPLER_TOLERANCE = 1e-6
KEPLER_MAX_ITERATIONS = 100

ORBIT_LINE_SEGMENTS = 128


@dataclass(frozen=True)
class OrbitalElements:
    """
    Orbital elements at the J2000 epoch.

    Attributes
    ----------
    a : float
        Semi-major axis (orbit units). Zero marks a body that stays at its
        parent's origin.
    e : float
        Eccentricity, 0 <= e < 1
    i : float
        Inclination (degrees)
    L : float
        Mean longitude at epoch (degrees)
    w : float
        Longitude of periapsis (degrees)
    o : float
        Longitude of ascending node (degrees)
    """
    a: float
    e: float
    i: float = 0.0
    L: float = 0.0
    w: float = 0.0
    o: float = 0.0

    def __post_init__(self):
        if self.a < 0:
            raise ValueError(f"Semi-major axis must not be negative (a={self.a})")
        if not 0 <= self.e < 1:
            raise ValueError(f"Eccentricity must be in [0, 1) (e={self.e})")

    @property
    def is_stationary(self) -> bool:
        """True for bodies pinned to their parent's origin."""
        return self.a == 0

    @property
    def mean_motion(self) -> float:
        """Mean motion (degrees/day)."""
        return mean_motion(self.a)

    @property
    def period(self) -> float:
        """Orbital period (days)."""
        return 360.0 / self.mean_motion


def mean_motion(a: float) -> float:
    """
    Mean motion from Kepler's third law (degrees/day).

    Every orbit uses the same gravitational parameter, so a moon around a
    planet moves as if it circled a one-solar-mass primary at that distance.
    """
    return MEAN_MOTION_AT_UNIT_DISTANCE / a ** 1.5


def mean_anomaly(elements: OrbitalElements, jd: float) -> float:
    """
    Mean anomaly at a Julian Date (degrees, not wrapped).

    Parameters
    ----------
    elements : OrbitalElements
        Epoch elements of an orbiting body (a > 0)
    jd : float
        Julian Date

    Returns
    -------
    float
        M = L + n * (jd - J2000) - w
    """
    current_longitude = elements.L + mean_motion(elements.a) * days_since_j2000(jd)
    return current_longitude - elements.w


def solve_kepler(M: float, e: float) -> float:
    """
    Solve Kepler's equation M = E - e sin(E) by Newton-Raphson iteration.

    Starts from E = M and stops once the correction falls below
    KEPLER_TOLERANCE. After KEPLER_MAX_ITERATIONS the last estimate is
    returned as is.

    Parameters
    ----------
    M : float
        Mean anomaly (radians)
    e : float
        Eccentricity

    Returns
    -------
    float
        Eccentric anomaly (radians)
    """
    E = M
    for _ in range(KEPLER_MAX_ITERATIONS):
        delta = (E - e * math.sin(E) - M) / (1 - e * math.cos(E))
        E -= delta
        if abs(delta) < KEPLER_TOLERANCE:
            return E

    logger.debug(f"Kepler solver hit iteration cap (M={M:.6f}, e={e:.6f})")
    return E


def perifocal_to_ecliptic_matrix(elements: OrbitalElements) -> np.ndarray:
    """
    Rotation matrix from perifocal (orbital plane) to ecliptic coordinates.

    The argument of periapsis is taken relative to the ascending node,
    w' = w - o, since the table stores the longitude of periapsis.

    Returns
    -------
    np.ndarray
        3x3 rotation matrix
    """
    i = math.radians(elements.i)
    Omega = math.radians(elements.o)
    omega = math.radians(elements.w - elements.o)

    cos_O = math.cos(Omega)
    sin_O = math.sin(Omega)
    cos_i = math.cos(i)
    sin_i = math.sin(i)
    cos_w = math.cos(omega)
    sin_w = math.sin(omega)

    return np.array([
        [cos_O * cos_w - sin_O * sin_w * cos_i,
         -cos_O * sin_w - sin_O * cos_w * cos_i,
         sin_O * sin_i],
        [sin_O * cos_w + cos_O * sin_w * cos_i,
         -sin_O * sin_w + cos_O * cos_w * cos_i,
         -cos_O * sin_i],
        [sin_w * sin_i,
         cos_w * sin_i,
         cos_i]
    ])


def position_in_orbital_plane(E: float, elements: OrbitalElements) -> np.ndarray:
    """Perifocal position [X, Y, 0]; X points to periapsis."""
    a = elements.a
    e = elements.e
    return np.array([
        a * (math.cos(E) - e),
        a * math.sqrt(1 - e * e) * math.sin(E),
        0.0,
    ])


def ecliptic_to_render(position: np.ndarray) -> np.ndarray:
    """
    Swap ecliptic (x, y, z) into the render frame (x, z, y).

    The render frame's second axis is vertical, so an uninclined orbit lies
    flat in the horizontal plane.
    """
    return position[..., [0, 2, 1]]


def orbit_position(E: float, elements: OrbitalElements) -> np.ndarray:
    """
    Position on the orbit for an eccentric anomaly.

    Parameters
    ----------
    E : float
        Eccentric anomaly (radians)
    elements : OrbitalElements
        Orbital elements

    Returns
    -------
    np.ndarray
        Render-frame position [x, y, z] in unscaled orbit units
    """
    r_ecliptic = perifocal_to_ecliptic_matrix(elements) @ position_in_orbital_plane(E, elements)
    return ecliptic_to_render(r_ecliptic)


def position_at_mean_anomaly(elements: OrbitalElements, M_degrees: float) -> np.ndarray:
    """Render-frame position for a mean anomaly given in degrees."""
    E = solve_kepler(math.radians(M_degrees), elements.e)
    return orbit_position(E, elements)


def orbit_line(elements: OrbitalElements, segments: int = ORBIT_LINE_SEGMENTS) -> np.ndarray:
    """
    Sample the full orbit as a closed polyline.

    Parameters
    ----------
    elements : OrbitalElements
        Orbital elements (a > 0)
    segments : int
        Number of segments; segments + 1 points are returned, the last one
        closing the loop at M = 360 degrees.

    Returns
    -------
    np.ndarray
        Array of shape (segments + 1, 3) in unscaled orbit units
    """
    if segments < 1:
        raise ValueError("Orbit line needs at least one segment")

    R = perifocal_to_ecliptic_matrix(elements)
    points = np.empty((segments + 1, 3))
    for k in range(segments + 1):
        M = 360.0 * k / segments
        E = solve_kepler(math.radians(M), elements.e)
        points[k] = R @ position_in_orbital_plane(E, elements)
    return ecliptic_to_render(points)
