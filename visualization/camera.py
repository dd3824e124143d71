#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Camera Module for Orrery Visualization

Provides a 3D camera with spherical coordinates around a movable target.
The render frame is Y-up: orbits lie in the X-Z plane.
"""

import math
import numpy as np
from typing import Tuple


class Camera:
    """
    3D camera with spherical coordinate controls.

    The camera orbits around a target point and always looks at it.
    Position is controlled by:
    - theta: azimuth angle (horizontal rotation about the Y axis)
    - phi: elevation angle above the orbital plane
    - distance: distance from the target

    Parameters
    ----------
    theta : float
        Initial azimuth in radians (default 0.3)
    phi : float
        Initial elevation in radians (default π/6)
    distance : float
        Initial distance from the target (default 12.0)
    min_distance : float
        Minimum zoom distance (default 0.05)
    max_distance : float
        Maximum zoom distance (default 400.0)
    rotation_speed : float
        Speed of rotation in radians per input (default 0.03)
    zoom_factor : float
        Distance multiplier per zoom input (default 1.04)
    follow_rate : float
        Fraction of the remaining offset the target moves per update when
        following a body (default 0.1)

    Attributes
    ----------
    theta : float
        Current azimuth (radians)
    phi : float
        Current elevation (radians)
    distance : float
        Current distance from the target
    target : np.ndarray
        Point the camera looks at
    """

    def __init__(
        self,
        theta: float = 0.3,
        phi: float = math.pi / 6,
        distance: float = 12.0,
        min_distance: float = 0.05,
        max_distance: float = 400.0,
        rotation_speed: float = 0.03,
        zoom_factor: float = 1.04,
        follow_rate: float = 0.1
    ):
        self.theta = theta
        self.phi = phi
        self.distance = distance
        self.min_distance = min_distance
        self.max_distance = max_distance
        self.rotation_speed = rotation_speed
        self.zoom_factor = zoom_factor
        self.follow_rate = follow_rate
        self.target = np.zeros(3)

    def get_position(self) -> np.ndarray:
        """
        Get camera position in Cartesian coordinates.

        Returns
        -------
        np.ndarray
            Position vector [x, y, z]
        """
        x = self.distance * math.cos(self.phi) * math.sin(self.theta)
        y = self.distance * math.sin(self.phi)
        z = self.distance * math.cos(self.phi) * math.cos(self.theta)
        return self.target + np.array([x, y, z])

    def get_view_matrix(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Get the view direction and up/right vectors.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray, np.ndarray]
            (forward, up, right) unit vectors
        """
        offset = self.get_position() - self.target
        forward = -offset / np.linalg.norm(offset)

        world_up = np.array([0.0, 1.0, 0.0])
        right = np.cross(forward, world_up)

        if np.linalg.norm(right) < 0.001:
            # Camera is looking straight up or down
            right = np.array([1.0, 0.0, 0.0])
        else:
            right = right / np.linalg.norm(right)

        up = np.cross(right, forward)
        up = up / np.linalg.norm(up)

        return forward, up, right

    def rotate_left(self) -> None:
        """Rotate camera left (decrease theta)."""
        self.theta -= self.rotation_speed
        self._normalize_theta()

    def rotate_right(self) -> None:
        """Rotate camera right (increase theta)."""
        self.theta += self.rotation_speed
        self._normalize_theta()

    def rotate_up(self) -> None:
        """Rotate camera up (increase phi)."""
        self.phi = min(math.pi/2 - 0.01, self.phi + self.rotation_speed)

    def rotate_down(self) -> None:
        """Rotate camera down (decrease phi)."""
        self.phi = max(-math.pi/2 + 0.01, self.phi - self.rotation_speed)

    def zoom_in(self) -> None:
        """Zoom camera in (decrease distance)."""
        self.distance = max(self.min_distance, self.distance / self.zoom_factor)

    def zoom_out(self) -> None:
        """Zoom camera out (increase distance)."""
        self.distance = min(self.max_distance, self.distance * self.zoom_factor)

    def follow(self, point: np.ndarray) -> None:
        """Move the target a fraction of the way toward a point."""
        self.target = self.target + (np.asarray(point, dtype=float) - self.target) * self.follow_rate

    def _normalize_theta(self) -> None:
        """Keep theta in [0, 2π) range."""
        self.theta = self.theta % (2 * math.pi)

    @property
    def theta_degrees(self) -> float:
        """Current azimuth in degrees."""
        return math.degrees(self.theta) % 360

    @property
    def phi_degrees(self) -> float:
        """Current elevation in degrees."""
        return math.degrees(self.phi)

    def __repr__(self) -> str:
        return (
            f"Camera(θ={self.theta_degrees:.1f}°, "
            f"φ={self.phi_degrees:.1f}°, "
            f"dist={self.distance:.2f})"
        )
