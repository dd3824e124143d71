#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Body Poses and Hierarchy Walk

Resolves, for one simulation tick, the pose of every body: position in its
parent's frame, spin about the vertical axis and visual scale. Satellites are
resolved against an explicit ParentFrame, never by looking at live parent
objects, so a pose depends only on the timestamp, the scale settings and the
parent frame handed down by the walk.

Local poses follow scene-graph conventions. A satellite is drawn inside its
parent's transform, so its local position and scale are divided by the
parent's world scale; this keeps the satellite's on-screen size and orbital
distance independent of how large the parent is drawn.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np

from .bodies import CelestialBody
from .orbit import mean_anomaly, orbit_position, solve_kepler

DEFAULT_PLANET_VISUAL_SCALE = 5.0
DEFAULT_UNIVERSE_SCALE = 2.0


@dataclass(frozen=True)
class VisualScaleSettings:
    """
    Scale factors read by the pose computation.

    Sizes and distances are scaled independently so bodies stay visible at
    a navigable scale. Instances are immutable; replace the whole object to
    change a setting between ticks.

    Attributes
    ----------
    planet_visual_scale : float
        Multiplies body radii
    universe_scale : float
        Multiplies orbital distances
    """
    planet_visual_scale: float = DEFAULT_PLANET_VISUAL_SCALE
    universe_scale: float = DEFAULT_UNIVERSE_SCALE

    def __post_init__(self):
        if self.planet_visual_scale <= 0:
            raise ValueError(
                f"Planet visual scale must be positive ({self.planet_visual_scale})"
            )
        if self.universe_scale < 0:
            raise ValueError(f"Universe scale must not be negative ({self.universe_scale})")


@dataclass(frozen=True)
class ParentFrame:
    """
    World transform of a parent body, handed down to its satellites.

    Attributes
    ----------
    position : np.ndarray
        World position of the parent
    rotation_y : float
        Accumulated world spin of the parent (radians)
    scale : float
        World visual scale of the parent
    """
    position: np.ndarray
    rotation_y: float
    scale: float


@dataclass(frozen=True)
class BodyPose:
    """
    Resolved pose of one body for one tick.

    Attributes
    ----------
    name : str
        Body name
    position : np.ndarray
        Position in the parent frame (world units for top-level bodies)
    rotation_y : float
        Spin angle about the local vertical axis (radians)
    scale : float
        Local scale to apply to the body's unit mesh
    orbit_scale : float, optional
        Local scale for the orbit line; None for stationary bodies
    world_position : np.ndarray
        Position composed through all parent transforms
    world_rotation_y : float
        Spin composed through all parent transforms (radians)
    world_scale : float
        Scale composed through all parent transforms
    mean_anomaly : float, optional
        Mean anomaly (degrees, unwrapped); None for stationary bodies
    parent : str, optional
        Name of the parent body
    """
    name: str
    position: np.ndarray
    rotation_y: float
    scale: float
    orbit_scale: Optional[float]
    world_position: np.ndarray
    world_rotation_y: float
    world_scale: float
    mean_anomaly: Optional[float] = None
    parent: Optional[str] = None

    @property
    def is_satellite(self) -> bool:
        return self.parent is not None

    def frame(self) -> ParentFrame:
        """This pose's world transform, as seen by its satellites."""
        return ParentFrame(
            position=self.world_position,
            rotation_y=self.world_rotation_y,
            scale=self.world_scale,
        )


def rotation_y_matrix(angle: float) -> np.ndarray:
    """Right-handed rotation about the vertical (second) axis."""
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ])


def spin_angle(hours: float, rot_period: float) -> float:
    """Spin angle after the given hours; negative periods spin retrograde."""
    return hours / rot_period * 2 * math.pi


def to_world(parent: ParentFrame, local_position: np.ndarray) -> np.ndarray:
    """Map a point from a parent's local frame into world coordinates."""
    return parent.position + rotation_y_matrix(parent.rotation_y) @ (parent.scale * local_position)


def update_body_pose(
    body: CelestialBody,
    jd: float,
    hours: float,
    settings: VisualScaleSettings,
    parent: Optional[ParentFrame] = None,
    parent_name: Optional[str] = None,
) -> BodyPose:
    """
    Resolve a single body's pose.

    Parameters
    ----------
    body : CelestialBody
        Validated body configuration
    jd : float
        Julian Date of the tick
    hours : float
        Elapsed hours of the tick, used for spin
    settings : VisualScaleSettings
        Scale snapshot for this tick
    parent : ParentFrame, optional
        Parent's world transform; None for top-level bodies
    parent_name : str, optional
        Parent's name, recorded on the pose

    Returns
    -------
    BodyPose
        The body's pose
    """
    elements = body.elements
    is_satellite = parent is not None

    if elements.is_stationary:
        M = None
        position = np.zeros(3)
        orbit_scale = None
    else:
        M = mean_anomaly(elements, jd)
        E = solve_kepler(math.radians(M), elements.e)
        position = orbit_position(E, elements) * settings.universe_scale
        orbit_scale = settings.universe_scale
        if is_satellite:
            distance_factor = body.effective_distance_factor
            position = position * distance_factor / parent.scale
            orbit_scale = settings.universe_scale * distance_factor / parent.scale

    rotation_y = spin_angle(hours, body.rot_period)

    world_scale = body.radius * settings.planet_visual_scale
    if is_satellite:
        scale = world_scale / parent.scale
        world_position = to_world(parent, position)
        world_rotation_y = parent.rotation_y + rotation_y
    else:
        scale = world_scale
        world_position = position
        world_rotation_y = rotation_y

    return BodyPose(
        name=body.name,
        position=position,
        rotation_y=rotation_y,
        scale=scale,
        orbit_scale=orbit_scale,
        world_position=world_position,
        world_rotation_y=world_rotation_y,
        world_scale=world_scale,
        mean_anomaly=M,
        parent=parent_name,
    )


def _walk(
    body: CelestialBody,
    jd: float,
    hours: float,
    settings: VisualScaleSettings,
    parent: Optional[ParentFrame],
    parent_name: Optional[str],
    poses: Dict[str, BodyPose],
) -> None:
    pose = update_body_pose(body, jd, hours, settings, parent, parent_name)
    poses[body.name] = pose

    frame = pose.frame()
    for satellite in body.satellites:
        _walk(satellite, jd, hours, settings, frame, body.name, poses)


def walk_hierarchy(
    bodies: Sequence[CelestialBody],
    jd: float,
    hours: float,
    settings: VisualScaleSettings,
) -> Dict[str, BodyPose]:
    """
    Resolve poses for a whole body table.

    Bodies are visited in configuration order, depth-first into satellites.
    Each satellite receives its parent's just-resolved world transform.

    Returns
    -------
    dict
        Body name -> BodyPose, in traversal order
    """
    poses: Dict[str, BodyPose] = {}
    for body in bodies:
        _walk(body, jd, hours, settings, None, None, poses)
    return poses
