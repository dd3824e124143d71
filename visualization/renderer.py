#!/usr/bin/env python3
"""
Renderer Module

Pygame-based rendering for the orrery. Draws bodies, orbit lines and the
info panel from resolved poses; poses are treated as opaque transforms.
"""

import math
import numpy as np
from typing import Dict, Iterable, Optional, Tuple
import pygame

from .camera import Camera

from simulation.pose import BodyPose, ParentFrame, rotation_y_matrix


class Colors:
    """Default color palette."""

    BACKGROUND = (5, 5, 15)
    TEXT = (220, 220, 220)
    TEXT_DIM = (160, 160, 160)

    ORBIT = (122, 255, 240)
    ORBIT_ALPHA = 0.4

    STAR = (255, 230, 80)
    BODY_DEFAULT = (200, 200, 200)
    FOCUS_RING = (255, 255, 255)

    BODIES = {
        "Sun": (255, 230, 80),
        "Mercury": (170, 170, 170),
        "Venus": (238, 203, 139),
        "Earth": (34, 51, 255),
        "Moon": (136, 136, 136),
        "Mars": (255, 51, 0),
        "Jupiter": (216, 202, 157),
        "Europa": (204, 204, 255),
        "Saturn": (197, 171, 110),
        "Uranus": (79, 208, 231),
        "Neptune": (41, 116, 255),
    }


def dim_color(color: Tuple[int, int, int], alpha: float) -> Tuple[int, int, int]:
    """Blend a color toward the background."""
    alpha = max(0.0, min(1.0, alpha))
    return tuple(
        int(bg + (c - bg) * alpha) for c, bg in zip(color, Colors.BACKGROUND)
    )


def body_color(pose: BodyPose, is_star: bool = False) -> Tuple[int, int, int]:
    if is_star:
        return Colors.STAR
    return Colors.BODIES.get(pose.name, Colors.BODY_DEFAULT)


def orbit_world_points(
    line: np.ndarray,
    orbit_scale: float,
    parent: Optional[ParentFrame] = None
) -> np.ndarray:
    """
    Place a sampled orbit line in world coordinates.

    The line is scaled by the pose's orbit scale, then carried through the
    parent's transform the same way the body's own position is.
    """
    local = line * orbit_scale
    if parent is None:
        return local
    R = rotation_y_matrix(parent.rotation_y)
    return parent.position + (parent.scale * local) @ R.T


class Renderer:
    """
    Handles all rendering operations.

    Parameters
    ----------
    screen : pygame.Surface
        Target surface.
    min_body_pixels : int
        Smallest on-screen radius for a body marker.
    """

    def __init__(
        self,
        screen: pygame.Surface,
        min_body_pixels: int = 2,
    ):
        self.screen = screen
        self.screen_width = screen.get_width()
        self.screen_height = screen.get_height()
        self.min_body_pixels = min_body_pixels

    def clear(self, color: Tuple[int, int, int] = Colors.BACKGROUND) -> None:
        """Clear screen with background color."""
        self.screen.fill(color)

    def project_point(
        self, point_3d: np.ndarray, camera: Camera
    ) -> Tuple[Optional[Tuple[float, float]], float]:
        """
        Project 3D point to 2D screen coordinates.

        Returns
        -------
        tuple
            ((screen_x, screen_y), depth) or (None, depth) if behind camera.
        """
        cam_pos = camera.get_position()
        forward, up, right = camera.get_view_matrix()

        to_point = point_3d - cam_pos
        depth = np.dot(to_point, forward)

        if depth <= 1e-3:
            return None, depth

        fov_scale = self.screen_height / 2
        x_proj = np.dot(to_point, right) / depth * fov_scale
        y_proj = -np.dot(to_point, up) / depth * fov_scale

        screen_x = self.screen_width / 2 + x_proj
        screen_y = self.screen_height / 2 + y_proj

        return (screen_x, screen_y), depth

    def draw_orbit(
        self,
        camera: Camera,
        points: np.ndarray,
        color: Tuple[int, int, int] = None,
    ) -> None:
        """Draw a closed orbit polyline given in world coordinates."""
        if color is None:
            color = dim_color(Colors.ORBIT, Colors.ORBIT_ALPHA)

        projected = [self.project_point(p, camera)[0] for p in points]
        for p1, p2 in zip(projected, projected[1:]):
            if p1 is None or p2 is None:
                continue
            pygame.draw.line(
                self.screen,
                color,
                (int(p1[0]), int(p1[1])),
                (int(p2[0]), int(p2[1])),
                1,
            )

    def draw_orbits(
        self,
        camera: Camera,
        poses: Dict[str, BodyPose],
        orbit_lines: Dict[str, np.ndarray],
    ) -> None:
        """Draw the orbit line of every orbiting body."""
        for name, pose in poses.items():
            line = orbit_lines.get(name)
            if line is None or pose.orbit_scale is None:
                continue
            parent = poses[pose.parent].frame() if pose.parent else None
            self.draw_orbit(camera, orbit_world_points(line, pose.orbit_scale, parent))

    def draw_body(
        self,
        camera: Camera,
        pose: BodyPose,
        color: Tuple[int, int, int],
        focused: bool = False,
    ) -> None:
        """Draw a body as a disc sized by its world scale."""
        proj, depth = self.project_point(pose.world_position, camera)
        if proj is None:
            return

        fov_scale = self.screen_height / 2
        radius = max(self.min_body_pixels, int(pose.world_scale / depth * fov_scale))
        center = (int(proj[0]), int(proj[1]))

        pygame.draw.circle(self.screen, color, center, radius)

        # Spin marker: a meridian line rotated with the body
        angle = pose.world_rotation_y
        if radius > 6:
            tip = (
                int(center[0] + math.sin(angle) * radius),
                int(center[1] - math.cos(angle) * radius),
            )
            pygame.draw.line(self.screen, dim_color(color, 0.5), center, tip, 1)

        if focused:
            pygame.draw.circle(self.screen, Colors.FOCUS_RING, center, radius + 4, 1)

    def draw_bodies(
        self,
        camera: Camera,
        poses: Dict[str, BodyPose],
        stars: Iterable[str] = (),
        focused: Optional[str] = None,
    ) -> None:
        """Draw all bodies, farthest first."""
        stars = set(stars)
        cam_pos = camera.get_position()
        ordered = sorted(
            poses.values(),
            key=lambda p: -np.linalg.norm(p.world_position - cam_pos),
        )
        for pose in ordered:
            self.draw_body(
                camera,
                pose,
                body_color(pose, pose.name in stars),
                focused=(pose.name == focused),
            )

    def draw_text(
        self,
        text: str,
        position: Tuple[int, int],
        font: pygame.font.Font,
        color: Tuple[int, int, int] = Colors.TEXT,
    ) -> int:
        """Draw text and return height."""
        surface = font.render(text, True, color)
        self.screen.blit(surface, position)
        return surface.get_height()

    def draw_info_panel(
        self,
        camera: Camera,
        simulation,
        font: pygame.font.Font,
        focused: Optional[str] = None,
    ) -> None:
        """Draw information panel."""
        state = simulation.state
        settings = state.settings

        info_lines = [
            f"Date: {state.timestamp:%Y-%m-%d %H:%M:%S}",
            f"Julian Date: {state.julian_date:.4f}",
            f"Speed: {simulation.clock.speed_multiplier:g}x ({simulation.speed_label})",
            "",
            f"Planet Scale: {settings.planet_visual_scale:g}",
            f"Universe Scale: {settings.universe_scale:g}",
            f"Zoom: {camera.distance:.2f}",
            f"Focus: {focused or '-'}",
            "",
            "Controls:",
            "← → ↑ ↓ : Rotate camera",
            "+/- : Zoom in/out",
            "[ ] : Time scale",
            "SPACE : Pause/Resume",
            "R : Reverse",
            "T : Reset time",
            ", . : Planet scale",
            "V : Reset visuals",
            "TAB : Focus next body",
            "ESC : Quit",
        ]

        y = 10
        for line in info_lines:
            y += self.draw_text(line, (10, y), font) + 2

        # Top-level bodies with their horizontal-plane position
        y = 10
        x = self.screen_width - 200
        y += self.draw_text("Body      X, Z", (x, y), font) + 4
        for name, pose in state.poses.items():
            if pose.is_satellite:
                continue
            wx, _, wz = pose.world_position
            color = Colors.BODIES.get(name, Colors.TEXT_DIM)
            y += self.draw_text(f"{name:<9} {wx:.2f}, {wz:.2f}", (x, y), font, color) + 1
