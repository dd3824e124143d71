#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Visualizer Module for the Orrery

Provides a Pygame-based interactive view of the simulated star system. Each
frame advances the simulation by the real time elapsed since the previous
frame, then draws the poses it published.
"""

import logging
from typing import List, Optional

import pygame

from simulation import (
    Simulation,
    SimulationConfig,
)
from .camera import Camera
from .renderer import Renderer

logger = logging.getLogger(__name__)


class Visualizer:
    """
    Interactive visualization of an orrery simulation.

    Parameters
    ----------
    width : int
        Window width in pixels (default 1200)
    height : int
        Window height in pixels (default 800)
    title : str
        Window title
    fps : int
        Frame rate cap

    Attributes
    ----------
    screen : pygame.Surface
        The Pygame display surface
    camera : Camera
        The 3D camera
    renderer : Renderer
        The rendering engine
    simulation : Simulation
        The orrery simulation
    focused : str
        Name of the body the camera follows, if any
    running : bool
        Whether the visualizer is running
    """

    MIN_SPEED = 1.0
    MAX_SPEED = 86400.0 * 30
    PLANET_SCALE_STEP = 1.25

    def __init__(
        self,
        width: int = 1200,
        height: int = 800,
        title: str = "Orrery",
        fps: int = 60
    ):
        pygame.init()

        self.width = width
        self.height = height
        self.fps = fps
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(title)

        self.camera = Camera()
        self.renderer = Renderer(self.screen)

        self.simulation: Optional[Simulation] = None
        self.focused: Optional[str] = None
        self._resume_speed = 1.0
        self.running = False

        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont('Arial', 15)

    def set_simulation(self, simulation: Simulation) -> None:
        """
        Set the simulation to visualize.

        Parameters
        ----------
        simulation : Simulation
            An initialized simulation
        """
        self.simulation = simulation

    def create_simulation(self, **kwargs) -> Simulation:
        """
        Create and set a new simulation.

        Parameters
        ----------
        **kwargs
            SimulationConfig parameters

        Returns
        -------
        Simulation
            The created simulation
        """
        self.simulation = Simulation(SimulationConfig(**kwargs))
        self.simulation.initialize()
        return self.simulation

    def _body_names(self) -> List[str]:
        return list(self.simulation.state.poses) if self.simulation else []

    def _cycle_focus(self) -> None:
        names = [None] + self._body_names()
        index = names.index(self.focused) if self.focused in names else 0
        self.focused = names[(index + 1) % len(names)]
        logger.info(f"Focus: {self.focused or 'none'}")

    def _handle_events(self) -> None:
        """Handle Pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            if event.type == pygame.KEYDOWN:
                self._handle_keydown(event.key)

    def _handle_keydown(self, key: int) -> None:
        """Handle key press events."""
        if key == pygame.K_ESCAPE:
            self.running = False
            return

        if key == pygame.K_TAB:
            self._cycle_focus()
            return

        sim = self.simulation
        if sim is None:
            return

        speed = sim.clock.speed_multiplier

        if key == pygame.K_SPACE:
            if speed == 0:
                sim.set_speed(self._resume_speed)
            else:
                self._resume_speed = speed
                sim.set_speed(0)

        elif key == pygame.K_r:
            if speed == 0:
                self._resume_speed = -self._resume_speed
                logger.info(f"Will resume at {self._resume_speed:g}")
            else:
                sim.set_speed(-speed)

        elif key == pygame.K_t:
            sim.reset_time()

        elif key == pygame.K_v:
            sim.reset_visuals()

        elif key == pygame.K_LEFTBRACKET and speed != 0:
            magnitude = max(self.MIN_SPEED, abs(speed) / 2)
            sim.set_speed(magnitude if speed > 0 else -magnitude)

        elif key == pygame.K_RIGHTBRACKET and speed != 0:
            magnitude = min(self.MAX_SPEED, abs(speed) * 2)
            sim.set_speed(magnitude if speed > 0 else -magnitude)

        elif key == pygame.K_COMMA:
            sim.set_planet_visual_scale(
                sim.settings.planet_visual_scale / self.PLANET_SCALE_STEP
            )

        elif key == pygame.K_PERIOD:
            sim.set_planet_visual_scale(
                sim.settings.planet_visual_scale * self.PLANET_SCALE_STEP
            )

    def _handle_continuous_keys(self) -> None:
        """Handle continuous key presses for camera control."""
        keys = pygame.key.get_pressed()

        if keys[pygame.K_LEFT]:
            self.camera.rotate_left()
        if keys[pygame.K_RIGHT]:
            self.camera.rotate_right()
        if keys[pygame.K_UP]:
            self.camera.rotate_up()
        if keys[pygame.K_DOWN]:
            self.camera.rotate_down()

        if keys[pygame.K_PLUS] or keys[pygame.K_EQUALS] or keys[pygame.K_KP_PLUS]:
            self.camera.zoom_in()
        if keys[pygame.K_MINUS] or keys[pygame.K_KP_MINUS]:
            self.camera.zoom_out()

    def _update(self, dt: float) -> None:
        """
        Advance the simulation and the camera target.

        Parameters
        ----------
        dt : float
            Real time delta in seconds
        """
        if self.simulation is None:
            return

        self.simulation.step(dt)

        if self.focused is not None:
            pose = self.simulation.get_pose(self.focused)
            if pose is not None:
                self.camera.follow(pose.world_position)

    def _render(self) -> None:
        """Render the current frame."""
        self.renderer.clear()

        if self.simulation is None:
            self.renderer.draw_text(
                "No simulation loaded. Call create_simulation() first.",
                (self.width // 2 - 200, self.height // 2),
                self.font
            )
            pygame.display.flip()
            return

        sim = self.simulation
        poses = sim.state.poses
        orbit_lines = {name: sim.get_orbit_line(name) for name in poses}
        stars = [name for name in poses if sim.get_body(name).is_star]

        self.renderer.draw_orbits(self.camera, poses, orbit_lines)
        self.renderer.draw_bodies(self.camera, poses, stars, self.focused)
        self.renderer.draw_info_panel(self.camera, sim, self.font, self.focused)

        pygame.display.flip()

    def run(self) -> None:
        """
        Run the visualization main loop.

        This blocks until the user closes the window or presses ESC.
        """
        self.running = True

        while self.running:
            dt = self.clock.tick(self.fps) / 1000.0

            self._handle_events()
            self._handle_continuous_keys()
            self._update(dt)
            self._render()

        pygame.quit()

    def step(self) -> bool:
        """
        Perform a single visualization step.

        Returns
        -------
        bool
            False if the visualizer should stop, True otherwise
        """
        dt = self.clock.tick(self.fps) / 1000.0

        self._handle_events()

        if not self.running:
            return False

        self._handle_continuous_keys()
        self._update(dt)
        self._render()

        return True

    def close(self) -> None:
        """Close the visualizer and clean up resources."""
        pygame.quit()


def run_visualizer(
    width: int = 1200,
    height: int = 800,
    **kwargs
) -> None:
    """
    Convenience function to launch the visualizer.

    Parameters
    ----------
    width : int
        Window width
    height : int
        Window height
    **kwargs
        SimulationConfig parameters (bodies_file, start_time, speed_multiplier,
        planet_visual_scale, universe_scale)
    """
    visualizer = Visualizer(width=width, height=height)
    sim = visualizer.create_simulation(**kwargs)

    print(f"Loaded {sim.num_bodies} bodies")

    visualizer.run()


if __name__ == "__main__":
    print("Starting Orrery")
    print("=" * 50)
    run_visualizer()
