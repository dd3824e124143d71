#!/usr/bin/env python3
"""
Tests for Viewer Time Controls

Key handling is exercised without opening a window.
"""

import pytest

pygame = pytest.importorskip("pygame")

from simulation import Simulation, SimulationConfig  # noqa: E402
from visualization.visualizer import Visualizer  # noqa: E402


@pytest.fixture
def viewer(j2000):
    """Visualizer with an initialized simulation and no display."""
    simulation = Simulation(SimulationConfig(start_time=j2000, speed_multiplier=86400))
    simulation.initialize()

    visualizer = Visualizer.__new__(Visualizer)
    visualizer.simulation = simulation
    visualizer.focused = None
    visualizer._resume_speed = 1.0
    visualizer.running = True
    return visualizer


class TestTimeControls:
    """Tests for pause, reverse and speed keys."""

    def test_pause_and_resume(self, viewer):
        viewer._handle_keydown(pygame.K_SPACE)
        assert viewer.simulation.clock.speed_multiplier == 0

        viewer._handle_keydown(pygame.K_SPACE)
        assert viewer.simulation.clock.speed_multiplier == 86400

    def test_reverse_while_running(self, viewer):
        viewer._handle_keydown(pygame.K_r)
        assert viewer.simulation.clock.speed_multiplier == -86400

    def test_reverse_while_paused_applies_on_resume(self, viewer):
        viewer._handle_keydown(pygame.K_SPACE)
        viewer._handle_keydown(pygame.K_r)
        assert viewer.simulation.clock.speed_multiplier == 0

        viewer._handle_keydown(pygame.K_SPACE)
        assert viewer.simulation.clock.speed_multiplier == -86400
        assert viewer.simulation.speed_label == "Rewind"

    def test_speed_keys_keep_direction(self, viewer):
        viewer._handle_keydown(pygame.K_r)
        viewer._handle_keydown(pygame.K_RIGHTBRACKET)
        assert viewer.simulation.clock.speed_multiplier == -172800

        viewer._handle_keydown(pygame.K_LEFTBRACKET)
        viewer._handle_keydown(pygame.K_LEFTBRACKET)
        assert viewer.simulation.clock.speed_multiplier == -43200

    def test_escape_stops(self, viewer):
        viewer._handle_keydown(pygame.K_ESCAPE)
        assert viewer.running is False
