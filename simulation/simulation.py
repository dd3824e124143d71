#!/usr/bin/env python3
"""
Simulation Module

Main simulation class for the orrery. Owns the body table, the simulation
clock and the visual scale settings, and resolves every body's pose once per
tick.

The simulation runs independently of any visualization: the viewer and the
command line both read the published SimulationState after each step.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .bodies import (
    CelestialBody,
    default_bodies,
    find_body,
    iter_bodies,
    load_bodies,
    validate_bodies,
)
from .orbit import ORBIT_LINE_SEGMENTS, orbit_line
from .pose import (
    DEFAULT_PLANET_VISUAL_SCALE,
    DEFAULT_UNIVERSE_SCALE,
    BodyPose,
    VisualScaleSettings,
    walk_hierarchy,
)
from .timebase import SimulationClock, speed_label, to_elapsed_hours, to_julian_date

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """
    Configuration for a simulation.

    Attributes
    ----------
    bodies_file : str or Path, optional
        JSON body table. Uses the built-in solar system if None.
    start_time : datetime, optional
        Initial simulated timestamp. Uses the current time if None.
    speed_multiplier : float
        Simulated seconds per real second.
    planet_visual_scale : float
        Multiplier applied to body radii.
    universe_scale : float
        Multiplier applied to orbital distances.
    orbit_segments : int
        Segments per sampled orbit line.
    """

    bodies_file: Optional[Union[str, Path]] = None
    start_time: Optional[datetime] = None
    speed_multiplier: float = 1.0
    planet_visual_scale: float = DEFAULT_PLANET_VISUAL_SCALE
    universe_scale: float = DEFAULT_UNIVERSE_SCALE
    orbit_segments: int = ORBIT_LINE_SEGMENTS


@dataclass
class SimulationState:
    """
    State published after each tick.

    Attributes
    ----------
    timestamp : datetime
        Simulated timestamp of the tick.
    julian_date : float
        Julian Date of the tick.
    elapsed_hours : float
        Hours since the Unix epoch, used for spin.
    step_count : int
        Number of ticks executed.
    settings : VisualScaleSettings
        Scale snapshot the poses were resolved with.
    poses : dict
        Body name -> BodyPose, depth-first in configuration order.
    """

    timestamp: Optional[datetime] = None
    julian_date: float = 0.0
    elapsed_hours: float = 0.0
    step_count: int = 0
    settings: VisualScaleSettings = field(default_factory=VisualScaleSettings)
    poses: Dict[str, BodyPose] = field(default_factory=dict)


class Simulation:
    """
    Orrery simulation.

    Parameters
    ----------
    config : SimulationConfig, optional
        Simulation configuration.
    bodies : sequence of CelestialBody, optional
        Pre-built body table; overrides config.bodies_file.

    Attributes
    ----------
    config : SimulationConfig
        Current configuration.
    bodies : tuple
        Top-level bodies in configuration order.
    clock : SimulationClock
        Simulated time and speed.
    settings : VisualScaleSettings
        Current scale settings.
    state : SimulationState
        Most recently published state.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        bodies: Optional[Sequence[CelestialBody]] = None,
    ):
        self.config = config or SimulationConfig()
        self.bodies: Tuple[CelestialBody, ...] = tuple(bodies) if bodies is not None else ()
        self._custom_bodies = bodies is not None
        self.clock = SimulationClock(
            timestamp=self.config.start_time,
            speed_multiplier=self.config.speed_multiplier,
        )
        self.settings = VisualScaleSettings(
            planet_visual_scale=self.config.planet_visual_scale,
            universe_scale=self.config.universe_scale,
        )
        self.state = SimulationState()
        self._orbit_lines: Dict[str, Any] = {}
        self._initialized = False

    def initialize(self) -> None:
        """
        Load the body table and resolve the initial poses.

        Must be called before stepping the simulation.

        Raises
        ------
        BodyConfigError
            If the body table is invalid.
        """
        if self._custom_bodies:
            validate_bodies(self.bodies)
        elif self.config.bodies_file is not None:
            self.bodies = load_bodies(self.config.bodies_file)
        else:
            self.bodies = default_bodies()

        self._orbit_lines = {
            body.name: orbit_line(body.elements, self.config.orbit_segments)
            for body in iter_bodies(self.bodies)
            if not body.elements.is_stationary
        }
        self._initialized = True
        self._update_state()

    def _update_state(self, step_count: Optional[int] = None) -> None:
        """Resolve all poses for the clock's current timestamp."""
        timestamp = self.clock.timestamp
        jd = to_julian_date(timestamp)
        hours = to_elapsed_hours(timestamp)
        settings = self.settings

        self.state = SimulationState(
            timestamp=timestamp,
            julian_date=jd,
            elapsed_hours=hours,
            step_count=self.state.step_count if step_count is None else step_count,
            settings=settings,
            poses=walk_hierarchy(self.bodies, jd, hours, settings),
        )

    def step(self, real_elapsed: float) -> SimulationState:
        """
        Advance the clock by scaled real time and resolve all poses.

        Parameters
        ----------
        real_elapsed : float
            Real time since the previous tick (seconds).

        Returns
        -------
        SimulationState
            Updated simulation state.

        Raises
        ------
        RuntimeError
            If simulation not initialized.
        """
        if not self._initialized:
            raise RuntimeError("Simulation not initialized. Call initialize() first.")

        self.clock.advance(real_elapsed)
        self._update_state(self.state.step_count + 1)
        return self.state

    def run(self, duration: float, timestep: float) -> List[SimulationState]:
        """
        Run simulation for a span of real time.

        Parameters
        ----------
        duration : float
            Total real time (seconds).
        timestep : float
            Real time per tick (seconds).

        Returns
        -------
        list
            State after each tick.
        """
        if timestep <= 0:
            raise ValueError("Timestep must be positive")
        if not self._initialized:
            self.initialize()

        states = []
        elapsed = 0.0

        while elapsed < duration:
            states.append(self.step(timestep))
            elapsed += timestep

        return states

    def seek(self, timestamp: datetime) -> SimulationState:
        """Jump to a timestamp without changing the speed."""
        if not self._initialized:
            raise RuntimeError("Simulation not initialized. Call initialize() first.")
        self.clock.timestamp = timestamp
        self._update_state()
        return self.state

    # -------------------------------------------------------------------------
    # Speed and visual settings
    # -------------------------------------------------------------------------

    def set_speed(self, speed_multiplier: float) -> None:
        """Set the speed multiplier (0 pauses, negative rewinds)."""
        self.clock.set_speed(speed_multiplier)

    def set_planet_visual_scale(self, value: float) -> None:
        """Replace the planet visual scale; applies from the next tick."""
        self.settings = replace(self.settings, planet_visual_scale=value)
        logger.info(f"Planet visual scale set to {value:g}")

    def set_universe_scale(self, value: float) -> None:
        """Replace the universe scale; applies from the next tick."""
        self.settings = replace(self.settings, universe_scale=value)
        logger.info(f"Universe scale set to {value:g}")

    def reset_time(self, timestamp: Optional[datetime] = None) -> None:
        """Return to the given timestamp (default: now) at real-time speed."""
        self.clock.reset(timestamp)
        if self._initialized:
            self._update_state()

    def reset_visuals(self) -> None:
        """Restore the default scale settings."""
        self.settings = VisualScaleSettings()
        if self._initialized:
            self._update_state()

    def reset(self) -> None:
        """Reset clock, settings and step count to the configured values."""
        self.clock = SimulationClock(
            timestamp=self.config.start_time,
            speed_multiplier=self.config.speed_multiplier,
        )
        self.settings = VisualScaleSettings(
            planet_visual_scale=self.config.planet_visual_scale,
            universe_scale=self.config.universe_scale,
        )
        self.state = SimulationState()
        if self._initialized:
            self._update_state()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_body(self, name: str) -> Optional[CelestialBody]:
        """Get a body configuration by name."""
        return find_body(self.bodies, name)

    def get_pose(self, name: str) -> Optional[BodyPose]:
        """Get a body's pose from the latest tick."""
        return self.state.poses.get(name)

    def get_orbit_line(self, name: str):
        """
        Sampled orbit polyline for a body, in unscaled orbit units.

        Apply the pose's orbit_scale, then the parent's transform, to place
        it. Returns None for stationary bodies.
        """
        return self._orbit_lines.get(name)

    def get_world_positions(self) -> Dict[str, Tuple[float, float, float]]:
        """World position of every body at the latest tick."""
        return {
            name: tuple(float(v) for v in pose.world_position)
            for name, pose in self.state.poses.items()
        }

    @property
    def num_bodies(self) -> int:
        """Total number of bodies, satellites included."""
        return sum(1 for _ in iter_bodies(self.bodies))

    @property
    def timestamp(self) -> datetime:
        """Current simulated timestamp."""
        return self.clock.timestamp

    @property
    def speed_label(self) -> str:
        return speed_label(self.clock.speed_multiplier)

    def get_summary(self) -> Dict[str, Any]:
        """Get simulation summary."""
        return {
            "timestamp": self.clock.timestamp.isoformat(),
            "julian_date": self.state.julian_date,
            "step_count": self.state.step_count,
            "speed_multiplier": self.clock.speed_multiplier,
            "speed_label": self.speed_label,
            "planet_visual_scale": self.settings.planet_visual_scale,
            "universe_scale": self.settings.universe_scale,
            "num_bodies": self.num_bodies,
        }

    def __repr__(self) -> str:
        return (
            f"Simulation(bodies={self.num_bodies}, "
            f"time={self.clock.timestamp.isoformat()}, "
            f"speed={self.speed_label}, "
            f"steps={self.state.step_count})"
        )


def create_simulation(bodies_file: Optional[Union[str, Path]] = None, **kwargs) -> Simulation:
    """
    Create and initialize a simulation.

    Parameters
    ----------
    bodies_file : str or Path, optional
        JSON body table (default: built-in solar system).
    **kwargs
        Additional SimulationConfig parameters.

    Returns
    -------
    Simulation
        Initialized simulation.
    """
    config = SimulationConfig(bodies_file=bodies_file, **kwargs)
    sim = Simulation(config)
    sim.initialize()
    return sim
