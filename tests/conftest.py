#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides common fixtures for testing the orrery simulation: orbital
elements, body tables and scale settings.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent directory for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "known_approximation: documents a simplification kept on purpose"
    )
    config.addinivalue_line(
        "markers", "integration: mark as integration test"
    )


# =============================================================================
# ELEMENT AND BODY FIXTURES
# =============================================================================

@pytest.fixture
def earth_elements():
    """Earth-like J2000 elements."""
    from simulation import OrbitalElements

    return OrbitalElements(
        a=1.0, e=0.016708, i=0.00005, L=100.46435, w=102.94719, o=0.0
    )


@pytest.fixture
def inclined_elements():
    """Eccentric, inclined orbit (Mercury)."""
    from simulation import OrbitalElements

    return OrbitalElements(
        a=0.387098, e=0.20563, i=7.00487, L=252.25084, w=77.45645, o=48.33167
    )


@pytest.fixture
def earth_moon():
    """Earth with its Moon as a satellite."""
    from simulation import CelestialBody, OrbitalElements

    moon = CelestialBody(
        name="Moon",
        radius=0.0035,
        rot_period=655.7,
        elements=OrbitalElements(
            a=0.00257, e=0.0549, i=5.145, L=218.31617, w=318.15, o=125.08
        ),
        distance_factor=50.0,
    )
    return CelestialBody(
        name="Earth",
        radius=0.013,
        rot_period=23.9,
        elements=OrbitalElements(
            a=1.0, e=0.016708, i=0.00005, L=100.46435, w=102.94719, o=0.0
        ),
        satellites=(moon,),
    )


@pytest.fixture
def sun():
    """Central star pinned to the origin."""
    from simulation import CelestialBody, OrbitalElements

    return CelestialBody(
        name="Sun",
        radius=0.05,
        rot_period=600,
        elements=OrbitalElements(a=0.0, e=0.0),
        is_star=True,
    )


@pytest.fixture
def solar_system():
    """Built-in solar system table."""
    from simulation import default_bodies

    return default_bodies()


@pytest.fixture
def settings():
    """Default visual scale settings."""
    from simulation import VisualScaleSettings

    return VisualScaleSettings()


@pytest.fixture
def j2000():
    """J2000.0 epoch as a UTC timestamp."""
    return datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def body_table_entries():
    """Minimal JSON-style body table."""
    return [
        {
            "name": "Star",
            "radius": 0.05,
            "rotPeriod": 600,
            "isStar": True,
            "elements": {"a": 0, "e": 0, "i": 0, "L": 0, "w": 0, "o": 0},
        },
        {
            "name": "Planet",
            "radius": 0.01,
            "rotPeriod": 24,
            "texture": "planet.jpeg",
            "elements": {"a": 1.5, "e": 0.1, "i": 2.0, "L": 10.0, "w": 30.0, "o": 45.0},
            "satellites": [
                {
                    "name": "Moonlet",
                    "radius": 0.002,
                    "rotPeriod": -100,
                    "elements": {"a": 0.002, "e": 0.01, "i": 1.0, "L": 5.0, "w": 6.0, "o": 7.0},
                }
            ],
        },
    ]
