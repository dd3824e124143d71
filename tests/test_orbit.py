#!/usr/bin/env python3
"""
Tests for Keplerian Orbit Propagation

These tests verify:
1. Kepler's equation is solved to tolerance across eccentricities
2. The perifocal-to-ecliptic rotation and render-frame axis swap
3. Sampled orbit lines close on themselves
4. Mean motion and mean anomaly progression
"""

import logging
import math

import numpy as np
import pytest

from simulation.orbit import (
    KEPLER_MAX_ITERATIONS,
    OrbitalElements,
    mean_anomaly,
    mean_motion,
    orbit_line,
    orbit_position,
    perifocal_to_ecliptic_matrix,
    position_at_mean_anomaly,
    position_in_orbital_plane,
    solve_kepler,
)
from simulation.timebase import J2000_JD


class TestKeplerSolver:
    """Tests for the Newton-Raphson Kepler solver."""

    @pytest.mark.parametrize("e", [0.0, 0.0167, 0.1, 0.2056, 0.5, 0.75, 0.9])
    def test_residual_below_tolerance(self, e):
        """E - e sin(E) reproduces M across a full revolution."""
        for k in range(72):
            M = 2 * math.pi * k / 72
            E = solve_kepler(M, e)
            assert abs(E - e * math.sin(E) - M) < 1e-5

    def test_circular_orbit_returns_mean_anomaly(self):
        """With e = 0 the eccentric anomaly equals the mean anomaly."""
        for M in (0.0, 0.3, 2.0, 5.5):
            assert solve_kepler(M, 0.0) == pytest.approx(M)

    def test_negative_mean_anomaly(self):
        """Unwrapped negative anomalies are solved directly."""
        M = math.radians(-2.48284)
        E = solve_kepler(M, 0.016708)
        assert E < M
        assert E - 0.016708 * math.sin(E) == pytest.approx(M, abs=1e-9)

    def test_high_eccentricity_returns_estimate(self):
        """Near-parabolic orbits still produce a finite estimate."""
        E = solve_kepler(0.001, 0.999999)
        assert math.isfinite(E)

    def test_iteration_cap_stops_without_error(self, monkeypatch, caplog):
        """A correction that never shrinks stops after the capped iterations."""
        calls = []
        real_sin = math.sin

        def counting_sin(x):
            calls.append(x)
            return real_sin(x)

        monkeypatch.setattr(math, "sin", counting_sin)
        with caplog.at_level(logging.DEBUG, logger="simulation.orbit"):
            E = solve_kepler(float("nan"), 0.5)

        assert math.isnan(E)
        assert len(calls) == KEPLER_MAX_ITERATIONS
        assert "iteration cap" in caplog.text


class TestOrbitFrameTransform:
    """Tests for perifocal coordinates and the ecliptic rotation."""

    def test_perifocal_position_at_periapsis(self, earth_elements):
        """E = 0 puts the body at distance a(1 - e) along +X."""
        p = position_in_orbital_plane(0.0, earth_elements)
        assert p[0] == pytest.approx(1.0 - 0.016708)
        assert p[1] == pytest.approx(0.0)
        assert p[2] == 0.0

    def test_rotation_matrix_is_orthonormal(self, inclined_elements):
        """The frame rotation preserves lengths and handedness."""
        R = perifocal_to_ecliptic_matrix(inclined_elements)
        assert np.allclose(R @ R.T, np.eye(3))
        assert np.linalg.det(R) == pytest.approx(1.0)

    def test_uninclined_orbit_is_horizontal(self):
        """With i = 0 the vertical (second) render component is zero."""
        elements = OrbitalElements(a=2.0, e=0.3, i=0.0, L=40.0, w=70.0, o=20.0)
        for E in np.linspace(0, 2 * math.pi, 17):
            assert orbit_position(E, elements)[1] == pytest.approx(0.0, abs=1e-12)

    def test_inclination_tilts_out_of_plane(self, inclined_elements):
        """An inclined orbit reaches +/- a sin(i) on the vertical axis at most."""
        heights = orbit_line(inclined_elements, 256)[:, 1]
        limit = inclined_elements.a * (1 + inclined_elements.e) * math.sin(
            math.radians(inclined_elements.i)
        )
        assert heights.max() > 0
        assert heights.min() < 0
        assert np.all(np.abs(heights) <= limit + 1e-12)

    def test_axis_swap(self):
        """Ecliptic y lands on render z and ecliptic z on render y."""
        # w' = 90 deg with o = 0 rotates periapsis onto the ecliptic +y axis
        elements = OrbitalElements(a=1.0, e=0.0, i=0.0, w=90.0, o=0.0)
        p = orbit_position(0.0, elements)
        assert p == pytest.approx([0.0, 0.0, 1.0], abs=1e-12)

    def test_distance_matches_conic_radius(self, inclined_elements):
        """|r| = a(1 - e cos E) is preserved through the rotation."""
        a, e = inclined_elements.a, inclined_elements.e
        for E in (0.0, 1.0, 2.5, 4.0):
            r = np.linalg.norm(orbit_position(E, inclined_elements))
            assert r == pytest.approx(a * (1 - e * math.cos(E)))

    def test_full_revolution_closes(self, inclined_elements):
        """Positions at M = 0 and M = 360 degrees coincide."""
        start = position_at_mean_anomaly(inclined_elements, 0.0)
        end = position_at_mean_anomaly(inclined_elements, 360.0)
        assert np.allclose(start, end, atol=1e-9)

    def test_orbit_line_is_closed_loop(self, inclined_elements):
        """The sampled polyline has segments + 1 points and ends where it starts."""
        line = orbit_line(inclined_elements, 128)
        assert line.shape == (129, 3)
        assert np.allclose(line[0], line[-1], atol=1e-9)

    def test_orbit_line_matches_point_positions(self, inclined_elements):
        """Each sample equals the position computed for its mean anomaly."""
        line = orbit_line(inclined_elements, 8)
        for k in range(9):
            expected = position_at_mean_anomaly(inclined_elements, 45.0 * k)
            assert np.allclose(line[k], expected)

    def test_orbit_line_rejects_zero_segments(self, earth_elements):
        with pytest.raises(ValueError):
            orbit_line(earth_elements, 0)


class TestMeanMotion:
    """Tests for mean motion and mean anomaly progression."""

    def test_unit_distance_mean_motion(self):
        assert mean_motion(1.0) == pytest.approx(0.9856076686)

    def test_mean_anomaly_at_epoch(self, earth_elements):
        """At J2000 the mean anomaly is L - w."""
        assert mean_anomaly(earth_elements, J2000_JD) == pytest.approx(-2.48284, abs=1e-9)

    def test_one_period_returns_to_start(self, inclined_elements):
        """Advancing by one period adds exactly 360 degrees."""
        jd0 = J2000_JD + 1234.5
        M0 = mean_anomaly(inclined_elements, jd0)
        M1 = mean_anomaly(inclined_elements, jd0 + inclined_elements.period)
        assert (M1 - M0) == pytest.approx(360.0, abs=1e-3)

    def test_earth_period_is_one_year(self, earth_elements):
        assert earth_elements.period == pytest.approx(365.2569, abs=1e-3)

    @pytest.mark.known_approximation
    def test_moons_use_solar_gravitational_parameter(self):
        """
        Every orbit uses the solar mean motion constant.

        A moon's period therefore scales with a^1.5 as if it circled the
        star, not its planet. This is a known approximation.
        """
        moon = OrbitalElements(a=0.00257, e=0.0549)
        assert moon.period == pytest.approx(0.00257 ** 1.5 * 360 / 0.9856076686)
        assert moon.period < 1.0


class TestOrbitalElements:
    """Tests for element validation."""

    def test_stationary_flag(self):
        assert OrbitalElements(a=0.0, e=0.0).is_stationary
        assert not OrbitalElements(a=1.0, e=0.0).is_stationary

    @pytest.mark.parametrize("kwargs", [
        {"a": -1.0, "e": 0.1},
        {"a": 1.0, "e": 1.0},
        {"a": 1.0, "e": -0.01},
    ])
    def test_invalid_elements_rejected(self, kwargs):
        with pytest.raises(ValueError):
            OrbitalElements(**kwargs)
