#!/usr/bin/env python3
"""
Tests for the equinoctial orbit propagator and element conversion.
"""

import math
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from orbital import (
    EquinoctialOrbit,
    KeplerianOrbit,
    equinoctial_to_keplerian,
    keplerian_to_equinoctial,
)
from orbital.earth import A_GSO

from conftest import MEDIUM_PRECISION


class TestConstruction:
    """Tests for element validation."""

    @pytest.mark.parametrize("j", [0, 2, -2])
    def test_orbit_indicator(self, j2000_epoch, j):
        with pytest.raises(ValueError, match="Orbit indicator"):
            EquinoctialOrbit(j, 2.0, 0.0, 0.0, 0.0, 0.0, 0.0, j2000_epoch)

    def test_eccentricity_vector(self, j2000_epoch):
        with pytest.raises(ValueError, match="Eccentricity vector"):
            EquinoctialOrbit(1, 2.0, 0.8, 0.6, 0.0, 0.0, 0.0, j2000_epoch)

    def test_semi_major_axis(self, j2000_epoch):
        with pytest.raises(ValueError, match="Semi-major axis"):
            EquinoctialOrbit(1, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, j2000_epoch)

    def test_mean_longitude_wrapped(self, j2000_epoch):
        orbit = EquinoctialOrbit(1, 2.0, 0.0, 0.0, 0.0, 0.0, -math.pi / 2, j2000_epoch)
        assert orbit.mean_longitude == pytest.approx(3 * math.pi / 2)

    def test_eccentricity(self, j2000_epoch):
        orbit = EquinoctialOrbit(1, 2.0, 0.3, 0.4, 0.0, 0.0, 0.0, j2000_epoch)
        assert orbit.eccentricity == pytest.approx(0.5)

    def test_replace(self, gso_equinoctial):
        moved = gso_equinoctial.replace(mean_longitude=0.0)
        assert isinstance(moved, EquinoctialOrbit)
        assert moved.mean_longitude == 0.0
        assert moved.j == gso_equinoctial.j
        assert moved.n == gso_equinoctial.n


class TestPropagation:
    """Tests for position and velocity."""

    def test_mean_motion_times_period(self, gso_equinoctial):
        assert (gso_equinoctial.mean_motion() * gso_equinoctial.orbital_period()
                == pytest.approx(2 * math.pi))

    def test_r_goi(self, gso_equinoctial):
        F = gso_equinoctial.eccentric_position(gso_equinoctial.epoch)
        expected = A_GSO * np.array([-math.sin(math.pi / 4), math.cos(math.pi / 4), 0.0])
        np.testing.assert_allclose(gso_equinoctial.r_goi(F), expected, atol=MEDIUM_PRECISION)

    def test_r_gei(self, gso_equinoctial, gso_position):
        np.testing.assert_allclose(gso_equinoctial.r_gei(gso_equinoctial.epoch), gso_position,
                                   atol=MEDIUM_PRECISION)

    def test_matches_keplerian(self, gso_equinoctial, gso_orbit):
        for hours in (0.0, 3.0, 11.5):
            date = gso_orbit.epoch.add_seconds(3600.0 * hours)
            np.testing.assert_allclose(gso_equinoctial.r_gei(date), gso_orbit.r_gei(date),
                                       atol=MEDIUM_PRECISION)
            np.testing.assert_allclose(gso_equinoctial.v_gei(date), gso_orbit.v_gei(date),
                                       atol=1e-13)

    def test_basis_orthonormal(self, eccentric_orbit):
        f, g = keplerian_to_equinoctial(eccentric_orbit).basis()
        assert np.linalg.norm(f) == pytest.approx(1.0)
        assert np.linalg.norm(g) == pytest.approx(1.0)
        assert f @ g == pytest.approx(0.0, abs=1e-15)

    def test_high_eccentricity(self, j2000_epoch):
        e = 0.9
        orbit = EquinoctialOrbit(1, 3.0, e * math.sin(0.4), e * math.cos(0.4), 0.1, 0.2, 1.0,
                                 j2000_epoch, method="newton")
        solution = orbit.keplers_equation(1.0)
        assert solution.converged
        F = solution.value
        residual = F + orbit.h * math.cos(F) - orbit.k * math.sin(F) - 1.0
        assert residual == pytest.approx(0.0, abs=1e-12)


class TestConversion:
    """Tests for conversion between Keplerian and equinoctial elements."""

    def test_keplerian_to_equinoctial_position(self, eccentric_orbit):
        converted = eccentric_orbit.to_equinoctial()
        assert converted.j == 1
        for seconds in (0.0, 1000.0, 20000.0):
            date = eccentric_orbit.epoch.add_seconds(seconds)
            np.testing.assert_allclose(converted.r_gei(date), eccentric_orbit.r_gei(date),
                                       atol=MEDIUM_PRECISION)
            np.testing.assert_allclose(converted.v_gei(date), eccentric_orbit.v_gei(date),
                                       atol=1e-13)

    def test_retrograde_uses_negative_indicator(self, j2000_epoch):
        orbit = KeplerianOrbit(1.5, 0.05, math.radians(150.0), 1.0, 2.0, 3.0, j2000_epoch)
        converted = keplerian_to_equinoctial(orbit)
        assert converted.j == -1
        date = j2000_epoch.add_seconds(600.0)
        np.testing.assert_allclose(converted.r_gei(date), orbit.r_gei(date),
                                   atol=MEDIUM_PRECISION)

    def test_round_trip(self, eccentric_orbit):
        back = equinoctial_to_keplerian(keplerian_to_equinoctial(eccentric_orbit))
        assert back.semi_major_axis == pytest.approx(eccentric_orbit.a)
        assert back.eccentricity == pytest.approx(eccentric_orbit.e)
        assert back.inclination == pytest.approx(eccentric_orbit.i)
        assert back.raan == pytest.approx(eccentric_orbit.Omega)
        assert back.argument_of_perigee == pytest.approx(eccentric_orbit.omega)
        assert back.mean_anomaly == pytest.approx(eccentric_orbit.M)
        assert back.epoch == eccentric_orbit.epoch
        assert back.solver == eccentric_orbit.solver

    def test_retrograde_round_trip(self, j2000_epoch):
        orbit = KeplerianOrbit(1.5, 0.05, math.radians(150.0), 1.0, 2.0, 3.0, j2000_epoch)
        back = keplerian_to_equinoctial(orbit).to_keplerian()
        assert back.inclination == pytest.approx(orbit.inclination)
        assert back.raan == pytest.approx(orbit.raan)
        assert back.argument_of_perigee == pytest.approx(orbit.argument_of_perigee)
        assert back.mean_anomaly == pytest.approx(orbit.mean_anomaly)
