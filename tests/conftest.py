#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides common fixtures, markers, and tolerances for testing the orbit
propagators, reference frames, and orbit determination.
"""

import math
import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Agreement with published reference values
HIGH_PRECISION = 1e-12

# Agreement after an iterative solution
MEDIUM_PRECISION = 1e-9


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers", "reference: mark test as checking published reference values"
    )


# =============================================================================
# DATE FIXTURES
# =============================================================================

@pytest.fixture
def j2000_epoch():
    """2000-01-01 12:00:00, the reference epoch of the Greenwich hour angle."""
    from orbital import ModifiedJulianDate

    return ModifiedJulianDate(51544.5)


# =============================================================================
# STATION FIXTURES
# =============================================================================

@pytest.fixture
def reference_station():
    """Station with latitude and longitude given directly in radians."""
    from orbital import GroundStation

    return GroundStation("one", -22.239166666666666, 114.0836111111111)


# =============================================================================
# ORBIT FIXTURES
# =============================================================================

@pytest.fixture
def gso_elements(j2000_epoch):
    """Near-circular, slightly inclined geosynchronous elements."""
    from orbital.earth import A_GSO

    return dict(
        semi_major_axis=A_GSO,
        eccentricity=2.22e-16,
        inclination=math.radians(1.0),
        raan=math.radians(45.0),
        argument_of_perigee=math.radians(45.0),
        mean_anomaly=math.radians(45.0),
        epoch=j2000_epoch,
        method="halley",
    )


@pytest.fixture
def gso_orbit(gso_elements):
    """Keplerian geosynchronous orbit."""
    from orbital import KeplerianOrbit

    return KeplerianOrbit(**gso_elements)


@pytest.fixture
def gso_equinoctial(j2000_epoch):
    """Equinoctial geosynchronous orbit matching gso_orbit."""
    from orbital import EquinoctialOrbit
    from orbital.earth import A_GSO

    e = 2.22e-16
    i = math.radians(1.0)
    Omega = omega = M = math.radians(45.0)
    return EquinoctialOrbit(
        j=1,
        semi_major_axis=A_GSO,
        h=e * math.sin(omega + Omega),
        k=e * math.cos(omega + Omega),
        p=math.tan(i / 2) * math.sin(Omega),
        q=math.tan(i / 2) * math.cos(Omega),
        mean_longitude=M + omega + Omega,
        epoch=j2000_epoch,
        method="halley",
    )


@pytest.fixture
def gso_position():
    """Expected inertial position of the geosynchronous orbits at their epoch."""
    from orbital.earth import A_GSO

    i = math.radians(1.0)
    R = 0.5 * np.array([
        [1 - math.cos(i), -1 - math.cos(i), +math.sqrt(2) * math.sin(i)],
        [1 + math.cos(i), -1 + math.cos(i), -math.sqrt(2) * math.sin(i)],
        [math.sqrt(2) * math.sin(i), math.sqrt(2) * math.sin(i), 2 * math.cos(i)],
    ])
    r_goi = A_GSO * np.array([math.cos(math.pi / 4), math.sin(math.pi / 4), 0.0])
    return R @ r_goi


@pytest.fixture
def eccentric_orbit(j2000_epoch):
    """Moderately eccentric, slightly inclined orbit inside seven Earth radii."""
    from orbital import KeplerianOrbit

    return KeplerianOrbit(
        semi_major_axis=6.618108053001019,
        eccentricity=0.1,
        inclination=math.radians(1.0),
        raan=math.pi / 4,
        argument_of_perigee=math.pi / 4,
        mean_anomaly=math.pi / 4,
        epoch=j2000_epoch,
        method="halley",
    )
