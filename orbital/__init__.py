#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orbital - Two-Body Orbit Propagation and Reference Frames

Propagation of Earth satellite orbits for interference geometry: Keplerian
and equinoctial two-body propagators, first-order J2 secular rates,
transformations between inertial, Earth-fixed, and station-centered
frames, orbit determination, and Hohmann transfers.

Distances are in Earth radii (er), angles in radians, time in seconds,
and dates are modified Julian dates.

Example usage:

    from orbital import KeplerianOrbit, ModifiedJulianDate, GroundStation
    from orbital.earth import A_GSO

    epoch = ModifiedJulianDate.from_calendar(2000, 1, 1, 12)
    orbit = KeplerianOrbit(A_GSO, 0.0, 0.0, 0.0, 0.0, 0.0, epoch)
    station = GroundStation.at_coordinates("perth", -31.95, 115.86)

    date = epoch.add_seconds(3600)
    rng, azimuth, elevation = station.look_angles(orbit.r_gei(date), date)
"""

from .timing import (
    CalendarDate,
    ModifiedJulianDate,
    calendar_to_jd,
    calendar_to_mjd,
    days_to_hms,
    jd_to_calendar,
    mjd_to_calendar,
    split_day,
)

from .config import (
    CorrectionMethod,
    SolverConfig,
    SolverMethod,
)

from .exceptions import (
    OrbitalError,
    ConvergenceError,
    ObjectDecayedError,
)

from .diagnostics import Diagnostic

from .solver import KeplerSolution

from .orbit import Orbit

from .keplerian import KeplerianOrbit

from .equinoctial import (
    EquinoctialOrbit,
    equinoctial_to_keplerian,
    keplerian_to_equinoctial,
)

from .determination import (
    CorrectionStatus,
    differential_correction,
    element_set,
    preliminary_orbit,
)

from .maneuver import HohmannTransfer

from .station import GroundStation


__all__ = [
    # Time
    "CalendarDate",
    "ModifiedJulianDate",
    "calendar_to_jd",
    "calendar_to_mjd",
    "days_to_hms",
    "split_day",
    "jd_to_calendar",
    "mjd_to_calendar",

    # Configuration and errors
    "CorrectionMethod",
    "SolverConfig",
    "SolverMethod",
    "OrbitalError",
    "ConvergenceError",
    "ObjectDecayedError",
    "Diagnostic",
    "KeplerSolution",

    # Orbits
    "Orbit",
    "KeplerianOrbit",
    "EquinoctialOrbit",
    "equinoctial_to_keplerian",
    "keplerian_to_equinoctial",

    # Determination and maneuvers
    "element_set",
    "preliminary_orbit",
    "differential_correction",
    "CorrectionStatus",
    "HohmannTransfer",

    # Stations
    "GroundStation",
]

__version__ = "1.0.0"
