#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Earth Physical Constants

Defines the Earth model used by the propagators and coordinate
transformations, and the Greenwich hour angle.

Distances are expressed in kilometers here; the propagators work in Earth
radii, using R_OPLUS as the unit.
"""

import math

from .timing import ModifiedJulianDate, SECONDS_PER_DAY

# Equatorial radius of the Earth [km]
R_OPLUS = 6378.137

# Flattening of the Earth [-]
FLATTENING = 1.0 / 298.257223563

# Gravitational parameter of the Earth [km^3/s^2]
GM_OPLUS = 398600.4415

# Leading zonal harmonic coefficient [-]
J_2 = 0.0010826269

# Sidereal rotation period of the Earth [s]
T_OPLUS = (360 / 360.9856473) * SECONDS_PER_DAY

# Greenwich hour angle intercept [rad] and slope [rad/day]
THETA_0 = math.radians(280.4606)
THETA_DOT = math.radians(360.9856473)

# Gravitational parameter in Earth radii [er^3/s^2]
GM_ER = GM_OPLUS / R_OPLUS ** 3

# Period [s] and semi-major axis [er] of a circular geostationary orbit
T_GSO = T_OPLUS
A_GSO = (GM_OPLUS * (T_GSO / (2 * math.pi)) ** 2) ** (1.0 / 3.0) / R_OPLUS

# Reference epoch of the Greenwich hour angle (2000-01-01 12:00)
EPOCH = ModifiedJulianDate(51544.5)


def theta(date: ModifiedJulianDate) -> float:
    """
    Greenwich hour angle at a date.

    The angle is not wrapped, so it grows without bound with the offset
    from the reference epoch.

    Parameters
    ----------
    date : ModifiedJulianDate
        Date at which the angle is computed

    Returns
    -------
    float
        Greenwich hour angle (radians)
    """
    return THETA_0 + THETA_DOT * date.seconds_since(EPOCH) / SECONDS_PER_DAY


def theta_dot_per_second() -> float:
    """Earth rotation rate (radians/second)."""
    return THETA_DOT / SECONDS_PER_DAY
