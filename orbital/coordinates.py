#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Coordinate Transformations

Transformations between the reference frames used in interference
geometry, following Montenbruck and Gill, "Satellite Orbits":

- GEI: geocentric equatorial inertial
- GER: geocentric equatorial rotating (Earth fixed)
- LLA: latitude, longitude, and altitude over a spherical Earth
- LTP: local tangent plane (East, North, Zenith) at a ground station
- RAE: range, azimuth, and elevation at a ground station

Vectors are numpy arrays of shape (3,) in Earth radii, or Earth radii per
second for velocities. All functions are pure; callers must not mix frames
without one of the transformations below.
"""

import math
from typing import TYPE_CHECKING, Tuple

import numpy as np

from .earth import theta, theta_dot_per_second
from .timing import ModifiedJulianDate

if TYPE_CHECKING:
    from .station import GroundStation

TWO_PI = 2 * math.pi


def check_wrap(phi: float) -> float:
    """
    Wrap an angle into the interval [0, 2π).

    Parameters
    ----------
    phi : float
        Angle (radians), of any sign or magnitude

    Returns
    -------
    float
        Equivalent angle in [0, 2π)
    """
    phi = phi % TWO_PI
    # A tiny negative angle rounds up to exactly 2π
    if phi >= TWO_PI:
        phi = 0.0
    return phi


def rotation_x(phi: float) -> np.ndarray:
    """
    Rotation matrix about the x axis.

    A positive angle rotates the reference axes counterclockwise as viewed
    from the positive end of the rotation axis toward the origin. The same
    convention holds for rotation_y and rotation_z.

    Parameters
    ----------
    phi : float
        Angle of rotation (radians)

    Returns
    -------
    np.ndarray
        3x3 orthogonal transformation matrix
    """
    c, s = math.cos(phi), math.sin(phi)
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, +c, +s],
        [0.0, -s, +c],
    ])


def rotation_y(phi: float) -> np.ndarray:
    """Rotation matrix about the y axis."""
    c, s = math.cos(phi), math.sin(phi)
    return np.array([
        [+c, 0.0, -s],
        [0.0, 1.0, 0.0],
        [+s, 0.0, +c],
    ])


def rotation_z(phi: float) -> np.ndarray:
    """Rotation matrix about the z axis."""
    c, s = math.cos(phi), math.sin(phi)
    return np.array([
        [+c, +s, 0.0],
        [-s, +c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def rotation_z_rate(phi: float, phi_dot: float) -> np.ndarray:
    """Time derivative of rotation_z for an angle changing at phi_dot."""
    c, s = math.cos(phi), math.sin(phi)
    return phi_dot * np.array([
        [-s, +c, 0.0],
        [-c, -s, 0.0],
        [0.0, 0.0, 0.0],
    ])


def cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Cross product c = a x b of two 3-vectors."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return np.array([
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    ])


def gei_to_ger(r_gei: np.ndarray, date: ModifiedJulianDate) -> np.ndarray:
    """
    Rotate an inertial position into the Earth-fixed frame.

    Parameters
    ----------
    r_gei : np.ndarray
        Geocentric equatorial inertial position (er)
    date : ModifiedJulianDate
        Date at which the position occurs

    Returns
    -------
    np.ndarray
        Geocentric equatorial rotating position (er)
    """
    return rotation_z(theta(date)) @ np.asarray(r_gei, dtype=float)


def ger_to_gei(r_ger: np.ndarray, date: ModifiedJulianDate) -> np.ndarray:
    """Rotate an Earth-fixed position into the inertial frame."""
    return rotation_z(theta(date)).T @ np.asarray(r_ger, dtype=float)


def gei_to_ger_state(
    r_gei: np.ndarray,
    v_gei: np.ndarray,
    date: ModifiedJulianDate,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Transform an inertial position and velocity into the Earth-fixed frame.

    The rotating frame spins at the sidereal rate, so the velocity picks up
    a transport term: v_ger = R_z v_gei + dR_z/dt r_gei.

    Parameters
    ----------
    r_gei : np.ndarray
        Geocentric equatorial inertial position (er)
    v_gei : np.ndarray
        Geocentric equatorial inertial velocity (er/s)
    date : ModifiedJulianDate
        Date at which the vectors occur

    Returns
    -------
    tuple
        (r_ger, v_ger) in er and er/s
    """
    r_gei = np.asarray(r_gei, dtype=float)
    v_gei = np.asarray(v_gei, dtype=float)
    angle = theta(date)
    R = rotation_z(angle)
    R_dot = rotation_z_rate(angle, theta_dot_per_second())
    return R @ r_gei, R @ v_gei + R_dot @ r_gei


def ger_to_gei_state(
    r_ger: np.ndarray,
    v_ger: np.ndarray,
    date: ModifiedJulianDate,
) -> Tuple[np.ndarray, np.ndarray]:
    """Inverse of gei_to_ger_state."""
    r_ger = np.asarray(r_ger, dtype=float)
    v_ger = np.asarray(v_ger, dtype=float)
    angle = theta(date)
    R = rotation_z(angle)
    R_dot = rotation_z_rate(angle, theta_dot_per_second())
    return R.T @ r_ger, R.T @ v_ger + R_dot.T @ r_ger


def gei_to_lla(r_gei: np.ndarray, date: ModifiedJulianDate) -> np.ndarray:
    """
    Latitude, longitude, and altitude of an inertial position.

    The Earth is taken as a sphere of one Earth radius, so the altitude is
    the radial distance less one and the latitude is geocentric.

    Parameters
    ----------
    r_gei : np.ndarray
        Geocentric equatorial inertial position (er)
    date : ModifiedJulianDate
        Date at which the position occurs

    Returns
    -------
    np.ndarray
        [latitude in (-π/2, π/2), longitude in [0, 2π), altitude (er)]
    """
    x, y, z = gei_to_ger(r_gei, date)
    latitude = math.atan2(z, math.hypot(x, y))
    longitude = check_wrap(math.atan2(y, x))
    altitude = math.sqrt(x * x + y * y + z * z) - 1
    return np.array([latitude, longitude, altitude])


def lla_to_gei(r_lla: np.ndarray, date: ModifiedJulianDate) -> np.ndarray:
    """Inertial position of a latitude, longitude, and altitude (spherical Earth)."""
    latitude, longitude, altitude = r_lla
    R = 1 + altitude
    r_ger = np.array([
        R * math.cos(latitude) * math.cos(longitude),
        R * math.cos(latitude) * math.sin(longitude),
        R * math.sin(latitude),
    ])
    return ger_to_gei(r_ger, date)


def ger_to_ltp_matrix(station: "GroundStation") -> np.ndarray:
    """
    Transformation from Earth-fixed to local tangent coordinates.

    The rows are the East, North, and Zenith unit vectors at the station's
    geodetic latitude and longitude.

    Parameters
    ----------
    station : GroundStation
        Station at which the local tangent plane is constructed

    Returns
    -------
    np.ndarray
        3x3 orthogonal transformation matrix
    """
    phi = station.latitude
    lam = station.longitude
    e_east = [-math.sin(lam), +math.cos(lam), 0.0]
    e_north = [
        -math.sin(phi) * math.cos(lam),
        -math.sin(phi) * math.sin(lam),
        +math.cos(phi),
    ]
    e_zenith = [
        +math.cos(phi) * math.cos(lam),
        +math.cos(phi) * math.sin(lam),
        +math.sin(phi),
    ]
    return np.array([e_east, e_north, e_zenith])


def ltp_to_ger_matrix(station: "GroundStation") -> np.ndarray:
    """Transformation from local tangent to Earth-fixed coordinates."""
    return ger_to_ltp_matrix(station).T


def gei_to_ltp(
    r_gei: np.ndarray,
    station: "GroundStation",
    date: ModifiedJulianDate,
) -> np.ndarray:
    """
    Position relative to a station in its local tangent plane.

    Parameters
    ----------
    r_gei : np.ndarray
        Geocentric equatorial inertial position (er)
    station : GroundStation
        Observing station
    date : ModifiedJulianDate
        Date at which the position occurs

    Returns
    -------
    np.ndarray
        [East, North, Zenith] position (er)
    """
    return ger_to_ltp_matrix(station) @ (gei_to_ger(r_gei, date) - station.r_ger)


def ltp_to_gei(
    r_ltp: np.ndarray,
    station: "GroundStation",
    date: ModifiedJulianDate,
) -> np.ndarray:
    """Inertial position of a point given in a station's local tangent plane."""
    r_ger = ltp_to_ger_matrix(station) @ np.asarray(r_ltp, dtype=float) + station.r_ger
    return ger_to_gei(r_ger, date)


def ltp_to_rae(r_ltp: np.ndarray) -> np.ndarray:
    """
    Range, azimuth, and elevation of a local tangent position.

    Parameters
    ----------
    r_ltp : np.ndarray
        [East, North, Zenith] position (er)

    Returns
    -------
    np.ndarray
        [range (er), azimuth from North through East in [0, 2π),
        elevation in (-π/2, π/2)]
    """
    east, north, zenith = r_ltp
    rng = math.sqrt(east * east + north * north + zenith * zenith)
    azimuth = check_wrap(math.atan2(east, north))
    elevation = math.atan2(zenith, math.hypot(east, north))
    return np.array([rng, azimuth, elevation])


def rae_to_ltp(r_rae: np.ndarray) -> np.ndarray:
    """Local tangent position of a range, azimuth, and elevation."""
    rng, azimuth, elevation = r_rae
    return np.array([
        rng * math.cos(elevation) * math.sin(azimuth),
        rng * math.cos(elevation) * math.cos(azimuth),
        rng * math.sin(elevation),
    ])
