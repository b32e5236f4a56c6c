#!/usr/bin/env python3
"""
Ground Station Module

A ground station fixed to the rotating Earth. Stations are located by
geodetic latitude and longitude on the oblate Earth, which is the
convention the local tangent plane transformations expect. Higher level
station and beam bookkeeping uses this class only for its position.
"""

import math
from dataclasses import dataclass
from functools import cached_property
from typing import List

import numpy as np

from .coordinates import ger_to_gei, gei_to_ltp, ltp_to_rae
from .earth import FLATTENING, R_OPLUS
from .timing import ModifiedJulianDate


@dataclass(frozen=True)
class GroundStation:
    """
    A ground station at a fixed geodetic location.

    Attributes
    ----------
    station_id : str
        Station identifier.
    latitude : float
        Geodetic latitude in radians (-π/2 to π/2, positive north).
    longitude : float
        Longitude in radians (positive east).
    altitude : float
        Height above the reference ellipsoid (er).
    """

    station_id: str
    latitude: float
    longitude: float
    altitude: float = 0.0

    @classmethod
    def at_coordinates(
        cls,
        station_id: str,
        latitude_deg: float,
        longitude_deg: float,
        altitude_km: float = 0.0,
    ) -> "GroundStation":
        """
        Create a ground station at geographic coordinates.

        Parameters
        ----------
        station_id : str
            Station identifier.
        latitude_deg : float
            Geodetic latitude in degrees.
        longitude_deg : float
            Longitude in degrees.
        altitude_km : float
            Height above the reference ellipsoid (km).

        Returns
        -------
        GroundStation
            New ground station instance.
        """
        return cls(
            station_id=station_id,
            latitude=math.radians(latitude_deg),
            longitude=math.radians(longitude_deg),
            altitude=altitude_km / R_OPLUS,
        )

    @property
    def latitude_deg(self) -> float:
        """Latitude in degrees."""
        return math.degrees(self.latitude)

    @property
    def longitude_deg(self) -> float:
        """Longitude in degrees."""
        return math.degrees(self.longitude)

    @cached_property
    def r_ger(self) -> np.ndarray:
        """
        Position in geocentric equatorial rotating coordinates (er).

        Computed on the oblate spheroid from the geodetic latitude, using
        the prime vertical radius of curvature N.
        """
        phi = self.latitude
        lam = self.longitude
        h = self.altitude
        f = FLATTENING
        N = 1.0 / math.sqrt(1 - f * (2 - f) * math.sin(phi) ** 2)
        return np.array([
            (N + h) * math.cos(phi) * math.cos(lam),
            (N + h) * math.cos(phi) * math.sin(lam),
            ((1.0 - f) ** 2 * N + h) * math.sin(phi),
        ])

    def r_gei(self, date: ModifiedJulianDate) -> np.ndarray:
        """Position in geocentric equatorial inertial coordinates (er)."""
        return ger_to_gei(self.r_ger, date)

    def look_angles(self, r_gei: np.ndarray, date: ModifiedJulianDate) -> np.ndarray:
        """
        Range, azimuth, and elevation of an inertial position.

        Parameters
        ----------
        r_gei : np.ndarray
            Geocentric equatorial inertial position of the target (er).
        date : ModifiedJulianDate
            Date at which the position occurs.

        Returns
        -------
        np.ndarray
            [range (er), azimuth (rad), elevation (rad)]
        """
        return ltp_to_rae(gei_to_ltp(r_gei, self, date))

    def is_visible(
        self,
        r_gei: np.ndarray,
        date: ModifiedJulianDate,
        min_elevation: float = 0.0,
    ) -> bool:
        """True when the target is at or above the minimum elevation (rad)."""
        return bool(self.look_angles(r_gei, date)[2] >= min_elevation)

    def visible_dates(
        self,
        positions: List[np.ndarray],
        dates: List[ModifiedJulianDate],
        min_elevation: float = 0.0,
    ) -> List[ModifiedJulianDate]:
        """Dates at which the matching inertial positions are visible."""
        return [
            date for r_gei, date in zip(positions, dates)
            if self.is_visible(r_gei, date, min_elevation)
        ]

    def __repr__(self) -> str:
        return (f"GroundStation({self.station_id!r}, lat={self.latitude_deg:.4f}°, "
                f"lon={self.longitude_deg:.4f}°, alt={self.altitude * R_OPLUS:.3f} km)")
