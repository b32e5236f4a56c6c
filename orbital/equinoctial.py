#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Equinoctial Orbit

Describes an orbit using equinoctial elements, which remain well defined
for circular and equatorial orbits. The generalized Kepler's equation is
solved for the eccentric longitude, and position and velocity are computed
in the orbital plane and relative to the Earth center.

The elements are:

- j: direct (+1) or retrograde (-1) orbit indicator
- a: semi-major axis (er)
- h, k: y and x components of the eccentricity vector
- p, q: y and x components of the nodal vector
- mean_longitude: mean longitude at epoch (rad)
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from .config import SolverMethod
from .coordinates import check_wrap
from .diagnostics import Diagnostic
from .keplerian import KeplerianOrbit
from .orbit import MethodLike, Orbit
from .solver import KeplerSolution, solve
from .timing import ModifiedJulianDate

logger = logging.getLogger(__name__)


class EquinoctialOrbit(Orbit):
    """
    An orbit defined by equinoctial elements.

    Parameters
    ----------
    j : int
        Direct (+1) or retrograde (-1) orbit indicator
    semi_major_axis : float
        Semi-major axis (er)
    h : float
        Y component of the eccentricity vector
    k : float
        X component of the eccentricity vector
    p : float
        Y component of the nodal vector
    q : float
        X component of the nodal vector
    mean_longitude : float
        Mean longitude at epoch (rad)
    epoch : ModifiedJulianDate
        Date at which the elements apply
    method : SolverConfig, SolverMethod, or str
        Method used to solve Kepler's equation: "newton" or "halley"
    """

    def __init__(
        self,
        j: int,
        semi_major_axis: float,
        h: float,
        k: float,
        p: float,
        q: float,
        mean_longitude: float,
        epoch: Union[ModifiedJulianDate, float],
        method: MethodLike = SolverMethod.HALLEY,
    ):
        if j not in (1, -1):
            raise ValueError(f"Orbit indicator j must be +1 or -1, not {j!r}")
        if not h ** 2 + k ** 2 < 1:
            raise ValueError("Eccentricity vector must satisfy h^2 + k^2 < 1")

        self._j = int(j)
        self._h = float(h)
        self._k = float(k)
        self._p = float(p)
        self._q = float(q)
        self._lambda = check_wrap(mean_longitude)

        super().__init__(semi_major_axis, epoch, method)
        logger.debug(f"Constructed {self!r}")

    def elements(self) -> Dict[str, Any]:
        return {
            "j": self._j,
            "semi_major_axis": self._a,
            "h": self._h,
            "k": self._k,
            "p": self._p,
            "q": self._q,
            "mean_longitude": self._lambda,
            "epoch": self._epoch,
            "method": self._solver,
        }

    @property
    def j(self) -> int:
        return self._j

    @property
    def h(self) -> float:
        return self._h

    @property
    def k(self) -> float:
        return self._k

    @property
    def p(self) -> float:
        return self._p

    @property
    def q(self) -> float:
        return self._q

    @property
    def mean_longitude(self) -> float:
        """Mean longitude at epoch (rad)."""
        return self._lambda

    @property
    def mean_position_at_epoch(self) -> float:
        return self._lambda

    @property
    def eccentricity(self) -> float:
        """Magnitude of the eccentricity vector."""
        return math.hypot(self._h, self._k)

    @property
    def longitude_of_perigee(self) -> float:
        """Longitude of perigee, ω + jΩ (rad)."""
        return check_wrap(math.atan2(self._h, self._k))

    @property
    def _beta(self) -> float:
        return 1 / (1 + math.sqrt(1 - self._h ** 2 - self._k ** 2))

    def keplers_equation(
        self,
        mean_position: float,
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> KeplerSolution:
        """
        Solve the generalized Kepler's equation, λ = F + h cos F - k sin F.

        Parameters
        ----------
        mean_position : float
            Mean longitude (rad)
        diagnostics : list, optional
            Collects a diagnostic if the iteration cap is exceeded

        Returns
        -------
        KeplerSolution
            Eccentric longitude (rad), iteration count, and convergence flag
        """
        h, k = self._h, self._k
        lam = mean_position
        if self.eccentricity < 0.8:
            initial = lam
        else:
            initial = math.atan2(h, k) + math.pi
        return solve(
            lambda F: F + h * math.cos(F) - k * math.sin(F) - lam,
            lambda F: 1 - h * math.sin(F) - k * math.cos(F),
            lambda F: -h * math.cos(F) + k * math.sin(F),
            initial,
            self._solver,
            diagnostics,
        )

    def r_goi(self, eccentric_position: float) -> np.ndarray:
        """
        Position in the equinoctial reference frame.

        Parameters
        ----------
        eccentric_position : float
            Eccentric longitude (rad)

        Returns
        -------
        np.ndarray
            [X1, Y1, 0] in the orbital plane (er)
        """
        F = eccentric_position
        a, h, k, beta = self._a, self._h, self._k, self._beta
        X_1 = a * ((1 - h ** 2 * beta) * math.cos(F) + h * k * beta * math.sin(F) - k)
        Y_1 = a * ((1 - k ** 2 * beta) * math.sin(F) + h * k * beta * math.cos(F) - h)
        return np.array([X_1, Y_1, 0.0])

    def v_goi(self, eccentric_position: float) -> np.ndarray:
        """Velocity in the equinoctial reference frame (er/s)."""
        F = eccentric_position
        a, h, k, beta = self._a, self._h, self._k, self._beta
        r = a * (1 - k * math.cos(F) - h * math.sin(F))
        v = self._n * a ** 2 / r
        X_1_dot = v * (h * k * beta * math.cos(F) - (1 - h ** 2 * beta) * math.sin(F))
        Y_1_dot = v * ((1 - k ** 2 * beta) * math.cos(F) - h * k * beta * math.sin(F))
        return np.array([X_1_dot, Y_1_dot, 0.0])

    def basis(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Equinoctial basis vectors in inertial coordinates.

        Returns
        -------
        tuple
            (f, g) unit vectors spanning the orbital plane
        """
        j, p, q = self._j, self._p, self._q
        m = 1 + p ** 2 + q ** 2
        f = np.array([1 - p ** 2 + q ** 2, 2 * p * q, -2 * p * j]) / m
        g = np.array([2 * p * q * j, (1 + p ** 2 - q ** 2) * j, 2 * q]) / m
        return f, g

    def r_gei(self, date: ModifiedJulianDate) -> np.ndarray:
        """
        Position in the geocentric equatorial inertial frame.

        Parameters
        ----------
        date : ModifiedJulianDate
            Date at which the position occurs

        Returns
        -------
        np.ndarray
            Geocentric equatorial inertial position (er)
        """
        X_1, Y_1, _ = self.r_goi(self.eccentric_position(date))
        f, g = self.basis()
        return X_1 * f + Y_1 * g

    def v_gei(self, date: ModifiedJulianDate) -> np.ndarray:
        """Velocity in the geocentric equatorial inertial frame (er/s)."""
        X_1_dot, Y_1_dot, _ = self.v_goi(self.eccentric_position(date))
        f, g = self.basis()
        return X_1_dot * f + Y_1_dot * g

    def to_keplerian(self) -> KeplerianOrbit:
        """Equivalent Keplerian orbit; see equinoctial_to_keplerian."""
        return equinoctial_to_keplerian(self)

    def __repr__(self) -> str:
        return (
            f"EquinoctialOrbit(j={self._j:+d}, a={self._a:.6f} er, "
            f"h={self._h:.6f}, k={self._k:.6f}, p={self._p:.6f}, q={self._q:.6f}, "
            f"lambda={math.degrees(self._lambda):.4f}°, epoch={self._epoch.value}, "
            f"method={self.method.value})"
        )


def keplerian_to_equinoctial(orbit: KeplerianOrbit, j: Optional[int] = None) -> EquinoctialOrbit:
    """
    Convert Keplerian elements to equinoctial elements.

    Parameters
    ----------
    orbit : KeplerianOrbit
        Orbit to convert
    j : int, optional
        Direct (+1) or retrograde (-1) indicator. By default direct for
        inclinations up to π/2, retrograde above, which keeps the nodal
        vector finite.

    Returns
    -------
    EquinoctialOrbit
        Orbit at the same epoch with the same solver configuration
    """
    if j is None:
        j = 1 if orbit.inclination <= math.pi / 2 else -1

    e = orbit.eccentricity
    Omega = orbit.raan
    varpi = orbit.argument_of_perigee + j * Omega
    tan_half_i = math.tan(orbit.inclination / 2) ** j

    return EquinoctialOrbit(
        j=j,
        semi_major_axis=orbit.semi_major_axis,
        h=e * math.sin(varpi),
        k=e * math.cos(varpi),
        p=tan_half_i * math.sin(Omega),
        q=tan_half_i * math.cos(Omega),
        mean_longitude=orbit.mean_anomaly + varpi,
        epoch=orbit.epoch,
        method=orbit.solver,
    )


def equinoctial_to_keplerian(orbit: EquinoctialOrbit) -> KeplerianOrbit:
    """
    Convert equinoctial elements to Keplerian elements.

    For a circular orbit the argument of perigee is undefined and is taken
    as zero in the equinoctial frame, so ω = -jΩ.

    Parameters
    ----------
    orbit : EquinoctialOrbit
        Orbit to convert

    Returns
    -------
    KeplerianOrbit
        Orbit at the same epoch with the same solver configuration
    """
    j = orbit.j
    Omega = math.atan2(orbit.p, orbit.q)
    if j == 1:
        inclination = 2 * math.atan(math.hypot(orbit.p, orbit.q))
    else:
        inclination = math.pi - 2 * math.atan(math.hypot(orbit.p, orbit.q))
    varpi = math.atan2(orbit.h, orbit.k)

    return KeplerianOrbit(
        semi_major_axis=orbit.semi_major_axis,
        eccentricity=orbit.eccentricity,
        inclination=inclination,
        raan=Omega,
        argument_of_perigee=varpi - j * Omega,
        mean_anomaly=orbit.mean_longitude - varpi,
        epoch=orbit.epoch,
        method=orbit.solver,
    )
