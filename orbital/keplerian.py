#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Keplerian Orbit

Describes an orbit using classical Keplerian elements, solving Kepler's
equation for the eccentric anomaly and computing position and velocity in
the orbital plane and relative to the Earth center. First-order secular
rates due to the J2 harmonic are computed with the orbit.

Equation references are to Montenbruck and Gill, "Satellite Orbits" (MG).
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from .config import SolverMethod
from .coordinates import check_wrap, rotation_x, rotation_z
from .diagnostics import Diagnostic
from .earth import GM_ER, J_2
from .orbit import MethodLike, Orbit
from .solver import KeplerSolution, solve
from .timing import ModifiedJulianDate

logger = logging.getLogger(__name__)


class KeplerianOrbit(Orbit):
    """
    An orbit defined by Keplerian elements.

    Parameters
    ----------
    semi_major_axis : float
        Semi-major axis (er)
    eccentricity : float
        Eccentricity, 0 <= e < 1
    inclination : float
        Inclination (rad)
    raan : float
        Right ascension of the ascending node, Ω (rad)
    argument_of_perigee : float
        Argument of perigee, ω (rad)
    mean_anomaly : float
        Mean anomaly at epoch (rad)
    epoch : ModifiedJulianDate
        Date at which the elements apply
    method : SolverConfig, SolverMethod, or str
        Method used to solve Kepler's equation: "newton" or "halley"

    Attributes
    ----------
    raan_rate : float
        Right ascension of the ascending node rate of change (rad/s)
    argument_of_perigee_rate : float
        Argument of perigee rate of change (rad/s)
    mean_anomaly_rate : float
        Initial mean anomaly rate of change (rad/s)
    """

    def __init__(
        self,
        semi_major_axis: float,
        eccentricity: float,
        inclination: float,
        raan: float,
        argument_of_perigee: float,
        mean_anomaly: float,
        epoch: Union[ModifiedJulianDate, float],
        method: MethodLike = SolverMethod.HALLEY,
    ):
        if not 0 <= eccentricity < 1:
            raise ValueError("Eccentricity must be in the interval [0, 1)")

        self._e = float(eccentricity)
        self._i = check_wrap(inclination)
        self._Omega = check_wrap(raan)
        self._omega = check_wrap(argument_of_perigee)
        self._M = check_wrap(mean_anomaly)

        super().__init__(semi_major_axis, epoch, method)

        self._Omega_dot, self._omega_dot, self._M_0_dot = self.secular_rates()
        logger.debug(f"Constructed {self!r}")

    def elements(self) -> Dict[str, Any]:
        return {
            "semi_major_axis": self._a,
            "eccentricity": self._e,
            "inclination": self._i,
            "raan": self._Omega,
            "argument_of_perigee": self._omega,
            "mean_anomaly": self._M,
            "epoch": self._epoch,
            "method": self._solver,
        }

    @property
    def eccentricity(self) -> float:
        """Eccentricity."""
        return self._e

    @property
    def inclination(self) -> float:
        """Inclination (rad)."""
        return self._i

    @property
    def raan(self) -> float:
        """Right ascension of the ascending node (rad)."""
        return self._Omega

    @property
    def argument_of_perigee(self) -> float:
        """Argument of perigee (rad)."""
        return self._omega

    @property
    def mean_anomaly(self) -> float:
        """Mean anomaly at epoch (rad)."""
        return self._M

    e = eccentricity
    i = inclination
    Omega = raan
    omega = argument_of_perigee
    M = mean_anomaly

    @property
    def mean_position_at_epoch(self) -> float:
        return self._M

    @property
    def raan_rate(self) -> float:
        return self._Omega_dot

    @property
    def argument_of_perigee_rate(self) -> float:
        return self._omega_dot

    @property
    def mean_anomaly_rate(self) -> float:
        return self._M_0_dot

    @property
    def semi_latus_rectum(self) -> float:
        """Semi-latus rectum p = a (1 - e^2) (er)."""
        return self._a * (1 - self._e ** 2)

    def secular_rates(self) -> Tuple[float, float, float]:
        """
        First-order secular perturbations due to J2.

        Returns
        -------
        tuple
            (Omega_dot, omega_dot, M_0_dot), the rates of change of the
            right ascension of the ascending node, the argument of perigee,
            and the initial mean anomaly (rad/s)
        """
        p = self.semi_latus_rectum
        factor = (3.0 / 2.0) * (J_2 / p ** 2) * self._n
        sin_i_sq = math.sin(self._i) ** 2

        Omega_dot = -factor * math.cos(self._i)
        omega_dot = +factor * (2 - (5.0 / 2.0) * sin_i_sq)
        M_0_dot = +factor * math.sqrt(1 - self._e ** 2) * (1 - (3.0 / 2.0) * sin_i_sq)
        return Omega_dot, omega_dot, M_0_dot

    def perturbed(self, date: ModifiedJulianDate) -> "KeplerianOrbit":
        """
        Orbit at a new epoch including the J2 secular rates.

        The node and perigee drift at their secular rates, and the mean
        anomaly advances at the mean motion plus its secular rate.

        Parameters
        ----------
        date : ModifiedJulianDate
            New epoch

        Returns
        -------
        KeplerianOrbit
            Orbit with elements valid at the new epoch
        """
        dt = date.seconds_since(self._epoch)
        return self.replace(
            raan=self._Omega + self._Omega_dot * dt,
            argument_of_perigee=self._omega + self._omega_dot * dt,
            mean_anomaly=self._M + (self._n + self._M_0_dot) * dt,
            epoch=date,
        )

    def keplers_equation(
        self,
        mean_position: float,
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> KeplerSolution:
        """
        Solve the conventional Kepler's equation, M = E - e sin E (MG-2.42).

        The initial guess is the mean anomaly, or π for eccentricities of
        0.8 and above, where convergence from the mean anomaly is slow.

        Parameters
        ----------
        mean_position : float
            Mean anomaly (rad)
        diagnostics : list, optional
            Collects a diagnostic if the iteration cap is exceeded

        Returns
        -------
        KeplerSolution
            Eccentric anomaly (rad), iteration count, and convergence flag
        """
        e = self._e
        M = mean_position
        initial = M if e < 0.8 else math.pi
        return solve(
            lambda E: E - e * math.sin(E) - M,
            lambda E: 1 - e * math.cos(E),
            lambda E: e * math.sin(E),
            initial,
            self._solver,
            diagnostics,
        )

    def r_goi(self, eccentric_position: float) -> np.ndarray:
        """
        Position in the orbital plane (MG-2.30).

        Parameters
        ----------
        eccentric_position : float
            Eccentric anomaly (rad)

        Returns
        -------
        np.ndarray
            Orbital plane inertial position, x toward perigee (er)
        """
        E = eccentric_position
        a, e = self._a, self._e
        return np.array([
            a * (math.cos(E) - e),
            a * math.sqrt(1 - e ** 2) * math.sin(E),
            0.0,
        ])

    def v_goi(self, eccentric_position: float) -> np.ndarray:
        """
        Velocity in the orbital plane (MG-2.44).

        Parameters
        ----------
        eccentric_position : float
            Eccentric anomaly (rad)

        Returns
        -------
        np.ndarray
            Orbital plane inertial velocity (er/s)
        """
        E = eccentric_position
        a, e = self._a, self._e
        r = a * (1 - e * math.cos(E))
        v = math.sqrt(GM_ER * a) / r
        return np.array([
            -v * math.sin(E),
            +v * math.sqrt(1 - e ** 2) * math.cos(E),
            0.0,
        ])

    def orbital_plane_to_gei_matrix(self) -> np.ndarray:
        """Rotation from the orbital plane to the inertial frame (MG-2.50)."""
        return rotation_z(-self._Omega) @ rotation_x(-self._i) @ rotation_z(-self._omega)

    def r_gei(self, date: ModifiedJulianDate) -> np.ndarray:
        """
        Position in the geocentric equatorial inertial frame (MG-2.50).

        Parameters
        ----------
        date : ModifiedJulianDate
            Date at which the position occurs

        Returns
        -------
        np.ndarray
            Geocentric equatorial inertial position (er)
        """
        return self.orbital_plane_to_gei_matrix() @ self.r_goi(self.eccentric_position(date))

    def v_gei(self, date: ModifiedJulianDate) -> np.ndarray:
        """Velocity in the geocentric equatorial inertial frame (er/s)."""
        return self.orbital_plane_to_gei_matrix() @ self.v_goi(self.eccentric_position(date))

    def state_at(self, date: ModifiedJulianDate) -> Tuple[np.ndarray, np.ndarray]:
        """Inertial position and velocity at a date, solving Kepler's equation once."""
        E = self.eccentric_position(date)
        R = self.orbital_plane_to_gei_matrix()
        return R @ self.r_goi(E), R @ self.v_goi(E)

    def vis_viva_law(self, eccentric_anomaly: float) -> float:
        """
        Orbital speed from the vis-viva law (MG-2.22).

        Parameters
        ----------
        eccentric_anomaly : float
            Eccentric anomaly (rad)

        Returns
        -------
        float
            Orbital speed (er/s)
        """
        r = float(np.linalg.norm(self.r_goi(eccentric_anomaly)))
        return math.sqrt(GM_ER * (2 / r - 1 / self._a))

    def element_set(
        self,
        epoch: ModifiedJulianDate,
        r_gei: np.ndarray,
        v_gei: np.ndarray,
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> "KeplerianOrbit":
        """
        Keplerian elements of an inertial position and velocity.

        The returned orbit solves Kepler's equation with this orbit's
        solver configuration. See orbital.determination.element_set.
        """
        from .determination import element_set

        return element_set(epoch, r_gei, v_gei, method=self._solver, diagnostics=diagnostics)

    def to_equinoctial(self, j: Optional[int] = None):
        """Equivalent equinoctial orbit; see keplerian_to_equinoctial."""
        from .equinoctial import keplerian_to_equinoctial

        return keplerian_to_equinoctial(self, j)

    def __repr__(self) -> str:
        return (
            f"KeplerianOrbit(a={self._a:.6f} er, e={self._e:.6f}, "
            f"i={math.degrees(self._i):.4f}°, RAAN={math.degrees(self._Omega):.4f}°, "
            f"arg_perigee={math.degrees(self._omega):.4f}°, "
            f"M={math.degrees(self._M):.4f}°, epoch={self._epoch.value}, "
            f"method={self.method.value})"
        )
