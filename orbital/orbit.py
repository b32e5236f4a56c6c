#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Two-Body Orbit Contract

Defines the interface shared by the Keplerian and Equinoctial
propagators: mean motion, orbital period, linear propagation of the mean
position, solution of Kepler's equation, and position in the orbital
plane and in the inertial and rotating frames.

Orbits are immutable. Derived quantities are computed once at
construction, and replace() builds a new orbit with some elements changed,
so a partially updated orbit is never observable.

All distances in Earth radii, angles in radians, time in seconds.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .config import SolverConfig, SolverMethod
from .coordinates import check_wrap, gei_to_ger, gei_to_ger_state
from .diagnostics import Diagnostic
from .earth import GM_OPLUS, R_OPLUS
from .solver import KeplerSolution
from .timing import ModifiedJulianDate

MethodLike = Union[SolverConfig, SolverMethod, str]


def as_date(epoch: Union[ModifiedJulianDate, float]) -> ModifiedJulianDate:
    """Accept a date or a bare modified Julian date value."""
    if isinstance(epoch, ModifiedJulianDate):
        return epoch
    return ModifiedJulianDate(epoch)


class Orbit(ABC):
    """
    A two-body orbit about the Earth.

    Parameters
    ----------
    semi_major_axis : float
        Semi-major axis (er)
    epoch : ModifiedJulianDate
        Date at which the elements apply
    method : SolverConfig, SolverMethod, or str
        Method used to solve Kepler's equation, "newton" or "halley", or a
        full solver configuration
    """

    def __init__(
        self,
        semi_major_axis: float,
        epoch: Union[ModifiedJulianDate, float],
        method: MethodLike = SolverMethod.HALLEY,
    ):
        if not semi_major_axis > 0:
            raise ValueError("Semi-major axis must be positive")

        self._a = float(semi_major_axis)
        self._epoch = as_date(epoch)
        self._solver = SolverConfig.resolve(method)

        self._n = self.mean_motion()
        self._T = self.orbital_period()

    # Elements

    @property
    def semi_major_axis(self) -> float:
        """Semi-major axis (er)."""
        return self._a

    a = semi_major_axis

    @property
    def epoch(self) -> ModifiedJulianDate:
        """Date at which the elements apply."""
        return self._epoch

    @property
    def solver(self) -> SolverConfig:
        """Configuration used to solve Kepler's equation."""
        return self._solver

    @property
    def method(self) -> SolverMethod:
        """Method used to solve Kepler's equation."""
        return self._solver.method

    @property
    def n(self) -> float:
        """Mean motion computed at construction (rad/s)."""
        return self._n

    @property
    def T(self) -> float:
        """Orbital period computed at construction (s)."""
        return self._T

    @abstractmethod
    def elements(self) -> Dict[str, Any]:
        """Constructor arguments which reproduce this orbit."""

    @property
    @abstractmethod
    def mean_position_at_epoch(self) -> float:
        """Mean anomaly or mean longitude at the epoch (rad)."""

    # Two-body contract

    def mean_motion(self) -> float:
        """
        Mean motion from Kepler's third law.

        Returns
        -------
        float
            Mean motion (rad/s)
        """
        return math.sqrt(GM_OPLUS / (R_OPLUS * self._a) ** 3)

    def orbital_period(self) -> float:
        """
        Orbital period from Kepler's third law.

        Returns
        -------
        float
            Orbital period (s)
        """
        return 2 * math.pi * math.sqrt((R_OPLUS * self._a) ** 3 / GM_OPLUS)

    def mean_position(self, date: ModifiedJulianDate) -> float:
        """
        Mean position at a date, propagated linearly from the epoch.

        Parameters
        ----------
        date : ModifiedJulianDate
            Date at which the mean position occurs

        Returns
        -------
        float
            Mean anomaly or mean longitude in [0, 2π)
        """
        return check_wrap(self.mean_position_at_epoch + self._n * date.seconds_since(self._epoch))

    @abstractmethod
    def keplers_equation(
        self,
        mean_position: float,
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> KeplerSolution:
        """Solve Kepler's equation for the eccentric position."""

    @abstractmethod
    def r_goi(self, eccentric_position: float) -> np.ndarray:
        """Position in the orbital plane inertial frame (er)."""

    @abstractmethod
    def v_goi(self, eccentric_position: float) -> np.ndarray:
        """Velocity in the orbital plane inertial frame (er/s)."""

    @abstractmethod
    def r_gei(self, date: ModifiedJulianDate) -> np.ndarray:
        """Position in the geocentric equatorial inertial frame (er)."""

    @abstractmethod
    def v_gei(self, date: ModifiedJulianDate) -> np.ndarray:
        """Velocity in the geocentric equatorial inertial frame (er/s)."""

    def eccentric_position(self, date: ModifiedJulianDate) -> float:
        """Eccentric anomaly or longitude at a date (rad)."""
        return self.keplers_equation(self.mean_position(date)).value

    def r_ger(self, date: ModifiedJulianDate) -> np.ndarray:
        """Position in the geocentric equatorial rotating frame (er)."""
        return gei_to_ger(self.r_gei(date), date)

    def v_ger(self, date: ModifiedJulianDate) -> np.ndarray:
        """Velocity in the geocentric equatorial rotating frame (er/s)."""
        return gei_to_ger_state(self.r_gei(date), self.v_gei(date), date)[1]

    # Construction

    def replace(self, **changes) -> "Orbit":
        """
        Build a new orbit with some elements changed.

        Derived quantities of the new orbit are computed from scratch.

        Raises
        ------
        TypeError
            If an unknown element is named
        """
        values = self.elements()
        unknown = set(changes) - set(values)
        if unknown:
            raise TypeError(f"Unknown elements: {', '.join(sorted(unknown))}")
        values.update(changes)
        return type(self)(**values)

    def copy(self) -> "Orbit":
        """Return an independent orbit with the same elements."""
        return self.replace()

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.elements() == other.elements()

    def __hash__(self) -> int:
        return hash((type(self), tuple(self.elements().items())))
