#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hohmann Transfer

Two-impulse transfer between near-circular coplanar orbits: a burn at
the perigee of an elliptical transfer orbit raises its apogee to the final
orbit, and a second burn at apogee circularizes.
"""

import logging
import math

import numpy as np

from .keplerian import KeplerianOrbit
from .timing import SECONDS_PER_DAY

logger = logging.getLogger(__name__)

# Largest eccentricity treated as circular
MAX_ECCENTRICITY = 0.001


class HohmannTransfer:
    """
    A Hohmann transfer between two Keplerian orbits.

    Parameters
    ----------
    initial : KeplerianOrbit
        Orbit before the transfer
    final : KeplerianOrbit
        Orbit after the transfer. Its epoch and mean anomaly are replaced
        so that the object arrives at apogee of the transfer orbit.

    Attributes
    ----------
    initial : KeplerianOrbit
        Orbit before the transfer
    transfer : KeplerianOrbit
        Transfer orbit, at perigee at its epoch
    final : KeplerianOrbit
        Final orbit, at the transfer apogee at its epoch
    v_1 : float
        Speed in the initial orbit at the first burn (er/s)
    v_t_p : float
        Speed in the transfer orbit at perigee (er/s)
    v_t_a : float
        Speed in the transfer orbit at apogee (er/s)
    v_2 : float
        Speed in the final orbit at the second burn (er/s)
    delta_v_p : float
        Change in speed at perigee (er/s)
    delta_v_a : float
        Change in speed at apogee (er/s)

    Raises
    ------
    ValueError
        If either orbit is not near-circular, or the orbits are not coplanar
    """

    def __init__(self, initial: KeplerianOrbit, final: KeplerianOrbit):
        if initial.eccentricity > MAX_ECCENTRICITY or final.eccentricity > MAX_ECCENTRICITY:
            raise ValueError(
                f"Orbits must be near-circular (e <= {MAX_ECCENTRICITY}) for a Hohmann transfer"
            )
        if initial.raan != final.raan or initial.inclination != final.inclination:
            raise ValueError("Orbits must be coplanar")

        self.initial = initial
        self.transfer = self._transfer_orbit(initial, final)

        # Arrive at apogee half a transfer period after departure
        epoch_2 = self.transfer.epoch.add_offset(0.5 * self.transfer.T / SECONDS_PER_DAY)
        self.final = final.replace(mean_anomaly=math.pi, epoch=epoch_2)

        epoch_t = self.transfer.epoch
        self.v_1 = float(np.linalg.norm(self.initial.v_gei(epoch_t)))
        self.v_t_p = float(np.linalg.norm(self.transfer.v_gei(epoch_t)))
        self.v_t_a = float(np.linalg.norm(self.transfer.v_gei(epoch_2)))
        self.v_2 = float(np.linalg.norm(self.final.v_gei(epoch_2)))

        self.delta_v_p = self.v_t_p - self.v_1
        self.delta_v_a = self.v_2 - self.v_t_a

        logger.info(
            f"Hohmann transfer from a={initial.semi_major_axis:.4f} er to "
            f"a={final.semi_major_axis:.4f} er: delta-v {self.delta_v_p:.6e} + "
            f"{self.delta_v_a:.6e} er/s"
        )

    @staticmethod
    def _transfer_orbit(initial: KeplerianOrbit, final: KeplerianOrbit) -> KeplerianOrbit:
        r_1 = initial.semi_major_axis * (1 - initial.eccentricity)
        r_2 = final.semi_major_axis * (1 + final.eccentricity)

        # Depart at the next perigee passage of the initial orbit
        if initial.mean_anomaly > 0:
            epoch_t = initial.epoch.add_offset(
                (2 * math.pi - initial.mean_anomaly) / initial.n / SECONDS_PER_DAY
            )
        else:
            epoch_t = initial.epoch

        return KeplerianOrbit(
            semi_major_axis=(r_1 + r_2) / 2,
            eccentricity=(r_2 - r_1) / (r_2 + r_1),
            inclination=initial.inclination,
            raan=initial.raan,
            argument_of_perigee=initial.argument_of_perigee,
            mean_anomaly=0.0,
            epoch=epoch_t,
            method=initial.solver,
        )

    @property
    def total_delta_v(self) -> float:
        """Total change in speed (er/s)."""
        return abs(self.delta_v_p) + abs(self.delta_v_a)

    @property
    def transfer_time(self) -> float:
        """Time between the burns (s)."""
        return 0.5 * self.transfer.T

    def __repr__(self) -> str:
        return (f"HohmannTransfer(delta_v_p={self.delta_v_p:.6e} er/s, "
                f"delta_v_a={self.delta_v_a:.6e} er/s, "
                f"transfer_time={self.transfer_time:.1f} s)")
