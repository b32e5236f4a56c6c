#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orbit Determination

Keplerian elements from an inertial state vector, a preliminary orbit from
two inertial positions by Gauss's method, and differential correction of
an orbit against observed positions (Montenbruck and Gill, "Satellite
Orbits", sections 2.2.4 and 2.4.2, and equation 7.108).
"""

import logging
import math
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import (
    DAMPING_FACTOR,
    DEFAULT_MAX_ITERATIONS,
    DIFFERENCE_STEP,
    ELEMENT_SET_MIN_ECCENTRICITY,
    GAUSS_TOLERANCE,
    INITIAL_DAMPING,
    LINE_SEARCH_TOLERANCE,
    MAX_DAMPING,
    MAX_TIME_DIFFERENCE,
    CorrectionMethod,
    SolverMethod,
)
from .coordinates import check_wrap, cross
from .diagnostics import DIVERGED, Diagnostic, ILL_CONDITIONED, NOT_CONVERGED, emit
from .earth import GM_ER
from .keplerian import KeplerianOrbit
from .orbit import MethodLike
from .timing import ModifiedJulianDate

logger = logging.getLogger(__name__)


def element_set(
    epoch: ModifiedJulianDate,
    r_gei: np.ndarray,
    v_gei: np.ndarray,
    method: MethodLike = SolverMethod.HALLEY,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> KeplerianOrbit:
    """
    Keplerian elements of an inertial position and velocity.

    The argument of perigee and mean anomaly are poorly determined for
    nearly circular orbits. A diagnostic is emitted below an eccentricity
    of ELEMENT_SET_MIN_ECCENTRICITY, but the elements are still returned.

    Parameters
    ----------
    epoch : ModifiedJulianDate
        Date at which the state vector occurs
    r_gei : np.ndarray
        Geocentric equatorial inertial position (er)
    v_gei : np.ndarray
        Geocentric equatorial inertial velocity (er/s)
    method : SolverConfig, SolverMethod, or str
        Solver for Kepler's equation carried by the returned orbit
    diagnostics : list, optional
        Collects a diagnostic for a poorly conditioned element set

    Returns
    -------
    KeplerianOrbit
        Orbit with elements valid at the epoch

    Raises
    ------
    ValueError
        If the state vector does not describe an elliptical orbit
    """
    r_gei = np.asarray(r_gei, dtype=float)
    v_gei = np.asarray(v_gei, dtype=float)
    r = float(np.linalg.norm(r_gei))

    # Areal velocity and orientation of the orbital plane (MG-2.56 to 2.58)
    h = cross(r_gei, v_gei)
    W = h / np.linalg.norm(h)
    i = math.atan2(math.hypot(W[0], W[1]), W[2])
    Omega = math.atan2(W[0], -W[1])

    # Shape from the vis-viva law (MG-2.59 to 2.62)
    p = float(h @ h) / GM_ER
    inverse_a = 2 / r - float(v_gei @ v_gei) / GM_ER
    if not inverse_a > 0:
        raise ValueError("State vector does not describe an elliptical orbit")
    a = 1 / inverse_a
    e = math.sqrt(max(0.0, 1 - p / a))
    n = math.sqrt(GM_ER / a ** 3)

    if e < ELEMENT_SET_MIN_ECCENTRICITY:
        emit(
            Diagnostic(
                ILL_CONDITIONED,
                f"Element set poorly conditioned for eccentricity {e:.3g}",
                {"eccentricity": e, "minimum": ELEMENT_SET_MIN_ECCENTRICITY},
            ),
            sink=diagnostics,
            log=logger,
        )

    # Anomalies (MG-2.63 to 2.66)
    E = math.atan2(float(r_gei @ v_gei) / (a ** 2 * n), 1 - r / a)
    M = E - e * math.sin(E)
    u = math.atan2(r_gei[2], -r_gei[0] * W[1] + r_gei[1] * W[0])
    nu = math.atan2(math.sqrt(1 - e ** 2) * math.sin(E), math.cos(E) - e)
    omega = u - nu

    return KeplerianOrbit(a, e, i, Omega, omega, M, epoch, method)


def sector_triangle_function(w: float) -> float:
    """
    Auxiliary function W(w) of the sector to triangle ratio (MG-2.105).

    Raises
    ------
    ValueError
        For w outside [0, 1], which has no elliptical solution
    """
    if w < 0:
        raise ValueError("Sector to triangle argument must be non-negative")
    if w > 1:
        raise ValueError("Sector to triangle argument must not exceed one")
    if w == 0:
        return 4.0 / 3.0
    g = 2 * math.asin(math.sqrt(w))
    return (2 * g - math.sin(2 * g)) / math.sin(g) ** 3


def sector_triangle_residual(eta: float, m: float, l: float) -> float:
    """Residual of the transcendental equation for the sector to triangle ratio (MG-2.106)."""
    if not eta > 0:
        raise ValueError("Sector to triangle ratio must be positive")
    w = m / eta ** 2 - l
    return 1 - eta + (m / eta ** 2) * sector_triangle_function(w)


def sector_triangle_ratio(
    tau: float,
    r_a: np.ndarray,
    r_b: np.ndarray,
    tolerance: float = GAUSS_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> float:
    """
    Ratio of the orbital sector to the triangle between two positions.

    Solved by the secant method from Hansen's approximation.

    Parameters
    ----------
    tau : float
        Normalized time between the positions, sqrt(GM) (t_b - t_a)
    r_a, r_b : np.ndarray
        Inertial positions (er)
    tolerance : float
        Convergence tolerance on the ratio
    max_iterations : int
        Iteration cap; the last iterate is returned when it is exceeded
    diagnostics : list, optional
        Collects a diagnostic if the iteration cap is exceeded

    Returns
    -------
    float
        Sector to triangle ratio η

    Raises
    ------
    ValueError
        If an iterate has no elliptical solution, as for a hyperbolic arc
        or an arc spanning more than one revolution
    """
    r_a_mag = float(np.linalg.norm(r_a))
    r_b_mag = float(np.linalg.norm(r_b))
    s = math.sqrt(2 * (r_a_mag * r_b_mag + float(r_a @ r_b)))
    m = tau ** 2 / s ** 3
    l = (r_a_mag + r_b_mag) / (2 * s) - 0.5

    eta_0 = 12.0 / 22.0 + (10.0 / 22.0) * math.sqrt(1 + (44.0 / 9.0) * m / (l + 5.0 / 6.0))
    eta_im1 = eta_0 + 0.1
    eta_i = eta_0
    f_im1 = sector_triangle_residual(eta_im1, m, l)

    for iteration in range(1, max_iterations + 1):
        f_i = sector_triangle_residual(eta_i, m, l)
        if f_i == f_im1:
            # Secant is flat
            break
        eta_ip1 = eta_i - f_i * (eta_i - eta_im1) / (f_i - f_im1)
        if abs(eta_ip1 - eta_i) < tolerance:
            logger.debug(f"Sector to triangle ratio {eta_ip1:.12f} in {iteration} iterations")
            return eta_ip1
        eta_im1, f_im1 = eta_i, f_i
        eta_i = eta_ip1

    emit(
        Diagnostic(
            NOT_CONVERGED,
            f"Sector to triangle ratio not converged after {iteration} iterations",
            {"initial": eta_0, "last": eta_i, "tolerance": tolerance},
        ),
        sink=diagnostics,
        log=logger,
    )
    return eta_i


def preliminary_orbit(
    date_a: ModifiedJulianDate,
    r_a: np.ndarray,
    date_b: ModifiedJulianDate,
    r_b: np.ndarray,
    method: MethodLike = SolverMethod.HALLEY,
    tolerance: float = GAUSS_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> Optional[KeplerianOrbit]:
    """
    Preliminary orbit from two inertial positions by Gauss's method.

    Parameters
    ----------
    date_a : ModifiedJulianDate
        Date of the first position, and epoch of the orbit
    r_a : np.ndarray
        First inertial position (er)
    date_b : ModifiedJulianDate
        Date of the second position
    r_b : np.ndarray
        Second inertial position (er)
    method : SolverConfig, SolverMethod, or str
        Solver for Kepler's equation carried by the returned orbit
    tolerance : float
        Convergence tolerance on the sector to triangle ratio
    max_iterations : int
        Iteration cap on the sector to triangle ratio
    diagnostics : list, optional
        Collects a diagnostic if the iteration cap is exceeded

    Returns
    -------
    KeplerianOrbit or None
        The orbit, or None when it is not elliptical, intersects the
        Earth, or reaches beyond seven Earth radii
    """
    r_a = np.asarray(r_a, dtype=float)
    r_b = np.asarray(r_b, dtype=float)
    r_a_mag = float(np.linalg.norm(r_a))
    r_b_mag = float(np.linalg.norm(r_b))

    tau = math.sqrt(GM_ER) * date_b.seconds_since(date_a)
    try:
        eta = sector_triangle_ratio(tau, r_a, r_b, tolerance, max_iterations, diagnostics)
    except ValueError as error:
        logger.info(f"Preliminary orbit is not elliptical ({error})")
        return None

    # Gaussian vectors and orientation of the orbital plane (MG-2.107 to 2.110)
    e_a = r_a / r_a_mag
    r_0 = r_b - float(r_b @ e_a) * e_a
    r_0_mag = float(np.linalg.norm(r_0))
    e_0 = r_0 / r_0_mag
    W = cross(e_a, e_0)
    i = math.atan2(math.hypot(W[0], W[1]), W[2])
    Omega = math.atan2(W[0], -W[1])

    u_a = math.atan2(r_a[2], -r_a[0] * W[1] + r_a[1] * W[0])

    # Semi-latus rectum and eccentricity (MG-2.112 to 2.118)
    Delta = 0.5 * r_a_mag * r_0_mag
    p = (2 * Delta * eta / tau) ** 2
    e_c = p / r_a_mag - 1
    e_s = ((p / r_a_mag - 1) * float(r_b @ e_a) / r_b_mag - (p / r_b_mag - 1)) * (r_b_mag / r_0_mag)
    e = math.hypot(e_c, e_s)
    nu_a = math.atan2(e_s, e_c)
    omega = u_a - nu_a

    if not 0 < e < 1:
        logger.info(f"Preliminary orbit is not elliptical (e={e:.6f})")
        return None
    a = p / (1 - e ** 2)
    if not (a * (1 - e) > 1 and a * (1 + e) < 7):
        logger.info(f"Preliminary orbit outside 1 to 7 er (perigee {a * (1 - e):.3f}, "
                    f"apogee {a * (1 + e):.3f})")
        return None

    E_a = math.atan2(math.sqrt(1 - e ** 2) * math.sin(nu_a), math.cos(nu_a) + e)
    M = E_a - e * math.sin(E_a)

    return KeplerianOrbit(
        a, e, i, check_wrap(Omega), check_wrap(omega), check_wrap(M), date_a, method,
    )


# =============================================================================
# DIFFERENTIAL CORRECTION
# =============================================================================

class CorrectionStatus(Enum):
    """Outcome of a differential orbit correction."""

    SUCCESSFUL = "differential correction successful"
    DIVERGED = "differential correction diverged"
    MAX_ITERATIONS = "maximum iterations exceeded"


# Elements corrected, in the column order of the Jacobian
CORRECTED_ELEMENTS = (
    "semi_major_axis",
    "eccentricity",
    "inclination",
    "raan",
    "argument_of_perigee",
    "mean_anomaly",
)

# Limits on corrected elements
MIN_SEMI_MAJOR_AXIS = 1.0
ECCENTRICITY_LIMITS = (0.000001, 0.999999)


def position_residuals(
    orbit: KeplerianOrbit,
    dates: Sequence[ModifiedJulianDate],
    positions: np.ndarray,
) -> np.ndarray:
    """Observed minus modeled inertial positions, stacked into one vector (er)."""
    return np.concatenate([
        observed - orbit.r_gei(date) for date, observed in zip(dates, positions)
    ])


def sum_of_squares(
    orbit: KeplerianOrbit,
    dates: Sequence[ModifiedJulianDate],
    positions: np.ndarray,
) -> float:
    """Sum of the squared differences between observed and modeled positions."""
    dz = position_residuals(orbit, dates, positions)
    return float(dz @ dz)


def jacobian(
    orbit: KeplerianOrbit,
    date: ModifiedJulianDate,
    step: float = DIFFERENCE_STEP,
) -> np.ndarray:
    """
    Jacobian of the inertial position with respect to the Keplerian
    elements, by centered differences (MG-7.108).

    Parameters
    ----------
    orbit : KeplerianOrbit
        The orbit
    date : ModifiedJulianDate
        Date of the position
    step : float
        Difference step relative to each element

    Returns
    -------
    np.ndarray
        3x6 matrix, with columns in the order of CORRECTED_ELEMENTS
    """
    H = np.empty((3, len(CORRECTED_ELEMENTS)))
    for column, name in enumerate(CORRECTED_ELEMENTS):
        value = getattr(orbit, name)
        dx = step * (abs(value) or 1.0)
        upper = value + dx / 2
        lower = value - dx / 2
        if name == "eccentricity":
            lower = max(lower, 0.0)
            upper = min(upper, ECCENTRICITY_LIMITS[1])
        r_upper = orbit.replace(**{name: upper}).r_gei(date)
        r_lower = orbit.replace(**{name: lower}).r_gei(date)
        H[:, column] = (r_upper - r_lower) / (upper - lower)
    return H


def apply_correction(orbit: KeplerianOrbit, dx: np.ndarray, alpha: float) -> KeplerianOrbit:
    """
    Apply a fraction of a differential correction to the elements.

    The semi-major axis, eccentricity, and inclination are held to
    physical limits; the angles are wrapped.
    """
    a, e, i, Omega, omega, M = (
        getattr(orbit, name) + alpha * delta for name, delta in zip(CORRECTED_ELEMENTS, dx)
    )
    return orbit.replace(
        semi_major_axis=max(a, MIN_SEMI_MAJOR_AXIS),
        eccentricity=min(max(e, ECCENTRICITY_LIMITS[0]), ECCENTRICITY_LIMITS[1]),
        inclination=min(max(i, 0.0), math.pi),
        raan=Omega,
        argument_of_perigee=omega,
        mean_anomaly=M,
    )


def compute_correction(
    orbit: KeplerianOrbit,
    dates: Sequence[ModifiedJulianDate],
    positions: np.ndarray,
    method: CorrectionMethod = CorrectionMethod.GAUSS_NEWTON,
    damping: float = INITIAL_DAMPING,
) -> Tuple[np.ndarray, float]:
    """
    Differential correction to the elements of an orbit.

    The Levenberg-Marquardt damping factor is raised until the correction
    reduces the sum of squared differences, and lowered after a
    correction that succeeds with the lesser factor.

    Parameters
    ----------
    orbit : KeplerianOrbit
        Orbit to correct
    dates : sequence of ModifiedJulianDate
        Dates of the observed positions
    positions : np.ndarray
        Observed inertial positions, one row per date (er)
    method : CorrectionMethod
        Gauss-Newton or Levenberg-Marquardt
    damping : float
        Current Levenberg-Marquardt damping factor

    Returns
    -------
    tuple
        (correction, damping factor for the next correction)
    """
    dz = position_residuals(orbit, dates, positions)
    H = np.vstack([jacobian(orbit, date) for date in dates])

    if method is CorrectionMethod.GAUSS_NEWTON:
        dx, *_ = np.linalg.lstsq(H, dz, rcond=None)
        return dx, damping

    HtH = H.T @ H
    Htz = H.T @ dz
    D = np.diag(np.diag(HtH))

    def damped(factor):
        dx = np.linalg.solve(HtH + factor * D, Htz)
        return dx, sum_of_squares(apply_correction(orbit, dx, 1.0), dates, positions)

    s_0 = float(dz @ dz)
    dx_l, s_l = damped(damping / DAMPING_FACTOR)
    dx_g, s_g = damped(damping)
    while s_l > s_0 and s_g > s_0 and damping < MAX_DAMPING:
        damping *= DAMPING_FACTOR
        dx_l, s_l = damped(damping / DAMPING_FACTOR)
        dx_g, s_g = damped(damping)

    if s_l < s_0:
        return dx_l, damping / DAMPING_FACTOR
    return dx_g, damping


def search_line(
    orbit: KeplerianOrbit,
    dx: np.ndarray,
    dates: Sequence[ModifiedJulianDate],
    positions: np.ndarray,
    tolerance: float = LINE_SEARCH_TOLERANCE,
) -> Tuple[KeplerianOrbit, float]:
    """
    Bisect for the fraction between zero and one of a correction to apply.

    Returns
    -------
    tuple
        (corrected orbit, its sum of squared differences)
    """
    alpha_l, alpha_r = 0.0, 1.0
    s_l = sum_of_squares(apply_correction(orbit, dx, alpha_l), dates, positions)
    corrected = apply_correction(orbit, dx, alpha_r)
    s = s_r = sum_of_squares(corrected, dates, positions)

    while alpha_r - alpha_l > tolerance:
        alpha_m = (alpha_l + alpha_r) / 2
        corrected = apply_correction(orbit, dx, alpha_m)
        s = sum_of_squares(corrected, dates, positions)
        if s_l < s_r:
            alpha_r, s_r = alpha_m, s
        else:
            alpha_l, s_l = alpha_m, s
    return corrected, s


def _time_offset(orbit_i: KeplerianOrbit, orbit_ip1: KeplerianOrbit) -> float:
    dM = math.remainder(orbit_ip1.mean_anomaly - orbit_i.mean_anomaly, 2 * math.pi)
    return dM / orbit_i.n


def differential_correction(
    orbit: Optional[KeplerianOrbit],
    dates: Sequence[ModifiedJulianDate],
    positions: np.ndarray,
    method: Union[CorrectionMethod, str] = CorrectionMethod.LEVENBERG_MARQUARDT,
    max_time_difference: float = MAX_TIME_DIFFERENCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> Tuple[Optional[KeplerianOrbit], CorrectionStatus]:
    """
    Differentially correct a preliminary orbit to fit observed positions.

    Corrections are applied until the change in the mean anomaly amounts
    to less than max_time_difference. Correction stops early if the sum
    of squared differences fails to decrease, or if the iteration cap is
    reached.

    Parameters
    ----------
    orbit : KeplerianOrbit or None
        Preliminary orbit, as from preliminary_orbit()
    dates : sequence of ModifiedJulianDate
        Dates of the observed positions
    positions : np.ndarray
        Observed inertial positions, one row per date (er)
    method : CorrectionMethod or str
        "levenberg-marquardt" or "gauss-newton"
    max_time_difference : float
        Convergence threshold on the mean anomaly correction (s)
    max_iterations : int
        Iteration cap
    diagnostics : list, optional
        Collects a diagnostic on divergence or at the iteration cap

    Returns
    -------
    tuple
        (corrected orbit, status). On divergence the orbit is the last
        one that reduced the fit, and None if no orbit was given.

    Raises
    ------
    ValueError
        If the dates and positions do not pair up, or fewer than two
        positions are given
    """
    method = CorrectionMethod.parse(method)
    if orbit is None:
        return None, CorrectionStatus.DIVERGED

    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    if len(dates) != len(positions):
        raise ValueError("Each observed position must have a date")
    if len(dates) < 2:
        raise ValueError("At least two observed positions are required")

    orbit_i = orbit
    dx, damping = compute_correction(orbit_i, dates, positions, method)
    orbit_ip1, s = search_line(orbit_i, dx, dates, positions)
    offset = _time_offset(orbit_i, orbit_ip1)
    iteration = 1
    logger.debug(f"Time offset {offset:.6f} s after iteration {iteration}")

    s_min = math.inf
    while abs(offset) > max_time_difference:
        iteration += 1
        if iteration > max_iterations:
            emit(
                Diagnostic(
                    NOT_CONVERGED,
                    f"Maximum iterations exceeded in differential correction "
                    f"({max_iterations} iterations)",
                    {"time_offset": offset, "sum_of_squares": s},
                ),
                sink=diagnostics,
                log=logger,
            )
            return orbit_ip1, CorrectionStatus.MAX_ITERATIONS

        if s < s_min:
            s_min = s
        else:
            emit(
                Diagnostic(
                    DIVERGED,
                    f"Differential correction diverging at iteration {iteration}",
                    {"sum_of_squares": s, "minimum": s_min},
                ),
                sink=diagnostics,
                log=logger,
            )
            return orbit_i, CorrectionStatus.DIVERGED

        orbit_i = orbit_ip1
        dx, damping = compute_correction(orbit_i, dates, positions, method, damping)
        orbit_ip1, s = search_line(orbit_i, dx, dates, positions)
        offset = _time_offset(orbit_i, orbit_ip1)
        logger.debug(f"Time offset {offset:.6f} s after iteration {iteration}")

    logger.info(f"Differential correction successful in {iteration} iterations "
                f"(sum of squares {s:.3e})")
    return orbit_ip1, CorrectionStatus.SUCCESSFUL
