#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Kepler's Equation Solver

Newton's and Halley's methods for the conventional and generalized forms
of Kepler's equation. The iteration is best effort: there is no proof of
convergence for pathological inputs, so it is bounded by an iteration cap
and reports, rather than raises, a failure to converge.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .config import SolverConfig, SolverMethod
from .diagnostics import Diagnostic, NOT_CONVERGED, emit
from .exceptions import ConvergenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeplerSolution:
    """
    Result of an iterative solution.

    Attributes
    ----------
    value : float
        The last iterate, the eccentric anomaly or longitude (radians)
    iterations : int
        Number of iterations performed
    converged : bool
        Whether the change in the iterate fell below the tolerance
    """
    value: float
    iterations: int
    converged: bool

    def raise_for_convergence(self) -> "KeplerSolution":
        """Return the solution, or raise ConvergenceError if it did not converge."""
        if not self.converged:
            raise ConvergenceError(
                f"Kepler's equation did not converge in {self.iterations} iterations",
                iterations=self.iterations,
            )
        return self

    def __float__(self) -> float:
        return self.value


def solve(
    f: Callable[[float], float],
    f_prime: Callable[[float], float],
    f_double_prime: Callable[[float], float],
    initial: float,
    config: SolverConfig,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> KeplerSolution:
    """
    Find a root of f by Newton's or Halley's method.

    Parameters
    ----------
    f : callable
        Residual of Kepler's equation
    f_prime : callable
        First derivative of the residual
    f_double_prime : callable
        Second derivative of the residual, used by Halley's method only
    initial : float
        Initial guess
    config : SolverConfig
        Method, tolerance, and iteration cap
    diagnostics : list, optional
        Collects a diagnostic if the iteration cap is exceeded

    Returns
    -------
    KeplerSolution
        The solution, converged or not
    """
    x_i = initial
    for iteration in range(1, config.max_iterations + 1):
        f_i = f(x_i)
        f_p_i = f_prime(x_i)
        if config.method is SolverMethod.NEWTON:
            x_ip1 = x_i - f_i / f_p_i
        else:
            f_pp_i = f_double_prime(x_i)
            x_ip1 = x_i - (2 * f_i * f_p_i) / (2 * f_p_i ** 2 - f_i * f_pp_i)

        if abs(x_ip1 - x_i) < config.tolerance:
            return KeplerSolution(x_ip1, iteration, True)
        x_i = x_ip1

    emit(
        Diagnostic(
            NOT_CONVERGED,
            f"Maximum iterations exceeded solving Kepler's equation "
            f"({config.method.value}, {config.max_iterations} iterations)",
            {"initial": initial, "last": x_i, "tolerance": config.tolerance},
        ),
        sink=diagnostics,
        log=logger,
    )
    return KeplerSolution(x_i, config.max_iterations, False)
