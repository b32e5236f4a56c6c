#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Solver Configuration

Settings for the iterative solutions used by the propagators and by orbit
determination.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Union

# Convergence tolerance on the change in eccentric position [rad]
DEFAULT_TOLERANCE = 1e-10

# Safety valve on the number of iterations of Kepler's equation
DEFAULT_MAX_ITERATIONS = 10000

# Convergence tolerance on the sector to triangle ratio in Gauss's method
GAUSS_TOLERANCE = 1e-9

# Element sets computed below this eccentricity are poorly conditioned
ELEMENT_SET_MIN_ECCENTRICITY = 0.001

# Differential correction stops once the correction to the mean anomaly
# amounts to less than this time [s]
MAX_TIME_DIFFERENCE = 1.0

# Relative step of the centered differences in the Jacobian
DIFFERENCE_STEP = 1e-6

# Width of the bisection on the fraction of a correction to apply
LINE_SEARCH_TOLERANCE = 0.001

# Levenberg-Marquardt damping
INITIAL_DAMPING = 0.1
DAMPING_FACTOR = 2.0
MAX_DAMPING = 9.0


def _parse_member(cls, value):
    if isinstance(value, cls):
        return value
    try:
        return cls(str(value).lower())
    except ValueError:
        valid = ", ".join(f'"{m.value}"' for m in cls)
        raise ValueError(
            f"Method must be one of {valid}, not {value!r}"
        ) from None


class SolverMethod(Enum):
    """Root finding methods for Kepler's equation."""

    NEWTON = "newton"
    HALLEY = "halley"

    @classmethod
    def parse(cls, method: Union["SolverMethod", str]) -> "SolverMethod":
        """
        Resolve a method given as an enum member or its string value.

        Raises
        ------
        ValueError
            If the method is not recognized
        """
        return _parse_member(cls, method)


class CorrectionMethod(Enum):
    """Techniques for computing a differential orbit correction."""

    LEVENBERG_MARQUARDT = "levenberg-marquardt"
    GAUSS_NEWTON = "gauss-newton"

    @classmethod
    def parse(cls, method: Union["CorrectionMethod", str]) -> "CorrectionMethod":
        """Resolve a technique given as an enum member or its string value."""
        return _parse_member(cls, method)


@dataclass(frozen=True)
class SolverConfig:
    """
    Configuration for solving Kepler's equation.

    Attributes
    ----------
    method : SolverMethod
        Newton's method (first derivative) or Halley's method (first and
        second derivatives, cubic convergence).
    tolerance : float
        Iteration stops once the change in the iterate is below this value.
    max_iterations : int
        Iteration cap; the last iterate is returned when it is exceeded.
    """

    method: SolverMethod = SolverMethod.HALLEY
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def __post_init__(self):
        object.__setattr__(self, "method", SolverMethod.parse(self.method))
        if not self.tolerance > 0:
            raise ValueError("Tolerance must be positive")
        if self.max_iterations < 1:
            raise ValueError("Maximum iterations must be at least one")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "SolverConfig":
        """Create a configuration from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in known})

    @classmethod
    def resolve(cls, method: Union["SolverConfig", SolverMethod, str]) -> "SolverConfig":
        """Accept a full configuration, or a method with default settings."""
        if isinstance(method, cls):
            return method
        return cls(method=SolverMethod.parse(method))
