#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Diagnostics Channel

Numerical routines in this package degrade gracefully rather than raise:
a solver that hits its iteration cap, or an element set computed where it
is poorly conditioned, still returns a result. Such conditions are
reported as Diagnostic records, which are logged and, when the caller
supplies a list, collected for inspection.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

NOT_CONVERGED = "not-converged"
ILL_CONDITIONED = "ill-conditioned"
DIVERGED = "diverged"


@dataclass(frozen=True)
class Diagnostic:
    """
    A warning raised by a numerical routine.

    Attributes
    ----------
    code : str
        Machine readable category, e.g. "not-converged"
    message : str
        Human readable description
    context : dict
        Values relevant to the condition
    """
    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)


def emit(
    diagnostic: Diagnostic,
    sink: Optional[List[Diagnostic]] = None,
    log: Optional[logging.Logger] = None,
) -> Diagnostic:
    """
    Report a diagnostic.

    Parameters
    ----------
    diagnostic : Diagnostic
        The condition to report
    sink : list, optional
        Collects the diagnostic when given
    log : logging.Logger, optional
        Logger of the reporting module; the package logger by default

    Returns
    -------
    Diagnostic
        The reported diagnostic
    """
    (log or logger).warning(f"{diagnostic.message} ({diagnostic.code})")
    if sink is not None:
        sink.append(diagnostic)
    return diagnostic
