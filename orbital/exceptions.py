#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exceptions raised by the orbital package.

Invalid arguments at construction raise the built-in ValueError; the
classes here cover failures of a propagation or solution itself.
"""


class OrbitalError(Exception):
    """Base class for orbital computation errors."""


class ConvergenceError(OrbitalError):
    """An iterative solution did not converge within its iteration cap."""

    def __init__(self, message: str, iterations: int = 0):
        super().__init__(message)
        self.iterations = iterations


class ObjectDecayedError(OrbitalError):
    """
    The propagated object has decayed.

    Two-body propagators never raise this; it is part of the orbit contract
    so that propagators modelling drag can be substituted for them.
    """
