#!/usr/bin/env python3
"""
Tests for the Kepler's equation solver, its configuration, and the
diagnostics channel.
"""

import logging
import math
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from orbital import (
    ConvergenceError,
    CorrectionMethod,
    Diagnostic,
    KeplerianOrbit,
    SolverConfig,
    SolverMethod,
)
from orbital.config import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE
from orbital.diagnostics import NOT_CONVERGED, emit
from orbital.solver import KeplerSolution, solve


def kepler(e, M):
    return (
        lambda E: E - e * math.sin(E) - M,
        lambda E: 1 - e * math.cos(E),
        lambda E: e * math.sin(E),
    )


# =============================================================================
# CONFIGURATION
# =============================================================================

class TestSolverConfig:
    """Tests for SolverConfig and SolverMethod."""

    def test_defaults(self):
        config = SolverConfig()
        assert config.method is SolverMethod.HALLEY
        assert config.tolerance == DEFAULT_TOLERANCE
        assert config.max_iterations == DEFAULT_MAX_ITERATIONS

    @pytest.mark.parametrize("name, expected", [
        ("newton", SolverMethod.NEWTON),
        ("HALLEY", SolverMethod.HALLEY),
        (SolverMethod.NEWTON, SolverMethod.NEWTON),
    ])
    def test_parse(self, name, expected):
        assert SolverMethod.parse(name) is expected

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Method must be one of"):
            SolverMethod.parse("bisection")

    @pytest.mark.parametrize("name, expected", [
        ("gauss-newton", CorrectionMethod.GAUSS_NEWTON),
        ("Levenberg-Marquardt", CorrectionMethod.LEVENBERG_MARQUARDT),
    ])
    def test_parse_correction_method(self, name, expected):
        assert CorrectionMethod.parse(name) is expected

    def test_string_method_coerced(self):
        assert SolverConfig(method="newton").method is SolverMethod.NEWTON

    @pytest.mark.parametrize("kwargs", [
        {"tolerance": 0.0},
        {"tolerance": -1e-3},
        {"max_iterations": 0},
        {"method": "secant"},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            SolverConfig(**kwargs)

    def test_from_dict_ignores_unknown_keys(self):
        config = SolverConfig.from_dict({"method": "newton", "tolerance": 1e-8, "color": "red"})
        assert config == SolverConfig(SolverMethod.NEWTON, 1e-8)

    def test_resolve(self):
        config = SolverConfig(max_iterations=5)
        assert SolverConfig.resolve(config) is config
        assert SolverConfig.resolve("newton") == SolverConfig(method=SolverMethod.NEWTON)


# =============================================================================
# SOLVER
# =============================================================================

class TestSolve:
    """Tests for Newton's and Halley's methods."""

    @pytest.mark.parametrize("method", ["newton", "halley"])
    @pytest.mark.parametrize("e, M", [(0.1, 0.5), (0.5, 2.0), (0.7, 5.9)])
    def test_solves_keplers_equation(self, method, e, M):
        solution = solve(*kepler(e, M), M, SolverConfig(method=method))
        assert solution.converged
        assert solution.value - e * math.sin(solution.value) == pytest.approx(M, abs=1e-12)

    def test_halley_converges_faster(self):
        newton = solve(*kepler(0.7, 1.0), 1.0, SolverConfig(method="newton"))
        halley = solve(*kepler(0.7, 1.0), 1.0, SolverConfig(method="halley"))
        assert halley.iterations <= newton.iterations

    @pytest.mark.parametrize("method", ["newton", "halley"])
    def test_high_eccentricity_from_pi(self, method):
        """With e = 0.9 and M = 0 the iteration from π converges to E = 0."""
        solution = solve(*kepler(0.9, 0.0), math.pi, SolverConfig(method=method))
        assert solution.converged
        assert solution.value == pytest.approx(0.0, abs=1e-10)

    def test_iteration_cap(self, caplog):
        sink = []
        config = SolverConfig(max_iterations=1, tolerance=1e-15)
        with caplog.at_level(logging.WARNING, logger="orbital.solver"):
            solution = solve(*kepler(0.5, 2.0), 2.0, config, diagnostics=sink)

        assert not solution.converged
        assert solution.iterations == 1
        assert math.isfinite(solution.value)
        assert len(sink) == 1
        assert sink[0].code == NOT_CONVERGED
        assert "Maximum iterations exceeded" in caplog.text

    def test_raise_for_convergence(self):
        solution = KeplerSolution(1.0, 7, False)
        with pytest.raises(ConvergenceError) as excinfo:
            solution.raise_for_convergence()
        assert excinfo.value.iterations == 7

    def test_raise_for_convergence_passes_through(self):
        solution = KeplerSolution(1.0, 3, True)
        assert solution.raise_for_convergence() is solution
        assert float(solution) == 1.0


class TestCircularOrbit:
    """Kepler's equation is the identity for a circular orbit."""

    @pytest.mark.parametrize("method", ["newton", "halley"])
    @pytest.mark.parametrize("M", [0.0, 0.5, math.pi, 4.0, 2 * math.pi - 1e-3])
    def test_identity(self, j2000_epoch, method, M):
        orbit = KeplerianOrbit(2.0, 0.0, 0.0, 0.0, 0.0, 0.0, j2000_epoch, method)
        solution = orbit.keplers_equation(M)
        assert solution.converged
        assert solution.value == M


class TestDiagnostics:
    """Tests for the diagnostics channel."""

    def test_emit_logs_and_collects(self, caplog):
        sink = []
        diagnostic = Diagnostic("test-code", "Something happened", {"x": 1})
        with caplog.at_level(logging.WARNING):
            returned = emit(diagnostic, sink=sink)
        assert returned is diagnostic
        assert sink == [diagnostic]
        assert "Something happened (test-code)" in caplog.text

    def test_emit_without_sink(self, caplog):
        with caplog.at_level(logging.WARNING):
            emit(Diagnostic("c", "m"))
        assert "m (c)" in caplog.text
