# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tests for the partial trace and the two-qubit entanglement measures."""

from __future__ import annotations

import numpy as np
import pytest

from mqt.qinfo.core.exceptions import (
    DimensionMismatchError,
    InvalidDimensionError,
    InvalidSubsystemError,
    NotQubitSubsystemError,
)
from mqt.qinfo.core.methods.entanglement import concurrence, entanglement, eof, partial_trace

BELL = np.array([1.0, 0.0, 0.0, 1.0]) / np.sqrt(2)


def _werner(p: float) -> np.ndarray:
    return p * np.outer(BELL, BELL) + (1 - p) * np.eye(4) / 4


def test_partial_trace_product_state() -> None:
    """Tracing out one factor of a product state returns the other factor."""
    a = np.diag([0.7, 0.3]).astype(complex)
    b = np.array([[0.5, 0.5j, 0], [-0.5j, 0.5, 0], [0, 0, 0]], dtype=complex)
    rho = np.kron(a, b)
    assert np.allclose(partial_trace(rho, [2], [2, 3]), a)
    assert np.allclose(partial_trace(rho, [1], [2, 3]), b)


def test_partial_trace_keeps_party_order() -> None:
    """The remaining parties keep their original order."""
    a = np.diag([1.0, 0.0])
    b = np.diag([0.0, 1.0])
    c = np.eye(2) / 2
    rho = np.kron(np.kron(a, b), c)
    assert np.allclose(partial_trace(rho, [2], [2, 2, 2]), np.kron(a, c))


def test_partial_trace_of_vector() -> None:
    """Pure state vectors are promoted before tracing."""
    assert np.allclose(partial_trace(BELL, [1], [2, 2]), np.eye(2) / 2)


def test_partial_trace_errors() -> None:
    """Invalid dimensions and subsystem lists are rejected."""
    rho = np.eye(4) / 4
    with pytest.raises(InvalidDimensionError):
        partial_trace(rho, [1], [0, 4])
    with pytest.raises(DimensionMismatchError):
        partial_trace(rho, [1], [2, 3])
    with pytest.raises(InvalidSubsystemError):
        partial_trace(rho, [1, 1], [2, 2])
    with pytest.raises(InvalidSubsystemError):
        partial_trace(rho, [3], [2, 2])


def test_entanglement_entropy() -> None:
    """Bell states carry one ebit, product states none."""
    assert entanglement(BELL, [2, 2]) == pytest.approx(1.0)
    assert entanglement(np.kron([1, 0], [0, 1]), [2, 2]) == pytest.approx(0.0, abs=1e-12)
    with pytest.raises(InvalidDimensionError):
        entanglement(BELL, [4])


def test_concurrence_reference_values() -> None:
    """Concurrence of Bell, product and Werner states."""
    assert concurrence(BELL) == pytest.approx(1.0)
    assert concurrence(np.outer(BELL, BELL)) == pytest.approx(1.0)
    assert concurrence(np.eye(4) / 4) == pytest.approx(0.0, abs=1e-12)
    assert concurrence(np.kron(np.diag([1, 0]), np.eye(2) / 2)) == pytest.approx(0.0, abs=1e-12)
    for p in (0.2, 0.5, 0.9):
        assert concurrence(_werner(p)) == pytest.approx(max(0.0, (3 * p - 1) / 2), abs=1e-9)


def test_eof_reference_values() -> None:
    """Entanglement of formation of pure and mixed states."""
    assert eof(BELL) == pytest.approx(1.0)
    assert eof(np.outer(BELL, BELL)) == pytest.approx(1.0)
    assert eof(np.eye(4) / 4) == pytest.approx(0.0, abs=1e-12)

    c = 0.5
    p = 0.5 * (1 + np.sqrt(1 - c**2))
    expected = -p * np.log2(p) - (1 - p) * np.log2(1 - p)
    assert eof(_werner(2 / 3)) == pytest.approx(expected, abs=1e-9)


def test_two_qubit_measures_reject_other_dimensions() -> None:
    """Concurrence and EoF are defined for two qubits only."""
    with pytest.raises(NotQubitSubsystemError):
        concurrence(np.eye(3) / 3)
    with pytest.raises(NotQubitSubsystemError):
        eof(np.eye(8) / 8)
