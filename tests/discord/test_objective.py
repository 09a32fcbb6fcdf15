# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tests for the post-measurement entropy objective."""

from __future__ import annotations

import numpy as np
import pytest

from mqt.qinfo.core.methods.embedding import IdentityBlocks, embed_projectors
from mqt.qinfo.discord.measurements import qubit_projectors
from mqt.qinfo.discord.objective import DeficitObjective, measured_entropy, post_measurement_state


def _bell() -> np.ndarray:
    psi = np.array([1, 0, 0, 1], dtype=complex) / np.sqrt(2)
    return np.outer(psi, psi.conj())


def test_post_measurement_state_is_trace_preserving() -> None:
    """Measuring keeps the trace and removes coherences in the measured basis."""
    rho = _bell()
    blocks = IdentityBlocks.for_party([2, 2], 1)
    out = post_measurement_state(rho, embed_projectors(qubit_projectors([0.0, 0.0]), blocks))
    assert np.trace(out).real == pytest.approx(1.0)
    assert np.allclose(out, 0.5 * np.diag([1, 0, 0, 1]))


def test_measured_entropy_of_product_state() -> None:
    """Measuring |0> along z does nothing; along x it creates one bit of entropy."""
    rho = np.zeros((4, 4), dtype=complex)
    rho[0, 0] = 1.0
    blocks = IdentityBlocks.for_party([2, 2], 1)
    assert measured_entropy(rho, qubit_projectors([0.0, 0.0]), blocks) == pytest.approx(0.0, abs=1e-12)
    assert measured_entropy(rho, qubit_projectors([np.pi / 2, 0.0]), blocks) == pytest.approx(1.0)


def test_objective_counts_evaluations() -> None:
    """Each call evaluates the entropy and increments the counter."""
    objective = DeficitObjective(_bell(), IdentityBlocks.for_party([2, 2], 2))
    assert objective.evaluations == 0
    for angles in ([0.1, 0.2], [1.0, 3.0], [np.pi, 0.0]):
        assert objective(np.array(angles)) == pytest.approx(1.0)
    assert objective.evaluations == 3


def test_objective_does_not_modify_state() -> None:
    """Evaluations leave the stored state untouched."""
    rho = _bell()
    reference = rho.copy()
    objective = DeficitObjective(rho, IdentityBlocks.for_party([2, 2], 1))
    objective([0.7, 0.4])
    assert np.array_equal(rho, reference)


def test_objective_qutrit_family() -> None:
    """A qutrit party selects the five-angle parametrisation."""
    objective = DeficitObjective(np.eye(6) / 6, IdentityBlocks.for_party([3, 2], 1))
    assert len(objective.projectors(np.zeros(5))) == 3
    assert objective(np.full(5, 0.3)) == pytest.approx(np.log2(6))


def test_real_state_is_measured_in_complex_basis() -> None:
    """Real density matrices combine with complex projectors without a cast error."""
    rho = np.diag([0.5, 0.0, 0.0, 0.5])
    blocks = IdentityBlocks.for_party([2, 2], 1)
    assert measured_entropy(rho, qubit_projectors([0.0, 0.0]), blocks) == pytest.approx(1.0)

    out = post_measurement_state(rho, embed_projectors(qubit_projectors([np.pi / 2, np.pi / 2]), blocks))
    assert out.dtype == np.complex128
    np.testing.assert_allclose(out, np.eye(4) / 4, atol=1e-12)

    objective = DeficitObjective(rho, blocks)
    assert objective(np.array([np.pi / 2, np.pi / 2])) == pytest.approx(2.0)
