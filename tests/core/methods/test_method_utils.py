# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tests for input coercion helpers and precision thresholds."""

from __future__ import annotations

import numpy as np
import pytest
import scipy.sparse

from mqt.qinfo.core.exceptions import ShapeMismatchError, ZeroSizeError
from mqt.qinfo.core.methods.utils import as_matrix, as_square_or_vector, is_column_vector, to_density_matrix
from mqt.qinfo.core.precision import complex_dtype, eps, real_dtype


def test_as_matrix_shapes_and_types() -> None:
    """Vectors become columns, sparse input is densified, precision is kept."""
    vec = as_matrix([1, 0])
    assert vec.shape == (2, 1)
    assert vec.dtype == np.complex128

    dense = as_matrix(scipy.sparse.identity(3, format="csr"))
    assert dense.shape == (3, 3)
    assert np.allclose(dense, np.eye(3))

    single = as_matrix(np.eye(2, dtype=np.float32))
    assert single.dtype == np.complex64

    with pytest.raises(ShapeMismatchError):
        as_matrix(np.zeros((2, 2, 2)))


def test_as_square_or_vector() -> None:
    """Square matrices and column vectors are accepted, everything else is rejected."""
    assert as_square_or_vector(np.eye(2), "test").shape == (2, 2)
    assert is_column_vector(as_square_or_vector([1, 0, 0], "test"))
    with pytest.raises(ZeroSizeError, match="test"):
        as_square_or_vector([], "test")
    with pytest.raises(ShapeMismatchError, match="test"):
        as_square_or_vector(np.ones((3, 2)), "test")


def test_to_density_matrix() -> None:
    """Pure vectors are promoted to projectors."""
    psi = as_matrix([1, 1j]) / np.sqrt(2)
    rho = to_density_matrix(psi)
    assert np.allclose(rho, [[0.5, -0.5j], [0.5j, 0.5]])
    assert to_density_matrix(rho) is rho


def test_precision_thresholds() -> None:
    """Single precision uses 10 eps, double precision 100 eps."""
    assert eps(np.float32) == pytest.approx(10 * np.finfo(np.float32).eps)
    assert eps(np.complex64) == pytest.approx(10 * np.finfo(np.float32).eps)
    assert eps(np.complex128) == pytest.approx(100 * np.finfo(np.float64).eps)
    assert eps() == eps(np.float64)
    assert real_dtype(np.complex64) == np.float32
    assert real_dtype(np.int64) == np.float64
    assert complex_dtype(np.float32) == np.complex64
