# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Input coercion and small linear-algebra helpers shared across modules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
from scipy.sparse import issparse

from mqt.qinfo.core.exceptions import ShapeMismatchError, ZeroSizeError
from mqt.qinfo.core.precision import complex_dtype

if TYPE_CHECKING:
    from numpy.typing import NDArray


def as_matrix(obj: Any) -> NDArray[np.complexfloating]:  # noqa: ANN401
    """Convert a state-like object into a two-dimensional complex array.

    Lists and 1-D arrays become column vectors, sparse matrices are densified. Single
    precision inputs stay in single precision, everything else is promoted to
    ``complex128``.

    Args:
        obj: Density matrix, state vector, nested list or ``scipy.sparse`` matrix.

    Returns:
        A 2-D complex array. Column vectors have shape ``(N, 1)``.

    Raises:
        ShapeMismatchError: If the input has more than two dimensions.
    """
    arr = obj.toarray() if issparse(obj) else np.asarray(obj)
    if arr.ndim == 0:
        arr = arr.reshape(1, 1)
    elif arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    elif arr.ndim > 2:
        msg = f"Expected a matrix or a vector, got an array with {arr.ndim} dimensions."
        raise ShapeMismatchError(msg)
    return np.asarray(arr, dtype=complex_dtype(arr.dtype))


def as_square_or_vector(obj: Any, caller: str) -> NDArray[np.complexfloating]:  # noqa: ANN401
    """Coerce ``obj`` and check that it is a non-empty square matrix or column vector.

    Args:
        obj: State-like input.
        caller: Name used in error messages.

    Returns:
        The coerced 2-D array.

    Raises:
        ZeroSizeError: If the input is empty.
        ShapeMismatchError: If the input is neither square nor a column vector.
    """
    mat = as_matrix(obj)
    if mat.size == 0:
        msg = f"{caller}: input has zero size."
        raise ZeroSizeError(msg)
    if mat.shape[1] != 1 and mat.shape[0] != mat.shape[1]:
        msg = f"{caller}: expected a square matrix or a column vector, got shape {mat.shape}."
        raise ShapeMismatchError(msg)
    return mat


def is_column_vector(mat: NDArray[Any]) -> bool:
    """Return ``True`` for ``(N, 1)`` arrays, which represent pure states."""
    return mat.shape[1] == 1


def to_density_matrix(mat: NDArray[np.complexfloating]) -> NDArray[np.complexfloating]:
    """Promote a pure state column vector to its projector, pass matrices through."""
    if is_column_vector(mat) and mat.shape[0] > 1:
        return mat @ mat.conj().T
    return mat
