# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Quantum and classical entropies.

All quantum entropies accept either a density matrix or a pure state given as a column
vector. Pure states are recognised by their shape and short-circuit to zero entropy
without an eigendecomposition. Eigenvalues (or probabilities) at or below the precision
threshold :func:`mqt.qinfo.core.precision.eps` contribute nothing, which guards against
``log(0)`` and small negative eigenvalues produced by round-off.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from mqt.qinfo.core.exceptions import InvalidProbabilityError, OutOfRangeError, ShapeMismatchError, ZeroSizeError
from mqt.qinfo.core.methods.utils import as_matrix, as_square_or_vector, is_column_vector
from mqt.qinfo.core.precision import eps, real_dtype

if TYPE_CHECKING:
    from numpy.typing import NDArray


def _spectrum(mat: NDArray[np.complexfloating]) -> NDArray[np.floating]:
    return np.linalg.eigvalsh(mat)


def _as_probabilities(prob: Any, caller: str) -> NDArray[np.floating]:  # noqa: ANN401
    arr = as_matrix(prob)
    if arr.size == 0:
        msg = f"{caller}: input has zero size."
        raise ZeroSizeError(msg)
    if not is_column_vector(arr):
        msg = f"{caller}: expected a probability vector, got shape {arr.shape}."
        raise ShapeMismatchError(msg)
    values = np.real(arr[:, 0]).astype(real_dtype(arr.dtype))
    if np.any(values < -eps(values.dtype)):
        msg = f"{caller}: invalid probability distribution (negative entries)."
        raise InvalidProbabilityError(msg)
    return values


def _shannon_terms(values: NDArray[np.floating]) -> float:
    kept = values[values > eps(values.dtype)]
    return float(-np.sum(kept * np.log2(kept)))


def _power_sum(values: NDArray[np.floating], alpha: float) -> float:
    kept = values[values > eps(values.dtype)]
    return float(np.sum(kept**alpha))


def _check_order(alpha: float, threshold: float, caller: str) -> None:
    if alpha < -threshold:
        msg = f"{caller}: order alpha must be non-negative, got {alpha}."
        raise OutOfRangeError(msg)


def entropy(rho: Any) -> float:  # noqa: ANN401
    """Von Neumann entropy in bits.

    Args:
        rho: Density matrix, or a pure state as a column vector.

    Returns:
        float: ``-sum(l * log2(l))`` over eigenvalues above the precision threshold, or 0 for
        a column vector.

    Raises:
        ZeroSizeError: If the input is empty.
        ShapeMismatchError: If the input is neither square nor a column vector.
    """
    mat = as_square_or_vector(rho, "entropy")
    if is_column_vector(mat):
        return 0.0
    return _shannon_terms(_spectrum(mat))


def shannon(prob: Any) -> float:  # noqa: ANN401
    """Shannon entropy in bits of a probability vector.

    Raises:
        ZeroSizeError: If the vector is empty.
        ShapeMismatchError: If the input is not a vector.
        InvalidProbabilityError: If an entry is negative beyond the precision threshold.
    """
    return _shannon_terms(_as_probabilities(prob, "shannon"))


def renyi(rho: Any, alpha: float) -> float:  # noqa: ANN401
    """Rényi entropy of order ``alpha`` in bits.

    The limiting cases are handled explicitly: ``alpha = 0`` gives ``log2(N)``, ``alpha = 1``
    the von Neumann entropy and ``alpha = inf`` the min-entropy ``-log2(l_max)``.

    Args:
        rho: Density matrix or pure state column vector.
        alpha: Non-negative order.

    Returns:
        float: The Rényi entropy.

    Raises:
        ZeroSizeError: If the input is empty.
        ShapeMismatchError: If the input is neither square nor a column vector.
        OutOfRangeError: If ``alpha`` is negative.
    """
    mat = as_square_or_vector(rho, "renyi")
    threshold = eps(mat.dtype)
    _check_order(alpha, threshold, "renyi")

    if alpha < threshold:
        return float(np.log2(mat.shape[0]))
    if is_column_vector(mat):
        return 0.0
    if abs(alpha - 1.0) < threshold:
        return entropy(mat)

    spectrum = _spectrum(mat)
    if np.isinf(alpha):
        return float(-np.log2(np.max(spectrum)))
    return float(np.log2(_power_sum(spectrum, alpha)) / (1.0 - alpha))


def renyi_prob(prob: Any, alpha: float) -> float:  # noqa: ANN401
    """Classical Rényi entropy of order ``alpha`` of a probability vector."""
    values = _as_probabilities(prob, "renyi_prob")
    threshold = eps(values.dtype)
    _check_order(alpha, threshold, "renyi_prob")

    if alpha < threshold:
        return float(np.log2(values.size))
    if abs(alpha - 1.0) < threshold:
        return _shannon_terms(values)
    if np.isinf(alpha):
        return float(-np.log2(np.max(values)))
    return float(np.log2(_power_sum(values, alpha)) / (1.0 - alpha))


def tsallis(rho: Any, alpha: float) -> float:  # noqa: ANN401
    """Tsallis entropy of order ``alpha``.

    For ``alpha = 1`` this is the von Neumann entropy with the natural logarithm.

    Raises:
        ZeroSizeError: If the input is empty.
        ShapeMismatchError: If the input is neither square nor a column vector.
        OutOfRangeError: If ``alpha`` is negative.
    """
    mat = as_square_or_vector(rho, "tsallis")
    threshold = eps(mat.dtype)
    _check_order(alpha, threshold, "tsallis")

    if is_column_vector(mat):
        return 0.0
    if abs(alpha - 1.0) < threshold:
        return float(np.log(2.0) * entropy(mat))
    return (_power_sum(_spectrum(mat), alpha) - 1.0) / (1.0 - alpha)


def tsallis_prob(prob: Any, alpha: float) -> float:  # noqa: ANN401
    """Classical Tsallis entropy of order ``alpha`` of a probability vector."""
    values = _as_probabilities(prob, "tsallis_prob")
    _check_order(alpha, eps(values.dtype), "tsallis_prob")

    if abs(alpha - 1.0) < eps(values.dtype):
        return float(np.log(2.0) * _shannon_terms(values))
    return (_power_sum(values, alpha) - 1.0) / (1.0 - alpha)
