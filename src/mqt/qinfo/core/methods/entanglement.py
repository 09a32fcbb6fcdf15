# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Entanglement measures.

Provides the partial trace over arbitrary parties, the entanglement entropy of bipartite
pure states and the two-qubit measures concurrence and entanglement of formation
(Wootters, PRL 80, 2245 (1998)).
"""

from __future__ import annotations

from math import prod
from typing import TYPE_CHECKING, Any

import numpy as np

from mqt.qinfo.core.exceptions import (
    DimensionMismatchError,
    InvalidDimensionError,
    InvalidSubsystemError,
    NotQubitSubsystemError,
)
from mqt.qinfo.core.libraries.basis_library import get_basis_library
from mqt.qinfo.core.methods.entropy import entropy
from mqt.qinfo.core.methods.utils import as_square_or_vector, is_column_vector, to_density_matrix
from mqt.qinfo.core.precision import eps

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray


def partial_trace(rho: Any, subsystems: Sequence[int], dims: Sequence[int]) -> NDArray[np.complexfloating]:  # noqa: ANN401
    """Trace out the listed parties.

    Args:
        rho: Density matrix or pure state column vector on ``prod(dims)`` dimensions.
        subsystems: 1-based indices of the parties to trace out.
        dims: Local dimension of every party.

    Returns:
        The reduced density matrix on the remaining parties, in their original order.

    Raises:
        InvalidDimensionError: If a dimension is zero.
        DimensionMismatchError: If ``prod(dims)`` differs from the matrix size.
        InvalidSubsystemError: If a subsystem index is repeated or out of range.
    """
    mat = to_density_matrix(as_square_or_vector(rho, "partial_trace"))
    dims = [int(d) for d in dims]
    if not dims or any(d <= 0 for d in dims):
        msg = f"partial_trace: invalid dimensions {dims}."
        raise InvalidDimensionError(msg)
    if prod(dims) != mat.shape[0]:
        msg = f"partial_trace: dimensions {dims} do not match a matrix of size {mat.shape[0]}."
        raise DimensionMismatchError(msg)

    traced = [int(s) for s in subsystems]
    if len(set(traced)) != len(traced) or any(not 1 <= s <= len(dims) for s in traced):
        msg = f"partial_trace: invalid subsystems {traced} for {len(dims)} parties."
        raise InvalidSubsystemError(msg)

    keep = [i for i in range(len(dims)) if i + 1 not in traced]
    gone = [s - 1 for s in traced]
    n = len(dims)
    dim_keep = prod(dims[i] for i in keep)
    dim_gone = prod(dims[i] for i in gone)

    tensor = mat.reshape(dims + dims)
    order = keep + gone + [n + i for i in keep] + [n + i for i in gone]
    tensor = tensor.transpose(order).reshape(dim_keep, dim_gone, dim_keep, dim_gone)
    return np.trace(tensor, axis1=1, axis2=3)


def entanglement(psi: Any, dims: Sequence[int]) -> float:  # noqa: ANN401
    """Entanglement entropy of a bipartite pure state.

    Args:
        psi: Pure state, as a column vector.
        dims: The two local dimensions.

    Returns:
        float: Von Neumann entropy of the first party's reduced state.

    Raises:
        InvalidDimensionError: If ``dims`` does not describe two parties.
    """
    if len(dims) != 2:
        msg = f"entanglement: expected a bipartite system, got dimensions {list(dims)}."
        raise InvalidDimensionError(msg)
    return entropy(partial_trace(psi, [2], dims))


def _two_qubit_input(rho: Any, caller: str) -> NDArray[np.complexfloating]:  # noqa: ANN401
    mat = as_square_or_vector(rho, caller)
    if mat.shape[0] != 4:
        msg = f"{caller}: defined for two-qubit states only, got dimension {mat.shape[0]}."
        raise NotQubitSubsystemError(msg)
    return mat


def concurrence(rho: Any) -> float:  # noqa: ANN401
    """Wootters concurrence of a two-qubit state.

    Args:
        rho: 4x4 density matrix or length-4 pure state.

    Returns:
        float: ``max(0, l1 - l2 - l3 - l4)`` with ``l_i`` the decreasingly ordered square roots
        of the eigenvalues of ``rho (Y x Y) rho* (Y x Y)``.
    """
    mat = to_density_matrix(_two_qubit_input(rho, "concurrence"))
    sigma_y = get_basis_library(mat.dtype).pauli[2]
    yy = np.kron(sigma_y, sigma_y)
    rho_tilde = yy @ mat.conj() @ yy
    eigs = np.linalg.eigvals(mat @ rho_tilde)
    lam = np.sort(np.sqrt(np.clip(np.real(eigs), 0.0, None)))[::-1]
    return float(max(0.0, lam[0] - lam[1] - lam[2] - lam[3]))


def eof(rho: Any) -> float:  # noqa: ANN401
    """Entanglement of formation of a two-qubit state in bits.

    Pure states reduce to their entanglement entropy; mixed states use the binary entropy of
    ``(1 + sqrt(1 - C^2)) / 2``.
    """
    mat = _two_qubit_input(rho, "eof")
    if is_column_vector(mat):
        return entanglement(mat, [2, 2])

    threshold = eps(mat.dtype)
    p = 0.5 * (1.0 + np.sqrt(max(0.0, 1.0 - concurrence(mat) ** 2)))
    ret = 0.0
    if p > threshold:
        ret -= p * np.log2(p)
    if 1.0 - p > threshold:
        ret -= (1.0 - p) * np.log2(1.0 - p)
    return float(ret)
