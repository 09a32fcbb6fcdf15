# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Gate library.

This module defines the GateLibrary, a read-only table of the standard one-, two- and
three-qubit gates, together with the parametrised SU(2) rotation, the quantum Fourier
transform on a qudit and :func:`make_ctrl`, which builds controlled operators on registers
of arbitrary local dimension.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from math import prod
from typing import TYPE_CHECKING, Any

import numpy as np

from mqt.qinfo.core.exceptions import (
    DimensionMismatchError,
    InvalidDimensionError,
    InvalidSubsystemError,
    OutOfRangeError,
    ShapeMismatchError,
    ZeroSizeError,
)
from mqt.qinfo.core.libraries.basis_library import get_basis_library
from mqt.qinfo.core.methods.utils import as_matrix
from mqt.qinfo.core.precision import complex_dtype, eps, real_dtype

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import DTypeLike, NDArray


def _permutation_gate(perm: Sequence[int], dtype: DTypeLike) -> NDArray[np.floating]:
    """Permutation matrix mapping basis state ``j`` to ``perm[j]``."""
    mat = np.zeros((len(perm), len(perm)), dtype=dtype)
    for col, row in enumerate(perm):
        mat[row, col] = 1.0
    mat.setflags(write=False)
    return mat


@dataclass(frozen=True)
class GateLibrary:
    """Standard gates in one working precision.

    Attributes:
        x: Pauli X.
        y: Pauli Y.
        z: Pauli Z.
        h: Hadamard.
        cnot: Controlled NOT, control on the first qubit.
        cz: Controlled Z.
        swap: SWAP.
        toffoli: Doubly controlled NOT.
        fredkin: Controlled SWAP.
    """

    x: NDArray[np.floating]
    y: NDArray[np.complexfloating]
    z: NDArray[np.floating]
    h: NDArray[np.floating]
    cnot: NDArray[np.floating]
    cz: NDArray[np.floating]
    swap: NDArray[np.floating]
    toffoli: NDArray[np.floating]
    fredkin: NDArray[np.floating]

    @classmethod
    def build(cls, dtype: DTypeLike = np.float64) -> GateLibrary:
        """Construct the gate table in the precision of ``dtype``."""
        rdt = real_dtype(dtype)
        pauli = get_basis_library(rdt).pauli

        def frozen_real(arr: NDArray[Any]) -> NDArray[np.floating]:
            out = np.real(arr).astype(rdt)
            out.setflags(write=False)
            return out

        cz = np.eye(4, dtype=rdt)
        cz[3, 3] = -1.0
        cz.setflags(write=False)

        return cls(
            x=frozen_real(pauli[1]),
            y=pauli[2],
            z=frozen_real(pauli[3]),
            h=frozen_real(np.sqrt(0.5) * np.array([[1.0, 1.0], [1.0, -1.0]])),
            cnot=_permutation_gate([0, 1, 3, 2], rdt),
            cz=cz,
            swap=_permutation_gate([0, 2, 1, 3], rdt),
            toffoli=_permutation_gate([0, 1, 2, 3, 4, 5, 7, 6], rdt),
            fredkin=_permutation_gate([0, 1, 2, 3, 4, 6, 5, 7], rdt),
        )

    def u2(self, theta: float, unit: Sequence[float]) -> NDArray[np.complexfloating]:
        """Rotation ``cos(theta/2) I + i sin(theta/2) (n . sigma)`` about the unit vector ``n``.

        Raises:
            ShapeMismatchError: If ``unit`` does not have three components.
            OutOfRangeError: If ``unit`` is not normalised.
        """
        n = np.asarray(unit, dtype=self.x.dtype).ravel()
        if n.size != 3:
            msg = f"u2: rotation axis must be 3-dimensional, got {n.size} components."
            raise ShapeMismatchError(msg)
        if abs(np.linalg.norm(n) - 1.0) > eps(n.dtype):
            msg = f"u2: rotation axis must be a unit vector, got norm {np.linalg.norm(n)}."
            raise OutOfRangeError(msg)
        generator = n[0] * self.x + n[1] * self.y + n[2] * self.z
        return np.cos(0.5 * theta) * np.eye(2, dtype=self.y.dtype) + 1j * np.sin(0.5 * theta) * generator

    def qft(self, dim: int) -> NDArray[np.complexfloating]:
        """Quantum Fourier transform on a qudit of dimension ``dim``.

        Raises:
            InvalidDimensionError: If ``dim`` is zero.
        """
        if dim <= 0:
            msg = f"qft: dimension must be positive, got {dim}."
            raise InvalidDimensionError(msg)
        idx = np.arange(dim)
        phases = np.exp(2j * np.pi * np.outer(idx, idx) / dim) / np.sqrt(dim)
        return phases.astype(self.y.dtype)


@lru_cache(maxsize=None)
def _cached_gates(dtype_name: str) -> GateLibrary:
    return GateLibrary.build(np.dtype(dtype_name))


def get_gate_library(dtype: DTypeLike = np.float64) -> GateLibrary:
    """Shared gate table for the precision of ``dtype``."""
    return _cached_gates(real_dtype(dtype).name)


def _validate_ctrl(
    mat: NDArray[np.complexfloating], ctrl: list[int], sys: list[int], dims: list[int]
) -> None:
    if mat.size == 0:
        msg = "make_ctrl: operator has zero size."
        raise ZeroSizeError(msg)
    if mat.shape[0] != mat.shape[1]:
        msg = f"make_ctrl: operator must be square, got shape {mat.shape}."
        raise ShapeMismatchError(msg)
    if not dims or any(d <= 0 for d in dims):
        msg = f"make_ctrl: invalid dimensions {dims}."
        raise InvalidDimensionError(msg)

    ctrlsys = sys + ctrl
    if (
        not sys
        or len(ctrlsys) > len(dims)
        or len(set(ctrlsys)) != len(ctrlsys)
        or any(not 1 <= p <= len(dims) for p in ctrlsys)
    ):
        msg = f"make_ctrl: invalid subsystems sys={sys}, ctrl={ctrl} for {len(dims)} parties."
        raise InvalidSubsystemError(msg)

    if ctrl and any(dims[c - 1] != dims[ctrl[0] - 1] for c in ctrl):
        msg = f"make_ctrl: control parties {ctrl} must share one dimension."
        raise DimensionMismatchError(msg)
    if prod(dims[s - 1] for s in sys) != mat.shape[0]:
        msg = f"make_ctrl: operator of size {mat.shape[0]} does not act on parties {sys} with dimensions {dims}."
        raise DimensionMismatchError(msg)


def make_ctrl(
    a: Any,  # noqa: ANN401
    ctrl: Sequence[int],
    sys: Sequence[int],
    dims: Sequence[int] | int,
    dim: int = 2,
) -> NDArray[np.complexfloating]:
    """Build a controlled operator on a register of qudits.

    The target parties ``sys`` receive ``A**k`` whenever every control party holds the same
    value ``k != 0``; in all other control configurations they are left untouched. Without
    control parties ``A`` is applied unconditionally.

    Args:
        a: Operator acting on the parties ``sys`` (in the listed order).
        ctrl: 1-based control parties, all of the same dimension.
        sys: 1-based target parties.
        dims: Local dimension of every party, or the number of parties when all share
            dimension ``dim``.
        dim: Uniform local dimension, used only when ``dims`` is an int.

    Returns:
        The controlled operator on the full register.

    Raises:
        ZeroSizeError: If ``a`` is empty.
        ShapeMismatchError: If ``a`` is not square.
        InvalidDimensionError: If a dimension is zero.
        OutOfRangeError: If the uniform party count is zero.
        InvalidSubsystemError: If the subsystem lists are empty, repeated or out of range.
        DimensionMismatchError: If the operator does not fit the target parties or the
            control parties have different dimensions.
    """
    if isinstance(dims, (int, np.integer)):
        if dims == 0:
            msg = "make_ctrl: number of parties must be positive."
            raise OutOfRangeError(msg)
        if dim <= 0:
            msg = f"make_ctrl: invalid uniform dimension {dim}."
            raise InvalidDimensionError(msg)
        dims = [dim] * int(dims)

    mat = as_matrix(a)
    ctrl = [int(c) for c in ctrl]
    sys = [int(s) for s in sys]
    dims = [int(d) for d in dims]
    _validate_ctrl(mat, ctrl, sys, dims)

    n = len(dims)
    sys_axes = [s - 1 for s in sys]
    spectator_axes = [i for i in range(n) if i not in sys_axes]
    sys_dims = [dims[i] for i in sys_axes]

    d = dims[ctrl[0] - 1] if ctrl else 1
    powers = [np.linalg.matrix_power(mat, k) for k in range(max(1, d - 1) + 1)]

    # blocks are indexed along sys in listed order, slicing yields ascending party order
    perm = list(np.argsort(sys_axes))
    axes = perm + [len(perm) + p for p in perm]
    blocks = [p.reshape(sys_dims + sys_dims).transpose(axes) for p in powers]

    out = np.zeros(dims + dims, dtype=complex_dtype(mat.dtype))
    for spectator in np.ndindex(*[dims[i] for i in spectator_axes]):
        values = dict(zip(spectator_axes, spectator))
        if ctrl:
            levels = {values[c - 1] for c in ctrl}
            power = levels.pop() if len(levels) == 1 else 0
        else:
            power = 1

        index: list[Any] = [slice(None)] * (2 * n)
        for axis, value in values.items():
            index[axis] = value
            index[n + axis] = value
        out[tuple(index)] = blocks[power]

    size = prod(dims)
    return out.reshape(size, size)
