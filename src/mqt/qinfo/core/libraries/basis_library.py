# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Canonical measurement bases.

This module defines the BasisLibrary, an immutable table of orthonormal qubit and qutrit
bases together with their rank-1 projectors. Entries are addressed by
``(vector index, setting index)``:

- qubit settings: 0 computational ``{|0>, |1>}``, 1 ``{|+>, |->}``, 2 circular
  ``{|+i>, |-i>}``, 3 repeats the computational basis;
- qutrit settings: 0 computational ``{U, M, D}``, 1 and 2 two real/complex symmetric bases,
  3 repeats the computational basis.

One table exists per working precision. It is built on first request and shared afterwards;
all arrays are flagged read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

import numpy as np

from mqt.qinfo.core.precision import complex_dtype

if TYPE_CHECKING:
    from numpy.typing import DTypeLike, NDArray

NUM_SETTINGS = 4


def _frozen(arr: NDArray[np.complexfloating]) -> NDArray[np.complexfloating]:
    arr.setflags(write=False)
    return arr


def _projectors(bases: NDArray[np.complexfloating]) -> NDArray[np.complexfloating]:
    # bases[i, s] is the i-th vector of setting s; result[i, s] = |v><v|
    return np.einsum("isa,isb->isab", bases, bases.conj())


@dataclass(frozen=True)
class BasisLibrary:
    """Read-only table of pauli matrices, measurement bases and projectors.

    Attributes:
        pauli: Array of shape ``(4, 2, 2)`` holding ``I, X, Y, Z``.
        basis2: Qubit basis vectors, shape ``(2, 4, 2)``.
        basis3: Qutrit basis vectors, shape ``(3, 4, 3)``.
        proj2: Qubit projectors, shape ``(2, 4, 2, 2)``.
        proj3: Qutrit projectors, shape ``(3, 4, 3, 3)``.
    """

    pauli: NDArray[np.complexfloating]
    basis2: NDArray[np.complexfloating]
    basis3: NDArray[np.complexfloating]
    proj2: NDArray[np.complexfloating]
    proj3: NDArray[np.complexfloating]

    @classmethod
    def build(cls, dtype: DTypeLike = np.complex128) -> BasisLibrary:
        """Construct a fresh table in the given precision."""
        cdt = complex_dtype(dtype)
        r = np.sqrt(0.5)

        pauli = np.array(
            [
                [[1, 0], [0, 1]],
                [[0, 1], [1, 0]],
                [[0, -1j], [1j, 0]],
                [[1, 0], [0, -1]],
            ],
            dtype=cdt,
        )

        basis2 = np.empty((2, NUM_SETTINGS, 2), dtype=cdt)
        basis2[:, 0] = [[1, 0], [0, 1]]
        basis2[:, 1] = [[r, r], [r, -r]]
        basis2[:, 2] = [[r, 1j * r], [r, -1j * r]]
        basis2[:, 3] = basis2[:, 0]

        basis3 = np.empty((3, NUM_SETTINGS, 3), dtype=cdt)
        basis3[:, 0] = np.eye(3)
        basis3[:, 1] = [[0.5, r, 0.5], [-r, 0, r], [0.5, -r, 0.5]]
        basis3[:, 2] = [[-0.5, -1j * r, 0.5], [r, 0, r], [-0.5, 1j * r, 0.5]]
        basis3[:, 3] = basis3[:, 0]

        return cls(
            pauli=_frozen(pauli),
            basis2=_frozen(basis2),
            basis3=_frozen(basis3),
            proj2=_frozen(_projectors(basis2)),
            proj3=_frozen(_projectors(basis3)),
        )

    def basis(self, local_dim: int) -> NDArray[np.complexfloating]:
        """Basis table for a qubit (``local_dim == 2``) or qutrit (``local_dim == 3``).

        Raises:
            ValueError: For any other local dimension.
        """
        if local_dim == 2:
            return self.basis2
        if local_dim == 3:
            return self.basis3
        msg = f"No basis table for local dimension {local_dim}"
        raise ValueError(msg)

    def projectors(self, local_dim: int, setting: int) -> list[NDArray[np.complexfloating]]:
        """All projectors of one measurement setting on a qubit or qutrit.

        Args:
            local_dim: 2 or 3.
            setting: Index in ``[0, 4)``.

        Returns:
            list: ``local_dim`` projectors that sum to the identity.
        """
        table = self.proj2 if local_dim == 2 else self.proj3 if local_dim == 3 else None
        if table is None:
            msg = f"No projector table for local dimension {local_dim}"
            raise ValueError(msg)
        return [table[i, setting] for i in range(local_dim)]


@lru_cache(maxsize=None)
def _cached_library(dtype_name: str) -> BasisLibrary:
    return BasisLibrary.build(np.dtype(dtype_name))


def get_basis_library(dtype: DTypeLike = np.complex128) -> BasisLibrary:
    """Shared basis table for the precision of ``dtype``.

    The first call for a precision builds the table; later calls return the same object.
    """
    return _cached_library(complex_dtype(dtype).name)
