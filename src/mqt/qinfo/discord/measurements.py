# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Angle parametrisations of local projective measurements.

Each function maps a vector of real angles to a complete set of orthogonal rank-1 projectors
on the measured party:

- qubit (2 angles ``theta, phi``):
  ``|psi_1> = cos(theta/2)|0> + e^{i phi} sin(theta/2)|1>`` and the orthogonal
  ``|psi_2> = sin(theta/2)|0> - e^{i phi} cos(theta/2)|1>``;
- qutrit (5 angles ``theta_1, theta_2, theta_3, phi, delta``): a trigonometric
  parametrisation of SU(3) with ``phi_2 = -phi``. The three ``theta`` angles are halved
  before use, so the search box for them is ``[0, 2 pi]`` by default.

For every input the projectors sum to the identity on the local space.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from mqt.qinfo.core.exceptions import InvalidParameterVectorLengthError
from mqt.qinfo.core.libraries.basis_library import get_basis_library

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from numpy.typing import NDArray

    from mqt.qinfo.core.libraries.basis_library import BasisLibrary

QUBIT_ANGLES = 2
QUTRIT_ANGLES = 5


def _check_length(angles: NDArray[np.floating], expected: int, name: str) -> None:
    if angles.size != expected:
        msg = f"{name} measurement takes {expected} angles, got {angles.size}."
        raise InvalidParameterVectorLengthError(msg)


def _outer(vec: NDArray[np.complexfloating], dtype: np.dtype) -> NDArray[np.complexfloating]:
    return np.outer(vec, vec.conj()).astype(dtype, copy=False)


def qubit_projectors(
    angles: Sequence[float] | NDArray[np.floating], library: BasisLibrary | None = None
) -> list[NDArray[np.complexfloating]]:
    """Projectors of the qubit measurement along the Bloch direction ``(theta, phi)``.

    Args:
        angles: ``[theta, phi]``.
        library: Basis table supplying ``|0>`` and ``|1>``. Defaults to the shared double
            precision table.

    Returns:
        list: The two projectors ``|psi_i><psi_i|``.

    Raises:
        InvalidParameterVectorLengthError: If ``angles`` does not hold two values.
    """
    angles = np.asarray(angles, dtype=float).ravel()
    _check_length(angles, QUBIT_ANGLES, "Qubit")
    library = library or get_basis_library()

    basis = library.basis(2)
    u = basis[0, 0]
    d = basis[1, 0]
    half = 0.5 * angles[0]
    phase = np.exp(1j * angles[1])

    psi_1 = np.cos(half) * u + phase * np.sin(half) * d
    psi_2 = np.sin(half) * u - phase * np.cos(half) * d
    dtype = basis.dtype
    return [_outer(psi_1, dtype), _outer(psi_2, dtype)]


def qutrit_projectors(
    angles: Sequence[float] | NDArray[np.floating], library: BasisLibrary | None = None
) -> list[NDArray[np.complexfloating]]:
    """Projectors of the qutrit measurement parametrised by five angles.

    Args:
        angles: ``[theta_1, theta_2, theta_3, phi, delta]``.
        library: Basis table supplying ``U, M, D``. Defaults to the shared double precision
            table.

    Returns:
        list: The three projectors.

    Raises:
        InvalidParameterVectorLengthError: If ``angles`` does not hold five values.
    """
    angles = np.asarray(angles, dtype=float).ravel()
    _check_length(angles, QUTRIT_ANGLES, "Qutrit")
    library = library or get_basis_library()

    basis = library.basis(3)
    up, mid, down = (basis[i, 0] for i in range(3))
    t1, t2, t3 = 0.5 * angles[:3]
    e_phi1 = np.exp(1j * angles[3])
    e_phi2 = np.exp(-1j * angles[3])
    e_del = np.exp(1j * angles[4])

    c1, s1 = np.cos(t1), np.sin(t1)
    c2, s2 = np.cos(t2), np.sin(t2)
    c3, s3 = np.cos(t3), np.sin(t3)

    psi_1 = (
        c1 * c2 * up
        - e_phi1 * (e_del * s1 * c2 * c3 + s2 * s3) * mid
        + e_phi2 * (-e_del * s1 * c2 * s3 + s2 * c3) * down
    )
    psi_2 = np.conj(e_del) * s1 * up + e_phi1 * c1 * c3 * mid + e_phi2 * c1 * s3 * down
    psi_3 = (
        c1 * s2 * up
        + e_phi1 * (-e_del * s1 * s2 * c3 + c2 * s3) * mid
        - e_phi2 * (e_del * s1 * s2 * s3 + c2 * c3) * down
    )
    dtype = basis.dtype
    return [_outer(psi, dtype) for psi in (psi_1, psi_2, psi_3)]


def projector_family(local_dim: int) -> Callable[..., list[NDArray[np.complexfloating]]]:
    """Parametrisation matching the dimension of the measured party.

    Raises:
        ValueError: If ``local_dim`` is neither 2 nor 3.
    """
    if local_dim == 2:
        return qubit_projectors
    if local_dim == 3:
        return qutrit_projectors
    msg = f"No measurement parametrisation for local dimension {local_dim}"
    raise ValueError(msg)


def num_angles(local_dim: int) -> int:
    """Number of angles parametrising a measurement on a party of dimension ``local_dim``."""
    return QUBIT_ANGLES if local_dim == 2 else QUTRIT_ANGLES
