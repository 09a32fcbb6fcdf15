# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Numerical precision thresholds.

All "is this effectively zero" comparisons in the library are gated by :func:`eps`, which
scales the machine epsilon of the working precision: 10 eps for single precision and
100 eps for double precision.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import DTypeLike


def real_dtype(dtype: DTypeLike) -> np.dtype:
    """Return the real floating point type underlying ``dtype``.

    Integer and boolean inputs are promoted to double precision.
    """
    dt = np.dtype(dtype)
    if dt.kind == "c":
        return np.finfo(dt).dtype
    if dt.kind == "f":
        return dt
    return np.dtype(np.float64)


def complex_dtype(dtype: DTypeLike) -> np.dtype:
    """Return the complex type with the same precision as ``dtype``."""
    return np.dtype(np.complex64) if real_dtype(dtype) == np.float32 else np.dtype(np.complex128)


def eps(dtype: DTypeLike = np.float64) -> float:
    """Threshold below which values are treated as zero.

    Args:
        dtype: Working precision (real or complex). Defaults to double precision.

    Returns:
        float: ``10 * finfo.eps`` for single precision, ``100 * finfo.eps`` otherwise.
    """
    rdt = real_dtype(dtype)
    factor = 10 if rdt == np.float32 else 100
    return float(factor * np.finfo(rdt).eps)
