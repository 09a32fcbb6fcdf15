# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Exception types.

Every error raised by the library derives from :class:`QInfoError`, which itself is a
:class:`ValueError` so callers that only care about "bad input" can catch the builtin.
Validation is always performed eagerly by the call that introduces the bad value.
"""

from __future__ import annotations


class QInfoError(ValueError):
    """Base class for all input validation errors."""


class ZeroSizeError(QInfoError):
    """The input matrix or vector has no elements."""


class ShapeMismatchError(QInfoError):
    """The input has the wrong shape, e.g. a non-square matrix where a square one is required."""


class DimensionMismatchError(QInfoError):
    """Declared party dimensions do not match the size of the matrix."""


class InvalidDimensionError(QInfoError):
    """A party dimension is zero or otherwise unusable."""


class InvalidMeasuredPartyError(QInfoError):
    """The measured (nodal) party index lies outside ``[1, P]``."""


class UnsupportedMeasuredPartyDimensionError(QInfoError):
    """The measured party is neither a qubit nor a qutrit."""


class InvalidParameterVectorLengthError(QInfoError):
    """An angle bound or seed vector does not have the length required by the measured party."""


class OutOfRangeError(QInfoError):
    """A scalar parameter lies outside its admissible range."""


class InvalidSubsystemError(QInfoError):
    """A list of subsystem indices is repeated, empty where it must not be, or out of range."""


class NotQubitSubsystemError(QInfoError):
    """A two-qubit-only measure received a state of a different dimension."""


class InvalidProbabilityError(QInfoError):
    """A probability vector has negative entries."""


class UnknownAlgorithmError(QInfoError):
    """An optimizer algorithm identifier is not known."""
