# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Optimizer configuration and the two-stage angle minimization.

The minimization runs an optional global search over the angle box followed by a mandatory
local refinement started from the global result (or from the configured seed when the global
phase is disabled). Box and seed are stored as multiples of pi.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from mqt.qinfo.core.exceptions import (
    InvalidParameterVectorLengthError,
    OutOfRangeError,
    UnsupportedMeasuredPartyDimensionError,
)
from mqt.qinfo.discord.algorithms import (
    GLOBAL_ALGORITHMS,
    LOCAL_ALGORITHMS,
    global_algorithm,
    local_algorithm,
    normalize_algorithm,
)
from mqt.qinfo.discord.measurements import QUBIT_ANGLES, QUTRIT_ANGLES

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

LOCAL_XTOL = 10 * float(np.finfo(np.float64).eps)


def _as_angle_vector(values: Sequence[float] | NDArray[np.floating]) -> NDArray[np.float64]:
    return np.array(values, dtype=float).ravel()


@dataclass
class DeficitOptions:
    """Configuration of the deficit optimizer.

    Attributes:
        global_algorithm: Identifier of the global search algorithm.
        global_xtol: Relative x-tolerance of the global search.
        global_ftol: Relative f-tolerance of the global search.
        global_enabled: Whether the global phase runs at all.
        local_algorithm: Identifier of the local refinement algorithm.
        local_xtol: Relative x-tolerance of the local refinement.
        local_ftol: Relative f-tolerance of the local refinement.
        angle_range: Upper bound of every angle, in units of pi. The lower bound is 0.
        initial_angles: Seed of the search, in units of pi.
    """

    global_algorithm: str = "direct_l"
    global_xtol: float = 4.0e-2
    global_ftol: float = 0.0
    global_enabled: bool = True
    local_algorithm: str = "cobyla"
    local_xtol: float = LOCAL_XTOL
    local_ftol: float = 0.0
    angle_range: NDArray[np.float64] = field(default_factory=lambda: np.array([1.0, 2.0]))
    initial_angles: NDArray[np.float64] = field(default_factory=lambda: np.array([0.1, 0.1]))

    def __post_init__(self) -> None:
        """Normalise algorithm names and angle vectors."""
        self.global_algorithm = normalize_algorithm(self.global_algorithm, GLOBAL_ALGORITHMS, "global")
        self.local_algorithm = normalize_algorithm(self.local_algorithm, LOCAL_ALGORITHMS, "local")
        self.angle_range = _as_angle_vector(self.angle_range)
        self.initial_angles = _as_angle_vector(self.initial_angles)

    @classmethod
    def qubit_defaults(cls) -> DeficitOptions:
        """Defaults for a measured qubit."""
        return cls()

    @classmethod
    def qutrit_defaults(cls) -> DeficitOptions:
        """Defaults for a measured qutrit: coarser global search over a 5-dimensional box."""
        return cls(
            global_xtol=0.25,
            angle_range=2.0 * np.ones(QUTRIT_ANGLES),
            initial_angles=2.0 * np.ones(QUTRIT_ANGLES),
        )

    @classmethod
    def for_local_dim(cls, local_dim: int) -> DeficitOptions:
        """Defaults matching the dimension of the measured party.

        Raises:
            UnsupportedMeasuredPartyDimensionError: If ``local_dim`` is neither 2 nor 3.
        """
        if local_dim == 2:
            return cls.qubit_defaults()
        if local_dim == 3:
            return cls.qutrit_defaults()
        msg = f"Measured party must be a qubit or a qutrit, got local dimension {local_dim}."
        raise UnsupportedMeasuredPartyDimensionError(msg)

    @property
    def num_angles(self) -> int:
        """Number of angles of the configured search box."""
        return int(self.angle_range.size)

    def validate(self, num_angles: int) -> None:
        """Check the configuration against the number of angles of the measured party.

        A zero entry of ``angle_range`` fixes the corresponding angle at 0.

        Raises:
            InvalidParameterVectorLengthError: If box or seed has the wrong length.
            OutOfRangeError: If an ``angle_range`` entry is negative or not finite.
            UnknownAlgorithmError: If an algorithm name was replaced by an unknown one.
        """
        for name, vec in (("angle_range", self.angle_range), ("initial_angles", self.initial_angles)):
            if vec.size != num_angles:
                msg = (
                    f"{name} must have {num_angles} elements when the measured party is a "
                    f"{'qubit' if num_angles == QUBIT_ANGLES else 'qutrit'}, got {vec.size}."
                )
                raise InvalidParameterVectorLengthError(msg)
        if not np.all(np.isfinite(self.angle_range)) or np.any(self.angle_range < 0):
            msg = f"angle_range entries must be finite and non-negative, got {self.angle_range.tolist()}."
            raise OutOfRangeError(msg)
        self.global_algorithm = normalize_algorithm(self.global_algorithm, GLOBAL_ALGORITHMS, "global")
        self.local_algorithm = normalize_algorithm(self.local_algorithm, LOCAL_ALGORITHMS, "local")

    def lower_bounds(self) -> NDArray[np.float64]:
        """Lower corner of the search box (all zeros)."""
        return np.zeros(self.num_angles)

    def upper_bounds(self) -> NDArray[np.float64]:
        """Upper corner of the search box, ``angle_range * pi``."""
        return self.angle_range * np.pi

    def start_point(self) -> NDArray[np.float64]:
        """Seed of the search, ``initial_angles * pi`` clipped into the box."""
        return np.clip(self.initial_angles * np.pi, self.lower_bounds(), self.upper_bounds())

    def copy(self) -> DeficitOptions:
        """Deep copy."""
        return copy.deepcopy(self)


@dataclass
class AngleOptimizationResult:
    """Outcome of :func:`minimize_angles`.

    Attributes:
        x: Optimal angles.
        fun: Objective value at ``x``.
        global_x: Result of the global phase, ``None`` when it was disabled.
        global_fun: Objective value at ``global_x``.
    """

    x: NDArray[np.float64]
    fun: float
    global_x: NDArray[np.float64] | None = None
    global_fun: float | None = None


def minimize_angles(objective: Callable[[NDArray[np.float64]], float], options: DeficitOptions) -> AngleOptimizationResult:
    """Minimize ``objective`` over the angle box described by ``options``.

    Angles with a zero range are held at 0 and only the remaining ones are searched.

    Args:
        objective: Function of the angle vector.
        options: Optimizer configuration. Its vectors must have matching lengths.

    Returns:
        AngleOptimizationResult: The best point found and its objective value. Optimizer
        non-convergence is not an error; the best point seen is returned.

    Raises:
        InvalidParameterVectorLengthError: If bounds and seed have different lengths.
        OutOfRangeError: If a bound multiplier is negative.
    """
    options.validate(options.num_angles)
    start = options.start_point()
    free = options.upper_bounds() > options.lower_bounds()

    def expand(z: NDArray[np.float64]) -> NDArray[np.float64]:
        point = start.copy()
        point[free] = z
        return point

    if not np.any(free):
        logger.debug("All angles fixed by a zero range")
        return AngleOptimizationResult(x=start, fun=float(objective(start)))

    def reduced(z: NDArray[np.float64]) -> float:
        return float(objective(expand(np.asarray(z, dtype=float))))

    lb = options.lower_bounds()[free]
    ub = options.upper_bounds()[free]
    x = start[free]

    global_x: NDArray[np.float64] | None = None
    global_fun: float | None = None
    if options.global_enabled:
        logger.debug(
            "Global phase: %s, xtol=%g, ftol=%g", options.global_algorithm, options.global_xtol, options.global_ftol
        )
        search = global_algorithm(options.global_algorithm)
        global_x, global_fun = search(reduced, x, lb, ub, options.global_xtol, options.global_ftol)
        global_x = np.clip(global_x, lb, ub)
        x = global_x.copy()

    logger.debug("Local phase: %s, xtol=%g, ftol=%g", options.local_algorithm, options.local_xtol, options.local_ftol)
    refine = local_algorithm(options.local_algorithm)
    x_local, fun = refine(reduced, x, lb, ub, options.local_xtol, options.local_ftol)

    x_clipped = np.clip(x_local, lb, ub)
    if not np.array_equal(x_clipped, x_local):
        fun = reduced(x_clipped)
    x_best = x_clipped

    if global_fun is not None and global_x is not None and global_fun < fun:
        x_best, fun = global_x, global_fun

    return AngleOptimizationResult(
        x=expand(x_best),
        fun=float(fun),
        global_x=None if global_x is None else expand(global_x),
        global_fun=global_fun,
    )
