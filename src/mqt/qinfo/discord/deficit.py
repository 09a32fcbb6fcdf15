# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Quantum deficit of a multipartite state.

This module defines the DeficitSpace class. Given a density matrix, the local dimensions of
its parties and one measured (nodal) party, it searches for the local projective measurement
on that party which least increases the entropy of the state. The deficit is

    D = min_{P} S(sum_i P_i rho P_i) - S(rho),

minimised over rank-1 projective measurements ``P`` on the nodal party, which must be a
qubit or a qutrit.

Three quantities are cached independently: the total entropy ``S(rho)``, the optimized
deficit with its angles, and the "registered" deficit evaluated at the three canonical
measurement settings of the basis table. Configuration setters return the session so calls
can be chained; each setter explicitly invalidates the optimized result and nothing else.

Example:
    >>> import numpy as np
    >>> bell = np.array([1, 0, 0, 1]) / np.sqrt(2)
    >>> space = DeficitSpace(np.outer(bell, bell), nodal=1, dim=2)
    >>> round(space.result(), 6)
    1.0
"""

from __future__ import annotations

import logging
from math import log, prod
from typing import TYPE_CHECKING, Any

import numpy as np

from mqt.qinfo.core.exceptions import (
    DimensionMismatchError,
    InvalidDimensionError,
    InvalidMeasuredPartyError,
    ShapeMismatchError,
    UnsupportedMeasuredPartyDimensionError,
    ZeroSizeError,
)
from mqt.qinfo.core.libraries.basis_library import get_basis_library
from mqt.qinfo.core.methods.embedding import IdentityBlocks
from mqt.qinfo.core.methods.entropy import entropy
from mqt.qinfo.core.methods.utils import as_matrix, to_density_matrix
from mqt.qinfo.discord.algorithms import GLOBAL_ALGORITHMS, LOCAL_ALGORITHMS, normalize_algorithm
from mqt.qinfo.discord.measurements import num_angles
from mqt.qinfo.discord.objective import DeficitObjective, measured_entropy
from mqt.qinfo.discord.optimization import DeficitOptions, minimize_angles

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from numpy.typing import NDArray

    from mqt.qinfo.core.libraries.basis_library import BasisLibrary
    from mqt.qinfo.discord.optimization import AngleOptimizationResult

    Minimizer = Callable[[Callable[[NDArray[np.float64]], float], DeficitOptions], AngleOptimizationResult]

logger = logging.getLogger(__name__)

REGISTERED_SETTINGS = (1, 2, 3)


class DeficitSpace:
    """Deficit optimization session for one state and one measured party."""

    def __init__(
        self,
        rho: Any,  # noqa: ANN401
        nodal: int,
        dim: Sequence[int] | int,
        *,
        options: DeficitOptions | None = None,
        basis_library: BasisLibrary | None = None,
        minimizer: Minimizer | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            rho: Density matrix, or a pure state vector which is promoted to its projector.
            nodal: 1-based index of the measured party.
            dim: Local dimension of every party, or a single dimension shared by all parties,
                in which case the number of parties is ``round(log_dim(N))``.
            options: Initial optimizer configuration. Defaults to the qubit or qutrit defaults.
            basis_library: Basis table for the measurement parametrisation. Defaults to the
                shared table of the state's precision.
            minimizer: Two-stage minimization routine. Defaults to :func:`minimize_angles`.

        Raises:
            ZeroSizeError: If ``rho`` is empty.
            ShapeMismatchError: If ``rho`` is neither square nor a vector.
            InvalidDimensionError: If a dimension is zero (or the uniform dimension is 1).
            DimensionMismatchError: If the dimensions do not multiply to the matrix size.
            InvalidMeasuredPartyError: If ``nodal`` is outside ``[1, P]``.
            UnsupportedMeasuredPartyDimensionError: If the measured party is neither a qubit
                nor a qutrit.
            InvalidParameterVectorLengthError: If ``options`` does not fit the measured party.
            UnknownAlgorithmError: If ``options`` names an unknown algorithm.
        """
        mat = as_matrix(rho)
        if mat.size == 0:
            msg = "DeficitSpace: state has zero size."
            raise ZeroSizeError(msg)
        if mat.shape[1] != 1 and mat.shape[0] != mat.shape[1]:
            msg = f"DeficitSpace: state must be a square matrix or a vector, got shape {mat.shape}."
            raise ShapeMismatchError(msg)
        self._rho: NDArray[np.complexfloating] = np.array(to_density_matrix(mat))
        self._rho.setflags(write=False)

        self._dims = self._resolve_dims(dim, self._rho.shape[0])
        self._library = basis_library or get_basis_library(self._rho.dtype)
        self._minimizer: Minimizer = minimizer or minimize_angles

        self._sab_valid = False
        self._opt_valid = False
        self._reg_valid = False
        self._sab = 0.0
        self._result = 0.0
        self._opt_angles = np.zeros(0)
        self._result_reg = 0.0
        self._result_reg_all = np.zeros(len(REGISTERED_SETTINGS))

        self._select_party(nodal)
        if options is not None:
            options.validate(num_angles(self._blocks.local_dim))
            self._options = options.copy()

    @staticmethod
    def _resolve_dims(dim: Sequence[int] | int, size: int) -> list[int]:
        if isinstance(dim, (int, np.integer)):
            if dim <= 1:
                msg = f"DeficitSpace: invalid uniform party dimension {dim}."
                raise InvalidDimensionError(msg)
            parties = round(log(size) / log(int(dim)))
            dims = [int(dim)] * max(parties, 1)
        else:
            dims = [int(d) for d in dim]
            if not dims or any(d <= 0 for d in dims):
                msg = f"DeficitSpace: invalid party dimensions {dims}."
                raise InvalidDimensionError(msg)

        if prod(dims) != size:
            msg = f"DeficitSpace: party dimensions {dims} do not match a state of size {size}."
            raise DimensionMismatchError(msg)
        return dims

    def _select_party(self, nodal: int) -> None:
        """Validate ``nodal``, rebuild identity blocks and restore default options."""
        if not 1 <= nodal <= len(self._dims):
            msg = f"Invalid measured party index {nodal} for a {len(self._dims)}-party system."
            raise InvalidMeasuredPartyError(msg)
        local_dim = self._dims[nodal - 1]
        if local_dim not in {2, 3}:
            msg = f"Measured party {nodal} is not a qubit or a qutrit (dimension {local_dim})."
            raise UnsupportedMeasuredPartyDimensionError(msg)

        self._nodal = int(nodal)
        self._blocks = IdentityBlocks.for_party(self._dims, self._nodal, dtype=self._rho.real.dtype)
        self._options = DeficitOptions.for_local_dim(local_dim)

    # --- cache invalidation -------------------------------------------------------------

    def _invalidate_optimum(self) -> None:
        self._opt_valid = False

    def _invalidate_registered(self) -> None:
        self._reg_valid = False

    def _invalidate_total_entropy(self) -> None:
        self._sab_valid = False

    # --- read-only state ----------------------------------------------------------------

    @property
    def rho(self) -> NDArray[np.complexfloating]:
        """The (read-only) density matrix."""
        return self._rho

    @property
    def nodal(self) -> int:
        """1-based index of the measured party."""
        return self._nodal

    @property
    def dims(self) -> list[int]:
        """Local dimension of every party."""
        return list(self._dims)

    @property
    def party_count(self) -> int:
        """Number of parties."""
        return len(self._dims)

    @property
    def is_qubit_case(self) -> bool:
        """Whether the measured party is a qubit."""
        return self._blocks.local_dim == 2

    @property
    def is_qutrit_case(self) -> bool:
        """Whether the measured party is a qutrit."""
        return self._blocks.local_dim == 3

    @property
    def options(self) -> DeficitOptions:
        """A copy of the current optimizer configuration."""
        return self._options.copy()

    # --- configuration setters ----------------------------------------------------------

    def set_global_algorithm(self, name: str) -> DeficitSpace:
        """Select the global search algorithm."""
        self._options.global_algorithm = normalize_algorithm(name, GLOBAL_ALGORITHMS, "global")
        self._invalidate_optimum()
        return self

    def set_global_xtol(self, value: float) -> DeficitSpace:
        """Set the relative x-tolerance of the global search."""
        self._options.global_xtol = float(value)
        self._invalidate_optimum()
        return self

    def set_global_ftol(self, value: float) -> DeficitSpace:
        """Set the relative f-tolerance of the global search."""
        self._options.global_ftol = float(value)
        self._invalidate_optimum()
        return self

    def set_global_enabled(self, enabled: bool) -> DeficitSpace:  # noqa: FBT001
        """Enable or disable the global phase."""
        self._options.global_enabled = bool(enabled)
        self._invalidate_optimum()
        return self

    def set_local_algorithm(self, name: str) -> DeficitSpace:
        """Select the local refinement algorithm."""
        self._options.local_algorithm = normalize_algorithm(name, LOCAL_ALGORITHMS, "local")
        self._invalidate_optimum()
        return self

    def set_local_xtol(self, value: float) -> DeficitSpace:
        """Set the relative x-tolerance of the local refinement."""
        self._options.local_xtol = float(value)
        self._invalidate_optimum()
        return self

    def set_local_ftol(self, value: float) -> DeficitSpace:
        """Set the relative f-tolerance of the local refinement."""
        self._options.local_ftol = float(value)
        self._invalidate_optimum()
        return self

    def set_angle_range(self, multipliers: Sequence[float] | NDArray[np.floating]) -> DeficitSpace:
        """Set the upper bound of every angle, in units of pi.

        A zero entry fixes that angle at 0.

        Raises:
            InvalidParameterVectorLengthError: Unless 2 (qubit) or 5 (qutrit) values are given.
            OutOfRangeError: If an entry is negative.
        """
        candidate = self._options.copy()
        candidate.angle_range = np.array(multipliers, dtype=float).ravel()
        candidate.validate(num_angles(self._blocks.local_dim))
        self._options = candidate
        self._invalidate_optimum()
        return self

    def set_initial_angles(self, multipliers: Sequence[float] | NDArray[np.floating]) -> DeficitSpace:
        """Set the seed of the search, in units of pi.

        Raises:
            InvalidParameterVectorLengthError: Unless 2 (qubit) or 5 (qutrit) values are given.
        """
        candidate = self._options.copy()
        candidate.initial_angles = np.array(multipliers, dtype=float).ravel()
        candidate.validate(num_angles(self._blocks.local_dim))
        self._options = candidate
        self._invalidate_optimum()
        return self

    # --- computation --------------------------------------------------------------------

    def total_entropy(self) -> float:
        """Entropy of the full state, computed once per state."""
        if not self._sab_valid:
            logger.debug("Computing total entropy of a %d-dimensional state", self._rho.shape[0])
            self._sab = entropy(self._rho)
            self._sab_valid = True
        return self._sab

    def objective(self) -> DeficitObjective:
        """Objective function of the current measured party."""
        return DeficitObjective(self._rho, self._blocks, self._library)

    def compute(self) -> DeficitSpace:
        """Run the optimization unconditionally and cache its result."""
        sab = self.total_entropy()
        objective = self.objective()
        logger.debug("Optimizing deficit for party %d of %s", self._nodal, self._dims)
        res = self._minimizer(objective, self._options.copy())

        self._result = float(res.fun) - sab
        self._opt_angles = np.array(res.x, dtype=float)
        self._opt_valid = True
        logger.info(
            "Deficit %.10g at angles %s after %d evaluations", self._result, self._opt_angles, objective.evaluations
        )
        return self

    def compute_reg(self) -> DeficitSpace:
        """Evaluate the deficit at the canonical measurement settings and cache it."""
        sab = self.total_entropy()
        local_dim = self._blocks.local_dim
        logger.debug("Evaluating registered deficit for party %d", self._nodal)
        values = [
            measured_entropy(self._rho, self._library.projectors(local_dim, setting), self._blocks) - sab
            for setting in REGISTERED_SETTINGS
        ]
        self._result_reg_all = np.array(values, dtype=float)
        self._result_reg = float(np.min(self._result_reg_all))
        self._reg_valid = True
        return self

    def result(self) -> float:
        """Optimized deficit."""
        if not self._opt_valid:
            self.compute()
        return self._result

    def opt_angles(self) -> NDArray[np.float64]:
        """Angles of the optimal measurement."""
        if not self._opt_valid:
            self.compute()
        return self._opt_angles.copy()

    def result_reg(self) -> float:
        """Smallest deficit among the canonical measurement settings."""
        if not self._reg_valid:
            self.compute_reg()
        return self._result_reg

    def result_reg_all(self) -> NDArray[np.float64]:
        """Deficit for each of the three canonical measurement settings."""
        if not self._reg_valid:
            self.compute_reg()
        return self._result_reg_all.copy()

    # --- lifecycle ----------------------------------------------------------------------

    def refresh(self) -> DeficitSpace:
        """Drop all cached values and restore the default configuration."""
        self._invalidate_total_entropy()
        self._invalidate_optimum()
        self._invalidate_registered()
        self._options = DeficitOptions.for_local_dim(self._blocks.local_dim)
        return self

    def reset_party(self, nodal: int) -> DeficitSpace:
        """Measure a different party.

        The total entropy stays cached; the optimized and registered results are dropped and
        the configuration returns to the defaults of the new party.

        Raises:
            InvalidMeasuredPartyError: If ``nodal`` is outside ``[1, P]``.
            UnsupportedMeasuredPartyDimensionError: If the new party is neither a qubit nor a
                qutrit.
        """
        self._select_party(nodal)
        self._invalidate_optimum()
        self._invalidate_registered()
        return self

    def __repr__(self) -> str:
        """Short description of the session."""
        return f"DeficitSpace(dims={self._dims}, nodal={self._nodal})"
