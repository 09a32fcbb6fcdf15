# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Post-measurement entropy as an optimization objective."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from mqt.qinfo.core.libraries.basis_library import get_basis_library
from mqt.qinfo.core.methods.embedding import embed_projectors
from mqt.qinfo.core.methods.entropy import entropy
from mqt.qinfo.discord.measurements import projector_family

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from numpy.typing import NDArray

    from mqt.qinfo.core.libraries.basis_library import BasisLibrary
    from mqt.qinfo.core.methods.embedding import IdentityBlocks


def post_measurement_state(
    rho: NDArray[np.complexfloating], projectors: Iterable[NDArray[np.complexfloating]]
) -> NDArray[np.complexfloating]:
    """Non-selective measurement ``sum_i P_i rho P_i`` with already embedded projectors.

    The result has the common dtype of ``rho`` and the projectors, so a real state measured
    in a complex basis yields a complex matrix.
    """
    projectors = list(projectors)
    out = np.zeros(rho.shape, dtype=np.result_type(rho, *projectors))
    for proj in projectors:
        out += proj @ rho @ proj
    return out


def measured_entropy(
    rho: NDArray[np.complexfloating],
    local_projectors: Iterable[NDArray[np.complexfloating]],
    blocks: IdentityBlocks,
) -> float:
    """Entropy of ``rho`` after measuring the nodal party with the given local projectors."""
    return entropy(post_measurement_state(rho, embed_projectors(local_projectors, blocks)))


@dataclass
class DeficitObjective:
    """Callable objective ``angles -> S(sum_i P_i rho P_i)``.

    The instance bundles the state and the identity blocks of the measured party; calling it
    does not modify either, so the optimizer may evaluate it any number of times.

    Attributes:
        rho: Density matrix of the full system.
        blocks: Identity blocks of the measured party.
        library: Basis table used by the measurement parametrisation.
        evaluations: Number of calls so far.
    """

    rho: NDArray[np.complexfloating]
    blocks: IdentityBlocks
    library: BasisLibrary = field(default_factory=get_basis_library)
    evaluations: int = 0

    def __post_init__(self) -> None:
        """Select the parametrisation for the measured party."""
        self._family = projector_family(self.blocks.local_dim)

    def projectors(self, angles: Sequence[float] | NDArray[np.floating]) -> list[NDArray[np.complexfloating]]:
        """Local projectors for ``angles``."""
        return self._family(angles, self.library)

    def __call__(self, angles: Sequence[float] | NDArray[np.floating]) -> float:
        """Evaluate the post-measurement entropy at ``angles``."""
        self.evaluations += 1
        return measured_entropy(self.rho, self.projectors(angles), self.blocks)
