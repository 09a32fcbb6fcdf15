# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Embedding of local operators into a multipartite Hilbert space.

A local operator acting on party ``k`` (1-based) of a system with local dimensions
``dims`` is placed into the full space as ``I_before (x) op (x) I_after``, where the
identities span the parties strictly before and after ``k``. When ``k`` is the first or
last party the corresponding identity is dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import prod
from typing import TYPE_CHECKING

import numpy as np

from mqt.qinfo.core.exceptions import DimensionMismatchError, InvalidMeasuredPartyError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from numpy.typing import DTypeLike, NDArray


def _kron_all(ops: list[NDArray[np.complexfloating]]) -> NDArray[np.complexfloating]:
    """Compute the Kronecker product of a list of matrices.

    Args:
        ops: A list of matrices (2D numpy arrays) to compute the product of.

    Returns:
        The resulting matrix from the Kronecker product of all input matrices.
    """
    res = ops[0]
    for op in ops[1:]:
        res = np.kron(res, op)
    return res


@dataclass(frozen=True)
class IdentityBlocks:
    """Identity blocks surrounding one party.

    Attributes:
        nodal: 1-based index of the party the local operator acts on.
        party_count: Number of parties.
        local_dim: Dimension of the nodal party.
        rest: Identity on all other parties, size ``N / local_dim``.
        before: Identity on the parties before the nodal one.
        after: Identity on the parties after the nodal one.
    """

    nodal: int
    party_count: int
    local_dim: int
    rest: NDArray[np.floating]
    before: NDArray[np.floating]
    after: NDArray[np.floating]

    @property
    def total_dim(self) -> int:
        """Dimension of the full Hilbert space."""
        return self.local_dim * self.rest.shape[0]

    @classmethod
    def for_party(cls, dims: Sequence[int], nodal: int, dtype: DTypeLike = np.float64) -> IdentityBlocks:
        """Build the identity blocks for party ``nodal`` of a system with local dimensions ``dims``.

        Raises:
            InvalidMeasuredPartyError: If ``nodal`` is outside ``[1, len(dims)]``.
        """
        dims = [int(d) for d in dims]
        if not 1 <= nodal <= len(dims):
            msg = f"Invalid party index {nodal} for a {len(dims)}-party system."
            raise InvalidMeasuredPartyError(msg)
        local_dim = dims[nodal - 1]
        dim_before = prod(dims[: nodal - 1])
        dim_after = prod(dims[nodal:])
        return cls(
            nodal=nodal,
            party_count=len(dims),
            local_dim=local_dim,
            rest=np.eye(dim_before * dim_after, dtype=dtype),
            before=np.eye(dim_before, dtype=dtype),
            after=np.eye(dim_after, dtype=dtype),
        )


def embed_local_operator(op: NDArray[np.complexfloating], blocks: IdentityBlocks) -> NDArray[np.complexfloating]:
    """Embed a single local operator on the nodal party into the full space.

    Args:
        op: Square operator of size ``blocks.local_dim``.
        blocks: Identity blocks of the nodal party.

    Returns:
        The operator on the full Hilbert space.

    Raises:
        DimensionMismatchError: If the operator size does not match the nodal party.
    """
    if op.shape != (blocks.local_dim, blocks.local_dim):
        msg = f"Local operator of shape {op.shape} does not act on a party of dimension {blocks.local_dim}."
        raise DimensionMismatchError(msg)

    if blocks.nodal == 1:
        return np.kron(op, blocks.rest)
    if blocks.nodal == blocks.party_count:
        return np.kron(blocks.rest, op)
    return _kron_all([blocks.before, op, blocks.after])


def embed_projectors(
    projectors: Iterable[NDArray[np.complexfloating]], blocks: IdentityBlocks
) -> list[NDArray[np.complexfloating]]:
    """Embed every projector of a local measurement.

    Args:
        projectors: Local rank-1 projectors on the nodal party.
        blocks: Identity blocks of the nodal party.

    Returns:
        list: The embedded projectors, in input order.
    """
    return [embed_local_operator(p, blocks) for p in projectors]
