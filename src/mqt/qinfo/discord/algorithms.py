# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Derivative-free search algorithms over a box of measurement angles.

Global algorithms explore the whole box and return the best point they found:

- ``"direct_l"``: locally biased DIRECT (``scipy.optimize.direct``), deterministic;
- ``"direct"``: original DIRECT, deterministic;
- ``"differential_evolution"``: ``scipy.optimize.differential_evolution``, stochastic;
- ``"cma"``: CMA-ES from the ``cma`` package, stochastic.

Local algorithms refine a starting point with ``scipy.optimize.minimize``: ``"cobyla"``,
``"nelder-mead"`` and ``"powell"``.

Every algorithm has the signature ``(f, x0, lb, ub, xtol, ftol) -> (x, fun)`` where the
tolerances are relative: ``xtol`` is scaled by the largest box edge, ``ftol`` is used as a
relative function tolerance where the backend supports one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import cma
import numpy as np
from scipy.optimize import Bounds, differential_evolution, direct, minimize

from mqt.qinfo.core.exceptions import UnknownAlgorithmError

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import NDArray

    Objective = Callable[[NDArray[np.float64]], float]
    SearchAlgorithm = Callable[
        [Objective, NDArray[np.float64], NDArray[np.float64], NDArray[np.float64], float, float],
        tuple[NDArray[np.float64], float],
    ]

logger = logging.getLogger(__name__)


def _box_scale(lb: NDArray[np.float64], ub: NDArray[np.float64]) -> float:
    return float(max(np.max(ub - lb), 1.0))


def direct_l_search(
    f: Objective, x0: NDArray[np.float64], lb: NDArray[np.float64], ub: NDArray[np.float64], xtol: float, ftol: float
) -> tuple[NDArray[np.float64], float]:
    """Locally biased DIRECT. ``x0`` and ``ftol`` are not used by the algorithm."""
    del x0, ftol
    res = direct(f, Bounds(lb, ub), locally_biased=True, len_tol=xtol)
    return np.asarray(res.x, dtype=float), float(res.fun)


def direct_search(
    f: Objective, x0: NDArray[np.float64], lb: NDArray[np.float64], ub: NDArray[np.float64], xtol: float, ftol: float
) -> tuple[NDArray[np.float64], float]:
    """Original (globally biased) DIRECT. ``x0`` and ``ftol`` are not used by the algorithm."""
    del x0, ftol
    res = direct(f, Bounds(lb, ub), locally_biased=False, len_tol=xtol)
    return np.asarray(res.x, dtype=float), float(res.fun)


def differential_evolution_search(
    f: Objective, x0: NDArray[np.float64], lb: NDArray[np.float64], ub: NDArray[np.float64], xtol: float, ftol: float
) -> tuple[NDArray[np.float64], float]:
    """Differential evolution seeded with ``x0``.

    The population converges once its spread falls below ``ftol`` (or ``xtol`` when no
    function tolerance is configured). Polishing is left to the local phase.
    """
    res = differential_evolution(
        f,
        Bounds(lb, ub),
        x0=x0,
        tol=ftol if ftol > 0 else xtol,
        polish=False,
    )
    return np.asarray(res.x, dtype=float), float(res.fun)


def cma_search(
    f: Objective,
    x0: NDArray[np.float64],
    lb: NDArray[np.float64],
    ub: NDArray[np.float64],
    xtol: float,
    ftol: float,
    popsize: int | None = None,
    max_iter: int = 500,
) -> tuple[NDArray[np.float64], float]:
    """CMA-ES restricted to the box ``[lb, ub]``.

    Args:
        f: Objective function to minimize.
        x0: Initial mean of the search distribution.
        lb: Lower bounds for each dimension.
        ub: Upper bounds for each dimension.
        xtol: Relative x-tolerance, scaled by the largest box edge.
        ftol: Function value tolerance.
        popsize: Population size, CMA default when ``None``.
        max_iter: Maximum number of generations.

    Returns:
        xbest : ndarray
            Best solution found.
        fbest : float
            Best objective function value.
    """
    options: dict[str, object] = {
        "bounds": [lb.tolist(), ub.tolist()],
        "verbose": -9,
        "verb_disp": 0,
        "tolx": xtol * _box_scale(lb, ub),
        "tolfun": ftol,
    }
    if popsize is not None:
        options["popsize"] = popsize

    sigma0 = 0.25 * float(np.max(ub - lb))
    es = cma.CMAEvolutionStrategy(np.clip(x0, lb, ub).tolist(), sigma0, options)

    for _i in range(max_iter):
        solutions = es.ask()
        values = [f(np.asarray(x, dtype=float)) for x in solutions]
        es.tell(solutions, values)
        if es.stop():
            break

    result = es.result
    return np.asarray(result.xbest, dtype=float), float(result.fbest)


def _scipy_local(method: str) -> SearchAlgorithm:
    def search(
        f: Objective,
        x0: NDArray[np.float64],
        lb: NDArray[np.float64],
        ub: NDArray[np.float64],
        xtol: float,
        ftol: float,
    ) -> tuple[NDArray[np.float64], float]:
        scale = _box_scale(lb, ub)
        if method == "COBYLA":
            # COBYLA has no function tolerance; the final trust region radius is the x-tolerance.
            options: dict[str, float] = {"tol": max(xtol * scale, np.finfo(float).tiny)}
        elif method == "Nelder-Mead":
            options = {"xatol": xtol * scale, "fatol": ftol}
        else:
            options = {"xtol": xtol, "ftol": ftol}

        res = minimize(f, x0, method=method, bounds=Bounds(lb, ub), options=options)
        if not res.success:
            logger.warning("Local search %s did not converge: %s", method, res.message)
        return np.asarray(res.x, dtype=float), float(res.fun)

    search.__name__ = f"{method.lower().replace('-', '_')}_search"
    search.__doc__ = f"Bounded local refinement with ``scipy.optimize.minimize(method={method!r})``."
    return search


GLOBAL_ALGORITHMS: dict[str, SearchAlgorithm] = {
    "direct_l": direct_l_search,
    "direct": direct_search,
    "differential_evolution": differential_evolution_search,
    "cma": cma_search,
}

LOCAL_ALGORITHMS: dict[str, SearchAlgorithm] = {
    "cobyla": _scipy_local("COBYLA"),
    "nelder-mead": _scipy_local("Nelder-Mead"),
    "powell": _scipy_local("Powell"),
}


def normalize_algorithm(name: str, registry: dict[str, SearchAlgorithm], kind: str) -> str:
    """Canonical (lower case) algorithm identifier.

    Raises:
        UnknownAlgorithmError: If ``name`` is not in ``registry``.
    """
    key = str(name).strip().lower().replace("_", "-") if kind == "local" else str(name).strip().lower()
    if key not in registry:
        msg = f"Unknown {kind} algorithm '{name}'. Available: {sorted(registry)}"
        raise UnknownAlgorithmError(msg)
    return key


def global_algorithm(name: str) -> SearchAlgorithm:
    """Global search algorithm registered under ``name``."""
    return GLOBAL_ALGORITHMS[normalize_algorithm(name, GLOBAL_ALGORITHMS, "global")]


def local_algorithm(name: str) -> SearchAlgorithm:
    """Local search algorithm registered under ``name``."""
    return LOCAL_ALGORITHMS[normalize_algorithm(name, LOCAL_ALGORITHMS, "local")]
