# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tests for the optimizer configuration and the two-stage minimization."""

from __future__ import annotations

import numpy as np
import pytest

from mqt.qinfo.core.exceptions import (
    InvalidParameterVectorLengthError,
    OutOfRangeError,
    UnknownAlgorithmError,
    UnsupportedMeasuredPartyDimensionError,
)
from mqt.qinfo.discord import optimization
from mqt.qinfo.discord.optimization import LOCAL_XTOL, DeficitOptions, minimize_angles


def test_qubit_defaults() -> None:
    """Qubit defaults: DIRECT-L then COBYLA over [0, pi] x [0, 2 pi]."""
    opts = DeficitOptions.qubit_defaults()
    assert opts.global_algorithm == "direct_l"
    assert opts.global_xtol == pytest.approx(0.04)
    assert opts.global_ftol == 0.0
    assert opts.global_enabled
    assert opts.local_algorithm == "cobyla"
    assert opts.local_xtol == pytest.approx(10 * np.finfo(np.float64).eps)
    assert opts.local_ftol == 0.0
    np.testing.assert_allclose(opts.upper_bounds(), [np.pi, 2 * np.pi])
    np.testing.assert_allclose(opts.lower_bounds(), [0.0, 0.0])
    np.testing.assert_allclose(opts.start_point(), [0.1 * np.pi, 0.1 * np.pi])


def test_qutrit_defaults() -> None:
    """Qutrit defaults use a five-dimensional box and a coarser global tolerance."""
    opts = DeficitOptions.for_local_dim(3)
    assert opts.num_angles == 5
    assert opts.global_xtol == pytest.approx(0.25)
    np.testing.assert_allclose(opts.upper_bounds(), np.full(5, 2 * np.pi))
    np.testing.assert_allclose(opts.start_point(), np.full(5, 2 * np.pi))
    with pytest.raises(UnsupportedMeasuredPartyDimensionError):
        DeficitOptions.for_local_dim(4)


def test_options_normalize_and_copy() -> None:
    """Algorithm names are normalised and copies are independent."""
    opts = DeficitOptions(global_algorithm="CMA", local_algorithm="Nelder_Mead", angle_range=[1, 1])
    assert opts.global_algorithm == "cma"
    assert opts.local_algorithm == "nelder-mead"

    other = opts.copy()
    other.angle_range[0] = 5.0
    assert opts.angle_range[0] == 1.0

    with pytest.raises(UnknownAlgorithmError):
        DeficitOptions(global_algorithm="anneal")


def test_validate_lengths() -> None:
    """Box and seed must both match the number of angles."""
    DeficitOptions().validate(2)
    with pytest.raises(InvalidParameterVectorLengthError, match="qutrit"):
        DeficitOptions().validate(5)
    with pytest.raises(InvalidParameterVectorLengthError, match="initial_angles"):
        DeficitOptions(initial_angles=[0.1, 0.1, 0.1]).validate(2)


def test_start_point_is_clipped() -> None:
    """Seeds outside the box are moved onto its boundary."""
    opts = DeficitOptions(initial_angles=[3.0, -1.0])
    np.testing.assert_allclose(opts.start_point(), [np.pi, 0.0])


def _bowl(x: np.ndarray) -> float:
    return float((x[0] - 1.0) ** 2 + (x[1] - 4.0) ** 2)


def test_minimize_angles_two_stage() -> None:
    """The default two-stage search finds an interior minimum."""
    res = minimize_angles(_bowl, DeficitOptions())
    np.testing.assert_allclose(res.x, [1.0, 4.0], atol=1e-4)
    assert res.fun == pytest.approx(0.0, abs=1e-8)
    assert res.global_x is not None
    assert res.global_fun is not None


def test_minimize_angles_local_only(monkeypatch: pytest.MonkeyPatch) -> None:
    """Disabling the global phase starts the local phase from the seed."""
    starts: list[np.ndarray] = []
    refine = optimization.local_algorithm("cobyla")

    def spy(name: str):  # noqa: ANN202
        assert name == "cobyla"

        def wrapped(f, x0, lb, ub, xtol, ftol):  # noqa: ANN001, ANN202
            starts.append(np.array(x0))
            return refine(f, x0, lb, ub, xtol, ftol)

        return wrapped

    def fail(name: str) -> None:
        pytest.fail(f"global algorithm {name} must not run")

    monkeypatch.setattr(optimization, "local_algorithm", spy)
    monkeypatch.setattr(optimization, "global_algorithm", fail)

    opts = DeficitOptions(global_enabled=False)
    res = minimize_angles(_bowl, opts)
    np.testing.assert_allclose(starts[0], opts.start_point())
    assert res.global_x is None
    assert res.fun == pytest.approx(0.0, abs=1e-8)


def test_minimize_angles_clips_and_keeps_better_global(monkeypatch: pytest.MonkeyPatch) -> None:
    """Out-of-box local results are clipped and re-evaluated; a better global point wins."""

    def global_stub(name: str):  # noqa: ANN202
        return lambda f, x0, lb, ub, xtol, ftol: (np.array([1.0, 4.0]), f(np.array([1.0, 4.0])))

    def local_stub(name: str):  # noqa: ANN202
        return lambda f, x0, lb, ub, xtol, ftol: (np.array([10.0, -3.0]), -1.0)

    monkeypatch.setattr(optimization, "global_algorithm", global_stub)
    monkeypatch.setattr(optimization, "local_algorithm", local_stub)

    res = minimize_angles(_bowl, DeficitOptions())
    np.testing.assert_allclose(res.x, [1.0, 4.0])
    assert res.fun == pytest.approx(0.0)

    monkeypatch.setattr(optimization, "global_algorithm", lambda name: pytest.fail("disabled"))
    res = minimize_angles(_bowl, DeficitOptions(global_enabled=False))
    np.testing.assert_allclose(res.x, [np.pi, 0.0])
    assert res.fun == pytest.approx(_bowl(np.array([np.pi, 0.0])))


def test_local_xtol_constant() -> None:
    """The default local tolerance is ten machine epsilons."""
    assert LOCAL_XTOL == pytest.approx(2.220446049250313e-15)


@pytest.mark.parametrize("angle_range", [[-1.0, 2.0], [1.0, np.inf], [1.0, np.nan]])
def test_validate_rejects_invalid_range(angle_range: list[float]) -> None:
    """Negative or non-finite bound multipliers are rejected before any search."""
    opts = DeficitOptions(angle_range=angle_range)
    with pytest.raises(OutOfRangeError, match="non-negative"):
        opts.validate(2)
    with pytest.raises(OutOfRangeError):
        minimize_angles(_bowl, opts)


def test_validate_rechecks_algorithm_names() -> None:
    """Algorithm names assigned after construction are checked and normalised."""
    opts = DeficitOptions()
    opts.local_algorithm = "NELDER_MEAD"
    opts.validate(2)
    assert opts.local_algorithm == "nelder-mead"

    opts.global_algorithm = "anneal"
    with pytest.raises(UnknownAlgorithmError):
        opts.validate(2)


def test_zero_range_fixes_angle() -> None:
    """An angle with a zero range stays at 0 while the others are optimized."""
    res = minimize_angles(_bowl, DeficitOptions(angle_range=[0.0, 2.0]))
    assert res.x[0] == 0.0
    assert res.x[1] == pytest.approx(4.0, abs=1e-4)
    assert res.fun == pytest.approx(1.0, abs=1e-8)
    assert res.global_x is not None
    assert res.global_x.shape == (2,)
    assert res.global_x[0] == 0.0


def test_all_angles_fixed(monkeypatch: pytest.MonkeyPatch) -> None:
    """With every range zero the objective is evaluated once at the origin."""
    monkeypatch.setattr(optimization, "global_algorithm", lambda name: pytest.fail("no global search"))
    monkeypatch.setattr(optimization, "local_algorithm", lambda name: pytest.fail("no local search"))

    res = minimize_angles(_bowl, DeficitOptions(angle_range=[0.0, 0.0]))
    np.testing.assert_array_equal(res.x, [0.0, 0.0])
    assert res.fun == pytest.approx(17.0)
    assert res.global_x is None
