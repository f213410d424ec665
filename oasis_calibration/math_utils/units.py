################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Validation helpers for triad-valued calibration inputs."""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray


def assert_finite(x: NDArray[np.float64], name: str) -> None:
    """Raise ValueError when the array contains non-finite values."""
    if not np.all(np.isfinite(x)):
        raise ValueError(f"{name} must be finite")


def as_float_array(value: Any, name: str, shape: tuple[int, ...]) -> np.ndarray:
    """Coerce a value to a float64 numpy array with a specific shape."""
    array: np.ndarray = np.asarray(value, dtype=np.float64)
    if array.shape != shape:
        raise ValueError(f"{name} must have shape {shape}")
    assert_finite(array, name)
    return array


def as_triad(value: Any, name: str) -> np.ndarray:
    """Coerce a value to a finite float64 triad."""
    return as_float_array(value, name, (3,))


def require_finite_float(value: Any, name: str) -> float:
    """Return a finite float or raise ValueError."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a float")
    try:
        result: float = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a float") from exc
    if not np.isfinite(result):
        raise ValueError(f"{name} must be finite")
    return result
