################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Sliding-window mean and noise statistics for measurement triads."""

from __future__ import annotations

from collections import deque
from typing import Deque

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.math_utils.units import assert_finite


# Default number of samples in the window
DEFAULT_WINDOW_SIZE: int = 101
# Minimum window size able to produce a sample standard deviation
MIN_WINDOW_SIZE: int = 3


class WindowedTriadNoiseEstimator:
    """Sliding-window mean and sample standard deviation for 3D vectors."""

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        """Create a sliding window estimator with an odd window size."""
        if window_size < MIN_WINDOW_SIZE:
            raise ValueError(f"window_size must be at least {MIN_WINDOW_SIZE}")
        if window_size % 2 == 0:
            raise ValueError("window_size must be odd")
        self._window_size: int = window_size
        self._window: Deque[NDArray[np.float64]] = deque(maxlen=window_size)
        self._processed: int = 0

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def sample_count_in_window(self) -> int:
        return len(self._window)

    @property
    def processed_samples(self) -> int:
        """Return the number of triads pushed since the last reset."""
        return self._processed

    def is_window_filled(self) -> bool:
        """Return True when the window holds window_size samples."""
        return len(self._window) == self._window_size

    def add_triad(self, x: float, y: float, z: float) -> None:
        """Push a triad, dropping the oldest one when the window is full."""
        vec: NDArray[np.float64] = np.array([x, y, z], dtype=float)
        assert_finite(vec, "triad")
        self._window.append(vec)
        self._processed += 1

    def reset(self) -> bool:
        """Clear the window, returning False if it was already empty."""
        if self._processed == 0:
            return False
        self._window.clear()
        self._processed = 0
        return True

    def avg_triad(self) -> NDArray[np.float64]:
        """Return the window mean, zero when the window is empty."""
        if not self._window:
            return np.zeros(3, dtype=float)
        data: NDArray[np.float64] = np.stack(list(self._window), axis=0)
        return np.mean(data, axis=0)

    def standard_deviation_triad(self) -> NDArray[np.float64]:
        """Return the per-axis sample standard deviation of the window."""
        if len(self._window) < 2:
            return np.zeros(3, dtype=float)
        data: NDArray[np.float64] = np.stack(list(self._window), axis=0)
        return np.std(data, axis=0, ddof=1)

    def standard_deviation_norm(self) -> float:
        return float(np.linalg.norm(self.standard_deviation_triad()))
