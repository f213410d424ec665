################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Accumulated mean and noise statistics for measurement triads."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.calibration_types import BusyError
from oasis_calibration.math_utils.units import assert_finite


# Default sample period in seconds
DEFAULT_TIME_INTERVAL_SEC: float = 0.02


class AccumulatedTriadNoiseEstimatorListener:
    """Receives accumulated estimator events. Override what you need."""

    def on_start(self, estimator: AccumulatedTriadNoiseEstimator) -> None:
        """Called before the first triad is accumulated."""

    def on_triad_added(self, estimator: AccumulatedTriadNoiseEstimator) -> None:
        """Called after each accumulated triad."""

    def on_reset(self, estimator: AccumulatedTriadNoiseEstimator) -> None:
        """Called after the statistics are discarded."""


@dataclass(eq=False)
class AccumulatedTriadNoiseEstimator:
    """Online per-axis mean and population variance of a 3D quantity.

    Statistics cover every triad added since the last reset. Mutating calls
    raise BusyError when issued from a listener callback of the same
    estimator.
    """

    listener: AccumulatedTriadNoiseEstimatorListener | None = None
    _time_interval_sec: float = DEFAULT_TIME_INTERVAL_SEC
    _count: int = 0
    _mean: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3, dtype=float))
    _m2: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3, dtype=float))
    _last_triad: NDArray[np.float64] | None = None
    _running: bool = False

    @property
    def is_running(self) -> bool:
        """Return True while a triad is being accumulated."""
        return self._running

    @property
    def time_interval_sec(self) -> float:
        """Return the sample period used for PSD estimates."""
        return self._time_interval_sec

    @time_interval_sec.setter
    def time_interval_sec(self, value: float) -> None:
        if self._running:
            raise BusyError("estimator is accumulating a triad")
        if value < 0.0:
            raise ValueError("time_interval_sec must be non-negative")
        self._time_interval_sec = float(value)

    @property
    def sample_count(self) -> int:
        """Return the number of triads accumulated since the last reset."""
        return self._count

    @property
    def last_triad(self) -> NDArray[np.float64] | None:
        """Return a copy of the most recent triad, if any."""
        if self._last_triad is None:
            return None
        return np.array(self._last_triad, dtype=float)

    def add_triad(self, x: float, y: float, z: float) -> None:
        """Accumulate a new triad."""
        if self._running:
            raise BusyError("estimator is accumulating a triad")

        vec: NDArray[np.float64] = np.array([x, y, z], dtype=float)
        assert_finite(vec, "triad")

        self._running = True
        try:
            if self._last_triad is None and self.listener is not None:
                self.listener.on_start(self)

            self._count += 1
            delta: NDArray[np.float64] = vec - self._mean
            self._mean = self._mean + delta / float(self._count)
            delta2: NDArray[np.float64] = vec - self._mean
            self._m2 = self._m2 + delta * delta2
            self._last_triad = vec

            if self.listener is not None:
                self.listener.on_triad_added(self)
        finally:
            self._running = False

    def reset(self) -> bool:
        """Discard accumulated statistics, returning False if already empty."""
        if self._running:
            raise BusyError("estimator is accumulating a triad")
        if self._count == 0:
            return False

        self._running = True
        try:
            self._count = 0
            self._mean = np.zeros(3, dtype=float)
            self._m2 = np.zeros(3, dtype=float)
            self._last_triad = None
            if self.listener is not None:
                self.listener.on_reset(self)
        finally:
            self._running = False
        return True

    @property
    def avg_x(self) -> float:
        return float(self._mean[0])

    @property
    def avg_y(self) -> float:
        return float(self._mean[1])

    @property
    def avg_z(self) -> float:
        return float(self._mean[2])

    def avg_triad(self) -> NDArray[np.float64]:
        """Return the mean triad, zero when nothing has been accumulated."""
        return np.array(self._mean, dtype=float)

    def avg_norm(self) -> float:
        return float(np.linalg.norm(self._mean))

    def variance_triad(self) -> NDArray[np.float64]:
        """Return the per-axis population variance."""
        if self._count == 0:
            return np.zeros(3, dtype=float)
        return self._m2 / float(self._count)

    def standard_deviation_triad(self) -> NDArray[np.float64]:
        return np.sqrt(self.variance_triad())

    def standard_deviation_norm(self) -> float:
        """Return the norm of the per-axis standard deviations."""
        return float(np.linalg.norm(self.standard_deviation_triad()))

    def average_standard_deviation(self) -> float:
        return float(np.mean(self.standard_deviation_triad()))

    def psd_triad(self) -> NDArray[np.float64]:
        """Return the per-axis noise power spectral density."""
        return self.variance_triad() * self._time_interval_sec

    def average_noise_psd(self) -> float:
        return float(np.mean(self.psd_triad()))

    def noise_root_psd_norm(self) -> float:
        """Return the root PSD norm of the accumulated noise."""
        return float(np.sqrt(np.sum(self.psd_triad())))
