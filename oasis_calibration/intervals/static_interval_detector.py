################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Static/dynamic interval detector driven by a measurement triad."""

from __future__ import annotations

import enum
import logging
import math

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.calibration_types import BusyError
from oasis_calibration.config.generator_params import DetectorParams
from oasis_calibration.noise.accumulated_noise_estimator import (
    AccumulatedTriadNoiseEstimator,
)
from oasis_calibration.noise.windowed_noise_estimator import (
    WindowedTriadNoiseEstimator,
)


_LOG: logging.Logger = logging.getLogger(__name__)


class DetectorStatus(enum.Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    INITIALIZATION_COMPLETED = "initialization_completed"
    STATIC_INTERVAL = "static_interval"
    DYNAMIC_INTERVAL = "dynamic_interval"
    FAILED = "failed"


class DetectorErrorReason(enum.Enum):
    # Windowed noise jumped above the accumulated noise during initialization
    SUDDEN_EXCESSIVE_MOVEMENT_DETECTED = "sudden_excessive_movement_detected"
    # Base noise level exceeded the absolute threshold
    OVERALL_EXCESSIVE_MOVEMENT_DETECTED = "overall_excessive_movement_detected"


class StaticIntervalDetectorListener:
    """Receives detector lifecycle events. Override what you need."""

    def on_initialization_started(self, detector: StaticIntervalDetector) -> None:
        """Called when the first sample starts the initial static phase."""

    def on_initialization_completed(
        self, detector: StaticIntervalDetector, base_noise_level: float
    ) -> None:
        """Called once the base noise level has been estimated."""

    def on_error(
        self,
        detector: StaticIntervalDetector,
        accumulated_noise_level: float,
        instantaneous_noise_level: float,
        reason: DetectorErrorReason,
    ) -> None:
        """Called when initialization fails."""

    def on_static_interval_detected(
        self,
        detector: StaticIntervalDetector,
        instantaneous_avg: NDArray[np.float64],
        instantaneous_std: NDArray[np.float64],
    ) -> None:
        """Called on a transition into a static interval."""

    def on_dynamic_interval_detected(
        self,
        detector: StaticIntervalDetector,
        instantaneous_avg: NDArray[np.float64],
        instantaneous_std: NDArray[np.float64],
        accumulated_avg: NDArray[np.float64],
        accumulated_std: NDArray[np.float64],
    ) -> None:
        """Called on a transition into a dynamic interval."""

    def on_reset(self, detector: StaticIntervalDetector) -> None:
        """Called after the detector returns to IDLE."""


class StaticIntervalDetector:
    """Classify a triad stream into static and dynamic intervals.

    The first ``initial_static_samples`` samples must be static and establish
    the base noise level. Afterwards a sample is static while the windowed
    standard deviation norm stays below ``threshold_factor`` times the base
    noise level.
    """

    def __init__(
        self,
        params: DetectorParams | None = None,
        listener: StaticIntervalDetectorListener | None = None,
    ) -> None:
        self._params: DetectorParams = (
            params if params is not None else DetectorParams()
        )
        self.listener: StaticIntervalDetectorListener | None = listener

        self._windowed: WindowedTriadNoiseEstimator = WindowedTriadNoiseEstimator(
            self._params.window_size
        )
        self._accumulated: AccumulatedTriadNoiseEstimator = (
            AccumulatedTriadNoiseEstimator()
        )
        self._accumulated.time_interval_sec = self._params.time_interval_sec

        self._status: DetectorStatus = DetectorStatus.IDLE
        self._running: bool = False
        self._processed_samples: int = 0
        self._base_noise_level: float = 0.0
        self._threshold: float = 0.0
        self._accumulated_avg: NDArray[np.float64] = np.zeros(3, dtype=float)
        self._accumulated_std: NDArray[np.float64] = np.zeros(3, dtype=float)
        self._instantaneous_avg: NDArray[np.float64] = np.zeros(3, dtype=float)
        self._instantaneous_std: NDArray[np.float64] = np.zeros(3, dtype=float)

    @property
    def params(self) -> DetectorParams:
        return self._params

    @property
    def status(self) -> DetectorStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def processed_samples(self) -> int:
        return self._processed_samples

    @property
    def base_noise_level(self) -> float:
        """Return the accumulated noise norm frozen at initialization."""
        return self._base_noise_level

    @property
    def base_noise_level_psd(self) -> float:
        return self._base_noise_level**2 * self._params.time_interval_sec

    @property
    def base_noise_level_root_psd(self) -> float:
        return self._base_noise_level * math.sqrt(self._params.time_interval_sec)

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def accumulated_avg(self) -> NDArray[np.float64]:
        """Return the mean triad of the last completed static run."""
        return np.array(self._accumulated_avg, dtype=float)

    @property
    def accumulated_std(self) -> NDArray[np.float64]:
        return np.array(self._accumulated_std, dtype=float)

    @property
    def instantaneous_avg(self) -> NDArray[np.float64]:
        """Return the mean triad of the current window."""
        return np.array(self._instantaneous_avg, dtype=float)

    @property
    def instantaneous_std(self) -> NDArray[np.float64]:
        return np.array(self._instantaneous_std, dtype=float)

    def process(self, x: float, y: float, z: float) -> bool:
        """Classify one triad, returning False once the detector has failed."""
        if self._running:
            raise BusyError("detector is processing a sample")
        if self._status == DetectorStatus.FAILED:
            return False

        self._running = True
        try:
            self._process(x, y, z)
        finally:
            self._running = False
        return True

    def reset(self) -> None:
        """Return to IDLE and discard every estimate."""
        if self._running:
            raise BusyError("detector is processing a sample")

        self._running = True
        try:
            self._status = DetectorStatus.IDLE
            self._processed_samples = 0
            self._base_noise_level = 0.0
            self._threshold = 0.0
            self._windowed.reset()
            self._accumulated.reset()
            if self.listener is not None:
                self.listener.on_reset(self)
        finally:
            self._running = False

    def _process(self, x: float, y: float, z: float) -> None:
        if self._status == DetectorStatus.IDLE:
            self._status = DetectorStatus.INITIALIZING
            if self.listener is not None:
                self.listener.on_initialization_started(self)

        self._processed_samples += 1
        self._windowed.add_triad(x, y, z)
        self._instantaneous_avg = self._windowed.avg_triad()
        self._instantaneous_std = self._windowed.standard_deviation_triad()
        windowed_std_norm: float = self._windowed.standard_deviation_norm()
        filled_window: bool = self._windowed.is_window_filled()

        if self._status == DetectorStatus.INITIALIZING:
            self._process_initializing(x, y, z, windowed_std_norm, filled_window)
            return

        previous_status: DetectorStatus = self._status
        if windowed_std_norm < self._threshold:
            self._status = DetectorStatus.STATIC_INTERVAL
            self._accumulated.add_triad(x, y, z)
        else:
            self._status = DetectorStatus.DYNAMIC_INTERVAL

        if previous_status == self._status:
            return

        if self._status == DetectorStatus.STATIC_INTERVAL:
            if self.listener is not None:
                self.listener.on_static_interval_detected(
                    self, self.instantaneous_avg, self.instantaneous_std
                )
        else:
            self._snapshot_accumulated()
            self._accumulated.reset()
            if self.listener is not None:
                self.listener.on_dynamic_interval_detected(
                    self,
                    self.instantaneous_avg,
                    self.instantaneous_std,
                    self.accumulated_avg,
                    self.accumulated_std,
                )

    def _process_initializing(
        self,
        x: float,
        y: float,
        z: float,
        windowed_std_norm: float,
        filled_window: bool,
    ) -> None:
        self._accumulated.add_triad(x, y, z)
        accumulated_std_norm: float = self._accumulated.standard_deviation_norm()

        if self._processed_samples < self._params.initial_static_samples:
            if filled_window and _exceeds_ratio(
                windowed_std_norm,
                accumulated_std_norm,
                self._params.instantaneous_noise_level_factor,
            ):
                self._fail(
                    accumulated_std_norm,
                    windowed_std_norm,
                    DetectorErrorReason.SUDDEN_EXCESSIVE_MOVEMENT_DETECTED,
                )
            return

        if not filled_window:
            return

        self._base_noise_level = accumulated_std_norm
        self._threshold = accumulated_std_norm * self._params.threshold_factor

        # The initial phase is static, so keep its statistics available
        self._snapshot_accumulated()
        self._accumulated.reset()

        if self._base_noise_level > self._params.base_noise_level_absolute_threshold:
            self._fail(
                accumulated_std_norm,
                windowed_std_norm,
                DetectorErrorReason.OVERALL_EXCESSIVE_MOVEMENT_DETECTED,
            )
            return

        self._status = DetectorStatus.INITIALIZATION_COMPLETED
        _LOG.info(
            "Static interval detector initialized after %d samples, "
            "base noise level %.6g",
            self._processed_samples,
            self._base_noise_level,
        )
        if self.listener is not None:
            self.listener.on_initialization_completed(self, self._base_noise_level)

    def _fail(
        self,
        accumulated_noise_level: float,
        instantaneous_noise_level: float,
        reason: DetectorErrorReason,
    ) -> None:
        self._status = DetectorStatus.FAILED
        _LOG.warning(
            "Static interval detector failed (%s): accumulated %.6g, "
            "instantaneous %.6g",
            reason.value,
            accumulated_noise_level,
            instantaneous_noise_level,
        )
        if self.listener is not None:
            self.listener.on_error(
                self, accumulated_noise_level, instantaneous_noise_level, reason
            )

    def _snapshot_accumulated(self) -> None:
        self._accumulated_avg = self._accumulated.avg_triad()
        self._accumulated_std = self._accumulated.standard_deviation_triad()


def _exceeds_ratio(numerator: float, denominator: float, factor: float) -> bool:
    """Return True when numerator / denominator exceeds factor."""
    if denominator <= 0.0:
        return numerator > 0.0
    return numerator / denominator > factor
