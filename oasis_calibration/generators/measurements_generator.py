################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Per-sample driver turning a sensor stream into calibration measurements.

The driver feeds the motion triad of every sample to a static interval
detector and routes the detector's transitions to a sensor specific handler.
Callbacks fire synchronously inside ``process`` in this order: detector
transition, handler hook, listener. The handler's ingestion hook runs last,
after the detector status and the run counters have been updated.

Static runs shorter than ``min_static_samples`` and dynamic runs longer than
``max_dynamic_samples`` are flagged as skipped. Handlers consult the flags
and drop the affected measurement.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.calibration_types import BusyError
from oasis_calibration.calibration_types import CalibrationSample
from oasis_calibration.config.generator_config import GeneratorConfig
from oasis_calibration.config.generator_params import GeneratorParams
from oasis_calibration.generators.generator_listener import Measurement
from oasis_calibration.generators.generator_listener import (
    MeasurementsGeneratorListener,
)
from oasis_calibration.generators.handler_factory import create_handler
from oasis_calibration.generators.measurement_handler import MeasurementHandler
from oasis_calibration.generators.measurement_handler import SensorKind
from oasis_calibration.intervals.static_interval_detector import DetectorErrorReason
from oasis_calibration.intervals.static_interval_detector import DetectorStatus
from oasis_calibration.intervals.static_interval_detector import (
    StaticIntervalDetector,
)
from oasis_calibration.intervals.static_interval_detector import (
    StaticIntervalDetectorListener,
)


_LOG: logging.Logger = logging.getLogger(__name__)


class MeasurementsGenerator:
    """Drive one sensor handler from a stream of calibration samples."""

    def __init__(
        self,
        handler: MeasurementHandler,
        listener: MeasurementsGeneratorListener | None = None,
        params: GeneratorParams | None = None,
    ) -> None:
        resolved: GeneratorParams = (
            params if params is not None else GeneratorParams.defaults()
        )
        GeneratorConfig(resolved)

        self._handler: MeasurementHandler = handler
        self._listener: MeasurementsGeneratorListener | None = listener
        self._params: GeneratorParams = resolved
        self._detector: StaticIntervalDetector = StaticIntervalDetector(
            resolved.detector, _DetectorEvents(self)
        )

        self._running: bool = False
        self._processed_static_samples: int = 0
        self._processed_dynamic_samples: int = 0
        self._skip_static_interval: bool = False
        self._skip_dynamic_interval: bool = False

    @classmethod
    def for_kind(
        cls,
        kind: SensorKind,
        listener: MeasurementsGeneratorListener | None = None,
        params: GeneratorParams | None = None,
    ) -> MeasurementsGenerator:
        """Create a generator with a fresh handler for ``kind``."""
        return cls(create_handler(kind), listener=listener, params=params)

    @property
    def kind(self) -> SensorKind:
        return self._handler.kind

    @property
    def handler(self) -> MeasurementHandler:
        return self._handler

    @property
    def detector(self) -> StaticIntervalDetector:
        return self._detector

    @property
    def status(self) -> DetectorStatus:
        return self._detector.status

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def params(self) -> GeneratorParams:
        return self._params

    @params.setter
    def params(self, params: GeneratorParams) -> None:
        """Replace the parameters, discarding the detector and handler state."""
        self._check_not_running()
        GeneratorConfig(params)

        self._params = params
        self._detector = StaticIntervalDetector(params.detector, _DetectorEvents(self))
        self._clear_runs()

    @property
    def listener(self) -> MeasurementsGeneratorListener | None:
        return self._listener

    @listener.setter
    def listener(self, listener: MeasurementsGeneratorListener | None) -> None:
        self._check_not_running()
        self._listener = listener

    @property
    def processed_static_samples(self) -> int:
        """Return the length of the current static run."""
        return self._processed_static_samples

    @property
    def processed_dynamic_samples(self) -> int:
        """Return the length of the current dynamic run."""
        return self._processed_dynamic_samples

    @property
    def is_static_interval_skipped(self) -> bool:
        return self._skip_static_interval

    @property
    def is_dynamic_interval_skipped(self) -> bool:
        return self._skip_dynamic_interval

    @property
    def base_noise_level(self) -> float:
        return self._detector.base_noise_level

    @property
    def threshold(self) -> float:
        return self._detector.threshold

    def process(self, sample: CalibrationSample) -> bool:
        """Process one sample.

        Returns:
            False once the detector has failed, True otherwise

        Raises:
            BusyError: if called from inside a callback of this generator
        """
        self._check_not_running()

        self._running = True
        try:
            self._check_dynamic_budget()

            triad: NDArray[np.float64] = self._handler.motion_triad(sample)
            result: bool = self._detector.process(
                float(triad[0]), float(triad[1]), float(triad[2])
            )
            if result:
                self._update_counters()
                self._handler.ingest(self, sample)
        finally:
            self._running = False

        return result

    def reset(self) -> None:
        """Return to IDLE, clearing the detector and the handler state."""
        self._check_not_running()

        self._detector.reset()
        self._clear_runs()

        if self._listener is not None:
            self._listener.on_reset(self)

    def emit_measurement(self, measurement: Measurement) -> None:
        """Deliver a measurement to the listener, or drop it if none is set."""
        _LOG.info("Generated %s measurement %s", self.kind.value, measurement)
        if self._listener is not None:
            self._listener.on_measurement_generated(self, measurement)

    def _check_not_running(self) -> None:
        if self._running:
            raise BusyError("measurements generator is processing a sample")

    def _clear_runs(self) -> None:
        self._processed_static_samples = 0
        self._processed_dynamic_samples = 0
        self._skip_static_interval = False
        self._skip_dynamic_interval = False
        self._handler.reset()

    def _check_dynamic_budget(self) -> None:
        if self._processed_dynamic_samples <= self._params.interval.max_dynamic_samples:
            return

        was_skipped: bool = self._skip_dynamic_interval
        self._skip_dynamic_interval = True
        if not was_skipped:
            _LOG.debug(
                "Skipping dynamic interval longer than %d samples",
                self._params.interval.max_dynamic_samples,
            )
            if self._listener is not None:
                self._listener.on_dynamic_interval_skipped(self)

    def _update_counters(self) -> None:
        status: DetectorStatus = self._detector.status
        if status == DetectorStatus.STATIC_INTERVAL:
            self._processed_static_samples += 1
            self._processed_dynamic_samples = 0
        elif status == DetectorStatus.DYNAMIC_INTERVAL:
            self._processed_dynamic_samples += 1
            self._processed_static_samples = 0

    def _handle_initialization_started(self) -> None:
        if self._listener is not None:
            self._listener.on_initialization_started(self)

    def _handle_initialization_completed(self, base_noise_level: float) -> None:
        self._handler.on_initialization_completed(self)
        if self._listener is not None:
            self._listener.on_initialization_completed(self, base_noise_level)

    def _handle_error(self, reason: DetectorErrorReason) -> None:
        self._handler.on_initialization_failed(self)
        if self._listener is not None:
            self._listener.on_error(self, reason)

    def _handle_static_interval(self) -> None:
        self._handler.on_dynamic_to_static(self)
        self._skip_dynamic_interval = False
        if self._listener is not None:
            self._listener.on_static_interval_detected(self)

    def _handle_dynamic_interval(
        self,
        accumulated_avg: NDArray[np.float64],
        accumulated_std: NDArray[np.float64],
    ) -> None:
        if self._processed_static_samples < self._params.interval.min_static_samples:
            was_skipped: bool = self._skip_static_interval
            self._skip_static_interval = True
            if not was_skipped:
                _LOG.debug(
                    "Skipping static interval of %d samples, minimum is %d",
                    self._processed_static_samples,
                    self._params.interval.min_static_samples,
                )
                if self._listener is not None:
                    self._listener.on_static_interval_skipped(self)

        self._handler.on_static_to_dynamic(self, accumulated_avg, accumulated_std)
        self._skip_static_interval = False

        if self._listener is not None:
            self._listener.on_dynamic_interval_detected(self)


class _DetectorEvents(StaticIntervalDetectorListener):
    """Forward detector callbacks to the owning generator."""

    def __init__(self, generator: MeasurementsGenerator) -> None:
        self._generator: MeasurementsGenerator = generator

    def on_initialization_started(self, detector: StaticIntervalDetector) -> None:
        self._generator._handle_initialization_started()

    def on_initialization_completed(
        self, detector: StaticIntervalDetector, base_noise_level: float
    ) -> None:
        self._generator._handle_initialization_completed(base_noise_level)

    def on_error(
        self,
        detector: StaticIntervalDetector,
        accumulated_noise_level: float,
        instantaneous_noise_level: float,
        reason: DetectorErrorReason,
    ) -> None:
        self._generator._handle_error(reason)

    def on_static_interval_detected(
        self,
        detector: StaticIntervalDetector,
        instantaneous_avg: NDArray[np.float64],
        instantaneous_std: NDArray[np.float64],
    ) -> None:
        self._generator._handle_static_interval()

    def on_dynamic_interval_detected(
        self,
        detector: StaticIntervalDetector,
        instantaneous_avg: NDArray[np.float64],
        instantaneous_std: NDArray[np.float64],
        accumulated_avg: NDArray[np.float64],
        accumulated_std: NDArray[np.float64],
    ) -> None:
        self._generator._handle_dynamic_interval(accumulated_avg, accumulated_std)
