################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Combined accelerometer, gyroscope and magnetometer measurement generator."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.calibration_types import BusyError
from oasis_calibration.calibration_types import CalibrationSample
from oasis_calibration.calibration_types import FluxDensityMeasurement
from oasis_calibration.calibration_types import KinematicsMeasurement
from oasis_calibration.calibration_types import KinematicsSequence
from oasis_calibration.config.generator_params import GeneratorParams
from oasis_calibration.generators.generator_listener import Measurement
from oasis_calibration.generators.generator_listener import (
    MeasurementsGeneratorListener,
)
from oasis_calibration.generators.gyroscope_handler import GyroscopeHandler
from oasis_calibration.generators.measurement_handler import SensorKind
from oasis_calibration.generators.measurements_generator import MeasurementsGenerator
from oasis_calibration.intervals.static_interval_detector import DetectorErrorReason
from oasis_calibration.intervals.static_interval_detector import DetectorStatus


class ImuMagMeasurementsListener:
    """Receives events of the combined generator. Callbacks default to no-ops."""

    def on_initialization_started(self, generator: ImuMagMeasurementsGenerator) -> None:
        pass

    def on_initialization_completed(
        self, generator: ImuMagMeasurementsGenerator, base_noise_level: float
    ) -> None:
        pass

    def on_error(
        self, generator: ImuMagMeasurementsGenerator, reason: DetectorErrorReason
    ) -> None:
        pass

    def on_static_interval_detected(
        self, generator: ImuMagMeasurementsGenerator
    ) -> None:
        pass

    def on_dynamic_interval_detected(
        self, generator: ImuMagMeasurementsGenerator
    ) -> None:
        pass

    def on_static_interval_skipped(
        self, generator: ImuMagMeasurementsGenerator
    ) -> None:
        pass

    def on_dynamic_interval_skipped(
        self, generator: ImuMagMeasurementsGenerator
    ) -> None:
        pass

    def on_accelerometer_measurement(
        self,
        generator: ImuMagMeasurementsGenerator,
        measurement: KinematicsMeasurement,
    ) -> None:
        pass

    def on_gyroscope_measurement(
        self,
        generator: ImuMagMeasurementsGenerator,
        measurement: KinematicsSequence,
    ) -> None:
        pass

    def on_magnetometer_measurement(
        self,
        generator: ImuMagMeasurementsGenerator,
        measurement: FluxDensityMeasurement,
    ) -> None:
        pass

    def on_reset(self, generator: ImuMagMeasurementsGenerator) -> None:
        pass


class ImuMagMeasurementsGenerator:
    """Feed each sample to an accelerometer, gyroscope and magnetometer generator.

    The three generators share the same detector parameters and classify the
    same specific force triad, so they agree on every transition. Lifecycle
    events are forwarded once, from the accelerometer generator. Samples
    without a flux density triad still reach the magnetometer generator, which
    drops the static run they fall in.
    """

    def __init__(
        self,
        listener: ImuMagMeasurementsListener | None = None,
        params: GeneratorParams | None = None,
    ) -> None:
        self._listener: ImuMagMeasurementsListener | None = listener
        self._running: bool = False

        self._accelerometer: MeasurementsGenerator = MeasurementsGenerator.for_kind(
            SensorKind.ACCELEROMETER, _LeadForwarder(self), params
        )
        self._gyroscope_handler: GyroscopeHandler = GyroscopeHandler()
        self._gyroscope: MeasurementsGenerator = MeasurementsGenerator(
            self._gyroscope_handler, _Forwarder(self), params
        )
        self._magnetometer: MeasurementsGenerator = MeasurementsGenerator.for_kind(
            SensorKind.MAGNETOMETER, _Forwarder(self), params
        )

    @property
    def listener(self) -> ImuMagMeasurementsListener | None:
        return self._listener

    @listener.setter
    def listener(self, listener: ImuMagMeasurementsListener | None) -> None:
        self._check_not_running()
        self._listener = listener

    @property
    def params(self) -> GeneratorParams:
        return self._accelerometer.params

    @params.setter
    def params(self, params: GeneratorParams) -> None:
        self._check_not_running()
        self._accelerometer.params = params
        self._gyroscope.params = params
        self._magnetometer.params = params

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def status(self) -> DetectorStatus:
        return self._accelerometer.status

    @property
    def accelerometer_generator(self) -> MeasurementsGenerator:
        return self._accelerometer

    @property
    def gyroscope_generator(self) -> MeasurementsGenerator:
        return self._gyroscope

    @property
    def magnetometer_generator(self) -> MeasurementsGenerator:
        return self._magnetometer

    @property
    def accelerometer_base_noise_level(self) -> float:
        return self._accelerometer.base_noise_level

    @property
    def gyroscope_base_noise_level(self) -> float:
        return self._gyroscope_handler.gyroscope_base_noise_level

    @property
    def initial_avg_omega_rads(self) -> NDArray[np.float64]:
        return self._gyroscope_handler.initial_avg_omega_rads

    def process(self, sample: CalibrationSample) -> bool:
        """Process one sample, returning False once any generator has failed."""
        self._check_not_running()

        self._running = True
        try:
            if not self._accelerometer.process(sample):
                return False
            if not self._gyroscope.process(sample):
                return False
            return self._magnetometer.process(sample)
        finally:
            self._running = False

    def reset(self) -> None:
        self._check_not_running()

        self._accelerometer.reset()
        self._gyroscope.reset()
        self._magnetometer.reset()

        if self._listener is not None:
            self._listener.on_reset(self)

    def _check_not_running(self) -> None:
        if self._running:
            raise BusyError("combined generator is processing a sample")

    def _dispatch_measurement(self, measurement: Measurement) -> None:
        if self._listener is None:
            return
        if isinstance(measurement, KinematicsMeasurement):
            self._listener.on_accelerometer_measurement(self, measurement)
        elif isinstance(measurement, KinematicsSequence):
            self._listener.on_gyroscope_measurement(self, measurement)
        elif isinstance(measurement, FluxDensityMeasurement):
            self._listener.on_magnetometer_measurement(self, measurement)


class _Forwarder(MeasurementsGeneratorListener):
    """Forward errors and measurements of one inner generator."""

    def __init__(self, owner: ImuMagMeasurementsGenerator) -> None:
        self._owner: ImuMagMeasurementsGenerator = owner

    def on_error(
        self, generator: MeasurementsGenerator, reason: DetectorErrorReason
    ) -> None:
        if self._owner.listener is not None:
            self._owner.listener.on_error(self._owner, reason)

    def on_measurement_generated(
        self, generator: MeasurementsGenerator, measurement: Measurement
    ) -> None:
        self._owner._dispatch_measurement(measurement)


class _LeadForwarder(_Forwarder):
    """Also forward the lifecycle events shared by all inner generators."""

    def on_initialization_started(self, generator: MeasurementsGenerator) -> None:
        if self._owner.listener is not None:
            self._owner.listener.on_initialization_started(self._owner)

    def on_initialization_completed(
        self, generator: MeasurementsGenerator, base_noise_level: float
    ) -> None:
        if self._owner.listener is not None:
            self._owner.listener.on_initialization_completed(
                self._owner, base_noise_level
            )

    def on_static_interval_detected(self, generator: MeasurementsGenerator) -> None:
        if self._owner.listener is not None:
            self._owner.listener.on_static_interval_detected(self._owner)

    def on_dynamic_interval_detected(self, generator: MeasurementsGenerator) -> None:
        if self._owner.listener is not None:
            self._owner.listener.on_dynamic_interval_detected(self._owner)

    def on_static_interval_skipped(self, generator: MeasurementsGenerator) -> None:
        if self._owner.listener is not None:
            self._owner.listener.on_static_interval_skipped(self._owner)

    def on_dynamic_interval_skipped(self, generator: MeasurementsGenerator) -> None:
        if self._owner.listener is not None:
            self._owner.listener.on_dynamic_interval_skipped(self._owner)
