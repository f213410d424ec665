################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for the measurements generator driver."""

from __future__ import annotations

import dataclasses
from typing import Callable

import pytest

from oasis_calibration.calibration_types import BusyError
from oasis_calibration.calibration_types import CalibrationSample
from oasis_calibration.config.generator_config import GeneratorConfigError
from oasis_calibration.config.generator_params import GeneratorParams
from oasis_calibration.generators.accelerometer_handler import AccelerometerHandler
from oasis_calibration.generators.generator_listener import Measurement
from oasis_calibration.generators.generator_listener import (
    MeasurementsGeneratorListener,
)
from oasis_calibration.generators.gyroscope_handler import GyroscopeHandler
from oasis_calibration.generators.handler_factory import create_handler
from oasis_calibration.generators.magnetometer_handler import MagnetometerHandler
from oasis_calibration.generators.measurement_handler import SensorKind
from oasis_calibration.generators.measurements_generator import MeasurementsGenerator
from oasis_calibration.intervals.static_interval_detector import DetectorStatus


SampleFactory = Callable[[int, int], list[CalibrationSample]]


class _EventListener(MeasurementsGeneratorListener):
    def __init__(self) -> None:
        self.events: list[str] = []

    def on_initialization_started(self, generator: MeasurementsGenerator) -> None:
        self.events.append("initialization_started")

    def on_initialization_completed(
        self, generator: MeasurementsGenerator, base_noise_level: float
    ) -> None:
        self.events.append("initialization_completed")

    def on_static_interval_detected(self, generator: MeasurementsGenerator) -> None:
        self.events.append("static")

    def on_dynamic_interval_detected(self, generator: MeasurementsGenerator) -> None:
        self.events.append("dynamic")

    def on_measurement_generated(
        self, generator: MeasurementsGenerator, measurement: Measurement
    ) -> None:
        self.events.append("measurement")

    def on_reset(self, generator: MeasurementsGenerator) -> None:
        self.events.append("reset")


class _ResetOnMeasurement(MeasurementsGeneratorListener):
    def on_measurement_generated(
        self, generator: MeasurementsGenerator, measurement: Measurement
    ) -> None:
        generator.reset()


class _DetachOnInitialization(MeasurementsGeneratorListener):
    def on_initialization_completed(
        self, generator: MeasurementsGenerator, base_noise_level: float
    ) -> None:
        generator.listener = None


class _ProcessOnStart(MeasurementsGeneratorListener):
    def __init__(self, sample: CalibrationSample) -> None:
        self._sample: CalibrationSample = sample

    def on_initialization_started(self, generator: MeasurementsGenerator) -> None:
        generator.process(self._sample)


def test_create_handler_covers_every_kind() -> None:
    """The factory maps each sensor kind to its handler."""
    assert isinstance(create_handler(SensorKind.ACCELEROMETER), AccelerometerHandler)
    assert isinstance(create_handler(SensorKind.GYROSCOPE), GyroscopeHandler)
    assert isinstance(create_handler(SensorKind.MAGNETOMETER), MagnetometerHandler)
    for kind in SensorKind:
        assert create_handler(kind).kind == kind


def test_invalid_params_rejected() -> None:
    """Construction validates the parameter tree."""
    params: GeneratorParams = GeneratorParams.defaults()
    bad: GeneratorParams = params.replace(
        detector=dataclasses.replace(params.detector, window_size=4)
    )

    with pytest.raises(GeneratorConfigError):
        MeasurementsGenerator(AccelerometerHandler(), params=bad)
    with pytest.raises(GeneratorConfigError):
        MeasurementsGenerator.for_kind(SensorKind.ACCELEROMETER).params = bad


def test_listener_event_order(
    small_params: GeneratorParams,
    static_samples: SampleFactory,
    dynamic_samples: SampleFactory,
) -> None:
    """Lifecycle events reach the listener in detection order."""
    listener: _EventListener = _EventListener()
    generator: MeasurementsGenerator = MeasurementsGenerator.for_kind(
        SensorKind.MAGNETOMETER, listener, small_params
    )
    for sample in static_samples(1, 50) + dynamic_samples(51, 2):
        generator.process(sample)
    generator.reset()

    assert listener.events == [
        "initialization_started",
        "initialization_completed",
        "static",
        "measurement",
        "dynamic",
        "reset",
    ]


def test_counters_track_current_run(
    small_params: GeneratorParams,
    static_samples: SampleFactory,
    dynamic_samples: SampleFactory,
) -> None:
    """Static and dynamic counters restart on every transition."""
    generator: MeasurementsGenerator = MeasurementsGenerator.for_kind(
        SensorKind.ACCELEROMETER, params=small_params
    )
    for sample in static_samples(1, 40):
        generator.process(sample)
    assert generator.processed_static_samples == 10
    assert generator.processed_dynamic_samples == 0

    for sample in dynamic_samples(41, 4):
        generator.process(sample)
    assert generator.processed_static_samples == 0
    assert generator.processed_dynamic_samples == 4
    assert generator.threshold == pytest.approx(2.0 * generator.base_noise_level)


def test_reset_from_listener_raises_busy(
    small_params: GeneratorParams,
    static_samples: SampleFactory,
    dynamic_samples: SampleFactory,
) -> None:
    """Resetting from inside a measurement callback is rejected."""
    generator: MeasurementsGenerator = MeasurementsGenerator.for_kind(
        SensorKind.MAGNETOMETER, _ResetOnMeasurement(), small_params
    )
    for sample in static_samples(1, 50):
        generator.process(sample)

    with pytest.raises(BusyError):
        generator.process(dynamic_samples(51, 1)[0])
    assert not generator.is_running


def test_listener_setter_while_running_raises_busy(
    small_params: GeneratorParams,
    static_samples: SampleFactory,
) -> None:
    """The listener cannot be replaced from inside a callback."""
    listener: _DetachOnInitialization = _DetachOnInitialization()
    generator: MeasurementsGenerator = MeasurementsGenerator.for_kind(
        SensorKind.ACCELEROMETER, listener, small_params
    )

    with pytest.raises(BusyError):
        for sample in static_samples(1, 30):
            generator.process(sample)
    assert generator.listener is listener


def test_nested_process_raises_busy(
    small_params: GeneratorParams,
    static_samples: SampleFactory,
) -> None:
    """Processing from inside a callback is rejected."""
    sample: CalibrationSample = static_samples(1, 1)[0]
    generator: MeasurementsGenerator = MeasurementsGenerator.for_kind(
        SensorKind.ACCELEROMETER, _ProcessOnStart(sample), small_params
    )

    with pytest.raises(BusyError):
        generator.process(sample)


def test_params_setter_rebuilds_detector(
    small_params: GeneratorParams,
    static_samples: SampleFactory,
) -> None:
    """New parameters take effect with a fresh detector."""
    generator: MeasurementsGenerator = MeasurementsGenerator.for_kind(
        SensorKind.ACCELEROMETER, params=small_params
    )
    for sample in static_samples(1, 10):
        generator.process(sample)
    assert generator.status == DetectorStatus.INITIALIZING

    params: GeneratorParams = small_params.replace(
        detector=dataclasses.replace(small_params.detector, window_size=7)
    )
    generator.params = params

    assert generator.status == DetectorStatus.IDLE
    assert generator.detector.params.window_size == 7
    assert generator.params is params


def test_params_setter_discards_handler_state(
    small_params: GeneratorParams,
    static_samples: SampleFactory,
) -> None:
    """A new initialization phase starts from empty flux statistics."""
    handler: MagnetometerHandler = MagnetometerHandler()
    generator: MeasurementsGenerator = MeasurementsGenerator(
        handler, params=small_params
    )
    for sample in static_samples(1, 35):
        generator.process(sample)
    assert generator.status == DetectorStatus.STATIC_INTERVAL
    assert generator.processed_static_samples == 5
    assert handler.b_std_T > 0.0

    generator.params = small_params.replace(
        detector=dataclasses.replace(small_params.detector, window_size=7)
    )

    assert generator.processed_static_samples == 0
    assert generator.processed_dynamic_samples == 0
    assert not generator.is_static_interval_skipped
    assert not generator.is_dynamic_interval_skipped
    assert handler.accumulator.sample_count == 0
    assert handler.b_std_T == 0.0

    assert generator.process(static_samples(36, 1)[0])
    assert generator.status == DetectorStatus.INITIALIZING
    assert handler.accumulator.sample_count == 1
