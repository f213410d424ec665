################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Angular rate hooks producing gyroscope calibration sequences."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.calibration_types import BusyError
from oasis_calibration.calibration_types import CalibrationSample
from oasis_calibration.calibration_types import KinematicsSequence
from oasis_calibration.calibration_types import TimedKinematics
from oasis_calibration.generators.measurement_handler import SensorKind
from oasis_calibration.intervals.static_interval_detector import DetectorStatus
from oasis_calibration.noise.accumulated_noise_estimator import (
    AccumulatedTriadNoiseEstimator,
)


if TYPE_CHECKING:
    from oasis_calibration.generators.measurements_generator import (
        MeasurementsGenerator,
    )


_LOG: logging.Logger = logging.getLogger(__name__)


class GyroscopeHandler:
    """Record each dynamic run as a sequence of timed kinematics.

    The angular rate noise floor is accumulated over the initial static phase.
    A sequence is emitted on the first static sample after a dynamic run and
    carries the mean specific force of the static runs on either side of it.
    A dynamic run flagged as skipped discards its recorded items.
    """

    def __init__(
        self, accumulator: AccumulatedTriadNoiseEstimator | None = None
    ) -> None:
        self._accumulator: AccumulatedTriadNoiseEstimator = (
            accumulator if accumulator is not None else AccumulatedTriadNoiseEstimator()
        )
        self._f_std_mps2: float = 0.0
        self._omega_std_rads: float = 0.0
        self._omega_root_psd: float = 0.0
        self._previous_status: DetectorStatus | None = None
        self._items: list[TimedKinematics] | None = None
        self._f_before_mps2: NDArray[np.float64] | None = None

    @property
    def kind(self) -> SensorKind:
        return SensorKind.GYROSCOPE

    @property
    def accumulator(self) -> AccumulatedTriadNoiseEstimator:
        return self._accumulator

    @property
    def accelerometer_base_noise_level(self) -> float:
        return self._f_std_mps2

    @property
    def gyroscope_base_noise_level(self) -> float:
        """Return the angular rate noise floor in rad/s."""
        return self._omega_std_rads

    @property
    def gyroscope_base_noise_level_root_psd(self) -> float:
        return self._omega_root_psd

    @property
    def initial_avg_omega_rads(self) -> NDArray[np.float64]:
        """Return the mean angular rate of the initial static phase."""
        return self._accumulator.avg_triad()

    def motion_triad(self, sample: CalibrationSample) -> NDArray[np.float64]:
        return sample.f_mps2

    def ingest(
        self, generator: MeasurementsGenerator, sample: CalibrationSample
    ) -> None:
        status: DetectorStatus = generator.status
        if status == DetectorStatus.INITIALIZING:
            omega: NDArray[np.float64] = sample.omega_rads
            self._accumulator.add_triad(
                float(omega[0]), float(omega[1]), float(omega[2])
            )

        if status == DetectorStatus.DYNAMIC_INTERVAL:
            if generator.is_dynamic_interval_skipped:
                self._items = None
                return
            if self._previous_status == DetectorStatus.STATIC_INTERVAL:
                self._f_before_mps2 = generator.detector.accumulated_avg
            self._append_item(sample)
            return

        if (
            status == DetectorStatus.STATIC_INTERVAL
            and self._previous_status == DetectorStatus.DYNAMIC_INTERVAL
            and self._items
        ):
            f_before_mps2: NDArray[np.float64] = (
                self._f_before_mps2
                if self._f_before_mps2 is not None
                else generator.detector.accumulated_avg
            )
            sequence: KinematicsSequence = KinematicsSequence(
                items=tuple(self._items),
                f_before_mps2=f_before_mps2,
                f_after_mps2=generator.detector.instantaneous_avg,
            )
            self._items = None
            generator.emit_measurement(sequence)

    def on_static_to_dynamic(
        self,
        generator: MeasurementsGenerator,
        accumulated_avg: NDArray[np.float64],
        accumulated_std: NDArray[np.float64],
    ) -> None:
        self._previous_status = DetectorStatus.STATIC_INTERVAL

    def on_dynamic_to_static(self, generator: MeasurementsGenerator) -> None:
        self._previous_status = DetectorStatus.DYNAMIC_INTERVAL

    def on_initialization_completed(self, generator: MeasurementsGenerator) -> None:
        self._accumulator.time_interval_sec = (
            generator.params.detector.time_interval_sec
        )
        self._f_std_mps2 = generator.detector.base_noise_level
        self._omega_std_rads = self._accumulator.standard_deviation_norm()
        self._omega_root_psd = self._accumulator.noise_root_psd_norm()
        self._previous_status = generator.status

    def on_initialization_failed(self, generator: MeasurementsGenerator) -> None:
        self._previous_status = None
        try:
            self._accumulator.reset()
        except BusyError:
            _LOG.debug("Angular rate accumulator busy, keeping partial statistics")

    def reset(self) -> None:
        self._accumulator.reset()
        self._f_std_mps2 = 0.0
        self._omega_std_rads = 0.0
        self._omega_root_psd = 0.0
        self._previous_status = None
        self._items = None
        self._f_before_mps2 = None

    def _append_item(self, sample: CalibrationSample) -> None:
        if self._items is None:
            self._items = []
        self._items.append(
            TimedKinematics(
                t_s=sample.t_s,
                f_mps2=sample.f_mps2,
                omega_rads=sample.omega_rads,
                f_std_mps2=self._f_std_mps2,
                omega_std_rads=self._omega_std_rads,
            )
        )
