################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Flux density hooks producing magnetometer calibration measurements."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.calibration_types import BusyError
from oasis_calibration.calibration_types import CalibrationSample
from oasis_calibration.calibration_types import FluxDensityMeasurement
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

# Statuses whose samples belong to the current static run
_ACCUMULATING_STATUSES: frozenset[DetectorStatus] = frozenset(
    {DetectorStatus.INITIALIZING, DetectorStatus.STATIC_INTERVAL}
)


class MagnetometerHandler:
    """Average the flux density over each static run.

    The running average keeps the values of the last static run until the
    first sample of the next static run overwrites them. The noise floor is
    the accumulated flux density standard deviation norm at the end of the
    initial static phase and stamps every measurement until the next
    initialization completes.

    A sample without a flux density triad is still classified by the detector
    but breaks the current static run, which is then dropped.
    """

    def __init__(
        self, accumulator: AccumulatedTriadNoiseEstimator | None = None
    ) -> None:
        self._accumulator: AccumulatedTriadNoiseEstimator = (
            accumulator if accumulator is not None else AccumulatedTriadNoiseEstimator()
        )
        self._b_avg_T: NDArray[np.float64] = np.zeros(3, dtype=float)
        self._b_std_T: float = 0.0
        self._flux_gap: bool = False

    @property
    def kind(self) -> SensorKind:
        return SensorKind.MAGNETOMETER

    @property
    def accumulator(self) -> AccumulatedTriadNoiseEstimator:
        return self._accumulator

    @property
    def b_avg_T(self) -> NDArray[np.float64]:
        """Return the running average flux density of the current static run."""
        return np.array(self._b_avg_T, dtype=float)

    @property
    def b_std_T(self) -> float:
        """Return the frozen flux density noise floor."""
        return self._b_std_T

    @property
    def has_flux_gap(self) -> bool:
        """Return True if the current static run is missing flux samples."""
        return self._flux_gap

    def motion_triad(self, sample: CalibrationSample) -> NDArray[np.float64]:
        return sample.f_mps2

    def ingest(
        self, generator: MeasurementsGenerator, sample: CalibrationSample
    ) -> None:
        if generator.status not in _ACCUMULATING_STATUSES:
            self._accumulator.reset()
        elif sample.b_T is None:
            if not self._flux_gap:
                _LOG.debug(
                    "Flux density missing at t=%.6f, dropping static run", sample.t_s
                )
            self._flux_gap = True
            self._accumulator.reset()
        else:
            b_T: NDArray[np.float64] = sample.b_T
            self._accumulator.add_triad(float(b_T[0]), float(b_T[1]), float(b_T[2]))
            self._b_avg_T = self._accumulator.avg_triad()

    def on_static_to_dynamic(
        self,
        generator: MeasurementsGenerator,
        accumulated_avg: NDArray[np.float64],
        accumulated_std: NDArray[np.float64],
    ) -> None:
        if generator.is_static_interval_skipped or self._flux_gap:
            return

        measurement: FluxDensityMeasurement = FluxDensityMeasurement(
            b_mean_T=np.array(self._b_avg_T, dtype=float),
            b_std_T=self._b_std_T,
        )
        generator.emit_measurement(measurement)

    def on_dynamic_to_static(self, generator: MeasurementsGenerator) -> None:
        self._flux_gap = False

    def on_initialization_completed(self, generator: MeasurementsGenerator) -> None:
        self._b_std_T = self._accumulator.standard_deviation_norm()

    def on_initialization_failed(self, generator: MeasurementsGenerator) -> None:
        try:
            self._accumulator.reset()
        except BusyError:
            _LOG.debug("Flux density accumulator busy, keeping partial statistics")

    def reset(self) -> None:
        self._accumulator.reset()
        self._b_avg_T = np.zeros(3, dtype=float)
        self._b_std_T = 0.0
        self._flux_gap = False
