################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Specific force hooks producing accelerometer calibration measurements."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.calibration_types import CalibrationSample
from oasis_calibration.calibration_types import KinematicsMeasurement
from oasis_calibration.generators.measurement_handler import SensorKind


if TYPE_CHECKING:
    from oasis_calibration.generators.measurements_generator import (
        MeasurementsGenerator,
    )


class AccelerometerHandler:
    """Emit the mean specific force of every static run."""

    @property
    def kind(self) -> SensorKind:
        return SensorKind.ACCELEROMETER

    def motion_triad(self, sample: CalibrationSample) -> NDArray[np.float64]:
        return sample.f_mps2

    def ingest(
        self, generator: MeasurementsGenerator, sample: CalibrationSample
    ) -> None:
        # The detector accumulates specific force itself
        pass

    def on_static_to_dynamic(
        self,
        generator: MeasurementsGenerator,
        accumulated_avg: NDArray[np.float64],
        accumulated_std: NDArray[np.float64],
    ) -> None:
        if generator.is_static_interval_skipped:
            return

        measurement: KinematicsMeasurement = KinematicsMeasurement(
            f_mean_mps2=accumulated_avg,
            omega_mean_rads=np.zeros(3, dtype=float),
            f_std_mps2=float(np.linalg.norm(accumulated_std)),
            omega_std_rads=0.0,
        )
        generator.emit_measurement(measurement)

    def on_dynamic_to_static(self, generator: MeasurementsGenerator) -> None:
        pass

    def on_initialization_completed(self, generator: MeasurementsGenerator) -> None:
        pass

    def on_initialization_failed(self, generator: MeasurementsGenerator) -> None:
        pass

    def reset(self) -> None:
        pass
