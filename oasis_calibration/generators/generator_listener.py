################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Callbacks raised by measurement generators."""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Union

from oasis_calibration.calibration_types import FluxDensityMeasurement
from oasis_calibration.calibration_types import KinematicsMeasurement
from oasis_calibration.calibration_types import KinematicsSequence
from oasis_calibration.intervals.static_interval_detector import DetectorErrorReason


if TYPE_CHECKING:
    from oasis_calibration.generators.measurements_generator import (
        MeasurementsGenerator,
    )


# Anything a generator can hand to its listener
Measurement = Union[FluxDensityMeasurement, KinematicsMeasurement, KinematicsSequence]


class MeasurementsGeneratorListener:
    """Receives generator events. Every callback defaults to a no-op."""

    def on_initialization_started(self, generator: MeasurementsGenerator) -> None:
        pass

    def on_initialization_completed(
        self, generator: MeasurementsGenerator, base_noise_level: float
    ) -> None:
        pass

    def on_error(
        self, generator: MeasurementsGenerator, reason: DetectorErrorReason
    ) -> None:
        pass

    def on_static_interval_detected(self, generator: MeasurementsGenerator) -> None:
        pass

    def on_dynamic_interval_detected(self, generator: MeasurementsGenerator) -> None:
        pass

    def on_static_interval_skipped(self, generator: MeasurementsGenerator) -> None:
        """Called once per static run shorter than the minimum length."""

    def on_dynamic_interval_skipped(self, generator: MeasurementsGenerator) -> None:
        """Called once per dynamic run longer than the maximum length."""

    def on_measurement_generated(
        self, generator: MeasurementsGenerator, measurement: Measurement
    ) -> None:
        pass

    def on_reset(self, generator: MeasurementsGenerator) -> None:
        pass
