################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Construction of the per-sensor handler variants."""

from __future__ import annotations

from oasis_calibration.generators.accelerometer_handler import AccelerometerHandler
from oasis_calibration.generators.gyroscope_handler import GyroscopeHandler
from oasis_calibration.generators.magnetometer_handler import MagnetometerHandler
from oasis_calibration.generators.measurement_handler import MeasurementHandler
from oasis_calibration.generators.measurement_handler import SensorKind


def create_handler(kind: SensorKind) -> MeasurementHandler:
    """Return a fresh handler for the requested sensor triad."""
    if kind == SensorKind.ACCELEROMETER:
        return AccelerometerHandler()
    if kind == SensorKind.GYROSCOPE:
        return GyroscopeHandler()
    if kind == SensorKind.MAGNETOMETER:
        return MagnetometerHandler()
    raise ValueError(f"Unsupported sensor kind: {kind!r}")
