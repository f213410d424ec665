################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Type definitions for calibration measurement generation."""

from __future__ import annotations

from oasis_calibration.calibration_types.busy_error import BusyError
from oasis_calibration.calibration_types.calibration_sample import (
    CalibrationSample,
)
from oasis_calibration.calibration_types.flux_measurement import (
    FluxDensityMeasurement,
)
from oasis_calibration.calibration_types.kinematics_measurement import (
    KinematicsMeasurement,
)
from oasis_calibration.calibration_types.kinematics_measurement import (
    KinematicsSequence,
)
from oasis_calibration.calibration_types.kinematics_measurement import (
    TimedKinematics,
)


__all__ = [
    "BusyError",
    "CalibrationSample",
    "FluxDensityMeasurement",
    "KinematicsMeasurement",
    "KinematicsSequence",
    "TimedKinematics",
]
