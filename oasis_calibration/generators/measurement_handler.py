################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Per-sensor hooks invoked by the measurements generator."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.calibration_types import CalibrationSample


if TYPE_CHECKING:
    from oasis_calibration.generators.measurements_generator import (
        MeasurementsGenerator,
    )


class SensorKind(enum.Enum):
    """Sensor triad a generator produces calibration measurements for."""

    ACCELEROMETER = "accelerometer"
    GYROSCOPE = "gyroscope"
    MAGNETOMETER = "magnetometer"


class MeasurementHandler(Protocol):
    """Capabilities each sensor variant provides to the generator.

    Hooks are called synchronously in sample order. ``ingest`` runs once per
    classified sample after the detector status has been updated; the
    transition hooks run from inside detector classification, before
    ``ingest`` for the same sample.
    """

    @property
    def kind(self) -> SensorKind: ...

    def motion_triad(self, sample: CalibrationSample) -> NDArray[np.float64]:
        """Return the triad the static interval detector classifies."""
        ...

    def ingest(
        self, generator: MeasurementsGenerator, sample: CalibrationSample
    ) -> None:
        """Update per-sensor state from a classified sample."""
        ...

    def on_static_to_dynamic(
        self,
        generator: MeasurementsGenerator,
        accumulated_avg: NDArray[np.float64],
        accumulated_std: NDArray[np.float64],
    ) -> None:
        """React to the end of a static run."""
        ...

    def on_dynamic_to_static(self, generator: MeasurementsGenerator) -> None:
        """React to the start of a static run."""
        ...

    def on_initialization_completed(self, generator: MeasurementsGenerator) -> None:
        """React to a successful initial static phase."""
        ...

    def on_initialization_failed(self, generator: MeasurementsGenerator) -> None:
        """React to an aborted initial static phase."""
        ...

    def reset(self) -> None:
        """Discard all per-sensor state."""
        ...
