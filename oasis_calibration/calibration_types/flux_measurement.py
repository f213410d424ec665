################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Magnetometer calibration measurement type."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from oasis_calibration.math_utils.units import as_triad
from oasis_calibration.math_utils.units import require_finite_float


@dataclass(frozen=True)
class FluxDensityMeasurement:
    """Averaged flux density of a static run with its noise floor.

    Attributes:
        b_mean_T: Mean magnetic flux density over the static run in tesla
        b_std_T: Standard deviation norm of the flux density noise floor,
            frozen when the detector finished initializing
    """

    b_mean_T: np.ndarray
    b_std_T: float

    def __post_init__(self) -> None:
        """Validate measurement fields and coerce arrays."""
        object.__setattr__(self, "b_mean_T", as_triad(self.b_mean_T, "b_mean_T"))
        b_std_T: float = require_finite_float(self.b_std_T, "b_std_T")
        if b_std_T < 0.0:
            raise ValueError("b_std_T must be non-negative")
        object.__setattr__(self, "b_std_T", b_std_T)

    def b_norm_T(self) -> float:
        """Return the magnitude of the averaged flux density in tesla."""
        return float(np.linalg.norm(self.b_mean_T))
