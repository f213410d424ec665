################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Input sample types for calibration measurement generation."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from oasis_calibration.math_utils.units import as_triad
from oasis_calibration.math_utils.units import require_finite_float


@dataclass(frozen=True)
class CalibrationSample:
    """Body kinematics sample with an optional magnetometer reading.

    Attributes:
        t_s: Sample timestamp in seconds
        f_mps2: Specific force triad in m/s^2
        omega_rads: Angular rate triad in rad/s
        b_T: Magnetic flux density triad in tesla, if a magnetometer sample
            was captured alongside the IMU sample
    """

    t_s: float
    f_mps2: np.ndarray
    omega_rads: np.ndarray
    b_T: np.ndarray | None = None

    def __post_init__(self) -> None:
        """Validate sample fields and coerce arrays."""
        object.__setattr__(self, "t_s", require_finite_float(self.t_s, "t_s"))
        object.__setattr__(self, "f_mps2", as_triad(self.f_mps2, "f_mps2"))
        object.__setattr__(
            self, "omega_rads", as_triad(self.omega_rads, "omega_rads")
        )
        if self.b_T is not None:
            object.__setattr__(self, "b_T", as_triad(self.b_T, "b_T"))

    def has_flux_density(self) -> bool:
        """Return True when the sample carries a magnetometer reading."""
        return self.b_T is not None
