################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Accelerometer and gyroscope calibration measurement types."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from oasis_calibration.math_utils.units import as_triad
from oasis_calibration.math_utils.units import require_finite_float


def _require_std(value: float, name: str) -> float:
    """Return a finite, non-negative standard deviation."""
    std: float = require_finite_float(value, name)
    if std < 0.0:
        raise ValueError(f"{name} must be non-negative")
    return std


@dataclass(frozen=True)
class KinematicsMeasurement:
    """Mean body kinematics of a static run.

    Attributes:
        f_mean_mps2: Mean specific force in m/s^2
        omega_mean_rads: Mean angular rate in rad/s
        f_std_mps2: Specific force standard deviation norm in m/s^2
        omega_std_rads: Angular rate standard deviation norm in rad/s
    """

    f_mean_mps2: np.ndarray
    omega_mean_rads: np.ndarray
    f_std_mps2: float
    omega_std_rads: float

    def __post_init__(self) -> None:
        """Validate measurement fields and coerce arrays."""
        object.__setattr__(
            self, "f_mean_mps2", as_triad(self.f_mean_mps2, "f_mean_mps2")
        )
        object.__setattr__(
            self, "omega_mean_rads", as_triad(self.omega_mean_rads, "omega_mean_rads")
        )
        object.__setattr__(
            self, "f_std_mps2", _require_std(self.f_std_mps2, "f_std_mps2")
        )
        object.__setattr__(
            self, "omega_std_rads", _require_std(self.omega_std_rads, "omega_std_rads")
        )


@dataclass(frozen=True)
class TimedKinematics:
    """Body kinematics sample recorded during a dynamic run.

    Attributes:
        t_s: Sample timestamp in seconds
        f_mps2: Specific force in m/s^2
        omega_rads: Angular rate in rad/s
        f_std_mps2: Accelerometer noise floor in m/s^2
        omega_std_rads: Gyroscope noise floor in rad/s
    """

    t_s: float
    f_mps2: np.ndarray
    omega_rads: np.ndarray
    f_std_mps2: float
    omega_std_rads: float

    def __post_init__(self) -> None:
        """Validate item fields and coerce arrays."""
        object.__setattr__(self, "t_s", require_finite_float(self.t_s, "t_s"))
        object.__setattr__(self, "f_mps2", as_triad(self.f_mps2, "f_mps2"))
        object.__setattr__(
            self, "omega_rads", as_triad(self.omega_rads, "omega_rads")
        )
        object.__setattr__(
            self, "f_std_mps2", _require_std(self.f_std_mps2, "f_std_mps2")
        )
        object.__setattr__(
            self, "omega_std_rads", _require_std(self.omega_std_rads, "omega_std_rads")
        )


@dataclass(frozen=True)
class KinematicsSequence:
    """Dynamic run bracketed by the mean specific force of its static runs.

    Attributes:
        items: Kinematics recorded during the dynamic run, ordered by time
        f_before_mps2: Mean specific force of the static run before the motion
        f_after_mps2: Mean specific force at the start of the static run after
            the motion
    """

    items: tuple[TimedKinematics, ...]
    f_before_mps2: np.ndarray
    f_after_mps2: np.ndarray

    def __post_init__(self) -> None:
        """Validate sequence ordering and coerce arrays."""
        items: tuple[TimedKinematics, ...] = tuple(self.items)
        if not items:
            raise ValueError("items must not be empty")
        for item in items:
            if not isinstance(item, TimedKinematics):
                raise ValueError("items must contain TimedKinematics")
        for previous, current in zip(items, items[1:]):
            if current.t_s < previous.t_s:
                raise ValueError("items must be ordered by t_s")
        object.__setattr__(self, "items", items)
        object.__setattr__(
            self, "f_before_mps2", as_triad(self.f_before_mps2, "f_before_mps2")
        )
        object.__setattr__(
            self, "f_after_mps2", as_triad(self.f_after_mps2, "f_after_mps2")
        )

    def duration_s(self) -> float:
        """Return the time spanned by the recorded items in seconds."""
        return self.items[-1].t_s - self.items[0].t_s
