################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""CSV sample logs replayed through the measurement generators.

A log starts with a header row naming its columns. The timestamp, specific
force and angular rate columns are required:

    t_s,fx,fy,fz,wx,wy,wz,bx,by,bz

The flux density columns ``bx,by,bz`` are optional. A row whose flux density
cells are empty or NaN yields a sample without a magnetometer reading.
"""

from __future__ import annotations

import os
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from oasis_calibration.calibration_types import CalibrationSample


# Columns every log must provide, in order
KINEMATICS_COLUMNS: tuple[str, ...] = ("t_s", "fx", "fy", "fz", "wx", "wy", "wz")

# Optional trailing magnetometer columns
FLUX_COLUMNS: tuple[str, ...] = ("bx", "by", "bz")


class SampleLogError(Exception):
    """Raised when a sample log cannot be read or parsed."""


def load_sample_log(path: str | os.PathLike[str]) -> list[CalibrationSample]:
    """Read a CSV sample log into calibration samples."""
    path_obj: Path = Path(os.fspath(path))
    try:
        with path_obj.open("r", encoding="utf-8") as handle:
            header: str = handle.readline()
    except OSError as exc:
        raise SampleLogError(f"Failed to read sample log {path_obj}") from exc

    columns: tuple[str, ...] = tuple(
        name.strip() for name in header.strip().split(",") if name.strip()
    )
    has_flux: bool = _check_header(columns)

    try:
        table: NDArray[np.float64] = np.genfromtxt(
            path_obj, delimiter=",", skip_header=1, dtype=np.float64
        )
    except (OSError, ValueError) as exc:
        raise SampleLogError(f"Failed to parse sample log {path_obj}") from exc

    if table.size == 0:
        return []
    table = np.atleast_2d(table)
    if table.shape[1] != len(columns):
        raise SampleLogError(
            f"Expected {len(columns)} columns in {path_obj}, found {table.shape[1]}"
        )

    samples: list[CalibrationSample] = []
    for row_index, row in enumerate(table):
        if not np.all(np.isfinite(row[:7])):
            raise SampleLogError(
                f"Row {row_index + 2} of {path_obj} has missing kinematics"
            )
        b_T: NDArray[np.float64] | None = None
        if has_flux and np.all(np.isfinite(row[7:10])):
            b_T = row[7:10]
        samples.append(
            CalibrationSample(
                t_s=float(row[0]),
                f_mps2=row[1:4],
                omega_rads=row[4:7],
                b_T=b_T,
            )
        )
    return samples


def _check_header(columns: tuple[str, ...]) -> bool:
    """Validate the header, returning True if flux density columns are present."""
    if columns == KINEMATICS_COLUMNS:
        return False
    if columns == KINEMATICS_COLUMNS + FLUX_COLUMNS:
        return True
    raise SampleLogError(
        "Header must be "
        f"{','.join(KINEMATICS_COLUMNS)} optionally followed by "
        f"{','.join(FLUX_COLUMNS)}"
    )
