################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for CSV sample log loading."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from oasis_calibration.calibration_types import CalibrationSample
from oasis_calibration.storage.sample_log import SampleLogError
from oasis_calibration.storage.sample_log import load_sample_log


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_loads_kinematics_and_flux(tmp_path: Path) -> None:
    """Rows with flux columns carry a magnetometer reading."""
    path: Path = _write(
        tmp_path / "log.csv",
        "t_s,fx,fy,fz,wx,wy,wz,bx,by,bz\n"
        "0.00,0.1,0.2,9.8,0.01,0.02,0.03,1e-5,2e-5,-1e-5\n"
        "0.02,0.1,0.2,9.8,0.01,0.02,0.03,,,\n"
        "0.04,0.1,0.2,9.8,0.01,0.02,0.03,nan,nan,nan\n",
    )

    samples: list[CalibrationSample] = load_sample_log(path)

    assert len(samples) == 3
    assert samples[0].t_s == 0.0
    assert np.allclose(samples[0].f_mps2, [0.1, 0.2, 9.8])
    assert np.allclose(samples[0].omega_rads, [0.01, 0.02, 0.03])
    assert samples[0].b_T is not None
    assert np.allclose(samples[0].b_T, [1e-5, 2e-5, -1e-5], rtol=1e-12, atol=0.0)
    assert samples[1].b_T is None
    assert samples[2].b_T is None


def test_loads_kinematics_only(tmp_path: Path) -> None:
    """A single-row log without flux columns is accepted."""
    path: Path = _write(
        tmp_path / "log.csv",
        "t_s,fx,fy,fz,wx,wy,wz\n0.5,0.0,0.0,9.81,0.0,0.0,0.0\n",
    )

    samples: list[CalibrationSample] = load_sample_log(path)

    assert len(samples) == 1
    assert samples[0].t_s == 0.5
    assert not samples[0].has_flux_density()


def test_header_only(tmp_path: Path) -> None:
    """A log with no rows yields no samples."""
    path: Path = _write(tmp_path / "log.csv", "t_s,fx,fy,fz,wx,wy,wz\n")

    assert load_sample_log(path) == []


def test_rejects_bad_logs(tmp_path: Path) -> None:
    """Bad headers, missing kinematics and missing files raise."""
    with pytest.raises(SampleLogError):
        load_sample_log(_write(tmp_path / "a.csv", "time,fx,fy,fz\n0,0,0,9.8\n"))
    with pytest.raises(SampleLogError):
        load_sample_log(
            _write(
                tmp_path / "b.csv",
                "t_s,fx,fy,fz,wx,wy,wz\n0.0,0.0,,9.8,0.0,0.0,0.0\n",
            )
        )
    with pytest.raises(SampleLogError):
        load_sample_log(tmp_path / "missing.csv")
