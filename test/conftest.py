################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Shared parameters and deterministic sample streams for calibration tests.

Static samples carry a period-3 specific force ripple of +/-NOISE_MPS2 on the
x axis around gravity, so the windowed noise never exceeds the detector
threshold and initialization never fails. Dynamic samples alternate the x
axis between +/-DYNAMIC_MPS2 and are classified dynamic on arrival.
"""

from __future__ import annotations

import dataclasses
from typing import Callable

import numpy as np
import pytest

from oasis_calibration.calibration_types import CalibrationSample
from oasis_calibration.config.generator_params import DetectorParams
from oasis_calibration.config.generator_params import GeneratorParams
from oasis_calibration.config.generator_params import IntervalParams


SAMPLE_DT_SEC: float = 0.02
GRAVITY_MPS2: float = 9.81
NOISE_MPS2: float = 0.01
DYNAMIC_MPS2: float = 5.0
B_MEAN_T: np.ndarray = np.array([1e-5, 2e-5, -1e-5], dtype=np.float64)

SampleFactory = Callable[[int, int], list[CalibrationSample]]


def _ripple(index: int) -> float:
    return (1.0, -1.0, 0.0)[(index - 1) % 3]


def _flux(index: int) -> np.ndarray:
    """Zero-mean-ish flux noise around B_MEAN_T, varying on every axis."""
    noise: np.ndarray = np.array(
        [
            1e-7 * ((index * 7) % 5 - 2),
            5e-8 * ((index * 3) % 4 - 1.5),
            1e-7 * (index % 2 - 0.5),
        ],
        dtype=np.float64,
    )
    return B_MEAN_T + noise


def make_static_sample(index: int) -> CalibrationSample:
    """Build the static sample with 1-based sequence number ``index``."""
    ripple: float = _ripple(index)
    return CalibrationSample(
        t_s=index * SAMPLE_DT_SEC,
        f_mps2=np.array([NOISE_MPS2 * ripple, 0.0, GRAVITY_MPS2]),
        omega_rads=np.array([1e-3 * ripple, -1e-3 * ripple, 0.0]),
        b_T=_flux(index),
    )


def make_dynamic_sample(index: int) -> CalibrationSample:
    """Build the dynamic sample with 1-based sequence number ``index``."""
    sign: float = 1.0 if index % 2 == 0 else -1.0
    return CalibrationSample(
        t_s=index * SAMPLE_DT_SEC,
        f_mps2=np.array([DYNAMIC_MPS2 * sign, 0.0, GRAVITY_MPS2]),
        omega_rads=np.array([0.5 * sign, 0.0, 0.1]),
        b_T=_flux(index),
    )


@pytest.fixture
def small_params() -> GeneratorParams:
    """Short window and initialization phase for fast deterministic tests."""
    params: GeneratorParams = GeneratorParams.defaults()
    return params.replace(
        detector=dataclasses.replace(
            params.detector,
            window_size=5,
            initial_static_samples=30,
        ),
        interval=IntervalParams(min_static_samples=10, max_dynamic_samples=100),
    )


@pytest.fixture
def small_detector_params(small_params: GeneratorParams) -> DetectorParams:
    return small_params.detector


@pytest.fixture
def static_samples() -> SampleFactory:
    """Return a factory for ``count`` static samples starting at ``first``."""

    def factory(first: int, count: int) -> list[CalibrationSample]:
        return [make_static_sample(index) for index in range(first, first + count)]

    return factory


@pytest.fixture
def dynamic_samples() -> SampleFactory:
    """Return a factory for ``count`` dynamic samples starting at ``first``."""

    def factory(first: int, count: int) -> list[CalibrationSample]:
        return [make_dynamic_sample(index) for index in range(first, first + count)]

    return factory
