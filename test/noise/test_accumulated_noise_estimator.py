################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for the accumulated triad noise estimator."""

from __future__ import annotations

import math

import numpy as np
import pytest

from oasis_calibration.calibration_types import BusyError
from oasis_calibration.noise.accumulated_noise_estimator import (
    AccumulatedTriadNoiseEstimator,
)
from oasis_calibration.noise.accumulated_noise_estimator import (
    AccumulatedTriadNoiseEstimatorListener,
)


_TRIADS: np.ndarray = np.array(
    [
        [1.0, 2.0, 3.0],
        [2.0, 2.5, 2.0],
        [0.5, 1.0, 3.5],
        [1.5, 3.0, 2.5],
    ],
    dtype=np.float64,
)


class _RecordingListener(AccumulatedTriadNoiseEstimatorListener):
    def __init__(self) -> None:
        self.events: list[str] = []

    def on_start(self, estimator: AccumulatedTriadNoiseEstimator) -> None:
        self.events.append("start")

    def on_triad_added(self, estimator: AccumulatedTriadNoiseEstimator) -> None:
        self.events.append("added")

    def on_reset(self, estimator: AccumulatedTriadNoiseEstimator) -> None:
        self.events.append("reset")


class _ReentrantListener(AccumulatedTriadNoiseEstimatorListener):
    def on_triad_added(self, estimator: AccumulatedTriadNoiseEstimator) -> None:
        estimator.reset()


def _filled() -> AccumulatedTriadNoiseEstimator:
    estimator: AccumulatedTriadNoiseEstimator = AccumulatedTriadNoiseEstimator()
    for triad in _TRIADS:
        estimator.add_triad(*triad)
    return estimator


def test_empty_estimator() -> None:
    """An empty estimator reports zero statistics."""
    estimator: AccumulatedTriadNoiseEstimator = AccumulatedTriadNoiseEstimator()

    assert estimator.sample_count == 0
    assert estimator.last_triad is None
    assert np.allclose(estimator.avg_triad(), np.zeros(3))
    assert estimator.standard_deviation_norm() == 0.0
    assert not estimator.reset()


def test_mean_and_population_std() -> None:
    """Statistics should match numpy population estimates."""
    estimator: AccumulatedTriadNoiseEstimator = _filled()
    expected_std: np.ndarray = np.std(_TRIADS, axis=0)

    assert estimator.sample_count == 4
    assert np.allclose(estimator.avg_triad(), np.mean(_TRIADS, axis=0))
    assert estimator.avg_x == pytest.approx(1.25)
    assert np.allclose(estimator.variance_triad(), np.var(_TRIADS, axis=0))
    assert np.allclose(estimator.standard_deviation_triad(), expected_std)
    assert estimator.standard_deviation_norm() == pytest.approx(
        float(np.linalg.norm(expected_std))
    )
    assert estimator.average_standard_deviation() == pytest.approx(
        float(np.mean(expected_std))
    )
    assert np.allclose(estimator.last_triad, _TRIADS[-1])


def test_psd_uses_time_interval() -> None:
    """PSD estimates scale the variance by the sample period."""
    estimator: AccumulatedTriadNoiseEstimator = _filled()
    estimator.time_interval_sec = 0.01
    variance: np.ndarray = np.var(_TRIADS, axis=0)

    assert np.allclose(estimator.psd_triad(), variance * 0.01)
    assert estimator.noise_root_psd_norm() == pytest.approx(
        math.sqrt(float(np.sum(variance)) * 0.01)
    )
    with pytest.raises(ValueError):
        estimator.time_interval_sec = -1.0


def test_reset_clears_statistics() -> None:
    """Reset should return True once and clear everything."""
    estimator: AccumulatedTriadNoiseEstimator = _filled()

    assert estimator.reset()
    assert estimator.sample_count == 0
    assert np.allclose(estimator.avg_triad(), np.zeros(3))
    assert not estimator.reset()


def test_listener_events() -> None:
    """Listeners observe start, each triad and reset."""
    listener: _RecordingListener = _RecordingListener()
    estimator: AccumulatedTriadNoiseEstimator = AccumulatedTriadNoiseEstimator(
        listener=listener
    )
    estimator.add_triad(1.0, 2.0, 3.0)
    estimator.add_triad(1.0, 2.0, 3.0)
    estimator.reset()

    assert listener.events == ["start", "added", "added", "reset"]


def test_reentrant_call_raises_busy() -> None:
    """Mutating from inside a callback should raise BusyError."""
    estimator: AccumulatedTriadNoiseEstimator = AccumulatedTriadNoiseEstimator(
        listener=_ReentrantListener()
    )

    with pytest.raises(BusyError):
        estimator.add_triad(1.0, 2.0, 3.0)
    assert not estimator.is_running


def test_rejects_non_finite_triad() -> None:
    """Non-finite triads should be rejected before accumulation."""
    estimator: AccumulatedTriadNoiseEstimator = AccumulatedTriadNoiseEstimator()

    with pytest.raises(ValueError):
        estimator.add_triad(1.0, float("inf"), 0.0)
    assert estimator.sample_count == 0
