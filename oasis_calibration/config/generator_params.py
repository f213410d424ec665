################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Structured configuration schema for calibration measurement generators."""

from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
from typing import Any


# Number of samples in the sliding window used to classify motion
DETECTOR_WINDOW_SIZE: int = 101
# Smallest odd window that yields a sample standard deviation
DETECTOR_MIN_WINDOW_SIZE: int = 3
# Samples required to finish the initial static phase
DETECTOR_INITIAL_STATIC_SAMPLES: int = 5000
# Smallest initial static phase accepted
DETECTOR_MIN_INITIAL_STATIC_SAMPLES: int = 2
# Threshold on windowed noise relative to the base noise level
DETECTOR_THRESHOLD_FACTOR: float = 2.0
# Windowed-to-accumulated noise ratio that aborts initialization
DETECTOR_INSTANTANEOUS_NOISE_LEVEL_FACTOR: float = 2.0
# Absolute base noise level limit in m/s^2 (inf disables the check)
DETECTOR_BASE_NOISE_LEVEL_ABSOLUTE_THRESHOLD: float = math.inf
# Sample period in seconds
DETECTOR_TIME_INTERVAL_SEC: float = 0.02

# Static runs shorter than this are skipped
INTERVAL_MIN_STATIC_SAMPLES: int = 2 * DETECTOR_WINDOW_SIZE
# Dynamic runs longer than this are skipped
INTERVAL_MAX_DYNAMIC_SAMPLES: int = 30 * DETECTOR_WINDOW_SIZE

# Output format for saved measurements
SAVE_FORMAT: str = "yaml"
# Use atomic write for persistence
SAVE_ATOMIC_WRITE: bool = True


class GeneratorParamsError(Exception):
    """Raised when generator parameter validation fails."""


def _require_positive(value: float, name: str) -> None:
    """Require a positive value."""
    if value <= 0.0:
        raise GeneratorParamsError(f"{name} must be positive")


def _require_non_negative(value: float, name: str) -> None:
    """Require a non-negative value."""
    if value < 0.0:
        raise GeneratorParamsError(f"{name} must be non-negative")


def _require_int(value: int, name: str) -> None:
    """Require an integer that is not a bool."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise GeneratorParamsError(f"{name} must be an int")


def _require_min_int(value: int, minimum: int, name: str) -> None:
    """Require an integer no smaller than a minimum."""
    _require_int(value, name)
    if value < minimum:
        raise GeneratorParamsError(f"{name} must be at least {minimum}")


@dataclass(frozen=True)
class DetectorParams:
    """Static interval detector parameters."""

    # Sliding window size in samples (odd)
    window_size: int = DETECTOR_WINDOW_SIZE
    # Samples in the initial static phase
    initial_static_samples: int = DETECTOR_INITIAL_STATIC_SAMPLES
    # Static threshold as a multiple of the base noise level
    threshold_factor: float = DETECTOR_THRESHOLD_FACTOR
    # Windowed/accumulated noise ratio that fails initialization
    instantaneous_noise_level_factor: float = DETECTOR_INSTANTANEOUS_NOISE_LEVEL_FACTOR
    # Absolute base noise level limit in m/s^2
    base_noise_level_absolute_threshold: float = (
        DETECTOR_BASE_NOISE_LEVEL_ABSOLUTE_THRESHOLD
    )
    # Sample period in seconds
    time_interval_sec: float = DETECTOR_TIME_INTERVAL_SEC


@dataclass(frozen=True)
class IntervalParams:
    """Static and dynamic run length policies."""

    # Minimum static run length before a measurement is emitted
    min_static_samples: int = INTERVAL_MIN_STATIC_SAMPLES
    # Maximum dynamic run length before the run is discarded
    max_dynamic_samples: int = INTERVAL_MAX_DYNAMIC_SAMPLES


@dataclass(frozen=True)
class SaveParams:
    """Persistence parameters for generated measurements."""

    # Output format name
    format: str = SAVE_FORMAT
    # Use atomic write for persistence
    atomic_write: bool = SAVE_ATOMIC_WRITE


@dataclass(frozen=True)
class GeneratorParams:
    """Complete configuration tree for measurement generators."""

    detector: DetectorParams
    interval: IntervalParams
    save: SaveParams

    @classmethod
    def defaults(cls) -> GeneratorParams:
        """Return the default generator parameter tree."""
        return cls(
            detector=DetectorParams(),
            interval=IntervalParams(),
            save=SaveParams(),
        )

    def validate(self) -> None:
        """Validate parameter invariants and constraints."""
        _require_min_int(
            self.detector.window_size,
            DETECTOR_MIN_WINDOW_SIZE,
            "detector.window_size",
        )
        if self.detector.window_size % 2 == 0:
            raise GeneratorParamsError("detector.window_size must be odd")
        _require_min_int(
            self.detector.initial_static_samples,
            DETECTOR_MIN_INITIAL_STATIC_SAMPLES,
            "detector.initial_static_samples",
        )
        _require_positive(self.detector.threshold_factor, "detector.threshold_factor")
        _require_positive(
            self.detector.instantaneous_noise_level_factor,
            "detector.instantaneous_noise_level_factor",
        )
        _require_positive(
            self.detector.base_noise_level_absolute_threshold,
            "detector.base_noise_level_absolute_threshold",
        )
        _require_non_negative(
            self.detector.time_interval_sec, "detector.time_interval_sec"
        )

        _require_min_int(
            self.interval.min_static_samples,
            DETECTOR_MIN_WINDOW_SIZE,
            "interval.min_static_samples",
        )
        _require_min_int(
            self.interval.max_dynamic_samples,
            DETECTOR_MIN_WINDOW_SIZE,
            "interval.max_dynamic_samples",
        )

    def replace(self, **namespace_overrides: Any) -> GeneratorParams:
        """Return a modified copy of the parameters."""
        return replace(self, **namespace_overrides)

    def as_nested_dict(self) -> dict[str, Any]:
        """Return a nested dict representation for debugging."""
        return _dataclass_to_dict(self)

    @classmethod
    def from_nested_dict(cls, data: dict[str, Any]) -> GeneratorParams:
        """Return defaults overridden by a nested mapping of namespaces."""
        defaults: GeneratorParams = cls.defaults()
        overrides: dict[str, Any] = {}
        for namespace, values in data.items():
            if namespace not in {field.name for field in fields(defaults)}:
                raise GeneratorParamsError(f"Unknown namespace: {namespace}")
            if not isinstance(values, dict):
                raise GeneratorParamsError(f"{namespace} must be a mapping")
            current: Any = getattr(defaults, namespace)
            known: set[str] = {field.name for field in fields(current)}
            unknown: set[str] = set(values) - known
            if unknown:
                raise GeneratorParamsError(
                    f"Unknown keys in {namespace}: {', '.join(sorted(unknown))}"
                )
            overrides[namespace] = replace(current, **values)
        return defaults.replace(**overrides)


def _dataclass_to_dict(value: Any) -> Any:
    """Convert dataclasses into plain Python values."""
    if hasattr(value, "__dataclass_fields__"):
        return {
            field.name: _dataclass_to_dict(getattr(value, field.name))
            for field in fields(value)
        }
    return value
