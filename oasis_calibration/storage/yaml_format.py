################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""YAML schema utilities for collected calibration measurements."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import cast

import numpy as np
import yaml

from oasis_calibration.calibration_types import FluxDensityMeasurement
from oasis_calibration.calibration_types import KinematicsMeasurement
from oasis_calibration.calibration_types import KinematicsSequence
from oasis_calibration.calibration_types import TimedKinematics


# Document format version written by this module
FORMAT_VERSION: int = 1


class MeasurementsYamlError(Exception):
    """Raised when the measurements YAML schema is invalid."""


@dataclass(frozen=True)
class MeasurementsYaml:
    """Measurements collected from one sample log as persisted to YAML.

    Attributes:
        version: Document format version, must be 1
        flux_density: Magnetometer measurements in emission order
        kinematics: Accelerometer measurements in emission order
        sequences: Gyroscope sequences in emission order
    """

    version: int = FORMAT_VERSION
    flux_density: tuple[FluxDensityMeasurement, ...] = field(default_factory=tuple)
    kinematics: tuple[KinematicsMeasurement, ...] = field(default_factory=tuple)
    sequences: tuple[KinematicsSequence, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate the version and coerce the measurement lists."""
        object.__setattr__(self, "version", _require_int(self.version, "version"))
        if self.version != FORMAT_VERSION:
            raise MeasurementsYamlError(f"version must be {FORMAT_VERSION}")
        object.__setattr__(
            self,
            "flux_density",
            _require_items(self.flux_density, FluxDensityMeasurement, "flux_density"),
        )
        object.__setattr__(
            self,
            "kinematics",
            _require_items(self.kinematics, KinematicsMeasurement, "kinematics"),
        )
        object.__setattr__(
            self,
            "sequences",
            _require_items(self.sequences, KinematicsSequence, "sequences"),
        )

    def is_empty(self) -> bool:
        """Return True when no measurement of any kind was collected."""
        return not (self.flux_density or self.kinematics or self.sequences)


def measurements_to_dict(doc: MeasurementsYaml) -> dict[str, object]:
    """Convert a measurements document to a YAML-safe dictionary."""
    return {
        "version": doc.version,
        "flux_density": [_flux_to_dict(item) for item in doc.flux_density],
        "kinematics": [_kinematics_to_dict(item) for item in doc.kinematics],
        "sequences": [_sequence_to_dict(item) for item in doc.sequences],
    }


def measurements_from_dict(data: dict[str, object]) -> MeasurementsYaml:
    """Parse a YAML dictionary into a measurements document."""
    if not isinstance(data, dict):
        raise MeasurementsYamlError("YAML root must be a mapping")
    _require_keys(
        "root", data, {"version", "flux_density", "kinematics", "sequences"}
    )

    flux_density: list[object] = _require_list(data["flux_density"], "flux_density")
    kinematics: list[object] = _require_list(data["kinematics"], "kinematics")
    sequences: list[object] = _require_list(data["sequences"], "sequences")

    return MeasurementsYaml(
        version=_require_int(data["version"], "version"),
        flux_density=tuple(
            _flux_from_dict(_require_mapping(item, f"flux_density[{index}]"), index)
            for index, item in enumerate(flux_density)
        ),
        kinematics=tuple(
            _kinematics_from_dict(_require_mapping(item, f"kinematics[{index}]"), index)
            for index, item in enumerate(kinematics)
        ),
        sequences=tuple(
            _sequence_from_dict(_require_mapping(item, f"sequences[{index}]"), index)
            for index, item in enumerate(sequences)
        ),
    )


def dumps_yaml(doc: MeasurementsYaml) -> str:
    """Serialize a measurements document to deterministic YAML."""
    data: dict[str, object] = measurements_to_dict(doc)
    safe_dump: Any = cast(Any, yaml.safe_dump)
    return safe_dump(
        data,
        sort_keys=False,
        indent=2,
        default_flow_style=False,
    )


def loads_yaml(text: str) -> MeasurementsYaml:
    """Parse a measurements document from YAML text."""
    try:
        loaded: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MeasurementsYamlError("Malformed YAML") from exc
    if not isinstance(loaded, dict):
        raise MeasurementsYamlError("YAML root must be a mapping")
    return measurements_from_dict(loaded)


def _require_keys(scope: str, data: dict[str, object], required: set[str]) -> None:
    """Ensure a mapping has exactly the required keys."""
    unknown: set[str] = {key for key in data.keys() if key not in required}
    if unknown:
        raise MeasurementsYamlError(
            f"Unexpected keys in {scope}: {', '.join(sorted(unknown))}"
        )
    missing: set[str] = {key for key in required if key not in data}
    if missing:
        raise MeasurementsYamlError(
            f"Missing keys in {scope}: {', '.join(sorted(missing))}"
        )


def _require_mapping(value: object, name: str) -> dict[str, object]:
    """Ensure the value is a dictionary."""
    if not isinstance(value, dict):
        raise MeasurementsYamlError(f"{name} must be a mapping")
    return value


def _require_list(value: object, name: str) -> list[object]:
    """Ensure the value is a list."""
    if not isinstance(value, list):
        raise MeasurementsYamlError(f"{name} must be a list")
    return value


def _require_int(value: object, name: str) -> int:
    """Ensure the value is an integer."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise MeasurementsYamlError(f"{name} must be an integer")
    return int(value)


def _require_float(value: object, name: str) -> float:
    """Ensure the value is a float."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise MeasurementsYamlError(f"{name} must be a float")
    return float(value)


def _require_items(values: object, kind: type, name: str) -> tuple[Any, ...]:
    """Ensure every entry of a sequence is an instance of ``kind``."""
    items: tuple[Any, ...] = tuple(cast(Any, values))
    for item in items:
        if not isinstance(item, kind):
            raise MeasurementsYamlError(f"{name} must contain {kind.__name__}")
    return items


def _coerce_triad(value: object, name: str) -> np.ndarray:
    """Convert an input to a numpy triad."""
    try:
        array: np.ndarray = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise MeasurementsYamlError(f"{name} must be numeric") from exc
    if array.shape != (3,):
        raise MeasurementsYamlError(f"{name} must have shape (3,)")
    return array


def _flux_to_dict(measurement: FluxDensityMeasurement) -> dict[str, object]:
    """Convert a flux density measurement to a YAML-safe dictionary."""
    return {
        "b_mean_T": measurement.b_mean_T.tolist(),
        "b_std_T": measurement.b_std_T,
    }


def _kinematics_to_dict(measurement: KinematicsMeasurement) -> dict[str, object]:
    """Convert a kinematics measurement to a YAML-safe dictionary."""
    return {
        "f_mean_mps2": measurement.f_mean_mps2.tolist(),
        "omega_mean_rads": measurement.omega_mean_rads.tolist(),
        "f_std_mps2": measurement.f_std_mps2,
        "omega_std_rads": measurement.omega_std_rads,
    }


def _sequence_to_dict(sequence: KinematicsSequence) -> dict[str, object]:
    """Convert a kinematics sequence to a YAML-safe dictionary."""
    return {
        "f_before_mps2": sequence.f_before_mps2.tolist(),
        "f_after_mps2": sequence.f_after_mps2.tolist(),
        "items": [
            {
                "t_s": item.t_s,
                "f_mps2": item.f_mps2.tolist(),
                "omega_rads": item.omega_rads.tolist(),
                "f_std_mps2": item.f_std_mps2,
                "omega_std_rads": item.omega_std_rads,
            }
            for item in sequence.items
        ],
    }


def _flux_from_dict(data: dict[str, object], index: int) -> FluxDensityMeasurement:
    """Parse a flux density measurement from a dictionary."""
    scope: str = f"flux_density[{index}]"
    _require_keys(scope, data, {"b_mean_T", "b_std_T"})
    try:
        return FluxDensityMeasurement(
            b_mean_T=_coerce_triad(data["b_mean_T"], f"{scope}.b_mean_T"),
            b_std_T=_require_float(data["b_std_T"], f"{scope}.b_std_T"),
        )
    except ValueError as exc:
        raise MeasurementsYamlError(f"Invalid {scope}: {exc}") from exc


def _kinematics_from_dict(data: dict[str, object], index: int) -> KinematicsMeasurement:
    """Parse a kinematics measurement from a dictionary."""
    scope: str = f"kinematics[{index}]"
    _require_keys(
        scope, data, {"f_mean_mps2", "omega_mean_rads", "f_std_mps2", "omega_std_rads"}
    )
    try:
        return KinematicsMeasurement(
            f_mean_mps2=_coerce_triad(data["f_mean_mps2"], f"{scope}.f_mean_mps2"),
            omega_mean_rads=_coerce_triad(
                data["omega_mean_rads"], f"{scope}.omega_mean_rads"
            ),
            f_std_mps2=_require_float(data["f_std_mps2"], f"{scope}.f_std_mps2"),
            omega_std_rads=_require_float(
                data["omega_std_rads"], f"{scope}.omega_std_rads"
            ),
        )
    except ValueError as exc:
        raise MeasurementsYamlError(f"Invalid {scope}: {exc}") from exc


def _sequence_from_dict(data: dict[str, object], index: int) -> KinematicsSequence:
    """Parse a kinematics sequence from a dictionary."""
    scope: str = f"sequences[{index}]"
    _require_keys(scope, data, {"f_before_mps2", "f_after_mps2", "items"})

    items: list[TimedKinematics] = []
    for item_index, raw in enumerate(_require_list(data["items"], f"{scope}.items")):
        item_scope: str = f"{scope}.items[{item_index}]"
        item: dict[str, object] = _require_mapping(raw, item_scope)
        _require_keys(
            item_scope,
            item,
            {"t_s", "f_mps2", "omega_rads", "f_std_mps2", "omega_std_rads"},
        )
        try:
            items.append(
                TimedKinematics(
                    t_s=_require_float(item["t_s"], f"{item_scope}.t_s"),
                    f_mps2=_coerce_triad(item["f_mps2"], f"{item_scope}.f_mps2"),
                    omega_rads=_coerce_triad(
                        item["omega_rads"], f"{item_scope}.omega_rads"
                    ),
                    f_std_mps2=_require_float(
                        item["f_std_mps2"], f"{item_scope}.f_std_mps2"
                    ),
                    omega_std_rads=_require_float(
                        item["omega_std_rads"], f"{item_scope}.omega_std_rads"
                    ),
                )
            )
        except ValueError as exc:
            raise MeasurementsYamlError(f"Invalid {item_scope}: {exc}") from exc

    try:
        return KinematicsSequence(
            items=tuple(items),
            f_before_mps2=_coerce_triad(
                data["f_before_mps2"], f"{scope}.f_before_mps2"
            ),
            f_after_mps2=_coerce_triad(data["f_after_mps2"], f"{scope}.f_after_mps2"),
        )
    except ValueError as exc:
        raise MeasurementsYamlError(f"Invalid {scope}: {exc}") from exc
