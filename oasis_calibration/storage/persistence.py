################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Persistence helpers for calibration measurement YAML documents."""

from __future__ import annotations

import os
from pathlib import Path

from oasis_calibration.storage.yaml_format import MeasurementsYaml
from oasis_calibration.storage.yaml_format import MeasurementsYamlError
from oasis_calibration.storage.yaml_format import dumps_yaml
from oasis_calibration.storage.yaml_format import loads_yaml


class MeasurementsPersistenceError(Exception):
    """Raised when loading or saving measurement files fails."""


def is_yaml_path(path: str | os.PathLike[str]) -> bool:
    """Return True if the path has a YAML extension."""
    suffix: str = Path(os.fspath(path)).suffix.lower()
    return suffix in {".yaml", ".yml"}


def save_yaml_measurements(
    path: str | os.PathLike[str],
    doc: MeasurementsYaml,
    *,
    atomic_write: bool = True,
) -> None:
    """Save collected measurements to disk as YAML."""
    if not is_yaml_path(path):
        raise MeasurementsPersistenceError("Path must end with .yaml or .yml")

    path_obj: Path = Path(os.fspath(path))
    try:
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        text: str = dumps_yaml(doc)
        if atomic_write:
            tmp_path: Path = path_obj.with_name(f".{path_obj.name}.tmp.{os.getpid()}")
            with tmp_path.open("w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path_obj)
        else:
            path_obj.write_text(text, encoding="utf-8")
    except (OSError, MeasurementsYamlError) as exc:
        raise MeasurementsPersistenceError(
            f"Failed to save measurements to {path_obj}"
        ) from exc


def load_yaml_measurements(path: str | os.PathLike[str]) -> MeasurementsYaml:
    """Load collected measurements from a YAML file."""
    if not is_yaml_path(path):
        raise MeasurementsPersistenceError("Path must end with .yaml or .yml")

    path_obj: Path = Path(os.fspath(path))
    try:
        return loads_yaml(path_obj.read_text(encoding="utf-8"))
    except (OSError, MeasurementsYamlError) as exc:
        raise MeasurementsPersistenceError(
            f"Failed to load measurements from {path_obj}"
        ) from exc
