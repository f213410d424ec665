################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""High-level configuration wrapper for measurement generators."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .generator_params import GeneratorParams
from .generator_params import GeneratorParamsError


class GeneratorConfigError(Exception):
    """Raised when generator configuration validation fails."""


@dataclass(frozen=True)
class GeneratorConfig:
    """Convenience wrapper around generator parameters."""

    params: GeneratorParams

    def __init__(self, params: GeneratorParams) -> None:
        """Initialize the configuration wrapper and validate."""
        object.__setattr__(self, "params", params)
        self.validate()

    def validate(self) -> None:
        """Validate parameter invariants and cross-namespace policies."""
        try:
            self.params.validate()
        except GeneratorParamsError as exc:
            raise GeneratorConfigError(str(exc)) from exc

        if self.params.save.format != "yaml":
            raise GeneratorConfigError("save.format must be 'yaml'")

    def window_size(self) -> int:
        """Return the configured detector window size."""
        return self.params.detector.window_size

    def time_interval_sec(self) -> float:
        """Return the configured sample period in seconds."""
        return self.params.detector.time_interval_sec


def load_params_yaml(path: str | os.PathLike[str]) -> GeneratorParams:
    """Load parameter overrides from a YAML file on top of the defaults."""
    path_obj: Path = Path(os.fspath(path))
    try:
        loaded: Any = yaml.safe_load(path_obj.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise GeneratorConfigError(
            f"Failed to read parameters from {path_obj}"
        ) from exc

    if loaded is None:
        return GeneratorParams.defaults()
    if not isinstance(loaded, dict):
        raise GeneratorConfigError("Parameter YAML root must be a mapping")

    try:
        params: GeneratorParams = GeneratorParams.from_nested_dict(loaded)
    except (GeneratorParamsError, TypeError) as exc:
        raise GeneratorConfigError(str(exc)) from exc

    return GeneratorConfig(params).params
