################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for generator configuration wrapper."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from oasis_calibration.config.generator_config import GeneratorConfig
from oasis_calibration.config.generator_config import GeneratorConfigError
from oasis_calibration.config.generator_config import load_params_yaml
from oasis_calibration.config.generator_params import GeneratorParams


def test_defaults_construct() -> None:
    """Default parameters should construct a GeneratorConfig."""
    config: GeneratorConfig = GeneratorConfig(GeneratorParams.defaults())

    assert config.window_size() == 101
    assert config.time_interval_sec() == 0.02


def test_invalid_save_format() -> None:
    """Invalid save.format should raise an error."""
    params: GeneratorParams = GeneratorParams.defaults().replace(
        save=dataclasses.replace(GeneratorParams.defaults().save, format="toml")
    )
    with pytest.raises(GeneratorConfigError):
        GeneratorConfig(params)


def test_invalid_params_are_converted() -> None:
    """Parameter errors should surface as configuration errors."""
    params: GeneratorParams = GeneratorParams.defaults().replace(
        detector=dataclasses.replace(
            GeneratorParams.defaults().detector, window_size=6
        )
    )
    with pytest.raises(GeneratorConfigError):
        GeneratorConfig(params)


def test_load_params_yaml(tmp_path: Path) -> None:
    """Overrides in YAML should be applied on top of the defaults."""
    path: Path = tmp_path / "params.yaml"
    path.write_text(
        "detector:\n  window_size: 11\n  initial_static_samples: 100\n",
        encoding="utf-8",
    )

    params: GeneratorParams = load_params_yaml(path)

    assert params.detector.window_size == 11
    assert params.detector.initial_static_samples == 100
    assert params.interval == GeneratorParams.defaults().interval


def test_load_params_yaml_empty_file(tmp_path: Path) -> None:
    """An empty file should yield the defaults."""
    path: Path = tmp_path / "params.yaml"
    path.write_text("", encoding="utf-8")

    assert load_params_yaml(path) == GeneratorParams.defaults()


def test_load_params_yaml_errors(tmp_path: Path) -> None:
    """Missing files, bad roots and invalid values should raise."""
    with pytest.raises(GeneratorConfigError):
        load_params_yaml(tmp_path / "missing.yaml")

    list_root: Path = tmp_path / "list.yaml"
    list_root.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(GeneratorConfigError):
        load_params_yaml(list_root)

    even_window: Path = tmp_path / "even.yaml"
    even_window.write_text("detector:\n  window_size: 10\n", encoding="utf-8")
    with pytest.raises(GeneratorConfigError):
        load_params_yaml(even_window)
