################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
Entry point for generating calibration measurements from a sample log.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional

from oasis_calibration.calibration_types import CalibrationSample
from oasis_calibration.calibration_types import FluxDensityMeasurement
from oasis_calibration.calibration_types import KinematicsMeasurement
from oasis_calibration.calibration_types import KinematicsSequence
from oasis_calibration.config.generator_config import GeneratorConfigError
from oasis_calibration.config.generator_config import load_params_yaml
from oasis_calibration.config.generator_params import GeneratorParams
from oasis_calibration.generators.imu_mag_generator import (
    ImuMagMeasurementsGenerator,
)
from oasis_calibration.generators.imu_mag_generator import (
    ImuMagMeasurementsListener,
)
from oasis_calibration.intervals.static_interval_detector import DetectorErrorReason
from oasis_calibration.storage.persistence import MeasurementsPersistenceError
from oasis_calibration.storage.persistence import save_yaml_measurements
from oasis_calibration.storage.sample_log import SampleLogError
from oasis_calibration.storage.sample_log import load_sample_log
from oasis_calibration.storage.yaml_format import MeasurementsYaml


_LOG: logging.Logger = logging.getLogger(__name__)


class _MeasurementRecorder(ImuMagMeasurementsListener):
    """Collect every measurement emitted during a replay."""

    def __init__(self) -> None:
        self.flux_density: list[FluxDensityMeasurement] = []
        self.kinematics: list[KinematicsMeasurement] = []
        self.sequences: list[KinematicsSequence] = []
        self.error: Optional[DetectorErrorReason] = None

    def on_error(
        self, generator: ImuMagMeasurementsGenerator, reason: DetectorErrorReason
    ) -> None:
        self.error = reason

    def on_accelerometer_measurement(
        self,
        generator: ImuMagMeasurementsGenerator,
        measurement: KinematicsMeasurement,
    ) -> None:
        self.kinematics.append(measurement)

    def on_gyroscope_measurement(
        self,
        generator: ImuMagMeasurementsGenerator,
        measurement: KinematicsSequence,
    ) -> None:
        self.sequences.append(measurement)

    def on_magnetometer_measurement(
        self,
        generator: ImuMagMeasurementsGenerator,
        measurement: FluxDensityMeasurement,
    ) -> None:
        self.flux_density.append(measurement)

    def document(self) -> MeasurementsYaml:
        return MeasurementsYaml(
            flux_density=tuple(self.flux_density),
            kinematics=tuple(self.kinematics),
            sequences=tuple(self.sequences),
        )


################################################################################
# Entry point
################################################################################


def _parse_args(args=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate calibration measurements from a CSV sample log"
    )
    parser.add_argument(
        "samples",
        help="CSV log with columns t_s,fx,fy,fz,wx,wy,wz[,bx,by,bz]",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="YAML file for the measurements (default: <samples>_measurements.yaml)",
    )
    parser.add_argument(
        "--params",
        default=None,
        help="YAML file with generator parameter overrides",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(args=args)


def main(args=None) -> int:
    options = _parse_args(args=args)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    samples_path: Path = Path(options.samples)
    output_path: Path = (
        Path(options.output)
        if options.output is not None
        else samples_path.with_name(f"{samples_path.stem}_measurements.yaml")
    )

    try:
        params: GeneratorParams = (
            load_params_yaml(options.params)
            if options.params is not None
            else GeneratorParams.defaults()
        )
        samples: list[CalibrationSample] = load_sample_log(samples_path)
    except (GeneratorConfigError, SampleLogError) as exc:
        _LOG.error("%s", exc)
        return 1

    recorder: _MeasurementRecorder = _MeasurementRecorder()
    generator: ImuMagMeasurementsGenerator = ImuMagMeasurementsGenerator(
        listener=recorder, params=params
    )

    processed: int = 0
    for sample in samples:
        if not generator.process(sample):
            break
        processed += 1

    if recorder.error is not None:
        _LOG.error(
            "Initialization failed after %d samples: %s",
            processed,
            recorder.error.value,
        )
        return 1

    doc: MeasurementsYaml = recorder.document()
    _LOG.info(
        "Processed %d samples: %d flux density, %d kinematics, %d sequences",
        processed,
        len(doc.flux_density),
        len(doc.kinematics),
        len(doc.sequences),
    )

    try:
        save_yaml_measurements(
            output_path, doc, atomic_write=params.save.atomic_write
        )
    except MeasurementsPersistenceError as exc:
        _LOG.error("%s", exc)
        return 1

    _LOG.info("Saved measurements to %s", output_path)
    return 0
