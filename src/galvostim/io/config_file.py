"""Experiment files: one JSON document holding an experiment, its transform
and optionally the serial link used to upload it.

```json
{
    "experiment": {"pattern_type": "Spot", "time_on": 5, "pos": [256, 256]},
    "transform": {"scale_factor": 100, "center_offset": [256, 256]},
    "serial": {"port": "/dev/ttyUSB0"}
}
```
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import simplejson as json
from loguru import logger
from mashumaro.exceptions import (
    MissingDiscriminatorError,
    MissingField,
    SuitableVariantNotFoundError,
)

from galvostim.types import (
    ExperimentConfig,
    ResourceError,
    SerialConfig,
    TransformConfig,
)


@dataclass(frozen=True)
class ExperimentSetup:
    experiment: ExperimentConfig
    transform: TransformConfig
    serial: SerialConfig | None = None


def load_experiment(path: str | Path) -> ExperimentSetup:
    """Load an experiment file; relative target/pattern files stay relative
    to the working directory."""
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to open experiment file: {path}")
        raise ResourceError(f"Failed to open experiment file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ResourceError(f"Experiment file {path} is not valid JSON: {e}") from e

    try:
        experiment = ExperimentConfig.from_dict(data["experiment"])
        transform = TransformConfig.from_dict(data["transform"])
        serial = (
            SerialConfig.from_dict(data["serial"]) if data.get("serial") else None
        )
    except KeyError as e:
        raise ResourceError(f"Experiment file {path} has no {e} section") from e
    except (
        MissingDiscriminatorError,
        MissingField,
        SuitableVariantNotFoundError,
        ValueError,
        TypeError,
    ) as e:
        raise ResourceError(f"Invalid experiment file {path}: {e}") from e
    logger.debug(f"Loaded {experiment.pattern_type} experiment from {path}")
    return ExperimentSetup(experiment, transform, serial)


def save_experiment(
    path: str | Path,
    experiment: ExperimentConfig,
    transform: TransformConfig,
    serial: SerialConfig | None = None,
):
    data = {"experiment": experiment.to_dict(), "transform": transform.to_dict()}
    if serial is not None:
        data["serial"] = serial.to_dict()
    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=4)
    except OSError as e:
        raise ResourceError(f"Failed to write experiment file {path}: {e}") from e
    logger.debug(f"Saved {experiment.pattern_type} experiment to {path}")
