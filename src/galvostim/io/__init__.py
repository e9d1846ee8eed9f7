"""
File input/output: coordinate, pattern and calibration readers plus JSON
experiment files.
"""

from .config_file import ExperimentSetup, load_experiment, save_experiment
from .readers import (
    PatternHeader,
    read_calibration,
    read_coords,
    read_pattern,
    read_pattern_header,
)

__all__ = [
    "ExperimentSetup",
    "load_experiment",
    "save_experiment",
    "PatternHeader",
    "read_calibration",
    "read_coords",
    "read_pattern",
    "read_pattern_header",
]
