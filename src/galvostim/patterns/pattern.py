"""Pattern protocols: targets laid out on a grid by a pattern file."""

from __future__ import annotations

from galvostim.io import read_pattern
from galvostim.protocol import Protocol, render
from galvostim.types import PatternConfig, TransformConfig

from .target import make_target_sequence
from .timing import validate_experiment


def make_pattern(config: PatternConfig, transform: TransformConfig) -> Protocol:
    """
    Build a pattern experiment.

    The pattern file lists 1-based grid indices; index i on an axis maps to
    `start_pos + (i - 1) * spacing`. The resulting points are then treated
    exactly like a target list.
    """
    validate_experiment(config, transform)
    points = read_pattern(config.pattern_file, config.start_pos, config.spacing)
    return make_target_sequence(points, config, transform, label="Pattern")


def build_pattern(config: PatternConfig, transform: TransformConfig) -> str:
    """Render a pattern experiment as protocol text."""
    return render(make_pattern(config, transform))
