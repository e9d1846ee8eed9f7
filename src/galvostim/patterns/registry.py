"""Lookup from pattern type name to protocol generator."""

from __future__ import annotations

from typing import Callable

from galvostim.protocol import Protocol, render
from galvostim.types import ExperimentConfig, ParameterError, TransformConfig

from .grid import make_grid
from .pattern import make_pattern
from .rapid import make_rapid_grid, make_rapid_target
from .spot import make_spot
from .target import make_target

_GENERATORS: dict[str, Callable[..., Protocol]] = {
    "Spot": make_spot,
    "Grid": make_grid,
    "Target": make_target,
    "RapidGrid": make_rapid_grid,
    "RapidTarget": make_rapid_target,
    "Pattern": make_pattern,
}


def get_available_patterns() -> dict[str, Callable[..., Protocol]]:
    """Pattern type name -> generator returning an unrendered `Protocol`."""
    return dict(_GENERATORS)


def make_protocol(config: ExperimentConfig, transform: TransformConfig) -> Protocol:
    """Dispatch on `config.pattern_type`."""
    try:
        generator = _GENERATORS[config.pattern_type]
    except KeyError:
        raise ParameterError(
            f"Unknown pattern type {config.pattern_type!r}, "
            + f"expected one of {', '.join(_GENERATORS)}"
        ) from None
    return generator(config, transform)


def build_protocol(config: ExperimentConfig, transform: TransformConfig) -> str:
    """Build and render the protocol described by `config`."""
    return render(make_protocol(config, transform))
