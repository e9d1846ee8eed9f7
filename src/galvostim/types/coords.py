"""Coordinate types.

Pixel coordinates live in experiment (image) space; galvo coordinates are
device microcounts and are only produced by `galvostim.coords.convert_coord`.
"""

from typing import NamedTuple


class PixelCoord(NamedTuple):
    """Experiment-space coordinate (pixels or microns)."""

    x: int
    y: int


class GalvoCoord(NamedTuple):
    """Device-space coordinate in microcounts."""

    x: int
    y: int


class CalibrationPoint(NamedTuple):
    """One calibration record: a galvo position and the pixel it landed on."""

    galvo_x: float
    galvo_y: float
    pixel_x: float
    pixel_y: float
