"""Scale factor estimation from calibration point pairs."""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from galvostim.types import CalibrationPoint, DegenerateCalibrationError

from .transform import round_half_away


def pairwise_ratios(points: Sequence[CalibrationPoint]) -> list[float]:
    """
    |d galvo| / |d pixel| for every unordered pair of calibration points.

    For each pair (i < j) the X ratio comes first, then the Y ratio; an axis is
    skipped when the two galvo positions coincide on it.
    """
    ratios = []
    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            for axis, (g_i, g_j, p_i, p_j) in (
                ("X", (points[i][0], points[j][0], points[i][2], points[j][2])),
                ("Y", (points[i][1], points[j][1], points[i][3], points[j][3])),
            ):
                if g_i == g_j:
                    continue
                d_pixel = abs(p_i - p_j)
                if d_pixel == 0:
                    msg = (
                        f"Calibration points {i} and {j} differ in galvo {axis} "
                        + f"but share pixel {axis} = {p_i}"
                    )
                    logger.error(msg)
                    raise DegenerateCalibrationError(msg)
                ratios.append(abs(g_i - g_j) / d_pixel)
    return ratios


def calc_scaling(points: Sequence[CalibrationPoint]) -> int:
    """
    Derive the pixel to microcount scale factor from calibration points.

    Ratios from every pair of points are combined as a running average: the
    first ratio seeds the estimate and every later non-zero ratio is averaged
    into it, `s = (s + r) / 2`. The order of the points therefore matters.

    Arguments
    ---------
    points : Sequence[CalibrationPoint]
        (galvo_x, galvo_y, pixel_x, pixel_y) records, e.g. from
        `galvostim.io.read_calibration`.

    Returns
    -------
    int
        Microcounts per pixel, rounded to the nearest integer.
    """
    ratios = pairwise_ratios(points)
    if not ratios:
        msg = f"No distinct calibration pairs among {len(points)} point(s)"
        logger.error(msg)
        raise DegenerateCalibrationError(msg)

    scale = ratios[0]
    for ratio in ratios[1:]:
        if ratio != 0:
            scale = (scale + ratio) / 2

    scale_factor = round_half_away(scale)
    if scale_factor <= 0:
        msg = f"Calibration produced a non-positive scale factor ({scale})"
        logger.error(msg)
        raise DegenerateCalibrationError(msg)
    logger.info(
        "Scale factor {} ucounts/pixel from {} ratios over {} points",
        scale_factor,
        len(ratios),
        len(points),
    )
    return scale_factor
