"""Pixel-space to galvo-space coordinate transforms.

Galvo positions are signed microcounts. The device convention negates both
axes relative to image space, so a point right of / below the centre offset
maps to negative microcounts.
"""

from __future__ import annotations

import math
from typing import Sequence

from galvostim.types import GalvoCoord, PixelCoord


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (C `round`)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def convert_coord(
    pixel: PixelCoord,
    scale_factor: int,
    center_offset: PixelCoord,
    rot_angle: float = 0.0,
) -> GalvoCoord:
    """
    Convert a pixel coordinate to galvo microcounts.

    The offset-corrected point is rotated by `rot_angle` (radians), scaled by
    `scale_factor` and negated on both axes. Components are truncated toward
    zero.
    """
    dx = pixel[0] - center_offset[0]
    dy = pixel[1] - center_offset[1]
    cos_a = math.cos(rot_angle)
    sin_a = math.sin(rot_angle)
    x = scale_factor * (dx * cos_a - dy * sin_a)
    y = scale_factor * (dx * sin_a + dy * cos_a)
    return GalvoCoord(int(-x), int(-y))


def rotate_coord(
    pixel: PixelCoord, axis_center: PixelCoord, rot_angle: float
) -> PixelCoord:
    """Rotate `pixel` about `axis_center` by `rot_angle` radians, in pixel space."""
    dx = pixel[0] - axis_center[0]
    dy = pixel[1] - axis_center[1]
    cos_a = math.cos(rot_angle)
    sin_a = math.sin(rot_angle)
    rx = dx * cos_a - dy * sin_a
    ry = dx * sin_a + dy * cos_a
    return PixelCoord(
        axis_center[0] + round_half_away(rx), axis_center[1] + round_half_away(ry)
    )


def centroid(points: Sequence[PixelCoord]) -> PixelCoord:
    """Arithmetic mean of `points`, rounded to the nearest integer."""
    if len(points) == 0:
        raise ValueError("Cannot take the centroid of an empty point set")
    sum_x = sum(p[0] for p in points)
    sum_y = sum(p[1] for p in points)
    return PixelCoord(
        round_half_away(sum_x / len(points)), round_half_away(sum_y / len(points))
    )


def rotate_points(
    points: Sequence[PixelCoord],
    rot_angle: float,
    axis_center: PixelCoord | None = None,
) -> list[PixelCoord]:
    """Rotate a point set about `axis_center` (its centroid by default)."""
    if rot_angle == 0:
        return [PixelCoord(*p) for p in points]
    if axis_center is None:
        axis_center = centroid(points)
    return [rotate_coord(p, axis_center, rot_angle) for p in points]


def expand_grid_coords(
    dims: PixelCoord, start_pos: PixelCoord, spacing: PixelCoord
) -> list[PixelCoord]:
    """Pixel positions of a grid in raster order (rows along +y, columns along +x)."""
    return [
        PixelCoord(start_pos[0] + i * spacing[0], start_pos[1] + j * spacing[1])
        for j in range(dims[1])
        for i in range(dims[0])
    ]


def grid_corners(
    dims: PixelCoord, start_pos: PixelCoord, spacing: PixelCoord
) -> list[PixelCoord]:
    """The four corner spots of a grid, clockwise from `start_pos`."""
    far_x = start_pos[0] + spacing[0] * (dims[0] - 1)
    far_y = start_pos[1] + spacing[1] * (dims[1] - 1)
    return [
        PixelCoord(start_pos[0], start_pos[1]),
        PixelCoord(far_x, start_pos[1]),
        PixelCoord(far_x, far_y),
        PixelCoord(start_pos[0], far_y),
    ]
