"""Raster geometry for the grid generators.

A grid is walked with relative moves: one column step per spot, then at the
end of each row a row step plus a move back across the row. Steps are derived
once from the spacing (and rotation) and reused for every spot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from galvostim.coords import (
    centroid,
    convert_coord,
    grid_corners,
    rotate_coord,
    round_half_away,
)
from galvostim.protocol import Protocol
from galvostim.types import (
    CH_X,
    CH_Y,
    GalvoCoord,
    LoopMark,
    PixelCoord,
    TransformConfig,
)


@dataclass(frozen=True)
class Raster:
    """Galvo start position and per-step deltas of a grid walk."""

    start: GalvoCoord
    col_step: GalvoCoord
    row_step: GalvoCoord
    rotated: bool = False

    def row_return(self, num_cols: int) -> GalvoCoord:
        """Delta undoing `num_cols` column steps."""
        return GalvoCoord(-self.col_step[0] * num_cols, -self.col_step[1] * num_cols)


def plan_raster(
    dims: PixelCoord,
    start_pos: PixelCoord,
    spacing: PixelCoord,
    transform: TransformConfig,
    rot_angle: float = 0.0,
    rot_center: PixelCoord | None = None,
) -> Raster:
    """
    Work out the galvo start point and step vectors of a grid.

    With a non-zero `rot_angle` the start point is rotated (in pixel space)
    about `rot_center`, by default the centroid of the grid's corners, and
    the column/row steps become rotated vectors. Columns advance along +x and
    rows along +y in pixel space (-y in galvo space), the same for Grid and
    RapidGrid. Older scan-control software stepped Grid rows along -y pixels,
    so a grid built from the same start position now extends the other way.
    """
    scale = transform.scale_factor
    if rot_angle == 0:
        start = convert_coord(start_pos, scale, transform.center_offset)
        return Raster(
            start=start,
            col_step=GalvoCoord(-spacing[0] * scale, 0),
            row_step=GalvoCoord(0, -spacing[1] * scale),
        )

    if rot_center is None:
        rot_center = centroid(grid_corners(dims, start_pos, spacing))
    rot_start = rotate_coord(start_pos, rot_center, rot_angle)
    start = convert_coord(rot_start, scale, transform.center_offset)

    cos_a = math.cos(rot_angle)
    sin_a = math.sin(rot_angle)
    # pixel-space steps: column (sx cos, sx sin), row (-sy sin, sy cos)
    col_step = GalvoCoord(
        -round_half_away(spacing[0] * cos_a) * scale,
        -round_half_away(spacing[0] * sin_a) * scale,
    )
    row_step = GalvoCoord(
        round_half_away(spacing[1] * sin_a) * scale,
        -round_half_away(spacing[1] * cos_a) * scale,
    )
    return Raster(start=start, col_step=col_step, row_step=row_step, rotated=True)


def append_step(
    prot: Protocol, cycle: int, step: GalvoCoord, raster: Raster, axis: int
):
    """Relative move by `step`; unrotated grids only move along `axis`."""
    if raster.rotated:
        prot.append_rel(CH_X, cycle, step[0])
        prot.append_rel(CH_Y, cycle, step[1])
    elif axis == CH_X:
        prot.append_rel(CH_X, cycle, step[0])
    else:
        prot.append_rel(CH_Y, cycle, step[1])


def append_raster_walk(
    prot: Protocol,
    raster: Raster,
    dims: PixelCoord,
    start: int,
    spot_period: int,
):
    """
    Close the column and row loops opened at `start` around one spot's body.

    The column step happens at the end of the first spot, the row step and
    the return across the row at the end of the first row.
    """
    num_cols, num_rows = dims[0], dims[1]
    col_move = start + spot_period
    append_step(prot, col_move, raster.col_step, raster, CH_X)
    prot.append_loop(LoopMark.END, start + num_cols * spot_period, num_cols)

    row_move = start + num_cols * spot_period
    append_step(prot, row_move, raster.row_step, raster, CH_Y)
    append_step(prot, row_move, raster.row_return(num_cols), raster, CH_X)
    prot.append_loop(LoopMark.END, start + num_rows * num_cols * spot_period, num_rows)
