"""Readers for tab-delimited coordinate, pattern and calibration files.

All readers fail fast: a missing, unreadable or short file raises
`ResourceError` so no generator ever builds a protocol from a partial point
set.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from loguru import logger

from galvostim.types import CalibrationPoint, PixelCoord, ResourceError


@dataclass(frozen=True)
class PatternHeader:
    count: int
    x_dims: int
    y_dims: int


def _read_lines(path: str | Path, kind: str) -> list[str]:
    try:
        text = Path(path).read_text()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to open {kind} file: {path}")
        raise ResourceError(f"Failed to open {kind} file {path}: {e}") from e
    return [line for line in text.splitlines() if line.strip()]


def _load_table(lines: list[str], columns: int, dtype, path, kind: str) -> np.ndarray:
    if not lines:
        raise ResourceError(f"{kind.capitalize()} file {path} holds no records")
    try:
        table = np.loadtxt(lines, dtype=dtype, ndmin=2)
    except ValueError as e:
        raise ResourceError(f"Malformed {kind} file {path}: {e}") from e
    if table.shape[1] != columns:
        raise ResourceError(
            f"{kind.capitalize()} file {path} has {table.shape[1]} columns, "
            + f"expected {columns}"
        )
    return table


def read_coords(path: str | Path, num_points: int | None = None) -> list[PixelCoord]:
    """
    Read `<x>\\t<y>` integer records.

    With `num_points` set, exactly that many records are returned and a file
    holding fewer is an error.
    """
    lines = _read_lines(path, "coordinate")
    if num_points is not None:
        if num_points < 1:
            raise ResourceError(f"Asked for {num_points} coordinates from {path}")
        if len(lines) < num_points:
            raise ResourceError(
                f"Coordinate file {path} holds {len(lines)} records, "
                + f"{num_points} requested"
            )
        lines = lines[:num_points]
    table = _load_table(lines, 2, int, path, "coordinate")
    logger.debug(f"Read {len(table)} coordinates from {path}")
    return [PixelCoord(int(x), int(y)) for x, y in table]


def read_pattern_header(path: str | Path) -> PatternHeader:
    """First line of a pattern file: `<count>\\t<xDims>\\t<yDims>`."""
    lines = _read_lines(path, "pattern")
    return _parse_header(lines, path)


def _parse_header(lines: list[str], path) -> PatternHeader:
    if not lines:
        raise ResourceError(f"Pattern file {path} is empty")
    try:
        count, x_dims, y_dims = (int(field) for field in lines[0].split())
    except ValueError as e:
        raise ResourceError(f"Malformed pattern header in {path}: {lines[0]!r}") from e
    if count < 1:
        raise ResourceError(f"Pattern file {path} declares {count} points")
    if x_dims < 1 or y_dims < 1:
        raise ResourceError(
            f"Pattern file {path} declares a {x_dims} x {y_dims} grid"
        )
    return PatternHeader(count, x_dims, y_dims)


def read_pattern(
    path: str | Path, start_pos: PixelCoord, spacing: PixelCoord
) -> list[PixelCoord]:
    """
    Read a pattern file and map its 1-based grid indices to pixels.

    Index `i` on an axis lands at `start + (i - 1) * spacing`.
    """
    lines = _read_lines(path, "pattern")
    header = _parse_header(lines, path)
    records = lines[1:]
    if len(records) < header.count:
        raise ResourceError(
            f"Pattern file {path} declares {header.count} points "
            + f"but holds {len(records)}"
        )
    indices = _load_table(records[: header.count], 2, int, path, "pattern")
    gx, gy = indices[:, 0], indices[:, 1]
    x_ok = 1 <= gx.min() and gx.max() <= header.x_dims
    y_ok = 1 <= gy.min() and gy.max() <= header.y_dims
    if not (x_ok and y_ok):
        raise ResourceError(
            f"Pattern file {path} has indices outside its "
            + f"{header.x_dims} x {header.y_dims} grid"
        )
    xs = start_pos[0] + (gx - 1) * spacing[0]
    ys = start_pos[1] + (gy - 1) * spacing[1]
    logger.debug(f"Read {header.count} pattern points from {path}")
    return [PixelCoord(int(x), int(y)) for x, y in zip(xs, ys)]


def read_calibration(path: str | Path) -> list[CalibrationPoint]:
    """Read `<galvoX>\\t<galvoY>\\t<pixelX>\\t<pixelY>` float records."""
    lines = _read_lines(path, "calibration")
    table = _load_table(lines, 4, float, path, "calibration")
    logger.debug(f"Read {len(table)} calibration points from {path}")
    return [CalibrationPoint(*(float(v) for v in row)) for row in table]
