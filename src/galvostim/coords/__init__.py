"""
Coordinate transforms between experiment pixels and galvo microcounts.

Examples
--------
```python
from galvostim.coords import calc_scaling, convert_coord
from galvostim.io import read_calibration
scale = calc_scaling(read_calibration("calibration.txt"))
convert_coord((120, 80), scale, (256, 256))
```
"""

from .calibration import calc_scaling, pairwise_ratios
from .transform import (
    centroid,
    convert_coord,
    expand_grid_coords,
    grid_corners,
    rotate_coord,
    rotate_points,
    round_half_away,
)

__all__ = [
    "calc_scaling",
    "pairwise_ratios",
    "centroid",
    "convert_coord",
    "expand_grid_coords",
    "grid_corners",
    "rotate_coord",
    "rotate_points",
    "round_half_away",
]
