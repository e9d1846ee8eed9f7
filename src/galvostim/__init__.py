# -*- coding: utf-8 -*-
"""# galvostim

`Galvo scan-controller photostimulation protocols`

A (python) library for building photostimulation protocols for a galvanometer
scan-controller DSP: experiment parameters in milliseconds and pixels go in,
byte-exact protocol text for the controller comes out.

- `galvostim.coords`: pixel to galvo transforms, rotation and calibration
- `galvostim.protocol`: commands, the protocol builder and its text form
- `galvostim.patterns`: the Spot, Grid, Target, RapidGrid, RapidTarget and
  Pattern generators
- `galvostim.io`: coordinate, pattern and calibration files; JSON experiments
- `galvostim.device`: RS232 driver for the scan controller
- `galvostim.cli`: the `galvostim` command

Examples
--------
```python
from galvostim import GridConfig, PixelCoord, TransformConfig, build_protocol
text = build_protocol(
    GridConfig(
        baseline=100,
        time_on=10,
        dims=PixelCoord(4, 4),
        start_pos=PixelCoord(100, 100),
        spacing=PixelCoord(20, 20),
    ),
    TransformConfig(scale_factor=100, center_offset=PixelCoord(256, 256)),
)
```
"""

from ._version import __version__
from .patterns import build_protocol, get_available_patterns, make_protocol
from .types import (
    GalvoStimError,
    GridConfig,
    PatternConfig,
    PixelCoord,
    RapidGridConfig,
    RapidTargetConfig,
    SpotConfig,
    TargetConfig,
    TransformConfig,
)
