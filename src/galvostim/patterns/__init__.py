"""
Protocol generators for each stimulation pattern.

Each pattern has a `make_*` function returning the command list and a
`build_*` function returning rendered protocol text. `build_protocol`
dispatches on the config's `pattern_type`.

Examples
--------
```python
from galvostim.patterns import build_protocol
from galvostim.types import PixelCoord, SpotConfig, TransformConfig
text = build_protocol(
    SpotConfig(time_on=5, pos=PixelCoord(256, 256)),
    TransformConfig(scale_factor=100, center_offset=PixelCoord(256, 256)),
)
```
"""

from .grid import build_grid, make_grid
from .pattern import build_pattern, make_pattern
from .rapid import (
    build_rapid_grid,
    build_rapid_target,
    make_rapid_grid,
    make_rapid_target,
)
from .registry import build_protocol, get_available_patterns, make_protocol
from .spot import build_spot, make_spot
from .target import build_target, make_target
from .timing import (
    CYCLES_PER_MS,
    MOVE_TIME,
    PROT_PERIOD,
    TIME_OFFSET,
    TRIG_LEN,
    EpisodeTiming,
    ms_to_cycles,
    validate_experiment,
)

__all__ = [
    "build_grid",
    "make_grid",
    "build_pattern",
    "make_pattern",
    "build_rapid_grid",
    "build_rapid_target",
    "make_rapid_grid",
    "make_rapid_target",
    "build_protocol",
    "get_available_patterns",
    "make_protocol",
    "build_spot",
    "make_spot",
    "build_target",
    "make_target",
    "CYCLES_PER_MS",
    "MOVE_TIME",
    "PROT_PERIOD",
    "TIME_OFFSET",
    "TRIG_LEN",
    "EpisodeTiming",
    "ms_to_cycles",
    "validate_experiment",
]
