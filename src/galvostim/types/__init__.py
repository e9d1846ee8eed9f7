"""
Core types shared across galvostim.

- Coordinates: `PixelCoord` (experiment space) and `GalvoCoord` (microcounts)
- Device vocabulary: scan characters, channel numbers, trigger levels
- Configuration: mashumaro dataclasses describing experiments and transforms
- Errors: the `GalvoStimError` hierarchy

Examples
--------
Describing a grid experiment:
```python
from galvostim.types import GridConfig, PixelCoord, Trigger
config = GridConfig(
    baseline=100,
    time_on=10,
    dims=PixelCoord(4, 4),
    start_pos=PixelCoord(100, 100),
    spacing=PixelCoord(20, 20),
    trigger=Trigger.OUT,
)
```
"""

from .commands import (
    CH_LOOP,
    CH_TRIG,
    CH_X,
    CH_Y,
    CTRL_ADD,
    CTRL_CLEAR,
    CTRL_EXECUTE,
    CTRL_SET_OFFSET,
    CTRL_SET_VALUE,
    CYCLE_BITS,
    MAX_CHANNEL,
    VALUE_BITS,
    LoopMark,
    ScanChar,
    TrigCfg,
    TrigEdge,
    Trigger,
)
from .config import (
    ExperimentConfig,
    GridConfig,
    PatternConfig,
    RapidGridConfig,
    RapidTargetConfig,
    SerialConfig,
    SpotConfig,
    TargetConfig,
    TransformConfig,
)
from .coords import CalibrationPoint, GalvoCoord, PixelCoord
from .errors import (
    AllocationError,
    CommandFieldError,
    DegenerateCalibrationError,
    GalvoStimError,
    ParameterError,
    ProtocolSealedError,
    ResourceError,
    TransportError,
)

__all__ = [
    "CH_LOOP",
    "CH_TRIG",
    "CH_X",
    "CH_Y",
    "CTRL_ADD",
    "CTRL_CLEAR",
    "CTRL_EXECUTE",
    "CTRL_SET_OFFSET",
    "CTRL_SET_VALUE",
    "CYCLE_BITS",
    "MAX_CHANNEL",
    "VALUE_BITS",
    "LoopMark",
    "ScanChar",
    "TrigCfg",
    "TrigEdge",
    "Trigger",
    "ExperimentConfig",
    "GridConfig",
    "PatternConfig",
    "RapidGridConfig",
    "RapidTargetConfig",
    "SerialConfig",
    "SpotConfig",
    "TargetConfig",
    "TransformConfig",
    "CalibrationPoint",
    "GalvoCoord",
    "PixelCoord",
    "AllocationError",
    "CommandFieldError",
    "DegenerateCalibrationError",
    "GalvoStimError",
    "ParameterError",
    "ProtocolSealedError",
    "ResourceError",
    "TransportError",
]
