"""
Scan-control protocols: commands, the append-only builder and the serializer.

Examples
--------
```python
from galvostim.protocol import Protocol, render
from galvostim.types import CH_X
prot = Protocol()
prot.append_move(CH_X, 10, 5000)
render(prot)  # 'C\\nAV,10,4,5000\\n'
```
"""

from .analysis import (
    CYCLE_LEN_US,
    LoopSpan,
    loop_balance,
    match_loops,
    parse_protocol,
    summarize,
    total_cycles,
)
from .builder import Protocol
from .command import MAX_CYCLE, MAX_VALUE, MIN_VALUE, Command
from .render import CLEAR, MAX_PROTOCOL_LINES, STOPCHAR, render

__all__ = [
    "CYCLE_LEN_US",
    "LoopSpan",
    "loop_balance",
    "match_loops",
    "parse_protocol",
    "summarize",
    "total_cycles",
    "Protocol",
    "MAX_CYCLE",
    "MAX_VALUE",
    "MIN_VALUE",
    "Command",
    "CLEAR",
    "MAX_PROTOCOL_LINES",
    "STOPCHAR",
    "render",
]
