"""A single line of a scan-control protocol."""

from __future__ import annotations

import operator
from dataclasses import dataclass

from galvostim.types import (
    CTRL_ADD,
    CYCLE_BITS,
    MAX_CHANNEL,
    VALUE_BITS,
    CommandFieldError,
    ScanChar,
)

MAX_CYCLE = 2**CYCLE_BITS - 1
MIN_VALUE = -(2 ** (VALUE_BITS - 1))
MAX_VALUE = 2 ** (VALUE_BITS - 1) - 1


@dataclass(frozen=True, slots=True)
class Command:
    """
    An "add" command: at `cycle`, apply scan command `scan` to `channel` with
    `value`.

    Fields are checked against the device's field widths on construction:
    cycle is an unsigned 48-bit count of 10 us cycles, channel is 0-9 and
    value a signed 48-bit integer.
    """

    scan: ScanChar
    cycle: int
    channel: int
    value: int
    control: str = CTRL_ADD

    def __post_init__(self):
        object.__setattr__(self, "scan", ScanChar(self.scan))
        for name in ("cycle", "channel", "value"):
            try:
                object.__setattr__(self, name, operator.index(getattr(self, name)))
            except TypeError as e:
                raise CommandFieldError(
                    f"{name} must be an integer, got {getattr(self, name)!r}"
                ) from e
        if not 0 <= self.cycle <= MAX_CYCLE:
            raise CommandFieldError(
                f"Cycle {self.cycle} outside 0..{MAX_CYCLE} ({self.scan.value} command)"
            )
        if not 0 <= self.channel <= MAX_CHANNEL:
            raise CommandFieldError(
                f"Channel {self.channel} outside 0..{MAX_CHANNEL} "
                + f"({self.scan.value} command)"
            )
        if not MIN_VALUE <= self.value <= MAX_VALUE:
            raise CommandFieldError(
                f"Value {self.value} does not fit in {VALUE_BITS} bits "
                + f"({self.scan.value} command)"
            )

    def to_line(self) -> str:
        """Wire form, e.g. `AV,10,4,5000` (no terminator)."""
        return f"{self.control}{self.scan.value},{self.cycle},{self.channel},{self.value}"
