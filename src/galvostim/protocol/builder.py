"""Append-only protocol builder.

A `Protocol` holds commands in the order they were authored, which is not
necessarily execution-cycle order. Generators are responsible for emitting
commands in cycle-ascending order per channel and for nesting loops: every
loop start needs a later, correctly timed loop end.
"""

from __future__ import annotations

from typing import Iterator

from loguru import logger

from galvostim.types import (
    CH_LOOP,
    CH_TRIG,
    AllocationError,
    LoopMark,
    ProtocolSealedError,
    ScanChar,
    TrigCfg,
    TrigEdge,
)

from .command import Command


class Protocol:
    """One complete device program, built by appending commands."""

    def __init__(self):
        self._commands: list[Command] = []
        self._sealed = False

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands)

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self):
        """Mark the protocol as rendered; later appends are rejected."""
        self._sealed = True

    def append(self, command: Command) -> Command:
        if self._sealed:
            raise ProtocolSealedError("Cannot append to a protocol after rendering")
        try:
            self._commands.append(command)
        except MemoryError as e:
            logger.error("Failure to grow protocol at command {}", len(self._commands))
            raise AllocationError(
                f"Could not append command {len(self._commands)} to protocol"
            ) from e
        return command

    ##############################################
    # Scan commands
    ##############################################

    def append_move(self, channel: int, cycle: int, position: int) -> Command:
        """Set an output channel (normally a galvo) to an absolute value."""
        return self.append(Command(ScanChar.SET, cycle, channel, position))

    def append_rel(self, channel: int, cycle: int, delta: int) -> Command:
        """Shift a channel relative to its current value."""
        return self.append(Command(ScanChar.RELATIVE, cycle, channel, delta))

    def append_loop(self, mark: LoopMark, cycle: int, repetitions: int) -> Command:
        """
        Open or close a loop on the loop pseudo-channel.

        The DSP ignores the value of a loop end, but the repetition count is
        written on both ends so that a protocol listing reads unambiguously.
        For a loop of n iterations of length dt starting at t0, the end belongs
        at t0 + n * dt.
        """
        mark = LoopMark(mark)
        scan = ScanChar.LOOP_START if mark is LoopMark.START else ScanChar.LOOP_END
        return self.append(Command(scan, cycle, CH_LOOP, repetitions))

    def append_trig_out(self, cycle: int, trig_cfg: TrigCfg) -> Command:
        """Set the digital output levels (trigger out / laser gate)."""
        return self.append(Command(ScanChar.SET, cycle, CH_TRIG, TrigCfg(trig_cfg)))

    def append_trig_in(self, cycle: int, edge: TrigEdge = TrigEdge.RISING) -> Command:
        """Pause until an external trigger edge arrives."""
        scan = (
            ScanChar.TRIG_FALLING
            if TrigEdge(edge) is TrigEdge.FALLING
            else ScanChar.TRIG_RISING
        )
        return self.append(Command(scan, cycle, CH_TRIG, 0))

    def append_incr(self, channel: int, cycle: int, increment: int) -> Command:
        """Set the per-cycle increment of a channel."""
        return self.append(Command(ScanChar.INCREMENT, cycle, channel, increment))

    def append_offset(self, channel: int, cycle: int, value: int) -> Command:
        """Switch the galvo position offset on or off."""
        return self.append(Command(ScanChar.OFFSET, cycle, channel, value))

    def append_wait(self, cycle: int) -> Command:
        """No-op at `cycle`; keeps the protocol busy until then."""
        return self.append(Command(ScanChar.WAIT, cycle, 0, 0))
