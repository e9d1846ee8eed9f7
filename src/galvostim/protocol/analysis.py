"""Read-only checks and summaries of built protocols."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from galvostim.types import ScanChar

from .command import Command

CYCLE_LEN_US = 10


@dataclass
class LoopSpan:
    """A matched loop start/end pair."""

    start_cycle: int
    end_cycle: int
    repetitions: int
    depth: int

    @property
    def iteration_cycles(self) -> float:
        return (self.end_cycle - self.start_cycle) / self.repetitions


def match_loops(commands: Iterable[Command]) -> list[LoopSpan]:
    """
    Pair loop starts with loop ends by nesting order.

    Raises ValueError on an orphan start or end, or if the two ends of a loop
    disagree on the repetition count.
    """
    stack: list[Command] = []
    spans = []
    for cmd in commands:
        if cmd.scan is ScanChar.LOOP_START:
            stack.append(cmd)
        elif cmd.scan is ScanChar.LOOP_END:
            if not stack:
                raise ValueError(f"Loop end at cycle {cmd.cycle} without a start")
            start = stack.pop()
            if start.value != cmd.value:
                raise ValueError(
                    f"Loop at cycle {start.cycle} opened with {start.value} "
                    + f"repetitions but closed with {cmd.value}"
                )
            spans.append(LoopSpan(start.cycle, cmd.cycle, start.value, len(stack)))
    if stack:
        raise ValueError(f"{len(stack)} loop(s) never closed")
    return spans


def loop_balance(commands: Iterable[Command]) -> int:
    """Number of loop starts minus number of loop ends."""
    counts = Counter(cmd.scan for cmd in commands)
    return counts[ScanChar.LOOP_START] - counts[ScanChar.LOOP_END]


def parse_protocol(text: str) -> list[Command]:
    """
    Read commands back out of rendered wire text.

    The leading clear line is skipped. Only used to inspect generated text;
    device responses are not in this format.
    """
    commands = []
    for line in text.splitlines():
        if not line or line == "C":
            continue
        head, cycle, channel, value = line.split(",")
        commands.append(
            Command(head[1], int(cycle), int(channel), int(value), control=head[0])
        )
    return commands


def total_cycles(commands: Iterable[Command]) -> int:
    """Latest command cycle; for generated protocols, the master loop end."""
    commands = list(commands)
    if not commands:
        return 0
    return max(cmd.cycle for cmd in commands)


def summarize(commands: Iterable[Command]) -> dict[str, int | float]:
    """Counts per scan command and the nominal duration of the protocol."""
    commands = list(commands)
    counts = Counter(cmd.scan.name.lower() for cmd in commands)
    cycles = total_cycles(commands)
    return {
        "commands": len(commands),
        **dict(sorted(counts.items())),
        "loops": len(match_loops(commands)),
        "total_cycles": cycles,
        "duration_ms": cycles * CYCLE_LEN_US / 1000,
    }
