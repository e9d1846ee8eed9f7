"""Command fragments shared by the pattern generators.

Every generator is a master loop around episodes. An episode at one spot is:

    [iteration loop start]
    [trigger]
    pulse | pulse-train loop
    [iteration loop end]

Cycles passed in here are absolute; commands inside a loop are placed within
the loop's first iteration.
"""

from __future__ import annotations

from galvostim.protocol import Protocol
from galvostim.types import (
    CH_X,
    CH_Y,
    GalvoCoord,
    LoopMark,
    TrigCfg,
    TrigEdge,
    Trigger,
)

from .timing import PROT_PERIOD, TRIG_LEN, EpisodeTiming


def open_master(prot: Protocol, reps: int):
    prot.append_loop(LoopMark.START, 0, reps)


def close_master(prot: Protocol, reps: int, body_end: int) -> int:
    """Close the master loop; one repetition spans the body plus the settle pad."""
    rep_span = body_end + PROT_PERIOD
    end = reps * rep_span
    prot.append_loop(LoopMark.END, end, reps)
    return end


def append_position(prot: Protocol, cycle: int, pos: GalvoCoord):
    prot.append_move(CH_X, cycle, pos[0])
    prot.append_move(CH_Y, cycle, pos[1])


def append_trigger(prot: Protocol, cycle: int, trigger: Trigger):
    match trigger:
        case Trigger.IN:
            prot.append_trig_in(cycle, TrigEdge.RISING)
        case Trigger.OUT:
            prot.append_trig_out(cycle, TrigCfg.TRIG_HIGH)
            prot.append_trig_out(cycle + TRIG_LEN, TrigCfg.BOTH_LOW)
        case _:
            pass


def append_pulse(prot: Protocol, cycle: int, time_on: int):
    prot.append_trig_out(cycle, TrigCfg.LASER_HIGH)
    prot.append_trig_out(cycle + time_on, TrigCfg.BOTH_LOW)


def append_pulse_train(
    prot: Protocol, cycle: int, timing: EpisodeTiming, num_pulses: int
):
    if num_pulses == 1:
        append_pulse(prot, cycle, timing.time_on)
    else:
        prot.append_loop(LoopMark.START, cycle, num_pulses)
        append_pulse(prot, cycle, timing.time_on)
        prot.append_loop(LoopMark.END, cycle + num_pulses * timing.isi, num_pulses)


def append_episode(
    prot: Protocol,
    start: int,
    timing: EpisodeTiming,
    num_pulses: int,
    trigger: Trigger,
):
    """One spot's worth of stimulation: iterations of trigger + pulse train."""
    if timing.iterations > 1:
        prot.append_loop(LoopMark.START, start, timing.iterations)
    append_trigger(prot, start, trigger)
    append_pulse_train(prot, start + timing.lead, timing, num_pulses)
    if timing.iterations > 1:
        prot.append_loop(
            LoopMark.END, start + timing.iterations * timing.episode, timing.iterations
        )
