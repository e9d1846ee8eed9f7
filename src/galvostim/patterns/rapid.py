"""Rapid protocols: one pulse per spot, one ISI apart, inside a single episode."""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from galvostim.protocol import Protocol, render
from galvostim.types import (
    LoopMark,
    PixelCoord,
    RapidGridConfig,
    RapidTargetConfig,
    TransformConfig,
    Trigger,
)

from .raster import append_raster_walk, plan_raster
from .skeleton import (
    append_position,
    append_pulse,
    append_trigger,
    close_master,
    open_master,
)
from .target import resolve_targets, targets_to_galvo
from .timing import MOVE_TIME, TIME_OFFSET, EpisodeTiming, validate_experiment


def _rapid_timing(config, pulse_count: int) -> EpisodeTiming:
    timing = EpisodeTiming.from_ms(
        config.baseline,
        config.time_on,
        config.isi,
        config.episode_period,
        pulse_count=pulse_count,
        trigger=Trigger(config.trigger),
    )
    if pulse_count > 1 and timing.isi < MOVE_TIME:
        logger.warning(
            "ISI of {} cycles is shorter than the {} cycle galvo move time; "
            + "spots may be pulsed before the mirrors settle",
            timing.isi,
            MOVE_TIME,
        )
    return timing


def make_rapid_grid(config: RapidGridConfig, transform: TransformConfig) -> Protocol:
    """
    Build a rapid grid: the whole raster is swept once per episode, a single
    pulse per spot, spots `isi` apart.

        S 0          master loop (reps)
        V 0          move to start X, Y
        t0           trigger
        S P          row loop, column loop (P = t0 + lead)
        P            pulse
        R P+isi      column step
        E P+X*isi    column loop end, row step, return across the row
        E P+X*Y*isi  row loop end
        E            master loop end
    """
    validate_experiment(config, transform)
    trigger = Trigger(config.trigger)
    num_cols, num_rows = config.dims
    timing = _rapid_timing(config, num_cols * num_rows)
    raster = plan_raster(
        config.dims,
        config.start_pos,
        config.spacing,
        transform,
        config.rot_angle,
        config.rot_center,
    )
    logger.info(
        "Programming RapidGrid protocol with the following parameters:"
        + f"\nGrid: {num_cols} x {num_rows} from {tuple(config.start_pos)}"
        + f" spaced {tuple(config.spacing)}, rotation {config.rot_angle} rad"
        + f"\nEpisode: {timing.episode} cycles, ISI {timing.isi}"
        + f"\nPulse width: {timing.time_on} cycles, first pulse after {timing.lead}"
        + f"\nTrigger: {trigger.name}, reps: {config.reps}"
    )

    first_pulse = TIME_OFFSET + timing.lead
    prot = Protocol()
    open_master(prot, config.reps)
    append_position(prot, 0, raster.start)
    append_trigger(prot, TIME_OFFSET, trigger)
    prot.append_loop(LoopMark.START, first_pulse, num_rows)
    prot.append_loop(LoopMark.START, first_pulse, num_cols)
    append_pulse(prot, first_pulse, timing.time_on)
    append_raster_walk(prot, raster, config.dims, first_pulse, timing.isi)
    close_master(prot, config.reps, TIME_OFFSET + timing.episode)
    return prot


def build_rapid_grid(config: RapidGridConfig, transform: TransformConfig) -> str:
    """Render a rapid grid experiment as protocol text."""
    return render(make_rapid_grid(config, transform))


def make_rapid_target(
    config: RapidTargetConfig,
    transform: TransformConfig,
    points: Sequence[PixelCoord] | None = None,
) -> Protocol:
    """
    Build a rapid target list: one pulse per target, target m at
    `t0 + lead + m * isi`, all inside a single episode.
    """
    validate_experiment(config, transform)
    trigger = Trigger(config.trigger)
    targets = resolve_targets(config.target_file, config.num_points, points)
    galvo_points = targets_to_galvo(
        targets, transform, config.rot_angle, config.rot_center
    )
    timing = _rapid_timing(config, len(galvo_points))
    logger.info(
        "Programming RapidTarget protocol with the following parameters:"
        + f"\nTargets: {len(galvo_points)}, rotation {config.rot_angle} rad"
        + f"\nEpisode: {timing.episode} cycles, ISI {timing.isi}"
        + f"\nPulse width: {timing.time_on} cycles, first pulse after {timing.lead}"
        + f"\nTrigger: {trigger.name}, reps: {config.reps}"
    )

    first_pulse = TIME_OFFSET + timing.lead
    prot = Protocol()
    open_master(prot, config.reps)
    append_trigger(prot, TIME_OFFSET, trigger)
    for m, pos in enumerate(galvo_points):
        pulse_at = first_pulse + m * timing.isi
        append_position(prot, pulse_at, pos)
        append_pulse(prot, pulse_at, timing.time_on)
    close_master(prot, config.reps, TIME_OFFSET + timing.episode)
    return prot


def build_rapid_target(
    config: RapidTargetConfig,
    transform: TransformConfig,
    points: Sequence[PixelCoord] | None = None,
) -> str:
    """Render a rapid target experiment as protocol text."""
    return render(make_rapid_target(config, transform, points))
