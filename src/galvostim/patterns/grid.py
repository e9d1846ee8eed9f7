"""Grid protocols: a full episode at every spot of a raster."""

from __future__ import annotations

from loguru import logger

from galvostim.protocol import Protocol, render
from galvostim.types import GridConfig, LoopMark, Trigger, TransformConfig

from .raster import append_raster_walk, plan_raster
from .skeleton import append_episode, append_position, close_master, open_master
from .timing import TIME_OFFSET, EpisodeTiming, validate_experiment


def make_grid(config: GridConfig, transform: TransformConfig) -> Protocol:
    """
    Build the command list of a grid experiment.

    Layout (E = episode length x iterations, t0 = TIME_OFFSET):

        S 0        master loop (reps)
        V 0        move to start X, Y
        S t0       row loop (dims.y)
        S t0       column loop (dims.x)
        ...        episode (iterations, trigger, pulse or pulse train)
        R t0+E     column step
        E t0+X*E   column loop end
        R t0+X*E   row step, return across the row
        E t0+X*Y*E row loop end
        E          master loop end
    """
    validate_experiment(config, transform)
    trigger = Trigger(config.trigger)
    timing = EpisodeTiming.from_ms(
        config.baseline,
        config.time_on,
        config.isi,
        config.episode_period,
        pulse_count=config.num_pulses,
        iterations=config.iterations,
        trigger=trigger,
    )
    raster = plan_raster(
        config.dims,
        config.start_pos,
        config.spacing,
        transform,
        config.rot_angle,
        config.rot_center,
    )
    num_cols, num_rows = config.dims
    logger.info(
        "Programming Grid protocol with the following parameters:"
        + f"\nGrid: {num_cols} x {num_rows} from {tuple(config.start_pos)}"
        + f" spaced {tuple(config.spacing)}, rotation {config.rot_angle} rad"
        + f"\nEpisode: {timing.episode} cycles x {timing.iterations} iterations"
        + f"\nPulses: {config.num_pulses} x {timing.time_on} cycles, ISI {timing.isi}"
        + f"\nFirst pulse after: {timing.lead} cycles"
        + f"\nTrigger: {trigger.name}, reps: {config.reps}"
    )

    start = TIME_OFFSET
    prot = Protocol()
    open_master(prot, config.reps)
    append_position(prot, 0, raster.start)
    prot.append_loop(LoopMark.START, start, num_rows)
    prot.append_loop(LoopMark.START, start, num_cols)
    append_episode(prot, start, timing, config.num_pulses, trigger)
    append_raster_walk(prot, raster, config.dims, start, timing.spot_period)
    close_master(prot, config.reps, start + num_cols * num_rows * timing.spot_period)
    return prot


def build_grid(config: GridConfig, transform: TransformConfig) -> str:
    """Render a grid experiment as protocol text."""
    return render(make_grid(config, transform))
