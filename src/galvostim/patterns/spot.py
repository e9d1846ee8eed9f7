"""Single-spot protocols."""

from __future__ import annotations

from loguru import logger

from galvostim.coords import convert_coord
from galvostim.protocol import Protocol, render
from galvostim.types import SpotConfig, Trigger, TransformConfig

from .skeleton import (
    append_position,
    append_pulse_train,
    append_trigger,
    close_master,
    open_master,
)
from .timing import TIME_OFFSET, EpisodeTiming, validate_experiment


def make_spot(config: SpotConfig, transform: TransformConfig) -> Protocol:
    """
    Build the command list of a single-spot experiment.

    The episode starts with the master loop at cycle 0. Triggering at cycle 0
    is unreliable on the DSP, so the trigger (if any) fires at TIME_OFFSET and
    the first pulse follows at the baseline, or once the trigger is done.
    """
    validate_experiment(config, transform)
    trigger = Trigger(config.trigger)
    timing = EpisodeTiming.from_ms(
        config.baseline,
        config.time_on,
        config.isi,
        config.episode_period,
        pulse_count=config.num_pulses,
        trigger=trigger,
        trigger_at=TIME_OFFSET,
    )
    galvo = convert_coord(
        config.pos, transform.scale_factor, transform.center_offset, 0
    )
    logger.info(
        "Programming Spot protocol at {} (galvo {}): {} pulse(s) of {} cycles "
        + "after {} cycles, episode {} cycles, {} reps, trigger {}",
        tuple(config.pos),
        tuple(galvo),
        config.num_pulses,
        timing.time_on,
        timing.lead,
        timing.episode,
        config.reps,
        trigger.name,
    )

    prot = Protocol()
    open_master(prot, config.reps)
    append_position(prot, 0, galvo)
    append_trigger(prot, TIME_OFFSET, trigger)
    append_pulse_train(prot, timing.lead, timing, config.num_pulses)
    close_master(prot, config.reps, timing.episode)
    return prot


def build_spot(config: SpotConfig, transform: TransformConfig) -> str:
    """Render a single-spot experiment as protocol text."""
    return render(make_spot(config, transform))
