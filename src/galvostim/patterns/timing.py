"""Timing policy shared by all pattern generators.

All user-facing times are milliseconds; the device counts 10 us cycles.
Before conversion two coercions apply:

1. ISI := max(ISI, pulse width), pulses never overlap.
2. episode := max(episode, baseline + pulse_count * ISI), an episode always
   holds its own baseline and pulse train.
"""

from __future__ import annotations

from dataclasses import dataclass

from galvostim.types import (
    ExperimentConfig,
    ParameterError,
    TransformConfig,
    Trigger,
)

CYCLES_PER_MS = 100  # 10 us cycle
TIME_OFFSET = 10  # cycles from master loop entry to the first episode
PROT_PERIOD = 50  # settle cycles closing every repetition of the master loop
TRIG_LEN = 10  # cycles, width of a trigger-out pulse
MOVE_TIME = 140  # cycles, galvo smart-move + jump time, shortest safe rapid ISI


def ms_to_cycles(ms: int) -> int:
    return ms * CYCLES_PER_MS


def trigger_cycles(trigger: Trigger) -> int:
    """Cycles a trigger occupies on the digital-out channel."""
    return TRIG_LEN if Trigger(trigger) is Trigger.OUT else 0


@dataclass(frozen=True)
class EpisodeTiming:
    """Coerced episode timing, in cycles.

    Attributes
    ----------
    baseline : int
        Requested delay from episode start to the first pulse.
    time_on : int
        Pulse width.
    isi : int
        Pulse-to-pulse interval, at least `time_on`.
    lead : int
        Actual delay from episode start to the first pulse: `baseline`, pushed
        back when a trigger would still be running.
    episode : int
        Length of one episode, at least `lead + pulse_count * isi`.
    iterations : int
        Episodes delivered at each spot.
    """

    baseline: int
    time_on: int
    isi: int
    lead: int
    episode: int
    iterations: int = 1

    @property
    def spot_period(self) -> int:
        """Cycles spent at one spot (all of its iterations)."""
        return self.episode * self.iterations

    @classmethod
    def from_ms(
        cls,
        baseline: int,
        time_on: int,
        isi: int,
        episode_period: int,
        pulse_count: int,
        iterations: int = 1,
        trigger: Trigger = Trigger.NONE,
        trigger_at: int = 0,
    ) -> EpisodeTiming:
        """
        Coerce millisecond parameters and convert them to cycles.

        `trigger_at` is the trigger's offset (cycles) from the episode start;
        the first pulse never starts before the trigger has finished.
        """
        trigger = Trigger(trigger)
        isi = max(isi, time_on)
        episode_period = max(episode_period, baseline + pulse_count * isi)

        baseline = ms_to_cycles(baseline)
        time_on = ms_to_cycles(time_on)
        isi = ms_to_cycles(isi)
        episode = ms_to_cycles(episode_period)

        lead = baseline
        if trigger is not Trigger.NONE:
            lead = max(baseline, trigger_at + trigger_cycles(trigger))
        episode = max(episode, lead + pulse_count * isi)
        return cls(baseline, time_on, isi, lead, episode, iterations)


def _check_positive(name: str, value: int):
    if value < 1:
        raise ParameterError(f"{name} must be at least 1, got {value}")


def validate_experiment(config: ExperimentConfig, transform: TransformConfig):
    """Reject parameter combinations that cannot describe a protocol."""
    for name in ("baseline", "isi", "episode_period"):
        if getattr(config, name) < 0:
            raise ParameterError(
                f"{name} must not be negative, got {getattr(config, name)}"
            )
    if config.time_on <= 0:
        raise ParameterError(f"time_on must be positive, got {config.time_on}")
    _check_positive("reps", config.reps)
    for name in ("num_pulses", "iterations"):
        if hasattr(config, name):
            _check_positive(name, getattr(config, name))
    if hasattr(config, "dims"):
        _check_positive("dims.x", config.dims[0])
        _check_positive("dims.y", config.dims[1])
    if transform.scale_factor <= 0:
        raise ParameterError(
            f"scale_factor must be positive, got {transform.scale_factor}"
        )
    try:
        Trigger(config.trigger)
    except ValueError as e:
        raise ParameterError(f"Unknown trigger mode {config.trigger!r}") from e
