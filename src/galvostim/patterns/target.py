"""Target-list protocols: a full episode at each of an arbitrary set of spots."""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from galvostim.coords import convert_coord, rotate_points
from galvostim.io import read_coords
from galvostim.protocol import Protocol, render
from galvostim.types import (
    GalvoCoord,
    ParameterError,
    PixelCoord,
    TargetConfig,
    TransformConfig,
    Trigger,
)

from .skeleton import append_episode, append_position, close_master, open_master
from .timing import TIME_OFFSET, EpisodeTiming, validate_experiment


def resolve_targets(
    target_file: str,
    num_points: int | None,
    points: Sequence[PixelCoord] | None = None,
) -> list[PixelCoord]:
    """Targets given directly, or else read from `target_file`."""
    if points is None:
        return read_coords(target_file, num_points)
    points = [PixelCoord(int(p[0]), int(p[1])) for p in points]
    if num_points is not None:
        if len(points) < num_points:
            raise ParameterError(
                f"{num_points} targets requested but only {len(points)} given"
            )
        points = points[:num_points]
    if not points:
        raise ParameterError("No targets given")
    return points


def targets_to_galvo(
    points: Sequence[PixelCoord],
    transform: TransformConfig,
    rot_angle: float = 0.0,
    rot_center: PixelCoord | None = None,
) -> list[GalvoCoord]:
    """Rotate the target set in pixel space (about its centroid), then convert."""
    rotated = rotate_points(points, rot_angle, rot_center)
    return [
        convert_coord(p, transform.scale_factor, transform.center_offset, 0)
        for p in rotated
    ]


def make_target_sequence(
    points: Sequence[PixelCoord],
    config: TargetConfig,
    transform: TransformConfig,
    label: str = "Target",
) -> Protocol:
    """
    Episode-per-target protocol over an already resolved point list.

    Target k is visited at TIME_OFFSET + k * E (E = episode x iterations):
    move there, then run the episode.
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
    galvo_points = targets_to_galvo(
        points, transform, config.rot_angle, config.rot_center
    )
    logger.info(
        f"Programming {label} protocol with the following parameters:"
        + f"\nTargets: {len(galvo_points)}, rotation {config.rot_angle} rad"
        + f"\nEpisode: {timing.episode} cycles x {timing.iterations} iterations"
        + f"\nPulses: {config.num_pulses} x {timing.time_on} cycles, ISI {timing.isi}"
        + f"\nFirst pulse after: {timing.lead} cycles"
        + f"\nTrigger: {trigger.name}, reps: {config.reps}"
    )

    prot = Protocol()
    open_master(prot, config.reps)
    for k, pos in enumerate(galvo_points):
        episode_start = TIME_OFFSET + k * timing.spot_period
        append_position(prot, episode_start, pos)
        append_episode(prot, episode_start, timing, config.num_pulses, trigger)
    close_master(
        prot, config.reps, TIME_OFFSET + len(galvo_points) * timing.spot_period
    )
    return prot


def make_target(
    config: TargetConfig,
    transform: TransformConfig,
    points: Sequence[PixelCoord] | None = None,
) -> Protocol:
    """Build a target-list experiment; targets come from `config.target_file`
    unless `points` is given."""
    validate_experiment(config, transform)
    targets = resolve_targets(config.target_file, config.num_points, points)
    return make_target_sequence(targets, config, transform)


def build_target(
    config: TargetConfig,
    transform: TransformConfig,
    points: Sequence[PixelCoord] | None = None,
) -> str:
    """Render a target-list experiment as protocol text."""
    return render(make_target(config, transform, points))
