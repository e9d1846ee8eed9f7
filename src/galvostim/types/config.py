"""Configuration types for experiments, transforms and the serial link."""

from dataclasses import dataclass

from mashumaro import DataClassDictMixin
from mashumaro.config import BaseConfig
from mashumaro.types import Discriminator

from galvostim.util.defaults import DEFAULT_BAUDRATE, DEFAULT_TIMEOUT

from .commands import Trigger
from .coords import PixelCoord


@dataclass(kw_only=True, frozen=True)
class ExperimentConfig(DataClassDictMixin):
    """Base configuration for a photostimulation experiment.

    To be subclassed for each pattern type. All times are in milliseconds;
    they are coerced and converted to device cycles by the generators.
    """

    class Config(BaseConfig):
        discriminator = Discriminator(
            field="pattern_type",
            include_subtypes=True,
        )

    pattern_type: str
    baseline: int = 0  # ms before the first pulse of an episode
    time_on: int  # ms, pulse width
    isi: int = 0  # ms, inter-pulse interval (coerced to >= time_on)
    episode_period: int = 0  # ms (coerced to fit baseline + pulse train)
    reps: int = 1  # master loop repetitions
    trigger: Trigger = Trigger.NONE


@dataclass(kw_only=True, frozen=True)
class SpotConfig(ExperimentConfig):
    """Single fixed spot."""

    pattern_type: str = "Spot"
    num_pulses: int = 1
    pos: PixelCoord


@dataclass(kw_only=True, frozen=True)
class GridConfig(ExperimentConfig):
    """Rectangular raster of spots, one full episode per spot."""

    pattern_type: str = "Grid"
    num_pulses: int = 1
    iterations: int = 1  # episodes per spot
    dims: PixelCoord  # number of columns (x) and rows (y)
    start_pos: PixelCoord
    spacing: PixelCoord
    rot_angle: float = 0.0  # radians
    rot_center: PixelCoord | None = None  # defaults to the grid centroid


@dataclass(kw_only=True, frozen=True)
class TargetConfig(ExperimentConfig):
    """Arbitrary list of targets read from a coordinate file."""

    pattern_type: str = "Target"
    num_pulses: int = 1
    iterations: int = 1
    target_file: str
    num_points: int | None = None  # None reads every record in the file
    rot_angle: float = 0.0
    rot_center: PixelCoord | None = None  # defaults to the target centroid


@dataclass(kw_only=True, frozen=True)
class RapidGridConfig(ExperimentConfig):
    """Raster swept with one trigger and one pulse per spot, spaced by ISI."""

    pattern_type: str = "RapidGrid"
    dims: PixelCoord
    start_pos: PixelCoord
    spacing: PixelCoord
    rot_angle: float = 0.0
    rot_center: PixelCoord | None = None


@dataclass(kw_only=True, frozen=True)
class RapidTargetConfig(ExperimentConfig):
    """Target list swept with one trigger and one pulse per spot, spaced by ISI."""

    pattern_type: str = "RapidTarget"
    target_file: str
    num_points: int | None = None
    rot_angle: float = 0.0
    rot_center: PixelCoord | None = None


@dataclass(kw_only=True, frozen=True)
class PatternConfig(ExperimentConfig):
    """Targets defined by 1-based grid indices in a pattern file."""

    pattern_type: str = "Pattern"
    num_pulses: int = 1
    iterations: int = 1
    pattern_file: str
    start_pos: PixelCoord
    spacing: PixelCoord
    rot_angle: float = 0.0
    rot_center: PixelCoord | None = None


@dataclass(kw_only=True, frozen=True)
class TransformConfig(DataClassDictMixin):
    """Pixel to galvo transform shared by every generator in a session.

    `scale_factor` is in microcounts per pixel, normally from
    `galvostim.coords.calc_scaling`.
    """

    scale_factor: int
    center_offset: PixelCoord = PixelCoord(0, 0)


@dataclass(kw_only=True, frozen=True)
class SerialConfig(DataClassDictMixin):
    """RS232 link to the scan controller (8 data bits, no parity, 1 stop bit)."""

    port: str
    baudrate: int = DEFAULT_BAUDRATE
    timeout: float = DEFAULT_TIMEOUT
