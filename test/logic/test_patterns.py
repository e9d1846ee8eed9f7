"""Tests for the pattern generators: exact protocols for small cases plus
structural checks (balanced loops, loop timing) across all patterns."""

import itertools
import math
from collections import Counter

import pytest

from galvostim.patterns import (
    PROT_PERIOD,
    TIME_OFFSET,
    TRIG_LEN,
    EpisodeTiming,
    build_grid,
    build_pattern,
    build_protocol,
    build_rapid_grid,
    build_rapid_target,
    build_spot,
    build_target,
    get_available_patterns,
    make_grid,
    make_protocol,
    make_spot,
    make_target,
    ms_to_cycles,
)
from galvostim.patterns.raster import plan_raster
from galvostim.protocol import loop_balance, match_loops, parse_protocol
from galvostim.types import (
    ExperimentConfig,
    GridConfig,
    ParameterError,
    PatternConfig,
    PixelCoord,
    RapidGridConfig,
    RapidTargetConfig,
    ResourceError,
    ScanChar,
    SpotConfig,
    TargetConfig,
    TransformConfig,
    Trigger,
)

CENTERED = TransformConfig(scale_factor=100, center_offset=PixelCoord(256, 256))


def lines(text):
    assert text.startswith("C\n")
    return text.splitlines()[1:]


@pytest.fixture
def coord_file(tmp_path):
    path = tmp_path / "targets.txt"
    path.write_text("10\t20\n30\t40\n")
    return str(path)


@pytest.fixture
def pattern_file(tmp_path):
    path = tmp_path / "pattern.txt"
    path.write_text("2\t3\t3\n1\t1\n3\t2\n")
    return str(path)


class TestTiming:
    def test_isi_and_episode_coerced(self):
        timing = EpisodeTiming.from_ms(
            baseline=10, time_on=5, isi=2, episode_period=0, pulse_count=3
        )
        assert timing.isi == 500
        assert timing.episode == 2500
        assert timing.lead == 1000

    def test_trigger_pushes_first_pulse(self):
        timing = EpisodeTiming.from_ms(
            0, 5, 0, 0, pulse_count=1, trigger=Trigger.OUT, trigger_at=10
        )
        assert timing.lead == 20
        assert timing.episode == 520

    def test_long_episode_kept(self):
        timing = EpisodeTiming.from_ms(0, 1, 0, 50, pulse_count=1, iterations=3)
        assert timing.episode == 5000
        assert timing.spot_period == 15000

    @pytest.mark.parametrize("trigger", list(Trigger))
    def test_coercion_over_parameter_grid(self, trigger):
        for baseline, time_on, isi, episode_period, pulse_count, trigger_at in (
            itertools.product((0, 3), (1, 4), (0, 2, 7), (0, 9, 60), (1, 3), (0, 10))
        ):
            timing = EpisodeTiming.from_ms(
                baseline,
                time_on,
                isi,
                episode_period,
                pulse_count=pulse_count,
                trigger=trigger,
                trigger_at=trigger_at,
            )
            assert timing.isi == ms_to_cycles(max(isi, time_on))
            assert timing.isi >= timing.time_on
            assert timing.lead >= timing.baseline
            if trigger is Trigger.OUT:
                assert timing.lead >= trigger_at + TRIG_LEN
            assert timing.episode >= timing.lead + pulse_count * timing.isi
            assert timing.episode >= ms_to_cycles(episode_period)


class TestSpot:
    def test_single_pulse_exact(self):
        config = SpotConfig(baseline=10, time_on=5, pos=PixelCoord(256, 256))
        assert build_spot(config, CENTERED) == (
            "C\n"
            "AS,0,9,1\n"
            "AV,0,4,0\n"
            "AV,0,3,0\n"
            "AV,1000,7,4\n"
            "AV,1500,7,0\n"
            "AE,1550,9,1\n"
        )

    def test_trigger_out_never_at_cycle_zero(self):
        config = SpotConfig(
            time_on=5, pos=PixelCoord(266, 256), reps=2, trigger=Trigger.OUT
        )
        assert lines(build_spot(config, CENTERED)) == [
            "AS,0,9,2",
            "AV,0,4,-1000",
            "AV,0,3,0",
            "AV,10,7,2",
            "AV,20,7,0",
            "AV,20,7,4",
            "AV,520,7,0",
            "AE,1140,9,2",
        ]

    def test_trigger_in(self):
        config = SpotConfig(
            baseline=1, time_on=5, pos=PixelCoord(256, 256), trigger=Trigger.IN
        )
        assert lines(build_spot(config, CENTERED))[3:5] == ["AU,10,7,0", "AV,100,7,4"]

    def test_pulse_train(self):
        config = SpotConfig(
            baseline=10, time_on=5, isi=10, num_pulses=3, pos=PixelCoord(256, 256)
        )
        assert lines(build_spot(config, CENTERED)) == [
            "AS,0,9,1",
            "AV,0,4,0",
            "AV,0,3,0",
            "AS,1000,9,3",
            "AV,1000,7,4",
            "AV,1500,7,0",
            "AE,4000,9,3",
            "AE,4050,9,1",
        ]

    def test_six_commands_without_trigger(self):
        prot = make_spot(SpotConfig(time_on=1, pos=PixelCoord(0, 0)), CENTERED)
        assert [cmd.scan for cmd in prot] == [
            ScanChar.LOOP_START,
            ScanChar.SET,
            ScanChar.SET,
            ScanChar.SET,
            ScanChar.SET,
            ScanChar.LOOP_END,
        ]


class TestGrid:
    def test_small_grid_exact(self):
        config = GridConfig(
            baseline=1,
            time_on=1,
            dims=PixelCoord(2, 3),
            start_pos=PixelCoord(256, 256),
            spacing=PixelCoord(10, 10),
        )
        assert lines(build_grid(config, CENTERED)) == [
            "AS,0,9,1",
            "AV,0,4,0",
            "AV,0,3,0",
            "AS,10,9,3",
            "AS,10,9,2",
            "AV,110,7,4",
            "AV,210,7,0",
            "AR,210,4,-1000",
            "AE,410,9,2",
            "AR,410,3,-1000",
            "AR,410,4,2000",
            "AE,1210,9,3",
            "AE,1260,9,1",
        ]

    def test_iterations_and_pulse_train(self):
        config = GridConfig(
            time_on=1,
            isi=2,
            num_pulses=2,
            iterations=2,
            dims=PixelCoord(2, 2),
            start_pos=PixelCoord(0, 0),
            spacing=PixelCoord(1, 1),
            trigger=Trigger.OUT,
        )
        prot = make_grid(config, CENTERED)
        spans = {(s.start_cycle, s.repetitions, s.depth): s for s in match_loops(prot)}
        # episode: lead 10 + 2 pulses x 200 = 410 cycles
        iteration = spans[(10, 2, 3)]
        assert iteration.end_cycle == 10 + 2 * 410
        train = spans[(20, 2, 4)]
        assert train.end_cycle == 20 + 2 * 200
        columns = spans[(10, 2, 2)]
        assert columns.end_cycle == 10 + 2 * 820

    def test_rotated_steps(self):
        raster = plan_raster(
            PixelCoord(2, 2),
            PixelCoord(0, 0),
            PixelCoord(10, 10),
            TransformConfig(scale_factor=1),
            rot_angle=math.pi / 2,
        )
        assert raster.rotated
        assert raster.start == (-10, 0)
        assert raster.col_step == (0, -10)
        assert raster.row_step == (10, 0)
        assert raster.row_return(2) == (0, 20)

    def test_rotated_grid_moves_both_axes(self):
        config = GridConfig(
            time_on=1,
            dims=PixelCoord(2, 2),
            start_pos=PixelCoord(0, 0),
            spacing=PixelCoord(10, 10),
            rot_angle=math.pi / 2,
        )
        prot = make_grid(config, CENTERED)
        rel = [cmd for cmd in prot if cmd.scan is ScanChar.RELATIVE]
        assert len(rel) == 6
        assert {cmd.channel for cmd in rel} == {3, 4}


class TestTarget:
    def test_two_targets_exact(self, coord_file):
        config = TargetConfig(time_on=1, target_file=coord_file)
        transform = TransformConfig(scale_factor=10)
        assert lines(build_target(config, transform)) == [
            "AS,0,9,1",
            "AV,10,4,-100",
            "AV,10,3,-200",
            "AV,10,7,4",
            "AV,110,7,0",
            "AV,110,4,-300",
            "AV,110,3,-400",
            "AV,110,7,4",
            "AV,210,7,0",
            "AE,260,9,1",
        ]

    def test_num_points_limits_targets(self, coord_file):
        config = TargetConfig(time_on=1, target_file=coord_file, num_points=1)
        prot = make_target(config, TransformConfig(scale_factor=10))
        assert sum(cmd.scan is ScanChar.SET and cmd.channel == 4 for cmd in prot) == 1

    def test_short_file(self, coord_file):
        config = TargetConfig(time_on=1, target_file=coord_file, num_points=3)
        with pytest.raises(ResourceError):
            make_target(config, CENTERED)

    def test_missing_file(self, tmp_path):
        config = TargetConfig(time_on=1, target_file=str(tmp_path / "nope.txt"))
        with pytest.raises(OSError):
            build_target(config, CENTERED)

    def test_explicit_points(self):
        config = TargetConfig(time_on=1, target_file="unused.txt")
        prot = make_target(config, CENTERED, points=[PixelCoord(256, 256)])
        assert prot.commands[1].value == 0

    def test_no_explicit_points(self):
        config = TargetConfig(time_on=1, target_file="unused.txt")
        with pytest.raises(ParameterError):
            make_target(config, CENTERED, points=[])

    def test_rotation_about_centroid(self):
        config = TargetConfig(time_on=1, target_file="unused.txt", rot_angle=math.pi)
        points = [PixelCoord(0, 0), PixelCoord(10, 0)]
        prot = make_target(config, TransformConfig(scale_factor=1), points=points)
        xs = [cmd.value for cmd in prot if cmd.scan is ScanChar.SET and cmd.channel == 4]
        assert xs == [-10, 0]


class TestRapid:
    @pytest.mark.parametrize("isi, warned", [(1, True), (2, False)])
    def test_warns_when_isi_beats_move_time(
        self, coord_file, log_messages, isi, warned
    ):
        config = RapidTargetConfig(time_on=1, isi=isi, target_file=coord_file)
        build_rapid_target(config, TransformConfig(scale_factor=10))
        warnings = [msg for level, msg in log_messages if level == "WARNING"]
        assert any("move time" in msg for msg in warnings) == warned

    def test_rapid_target_exact(self, coord_file):
        config = RapidTargetConfig(time_on=1, isi=2, target_file=coord_file)
        assert lines(build_rapid_target(config, TransformConfig(scale_factor=10))) == [
            "AS,0,9,1",
            "AV,10,4,-100",
            "AV,10,3,-200",
            "AV,10,7,4",
            "AV,110,7,0",
            "AV,210,4,-300",
            "AV,210,3,-400",
            "AV,210,7,4",
            "AV,310,7,0",
            "AE,460,9,1",
        ]

    def test_rapid_grid_exact(self):
        config = RapidGridConfig(
            time_on=1,
            isi=2,
            dims=PixelCoord(2, 2),
            start_pos=PixelCoord(0, 0),
            spacing=PixelCoord(1, 1),
            trigger=Trigger.OUT,
        )
        assert lines(build_rapid_grid(config, TransformConfig(scale_factor=100))) == [
            "AS,0,9,1",
            "AV,0,4,0",
            "AV,0,3,0",
            "AV,10,7,2",
            "AV,20,7,0",
            "AS,20,9,2",
            "AS,20,9,2",
            "AV,20,7,4",
            "AV,120,7,0",
            "AR,220,4,-100",
            "AE,420,9,2",
            "AR,420,3,-100",
            "AR,420,4,200",
            "AE,820,9,2",
            "AE,870,9,1",
        ]


class TestPattern:
    def test_indices_mapped_to_grid(self, pattern_file):
        config = PatternConfig(
            time_on=1,
            pattern_file=pattern_file,
            start_pos=PixelCoord(100, 100),
            spacing=PixelCoord(10, 20),
        )
        prot = make_protocol(config, TransformConfig(scale_factor=1))
        moves = [
            (cmd.channel, cmd.value)
            for cmd in prot
            if cmd.scan is ScanChar.SET and cmd.channel in (3, 4)
        ]
        assert moves == [(4, -100), (3, -100), (4, -120), (3, -120)]

    def test_same_skeleton_as_target(self, pattern_file, tmp_path):
        coords = tmp_path / "coords.txt"
        coords.write_text("100\t100\n120\t120\n")
        transform = TransformConfig(scale_factor=1)
        pattern = PatternConfig(
            time_on=1,
            pattern_file=pattern_file,
            start_pos=PixelCoord(100, 100),
            spacing=PixelCoord(10, 20),
        )
        target = TargetConfig(time_on=1, target_file=str(coords))
        assert build_pattern(pattern, transform) == build_target(target, transform)


ALL_CONFIGS = {
    "Spot": lambda files: SpotConfig(
        baseline=2, time_on=1, isi=3, num_pulses=4, pos=PixelCoord(5, 5), reps=3
    ),
    "Grid": lambda files: GridConfig(
        baseline=2,
        time_on=1,
        num_pulses=2,
        iterations=3,
        dims=PixelCoord(3, 4),
        start_pos=PixelCoord(0, 0),
        spacing=PixelCoord(5, 5),
        rot_angle=0.3,
        trigger=Trigger.IN,
        reps=2,
    ),
    "Target": lambda files: TargetConfig(
        time_on=1,
        num_pulses=2,
        iterations=2,
        target_file=files["coords"],
        trigger=Trigger.OUT,
    ),
    "RapidGrid": lambda files: RapidGridConfig(
        time_on=1,
        dims=PixelCoord(3, 2),
        start_pos=PixelCoord(0, 0),
        spacing=PixelCoord(5, 5),
        trigger=Trigger.OUT,
    ),
    "RapidTarget": lambda files: RapidTargetConfig(
        time_on=1, target_file=files["coords"], rot_angle=1.0
    ),
    "Pattern": lambda files: PatternConfig(
        time_on=1,
        iterations=2,
        pattern_file=files["pattern"],
        start_pos=PixelCoord(0, 0),
        spacing=PixelCoord(5, 5),
    ),
}


class TestAllPatterns:
    def test_registry_covers_every_pattern(self):
        assert set(get_available_patterns()) == set(ALL_CONFIGS)

    @pytest.mark.parametrize("name", sorted(ALL_CONFIGS))
    def test_structure(self, name, coord_file, pattern_file):
        config = ALL_CONFIGS[name]({"coords": coord_file, "pattern": pattern_file})
        prot = make_protocol(config, CENTERED)
        commands = prot.commands
        assert loop_balance(commands) == 0
        spans = match_loops(commands)
        master = [s for s in spans if s.depth == 0]
        assert len(master) == 1
        assert master[0].start_cycle == 0
        assert commands[0].scan is ScanChar.LOOP_START
        assert commands[-1].scan is ScanChar.LOOP_END
        assert all(s.end_cycle > s.start_cycle for s in spans)
        # no trigger edge at cycle zero
        assert not any(
            cmd.channel == 7 and cmd.cycle == 0
            for cmd in commands
            if cmd.scan is not ScanChar.LOOP_START
        )
        # rendering is deterministic and round-trips
        text = build_protocol(config, CENTERED)
        assert text == build_protocol(config, CENTERED)
        assert parse_protocol(text) == list(commands)

    def test_unknown_pattern_type(self):
        config = ExperimentConfig(pattern_type="Spiral", time_on=1)
        with pytest.raises(ParameterError):
            make_protocol(config, CENTERED)


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"time_on": 0},
            {"time_on": 1, "reps": 0},
            {"time_on": 1, "num_pulses": 0},
            {"time_on": 1, "baseline": -1},
            {"time_on": 1, "isi": -1},
            {"time_on": 1, "episode_period": -5},
        ],
    )
    def test_spot_parameters(self, kwargs):
        with pytest.raises(ParameterError):
            build_spot(SpotConfig(pos=PixelCoord(0, 0), **kwargs), CENTERED)

    @pytest.mark.parametrize(
        "dims, iterations",
        [(PixelCoord(0, 2), 1), (PixelCoord(2, 0), 1), (PixelCoord(2, 2), 0)],
    )
    def test_grid_parameters(self, dims, iterations):
        config = GridConfig(
            time_on=1,
            dims=dims,
            iterations=iterations,
            start_pos=PixelCoord(0, 0),
            spacing=PixelCoord(1, 1),
        )
        with pytest.raises(ParameterError):
            build_grid(config, CENTERED)

    def test_scale_factor(self):
        config = SpotConfig(time_on=1, pos=PixelCoord(0, 0))
        with pytest.raises(ValueError):
            build_spot(config, TransformConfig(scale_factor=0))

    def test_bad_trigger(self):
        config = SpotConfig(time_on=1, pos=PixelCoord(0, 0), trigger=7)
        with pytest.raises(ParameterError):
            build_spot(config, CENTERED)


SWEEP_CONFIGS = {
    "Spot": lambda files, common, repeat: SpotConfig(
        pos=PixelCoord(5, 5), num_pulses=repeat["num_pulses"], **common
    ),
    "Grid": lambda files, common, repeat: GridConfig(
        dims=PixelCoord(3, 2),
        start_pos=PixelCoord(0, 0),
        spacing=PixelCoord(5, 5),
        rot_angle=0.3,
        **repeat,
        **common,
    ),
    "Target": lambda files, common, repeat: TargetConfig(
        target_file=files["coords"], **repeat, **common
    ),
    "RapidGrid": lambda files, common, repeat: RapidGridConfig(
        dims=PixelCoord(3, 2),
        start_pos=PixelCoord(0, 0),
        spacing=PixelCoord(5, 5),
        **common,
    ),
    "RapidTarget": lambda files, common, repeat: RapidTargetConfig(
        target_file=files["coords"], **common
    ),
    "Pattern": lambda files, common, repeat: PatternConfig(
        pattern_file=files["pattern"],
        start_pos=PixelCoord(0, 0),
        spacing=PixelCoord(5, 5),
        **repeat,
        **common,
    ),
}


def expected_loops(config, num_points):
    """(repetitions, end - start) of every loop the generator should emit."""
    name = config.pattern_type
    rapid = name.startswith("Rapid")
    num_cols, num_rows = getattr(config, "dims", (1, 1))
    if name == "RapidGrid":
        pulse_count = num_cols * num_rows
    elif name == "RapidTarget":
        pulse_count = num_points
    else:
        pulse_count = config.num_pulses
    timing = EpisodeTiming.from_ms(
        config.baseline,
        config.time_on,
        config.isi,
        config.episode_period,
        pulse_count=pulse_count,
        iterations=getattr(config, "iterations", 1),
        trigger=config.trigger,
        trigger_at=TIME_OFFSET if name == "Spot" else 0,
    )

    if rapid:
        body_end = TIME_OFFSET + timing.episode
    elif name == "Spot":
        body_end = timing.episode
    elif name == "Grid":
        body_end = TIME_OFFSET + num_cols * num_rows * timing.spot_period
    else:
        body_end = TIME_OFFSET + num_points * timing.spot_period
    loops = [(config.reps, config.reps * (body_end + PROT_PERIOD))]

    if name == "Grid":
        loops.append((num_rows, num_rows * num_cols * timing.spot_period))
        loops.append((num_cols, num_cols * timing.spot_period))
    elif name == "RapidGrid":
        loops.append((num_rows, num_rows * num_cols * timing.isi))
        loops.append((num_cols, num_cols * timing.isi))

    if not rapid:
        # grid and spot bodies hold one episode, target lists one per point
        episodes = num_points if name in ("Target", "Pattern") else 1
        if timing.iterations > 1:
            iteration_loop = (timing.iterations, timing.iterations * timing.episode)
            loops += [iteration_loop] * episodes
        if config.num_pulses > 1:
            loops += [(config.num_pulses, config.num_pulses * timing.isi)] * episodes
    return Counter(loops)


class TestLoopTiming:
    @pytest.mark.parametrize("trigger", list(Trigger))
    @pytest.mark.parametrize("name", sorted(SWEEP_CONFIGS))
    def test_every_loop_ends_at_start_plus_n_dt(
        self, name, trigger, coord_file, pattern_file
    ):
        files = {"coords": coord_file, "pattern": pattern_file}
        grid = itertools.product(
            (0, 3), (1, 4), (0, 2, 7), (0, 60), (1, 3), (1, 3), (1, 2)
        )
        for baseline, time_on, isi, episode_period, reps, pulses, iters in grid:
            common = dict(
                baseline=baseline,
                time_on=time_on,
                isi=isi,
                episode_period=episode_period,
                reps=reps,
                trigger=trigger,
            )
            repeat = dict(num_pulses=pulses, iterations=iters)
            config = SWEEP_CONFIGS[name](files, common, repeat)
            spans = match_loops(make_protocol(config, CENTERED).commands)
            assert [s.start_cycle for s in spans if s.depth == 0] == [0]
            found = Counter(
                (s.repetitions, s.end_cycle - s.start_cycle) for s in spans
            )
            assert found == expected_loops(config, num_points=2), (name, common, repeat)
