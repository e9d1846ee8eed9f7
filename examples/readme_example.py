import math

import galvostim.util
from galvostim.coords import calc_scaling
from galvostim.io import read_calibration
from galvostim.patterns import build_grid
from galvostim.types import GridConfig, PixelCoord, TransformConfig, Trigger

galvostim.util.start_log(log_to_file=False, log_to_stdout=True, log_level="DEBUG")

# scale factor from points marked on a calibration image
scale = calc_scaling(read_calibration("calibration.txt"))
transform = TransformConfig(scale_factor=scale, center_offset=PixelCoord(256, 256))

config = GridConfig(
    baseline=100,  # ms
    time_on=10,  # ms
    isi=50,  # ms
    num_pulses=3,
    iterations=2,
    dims=PixelCoord(5, 5),
    start_pos=PixelCoord(200, 200),
    spacing=PixelCoord(25, 25),
    rot_angle=math.radians(15),
    trigger=Trigger.OUT,
)

protocol = build_grid(config, transform)

with open("grid_protocol.txt", "w") as f:
    f.write(protocol)
