import galvostim.util
from galvostim.device import ScanDSP
from galvostim.patterns import build_rapid_target
from galvostim.types import PixelCoord, RapidTargetConfig, TransformConfig, Trigger

PORT = "/dev/ttyUSB0"

galvostim.util.start_log(log_to_file=True, log_to_stdout=True)

transform = TransformConfig(scale_factor=120, center_offset=PixelCoord(256, 256))
config = RapidTargetConfig(
    time_on=2,
    isi=20,
    reps=10,
    target_file="targets.txt",  # <x>\t<y> pixels per line
    trigger=Trigger.IN,  # wait for the imaging frame trigger
)

with ScanDSP(PORT) as dsp:
    dsp.run(build_rapid_target(config, transform))
