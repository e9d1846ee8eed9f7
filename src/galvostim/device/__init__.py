"""Hardware drivers: the scan controller DSP and a recording mock."""

from .device import Device
from .mock import MockScanDSP
from .scan_dsp import ScanDSP

__all__ = ["Device", "MockScanDSP", "ScanDSP"]
