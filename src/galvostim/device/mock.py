from __future__ import annotations

from loguru import logger

from galvostim.types import TransportError

from .scan_dsp import ScanDSP


class MockScanDSP(ScanDSP):
    """ScanDSP that records what it would have written instead of using a port."""

    def __init__(self, port: str = "MOCK", **kwargs):
        super().__init__(port, **kwargs)
        self.written: list[str] = []

    def open(self) -> tuple[bool, str]:
        self.connected = True
        logger.info("Connected to scan controller: MockScanDSP")
        return True, "Connected to scan controller: MockScanDSP"

    def close(self):
        self.connected = False
        logger.info("Disconnected from scan controller: {}", "MockScanDSP")

    def is_connected(self) -> bool:
        return self.connected

    def write_command(self, command: str):
        if not self.is_connected():
            raise TransportError(f"Scan controller on {self.port} is not connected")
        self.written.append(command)
        self._lines_sent += command.count("\n")

    @property
    def transcript(self) -> str:
        """Everything written so far, concatenated."""
        return "".join(self.written)
