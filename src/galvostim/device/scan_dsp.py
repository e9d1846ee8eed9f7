"""Driver for the galvo scan controller DSP over RS232.

The controller takes ASCII lines at 57600 baud, 8N1, no flow control. A
protocol is uploaded as rendered text (`C\\n` then one add command per
line); `X\\n` executes it. Direct-set commands position a channel
immediately, outside any protocol. Replies are not parsed.
"""

from __future__ import annotations

import serial  # pyserial package
from loguru import logger

from galvostim.protocol import CLEAR
from galvostim.types import (
    CTRL_EXECUTE,
    CTRL_SET_OFFSET,
    CTRL_SET_VALUE,
    MAX_CHANNEL,
    SerialConfig,
    TransportError,
)
from galvostim.util import format_error_response
from galvostim.util.defaults import DEFAULT_BAUDRATE, DEFAULT_TIMEOUT

from .device import Device


class ScanDSP(Device):
    connected = False
    port: str  # "COM3", "/dev/ttyUSB0" etc.
    required_config = {"port": str}

    def __init__(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUDRATE,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(port=port)
        self.port = port
        self._baudrate = baudrate
        self._timeout = timeout
        self._lines_sent = 0

    @classmethod
    def from_config(cls, config: SerialConfig) -> ScanDSP:
        return cls(config.port, baudrate=config.baudrate, timeout=config.timeout)

    def open(self) -> tuple[bool, str]:
        """
        Open the serial port. An already open port is closed and reopened.
        """
        if self.is_connected():
            self.close()
        try:
            self.ser = serial.Serial(
                self.port,
                baudrate=self._baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                xonxoff=False,
                rtscts=False,
                timeout=self._timeout,
            )
        except serial.SerialException:
            logger.exception("Error opening scan controller serial port.")
            self.connected = False
            return (
                False,
                f"Error opening scan controller serial port: {format_error_response()}",
            )
        self.connected = True
        logger.info("Connected to scan controller on port {}", self.port)
        return True, "Connected to scan controller on port " + self.port

    def close(self):
        if self.is_connected():
            self.ser.close()
            logger.info("Disconnected from scan controller on port {}", self.port)
        self.connected = False

    @property
    def lines_sent(self) -> int:
        """Protocol and command lines written since this object was created."""
        return self._lines_sent

    def is_connected(self) -> bool:
        return self.connected and hasattr(self, "ser") and self.ser.is_open

    def __enter__(self) -> ScanDSP:
        ok, msg = self.open()
        if not ok:
            raise TransportError(msg)
        return self

    def __exit__(self, *exc):
        self.close()

    ###################################################################
    # Commands
    ###################################################################

    def write_command(self, command: str):
        """Write raw text to the controller."""
        if not self.is_connected():
            raise TransportError(f"Scan controller on {self.port} is not connected")
        try:
            self.ser.write(command.encode("ascii"))
            self.ser.flush()
        except serial.SerialException as e:
            logger.exception("Error writing to scan controller.")
            raise TransportError(f"Error writing to {self.port}: {e}") from e
        self._lines_sent += command.count("\n")

    def clear(self):
        self.write_command(CLEAR)

    def upload(self, protocol: str):
        """Send a rendered protocol (it carries its own leading clear)."""
        logger.debug(
            "Uploading protocol of {} lines to {}", protocol.count("\n"), self.port
        )
        self.write_command(protocol)

    def execute(self):
        self.write_command(CTRL_EXECUTE + "\n")

    def run(self, protocol: str):
        """Upload then execute."""
        self.upload(protocol)
        self.execute()

    def set_value(self, channel: int, value: int):
        """Set a channel immediately, e.g. park a galvo at `value` microcounts."""
        _check_channel(channel)
        self.write_command(f"{CTRL_SET_VALUE},{channel},{int(value)}\n")

    def set_offset(self, channel: int, counts: int):
        _check_channel(channel)
        self.write_command(f"{CTRL_SET_OFFSET},{channel},{int(counts)}\n")


def _check_channel(channel: int):
    if not 0 <= channel <= MAX_CHANNEL:
        raise ValueError(f"Channel {channel} outside 0..{MAX_CHANNEL}")
