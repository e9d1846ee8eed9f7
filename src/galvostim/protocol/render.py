"""Serialization of a protocol into the DSP's line-oriented wire format."""

from __future__ import annotations

from loguru import logger

from galvostim.types import CTRL_CLEAR, AllocationError

from .builder import Protocol

STOPCHAR = "\n"
CLEAR = CTRL_CLEAR + STOPCHAR
MAX_PROTOCOL_LINES = 10000  # device command memory, including the clear line


def render(protocol: Protocol) -> str:
    """
    Render `protocol` as wire text.

    The text starts with a clear command and has one line per command, in
    append order:

        C
        AS,0,9,10
        AV,0,4,-5000
        ...

    No execute command is appended; issuing it is the transport's job. The
    protocol is sealed afterwards.
    """
    num_lines = len(protocol) + 1
    if num_lines > MAX_PROTOCOL_LINES:
        logger.warning(
            "Protocol has {} lines, more than the {} the device can hold",
            num_lines,
            MAX_PROTOCOL_LINES,
        )
    try:
        text = CLEAR + "".join(cmd.to_line() + STOPCHAR for cmd in protocol)
    except MemoryError as e:
        logger.error("Failure to allocate protocol string for {} lines", num_lines)
        raise AllocationError(
            f"Could not render protocol of {num_lines} lines"
        ) from e
    protocol.seal()
    logger.debug("Rendered protocol: {} lines, {} characters", num_lines, len(text))
    return text
