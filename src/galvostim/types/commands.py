"""Device vocabulary: scan characters, channels and output levels.

Channel map of the scan-control DSP (time-multiplexed serial interface, one
frame per 10 us cycle):

    ch  function
    0   reserved
    1   analog out configuration (unused)
    2   analog out value (unused)
    3   position galvo 0 (Y mirror)
    4   position galvo 1 (X mirror)
    5   position galvo 2 (unused)
    6   position galvo 3 (unused)
    7   digital out, low bits select the output levels
    8   reserved
    9   loop pseudo-channel (not read by the DSP)
"""

from enum import Enum, IntEnum

# Channels
CH_Y = 3
CH_X = 4
CH_TRIG = 7
CH_LOOP = 9
MAX_CHANNEL = 9

# Control characters
CTRL_CLEAR = "C"
CTRL_ADD = "A"
CTRL_EXECUTE = "X"
CTRL_SET_VALUE = "V"
CTRL_SET_OFFSET = "O"

# Field limits
CYCLE_BITS = 48
VALUE_BITS = 48


class ScanChar(str, Enum):
    """Scan command characters understood by the DSP."""

    SET = "V"
    RELATIVE = "R"
    INCREMENT = "I"
    INCREMENT_INCREMENT = "J"
    OFFSET = "O"
    LOOP_START = "S"
    LOOP_END = "E"
    WAIT = "0"
    TRIG_RISING = "U"
    TRIG_FALLING = "D"


class LoopMark(str, Enum):
    """Which end of a loop a loop command marks."""

    START = "S"
    END = "E"


class Trigger(IntEnum):
    """How an episode is synchronised with the outside world."""

    NONE = 0
    IN = 1
    OUT = 2


class TrigCfg(IntEnum):
    """Digital-out levels on the trigger channel.

    T-OUT carries a trigger to another device, D-OUT gates the laser shutter.
    """

    BOTH_LOW = 0
    TRIG_HIGH = 2
    LASER_HIGH = 4
    BOTH_HIGH = 6


class TrigEdge(IntEnum):
    """Edge waited for by a trigger-in command."""

    RISING = 1
    FALLING = 2
