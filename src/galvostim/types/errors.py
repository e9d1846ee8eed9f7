"""Exception hierarchy for protocol synthesis.

Every error raised by galvostim derives from `GalvoStimError`, and also from
the closest builtin so that callers can catch e.g. `ValueError` or `OSError`
without knowing about this package.
"""


class GalvoStimError(Exception):
    """Base exception for galvostim."""

    pass


class ResourceError(GalvoStimError, OSError):
    """A coordinate, pattern or calibration file is missing, unreadable or short."""

    pass


class DegenerateCalibrationError(GalvoStimError, ValueError):
    """Calibration points are not distinct enough on an axis to derive a scale."""

    pass


class AllocationError(GalvoStimError, MemoryError):
    """Storage for a protocol or its rendered text could not grow."""

    pass


class CommandFieldError(GalvoStimError, ValueError):
    """A command field is outside the range the device accepts."""

    pass


class ParameterError(GalvoStimError, ValueError):
    """Experiment parameters cannot describe a valid protocol."""

    pass


class ProtocolSealedError(GalvoStimError, RuntimeError):
    """A command was appended to a protocol that has already been rendered."""

    pass


class TransportError(GalvoStimError, ConnectionError):
    """The serial link to the scan controller failed."""

    pass
