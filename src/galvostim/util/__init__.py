# -*- coding: utf-8 -*-
"""
Utility functions and constants for galvostim.

- Logging configuration and management (loguru)
- Package-wide defaults (log level, serial link settings, config directory)
- Serial port discovery (pyserial)

Examples
--------
Logging to the console while building protocols:
```python
from galvostim.util import start_log
start_log(log_to_file=False, log_to_stdout=True, log_level="DEBUG")
```

See Also
--------
galvostim.util.logging : Logging configuration
galvostim.util.defaults : Default values
"""

from .defaults import (
    CONFIG_DIR,
    DEFAULT_BAUDRATE,
    DEFAULT_LOGLEVEL,
    DEFAULT_TIMEOUT,
    SINGLE_LINE_ERR_LOG,
)
from .check_hw import get_hw_ports
from .logging import (
    clear_log,
    format_error_response,
    get_log_filename,
    log_default_path,
    shutdown_log,
    start_log,
)

__all__ = [
    "CONFIG_DIR",
    "DEFAULT_BAUDRATE",
    "DEFAULT_LOGLEVEL",
    "DEFAULT_TIMEOUT",
    "SINGLE_LINE_ERR_LOG",
    "get_hw_ports",
    "clear_log",
    "format_error_response",
    "get_log_filename",
    "log_default_path",
    "shutdown_log",
    "start_log",
]
