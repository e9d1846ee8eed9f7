# -*- coding: utf-8 -*-

import pathlib

DEFAULT_LOGLEVEL = "INFO"
CONFIG_DIR = pathlib.Path.home().joinpath(".galvostim")
SINGLE_LINE_ERR_LOG = False  # reformat tracebacks into a single line

# RS232 link to the scan-control DSP (8N1, no flow control)
DEFAULT_BAUDRATE = 57600
DEFAULT_TIMEOUT = 5  # seconds
