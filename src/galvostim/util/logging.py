# -*- coding: utf-8 -*-
"""
Loguru sinks for galvostim.

Library modules log through the shared `loguru.logger`; applications (and the
CLI) decide where records go by calling `start_log` once at startup.
"""

import os
import sys
import traceback

from loguru import logger

from .defaults import CONFIG_DIR, DEFAULT_LOGLEVEL, SINGLE_LINE_ERR_LOG

# path of the current file sink, "" when logging to file is off
_log_path = ""


def format_error_response():
    err_str = traceback.format_exc()
    if SINGLE_LINE_ERR_LOG:
        return "\t".join(line.strip() for line in err_str.splitlines())
    else:
        return err_str


def start_log(
    log_to_file=True,
    log_to_stdout=False,
    log_path=None,
    clear_prev=True,
    log_level=DEFAULT_LOGLEVEL,
):
    global _log_path

    if log_path is None or log_path == "":
        log_path = log_default_path()
    else:
        log_path = os.path.abspath(log_path)

    if clear_prev:
        clear_log(log_path)

    # first remove (default) stderr output
    logger.remove()
    _log_path = ""

    if log_to_file:
        logger.add(log_path, level=log_level, colorize=False)
        _log_path = log_path
    if log_to_stdout:
        logger.add(sys.stderr, level=log_level, colorize=True)
    if log_to_file:
        logger.info("Log started at {}", log_path)
    else:
        logger.info("Log started.")


def log_default_path() -> str:
    return str(CONFIG_DIR.joinpath("galvostim.log"))


def clear_log(log_path: str):
    """
    Clear the logger file at the given path. Does nothing if the file does not
    exist.

    Arguments
    ---------
    log_path : str
        The path to the logger file. Can get the default path with
        log_default_path().
    """
    if os.path.exists(log_path):
        try:
            os.remove(log_path)
        except PermissionError:
            logger.error(
                f"Could not clear log file {log_path}. Permission denied. Continuing."
            )


def shutdown_log():
    global _log_path

    logger.info("Closing down log.")
    logger.remove()
    _log_path = ""


def get_log_filename() -> str:
    """Path of the file the log is written to, or "" when there is none."""
    return _log_path
