"""Logger configuration. Diagnostics meant for the user go through ErrorHandler; this is for tracing the pipeline."""

import logging
import os
import sys

LEVEL_ENV = "LOX_LOG_LEVEL"
FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def configure(name, level=None):
    """Returns logger `name` writing to stderr. level defaults to $LOX_LOG_LEVEL, then WARNING."""
    logger = logging.getLogger(name)

    if level is None:
        level = os.environ.get(LEVEL_ENV, "WARNING").upper()
    if isinstance(level, str) and not isinstance(logging.getLevelName(level), int):
        level = "WARNING"  # unknown names would make setLevel raise
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def set_level(level):
    """Sets level on every logger already configured under the 'lox' namespace."""
    for name in list(logging.root.manager.loggerDict):
        if name == "lox" or name.startswith("lox."):
            logging.getLogger(name).setLevel(level)
