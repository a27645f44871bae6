import logging
import sys
from typing import TextIO

from config import ConfigurationSet

from swing_lab.config import logging_level

PACKAGE_LOGGER = "swing_lab"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"


def configure_logging(
    cfg: ConfigurationSet | None = None,
    *,
    verbose: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a stream handler to the ``swing_lab`` logger.

    The level comes from ``logging.level`` in the layered configuration, or
    DEBUG when ``verbose`` is set. Records stop at the package logger and the
    root logger is left alone, so repeated calls replace the handler rather
    than stacking another one.
    """
    package = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package.handlers):
        if not isinstance(handler, logging.NullHandler):
            package.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    package.addHandler(handler)
    package.setLevel(logging.DEBUG if verbose else logging_level(cfg))
    package.propagate = False
    return package
