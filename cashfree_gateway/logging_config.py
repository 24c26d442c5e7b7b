"""Structured JSON logging for the payment function."""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter


logger = logging.getLogger("cashfree_gateway")


def configure_logging(level: str = "INFO") -> None:
    """Configure the package logger once per process."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))

    logger.handlers = [handler]
    logger.setLevel(level.upper())
    logger.propagate = False


class CallbackHandler(logging.Handler):
    """Forward records to the host runtime's log/error callbacks."""

    def __init__(self, log, error):
        super().__init__()
        self.log = log
        self.error = error
        self.setFormatter(JsonFormatter("%(levelname)s %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            if record.levelno >= logging.ERROR:
                self.error(line)
            else:
                self.log(line)
        except Exception:
            self.handleError(record)
