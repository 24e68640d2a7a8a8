"""
Logging setup and process-level fatal error hooks.

Uncaught synchronous exceptions and unhandled asyncio errors are fatal:
they are logged and the process is stopped so a supervisor can restart it.
"""
import logging
import os
import signal
import sys
from typing import Any

logger = logging.getLogger("chama")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_fatal_state = {"failed": False}


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())


def fatal_error_occurred() -> bool:
    return _fatal_state["failed"]


def _handle_uncaught_exception(exc_type, exc, tb) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    _fatal_state["failed"] = True
    logger.critical(f"Uncaught exception: {exc}", exc_info=(exc_type, exc, tb))


def handle_loop_exception(loop, context: dict[str, Any]) -> None:
    """
    asyncio exception handler for errors nobody awaited.

    Logs the error, marks the process as failed and asks the server to stop.
    """
    exc = context.get("exception")
    message = context.get("message", "Unhandled asynchronous error")
    _fatal_state["failed"] = True
    if exc is not None:
        logger.critical(
            f"Unhandled asynchronous error: {exc}",
            exc_info=(type(exc), exc, exc.__traceback__)
        )
    else:
        logger.critical(f"Unhandled asynchronous error: {message}")
    os.kill(os.getpid(), signal.SIGTERM)


def install_fatal_handlers() -> None:
    sys.excepthook = _handle_uncaught_exception
