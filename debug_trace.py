"""
debug_trace.py

Logging setup and debug tracing for Rubra.
Enable tracing with ``--debug`` or by setting RUBRA_DEBUG=1.
"""

import logging
import os
import sys
import traceback
from functools import wraps

# Set to True to enable debug tracing (also turned on by --debug)
DEBUG_TRACE = os.environ.get("RUBRA_DEBUG", "") not in ("", "0")

# Log file written while tracing (None for stderr only)
LOG_FILE = "rubra_debug.log"

_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

_trace_log = logging.getLogger("rubra.trace")
_stream_handler = None
_file_handler = None


def configure_logging(debug: bool = False) -> None:
    """Set up the root logger.

    Warnings and above always go to stderr. With tracing on, everything down
    to DEBUG goes to stderr and LOG_FILE.
    """
    global DEBUG_TRACE, _stream_handler, _file_handler
    DEBUG_TRACE = DEBUG_TRACE or debug

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if DEBUG_TRACE else logging.INFO)

    if _stream_handler is None:
        _stream_handler = logging.StreamHandler(sys.stderr)
        _stream_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(_stream_handler)
    _stream_handler.setLevel(logging.DEBUG if DEBUG_TRACE else logging.WARNING)

    if DEBUG_TRACE and LOG_FILE and _file_handler is None:
        try:
            _file_handler = logging.FileHandler(LOG_FILE, mode="w", encoding="utf-8")
        except OSError as e:
            root.warning("Cannot open %s for tracing: %s", LOG_FILE, e)
        else:
            _file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
            root.addHandler(_file_handler)


def trace(msg: str, category: str = "INFO"):
    """Log a trace message under a category tag."""
    if not DEBUG_TRACE:
        return
    _trace_log.debug("[%s] %s", category, msg)


def trace_exception(msg: str = "Exception"):
    """Log the exception currently being handled."""
    _trace_log.error("%s: %s", msg, traceback.format_exc())


def trace_call(category: str = "CALL"):
    """Decorator to trace function calls."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not DEBUG_TRACE:
                return func(*args, **kwargs)
            func_name = func.__qualname__
            trace(f">>> {func_name}", category)
            try:
                result = func(*args, **kwargs)
                trace(f"<<< {func_name}", category)
                return result
            except Exception as e:
                trace(f"!!! {func_name} raised {type(e).__name__}: {e}", "ERROR")
                raise
        return wrapper
    return decorator


def close_log():
    """Close the trace log file."""
    global _file_handler
    if _file_handler:
        logging.getLogger().removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None
