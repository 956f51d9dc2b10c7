"""
Centralized logging configuration for VPNStatus.

All modules log through the ``vpnstatus`` logger hierarchy. Handlers are
attached to that package logger only, so embedding applications keep control
of the root logger.
"""

import logging
import logging.handlers
import sys
from typing import Optional

from . import config

PACKAGE_LOGGER = "vpnstatus"

# The monitor runs for the lifetime of a login session; keep the log bounded.
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3


class VPNStatusLogger:
    """Owns the handlers attached to the package logger."""

    _initialized = False
    _debug_enabled = False
    _console_handler: Optional[logging.Handler] = None

    @classmethod
    def setup(cls, debug: bool = False, force_reinit: bool = False, log_file: bool = True) -> None:
        """
        Attach file and console handlers to the package logger.

        Args:
            debug: If True, the console shows DEBUG records
            force_reinit: If True, drop existing handlers and set up again
            log_file: If False, skip the rotating log file (one-shot CLI use)
        """
        if cls._initialized and not force_reinit:
            return

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
            handler.close()

        cls._debug_enabled = debug
        package_logger.setLevel(logging.DEBUG)
        package_logger.propagate = False

        formatter = logging.Formatter(config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT)

        if log_file:
            cls._add_file_handler(package_logger, formatter)
        cls._console_handler = cls._add_console_handler(package_logger, formatter)

        cls._initialized = True
        logging.getLogger(__name__).debug(f"VPNStatus logging initialized (debug={'on' if debug else 'off'})")

    @classmethod
    def _add_file_handler(cls, logger: logging.Logger, formatter: logging.Formatter) -> None:
        try:
            config.LOG_DIR.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                config.LOG_FILE, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
            )
        except OSError as e:
            # Unwritable log directory is not fatal; the console still works
            print(f"Warning: Could not set up file logging: {e}", file=sys.stderr)
            return

        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    @classmethod
    def _add_console_handler(cls, logger: logging.Logger, formatter: logging.Formatter) -> logging.Handler:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.DEBUG if cls._debug_enabled else logging.INFO)
        logger.addHandler(console_handler)
        return console_handler

    @classmethod
    def get_logger(cls, name: Optional[str] = None) -> logging.Logger:
        """
        Get a logger instance. Does not install handlers by itself; records
        from an unconfigured package fall through to logging's last resort.

        Args:
            name: Logger name (typically __name__)
        """
        return logging.getLogger(name or PACKAGE_LOGGER)

    @classmethod
    def is_debug_enabled(cls) -> bool:
        return cls._debug_enabled

    @classmethod
    def set_debug(cls, debug: bool) -> None:
        """Switch the console verbosity without touching the file handler."""
        cls._debug_enabled = debug
        if cls._console_handler is not None:
            cls._console_handler.setLevel(logging.DEBUG if debug else logging.INFO)


def setup_logging(debug: bool = False, force_reinit: bool = False, log_file: bool = True) -> None:
    """Set up package logging. Wrapper for VPNStatusLogger.setup()."""
    VPNStatusLogger.setup(debug=debug, force_reinit=force_reinit, log_file=log_file)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance. Wrapper for VPNStatusLogger.get_logger()."""
    return VPNStatusLogger.get_logger(name)


def is_debug_enabled() -> bool:
    return VPNStatusLogger.is_debug_enabled()


def set_debug(debug: bool) -> None:
    VPNStatusLogger.set_debug(debug)
