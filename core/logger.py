#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Application logging for the Video Cutter

One 'VideoCutter' logger shared by every module, mirrored to UI log consoles
through a Qt signal. FFmpeg's own diagnostic output goes to the child logger
'VideoCutter.engine' so it can be filtered separately and never floods the UI.
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional
from PySide6.QtCore import QObject, Signal


LOG_DIRECTORY = Path.home() / '.video_cutter' / 'logs'
LOGGER_NAME = 'VideoCutter'
ENGINE_LOGGER_NAME = f'{LOGGER_NAME}.engine'

CONSOLE_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
FILE_FORMAT = '%(asctime)s %(name)s %(levelname)s %(module)s.%(funcName)s:%(lineno)d %(message)s'


class AppLogger(QObject):
    """Process-wide logger that also publishes records to the UI"""

    # level, message
    log_message = Signal(str, str)

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        super().__init__()
        self._initialized = True
        self._debug_enabled = False
        self._file_handler: Optional[logging.Handler] = None

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()
        self.logger.propagate = False

        # Children inherit the parent's handlers
        self.engine_logger = logging.getLogger(ENGINE_LOGGER_NAME)

        self._console_handler = self._create_console_handler()
        self.logger.addHandler(self._console_handler)

        file_handler = self._create_file_handler()
        if file_handler is not None:
            self.logger.addHandler(file_handler)
            self._file_handler = file_handler

    def _create_console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
        return handler

    def _create_file_handler(self) -> Optional[logging.Handler]:
        """Daily log file; None when the log directory cannot be created"""
        try:
            LOG_DIRECTORY.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.warning(f"Logging to console only, cannot create {LOG_DIRECTORY}: {e}")
            return None

        log_file = LOG_DIRECTORY / f"video_cutter_{datetime.now():%Y%m%d}.log"
        handler = logging.FileHandler(log_file, encoding='utf-8')
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        return handler

    def enable_debug(self, enabled: bool = True):
        """Show DEBUG records (including engine output) on the console and in the UI

        Args:
            enabled: True to show debug records, False to hide them again
        """
        self._debug_enabled = enabled
        self._console_handler.setLevel(logging.DEBUG if enabled else logging.INFO)
        self.info(f"Debug logging {'enabled' if enabled else 'disabled'}")

    @property
    def debug_enabled(self) -> bool:
        return self._debug_enabled

    def debug(self, message: str):
        self.logger.debug(message)
        if self._debug_enabled:
            self.log_message.emit('DEBUG', message)

    def info(self, message: str):
        self.logger.info(message)
        self.log_message.emit('INFO', message)

    def warning(self, message: str):
        self.logger.warning(message)
        self.log_message.emit('WARNING', message)

    def error(self, message: str, exc_info: bool = False):
        """Log an error

        Args:
            message: Error message
            exc_info: Attach the active exception's traceback
        """
        self.logger.error(message, exc_info=exc_info)
        self.log_message.emit('ERROR', message)

    def critical(self, message: str, exc_info: bool = True):
        self.logger.critical(message, exc_info=exc_info)
        self.log_message.emit('CRITICAL', message)

    def exception(self, message: str):
        """Log at ERROR with the active exception's traceback"""
        self.logger.exception(message)
        self.log_message.emit('ERROR', f"Exception: {message}")

    def engine_output(self, line: str):
        """Record one line of FFmpeg diagnostic output

        Engine output is written at DEBUG to the engine logger only and is
        not published to the UI signal.
        """
        self.engine_logger.debug(line)

    def get_log_file_path(self) -> Optional[Path]:
        """Current log file, None if file logging is unavailable"""
        if self._file_handler is not None:
            return Path(self._file_handler.baseFilename)
        return None


# Global logger instance
logger = AppLogger()
