#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thread-aware exception hierarchy for the Video Cutter application

Every error raised by the cutting core derives from VideoCutterError, which
captures the thread it was raised on so that errors crossing from worker
threads into Qt slots keep their origin.
"""

from PySide6.QtCore import QThread
from typing import Dict, Any, Optional, List
from datetime import datetime
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for categorization and UI display"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class VideoCutterError(Exception):
    """
    Base exception for all Video Cutter errors

    Thread-aware exception that captures context information and provides
    user-friendly messages for UI display.
    """

    def __init__(self,
                 message: str,
                 error_code: Optional[str] = None,
                 user_message: Optional[str] = None,
                 recoverable: bool = False,
                 severity: ErrorSeverity = ErrorSeverity.ERROR,
                 context: Optional[Dict[str, Any]] = None):
        """
        Initialize error

        Args:
            message: Technical error message for logging
            error_code: Unique error code for categorization
            user_message: User-friendly message for UI display
            recoverable: Whether operation can be retried
            severity: Error severity level
            context: Additional context information
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.recoverable = recoverable
        self.severity = severity
        self.timestamp = datetime.utcnow()
        self.context = context or {}
        self.user_message = user_message or self._generate_user_message()

        # Thread context information
        current_thread = QThread.currentThread()
        self.thread_name = current_thread.objectName() or current_thread.__class__.__name__

    def _generate_user_message(self) -> str:
        """Generate user-friendly message from technical message"""
        return "An error occurred during the operation. Please check the logs for details."

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging and serialization"""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'user_message': self.user_message,
            'severity': self.severity.value,
            'recoverable': self.recoverable,
            'timestamp': self.timestamp.isoformat(),
            'thread_name': self.thread_name,
            'context': self.context
        }


class EngineInitError(VideoCutterError):
    """The processing engine could not be loaded"""

    def __init__(self, message: str, binary_path: Optional[str] = None, **kwargs):
        """
        Initialize engine init error

        Args:
            message: Technical error message
            binary_path: Engine binary that was being loaded, if one was found
            **kwargs: Additional VideoCutterError arguments
        """
        context = kwargs.get('context', {})
        if binary_path:
            context['binary_path'] = binary_path
        kwargs['context'] = context

        # Loading is not fatal for the process, a later ensure_ready() may succeed
        kwargs.setdefault('recoverable', True)
        kwargs.setdefault('severity', ErrorSeverity.CRITICAL)
        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        return ("The video engine could not be started. FFmpeg is required: "
                "download it from https://ffmpeg.org/download.html and place it "
                "in the 'bin' folder or on your PATH.")


class ProcessingError(VideoCutterError):
    """Engine command execution failed or exited abnormally"""

    def __init__(self, message: str, log: Optional[List[str]] = None,
                 exit_code: Optional[int] = None, **kwargs):
        """
        Initialize processing error

        Args:
            message: Technical error message
            log: Diagnostic lines captured from the engine during the command
            exit_code: Engine process exit code, None if it never exited normally
            **kwargs: Additional VideoCutterError arguments
        """
        self.log = list(log or [])
        self.exit_code = exit_code

        context = kwargs.get('context', {})
        if exit_code is not None:
            context['exit_code'] = exit_code
        kwargs['context'] = context

        super().__init__(message, **kwargs)

    @property
    def log_text(self) -> str:
        """Captured engine log as a single string"""
        return '\n'.join(self.log)

    def _generate_user_message(self) -> str:
        if self.context.get('timed_out'):
            return "The video engine did not finish in time and was stopped."
        return "Cutting the video failed. The file may be corrupted or use an unsupported codec."


class WorkspaceError(VideoCutterError):
    """Engine workspace (virtual filesystem) read, write or delete failure"""

    def __init__(self, message: str, artifact: Optional[str] = None, **kwargs):
        """
        Initialize workspace error

        Args:
            message: Technical error message
            artifact: Workspace entry that caused the error
            **kwargs: Additional VideoCutterError arguments
        """
        context = kwargs.get('context', {})
        if artifact:
            context['artifact'] = artifact
        kwargs['context'] = context

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        return "Temporary video storage failed. Please check available disk space."


class ValidationError(VideoCutterError):
    """Trim request and argument validation errors"""

    def __init__(self, field_errors: Dict[str, str], **kwargs):
        """
        Initialize validation error

        Args:
            field_errors: Dictionary mapping field names to error messages
            **kwargs: Additional VideoCutterError arguments
        """
        self.field_errors = field_errors
        context = kwargs.get('context', {})
        context['field_errors'] = field_errors
        kwargs['context'] = context

        details = '; '.join(f"{name}: {err}" for name, err in field_errors.items())
        message = f"Validation failed: {details}"
        super().__init__(message, severity=ErrorSeverity.WARNING, **kwargs)

    def _generate_user_message(self) -> str:
        error_count = len(self.field_errors)
        if error_count == 1:
            return "Please correct the cut range."
        return f"Please correct {error_count} cut range errors."


class MetadataExtractionError(VideoCutterError):
    """Probe finished but no duration could be recovered from the engine log"""

    def __init__(self, message: str, asset_name: Optional[str] = None, **kwargs):
        """
        Initialize metadata extraction error

        Args:
            message: Technical error message
            asset_name: Name of the probed asset
            **kwargs: Additional VideoCutterError arguments
        """
        context = kwargs.get('context', {})
        if asset_name:
            context['asset_name'] = asset_name
        kwargs['context'] = context

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        if self.context.get('asset_name'):
            return (f"Could not read the duration of '{self.context['asset_name']}'. "
                    "File may be corrupted or unsupported.")
        return "Could not read the video duration. File may be corrupted or unsupported."
