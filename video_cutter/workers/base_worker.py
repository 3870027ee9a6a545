"""
Base worker thread.

Runs one cutter-service call off the GUI thread and reports through the
unified result_ready / progress_update signals.
"""

from datetime import datetime
from typing import Optional

from PySide6.QtCore import QThread, Signal

from core.exceptions import VideoCutterError
from core.logger import logger
from core.result_types import Result


class BaseWorkerThread(QThread):
    """
    Base class for cutter worker threads.

    Subclasses implement execute() and return a Result; exceptions are
    converted into error Results so nothing is raised across the thread
    boundary.

    Signals:
        result_ready: (result: Result)
        progress_update: (percentage: int, message: str)
    """

    result_ready = Signal(object)
    progress_update = Signal(int, str)

    def __init__(self, service, parent=None):
        """
        Args:
            service: VideoCutterService the worker calls into
            parent: Optional parent QObject
        """
        super().__init__(parent)
        self.service = service
        self.operation_start_time: Optional[datetime] = None
        self.operation_name = self.__class__.__name__
        self.setObjectName(f"{self.__class__.__name__}_{id(self)}")

    def run(self):
        """Thread entry point."""
        try:
            self.operation_start_time = datetime.utcnow()
            self.emit_progress(0, f"Starting {self.operation_name}...")
            self.emit_result(self.execute())
        except VideoCutterError as e:
            logger.error(f"{self.operation_name} failed: {e.message}")
            self.emit_result(Result.error(e))
        except Exception as e:
            logger.exception(f"Unexpected error in {self.operation_name}: {e}")
            error = VideoCutterError(
                f"Unexpected error in {self.operation_name}: {e}",
                error_code='UnexpectedWorkerError',
                context={'exception_type': e.__class__.__name__}
            )
            self.emit_result(Result.error(error))

    def execute(self) -> Result:
        raise NotImplementedError("Subclasses must implement execute() method")

    def emit_progress(self, percentage: int, message: str):
        percentage = max(0, min(100, int(percentage)))
        self.progress_update.emit(percentage, message)

    def emit_result(self, result: Result):
        if self.operation_start_time:
            duration = (datetime.utcnow() - self.operation_start_time).total_seconds()
            result.add_metadata('duration_seconds', duration)
        result.add_metadata('operation_name', self.operation_name)
        self.result_ready.emit(result)
