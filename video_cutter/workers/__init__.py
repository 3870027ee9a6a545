"""
Video Cutter workers.

This package contains background thread workers for running cuts and probes
without blocking the UI.
"""

from .base_worker import BaseWorkerThread
from .trim_worker import TrimWorker
from .probe_worker import ProbeWorker

__all__ = [
    'BaseWorkerThread',
    'TrimWorker',
    'ProbeWorker',
]
