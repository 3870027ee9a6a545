"""
Video Cutter core utilities.

This package contains the FFmpeg binary discovery, the processing engine and
its lifecycle manager, and the engine log parsers.
"""

from .binary_manager import FFmpegBinaryManager, binary_manager
from .engine import FFmpegEngine, LOG_EVENT, PROGRESS_EVENT
from .engine_manager import EngineManager, get_engine_manager
from .log_parser import (
    parse_duration,
    parse_container,
    parse_stream_index,
    parse_progress_time,
    requested_duration,
)

__all__ = [
    'FFmpegBinaryManager',
    'binary_manager',
    'FFmpegEngine',
    'LOG_EVENT',
    'PROGRESS_EVENT',
    'EngineManager',
    'get_engine_manager',
    'parse_duration',
    'parse_container',
    'parse_stream_index',
    'parse_progress_time',
    'requested_duration',
]
