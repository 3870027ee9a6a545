"""
Video Cutter services.

This package contains the business logic: command building, metadata
extraction, progress relaying, workspace housekeeping and the cutter
service that ties them to the engine.
"""

from .command_builder import FFmpegCommandBuilder, format_seconds
from .metadata_extractor import MetadataExtractor, metadata_from_log
from .progress_relay import ProgressRelay, ProgressSubscription
from .workspace import WorkspaceSession
from .video_cutter_service import VideoCutterService

__all__ = [
    'FFmpegCommandBuilder',
    'format_seconds',
    'MetadataExtractor',
    'metadata_from_log',
    'ProgressRelay',
    'ProgressSubscription',
    'WorkspaceSession',
    'VideoCutterService',
]
