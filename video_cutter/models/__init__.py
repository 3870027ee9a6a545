"""
Video Cutter data models.

This package contains all data models used throughout the cutting core.
"""

from .video_asset import VideoAsset
from .trim_request import TrimRequest, DEFAULT_OUTPUT_NAME, validate_trim_range
from .video_metadata import VideoMetadata
from .engine_config import EngineConfig

__all__ = [
    'VideoAsset',
    'TrimRequest',
    'DEFAULT_OUTPUT_NAME',
    'validate_trim_range',
    'VideoMetadata',
    'EngineConfig',
]
