"""
Video Cutter.

Lossless video trimming core for the desktop cutter: drives a single FFmpeg
engine with a private workspace, extracts time ranges with stream copy,
reports progress and probes media metadata.

Integration:
    from video_cutter import VideoCutterService, VideoAsset

    cutter = VideoCutterService.get_instance()
    cutter.set_progress_observer(progress_bar.setValue)
    clip = cutter.lossless_cut(VideoAsset.from_path(path), 10.0, 25.0, "clip.mp4")
"""

from .models import VideoAsset, TrimRequest, VideoMetadata, EngineConfig
from .services import VideoCutterService

__version__ = '1.0.0'

__all__ = [
    'VideoAsset',
    'TrimRequest',
    'VideoMetadata',
    'EngineConfig',
    'VideoCutterService',
]
