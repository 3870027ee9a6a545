"""
Video metadata data model.

Best-effort information recovered from the engine's diagnostic log.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class VideoMetadata:
    """
    Result of a probe.

    ``duration_seconds`` is 0.0 when the log carried no duration line; treat
    that as "unknown", not as an empty video (see ``duration_known``).
    """

    duration_seconds: float = 0.0
    format: str = "mp4"
    container: Optional[str] = None  # demuxer list, e.g. "mov,mp4,m4a,3gp,3g2,mj2"
    stream_count: int = 0

    @property
    def duration_known(self) -> bool:
        return self.duration_seconds > 0

    @property
    def duration_formatted(self) -> str:
        """Duration as HH:MM:SS.ss"""
        total = self.duration_seconds
        hours = int(total // 3600)
        minutes = int((total % 3600) // 60)
        seconds = total - hours * 3600 - minutes * 60
        return f"{hours:02d}:{minutes:02d}:{seconds:05.2f}"
