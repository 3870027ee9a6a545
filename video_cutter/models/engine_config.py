"""
Engine configuration data model.

Tunables for the processing engine and the cutting service.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class EngineConfig:
    """
    Configuration for the FFmpeg engine and the cutter service.

    Build one directly in tests and scripts, or from the application settings
    with ``EngineConfig.from_settings()``.
    """

    # === Engine ===
    ffmpeg_path: Optional[str] = None  # None = auto-detect
    workspace_root: Optional[Path] = None  # None = system temp dir
    exec_timeout: Optional[float] = None  # seconds, None = wait forever

    # === Progress ===
    monotonic_progress: bool = True  # clamp to the highest percentage seen

    # === Metadata ===
    strict_metadata: bool = False  # raise instead of reporting zero duration

    # === Logging ===
    forward_engine_log: bool = True  # copy engine stderr to the app log (DEBUG)

    def __post_init__(self):
        if self.workspace_root is not None and not isinstance(self.workspace_root, Path):
            self.workspace_root = Path(self.workspace_root)
        if self.exec_timeout is not None and self.exec_timeout <= 0:
            raise ValueError(f"exec_timeout must be positive, got {self.exec_timeout}")

    @classmethod
    def from_settings(cls, settings=None) -> "EngineConfig":
        """
        Read engine configuration from the application settings.

        Args:
            settings: SettingsManager-like object, defaults to the global one
        """
        if settings is None:
            from core.settings_manager import settings as app_settings
            settings = app_settings

        return cls(
            ffmpeg_path=settings.ffmpeg_path,
            workspace_root=settings.workspace_root,
            exec_timeout=settings.exec_timeout,
            monotonic_progress=settings.monotonic_progress,
            strict_metadata=settings.strict_metadata,
            forward_engine_log=settings.forward_engine_log,
        )
