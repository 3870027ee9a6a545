#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Centralized settings access for the cutting engine
"""

from typing import Any, Optional
from pathlib import Path
from PySide6.QtCore import QSettings


class SettingsManager:
    """Centralized settings access backed by QSettings"""

    # Canonical keys for all settings
    KEYS = {
        # Engine settings
        'FFMPEG_PATH': 'engine.ffmpeg_path',
        'WORKSPACE_ROOT': 'engine.workspace_root',
        'EXEC_TIMEOUT': 'engine.exec_timeout',
        'MONOTONIC_PROGRESS': 'engine.monotonic_progress',
        'STRICT_METADATA': 'engine.strict_metadata',
        'FORWARD_ENGINE_LOG': 'engine.forward_engine_log',

        # Debug settings
        'DEBUG_LOGGING': 'debug.enable_logging',
    }

    _instance = None

    def __new__(cls):
        """Singleton pattern for settings manager"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize settings manager"""
        if self._initialized:
            return

        self._initialized = True
        self._settings = QSettings('VideoCutter', 'Settings')

    def get(self, key: str, default: Any = None) -> Any:
        """Get setting value

        Args:
            key: Either a KEYS constant or direct key string
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        canonical_key = self.KEYS.get(key, key)
        return self._settings.value(canonical_key, default)

    def contains(self, key: str) -> bool:
        """Check if settings contains key"""
        canonical_key = self.KEYS.get(key, key)
        return self._settings.contains(canonical_key)

    # QSettings returns strings from INI/registry backends, normalize here
    @staticmethod
    def _to_bool(value: Any, default: bool) -> bool:
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in ('1', 'true', 'yes', 'on')
        return bool(value)

    @property
    def ffmpeg_path(self) -> Optional[str]:
        """User supplied FFmpeg binary, None to auto-detect"""
        value = self.get('FFMPEG_PATH', '')
        return str(value) if value else None

    @property
    def workspace_root(self) -> Optional[Path]:
        """Parent directory for the engine workspace, None for the system temp dir"""
        value = self.get('WORKSPACE_ROOT', '')
        return Path(str(value)) if value else None

    @property
    def exec_timeout(self) -> Optional[float]:
        """Seconds before a running engine command is killed (None or 0 disables)"""
        value = self.get('EXEC_TIMEOUT', 0)
        try:
            timeout = float(value)
        except (TypeError, ValueError):
            return None
        return timeout if timeout > 0 else None

    @property
    def monotonic_progress(self) -> bool:
        """Whether progress never regresses within one operation"""
        return self._to_bool(self.get('MONOTONIC_PROGRESS'), True)

    @property
    def strict_metadata(self) -> bool:
        """Whether an unreadable duration raises instead of reporting zero"""
        return self._to_bool(self.get('STRICT_METADATA'), False)

    @property
    def forward_engine_log(self) -> bool:
        """Whether engine diagnostic lines are copied to the application log"""
        return self._to_bool(self.get('FORWARD_ENGINE_LOG'), True)

    @property
    def debug_logging(self) -> bool:
        """Whether debug logging is enabled"""
        return self._to_bool(self.get('DEBUG_LOGGING'), False)


# Global settings instance
settings = SettingsManager()
