"""
Engine lifecycle manager.

Process-wide accessor for the single FFmpegEngine. The engine is created and
loaded lazily on the first ensure_ready() call; concurrent callers block on
the same load instead of starting their own. There is no teardown: once
loaded, the engine lives for the rest of the process.
"""

import threading
from typing import Callable, Optional

from core.exceptions import EngineInitError
from core.logger import logger

from ..models.engine_config import EngineConfig
from .engine import FFmpegEngine


class EngineManager:
    """
    Guards creation and loading of the shared engine.

    A failed load leaves no engine behind, so the next ensure_ready() starts
    from scratch.
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 engine_factory: Optional[Callable[[EngineConfig], FFmpegEngine]] = None):
        """
        Args:
            config: Engine configuration passed to the factory
            engine_factory: Builds an unloaded engine, FFmpegEngine by default
        """
        self.config = config or EngineConfig()
        self._engine_factory = engine_factory or FFmpegEngine
        self._engine: Optional[FFmpegEngine] = None
        self._lock = threading.Lock()
        self.load_attempts = 0

    @property
    def is_ready(self) -> bool:
        engine = self._engine
        return engine is not None and engine.loaded

    def ensure_ready(self) -> FFmpegEngine:
        """
        Return the loaded engine, loading it on first use.

        Raises:
            EngineInitError: If loading fails; the caller may retry later
        """
        engine = self._engine
        if engine is not None and engine.loaded:
            return engine

        with self._lock:
            # Another caller may have finished the load while we waited
            if self._engine is not None and self._engine.loaded:
                return self._engine

            self.load_attempts += 1
            engine = self._engine_factory(self.config)
            try:
                engine.load()
            except EngineInitError:
                logger.error("FFmpeg engine failed to load")
                raise
            except Exception as e:
                logger.error(f"FFmpeg engine failed to load: {e}")
                raise EngineInitError(f"Engine load failed: {e}") from e

            self._engine = engine
            return engine


_default_manager: Optional[EngineManager] = None
_default_manager_lock = threading.Lock()


def get_engine_manager() -> EngineManager:
    """Process-wide EngineManager configured from the application settings."""
    global _default_manager
    with _default_manager_lock:
        if _default_manager is None:
            from core.settings_manager import settings
            if settings.debug_logging:
                logger.enable_debug(True)
            _default_manager = EngineManager(EngineConfig.from_settings(settings))
        return _default_manager
