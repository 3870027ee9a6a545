"""
Video cutter service.

Entry point the application calls into: lossless time-range extraction and
probing on the shared FFmpeg engine, with progress reporting.
"""

import threading
from typing import List, Optional

from core.exceptions import ProcessingError
from core.logger import logger

from ..core.engine import LOG_EVENT, PROGRESS_EVENT
from ..core.engine_manager import EngineManager, get_engine_manager
from ..models.engine_config import EngineConfig
from ..models.trim_request import DEFAULT_OUTPUT_NAME, TrimRequest
from ..models.video_asset import VideoAsset
from ..models.video_metadata import VideoMetadata
from .command_builder import FFmpegCommandBuilder
from .metadata_extractor import MetadataExtractor
from .progress_relay import ProgressObserver, ProgressRelay, ProgressSubscription
from .workspace import WorkspaceSession


class VideoCutterService:
    """
    Service for cutting and probing videos on the shared engine.

    Any number of threads may call lossless_cut() and probe() concurrently;
    the engine work itself runs one operation at a time behind a lock because
    the engine has a single workspace and a single progress channel.
    Operations cannot be cancelled once the command is issued.
    """

    _instance: Optional["VideoCutterService"] = None
    _instance_lock = threading.Lock()

    def __init__(self, config: Optional[EngineConfig] = None,
                 engine_manager: Optional[EngineManager] = None):
        """
        Initialize the cutter service.

        Args:
            config: Service and engine configuration
            engine_manager: Engine owner, a private one built from config by default
        """
        if config is None:
            config = engine_manager.config if engine_manager else EngineConfig()
        self.config = config
        self.engine_manager = engine_manager or EngineManager(config)
        self.command_builder = FFmpegCommandBuilder()
        self.progress = ProgressRelay(monotonic=config.monotonic_progress)
        self.metadata_extractor = MetadataExtractor(self.command_builder,
                                                    strict=config.strict_metadata)
        self._engine_lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "VideoCutterService":
        """Process-wide service bound to the process-wide engine."""
        with cls._instance_lock:
            if cls._instance is None:
                manager = get_engine_manager()
                cls._instance = cls(manager.config, manager)
            return cls._instance

    # === Engine ===

    def ensure_ready(self):
        """
        Load the engine if needed.

        Returns:
            The loaded engine

        Raises:
            EngineInitError: If the engine cannot be loaded
        """
        return self.engine_manager.ensure_ready()

    # === Progress ===

    def set_progress_observer(self, observer: Optional[ProgressObserver]):
        """Replace the progress observer; None removes it."""
        self.progress.set_observer(observer)

    def subscribe_progress(self, observer: ProgressObserver) -> ProgressSubscription:
        """
        Replace the shared progress observer and return a handle that removes it.

        The shared observer receives every operation's progress. To follow a
        single cut, pass ``progress_observer`` to lossless_cut() or cut().
        """
        return self.progress.subscribe(observer)

    # === Operations ===

    def lossless_cut(
        self,
        asset: VideoAsset,
        start: float,
        end: float,
        output_name: str = DEFAULT_OUTPUT_NAME,
        progress_observer: Optional[ProgressObserver] = None
    ) -> bytes:
        """
        Extract ``[start, end)`` from ``asset`` without re-encoding.

        Args:
            asset: Source video
            start: Cut start in seconds (>= 0)
            end: Cut end in seconds (> start)
            output_name: Output file name; its extension selects the container
            progress_observer: Receives this operation's percentages only, in place
                of the shared observer; attached once the engine is acquired

        Returns:
            The output container bytes

        Raises:
            ValidationError: If the range or name is invalid
            EngineInitError: If the engine cannot be loaded
            ProcessingError: If FFmpeg fails; carries the captured log
        """
        return self.cut(asset, TrimRequest(start, end, output_name), progress_observer)

    def cut(self, asset: VideoAsset, request: TrimRequest,
            progress_observer: Optional[ProgressObserver] = None) -> bytes:
        """Run a TrimRequest against ``asset``. See lossless_cut()."""
        engine = self.ensure_ready()

        with self._engine_lock, self.progress.scoped(progress_observer):
            self.progress.begin()
            log: List[str] = []

            with WorkspaceSession(engine, asset, "cut", output_name=request.output_name) as session:
                args = self.command_builder.build_trim_args_for_request(
                    session.input_name, request, session.output_name
                )
                command = self.command_builder.format_command_string(args)
                logger.info(f"Cutting {asset.name} [{request.start}s - {request.end}s] "
                            f"-> {request.output_name}")
                logger.debug(f"FFmpeg command: {command}")

                log_listener = log.append
                progress_listener = self.progress.forward
                engine.on(LOG_EVENT, log_listener)
                engine.on(PROGRESS_EVENT, progress_listener)
                try:
                    exit_code = engine.exec(args)
                finally:
                    engine.off(LOG_EVENT, log_listener)
                    engine.off(PROGRESS_EVENT, progress_listener)

                if exit_code != 0:
                    raise ProcessingError(
                        f"FFmpeg failed with code {exit_code}: {self._extract_error(log)}",
                        log=log,
                        exit_code=exit_code,
                        context={'command': command}
                    )
                if not engine.exists(session.output_name):
                    raise ProcessingError(
                        "FFmpeg completed but output file not found",
                        log=log,
                        exit_code=exit_code,
                        context={'command': command}
                    )
                data = session.read_output()

            self.progress.finish()

        logger.info(f"Cut complete: {request.output_name} ({len(data)} bytes)")
        return data

    def probe(self, asset: VideoAsset) -> VideoMetadata:
        """
        Read duration and format of ``asset``.

        An unreadable duration is reported as 0.0 (``duration_known`` False)
        unless strict metadata is configured.

        Raises:
            EngineInitError: If the engine cannot be loaded
            MetadataExtractionError: Strict mode only
        """
        engine = self.ensure_ready()
        with self._engine_lock:
            return self.metadata_extractor.extract(engine, asset)

    def workspace_entries(self) -> List[str]:
        """Current engine workspace contents (empty when no operation runs)."""
        if not self.engine_manager.is_ready:
            return []
        return self.engine_manager.ensure_ready().list_dir()

    @staticmethod
    def _extract_error(log: List[str]) -> str:
        """Pick the most relevant line of FFmpeg output for an error message."""
        for line in reversed(log[-10:]):
            lowered = line.lower()
            if 'error' in lowered or 'invalid' in lowered:
                return line.strip()

        for line in reversed(log):
            if line.strip():
                return line.strip()

        return "Unknown error"
