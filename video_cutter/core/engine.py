"""
FFmpeg processing engine.

Wraps the FFmpeg executable as a stateful engine with a private working
directory that serves as its virtual filesystem. Commands only ever see
workspace-relative names; callers move bytes in and out with write_file /
read_file and observe execution through "log" and "progress" events.
"""

import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from core.exceptions import EngineInitError, ProcessingError, WorkspaceError
from core.logger import logger

from ..models.engine_config import EngineConfig
from .binary_manager import binary_manager
from .log_parser import parse_duration, parse_progress_time, requested_duration


LOG_EVENT = "log"
PROGRESS_EVENT = "progress"


class _ProgressTracker:
    """Turns statistics lines into a fraction of the expected output length."""

    def __init__(self, expected_duration: Optional[float]):
        self.expected_duration = expected_duration

    def feed(self, line: str) -> Optional[float]:
        if self.expected_duration is None:
            # Fall back to the first input duration the engine reports
            duration = parse_duration(line)
            if duration:
                self.expected_duration = duration
            return None

        position = parse_progress_time(line)
        if position is None or self.expected_duration <= 0:
            return None
        return min(max(position / self.expected_duration, 0.0), 1.0)


class FFmpegEngine:
    """
    Single FFmpeg engine instance.

    The engine owns one workspace directory for its whole lifetime and runs
    one command at a time; serializing access is the caller's job.

    Events:
        log: (line: str) for every diagnostic line
        progress: (fraction: float) in [0, 1] while a command runs
    """

    def __init__(self, config: Optional[EngineConfig] = None, locator=None):
        """
        Initialize an unloaded engine.

        Args:
            config: EngineConfig, defaults used when omitted
            locator: Binary locator with find_ffmpeg(); the global manager by default
        """
        self.config = config or EngineConfig()
        self._locator = locator or binary_manager
        self.ffmpeg_path: Optional[str] = None
        self.version: Optional[str] = None
        self.workspace: Optional[Path] = None
        self._listeners: Dict[str, List[Callable]] = {LOG_EVENT: [], PROGRESS_EVENT: []}
        self._listeners_lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self.workspace is not None

    def load(self):
        """
        Locate FFmpeg and create the workspace.

        Raises:
            EngineInitError: If no usable binary exists or the workspace cannot be created
        """
        if self.loaded:
            return

        ffmpeg_path = self._locator.find_ffmpeg(self.config.ffmpeg_path)
        if not ffmpeg_path:
            raise EngineInitError("FFmpeg binary not found")

        root = self.config.workspace_root
        try:
            if root is not None:
                root.mkdir(parents=True, exist_ok=True)
            workspace = Path(tempfile.mkdtemp(prefix="video_cutter_", dir=root))
        except OSError as e:
            raise EngineInitError(f"Cannot create engine workspace: {e}",
                                  binary_path=ffmpeg_path) from e

        self.ffmpeg_path = ffmpeg_path
        self.version = getattr(self._locator, 'ffmpeg_version', None)
        self.workspace = workspace
        logger.info(f"FFmpeg engine loaded: {ffmpeg_path} (version {self.version or 'unknown'})")
        logger.debug(f"Engine workspace: {workspace}")

    # === Events ===

    def on(self, event: str, listener: Callable):
        """Register a listener for "log" or "progress"."""
        with self._listeners_lock:
            self._event_listeners(event).append(listener)

    def off(self, event: str, listener: Callable):
        """Remove a listener; unknown listeners are ignored."""
        with self._listeners_lock:
            listeners = self._event_listeners(event)
            if listener in listeners:
                listeners.remove(listener)

    def listener_count(self, event: str) -> int:
        with self._listeners_lock:
            return len(self._event_listeners(event))

    def _event_listeners(self, event: str) -> List[Callable]:
        if event not in self._listeners:
            raise ValueError(f"Unknown engine event: {event}")
        return self._listeners[event]

    def _emit(self, event: str, payload):
        with self._listeners_lock:
            listeners = list(self._listeners[event])
        for listener in listeners:
            listener(payload)

    # === Virtual filesystem ===

    def _resolve(self, name: str) -> Path:
        if not self.loaded:
            raise WorkspaceError("Engine is not loaded", artifact=name)
        if not name or name in ('.', '..') or '/' in name or '\\' in name:
            raise WorkspaceError(f"Invalid workspace name: {name!r}", artifact=name)
        return self.workspace / name

    def write_file(self, name: str, data: bytes):
        """Write bytes to a workspace entry, replacing it if present."""
        path = self._resolve(name)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise WorkspaceError(f"Cannot write {name}: {e}", artifact=name) from e

    def read_file(self, name: str) -> bytes:
        """Read a workspace entry."""
        path = self._resolve(name)
        try:
            return path.read_bytes()
        except OSError as e:
            raise WorkspaceError(f"Cannot read {name}: {e}", artifact=name) from e

    def delete_file(self, name: str):
        """Delete a workspace entry."""
        path = self._resolve(name)
        try:
            path.unlink()
        except OSError as e:
            raise WorkspaceError(f"Cannot delete {name}: {e}", artifact=name) from e

    def exists(self, name: str) -> bool:
        return self._resolve(name).is_file()

    def list_dir(self) -> List[str]:
        """Names of all entries currently in the workspace."""
        if not self.loaded:
            return []
        return sorted(entry.name for entry in self.workspace.iterdir())

    # === Execution ===

    def exec(self, args: Sequence[str], timeout: Optional[float] = None) -> int:
        """
        Run FFmpeg with workspace-relative arguments.

        A non-zero exit code is returned, not raised: inspection commands such
        as ``-i file`` without an output legitimately exit with 1.

        Args:
            args: Arguments without the binary itself
            timeout: Seconds before the process is killed, defaults to config

        Returns:
            FFmpeg exit code

        Raises:
            ProcessingError: If the process cannot be started or was killed on timeout
        """
        if not self.loaded:
            raise ProcessingError("Engine is not loaded")

        timeout = timeout if timeout is not None else self.config.exec_timeout
        cmd = [self.ffmpeg_path, '-nostdin', *args]
        tracker = _ProgressTracker(requested_duration(list(args)))
        captured: List[str] = []

        try:
            process = subprocess.Popen(
                cmd,
                cwd=str(self.workspace),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                universal_newlines=True,
                encoding='utf-8',
                errors='replace',
                bufsize=1
            )
        except OSError as e:
            raise ProcessingError(f"Cannot start FFmpeg: {e}") from e

        timed_out = threading.Event()
        watchdog = None
        if timeout:
            def _kill():
                # A process that already exited finished in time
                if process.poll() is None:
                    timed_out.set()
                    process.kill()
            watchdog = threading.Timer(timeout, _kill)
            watchdog.daemon = True
            watchdog.start()

        try:
            # Universal newlines split the \r-terminated statistics lines too
            for raw_line in process.stderr:
                line = raw_line.rstrip()
                if not line:
                    continue
                captured.append(line)
                if self.config.forward_engine_log:
                    logger.engine_output(line)
                self._emit(LOG_EVENT, line)

                fraction = tracker.feed(line)
                if fraction is not None:
                    self._emit(PROGRESS_EVENT, fraction)
        except BaseException:
            process.kill()
            raise
        finally:
            process.wait()
            process.stderr.close()
            if watchdog is not None:
                watchdog.cancel()

        if timed_out.is_set():
            raise ProcessingError(
                f"FFmpeg did not finish within {timeout:g}s",
                log=captured,
                context={'timed_out': True}
            )
        return process.returncode
