"""
In-memory engine for testing.

Provides a test double for FFmpegEngine with a dict-backed workspace and a
scriptable exec(), so orchestration can be tested without an FFmpeg binary.
"""

import threading
from typing import Callable, Dict, List, Optional, Sequence

from core.exceptions import WorkspaceError, ProcessingError


PROBE_LOG = [
    "Input #0, mov,mp4,m4a,3gp,3g2,mj2, from 'probe_input.mp4':",
    "  Duration: 00:01:30.50, start: 0.000000, bitrate: 1205 kb/s",
    "  Stream #0:0[0x1](und): Video: h264 (High), yuv420p, 1280x720, 25 fps",
    "  Stream #0:1[0x2](und): Audio: aac (LC), 48000 Hz, stereo, fltp",
    "At least one output file must be specified",
]


def _arg_after(args: Sequence[str], flag: str) -> Optional[str]:
    for current, value in zip(args, args[1:]):
        if current == flag:
            return value
    return None


def default_handler(engine: "FakeEngine", args: List[str]) -> int:
    """Pretend to be FFmpeg: probe prints a header, trim copies the input."""
    input_name = _arg_after(args, '-i')
    if '-ss' not in args:
        for line in PROBE_LOG:
            engine.emit_log(line)
        return 1

    data = engine.files[input_name]
    for fraction in (0.0, 0.25, 0.5, 0.75, 0.99):
        engine.emit_progress(fraction)
    engine.files[args[-1]] = b"CUT:" + data
    return 0


class FakeEngine:
    """
    Test double for FFmpegEngine.

    ``handler(engine, args) -> exit code`` plays the part of the FFmpeg
    process; it may emit log/progress events and write workspace files.
    """

    def __init__(self, handler: Callable = default_handler):
        self.handler = handler
        self.files: Dict[str, bytes] = {}
        self.commands: List[List[str]] = []
        self.loaded = False
        self.load_count = 0
        self.fail_deletes = False
        self._listeners = {'log': [], 'progress': []}
        self._lock = threading.Lock()

    # === Lifecycle ===

    def load(self):
        self.load_count += 1
        self.loaded = True

    # === Events ===

    def on(self, event: str, listener: Callable):
        with self._lock:
            self._listeners[event].append(listener)

    def off(self, event: str, listener: Callable):
        with self._lock:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners[event])

    def emit_log(self, line: str):
        for listener in list(self._listeners['log']):
            listener(line)

    def emit_progress(self, fraction: float):
        for listener in list(self._listeners['progress']):
            listener(fraction)

    # === Virtual filesystem ===

    def write_file(self, name: str, data: bytes):
        self.files[name] = data

    def read_file(self, name: str) -> bytes:
        if name not in self.files:
            raise WorkspaceError(f"Cannot read {name}", artifact=name)
        return self.files[name]

    def delete_file(self, name: str):
        if self.fail_deletes:
            raise WorkspaceError(f"Cannot delete {name}", artifact=name)
        if name not in self.files:
            raise WorkspaceError(f"Cannot delete {name}", artifact=name)
        del self.files[name]

    def exists(self, name: str) -> bool:
        return name in self.files

    def list_dir(self) -> List[str]:
        return sorted(self.files)

    # === Execution ===

    def exec(self, args: Sequence[str], timeout: Optional[float] = None) -> int:
        if not self.loaded:
            raise ProcessingError("Engine is not loaded")
        self.commands.append(list(args))
        return self.handler(self, list(args))


class FakeEngineManager:
    """EngineManager stand-in that hands out one FakeEngine."""

    def __init__(self, engine: Optional[FakeEngine] = None, config=None):
        from video_cutter.models.engine_config import EngineConfig
        self.engine = engine or FakeEngine()
        self.config = config or EngineConfig()

    @property
    def is_ready(self) -> bool:
        return self.engine.loaded

    def ensure_ready(self):
        if not self.engine.loaded:
            self.engine.load()
        return self.engine
