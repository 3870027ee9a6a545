"""
FFmpeg binary discovery.

Finds a working ffmpeg executable once per process and remembers it. Lookup
order: explicit path from settings, $VIDEO_CUTTER_FFMPEG, the project's
bin/ folder, PATH, then well-known install locations.
"""

import os
import platform
import shutil
import subprocess
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from core.logger import logger


ENV_OVERRIDE = "VIDEO_CUTTER_FFMPEG"
PROBE_TIMEOUT = 5


class FFmpegBinaryManager:
    """
    Singleton locator for the FFmpeg executable.

    A candidate is accepted only if ``<candidate> -version`` exits 0. The
    first accepted candidate and its version string are cached until
    ``reset()`` or a ``force_refresh`` lookup. A failed search is not cached.
    """

    _instance: Optional["FFmpegBinaryManager"] = None
    _initialized: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not FFmpegBinaryManager._initialized:
            self.ffmpeg_path: Optional[str] = None
            self.ffmpeg_version: Optional[str] = None
            self._validated: bool = False
            FFmpegBinaryManager._initialized = True

    def find_ffmpeg(self, preferred_path: Optional[str] = None,
                    force_refresh: bool = False) -> Optional[str]:
        """
        Locate the FFmpeg binary.

        Args:
            preferred_path: Explicit binary, tried before anything else
            force_refresh: Ignore the cached result

        Returns:
            Full path to ffmpeg, None if no candidate works
        """
        if self._validated and not force_refresh and (
                preferred_path is None or preferred_path == self.ffmpeg_path):
            return self.ffmpeg_path

        self.ffmpeg_path, self.ffmpeg_version = None, None
        for source, candidate in self._candidates(preferred_path):
            version = self._probe_version(candidate)
            if version is None:
                if source in ("settings", "environment"):
                    logger.warning(f"Ignoring unusable FFmpeg from {source}: {candidate}")
                continue
            self.ffmpeg_path, self.ffmpeg_version = candidate, version
            logger.debug(f"Using FFmpeg {version} from {source}: {candidate}")
            break
        else:
            logger.warning("No usable FFmpeg binary found")

        # A miss is not cached, the next lookup searches again
        self._validated = self.ffmpeg_path is not None
        return self.ffmpeg_path

    def get_ffmpeg_path(self) -> Optional[str]:
        """Cached FFmpeg path, searching on first call."""
        if not self._validated:
            self.find_ffmpeg()
        return self.ffmpeg_path

    def is_ffmpeg_available(self) -> bool:
        return self.get_ffmpeg_path() is not None

    def reset(self):
        """Forget the cached result so the next lookup searches again."""
        self.ffmpeg_path = None
        self.ffmpeg_version = None
        self._validated = False

    # === Search ===

    def _candidates(self, preferred_path: Optional[str]) -> Iterator[Tuple[str, str]]:
        """Yield ``(source, path)`` pairs in lookup order, skipping duplicates."""
        binary_name = self._binary_name()
        seen = set()

        ordered = [
            ("settings", preferred_path),
            ("environment", os.environ.get(ENV_OVERRIDE)),
            ("bin folder", self._local_bin(binary_name)),
            ("PATH", shutil.which(binary_name)),
        ]
        ordered.extend(("common location", path) for path in self._common_paths(binary_name))

        for source, path in ordered:
            if not path or path in seen:
                continue
            seen.add(path)
            if source in ("bin folder", "common location") and not os.path.isfile(path):
                continue
            yield source, path

    @staticmethod
    def _binary_name() -> str:
        return "ffmpeg.exe" if platform.system() == "Windows" else "ffmpeg"

    @staticmethod
    def _local_bin(binary_name: str) -> str:
        """Binary bundled in the project's bin/ directory."""
        project_root = Path(__file__).resolve().parents[2]
        return str(project_root / "bin" / binary_name)

    @staticmethod
    def _common_paths(binary_name: str) -> List[str]:
        system = platform.system()
        if system == "Windows":
            return [
                rf"C:\ffmpeg\bin\{binary_name}",
                rf"C:\Program Files\ffmpeg\bin\{binary_name}",
                os.path.expanduser(rf"~\ffmpeg\bin\{binary_name}"),
            ]
        if system == "Darwin":
            return [
                f"/opt/homebrew/bin/{binary_name}",
                f"/usr/local/bin/{binary_name}",
                os.path.expanduser(f"~/bin/{binary_name}"),
            ]
        return [
            f"/usr/bin/{binary_name}",
            f"/usr/local/bin/{binary_name}",
            f"/snap/bin/{binary_name}",
            os.path.expanduser(f"~/bin/{binary_name}"),
        ]

    @staticmethod
    def _probe_version(path: str) -> Optional[str]:
        """
        Run ``path -version``.

        Returns:
            Version token of the first line ("6.1.1" from "ffmpeg version 6.1.1 ..."),
            "unknown" if the line is unexpected, None if the binary does not run
        """
        try:
            result = subprocess.run(
                [path, "-version"], capture_output=True, text=True,
                check=False, timeout=PROBE_TIMEOUT
            )
        except (subprocess.SubprocessError, OSError):
            return None

        if result.returncode != 0:
            return None

        first_line = result.stdout.splitlines()[0] if result.stdout else ""
        parts = first_line.split()
        if len(parts) >= 3 and parts[1] == "version":
            return parts[2]
        return "unknown"


# Global singleton instance
binary_manager = FFmpegBinaryManager()
