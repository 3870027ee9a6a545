"""
Video asset data model.

An in-memory media file handed to the cutting core by the application.
"""

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Union


DEFAULT_EXTENSION = ".mp4"


@dataclass(frozen=True)
class VideoAsset:
    """
    Immutable media payload.

    The caller owns the asset; the core only borrows it for the duration of
    one operation and never mutates it.
    """

    data: bytes
    name: str
    media_type: str = "video/mp4"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "VideoAsset":
        """
        Load an asset from disk.

        Args:
            path: Media file to read

        Returns:
            VideoAsset holding the file contents, named after the file
        """
        path = Path(path)
        media_type, _ = mimetypes.guess_type(path.name)
        return cls(
            data=path.read_bytes(),
            name=path.name,
            media_type=media_type or "application/octet-stream",
        )

    @property
    def extension(self) -> str:
        """Lower-case file suffix including the dot (``.mp4`` when absent)."""
        suffix = Path(self.name).suffix.lower()
        return suffix or DEFAULT_EXTENSION

    @property
    def size(self) -> int:
        """Payload size in bytes."""
        return len(self.data)

    def __repr__(self) -> str:
        # Never dump the payload into logs
        return f"VideoAsset(name={self.name!r}, media_type={self.media_type!r}, size={self.size})"
