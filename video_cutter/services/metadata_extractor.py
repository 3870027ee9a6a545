"""
Metadata extractor service.

Probes an asset by letting FFmpeg print its input header and reading the
duration, container and stream count back out of the log.
"""

from pathlib import Path
from typing import Iterable, List

from core.exceptions import MetadataExtractionError
from core.logger import logger

from ..core.engine import LOG_EVENT
from ..core.log_parser import parse_container, parse_duration, parse_stream_index
from ..models.video_asset import VideoAsset
from ..models.video_metadata import VideoMetadata
from .command_builder import FFmpegCommandBuilder
from .workspace import WorkspaceSession


def metadata_from_log(lines: Iterable[str], asset_name: str = "") -> VideoMetadata:
    """
    Build VideoMetadata from FFmpeg header lines.

    The last Duration line wins. ``format`` is the asset's file extension,
    "mp4" when it has none.
    """
    duration = 0.0
    container = None
    streams = set()

    for line in lines:
        value = parse_duration(line)
        if value is not None:
            duration = value
        if container is None:
            container = parse_container(line)
        index = parse_stream_index(line)
        if index is not None:
            streams.add(index)

    return VideoMetadata(
        duration_seconds=duration,
        format=Path(asset_name).suffix.lstrip('.').lower() or 'mp4',
        container=container,
        stream_count=len(streams),
    )


class MetadataExtractor:
    """Runs probe commands against a loaded engine."""

    def __init__(self, command_builder: FFmpegCommandBuilder = None, strict: bool = False):
        """
        Args:
            command_builder: Builder for the probe command
            strict: Raise MetadataExtractionError instead of reporting a zero duration
        """
        self.command_builder = command_builder or FFmpegCommandBuilder()
        self.strict = strict

    def extract(self, engine, asset: VideoAsset) -> VideoMetadata:
        """
        Probe ``asset`` on ``engine``.

        The caller must hold exclusive access to the engine.

        Returns:
            VideoMetadata, with duration 0.0 if the log carried none

        Raises:
            MetadataExtractionError: In strict mode, when no duration was found
        """
        lines: List[str] = []

        with WorkspaceSession(engine, asset, "probe") as session:
            args = self.command_builder.build_probe_args(session.input_name)
            listener = lines.append
            engine.on(LOG_EVENT, listener)
            try:
                # Exits 1: no output file is given
                exit_code = engine.exec(args)
            finally:
                engine.off(LOG_EVENT, listener)

        metadata = metadata_from_log(lines, asset.name)
        logger.debug(f"Probe of {asset.name} exited {exit_code}: "
                     f"duration={metadata.duration_seconds}s streams={metadata.stream_count}")

        if not metadata.duration_known:
            if self.strict:
                raise MetadataExtractionError(
                    f"No duration found in probe output for {asset.name}",
                    asset_name=asset.name,
                    context={'log_tail': lines[-10:]}
                )
            logger.warning(f"Could not determine duration of {asset.name}, reporting 0")

        return metadata
