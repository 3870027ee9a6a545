"""
Workspace housekeeping.

Stages an asset in the engine's workspace for one operation and guarantees
that every staged artifact is removed when the operation ends, whether it
returns, raises or is interrupted.
"""

import uuid
from typing import List, Optional

from core.exceptions import WorkspaceError
from core.logger import logger

from ..models.video_asset import VideoAsset


class WorkspaceSession:
    """
    Scoped ownership of workspace artifacts.

    Usage:
        with WorkspaceSession(engine, asset, "cut", output_name="clip.mp4") as session:
            engine.exec(builder.build_trim_args(session.input_name, ..., session.output_name))
            data = session.read_output()

    Names carry a per-session id so two sessions never collide in the shared
    workspace. Cleanup errors are logged and never replace an exception that
    is already propagating.
    """

    def __init__(self, engine, asset: VideoAsset, operation: str,
                 output_name: Optional[str] = None):
        """
        Args:
            engine: Loaded FFmpegEngine
            asset: Asset whose bytes are staged on entry
            operation: Short label used in artifact names and logs
            output_name: Output artifact name to reserve, None for no output
        """
        self.engine = engine
        self.asset = asset
        self.operation = operation
        self.session_id = uuid.uuid4().hex[:12]
        self.input_name = f"{operation}_{self.session_id}_input{asset.extension}"
        self.output_name = (f"{operation}_{self.session_id}_{output_name}"
                            if output_name else None)
        self._staged: List[str] = []

    @property
    def artifacts(self) -> List[str]:
        """Names this session may have created in the workspace."""
        names = list(self._staged)
        if self.output_name and self.output_name not in names:
            names.append(self.output_name)
        return names

    def __enter__(self) -> "WorkspaceSession":
        # Tracked before the write so a partial write is still cleaned up
        self._staged.append(self.input_name)
        try:
            self.engine.write_file(self.input_name, self.asset.data)
        except BaseException:
            self.cleanup()
            raise
        logger.debug(f"Staged {self.asset.name} as {self.input_name} ({self.asset.size} bytes)")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()
        return False

    def read_output(self) -> bytes:
        """
        Read the output artifact.

        Raises:
            WorkspaceError: If the session has no output or the engine produced none
        """
        if not self.output_name:
            raise WorkspaceError(f"{self.operation} session has no output artifact")
        if not self.engine.exists(self.output_name):
            raise WorkspaceError("Engine produced no output", artifact=self.output_name)
        return self.engine.read_file(self.output_name)

    def cleanup(self) -> List[str]:
        """
        Delete every artifact of this session that still exists.

        Returns:
            Names that could not be removed (already logged)
        """
        failed = []
        for name in self.artifacts:
            try:
                if self.engine.exists(name):
                    self.engine.delete_file(name)
            except WorkspaceError as e:
                logger.warning(f"Failed to remove workspace artifact {name}: {e.message}")
                failed.append(name)
            except Exception as e:
                logger.warning(f"Failed to remove workspace artifact {name}: {e}")
                failed.append(name)
        self._staged.clear()
        return failed
