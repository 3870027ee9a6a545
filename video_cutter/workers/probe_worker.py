"""
Probe worker.

Background thread that reads an asset's metadata.
"""

from core.result_types import Result

from ..models.video_asset import VideoAsset
from .base_worker import BaseWorkerThread


class ProbeWorker(BaseWorkerThread):
    """Runs VideoCutterService.probe() in a separate thread."""

    def __init__(self, service, asset: VideoAsset, parent=None):
        super().__init__(service, parent)
        self.asset = asset
        self.operation_name = f"Probe {asset.name}"

    def execute(self) -> Result:
        metadata = self.service.probe(self.asset)
        result = Result.success(metadata)
        if not metadata.duration_known:
            result.add_warning(f"Duration of {self.asset.name} is unknown")
        self.emit_progress(100, f"Analyzed {self.asset.name}")
        return result
