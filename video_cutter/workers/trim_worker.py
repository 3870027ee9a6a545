"""
Trim worker.

Background thread for lossless cuts with progress reporting via Qt signals.
"""

from core.result_types import Result

from ..models.trim_request import TrimRequest
from ..models.video_asset import VideoAsset
from .base_worker import BaseWorkerThread


class TrimWorker(BaseWorkerThread):
    """
    Runs VideoCutterService.cut() in a separate thread.

    The result value is the output container bytes.
    """

    def __init__(self, service, asset: VideoAsset, request: TrimRequest, parent=None):
        super().__init__(service, parent)
        self.asset = asset
        self.request = request
        self.operation_name = f"Cut {asset.name}"

    def execute(self) -> Result[bytes]:
        def on_progress(percent: int):
            self.emit_progress(percent, f"Cutting: {percent}%")

        # Attached only while this cut owns the engine
        data = self.service.cut(self.asset, self.request, progress_observer=on_progress)

        return Result.success(
            data,
            output_name=self.request.output_name,
            output_size=len(data),
            cut_duration=self.request.duration,
        )
