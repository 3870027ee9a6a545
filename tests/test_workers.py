#!/usr/bin/env python3
"""
Tests for the Qt worker threads
Workers are run synchronously via run() so signals are delivered directly
"""

import threading
import time

import pytest

from video_cutter.services.video_cutter_service import VideoCutterService
from video_cutter.models.video_asset import VideoAsset
from video_cutter.models.trim_request import TrimRequest
from video_cutter.workers import TrimWorker, ProbeWorker
from core.exceptions import ProcessingError, VideoCutterError

from tests.helpers.fake_engine import FakeEngine, FakeEngineManager, default_handler


class TestTrimWorker:
    """Test suite for TrimWorker"""

    @pytest.fixture
    def service(self, qapp):
        self.engine = FakeEngine()
        return VideoCutterService(engine_manager=FakeEngineManager(self.engine))

    def run_worker(self, worker):
        results, progress = [], []
        worker.result_ready.connect(results.append)
        worker.progress_update.connect(lambda pct, msg: progress.append((pct, msg)))
        worker.run()
        return results, progress

    def test_successful_cut(self, service):
        asset = VideoAsset(b"frames", "movie.mp4")
        worker = TrimWorker(service, asset, TrimRequest(10, 25, "clip.mp4"))

        results, progress = self.run_worker(worker)

        assert len(results) == 1
        result = results[0]
        assert result.success
        assert result.value == b"CUT:frames"
        assert result.metadata['output_name'] == "clip.mp4"
        assert result.metadata['output_size'] == len(b"CUT:frames")
        assert result.metadata['cut_duration'] == 15
        assert result.metadata['operation_name'] == "Cut movie.mp4"
        assert 'duration_seconds' in result.metadata

        percents = [pct for pct, _ in progress]
        assert percents[0] == 0
        assert percents[-1] == 100
        assert progress[-1][1] == "Cutting: 100%"

    def test_observer_released_after_run(self, service):
        worker = TrimWorker(service, VideoAsset(b"frames", "movie.mp4"), TrimRequest(0, 1))

        self.run_worker(worker)

        assert service.progress.observer is None

    def test_processing_error_becomes_result(self, service):
        self.engine.handler = lambda engine, args: 1
        worker = TrimWorker(service, VideoAsset(b"frames", "movie.mp4"), TrimRequest(0, 1))

        results, _ = self.run_worker(worker)

        result = results[0]
        assert not result.success
        assert isinstance(result.error, ProcessingError)
        assert result.error.exit_code == 1
        assert result.user_message.startswith("Cutting the video failed")
        assert service.progress.observer is None

    def test_unexpected_error_wrapped(self, service):
        def exploding(engine, args):
            raise KeyError("boom")

        self.engine.handler = exploding
        worker = TrimWorker(service, VideoAsset(b"frames", "movie.mp4"), TrimRequest(0, 1))

        results, _ = self.run_worker(worker)

        error = results[0].error
        assert type(error) is VideoCutterError
        assert error.error_code == 'UnexpectedWorkerError'
        assert error.context['exception_type'] == 'KeyError'
        with pytest.raises(VideoCutterError):
            results[0].unwrap()

    def test_shared_observer_untouched(self, service):
        shared = []
        service.set_progress_observer(shared.append)
        worker = TrimWorker(service, VideoAsset(b"frames", "movie.mp4"), TrimRequest(0, 1))

        self.run_worker(worker)

        assert shared == []
        assert service.progress.observer == shared.append


class RecordingTrimWorker(TrimWorker):
    """TrimWorker that records progress instead of emitting signals"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.percentages = []

    def emit_progress(self, percentage, message):
        self.percentages.append(percentage)


class TestConcurrentTrimWorkers:
    """Test suite for two workers sharing one service"""

    def test_each_worker_reports_its_own_cut(self, qapp):
        first_running = threading.Event()
        release_first = threading.Event()
        calls = []

        def gated(engine, args):
            calls.append(args)
            if len(calls) == 1:
                first_running.set()
                release_first.wait(5)
            return default_handler(engine, args)

        service = VideoCutterService(engine_manager=FakeEngineManager(FakeEngine(handler=gated)))
        worker_a = RecordingTrimWorker(service, VideoAsset(b"a", "a.mp4"), TrimRequest(0, 1))
        worker_b = RecordingTrimWorker(service, VideoAsset(b"b", "b.mp4"), TrimRequest(0, 1))
        results = {}

        thread_a = threading.Thread(target=lambda: results.update(a=worker_a.execute()))
        thread_a.start()
        assert first_running.wait(5)
        thread_b = threading.Thread(target=lambda: results.update(b=worker_b.execute()))
        thread_b.start()
        time.sleep(0.05)
        release_first.set()
        thread_a.join(5)
        thread_b.join(5)

        assert worker_a.percentages == [0, 25, 50, 75, 99, 100]
        assert worker_b.percentages == [0, 25, 50, 75, 99, 100]
        assert results['a'].value == b"CUT:a"
        assert results['b'].value == b"CUT:b"


class TestProbeWorker:
    """Test suite for ProbeWorker"""

    def test_probe_result(self, qapp):
        service = VideoCutterService(engine_manager=FakeEngineManager())
        worker = ProbeWorker(service, VideoAsset(b"frames", "movie.mp4"))
        results = []
        worker.result_ready.connect(results.append)

        worker.run()

        metadata = results[0].value
        assert metadata.duration_seconds == 90.5
        assert not results[0].has_warnings()

    def test_unknown_duration_is_warning(self, qapp):
        engine = FakeEngine(handler=lambda engine, args: 1)
        service = VideoCutterService(engine_manager=FakeEngineManager(engine))
        worker = ProbeWorker(service, VideoAsset(b"frames", "broken.mp4"))
        results = []
        worker.result_ready.connect(results.append)

        worker.run()

        assert results[0].success
        assert results[0].unwrap_or(None).duration_seconds == 0.0
        assert results[0].warnings == ["Duration of broken.mp4 is unknown"]
