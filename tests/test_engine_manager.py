#!/usr/bin/env python3
"""
Unit tests for EngineManager lifecycle
Tests single load under concurrency and retry after failure
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest

from video_cutter.core.binary_manager import FFmpegBinaryManager, ENV_OVERRIDE, binary_manager
from video_cutter.core.engine_manager import EngineManager
from video_cutter.models.engine_config import EngineConfig
from core.exceptions import EngineInitError

from tests.helpers.fake_engine import FakeEngine


class SlowEngine(FakeEngine):
    """FakeEngine whose load takes long enough for callers to pile up"""

    loads = 0
    loads_lock = threading.Lock()

    def load(self):
        with SlowEngine.loads_lock:
            SlowEngine.loads += 1
        time.sleep(0.05)
        super().load()


class TestEngineManager:
    """Test suite for the engine lifecycle manager"""

    def setup_method(self):
        SlowEngine.loads = 0

    def test_lazy_until_first_call(self):
        manager = EngineManager(EngineConfig(), engine_factory=lambda config: SlowEngine())

        assert not manager.is_ready
        assert SlowEngine.loads == 0

        manager.ensure_ready()

        assert manager.is_ready

    def test_concurrent_calls_load_once(self):
        """Test N concurrent ensure_ready() calls share one load"""
        manager = EngineManager(EngineConfig(), engine_factory=lambda config: SlowEngine())
        barrier = threading.Barrier(8)

        def call():
            barrier.wait()
            return manager.ensure_ready()

        with ThreadPoolExecutor(max_workers=8) as pool:
            engines = list(pool.map(lambda _: call(), range(8)))

        assert SlowEngine.loads == 1
        assert manager.load_attempts == 1
        assert all(engine is engines[0] for engine in engines)
        assert engines[0].loaded

    def test_repeated_calls_reuse_engine(self):
        manager = EngineManager(EngineConfig(), engine_factory=lambda config: SlowEngine())

        first = manager.ensure_ready()
        second = manager.ensure_ready()

        assert first is second
        assert SlowEngine.loads == 1

    def test_failed_load_is_surfaced_then_retried(self):
        """Test a failure keeps no state and a later call loads again"""
        attempts = []

        class FlakyEngine(FakeEngine):
            def load(self):
                attempts.append(self)
                if len(attempts) == 1:
                    raise EngineInitError("FFmpeg binary not found")
                super().load()

        manager = EngineManager(EngineConfig(), engine_factory=lambda config: FlakyEngine())

        with pytest.raises(EngineInitError):
            manager.ensure_ready()
        assert not manager.is_ready

        engine = manager.ensure_ready()

        assert engine.loaded
        assert engine is attempts[1]
        assert manager.load_attempts == 2

    def test_unexpected_load_error_wrapped(self):
        class BrokenEngine(FakeEngine):
            def load(self):
                raise OSError("permission denied")

        manager = EngineManager(EngineConfig(), engine_factory=lambda config: BrokenEngine())

        with pytest.raises(EngineInitError) as exc_info:
            manager.ensure_ready()

        assert exc_info.value.recoverable
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_factory_receives_config(self):
        config = EngineConfig(exec_timeout=30)
        received = []

        def factory(cfg):
            received.append(cfg)
            return FakeEngine()

        EngineManager(config, engine_factory=factory).ensure_ready()

        assert received == [config]


class TestEngineManagerDiscovery:
    """Test suite for loading the real engine through binary discovery"""

    MODULE = 'video_cutter.core.binary_manager'

    def setup_method(self):
        binary_manager.reset()

    def teardown_method(self):
        binary_manager.reset()

    @pytest.fixture(autouse=True)
    def isolated(self, monkeypatch):
        monkeypatch.delenv(ENV_OVERRIDE, raising=False)
        monkeypatch.setattr(FFmpegBinaryManager, '_local_bin', staticmethod(lambda name: None))
        monkeypatch.setattr(FFmpegBinaryManager, '_common_paths', staticmethod(lambda name: []))

    def test_retry_finds_binary_installed_after_failure(self, tmp_path):
        """Test a failed load leaves nothing cached for the next attempt"""
        manager = EngineManager(EngineConfig(workspace_root=tmp_path))
        banner = MagicMock(returncode=0, stdout="ffmpeg version 6.1 Copyright (c) 2000-2023\n")

        with patch(f'{self.MODULE}.shutil.which', return_value=None):
            with pytest.raises(EngineInitError):
                manager.ensure_ready()

        assert not manager.is_ready

        with patch(f'{self.MODULE}.shutil.which', return_value="/usr/local/bin/ffmpeg"), \
             patch(f'{self.MODULE}.subprocess.run', return_value=banner):
            engine = manager.ensure_ready()

        assert manager.is_ready
        assert engine.ffmpeg_path == "/usr/local/bin/ffmpeg"
        assert engine.version == "6.1"
        assert manager.load_attempts == 2
