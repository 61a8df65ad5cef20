"""Tests for logging setup and its use at container startup."""

import json
import sys

import pytest
from loguru import logger

import app.container as container_module
from app.cache import MemoryCacheBackend
from app.container import container
from settings.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_sinks():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestSetupLogging:
    def test_console_only_by_default(self):
        assert len(setup_logging("warning")) == 1

    def test_file_sink_writes_json_lines(self, tmp_path):
        assert len(setup_logging("INFO", log_dir=tmp_path)) == 2
        logger.info("cache warmed {}", 3)
        logger.remove()

        [path] = list(tmp_path.glob("osu_analytics_*.jsonl"))
        messages = [json.loads(line)["record"]["message"] for line in path.read_text().splitlines()]
        assert "cache warmed 3" in messages


class TestContainerLogging:
    @pytest.mark.asyncio
    async def test_init_configures_logging(self, conn, monkeypatch):
        calls = []
        monkeypatch.setattr(container_module, "setup_logging", lambda: calls.append(1))
        container.init(conn=conn, backend=MemoryCacheBackend())
        try:
            assert calls == [1]
        finally:
            await container.close()
