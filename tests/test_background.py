"""Tests for detached background tasks."""

import asyncio
import logging

import pytest

from creative_recall.utils.background import BackgroundTasks


class TestBackgroundTasks:
    """Fire-and-forget scheduling."""

    @pytest.mark.asyncio
    async def test_spawn_runs_detached(self, background):
        done = asyncio.Event()

        async def work():
            await asyncio.sleep(0)
            done.set()

        task = background.spawn(work(), name="work")

        assert task is not None
        assert not done.is_set()
        await background.drain()
        assert done.is_set()
        assert background.pending == 0

    @pytest.mark.asyncio
    async def test_failures_are_logged(self, background, caplog):
        """Exceptions in detached work are logged, never raised to the caller."""

        async def boom():
            raise RuntimeError("kaboom")

        with caplog.at_level(logging.ERROR, logger="creative_recall.utils.background"):
            background.spawn(boom(), name="boom")
            await background.drain()

        assert "boom" in caplog.text
        assert "kaboom" in caplog.text

    @pytest.mark.asyncio
    async def test_drain_waits_for_nested_spawns(self, background):
        """Tasks spawned by running tasks are drained too."""
        seen = []

        async def child():
            await asyncio.sleep(0)
            seen.append("child")

        async def parent():
            background.spawn(child(), name="child")
            seen.append("parent")

        background.spawn(parent(), name="parent")
        await background.drain()

        assert seen == ["parent", "child"]

    def test_spawn_without_loop(self, caplog):
        """Outside an event loop the work is dropped with a warning."""
        background = BackgroundTasks()

        async def work():
            return 1

        with caplog.at_level(logging.WARNING, logger="creative_recall.utils.background"):
            assert background.spawn(work(), name="orphan") is None
        assert "orphan" in caplog.text
        assert background.pending == 0
