"""Tests for writes.py — WriteQueue ordering and failure isolation."""

import asyncio
import logging
import sys
import os

import pytest

# Ensure backend root is on sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from writes import WriteQueue


@pytest.mark.asyncio
async def test_writes_run_in_submission_order():
    queue = WriteQueue()
    queue.start()
    seen = []

    async def write(n):
        # Later writes finish faster; order must still hold
        await asyncio.sleep(0.01 * (3 - n))
        seen.append(n)

    for n in range(3):
        queue.submit(f"w{n}", lambda n=n: write(n))
    await queue.drain()

    assert seen == [0, 1, 2]
    await queue.stop()


@pytest.mark.asyncio
async def test_failed_write_is_logged_and_queue_continues(caplog):
    queue = WriteQueue()
    queue.start()
    seen = []

    async def boom():
        raise OSError("disk full")

    async def ok():
        seen.append("ok")

    with caplog.at_level(logging.ERROR, logger="writes"):
        queue.submit("boom", boom)
        queue.submit("ok", ok)
        await queue.drain()

    assert seen == ["ok"]
    assert "Queued write boom failed: disk full" in caplog.text
    await queue.stop()


@pytest.mark.asyncio
async def test_submit_before_start_runs_once_started():
    queue = WriteQueue()
    seen = []

    async def write():
        seen.append(1)

    queue.submit("early", write)
    assert seen == []

    queue.start()
    await queue.drain()
    assert seen == [1]
    await queue.stop()


@pytest.mark.asyncio
async def test_stop_drains_pending_writes():
    queue = WriteQueue()
    queue.start()
    seen = []

    async def write():
        await asyncio.sleep(0)
        seen.append(1)

    queue.submit("a", write)
    queue.submit("b", write)
    await queue.stop()

    assert seen == [1, 1]
    assert not queue.running
