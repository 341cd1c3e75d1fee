"""
Tests pour AsyncDownloadQueue.
"""

import asyncio

import pytest

from src.adapters.download.queue import AsyncDownloadQueue
from src.core.entities.torrent import Torrent


def _torrent(n: int) -> Torrent:
    return Torrent(name=f"[ABC] Frieren - {n:02d}", url=f"https://example.org/{n}.torrent")


class TestAsyncDownloadQueue:
    @pytest.mark.asyncio
    async def test_fifo_order(self):
        queue = AsyncDownloadQueue()
        await queue.add(_torrent(1))
        await queue.add(_torrent(2))

        assert queue.size == 2
        assert (await queue.get()).url.endswith("1.torrent")
        assert (await queue.get()).url.endswith("2.torrent")
        assert queue.size == 0

    @pytest.mark.asyncio
    async def test_get_timeout(self):
        queue = AsyncDownloadQueue()
        with pytest.raises(asyncio.TimeoutError):
            await queue.get(timeout=0.01)

    @pytest.mark.asyncio
    async def test_drain(self):
        queue = AsyncDownloadQueue()
        for n in range(3):
            await queue.add(_torrent(n))

        drained = queue.drain()

        assert len(drained) == 3
        assert queue.size == 0
