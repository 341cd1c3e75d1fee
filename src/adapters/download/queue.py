"""
File de telechargement en memoire.

Le rafraichissement des flux y depose les releases a recuperer ; un
consommateur (client BitTorrent) les retire avec get(). Aucun retour n'est
fait au producteur.
"""

import asyncio
from typing import Optional

from loguru import logger

from src.core.entities.torrent import Torrent
from src.core.ports.download import IDownloadQueue


class AsyncDownloadQueue(IDownloadQueue):
    """
    File FIFO basee sur asyncio.Queue.

    Example:
        queue = AsyncDownloadQueue()
        await queue.add(torrent)
        next_torrent = await queue.get()
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[Torrent] = asyncio.Queue(maxsize=maxsize)

    async def add(self, torrent: Torrent) -> None:
        await self._queue.put(torrent)
        logger.debug("Torrent ajoute a la file", name=torrent.name, size=self.size)

    async def get(self, timeout: Optional[float] = None) -> Torrent:
        """
        Retire le prochain torrent.

        Raises:
            asyncio.TimeoutError: Aucun torrent dans le delai imparti
        """
        if timeout is None:
            return await self._queue.get()
        return await asyncio.wait_for(self._queue.get(), timeout)

    def drain(self) -> list[Torrent]:
        """Retire et retourne tous les torrents en attente, sans bloquer."""
        torrents = []
        while not self._queue.empty():
            torrents.append(self._queue.get_nowait())
        return torrents

    @property
    def size(self) -> int:
        return self._queue.qsize()
