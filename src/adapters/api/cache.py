"""
Cache disque des reponses Mikan et TMDB.

Une meme oeuvre revient a chaque pull des flux : les fiches sont gardees
sur disque (diskcache) entre deux executions.

Durees de vie :
- SEARCH_TTL (24 h) : recherche TMDB par titre
- DETAILS_TTL (7 j) : fiche Mikan d'une page d'episode, saison TMDB
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Optional

from diskcache import Cache


class APICache:
    """
    Facade async sur diskcache.Cache.

    Les acces disque passent par l'executor par defaut de la boucle.

    Example:
        cache = APICache(cache_dir=settings.cache_dir)
        await cache.set_details("mikan:page:https://...", item)
        item = await cache.get("mikan:page:https://...")
    """

    SEARCH_TTL = 24 * 60 * 60
    DETAILS_TTL = 7 * 24 * 60 * 60

    def __init__(self, cache_dir: str | Path = ".cache/api") -> None:
        self._cache = Cache(str(cache_dir))

    async def _run(self, func, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def get(self, key: str) -> Optional[Any]:
        """None si la cle est absente ou expiree."""
        return await self._run(self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        await self._run(self._cache.set, key, value, expire=ttl)

    async def set_search(self, key: str, value: Any) -> None:
        await self.set(key, value, self.SEARCH_TTL)

    async def set_details(self, key: str, value: Any) -> None:
        await self.set(key, value, self.DETAILS_TTL)

    async def clear(self) -> None:
        await self._run(self._cache.clear)

    def close(self) -> None:
        self._cache.close()
