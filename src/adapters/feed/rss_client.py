"""
Client de recuperation des flux RSS de releases.

Decode les flux RSS 2.0 (Mikan, nyaa, dmhy...) avec xmltodict et produit
un Torrent par <item>.
"""

import re
from typing import Any, Optional

import httpx
import xmltodict
from loguru import logger

from src.adapters.api.retry import request_with_retry
from src.core.entities.torrent import Torrent
from src.core.ports.api_clients import IFeedClient

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """
    Normalise un nom de release.

    Les noms sont compares par sous-chaine avec les titres stockes : les
    espaces multiples et espaces insecables des flux doivent etre reduits.
    """
    return _WHITESPACE.sub(" ", name.replace("　", " ")).strip()


class RSSFeedClient(IFeedClient):
    """
    Client RSS base sur httpx.

    Example:
        client = RSSFeedClient()
        torrents = await client.fetch_torrents("https://mikanani.me/RSS/MyBangumi?token=...")
    """

    def __init__(self, timeout: float = 30.0) -> None:
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._client

    async def fetch_torrents(self, url: str) -> list[Torrent]:
        """
        Recupere et decode un flux.

        Args:
            url: URL du flux RSS

        Returns:
            Torrents du flux, dans l'ordre du flux

        Raises:
            httpx.HTTPError: Erreur reseau ou HTTP
            xml.parsers.expat.ExpatError: Contenu non XML
        """
        response = await request_with_retry(self._get_client(), "GET", url)
        torrents = self.parse_feed(response.text)
        logger.debug("Flux recupere", url=url, count=len(torrents))
        return torrents

    def parse_feed(self, content: str) -> list[Torrent]:
        """
        Decode le XML d'un flux RSS 2.0.

        Pour chaque <item> :
        - name : <title> normalise
        - url : <enclosure url=...>, a defaut <link>
        - homepage : <link>

        Les items sans titre ou sans URL sont ignores.
        """
        data = xmltodict.parse(content)
        channel = (data.get("rss") or {}).get("channel") or {}
        items = channel.get("item") or []
        # xmltodict retourne un dict quand le flux ne contient qu'un item
        if isinstance(items, dict):
            items = [items]

        torrents = []
        for item in items:
            torrent = self._item_to_torrent(item)
            if torrent is not None:
                torrents.append(torrent)
        return torrents

    def _item_to_torrent(self, item: dict[str, Any]) -> Optional[Torrent]:
        title = item.get("title") or ""
        link = item.get("link") or ""
        enclosure = item.get("enclosure") or {}
        if isinstance(enclosure, list):
            enclosure = enclosure[0] if enclosure else {}
        url = enclosure.get("@url") or link

        name = normalize_name(title)
        if not name or not url:
            logger.debug("Item RSS incomplet ignore", title=title)
            return None
        return Torrent(name=name, url=url, homepage=link)

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
