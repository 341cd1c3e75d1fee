"""
Client Mikan pour identifier le bangumi d'une release.

Mikan (mikanani.me) publie, pour chaque release, une page qui renvoie vers
la fiche du bangumi (/Home/Bangumi/<id>). Le client lit cette page et en
extrait l'ID, le titre et le poster.

Usage:
    client = MikanClient(cache=APICache())
    item = await client.lookup("https://mikanani.me/Home/Episode/abc123")
"""

import re
from typing import Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from src.adapters.api.cache import APICache
from src.adapters.api.retry import request_with_retry
from src.core.entities.bangumi import MikanItem
from src.core.ports.api_clients import IMikanClient

BANGUMI_HREF_PATTERN = re.compile(r"/Home/Bangumi/(\d+)")
POSTER_URL_PATTERN = re.compile(r"url\(['\"]?([^'\")]+)['\"]?\)")


class MikanClient(IMikanClient):
    """
    Client du catalogue Mikan.

    Attributes:
        base_url: Racine du site, pour resoudre les URLs relatives des posters
    """

    def __init__(
        self,
        cache: APICache,
        base_url: str = "https://mikanani.me",
        timeout: float = 30.0,
    ) -> None:
        self._cache = cache
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": "Mozilla/5.0 (bangumi-rss)"},
            )
        return self._client

    async def lookup(self, homepage: str) -> Optional[MikanItem]:
        """
        Identifie le bangumi Mikan a partir de la page d'une release.

        Args:
            homepage: URL de la page de la release

        Returns:
            MikanItem, ou None si la page est absente ou ne reference aucun bangumi
        """
        if not homepage:
            return None

        cache_key = f"mikan:page:{homepage}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            response = await request_with_retry(self._get_client(), "GET", homepage)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.debug("Page Mikan introuvable", homepage=homepage)
                return None
            raise

        item = self.parse_page(response.text)
        if item is None:
            logger.debug("Aucun bangumi reference sur la page", homepage=homepage)
            return None

        await self._cache.set_details(cache_key, item)
        return item

    def parse_page(self, html: str) -> Optional[MikanItem]:
        """
        Extrait la fiche du bangumi d'une page de release Mikan.

        Args:
            html: Contenu HTML de la page

        Returns:
            MikanItem, ou None si aucun lien /Home/Bangumi/<id> n'est present
        """
        soup = BeautifulSoup(html, "html.parser")

        link = soup.find("a", href=BANGUMI_HREF_PATTERN)
        if link is None:
            return None
        match = BANGUMI_HREF_PATTERN.search(link["href"])
        mikan_id = int(match.group(1))

        # Le titre est dans p.bangumi-title, le lien peut contenir d'autres noeuds
        title_node = soup.find("p", class_="bangumi-title")
        title = (title_node or link).get_text(" ", strip=True)

        poster_link = ""
        poster_node = soup.find("div", class_="bangumi-poster")
        if poster_node is not None:
            poster_match = POSTER_URL_PATTERN.search(poster_node.get("style", ""))
            if poster_match:
                poster_path = poster_match.group(1).split("?", 1)[0]
                poster_link = urljoin(self._base_url + "/", poster_path)

        return MikanItem(id=mikan_id, official_title=title, poster_link=poster_link)

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
