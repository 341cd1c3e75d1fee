"""
Client TMDB pour l'identification des bangumis dans le catalogue de metadonnees.

Implemente l'interface ITmdbClient. Utilise le cache persistant et le
mecanisme de retry pour gerer le rate limiting.

Usage:
    cache = APICache()
    client = TmdbClient(api_key="your_key", cache=cache)
    item = await client.lookup("葬送的芙莉莲", season=1)
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger

from src.adapters.api.cache import APICache
from src.adapters.api.retry import request_with_retry
from src.core.entities.bangumi import TmdbItem
from src.core.ports.api_clients import ITmdbClient


class TmdbClient(ITmdbClient):
    """
    Client API TMDB pour les series d'animation.

    Implemente ITmdbClient avec:
    - Recherche de series par titre (/search/tv), departage par annee
    - Recuperation des informations de la saison demandee (/tv/{id})
    - Cache persistant (7j par fiche)
    - Retry automatique sur rate limiting (429) et erreurs serveur

    Sans cle API, lookup() retourne toujours None : la resolution repose
    alors uniquement sur Mikan.
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w780"

    def __init__(
        self,
        api_key: Optional[str],
        cache: APICache,
        language: str = "zh-CN",
        timeout: float = 30.0,
    ) -> None:
        """
        Initialise le client TMDB.

        Args:
            api_key: Cle API TMDB (v3) ou Read Access Token (v4), optionnelle
            cache: Instance APICache pour le caching des resultats
            language: Langue des titres retournes
            timeout: Timeout HTTP en secondes
        """
        self._api_key = api_key
        self._cache = cache
        self._language = language
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, le cree si necessaire (lazy init).

        Supporte les deux modes d'authentification TMDB:
        - API Key v3 (32 caracteres hex) : passe en parametre api_key
        - Read Access Token v4 (long JWT) : passe en header Bearer
        """
        if self._client is None or self._client.is_closed:
            is_v4_token = len(self._api_key or "") > 40

            headers = {"Accept": "application/json"}
            params = {}
            if is_v4_token:
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                params["api_key"] = self._api_key

            self._client = httpx.AsyncClient(
                base_url=self.TMDB_BASE_URL,
                headers=headers,
                params=params,
                timeout=self._timeout,
            )
        return self._client

    async def lookup(
        self,
        title: str,
        year: Optional[int] = None,
        season: int = 1,
    ) -> Optional[TmdbItem]:
        """
        Recherche une serie par titre et retourne la fiche de la saison.

        Args:
            title: Titre a rechercher
            year: Annee de premiere diffusion pour departager les homonymes
            season: Saison dont on veut la date et le nombre d'episodes

        Returns:
            TmdbItem, ou None si aucun resultat (ou pas de cle API)
        """
        if not self._api_key:
            logger.debug("Recherche TMDB ignoree (pas de cle API)", title=title)
            return None

        cache_key = f"tmdb:lookup:{title}:{year}:{season}:{self._language}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        client = self._get_client()
        response = await request_with_retry(
            client,
            "GET",
            "/search/tv",
            params={"query": title, "language": self._language},
        )
        result = self._pick_result(response.json().get("results", []), year)
        if result is None:
            logger.debug("Aucun resultat TMDB", title=title, year=year)
            return None

        details = await self._get_tv_details(result["id"])
        item = self._build_item(result, details, season)

        await self._cache.set_details(cache_key, item)
        return item

    def _pick_result(
        self, results: list[dict[str, Any]], year: Optional[int]
    ) -> Optional[dict[str, Any]]:
        """
        Choisit le resultat de recherche a retenir.

        Avec une annee, le premier resultat dont la premiere diffusion a lieu
        cette annee-la ; sinon (ou a defaut), le premier resultat.
        """
        if not results:
            return None
        if year is not None:
            for item in results:
                first_air_date = item.get("first_air_date") or ""
                if first_air_date[:4] == str(year):
                    return item
        return results[0]

    async def _get_tv_details(self, tv_id: int) -> dict[str, Any]:
        """Recupere les details d'une serie, dict vide si 404."""
        client = self._get_client()
        try:
            response = await request_with_retry(
                client,
                "GET",
                f"/tv/{tv_id}",
                params={"language": self._language},
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return {}
            raise
        return response.json()

    def _build_item(
        self, result: dict[str, Any], details: dict[str, Any], season: int
    ) -> TmdbItem:
        """Construit la fiche a partir du resultat de recherche et des details."""
        first_air_date = details.get("first_air_date") or result.get("first_air_date") or ""
        air_date = first_air_date
        episode_count = details.get("number_of_episodes") or 0
        poster_path = details.get("poster_path") or result.get("poster_path")

        # Informations propres a la saison si TMDB la connait
        for season_info in details.get("seasons", []):
            if season_info.get("season_number") == season:
                air_date = season_info.get("air_date") or air_date
                episode_count = season_info.get("episode_count") or episode_count
                poster_path = season_info.get("poster_path") or poster_path
                break

        return TmdbItem(
            id=int(result["id"]),
            title=details.get("name") or result.get("name", ""),
            original_title=details.get("original_name") or result.get("original_name", ""),
            year=first_air_date[:4],
            season=season,
            air_date=air_date,
            episode_count=episode_count,
            poster_link=f"{self.TMDB_IMAGE_BASE_URL}{poster_path}" if poster_path else "",
            vote_average=float(details.get("vote_average") or result.get("vote_average") or 0.0),
        )

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
