"""
Resolution de l'identite d'une release inconnue.

IdentityResolver interroge les deux catalogues externes (Mikan a partir de
la page de la release, TMDB a partir du titre parse), puis rattache la
release a un bangumi existant ou en cree un via BangumiMerger.
"""

import asyncio
from contextlib import closing
from typing import Callable, Optional

from loguru import logger

from src.core.entities.bangumi import Bangumi, MikanItem, TmdbItem
from src.core.entities.torrent import Torrent
from src.core.ports.api_clients import IMikanClient, ITmdbClient
from src.core.ports.repositories import IBangumiRepository
from src.core.value_objects.parsed_info import ParsedTitle
from src.services.merger import BangumiMerger


def build_candidate(
    parsed: ParsedTitle,
    mikan: Optional[MikanItem],
    tmdb: Optional[TmdbItem],
    rss_link: str = "",
) -> Bangumi:
    """
    Construit un bangumi candidat (non persiste) pour une release.

    Titre : TMDB, puis Mikan, puis titre parse.
    Poster : TMDB, puis Mikan.
    """
    if tmdb is not None and tmdb.title:
        title = tmdb.title
    elif mikan is not None and mikan.official_title:
        title = mikan.official_title
    else:
        title = parsed.title

    poster = ""
    if tmdb is not None and tmdb.poster_link:
        poster = tmdb.poster_link
    elif mikan is not None:
        poster = mikan.poster_link

    if tmdb is not None and tmdb.year:
        year = tmdb.year
    else:
        year = str(parsed.year) if parsed.year else ""

    return Bangumi(
        official_title=title,
        year=year,
        season=parsed.season,
        mikan_id=mikan.id if mikan else None,
        tmdb_id=tmdb.id if tmdb else None,
        mikan_item=mikan,
        tmdb_item=tmdb,
        rss_link=rss_link,
        episode_metadata=[parsed.to_episode_metadata()],
        poster_link=poster,
    )


class IdentityResolver:
    """
    Resolveur d'identite des releases inconnues.

    Les erreurs reseau des catalogues (httpx.HTTPError) sont propagees a la
    tache appelante. Les acces base se font dans un thread de travail, avec
    un repository neuf a chaque appel.

    Example:
        resolver = IdentityResolver(mikan_client, tmdb_client, repo_factory, merger)
        bangumi = await resolver.resolve(torrent, parsed, rss_link)
    """

    def __init__(
        self,
        mikan_client: IMikanClient,
        tmdb_client: ITmdbClient,
        repository_factory: Callable[[], IBangumiRepository],
        merger: BangumiMerger,
    ) -> None:
        self._mikan_client = mikan_client
        self._tmdb_client = tmdb_client
        self._repository_factory = repository_factory
        self._merger = merger

    async def resolve(
        self,
        torrent: Torrent,
        parsed: ParsedTitle,
        rss_link: str = "",
    ) -> Optional[Bangumi]:
        """
        Rattache une release a son bangumi canonique.

        Args:
            torrent: Release representative
            parsed: Resultat du parsing de son nom
            rss_link: Flux d'origine

        Returns:
            Le bangumi trouve ou cree, ou None si aucun catalogue ne
            reconnait la release
        """
        mikan = None
        if torrent.homepage:
            mikan = await self._mikan_client.lookup(torrent.homepage)
        tmdb = await self._tmdb_client.lookup(parsed.title, parsed.year, parsed.season)

        if mikan is None and tmdb is None:
            logger.info(
                "Aucun catalogue ne reconnait la release",
                title=parsed.title,
                name=torrent.name,
            )
            return None

        mikan_id = mikan.id if mikan else None
        tmdb_id = tmdb.id if tmdb else None
        existing = await asyncio.to_thread(self._find_existing, mikan_id, tmdb_id)

        meta_key = parsed.to_episode_metadata().dedup_key
        if (
            existing is not None
            and (mikan is None or existing.has_mikan_link)
            and (tmdb is None or existing.has_tmdb_link)
            and existing.find_episode_metadata(meta_key) is not None
        ):
            return existing

        candidate = build_candidate(parsed, mikan, tmdb, rss_link)
        return await asyncio.to_thread(self._merger.resolve_or_create, candidate)

    def _find_existing(
        self,
        mikan_id: Optional[int],
        tmdb_id: Optional[int],
    ) -> Optional[Bangumi]:
        """Recherche OU par IDs externes, signale les conflits entre les deux IDs."""
        with closing(self._repository_factory()) as repo:
            return self._lookup(repo, mikan_id, tmdb_id)

    def _lookup(
        self,
        repo: IBangumiRepository,
        mikan_id: Optional[int],
        tmdb_id: Optional[int],
    ) -> Optional[Bangumi]:
        existing = repo.find_by_external_ids(mikan_id=mikan_id, tmdb_id=tmdb_id)
        if existing is None or mikan_id is None or tmdb_id is None:
            return existing

        # Les deux IDs designent-ils deux bangumis differents ?
        if existing.tmdb_id != tmdb_id:
            other = repo.find_by_external_ids(tmdb_id=tmdb_id)
        elif existing.mikan_id != mikan_id:
            other = repo.find_by_external_ids(mikan_id=mikan_id)
        else:
            other = None
        if other is not None and other.id != existing.id:
            logger.warning(
                "IDs externes rattaches a deux bangumis differents",
                mikan_id=mikan_id,
                tmdb_id=tmdb_id,
                kept=existing.id,
                other=other.id,
            )
        return existing
