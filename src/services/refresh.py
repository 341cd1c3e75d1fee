"""
Rafraichissement des flux RSS.

RefreshService orchestre les deux chemins de traitement d'un flux :

- refresh_rss (chemin rapide) : les releases dont le nom correspond a une
  EpisodeMetadata connue sont rattachees a son bangumi et mises en file de
  telechargement, sans parsing ni appel aux catalogues.
- find_new_bangumi (chemin lent) : les releases inconnues et admissibles
  sont parsees, regroupees par titre, et chaque groupe est confie a une
  tache de fond qui resout son identite (IdentityResolver).

Les taches de fond sont bornees par un semaphore ; aucun pull n'attend
leur fin (wait_pending sert a la CLI et aux tests). Les repositories sont
synchrones (SQLite) : ils sont appeles via asyncio.to_thread.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from src.core.entities.torrent import Torrent
from src.core.ports.api_clients import IFeedClient
from src.core.ports.download import IDownloadQueue
from src.core.ports.parser import ITitleParser
from src.core.ports.repositories import (
    IBangumiRepository,
    IEpisodeMetadataRepository,
    IRSSRepository,
    ITorrentRepository,
)
from src.core.value_objects.parsed_info import ParsedTitle
from src.services.filter import FilterService
from src.services.resolver import IdentityResolver


@dataclass
class RefreshResult:
    """Resultat du chemin rapide pour un flux.

    Attributes:
        enqueued: Releases rattachees et mises en file
        skipped: Releases reconnues mais ecartees (bangumi supprime, filtre, deja telecharge)
        unmatched: Releases sans correspondance dans l'index des titres
        failed: Releases en erreur
    """

    enqueued: int = 0
    skipped: int = 0
    unmatched: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        """Nombre total de releases traitees."""
        return self.enqueued + self.skipped + self.unmatched + self.failed


@dataclass
class DiscoveryResult:
    """Resultat du chemin lent pour un flux.

    Attributes:
        known: Releases deja reconnues par l'index des titres
        filtered: Releases rejetees par le filtre d'admissibilite
        unparsed: Releases dont le nom n'a pas pu etre parse
        dispatched: Taches de resolution lancees (une par titre)
    """

    known: int = 0
    filtered: int = 0
    unparsed: int = 0
    dispatched: int = 0


class RefreshService:
    """
    Service de rafraichissement des flux.

    Example:
        service = container.refresh_service()
        discovery = await service.find_new_bangumi(url)
        await service.wait_pending()
        result = await service.refresh_rss(url)
        print(f"En file: {result.enqueued}, Non reconnues: {result.unmatched}")
    """

    def __init__(
        self,
        feed_client: IFeedClient,
        parser: ITitleParser,
        filter_service: FilterService,
        resolver: IdentityResolver,
        torrent_repo: ITorrentRepository,
        metadata_repo: IEpisodeMetadataRepository,
        bangumi_repo: IBangumiRepository,
        rss_repo: IRSSRepository,
        download_queue: IDownloadQueue,
        discovery_workers: int = 4,
    ) -> None:
        """
        Initialise le service.

        Args:
            feed_client: Client de recuperation des flux
            parser: Parser des noms de releases
            filter_service: Filtre d'admissibilite
            resolver: Resolveur d'identite (chemin lent)
            torrent_repo: Repository des releases
            metadata_repo: Repository des EpisodeMetadata (index des titres)
            bangumi_repo: Repository des bangumis
            rss_repo: Repository des abonnements
            download_queue: File de telechargement
            discovery_workers: Nombre maximum de resolutions simultanees
        """
        self._feed_client = feed_client
        self._parser = parser
        self._filter = filter_service
        self._resolver = resolver
        self._torrent_repo = torrent_repo
        self._metadata_repo = metadata_repo
        self._bangumi_repo = bangumi_repo
        self._rss_repo = rss_repo
        self._download_queue = download_queue
        self._semaphore = asyncio.Semaphore(discovery_workers)
        self._pending: set[asyncio.Task] = set()

    async def pull_rss(self, url: str) -> list[Torrent]:
        """
        Recupere un flux et garde les releases nouvelles.

        Une release est nouvelle si elle est inconnue en base ou connue mais
        pas encore telechargee. Chaque release est estampillee avec le flux.
        """
        torrents = await self._feed_client.fetch_torrents(url)
        new_torrents = await asyncio.to_thread(self._torrent_repo.filter_new, torrents)
        for torrent in new_torrents:
            torrent.rss_link = url
        logger.debug("Flux tire", url=url, total=len(torrents), new=len(new_torrents))
        return new_torrents

    async def refresh_rss(self, url: str) -> RefreshResult:
        """
        Chemin rapide : rattache les releases connues et les met en file.

        Chaque release est traitee isolement : une erreur n'interrompt pas
        le traitement des suivantes. Les acces base passent par un thread de
        travail : une base verrouillee par une fusion ne bloque pas la boucle.

        Raises:
            httpx.HTTPError: Le flux lui-meme n'a pas pu etre recupere
        """
        result = RefreshResult()
        for torrent in await self.pull_rss(url):
            try:
                saved = await asyncio.to_thread(self._attach_known, torrent, result)
                if saved is not None:
                    await self._download_queue.add(saved)
                    result.enqueued += 1
            except Exception as e:
                result.failed += 1
                logger.opt(exception=e).error(
                    "Echec du rattachement", name=torrent.name, url=torrent.url
                )

        logger.info(
            "Flux rafraichi",
            url=url,
            enqueued=result.enqueued,
            skipped=result.skipped,
            unmatched=result.unmatched,
            failed=result.failed,
        )
        return result

    def _attach_known(self, torrent: Torrent, result: RefreshResult) -> Optional[Torrent]:
        """Rattache la release a son bangumi et l'enregistre ; None si ecartee."""
        meta = self._metadata_repo.find_by_torrent_name(torrent.name)
        if meta is None or meta.bangumi_id is None:
            logger.warning("Release sans bangumi connu", name=torrent.name)
            result.unmatched += 1
            return None

        bangumi = self._bangumi_repo.get_by_id(meta.bangumi_id)
        if bangumi is None or bangumi.deleted:
            result.skipped += 1
            return None
        if not self._filter.accepts(torrent, bangumi):
            logger.debug("Release filtree", name=torrent.name, bangumi=bangumi.official_title)
            result.skipped += 1
            return None

        stored = self._torrent_repo.get_by_url(torrent.url)
        if stored is not None and stored.downloaded:
            result.skipped += 1
            return None

        torrent.bangumi_id = bangumi.id
        if stored is not None:
            torrent.id = stored.id
            torrent.download_uid = stored.download_uid
        return self._torrent_repo.save(torrent)

    async def find_new_bangumi(self, url: str) -> DiscoveryResult:
        """
        Chemin lent : lance la resolution des releases inconnues.

        Les releases deja reconnues par l'index des titres sont ignorees,
        puis le filtre d'admissibilite et le parser sont appliques. Les
        releases sont regroupees par titre parse (la premiere du flux
        represente le groupe) et une tache de fond est lancee par groupe.
        La methode retourne sans attendre les taches.

        Raises:
            httpx.HTTPError: Le flux n'a pas pu etre recupere
        """
        result = DiscoveryResult()
        torrents = await self._feed_client.fetch_torrents(url)
        groups = await asyncio.to_thread(self._group_unknown, torrents, url, result)

        for torrent, parsed in groups.values():
            self._dispatch(torrent, parsed, url)
        result.dispatched = len(groups)

        logger.info(
            "Decouverte lancee",
            url=url,
            known=result.known,
            filtered=result.filtered,
            unparsed=result.unparsed,
            dispatched=result.dispatched,
        )
        return result

    def _group_unknown(
        self,
        torrents: list[Torrent],
        url: str,
        result: DiscoveryResult,
    ) -> dict[str, tuple[Torrent, ParsedTitle]]:
        groups: dict[str, tuple[Torrent, ParsedTitle]] = {}
        for torrent in torrents:
            torrent.rss_link = url
            if self._metadata_repo.find_by_torrent_name(torrent.name) is not None:
                result.known += 1
                continue
            if not self._filter.accepts(torrent):
                result.filtered += 1
                continue
            parsed = self._parser.parse(torrent.name)
            if parsed is None:
                logger.debug("Nom de release non parsable", name=torrent.name)
                result.unparsed += 1
                continue
            groups.setdefault(parsed.title, (torrent, parsed))
        return groups

    def _dispatch(self, torrent: Torrent, parsed: ParsedTitle, rss_link: str) -> None:
        task = asyncio.create_task(self._discover(torrent, parsed, rss_link))
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)

    async def _discover(self, torrent: Torrent, parsed: ParsedTitle, rss_link: str) -> None:
        async with self._semaphore:
            bangumi = await self._resolver.resolve(torrent, parsed, rss_link)
        if bangumi is not None:
            logger.debug("Release resolue", title=parsed.title, bangumi_id=bangumi.id)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.opt(exception=error).error("Echec de la resolution d'un bangumi")

    @property
    def pending_count(self) -> int:
        """Nombre de taches de resolution en cours."""
        return len(self._pending)

    async def wait_pending(self) -> None:
        """Attend la fin des taches de resolution en cours."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def refresh_all(self) -> dict[str, RefreshResult]:
        """
        Rafraichit tous les flux actifs.

        Decouverte sur chaque flux, attente des resolutions, puis chemin
        rapide : les bangumis decouverts recoivent leurs releases dans le
        meme passage. Un flux en erreur n'interrompt pas les autres.

        Returns:
            Resultat du chemin rapide par URL de flux (flux en erreur absents)
        """
        feeds = await asyncio.to_thread(self._rss_repo.list_active)
        for feed in feeds:
            try:
                await self.find_new_bangumi(feed.url)
            except Exception as e:
                logger.opt(exception=e).error("Echec de la decouverte", url=feed.url)
        await self.wait_pending()

        results: dict[str, RefreshResult] = {}
        for feed in feeds:
            try:
                results[feed.url] = await self.refresh_rss(feed.url)
            except Exception as e:
                logger.opt(exception=e).error("Echec du rafraichissement", url=feed.url)
        return results

    async def refresh_feed(self, url: str, wait: bool = True) -> RefreshResult:
        """
        Decouverte puis chemin rapide pour un seul flux.

        Args:
            url: URL du flux
            wait: Attendre les resolutions avant le chemin rapide

        Returns:
            Resultat du chemin rapide
        """
        await self.find_new_bangumi(url)
        if wait:
            await self.wait_pending()
        return await self.refresh_rss(url)
