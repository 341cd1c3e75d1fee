"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI.
L'engine est construit une seule fois depuis la configuration et passe
explicitement aux sessions (pas d'engine global).
"""

from dependency_injector import containers, providers
from sqlmodel import Session

from .adapters.api.cache import APICache
from .adapters.api.mikan_client import MikanClient
from .adapters.api.tmdb_client import TmdbClient
from .adapters.download.queue import AsyncDownloadQueue
from .adapters.feed.rss_client import RSSFeedClient
from .adapters.parsing.title_parser import GuessitTitleParser
from .config import Settings
from .infrastructure.persistence.database import create_db_engine, init_db
from .infrastructure.persistence.repositories import (
    SQLModelBangumiRepository,
    SQLModelEpisodeMetadataRepository,
    SQLModelRSSRepository,
    SQLModelTorrentRepository,
)
from .services.filter import FilterService
from .services.merger import BangumiMerger
from .services.refresh import RefreshService
from .services.resolver import IdentityResolver


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Cree les tables une fois
        service = container.refresh_service()
        bangumi_repo = container.bangumi_repository()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - engine unique, Resource pour la creation des tables
    engine = providers.Singleton(
        create_db_engine,
        database_url=config.provided.database_url,
    )
    database = providers.Resource(init_db, engine=engine)

    # Session factory - nouvelle session a chaque appel
    session = providers.Factory(Session, engine)

    # Repositories - Factory pour nouvelle instance avec session fraiche
    bangumi_repository = providers.Factory(
        SQLModelBangumiRepository,
        session=session,
    )
    episode_metadata_repository = providers.Factory(
        SQLModelEpisodeMetadataRepository,
        session=session,
    )
    torrent_repository = providers.Factory(
        SQLModelTorrentRepository,
        session=session,
    )
    rss_repository = providers.Factory(
        SQLModelRSSRepository,
        session=session,
    )

    # Cache API - Singleton pour partage entre clients
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.cache_dir,
    )

    # Clients externes - Singleton (un client HTTP par service)
    # Sans cle TMDB, le client est cree mais ses recherches retournent None
    feed_client = providers.Singleton(
        RSSFeedClient,
        timeout=config.provided.request_timeout,
    )
    mikan_client = providers.Singleton(
        MikanClient,
        cache=api_cache,
        base_url=config.provided.mikan_base_url,
        timeout=config.provided.request_timeout,
    )
    tmdb_client = providers.Singleton(
        TmdbClient,
        api_key=config.provided.tmdb_api_key,
        cache=api_cache,
        language=config.provided.tmdb_language,
        timeout=config.provided.request_timeout,
    )

    # Adapters et services sans etat
    title_parser = providers.Singleton(GuessitTitleParser)
    filter_service = providers.Singleton(
        FilterService,
        global_exclude=config.provided.global_exclude,
    )
    download_queue = providers.Singleton(AsyncDownloadQueue)

    # Le merger recoit la fabrique du repository : une session par fusion
    bangumi_merger = providers.Singleton(
        BangumiMerger,
        repository_factory=bangumi_repository.provider,
    )
    identity_resolver = providers.Singleton(
        IdentityResolver,
        mikan_client=mikan_client,
        tmdb_client=tmdb_client,
        repository_factory=bangumi_repository.provider,
        merger=bangumi_merger,
    )

    # Service de rafraichissement - Factory car depend de repositories (sessions fraiches)
    refresh_service = providers.Factory(
        RefreshService,
        feed_client=feed_client,
        parser=title_parser,
        filter_service=filter_service,
        resolver=identity_resolver,
        torrent_repo=torrent_repository,
        metadata_repo=episode_metadata_repository,
        bangumi_repo=bangumi_repository,
        rss_repo=rss_repository,
        download_queue=download_queue,
        discovery_workers=config.provided.discovery_workers,
    )
