"""
Fixtures pytest partagees.

Ce module contient les fixtures communes utilisees dans les tests:
- Engine SQLite sur fichier temporaire (partageable entre threads)
- Repositories SQLModel branches sur cet engine
- Mocks des ports (clients externes, parser, file de telechargement)
- Settings de test
"""

from pathlib import Path
from typing import Callable, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import Engine
from sqlmodel import Session

from src.config import Settings
from src.core.entities.bangumi import EpisodeMetadata
from src.core.ports.api_clients import IFeedClient, IMikanClient, ITmdbClient
from src.core.ports.download import IDownloadQueue
from src.infrastructure.persistence.database import create_db_engine, init_db
from src.infrastructure.persistence.repositories import (
    SQLModelBangumiRepository,
    SQLModelEpisodeMetadataRepository,
    SQLModelRSSRepository,
    SQLModelTorrentRepository,
)


# ============================================================================
# Base de donnees
# ============================================================================


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    """
    Engine SQLite sur un fichier temporaire.

    Un fichier (et non :memory:) pour que les threads de fusion voient
    tous la meme base.
    """
    db_engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def bangumi_repo(session: Session) -> SQLModelBangumiRepository:
    return SQLModelBangumiRepository(session)


@pytest.fixture
def metadata_repo(session: Session) -> SQLModelEpisodeMetadataRepository:
    return SQLModelEpisodeMetadataRepository(session)


@pytest.fixture
def torrent_repo(session: Session) -> SQLModelTorrentRepository:
    return SQLModelTorrentRepository(session)


@pytest.fixture
def rss_repo(session: Session) -> SQLModelRSSRepository:
    return SQLModelRSSRepository(session)


@pytest.fixture
def bangumi_repo_factory(engine: Engine) -> Callable[[], SQLModelBangumiRepository]:
    """Fabrique de repositories, une session neuve par appel (comme le container)."""
    return lambda: SQLModelBangumiRepository(Session(engine))


# ============================================================================
# Mocks des ports
# ============================================================================


@pytest.fixture
def mock_feed_client() -> AsyncMock:
    """Mock de IFeedClient, flux vide par defaut."""
    mock = AsyncMock(spec=IFeedClient)
    mock.fetch_torrents.return_value = []
    return mock


@pytest.fixture
def mock_mikan_client() -> AsyncMock:
    """Mock de IMikanClient, aucune fiche par defaut."""
    mock = AsyncMock(spec=IMikanClient)
    mock.lookup.return_value = None
    return mock


@pytest.fixture
def mock_tmdb_client() -> AsyncMock:
    """Mock de ITmdbClient, aucune fiche par defaut."""
    mock = AsyncMock(spec=ITmdbClient)
    mock.lookup.return_value = None
    return mock


@pytest.fixture
def mock_download_queue() -> MagicMock:
    mock = MagicMock(spec=IDownloadQueue)
    mock.add = AsyncMock()
    return mock


# ============================================================================
# Donnees
# ============================================================================


@pytest.fixture
def frieren_metadata() -> EpisodeMetadata:
    return EpisodeMetadata(
        title="Frieren",
        season=1,
        group="ABC",
        resolution="1080p",
        sub="CHS",
        sub_type="内嵌",
    )


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings de test avec chemins temporaires."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'data' / 'data.db'}",
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "logs" / "bangumi.log",
        tmdb_api_key="test_api_key",
    )
