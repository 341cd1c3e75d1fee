"""
Module de persistance SQLite.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Creation de l'engine, session factory, initialisation
- models.py : Modeles SQLModel representant les tables de la base de donnees
- repositories/ : Implementations des ports de persistance

Les modeles ici sont des adapters de persistance, distincts des entites de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.

Usage:
    from src.infrastructure.persistence import create_db_engine, init_db

    engine = init_db(create_db_engine("sqlite:///data/data.db"))
"""

from src.infrastructure.persistence.database import (
    create_db_engine,
    get_session,
    init_db,
)
from src.infrastructure.persistence.models import (
    BangumiModel,
    EpisodeMetadataModel,
    MikanItemModel,
    RSSItemModel,
    TmdbItemModel,
    TorrentModel,
)

__all__ = [
    "create_db_engine",
    "get_session",
    "init_db",
    "BangumiModel",
    "EpisodeMetadataModel",
    "MikanItemModel",
    "RSSItemModel",
    "TmdbItemModel",
    "TorrentModel",
]
