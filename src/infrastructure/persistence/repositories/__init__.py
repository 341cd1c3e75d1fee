"""
Implementations SQLModel des repositories.

Ce module contient les implementations concretes des interfaces repository
definies dans src/core/ports/repositories.py, utilisant SQLModel pour
la persistance SQLite.

Chaque repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel via injection de dependances
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
- Annule la transaction et propage l'exception en cas d'erreur d'ecriture
"""

from src.infrastructure.persistence.repositories.bangumi_repository import (
    SQLModelBangumiRepository,
)
from src.infrastructure.persistence.repositories.episode_metadata_repository import (
    SQLModelEpisodeMetadataRepository,
)
from src.infrastructure.persistence.repositories.torrent_repository import (
    SQLModelTorrentRepository,
)
from src.infrastructure.persistence.repositories.rss_repository import (
    SQLModelRSSRepository,
)

__all__ = [
    "SQLModelBangumiRepository",
    "SQLModelEpisodeMetadataRepository",
    "SQLModelTorrentRepository",
    "SQLModelRSSRepository",
]
