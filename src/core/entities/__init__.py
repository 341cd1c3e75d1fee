"""
Entites metier representant les concepts du domaine.

Les entites sont des objets mutables avec une identite persistante.

Exports:
- Bangumi: Identite canonique d'une oeuvre
- MikanItem, TmdbItem: Fiches des catalogues externes
- EpisodeMetadata: Resultat structure du parsing d'une classe de releases
- Torrent: Une release recue d'un flux
- RSSItem: Un abonnement a un flux RSS
"""

from src.core.entities.bangumi import (
    Bangumi,
    DedupKey,
    EpisodeMetadata,
    MikanItem,
    TmdbItem,
)
from src.core.entities.torrent import RSSItem, Torrent

__all__ = [
    "Bangumi",
    "DedupKey",
    "EpisodeMetadata",
    "MikanItem",
    "TmdbItem",
    "RSSItem",
    "Torrent",
]
