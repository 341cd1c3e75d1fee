"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- IBangumiRepository : Stockage des bangumis et de leurs liens externes
- IEpisodeMetadataRepository : Stockage des métadonnées et index par titre
- ITorrentRepository : Stockage des releases
- IRSSRepository : Stockage des abonnements RSS

Ports client : Contrats pour les services externes
- IFeedClient : Récupération des flux RSS
- IMikanClient : Catalogue Mikan
- ITmdbClient : Catalogue TMDB

Autres ports :
- ITitleParser : Parsing des noms de releases
- IDownloadQueue : File de téléchargement
"""

from src.core.ports.repositories import (
    IBangumiRepository,
    IEpisodeMetadataRepository,
    ITorrentRepository,
    IRSSRepository,
)
from src.core.ports.api_clients import (
    IFeedClient,
    IMikanClient,
    ITmdbClient,
)
from src.core.ports.parser import ITitleParser
from src.core.ports.download import IDownloadQueue

__all__ = [
    # Repositories
    "IBangumiRepository",
    "IEpisodeMetadataRepository",
    "ITorrentRepository",
    "IRSSRepository",
    # Clients
    "IFeedClient",
    "IMikanClient",
    "ITmdbClient",
    # Autres
    "ITitleParser",
    "IDownloadQueue",
]
