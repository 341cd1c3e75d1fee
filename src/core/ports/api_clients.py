"""
Interfaces ports pour les clients externes.

Interfaces abstraites (ports) définissant les contrats pour les services externes :
- le transport des flux RSS
- le catalogue de suivi des releases (Mikan)
- le catalogue de métadonnées (TMDB)

Une absence de résultat est signalée par None ; les erreurs réseau sont
propagées à l'appelant.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.core.entities.bangumi import MikanItem, TmdbItem
from src.core.entities.torrent import Torrent


class IFeedClient(ABC):
    """Interface du client de récupération des flux RSS."""

    @abstractmethod
    async def fetch_torrents(self, url: str) -> list[Torrent]:
        """
        Récupère les releases d'un flux.

        Args :
            url : URL du flux RSS

        Retourne :
            Liste des torrents du flux (non persistés)
        """
        ...


class IMikanClient(ABC):
    """Interface du catalogue Mikan (suivi des releases des fansubs)."""

    @abstractmethod
    async def lookup(self, homepage: str) -> Optional[MikanItem]:
        """
        Identifie le bangumi Mikan d'une release à partir de sa page.

        Args :
            homepage : URL de la page de la release sur Mikan

        Retourne :
            La fiche Mikan, ou None si la page n'identifie aucun bangumi
        """
        ...


class ITmdbClient(ABC):
    """Interface du catalogue TMDB (métadonnées officielles)."""

    @abstractmethod
    async def lookup(
        self,
        title: str,
        year: Optional[int] = None,
        season: int = 1,
    ) -> Optional[TmdbItem]:
        """
        Recherche une série TMDB par titre.

        Args :
            title : Titre à rechercher
            year : Année de première diffusion pour départager (optionnel)
            season : Saison dont on veut le nombre d'épisodes

        Retourne :
            La fiche TMDB, ou None si aucun résultat
        """
        ...
