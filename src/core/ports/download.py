"""
Interface port pour la file de telechargement.
"""

from abc import ABC, abstractmethod

from src.core.entities.torrent import Torrent


class IDownloadQueue(ABC):
    """
    File de telechargement alimentee par le rafraichissement des flux.

    L'ajout est "fire-and-forget" : aucun retour sur la fin du telechargement.
    """

    @abstractmethod
    async def add(self, torrent: Torrent) -> None:
        """Ajoute un torrent a la file."""
        ...

    @property
    @abstractmethod
    def size(self) -> int:
        """Nombre de torrents en attente."""
        ...
