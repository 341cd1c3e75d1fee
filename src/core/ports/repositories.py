"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance des données.
Les implémentations (adaptateurs) fourniront les mécanismes de stockage concrets
(SQLite via SQLModel, en mémoire pour les tests, etc.).

Convention : une absence (aucun enregistrement trouvé) est toujours signalée
par None ou une liste vide, jamais par une exception. Les exceptions sont
réservées aux erreurs de stockage.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.core.entities.bangumi import Bangumi, EpisodeMetadata
from src.core.entities.torrent import RSSItem, Torrent


class IBangumiRepository(ABC):
    """
    Interface de stockage des bangumis (entités canoniques).

    Définit les opérations pour persister et retrouver les Bangumi
    ainsi que leurs fiches Mikan/TMDB et leurs EpisodeMetadata.
    """

    @abstractmethod
    def get_by_id(self, bangumi_id: int) -> Optional[Bangumi]:
        """Récupère un bangumi par son ID interne (sans les relations)."""
        ...

    @abstractmethod
    def get_with_details(self, bangumi_id: int) -> Optional[Bangumi]:
        """Récupère un bangumi avec ses fiches externes et ses métadonnées."""
        ...

    @abstractmethod
    def list_all(self, include_deleted: bool = False) -> list[Bangumi]:
        """Liste les bangumis avec leurs relations."""
        ...

    @abstractmethod
    def find_by_external_ids(
        self,
        mikan_id: Optional[int] = None,
        tmdb_id: Optional[int] = None,
    ) -> Optional[Bangumi]:
        """
        Recherche un bangumi lié à l'un OU l'autre des IDs externes.

        Args :
            mikan_id : ID Mikan, ignoré si None
            tmdb_id : ID TMDB, ignoré si None

        Retourne :
            Le premier bangumi (plus petit ID) correspondant, chargé avec ses
            relations, ou None (notamment quand les deux IDs sont None)
        """
        ...

    @abstractmethod
    def save(self, bangumi: Bangumi) -> Bangumi:
        """
        Sauvegarde atomique d'un bangumi (insertion ou mise à jour).

        Les fiches Mikan/TMDB embarquées sont insérées ou mises à jour, les
        EpisodeMetadata sans ID sont insérées en cascade. En cas d'erreur,
        rien n'est écrit.
        """
        ...

    @abstractmethod
    def update(self, bangumi: Bangumi) -> Optional[Bangumi]:
        """Met à jour les champs modifiables d'un bangumi existant."""
        ...

    @abstractmethod
    def soft_delete(self, bangumi_id: int) -> bool:
        """Marque un bangumi comme supprimé. Retourne True si trouvé."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Libère la connexion de stockage (repository jetable, voir BangumiMerger)."""
        ...


class IEpisodeMetadataRepository(ABC):
    """
    Interface de stockage des EpisodeMetadata.

    Porte l'index de correspondance par titre utilisé pour classer les
    releases en "connues" ou "inconnues".
    """

    @abstractmethod
    def find_by_torrent_name(self, torrent_name: str) -> Optional[EpisodeMetadata]:
        """
        Trouve une métadonnée dont le titre ET le groupe sont des
        sous-chaînes du nom de release.

        Plusieurs correspondances possibles : la première (plus petit ID)
        est retournée.
        """
        ...

    @abstractmethod
    def get_by_id(self, metadata_id: int) -> Optional[EpisodeMetadata]:
        """Récupère une métadonnée par son ID."""
        ...

    @abstractmethod
    def list_by_bangumi(self, bangumi_id: int) -> list[EpisodeMetadata]:
        """Liste les métadonnées rattachées à un bangumi."""
        ...

    @abstractmethod
    def save(self, metadata: EpisodeMetadata) -> EpisodeMetadata:
        """Sauvegarde une métadonnée (insertion ou mise à jour)."""
        ...


class ITorrentRepository(ABC):
    """
    Interface de stockage des releases (torrents).

    Les torrents sont dédupliqués par URL.
    """

    @abstractmethod
    def get_by_url(self, url: str) -> Optional[Torrent]:
        """Récupère un torrent par son URL."""
        ...

    @abstractmethod
    def get_by_download_uid(self, download_uid: str) -> Optional[Torrent]:
        """Récupère un torrent par son identifiant de téléchargement."""
        ...

    @abstractmethod
    def save(self, torrent: Torrent) -> Torrent:
        """Sauvegarde un torrent (insertion ou mise à jour par URL)."""
        ...

    @abstractmethod
    def filter_new(self, torrents: list[Torrent]) -> list[Torrent]:
        """Garde les torrents inconnus ou pas encore téléchargés."""
        ...

    @abstractmethod
    def list_unrenamed(self) -> list[Torrent]:
        """Liste les torrents téléchargés mais pas encore renommés."""
        ...

    @abstractmethod
    def list_by_bangumi(self, bangumi_id: int) -> list[Torrent]:
        """Liste les torrents d'un bangumi."""
        ...

    @abstractmethod
    def delete_by_url(self, url: str) -> bool:
        """Supprime un torrent par URL. Retourne True si supprimé."""
        ...


class IRSSRepository(ABC):
    """
    Interface de stockage des abonnements RSS.
    """

    @abstractmethod
    def get_by_id(self, rss_id: int) -> Optional[RSSItem]:
        """Récupère un flux par son ID."""
        ...

    @abstractmethod
    def get_by_url(self, url: str) -> Optional[RSSItem]:
        """Récupère un flux par son URL."""
        ...

    @abstractmethod
    def list_all(self) -> list[RSSItem]:
        """Liste tous les flux."""
        ...

    @abstractmethod
    def list_active(self) -> list[RSSItem]:
        """Liste les flux actifs."""
        ...

    @abstractmethod
    def save(self, item: RSSItem) -> RSSItem:
        """Sauvegarde un flux (insertion ou mise à jour par URL)."""
        ...

    @abstractmethod
    def set_enabled(self, rss_id: int, enabled: bool) -> bool:
        """Active ou désactive un flux. Retourne True si trouvé."""
        ...

    @abstractmethod
    def delete(self, rss_id: int) -> bool:
        """Supprime un flux. Retourne True si supprimé."""
        ...
