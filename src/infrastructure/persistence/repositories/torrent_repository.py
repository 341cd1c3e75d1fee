"""
Implementation SQLModel du repository Torrent.

Implemente l'interface ITorrentRepository. Les torrents sont dedupliques
par URL : save() met a jour la ligne existante au lieu d'en creer une
seconde.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.core.entities.torrent import Torrent
from src.core.ports.repositories import ITorrentRepository
from src.infrastructure.persistence.models import TorrentModel


class SQLModelTorrentRepository(ITorrentRepository):
    """
    Repository SQLModel pour les releases.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: TorrentModel) -> Torrent:
        """Convertit un modele DB en entite domaine."""
        return Torrent(
            id=model.id,
            name=model.name,
            url=model.url,
            homepage=model.homepage,
            download_uid=model.download_uid,
            downloaded=model.downloaded,
            renamed=model.renamed,
            bangumi_id=model.bangumi_id,
            rss_link=model.rss_link,
        )

    def _get_model_by_url(self, url: str) -> Optional[TorrentModel]:
        statement = select(TorrentModel).where(TorrentModel.url == url)
        return self._session.exec(statement).first()

    def get_by_url(self, url: str) -> Optional[Torrent]:
        """Recupere un torrent par son URL."""
        model = self._get_model_by_url(url)
        if model:
            return self._to_entity(model)
        return None

    def get_by_download_uid(self, download_uid: str) -> Optional[Torrent]:
        """Recupere un torrent par son identifiant de telechargement."""
        if not download_uid:
            return None
        statement = select(TorrentModel).where(TorrentModel.download_uid == download_uid)
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def save(self, torrent: Torrent) -> Torrent:
        """Sauvegarde un torrent (insertion ou mise a jour par URL)."""
        try:
            model = self._get_model_by_url(torrent.url)
            if model is None:
                model = TorrentModel(url=torrent.url)
            model.name = torrent.name
            model.homepage = torrent.homepage
            model.download_uid = torrent.download_uid
            model.downloaded = torrent.downloaded
            model.renamed = torrent.renamed
            model.bangumi_id = torrent.bangumi_id
            model.rss_link = torrent.rss_link
            model.updated_at = datetime.now(timezone.utc)
            self._session.add(model)
            self._session.commit()
            self._session.refresh(model)
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return self._to_entity(model)

    def filter_new(self, torrents: list[Torrent]) -> list[Torrent]:
        """
        Garde les torrents absents de la base ou pas encore telecharges.

        Args :
            torrents : Torrents recus d'un flux

        Retourne :
            Sous-liste dans l'ordre d'origine
        """
        new_torrents = []
        for torrent in torrents:
            existing = self._get_model_by_url(torrent.url)
            if existing is None or not existing.downloaded:
                new_torrents.append(torrent)
        return new_torrents

    def list_unrenamed(self) -> list[Torrent]:
        """Liste les torrents telecharges mais pas encore renommes."""
        statement = (
            select(TorrentModel)
            .where(TorrentModel.downloaded == True)  # noqa: E712
            .where(TorrentModel.renamed == False)  # noqa: E712
            .order_by(TorrentModel.id)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def list_by_bangumi(self, bangumi_id: int) -> list[Torrent]:
        """Liste les torrents rattaches a un bangumi."""
        statement = (
            select(TorrentModel)
            .where(TorrentModel.bangumi_id == bangumi_id)
            .order_by(TorrentModel.id)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def delete_by_url(self, url: str) -> bool:
        """Supprime un torrent par URL."""
        model = self._get_model_by_url(url)
        if model is None:
            return False
        try:
            self._session.delete(model)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return True
