"""
Implementation SQLModel du repository des abonnements RSS.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.core.entities.torrent import RSSItem
from src.core.ports.repositories import IRSSRepository
from src.infrastructure.persistence.models import RSSItemModel


class SQLModelRSSRepository(IRSSRepository):
    """
    Repository SQLModel pour les flux RSS.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: RSSItemModel) -> RSSItem:
        return RSSItem(
            id=model.id,
            name=model.name,
            url=model.url,
            enabled=model.enabled,
            aggregate=model.aggregate,
            parser=model.parser,
        )

    def get_by_id(self, rss_id: int) -> Optional[RSSItem]:
        """Recupere un flux par son ID."""
        model = self._session.get(RSSItemModel, rss_id)
        if model:
            return self._to_entity(model)
        return None

    def get_by_url(self, url: str) -> Optional[RSSItem]:
        """Recupere un flux par son URL."""
        statement = select(RSSItemModel).where(RSSItemModel.url == url)
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def list_all(self) -> list[RSSItem]:
        """Liste tous les flux."""
        statement = select(RSSItemModel).order_by(RSSItemModel.id)
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def list_active(self) -> list[RSSItem]:
        """Liste les flux actifs."""
        statement = (
            select(RSSItemModel)
            .where(RSSItemModel.enabled == True)  # noqa: E712
            .order_by(RSSItemModel.id)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def save(self, item: RSSItem) -> RSSItem:
        """Sauvegarde un flux (insertion ou mise a jour par URL)."""
        try:
            statement = select(RSSItemModel).where(RSSItemModel.url == item.url)
            model = self._session.exec(statement).first()
            if model is None:
                model = RSSItemModel(url=item.url)
            model.name = item.name
            model.enabled = item.enabled
            model.aggregate = item.aggregate
            model.parser = item.parser
            self._session.add(model)
            self._session.commit()
            self._session.refresh(model)
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return self._to_entity(model)

    def set_enabled(self, rss_id: int, enabled: bool) -> bool:
        """Active ou desactive un flux."""
        model = self._session.get(RSSItemModel, rss_id)
        if model is None:
            return False
        try:
            model.enabled = enabled
            self._session.add(model)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return True

    def delete(self, rss_id: int) -> bool:
        """Supprime un flux."""
        model = self._session.get(RSSItemModel, rss_id)
        if model is None:
            return False
        try:
            self._session.delete(model)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return True
