"""
Implementation SQLModel du repository Bangumi.

Implemente l'interface IBangumiRepository pour la persistance des bangumis
et de leurs relations (fiches Mikan/TMDB, EpisodeMetadata) dans SQLite.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.core.entities.bangumi import Bangumi, MikanItem, TmdbItem
from src.core.ports.repositories import IBangumiRepository
from src.infrastructure.persistence.models import (
    BangumiModel,
    EpisodeMetadataModel,
    MikanItemModel,
    TmdbItemModel,
)
from src.infrastructure.persistence.repositories.episode_metadata_repository import (
    metadata_to_entity,
    metadata_to_model,
)


class SQLModelBangumiRepository(IBangumiRepository):
    """
    Repository SQLModel pour les bangumis.

    Implemente IBangumiRepository avec conversion bidirectionnelle
    entre l'entite Bangumi (domaine) et BangumiModel (persistance).
    Les relations sont chargees explicitement (pas de lazy loading),
    ce qui permet de manipuler les entites apres fermeture de la session.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: BangumiModel) -> Bangumi:
        """
        Convertit un modele DB en entite domaine, sans les relations.

        Args :
            model : Le modele BangumiModel depuis la DB

        Retourne :
            L'entite Bangumi correspondante
        """
        return Bangumi(
            id=model.id,
            official_title=model.official_title,
            year=model.year,
            season=model.season,
            mikan_id=model.mikan_id,
            tmdb_id=model.tmdb_id,
            rss_link=model.rss_link,
            eps_collect=model.eps_collect,
            offset=model.offset,
            include_filter=model.include_filter,
            exclude_filter=model.exclude_filter,
            parser=model.parser,
            poster_link=model.poster_link,
            deleted=model.deleted,
        )

    def _to_entity_with_details(self, model: BangumiModel) -> Bangumi:
        """Convertit un modele DB en entite avec fiches externes et metadonnees."""
        bangumi = self._to_entity(model)

        if model.mikan_id is not None:
            mikan = self._session.get(MikanItemModel, model.mikan_id)
            if mikan:
                bangumi.mikan_item = MikanItem(
                    id=mikan.id,
                    official_title=mikan.official_title,
                    season=mikan.season,
                    poster_link=mikan.poster_link,
                )

        if model.tmdb_id is not None:
            tmdb = self._session.get(TmdbItemModel, model.tmdb_id)
            if tmdb:
                bangumi.tmdb_item = TmdbItem(
                    id=tmdb.id,
                    title=tmdb.title,
                    original_title=tmdb.original_title,
                    year=tmdb.year,
                    season=tmdb.season,
                    air_date=tmdb.air_date,
                    episode_count=tmdb.episode_count,
                    poster_link=tmdb.poster_link,
                    vote_average=tmdb.vote_average,
                )

        statement = (
            select(EpisodeMetadataModel)
            .where(EpisodeMetadataModel.bangumi_id == model.id)
            .order_by(EpisodeMetadataModel.id)
        )
        bangumi.episode_metadata = [
            metadata_to_entity(m) for m in self._session.exec(statement).all()
        ]
        return bangumi

    def _apply_to_model(self, model: BangumiModel, entity: Bangumi) -> None:
        """Recopie les champs de l'entite sur le modele."""
        model.official_title = entity.official_title
        model.year = entity.year
        model.season = entity.season
        model.mikan_id = entity.effective_mikan_id
        model.tmdb_id = entity.effective_tmdb_id
        model.rss_link = entity.rss_link
        model.eps_collect = entity.eps_collect
        model.offset = entity.offset
        model.include_filter = entity.include_filter
        model.exclude_filter = entity.exclude_filter
        model.parser = entity.parser
        model.poster_link = entity.poster_link
        model.deleted = entity.deleted
        model.updated_at = datetime.now(timezone.utc)

    def get_by_id(self, bangumi_id: int) -> Optional[Bangumi]:
        """Recupere un bangumi par son ID interne."""
        model = self._session.get(BangumiModel, bangumi_id)
        if model:
            return self._to_entity(model)
        return None

    def get_with_details(self, bangumi_id: int) -> Optional[Bangumi]:
        """Recupere un bangumi avec ses fiches externes et ses metadonnees."""
        model = self._session.get(BangumiModel, bangumi_id)
        if model:
            return self._to_entity_with_details(model)
        return None

    def list_all(self, include_deleted: bool = False) -> list[Bangumi]:
        """Liste les bangumis (hors supprimes par defaut) avec leurs relations."""
        statement = select(BangumiModel).order_by(BangumiModel.id)
        if not include_deleted:
            statement = statement.where(BangumiModel.deleted == False)  # noqa: E712
        models = self._session.exec(statement).all()
        return [self._to_entity_with_details(model) for model in models]

    def find_by_external_ids(
        self,
        mikan_id: Optional[int] = None,
        tmdb_id: Optional[int] = None,
    ) -> Optional[Bangumi]:
        """
        Recherche un bangumi lie a l'un OU l'autre des IDs externes.

        Un ID absent ne participe pas a la requete (jamais de comparaison
        avec une valeur sentinelle). Premier resultat par ID croissant.
        """
        conditions = []
        if mikan_id is not None:
            conditions.append(BangumiModel.mikan_id == mikan_id)
        if tmdb_id is not None:
            conditions.append(BangumiModel.tmdb_id == tmdb_id)
        if not conditions:
            return None

        statement = (
            select(BangumiModel).where(or_(*conditions)).order_by(BangumiModel.id)
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity_with_details(model)
        return None

    def save(self, bangumi: Bangumi) -> Bangumi:
        """
        Sauvegarde atomique d'un bangumi et de ses relations.

        Dans une seule transaction :
        1. Insertion ou mise a jour des fiches Mikan/TMDB embarquees
        2. Insertion ou mise a jour de la ligne bangumi
        3. Insertion des EpisodeMetadata encore sans ID

        En cas d'erreur, la transaction est annulee et l'exception propagee.
        """
        try:
            if bangumi.mikan_item is not None:
                self._session.merge(
                    MikanItemModel(
                        id=bangumi.mikan_item.id,
                        official_title=bangumi.mikan_item.official_title,
                        season=bangumi.mikan_item.season,
                        poster_link=bangumi.mikan_item.poster_link,
                    )
                )
            if bangumi.tmdb_item is not None:
                self._session.merge(
                    TmdbItemModel(
                        id=bangumi.tmdb_item.id,
                        title=bangumi.tmdb_item.title,
                        original_title=bangumi.tmdb_item.original_title,
                        year=bangumi.tmdb_item.year,
                        season=bangumi.tmdb_item.season,
                        air_date=bangumi.tmdb_item.air_date,
                        episode_count=bangumi.tmdb_item.episode_count,
                        poster_link=bangumi.tmdb_item.poster_link,
                        vote_average=bangumi.tmdb_item.vote_average,
                    )
                )

            model = None
            if bangumi.id is not None:
                model = self._session.get(BangumiModel, bangumi.id)
            if model is None:
                model = BangumiModel(id=bangumi.id)
            self._apply_to_model(model, bangumi)
            self._session.add(model)
            self._session.flush()

            for meta in bangumi.episode_metadata:
                if meta.id is None:
                    self._session.add(metadata_to_model(meta, bangumi_id=model.id))

            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

        return self._to_entity_with_details(model)

    def update(self, bangumi: Bangumi) -> Optional[Bangumi]:
        """Met a jour les champs d'un bangumi existant, sans toucher aux relations."""
        if bangumi.id is None:
            return None
        model = self._session.get(BangumiModel, bangumi.id)
        if model is None:
            return None
        try:
            self._apply_to_model(model, bangumi)
            self._session.add(model)
            self._session.commit()
            self._session.refresh(model)
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return self._to_entity_with_details(model)

    def soft_delete(self, bangumi_id: int) -> bool:
        """Marque un bangumi comme supprime (les releases restent en base)."""
        model = self._session.get(BangumiModel, bangumi_id)
        if model is None:
            return False
        try:
            model.deleted = True
            model.updated_at = datetime.now(timezone.utc)
            self._session.add(model)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return True

    def close(self) -> None:
        """Ferme la session et rend sa connexion au pool."""
        self._session.close()
