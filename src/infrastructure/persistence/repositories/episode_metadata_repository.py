"""
Implementation SQLModel du repository EpisodeMetadata.

Implemente IEpisodeMetadataRepository, y compris l'index de correspondance
par titre : une release est "connue" si le titre ET le groupe d'une
metadonnee stockee apparaissent tels quels dans son nom.
"""

from typing import Optional

from sqlalchemy import func, literal
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.core.entities.bangumi import EpisodeMetadata
from src.core.ports.repositories import IEpisodeMetadataRepository
from src.infrastructure.persistence.models import EpisodeMetadataModel


def metadata_to_entity(model: EpisodeMetadataModel) -> EpisodeMetadata:
    """Convertit un modele DB en entite domaine."""
    return EpisodeMetadata(
        id=model.id,
        title=model.title,
        season=model.season,
        season_raw=model.season_raw,
        sub=model.sub,
        sub_type=model.sub_type,
        group=model.group,
        resolution=model.resolution,
        source=model.source,
        audio_info=model.audio_info,
        video_info=model.video_info,
        bangumi_id=model.bangumi_id,
    )


def metadata_to_model(
    entity: EpisodeMetadata, bangumi_id: Optional[int] = None
) -> EpisodeMetadataModel:
    """
    Convertit une entite domaine en modele DB.

    Args:
        entity: L'entite EpisodeMetadata
        bangumi_id: Proprietaire a forcer (sinon celui de l'entite)
    """
    model = EpisodeMetadataModel(
        title=entity.title,
        season=entity.season,
        season_raw=entity.season_raw,
        sub=entity.sub,
        sub_type=entity.sub_type,
        group=entity.group,
        resolution=entity.resolution,
        source=entity.source,
        audio_info=entity.audio_info,
        video_info=entity.video_info,
        bangumi_id=bangumi_id if bangumi_id is not None else entity.bangumi_id,
    )
    if entity.id:
        model.id = entity.id
    return model


class SQLModelEpisodeMetadataRepository(IEpisodeMetadataRepository):
    """
    Repository SQLModel pour les metadonnees de releases.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def find_by_torrent_name(self, torrent_name: str) -> Optional[EpisodeMetadata]:
        """
        Trouve la metadonnee dont le titre et le groupe sont contenus dans le nom.

        Utilise instr() de SQLite : la comparaison est sensible a la casse.
        Un groupe vide est contenu dans n'importe quel nom.
        Si plusieurs enregistrements correspondent, le plus ancien (plus petit ID)
        est retourne, sans recherche de la meilleure correspondance.
        """
        name = literal(torrent_name)
        statement = (
            select(EpisodeMetadataModel)
            .where(func.instr(name, EpisodeMetadataModel.title) > 0)
            .where(func.instr(name, EpisodeMetadataModel.group) > 0)
            .order_by(EpisodeMetadataModel.id)
        )
        model = self._session.exec(statement).first()
        if model:
            return metadata_to_entity(model)
        return None

    def get_by_id(self, metadata_id: int) -> Optional[EpisodeMetadata]:
        """Recupere une metadonnee par son ID."""
        model = self._session.get(EpisodeMetadataModel, metadata_id)
        if model:
            return metadata_to_entity(model)
        return None

    def list_by_bangumi(self, bangumi_id: int) -> list[EpisodeMetadata]:
        """Liste les metadonnees d'un bangumi, par ordre d'insertion."""
        statement = (
            select(EpisodeMetadataModel)
            .where(EpisodeMetadataModel.bangumi_id == bangumi_id)
            .order_by(EpisodeMetadataModel.id)
        )
        return [metadata_to_entity(m) for m in self._session.exec(statement).all()]

    def save(self, metadata: EpisodeMetadata) -> EpisodeMetadata:
        """Sauvegarde une metadonnee (insertion ou mise a jour par ID)."""
        try:
            model = self._session.merge(metadata_to_model(metadata))
            self._session.commit()
            self._session.refresh(model)
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return metadata_to_entity(model)
