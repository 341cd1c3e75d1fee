"""
Modeles SQLModel pour la base de donnees.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- mikan_items: Fiches Mikan (cle = ID Mikan)
- tmdb_items: Fiches TMDB (cle = ID TMDB)
- bangumi: Bangumis canoniques, liens optionnels vers mikan_items / tmdb_items
- episode_metadata: Metadonnees de releases, uniques par
  (title, season, sub_type, group, resolution, bangumi_id)
- torrents: Releases recues des flux, uniques par URL
- rss_items: Abonnements RSS, uniques par URL
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel, UniqueConstraint


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MikanItemModel(SQLModel, table=True):
    """Fiche Mikan. L'ID est l'ID externe, jamais auto-incremente."""

    __tablename__ = "mikan_items"

    id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    official_title: str = ""
    season: int = 1
    poster_link: str = ""


class TmdbItemModel(SQLModel, table=True):
    """Fiche TMDB. L'ID est l'ID externe, jamais auto-incremente."""

    __tablename__ = "tmdb_items"

    id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    title: str = ""
    original_title: str = ""
    year: str = ""
    season: int = 1
    air_date: str = ""
    episode_count: int = 0
    poster_link: str = ""
    vote_average: float = 0.0


class BangumiModel(SQLModel, table=True):
    """
    Modele representant un bangumi canonique.

    mikan_id et tmdb_id sont nullables et independants : NULL signifie que
    le lien n'est pas encore connu.
    """

    __tablename__ = "bangumi"

    id: int | None = Field(default=None, primary_key=True)
    official_title: str = Field(default="", index=True)
    year: str = ""
    season: int = 1
    mikan_id: int | None = Field(default=None, foreign_key="mikan_items.id", index=True)
    tmdb_id: int | None = Field(default=None, foreign_key="tmdb_items.id", index=True)
    rss_link: str = ""
    eps_collect: bool = False
    offset: int = 0
    include_filter: str = ""
    exclude_filter: str = ""
    parser: str = "tmdb"
    poster_link: str = ""
    deleted: bool = Field(default=False, index=True)
    created_at: datetime | None = Field(default_factory=_utcnow)
    updated_at: datetime | None = Field(default_factory=_utcnow)


class EpisodeMetadataModel(SQLModel, table=True):
    """
    Modele representant une metadonnee de release.

    Lie a un bangumi via bangumi_id. La contrainte d'unicite empeche
    d'enregistrer deux fois la meme classe de releases pour un bangumi.
    """

    __tablename__ = "episode_metadata"
    __table_args__ = (
        UniqueConstraint(
            "title",
            "season",
            "sub_type",
            "group",
            "resolution",
            "bangumi_id",
            name="idx_episode_metadata_unique",
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    title: str = ""
    season: int = 1
    season_raw: str = ""
    sub: str = ""
    sub_type: str = ""
    group: str = ""
    resolution: str = ""
    source: str = ""
    audio_info: str = ""
    video_info: str = ""
    bangumi_id: int | None = Field(default=None, foreign_key="bangumi.id", index=True)


class TorrentModel(SQLModel, table=True):
    """Modele representant une release recue d'un flux."""

    __tablename__ = "torrents"

    id: int | None = Field(default=None, primary_key=True)
    name: str = ""
    url: str = Field(unique=True, index=True)
    homepage: str = ""
    download_uid: str = Field(default="", index=True)
    downloaded: bool = Field(default=False, index=True)
    renamed: bool = False
    bangumi_id: int | None = Field(default=None, foreign_key="bangumi.id", index=True)
    rss_link: str = ""
    created_at: datetime | None = Field(default_factory=_utcnow)
    updated_at: datetime | None = Field(default_factory=_utcnow)


class RSSItemModel(SQLModel, table=True):
    """Modele representant un abonnement RSS."""

    __tablename__ = "rss_items"

    id: int | None = Field(default=None, primary_key=True)
    name: str = ""
    url: str = Field(unique=True, index=True)
    enabled: bool = Field(default=True, index=True)
    aggregate: bool = True
    parser: str = "mikan"
