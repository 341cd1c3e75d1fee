"""
Entites du domaine autour d'un bangumi.

Un Bangumi est l'identite canonique (dedupliquee) d'une oeuvre diffusee.
Il peut etre relie, independamment, a deux catalogues externes :
- Mikan (suivi des releases des fansubs) via MikanItem
- TMDB (metadonnees officielles) via TmdbItem

Les EpisodeMetadata conservent le resultat structure du parsing d'une classe
de releases (titre + groupe + resolution...) et servent d'index de
correspondance pour les pulls suivants.
"""

from dataclasses import dataclass, field
from typing import Optional


DedupKey = tuple[str, int, str, str, str]


@dataclass
class MikanItem:
    """
    Fiche Mikan mise en cache pour un ID donne.

    Attributs :
        id : ID Mikan du bangumi (cle externe)
        official_title : Titre affiche par Mikan
        season : Saison (1 par defaut)
        poster_link : URL du poster
    """

    id: int
    official_title: str = ""
    season: int = 1
    poster_link: str = ""


@dataclass
class TmdbItem:
    """
    Fiche TMDB mise en cache pour un ID donne.

    Attributs :
        id : ID TMDB de la serie
        title : Titre localise
        original_title : Titre original
        year : Annee de premiere diffusion (texte, peut etre vide)
        season : Saison correspondante
        air_date : Date de diffusion de la saison (AAAA-MM-JJ)
        episode_count : Nombre total d'episodes de la saison
        poster_link : URL complete du poster
        vote_average : Note moyenne TMDB
    """

    id: int
    title: str = ""
    original_title: str = ""
    year: str = ""
    season: int = 1
    air_date: str = ""
    episode_count: int = 0
    poster_link: str = ""
    vote_average: float = 0.0


@dataclass
class EpisodeMetadata:
    """
    Resultat structure du parsing d'un nom de release.

    Les champs episode et year ne sont pas persistes : ils decrivent une
    release precise alors que l'enregistrement decrit toute la classe de
    releases (meme titre, meme groupe, meme resolution...).

    Unicite en base : (title, season, sub_type, group, resolution, bangumi_id).
    """

    id: Optional[int] = None
    title: str = ""
    season: int = 1
    season_raw: str = ""
    episode: int = 0
    sub: str = ""
    sub_type: str = ""
    group: str = ""
    year: str = ""
    resolution: str = ""
    source: str = ""
    audio_info: str = ""
    video_info: str = ""
    bangumi_id: Optional[int] = None

    @property
    def dedup_key(self) -> DedupKey:
        """Cle de deduplication utilisee lors de la fusion."""
        return (self.title, self.season, self.group, self.resolution, self.sub_type)

    def __str__(self) -> str:
        return (
            f"Title: {self.title}, Season: {self.season}, Episode: {self.episode}, "
            f"Sub: {self.sub}, Group: {self.group}, Resolution: {self.resolution}, "
            f"Source: {self.source}"
        )


@dataclass
class Bangumi:
    """
    Identite canonique d'un bangumi.

    Les liens vers Mikan et TMDB sont optionnels et remplis independamment :
    None signifie "pas encore connu". Un lien peut etre porte soit par
    l'ID (mikan_id / tmdb_id), soit par la fiche embarquee (mikan_item /
    tmdb_item) lorsque l'entite n'a pas encore ete persistee.

    Attributs :
        id : ID interne
        official_title : Titre affiche
        year : Annee de diffusion
        season : Saison
        mikan_id, tmdb_id : Liens vers les catalogues externes
        mikan_item, tmdb_item : Fiches externes associees
        rss_link : Flux RSS qui a produit (en dernier) ce bangumi
        episode_metadata : Metadonnees de releases rattachees
        eps_collect : Collecte des episodes deja faite
        offset : Decalage de numerotation des episodes
        include_filter, exclude_filter : Filtres utilisateur (regex separees par des virgules)
        parser : Source de metadonnees preferee
        poster_link : Poster
        deleted : Suppression logique
    """

    id: Optional[int] = None
    official_title: str = ""
    year: str = ""
    season: int = 1
    mikan_id: Optional[int] = None
    tmdb_id: Optional[int] = None
    mikan_item: Optional[MikanItem] = None
    tmdb_item: Optional[TmdbItem] = None
    rss_link: str = ""
    episode_metadata: list[EpisodeMetadata] = field(default_factory=list)
    eps_collect: bool = False
    offset: int = 0
    include_filter: str = ""
    exclude_filter: str = ""
    parser: str = "tmdb"
    poster_link: str = ""
    deleted: bool = False

    @property
    def effective_mikan_id(self) -> Optional[int]:
        """ID Mikan porte par le champ ou, a defaut, par la fiche embarquee."""
        if self.mikan_id is not None:
            return self.mikan_id
        if self.mikan_item is not None:
            return self.mikan_item.id
        return None

    @property
    def effective_tmdb_id(self) -> Optional[int]:
        """ID TMDB porte par le champ ou, a defaut, par la fiche embarquee."""
        if self.tmdb_id is not None:
            return self.tmdb_id
        if self.tmdb_item is not None:
            return self.tmdb_item.id
        return None

    @property
    def has_mikan_link(self) -> bool:
        return self.effective_mikan_id is not None

    @property
    def has_tmdb_link(self) -> bool:
        return self.effective_tmdb_id is not None

    def find_episode_metadata(self, key: DedupKey) -> Optional[EpisodeMetadata]:
        """Retourne la metadonnee rattachee ayant cette cle, ou None."""
        for meta in self.episode_metadata:
            if meta.dedup_key == key:
                return meta
        return None
