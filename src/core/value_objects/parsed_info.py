"""
Objet valeur pour le resultat du parsing d'un nom de release.
"""

from dataclasses import dataclass
from typing import Optional

from src.core.entities.bangumi import EpisodeMetadata


@dataclass(frozen=True)
class ParsedTitle:
    """
    Informations extraites d'un nom de release de fansub.

    Objet valeur immutable. Le titre est toujours renseigne : un nom dont
    on ne peut extraire aucun titre n'est pas parse du tout (le parser
    retourne None).

    Attributs:
        title: Titre de l'oeuvre tel qu'ecrit dans la release
        season: Numero de saison (1 par defaut)
        season_raw: Saison telle qu'ecrite (ex: "第二季", "S2")
        episode: Numero d'episode
        sub: Langue(s) des sous-titres (ex: "CHS", "简日")
        sub_type: Type de sous-titres (ex: "内嵌", "外挂")
        group: Groupe de fansub
        resolution: Resolution (ex: "1080p")
        source: Source (ex: "WEB-DL", "BDRip")
        audio_info: Codec audio
        video_info: Codec video
        year: Annee si presente dans le nom
    """

    title: str
    season: int = 1
    season_raw: str = ""
    episode: int = 0
    sub: str = ""
    sub_type: str = ""
    group: str = ""
    resolution: str = ""
    source: str = ""
    audio_info: str = ""
    video_info: str = ""
    year: Optional[int] = None

    def to_episode_metadata(self, bangumi_id: Optional[int] = None) -> EpisodeMetadata:
        """Construit l'EpisodeMetadata correspondant a ce parsing."""
        return EpisodeMetadata(
            title=self.title,
            season=self.season,
            season_raw=self.season_raw,
            episode=self.episode,
            sub=self.sub,
            sub_type=self.sub_type,
            group=self.group,
            year=str(self.year) if self.year else "",
            resolution=self.resolution,
            source=self.source,
            audio_info=self.audio_info,
            video_info=self.video_info,
            bangumi_id=bangumi_id,
        )
