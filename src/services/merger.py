"""
Fusion et deduplication des bangumis.

BangumiMerger garantit qu'une meme oeuvre, decouverte plusieurs fois (par
l'ID Mikan, par l'ID TMDB, ou par les deux a des moments differents),
n'existe qu'une seule fois en base.

Toute l'operation "rechercher puis fusionner ou creer" s'execute sous un
verrou unique pour le processus : deux decouvertes concurrentes d'un meme
bangumi ne peuvent pas creer deux lignes.
"""

import threading
from contextlib import closing
from typing import Callable

from loguru import logger

from src.core.entities.bangumi import Bangumi
from src.core.ports.repositories import IBangumiRepository


# Verrou partage par toutes les instances du processus
_MERGE_LOCK = threading.Lock()


def merge_into(existing: Bangumi, candidate: Bangumi) -> int:
    """
    Fusionne un candidat dans un bangumi existant (sans ecriture).

    - Les liens Mikan/TMDB absents sont remplis depuis le candidat,
      les liens deja presents ne sont jamais ecrases.
    - Les EpisodeMetadata du candidat dont la cle de deduplication n'est
      pas encore rattachee sont ajoutees.
    - Le flux RSS d'origine est mis a jour si le candidat en porte un.

    Args:
        existing: Bangumi charge depuis la base (modifie en place)
        candidate: Bangumi construit a partir d'une release

    Returns:
        Nombre d'EpisodeMetadata ajoutees
    """
    if not existing.has_mikan_link and candidate.has_mikan_link:
        existing.mikan_id = candidate.effective_mikan_id
        existing.mikan_item = candidate.mikan_item
    if not existing.has_tmdb_link and candidate.has_tmdb_link:
        existing.tmdb_id = candidate.effective_tmdb_id
        existing.tmdb_item = candidate.tmdb_item
    if not existing.poster_link and candidate.poster_link:
        existing.poster_link = candidate.poster_link

    appended = 0
    for meta in candidate.episode_metadata:
        if existing.find_episode_metadata(meta.dedup_key) is not None:
            continue
        meta.id = None
        meta.bangumi_id = existing.id
        existing.episode_metadata.append(meta)
        appended += 1

    if candidate.rss_link:
        existing.rss_link = candidate.rss_link
    return appended


class BangumiMerger:
    """
    Moteur de fusion/deduplication des bangumis.

    Chaque appel utilise un repository neuf, ferme en sortie : le merger
    est appele depuis des threads de travail et ne partage aucune session.

    Example:
        merger = BangumiMerger(repository_factory=lambda: SQLModelBangumiRepository(Session(engine)))
        bangumi = merger.resolve_or_create(candidate)
    """

    def __init__(self, repository_factory: Callable[[], IBangumiRepository]) -> None:
        """
        Initialise le merger.

        Args:
            repository_factory: Fabrique retournant un repository Bangumi
                avec une session dediee
        """
        self._repository_factory = repository_factory

    def resolve_or_create(self, candidate: Bangumi) -> Bangumi:
        """
        Retourne le bangumi canonique correspondant au candidat.

        Sous le verrou global :
        1. Recherche d'un bangumi lie a l'ID Mikan OU a l'ID TMDB du candidat
        2. Trouve : fusion (merge_into) puis sauvegarde unique
        3. Absent : sauvegarde du candidat comme nouveau bangumi

        Args:
            candidate: Bangumi construit par le resolveur

        Returns:
            Le bangumi persiste, avec ses relations

        Raises:
            SQLAlchemyError: Erreur de stockage (aucune ecriture partielle)
        """
        with _MERGE_LOCK, closing(self._repository_factory()) as repo:
            existing = repo.find_by_external_ids(
                mikan_id=candidate.effective_mikan_id,
                tmdb_id=candidate.effective_tmdb_id,
            )

            if existing is None:
                saved = repo.save(candidate)
                logger.info(
                    "Nouveau bangumi",
                    id=saved.id,
                    title=saved.official_title,
                    mikan_id=saved.mikan_id,
                    tmdb_id=saved.tmdb_id,
                )
                return saved

            appended = merge_into(existing, candidate)
            saved = repo.save(existing)
            logger.debug(
                "Bangumi fusionne",
                id=saved.id,
                title=saved.official_title,
                appended=appended,
            )
            return saved
