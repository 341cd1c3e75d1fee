"""
Filtre d'admissibilite des releases.

Une release est admissible si elle n'est rejetee ni par les exclusions
globales (configuration), ni par les filtres propres a son bangumi.
Les motifs sont des regex recherchees sans tenir compte de la casse ; un
motif invalide est traite comme du texte litteral.
"""

import re
from functools import lru_cache
from typing import Iterable, Optional

from loguru import logger

from src.core.entities.bangumi import Bangumi
from src.core.entities.torrent import Torrent


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error:
        logger.debug("Motif de filtre invalide, recherche litterale", pattern=pattern)
        return re.compile(re.escape(pattern), re.IGNORECASE)


def split_patterns(value: str) -> list[str]:
    """Decoupe un filtre "a,b, c" en motifs non vides."""
    return [p.strip() for p in value.split(",") if p.strip()]


class FilterService:
    """
    Service de filtrage des releases.

    Example:
        filter_service = FilterService(global_exclude=["720", r"\\d+-\\d+"])
        filter_service.accepts(torrent)            # exclusions globales
        filter_service.accepts(torrent, bangumi)   # + filtres du bangumi
    """

    def __init__(self, global_exclude: Optional[Iterable[str]] = None) -> None:
        self._global_exclude = [p for p in (global_exclude or []) if p]

    def accepts(self, torrent: Torrent, bangumi: Optional[Bangumi] = None) -> bool:
        """
        Indique si une release est admissible.

        Args:
            torrent: Release a tester (sur son nom)
            bangumi: Bangumi proprietaire, pour ses filtres include/exclude

        Returns:
            False si un motif d'exclusion correspond, ou si le bangumi a des
            motifs d'inclusion et qu'aucun ne correspond
        """
        name = torrent.name
        if self._matches_any(name, self._global_exclude):
            return False
        if bangumi is None:
            return True

        if self._matches_any(name, split_patterns(bangumi.exclude_filter)):
            return False
        includes = split_patterns(bangumi.include_filter)
        if includes and not self._matches_any(name, includes):
            return False
        return True

    def _matches_any(self, name: str, patterns: Iterable[str]) -> bool:
        return any(_compile(pattern).search(name) for pattern in patterns)
