"""
Interface port pour le parsing des noms de releases.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.core.value_objects.parsed_info import ParsedTitle


class ITitleParser(ABC):
    """
    Interface pour le parsing de noms de releases de fansubs.

    Definit le contrat pour extraire les informations structurees
    (titre, saison, groupe, resolution, sous-titres...) depuis un nom brut.
    """

    @abstractmethod
    def parse(self, raw_name: str) -> Optional[ParsedTitle]:
        """
        Parse un nom de release.

        Args:
            raw_name: Nom brut tel que recu dans le flux

        Retourne:
            ParsedTitle, ou None si aucun titre ne peut etre extrait
        """
        ...
