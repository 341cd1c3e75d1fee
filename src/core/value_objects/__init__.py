"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- ParsedTitle : Informations extraites du parsing d'un nom de release
"""

from src.core.value_objects.parsed_info import ParsedTitle

__all__ = [
    "ParsedTitle",
]
