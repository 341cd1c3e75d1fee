"""
Adaptateurs de parsing.

Ce package contient l'implementation concrete de l'interface de parsing:
- GuessitTitleParser: Parse les noms de releases de fansubs (guessit + regex)
"""

from src.adapters.parsing.title_parser import GuessitTitleParser

__all__ = ["GuessitTitleParser"]
