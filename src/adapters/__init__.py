"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- cli/ : Interface ligne de commande (Typer)
- api/ : Clients des catalogues externes (Mikan, TMDB)
- feed/ : Récupération des flux RSS
- parsing/ : Parsing des noms de releases
- download/ : File de téléchargement

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""

from src.adapters.download.queue import AsyncDownloadQueue
from src.adapters.feed.rss_client import RSSFeedClient
from src.adapters.parsing.title_parser import GuessitTitleParser

__all__ = [
    "AsyncDownloadQueue",
    "GuessitTitleParser",
    "RSSFeedClient",
]
