"""
Clients des catalogues externes.

Ce module fournit les adaptateurs pour communiquer avec:
- Mikan: suivi des releases des fansubs (ID Mikan)
- TMDB: metadonnees officielles (ID TMDB)

Infrastructure partagee:
- APICache: Cache persistant avec TTL differencies (recherche 24h, details 7j)
- RateLimitError / TransientServerError: Erreurs relancees automatiquement
- request_with_retry: Requete avec backoff exponentiel
"""

from src.adapters.api.cache import APICache
from src.adapters.api.mikan_client import MikanClient
from src.adapters.api.retry import (
    RateLimitError,
    TransientServerError,
    request_with_retry,
    with_retry,
)
from src.adapters.api.tmdb_client import TmdbClient

__all__ = [
    "APICache",
    "MikanClient",
    "TmdbClient",
    "RateLimitError",
    "TransientServerError",
    "request_with_retry",
    "with_retry",
]
