"""
Application services layer (use cases).

Services orchestrate the domain logic around feed refreshes:
- RefreshService: fast path (known releases) and slow path (discovery)
- IdentityResolver: catalog lookups for unknown releases
- BangumiMerger: serialized merge/dedup of canonical bangumis
- FilterService: admissibility filter (global and per-bangumi regexes)

Services depend on ports (interfaces) from core/, never on concrete
implementations from adapters/.
"""

from src.services.filter import FilterService
from src.services.merger import BangumiMerger, merge_into
from src.services.refresh import DiscoveryResult, RefreshResult, RefreshService
from src.services.resolver import IdentityResolver, build_candidate

__all__ = [
    "BangumiMerger",
    "DiscoveryResult",
    "FilterService",
    "IdentityResolver",
    "RefreshResult",
    "RefreshService",
    "build_candidate",
    "merge_into",
]
