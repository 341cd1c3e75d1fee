"""Sous-package CLI commands - re-exporte les commandes publiques."""

from src.adapters.cli.commands.refresh_commands import (
    discover,
    refresh,
)
from src.adapters.cli.commands.bangumi_commands import (
    bangumi_app,
    bangumi_delete,
    bangumi_list,
    bangumi_show,
)
from src.adapters.cli.commands.feed_commands import (
    feed_add,
    feed_app,
    feed_disable,
    feed_enable,
    feed_list,
    feed_remove,
)
from src.adapters.cli.commands.torrent_commands import (
    torrents,
)

__all__ = [
    # refresh
    "refresh",
    "discover",
    # bangumi
    "bangumi_app",
    "bangumi_list",
    "bangumi_show",
    "bangumi_delete",
    # feed
    "feed_app",
    "feed_add",
    "feed_list",
    "feed_enable",
    "feed_disable",
    "feed_remove",
    # torrents
    "torrents",
]
