"""Adaptateurs de recuperation des flux RSS."""

from src.adapters.feed.rss_client import RSSFeedClient, normalize_name

__all__ = ["RSSFeedClient", "normalize_name"]
