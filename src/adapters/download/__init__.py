"""Adaptateurs de telechargement."""

from src.adapters.download.queue import AsyncDownloadQueue

__all__ = ["AsyncDownloadQueue"]
