"""
Tests pour RefreshService.

Chemin rapide (refresh_rss) :
- rattachement des releases reconnues par l'index des titres, sans parsing
- compteurs (en file, ecartees, non reconnues, en erreur)

Chemin lent (find_new_bangumi) :
- releases connues, filtrees, non parsables ignorees
- regroupement par titre et taches de fond
"""

import asyncio
import contextlib
import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.core.entities.bangumi import Bangumi
from src.core.entities.torrent import RSSItem, Torrent
from src.core.ports.parser import ITitleParser
from src.core.value_objects.parsed_info import ParsedTitle
from src.services.filter import FilterService
from src.services.refresh import RefreshResult, RefreshService
from src.services.resolver import IdentityResolver
from tests.fixtures.entities import make_bangumi, make_metadata


FEED_URL = "https://mikanani.me/RSS/MyBangumi?token=abc"


def _torrent(name: str, suffix: str = "a") -> Torrent:
    return Torrent(name=name, url=f"https://mikanani.me/Download/{suffix}.torrent")


@pytest.fixture
def mock_parser() -> MagicMock:
    mock = MagicMock(spec=ITitleParser)
    mock.parse.side_effect = lambda name: ParsedTitle(title=name.split(" - ")[0])
    return mock


@pytest.fixture
def mock_resolver() -> AsyncMock:
    mock = AsyncMock(spec=IdentityResolver)
    mock.resolve.return_value = None
    return mock


@pytest.fixture
def service(
    mock_feed_client,
    mock_parser,
    mock_resolver,
    mock_download_queue,
    torrent_repo,
    metadata_repo,
    bangumi_repo,
    rss_repo,
) -> RefreshService:
    return RefreshService(
        feed_client=mock_feed_client,
        parser=mock_parser,
        filter_service=FilterService(global_exclude=["720"]),
        resolver=mock_resolver,
        torrent_repo=torrent_repo,
        metadata_repo=metadata_repo,
        bangumi_repo=bangumi_repo,
        rss_repo=rss_repo,
        download_queue=mock_download_queue,
        discovery_workers=2,
    )


@pytest.fixture
def frieren(bangumi_repo) -> Bangumi:
    """Bangumi connu dont l'index reconnait "[ABC] Frieren ..."."""
    return bangumi_repo.save(make_bangumi(mikan_id=3141, metadata=[make_metadata()]))


# ============================================================================
# Chemin rapide
# ============================================================================


class TestRefreshRss:
    """Tests pour refresh_rss."""

    @pytest.mark.asyncio
    async def test_known_release_is_enqueued(
        self, service, frieren, mock_feed_client, mock_parser, mock_resolver,
        mock_download_queue, torrent_repo,
    ):
        mock_feed_client.fetch_torrents.return_value = [_torrent("[ABC] Frieren - 05 [1080p]")]

        result = await service.refresh_rss(FEED_URL)

        assert result == RefreshResult(enqueued=1)
        mock_parser.parse.assert_not_called()
        mock_resolver.resolve.assert_not_awaited()
        mock_download_queue.add.assert_awaited_once()

        stored = torrent_repo.get_by_url("https://mikanani.me/Download/a.torrent")
        assert stored.bangumi_id == frieren.id
        assert stored.rss_link == FEED_URL

    @pytest.mark.asyncio
    async def test_unknown_release_is_unmatched(self, service, frieren, mock_feed_client, mock_download_queue):
        mock_feed_client.fetch_torrents.return_value = [_torrent("[XYZ] Other Show - 01 [1080p]")]

        result = await service.refresh_rss(FEED_URL)

        assert result.unmatched == 1
        assert result.total == 1
        mock_download_queue.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_index_is_case_sensitive(self, service, frieren, mock_feed_client):
        mock_feed_client.fetch_torrents.return_value = [_torrent("[ABC] FRIEREN - 05 [1080p]")]

        result = await service.refresh_rss(FEED_URL)

        assert result.unmatched == 1

    @pytest.mark.asyncio
    async def test_deleted_bangumi_is_skipped(self, service, frieren, bangumi_repo, mock_feed_client):
        bangumi_repo.soft_delete(frieren.id)
        mock_feed_client.fetch_torrents.return_value = [_torrent("[ABC] Frieren - 05 [1080p]")]

        result = await service.refresh_rss(FEED_URL)

        assert result.skipped == 1
        assert result.enqueued == 0

    @pytest.mark.asyncio
    async def test_filtered_release_is_skipped(self, service, frieren, bangumi_repo, mock_feed_client):
        frieren.exclude_filter = "Baha"
        bangumi_repo.update(frieren)
        mock_feed_client.fetch_torrents.return_value = [
            _torrent("[ABC] Frieren - 05 [Baha][1080p]", "a"),
            _torrent("[ABC] Frieren - 05 [720p]", "b"),
        ]

        result = await service.refresh_rss(FEED_URL)

        assert result.skipped == 2

    @pytest.mark.asyncio
    async def test_downloaded_release_is_ignored(
        self, service, frieren, torrent_repo, mock_feed_client, mock_download_queue
    ):
        torrent_repo.save(
            Torrent(
                name="[ABC] Frieren - 05 [1080p]",
                url="https://mikanani.me/Download/a.torrent",
                downloaded=True,
            )
        )
        mock_feed_client.fetch_torrents.return_value = [_torrent("[ABC] Frieren - 05 [1080p]")]

        result = await service.refresh_rss(FEED_URL)

        assert result.total == 0
        mock_download_queue.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pending_release_keeps_download_uid(
        self, service, frieren, torrent_repo, mock_feed_client
    ):
        torrent_repo.save(
            Torrent(
                name="[ABC] Frieren - 05 [1080p]",
                url="https://mikanani.me/Download/a.torrent",
                download_uid="uid-1",
            )
        )
        mock_feed_client.fetch_torrents.return_value = [_torrent("[ABC] Frieren - 05 [1080p]")]

        result = await service.refresh_rss(FEED_URL)

        assert result.enqueued == 1
        stored = torrent_repo.get_by_url("https://mikanani.me/Download/a.torrent")
        assert stored.download_uid == "uid-1"
        assert stored.bangumi_id == frieren.id

    @pytest.mark.asyncio
    async def test_item_errors_are_isolated(self, service, frieren, mock_feed_client, mock_download_queue):
        mock_download_queue.add.side_effect = [RuntimeError("queue closed"), None]
        mock_feed_client.fetch_torrents.return_value = [
            _torrent("[ABC] Frieren - 05 [1080p]", "a"),
            _torrent("[ABC] Frieren - 06 [1080p]", "b"),
        ]

        result = await service.refresh_rss(FEED_URL)

        assert result.failed == 1
        assert result.enqueued == 1

    @pytest.mark.asyncio
    async def test_storage_runs_off_event_loop(self, service, frieren, torrent_repo, mock_feed_client):
        """Une ecriture lente en base laisse tourner la boucle d'evenements."""
        original_save = torrent_repo.save

        def slow_save(torrent):
            time.sleep(0.2)
            return original_save(torrent)

        ticks = 0

        async def ticker():
            nonlocal ticks
            while True:
                await asyncio.sleep(0.01)
                ticks += 1

        mock_feed_client.fetch_torrents.return_value = [_torrent("[ABC] Frieren - 05 [1080p]")]
        ticker_task = asyncio.create_task(ticker())
        try:
            with patch.object(torrent_repo, "save", side_effect=slow_save):
                result = await service.refresh_rss(FEED_URL)
        finally:
            ticker_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ticker_task

        assert result.enqueued == 1
        assert ticks >= 5


# ============================================================================
# Chemin lent
# ============================================================================


class TestFindNewBangumi:
    """Tests pour find_new_bangumi."""

    @pytest.mark.asyncio
    async def test_skips_known_filtered_and_unparsed(
        self, service, frieren, mock_feed_client, mock_parser, mock_resolver
    ):
        mock_parser.parse.side_effect = lambda name: (
            None if name.startswith("???") else ParsedTitle(title=name.split(" - ")[0])
        )
        mock_feed_client.fetch_torrents.return_value = [
            _torrent("[ABC] Frieren - 05 [1080p]", "a"),
            _torrent("[XYZ] Dungeon Meshi - 01 [720p]", "b"),
            _torrent("??? broken", "c"),
            _torrent("[XYZ] Dungeon Meshi - 01 [1080p]", "d"),
        ]

        result = await service.find_new_bangumi(FEED_URL)
        await service.wait_pending()

        assert result.known == 1
        assert result.filtered == 1
        assert result.unparsed == 1
        assert result.dispatched == 1
        mock_resolver.resolve.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_groups_by_title_keeping_first(self, service, mock_feed_client, mock_resolver):
        first = _torrent("[XYZ] Dungeon Meshi - 01 [1080p]", "a")
        mock_feed_client.fetch_torrents.return_value = [
            first,
            _torrent("[XYZ] Dungeon Meshi - 02 [1080p]", "b"),
            _torrent("[ABC] Kusuriya - 03 [1080p]", "c"),
        ]

        result = await service.find_new_bangumi(FEED_URL)
        await service.wait_pending()

        assert result.dispatched == 2
        resolved = [call.args[0] for call in mock_resolver.resolve.await_args_list]
        assert first in resolved
        assert all(t.rss_link == FEED_URL for t in resolved)
        assert all(call.args[2] == FEED_URL for call in mock_resolver.resolve.await_args_list)

    @pytest.mark.asyncio
    async def test_returns_before_tasks_complete(self, service, mock_feed_client, mock_resolver):
        gate = asyncio.Event()

        async def slow_resolve(*args):
            await gate.wait()

        mock_resolver.resolve.side_effect = slow_resolve
        mock_feed_client.fetch_torrents.return_value = [_torrent("[XYZ] Dungeon Meshi - 01 [1080p]")]

        await service.find_new_bangumi(FEED_URL)
        assert service.pending_count == 1

        gate.set()
        await service.wait_pending()
        assert service.pending_count == 0

    @pytest.mark.asyncio
    async def test_task_failures_are_logged(self, service, mock_feed_client, mock_resolver):
        mock_resolver.resolve.side_effect = RuntimeError("TMDB down")
        mock_feed_client.fetch_torrents.return_value = [_torrent("[XYZ] Dungeon Meshi - 01 [1080p]")]

        with patch("src.services.refresh.logger") as mock_logger:
            await service.find_new_bangumi(FEED_URL)
            await service.wait_pending()

        mock_logger.opt.assert_called_once()
        assert isinstance(mock_logger.opt.call_args.kwargs["exception"], RuntimeError)

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self, service, mock_feed_client, mock_resolver):
        running = 0
        peak = 0

        async def tracked_resolve(*args):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1

        mock_resolver.resolve.side_effect = tracked_resolve
        mock_feed_client.fetch_torrents.return_value = [
            _torrent(f"[XYZ] Show {i} - 01 [1080p]", str(i)) for i in range(6)
        ]

        await service.find_new_bangumi(FEED_URL)
        await service.wait_pending()

        assert mock_resolver.resolve.await_count == 6
        assert peak == 2


class TestRefreshAll:
    """Tests pour refresh_all."""

    @pytest.mark.asyncio
    async def test_only_active_feeds(self, service, rss_repo, mock_feed_client):
        rss_repo.save(RSSItem(url="https://feed/a"))
        disabled = rss_repo.save(RSSItem(url="https://feed/b"))
        rss_repo.set_enabled(disabled.id, False)

        results = await service.refresh_all()

        assert list(results) == ["https://feed/a"]
        fetched = {call.args[0] for call in mock_feed_client.fetch_torrents.await_args_list}
        assert fetched == {"https://feed/a"}

    @pytest.mark.asyncio
    async def test_failing_feed_does_not_stop_others(self, service, rss_repo, mock_feed_client):
        rss_repo.save(RSSItem(url="https://feed/a"))
        rss_repo.save(RSSItem(url="https://feed/b"))

        async def fetch(url):
            if url == "https://feed/a":
                raise RuntimeError("unreachable")
            return []

        mock_feed_client.fetch_torrents.side_effect = fetch

        results = await service.refresh_all()

        assert list(results) == ["https://feed/b"]
