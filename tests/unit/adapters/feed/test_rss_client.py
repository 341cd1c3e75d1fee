"""
Tests pour RSSFeedClient.

Verifie le decodage des flux RSS 2.0 et la normalisation des noms.
"""

import httpx
import pytest
import respx

from src.adapters.feed.rss_client import RSSFeedClient, normalize_name
from src.core.ports.api_clients import IFeedClient
from tests.fixtures.rss_feeds import EMPTY_FEED, MIKAN_FEED, SINGLE_ITEM_FEED

FEED_URL = "https://mikanani.me/RSS/MyBangumi?token=abc"


class TestNormalizeName:
    def test_collapses_whitespace(self):
        assert normalize_name("[ABC]  Frieren\t- 05 ") == "[ABC] Frieren - 05"

    def test_full_width_space(self):
        assert normalize_name("葬送的芙莉莲　第05话") == "葬送的芙莉莲 第05话"


class TestParseFeed:
    """Tests pour parse_feed() (sans reseau)."""

    def test_implements_interface(self):
        assert isinstance(RSSFeedClient(), IFeedClient)

    def test_items_in_feed_order(self):
        torrents = RSSFeedClient().parse_feed(MIKAN_FEED)

        assert [t.name for t in torrents] == [
            "[ABC] Frieren - 05 [1080p][CHS]",
            "【喵萌奶茶屋】★10月新番★[葬送的芙莉莲 / Sousou no Frieren][05][1080p][简日双语]",
        ]

    def test_enclosure_url_and_homepage(self):
        first = RSSFeedClient().parse_feed(MIKAN_FEED)[0]

        assert first.url == "https://mikanani.me/Download/20231006/aaa111.torrent"
        assert first.homepage == "https://mikanani.me/Home/Episode/aaa111"
        assert first.id is None
        assert first.downloaded is False

    def test_single_item_feed_uses_link(self):
        torrents = RSSFeedClient().parse_feed(SINGLE_ITEM_FEED)

        assert len(torrents) == 1
        assert torrents[0].url == "https://nyaa.si/download/1750000.torrent"
        assert torrents[0].homepage == "https://nyaa.si/download/1750000.torrent"

    def test_empty_feed(self):
        assert RSSFeedClient().parse_feed(EMPTY_FEED) == []


class TestFetchTorrents:
    """Tests pour fetch_torrents()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch(self):
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=MIKAN_FEED))
        client = RSSFeedClient()

        torrents = await client.fetch_torrents(FEED_URL)

        assert len(torrents) == 2
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_propagates(self):
        respx.get(FEED_URL).mock(return_value=httpx.Response(403))
        client = RSSFeedClient()

        with pytest.raises(httpx.HTTPStatusError):
            await client.fetch_torrents(FEED_URL)
        await client.close()
