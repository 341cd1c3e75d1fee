"""
Tests pour le container d'injection de dependances.
"""

import pytest

from src.container import Container
from src.services.refresh import RefreshService


@pytest.fixture
def container(tmp_path, monkeypatch) -> Container:
    monkeypatch.setenv("BANGUMI_DATABASE_URL", f"sqlite:///{tmp_path / 'c.db'}")
    monkeypatch.setenv("BANGUMI_CACHE_DIR", str(tmp_path / "cache"))
    return Container()


class TestContainer:
    def test_repositories_get_fresh_sessions(self, container: Container):
        first = container.bangumi_repository()
        second = container.bangumi_repository()
        assert first._session is not second._session

    def test_shared_singletons(self, container: Container):
        assert container.download_queue() is container.download_queue()
        assert container.bangumi_merger() is container.identity_resolver()._merger

    @pytest.mark.asyncio
    async def test_refresh_service_wiring(self, container: Container):
        container.database.init()
        service = container.refresh_service()

        assert isinstance(service, RefreshService)
        assert service._download_queue is container.download_queue()
        await container.feed_client().close()
        await container.mikan_client().close()
        await container.tmdb_client().close()
