import pytest

from core.cache import init_cache
from core.config import settings


@pytest.fixture
def unreachable_redis(monkeypatch):
    monkeypatch.setattr(settings, "REDIS_HOST", "127.0.0.1")
    monkeypatch.setattr(settings, "REDIS_PORT", 1)
    monkeypatch.setattr(settings, "REQUIRE_REDIS", False)
    monkeypatch.setattr(settings, "RELOAD", False)


class TestCacheBackend:
    async def test_single_worker_falls_back_to_memory(self, unreachable_redis, monkeypatch):
        monkeypatch.setattr(settings, "WORKERS_COUNT", 1)
        assert await init_cache() == "memory"

    async def test_several_workers_need_redis(self, unreachable_redis, monkeypatch):
        monkeypatch.setattr(settings, "WORKERS_COUNT", 4)
        with pytest.raises(RuntimeError):
            await init_cache()

    def test_reload_mode_runs_one_worker(self, monkeypatch):
        monkeypatch.setattr(settings, "REQUIRE_REDIS", False)
        monkeypatch.setattr(settings, "WORKERS_COUNT", 4)
        monkeypatch.setattr(settings, "RELOAD", True)
        assert settings.SHARED_CACHE_REQUIRED is False
