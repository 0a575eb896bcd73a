"""Shared pytest fixtures: fake upstream HTTP and cache isolation."""

import httpx
import pytest

import aggregator
import config
import data_fetchers
import hotspots
import sentiment


@pytest.fixture(autouse=True)
def _isolate_state(monkeypatch):
    monkeypatch.setattr(config, "GEMINI_API_KEY", "")
    sentiment._news_cache.clear()
    hotspots._GEMINI_CACHE.clear()
    aggregator.snapshot_store.clear()
    yield
    sentiment._news_cache.clear()
    hotspots._GEMINI_CACHE.clear()
    aggregator.snapshot_store.clear()


@pytest.fixture
def mock_http(monkeypatch):
    """Route every adapter request through ``handler(request) -> httpx.Response``."""
    def install(handler):
        transport = httpx.MockTransport(handler)
        monkeypatch.setattr(data_fetchers, "client", httpx.AsyncClient(transport=transport))
        monkeypatch.setattr(sentiment, "_news_client", httpx.AsyncClient(transport=transport))
    return install
