"""CivicWatch Backend: Aggregation Facade

Per-city fan-out over the source adapters with join-all semantics. An
adapter that raises contributes nothing; the rest still arrive, merged and
sorted. Refresh cycles publish immutable DashboardSnapshots.
"""

import asyncio
import itertools
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Sequence

import data_fetchers as fetchers
from config import CITY_CODES
from hotspots import analyze_hotspots
from models import (
    Camera, DashboardSnapshot, Incident, IncidentAlert, NewsAlert, NewsArticle, RadioStream,
)
from sentiment import fetch_gdelt_news

logger = logging.getLogger("civicwatch.aggregator")

Adapter = Callable[[], Awaitable[list]]


def normalize_city(city: Optional[str]) -> Optional[str]:
    """Lower-case a city code; unknown or empty codes become None (default feeds)."""
    code = (city or "").strip().lower()
    return code if code in CITY_CODES else None


# ─────────────────────────── Adapter Registry ───────────────────

CHICAGO_INCIDENT_SOURCES: dict[str, Adapter] = {
    "crimes": fetchers.fetch_chicago_crimes,
    "trafficCrashes": fetchers.fetch_chicago_traffic_crashes,
    "serviceRequests": fetchers.fetch_chicago_311_incidents,
    "shotspotterAlerts": fetchers.fetch_chicago_shotspotter,
    "speedViolations": fetchers.fetch_chicago_speed_violations,
    "redLightViolations": fetchers.fetch_chicago_red_light_violations,
    "buildingViolations": fetchers.fetch_chicago_building_violations,
}

EVANSVILLE_INCIDENT_SOURCES: dict[str, Adapter] = {
    "crimes": fetchers.fetch_evansville_crimes,
    "shotsFired": fetchers.fetch_evansville_shots_fired,
}

DEFAULT_INCIDENT_SOURCES: dict[str, Adapter] = {
    "nyc311": fetchers.fetch_nyc_311_incidents,
    "crimes": fetchers.fetch_chicago_crimes,
    "trafficCrashes": fetchers.fetch_chicago_traffic_crashes,
    "chicago311": fetchers.fetch_chicago_311_incidents,
}

INCIDENT_SOURCES: dict[str, dict[str, Adapter]] = {
    "chicago": CHICAGO_INCIDENT_SOURCES,
    "evansville": EVANSVILLE_INCIDENT_SOURCES,
}

ALL_CAMERA_SOURCES: dict[str, Adapter] = {
    "nyc": fetchers.fetch_nyc_cameras,
    "chicago": fetchers.fetch_chicago_cameras,
    "caltrans": fetchers.fetch_california_cameras,
    "dc": fetchers.fetch_dc_cameras,
    "international": fetchers.fetch_international_cameras,
}

CAMERA_SOURCES: dict[str, dict[str, Adapter]] = {
    "nyc": {"nyc": fetchers.fetch_nyc_cameras},
    "chicago": {"chicago": fetchers.fetch_chicago_cameras},
    "la": {"caltrans": fetchers.fetch_california_cameras},
    "dc": {"dc": fetchers.fetch_dc_cameras},
}


def incident_sources_for(city: Optional[str]) -> dict[str, Adapter]:
    return INCIDENT_SOURCES.get(normalize_city(city), DEFAULT_INCIDENT_SOURCES)


def camera_sources_for(city: Optional[str]) -> dict[str, Adapter]:
    return CAMERA_SOURCES.get(normalize_city(city), ALL_CAMERA_SOURCES)


# ─────────────────────────── Fan-out / Fan-in ───────────────────

async def gather_sources(sources: dict[str, Adapter], label: str) -> dict[str, list]:
    """Run every adapter concurrently; a raising adapter yields []."""
    names = list(sources)
    results = await asyncio.gather(*(sources[n]() for n in names), return_exceptions=True)

    gathered: dict[str, list] = {}
    for name, res in zip(names, results):
        if isinstance(res, BaseException):
            logger.warning(f"{label}: adapter '{name}' failed: {res!r}")
            gathered[name] = []
        else:
            gathered[name] = list(res or [])
    return gathered


def _merge(gathered: dict[str, list]) -> list:
    return list(itertools.chain.from_iterable(gathered.values()))


async def fetch_incidents(city: Optional[str] = None) -> list[Incident]:
    """All incidents for a city, highest priority first."""
    code = normalize_city(city)
    gathered = await gather_sources(incident_sources_for(code), "incidents")
    incidents = sorted(_merge(gathered), key=lambda i: i.priority, reverse=True)

    breakdown = ", ".join(f"{name}: {len(rows)}" for name, rows in gathered.items())
    logger.info(f"Incidents ({code or 'all'}): returning {len(incidents)} ({breakdown})")
    return incidents


async def fetch_cameras(city: Optional[str] = None) -> list[Camera]:
    """All cameras for a city, most viewed first."""
    code = normalize_city(city)
    gathered = await gather_sources(camera_sources_for(code), "cameras")
    cameras = sorted(_merge(gathered), key=lambda c: c.viewers, reverse=True)
    logger.info(f"Cameras ({code or 'all'}): returning {len(cameras)}")
    return cameras


def _news_sort_key(article: NewsArticle) -> datetime:
    try:
        dt = datetime.fromisoformat(article.time.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


async def fetch_news(city: Optional[str] = None, limit: int = 20) -> list[NewsArticle]:
    """Recent news for a city, newest first."""
    code = normalize_city(city)
    gathered = await gather_sources({"gdelt": lambda: fetch_gdelt_news(code)}, "news")
    articles = sorted(_merge(gathered), key=_news_sort_key, reverse=True)[:limit]
    logger.info(f"News ({code or 'all US'}): returning {len(articles)} articles")
    return articles


def get_radio_streams(city: Optional[str] = None) -> list[RadioStream]:
    streams = fetchers.list_radio_streams()
    code = normalize_city(city)
    if code:
        local = [s for s in streams if s.city == code]
        if local:
            return local
    return streams


# ─────────────────────────── City Intel ─────────────────────────

async def fetch_city_intel(city: str) -> Optional[dict]:
    """Per-feed breakdown for cities with a dedicated signal set."""
    code = normalize_city(city)
    sources = INCIDENT_SOURCES.get(code)
    if sources is None:
        return None

    gathered = await gather_sources(sources, f"{code} intel")
    crimes = gathered.get("crimes", [])
    summary = {
        "totalCrimes": len(crimes),
        "highPriorityCrimes": sum(1 for c in crimes if c.priority >= 80),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if code == "chicago":
        crashes = gathered["trafficCrashes"]
        summary.update({
            "totalCrashes": len(crashes),
            "total311": len(gathered["serviceRequests"]),
            "totalShotSpotter": len(gathered["shotspotterAlerts"]),
            "fatalCrashes": sum(1 for c in crashes if c.details.get("injuriesFatal", 0) > 0),
            "injuryCrashes": sum(1 for c in crashes if c.details.get("injuriesTotal", 0) > 0),
        })
    elif code == "evansville":
        summary["totalShotsFired"] = len(gathered["shotsFired"])

    logger.info(f"{code} intel: " + ", ".join(f"{k}={len(v)}" for k, v in gathered.items()))
    return {**gathered, "summary": summary}


# ─────────────────────────── Refresh Cycles ─────────────────────

def alerts_from_feeds(incidents: Sequence[Incident], news: Sequence[NewsArticle]) -> tuple:
    """Resolve the alert list once, tagging each entry with its kind."""
    return tuple(
        [IncidentAlert(incident=i) for i in incidents]
        + [NewsAlert(article=n) for n in news]
    )


class SnapshotStore:
    """Latest published snapshot per city.

    Cycles are numbered when they start. A cycle that finishes after a newer
    one has already published is discarded, so a slow request can never
    replace fresher data.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest: dict[Optional[str], DashboardSnapshot] = {}

    def begin_cycle(self) -> int:
        return next(self._counter)

    def publish(self, snapshot: DashboardSnapshot) -> bool:
        current = self._latest.get(snapshot.city)
        if current is not None and current.cycle >= snapshot.cycle:
            logger.info(
                f"Discarding stale snapshot cycle {snapshot.cycle} for {snapshot.city or 'all'} "
                f"(cycle {current.cycle} already published)"
            )
            return False
        self._latest[snapshot.city] = snapshot
        return True

    def latest(self, city: Optional[str] = None) -> Optional[DashboardSnapshot]:
        return self._latest.get(normalize_city(city))

    def clear(self):
        self._latest.clear()


snapshot_store = SnapshotStore()


async def refresh_snapshot(
    city: Optional[str] = None,
    analyze: bool = False,
    store: Optional[SnapshotStore] = None,
) -> DashboardSnapshot:
    """Run one refresh cycle and return the latest published snapshot for the city."""
    store = store or snapshot_store
    code = normalize_city(city)
    cycle = store.begin_cycle()

    incidents, cameras, news = await asyncio.gather(
        fetch_incidents(code), fetch_cameras(code), fetch_news(code),
    )
    analysis = await analyze_hotspots(incidents, cameras, news) if analyze else None

    snapshot = DashboardSnapshot(
        cycle=cycle,
        city=code,
        incidents=tuple(incidents),
        cameras=tuple(cameras),
        news=tuple(news),
        alerts=alerts_from_feeds(incidents, news),
        analysis=analysis,
    )
    store.publish(snapshot)
    return store.latest(code) or snapshot
