"""CivicWatch Backend: GDELT News Feed + Headline Sentiment.

GDELT DOC 2.0 API is free and requires no API key.
Sentiment is a naive keyword count over the headline, not a model.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx
from cachetools import TTLCache

from config import (
    CITY_GDELT_QUERIES, GDELT_DEFAULT_QUERY, GDELT_INCIDENT_TERMS,
    NEGATIVE_WORDS, POSITIVE_WORDS, HEADLINE_CITIES, NEWS_CACHE_TTL,
)
from models import NewsArticle

logger = logging.getLogger("civicwatch.news")

_news_client = httpx.AsyncClient(timeout=8.0)

# GDELT throttles bursts; the dashboard polls every 30-60s per viewer
_news_cache: TTLCache = TTLCache(maxsize=16, ttl=NEWS_CACHE_TTL)

GDELT_DOC_API = "https://api.gdeltproject.org/api/v2/doc/doc"

_US_DOMAIN_HINTS = ("chicago", "nyc", "nytimes", "cnn", "abc", "nbc", "cbs", "fox")


def analyze_sentiment_basic(text: Optional[str]) -> str:
    """Label a headline positive/negative/neutral by counting keyword hits.

    Each negative word present subtracts one, each positive word adds one;
    the label needs a margin of two either way.
    """
    if not text:
        return "neutral"

    lower = text.lower()
    score = 0
    for word in NEGATIVE_WORDS:
        if word in lower:
            score -= 1
    for word in POSITIVE_WORDS:
        if word in lower:
            score += 1

    if score < -1:
        return "negative"
    if score > 1:
        return "positive"
    return "neutral"


def extract_location(text: Optional[str]) -> Optional[str]:
    """First well-known city named in the text (case-sensitive), if any."""
    if not text:
        return None
    for city in HEADLINE_CITIES:
        if city in text:
            return city
    return None


def normalize_seendate(value: Optional[str]) -> str:
    """GDELT ``20240131T154500Z`` -> ISO-8601. Unparseable values pass through."""
    if not value:
        return datetime.now(timezone.utc).isoformat()
    try:
        return datetime.strptime(value, "%Y%m%dT%H%M%SZ").replace(tzinfo=timezone.utc).isoformat()
    except ValueError:
        return value


def build_gdelt_query(city: Optional[str] = None) -> str:
    if city and city in CITY_GDELT_QUERIES:
        location_query = f"({CITY_GDELT_QUERIES[city]})"
    else:
        location_query = GDELT_DEFAULT_QUERY
    return f"{location_query} {GDELT_INCIDENT_TERMS}"


def _is_us_source(article: dict) -> bool:
    domain = (article.get("domain") or "").lower()
    country = (article.get("sourcecountry") or "").lower()
    return (
        "united states" in country
        or domain.endswith((".com", ".org", ".gov"))
        or any(hint in domain for hint in _US_DOMAIN_HINTS)
    )


def normalize_gdelt_articles(articles: list[dict]) -> list[NewsArticle]:
    """Map GDELT ``artlist`` rows to NewsArticle, preferring US outlets."""
    us_articles = [a for a in articles if isinstance(a, dict) and _is_us_source(a)]
    # Only narrow to US outlets when that still leaves a usable feed
    selected = us_articles if len(us_articles) > 5 else [a for a in articles if isinstance(a, dict)]

    results = []
    for index, art in enumerate(selected[:20]):
        title = (art.get("title") or "").strip() or "Breaking News"
        results.append(NewsArticle(
            id=f"gdelt-{index}",
            title=title,
            source=art.get("domain") or "GDELT",
            url=art.get("url"),
            time=normalize_seendate(art.get("seendate")),
            imageUrl=art.get("socialimage") or None,
            sentiment=analyze_sentiment_basic(title),
            location=extract_location(title),
            category="breaking",
            country=art.get("sourcecountry") or "Unknown",
        ))
    return results


async def fetch_gdelt_news(city: Optional[str] = None) -> list[NewsArticle]:
    """Fetch recent incident-related articles for a city code via GDELT DOC 2.0.

    Returns [] on any error; results are cached briefly per city.
    """
    cache_key = city or "_all"
    cached = _news_cache.get(cache_key)
    if cached is not None:
        return list(cached)

    try:
        r = await _news_client.get(GDELT_DOC_API, params={
            "query": build_gdelt_query(city),
            "mode": "artlist",
            "maxrecords": "30",
            "format": "json",
            "sourcelang": "english",
        })
        if r.status_code != 200:
            logger.warning(f"GDELT returned {r.status_code} for {cache_key}")
            return []

        text = r.text.strip()
        # GDELT answers query errors with plain text and a 200
        if not text.startswith(("{", "[")):
            logger.warning(f"GDELT did not return JSON: {text[:100]}")
            return []

        data = r.json()
        articles = data.get("articles") if isinstance(data, dict) else None
        if not isinstance(articles, list):
            return []

        results = normalize_gdelt_articles(articles)
        _news_cache[cache_key] = tuple(results)
        logger.info(f"GDELT: {len(results)} articles for {cache_key}")
        return results

    except Exception as e:
        logger.warning(f"GDELT fetch failed for {cache_key}: {e}")
        return []
