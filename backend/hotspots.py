"""CivicWatch Backend: Hotspot Analysis

Local grid-cell clustering of incidents and trending cameras, plus a Gemini
analysis that falls back to the local algorithm on any failure.

Grid clustering:
  - Snaps lat/lng to one decimal place (~11 km cells)
  - Weighted sum per cell = incident priorities + trending camera viewers
  - intensity = weighted sum / (records in cell + 1), capped at 100
  - Cells above HOTSPOT_MIN_INTENSITY become hotspots, strongest first
"""

import hashlib
import json
import logging
import math
from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable, Optional

from cachetools import LRUCache

# Gemini settings are read through ``config.`` at call time; thresholds are fixed at import.
import config
from config import (
    HOTSPOT_MIN_INTENSITY, HOTSPOT_LIMIT, HOTSPOT_CAMERA_MIN_VIEWERS,
    CORRELATION_TOP_N, THREAT_HIGH_THRESHOLD, THREAT_MEDIUM_THRESHOLD,
)
from models import (
    AnalysisOutcome, AnalysisResult, Camera, Correlation, CorrelationLocation,
    Hotspot, Incident, NewsArticle,
)

logger = logging.getLogger("civicwatch.hotspots")


def snap_to_grid(value: float) -> float:
    """Round to one decimal place, halves away from -inf (41.85 -> 41.9)."""
    return math.floor(value * 10 + 0.5) / 10


def classify_threat_level(hotspots: list[Hotspot]) -> str:
    if not hotspots:
        return "low"
    avg = sum(h.intensity for h in hotspots) / len(hotspots)
    if avg > THREAT_HIGH_THRESHOLD:
        return "high"
    if avg > THREAT_MEDIUM_THRESHOLD:
        return "medium"
    return "low"


def analyze_hotspots_locally(
    incidents: Iterable[Incident],
    cameras: Iterable[Camera],
    news: Iterable[NewsArticle] = (),
    now: Optional[datetime] = None,
) -> AnalysisResult:
    """Deterministic single-pass grid clustering.

    ``news`` is accepted for signature parity with the Gemini analysis; it
    carries no coordinates and does not affect the grid.
    """
    cells: dict[tuple[float, float], dict] = defaultdict(lambda: {
        "incidents": [],
        "cameras": [],
        "weighted_sum": 0.0,
    })

    for inc in incidents:
        if inc.lat is None or inc.lng is None:
            continue
        cell = cells[(snap_to_grid(inc.lat), snap_to_grid(inc.lng))]
        cell["incidents"].append(inc)
        cell["weighted_sum"] += inc.priority

    for cam in cameras:
        if cam.lat is None or cam.lng is None or cam.viewers <= HOTSPOT_CAMERA_MIN_VIEWERS:
            continue
        cell = cells[(snap_to_grid(cam.lat), snap_to_grid(cam.lng))]
        cell["cameras"].append(cam)
        cell["weighted_sum"] += cam.viewers

    hotspots: list[Hotspot] = []
    for (lat, lng), cell in cells.items():
        n_inc = len(cell["incidents"])
        n_cam = len(cell["cameras"])
        intensity = min(100.0, cell["weighted_sum"] / (n_inc + n_cam + 1))
        if intensity <= HOTSPOT_MIN_INTENSITY:
            continue

        if cell["incidents"]:
            top_incident = max(cell["incidents"], key=lambda i: i.priority).title
        else:
            top_incident = "High camera activity"

        hotspots.append(Hotspot(
            lat=lat,
            lng=lng,
            intensity=intensity,
            incidentCount=n_inc,
            cameraCount=n_cam,
            description=f"{n_inc} incidents, {n_cam} active cameras",
            topIncident=top_incident,
        ))

    # sort is stable, so equal intensities keep first-seen cell order
    hotspots.sort(key=lambda h: h.intensity, reverse=True)
    hotspots = hotspots[:HOTSPOT_LIMIT]

    threat_level = classify_threat_level(hotspots)

    correlations = []
    for h in hotspots[:CORRELATION_TOP_N]:
        if h.incidentCount > 0 and h.cameraCount > 0:
            correlations.append(Correlation(
                type="incident-camera",
                description=f"High correlation: {h.incidentCount} incidents near {h.cameraCount} trending cameras",
                location=CorrelationLocation(lat=h.lat, lng=h.lng),
            ))

    return AnalysisResult(
        hotspots=hotspots,
        correlations=correlations,
        threatLevel=threat_level,
        summary=(
            f"Identified {len(hotspots)} potential hotspots. Overall threat level: {threat_level}. "
            f"{len(correlations)} correlations found between camera activity and incidents."
        ),
        analyzedAt=(now or datetime.now(timezone.utc)).isoformat(),
    )


# ─────────────────────────── Gemini Analysis ────────────────────

# Light LRU cache for Gemini analyses (avoid re-calling for an identical payload)
_GEMINI_CACHE = LRUCache(maxsize=32)

_PROMPT_SAMPLE = 10


def _payload_digest(incidents: list[Incident], cameras: list[Camera], news: list[NewsArticle]) -> str:
    payload = json.dumps([
        [i.model_dump(exclude={"details"}) for i in incidents[:_PROMPT_SAMPLE]],
        [c.model_dump() for c in cameras[:_PROMPT_SAMPLE]],
        [n.model_dump() for n in news[:_PROMPT_SAMPLE]],
    ], sort_keys=True, default=str)
    return hashlib.sha256(payload.encode()).hexdigest()


def build_analysis_prompt(incidents: list[Incident], cameras: list[Camera], news: list[NewsArticle]) -> str:
    def _dump(records) -> str:
        return json.dumps([r.model_dump(exclude_none=True) for r in records[:_PROMPT_SAMPLE]], default=str)

    return f"""Analyze the following OSINT data and identify potential hotspots or areas of concern.

Incidents: {_dump(incidents)}
Camera Activity: {_dump(cameras)}
News: {_dump(news)}

Identify:
1. Geographic clusters of activity
2. Correlation between high viewer cameras and incidents
3. Trending locations based on news and incidents
4. Overall threat assessment (low/medium/high)

Return ONLY valid JSON (no markdown) with fields:
{{"hotspots": [{{"lat": <float>, "lng": <float>, "intensity": <0-100>, "description": "...", "incidentCount": <int>, "cameraCount": <int>}}],
 "correlations": [{{"type": "...", "description": "...", "location": {{"lat": <float>, "lng": <float>}}}}],
 "threatLevel": "low|medium|high",
 "summary": "1-2 sentences"}}"""


async def _generate_analysis_text(prompt: str) -> str:
    """Send the prompt to Gemini and return the raw response text."""
    import google.generativeai as genai
    genai.configure(api_key=config.GEMINI_API_KEY)
    model = genai.GenerativeModel(config.GEMINI_MODEL)
    result = await model.generate_content_async(
        prompt,
        generation_config=genai.types.GenerationConfig(
            response_mime_type="application/json",
        ),
    )
    return result.text


def parse_analysis_text(text: str) -> AnalysisResult:
    """Extract the outermost JSON object from model output and validate it.

    Raises ValueError (json.JSONDecodeError / ValidationError) when the text
    does not hold a usable AnalysisResult.
    """
    text = (text or "").strip()
    start_idx = text.find("{")
    end_idx = text.rfind("}")
    if start_idx == -1 or end_idx < start_idx:
        raise ValueError("no JSON object in model output")
    parsed = json.loads(text[start_idx:end_idx + 1])
    if not isinstance(parsed, dict):
        raise ValueError("model output is not a JSON object")
    return AnalysisResult.model_validate(parsed)


def _degraded(incidents, cameras, news, reason: str) -> AnalysisOutcome:
    return AnalysisOutcome(
        status="degraded",
        result=analyze_hotspots_locally(incidents, cameras, news),
        reason=reason,
    )


async def analyze_hotspots(
    incidents: list[Incident],
    cameras: list[Camera],
    news: list[NewsArticle],
) -> AnalysisOutcome:
    """Gemini hotspot analysis with an unconditional local fallback.

    Never raises: a missing key, an SDK error or output that does not
    validate as an AnalysisResult all yield the local clustering tagged
    ``degraded``.
    """
    if not config.GEMINI_API_KEY:
        return _degraded(incidents, cameras, news, "gemini not configured")

    cache_key = _payload_digest(incidents, cameras, news)
    cached = _GEMINI_CACHE.get(cache_key)
    if cached is not None:
        return AnalysisOutcome(status="ok", result=cached)

    try:
        text = await _generate_analysis_text(build_analysis_prompt(incidents, cameras, news))
    except Exception as e:
        logger.warning(f"Gemini analysis failed, using algorithmic fallback: {e}")
        return _degraded(incidents, cameras, news, f"gemini error: {e}")

    try:
        result = parse_analysis_text(text)
    except Exception as e:
        logger.warning(f"Gemini analysis unparseable, using algorithmic fallback: {e}")
        return _degraded(incidents, cameras, news, "gemini output unparseable")

    _GEMINI_CACHE[cache_key] = result
    logger.info(
        f"Gemini analysis: {len(result.hotspots)} hotspots, threat level {result.threatLevel}"
    )
    return AnalysisOutcome(status="ok", result=result)
