"""Hotspot clustering tests, including the Gemini fallback paths."""

import asyncio
import json

import pytest

import config
import hotspots
from hotspots import analyze_hotspots, analyze_hotspots_locally, parse_analysis_text, snap_to_grid
from models import Camera, Incident


def _inc(lat, lng, priority=50, title="Incident"):
    return Incident(id=f"{lat},{lng},{priority}", title=title, lat=lat, lng=lng, priority=priority)


def _cam(lat, lng, viewers):
    return Camera(id=f"cam-{lat},{lng}", name="Cam", lat=lat, lng=lng, viewers=viewers)


# ─────────────────────────── Local Clustering ───────────────────

def test_snap_to_grid():
    assert snap_to_grid(41.87) == pytest.approx(41.9)
    assert snap_to_grid(-87.63) == pytest.approx(-87.6)
    assert snap_to_grid(40.71) == pytest.approx(40.7)


def test_single_incident_worked_example():
    result = analyze_hotspots_locally([_inc(41.87, -87.63, 95, "HOMICIDE")], [])

    assert len(result.hotspots) == 1
    h = result.hotspots[0]
    assert h.lat == pytest.approx(41.9)
    assert h.lng == pytest.approx(-87.6)
    assert h.incidentCount == 1
    assert h.cameraCount == 0
    assert h.intensity == pytest.approx(47.5)
    assert h.topIncident == "HOMICIDE"
    assert result.threatLevel == "medium"
    assert result.correlations == []


def test_empty_input():
    result = analyze_hotspots_locally([], [])
    assert result.hotspots == []
    assert result.correlations == []
    assert result.threatLevel == "low"
    assert "0 potential hotspots" in result.summary


def test_idempotent_ordering():
    incidents = [_inc(41.87, -87.63, 95), _inc(40.71, -74.0, 80), _inc(41.88, -87.62, 70), _inc(34.05, -118.24, 100)]
    cameras = [_cam(40.71, -74.0, 140), _cam(38.9, -77.03, 90)]

    first = analyze_hotspots_locally(incidents, cameras)
    second = analyze_hotspots_locally(incidents, cameras)
    assert [h.model_dump() for h in first.hotspots] == [h.model_dump() for h in second.hotspots]
    intensities = [h.intensity for h in first.hotspots]
    assert intensities == sorted(intensities, reverse=True)


def test_cells_at_threshold_are_dropped():
    # 60 / 2 == 30, which is not above the threshold
    assert analyze_hotspots_locally([_inc(41.87, -87.63, 60)], []).hotspots == []


def test_low_viewer_cameras_ignored():
    assert analyze_hotspots_locally([], [_cam(41.87, -87.63, 50)]).hotspots == []

    result = analyze_hotspots_locally([], [_cam(41.87, -87.63, 120)])
    assert len(result.hotspots) == 1
    assert result.hotspots[0].intensity == pytest.approx(60)
    assert result.hotspots[0].topIncident == "High camera activity"


def test_intensity_clamped_to_100():
    result = analyze_hotspots_locally([], [_cam(41.87, -87.63, 1000)])
    assert result.hotspots[0].intensity == 100


def test_records_without_coordinates_skipped():
    incidents = [Incident(id="x", priority=100), Incident(id="y", lat=41.8, priority=100)]
    cameras = [Camera(id="c", viewers=500)]
    assert analyze_hotspots_locally(incidents, cameras).hotspots == []


def test_correlation_and_threat_levels():
    incidents = [_inc(41.87, -87.63, 95)]
    cameras = [_cam(41.88, -87.61, 100)]
    result = analyze_hotspots_locally(incidents, cameras)

    assert result.hotspots[0].intensity == pytest.approx(65)
    assert len(result.correlations) == 1
    corr = result.correlations[0]
    assert corr.type == "incident-camera"
    assert corr.location.lat == pytest.approx(41.9)
    assert result.threatLevel == "medium"

    high = analyze_hotspots_locally([_inc(41.87, -87.63, 100)] * 3, [])
    assert high.hotspots[0].intensity == pytest.approx(75)
    assert high.threatLevel == "high"

    low = analyze_hotspots_locally([_inc(41.87, -87.63, 70)], [])
    assert low.threatLevel == "low"


def test_hotspot_list_is_capped():
    incidents = [_inc(10.0 + i, 20.0, 100) for i in range(25)]
    result = analyze_hotspots_locally(incidents, [])
    assert len(result.hotspots) == config.HOTSPOT_LIMIT
    assert "Identified 20 potential hotspots" in result.summary


def test_top_incident_is_highest_priority():
    incidents = [_inc(41.87, -87.63, 60, "Noise"), _inc(41.86, -87.64, 95, "Robbery")]
    result = analyze_hotspots_locally(incidents, [])
    assert result.hotspots[0].topIncident == "Robbery"


# ─────────────────────────── Gemini Fallback ────────────────────

GEMINI_JSON = {
    "hotspots": [{"lat": 41.9, "lng": -87.6, "intensity": 150, "description": "Loop cluster"}],
    "correlations": [],
    "threatLevel": "High",
    "summary": "One dense cluster downtown.",
}


def _run(incidents=None, cameras=None):
    return asyncio.run(analyze_hotspots(incidents or [_inc(41.87, -87.63, 95)], cameras or [], []))


def test_no_api_key_degrades_to_local():
    outcome = _run()
    assert outcome.status == "degraded"
    assert outcome.reason == "gemini not configured"
    assert outcome.result.hotspots[0].intensity == pytest.approx(47.5)


def test_gemini_error_degrades(monkeypatch):
    monkeypatch.setattr(config, "GEMINI_API_KEY", "test-key")

    async def _boom(prompt):
        raise RuntimeError("quota exceeded")

    monkeypatch.setattr(hotspots, "_generate_analysis_text", _boom)
    outcome = _run()
    assert outcome.degraded
    assert "quota exceeded" in outcome.reason
    assert len(outcome.result.hotspots) == 1


@pytest.mark.parametrize("text", ["I cannot help with that.", "{not json}", json.dumps({**GEMINI_JSON, "threatLevel": "extreme"})])
def test_unparseable_gemini_output_degrades(monkeypatch, text):
    monkeypatch.setattr(config, "GEMINI_API_KEY", "test-key")

    async def _reply(prompt):
        return text

    monkeypatch.setattr(hotspots, "_generate_analysis_text", _reply)
    outcome = _run()
    assert outcome.status == "degraded"
    assert outcome.reason == "gemini output unparseable"


@pytest.mark.parametrize("intensity", [None, [1], {"v": 1}, "high", "nan"])
def test_non_numeric_gemini_intensity_degrades(monkeypatch, intensity):
    monkeypatch.setattr(config, "GEMINI_API_KEY", "test-key")
    text = json.dumps({"hotspots": [{"lat": 1, "lng": 2, "intensity": intensity}]})

    async def _reply(prompt):
        return text

    monkeypatch.setattr(hotspots, "_generate_analysis_text", _reply)
    outcome = _run()
    assert outcome.status == "degraded"
    assert outcome.reason == "gemini output unparseable"
    assert outcome.result.hotspots[0].intensity == pytest.approx(47.5)


def test_gemini_success_is_validated_and_cached(monkeypatch):
    monkeypatch.setattr(config, "GEMINI_API_KEY", "test-key")
    calls = []

    async def _reply(prompt):
        calls.append(prompt)
        return "```json\n" + json.dumps(GEMINI_JSON) + "\n```"

    monkeypatch.setattr(hotspots, "_generate_analysis_text", _reply)
    outcome = _run()
    assert outcome.status == "ok"
    assert outcome.reason is None
    assert outcome.result.hotspots[0].intensity == 100
    assert outcome.result.threatLevel == "high"
    assert outcome.result.analyzedAt

    again = _run()
    assert again.status == "ok"
    assert len(calls) == 1


def test_parse_analysis_text_rejects_missing_object():
    with pytest.raises(ValueError):
        parse_analysis_text("[1, 2, 3]")
