"""Source adapter tests against a fake upstream (httpx.MockTransport)."""

import asyncio
import json

import httpx
import pytest

import data_fetchers
import sentiment
from sentiment import analyze_sentiment_basic, extract_location, normalize_gdelt_articles, normalize_seendate


def _json_handler(routes: dict):
    """Serve canned JSON by URL path; unknown paths get a 404."""
    def handler(request: httpx.Request) -> httpx.Response:
        for suffix, payload in routes.items():
            if request.url.path.endswith(suffix):
                if isinstance(payload, httpx.Response):
                    return payload
                return httpx.Response(200, json=payload)
        return httpx.Response(404, json={"error": "not found"})
    return handler


# ─────────────────────────── Socrata Incidents ──────────────────

NYC_311_ROWS = [
    {
        "unique_key": "123", "complaint_type": "Gas Leak", "descriptor": "Smell of gas",
        "incident_address": "1 MAIN ST", "city": "BROOKLYN", "status": "Open",
        "latitude": "40.6782", "longitude": "-73.9442", "created_date": "2025-06-01T10:00:00.000",
    },
    {"unique_key": "124", "complaint_type": "Noise", "latitude": "40.7", "longitude": None},
    {"unique_key": "125", "complaint_type": "Noise", "latitude": "0", "longitude": "0"},
    "not a row",
]


def test_nyc_311_normalizes_and_filters(mock_http):
    mock_http(_json_handler({"erm2-nwe9.json": NYC_311_ROWS}))
    incidents = asyncio.run(data_fetchers.fetch_nyc_311_incidents())

    assert len(incidents) == 1
    inc = incidents[0]
    assert inc.id == "nyc311-123"
    assert inc.address == "1 MAIN ST, BROOKLYN"
    assert inc.lat == pytest.approx(40.6782)
    assert inc.source == "NYC 311"
    assert inc.priority == 100  # gas leak (+40) + open (+10) on top of 50
    assert inc.categoryGroup == "utility"


@pytest.mark.parametrize("response", [
    httpx.Response(500, text="upstream down"),
    httpx.Response(200, json={"error": "unexpected shape"}),
    httpx.Response(200, text="<html>maintenance</html>"),
])
def test_socrata_failures_yield_empty(mock_http, response):
    mock_http(_json_handler({"erm2-nwe9.json": response}))
    assert asyncio.run(data_fetchers.fetch_nyc_311_incidents()) == []


def test_transport_error_yields_empty(mock_http):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    mock_http(handler)
    assert asyncio.run(data_fetchers.fetch_chicago_crimes()) == []
    assert asyncio.run(data_fetchers.fetch_nyc_cameras()) == []
    assert asyncio.run(data_fetchers.fetch_evansville_crimes()) == []


def test_chicago_crimes_arrest_flag_and_details(mock_http):
    rows = [
        {"id": "1", "primary_type": "HOMICIDE", "description": "FIRST DEGREE MURDER", "arrest": "false",
         "latitude": "41.87", "longitude": "-87.63", "date": "2020-01-01T00:00:00.000", "beat": "0111"},
        {"id": "2", "primary_type": "THEFT", "description": "RETAIL THEFT", "arrest": True,
         "latitude": "41.9", "longitude": "-87.7", "date": "2020-01-01T00:00:00.000"},
    ]
    mock_http(_json_handler({"t7ek-mgzi.json": rows}))
    crimes = asyncio.run(data_fetchers.fetch_chicago_crimes())

    assert [c.status for c in crimes] == ["Open", "Arrest Made"]
    assert crimes[0].priority == 95
    assert crimes[0].details["beat"] == "0111"
    assert crimes[0].details["arrest"] is False
    assert crimes[1].priority == 55


def test_chicago_traffic_crashes(mock_http):
    rows = [{
        "crash_record_id": "abc", "first_crash_type": "REAR END", "prim_contributory_cause": "FOLLOWING TOO CLOSELY",
        "street_no": "100", "street_direction": "W", "street_name": "MADISON ST",
        "latitude": "41.88", "longitude": "-87.63", "crash_date": "2025-06-01T08:00:00.000",
        "injuries_total": "2", "injuries_fatal": "0", "hit_and_run_i": "N",
    }]
    mock_http(_json_handler({"85ca-t3if.json": rows}))
    crash = asyncio.run(data_fetchers.fetch_chicago_traffic_crashes())[0]

    assert crash.title == "Traffic Crash: REAR END"
    assert crash.address == "100 W MADISON ST"
    assert crash.priority == 70
    assert crash.categoryGroup == "traffic"
    assert crash.details["injuriesTotal"] == 2
    assert crash.details["hitAndRun"] is False


def test_chicago_fixed_priority_feeds(mock_http):
    row = {"latitude": "41.8", "longitude": "-87.6", "violations": "12", "rounds": "3",
           "address": "1 N STATE ST", "violation_date": "2025-06-01T00:00:00.000"}
    mock_http(_json_handler({
        "hhkd-xvj4.json": [row], "spqx-js37.json": [row],
        "3h7q-7mdb.json": [row], "22u3-xenr.json": [row], "v6vf-nfxy.json": [row],
    }))

    speed = asyncio.run(data_fetchers.fetch_chicago_speed_violations())[0]
    red = asyncio.run(data_fetchers.fetch_chicago_red_light_violations())[0]
    shots = asyncio.run(data_fetchers.fetch_chicago_shotspotter())[0]
    bldg = asyncio.run(data_fetchers.fetch_chicago_building_violations())[0]
    chi311 = asyncio.run(data_fetchers.fetch_chicago_311_incidents())[0]

    assert (speed.priority, red.priority, shots.priority, bldg.priority, chi311.priority) == (35, 40, 85, 45, 50)
    assert speed.description == "12 violations recorded"
    assert red.description == "12 red light violations"
    assert shots.details["rounds"] == 3


# ─────────────────────────── Evansville (ArcGIS) ────────────────

def test_evansville_crimes_geometry_and_dates(mock_http):
    payload = {"features": [
        {"attributes": {"inci_id": "E1", "Map_Crime": "Robbery", "chrgdesc": "", "Address": "100 MAIN ST",
                        "date_occu": 1700000000000, "arr_chrg": None},
         "geometry": {"x": -87.57, "y": 37.97}},
        {"attributes": {"inci_id": "E2", "Map_Crime": "Fraud"}, "geometry": None},
    ]}
    mock_http(_json_handler({"CRIMES_byDate/MapServer/1/query": payload}))
    crimes = asyncio.run(data_fetchers.fetch_evansville_crimes())

    assert len(crimes) == 1
    crime = crimes[0]
    assert (crime.lat, crime.lng) == (37.97, -87.57)
    assert crime.timestamp.startswith("2023-11-14T22:13:20")
    assert crime.priority == 95
    assert crime.status == "Open"


def test_evansville_shots_fired(mock_http):
    payload = {"features": [{
        "attributes": {"Nature": "SHOTS FIRED", "CloseCode": "ARR ", "Street": "5TH ST",
                       "CallTime": 1700000000000, "Agency": " EPD "},
        "geometry": {"x": -87.55, "y": 37.98},
    }]}
    mock_http(_json_handler({"SHOTS/MapServer/1/query": payload}))
    shot = asyncio.run(data_fetchers.fetch_evansville_shots_fired())[0]

    assert shot.priority == 90
    assert shot.status == "Arrest"
    assert shot.description == "911 call reported - Arrest Made"
    assert shot.details["agency"] == "EPD"


def test_arcgis_without_features_yields_empty(mock_http):
    mock_http(_json_handler({"SHOTS/MapServer/1/query": {"error": {"code": 400}}}))
    assert asyncio.run(data_fetchers.fetch_evansville_shots_fired()) == []


# ─────────────────────────── Cameras & Radio ────────────────────

def test_nyc_cameras(mock_http):
    rows = [
        {"cameraid": "77", "name": "Broadway @ 42nd", "borough": "Manhattan",
         "latitude": "40.758", "longitude": "-73.985", "videourl": "https://example.org/77.m3u8"},
        {"cameraid": "78", "name": "No coordinates"},
    ]
    mock_http(_json_handler({"66v9-atad.json": rows}))
    cams = asyncio.run(data_fetchers.fetch_nyc_cameras())

    assert len(cams) == 1
    assert cams[0].id == "nyc-77"
    assert cams[0].url == "https://webcams.nyctmc.org/multiviewer/data/77/snapshot.jpg"
    assert 0 <= cams[0].viewers < 150


def test_static_camera_directories():
    caltrans = asyncio.run(data_fetchers.fetch_california_cameras())
    dc = asyncio.run(data_fetchers.fetch_dc_cameras())
    intl = asyncio.run(data_fetchers.fetch_international_cameras())

    assert len(caltrans) == 10 and all(20 <= c.viewers < 100 for c in caltrans)
    assert len(dc) == 7 and all(c.source == "DC DOT" for c in dc)
    assert {c.source for c in intl} == {"TfL", "Public"}
    assert all(50 <= c.viewers < 250 for c in intl)


def test_radio_streams_directory():
    streams = data_fetchers.list_radio_streams()
    assert len(streams) == 15
    assert {s.city for s in streams} == {"chicago", "nyc", "la"}
    assert all(s.url.startswith("https://broadcastify.cdnstream1.com/") for s in streams)


# ─────────────────────────── News ───────────────────────────────

def test_sentiment_and_location():
    assert analyze_sentiment_basic("Fatal crash and fire on I-90, two killed") == "negative"
    assert analyze_sentiment_basic("Community festival a peaceful success") == "positive"
    assert analyze_sentiment_basic("City council meets Tuesday") == "neutral"
    assert analyze_sentiment_basic(None) == "neutral"
    assert extract_location("Shooting reported in Chicago overnight") == "Chicago"
    assert extract_location("nothing here") is None


def test_normalize_seendate():
    assert normalize_seendate("20250601T153000Z") == "2025-06-01T15:30:00+00:00"
    assert normalize_seendate("garbage") == "garbage"


def test_normalize_gdelt_prefers_us_sources():
    us = [{"title": f"Story {i}", "domain": f"news{i}.com", "seendate": "20250601T120000Z"} for i in range(6)]
    foreign = [{"title": "Foreign story", "domain": "example.co.uk", "sourcecountry": "United Kingdom"}]
    articles = normalize_gdelt_articles(foreign + us)
    assert len(articles) == 6
    assert all(a.source.endswith(".com") for a in articles)

    few = normalize_gdelt_articles(foreign + us[:2])
    assert len(few) == 3


def test_fetch_gdelt_news_caches(mock_http):
    calls = []
    body = {"articles": [{"title": "Fire in Chicago", "domain": "wgn.com", "url": "https://wgn.com/1",
                          "seendate": "20250601T120000Z", "sourcecountry": "United States"}]}

    def handler(request):
        calls.append(request)
        return httpx.Response(200, text=json.dumps(body))

    mock_http(handler)
    first = asyncio.run(sentiment.fetch_gdelt_news("chicago"))
    second = asyncio.run(sentiment.fetch_gdelt_news("chicago"))

    assert len(calls) == 1
    assert first == second
    assert first[0].location == "Chicago"
    assert "Chicago OR Illinois" in calls[0].url.params["query"]


def test_fetch_gdelt_plain_text_error(mock_http):
    mock_http(lambda request: httpx.Response(200, text="Your query was too short or too long."))
    assert asyncio.run(sentiment.fetch_gdelt_news()) == []
