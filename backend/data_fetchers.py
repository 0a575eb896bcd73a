"""CivicWatch Backend: Source Adapters (Socrata, ArcGIS, CCTV directories, radio)

Each adapter maps one provider's schema onto Incident / Camera and returns []
on any network or parse problem. Nothing here raises past the adapter.
"""

import math
import random
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx

from config import (
    HTTP_TIMEOUT, SOCRATA_APP_TOKEN,
    CHICAGO_CRIME_TIERS, EVANSVILLE_CRIME_TIERS, FIXED_PRIORITY,
)
from models import Incident, Camera, RadioStream
from scoring import (
    calculate_311_priority, calculate_crime_priority, calculate_crash_priority,
    classify_category, parse_timestamp,
)

logger = logging.getLogger("civicwatch.fetchers")

# Shared async HTTP client
client = httpx.AsyncClient(timeout=HTTP_TIMEOUT)

NYC_DATA = "https://data.cityofnewyork.us/resource"
CHICAGO_DATA = "https://data.cityofchicago.org/resource"
EVANSVILLE_GIS = "https://maps.evansvillegis.com/arcgis_server/rest/services/CRIMES"


# ─────────────────────────── Helpers ────────────────────────────

def _coord(value) -> Optional[float]:
    """Parse a coordinate; zero, NaN and junk count as missing."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(v) or math.isinf(v) or v == 0:
        return None
    return v


def _valid_point(lat: Optional[float], lng: Optional[float]) -> bool:
    return (
        lat is not None and lng is not None
        and -90 <= lat <= 90 and -180 <= lng <= 180
    )


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "y", "yes")


def _as_int(value, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _epoch_ms_to_iso(value) -> str:
    dt = parse_timestamp(value) if isinstance(value, (int, float)) else None
    return (dt or datetime.now(timezone.utc)).isoformat()


def _strip(value) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


def _socrata_headers() -> dict:
    headers = {"Accept": "application/json"}
    if SOCRATA_APP_TOKEN:
        headers["X-App-Token"] = SOCRATA_APP_TOKEN
    return headers


async def _fetch_socrata_rows(url: str, params: dict, label: str) -> list[dict]:
    """GET a Socrata SODA resource and return its rows ([] on any failure)."""
    try:
        r = await client.get(url, params=params, headers=_socrata_headers())
        if r.status_code != 200:
            logger.warning(f"{label} API returned status {r.status_code}")
            return []
        data = r.json()
        if not isinstance(data, list):
            logger.warning(f"{label} API did not return an array")
            return []
        return [row for row in data if isinstance(row, dict)]
    except Exception as e:
        logger.warning(f"Error fetching {label}: {e}")
        return []


async def _fetch_arcgis_features(url: str, params: dict, label: str) -> list[dict]:
    """Query an ArcGIS MapServer layer and return its features ([] on any failure)."""
    query = {"where": "1=1", "outFields": "*", "f": "json", "outSR": 4326}
    query.update(params)
    try:
        r = await client.get(url, params=query, headers={"Accept": "application/json"})
        if r.status_code != 200:
            logger.warning(f"{label} API returned status {r.status_code}")
            return []
        data = r.json()
        features = data.get("features") if isinstance(data, dict) else None
        if not isinstance(features, list):
            logger.warning(f"{label} API did not return a features array")
            return []
        return [f for f in features if isinstance(f, dict)]
    except Exception as e:
        logger.warning(f"Error fetching {label}: {e}")
        return []


def _map_rows(rows: list[dict], mapper: Callable, label: str) -> list:
    """Apply ``mapper(row, index)`` to every row, skipping rows it rejects or chokes on."""
    out = []
    skipped = 0
    for index, row in enumerate(rows):
        try:
            record = mapper(row, index)
        except Exception as e:
            logger.debug(f"{label}: skipping malformed row {index}: {e}")
            record = None
        if record is None:
            skipped += 1
            continue
        out.append(record)
    if skipped:
        logger.debug(f"{label}: dropped {skipped} rows without usable coordinates")
    return out


def _incident(**fields) -> Optional[Incident]:
    """Build an Incident, or None when it has no valid position."""
    lat, lng = _coord(fields.get("lat")), _coord(fields.get("lng"))
    if not _valid_point(lat, lng):
        return None
    fields["lat"], fields["lng"] = lat, lng
    fields.setdefault("categoryGroup", classify_category(fields.get("title"), fields.get("category")))
    return Incident(**fields)


def _camera(**fields) -> Optional[Camera]:
    lat, lng = _coord(fields.get("lat")), _coord(fields.get("lng"))
    if not _valid_point(lat, lng):
        return None
    fields["lat"], fields["lng"] = lat, lng
    return Camera(**fields)


# ─────────────────────────── 311 Service Requests ───────────────

async def fetch_nyc_311_incidents() -> list[Incident]:
    rows = await _fetch_socrata_rows(
        f"{NYC_DATA}/erm2-nwe9.json",
        {"$limit": 50, "$order": "created_date DESC"},
        "NYC 311",
    )

    def _map(row: dict, index: int):
        complaint = row.get("complaint_type") or ""
        return _incident(
            id=f"nyc311-{row.get('unique_key') or index}",
            title=complaint or "Unknown Incident",
            description=row.get("descriptor") or "",
            address=f"{row.get('incident_address') or ''}, {row.get('city') or 'New York'}",
            lat=row.get("latitude"),
            lng=row.get("longitude"),
            timestamp=row.get("created_date") or "",
            source="NYC 311",
            category=complaint,
            status=row.get("status") or "Open",
            priority=calculate_311_priority(complaint, row.get("descriptor"), row.get("status")),
        )

    return _map_rows(rows, _map, "NYC 311")


async def fetch_chicago_311_incidents() -> list[Incident]:
    rows = await _fetch_socrata_rows(
        f"{CHICAGO_DATA}/v6vf-nfxy.json",
        {"$limit": 50, "$order": "created_date DESC"},
        "Chicago 311",
    )

    def _map(row: dict, index: int):
        return _incident(
            id=f"chi311-{row.get('sr_number') or index}",
            title=row.get("sr_type") or "Incident",
            description=row.get("sr_short_code") or "",
            address=row.get("street_address") or "Chicago, IL",
            lat=row.get("latitude"),
            lng=row.get("longitude"),
            timestamp=row.get("created_date") or "",
            source="Chicago 311",
            category=row.get("sr_type") or "",
            status=row.get("status") or "Open",
            priority=FIXED_PRIORITY["chicago_311"],
        )

    return _map_rows(rows, _map, "Chicago 311")


# ─────────────────────────── Chicago Signal Sources ─────────────

async def fetch_chicago_crimes(now: Optional[datetime] = None) -> list[Incident]:
    rows = await _fetch_socrata_rows(
        f"{CHICAGO_DATA}/t7ek-mgzi.json",
        {"$limit": 100, "$order": "date DESC"},
        "Chicago Crimes",
    )

    def _map(row: dict, index: int):
        arrest = _as_bool(row.get("arrest"))
        return _incident(
            id=f"chi-crime-{row.get('id') or index}",
            title=row.get("primary_type") or "Crime Reported",
            description=row.get("description") or "",
            address=row.get("block") or "Chicago, IL",
            lat=row.get("latitude"),
            lng=row.get("longitude"),
            timestamp=row.get("date") or "",
            source="Chicago PD",
            category=row.get("primary_type") or "",
            status="Arrest Made" if arrest else "Open",
            priority=calculate_crime_priority(
                row.get("primary_type"), row.get("description"),
                occurred_at=row.get("date"), tiers=CHICAGO_CRIME_TIERS, now=now,
            ),
            details={
                "subcategory": row.get("description"),
                "locationDescription": row.get("location_description"),
                "arrest": arrest,
                "domestic": _as_bool(row.get("domestic")),
                "beat": row.get("beat"),
                "district": row.get("district"),
                "ward": row.get("ward"),
                "communityArea": row.get("community_area"),
            },
        )

    return _map_rows(rows, _map, "Chicago Crimes")


async def fetch_chicago_traffic_crashes() -> list[Incident]:
    rows = await _fetch_socrata_rows(
        f"{CHICAGO_DATA}/85ca-t3if.json",
        {"$limit": 75, "$order": "crash_date DESC"},
        "Chicago Traffic Crashes",
    )

    def _map(row: dict, index: int):
        if row.get("street_name"):
            address = " ".join(
                p for p in (row.get("street_no"), row.get("street_direction"), row.get("street_name")) if p
            )
        else:
            address = "Chicago, IL"
        return _incident(
            id=f"chi-crash-{row.get('crash_record_id') or index}",
            title=f"Traffic Crash: {row.get('first_crash_type') or 'Vehicle Collision'}",
            description=row.get("prim_contributory_cause") or "Unknown cause",
            address=address,
            lat=row.get("latitude"),
            lng=row.get("longitude"),
            timestamp=row.get("crash_date") or "",
            source="Chicago DOT",
            category="Traffic Crash",
            categoryGroup="traffic",
            status="Reported",
            priority=calculate_crash_priority(row),
            details={
                "crashType": row.get("first_crash_type"),
                "trafficControl": row.get("traffic_control_device"),
                "weatherCondition": row.get("weather_condition"),
                "lightingCondition": row.get("lighting_condition"),
                "roadCondition": row.get("roadway_surface_cond"),
                "injuriesTotal": _as_int(row.get("injuries_total")),
                "injuriesFatal": _as_int(row.get("injuries_fatal")),
                "damageCategory": row.get("damage"),
                "hitAndRun": row.get("hit_and_run_i") == "Y",
            },
        )

    return _map_rows(rows, _map, "Chicago Traffic Crashes")


async def _fetch_chicago_violation_zones(
    resource: str, label: str, title: str, source: str, noun: str, priority: int, id_prefix: str,
) -> list[Incident]:
    """Speed and red-light camera violation counts share one shape."""
    rows = await _fetch_socrata_rows(
        f"{CHICAGO_DATA}/{resource}.json",
        {"$limit": 50, "$order": "violation_date DESC"},
        label,
    )

    def _map(row: dict, index: int):
        return _incident(
            id=f"{id_prefix}-{index}",
            title=title,
            description=f"{row.get('violations') or 'Multiple'} {noun}",
            address=row.get("intersection") or row.get("address") or "Chicago, IL",
            lat=row.get("latitude"),
            lng=row.get("longitude"),
            timestamp=row.get("violation_date") or "",
            source=source,
            category="Traffic Enforcement",
            categoryGroup="traffic",
            status="Active",
            priority=priority,
            details={"violations": _as_int(row.get("violations")), "cameraId": row.get("camera_id")},
        )

    return _map_rows(rows, _map, label)


async def fetch_chicago_speed_violations() -> list[Incident]:
    return await _fetch_chicago_violation_zones(
        "hhkd-xvj4", "Chicago Speed Camera", "Speed Camera Violation Zone",
        "Chicago Speed Cameras", "violations recorded", FIXED_PRIORITY["speed_camera"], "chi-speed",
    )


async def fetch_chicago_red_light_violations() -> list[Incident]:
    return await _fetch_chicago_violation_zones(
        "spqx-js37", "Chicago Red Light Camera", "Red Light Violation Zone",
        "Chicago Red Light Cameras", "red light violations", FIXED_PRIORITY["red_light"], "chi-redlight",
    )


async def fetch_chicago_shotspotter() -> list[Incident]:
    # ShotSpotter was discontinued in Sept 2024; the dataset is historical only
    rows = await _fetch_socrata_rows(
        f"{CHICAGO_DATA}/3h7q-7mdb.json",
        {"$limit": 100, "$order": "date DESC"},
        "Chicago ShotSpotter",
    )

    def _map(row: dict, index: int):
        return _incident(
            id=f"chi-shot-{index}",
            title="Gunshot Detection Alert",
            description=f"{row.get('rounds') or 'Unknown'} rounds detected",
            address=row.get("block") or "Chicago, IL",
            lat=row.get("latitude"),
            lng=row.get("longitude"),
            timestamp=row.get("date") or "",
            source="ShotSpotter (Historical)",
            category="Gunshot Detection",
            categoryGroup="police",
            status="Historical",
            priority=FIXED_PRIORITY["shotspotter"],
            details={
                "rounds": _as_int(row.get("rounds"), default=1) or 1,
                "beat": row.get("beat"),
                "district": row.get("district"),
                "communityArea": row.get("community_area"),
            },
        )

    return _map_rows(rows, _map, "Chicago ShotSpotter")


async def fetch_chicago_building_violations() -> list[Incident]:
    rows = await _fetch_socrata_rows(
        f"{CHICAGO_DATA}/22u3-xenr.json",
        {"$limit": 50, "$order": "violation_date DESC", "violation_status": "OPEN"},
        "Chicago Building Violations",
    )

    def _map(row: dict, index: int):
        return _incident(
            id=f"chi-bldg-{index}",
            title=f"Building Violation: {row.get('violation_code') or 'Code Violation'}",
            description=row.get("violation_description") or "",
            address=row.get("address") or "Chicago, IL",
            lat=row.get("latitude"),
            lng=row.get("longitude"),
            timestamp=row.get("violation_date") or "",
            source="Chicago Buildings",
            category="Building Safety",
            status=row.get("violation_status") or "Open",
            priority=FIXED_PRIORITY["building_violation"],
            details={"violationCode": row.get("violation_code")},
        )

    return _map_rows(rows, _map, "Chicago Building Violations")


# ─────────────────────────── Evansville, IN (ArcGIS) ────────────

_CLOSE_CODE_LABELS = {"UNF": "Unfounded", "ARR": "Arrest Made", "RPT": "Report Filed"}
_CLOSE_CODE_STATUS = {"ARR": "Arrest", "UNF": "Unfounded"}


async def fetch_evansville_crimes() -> list[Incident]:
    features = await _fetch_arcgis_features(
        f"{EVANSVILLE_GIS}/CRIMES_byDate/MapServer/1/query",
        {"resultRecordCount": 100},
        "Evansville Crimes",
    )

    def _map(feature: dict, index: int):
        attrs = feature.get("attributes") or {}
        geom = feature.get("geometry") or {}
        crime = attrs.get("Map_Crime") or ""
        return _incident(
            id=f"ev-crime-{attrs.get('inci_id') or index}",
            title=crime or "Crime Reported",
            description=attrs.get("chrgdesc") or "",
            address=attrs.get("Address") or "Evansville, IN",
            # ArcGIS geometry is x=longitude, y=latitude
            lat=geom.get("y"),
            lng=geom.get("x"),
            timestamp=_epoch_ms_to_iso(attrs.get("date_occu")),
            source="Evansville PD",
            category=crime,
            status="Arrest Charged" if attrs.get("arr_chrg") else "Open",
            priority=calculate_crime_priority(crime, attrs.get("chrgdesc"), tiers=EVANSVILLE_CRIME_TIERS),
            details={
                "ucrCode": attrs.get("ucr_code"),
                "zone": attrs.get("zone_") or attrs.get("zone1"),
                "subdivision": attrs.get("subdivisn"),
                "premise": attrs.get("premise"),
                "attemptComplete": attrs.get("attm_comp"),
                "tract": attrs.get("tract"),
                "dayOfWeek": attrs.get("dow1"),
                "hourOccurred": attrs.get("hour_occu"),
            },
        )

    return _map_rows(features, _map, "Evansville Crimes")


async def fetch_evansville_shots_fired() -> list[Incident]:
    features = await _fetch_arcgis_features(
        f"{EVANSVILLE_GIS}/SHOTS/MapServer/1/query",
        {"resultRecordCount": 50},
        "Evansville Shots Fired",
    )

    def _map(feature: dict, index: int):
        attrs = feature.get("attributes") or {}
        geom = feature.get("geometry") or {}
        close_code = _strip(attrs.get("CloseCode")) or ""
        return _incident(
            id=f"ev-shots-{index}",
            title=attrs.get("Nature") or "Shots Fired Report",
            description=f"911 call reported - {_CLOSE_CODE_LABELS.get(close_code, 'Responded')}",
            address=attrs.get("Street") or "Evansville, IN",
            lat=geom.get("y"),
            lng=geom.get("x"),
            timestamp=_epoch_ms_to_iso(attrs.get("CallTime")),
            source="Evansville 911",
            category="Shots Fired",
            categoryGroup="police",
            status=_CLOSE_CODE_STATUS.get(close_code, "Responded"),
            priority=FIXED_PRIORITY["shots_fired"],
            details={
                "agency": _strip(attrs.get("Agency")) or "EPD",
                "city": attrs.get("CityDescription") or "Evansville",
                "closeCode": close_code or None,
                "district": _strip(attrs.get("District")),
                "beat": _strip(attrs.get("GeoLawBeat")),
            },
        )

    return _map_rows(features, _map, "Evansville Shots Fired")


# ─────────────────────────── CCTV Directories ───────────────────

async def fetch_nyc_cameras() -> list[Camera]:
    rows = await _fetch_socrata_rows(f"{NYC_DATA}/66v9-atad.json", {"$limit": 100}, "NYC cameras")

    def _map(row: dict, index: int):
        cam_id = row.get("cameraid") or row.get("cam_id")
        return _camera(
            id=f"nyc-{cam_id or index}",
            name=row.get("name") or row.get("location") or f"NYC Camera {index + 1}",
            location=row.get("borough") or "New York",
            lat=row.get("latitude"),
            lng=row.get("longitude"),
            url=f"https://webcams.nyctmc.org/multiviewer/data/{cam_id}/snapshot.jpg" if cam_id else None,
            streamUrl=row.get("videourl") or None,
            status="active",
            source="NYC DOT",
            viewers=random.randrange(150),
        )

    return _map_rows(rows, _map, "NYC cameras")


async def fetch_chicago_cameras() -> list[Camera]:
    rows = await _fetch_socrata_rows(f"{CHICAGO_DATA}/v4nv-qy7d.json", {"$limit": 50}, "Chicago cameras")

    def _map(row: dict, index: int):
        return _camera(
            id=f"chi-{index}",
            name=row.get("intersection") or f"Chicago Camera {index + 1}",
            location="Chicago, IL",
            lat=row.get("latitude"),
            lng=row.get("longitude"),
            url=row.get("image") or None,
            streamUrl=row.get("video") or None,
            status="active",
            source="Chicago DOT",
            viewers=random.randrange(100),
        )

    return _map_rows(rows, _map, "Chicago cameras")


# Static directories: (id, name, lat, lng, location[, source])
CALTRANS_CAMERAS = [
    ("ca-1", "I-80 Bay Bridge Toll Plaza", 37.8162, -122.3560, "San Francisco, CA"),
    ("ca-2", "US-101 Golden Gate Bridge", 37.8199, -122.4783, "San Francisco, CA"),
    ("ca-3", "I-405 LAX Vicinity", 33.9425, -118.4081, "Los Angeles, CA"),
    ("ca-4", "I-5 Downtown LA", 34.0522, -118.2437, "Los Angeles, CA"),
    ("ca-5", "SR-99 Fresno", 36.7378, -119.7871, "Fresno, CA"),
    ("ca-6", "I-15 San Diego", 32.7157, -117.1611, "San Diego, CA"),
    ("ca-7", "I-880 Oakland", 37.8044, -122.2712, "Oakland, CA"),
    ("ca-8", "US-101 San Jose", 37.3382, -121.8863, "San Jose, CA"),
    ("ca-9", "I-10 Santa Monica", 34.0195, -118.4912, "Santa Monica, CA"),
    ("ca-10", "I-580 Dublin", 37.7022, -121.9358, "Dublin, CA"),
]

DC_CAMERAS = [
    ("dc-1", "Constitution Ave NW", 38.8918, -77.0261, "Washington, DC"),
    ("dc-2", "Independence Ave SW", 38.8871, -77.0134, "Washington, DC"),
    ("dc-3", "Pennsylvania Ave NW", 38.8977, -77.0365, "Washington, DC"),
    ("dc-4", "I-395 Downtown", 38.8752, -77.0244, "Washington, DC"),
    ("dc-5", "K Street NW", 38.9024, -77.0309, "Washington, DC"),
    ("dc-6", "Georgetown Waterfront", 38.9031, -77.0654, "Washington, DC"),
    ("dc-7", "DuPont Circle", 38.9096, -77.0434, "Washington, DC"),
]

INTERNATIONAL_CAMERAS = [
    ("uk-1", "Trafalgar Square", 51.5074, -0.1278, "London, UK", "TfL"),
    ("uk-2", "Piccadilly Circus", 51.5099, -0.1342, "London, UK", "TfL"),
    ("uk-3", "Tower Bridge", 51.5055, -0.0754, "London, UK", "TfL"),
    ("jp-1", "Shibuya Crossing", 35.6595, 139.7004, "Tokyo, Japan", "Public"),
    ("jp-2", "Shinjuku Station", 35.6896, 139.7006, "Tokyo, Japan", "Public"),
    ("de-1", "Brandenburg Gate", 52.5163, 13.3777, "Berlin, Germany", "Public"),
    ("fr-1", "Champs-Élysées", 48.8698, 2.3078, "Paris, France", "Public"),
    ("fr-2", "Place de la Concorde", 48.8656, 2.3212, "Paris, France", "Public"),
]


def _static_cameras(entries: list[tuple], source: str, viewers_min: int, viewers_spread: int) -> list[Camera]:
    cameras = []
    for cam_id, name, lat, lng, location, *rest in entries:
        cameras.append(Camera(
            id=cam_id, name=name, lat=lat, lng=lng, location=location,
            url=None, streamUrl=None, status="active",
            source=rest[0] if rest else source,
            viewers=random.randrange(viewers_spread) + viewers_min,
        ))
    return cameras


async def fetch_california_cameras() -> list[Camera]:
    return _static_cameras(CALTRANS_CAMERAS, "Caltrans", 20, 80)


async def fetch_dc_cameras() -> list[Camera]:
    return _static_cameras(DC_CAMERAS, "DC DOT", 10, 60)


async def fetch_international_cameras() -> list[Camera]:
    return _static_cameras(INTERNATIONAL_CAMERAS, "Public", 50, 200)


# ─────────────────────────── Radio Streams ──────────────────────

# (id, name, description, location, stream id, type, city, listeners base, spread)
RADIO_STREAMS = [
    ("chicago-pd-zone1", "Chicago PD Zone 1", "CPD Zones 1-2 (Districts 1, 18)", "Chicago, IL", 17635, "police", "chicago", 150, 400),
    ("chicago-pd-zone2", "Chicago PD Zone 2", "CPD Zones 3-4 (Districts 2, 21)", "Chicago, IL", 32190, "police", "chicago", 100, 350),
    ("chicago-pd-zone5", "Chicago PD Zone 5", "CPD Zone 5 (Districts 7, 8)", "Chicago, IL", 32193, "police", "chicago", 80, 300),
    ("chicago-pd-zone6", "Chicago PD Zone 6", "CPD Zone 6 (Districts 3, 6)", "Chicago, IL", 32194, "police", "chicago", 90, 280),
    ("chicago-pd-zone10", "Chicago PD Zone 10", "CPD Zone 10 (Districts 10, 11)", "Chicago, IL", 32198, "police", "chicago", 110, 320),
    ("chicago-fire-main", "Chicago Fire Main", "Chicago Fire Department - Main Dispatch", "Chicago, IL", 17436, "fire", "chicago", 120, 350),
    ("chicago-fire-englewood", "Chicago Fire Englewood", "CFD Englewood Fireground", "Chicago, IL", 17437, "fire", "chicago", 60, 200),
    ("chicago-ems", "Chicago EMS", "Chicago Emergency Medical Services", "Chicago, IL", 32396, "ems", "chicago", 70, 250),
    ("cook-county-sheriff", "Cook County Sheriff", "Cook County Sheriff Police", "Cook County, IL", 17641, "police", "chicago", 50, 200),
    ("illinois-state-police", "Illinois State Police", "ISP Chicago District", "Illinois", 29105, "police", "chicago", 40, 180),
    ("nypd-citywide", "NYPD Citywide", "New York Police Department - Citywide Operations", "New York, NY", 14439, "police", "nyc", 100, 500),
    ("nypd-manhattan", "NYPD Manhattan", "NYPD Manhattan Dispatch", "Manhattan, NY", 31728, "police", "nyc", 50, 300),
    ("fdny-citywide", "FDNY Citywide", "Fire Department of New York - Citywide", "New York, NY", 14433, "fire", "nyc", 80, 400),
    ("la-county-fire", "LA County Fire", "Los Angeles County Fire Department", "Los Angeles, CA", 29461, "fire", "la", 40, 250),
    ("lapd-dispatch", "LAPD Dispatch", "Los Angeles Police Department", "Los Angeles, CA", 32982, "police", "la", 70, 300),
]


def list_radio_streams() -> list[RadioStream]:
    """The static Broadcastify directory with simulated listener counts."""
    return [
        RadioStream(
            id=sid, name=name, description=desc, location=location,
            url=f"https://broadcastify.cdnstream1.com/{stream}",
            type=kind, city=city,
            listeners=random.randrange(spread) + base,
        )
        for sid, name, desc, location, stream, kind, city, base, spread in RADIO_STREAMS
    ]
