"""CivicWatch Backend: Configuration & Constants"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root (one level up from backend/)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path)

# ── API Keys ──
_gemini_key = os.environ.get("GEMINI_API_KEY", "").strip()
GEMINI_API_KEY = "" if _gemini_key == "PLACEHOLDER_API_KEY" else _gemini_key
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")

# ── Socrata Open Data Network ──
SOCRATA_APP_TOKEN = os.environ.get("SOCRATA_APP_TOKEN", "")

# ── Server ──
PORT = int(os.environ.get("PORT", "47391"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
HTTP_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "15"))
NEWS_CACHE_TTL = int(os.environ.get("NEWS_CACHE_TTL", "60"))
API_VERSION = "1.0.0"

_cors_env = os.environ.get("CORS_ORIGINS", "")
if _cors_env:
    CORS_ORIGINS = [o.strip() for o in _cors_env.split(",") if o.strip()]
else:
    CORS_ORIGINS = [
        f"http://localhost:{p}" for p in range(5173, 5180)
    ] + [
        f"http://127.0.0.1:{p}" for p in range(5173, 5180)
    ] + [
        f"http://localhost:{PORT}",
        f"http://127.0.0.1:{PORT}",
    ]

# ── Cities ──
# Closed set of dashboard city codes. Unknown codes get the default feeds.
CITY_CODES = ("chicago", "nyc", "la", "dc", "evansville")

# GDELT location clauses per city code
CITY_GDELT_QUERIES = {
    "chicago": "Chicago OR Illinois",
    "nyc": "New York OR Manhattan OR Brooklyn OR Queens OR Bronx",
    "la": 'Los Angeles OR California OR LA',
    "dc": "Washington DC OR Capitol OR Congress",
    "evansville": "Evansville OR Indiana",
}
GDELT_DEFAULT_QUERY = '(Chicago OR "New York" OR "Los Angeles" OR Washington OR Illinois OR California)'
GDELT_INCIDENT_TERMS = "(incident OR emergency OR crime OR shooting OR fire OR accident OR breaking)"

# ── Priority Scoring ──
BASELINE_PRIORITY = 50

PRIORITY_311_CRITICAL = [
    "fire", "shooting", "weapon", "gas leak", "explosion",
    "emergency", "assault", "robbery", "collapse",
]
PRIORITY_311_HIGH = ["accident", "injury", "medical", "hazard", "dangerous"]

# Crime tiers: (terms, score), checked in order, first match wins
CHICAGO_CRIME_TIERS = [
    (["homicide", "criminal sexual assault", "robbery", "aggravated assault", "kidnapping", "arson"], 95),
    (["battery", "burglary", "motor vehicle theft", "weapons violation", "narcotics"], 75),
    (["theft", "criminal damage", "assault", "criminal trespass"], 55),
]
EVANSVILLE_CRIME_TIERS = [
    (["homicide", "murder", "rape", "robbery", "kidnapping", "arson"], 95),
    (["battery", "burglary", "theft", "weapon", "firearm", "intimidation", "assault"], 75),
    (["criminal mischief", "fraud", "forgery", "trespass"], 55),
]

# Feeds without scoring text carry a fixed priority
FIXED_PRIORITY = {
    "chicago_311": 50,
    "speed_camera": 35,
    "red_light": 40,
    "shotspotter": 85,
    "building_violation": 45,
    "shots_fired": 90,
}

# Dashboard category groups (first match wins)
CATEGORY_GROUPS = [
    ("fire", ["fire", "smoke"]),
    ("police", ["police", "assault", "shooting", "illegal"]),
    ("traffic", ["traffic", "accident", "vehicle"]),
    ("medical", ["medical", "ambulance"]),
    ("utility", ["utility", "electric", "gas"]),
]

# ── Hotspot Analysis ──
HOTSPOT_MIN_INTENSITY = 30.0
HOTSPOT_LIMIT = 20
HOTSPOT_CAMERA_MIN_VIEWERS = 50
CORRELATION_TOP_N = 5
THREAT_HIGH_THRESHOLD = 70.0
THREAT_MEDIUM_THRESHOLD = 40.0

# ── News Sentiment ──
NEGATIVE_WORDS = [
    "crash", "accident", "fire", "shooting", "emergency", "death", "killed",
    "injured", "explosion", "attack", "violence", "danger", "warning", "alert",
    "critical", "severe", "breaking",
]
POSITIVE_WORDS = [
    "celebration", "festival", "success", "achievement", "safe", "resolved",
    "peaceful", "improvement", "recovery", "community",
]
HEADLINE_CITIES = [
    "New York", "Los Angeles", "Chicago", "Houston", "Phoenix", "Philadelphia",
    "San Antonio", "San Diego", "Dallas", "San Jose", "Austin", "Jacksonville",
    "Fort Worth", "Columbus", "Charlotte", "San Francisco", "Indianapolis",
    "Seattle", "Denver", "Washington", "Boston", "Nashville", "Baltimore",
    "Oklahoma City", "Portland", "Las Vegas", "Milwaukee", "Albuquerque",
    "Tucson", "Fresno", "Sacramento", "Kansas City", "Atlanta", "Miami",
    "London", "Paris", "Tokyo", "Berlin", "Brooklyn", "Manhattan", "Queens",
]
