"""CivicWatch Backend: Incident Priority Scoring

Keyword-table scorers for the incident feeds. Every scorer returns an int in
[0, 100], treats missing text as empty and never raises.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from config import (
    BASELINE_PRIORITY,
    PRIORITY_311_CRITICAL,
    PRIORITY_311_HIGH,
    CHICAGO_CRIME_TIERS,
    CATEGORY_GROUPS,
)

logger = logging.getLogger("civicwatch.scoring")

RECENT_WINDOW = timedelta(hours=1)


def clamp_priority(score: float) -> int:
    return int(max(0, min(100, round(score))))


def _text(*parts) -> str:
    return " ".join(str(p) for p in parts if p).lower()


# ─────────────────────────── Timestamps ─────────────────────────

def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch milliseconds. Returns None when unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    try:
        return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def is_recent(value, now: Optional[datetime] = None, window: timedelta = RECENT_WINDOW) -> bool:
    """True if the timestamp is later than ``now - window``.

    Naive timestamps (Socrata's floating local times) are compared against
    naive local time, aware ones against UTC.
    """
    dt = parse_timestamp(value)
    if dt is None:
        return False
    if now is None:
        now = datetime.now(timezone.utc) if dt.tzinfo else datetime.now()
    elif dt.tzinfo is None and now.tzinfo is not None:
        now = now.replace(tzinfo=None)
    elif dt.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return dt > now - window


# ─────────────────────────── Scorers ────────────────────────────

def calculate_311_priority(complaint_type: str = "", descriptor: str = "", status: str = "") -> int:
    """Additive score for 311 service requests.

    Each critical term found adds 40, each high term 20, an open request 10.
    """
    priority = BASELINE_PRIORITY
    text = _text(complaint_type, descriptor)

    for term in PRIORITY_311_CRITICAL:
        if term in text:
            priority += 40
    for term in PRIORITY_311_HIGH:
        if term in text:
            priority += 20

    if (status or "").strip().lower() == "open":
        priority += 10

    return clamp_priority(priority)


def calculate_crime_priority(
    primary_type: str = "",
    description: str = "",
    occurred_at=None,
    tiers=CHICAGO_CRIME_TIERS,
    now: Optional[datetime] = None,
) -> int:
    """Tiered score for police crime records.

    The first tier with a matching term sets the score (critical before high
    before medium); crimes from the last hour get +10.
    """
    priority = BASELINE_PRIORITY
    crime = (primary_type or "").lower()
    desc = (description or "").lower()

    for terms, score in tiers:
        if any(t in crime or t in desc for t in terms):
            priority = score
            break

    if occurred_at and is_recent(occurred_at, now=now):
        priority += 10

    return clamp_priority(priority)


def _as_int(value) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def calculate_crash_priority(crash: dict) -> int:
    """Score a Chicago traffic crash row by injuries, hit-and-run and damage."""
    fatal = _as_int(crash.get("injuries_fatal"))
    incapacitating = _as_int(crash.get("injuries_incapacitating"))
    total = _as_int(crash.get("injuries_total"))

    if fatal > 0:
        priority = 100
    elif incapacitating > 0:
        priority = 90
    elif total > 2:
        priority = 80
    elif total > 0:
        priority = 70
    elif crash.get("hit_and_run_i") == "Y":
        priority = 75
    elif crash.get("damage") == "OVER $1,500":
        priority = 55
    else:
        priority = 45

    return clamp_priority(priority)


def classify_category(*texts: str) -> str:
    """Map free text to a dashboard category group (fire, police, traffic, ...)."""
    text = _text(*texts)
    if not text:
        return "other"
    for group, terms in CATEGORY_GROUPS:
        if any(t in text for t in terms):
            return group
    return "other"
