"""CivicWatch Backend: Pydantic Models"""

import math
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _as_number(v) -> float:
    """Coerce a JSON scalar to a finite float; anything else fails validation."""
    if not isinstance(v, (int, float, str)):
        raise ValueError(f"expected a number, got {type(v).__name__}")
    number = float(v)
    if not math.isfinite(number):
        raise ValueError("expected a finite number")
    return number


class Incident(BaseModel):
    id: str = ""
    title: str = ""
    address: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    timestamp: str = ""
    source: str = ""
    category: str = ""
    categoryGroup: str = "other"
    priority: int = 50
    status: str = ""
    description: str = ""
    details: dict[str, Any] = {}  # provider-specific extras (beat, injuries, ...)

    @field_validator("priority", mode="before")
    @classmethod
    def _clamp_priority(cls, v):
        if v is None:
            return 50
        return int(round(_clamp(_as_number(v))))

    @field_validator("title", "address", "source", "category", "status", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v


class Camera(BaseModel):
    id: str = ""
    name: str = ""
    url: Optional[str] = None
    streamUrl: Optional[str] = None
    location: str = ""
    status: str = "active"
    lat: Optional[float] = None
    lng: Optional[float] = None
    viewers: int = 0  # simulated popularity, not measured
    source: Optional[str] = None

    @field_validator("viewers", mode="before")
    @classmethod
    def _non_negative(cls, v):
        if v is None:
            return 0
        return max(0, int(_as_number(v)))


class NewsArticle(BaseModel):
    id: Optional[str] = None
    title: str = ""
    source: str = ""
    url: Optional[str] = None
    time: str = ""
    imageUrl: Optional[str] = None
    sentiment: Literal["positive", "negative", "neutral"] = "neutral"
    category: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None

    @field_validator("sentiment", mode="before")
    @classmethod
    def _lower_sentiment(cls, v):
        return str(v or "neutral").strip().lower()


class RadioStream(BaseModel):
    id: str
    name: str
    description: str
    location: str
    url: str
    type: str  # police, fire, ems
    city: str
    listeners: int


# ─────────────────────────── Hotspot Analysis ───────────────────

class Hotspot(BaseModel):
    lat: float
    lng: float
    intensity: float
    description: str = ""
    incidentCount: int = 0
    cameraCount: int = 0
    topIncident: Optional[str] = None

    @field_validator("intensity", mode="before")
    @classmethod
    def _clamp_intensity(cls, v):
        return _clamp(_as_number(v))


class CorrelationLocation(BaseModel):
    lat: float
    lng: float


class Correlation(BaseModel):
    type: str
    description: str
    location: Optional[CorrelationLocation] = None


class AnalysisResult(BaseModel):
    hotspots: list[Hotspot] = []
    correlations: list[Correlation] = []
    threatLevel: Literal["low", "medium", "high"] = "low"
    summary: str = ""
    analyzedAt: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @field_validator("threatLevel", mode="before")
    @classmethod
    def _lower_threat(cls, v):
        return str(v).strip().lower()


class AnalysisOutcome(BaseModel):
    """Analysis tagged with the path that produced it.

    ``ok`` means the Gemini analysis was used; ``degraded`` means the local
    clusterer produced ``result`` and ``reason`` says why.
    """
    status: Literal["ok", "degraded"]
    result: AnalysisResult
    reason: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.status == "degraded"


class AnalyzeRequest(BaseModel):
    incidents: list[Incident] = []
    cameras: list[Camera] = []
    news: list[NewsArticle] = []

    @field_validator("incidents", "cameras", "news", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return [] if v is None else v


# ─────────────────────────── Alerts & Snapshots ─────────────────

class IncidentAlert(BaseModel):
    kind: Literal["incident"] = "incident"
    incident: Incident


class NewsAlert(BaseModel):
    kind: Literal["news"] = "news"
    article: NewsArticle


Alert = Annotated[Union[IncidentAlert, NewsAlert], Field(discriminator="kind")]


class DashboardSnapshot(BaseModel):
    """One refresh cycle's view of a city. Never mutated after publication."""
    model_config = ConfigDict(frozen=True)

    cycle: int
    city: Optional[str] = None
    incidents: tuple[Incident, ...] = ()
    cameras: tuple[Camera, ...] = ()
    news: tuple[NewsArticle, ...] = ()
    alerts: tuple[Alert, ...] = ()
    analysis: Optional[AnalysisOutcome] = None
    generatedAt: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    services: dict[str, str]
    version: str
