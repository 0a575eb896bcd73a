"""CivicWatch Backend: FastAPI Routes"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

import config
from config import API_VERSION, CORS_ORIGINS
from models import (
    AnalysisResult, AnalyzeRequest, Camera, DashboardSnapshot, HealthResponse,
    Incident, NewsArticle, RadioStream,
)
import aggregator
import data_fetchers as fetchers
import sentiment
from hotspots import analyze_hotspots, analyze_hotspots_locally

logger = logging.getLogger("civicwatch")


# ─────────────────────────── App Setup ──────────────────────────

app = FastAPI(title="CivicWatch OSINT API", version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Gemini AI: {'Enabled' if config.GEMINI_API_KEY else 'Disabled (no API key)'}")


@app.on_event("shutdown")
async def shutdown_event():
    await fetchers.client.aclose()
    await sentiment._news_client.aclose()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    # Rejected input is not echoed back; it may hold non-finite floats.
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


# ─────────────────────────── Feeds ──────────────────────────────

@app.get("/api/incidents", response_model=list[Incident])
async def get_incidents(city: Optional[str] = None):
    try:
        return await aggregator.fetch_incidents(city)
    except Exception as e:
        logger.error(f"Error aggregating incidents: {e}")
        return []


@app.get("/api/cameras", response_model=list[Camera])
async def get_cameras(city: Optional[str] = None):
    try:
        return await aggregator.fetch_cameras(city)
    except Exception as e:
        logger.error(f"Error aggregating cameras: {e}")
        return []


@app.get("/api/news", response_model=list[NewsArticle])
async def get_news(city: Optional[str] = None):
    try:
        return await aggregator.fetch_news(city)
    except Exception as e:
        logger.error(f"Error aggregating news: {e}")
        return []


@app.get("/api/radio-streams", response_model=list[RadioStream])
async def get_radio_streams(city: Optional[str] = None):
    return aggregator.get_radio_streams(city)


# ─────────────────────────── Hotspot Analysis ───────────────────

@app.post("/api/analyze-hotspots", response_model=AnalysisResult)
async def post_analyze_hotspots(req: AnalyzeRequest, response: Response):
    """AI hotspot analysis; the X-Analysis-Status header says whether Gemini or the fallback answered."""
    try:
        outcome = await analyze_hotspots(req.incidents, req.cameras, req.news)
    except Exception as e:
        logger.error(f"Error analyzing hotspots: {e}")
        response.headers["X-Analysis-Status"] = "degraded"
        return analyze_hotspots_locally(req.incidents, req.cameras, req.news)

    response.headers["X-Analysis-Status"] = outcome.status
    if outcome.degraded:
        logger.info(f"Hotspot analysis degraded to local clustering ({outcome.reason})")
    return outcome.result


# ─────────────────────────── Snapshots ──────────────────────────

@app.get("/api/snapshot", response_model=DashboardSnapshot)
async def get_snapshot(city: Optional[str] = None, analyze: bool = False):
    """Run a refresh cycle and return the newest published snapshot for the city."""
    return await aggregator.refresh_snapshot(city, analyze=analyze)


# ─────────────────────────── City Intel ─────────────────────────

async def _city_intel(city: str) -> dict:
    intel = await aggregator.fetch_city_intel(city)
    if intel is None:
        raise HTTPException(status_code=404, detail=f"No intel feeds for {city}")
    return intel


@app.get("/api/chicago/intel")
async def get_chicago_intel():
    return await _city_intel("chicago")


@app.get("/api/chicago/crimes", response_model=list[Incident])
async def get_chicago_crimes():
    return await fetchers.fetch_chicago_crimes()


@app.get("/api/chicago/crashes", response_model=list[Incident])
async def get_chicago_crashes():
    return await fetchers.fetch_chicago_traffic_crashes()


@app.get("/api/chicago/shotspotter", response_model=list[Incident])
async def get_chicago_shotspotter():
    return await fetchers.fetch_chicago_shotspotter()


@app.get("/api/evansville/intel")
async def get_evansville_intel():
    return await _city_intel("evansville")


@app.get("/api/evansville/crimes", response_model=list[Incident])
async def get_evansville_crimes():
    return await fetchers.fetch_evansville_crimes()


@app.get("/api/evansville/shots", response_model=list[Incident])
async def get_evansville_shots():
    return await fetchers.fetch_evansville_shots_fired()


# ─────────────────────────── Utility Endpoints ──────────────────

@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        services={
            "api": "up",
            "gemini": "configured" if config.GEMINI_API_KEY else "not configured",
        },
        version=API_VERSION,
    )
