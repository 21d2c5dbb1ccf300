"""FastAPI application for the Court Radar dashboard.

Endpoints:
- GET /health - Health check endpoint
- GET /api/seo-data - Competitor SEO rankings and history
- GET /api/prospects, /api/prospects/{id} - Map records
- GET /api/map/filters, /api/map/markers, /api/map/heatmap/{layer} - Map layers
- GET /api/competitors, /api/competitors/{id}, /api/competitors/{id}/events
- GET /api/activity - Merged activity feed
- GET|POST /api/intel/notes - Field notes
- POST /api/scans - Scan a region and return the full reveal plan
- POST /api/scans/stream - Scan a region and stream reveals on schedule (NDJSON)
- /api/saved-prospects - Saved prospect pipeline and outreach emails

Example:
    uvicorn court_radar.api:create_app --factory --port 3000
"""

import asyncio
import datetime as dt
import json
import logging
import time
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field, model_validator

from . import __version__
from .activity import build_activity_feed
from .config import CourtRadarConfig, config as default_config
from .geo import ring_from_geojson
from .map_layers import (
    available_filters,
    client_heatmap,
    filter_commercial,
    lead_heatmap,
)
from .models import (
    ActivityItem,
    BoundingBox,
    Competitor,
    CompetitorEvent,
    HeatPoint,
    PipelineStatus,
    Prospect,
    ProspectKind,
    SavedProspect,
    ScanPlan,
    SeoReport,
    UserIntelNote,
)
from .outreach import compose_outreach_email
from .repository import DataSource, InMemoryDataSource, NotFoundError
from .scanner import InvalidRegion, ProspectGenerator, ScanPolicy
from .session import reveal_stream
from .storage import SavedProspectStore

logger = logging.getLogger(__name__)

SERVICE_NAME = "court-radar"


class HeatmapLayer(str, Enum):
    """Heat-map layers offered on the commercial map."""

    LEADS = "leads"
    CLIENTS = "clients"


class ScanRequest(BaseModel):
    """Body of a scan request.

    The region may be given directly, or derived from the bounds of a
    polygon given as (lng, lat) vertices or as a GeoJSON Polygon/Feature.
    """

    region: Optional[BoundingBox] = None
    polygon: Optional[List[Tuple[float, float]]] = None
    area: Optional[Dict[str, Any]] = Field(
        default=None, description="GeoJSON Polygon or Feature"
    )
    seed: Optional[int] = Field(default=None, description="Seed for a repeatable scan")

    @model_validator(mode="after")
    def resolve_region(self) -> "ScanRequest":
        if self.area is not None and self.polygon is None:
            self.polygon = ring_from_geojson(self.area)
        if self.region is None:
            if not self.polygon:
                raise ValueError("A scan needs a region, a polygon or a GeoJSON area")
            self.region = BoundingBox.from_ring(self.polygon)
        return self


class IntelNoteRequest(BaseModel):
    content: str = Field(..., min_length=1)
    date: Optional[dt.date] = None


class SaveProspectRequest(BaseModel):
    """Either the id of a seeded record or a full prospect, e.g. a scan result."""

    prospect_id: Optional[str] = None
    prospect: Optional[Prospect] = None

    @model_validator(mode="after")
    def check_one_given(self) -> "SaveProspectRequest":
        if (self.prospect_id is None) == (self.prospect is None):
            raise ValueError("Give exactly one of prospect_id or prospect")
        return self


class SavedProspectUpdate(BaseModel):
    pipeline_status: Optional[PipelineStatus] = None
    notes: Optional[str] = None


def get_data_source(request: Request) -> DataSource:
    """Dependency to get the dashboard data source."""
    return request.app.state.data_source


def get_store(request: Request) -> SavedProspectStore:
    """Dependency to get the saved prospect store."""
    return request.app.state.store


def get_settings(request: Request) -> CourtRadarConfig:
    """Dependency to get the application configuration."""
    return request.app.state.settings


def get_generator(request: Request, seed: Optional[int] = None) -> ProspectGenerator:
    return ProspectGenerator(policy=request.app.state.scan_policy, seed=seed)


def create_app(
    data_source: Optional[DataSource] = None,
    store: Optional[SavedProspectStore] = None,
    scan_policy: Optional[ScanPolicy] = None,
    settings: Optional[CourtRadarConfig] = None,
) -> FastAPI:
    """Build the Court Radar API application.

    Args:
        data_source: Dashboard records. Defaults to the seeded in-memory source.
        store: Saved prospect store. Defaults to one on settings.DATABASE_URL.
        scan_policy: Scan policy. Defaults to the one described by settings.
        settings: Configuration. Defaults to the global config.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or default_config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup/shutdown."""
        logger.info(
            "Court Radar API starting",
            extra={
                "schema_version": app.state.data_source.schema_version,
                "scan_duration_ms": app.state.scan_policy.scan_duration_ms,
            },
        )
        yield
        logger.info("Court Radar API shutting down")
        app.state.store.close()

    app = FastAPI(
        title="Court Radar",
        description="Prospecting dashboard API for a sports-court resurfacing business",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.data_source = data_source or InMemoryDataSource()
    app.state.store = store or SavedProspectStore(
        settings.DATABASE_URL, echo=settings.DATABASE_ECHO
    )
    app.state.scan_policy = scan_policy or settings.scan_policy()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    _register_routes(app)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Not found", "detail": str(exc)},
        )

    @app.exception_handler(InvalidRegion)
    async def invalid_region_handler(request: Request, exc: InvalidRegion) -> JSONResponse:
        logger.info("Rejected scan request: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "Invalid region", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler for unhandled errors."""
        logger.error(
            "Unhandled error: %s %s - %s",
            request.method,
            request.url.path,
            str(exc),
            exc_info=True,
        )
        settings: CourtRadarConfig = request.app.state.settings
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.LOG_LEVEL == "DEBUG" else "An unexpected error occurred",
            },
        )


def _register_routes(app: FastAPI) -> None:
    @app.get("/health")
    async def health_check(
        source: DataSource = Depends(get_data_source),
    ) -> Dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": __version__,
            "schema_version": source.schema_version,
        }

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with service information."""
        return {
            "service": SERVICE_NAME,
            "description": "Prospecting dashboard API",
            "endpoints": {
                "health": "/health",
                "seo_data": "/api/seo-data",
                "prospects": "/api/prospects",
                "map": "/api/map/markers",
                "competitors": "/api/competitors",
                "activity": "/api/activity",
                "scans": "/api/scans",
                "saved_prospects": "/api/saved-prospects",
            },
        }

    # ------------------------------------------------------------------
    # Market intel
    # ------------------------------------------------------------------

    @app.get("/api/seo-data", response_model=SeoReport)
    def seo_data(source: DataSource = Depends(get_data_source)) -> SeoReport:
        logger.info("API call received for /api/seo-data")
        return source.seo_report()

    @app.get("/api/competitors", response_model=List[Competitor])
    def list_competitors(source: DataSource = Depends(get_data_source)) -> List[Competitor]:
        return source.list_competitors()

    @app.get("/api/competitors/{competitor_id}", response_model=Competitor)
    def get_competitor(
        competitor_id: str, source: DataSource = Depends(get_data_source)
    ) -> Competitor:
        return source.get_competitor(competitor_id)

    @app.get(
        "/api/competitors/{competitor_id}/events",
        response_model=List[CompetitorEvent],
    )
    def competitor_events(
        competitor_id: str, source: DataSource = Depends(get_data_source)
    ) -> List[CompetitorEvent]:
        return source.competitor_events(competitor_id)

    @app.get("/api/activity", response_model=List[ActivityItem])
    def activity_feed(
        limit: Optional[int] = Query(None, ge=0),
        source: DataSource = Depends(get_data_source),
    ) -> List[ActivityItem]:
        return build_activity_feed(
            source.competitor_events(),
            source.lead_events(),
            limit=limit,
            competitor_names=source.competitor_names(),
        )

    @app.get("/api/intel/notes", response_model=List[UserIntelNote])
    def list_intel_notes(source: DataSource = Depends(get_data_source)) -> List[UserIntelNote]:
        return source.user_intel()

    @app.post(
        "/api/intel/notes",
        response_model=UserIntelNote,
        status_code=status.HTTP_201_CREATED,
    )
    def add_intel_note(
        body: IntelNoteRequest, source: DataSource = Depends(get_data_source)
    ) -> UserIntelNote:
        try:
            return source.add_user_intel(body.content, body.date)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    # ------------------------------------------------------------------
    # Map
    # ------------------------------------------------------------------

    @app.get("/api/prospects")
    def list_prospects(
        kind: Optional[List[ProspectKind]] = Query(None),
        source: DataSource = Depends(get_data_source),
    ) -> List[Dict[str, Any]]:
        return [p.model_dump(mode="json") for p in source.list_prospects(kind)]

    @app.get("/api/prospects/{prospect_id}")
    def get_prospect(
        prospect_id: str, source: DataSource = Depends(get_data_source)
    ) -> Dict[str, Any]:
        return source.get_prospect(prospect_id).model_dump(mode="json")

    @app.get("/api/map/filters", response_model=List[ProspectKind])
    def map_filters(source: DataSource = Depends(get_data_source)) -> List[ProspectKind]:
        return available_filters(source.list_prospects())

    @app.get("/api/map/markers")
    def map_markers(
        kind: Optional[List[ProspectKind]] = Query(None),
        source: DataSource = Depends(get_data_source),
    ) -> List[Dict[str, Any]]:
        markers = filter_commercial(source.list_prospects(), kind)
        return [p.model_dump(mode="json") for p in markers]

    @app.get("/api/map/heatmap/{layer}", response_model=List[HeatPoint])
    def map_heatmap(
        layer: HeatmapLayer, source: DataSource = Depends(get_data_source)
    ) -> List[HeatPoint]:
        if layer == HeatmapLayer.LEADS:
            return lead_heatmap(source.leads())
        return client_heatmap(source.commercial_courts())

    # ------------------------------------------------------------------
    # Scans
    # ------------------------------------------------------------------

    @app.post("/api/scans", response_model=ScanPlan)
    def create_scan(body: ScanRequest, request: Request) -> ScanPlan:
        generator = get_generator(request, body.seed)
        plan = generator.plan(body.region, body.polygon)
        logger.info(
            "Scan planned",
            extra={
                "scan_id": plan.scan_id,
                "candidates": len(plan.reveals),
                "dropped": plan.dropped,
            },
        )
        return plan

    @app.post("/api/scans/stream")
    async def stream_scan(body: ScanRequest, request: Request) -> StreamingResponse:
        generator = get_generator(request, body.seed)
        # Plan before streaming so an invalid region is a 422, not a broken stream
        plan = generator.plan(body.region, body.polygon)
        return StreamingResponse(
            _stream_plan(plan), media_type="application/x-ndjson"
        )

    # ------------------------------------------------------------------
    # Saved prospects
    # ------------------------------------------------------------------

    @app.get("/api/saved-prospects", response_model=List[SavedProspect])
    def list_saved_prospects(
        pipeline_status: Optional[PipelineStatus] = Query(None),
        store: SavedProspectStore = Depends(get_store),
    ) -> List[SavedProspect]:
        return store.list(pipeline_status)

    @app.post(
        "/api/saved-prospects",
        response_model=SavedProspect,
        status_code=status.HTTP_201_CREATED,
    )
    def save_prospect(
        body: SaveProspectRequest,
        source: DataSource = Depends(get_data_source),
        store: SavedProspectStore = Depends(get_store),
    ) -> SavedProspect:
        if body.prospect is not None:
            return store.save(body.prospect)
        return store.save(source.get_prospect(body.prospect_id))

    @app.patch("/api/saved-prospects/{prospect_id}", response_model=SavedProspect)
    def update_saved_prospect(
        prospect_id: str,
        body: SavedProspectUpdate,
        store: SavedProspectStore = Depends(get_store),
    ) -> SavedProspect:
        return store.update(prospect_id, status=body.pipeline_status, notes=body.notes)

    @app.delete(
        "/api/saved-prospects/{prospect_id}",
        status_code=status.HTTP_204_NO_CONTENT,
    )
    def remove_saved_prospect(
        prospect_id: str, store: SavedProspectStore = Depends(get_store)
    ) -> None:
        store.remove(prospect_id)

    @app.post("/api/saved-prospects/{prospect_id}/outreach-email")
    def outreach_email(
        prospect_id: str,
        store: SavedProspectStore = Depends(get_store),
        settings: CourtRadarConfig = Depends(get_settings),
    ) -> Dict[str, Any]:
        saved = store.get(prospect_id)
        try:
            email = compose_outreach_email(
                saved.prospect,
                sender_name=settings.OUTREACH_SENDER_NAME,
                company=settings.OUTREACH_COMPANY,
            )
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        return email.to_dict()


async def _stream_plan(plan: ScanPlan) -> AsyncIterator[str]:
    """Emit a plan as NDJSON: a start line, one line per reveal, a complete line."""
    started = time.monotonic()
    revealed = 0
    yield _ndjson({
        "event": "start",
        "scan_id": plan.scan_id,
        "requested": plan.requested,
        "dropped": plan.dropped,
        "scan_duration_ms": plan.scan_duration_ms,
    })
    async for reveal in reveal_stream(plan, started=started):
        revealed += 1
        yield _ndjson({
            "event": "reveal",
            "bearing": reveal.bearing,
            "delay_ms": reveal.delay_ms,
            "prospect": reveal.prospect.model_dump(mode="json"),
        })

    remaining = started + plan.complete_after_ms / 1000.0 - time.monotonic()
    if remaining > 0:
        await asyncio.sleep(remaining)
    yield _ndjson({"event": "complete", "scan_id": plan.scan_id, "revealed": revealed})

    logger.info(
        "Scan stream finished",
        extra={"scan_id": plan.scan_id, "revealed": revealed},
    )


def _ndjson(payload: Dict[str, Any]) -> str:
    return json.dumps(payload) + "\n"
