"""Pydantic models for Court Radar data structures."""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

# Condition scores strictly above this are considered in good shape
GOOD_CONDITION_THRESHOLD = 7.0

# Date formats found in the dashboard's source tables
DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")


def parse_event_date(value: Any) -> date:
    """Parse a date given as ISO (YYYY-MM-DD) or US (MM/DD/YYYY) text.

    Raises:
        ValueError: If the value matches neither format.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date {value!r}; expected YYYY-MM-DD or MM/DD/YYYY")


class ProspectKind(str, Enum):
    """Enumeration of prospect record kinds shown on the map."""

    COMMERCIAL_COURT = "commercial_court"
    PERMIT = "permit"
    NEWS = "news"
    RESIDENTIAL = "residential"


class CourtType(str, Enum):
    """Enumeration of court surfaces the business works on."""

    TENNIS = "Tennis"
    PICKLEBALL = "Pickleball"
    BASKETBALL = "Basketball"


class ConditionStatus(str, Enum):
    """Condition bucket derived from a residential condition score."""

    GOOD = "good"
    WORN = "worn"


class SurfaceStatus(str, Enum):
    """Surface brightness observed on a commercial court."""

    BRIGHT = "bright"
    FADED = "faded"


class PipelineStatus(str, Enum):
    """Sales pipeline status of a saved prospect."""

    NEW = "New"
    EMAIL_SENT = "Email Sent"
    QUOTE_SENT = "Quote Sent"


class LicenseStatus(str, Enum):
    """Contractor license status with the state registrar."""

    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    PENDING = "Pending"


class CompetitorEventType(str, Enum):
    """Kinds of competitor intelligence events."""

    LICENSE_UPDATE = "License Update"
    NEW_AD_CAMPAIGN = "New Ad Campaign"
    SEO_RANKING_CHANGE = "SEO Ranking Change"
    PERMIT_FILED = "Permit Filed"


class ActivitySource(str, Enum):
    """Origin of an activity feed item."""

    COMPETITOR = "competitor"
    LEAD = "lead"


def condition_status(condition_score: float) -> ConditionStatus:
    """Derive the condition bucket for a score (good iff score > 7.0)."""
    if condition_score > GOOD_CONDITION_THRESHOLD:
        return ConditionStatus.GOOD
    return ConditionStatus.WORN


def residential_summary(status: ConditionStatus, court_type: CourtType) -> str:
    """Build the AI summary line for a residential court."""
    court = CourtType(court_type).value.lower()
    if ConditionStatus(status) == ConditionStatus.GOOD:
        return f"Well-maintained {court} court on a large property."
    return (
        f"Visible wear and fading on the {court} court surface. "
        "High potential for a resurfacing lead."
    )


# ============================================================================
# Geography
# ============================================================================

class LatLng(BaseModel):
    """A geographic coordinate in degrees."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude")
    lng: float = Field(..., ge=-180.0, le=180.0, description="Longitude")

    @classmethod
    def of(cls, pair: Sequence[float]) -> "LatLng":
        """Build from a (lat, lng) pair."""
        return cls(lat=pair[0], lng=pair[1])

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)


class BoundingBox(BaseModel):
    """Axis-aligned map region given by its south-west and north-east corners."""

    south_west: LatLng = Field(..., description="South-west corner")
    north_east: LatLng = Field(..., description="North-east corner")

    @classmethod
    def from_corners(
        cls, south_west: Sequence[float], north_east: Sequence[float]
    ) -> "BoundingBox":
        """Build from two (lat, lng) pairs."""
        return cls(south_west=LatLng.of(south_west), north_east=LatLng.of(north_east))

    @classmethod
    def from_ring(cls, ring: Sequence[Sequence[float]]) -> "BoundingBox":
        """Bounds of a polygon ring given as (lng, lat) vertices.

        Raises:
            ValueError: If the ring has no vertices.
        """
        if not ring:
            raise ValueError("Polygon ring has no vertices")
        lngs = [vertex[0] for vertex in ring]
        lats = [vertex[1] for vertex in ring]
        return cls(
            south_west=LatLng(lat=min(lats), lng=min(lngs)),
            north_east=LatLng(lat=max(lats), lng=max(lngs)),
        )

    @property
    def lat_span(self) -> float:
        return self.north_east.lat - self.south_west.lat

    @property
    def lng_span(self) -> float:
        return self.north_east.lng - self.south_west.lng

    def is_degenerate(self) -> bool:
        """Check if the box is a single point or inverted."""
        if self.south_west == self.north_east:
            return True
        return self.lat_span < 0 or self.lng_span < 0

    def contains(self, point: LatLng) -> bool:
        """Check if a point lies inside the box, edges included."""
        return (
            self.south_west.lat <= point.lat <= self.north_east.lat
            and self.south_west.lng <= point.lng <= self.north_east.lng
        )


# ============================================================================
# Prospects
# ============================================================================

class ProspectBase(BaseModel):
    """Fields shared by every record placed on the prospecting map."""

    id: str = Field(..., description="Record identifier")
    name: str = Field(..., description="Display name")
    coords: LatLng = Field(..., description="Map location")
    ai_summary: str = Field(default="", description="AI generated summary")
    is_synced: bool = Field(default=False, description="Pushed to the CRM")
    is_client: bool = Field(default=False, description="Existing client")
    is_due: bool = Field(default=False, description="Due for a follow-up visit")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Accept numeric identifiers from the legacy tables."""
        return str(v)

    @field_validator("coords", mode="before")
    @classmethod
    def coerce_coords(cls, v: Any) -> Any:
        """Accept [lat, lng] pairs as well as mappings."""
        if isinstance(v, (list, tuple)):
            return {"lat": v[0], "lng": v[1]}
        return v


class CommercialCourt(ProspectBase):
    """A commercial or public court detected from imagery."""

    type: Literal["commercial_court"] = "commercial_court"
    court_type: CourtType = Field(..., description="Court surface type")
    surface_status: SurfaceStatus = Field(
        default=SurfaceStatus.BRIGHT, description="Observed surface brightness"
    )
    conditions: List[str] = Field(
        default_factory=list, description="Observed surface issues"
    )


class Lead(ProspectBase):
    """A permit or news lead extracted by the AI pipeline."""

    type: Literal["permit", "news"] = Field(..., description="Lead source")
    ai_score: int = Field(..., ge=0, le=10, description="AI opportunity score")
    extracted_data: Dict[str, str] = Field(
        default_factory=dict, description="Key facts extracted from the source"
    )
    contractor: Optional[str] = Field(
        default=None, description="Contractor named in the source"
    )


class ResidentialProspect(ProspectBase):
    """A residential court discovered by a map scan.

    ``status`` and ``ai_summary`` are derived from ``condition_score`` and
    ``court_type`` whenever they are not supplied.
    """

    type: Literal["residential"] = "residential"
    homeowner: str = Field(..., description="Homeowner name")
    address: str = Field(..., description="Postal address")
    court_type: CourtType = Field(..., description="Court surface type")
    condition_score: float = Field(
        ..., ge=0.0, le=10.0, description="Surface condition score"
    )
    status: ConditionStatus = Field(
        default=ConditionStatus.WORN, description="Condition bucket"
    )

    @model_validator(mode="before")
    @classmethod
    def derive_condition(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "condition_score" not in data:
            return data
        data = dict(data)
        data["status"] = condition_status(float(data["condition_score"]))
        if not data.get("ai_summary") and "court_type" in data:
            data["ai_summary"] = residential_summary(
                data["status"], data["court_type"]
            )
        return data


Prospect = Annotated[
    Union[CommercialCourt, Lead, ResidentialProspect],
    Field(discriminator="type"),
]


class SavedProspect(BaseModel):
    """A prospect promoted into the persisted sales pipeline."""

    prospect: Prospect = Field(..., description="The saved record")
    pipeline_status: PipelineStatus = Field(default=PipelineStatus.NEW)
    notes: str = Field(default="")
    saved_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def id(self) -> str:
        return self.prospect.id


class HeatPoint(BaseModel):
    """A weighted point of a heat-map layer."""

    lat: float
    lng: float
    weight: float

    def as_list(self) -> List[float]:
        return [self.lat, self.lng, self.weight]


# ============================================================================
# Scans
# ============================================================================

class ScheduledReveal(BaseModel):
    """One prospect and the moment it appears during the radar sweep."""

    prospect: ResidentialProspect
    bearing: float = Field(..., ge=0.0, lt=360.0, description="Degrees from north, clockwise")
    delay_ms: float = Field(..., ge=0.0, description="Delay after scan start")


class ScanPlan(BaseModel):
    """The full, ordered output of one scan invocation."""

    scan_id: str
    region: BoundingBox
    polygon: Optional[List[Tuple[float, float]]] = Field(
        default=None, description="Containment ring as (lng, lat) vertices"
    )
    requested: int = Field(..., ge=0, description="Candidates drawn for this scan")
    dropped: int = Field(default=0, ge=0, description="Candidates that missed the polygon")
    scan_duration_ms: int
    complete_after_ms: int
    reveals: List[ScheduledReveal] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def prospects(self) -> List[ResidentialProspect]:
        return [reveal.prospect for reveal in self.reveals]


# ============================================================================
# Competitors and market intel
# ============================================================================

class Violation(BaseModel):
    """A registrar violation on a contractor's record."""

    date: date
    description: str
    resolution: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return parse_event_date(v)


class Lawsuit(BaseModel):
    """A court case involving a contractor."""

    case_number: str
    filing_date: date
    court: str
    description: str
    status: str = "Active"

    @field_validator("filing_date", mode="before")
    @classmethod
    def parse_filing_date(cls, v: Any) -> Any:
        return parse_event_date(v)


class Competitor(BaseModel):
    """A competing resurfacing contractor."""

    id: str
    name: str
    license_number: str = "N/A"
    license_status: LicenseStatus = LicenseStatus.ACTIVE
    violations: List[Violation] = Field(default_factory=list)
    lawsuits: List[Lawsuit] = Field(default_factory=list)

    def has_issues(self) -> bool:
        """Check for violations, lawsuits or a non-active license."""
        return bool(
            self.violations
            or self.lawsuits
            or self.license_status != LicenseStatus.ACTIVE
        )


class CompetitorEvent(BaseModel):
    """A dated piece of intelligence about a competitor."""

    id: int
    competitor_id: str
    type: CompetitorEventType
    date: date
    summary: str
    details: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return parse_event_date(v)


class LeadEvent(BaseModel):
    """A dated event produced by the lead pipeline."""

    id: int
    date: date
    text: str
    prospect_id: Optional[str] = None
    view: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return parse_event_date(v)

    @field_validator("prospect_id", mode="before")
    @classmethod
    def coerce_prospect_id(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)


class ActivityItem(BaseModel):
    """A single entry of the merged dashboard activity feed."""

    id: str
    source: ActivitySource
    date: date
    title: str
    text: str
    reference_id: Optional[str] = None


class UserIntelNote(BaseModel):
    """A field note recorded by a salesperson."""

    id: int
    date: date
    content: str

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return parse_event_date(v)


class SeoRanking(BaseModel):
    """A competitor's rank for one keyword."""

    competitor: str
    keyword: str
    rank: int = Field(..., ge=1)
    change: int = 0
    url: str = "#"


class SeoDataset(BaseModel):
    """One competitor's rank series for a keyword."""

    label: str
    data: List[int] = Field(default_factory=list)


class SeoHistory(BaseModel):
    """Rank history of a keyword, aligned on ``labels``."""

    labels: List[str] = Field(default_factory=list)
    datasets: List[SeoDataset] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_series_length(self) -> "SeoHistory":
        for dataset in self.datasets:
            if len(dataset.data) != len(self.labels):
                raise ValueError(
                    f"Series {dataset.label!r} has {len(dataset.data)} points "
                    f"for {len(self.labels)} labels"
                )
        return self


class SeoReport(BaseModel):
    """Competitor SEO rankings and their history."""

    keywords: List[str] = Field(default_factory=list)
    rankings: List[SeoRanking] = Field(default_factory=list)
    history: Dict[str, SeoHistory] = Field(default_factory=dict)

    def rankings_for(self, keyword: str) -> List[SeoRanking]:
        """Rankings for a keyword, best rank first."""
        return sorted(
            (ranking for ranking in self.rankings if ranking.keyword == keyword),
            key=lambda ranking: ranking.rank,
        )

    def leader_for(self, keyword: str) -> Optional[SeoRanking]:
        """Best ranked competitor for a keyword, if any."""
        rankings = self.rankings_for(keyword)
        return rankings[0] if rankings else None
