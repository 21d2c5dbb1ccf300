"""Residential prospect discovery for map scans.

The generator synthesises homeowners with courts inside a requested map
region, then orders them by screen bearing so a consumer can reveal them
as a radar sweep passes over each one.

Example:
    >>> generator = ProspectGenerator(seed=7)
    >>> region = BoundingBox.from_corners((33.40, -112.20), (33.60, -111.90))
    >>> plan = generator.plan(region)
    >>> [round(r.bearing) for r in plan.reveals]  # ascending
"""

import logging
import random
import uuid
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .geo import bearing_from_center, point_in_ring, visual_center
from .models import (
    BoundingBox,
    CourtType,
    LatLng,
    ResidentialProspect,
    ScanPlan,
    ScheduledReveal,
)

# Name and address pools for synthesised homeowners
FIRST_NAMES = ["John", "Jane", "Robert", "Emily"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown"]
STREET_NAMES = ["Ocotillo", "Mesquite", "Palo Verde", "Saguaro"]
STREET_TYPES = ["Rd", "Ln", "Dr", "Ct"]
COURT_TYPES = [CourtType.TENNIS, CourtType.PICKLEBALL, CourtType.BASKETBALL]

HOUSE_NUMBER_MIN = 1000
HOUSE_NUMBER_MAX = 9999
CONDITION_SCORE_MIN = 4.5
CONDITION_SCORE_SPAN = 5.0

# Residential ids start above the seeded commercial and lead ids
ID_BASE = 500
ID_OFFSET_RANGE = 1000


class ScanError(Exception):
    """Base exception for scan failures."""

    pass


class InvalidRegion(ScanError):
    """Raised when a scan region is a single point or inverted.

    Inverted boxes are rejected as well as single points, so a box that
    crosses the antimeridian (south-west lng greater than north-east lng)
    is not a valid scan region.
    """

    def __init__(self, region: BoundingBox, reason: str = "region is degenerate"):
        self.region = region
        super().__init__(
            f"Invalid scan region ({reason}): "
            f"SW={region.south_west.as_tuple()} NE={region.north_east.as_tuple()}"
        )


@dataclass(frozen=True)
class ScanPolicy:
    """Fixed parameters of a scan.

    Attributes:
        min_candidates: Fewest candidates drawn per scan (inclusive).
        max_candidates: Most candidates drawn per scan (inclusive).
        max_placement_attempts: Samples tried per candidate before it is
            dropped for missing the polygon.
        scan_duration_ms: Length of the radar sweep.
        grace_ms: Pause after the sweep before the scan is complete.
        locality: City and state appended to synthesised addresses.
    """

    min_candidates: int = 5
    max_candidates: int = 12
    max_placement_attempts: int = 100
    scan_duration_ms: int = 5000
    grace_ms: int = 200
    locality: str = "Paradise Valley, AZ"

    def __post_init__(self) -> None:
        if self.min_candidates < 0 or self.min_candidates > self.max_candidates:
            raise ValueError("min_candidates must be between 0 and max_candidates")
        if self.max_placement_attempts < 1:
            raise ValueError("max_placement_attempts must be at least 1")

    @property
    def complete_after_ms(self) -> int:
        return self.scan_duration_ms + self.grace_ms


def validate_region(region: BoundingBox) -> None:
    """Raise InvalidRegion unless the region has a usable extent."""
    if region.south_west == region.north_east:
        raise InvalidRegion(region, "south-west equals north-east")
    if region.is_degenerate():
        raise InvalidRegion(region, "south-west lies north or east of north-east")


class ProspectGenerator:
    """Synthesises residential court prospects for a map region.

    The random source is injectable, so a fixed seed yields the same
    prospects every time.
    """

    def __init__(
        self,
        policy: Optional[ScanPolicy] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the generator.

        Args:
            policy: Scan policy. Defaults to ScanPolicy().
            rng: Random source. Takes precedence over ``seed``.
            seed: Seed for a private random source.
            logger: Optional logger instance.
        """
        self.policy = policy or ScanPolicy()
        self.rng = rng or random.Random(seed)
        self.logger = logger or logging.getLogger(__name__)

    def generate_prospects(
        self,
        region: BoundingBox,
        polygon: Optional[Sequence[Sequence[float]]] = None,
    ) -> Tuple[List[ResidentialProspect], int]:
        """Place and describe a random batch of candidates.

        Args:
            region: Bounding box to sample from.
            polygon: Optional containment ring as (lng, lat) vertices.

        Returns:
            Tuple of (prospects in generation order, number requested).

        Raises:
            InvalidRegion: If the region is degenerate.
        """
        validate_region(region)

        requested = self.rng.randint(
            self.policy.min_candidates, self.policy.max_candidates
        )
        id_offset = self.rng.randrange(ID_OFFSET_RANGE)

        prospects = []
        for index in range(requested):
            coords = self._place(region, polygon)
            if coords is None:
                continue
            prospects.append(self._describe(ID_BASE + id_offset + index, coords))

        return prospects, requested

    def plan(
        self,
        region: BoundingBox,
        polygon: Optional[Sequence[Sequence[float]]] = None,
        scan_id: Optional[str] = None,
    ) -> ScanPlan:
        """Generate a scan and order it for the radar-sweep reveal.

        Raises:
            InvalidRegion: If the region is degenerate.
        """
        prospects, requested = self.generate_prospects(region, polygon)
        dropped = requested - len(prospects)
        scan_id = scan_id or str(uuid.uuid4())

        if dropped:
            self.logger.warning(
                "Dropped %d of %d candidates outside the scan polygon",
                dropped,
                requested,
                extra={"scan_id": scan_id, "dropped": dropped, "requested": requested},
            )

        center = visual_center(region)
        duration = self.policy.scan_duration_ms
        reveals = []
        for prospect in prospects:
            bearing = bearing_from_center(prospect.coords, region, center)
            reveals.append(
                ScheduledReveal(
                    prospect=prospect,
                    bearing=bearing,
                    delay_ms=bearing / 360.0 * duration,
                )
            )
        # sorted() is stable, so equal bearings keep generation order
        reveals = sorted(reveals, key=lambda reveal: reveal.bearing)

        return ScanPlan(
            scan_id=scan_id,
            region=region,
            polygon=[(float(v[0]), float(v[1])) for v in polygon] if polygon else None,
            requested=requested,
            dropped=dropped,
            scan_duration_ms=duration,
            complete_after_ms=self.policy.complete_after_ms,
            reveals=reveals,
        )

    def _sample(self, region: BoundingBox) -> LatLng:
        lat = region.south_west.lat + self.rng.random() * region.lat_span
        lng = region.south_west.lng + self.rng.random() * region.lng_span
        return LatLng(lat=lat, lng=lng)

    def _place(
        self,
        region: BoundingBox,
        polygon: Optional[Sequence[Sequence[float]]],
    ) -> Optional[LatLng]:
        """Sample a point, retrying until it lands inside the polygon."""
        if not polygon:
            return self._sample(region)
        for _ in range(self.policy.max_placement_attempts):
            point = self._sample(region)
            if point_in_ring(point.lng, point.lat, polygon):
                return point
        return None

    def _describe(self, numeric_id: int, coords: LatLng) -> ResidentialProspect:
        rng = self.rng
        last_name = rng.choice(LAST_NAMES)
        first_name = rng.choice(FIRST_NAMES)
        street_name = rng.choice(STREET_NAMES)
        street_type = rng.choice(STREET_TYPES)
        court_type = rng.choice(COURT_TYPES)
        house_number = rng.randint(HOUSE_NUMBER_MIN, HOUSE_NUMBER_MAX)
        condition_score = round(
            CONDITION_SCORE_MIN + rng.random() * CONDITION_SCORE_SPAN, 1
        )

        return ResidentialProspect(
            id=str(numeric_id),
            name=f"{last_name} Residence",
            coords=coords,
            homeowner=f"{first_name} {last_name}",
            address=(
                f"{house_number} W {street_name} {street_type}, {self.policy.locality}"
            ),
            court_type=court_type,
            condition_score=condition_score,
        )
