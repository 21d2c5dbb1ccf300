"""Marker filters and heat-map layers for the commercial map view."""

from typing import Iterable, List, Optional, Sequence

from .models import CommercialCourt, HeatPoint, Lead, Prospect, ProspectKind

CLIENT_HEAT_WEIGHT = 50.0
LEAD_HEAT_SCALE = 10.0


def available_filters(prospects: Iterable[Prospect]) -> List[ProspectKind]:
    """Kinds offered as map filters, in first-seen order.

    Residential prospects belong to the scan view and are never offered.
    """
    kinds: List[ProspectKind] = []
    for prospect in prospects:
        kind = ProspectKind(prospect.type)
        if kind != ProspectKind.RESIDENTIAL and kind not in kinds:
            kinds.append(kind)
    return kinds


def filter_commercial(
    prospects: Iterable[Prospect],
    active_kinds: Optional[Sequence[ProspectKind]] = None,
) -> List[Prospect]:
    """Markers shown for the active filters.

    With no filter active only commercial courts are shown.
    """
    wanted = {ProspectKind(kind) for kind in active_kinds or []}
    if not wanted:
        wanted = {ProspectKind.COMMERCIAL_COURT}
    return [p for p in prospects if ProspectKind(p.type) in wanted]


def lead_heatmap(leads: Iterable[Lead]) -> List[HeatPoint]:
    """Heat points for leads, weighted by AI score."""
    return [
        HeatPoint(
            lat=lead.coords.lat,
            lng=lead.coords.lng,
            weight=lead.ai_score * LEAD_HEAT_SCALE,
        )
        for lead in leads
    ]


def client_heatmap(courts: Iterable[CommercialCourt]) -> List[HeatPoint]:
    """Heat points for existing client courts."""
    return [
        HeatPoint(lat=court.coords.lat, lng=court.coords.lng, weight=CLIENT_HEAT_WEIGHT)
        for court in courts
        if court.is_client
    ]
