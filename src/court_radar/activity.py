"""Merged activity feed for the dashboard."""

from typing import Dict, Iterable, List, Optional

from .models import ActivityItem, ActivitySource, CompetitorEvent, LeadEvent


def competitor_item(
    event: CompetitorEvent, competitor_names: Optional[Dict[str, str]] = None
) -> ActivityItem:
    name = (competitor_names or {}).get(event.competitor_id, event.competitor_id)
    return ActivityItem(
        id=f"competitor-{event.id}",
        source=ActivitySource.COMPETITOR,
        date=event.date,
        title=f"{name}: {event.type.value}",
        text=event.summary,
        reference_id=event.competitor_id,
    )


def lead_item(event: LeadEvent) -> ActivityItem:
    return ActivityItem(
        id=f"lead-{event.id}",
        source=ActivitySource.LEAD,
        date=event.date,
        title="Lead pipeline",
        text=event.text,
        reference_id=event.prospect_id or event.view,
    )


def build_activity_feed(
    competitor_events: Iterable[CompetitorEvent],
    lead_events: Iterable[LeadEvent],
    limit: Optional[int] = None,
    competitor_names: Optional[Dict[str, str]] = None,
) -> List[ActivityItem]:
    """Merge competitor and lead events into one feed, newest first.

    Items on the same date keep their input order, competitor events
    ahead of lead events.

    Args:
        competitor_events: Competitor intelligence events.
        lead_events: Lead pipeline events.
        limit: Optional maximum number of items to return.
        competitor_names: Optional id to display-name mapping for titles.

    Returns:
        List of ActivityItem objects.

    Raises:
        ValueError: If limit is negative.
    """
    if limit is not None and limit < 0:
        raise ValueError("limit must not be negative")

    items = [competitor_item(e, competitor_names) for e in competitor_events]
    items.extend(lead_item(e) for e in lead_events)
    items.sort(key=lambda item: item.date, reverse=True)

    if limit is not None:
        items = items[:limit]
    return items
