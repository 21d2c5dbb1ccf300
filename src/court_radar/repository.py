"""Versioned data-access interface for dashboard records.

Callers depend on ``DataSource``; the in-memory implementation loads the
canonical seed tables once and hands out validated model instances.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, Iterable, List, Optional

from pydantic import TypeAdapter

from . import seed_data
from .models import (
    CommercialCourt,
    Competitor,
    CompetitorEvent,
    Lead,
    LeadEvent,
    Prospect,
    ProspectKind,
    ResidentialProspect,
    SeoReport,
    UserIntelNote,
)

# Bump when a record schema changes shape
SCHEMA_VERSION = "1"

_prospect_adapter = TypeAdapter(Prospect)


class NotFoundError(LookupError):
    """Raised when a record id is unknown to the data source."""

    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} not found: {record_id}")


class DataSource(ABC):
    """Read access to prospects, competitors, SEO data and field notes."""

    schema_version: str = SCHEMA_VERSION

    @abstractmethod
    def list_prospects(
        self, kinds: Optional[Iterable[ProspectKind]] = None
    ) -> List[Prospect]:
        """List map records, optionally restricted to some kinds."""

    @abstractmethod
    def get_prospect(self, prospect_id: str) -> Prospect:
        """Get one map record.

        Raises:
            NotFoundError: If the id is unknown.
        """

    @abstractmethod
    def list_competitors(self) -> List[Competitor]:
        """List competitors."""

    @abstractmethod
    def get_competitor(self, competitor_id: str) -> Competitor:
        """Get one competitor.

        Raises:
            NotFoundError: If the id is unknown.
        """

    @abstractmethod
    def competitor_events(
        self, competitor_id: Optional[str] = None
    ) -> List[CompetitorEvent]:
        """Competitor events in source order, optionally for one competitor."""

    @abstractmethod
    def lead_events(self) -> List[LeadEvent]:
        """Lead pipeline events in source order."""

    @abstractmethod
    def seo_report(self) -> SeoReport:
        """Competitor SEO rankings and history."""

    @abstractmethod
    def user_intel(self) -> List[UserIntelNote]:
        """Field notes, in the order they were recorded."""

    @abstractmethod
    def add_user_intel(self, content: str, on: Optional[date] = None) -> UserIntelNote:
        """Record a field note."""

    def commercial_courts(self) -> List[CommercialCourt]:
        return [
            p for p in self.list_prospects([ProspectKind.COMMERCIAL_COURT])
            if isinstance(p, CommercialCourt)
        ]

    def leads(self) -> List[Lead]:
        return [
            p for p in self.list_prospects([ProspectKind.PERMIT, ProspectKind.NEWS])
            if isinstance(p, Lead)
        ]

    def competitor_names(self) -> Dict[str, str]:
        """Map competitor ids to display names."""
        return {competitor.id: competitor.name for competitor in self.list_competitors()}


class InMemoryDataSource(DataSource):
    """DataSource backed by the canonical seed tables."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

        self._prospects: List[Prospect] = []
        for row in seed_data.COMMERCIAL_COURTS:
            self._prospects.append(CommercialCourt(**row))
        for row in seed_data.LEADS:
            self._prospects.append(Lead(**row))
        for row in seed_data.RESIDENTIAL_PROSPECTS:
            self._prospects.append(ResidentialProspect(**row))

        self._competitors = [Competitor(**row) for row in seed_data.COMPETITORS]
        self._competitor_events = [
            CompetitorEvent(competitor_id=competitor_id, **row)
            for competitor_id, rows in seed_data.COMPETITOR_EVENTS.items()
            for row in rows
        ]
        self._lead_events = [LeadEvent(**row) for row in seed_data.LEAD_EVENTS]
        self._seo_report = SeoReport(**seed_data.SEO_REPORT)
        self._user_intel = [UserIntelNote(**row) for row in seed_data.USER_INTEL]

        self.logger.debug(
            "Loaded seed data",
            extra={
                "schema_version": self.schema_version,
                "prospects": len(self._prospects),
                "competitors": len(self._competitors),
                "competitor_events": len(self._competitor_events),
            },
        )

    def list_prospects(
        self, kinds: Optional[Iterable[ProspectKind]] = None
    ) -> List[Prospect]:
        if kinds is None:
            return list(self._prospects)
        wanted = {ProspectKind(kind) for kind in kinds}
        return [p for p in self._prospects if ProspectKind(p.type) in wanted]

    def get_prospect(self, prospect_id: str) -> Prospect:
        for prospect in self._prospects:
            if prospect.id == str(prospect_id):
                return prospect
        raise NotFoundError("Prospect", str(prospect_id))

    def list_competitors(self) -> List[Competitor]:
        return list(self._competitors)

    def get_competitor(self, competitor_id: str) -> Competitor:
        for competitor in self._competitors:
            if competitor.id == competitor_id:
                return competitor
        raise NotFoundError("Competitor", competitor_id)

    def competitor_events(
        self, competitor_id: Optional[str] = None
    ) -> List[CompetitorEvent]:
        if competitor_id is None:
            return list(self._competitor_events)
        self.get_competitor(competitor_id)
        return [e for e in self._competitor_events if e.competitor_id == competitor_id]

    def lead_events(self) -> List[LeadEvent]:
        return list(self._lead_events)

    def seo_report(self) -> SeoReport:
        return self._seo_report.model_copy(deep=True)

    def user_intel(self) -> List[UserIntelNote]:
        return list(self._user_intel)

    def add_user_intel(self, content: str, on: Optional[date] = None) -> UserIntelNote:
        content = content.strip()
        if not content:
            raise ValueError("Field note content must not be empty")
        next_id = max((note.id for note in self._user_intel), default=0) + 1
        note = UserIntelNote(id=next_id, date=on or date.today(), content=content)
        self._user_intel.append(note)
        self.logger.info("Field note recorded", extra={"note_id": note.id})
        return note


def parse_prospect(payload: dict) -> Prospect:
    """Validate a raw prospect document into its typed model."""
    return _prospect_adapter.validate_python(payload)
