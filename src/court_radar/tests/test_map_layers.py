# src/court_radar/tests/test_map_layers.py
"""
Unit tests for map filters and heat-map layers.
"""
import pytest

from court_radar.map_layers import (
    available_filters,
    client_heatmap,
    filter_commercial,
    lead_heatmap,
)
from court_radar.models import ProspectKind
from court_radar.repository import InMemoryDataSource


@pytest.fixture
def source():
    return InMemoryDataSource()


class TestFilters:
    """Tests for marker filters."""

    @pytest.mark.unit
    def test_available_filters_first_seen_order(self, source):
        assert available_filters(source.list_prospects()) == [
            ProspectKind.COMMERCIAL_COURT,
            ProspectKind.PERMIT,
            ProspectKind.NEWS,
        ]

    @pytest.mark.unit
    def test_residential_never_offered(self, source):
        residential = source.list_prospects([ProspectKind.RESIDENTIAL])
        assert available_filters(residential) == []

    @pytest.mark.unit
    def test_no_active_filter_shows_courts(self, source):
        markers = filter_commercial(source.list_prospects())
        assert {m.type for m in markers} == {"commercial_court"}
        assert len(markers) == 5

    @pytest.mark.unit
    def test_active_filters(self, source):
        markers = filter_commercial(
            source.list_prospects(), [ProspectKind.PERMIT, ProspectKind.NEWS]
        )
        assert [m.id for m in markers] == ["101", "102", "103", "104"]

    @pytest.mark.unit
    def test_empty_active_list_shows_courts(self, source):
        assert len(filter_commercial(source.list_prospects(), [])) == 5


class TestHeatmaps:
    """Tests for heat-map layers."""

    @pytest.mark.unit
    def test_lead_heatmap_weights(self, source):
        points = lead_heatmap(source.leads())
        assert [p.weight for p in points] == [90.0, 80.0, 70.0, 90.0]
        assert points[0].as_list() == [33.541, -111.965, 90.0]

    @pytest.mark.unit
    def test_client_heatmap_only_clients(self, source):
        points = client_heatmap(source.commercial_courts())
        assert len(points) == 3
        assert all(p.weight == 50.0 for p in points)
        assert (points[0].lat, points[0].lng) == (33.5101, -112.025)
