# src/court_radar/tests/test_geo.py
"""
Unit tests for Court Radar geometry helpers.

Tests cover:
- Ray-casting point-in-polygon
- GeoJSON ring extraction
- Web Mercator projection and screen bearing
"""
import pytest

from court_radar.geo import (
    bearing_from_center,
    point_in_ring,
    project,
    ring_from_geojson,
    visual_center,
)
from court_radar.models import BoundingBox, LatLng

SQUARE = [(-112.0, 33.0), (-111.0, 33.0), (-111.0, 34.0), (-112.0, 34.0)]

# Concave "L": the north-east quarter of the square is cut away
L_SHAPE = [
    (-112.0, 33.0), (-111.0, 33.0), (-111.0, 33.5),
    (-111.5, 33.5), (-111.5, 34.0), (-112.0, 34.0),
]


@pytest.fixture
def region():
    return BoundingBox.from_corners((33.0, -112.0), (34.0, -111.0))


class TestPointInRing:
    """Tests for the ray-casting test."""

    @pytest.mark.unit
    def test_inside_and_outside_square(self):
        assert point_in_ring(-111.5, 33.5, SQUARE)
        assert not point_in_ring(-110.5, 33.5, SQUARE)
        assert not point_in_ring(-111.5, 34.5, SQUARE)

    @pytest.mark.unit
    def test_concave_polygon(self):
        assert point_in_ring(-111.75, 33.75, L_SHAPE)
        assert point_in_ring(-111.25, 33.25, L_SHAPE)
        assert not point_in_ring(-111.25, 33.75, L_SHAPE)

    @pytest.mark.unit
    def test_closed_ring_same_as_open(self):
        closed = SQUARE + [SQUARE[0]]
        assert point_in_ring(-111.5, 33.5, closed)
        assert not point_in_ring(-110.5, 33.5, closed)

    @pytest.mark.unit
    def test_too_few_vertices_contains_nothing(self):
        assert not point_in_ring(-111.5, 33.5, SQUARE[:2])
        assert not point_in_ring(-111.5, 33.5, [])


class TestRingFromGeoJson:
    """Tests for GeoJSON ring extraction."""

    @pytest.mark.unit
    def test_polygon(self):
        area = {"type": "Polygon", "coordinates": [[list(v) for v in SQUARE]]}
        assert ring_from_geojson(area) == SQUARE

    @pytest.mark.unit
    def test_feature(self):
        area = {
            "type": "Feature",
            "properties": {},
            "geometry": {"type": "Polygon", "coordinates": [[list(v) for v in SQUARE]]},
        }
        assert ring_from_geojson(area) == SQUARE

    @pytest.mark.unit
    def test_other_geometry_rejected(self):
        with pytest.raises(ValueError):
            ring_from_geojson({"type": "Point", "coordinates": [-111.5, 33.5]})

    @pytest.mark.unit
    def test_polygon_without_rings_rejected(self):
        with pytest.raises(ValueError):
            ring_from_geojson({"type": "Polygon", "coordinates": []})

    @pytest.mark.unit
    def test_feature_without_geometry_rejected(self):
        with pytest.raises(ValueError):
            ring_from_geojson({"type": "Feature", "geometry": None})

    @pytest.mark.unit
    @pytest.mark.parametrize("vertex", [[3.0], [], ["a", 2.0], None])
    def test_malformed_vertex_rejected(self, vertex):
        with pytest.raises(ValueError):
            ring_from_geojson({"type": "Polygon", "coordinates": [[[1.0, 2.0], vertex]]})


class TestBearing:
    """Tests for screen bearing from the visual centre."""

    @pytest.mark.unit
    def test_projection_orientation(self):
        """Test that x grows east and y grows south."""
        x1, y1 = project(LatLng(lat=33.0, lng=-112.0))
        x2, y2 = project(LatLng(lat=34.0, lng=-111.0))
        assert x2 > x1
        assert y2 < y1

    @pytest.mark.unit
    def test_equator_projects_to_middle(self):
        assert project(LatLng(lat=0.0, lng=0.0)) == pytest.approx((0.5, 0.5))

    @pytest.mark.unit
    def test_cardinal_directions(self, region):
        center = visual_center(region)
        mid_lng = -111.5

        north = bearing_from_center(LatLng(lat=33.95, lng=mid_lng), region, center)
        east = bearing_from_center(LatLng(lat=33.5, lng=-111.05), region, center)
        south = bearing_from_center(LatLng(lat=33.05, lng=mid_lng), region, center)
        west = bearing_from_center(LatLng(lat=33.5, lng=-111.95), region, center)

        assert north == pytest.approx(0.0, abs=1.0) or north == pytest.approx(360.0, abs=1.0)
        assert east == pytest.approx(90.0, abs=1.0)
        assert south == pytest.approx(180.0, abs=1.0)
        assert west == pytest.approx(270.0, abs=1.0)

    @pytest.mark.unit
    def test_bearing_range(self, region):
        for lat in (33.1, 33.4, 33.6, 33.9):
            for lng in (-111.9, -111.6, -111.4, -111.1):
                bearing = bearing_from_center(LatLng(lat=lat, lng=lng), region)
                assert 0.0 <= bearing < 360.0

    @pytest.mark.unit
    def test_clockwise_order(self, region):
        """Test that north-east comes before south-east, before south-west."""
        ne = bearing_from_center(LatLng(lat=33.9, lng=-111.1), region)
        se = bearing_from_center(LatLng(lat=33.1, lng=-111.1), region)
        sw = bearing_from_center(LatLng(lat=33.1, lng=-111.9), region)
        nw = bearing_from_center(LatLng(lat=33.9, lng=-111.9), region)
        assert ne < se < sw < nw
