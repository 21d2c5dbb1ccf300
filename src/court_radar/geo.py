"""Geometry helpers for map scans.

Polygon rings use GeoJSON axis order, (lng, lat). Map points and bounding
box corners use (lat, lng). Screen positions follow the Web Mercator
projection used by slippy-map tiles, with ``y`` growing downward.
"""

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .models import BoundingBox, LatLng

# Web Mercator is undefined at the poles; tiles clamp to this latitude
MAX_MERCATOR_LATITUDE = 85.0511287798

Ring = Sequence[Sequence[float]]


def point_in_ring(lng: float, lat: float, ring: Ring) -> bool:
    """Ray-casting point-in-polygon test.

    Args:
        lng: Longitude of the point.
        lat: Latitude of the point.
        ring: Polygon vertices as (lng, lat) pairs. Closing the ring by
            repeating the first vertex is optional.

    Returns:
        True if the point falls inside the ring. Rings with fewer than
        three vertices, or with zero area, contain nothing.
    """
    n = len(ring)
    if n < 3:
        return False
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if ((yi > lat) != (yj > lat)) and (lng < (xj - xi) * (lat - yi) / (yj - yi) + xi):
            inside = not inside
        j = i
    return inside


def ring_from_geojson(area: Dict[str, Any]) -> List[Tuple[float, float]]:
    """Extract the outer ring of a GeoJSON Polygon or Feature.

    Raises:
        ValueError: If the document is not a Polygon (or Feature wrapping one),
            or a vertex is not a pair of numbers.
    """
    geometry = area.get("geometry") if area.get("type") == "Feature" else area
    if not isinstance(geometry, dict):
        raise ValueError("Feature has no geometry object")
    if geometry.get("type") != "Polygon":
        raise ValueError(f"Expected a Polygon geometry, got {geometry.get('type')!r}")
    coordinates = geometry.get("coordinates") or []
    if not isinstance(coordinates, list) or not coordinates:
        raise ValueError("Polygon has no rings")
    if not isinstance(coordinates[0], list):
        raise ValueError("Polygon outer ring must be a list of vertices")

    ring = []
    for vertex in coordinates[0]:
        if not isinstance(vertex, (list, tuple)) or len(vertex) < 2:
            raise ValueError(f"Vertex must hold at least lng and lat, got {vertex!r}")
        lng, lat = vertex[0], vertex[1]
        if isinstance(lng, bool) or isinstance(lat, bool) or not (
            isinstance(lng, (int, float)) and isinstance(lat, (int, float))
        ):
            raise ValueError(f"Vertex coordinates must be numbers, got {vertex!r}")
        ring.append((float(lng), float(lat)))
    return ring


def project(point: LatLng) -> Tuple[float, float]:
    """Project a coordinate onto the unit Web Mercator square.

    Returns:
        (x, y) in [0, 1], x growing east and y growing south.
    """
    lat = max(-MAX_MERCATOR_LATITUDE, min(MAX_MERCATOR_LATITUDE, point.lat))
    sin_lat = math.sin(math.radians(lat))
    x = (point.lng + 180.0) / 360.0
    y = 0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)
    return x, y


def visual_center(region: BoundingBox) -> Tuple[float, float]:
    """Screen-space centre of a region, as a map view framing it would show."""
    x1, y1 = project(region.south_west)
    x2, y2 = project(region.north_east)
    return (x1 + x2) / 2.0, (y1 + y2) / 2.0


def bearing_from_center(
    point: LatLng,
    region: BoundingBox,
    center: Optional[Tuple[float, float]] = None,
) -> float:
    """Screen bearing of a point from the region's visual centre.

    0 degrees points up (north) and angles grow clockwise, so a sweep
    starting at twelve o'clock reaches points in ascending bearing order.

    Returns:
        Degrees in [0, 360).
    """
    cx, cy = center if center is not None else visual_center(region)
    px, py = project(point)
    angle = (math.degrees(math.atan2(py - cy, px - cx)) + 450.0) % 360.0
    # Float rounding can land exactly on 360
    return 0.0 if angle >= 360.0 else angle
