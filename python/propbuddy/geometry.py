"""Pure geometry helpers: point-in-polygon and great-circle distance.

Coordinates follow GeoJSON axis order inside shapely geometries, i.e.
x = longitude and y = latitude.
"""
from __future__ import annotations

import math

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from propbuddy.models import Coordinate

EARTH_RADIUS_KM = 6371.0

Bounds = tuple[float, float, float, float]


def to_point(coordinate: Coordinate) -> Point:
    """Return a shapely Point (lon, lat) for *coordinate*."""
    return Point(coordinate.longitude, coordinate.latitude)


def point_in_polygon(point: Coordinate, polygon: BaseGeometry) -> bool:
    """Return True if *point* lies inside *polygon* or on its boundary.

    Boundary convention: closed-set semantics. A point on an outer ring edge
    or vertex is inside; a point on a hole's edge is also inside (the hole is
    open). This is shapely's ``covers`` predicate and is stable across calls.

    Args:
        point: Query coordinate.
        polygon: shapely Polygon or MultiPolygon, holes honoured.
    """
    return polygon.covers(to_point(point))


def bounds_contain(bounds: Bounds, point: Coordinate) -> bool:
    """Return True if *point* is inside the closed box (minx, miny, maxx, maxy)."""
    min_x, min_y, max_x, max_y = bounds
    return min_x <= point.longitude <= max_x and min_y <= point.latitude <= max_y


def great_circle_distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between *a* and *b* in kilometres (R = 6371 km)."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Clamp guards against h drifting just above 1.0 for antipodal points.
    h = min(1.0, h)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
