# participium/services/geofence.py
"""
Geographic validation for report submission and map queries.

The service area is read from a GeoJSON boundary file once and kept as a
prepared shapely geometry. Nothing here touches the database.
"""

import json
import logging
from functools import lru_cache
from typing import Optional

from shapely.geometry import Point, shape
from shapely.ops import unary_union
from shapely.prepared import prep

from participium.config import settings
from participium.errors import BadRequestError
from participium.utils.geo import BoundingBox, is_valid_coordinate

logger = logging.getLogger(__name__)

MIN_ZOOM = 1
MAX_ZOOM = 20


def _coordinate(location, name: str):
    if isinstance(location, dict):
        return location.get(name)
    return getattr(location, name, None)


@lru_cache(maxsize=None)
def load_service_area(path: str):
    """
    Load a boundary from a GeoJSON FeatureCollection, Feature or bare geometry.

    Every polygon found is merged into one area. Coordinates are
    ``[longitude, latitude]`` as GeoJSON requires.
    """
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)

    if data.get("type") == "FeatureCollection":
        geometries = [shape(f["geometry"]) for f in data.get("features", []) if f.get("geometry")]
    elif data.get("type") == "Feature":
        geometries = [shape(data["geometry"])] if data.get("geometry") else []
    else:
        geometries = [shape(data)]

    if not geometries:
        raise ValueError(f"No boundary geometry found in {path}")

    area = unary_union(geometries)
    logger.info("Service area loaded from %s (bounds=%s)", path, area.bounds)
    return prep(area)


def is_within_service_area(latitude: float, longitude: float) -> bool:
    """Points on the boundary line count as inside."""
    area = load_service_area(settings.SERVICE_AREA_GEOJSON)
    return area.covers(Point(longitude, latitude))


def validate_location(location) -> None:
    """
    Validate a submitted report location.

    Args:
        location: mapping or object with ``latitude`` / ``longitude``

    Raises:
        BadRequestError: missing, malformed, out of range or outside the city
    """
    if location is None:
        raise BadRequestError("Location is required")

    latitude = _coordinate(location, "latitude")
    longitude = _coordinate(location, "longitude")
    if latitude is None or longitude is None:
        raise BadRequestError("Location must include both latitude and longitude")

    if not is_valid_coordinate(latitude, longitude):
        raise BadRequestError(
            "Invalid coordinates: latitude must be between -90 and 90, "
            "longitude must be between -180 and 180"
        )

    if not is_within_service_area(latitude, longitude):
        raise BadRequestError(f"Location is outside {settings.CITY_NAME} city boundaries")


def validate_bounding_box(
    min_lat: Optional[float],
    max_lat: Optional[float],
    min_lng: Optional[float],
    max_lng: Optional[float],
) -> Optional[BoundingBox]:
    """All four bounds or none; returns None when none were given."""
    bounds = (min_lat, max_lat, min_lng, max_lng)
    if all(value is None for value in bounds):
        return None
    if any(value is None for value in bounds):
        raise BadRequestError(
            "Bounding box requires all parameters: minLat, maxLat, minLng, maxLng"
        )

    if not is_valid_coordinate(min_lat, min_lng):
        raise BadRequestError(
            "Invalid minimum coordinates: latitude must be between -90 and 90, "
            "longitude must be between -180 and 180"
        )
    if not is_valid_coordinate(max_lat, max_lng):
        raise BadRequestError(
            "Invalid maximum coordinates: latitude must be between -90 and 90, "
            "longitude must be between -180 and 180"
        )
    if min_lat >= max_lat:
        raise BadRequestError("minLat must be less than maxLat")
    if min_lng >= max_lng:
        raise BadRequestError("minLng must be less than maxLng")

    return BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lng=min_lng, max_lng=max_lng)


def validate_zoom_level(zoom: Optional[float]) -> Optional[float]:
    if zoom is None:
        return None
    if not MIN_ZOOM <= zoom <= MAX_ZOOM:
        raise BadRequestError(f"Zoom level must be between {MIN_ZOOM} and {MAX_ZOOM}")
    return zoom
