"""
Geometry helpers kept independent of the storage engine.

Coordinates are plain floats in degrees.
"""

from __future__ import annotations

import math
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


@dataclass
class Cluster:
    cluster_id: str
    latitude: float
    longitude: float
    report_ids: List[int]

    @property
    def report_count(self) -> int:
        return len(self.report_ids)


def is_valid_coordinate(latitude, longitude) -> bool:
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        return False
    if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
        return False
    if math.isnan(latitude) or math.isnan(longitude):
        return False
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


# (max zoom, cell size in degrees), checked in order
GRID_SIZES: Tuple[Tuple[int, float], ...] = (
    (6, 1.0),
    (8, 0.5),
    (10, 0.1),
    (11, 0.05),
)
FINEST_GRID_SIZE = 0.01


def grid_size_for_zoom(zoom: float) -> float:
    for max_zoom, size in GRID_SIZES:
        if zoom <= max_zoom:
            return size
    return FINEST_GRID_SIZE


def grid_cell(latitude: float, longitude: float, size: float) -> Tuple[float, float]:
    """South-west corner of the grid cell containing the point."""
    # Rounding keeps float noise out of the cluster ids
    grid_lat = round(math.floor(latitude / size) * size, 6)
    grid_lng = round(math.floor(longitude / size) * size, 6)
    return grid_lat, grid_lng


def cluster_points(points: Iterable[Tuple[int, float, float]], size: float) -> List[Cluster]:
    """
    Bucket ``(id, latitude, longitude)`` points into grid cells.

    Returns one cluster per non-empty cell, centred on the mean of its
    members, largest clusters first.
    """
    buckets: Dict[Tuple[float, float], List[Tuple[int, float, float]]] = OrderedDict()
    for point in points:
        cell = grid_cell(point[1], point[2], size)
        buckets.setdefault(cell, []).append(point)

    clusters = []
    for (grid_lat, grid_lng), members in buckets.items():
        count = len(members)
        clusters.append(Cluster(
            cluster_id=f"cluster_{grid_lat}_{grid_lng}",
            latitude=sum(m[1] for m in members) / count,
            longitude=sum(m[2] for m in members) / count,
            report_ids=sorted(m[0] for m in members),
        ))
    clusters.sort(key=lambda c: (-c.report_count, c.cluster_id))
    return clusters
