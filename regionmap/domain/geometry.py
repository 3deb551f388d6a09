"""
Planar geometry helpers for freehand drawing.

Points are expressed in map projection coordinates (longitude as ``x``,
latitude as ``y`` for the default web map), never in screen pixels, so shapes
stay valid across zoom and pan.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from shapely.geometry import shape

MIN_POLYGON_POINTS = 3

# Roughly 100 metres in degrees at mid latitudes.
DEFAULT_SIMPLIFY_EPSILON = 0.001


@dataclass(frozen=True)
class MapPoint:
    """A single point in map projection coordinates."""

    x: float
    y: float

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "MapPoint":
        return cls(x=float(data["x"]), y=float(data["y"]))

    def to_json(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


def perpendicular_distance(point: MapPoint, line_start: MapPoint, line_end: MapPoint) -> float:
    """
    Distance from ``point`` to the line through ``line_start`` and ``line_end``.

    When both ends coincide the distance is the straight-line distance to that
    shared endpoint.
    """
    dx = line_end.x - line_start.x
    dy = line_end.y - line_start.y
    magnitude_sq = dx * dx + dy * dy
    if magnitude_sq == 0:
        return math.hypot(point.x - line_start.x, point.y - line_start.y)

    u = ((point.x - line_start.x) * dx + (point.y - line_start.y) * dy) / magnitude_sq
    projected_x = line_start.x + u * dx
    projected_y = line_start.y + u * dy
    return math.hypot(point.x - projected_x, point.y - projected_y)


def simplify(points: Sequence[MapPoint], epsilon: float) -> List[MapPoint]:
    """
    Simplify a point sequence with the Ramer-Douglas-Peucker algorithm.

    Each span is split at its farthest point from the chord whenever that
    distance exceeds ``epsilon``; otherwise only the span endpoints survive.
    Spans are processed from an explicit stack, which produces the same
    vertices as the recursive formulation without its depth limit.

    Sequences of two points or fewer are returned unchanged.
    """
    if len(points) <= 2:
        return list(points)

    keep = [False] * len(points)
    keep[0] = keep[-1] = True
    spans: List[Tuple[int, int]] = [(0, len(points) - 1)]

    while spans:
        first, last = spans.pop()
        max_distance = 0.0
        split_index = first
        for index in range(first + 1, last):
            distance = perpendicular_distance(points[index], points[first], points[last])
            if distance > max_distance:
                max_distance = distance
                split_index = index

        if max_distance > epsilon:
            keep[split_index] = True
            spans.append((first, split_index))
            spans.append((split_index, last))

    return [point for point, kept in zip(points, keep) if kept]


def polygon_feature(points: Sequence[MapPoint]) -> Dict[str, Any]:
    """Build a GeoJSON Polygon feature with a closed ring from ``points``."""
    ring = [[point.x, point.y] for point in points]
    if ring and ring[0] != ring[-1]:
        ring.append(list(ring[0]))
    return {
        "type": "Feature",
        "properties": {},
        "geometry": {"type": "Polygon", "coordinates": [ring]},
    }


def collection_bounds(features: Iterable[Dict[str, Any]]) -> Optional[Tuple[float, float, float, float]]:
    """
    Return ``(min_x, min_y, max_x, max_y)`` covering every feature geometry.

    Features without a geometry are skipped; ``None`` means nothing to fit.
    """
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for feature in features:
        geometry = feature.get("geometry")
        if not geometry:
            continue
        geom = shape(geometry)
        if geom.is_empty:
            continue
        left, bottom, right, top = geom.bounds
        min_x, min_y = min(min_x, left), min(min_y, bottom)
        max_x, max_y = max(max_x, right), max(max_y, top)

    if min_x == math.inf:
        return None
    return (min_x, min_y, max_x, max_y)
