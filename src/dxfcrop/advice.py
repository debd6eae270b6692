from __future__ import annotations

import math
from dataclasses import dataclass

from .geometry import bounding_box
from .wkt import MIN_RING_POINTS, parse_polygon, tokenize

_KNOWN_GEOMETRY_TYPES = (
    "POINT",
    "LINESTRING",
    "POLYGON",
    "MULTIPOINT",
    "MULTILINESTRING",
    "MULTIPOLYGON",
    "GEOMETRYCOLLECTION",
)


@dataclass(frozen=True)
class GeometryAdvice:
    is_valid: bool
    geometry_type: str
    description: str


def describe_geometry(text: str) -> GeometryAdvice:
    """Comment on a clip geometry string.

    Informational only: cropping never consults this result.
    """
    geometry_type = _leading_geometry_type(text)
    if geometry_type == "Unknown":
        return GeometryAdvice(False, geometry_type, "No WKT geometry keyword found.")
    if geometry_type != "POLYGON":
        return GeometryAdvice(
            False,
            geometry_type,
            f"{geometry_type} is not supported; only a single-ring POLYGON can be used for cropping.",
        )

    parsed = parse_polygon(text)
    if not parsed.ok:
        return GeometryAdvice(False, geometry_type, f"Malformed polygon: {parsed.error}.")

    points = parsed.points
    if len(points) < MIN_RING_POINTS:
        return GeometryAdvice(
            False,
            geometry_type,
            f"A polygon needs at least {MIN_RING_POINTS} points, got {len(points)}.",
        )

    bad = sum(1 for x, y in points if math.isnan(x) or math.isnan(y))
    if bad:
        return GeometryAdvice(
            False,
            geometry_type,
            f"{bad} of {len(points)} vertices have non-numeric coordinates.",
        )

    min_x, min_y, max_x, max_y = bounding_box(points)
    vertex_count = len(points) - 1 if len(points) > MIN_RING_POINTS and points[0] == points[-1] else len(points)
    return GeometryAdvice(
        True,
        geometry_type,
        f"A {vertex_count}-vertex polygon spanning ({min_x:g}, {min_y:g}) to ({max_x:g}, {max_y:g}).",
    )


def _leading_geometry_type(text: str) -> str:
    tokens = tokenize(text)
    if not tokens:
        return "Unknown"
    head = tokens[0].upper()
    if head in _KNOWN_GEOMETRY_TYPES:
        return head
    return "Unknown"
