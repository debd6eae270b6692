from __future__ import annotations

import math
import re
from typing import Sequence

Point2D = tuple[float, float]
BBox = tuple[float, float, float, float]


_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def to_float(value: str) -> float:
    # Plain decimal notation only: float() would also take "inf", "nan" and "1_000".
    # Malformed numerics become nan; every comparison against nan is False.
    text = value.strip()
    if not _DECIMAL_RE.fullmatch(text):
        return math.nan
    return float(text)


def bounding_box(points: Sequence[Point2D]) -> BBox:
    if not points:
        raise ValueError("bounding box of an empty point list")
    xs = [x for x, _ in points]
    ys = [y for _, y in points]
    if any(math.isnan(value) for value in xs + ys):
        # min()/max() skip nan depending on position; poison the whole box instead.
        return (math.nan, math.nan, math.nan, math.nan)
    return (min(xs), min(ys), max(xs), max(ys))


def bbox_overlaps(a: BBox, b: BBox) -> bool:
    a_min_x, a_min_y, a_max_x, a_max_y = a
    b_min_x, b_min_y, b_max_x, b_max_y = b
    return a_min_x <= b_max_x and a_max_x >= b_min_x and a_min_y <= b_max_y and a_max_y >= b_min_y


def iter_ring_edges(polygon: Sequence[Point2D]):
    """Yield polygon edges in order, ending with the implicit last -> first edge."""
    count = len(polygon)
    for i in range(count):
        yield polygon[i - 1], polygon[i]


def point_in_polygon(point: Point2D, polygon: Sequence[Point2D]) -> bool:
    px, py = point
    inside = False
    for (xj, yj), (xi, yi) in iter_ring_edges(polygon):
        if (yi > py) != (yj > py) and px < (xj - xi) * (py - yi) / (yj - yi) + xi:
            inside = not inside
    return inside


def _intersection_params(
    p1: Point2D, p2: Point2D, q1: Point2D, q2: Point2D
) -> tuple[float, float] | None:
    # (position along p1->p2, position along q2->q1); None for parallel lines.
    det = (p2[0] - p1[0]) * (q2[1] - q1[1]) - (q2[0] - q1[0]) * (p2[1] - p1[1])
    if det == 0:
        return None
    lam = ((q2[1] - q1[1]) * (q2[0] - p1[0]) + (q1[0] - q2[0]) * (q2[1] - p1[1])) / det
    gamma = ((p1[1] - p2[1]) * (q2[0] - p1[0]) + (p2[0] - p1[0]) * (q2[1] - p1[1])) / det
    return lam, gamma


def segments_intersect(p1: Point2D, p2: Point2D, q1: Point2D, q2: Point2D) -> bool:
    """Proper crossing test; touching at an endpoint or overlapping collinearly is not a crossing."""
    params = _intersection_params(p1, p2, q1, q2)
    if params is None:
        return False
    lam, gamma = params
    return 0 < lam < 1 and 0 < gamma < 1


def point_on_boundary(point: Point2D, polygon: Sequence[Point2D], tolerance: float = 1e-9) -> bool:
    px, py = point
    for (ax, ay), (bx, by) in iter_ring_edges(polygon):
        cross = (bx - ax) * (py - ay) - (by - ay) * (px - ax)
        scale = max(abs(bx - ax), abs(by - ay), 1.0)
        if abs(cross) > tolerance * scale:
            continue
        if min(ax, bx) <= px <= max(ax, bx) and min(ay, by) <= py <= max(ay, by):
            return True
    return False


def segment_passes_inside(p1: Point2D, p2: Point2D, polygon: Sequence[Point2D]) -> bool:
    """True when some stretch of p1->p2 between two boundary contacts lies inside the ring.

    Catches segments that enter and leave through polygon vertices, which
    the proper crossing test does not count. Stretches running along an
    edge are contact, not interior, on every side of the ring.
    """
    cuts = [0.0, 1.0]
    for q1, q2 in iter_ring_edges(polygon):
        params = _intersection_params(p1, p2, q1, q2)
        if params is None:
            continue
        lam, gamma = params
        if 0 <= lam <= 1 and 0 <= gamma <= 1:
            cuts.append(lam)
    cuts.sort()
    for start, end in zip(cuts, cuts[1:]):
        if end <= start:
            continue
        t = (start + end) / 2
        middle = (p1[0] + (p2[0] - p1[0]) * t, p1[1] + (p2[1] - p1[1]) * t)
        if point_on_boundary(middle, polygon):
            continue
        if point_in_polygon(middle, polygon):
            return True
    return False


def polyline_visible(points: Sequence[Point2D], polygon: Sequence[Point2D]) -> bool:
    if not points:
        return False
    if any(point_in_polygon(point, polygon) for point in points):
        return True
    segments = list(zip(points, points[1:]))
    for p1, p2 in segments:
        for q1, q2 in iter_ring_edges(polygon):
            if segments_intersect(p1, p2, q1, q2):
                return True
    return any(segment_passes_inside(p1, p2, polygon) for p1, p2 in segments)


def circle_visible(center: Point2D, radius: float, polygon: Sequence[Point2D]) -> bool:
    # Bounding box overlap stands in for a true disk/polygon test, so circles
    # near a concave or diagonal edge may be kept without touching the ring.
    if point_in_polygon(center, polygon):
        return True
    if radius > 0:
        cx, cy = center
        circle_box = (cx - radius, cy - radius, cx + radius, cy + radius)
        return bbox_overlaps(circle_box, bounding_box(polygon))
    return False
