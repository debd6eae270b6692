from __future__ import annotations

import re
from dataclasses import dataclass, field

from .errors import InvalidGeometryError
from .geometry import Point2D, to_float

MIN_RING_POINTS = 3

_TOKEN_RE = re.compile(r"[(),]|[^\s(),]+")


@dataclass(frozen=True)
class PolygonParse:
    points: list[Point2D] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text)


def parse_polygon(text: str) -> PolygonParse:
    """Parse the first ``POLYGON ((x y, ...))`` literal in ``text``.

    Only the exterior ring is read. Each vertex contributes its first two
    words as x and y; further words (Z, M) are ignored and vertices with
    fewer than two words are skipped. Words that are not numbers become
    nan instead of failing the parse.
    """
    tokens = tokenize(text)
    start = next((i for i, token in enumerate(tokens) if token.upper() == "POLYGON"), None)
    if start is None:
        return PolygonParse(error="no POLYGON keyword found")

    pos = start + 1
    if tokens[pos : pos + 2] != ["(", "("]:
        return PolygonParse(error="expected '((' after POLYGON")
    pos += 2

    points: list[Point2D] = []
    words: list[str] = []
    while pos < len(tokens):
        token = tokens[pos]
        if token == ")":
            break
        if token == "(":
            return PolygonParse(error="unexpected '(' inside coordinate list")
        if token == ",":
            _commit_vertex(words, points)
            words = []
        else:
            words.append(token)
        pos += 1
    else:
        return PolygonParse(error="coordinate list is not closed")

    if tokens[pos + 1 : pos + 2] != [")"]:
        return PolygonParse(error="expected '))' after the first ring; holes and multi-part geometries are not supported")
    _commit_vertex(words, points)
    return PolygonParse(points=points)


def _commit_vertex(words: list[str], points: list[Point2D]) -> None:
    if len(words) < 2:
        return
    points.append((to_float(words[0]), to_float(words[1])))


def parse_wkt_polygon(text: str) -> list[Point2D]:
    """Return the ring points of ``text``, or an empty list when it cannot be parsed."""
    return parse_polygon(text).points


def require_polygon(text: str) -> list[Point2D]:
    parsed = parse_polygon(text)
    if len(parsed.points) < MIN_RING_POINTS:
        detail = parsed.error or f"{len(parsed.points)} point(s) parsed"
        raise InvalidGeometryError(f"invalid WKT polygon geometry: {detail}")
    return parsed.points


def format_wkt_polygon(points: list[Point2D]) -> str:
    ring = list(points)
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    coords = ", ".join(f"{x:g} {y:g}" for x, y in ring)
    return f"POLYGON (({coords}))"
