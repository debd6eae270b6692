from __future__ import annotations

import math

import pytest

from dxfcrop.errors import InvalidGeometryError
from dxfcrop.wkt import format_wkt_polygon, parse_polygon, parse_wkt_polygon, require_polygon, tokenize


def test_tokenize_splits_parentheses_and_commas() -> None:
    assert tokenize("POLYGON((1 2,3 4))") == ["POLYGON", "(", "(", "1", "2", ",", "3", "4", ")", ")"]


def test_parse_square_keeps_repeated_closing_point() -> None:
    points = parse_wkt_polygon("POLYGON ((10 10, 20 10, 20 20, 10 20, 10 10))")
    assert points == [(10.0, 10.0), (20.0, 10.0), (20.0, 20.0), (10.0, 20.0), (10.0, 10.0)]


def test_parse_is_case_insensitive_and_whitespace_tolerant() -> None:
    points = parse_wkt_polygon("  polygon(( 0 0 ,1.5   0,\n 1 -2e1 ))  ")
    assert points == [(0.0, 0.0), (1.5, 0.0), (1.0, -20.0)]


def test_parse_ignores_extra_ordinates() -> None:
    assert parse_wkt_polygon("POLYGON ((0 0 5, 4 0 5, 4 4 5))") == [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0)]


def test_parse_skips_pieces_without_two_words() -> None:
    assert parse_wkt_polygon("POLYGON ((0 0, 5, , 1 1, 2 0))") == [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)]


def test_parse_non_numeric_word_becomes_nan() -> None:
    points = parse_wkt_polygon("POLYGON ((0 0, a 1, 2 2))")
    assert len(points) == 3
    assert math.isnan(points[1][0])
    assert points[1][1] == 1.0


def test_parse_finds_polygon_inside_surrounding_text() -> None:
    assert len(parse_wkt_polygon("clip: POLYGON ((0 0, 1 0, 1 1)) please")) == 3


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not a polygon",
        "LINESTRING (0 0, 1 1)",
        "POLYGON EMPTY",
        "POLYGON (0 0, 1 0, 1 1)",
        "POLYGON ((0 0, 1 0, 1 1)",
        "POLYGON ((0 0, 1 0, 1 1), (0.2 0.2, 0.3 0.2, 0.3 0.3))",
        "MULTIPOLYGON (((0 0, 1 0, 1 1)))",
    ],
)
def test_parse_structural_mismatch_returns_empty(text: str) -> None:
    parsed = parse_polygon(text)
    assert not parsed.ok
    assert parsed.error
    assert parse_wkt_polygon(text) == []


def test_parse_polygon_ok_result() -> None:
    parsed = parse_polygon("POLYGON ((0 0, 1 0, 1 1))")
    assert parsed.ok
    assert parsed.error is None


def test_require_polygon_rejects_two_points() -> None:
    with pytest.raises(InvalidGeometryError):
        require_polygon("POLYGON ((1 1, 2 2))")


def test_require_polygon_rejects_garbage_as_value_error() -> None:
    with pytest.raises(ValueError, match="invalid WKT polygon"):
        require_polygon("hello")


def test_require_polygon_returns_points() -> None:
    assert len(require_polygon("POLYGON ((0 0, 1 0, 1 1))")) == 3


def test_format_wkt_polygon_closes_ring() -> None:
    assert format_wkt_polygon([(0.0, 0.0), (1.0, 0.0), (1.0, 1.5)]) == "POLYGON ((0 0, 1 0, 1 1.5, 0 0))"
    assert format_wkt_polygon([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)]) == "POLYGON ((0 0, 1 0, 1 1, 0 0))"
