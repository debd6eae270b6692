from __future__ import annotations

from typing import Iterable, Iterator

Group = tuple[int, object]

HEADER_GROUPS: list[Group] = [
    (0, "SECTION"),
    (2, "HEADER"),
    (9, "$ACADVER"),
    (1, "AC1009"),
    (9, "$EXTMIN"),
    (10, 0.0),
    (20, 0.0),
    (0, "ENDSEC"),
]


def dxf_text(groups: Iterable[Group]) -> str:
    return "".join(f"{code}\n{value}\n" for code, value in groups)


def dxf_document(*entities: list[Group], header: bool = True) -> str:
    groups: list[Group] = list(HEADER_GROUPS) if header else []
    groups.extend([(0, "SECTION"), (2, "ENTITIES")])
    for entity in entities:
        groups.extend(entity)
    groups.extend([(0, "ENDSEC"), (0, "EOF")])
    return dxf_text(groups)


def line(x1: float, y1: float, x2: float, y2: float, layer: str = "0") -> list[Group]:
    return [
        (0, "LINE"),
        (8, layer),
        (10, x1),
        (20, y1),
        (30, 0.0),
        (11, x2),
        (21, y2),
        (31, 0.0),
    ]


def circle(cx: float, cy: float, radius: float, dxftype: str = "CIRCLE") -> list[Group]:
    return [(0, dxftype), (8, "0"), (10, cx), (20, cy), (30, 0.0), (40, radius)]


def point(x: float, y: float, dxftype: str = "POINT") -> list[Group]:
    return [(0, dxftype), (8, "0"), (10, x), (20, y), (30, 0.0)]


def lwpolyline(points: list[tuple[float, float]]) -> list[Group]:
    groups: list[Group] = [(0, "LWPOLYLINE"), (8, "0"), (90, len(points)), (70, 0)]
    for x, y in points:
        groups.extend([(10, x), (20, y)])
    return groups


def iter_dxf_entities(text: str) -> Iterator[dict[str, object]]:
    lines = text.splitlines()
    section_name: str | None = None
    expect_section_name = False
    current_entity: dict[str, object] | None = None

    for i in range(0, len(lines) - 1, 2):
        code = lines[i].strip()
        value = lines[i + 1].strip()

        if code == "0":
            if current_entity is not None and section_name == "ENTITIES":
                yield current_entity
                current_entity = None

            if value == "SECTION":
                expect_section_name = True
                continue

            if value == "ENDSEC":
                section_name = None
                continue

            if section_name == "ENTITIES":
                current_entity = {"type": value, "groups": []}
            continue

        if expect_section_name and code == "2":
            section_name = value
            expect_section_name = False
            continue

        if section_name == "ENTITIES" and current_entity is not None:
            groups = current_entity["groups"]
            assert isinstance(groups, list)
            groups.append((code, value))

    if current_entity is not None and section_name == "ENTITIES":
        yield current_entity


def dxf_entity_types(text: str) -> list[str]:
    return [str(entity["type"]) for entity in iter_dxf_entities(text)]


def group_float(entity: dict[str, object], code: int) -> float:
    """First value of group ``code`` in an entity from ``iter_dxf_entities``."""
    groups = entity["groups"]
    assert isinstance(groups, list)
    for group_code, raw_value in groups:
        if group_code == str(code):
            return float(raw_value)
    raise AssertionError(f"group {code} missing from {entity['type']}")


def section_text(text: str, name: str) -> str:
    """Raw text of section ``name`` from its SECTION line through its ENDSEC pair."""
    lines = text.splitlines(keepends=True)
    start = None
    for i in range(0, len(lines) - 3, 2):
        if lines[i].strip() == "0" and lines[i + 1].strip() == "SECTION" and lines[i + 3].strip() == name:
            start = i
            break
    assert start is not None, f"section {name} not found"
    for j in range(start + 4, len(lines) - 1, 2):
        if lines[j].strip() == "0" and lines[j + 1].strip() == "ENDSEC":
            return "".join(lines[start : j + 2])
    raise AssertionError(f"section {name} is not terminated")
