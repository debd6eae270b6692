from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Sequence

from .entity import Entity, EntityAccumulator
from .errors import InvalidGeometryError
from .geometry import Point2D, circle_visible, point_in_polygon, polyline_visible
from .records import ENTITIES_SECTION, Record, RecordReader, is_section_end, is_section_start, read_records
from .wkt import MIN_RING_POINTS, require_polygon

logger = logging.getLogger(__name__)

POLYLINE_TYPES = frozenset({"LINE", "LWPOLYLINE", "POLYLINE", "SPLINE"})
CIRCLE_TYPES = frozenset({"CIRCLE", "ARC"})
POINT_TYPES = frozenset({"POINT", "INSERT", "TEXT", "MTEXT"})

# Read and written with surrogateescape so undecodable bytes survive the round trip.
_FILE_ENCODING = "utf-8"
_FILE_ERRORS = "surrogateescape"


@dataclass
class CropStats:
    kept_by_type: Counter[str] = field(default_factory=Counter)
    removed_by_type: Counter[str] = field(default_factory=Counter)

    @property
    def kept_entities(self) -> int:
        return sum(self.kept_by_type.values())

    @property
    def removed_entities(self) -> int:
        return sum(self.removed_by_type.values())

    @property
    def total_entities(self) -> int:
        return self.kept_entities + self.removed_entities


@dataclass(frozen=True)
class CropOutcome:
    text: str
    stats: CropStats


@dataclass(frozen=True)
class CropResult:
    source_path: str
    output_path: str
    total_entities: int
    kept_entities: int
    removed_entities: int
    removed_by_type: dict[str, int]
    verified: bool = False


def entity_visible(entity: Entity, polygon: Sequence[Point2D]) -> bool:
    dxftype = entity.dxftype
    points = entity.points

    if dxftype in POLYLINE_TYPES:
        return polyline_visible(points, polygon)

    if dxftype in CIRCLE_TYPES:
        center = entity.center
        if center is None:
            return False
        return circle_visible(center, entity.radius, polygon)

    if dxftype in POINT_TYPES:
        center = entity.center
        if center is None:
            # No insertion point: treat as metadata and keep it.
            return True
        return point_in_polygon(center, polygon)

    if points:
        return polyline_visible(points, polygon)
    return True


def scan_document(reader: RecordReader) -> Iterator[Record | Entity]:
    """Route records in document order.

    Records outside the ENTITIES section, the section markers themselves and
    stray records before the first entity are yielded as ``Record``. Inside
    ENTITIES, records are grouped and each closed entity is yielded as one
    ``Entity``.
    """
    accumulator = EntityAccumulator()
    in_entities = False

    for record in reader:
        if is_section_start(record):
            if in_entities:
                # SECTION without the ENDSEC of ENTITIES; close what is open.
                closed = accumulator.flush()
                if closed is not None:
                    yield closed
                in_entities = False
            yield record
            if reader.at_section_start(ENTITIES_SECTION):
                yield next(reader)
                in_entities = True
                logger.debug("entering %s section", ENTITIES_SECTION)
            continue

        if is_section_end(record):
            if in_entities:
                closed = accumulator.flush()
                if closed is not None:
                    yield closed
                in_entities = False
                logger.debug("leaving %s section", ENTITIES_SECTION)
            yield record
            continue

        if not in_entities:
            yield record
            continue

        if record.tag == 0:
            closed = accumulator.start_entity(record)
            if closed is not None:
                yield closed
            continue

        if not accumulator.feed_record(record):
            yield record

    if in_entities:
        closed = accumulator.flush()
        if closed is not None:
            yield closed


def crop_text(document_text: str, polygon: Sequence[Point2D]) -> CropOutcome:
    if len(polygon) < MIN_RING_POINTS:
        raise InvalidGeometryError(
            f"invalid WKT polygon geometry: {len(polygon)} point(s), at least {MIN_RING_POINTS} required"
        )

    reader, trailing_newline = read_records(document_text)
    stats = CropStats()
    output: list[str] = []

    for item in scan_document(reader):
        if isinstance(item, Record):
            output.append(item.text)
            continue
        if not item.records:
            continue
        if entity_visible(item, polygon):
            stats.kept_by_type[item.dxftype] += 1
            output.extend(record.text for record in item.records)
        else:
            stats.removed_by_type[item.dxftype] += 1
            logger.debug("removed %s with %d vertices", item.dxftype, len(item.points))

    text = "\n".join(output)
    if trailing_newline and output:
        text += "\n"
    return CropOutcome(text=text, stats=stats)


def crop_dxf_text(document_text: str, clip_text: str) -> str:
    """Return ``document_text`` without the entities that miss the WKT polygon ``clip_text``.

    Raises InvalidGeometryError when ``clip_text`` does not yield at least
    three points; nothing is produced in that case.
    """
    polygon = require_polygon(clip_text)
    return crop_text(document_text, polygon).text


def count_entities(document_text: str) -> Counter[str]:
    reader, _ = read_records(document_text)
    counts: Counter[str] = Counter()
    for item in scan_document(reader):
        if isinstance(item, Entity):
            counts[item.dxftype] += 1
    return counts


def default_output_path(source_path: str | Path) -> Path:
    source = Path(source_path)
    return source.with_name(f"cropped_{source.name}")


def read_document(path: str | Path) -> str:
    # newline="" keeps CR/LF as found; the record reader normalizes them itself.
    with open(path, encoding=_FILE_ENCODING, errors=_FILE_ERRORS, newline="") as fp:
        return fp.read()


def crop(
    source_path: str | Path,
    output_path: str | Path | None,
    wkt: str,
    *,
    verify: bool = False,
) -> CropResult:
    polygon = require_polygon(wkt)
    source = Path(source_path)
    outcome = crop_text(read_document(source), polygon)

    out_path = Path(output_path) if output_path is not None else default_output_path(source)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(outcome.text, encoding=_FILE_ENCODING, errors=_FILE_ERRORS, newline="")

    stats = outcome.stats
    logger.info(
        "cropped %s: kept %d of %d entities",
        source,
        stats.kept_entities,
        stats.total_entities,
    )
    if verify:
        _verify_output(out_path)

    return CropResult(
        source_path=str(source),
        output_path=str(out_path),
        total_entities=stats.total_entities,
        kept_entities=stats.kept_entities,
        removed_entities=stats.removed_entities,
        removed_by_type=dict(sorted(stats.removed_by_type.items())),
        verified=verify,
    )


def _verify_output(path: Path) -> None:
    ezdxf = _require_ezdxf()
    try:
        ezdxf.readfile(str(path))
    except Exception as exc:
        raise ValueError(f"cropped output is not a readable DXF document: {exc}") from exc


def _require_ezdxf():
    try:
        import ezdxf
    except Exception as exc:
        raise ImportError(
            "ezdxf is required to verify cropped output. "
            'Install it with `pip install "dxfcrop[dxf]"`.'
        ) from exc
    return ezdxf
