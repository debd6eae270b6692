from __future__ import annotations

from dataclasses import dataclass, field

from .geometry import Point2D, to_float
from .records import Record

UNKNOWN_TYPE = "UNKNOWN"

X_TAGS = frozenset({10, 11})
Y_TAGS = frozenset({20, 21})
RADIUS_TAG = 40


@dataclass
class Entity:
    dxftype: str
    records: list[Record] = field(default_factory=list)
    points: list[Point2D] = field(default_factory=list)
    radius: float = 0.0

    @property
    def center(self) -> Point2D | None:
        if self.points:
            return self.points[0]
        return None


class EntityAccumulator:
    """Groups the records of the ENTITIES section into one open entity at a time.

    ``start_entity`` and ``flush`` hand back the entity that was closed so the
    caller decides whether its records are written out.
    """

    def __init__(self) -> None:
        self._current: Entity | None = None
        self._pending_x: float | None = None
        self._pending_y: float | None = None

    @property
    def is_open(self) -> bool:
        return self._current is not None

    @property
    def current(self) -> Entity | None:
        return self._current

    def start_entity(self, record: Record) -> Entity | None:
        closed = self.flush()
        self._current = Entity(dxftype=record.keyword or UNKNOWN_TYPE, records=[record])
        return closed

    def feed_record(self, record: Record) -> bool:
        """Add ``record`` to the open entity; returns False if no entity is open."""
        if record.tag == 0:
            raise ValueError("entity start records go through start_entity()")
        entity = self._current
        if entity is None:
            return False

        entity.records.append(record)
        tag = record.tag
        if tag in X_TAGS:
            self._pending_x = to_float(record.value)
        elif tag in Y_TAGS:
            self._pending_y = to_float(record.value)
        elif tag == RADIUS_TAG:
            entity.radius = to_float(record.value)

        if self._pending_x is not None and self._pending_y is not None:
            entity.points.append((self._pending_x, self._pending_y))
            self._pending_x = None
            self._pending_y = None
        return True

    def flush(self) -> Entity | None:
        closed = self._current
        self._current = None
        self._pending_x = None
        self._pending_y = None
        return closed
