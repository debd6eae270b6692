from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

ENTITIES_SECTION = "ENTITIES"
SECTION_NAME_TAG = 2


@dataclass(frozen=True)
class Record:
    tag: int | None
    value: str
    tag_line: str
    value_line: str

    @property
    def text(self) -> str:
        return f"{self.tag_line}\n{self.value_line}"

    @property
    def keyword(self) -> str:
        return self.value.strip()


def split_lines(text: str) -> tuple[list[str], bool]:
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = normalized.split("\n")
    trailing_newline = len(lines) > 1 and lines[-1] == ""
    if trailing_newline:
        lines.pop()
    return lines, trailing_newline


def parse_tag(tag_line: str) -> int | None:
    try:
        return int(tag_line.strip())
    except ValueError:
        return None


def iter_records(lines: Sequence[str]) -> Iterator[Record]:
    # A trailing tag line without its value line is dropped.
    for i in range(0, len(lines) - 1, 2):
        tag_line = lines[i]
        value_line = lines[i + 1]
        yield Record(
            tag=parse_tag(tag_line),
            value=value_line,
            tag_line=tag_line,
            value_line=value_line,
        )


def is_section_start(record: Record) -> bool:
    return record.tag == 0 and record.keyword == "SECTION"


def is_section_end(record: Record) -> bool:
    return record.tag == 0 and record.keyword == "ENDSEC"


def section_name(record: Record | None) -> str | None:
    if record is None or record.tag != SECTION_NAME_TAG:
        return None
    return record.keyword


class RecordReader:
    """Cursor over a decoded record list with one-record lookahead for section names."""

    def __init__(self, records: Iterable[Record]) -> None:
        self._records = list(records)
        self._pos = 0

    def __iter__(self) -> "RecordReader":
        return self

    def __next__(self) -> Record:
        if self._pos >= len(self._records):
            raise StopIteration
        record = self._records[self._pos]
        self._pos += 1
        return record

    def __len__(self) -> int:
        return len(self._records)

    def peek(self, offset: int = 0) -> Record | None:
        index = self._pos + offset
        if index < len(self._records):
            return self._records[index]
        return None

    def at_section_start(self, name: str) -> bool:
        """True when the next record names section ``name``; call right after a SECTION record."""
        return section_name(self.peek()) == name


def read_records(text: str) -> tuple[RecordReader, bool]:
    lines, trailing_newline = split_lines(text)
    return RecordReader(iter_records(lines)), trailing_newline
