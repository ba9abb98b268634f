"""Streaming parsers for the corpus registry and link edge list.

Both files are line oriented with whitespace-separated fields. The parsers
are generators so graph building can consume records once without holding
the raw file alongside the graph.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

from .errors import MalformedInputError
from .types import DocumentId


def parse_document_id(value: str, *, source: str | None = None, line_number: int | None = None) -> DocumentId:
    """Return ``value`` as a non-negative integer document id."""

    if value.isascii() and value.isdigit():
        return int(value)
    digits = value[1:]
    if value.startswith("-") and digits.isascii() and digits.isdigit():
        raise MalformedInputError(
            f"document id must be non-negative, got {value}",
            source=source,
            line_number=line_number,
        )
    raise MalformedInputError(
        f"document id must be an integer, got {value!r}",
        source=source,
        line_number=line_number,
    )


def _records(lines: Iterable[str], source: str) -> Iterator[Tuple[int, List[str]]]:
    for line_number, line in enumerate(lines, start=1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) != 2:
            raise MalformedInputError(
                f"expected 2 fields, found {len(fields)}",
                source=source,
                line_number=line_number,
            )
        yield line_number, fields


def parse_registry(lines: Iterable[str], source: str = "<registry>") -> Iterator[Tuple[DocumentId, str]]:
    """Yield ``(doc_id, url)`` records from registry lines."""

    for line_number, (raw_id, url) in _records(lines, source):
        yield parse_document_id(raw_id, source=source, line_number=line_number), url


def parse_edges(lines: Iterable[str], source: str = "<edges>") -> Iterator[Tuple[DocumentId, DocumentId]]:
    """Yield ``(from_id, to_id)`` records from edge-list lines."""

    for line_number, (raw_from, raw_to) in _records(lines, source):
        from_id = parse_document_id(raw_from, source=source, line_number=line_number)
        to_id = parse_document_id(raw_to, source=source, line_number=line_number)
        yield from_id, to_id


def read_registry(path: str | Path) -> Iterator[Tuple[DocumentId, str]]:
    """Stream registry records from a file."""

    path = Path(path)
    with path.open("r", encoding="utf-8") as stream:
        yield from parse_registry(stream, source=str(path))


def read_edges(path: str | Path) -> Iterator[Tuple[DocumentId, DocumentId]]:
    """Stream edge records from a file."""

    path = Path(path)
    with path.open("r", encoding="utf-8") as stream:
        yield from parse_edges(stream, source=str(path))
