"""Typed data structures shared by the ranking engine."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Tuple

DocumentId = int


@dataclass(frozen=True)
class Document:
    """Document content as handed out by a relevance provider.

    The first line of ``text`` carries the document id.
    """

    text: str


@dataclass(frozen=True)
class RankedEntry:
    """Final search result pairing a document with its combined score."""

    document: Any
    score: float


class ScoreTable(Mapping[DocumentId, float]):
    """Read-only PageRank snapshot keyed by document id."""

    __slots__ = ("_scores",)

    def __init__(self, scores: Mapping[DocumentId, float] | None = None) -> None:
        self._scores: Mapping[DocumentId, float] = MappingProxyType(dict(scores or {}))

    def __getitem__(self, doc_id: DocumentId) -> float:
        return self._scores[doc_id]

    def __iter__(self) -> Iterator[DocumentId]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    def __repr__(self) -> str:
        return f"ScoreTable({dict(self._scores)!r})"

    def lookup(self, doc_id: DocumentId, default: float = 0.0) -> float:
        """Return the authority for ``doc_id``; unknown ids get ``default``."""

        return self._scores.get(doc_id, default)

    def ranked(self) -> List[Tuple[DocumentId, float]]:
        """Return every (doc_id, score) pair, highest score first.

        Equal scores are ordered by ascending document id.
        """

        return sorted(self._scores.items(), key=lambda item: (-item[1], item[0]))

    def as_dict(self) -> Dict[DocumentId, float]:
        return dict(self._scores)
