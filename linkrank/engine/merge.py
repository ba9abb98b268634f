"""Combine relevance rankings with PageRank authority."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Mapping, Tuple

from .types import DocumentId, RankedEntry, ScoreTable

logger = logging.getLogger(__name__)


def merge(
    relevance_ranked: Iterable[Tuple[Any, float]],
    page_rank: ScoreTable | Mapping[DocumentId, float],
    top_k: int,
    page_rank_weight: float,
    *,
    doc_id_of: Callable[[Any], DocumentId] | None = None,
) -> List[RankedEntry]:
    """Return at most ``top_k`` entries ordered by combined score.

    The combined score is ``relevance + page_rank_weight * authority``;
    documents without an authority score count as 0. ``relevance_ranked`` is
    consumed lazily but fully, because the final order depends on the
    combined score rather than the input order. Equal combined scores keep
    their relevance order.
    """

    if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 1:
        raise ValueError(f"top_k must be a positive integer, got {top_k!r}")

    resolve = doc_id_of or _identity
    lookup = page_rank.lookup if isinstance(page_rank, ScoreTable) else page_rank.get

    combined: List[RankedEntry] = []
    for document, relevance in relevance_ranked:
        authority = lookup(resolve(document), 0.0)
        combined.append(RankedEntry(document=document, score=relevance + page_rank_weight * authority))

    # list.sort is stable, so ties stay in relevance order.
    combined.sort(key=lambda entry: entry.score, reverse=True)
    logger.debug("Merged %d candidates into top %d", len(combined), min(top_k, len(combined)))
    return combined[:top_k]


def _identity(document: Any) -> DocumentId:
    return document
