"""Shared text utilities and a brute-force TF-IDF relevance provider."""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple

from .types import Document

_TOKEN_RE = re.compile(r"[\w']+")


class RelevanceProvider(Protocol):
    """Anything that ranks documents for a query.

    ``limit=None`` asks for every matching document.
    """

    def search(self, query_terms: Sequence[str], limit: Optional[int]) -> Iterable[Tuple[Document, float]]:
        ...


def tokenize(text: str) -> List[str]:
    """Return lower-cased word tokens from the provided text."""

    return [token.lower() for token in _TOKEN_RE.findall(text)]


def term_frequencies(tokens: Iterable[str]) -> Counter[str]:
    """Return term frequencies for the tokens."""

    return Counter(tokens)


def document_frequencies(documents: Sequence[Counter[str]]) -> Dict[str, int]:
    """Compute document frequencies for the token counters."""

    df: Dict[str, int] = {}
    for doc in documents:
        for term in doc:
            df[term] = df.get(term, 0) + 1
    return df


def tf_idf(query_tokens: Sequence[str], document_tf: Counter[str], df: Dict[str, int], total_docs: int) -> float:
    """Sum ``tf * log(N / df)`` over the distinct query terms."""

    score = 0.0
    for term in dict.fromkeys(query_tokens):
        freq = document_tf.get(term, 0)
        if not freq:
            continue
        score += freq * math.log(total_docs / df[term])
    return score


class TfIdfSearcher:
    """Scores every document against the query; no inverted index.

    Suitable for small corpora and tests. Documents matching at least one
    query term are returned, best first, with ties in insertion order.
    """

    def __init__(self, documents: Iterable[Document]) -> None:
        self.documents: List[Document] = list(documents)
        self._term_counts = [term_frequencies(tokenize(document.text)) for document in self.documents]
        self._df = document_frequencies(self._term_counts)

    def __len__(self) -> int:
        return len(self.documents)

    def search(self, query_terms: Sequence[str], limit: Optional[int] = None) -> Iterator[Tuple[Document, float]]:
        query_tokens = [token for term in query_terms for token in tokenize(term)]
        total_docs = len(self.documents)
        scored: List[Tuple[Document, float]] = []
        for document, counts in zip(self.documents, self._term_counts):
            if not any(token in counts for token in query_tokens):
                continue
            scored.append((document, tf_idf(query_tokens, counts, self._df, total_docs)))

        scored.sort(key=lambda item: item[1], reverse=True)
        if limit is not None:
            scored = scored[:limit]
        return iter(scored)
