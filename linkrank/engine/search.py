"""Coordinator wiring the link graph, PageRank and a relevance provider."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .config import EngineConfig, load_config
from .errors import EngineStateError, MalformedInputError
from .graph import LinkGraph
from .ingest import parse_document_id, read_edges, read_registry
from .merge import merge
from .pagerank import PageRankEngine
from .text import RelevanceProvider
from .types import Document, DocumentId, RankedEntry, ScoreTable

logger = logging.getLogger(__name__)


def document_id_of(document: Document) -> DocumentId:
    """Recover the document id stored on the first line of its text."""

    first_line = document.text.split("\n", 1)[0].strip()
    if not first_line:
        raise MalformedInputError("document text does not start with a document id")
    return parse_document_id(first_line)


class SearchEngine:
    """Ranks provider results by relevance plus weighted PageRank authority."""

    def __init__(
        self,
        graph: LinkGraph,
        urls: Dict[DocumentId, str],
        provider: RelevanceProvider,
        config: EngineConfig | None = None,
    ) -> None:
        self.graph = graph
        self.urls = urls
        self.provider = provider
        self.config = config or load_config(None)
        self.page_rank = PageRankEngine(self.config)

    @classmethod
    def from_directory(
        cls,
        directory: str | Path,
        provider: RelevanceProvider,
        config: EngineConfig | None = None,
    ) -> "SearchEngine":
        """Load the registry and edge list found in ``directory``."""

        engine_config = config or load_config(None)
        directory = Path(directory)
        urls: Dict[DocumentId, str] = {}
        for doc_id, url in read_registry(directory / engine_config.file_name("registry")):
            urls[doc_id] = url
        graph = LinkGraph.build(
            read_edges(directory / engine_config.file_name("edges")),
            urls.keys(),
            dedupe=engine_config.dedupe_edges,
        )
        logger.info("Loaded corpus from %s: %d registered documents", directory, len(urls))
        return cls(graph, urls, provider, engine_config)

    def compute_page_rank(self, iterations: int | None = None) -> ScoreTable:
        return self.page_rank.compute(self.graph, iterations)

    def page_rank_scores(self) -> List[Tuple[DocumentId, float]]:
        """Return all PageRank scores, highest first."""

        return self.page_rank.ranked()

    def url_of(self, doc_id: DocumentId) -> str | None:
        return self.urls.get(doc_id)

    def search_query(
        self,
        query: Sequence[str],
        top_k: int | None = None,
        page_rank_weight: float | None = None,
    ) -> List[RankedEntry]:
        """Return the top documents for ``query`` by combined score.

        The provider is asked for every match so that authority can lift a
        document that relevance alone would have cut off.
        """

        if not self.page_rank.computed:
            raise EngineStateError("compute_page_rank() must run before search_query()")

        candidates = self.provider.search(query, None)
        return merge(
            candidates,
            self.page_rank.scores,
            self.config.top_k if top_k is None else top_k,
            self.config.page_rank_weight if page_rank_weight is None else page_rank_weight,
            doc_id_of=document_id_of,
        )
