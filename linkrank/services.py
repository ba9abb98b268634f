"""Service functions for importing corpora and serving re-ranked searches.

These functions sit between the framework-free ranking engine and the
database. They parse a corpus directory, compute PageRank, persist the
registry and the exported scores, and merge stored authority with the
results of any relevance provider.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence

from django.conf import settings
from django.db import transaction

from .engine.config import EngineConfig, load_config
from .engine.graph import LinkGraph
from .engine.ingest import read_edges, read_registry
from .engine.merge import merge
from .engine.pagerank import compute_scores
from .engine.search import document_id_of
from .engine.text import RelevanceProvider
from .engine.types import DocumentId, RankedEntry, ScoreTable
from .models import AuthorityScore, Corpus, CorpusDocument

logger = logging.getLogger(__name__)


def engine_config() -> EngineConfig:
    """Load the engine configuration named by ``LINKRANK_CONFIG_PATH``.

    Missing paths fall back to the built-in defaults.
    """

    return load_config(getattr(settings, 'LINKRANK_CONFIG_PATH', None))


@transaction.atomic
def import_corpus(
    name: str,
    directory: str | Path,
    *,
    config: EngineConfig | None = None,
    iterations: int | None = None,
) -> Corpus:
    """Parse a corpus directory, score it and store the results.

    The registry and edge list are fully parsed and scored before anything
    is written, so a malformed file leaves the previous import untouched.
    Re-importing an existing corpus name replaces its documents and scores.

    Parameters
    ----------
    name:
        Unique corpus name.
    directory:
        Directory holding the registry and edge-list files.
    config:
        Engine configuration; defaults to :func:`engine_config`.
    iterations:
        Overrides the configured iteration count.

    Returns
    -------
    Corpus
        The created or updated corpus row.
    """

    cfg = config or engine_config()
    directory = Path(directory)
    count = cfg.iterations if iterations is None else iterations

    urls: Dict[DocumentId, str] = {}
    for doc_id, url in read_registry(directory / cfg.file_name('registry')):
        urls[doc_id] = url
    graph = LinkGraph.build(
        read_edges(directory / cfg.file_name('edges')),
        urls.keys(),
        dedupe=cfg.dedupe_edges,
    )
    table = compute_scores(graph, count, cfg.damping_factor, workers=cfg.workers)

    corpus, created = Corpus.objects.update_or_create(
        name=name,
        defaults={
            'directory': str(directory),
            'damping_factor': cfg.damping_factor,
            'iterations': count,
        },
    )
    if not created:
        corpus.documents.all().delete()  # type: ignore[attr-defined]
        corpus.scores.all().delete()  # type: ignore[attr-defined]

    CorpusDocument.objects.bulk_create(
        [CorpusDocument(corpus=corpus, doc_id=doc_id, url=url) for doc_id, url in sorted(urls.items())]
    )
    AuthorityScore.objects.bulk_create(
        [
            AuthorityScore(corpus=corpus, doc_id=doc_id, score=score, position=position)
            for position, (doc_id, score) in enumerate(table.ranked(), start=1)
        ]
    )
    logger.info('Imported corpus %s: %d documents, %d scores', name, len(urls), len(table))
    return corpus


def stored_score_table(corpus: Corpus) -> ScoreTable:
    """Rebuild the read-only score table saved for ``corpus``."""

    rows = AuthorityScore.objects.filter(corpus=corpus).values_list('doc_id', 'score')
    return ScoreTable(dict(rows))


def document_urls(corpus: Corpus) -> Dict[DocumentId, str]:
    """Return the registry of ``corpus`` as a doc_id to URL mapping."""

    return dict(CorpusDocument.objects.filter(corpus=corpus).values_list('doc_id', 'url'))


def search_corpus(
    corpus: Corpus,
    provider: RelevanceProvider,
    query: Sequence[str],
    *,
    top_k: int | None = None,
    page_rank_weight: float | None = None,
    config: EngineConfig | None = None,
) -> List[RankedEntry]:
    """Re-rank every provider match for ``query`` with stored authority."""

    cfg = config or engine_config()
    return merge(
        provider.search(query, None),
        stored_score_table(corpus),
        cfg.top_k if top_k is None else top_k,
        cfg.page_rank_weight if page_rank_weight is None else page_rank_weight,
        doc_id_of=document_id_of,
    )
