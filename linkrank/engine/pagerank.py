"""PageRank power iteration over a link graph."""

from __future__ import annotations

import logging
import math
from collections import Counter
from concurrent.futures import Executor, ThreadPoolExecutor
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence, Tuple

from .config import EngineConfig, load_config
from .errors import EngineStateError, InvariantViolationError
from .graph import LinkGraph
from .types import DocumentId, ScoreTable

logger = logging.getLogger(__name__)

# Passes run beyond the requested iteration count: ``iterations=0`` still
# runs one full pass over the graph.
EXTRA_PASSES = 1

INITIAL_SCORE = 1.0

InboundPlan = Dict[DocumentId, Tuple[Tuple[DocumentId, int, int], ...]]


def effective_passes(iterations: int) -> int:
    """Return the number of passes run for ``iterations``."""

    return iterations + EXTRA_PASSES


def compute_scores(
    graph: LinkGraph,
    iterations: int,
    damping_factor: float,
    *,
    workers: int = 1,
) -> ScoreTable:
    """Return raw PageRank scores for every id in ``graph.all_ids``.

    Each pass reads only the previous pass's table, so the result does not
    depend on node order or on ``workers``. Scores are left on the raw
    "expected visits" scale and are not normalised.
    """

    _check_arguments(iterations, damping_factor, workers)

    nodes = sorted(graph.all_ids)
    plan = _inbound_plan(graph, nodes)
    current: Dict[DocumentId, float] = {node: INITIAL_SCORE for node in nodes}
    passes = effective_passes(iterations)

    if workers > 1 and len(nodes) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            current = _iterate(nodes, plan, current, passes, damping_factor, executor, workers)
    else:
        current = _iterate(nodes, plan, current, passes, damping_factor, None, 1)

    logger.info(
        "PageRank finished: %d documents, %d passes, damping %.3f",
        len(nodes),
        passes,
        damping_factor,
    )
    return ScoreTable(current)


def export_scores(table: ScoreTable) -> List[Tuple[DocumentId, float]]:
    """Return all (doc_id, score) pairs, highest first, ties by ascending id."""

    return table.ranked()


class PageRankEngine:
    """Holds the most recent score table computed for a graph."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or load_config(None)
        self._scores: ScoreTable | None = None

    def compute(self, graph: LinkGraph, iterations: int | None = None) -> ScoreTable:
        count = self.config.iterations if iterations is None else iterations
        self._scores = compute_scores(
            graph,
            count,
            self.config.damping_factor,
            workers=self.config.workers,
        )
        return self._scores

    @property
    def computed(self) -> bool:
        return self._scores is not None

    @property
    def scores(self) -> ScoreTable:
        if self._scores is None:
            raise EngineStateError("PageRank has not been computed yet")
        return self._scores

    def ranked(self) -> List[Tuple[DocumentId, float]]:
        return export_scores(self.scores)


def _check_arguments(iterations: int, damping_factor: float, workers: int) -> None:
    if isinstance(iterations, bool) or not isinstance(iterations, int) or iterations < 0:
        raise ValueError(f"iterations must be a non-negative integer, got {iterations!r}")
    if not 0.0 <= damping_factor <= 1.0:
        raise ValueError(f"damping_factor must be within [0, 1], got {damping_factor!r}")
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers!r}")


def _inbound_plan(graph: LinkGraph, nodes: Sequence[DocumentId]) -> InboundPlan:
    """Resolve (source, edge multiplicity, out_degree) for every node.

    Sources are sorted so floating point sums always run in the same order.
    A source linking to the same node twice passes on two shares.
    """

    known = graph.all_ids
    multiplicities: Dict[DocumentId, Counter[DocumentId]] = {}
    plan: InboundPlan = {}
    for node in nodes:
        sources = []
        for source in sorted(graph.inbound_of(node)):
            degree = graph.out_degree(source)
            if degree == 0:
                raise InvariantViolationError(
                    f"document {source} is an inbound link of {node} but has no outbound links"
                )
            if source not in multiplicities:
                multiplicities[source] = Counter(graph.outbound_of(source))
            multiplicity = multiplicities[source][node]
            if multiplicity == 0 or source not in known:
                raise InvariantViolationError(
                    f"reverse link {source} -> {node} has no matching forward entry"
                )
            sources.append((source, multiplicity, degree))
        plan[node] = tuple(sources)
    return plan


def _score_batch(
    batch: Sequence[DocumentId],
    previous: Mapping[DocumentId, float],
    plan: InboundPlan,
    damping_factor: float,
) -> Dict[DocumentId, float]:
    base = 1.0 - damping_factor
    scores: Dict[DocumentId, float] = {}
    for node in batch:
        total = 0.0
        for source, multiplicity, degree in plan[node]:
            total += multiplicity * previous[source] / degree
        scores[node] = base + damping_factor * total
    return scores


def _batches(nodes: Sequence[DocumentId], workers: int) -> List[Sequence[DocumentId]]:
    size = max(1, math.ceil(len(nodes) / workers))
    return [nodes[start:start + size] for start in range(0, len(nodes), size)]


def _iterate(
    nodes: Sequence[DocumentId],
    plan: InboundPlan,
    current: Dict[DocumentId, float],
    passes: int,
    damping_factor: float,
    executor: Executor | None,
    workers: int,
) -> Dict[DocumentId, float]:
    batches = _batches(nodes, workers)
    for pass_number in range(1, passes + 1):
        previous = MappingProxyType(current)
        if executor is None:
            following = _score_batch(nodes, previous, plan, damping_factor)
        else:
            futures = [
                executor.submit(_score_batch, batch, previous, plan, damping_factor)
                for batch in batches
            ]
            following = {}
            # Merge in submission order; every batch must finish before the swap.
            for future in futures:
                following.update(future.result())

        if logger.isEnabledFor(logging.DEBUG):
            change = max((abs(following[node] - current[node]) for node in nodes), default=0.0)
            logger.debug("PageRank pass %d/%d: max change %.6g", pass_number, passes, change)
        current = following
    return current
