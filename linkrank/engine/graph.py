"""Directed link graph keyed by document id."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple

from .types import DocumentId

logger = logging.getLogger(__name__)

_EMPTY: FrozenSet[DocumentId] = frozenset()


@dataclass(frozen=True)
class LinkGraph:
    """Forward and reverse adjacency for a corpus snapshot.

    ``forward`` keeps outbound links in edge order, duplicates included
    unless the graph was built with ``dedupe=True``. ``reverse`` is its exact
    transpose. ``all_ids`` holds every registered id plus every id seen in an
    edge, so isolated documents still receive a score.
    """

    forward: Dict[DocumentId, Tuple[DocumentId, ...]]
    reverse: Dict[DocumentId, FrozenSet[DocumentId]]
    all_ids: FrozenSet[DocumentId]
    registered_ids: FrozenSet[DocumentId]

    @classmethod
    def build(
        cls,
        edges: Iterable[Tuple[DocumentId, DocumentId]],
        known_ids: Iterable[DocumentId],
        *,
        dedupe: bool = False,
    ) -> "LinkGraph":
        """Build a graph from ``(from_id, to_id)`` pairs and the registry ids."""

        forward: Dict[DocumentId, List[DocumentId]] = {}
        reverse: Dict[DocumentId, Set[DocumentId]] = {}
        seen_edges: Set[Tuple[DocumentId, DocumentId]] = set()
        edge_count = 0

        for from_id, to_id in edges:
            if dedupe:
                if (from_id, to_id) in seen_edges:
                    continue
                seen_edges.add((from_id, to_id))
            forward.setdefault(from_id, []).append(to_id)
            reverse.setdefault(to_id, set()).add(from_id)
            edge_count += 1

        registered = frozenset(known_ids)
        all_ids = registered | frozenset(forward) | frozenset(reverse)
        graph = cls(
            forward={node: tuple(targets) for node, targets in forward.items()},
            reverse={node: frozenset(sources) for node, sources in reverse.items()},
            all_ids=all_ids,
            registered_ids=registered,
        )

        unregistered = len(all_ids) - len(registered)
        if unregistered:
            logger.warning("Link graph references %d ids missing from the registry", unregistered)
        logger.info("Built link graph: %d documents, %d edges", len(all_ids), edge_count)
        return graph

    def out_degree(self, doc_id: DocumentId) -> int:
        return len(self.forward.get(doc_id, ()))

    def inbound_of(self, doc_id: DocumentId) -> FrozenSet[DocumentId]:
        return self.reverse.get(doc_id, _EMPTY)

    def outbound_of(self, doc_id: DocumentId) -> Tuple[DocumentId, ...]:
        return self.forward.get(doc_id, ())

    def unregistered_ids(self) -> FrozenSet[DocumentId]:
        """Return ids that appear in edges but not in the registry."""

        return self.all_ids - self.registered_ids

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.forward.values())
