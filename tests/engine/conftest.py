"""Shared fixtures for ranking engine tests."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple

import pytest

from linkrank.engine.config import load_config
from linkrank.engine.graph import LinkGraph
from linkrank.engine.types import Document


@pytest.fixture()
def engine_config():
    """Provide a fresh copy of the default engine configuration."""

    return load_config(None)


@pytest.fixture()
def corpus_dir(tmp_path: Path) -> Path:
    """Three documents: 1 and 3 link to 2, 2 links back to 1."""

    (tmp_path / "url.tsv").write_text(
        "1 https://example.com/one\n2 https://example.com/two\n3 https://example.com/three\n",
        encoding="utf-8",
    )
    (tmp_path / "id-graph.tsv").write_text("1 2\n3 2\n2 1\n", encoding="utf-8")
    return tmp_path


def make_graph(edges: Iterable[Tuple[int, int]], known_ids: Iterable[int] = (), **kwargs) -> LinkGraph:
    return LinkGraph.build(list(edges), set(known_ids), **kwargs)


def make_document(doc_id: int, body: str) -> Document:
    return Document(text=f"{doc_id}\n{body}")
