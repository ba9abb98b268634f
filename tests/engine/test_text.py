"""Tokenizer and brute-force TF-IDF provider tests."""

from __future__ import annotations

import math

import pytest

from linkrank.engine.text import TfIdfSearcher, document_frequencies, term_frequencies, tokenize

from .conftest import make_document


def test_tokenize_lowercases_words():
    assert tokenize("Link-Graph's PageRank, 2nd pass!") == ["link", "graph's", "pagerank", "2nd", "pass"]


def test_document_frequencies_count_documents_not_terms():
    counters = [term_frequencies(["a", "a", "b"]), term_frequencies(["b", "c"])]

    assert document_frequencies(counters) == {"a": 1, "b": 2, "c": 1}


@pytest.fixture()
def searcher():
    return TfIdfSearcher(
        [
            make_document(1, "apple banana"),
            make_document(2, "apple apple cherry"),
            make_document(3, "cherry"),
        ]
    )


def test_search_orders_by_tf_idf(searcher):
    results = list(searcher.search(["Apple"], None))

    assert [document.text.split()[0] for document, _ in results] == ["2", "1"]
    assert results[0][1] == pytest.approx(2 * math.log(3 / 2))
    assert results[1][1] == pytest.approx(math.log(3 / 2))


def test_search_limit_and_no_match(searcher):
    assert len(list(searcher.search(["apple"], 1))) == 1
    assert list(searcher.search(["durian"], None)) == []


def test_repeated_query_terms_count_once(searcher):
    single = dict((doc.text, score) for doc, score in searcher.search(["banana"], None))
    repeated = dict((doc.text, score) for doc, score in searcher.search(["banana", "banana"], None))

    assert single == repeated
    assert len(searcher) == 3
