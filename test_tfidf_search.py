"""
Tests for the inverted index and TF-IDF term ranking
"""

import math

import pytest

from MovieSearch.preprocessing import tokenize
from MovieSearch.tfidf_search import InvertedIndex, Posting, TFIDFSearchEngine, count_terms, rank_scores


def build_index(corpus):
    return InvertedIndex.from_term_counts(
        (doc_id, count_terms(tokenize(text))) for doc_id, text in corpus.items()
    )


@pytest.fixture
def cat_dog_index():
    return build_index({
        "doc1": "the cat sat on the mat",
        "doc2": "the dog sat on the log",
    })


@pytest.fixture
def movie_index():
    return build_index({
        "m1": "A spy chases another spy across Berlin. The spy escapes.",
        "m2": "A retired spy returns for one last mission in Berlin.",
        "m3": "Two friends open a bakery in Paris.",
        "m4": "A bakery owner becomes an accidental spy.",
    })


def test_document_frequency(cat_dog_index):
    assert cat_dog_index.document_count == 2
    assert cat_dog_index.get_document_frequency("sat") == 2
    assert cat_dog_index.get_document_frequency("cat") == 1
    assert cat_dog_index.get_document_frequency("the") == 0


def test_tf_idf_values(cat_dog_index):
    assert cat_dog_index.get_tf_idf("cat", "doc1") == pytest.approx(1.0)
    assert cat_dog_index.get_tf_idf("sat", "doc1") == 0.0
    assert cat_dog_index.get_tf_idf("cat", "doc2") == 0.0
    assert cat_dog_index.get_tf_idf("zebra", "doc1") == 0.0


def test_tf_idf_uses_raw_frequency(movie_index):
    # spy occurs 3 times in m1 and in 3 of 4 documents
    assert movie_index.get_term_frequency("spy", "m1") == 3
    assert movie_index.get_tf_idf("spy", "m1") == pytest.approx(3 * math.log2(4 / 3))


def test_document_frequency_bounds(movie_index):
    n = movie_index.document_count
    for term, df in movie_index.document_frequency.items():
        assert 1 <= df <= n
        assert df == len(movie_index.get_postings(term))


def test_tf_idf_is_zero_only_for_missing_or_ubiquitous_terms(movie_index):
    n = movie_index.document_count
    for posting in movie_index.iter_postings():
        weight = movie_index.get_tf_idf(posting.term, posting.doc_id)
        assert weight >= 0
        assert (weight == 0) == (movie_index.get_document_frequency(posting.term) == n)


def test_iter_postings(cat_dog_index):
    postings = set(cat_dog_index.iter_postings())
    assert Posting("cat", "doc1", 1) in postings
    assert Posting("sat", "doc2", 1) in postings
    assert len(postings) == 6


def test_finalized_index_is_read_only(cat_dog_index):
    with pytest.raises(RuntimeError):
        cat_dog_index.add_document("doc3", {"cat": 1})
    with pytest.raises(TypeError):
        cat_dog_index.postings["cat"]["doc3"] = 1
    with pytest.raises(TypeError):
        cat_dog_index.document_frequency["cat"] = 5


def test_empty_corpus():
    index = InvertedIndex.from_term_counts([])
    assert index.document_count == 0
    assert index.get_tf_idf("cat", "doc1") == 0.0
    assert index.get_inverse_document_frequency("cat") == 0.0
    assert TFIDFSearchEngine(index).search_term("cat") == []


def test_engine_requires_finalized_index():
    with pytest.raises(ValueError):
        TFIDFSearchEngine(InvertedIndex())


def test_search_term(cat_dog_index):
    engine = TFIDFSearchEngine(cat_dog_index)
    assert engine.search_term("cat", 10) == ["doc1"]
    assert engine.search_term("zebra", 10) == []


def test_rank_term_orders_by_weight(movie_index):
    engine = TFIDFSearchEngine(movie_index)
    ranked = engine.rank_term("spy", 10)
    assert [doc_id for doc_id, _ in ranked] == ["m1", "m2", "m4"]
    scores = [score for _, score in ranked]
    assert scores == sorted(scores, reverse=True)


def test_ties_broken_by_document_id(cat_dog_index):
    engine = TFIDFSearchEngine(cat_dog_index)
    assert engine.rank_term("sat", 10) == [("doc1", 0.0), ("doc2", 0.0)]


def test_top_k_limits_results(movie_index):
    engine = TFIDFSearchEngine(movie_index)
    assert engine.search_term("spy", 2) == ["m1", "m2"]
    assert engine.search_term("spy", 0) == []
    assert len(engine.search_term("bakery", 100)) == 2


def test_rank_scores():
    scores = [("b", 1.0), ("a", 1.0), ("c", 2.0), ("d", 0.5)]
    assert rank_scores(scores, 3) == [("c", 2.0), ("a", 1.0), ("b", 1.0)]
    assert rank_scores(scores, -1) == []
