# tests/test_vector_store.py

import numpy as np
import pytest
from lexchat.infrastructure.vector_store import InMemoryVectorStore, cosine_similarity


def _make_store(texts, embeddings) -> InMemoryVectorStore:
    store = InMemoryVectorStore()
    store.index_passages(texts, np.asarray(embeddings, dtype=np.float64))
    return store


def test_cosine_of_vector_with_itself_is_one():
    a = np.array([3.0, 0.0, 4.0, 1.0])
    assert cosine_similarity(a, a) == pytest.approx(1.0)


def test_cosine_with_zero_vector_is_zero_not_nan():
    zero = np.zeros(5)
    b = np.array([1.0, 2.0, 0.0, 0.0, 1.0])
    assert cosine_similarity(zero, b) == 0.0
    assert cosine_similarity(b, zero) == 0.0
    assert cosine_similarity(zero, zero) == 0.0


def test_cosine_of_non_negative_vectors_within_unit_interval():
    rng = np.random.default_rng(7)
    for _ in range(50):
        a = rng.integers(0, 4, size=100).astype(np.float64)
        b = rng.integers(0, 4, size=100).astype(np.float64)
        score = cosine_similarity(a, b)
        assert 0.0 <= score <= 1.0 + 1e-12


def test_cosine_ignores_magnitude():
    a = np.array([1.0, 2.0, 0.0])
    assert cosine_similarity(a, a * 10) == pytest.approx(1.0)


def test_cosine_mismatched_shapes_scores_zero():
    assert cosine_similarity(np.ones(3), np.ones(4)) == 0.0


def test_search_returns_top_k_results():
    store = _make_store(
        ["p0", "p1", "p2", "p3"],
        [
            [2.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, 0.0, 5.0],
            [1.0, 1.0, 0.0],
        ],
    )

    results = store.search(np.array([1.0, 0.0, 0.0]), top_k=3)

    assert len(results) == 3
    assert results[0].text == "p0"  # Most similar
    assert results[0].similarity_score == pytest.approx(1.0, abs=1e-9)
    assert results[1].text == "p3"


def test_search_sorted_descending():
    store = _make_store(["a", "b", "c"], np.eye(3))

    results = store.search(np.array([0.6, 0.8, 0.0]), top_k=3)

    scores = [r.similarity_score for r in results]
    assert scores == sorted(scores, reverse=True)


def test_ties_keep_document_order():
    store = _make_store(
        ["first", "second", "third", "fourth"],
        [
            [0.0, 1.0],
            [1.0, 0.0],
            [0.0, 2.0],
            [3.0, 0.0],
        ],
    )

    results = store.rank(np.array([1.0, 0.0]))

    assert [r.text for r in results] == ["second", "fourth", "first", "third"]


def test_zero_query_scores_everything_zero_in_order():
    store = _make_store(["x", "y"], [[1.0, 0.0], [0.0, 1.0]])

    results = store.rank(np.zeros(2))

    assert [r.text for r in results] == ["x", "y"]
    assert all(r.similarity_score == 0.0 for r in results)


def test_top_k_larger_than_store_returns_everything():
    store = _make_store(["x", "y"], [[1.0, 0.0], [0.0, 1.0]])
    assert len(store.search(np.array([1.0, 1.0]), top_k=10)) == 2


def test_empty_index_raises():
    store = InMemoryVectorStore()
    with pytest.raises(RuntimeError):
        store.search(np.array([1.0, 0.0]), top_k=3)


def test_index_rejects_mismatched_embeddings():
    store = InMemoryVectorStore()
    with pytest.raises(ValueError):
        store.index_passages(["only one"], np.ones((2, 3)))
