# tests/test_search_service.py

import numpy as np
from unittest.mock import MagicMock
from lexchat.application.search_service import PassageSelector
from lexchat.infrastructure.document_loader import split_passages
from lexchat.infrastructure.embedding_engine import HashingEmbeddingEngine
from lexchat.infrastructure.vector_store import cosine_similarity


CONTRACT = (
    "John Smith signed the agreement. "
    "Payment of $500 is due January 1, 2024. "
    "The warranty expires after one year."
)


def _make_selector(**kwargs) -> PassageSelector:
    return PassageSelector(HashingEmbeddingEngine(), **kwargs)


def test_split_passages_trims_and_drops_short_fragments():
    text = "Short one. This sentence is definitely long enough to keep!  Ok? " \
           "Another sufficiently long sentence follows here?"
    assert split_passages(text) == [
        "This sentence is definitely long enough to keep",
        "Another sufficiently long sentence follows here",
    ]


def test_split_passages_threshold_is_inclusive():
    exactly_thirty = "a" * 30
    assert split_passages(f"{exactly_thirty}. {'b' * 29}.") == [exactly_thirty]


def test_payment_question_ranks_payment_sentence_first():
    passages = _make_selector().select_relevant("What payment is due?", CONTRACT)

    assert "$500" in passages[0]
    assert len(passages) == 3


def test_results_never_exceed_top_k():
    passages = _make_selector().select_relevant("agreement", CONTRACT, top_k=2)
    assert len(passages) == 2


def test_results_ordered_by_non_increasing_similarity():
    engine = HashingEmbeddingEngine()
    selector = PassageSelector(engine)
    query = "When does the warranty for the agreement expire?"

    passages = selector.select_relevant(query, CONTRACT)

    query_embedding = engine.encode_single(query)
    scores = [cosine_similarity(query_embedding, engine.encode_single(p)) for p in passages]
    assert scores == sorted(scores, reverse=True)
    assert set(passages) <= set(split_passages(CONTRACT))


def test_rank_exposes_scores():
    ranked = _make_selector().rank("What payment is due?", CONTRACT)

    assert len(ranked) == 3
    assert ranked[0].similarity_score > 0
    assert ranked[1].similarity_score == 0.0


def test_unpunctuated_single_word_falls_back_to_prefix():
    assert _make_selector().select_relevant("anything", "Indemnity") == ["Indemnity"]


def test_empty_document_returns_single_empty_passage():
    assert _make_selector().select_relevant("What is due?", "") == [""]


def test_prefix_fallback_is_capped():
    # every clause is under the minimum length, so nothing gets ranked
    document = "Short clause. " * 500
    passages = _make_selector(fallback_prefix_chars=1000).select_relevant("q", document)
    assert passages == [document[:1000]]


def test_long_unpunctuated_document_is_one_whole_passage():
    document = "x" * 5000
    assert _make_selector().select_relevant("q", document) == [document]


def test_non_positive_top_k_still_returns_one_passage():
    assert len(_make_selector().select_relevant("payment", CONTRACT, top_k=0)) == 1


def test_engine_failure_degrades_to_prefix():
    engine = MagicMock()
    engine.encode_single.side_effect = RuntimeError("boom")
    selector = PassageSelector(engine)

    assert selector.select_relevant("payment", CONTRACT) == [CONTRACT[:1000]]


def test_selector_embeds_query_once_and_passages_in_one_batch():
    engine = MagicMock()
    engine.encode_single.return_value = np.array([1.0, 0.0, 0.0])
    engine.encode.return_value = np.eye(3)
    selector = PassageSelector(engine)

    passages = selector.select_relevant("query", CONTRACT)

    engine.encode_single.assert_called_once_with("query")
    engine.encode.assert_called_once()
    assert passages[0] == "John Smith signed the agreement"


def test_non_string_document_never_raises():
    assert _make_selector().select_relevant("payment", None) == [""]
