# lexchat/application/search_service.py

from typing import List

from lexchat.domain.interfaces import EmbeddingPort
from lexchat.domain.models import RankedPassage
from lexchat.infrastructure.document_loader import MIN_PASSAGE_LENGTH, split_passages
from lexchat.infrastructure.vector_store import InMemoryVectorStore


DEFAULT_TOP_K = 5
FALLBACK_PREFIX_CHARS = 1000


class PassageSelector:
    """
    Core use case: pick the passages of one document most relevant to a
    question.

    Every call builds a throwaway InMemoryVectorStore for that document;
    nothing survives between calls, so concurrent requests never share
    state.

    Degraded mode: when the document has no passage long enough, or when
    anything goes wrong while ranking, the first FALLBACK_PREFIX_CHARS
    characters of the raw text are returned as a single passage.
    """

    def __init__(
        self,
        embedding_engine: EmbeddingPort,
        top_k: int = DEFAULT_TOP_K,
        min_passage_length: int = MIN_PASSAGE_LENGTH,
        fallback_prefix_chars: int = FALLBACK_PREFIX_CHARS,
    ):
        self._embedding_engine = embedding_engine
        self._top_k = top_k
        self._min_passage_length = min_passage_length
        self._fallback_prefix_chars = fallback_prefix_chars

    def rank(self, query: str, document_text: str) -> List[RankedPassage]:
        """
        Score every passage of the document against the query, best first.
        Raises on bad input; select_relevant() is the forgiving entry point.
        """
        query_embedding = self._embedding_engine.encode_single(query)
        passages = split_passages(document_text, self._min_passage_length)
        if not passages:
            return []

        store = InMemoryVectorStore()
        store.index_passages(passages, self._embedding_engine.encode(passages))
        return store.rank(query_embedding)

    def select_relevant(
        self,
        query: str,
        document_text: str,
        top_k: int | None = None,
    ) -> List[str]:
        """Never raises, and never returns an empty list."""
        top_k = self._top_k if top_k is None else top_k
        top_k = max(top_k, 1)

        try:
            ranked = self.rank(query, document_text)
        except Exception as error:
            print(f"[PassageSelector] Ranking failed, using document prefix: {error}")
            return [self._prefix(document_text)]

        if not ranked:
            print("[PassageSelector] No qualifying passages — using document prefix.")
            return [self._prefix(document_text)]

        return [passage.text for passage in ranked[:top_k]]

    def _prefix(self, document_text) -> str:
        if not isinstance(document_text, str):
            return ""
        return document_text[:self._fallback_prefix_chars]
