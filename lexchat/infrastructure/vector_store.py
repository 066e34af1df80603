# lexchat/infrastructure/vector_store.py

import numpy as np
from typing import List, Sequence

from lexchat.domain.models import RankedPassage


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """
    dot(a, b) / (|a| * |b|), with 0.0 for an all-zero vector instead of NaN.
    Mismatched shapes also score 0.0.
    """
    try:
        a = np.asarray(a, dtype=np.float64)
        b = np.asarray(b, dtype=np.float64)
        magnitude_a = float(np.linalg.norm(a))
        magnitude_b = float(np.linalg.norm(b))
        if magnitude_a == 0.0 or magnitude_b == 0.0:
            return 0.0
        return float(np.dot(a, b) / (magnitude_a * magnitude_b))
    except ValueError as error:
        print(f"[VectorStore] Cosine similarity failed: {error}")
        return 0.0


class InMemoryVectorStore:
    """
    Per-request passage store ranked by plain cosine similarity.

    Embeddings are raw term-frequency vectors (not unit length), so scores
    are divided by both magnitudes rather than relying on a bare dot product.
    Nothing is kept between requests.
    """

    def __init__(self):
        self._passages: List[str] = []
        self._embedding_matrix: np.ndarray | None = None
        self._norms: np.ndarray | None = None

    def index_passages(self, passages: Sequence[str], embeddings: np.ndarray) -> None:
        if not passages:
            raise ValueError("Cannot index an empty passage list.")

        embeddings = np.asarray(embeddings, dtype=np.float64)
        if embeddings.ndim != 2 or embeddings.shape[0] != len(passages):
            raise ValueError(
                f"Expected {len(passages)} embeddings, got shape {embeddings.shape}"
            )

        self._passages = list(passages)
        self._embedding_matrix = embeddings
        self._norms = np.linalg.norm(embeddings, axis=1)

    def is_ready(self) -> bool:
        return self._embedding_matrix is not None

    def __len__(self) -> int:
        return len(self._passages)

    def search(self, query_embedding: np.ndarray, top_k: int = 5) -> List[RankedPassage]:
        return self.rank(query_embedding)[:max(top_k, 0)]

    def rank(self, query_embedding: np.ndarray) -> List[RankedPassage]:
        """Every indexed passage, best first. Ties keep document order."""
        if self._embedding_matrix is None:
            raise RuntimeError("Vector store is empty. Call index_passages() first.")

        scores = self._cosine_scores(np.asarray(query_embedding, dtype=np.float64))
        order = np.argsort(-scores, kind="stable")

        return [
            RankedPassage(text=self._passages[i], similarity_score=float(scores[i]))
            for i in order
        ]

    def _cosine_scores(self, query_embedding: np.ndarray) -> np.ndarray:
        query_norm = float(np.linalg.norm(query_embedding))
        denominators = self._norms * query_norm
        dots = self._embedding_matrix @ query_embedding

        scores = np.zeros(len(self._passages), dtype=np.float64)
        nonzero = denominators > 0
        scores[nonzero] = dots[nonzero] / denominators[nonzero]
        return scores
