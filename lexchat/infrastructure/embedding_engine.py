# lexchat/infrastructure/embedding_engine.py
# Deterministic bag-of-words hashing in place of a neural encoder.

import re
from collections import Counter
from typing import List

import numpy as np

from lexchat.domain.interfaces import EmbeddingPort


DEFAULT_DIMENSIONS = 100

# ASCII word runs only; accented letters act as separators.
_WORD_PATTERN = re.compile(r"\w+", re.ASCII)


def string_hash(word: str) -> int:
    """
    32-bit signed polynomial hash: h = h * 31 + code point, wrapped to
    two's complement after every step. Stable across processes, unlike
    the builtin hash().
    """
    h = 0
    for char in word:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def bucket_for(word: str, dimensions: int = DEFAULT_DIMENSIONS) -> int:
    return abs(string_hash(word)) % dimensions


class HashingEmbeddingEngine(EmbeddingPort):

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS):
        if dimensions <= 0:
            raise ValueError("Embedding dimensions must be positive.")
        self._dimensions = dimensions

    @property
    def model_name(self) -> str:
        return f"hashing-bow-{self._dimensions}"

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def encode(self, texts: List[str]) -> np.ndarray:
        if not texts:
            return np.zeros((0, self._dimensions), dtype=np.float64)
        return np.stack([self.encode_single(text) for text in texts])

    def encode_single(self, text: str) -> np.ndarray:
        """
        Word-frequency vector: every distinct word adds its count to the
        bucket its hash lands in. Colliding words share a bucket.
        """
        vector = np.zeros(self._dimensions, dtype=np.float64)
        try:
            frequencies = Counter(_WORD_PATTERN.findall(text.lower()))
            for word, count in frequencies.items():
                vector[bucket_for(word, self._dimensions)] += count
        except (AttributeError, TypeError) as error:
            print(f"[Embedding] Could not embed input ({error}); using zero vector.")
            return np.zeros(self._dimensions, dtype=np.float64)
        return vector
