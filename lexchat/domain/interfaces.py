# lexchat/domain/interfaces.py

from abc import ABC, abstractmethod
from typing import List
import numpy as np

from .models import ProviderAttempt


class EmbeddingPort(ABC):
    """
    Port for any embedding engine.
    Intentionally minimal: no infrastructure concerns like model naming.
    """

    @abstractmethod
    def encode(self, texts: List[str]) -> np.ndarray: ...

    @abstractmethod
    def encode_single(self, text: str) -> np.ndarray: ...


class ProviderPort(ABC):
    """
    Port for a remote text-generation provider.

    `attempt()` must not raise. Missing credentials, transport failures,
    non-2xx statuses and empty payloads are all reported as a
    ProviderAttempt with the matching outcome.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def model(self) -> str: ...

    @abstractmethod
    def attempt(
        self,
        prompt: str,
        system_instructions: str,
        priority: int = 0,
    ) -> ProviderAttempt: ...
