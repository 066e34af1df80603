# lexchat/domain/models.py

from dataclasses import dataclass, field
from enum import Enum
from typing import List


@dataclass
class RankedPassage:
    """
    A sentence-bounded passage of the document paired with its cosine
    similarity to the query embedding.
    """
    text: str
    similarity_score: float

    def __repr__(self) -> str:
        preview = self.text[:80].replace("\n", " ")
        return (
            f"RankedPassage(score={self.similarity_score:.4f}, "
            f"preview='{preview}...')"
        )


@dataclass
class Entity:
    """
    A legal entity found in the document text by pattern matching.
    """
    text: str
    label: str
    start: int
    end: int


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    EMPTY_RESPONSE = "empty_response"
    SKIPPED = "skipped"


@dataclass
class ProviderAttempt:
    """
    Tagged result of a single call to one remote provider.

    Adapters never raise: every failure mode is reported through `outcome`
    and `reason`, so the chain driver can iterate providers uniformly.
    """
    provider: str
    priority: int
    outcome: AttemptOutcome
    text: str = ""
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is AttemptOutcome.SUCCESS and bool(self.text.strip())


@dataclass
class GenerationResult:
    text: str
    model: str
    attempts: List[ProviderAttempt] = field(default_factory=list)
    fell_back: bool = False


@dataclass
class SummaryResult:
    summary: str
    model: str


@dataclass
class ChatResult:
    response: str
    model: str
