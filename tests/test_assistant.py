# tests/test_assistant.py

import httpx
import pytest
from unittest.mock import MagicMock

from lexchat.application.assistant import (
    CHAT_FALLBACK_MODEL,
    CHAT_INSTRUCTIONS,
    SUMMARY_INSTRUCTIONS,
    DocumentAssistant,
    build_assistant,
)
from lexchat.application.provider_chain import ProviderChain
from lexchat.application.search_service import PassageSelector
from lexchat.config import Settings, default_providers
from lexchat.domain.models import AttemptOutcome, Entity, ProviderAttempt
from lexchat.infrastructure.embedding_engine import HashingEmbeddingEngine


CONTRACT = (
    "John Smith signed the agreement. "
    "Payment of $500 is due January 1, 2024. "
    "The warranty expires after one year."
)


def _make_provider(outcome: AttemptOutcome, text: str = ""):
    provider = MagicMock()
    provider.name = "stub"
    provider.model = "stub-model"
    provider.attempt.side_effect = (
        lambda prompt, system_instructions, priority=0:
        ProviderAttempt("stub", priority, outcome, text=text)
    )
    return provider


def _make_assistant(provider) -> DocumentAssistant:
    selector = PassageSelector(HashingEmbeddingEngine())
    return DocumentAssistant(selector, ProviderChain([provider]))


# ── Summarization ─────────────────────────────────────────────────────────────

def test_summary_comes_from_provider_when_available():
    provider = _make_provider(AttemptOutcome.SUCCESS, text="Executive summary.")

    result = _make_assistant(provider).summarize(CONTRACT)

    assert result.summary == "Executive summary."
    assert result.model == "stub-model"
    prompt, system = provider.attempt.call_args.args[:2]
    assert system == SUMMARY_INSTRUCTIONS
    assert prompt.endswith(CONTRACT)


def test_summary_prompt_truncates_document_to_budget():
    provider = _make_provider(AttemptOutcome.SUCCESS, text="ok")
    document = "word " * 5000

    _make_assistant(provider).summarize(document)

    prompt = provider.attempt.call_args.args[0]
    assert document[:6000] in prompt
    assert document[:6001] not in prompt


def test_summary_falls_back_to_local_analysis():
    provider = _make_provider(AttemptOutcome.HTTP_ERROR)
    entities = [Entity("John Smith", "PERSON", 0, 10)]

    result = _make_assistant(provider).summarize(CONTRACT, entities)

    assert result.summary.startswith("DOCUMENT ANALYSIS SUMMARY")
    assert "Key Individuals: John Smith" in result.summary
    assert result.model == "local-fallback"


def test_all_credentials_absent_gives_local_summary(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)

    def handler(request):
        pytest.fail("no provider should be called without keys")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    assistant = build_assistant(Settings(providers=default_providers()), client=client)

    result = assistant.summarize(CONTRACT)

    assert result.summary.startswith("DOCUMENT ANALYSIS SUMMARY")


def test_summarize_rejects_missing_text():
    with pytest.raises(ValueError):
        _make_assistant(_make_provider(AttemptOutcome.SUCCESS, "x")).summarize(None)


# ── Chat ──────────────────────────────────────────────────────────────────────

def test_chat_prompt_contains_relevant_context_and_question():
    provider = _make_provider(AttemptOutcome.SUCCESS, text="The payment is $500.")

    result = _make_assistant(provider).chat("What payment is due?", CONTRACT)

    assert result.response == "The payment is $500."
    assert result.model == "stub-model"
    prompt, system = provider.attempt.call_args.args[:2]
    assert system == CHAT_INSTRUCTIONS
    assert prompt.startswith("DOCUMENT CONTEXT:\nPayment of $500 is due January 1, 2024\n\n")
    assert "USER QUESTION: What payment is due?" in prompt


def _context_section(prompt: str) -> str:
    head, _, _ = prompt.partition("\n\nUSER QUESTION: ")
    return head[len("DOCUMENT CONTEXT:\n"):]


def test_chat_context_truncated_to_document_budget():
    provider = _make_provider(AttemptOutcome.SUCCESS, text="ok")
    selector = PassageSelector(HashingEmbeddingEngine(), top_k=500)
    assistant = DocumentAssistant(selector, ProviderChain([provider]))
    document = " ".join(
        f"Clause {i} obliges the tenant to pay rent and keep the premises in good repair."
        for i in range(200)
    )

    assistant.chat("Who pays the rent?", document)

    prompt = provider.attempt.call_args.args[0]
    assert prompt.startswith("DOCUMENT CONTEXT:\n")
    assert len(_context_section(prompt)) == 6000


def test_long_question_keeps_closing_instruction():
    provider = _make_provider(AttemptOutcome.SUCCESS, text="ok")
    selector = PassageSelector(HashingEmbeddingEngine(), top_k=500)
    assistant = DocumentAssistant(selector, ProviderChain([provider]))
    document = " ".join(
        f"Clause {i} obliges the tenant to pay rent and keep the premises in good repair."
        for i in range(200)
    )

    assistant.chat("Who pays the rent " + "and why " * 2000 + "?", document)

    prompt = provider.attempt.call_args.args[0]
    assert len(prompt) <= 12000
    assert prompt.endswith("based on the document context above.")


def test_chat_with_unconfigured_providers_explains_setup():
    provider = _make_provider(AttemptOutcome.SKIPPED)

    result = _make_assistant(provider).chat("What payment is due?", CONTRACT)

    assert result.model == CHAT_FALLBACK_MODEL
    assert "not configured" in result.response
    assert "$500" in result.response


def test_chat_with_failing_providers_dumps_context():
    provider = _make_provider(AttemptOutcome.NETWORK_ERROR)

    result = _make_assistant(provider).chat("What payment is due?", CONTRACT)

    assert result.model == CHAT_FALLBACK_MODEL
    assert "AI services are currently unavailable" in result.response
    assert "Payment of $500 is due January 1, 2024" in result.response


def test_chat_with_empty_document_still_builds_prompt():
    provider = _make_provider(AttemptOutcome.SUCCESS, text="Nothing to go on.")
    assistant = _make_assistant(provider)

    result = assistant.chat("What is due?", "")

    assert result.response == "Nothing to go on."
    prompt = provider.attempt.call_args.args[0]
    assert prompt.startswith("DOCUMENT CONTEXT:\n\n\nUSER QUESTION: What is due?")


@pytest.mark.parametrize("message", [None, "", "   ", 42])
def test_chat_rejects_bad_message(message):
    assistant = _make_assistant(_make_provider(AttemptOutcome.SUCCESS, "x"))
    with pytest.raises(ValueError):
        assistant.chat(message, CONTRACT)


def test_chat_rejects_missing_document():
    assistant = _make_assistant(_make_provider(AttemptOutcome.SUCCESS, "x"))
    with pytest.raises(ValueError):
        assistant.chat("What is due?", None)


def test_build_assistant_uses_separate_profiles_for_summary_and_chat():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.read())
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    assistant = build_assistant(Settings(providers=default_providers("g-key")), client=client)

    assistant.summarize(CONTRACT)
    assistant.chat("What payment is due?", CONTRACT)

    assert b'"maxOutputTokens":800' in bodies[0].replace(b" ", b"")
    assert b'"maxOutputTokens":1000' in bodies[1].replace(b" ", b"")
