# lexchat/application/assistant.py

from typing import List, Optional

import httpx

from lexchat.application.local_summary import build_basic_summary
from lexchat.application.provider_chain import ProviderChain
from lexchat.application.search_service import PassageSelector
from lexchat.domain.models import (
    AttemptOutcome,
    ChatResult,
    Entity,
    GenerationResult,
    SummaryResult,
)
from lexchat.config import CHAT_PROFILE, SUMMARY_PROFILE, Settings, get_settings
from lexchat.infrastructure.embedding_engine import HashingEmbeddingEngine
from lexchat.infrastructure.providers import build_providers


MAX_DOCUMENT_CHARS = 6000
MAX_QUESTION_CHARS = 2000
CONTEXT_SEPARATOR = "\n\n"
CHAT_FALLBACK_MODEL = "fallback"
NOT_CONFIGURED_PREVIEW_CHARS = 500

SUMMARY_INSTRUCTIONS = """You are an expert legal document analyst. Provide comprehensive, professional summaries of legal documents that include:

1. Document Type & Purpose
2. Key Parties Involved
3. Main Terms & Conditions
4. Important Dates & Deadlines
5. Financial Obligations
6. Legal Implications
7. Risk Factors

Structure your response clearly and use professional legal terminology."""

SUMMARY_PROMPT = """Please provide a comprehensive executive summary of this legal document:

{document}"""

CHAT_INSTRUCTIONS = """You are LexChat, an expert legal assistant AI specializing in document analysis. You provide precise, professional, and insightful answers about legal documents.

INSTRUCTIONS:
- Answer questions based ONLY on the provided document context
- Be concise but comprehensive in your responses
- Use professional legal terminology when appropriate
- If information isn't in the document, clearly state this
- Provide specific references to document sections when possible
- Highlight key legal implications and considerations
- Structure your responses clearly with bullet points or numbered lists when helpful"""

CHAT_PROMPT = """DOCUMENT CONTEXT:
{context}

USER QUESTION: {message}

Please provide a detailed, professional response based on the document context above."""

CHAT_NOT_CONFIGURED = """Based on the document context, I can see information related to your question about "{message}". However, the AI service is not configured. Please set GEMINI_API_KEY or OPENROUTER_API_KEY to get detailed AI-powered responses.

Here's the relevant context from the document:
{context}..."""

CHAT_UNAVAILABLE = """Based on your question about "{message}", here's what I found in the document:

{context}

Note: AI services are currently unavailable. This is a basic context-based response. For detailed AI analysis, please check your API keys."""


def _require_text(value, field_name: str, allow_blank: bool = True) -> str:
    if value is None or not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string.")
    if not allow_blank and not value.strip():
        raise ValueError(f"{field_name} cannot be empty.")
    return value


class DocumentAssistant:
    """
    Assembles prompts for the two user-facing operations and always hands
    back readable text.

    - summarize(): raw document text (truncated) → provider chain, with the
      rule-based summary as local fallback.
    - chat(): selected passages + question → provider chain. There is no
      local generator for chat; on exhaustion the selected context itself
      is returned.
    """

    def __init__(
        self,
        selector: PassageSelector,
        summary_chain: ProviderChain,
        chat_chain: Optional[ProviderChain] = None,
        max_document_chars: int = MAX_DOCUMENT_CHARS,
    ):
        self._selector = selector
        self._summary_chain = summary_chain
        self._chat_chain = chat_chain or summary_chain
        self._max_document_chars = max_document_chars

    # ─── Summarization ────────────────────────────────────────────────────────

    def build_summary_prompt(self, document_text: str) -> str:
        return SUMMARY_PROMPT.format(document=document_text[:self._max_document_chars])

    def summarize(
        self,
        document_text: str,
        entities: Optional[List[Entity]] = None,
    ) -> SummaryResult:
        document_text = _require_text(document_text, "document_text")

        print(f"[Assistant] Summarizing {len(document_text)} characters...")
        result = self._summary_chain.generate(
            self.build_summary_prompt(document_text),
            SUMMARY_INSTRUCTIONS,
            fallback=lambda: build_basic_summary(document_text, entities),
        )
        return SummaryResult(summary=result.text, model=result.model)

    # ─── Chat ─────────────────────────────────────────────────────────────────

    def build_chat_context(self, message: str, document_text: str) -> str:
        passages = self._selector.select_relevant(message, document_text)
        return CONTEXT_SEPARATOR.join(passages)[:self._max_document_chars]

    def build_chat_prompt(self, message: str, context: str) -> str:
        # Context and question together stay under the chain's prompt cap.
        return CHAT_PROMPT.format(context=context, message=message[:MAX_QUESTION_CHARS])

    def chat(self, message: str, document_text: str) -> ChatResult:
        message = _require_text(message, "message", allow_blank=False)
        document_text = _require_text(document_text, "document_text")

        print(f"[Assistant] Chat question: \"{message[:100]}\" "
              f"({len(document_text)} characters of context)")

        context = self.build_chat_context(message, document_text)
        result = self._chat_chain.generate(
            self.build_chat_prompt(message, context),
            CHAT_INSTRUCTIONS,
        )

        if not result.fell_back:
            return ChatResult(response=result.text, model=result.model)

        print("[Assistant] No provider answered — returning context-based response.")
        return ChatResult(
            response=self._context_response(message, context, result),
            model=CHAT_FALLBACK_MODEL,
        )

    @staticmethod
    def _context_response(message: str, context: str, result: GenerationResult) -> str:
        never_configured = all(
            attempt.outcome is AttemptOutcome.SKIPPED for attempt in result.attempts
        )
        if never_configured:
            return CHAT_NOT_CONFIGURED.format(
                message=message,
                context=context[:NOT_CONFIGURED_PREVIEW_CHARS],
            )
        return CHAT_UNAVAILABLE.format(message=message, context=context)


def build_assistant(
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
) -> DocumentAssistant:
    """Wire the default stack from settings (environment when omitted)."""
    settings = settings or get_settings()

    selector = PassageSelector(
        embedding_engine=HashingEmbeddingEngine(settings.retrieval.dimensions),
        top_k=settings.retrieval.top_k,
        min_passage_length=settings.retrieval.min_passage_length,
        fallback_prefix_chars=settings.retrieval.fallback_prefix_chars,
    )
    summary_chain = ProviderChain(
        build_providers(settings, SUMMARY_PROFILE, client=client),
        max_prompt_chars=settings.max_prompt_chars,
    )
    chat_chain = ProviderChain(
        build_providers(settings, CHAT_PROFILE, client=client),
        max_prompt_chars=settings.max_prompt_chars,
    )
    return DocumentAssistant(
        selector,
        summary_chain,
        chat_chain,
        max_document_chars=settings.max_document_chars,
    )
