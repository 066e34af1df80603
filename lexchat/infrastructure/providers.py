# lexchat/infrastructure/providers.py

from abc import abstractmethod
from typing import Any, List, Optional

import httpx

from lexchat.config import GenerationProfile, ProviderConfig, Settings
from lexchat.domain.interfaces import ProviderPort
from lexchat.domain.models import AttemptOutcome, ProviderAttempt


class HttpProvider(ProviderPort):
    """
    Shared plumbing for JSON-over-HTTPS providers.

    Subclasses describe the wire format (`_build_request`) and where the
    generated text lives in the response (`_extract_text`). Everything else,
    including mapping failures onto AttemptOutcome, happens here.
    """

    log_tag = "Provider"

    def __init__(
        self,
        config: ProviderConfig,
        profile: GenerationProfile,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self._config = config
        self._profile = profile
        self._timeout = timeout
        self._client = client

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def attempt(
        self,
        prompt: str,
        system_instructions: str,
        priority: int = 0,
    ) -> ProviderAttempt:
        if not self._config.enabled:
            return self._result(priority, AttemptOutcome.SKIPPED, reason="no API key configured")

        url, headers, body = self._build_request(prompt, system_instructions)

        try:
            response = self._post(url, headers, body)
        except httpx.HTTPError as error:
            return self._result(
                priority,
                AttemptOutcome.NETWORK_ERROR,
                reason=f"{type(error).__name__}: {error}",
            )

        print(f"[{self.log_tag}] Response status: {response.status_code}")

        if not response.is_success:
            return self._result(
                priority,
                AttemptOutcome.HTTP_ERROR,
                reason=f"HTTP {response.status_code} - {response.text[:200]}",
            )

        try:
            text = self._extract_text(response.json())
        except ValueError as error:
            return self._result(
                priority, AttemptOutcome.EMPTY_RESPONSE, reason=f"unparseable payload: {error}"
            )

        if not text or not text.strip():
            return self._result(priority, AttemptOutcome.EMPTY_RESPONSE, reason="no text in payload")

        return self._result(priority, AttemptOutcome.SUCCESS, text=text)

    # ─── Wire format (per provider) ───────────────────────────────────────────

    @abstractmethod
    def _build_request(self, prompt: str, system_instructions: str) -> tuple[str, dict, dict]: ...

    @abstractmethod
    def _extract_text(self, payload: Any) -> Optional[str]: ...

    # ─── Helpers ──────────────────────────────────────────────────────────────

    def _post(self, url: str, headers: dict, body: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(url, headers=headers, json=body, timeout=self._timeout)
        with httpx.Client(timeout=self._timeout) as client:
            return client.post(url, headers=headers, json=body)

    def _result(
        self,
        priority: int,
        outcome: AttemptOutcome,
        text: str = "",
        reason: str = "",
    ) -> ProviderAttempt:
        return ProviderAttempt(
            provider=self.name,
            priority=priority,
            outcome=outcome,
            text=text,
            reason=reason,
        )


class GeminiProvider(HttpProvider):
    """Google Gemini `generateContent`; the key travels in the query string."""

    log_tag = "Gemini"

    def _build_request(self, prompt: str, system_instructions: str) -> tuple[str, dict, dict]:
        text = f"{system_instructions}\n\n{prompt}" if system_instructions else prompt
        url = f"{self._config.endpoint}?key={self._config.api_key}"
        headers = {"Content-Type": "application/json"}
        body = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "temperature": self._profile.temperature,
                "topK": self._profile.top_k,
                "topP": self._profile.top_p,
                "maxOutputTokens": self._profile.max_tokens,
            },
        }
        return url, headers, body

    def _extract_text(self, payload: Any) -> Optional[str]:
        try:
            return payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None


class OpenRouterProvider(HttpProvider):
    """OpenRouter's OpenAI-compatible chat completions endpoint."""

    log_tag = "OpenRouter"

    def __init__(
        self,
        config: ProviderConfig,
        profile: GenerationProfile,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
        app_url: str = "http://localhost:3000",
        app_name: str = "LexChat Legal Assistant",
    ):
        super().__init__(config, profile, timeout=timeout, client=client)
        self._app_url = app_url
        self._app_name = app_name

    def _build_request(self, prompt: str, system_instructions: str) -> tuple[str, dict, dict]:
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "HTTP-Referer": self._app_url,
            "X-Title": self._app_name,
            "Content-Type": "application/json",
        }
        messages = []
        if system_instructions:
            messages.append({"role": "system", "content": system_instructions})
        messages.append({"role": "user", "content": prompt})
        body = {
            "model": self._config.model,
            "messages": messages,
            "max_tokens": self._profile.max_tokens,
            "temperature": self._profile.temperature,
        }
        return self._config.endpoint, headers, body

    def _extract_text(self, payload: Any) -> Optional[str]:
        try:
            return payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None


PROVIDER_CLASSES = {
    "gemini": GeminiProvider,
    "openrouter": OpenRouterProvider,
}


def build_providers(
    settings: Settings,
    profile: GenerationProfile,
    client: Optional[httpx.Client] = None,
) -> List[HttpProvider]:
    """
    Instantiate one adapter per configured provider, keeping the settings
    order. Providers without a key are still built; they report SKIPPED.
    """
    providers: List[HttpProvider] = []
    for config in settings.providers:
        provider_class = PROVIDER_CLASSES.get(config.name)
        if provider_class is None:
            raise ValueError(
                f"Unknown provider: '{config.name}'. "
                f"Supported: {', '.join(sorted(PROVIDER_CLASSES))}."
            )
        if provider_class is OpenRouterProvider:
            providers.append(OpenRouterProvider(
                config,
                profile,
                timeout=settings.timeout_seconds,
                client=client,
                app_url=settings.app_url,
                app_name=settings.app_name,
            ))
        else:
            providers.append(provider_class(
                config, profile, timeout=settings.timeout_seconds, client=client,
            ))
    return providers
