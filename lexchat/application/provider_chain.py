# lexchat/application/provider_chain.py

from typing import Callable, List, Optional, Sequence

from lexchat.domain.interfaces import ProviderPort
from lexchat.domain.models import AttemptOutcome, GenerationResult, ProviderAttempt


LOCAL_FALLBACK_MODEL = "local-fallback"
DEFAULT_MAX_PROMPT_CHARS = 12000

FALLBACK_FAILURE_MESSAGE = (
    "Document analysis completed. Unable to generate a detailed response "
    "due to a processing error."
)


class ProviderChain:
    """
    Ordered list of remote providers tried one after another until one
    returns usable text.

    Lifecycle of one generate() call:
        NotStarted → TryingProvider(0) → ... → TryingProvider(n-1)
        ending in Succeeded, or in LocalFallback when all of them fail.

    Each provider gets exactly one attempt, in list order, and only after
    the previous one has reported failure. There are no retries and no
    parallel calls; quota is spent in order of preference.
    """

    def __init__(
        self,
        providers: Sequence[ProviderPort],
        max_prompt_chars: int = DEFAULT_MAX_PROMPT_CHARS,
    ):
        self._providers = list(providers)
        self._max_prompt_chars = max_prompt_chars

    @property
    def providers(self) -> List[ProviderPort]:
        return list(self._providers)

    def generate(
        self,
        prompt: str,
        system_instructions: str = "",
        fallback: Optional[Callable[[], str]] = None,
    ) -> GenerationResult:
        """
        Run the chain once. Never raises.

        Args:
            prompt:              User-side prompt text; capped at max_prompt_chars.
            system_instructions: Fixed instructions for the model.
            fallback:            Called with no arguments when every provider
                                 fails. Without one, the result text is empty
                                 and the caller supplies its own degraded text.
        """
        bounded_prompt = prompt[:self._max_prompt_chars]
        attempts: List[ProviderAttempt] = []

        for priority, provider in enumerate(self._providers):
            attempt = self._try_provider(provider, priority, bounded_prompt, system_instructions)
            attempts.append(attempt)

            if attempt.ok:
                print(f"[ProviderChain] #{priority} {provider.name} succeeded.")
                return GenerationResult(
                    text=attempt.text,
                    model=provider.model,
                    attempts=attempts,
                )

            print(
                f"[ProviderChain] #{priority} {provider.name} "
                f"{attempt.outcome.value}: {attempt.reason or 'no detail'} — advancing."
            )

        print(f"[ProviderChain] All {len(self._providers)} provider(s) failed.")
        return self._fall_back(attempts, fallback)

    def _try_provider(
        self,
        provider: ProviderPort,
        priority: int,
        prompt: str,
        system_instructions: str,
    ) -> ProviderAttempt:
        print(f"[ProviderChain] Trying #{priority} {provider.name} ({provider.model})...")
        try:
            return provider.attempt(prompt, system_instructions, priority=priority)
        except Exception as error:
            # Adapters should not raise; treat a stray exception as a transport failure.
            return ProviderAttempt(
                provider=provider.name,
                priority=priority,
                outcome=AttemptOutcome.NETWORK_ERROR,
                reason=f"{type(error).__name__}: {error}",
            )

    def _fall_back(
        self,
        attempts: List[ProviderAttempt],
        fallback: Optional[Callable[[], str]],
    ) -> GenerationResult:
        if fallback is None:
            return GenerationResult(
                text="", model=LOCAL_FALLBACK_MODEL, attempts=attempts, fell_back=True
            )

        print("[ProviderChain] Switching to local fallback.")
        try:
            text = fallback()
        except Exception as error:
            print(f"[ProviderChain] Local fallback failed: {error}")
            text = FALLBACK_FAILURE_MESSAGE

        return GenerationResult(
            text=text or FALLBACK_FAILURE_MESSAGE,
            model=LOCAL_FALLBACK_MODEL,
            attempts=attempts,
            fell_back=True,
        )
