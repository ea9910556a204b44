"""LLM Provider using LiteLLM for multi-provider abstraction."""

import time
from dataclasses import dataclass, field
from typing import Any

import litellm
import structlog
from tenacity import retry, stop_after_attempt, wait_exponential

from agenly.core.config import Settings
from agenly.core.exceptions import LLMError

logger = structlog.get_logger()


@dataclass
class LLMResponse:
    """Response from LLM completion."""

    content: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0
    finish_reason: str = "stop"
    latency_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)


class LLMProvider:
    """LLM provider with a primary model and fallbacks.

    Uses LiteLLM for a unified API across OpenAI, Anthropic and others.
    """

    def __init__(
        self,
        settings: Settings,
        primary_model: str | None = None,
        fallback_models: list[str] | None = None,
    ) -> None:
        self.primary_model = primary_model or settings.litellm_primary_model
        self.fallback_models = fallback_models or [settings.litellm_fallback_model]
        self.default_temperature = settings.llm_temperature
        self.default_max_tokens = settings.llm_max_tokens

        litellm.set_verbose = settings.app_debug
        if settings.openai_api_key:
            litellm.openai_key = settings.openai_api_key
        if settings.anthropic_api_key:
            litellm.anthropic_key = settings.anthropic_api_key

        logger.info(
            "LLM Provider initialized",
            primary=self.primary_model,
            fallbacks=self.fallback_models,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def complete(
        self,
        messages: list[dict[str, str]],
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Run a chat completion, walking the model chain until one answers.

        Args:
            messages: Chat turns as dicts with 'role' and 'content'
            system_prompt: Instructions placed before the turns
            temperature: Sampling temperature, defaults to settings
            max_tokens: Output cap, defaults to settings
            model: Model tried first instead of the primary
            **kwargs: Forwarded to LiteLLM untouched

        Raises:
            LLMError: when every model in the chain fails
        """
        prompt = self._with_system(messages, system_prompt)
        options = {
            "temperature": self.default_temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.default_max_tokens,
            **kwargs,
        }

        first = model or self.primary_model
        chain = [first] + [m for m in self.fallback_models if m != first]

        last_error: Exception | None = None
        for candidate in chain:
            try:
                return await self._call_model(candidate, prompt, options)
            except Exception as e:
                last_error = e
                logger.warning("LLM model failed", model=candidate, error=str(e))

        raise LLMError(f"All LLM providers failed: {last_error}", provider=first)

    @staticmethod
    def _with_system(
        messages: list[dict[str, str]], system_prompt: str | None
    ) -> list[dict[str, str]]:
        if not system_prompt:
            return list(messages)
        return [{"role": "system", "content": system_prompt}, *messages]

    async def _call_model(
        self, model: str, messages: list[dict[str, str]], options: dict[str, Any]
    ) -> LLMResponse:
        started = time.perf_counter()
        raw = await litellm.acompletion(model=model, messages=messages, **options)
        elapsed = (time.perf_counter() - started) * 1000

        choice = raw.choices[0]
        usage = getattr(raw, "usage", None)
        result = LLMResponse(
            content=choice.message.content or "",
            model=model,
            tokens_input=getattr(usage, "prompt_tokens", 0) or 0,
            tokens_output=getattr(usage, "completion_tokens", 0) or 0,
            finish_reason=choice.finish_reason or "stop",
            latency_ms=elapsed,
            metadata={"response_id": getattr(raw, "id", None)},
        )

        logger.info(
            "LLM completion",
            model=model,
            tokens_in=result.tokens_input,
            tokens_out=result.tokens_output,
            latency_ms=round(elapsed, 2),
        )
        return result

    async def generate_response(
        self,
        user_message: str,
        system_prompt: str,
        conversation_history: list[dict[str, str]] | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Reply to ``user_message`` as the agent described by ``system_prompt``."""
        messages = list(conversation_history or [])
        messages.append({"role": "user", "content": user_message})
        return await self.complete(messages=messages, system_prompt=system_prompt, **kwargs)

    async def summarize(self, conversation_text: str, max_tokens: int = 100) -> str:
        """Summarize a conversation in one or two sentences."""
        response = await self.complete(
            messages=[{"role": "user", "content": conversation_text}],
            system_prompt="Summarize this conversation in one or two sentences.",
            temperature=0.3,
            max_tokens=max_tokens,
        )
        return response.content.strip()
