"""
Chat Client

Wraps the remote generate-text capability. The first candidate's raw text is
passed through ``parse_model_json`` so callers get structured data when the
model produced any.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from creative_recall.config.pricing import usage_cost_metadata
from creative_recall.utils.parsing import parse_model_json
from creative_recall.utils.token_count import count_chat_tokens, count_text_tokens, load_encoding

if TYPE_CHECKING:
    from creative_recall.providers.base import LLMProvider
    from creative_recall.utils.usage_telemetry import UsageTelemetry

logger = logging.getLogger(__name__)


class ChatResult(BaseModel):
    """
    A generation result.

    Attributes:
        raw_text: First candidate's text, unmodified
        data: Parsed JSON value, or None when the text was not JSON
        model: Model that produced the text
    """

    raw_text: str
    data: Any | None = None
    model: str = ""


class ChatClient:
    """
    Text generation with tolerant JSON extraction.

    Args:
        provider: LLM provider
        telemetry: Optional usage recorder (one row per remote call)
        default_temperature: Used when a call passes no temperature
        default_max_output_tokens: Used when a call passes no token cap
    """

    def __init__(
        self,
        provider: "LLMProvider",
        telemetry: "UsageTelemetry | None" = None,
        *,
        default_temperature: float = 0.3,
        default_max_output_tokens: int = 500,
    ) -> None:
        self._provider = provider
        self._telemetry = telemetry
        self._default_temperature = default_temperature
        self._default_max_output_tokens = default_max_output_tokens

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
        model: str | None = None,
        function_name: str = "generate_text",
    ) -> ChatResult | None:
        """
        Generate text and parse it.

        Args:
            prompt: User prompt
            system_prompt: Optional system instruction
            temperature: Sampling temperature, clamped to [0, 1]
            max_output_tokens: Output token cap
            model: Override the provider's model for this call
            function_name: Name recorded in usage telemetry

        Returns:
            ChatResult, or None on any failure. Never raises.
        """
        if not isinstance(prompt, str) or not prompt.strip():
            logger.debug("Skipping generation: empty prompt")
            return None

        temp = self._default_temperature if temperature is None else temperature
        temp = min(1.0, max(0.0, temp))
        max_tokens = max_output_tokens or self._default_max_output_tokens

        try:
            provider = self._provider.with_model(model) if model else self._provider
        except Exception as e:
            logger.warning(f"Could not select model {model}: {e}")
            return None

        start = time.perf_counter_ns()
        try:
            raw_text = await provider.generate(
                prompt,
                system=system_prompt,
                temperature=temp,
                max_tokens=max_tokens,
            )
        except Exception as e:
            await self._record_usage(
                provider.model_name, function_name, prompt, system_prompt, "",
                (time.perf_counter_ns() - start) // 1_000_000, failed=True,
            )
            logger.warning(f"[{function_name}] generation failed: {e}")
            return None

        elapsed_ms = (time.perf_counter_ns() - start) // 1_000_000
        raw_text = raw_text or ""
        await self._record_usage(
            provider.model_name, function_name, prompt, system_prompt, raw_text, elapsed_ms,
        )

        data = parse_model_json(raw_text)
        if data is None and raw_text.strip():
            logger.debug(f"[{function_name}] model output is not JSON")
        return ChatResult(raw_text=raw_text, data=data, model=provider.model_name)

    async def _record_usage(
        self,
        model: str,
        function_name: str,
        prompt: str,
        system_prompt: str | None,
        output_text: str,
        duration_ms: int,
        *,
        failed: bool = False,
    ) -> None:
        if self._telemetry is None:
            return
        await load_encoding(model)
        messages = [prompt] if not system_prompt else [system_prompt, prompt]
        input_tokens = count_chat_tokens(messages, model)
        output_tokens = count_text_tokens(output_text, model)
        metadata: dict[str, Any] = {
            "output_tokens_estimate": output_tokens,
            **usage_cost_metadata(
                model, input_tokens=input_tokens, output_tokens=output_tokens
            ),
        }
        if failed:
            metadata["failed"] = True
        self._telemetry.record(
            function_name,
            model,
            token_estimate=input_tokens,
            duration_ms=int(duration_ms),
            metadata=metadata,
        )
