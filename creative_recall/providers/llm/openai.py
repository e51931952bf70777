"""
OpenAI LLM Provider (LangChain-based)

Implements LLMProvider interface using LangChain's ChatOpenAI.

Models:
    - gpt-4o-mini: Fast and cheap, default for note extraction
    - gpt-4o: Higher quality

Requests are sent once: the client is built with ``max_retries=0`` and an
explicit timeout, so rate-limit and quota errors surface immediately.

Example:
    >>> provider = OpenAILLMProvider(api_key="sk-...", model="gpt-4o-mini")
    >>> text = await provider.generate("Summarize: ...", temperature=0.2)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from creative_recall.providers.base import LLMProvider

if TYPE_CHECKING:
    from langchain_openai import ChatOpenAI

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


def _get_chat_openai(
    api_key: str | None = None,
    model: str = DEFAULT_MODEL,
    temperature: float = 0.3,
    timeout: float = 30.0,
) -> "ChatOpenAI":
    """
    Get a ChatOpenAI instance.

    Uses lazy import to avoid requiring langchain-openai unless actually used.

    Args:
        api_key: Optional API key. If not provided, uses OPENAI_API_KEY env var.
        model: Model name to use.
        temperature: Sampling temperature.
        timeout: Request timeout in seconds.

    Raises:
        ImportError: If langchain-openai package is not installed
    """
    try:
        from langchain_openai import ChatOpenAI
    except ImportError:
        raise ImportError(
            "OpenAI provider requires the 'langchain-openai' package. "
            "Install with: pip install creative-recall"
        )

    kwargs: dict[str, Any] = {
        "model": model,
        "temperature": temperature,
        "timeout": timeout,
        "max_retries": 0,
    }
    if api_key:
        kwargs["api_key"] = api_key

    return ChatOpenAI(**kwargs)


def _content_text(content: Any) -> str:
    """Flatten LangChain message content (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return "" if content is None else str(content)


class OpenAILLMProvider(LLMProvider):
    """
    OpenAI LLM provider implementation using LangChain.

    Args:
        api_key: OpenAI API key. If None, uses OPENAI_API_KEY environment variable.
        model: Model to use (default: "gpt-4o-mini")
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout

    @property
    def model_name(self) -> str:
        """Current model name."""
        return self._model

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 500,
    ) -> str:
        """
        Generate a text completion.

        Args:
            prompt: User prompt
            system: Optional system message
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response

        Returns:
            The first candidate's text, possibly empty
        """
        from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

        base_client = _get_chat_openai(
            api_key=self._api_key,
            model=self._model,
            temperature=temperature,
            timeout=self._timeout,
        )
        client = base_client.bind(max_tokens=max_tokens)

        messages: list[BaseMessage] = []
        if system:
            messages.append(SystemMessage(content=system))
        messages.append(HumanMessage(content=prompt))

        response = await client.ainvoke(messages)
        return _content_text(response.content)

    def with_model(self, model: str) -> "OpenAILLMProvider":
        """Return a new provider instance with a different model."""
        return OpenAILLMProvider(api_key=self._api_key, model=model, timeout=self._timeout)
