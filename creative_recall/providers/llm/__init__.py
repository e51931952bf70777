"""
LLM Provider Implementations

Available:
    OpenAILLMProvider: OpenAI chat models via LangChain
"""

from creative_recall.providers.llm.openai import OpenAILLMProvider

__all__ = ["OpenAILLMProvider"]
