"""
Model pricing for usage telemetry.

Every API usage event carries an estimated cost. Prices are USD per 1M
tokens. Embedding models have no output price. The hosted embed function
("remote-embed") is billed by the platform, not per token, so it is priced
at zero. Unknown models cost 0.0 and are flagged with ``pricing_found=False``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PRICING_VERSION = "2026-10-estimate-v2"


@dataclass(frozen=True)
class ModelPrice:
    """USD per 1M input and output tokens."""

    input_per_million: float
    output_per_million: float = 0.0

    def cost(self, input_tokens: int, output_tokens: int = 0) -> float:
        return (
            input_tokens * self.input_per_million
            + output_tokens * self.output_per_million
        ) / 1_000_000.0


MODEL_PRICING: dict[str, ModelPrice] = {
    # Generation (notes, session summaries, creative-block prompts)
    "gpt-4o-mini": ModelPrice(input_per_million=0.15, output_per_million=0.6),
    "gpt-4o": ModelPrice(input_per_million=2.5, output_per_million=10.0),
    # Entity embeddings
    "text-embedding-3-small": ModelPrice(input_per_million=0.02),
    "text-embedding-3-large": ModelPrice(input_per_million=0.13),
    "remote-embed": ModelPrice(input_per_million=0.0),
}


def estimate_cost_usd(
    model: str,
    *,
    input_tokens: int,
    output_tokens: int = 0,
) -> tuple[float, bool]:
    """
    Estimate the cost of one call.

    Returns:
        (cost_usd, priced) where priced=False means the model is unknown
    """
    price = MODEL_PRICING.get(model)
    if price is None:
        return 0.0, False
    return price.cost(input_tokens, output_tokens), True


def usage_cost_metadata(
    model: str,
    *,
    input_tokens: int,
    output_tokens: int = 0,
) -> dict[str, Any]:
    """Cost fields merged into an api_usage event's metadata."""
    cost, priced = estimate_cost_usd(
        model, input_tokens=input_tokens, output_tokens=output_tokens
    )
    return {
        "estimated_cost_usd": cost,
        "pricing_found": priced,
        "pricing_version": PRICING_VERSION,
    }
