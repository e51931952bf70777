"""
Utility Functions

Helpers used throughout the package.

Note: Vector similarity is computed by the remote search endpoint.
We don't implement our own.

Modules:
    parsing: Tolerant JSON extraction from model text
    background: Detached fire-and-forget task scheduler
    usage_telemetry: Per-call usage rows and aggregation
    token_count: Token estimates for telemetry
"""

from creative_recall.utils.background import BackgroundTasks
from creative_recall.utils.parsing import parse_model_json, strip_code_fences
from creative_recall.utils.usage_telemetry import (
    UsageTelemetry,
    summarize_usage,
    telemetry_user,
)

__all__ = [
    "BackgroundTasks",
    "parse_model_json",
    "strip_code_fences",
    "UsageTelemetry",
    "summarize_usage",
    "telemetry_user",
]
