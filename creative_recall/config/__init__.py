"""
Configuration System

Manages configuration for CreativeRecall with a layered approach.

Configuration Priority (highest to lowest):
    1. Programmatic (passed to RecallConfig())
    2. Environment variables (CREATIVE_RECALL_* prefix)
    3. Config file (RecallConfig.from_file)
    4. Built-in defaults

Modules:
    settings: RecallConfig class
    pricing: Model pricing used by usage telemetry
"""

from creative_recall.config.settings import RecallConfig

__all__ = ["RecallConfig"]
