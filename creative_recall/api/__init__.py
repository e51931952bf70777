"""
Public API Layer

Modules:
    recall: CreativeRecall class - main entry point

Design Principles:
    - Single entry point (CreativeRecall) for most operations
    - Async-first; write-side operations are fire-and-forget
    - Components receive their clients explicitly, so tests can substitute them
    - Context manager support for resource cleanup
"""

from creative_recall.api.recall import CreativeRecall

__all__ = ["CreativeRecall"]
