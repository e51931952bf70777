"""
CreativeRecall - Semantic Memory for Creative Work

Recall notes, tasks, projects, and session events by meaning rather than by
keyword. Entities are flattened into canonical text, embedded by a remote
model, and later retrieved through a remote similarity search endpoint.

Example:
    >>> from creative_recall import CreativeRecall
    >>> async with CreativeRecall("./recall_data") as recall:
    ...     recall.embed_entity("task", "t-1", {"title": "Mix vocals"})
    ...     results = await recall.search("vocal mixing", user_id="u-1")

Main Classes:
    CreativeRecall: Bootstrap facade wiring providers, storage and components
    RecallConfig: Configuration management

Every public operation is non-throwing: failures become sentinel values
(False, None, []) plus a log line.
"""

__version__ = "0.1.0"


# Public API - lazy imports to avoid loading optional dependencies
def __getattr__(name: str):
    """Lazy import public API components."""

    if name == "CreativeRecall":
        from creative_recall.api.recall import CreativeRecall
        return CreativeRecall

    if name == "RecallConfig":
        from creative_recall.config.settings import RecallConfig
        return RecallConfig

    if name in ("canonicalize", "build_session_content"):
        from creative_recall import memory
        return getattr(memory, name)

    if name == "parse_model_json":
        from creative_recall.utils.parsing import parse_model_json
        return parse_model_json

    # Types
    if name in (
        "EntityType",
        "EntityRef",
        "EmbeddingRecord",
        "SearchResult",
        "SessionEvent",
        "SessionEventType",
        "UsageLogEntry",
    ):
        from creative_recall import types
        return getattr(types, name)

    raise AttributeError(f"module 'creative_recall' has no attribute {name!r}")


__all__ = [
    # Main classes
    "CreativeRecall",
    "RecallConfig",

    # Functions
    "canonicalize",
    "build_session_content",
    "parse_model_json",

    # Types
    "EntityType",
    "EntityRef",
    "EmbeddingRecord",
    "SearchResult",
    "SessionEvent",
    "SessionEventType",
    "UsageLogEntry",

    # Version
    "__version__",
]
