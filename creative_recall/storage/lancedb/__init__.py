"""
LanceDB Embedding Index

Vector storage keyed by EntityRef.

Modules:
    indices: EmbeddingIndex class

Index Schema:
    embeddings.lance:
        entity_key, entity_type, entity_id, dimension, created_at, vector
"""

from creative_recall.storage.lancedb.indices import EmbeddingIndex

__all__ = ["EmbeddingIndex"]
