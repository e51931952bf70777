"""
Semantic Memory Pipeline

Components:
    canonical: Entity -> canonical text (canonicalize)
    embedder: Detached embedding for saved entities (EntityEmbedder)
    batch: Windowed batch embedding (BatchEmbeddingCoordinator)
    session: Session event log with detached embeddings (SessionMemoryRecorder)
    search: Remote similarity search (SemanticSearchGateway)
    extraction: Structured memory from note text (NoteMemoryExtractor)
"""

from creative_recall.memory.batch import BatchEmbeddingCoordinator
from creative_recall.memory.canonical import canonicalize
from creative_recall.memory.embedder import EntityEmbedder
from creative_recall.memory.extraction import NoteMemoryExtractor
from creative_recall.memory.search import SemanticSearchGateway
from creative_recall.memory.session import SessionMemoryRecorder, build_session_content

__all__ = [
    "canonicalize",
    "build_session_content",
    "EntityEmbedder",
    "BatchEmbeddingCoordinator",
    "SessionMemoryRecorder",
    "SemanticSearchGateway",
    "NoteMemoryExtractor",
]
