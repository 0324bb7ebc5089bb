"""Storage module for support_copilot."""
from support_copilot.storage.vector_store import (
    DocumentStore,
    InMemoryDocumentStore,
    JsonDocumentStore,
    cosine_similarity,
)

__all__ = ["DocumentStore", "InMemoryDocumentStore", "JsonDocumentStore", "cosine_similarity"]
