"""Embedding module for support_copilot."""
from support_copilot.embeddings.embedder import Embedder
from support_copilot.embeddings.providers import (
    EmbeddingProvider,
    FastEmbedProvider,
    HashEmbeddingProvider,
    LocalEmbeddingProvider,
    OpenAIEmbeddingProvider,
)

__all__ = [
    "Embedder",
    "EmbeddingProvider",
    "FastEmbedProvider",
    "HashEmbeddingProvider",
    "LocalEmbeddingProvider",
    "OpenAIEmbeddingProvider",
]
